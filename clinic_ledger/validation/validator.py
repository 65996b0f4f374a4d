"""
Form Entry Validation

DESIGN DECISION: Raw form input is validated BEFORE any record is built.

Each form has one validate_* method returning a ValidationResult that
lists every problem found, not only the first one. Errors block the
submission; warnings are shown but let it through.

The parse_* helpers turn raw input into typed values. They raise
ValueError with a readable message, which the validator turns into
an issue. Once a result is valid, the same helpers can be called
again and will not raise.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the user can correct the form.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from clinic_ledger.models.records import PaymentMethod, Professional, ServiceType
from clinic_ledger.models.validation import ValidationIssue, ValidationResult


RawNumber = Union[str, int, float, Decimal, None]


# =============================================================================
# PARSING
# =============================================================================

def parse_amount(raw: RawNumber) -> Decimal:
    """
    Parse a currency amount.

    Raises:
        ValueError: If the input is empty, not a number, not finite,
            or negative
    """
    if raw is None or isinstance(raw, bool):
        raise ValueError("Amount is required")
    if isinstance(raw, float):
        raw = str(raw)
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise ValueError("Amount is required")

    try:
        value = Decimal(raw)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"'{raw}' is not a number")

    if not value.is_finite():
        raise ValueError("Amount must be a finite number")
    if value < 0:
        raise ValueError("Amount cannot be negative")
    return value


def parse_whole_number(raw: RawNumber) -> int:
    """
    Parse a non-negative integer (quantities, percentages).

    Raises:
        ValueError: If the input is empty, fractional or negative
    """
    if raw is None or isinstance(raw, bool):
        raise ValueError("A whole number is required")
    if isinstance(raw, int):
        value = raw
    else:
        try:
            number = Decimal(raw.strip() if isinstance(raw, str) else str(raw))
        except (InvalidOperation, TypeError, ValueError):
            raise ValueError(f"'{raw}' is not a number")
        if not number.is_finite() or number != number.to_integral_value():
            raise ValueError(f"'{raw}' is not a whole number")
        value = int(number)

    if value < 0:
        raise ValueError("Value cannot be negative")
    return value


def parse_percentage(raw: RawNumber) -> int:
    """
    Parse a commission percentage: a whole number from 0 to 100.

    Raises:
        ValueError: If the input is not a whole number in range
    """
    value = parse_whole_number(raw)
    if value > 100:
        raise ValueError("Percentage must be between 0 and 100")
    return value


def is_negative_number(raw: RawNumber) -> bool:
    """True for input that reads as a finite number below zero."""
    if raw is None or isinstance(raw, bool):
        return False
    try:
        number = Decimal(str(raw).strip())
    except InvalidOperation:
        return False
    return number.is_finite() and number < 0


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


# =============================================================================
# VALIDATOR
# =============================================================================

class EntryValidator:
    """
    Validates raw form submissions.

    Stateless: collections needed for cross-checks (professionals,
    service-type catalog) are passed in by the caller.
    """

    def _amount_issues(
        self,
        field: str,
        raw: RawNumber,
        label: str,
    ) -> list[ValidationIssue]:
        try:
            parse_amount(raw)
        except ValueError as e:
            return [ValidationIssue(
                field=field,
                issue_type="missing" if _is_blank(raw) else "invalid_value",
                message=f"{label}: {e}",
                severity="error",
                suggested_fix="Enter a non-negative amount such as 150.00",
            )]
        return []

    def _required(self, field: str, value: Optional[str], label: str) -> list[ValidationIssue]:
        if _is_blank(value):
            return [ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} is required",
                severity="error",
            )]
        return []

    def _percentage_issues(self, raw: RawNumber) -> list[ValidationIssue]:
        try:
            parse_percentage(raw)
        except ValueError as e:
            return [ValidationIssue(
                field="percentage",
                issue_type="out_of_range",
                message=str(e),
                severity="error",
                suggested_fix="Use a whole number from 0 to 100, or 100 for no split",
            )]
        return []

    def _quantity_issues(self, field: str, raw: RawNumber, label: str) -> list[ValidationIssue]:
        try:
            parse_whole_number(raw)
        except ValueError as e:
            return [ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{label}: {e}",
                severity="error",
                suggested_fix="Use a whole number, zero or more",
            )]
        return []

    # -------------------------------------------------------------------------
    # Forms
    # -------------------------------------------------------------------------

    def validate_receipt(
        self,
        gross_value: RawNumber,
        professional_id: Optional[str],
        service_type: Optional[str],
        payment_method: Optional[str],
        professionals: Iterable[Professional],
        service_types: Iterable[ServiceType],
    ) -> ValidationResult:
        """
        Validate a receipt form.

        Checks:
        - Gross value is a finite, non-negative amount
        - The professional exists
        - A service type is selected (unknown keys only warn)
        - The payment method is one of the accepted ones
        """
        issues = self._amount_issues("gross_value", gross_value, "Value")

        if _is_blank(professional_id):
            issues.append(ValidationIssue(
                field="professional_id",
                issue_type="missing",
                message="Select a professional",
                severity="error",
            ))
        elif not any(p.id == professional_id for p in professionals):
            issues.append(ValidationIssue(
                field="professional_id",
                issue_type="not_found",
                message=f"Professional '{professional_id}' does not exist",
                severity="error",
                suggested_fix="Pick a professional from the list",
            ))

        if _is_blank(service_type):
            issues.append(ValidationIssue(
                field="service_type",
                issue_type="missing",
                message="Select a service type",
                severity="error",
            ))
        elif not any(s.key == str(service_type).strip() for s in service_types):
            # Receipts may reference keys removed from the catalog later
            issues.append(ValidationIssue(
                field="service_type",
                issue_type="unknown_value",
                message=f"Service type '{service_type}' is not in the catalog",
                severity="warning",
                suggested_fix="Add it to the service types to show its label",
            ))

        accepted = [m.value for m in PaymentMethod]
        if _is_blank(payment_method):
            issues.append(ValidationIssue(
                field="payment_method",
                issue_type="missing",
                message="Select a payment method",
                severity="error",
            ))
        elif payment_method not in accepted:
            issues.append(ValidationIssue(
                field="payment_method",
                issue_type="invalid_value",
                message=f"Payment method '{payment_method}' is not accepted",
                severity="error",
                suggested_fix=f"Use one of: {', '.join(accepted)}",
            ))

        return ValidationResult(entry_type="receipt", issues=issues)

    def validate_expense(
        self,
        value: RawNumber,
        category: Optional[str],
        description: Optional[str],
    ) -> ValidationResult:
        issues = self._amount_issues("value", value, "Value")
        issues.extend(self._required("category", category, "Category"))
        issues.extend(self._required("description", description, "Description"))
        return ValidationResult(entry_type="expense", issues=issues)

    def validate_professional(
        self,
        name: Optional[str],
        percentage: RawNumber = None,
    ) -> ValidationResult:
        """A missing percentage is fine: the caller falls back to 100 (no split)."""
        issues = self._required("name", name, "Name")
        if percentage is not None:
            issues.extend(self._percentage_issues(percentage))
        return ValidationResult(entry_type="professional", issues=issues)

    def validate_patient(
        self,
        name: Optional[str],
        birth_date: Union[str, date, None] = None,
    ) -> ValidationResult:
        issues = self._required("name", name, "Name")
        if isinstance(birth_date, str) and birth_date.strip():
            try:
                date.fromisoformat(birth_date.strip())
            except ValueError:
                issues.append(ValidationIssue(
                    field="birth_date",
                    issue_type="invalid_format",
                    message=f"'{birth_date}' is not a valid date",
                    severity="error",
                    suggested_fix="Use the YYYY-MM-DD format",
                ))
        return ValidationResult(entry_type="patient", issues=issues)

    def validate_product(
        self,
        name: Optional[str],
        quantity: RawNumber,
        min_quantity: RawNumber,
    ) -> ValidationResult:
        issues = self._required("name", name, "Name")
        issues.extend(self._quantity_issues("quantity", quantity, "Quantity"))
        issues.extend(self._quantity_issues("min_quantity", min_quantity, "Minimum quantity"))
        return ValidationResult(entry_type="product", issues=issues)

    def validate_stock_change(self, amount: RawNumber) -> ValidationResult:
        issues = self._quantity_issues("amount", amount, "Amount")
        if not issues and parse_whole_number(amount) == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount must be at least 1",
                severity="error",
            ))
        return ValidationResult(entry_type="stock_change", issues=issues)

    def validate_daily_cash(self, value: RawNumber) -> ValidationResult:
        return ValidationResult(
            entry_type="daily_cash",
            issues=self._amount_issues("initial_cash", value, "Opening cash"),
        )

    def validate_service_type(
        self,
        label: Optional[str],
        service_types: Iterable[ServiceType],
    ) -> ValidationResult:
        """The label must be non-empty and its derived key new to the catalog."""
        issues = self._required("label", label, "Service name")
        if not issues:
            key = ServiceType.key_for(label)
            if any(s.key == key for s in service_types):
                issues.append(ValidationIssue(
                    field="label",
                    issue_type="duplicate",
                    message=f"Service type '{key}' already exists",
                    severity="error",
                    suggested_fix="Choose a different name",
                ))
        return ValidationResult(entry_type="service_type", issues=issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Plain-text summary of a result, for display next to the form."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        errors = [i for i in result.issues if i.severity == "error"]
        if errors:
            lines.append("Please fix the following:")
            for issue in errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
