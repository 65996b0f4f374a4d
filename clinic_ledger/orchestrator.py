"""
Main Orchestrator for Clinic Ledger

This module ties together all the components and defines the
form-level flows a presentation layer drives:
1. Entry (raw form input → validate → compute split → store → persist)
2. Dashboard (records → aggregate → one snapshot for a reference day)
3. Backup (export a file, import one after explicit confirmation)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No record is stored unless its form passed validation
- No import replaces data without the user's confirmation
- The ledger only opens behind a logged-in session

This is the "glue" that keeps the store free of partial or
unvalidated records.
"""

from collections.abc import Callable
from datetime import date, datetime
from typing import Optional

from clinic_ledger.activity import ActivityLogger
from clinic_ledger.auth import SessionGate
from clinic_ledger.ledger import (
    NO_SPLIT_PERCENTAGE,
    compute_split,
    daily_by_payment_method,
    daily_expenses,
    daily_receipts,
    daily_totals,
    monthly_by_service_type,
    monthly_receipts,
    monthly_totals,
    professional_summaries,
)
from clinic_ledger.models.ledger import DailyDashboard
from clinic_ledger.models.records import (
    DailyCashConfig,
    Expense,
    LedgerState,
    Patient,
    PaymentMethod,
    Product,
    Professional,
    Receipt,
    ServiceType,
)
from clinic_ledger.models.validation import ValidationResult
from clinic_ledger.queries import StockFilter, filter_products, low_stock_names, search_patients
from clinic_ledger.services.storage import (
    InMemorySlot,
    JsonFileSlot,
    KeyValueSlot,
    PersistenceAdapter,
)
from clinic_ledger.store import IdGenerator, RecordStore
from clinic_ledger.validation import (
    EntryValidator,
    is_negative_number,
    parse_amount,
    parse_percentage,
    parse_whole_number,
)
from clinic_ledger.validation.validator import RawNumber


class InvalidEntryError(Exception):
    """A form submission failed validation. Nothing was stored."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Invalid {result.entry_type}: {messages}")


class ClinicLedger:
    """
    Form-level operations over the record store.

    Every entry method takes raw form input, validates it, builds the
    record and hands it to the store. Invalid input raises
    InvalidEntryError and leaves the store untouched.
    """

    def __init__(
        self,
        store: RecordStore,
        validator: Optional[EntryValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._store = store
        self._validator = validator or EntryValidator()
        self._activity = activity_logger or ActivityLogger()

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def state(self) -> LedgerState:
        return self._store.state

    def _ensure_valid(self, result: ValidationResult) -> ValidationResult:
        if not result.is_valid:
            self._activity.log_entry_rejected(
                result.entry_type,
                [issue.model_dump() for issue in result.issues],
            )
            raise InvalidEntryError(result)
        return result

    def _timestamp_on(self, day: date) -> datetime:
        """The reference day at the current wall-clock time, to the second."""
        return datetime.combine(day, self._store.now().time().replace(microsecond=0))

    # -------------------------------------------------------------------------
    # Receipts and expenses
    # -------------------------------------------------------------------------

    def record_receipt(
        self,
        day: date,
        gross_value: RawNumber,
        professional_id: Optional[str],
        service_type: Optional[str],
        payment_method: Optional[str],
    ) -> Receipt:
        """
        Record a receipt on a reference day.

        The split uses the professional's current percentage, and the
        professional's name is copied into the receipt.

        Raises:
            InvalidEntryError: If the form is invalid
        """
        self._ensure_valid(self._validator.validate_receipt(
            gross_value,
            professional_id,
            service_type,
            payment_method,
            self.state.professionals,
            self.state.service_types,
        ))

        professional = self._store.get_professional(professional_id)
        gross = parse_amount(gross_value)
        split = compute_split(gross, professional.percentage)

        receipt = Receipt(
            id=self._store.new_id(),
            gross_value=gross,
            professional_value=split.professional_value,
            net_clinic=split.net_clinic,
            professional_id=professional.id,
            professional_name=professional.name,
            service_type=service_type,
            payment_method=PaymentMethod(payment_method),
            recorded_at=self._timestamp_on(day),
        )
        return self._store.add_receipt(receipt)

    def record_expense(
        self,
        day: date,
        value: RawNumber,
        category: Optional[str],
        description: Optional[str],
        payment_method: str = "",
    ) -> Expense:
        self._ensure_valid(
            self._validator.validate_expense(value, category, description)
        )
        expense = Expense(
            id=self._store.new_id(),
            value=parse_amount(value),
            category=category,
            description=description,
            payment_method=payment_method or "",
            recorded_at=self._timestamp_on(day),
        )
        return self._store.add_expense(expense)

    def remove_receipt(self, receipt_id: str) -> bool:
        return self._store.remove_receipt(receipt_id)

    def remove_expense(self, expense_id: str) -> bool:
        return self._store.remove_expense(expense_id)

    # -------------------------------------------------------------------------
    # Professionals and patients
    # -------------------------------------------------------------------------

    def register_professional(
        self,
        name: Optional[str],
        specialty: str = "",
        phone: str = "",
        percentage: RawNumber = None,
    ) -> Professional:
        """
        Register a professional.

        Without a percentage the professional gets 100, the no-split value.
        """
        self._ensure_valid(self._validator.validate_professional(name, percentage))
        professional = Professional(
            id=self._store.new_id(),
            name=name,
            specialty=specialty or "",
            phone=phone or "",
            percentage=(
                NO_SPLIT_PERCENTAGE if percentage is None else parse_percentage(percentage)
            ),
            created_at=self._store.now(),
        )
        return self._store.add_professional(professional)

    def edit_professional(
        self,
        professional_id: str,
        name: Optional[str],
        specialty: str = "",
        phone: str = "",
        percentage: RawNumber = None,
    ) -> Optional[Professional]:
        """
        Edit a professional. Existing receipts are not recalculated.

        Blank, non-numeric or fractional percentages become 100. Negative
        numbers and whole numbers above 100 are rejected.

        Returns:
            The updated professional, or None if the id is unknown
        """
        if is_negative_number(percentage):
            candidate = percentage
        else:
            try:
                candidate = parse_whole_number(percentage)
            except ValueError:
                candidate = NO_SPLIT_PERCENTAGE

        self._ensure_valid(self._validator.validate_professional(name, candidate))
        parsed = parse_percentage(candidate)
        return self._store.update_professional(
            professional_id,
            name=name,
            specialty=specialty or "",
            phone=phone or "",
            percentage=parsed,
        )

    def remove_professional(self, professional_id: str) -> bool:
        """Remove a professional. Their receipts stay in the ledger."""
        return self._store.remove_professional(professional_id)

    def register_patient(
        self,
        name: Optional[str],
        phone: str = "",
        email: Optional[str] = None,
        address: Optional[str] = None,
        birth_date: Optional[str] = None,
    ) -> Patient:
        self._ensure_valid(self._validator.validate_patient(name, birth_date))
        patient = Patient(
            id=self._store.new_id(),
            name=name,
            phone=phone or "",
            email=email,
            address=address,
            birth_date=birth_date,
            created_at=self._store.now(),
        )
        return self._store.add_patient(patient)

    def remove_patient(self, patient_id: str) -> bool:
        return self._store.remove_patient(patient_id)

    def search_patients(self, text: str = "") -> list[Patient]:
        return search_patients(self.state.patients, text)

    # -------------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------------

    def add_product(
        self,
        name: Optional[str],
        quantity: RawNumber,
        min_quantity: RawNumber,
    ) -> Product:
        self._ensure_valid(
            self._validator.validate_product(name, quantity, min_quantity)
        )
        product = Product(
            id=self._store.new_id(),
            name=name,
            quantity=parse_whole_number(quantity),
            min_quantity=parse_whole_number(min_quantity),
        )
        return self._store.add_product(product)

    def restock(self, product_id: str, amount: RawNumber = 1) -> Optional[Product]:
        self._ensure_valid(self._validator.validate_stock_change(amount))
        return self._store.adjust_product_quantity(product_id, parse_whole_number(amount))

    def consume(self, product_id: str, amount: RawNumber = 1) -> Optional[Product]:
        """Take units out of stock. Ignored if it would go below zero."""
        self._ensure_valid(self._validator.validate_stock_change(amount))
        return self._store.adjust_product_quantity(product_id, -parse_whole_number(amount))

    def remove_product(self, product_id: str) -> bool:
        return self._store.remove_product(product_id)

    def filter_products(
        self,
        text: str = "",
        stock_filter: StockFilter = StockFilter.ALL,
    ) -> list[Product]:
        return filter_products(self.state.products, text, stock_filter)

    # -------------------------------------------------------------------------
    # Opening cash and service types
    # -------------------------------------------------------------------------

    def set_initial_cash(self, day: date, value: RawNumber) -> DailyCashConfig:
        self._ensure_valid(self._validator.validate_daily_cash(value))
        return self._store.set_daily_cash(day, parse_amount(value))

    def add_service_type(self, label: Optional[str]) -> ServiceType:
        self._ensure_valid(
            self._validator.validate_service_type(label, self.state.service_types)
        )
        return self._store.add_service_type(ServiceType.from_label(label))

    def remove_service_type(self, key: str) -> bool:
        return self._store.remove_service_type(key)

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    def dashboard(self, day: date) -> DailyDashboard:
        """Everything the dashboard shows for a reference day, computed now."""
        state = self.state
        receipts_today = daily_receipts(state.receipts, day)
        expenses_today = daily_expenses(state.expenses, day)
        this_month = monthly_receipts(state.receipts, day)

        return DailyDashboard(
            reference_date=day,
            initial_cash=self._store.initial_cash_for(day),
            daily_receipts=receipts_today,
            daily_expenses=expenses_today,
            daily_totals=daily_totals(receipts_today, expenses_today),
            daily_by_payment_method=daily_by_payment_method(receipts_today),
            professional_summaries=professional_summaries(
                receipts_today, state.professionals
            ),
            monthly_totals=monthly_totals(this_month),
            monthly_by_service_type=monthly_by_service_type(
                this_month, state.service_types
            ),
            low_stock_products=low_stock_names(state.products),
        )

    # -------------------------------------------------------------------------
    # Backup
    # -------------------------------------------------------------------------

    def export_backup(self, day: date) -> tuple[str, str]:
        """
        Returns:
            (filename, content) of an indented JSON backup
        """
        adapter = self._store.adapter
        filename = adapter.export_filename(day)
        content = adapter.export_snapshot(self.state)
        self._activity.log_snapshot_exported(filename, adapter.counts(self.state))
        return filename, content

    def import_backup(
        self,
        blob: str,
        confirm: Callable[[LedgerState], bool],
    ) -> bool:
        """
        Replace all data with a backup file, after confirmation.

        The file is parsed completely before confirm() is asked, so a
        broken file never reaches the question.

        Args:
            blob: Content of the backup file
            confirm: Receives the parsed state, returns True to replace

        Returns:
            True if the data was replaced, False if the user declined

        Raises:
            SnapshotImportError: If the file is not a valid backup.
                Current data is left untouched.
        """
        adapter = self._store.adapter
        imported = adapter.import_snapshot(blob)

        if not confirm(imported):
            self._activity.log_snapshot_import_declined()
            return False

        self._store.replace_state(imported)
        self._activity.log_snapshot_imported(adapter.counts(imported))
        return True

    def clear_all(self) -> None:
        """Erase all ledger data. The login session is kept."""
        self._store.clear()


def create_app_components(
    use_storage: bool = True,
) -> tuple[KeyValueSlot, SessionGate]:
    """
    Factory function to create the slot and the login gate.

    Args:
        use_storage: Whether to keep data in local JSON files.
                    Set to False for an in-memory session.

    Returns:
        (slot, session_gate)
    """
    slot = JsonFileSlot() if use_storage else InMemorySlot()
    return slot, SessionGate(slot)


def open_ledger(
    gate: SessionGate,
    slot: Optional[KeyValueSlot] = None,
    id_generator: Optional[IdGenerator] = None,
    clock: Optional[Callable[[], datetime]] = None,
    activity_logger: Optional[ActivityLogger] = None,
) -> ClinicLedger:
    """
    Load the saved ledger and return the facade over it.

    Args:
        gate: Session gate; must be logged in
        slot: Where the ledger lives (defaults to the gate's slot)
        id_generator: Source of record ids (UUIDs by default)
        clock: Source of the current time (datetime.now by default)

    Raises:
        NotAuthenticatedError: If the gate is not logged in
    """
    gate.require()

    activity_logger = activity_logger or ActivityLogger()
    adapter = PersistenceAdapter(slot or gate.slot, activity_logger=activity_logger)
    store = RecordStore(
        adapter,
        id_generator=id_generator,
        clock=clock,
        activity_logger=activity_logger,
    )
    store.load()
    return ClinicLedger(store, activity_logger=activity_logger)
