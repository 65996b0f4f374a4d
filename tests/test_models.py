"""
Tests for Clinic Ledger

Test strategy:
1. Unit tests for individual components (models, calculator, aggregator)
2. Integration tests for flows (store, persistence, facade) on an in-memory slot
3. No files touched except through tmp_path
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from pydantic import ValidationError

from clinic_ledger.models import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
    DailyCashConfig,
    LedgerState,
    Patient,
    PaymentMethod,
    Product,
    Professional,
    Receipt,
    ServiceType,
    ValidationIssue,
    ValidationResult,
)


def make_receipt(**overrides) -> Receipt:
    values = dict(
        id="r-1",
        gross_value=Decimal("200"),
        professional_value=Decimal("60"),
        net_clinic=Decimal("140"),
        professional_id="p-1",
        professional_name="Dra. Ana",
        service_type="consulta",
        payment_method=PaymentMethod.PIX,
        recorded_at=datetime(2024, 5, 1, 10, 0),
    )
    values.update(overrides)
    return Receipt(**values)


class TestRecordModels:
    """Tests for persisted record models."""

    def test_professional_defaults_to_no_split(self):
        professional = Professional(id="p-1", name="Dr. Bruno")
        assert professional.percentage == 100
        assert professional.specialty == ""

    def test_professional_strips_whitespace(self):
        professional = Professional(id="p-1", name="  Dr. Bruno  ")
        assert professional.name == "Dr. Bruno"

    def test_professional_percentage_bounds(self):
        with pytest.raises(ValueError):
            Professional(id="p-1", name="Dr. Bruno", percentage=101)

    def test_receipt_split_must_add_up(self):
        """Professional value plus clinic net must equal gross."""
        with pytest.raises(ValueError, match="must equal the gross value"):
            make_receipt(net_clinic=Decimal("100"))

    def test_receipt_split_tolerates_float_noise(self):
        receipt = make_receipt(
            gross_value=Decimal("0.3"),
            professional_value=Decimal("0.1"),
            net_clinic=Decimal("0.19999999999999998"),
        )
        assert receipt.gross_value == Decimal("0.3")

    def test_receipt_rejects_negative_gross(self):
        with pytest.raises(ValueError):
            make_receipt(gross_value=Decimal("-1"))

    def test_receipt_rejects_unknown_payment_method(self):
        with pytest.raises(ValueError):
            make_receipt(payment_method="cheque")

    def test_receipt_day(self):
        receipt = make_receipt(recorded_at=datetime(2024, 5, 31, 23, 59, 59))
        assert receipt.day == date(2024, 5, 31)

    def test_receipt_wire_names_are_camel_case(self):
        document = make_receipt().model_dump(mode="json", by_alias=True)
        assert document["grossValue"] == "200"
        assert document["netClinic"] == "140"
        assert document["paymentMethod"] == "pix"
        assert document["date"] == "2024-05-01T10:00:00"

    def test_receipt_reads_wire_names(self):
        receipt = Receipt.model_validate({
            "id": "r-9",
            "grossValue": 150.5,
            "professionalValue": 0,
            "netClinic": 150.5,
            "professionalId": "p-1",
            "professionalName": "Dra. Ana",
            "serviceType": "retorno",
            "paymentMethod": "card",
            "date": "2024-05-02T09:15:00",
        })
        assert receipt.payment_method == PaymentMethod.CARD
        assert receipt.recorded_at == datetime(2024, 5, 2, 9, 15)

    def test_patient_blank_optional_fields_become_none(self):
        patient = Patient(id="pa-1", name="Maria", email="", address="  ", birth_date="")
        assert patient.email is None
        assert patient.address is None
        assert patient.birth_date is None

    def test_product_stock_flags(self):
        assert Product(id="x", name="Luvas", quantity=2, min_quantity=2).is_low_stock
        assert not Product(id="x", name="Luvas", quantity=3, min_quantity=2).is_low_stock
        assert Product(id="x", name="Luvas", quantity=0, min_quantity=0).is_out_of_stock

    def test_product_rejects_negative_quantity(self):
        with pytest.raises(ValueError):
            Product(id="x", name="Luvas", quantity=-1)

    def test_daily_cash_wire_name(self):
        config = DailyCashConfig.model_validate({"date": "2024-05-01", "initialCash": 50})
        assert config.day == date(2024, 5, 1)
        assert config.initial_cash == Decimal("50")


class TestServiceTypes:
    """Tests for the service-type catalog."""

    def test_key_derived_from_label(self):
        assert ServiceType.key_for("Exame de Sangue") == "exame_de_sangue"

    def test_from_label(self):
        service_type = ServiceType.from_label("  Pequena Cirurgia ")
        assert service_type.label == "Pequena Cirurgia"
        assert service_type.key == "pequena_cirurgia"

    def test_legacy_wire_names(self):
        service_type = ServiceType.model_validate({"nome": "Consulta", "valor": "consulta"})
        assert service_type.model_dump(by_alias=True) == {"nome": "Consulta", "valor": "consulta"}

    def test_new_state_has_default_catalog(self):
        keys = [s.key for s in LedgerState().service_types]
        assert keys == ["consulta", "procedimento", "retorno", "cirurgia"]

    def test_payment_method_labels(self):
        assert PaymentMethod.CASH.label == "Dinheiro"
        assert PaymentMethod.INSURANCE_PARTNER.label == "Unimed"


class TestLedgerState:
    """Tests for the full persisted document."""

    def test_document_uses_wire_collection_names(self):
        document = LedgerState().to_document()
        assert set(document) == {
            "professionals", "patients", "receipts", "expenses",
            "products", "dailyConfigs", "serviceTypes",
        }

    def test_rejects_malformed_collection(self):
        with pytest.raises(ValidationError):
            LedgerState.model_validate({"receipts": [{"id": "broken"}]})


class TestActivityModels:
    """Tests for activity-related models."""

    def test_activity_event_creation(self):
        event = ActivityEvent(
            event_type=ActivityEventType.RECORD_ADDED,
            description="Receipt added",
        )
        assert event.severity == ActivitySeverity.INFO

    def test_activity_event_to_log_dict(self):
        event = ActivityEventBuilder.record_added("receipt", "r-1", {"gross_value": "200"})
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "record_added"
        assert log_dict["entity_id"] == "r-1"
        assert log_dict["details"]["gross_value"] == "200"

    def test_not_found_is_a_warning(self):
        event = ActivityEventBuilder.record_not_found("product", "missing")
        assert event.severity == ActivitySeverity.WARNING

    def test_state_load_failed_is_an_error(self):
        event = ActivityEventBuilder.state_load_failed("ledger", "bad json")
        assert event.severity == ActivitySeverity.ERROR
        assert event.error_message == "bad json"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        result = ValidationResult(
            entry_type="receipt",
            issues=[
                ValidationIssue(
                    field="gross_value",
                    issue_type="missing",
                    message="Value is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        result = ValidationResult(
            entry_type="receipt",
            issues=[
                ValidationIssue(
                    field="service_type",
                    issue_type="unknown_value",
                    message="Not in the catalog",
                    severity="warning",
                ),
            ],
        )
        assert result.is_valid is True
        assert result.warnings == ["Not in the catalog"]

    def test_issue_severity_is_restricted(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
