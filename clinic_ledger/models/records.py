"""
Core Data Models for Clinic Ledger

These models define the strict schemas for every record the clinic keeps.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the same camelCase JSON layout the storage slot holds

Monetary values are Decimal so the commission split never drifts.
Timestamps are naive local datetimes: the clinic works on wall-clock days.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# Tolerance for the gross == professional + clinic identity.
# Legacy snapshots stored binary floats, so exact equality is too strict.
SPLIT_TOLERANCE = Decimal("0.01")


class RecordModel(BaseModel):
    """Base for every persisted record: camelCase on the wire, snake_case in code."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PaymentMethod(str, Enum):
    """
    Payment methods accepted for a receipt.

    Expenses use free text instead; only receipts are restricted.
    """
    PIX = "pix"
    CASH = "cash"
    CARD = "card"
    INSURANCE_PARTNER = "insurance_partner"

    @property
    def label(self) -> str:
        return _PAYMENT_LABELS[self]


_PAYMENT_LABELS = {
    PaymentMethod.PIX: "PIX",
    PaymentMethod.CASH: "Dinheiro",
    PaymentMethod.CARD: "Cartão",
    PaymentMethod.INSURANCE_PARTNER: "Unimed",
}


# =============================================================================
# PEOPLE
# =============================================================================

class Professional(RecordModel):
    """
    A professional who attends patients and earns a commission.

    percentage == 100 is the "no split" sentinel: the professional is paid
    outside the ledger and the clinic keeps the full gross value.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )
    specialty: str = Field(default="", max_length=200)
    phone: str = Field(default="", max_length=50)
    percentage: int = Field(
        default=100,
        ge=0,
        le=100,
        description="Commission percentage (100 means no split)"
    )
    created_at: datetime = Field(default_factory=datetime.now)


class Patient(RecordModel):
    """A registered patient. Created and deleted, never edited."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(default="", max_length=50)
    email: Optional[str] = Field(default=None, max_length=200)
    address: Optional[str] = Field(default=None, max_length=500)
    birth_date: Optional[date] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator('email', 'address', 'birth_date', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        """Empty form fields are stored as empty strings by older snapshots."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


# =============================================================================
# MONEY MOVEMENTS
# =============================================================================

class Receipt(RecordModel):
    """
    Money received for a service.

    The professional name is a snapshot taken at creation time, so the
    record keeps displaying correctly after the professional is renamed
    or removed.
    """

    id: str = Field(..., min_length=1)
    gross_value: Decimal = Field(
        ...,
        ge=0,
        description="Full amount charged"
    )
    professional_value: Decimal = Field(
        ...,
        ge=0,
        description="Commission owed to the professional"
    )
    net_clinic: Decimal = Field(
        ...,
        ge=0,
        description="Amount retained by the clinic"
    )
    professional_id: str
    professional_name: str
    service_type: str = Field(
        ...,
        min_length=1,
        description="Key of the service type in the catalog"
    )
    payment_method: PaymentMethod
    recorded_at: datetime = Field(
        ...,
        alias="date",
        description="Local timestamp of the receipt"
    )

    @model_validator(mode='after')
    def validate_split(self) -> 'Receipt':
        """The split must account for the whole gross value."""
        difference = abs(self.professional_value + self.net_clinic - self.gross_value)
        if difference > SPLIT_TOLERANCE:
            raise ValueError(
                "Professional value plus clinic net must equal the gross value"
            )
        return self

    @property
    def day(self) -> date:
        return self.recorded_at.date()


class Expense(RecordModel):
    """Money spent by the clinic."""

    id: str = Field(..., min_length=1)
    value: Decimal = Field(..., ge=0)
    category: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=500)
    payment_method: str = Field(
        default="",
        max_length=50,
        description="Free text, looser than a receipt's payment method"
    )
    recorded_at: datetime = Field(..., alias="date")

    @property
    def day(self) -> date:
        return self.recorded_at.date()


# =============================================================================
# STOCK AND CASH
# =============================================================================

class Product(RecordModel):
    """A stocked product with a low-stock threshold."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    quantity: int = Field(default=0, ge=0)
    min_quantity: int = Field(default=0, ge=0)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_quantity

    @property
    def is_out_of_stock(self) -> bool:
        return self.quantity == 0


class DailyCashConfig(RecordModel):
    """Opening cash for one calendar day. At most one per date."""

    day: date = Field(..., alias="date")
    initial_cash: Decimal = Field(default=Decimal("0"))


class ServiceType(RecordModel):
    """
    An entry of the editable service-type catalog.

    The wire names (nome / valor) come from the first storage layout
    and are kept so old backups still import.
    """

    label: str = Field(..., min_length=1, max_length=100, alias="nome")
    key: str = Field(..., min_length=1, max_length=100, alias="valor")

    @staticmethod
    def key_for(label: str) -> str:
        """Derive the machine key from a display label."""
        return label.strip().lower().replace(" ", "_")

    @classmethod
    def from_label(cls, label: str) -> 'ServiceType':
        return cls(label=label.strip(), key=cls.key_for(label))


def default_service_types() -> list[ServiceType]:
    """The catalog every new ledger starts with."""
    return [
        ServiceType(label="Consulta", key="consulta"),
        ServiceType(label="Procedimento", key="procedimento"),
        ServiceType(label="Retorno", key="retorno"),
        ServiceType(label="Cirurgia", key="cirurgia"),
    ]


# =============================================================================
# FULL STATE
# =============================================================================

class LedgerState(RecordModel):
    """Everything the ledger persists, as one document."""

    professionals: list[Professional] = Field(default_factory=list)
    patients: list[Patient] = Field(default_factory=list)
    receipts: list[Receipt] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    daily_configs: list[DailyCashConfig] = Field(default_factory=list)
    service_types: list[ServiceType] = Field(default_factory=default_service_types)

    def to_document(self) -> dict:
        """JSON-compatible dict using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)
