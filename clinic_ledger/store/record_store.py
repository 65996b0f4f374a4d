"""
Record Store

In-memory source of truth for the ledger collections.

DESIGN DECISION: The store receives its persistence adapter instead of
reaching for a global slot. Every mutation changes memory first and then
saves the full state through the adapter, in the same call.

GUARANTEES:
- Mutations never raise on valid records
- Removing or updating an unknown id is logged and changes nothing
- Removing a professional never touches their receipts
- A stock decrement below zero is ignored
- At most one opening-cash row per date
"""

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, TypeVar

from clinic_ledger.activity import ActivityLogger
from clinic_ledger.ledger.aggregator import initial_cash_for
from clinic_ledger.models.records import (
    DailyCashConfig,
    Expense,
    LedgerState,
    Patient,
    Product,
    Professional,
    Receipt,
    ServiceType,
)
from clinic_ledger.services.storage.persistence import PersistenceAdapter
from clinic_ledger.store.identifiers import IdGenerator, UuidIdGenerator


EDITABLE_PROFESSIONAL_FIELDS = frozenset({"name", "specialty", "phone", "percentage"})

T = TypeVar("T")


class RecordStore:
    """
    Holds the ledger state and persists it after every change.

    Call load() once before mutating; until then the adapter refuses
    to save, so an early mutation never overwrites stored data.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._adapter = adapter
        self._ids = id_generator or UuidIdGenerator()
        self._clock = clock or datetime.now
        self._activity = activity_logger or ActivityLogger()
        self._state = LedgerState()

    def load(self) -> LedgerState:
        self._state = self._adapter.load()
        return self._state

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def adapter(self) -> PersistenceAdapter:
        return self._adapter

    def new_id(self) -> str:
        return self._ids.new_id()

    def now(self) -> datetime:
        return self._clock()

    def _persist(self) -> bool:
        return self._adapter.save(self._state)

    @staticmethod
    def _find(items: list[T], item_id: str, id_of: Callable[[T], str]) -> Optional[int]:
        for index, item in enumerate(items):
            if id_of(item) == item_id:
                return index
        return None

    def _remove(self, items: list, entity_type: str, item_id: str, id_of) -> bool:
        index = self._find(items, item_id, id_of)
        if index is None:
            self._activity.log_record_not_found(entity_type, item_id)
            return False
        del items[index]
        self._persist()
        self._activity.log_record_removed(entity_type, item_id)
        return True

    # -------------------------------------------------------------------------
    # Professionals
    # -------------------------------------------------------------------------

    def get_professional(self, professional_id: str) -> Optional[Professional]:
        index = self._find(self._state.professionals, professional_id, lambda p: p.id)
        return None if index is None else self._state.professionals[index]

    def add_professional(self, professional: Professional) -> Professional:
        self._state.professionals.append(professional)
        self._persist()
        self._activity.log_record_added(
            "professional", professional.id, {"percentage": professional.percentage}
        )
        return professional

    def update_professional(self, professional_id: str, **changes) -> Optional[Professional]:
        """
        Edit name, specialty, phone or percentage of a professional.

        Existing receipts keep the name they were created with.

        Returns:
            The updated professional, or None if the id is unknown

        Raises:
            ValueError: If a field other than the editable ones is given
        """
        unknown = set(changes) - EDITABLE_PROFESSIONAL_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {sorted(unknown)}")

        professionals = self._state.professionals
        index = self._find(professionals, professional_id, lambda p: p.id)
        if index is None:
            self._activity.log_record_not_found("professional", professional_id)
            return None

        updated = Professional.model_validate(
            {**professionals[index].model_dump(), **changes}
        )
        professionals[index] = updated
        self._persist()
        self._activity.log_record_updated(
            "professional", professional_id, {"fields": sorted(changes)}
        )
        return updated

    def remove_professional(self, professional_id: str) -> bool:
        return self._remove(
            self._state.professionals, "professional", professional_id, lambda p: p.id
        )

    # -------------------------------------------------------------------------
    # Patients
    # -------------------------------------------------------------------------

    def add_patient(self, patient: Patient) -> Patient:
        self._state.patients.append(patient)
        self._persist()
        self._activity.log_record_added("patient", patient.id)
        return patient

    def remove_patient(self, patient_id: str) -> bool:
        return self._remove(self._state.patients, "patient", patient_id, lambda p: p.id)

    # -------------------------------------------------------------------------
    # Receipts and expenses
    # -------------------------------------------------------------------------

    def add_receipt(self, receipt: Receipt) -> Receipt:
        self._state.receipts.append(receipt)
        self._persist()
        self._activity.log_record_added(
            "receipt",
            receipt.id,
            {
                "gross_value": str(receipt.gross_value),
                "professional_id": receipt.professional_id,
                "payment_method": receipt.payment_method.value,
            },
        )
        return receipt

    def remove_receipt(self, receipt_id: str) -> bool:
        return self._remove(self._state.receipts, "receipt", receipt_id, lambda r: r.id)

    def add_expense(self, expense: Expense) -> Expense:
        self._state.expenses.append(expense)
        self._persist()
        self._activity.log_record_added(
            "expense", expense.id, {"value": str(expense.value), "category": expense.category}
        )
        return expense

    def remove_expense(self, expense_id: str) -> bool:
        return self._remove(self._state.expenses, "expense", expense_id, lambda e: e.id)

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def add_product(self, product: Product) -> Product:
        self._state.products.append(product)
        self._persist()
        self._activity.log_record_added(
            "product", product.id, {"quantity": product.quantity}
        )
        return product

    def adjust_product_quantity(self, product_id: str, delta: int) -> Optional[Product]:
        """
        Add delta (possibly negative) to a product's quantity.

        Returns:
            The product (unchanged if the result would be negative),
            or None if the id is unknown
        """
        index = self._find(self._state.products, product_id, lambda p: p.id)
        if index is None:
            self._activity.log_record_not_found("product", product_id)
            return None

        product = self._state.products[index]
        quantity = product.quantity + delta
        if quantity < 0:
            self._activity.log_stock_adjustment_ignored(product_id, delta, product.quantity)
            return product

        product.quantity = quantity
        self._persist()
        self._activity.log_stock_adjusted(product_id, delta, quantity)
        return product

    def remove_product(self, product_id: str) -> bool:
        return self._remove(self._state.products, "product", product_id, lambda p: p.id)

    # -------------------------------------------------------------------------
    # Opening cash
    # -------------------------------------------------------------------------

    def set_daily_cash(self, day: date, value: Decimal) -> DailyCashConfig:
        """Set the opening cash of a day, replacing any earlier value."""
        configs = self._state.daily_configs
        for config in configs:
            if config.day == day:
                config.initial_cash = value
                break
        else:
            config = DailyCashConfig(day=day, initial_cash=value)
            configs.append(config)

        self._persist()
        self._activity.log_daily_cash_set(day.isoformat(), str(value))
        return config

    def initial_cash_for(self, day: date) -> Decimal:
        return initial_cash_for(self._state.daily_configs, day)

    # -------------------------------------------------------------------------
    # Service types
    # -------------------------------------------------------------------------

    def add_service_type(self, service_type: ServiceType) -> ServiceType:
        self._state.service_types.append(service_type)
        self._persist()
        self._activity.log_record_added(
            "service_type", service_type.key, {"label": service_type.label}
        )
        return service_type

    def remove_service_type(self, key: str) -> bool:
        """Remove a catalog entry. Receipts keep the key they were recorded with."""
        return self._remove(self._state.service_types, "service_type", key, lambda s: s.key)

    # -------------------------------------------------------------------------
    # Whole state
    # -------------------------------------------------------------------------

    def replace_state(self, state: LedgerState) -> None:
        """Swap in a complete state, e.g. an imported backup."""
        self._state = state
        self._persist()

    def clear(self) -> None:
        """Wipe every collection. The service-type catalog goes back to its defaults."""
        self._state = LedgerState()
        self._persist()
        self._activity.log_state_cleared(self._adapter.key)
