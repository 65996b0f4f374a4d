"""Shared fixtures: in-memory slot, deterministic ids and a fixed clock."""

from datetime import datetime

import pytest

from clinic_ledger.auth import SessionGate
from clinic_ledger.config import AuthSettings
from clinic_ledger.orchestrator import ClinicLedger, open_ledger
from clinic_ledger.services.storage import InMemorySlot, PersistenceAdapter
from clinic_ledger.store import RecordStore, SequentialIdGenerator


STATE_KEY = "test-ledger"
FIXED_NOW = datetime(2024, 5, 1, 14, 30, 15, 123456)


@pytest.fixture
def slot():
    return InMemorySlot()


@pytest.fixture
def adapter(slot):
    return PersistenceAdapter(slot, key=STATE_KEY)


@pytest.fixture
def store(adapter):
    store = RecordStore(
        adapter,
        id_generator=SequentialIdGenerator(),
        clock=lambda: FIXED_NOW,
    )
    store.load()
    return store


@pytest.fixture
def ledger(store):
    return ClinicLedger(store)


@pytest.fixture
def gate(slot):
    return SessionGate(
        slot,
        auth_settings=AuthSettings(username="reception", password="secret"),
        session_key="test-session",
    )


@pytest.fixture
def open_gate_ledger(gate, slot):
    """A ledger opened through a logged-in gate."""
    assert gate.login("reception", "secret")
    return open_ledger(
        gate,
        id_generator=SequentialIdGenerator(),
        clock=lambda: FIXED_NOW,
    )
