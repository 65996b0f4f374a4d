"""
Identifier Generators

Every record id comes from one injected generator, so tests can
supply predictable ids instead of random ones.
"""

from abc import ABC, abstractmethod
from itertools import count
from uuid import uuid4


class IdGenerator(ABC):
    """Produces unique string identifiers for new records."""

    @abstractmethod
    def new_id(self) -> str:
        pass


class UuidIdGenerator(IdGenerator):
    """Random UUID4 hex strings. The default in production."""

    def new_id(self) -> str:
        return uuid4().hex


class SequentialIdGenerator(IdGenerator):
    """
    Monotonic counter ids: prefix-1, prefix-2, ...

    Deterministic, for tests and fixtures.
    """

    def __init__(self, prefix: str = "id", start: int = 1):
        self._prefix = prefix
        self._counter = count(start)

    def new_id(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"
