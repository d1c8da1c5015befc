"""Entity <-> table model conversion."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

E = TypeVar("E")
M = TypeVar("M")


class BaseMapper(ABC, Generic[E, M]):
    """Converts between a domain entity ``E`` and its table model ``M``."""

    @abstractmethod
    def to_domain(self, model: M) -> E: ...

    @abstractmethod
    def to_model(self, entity: E) -> M: ...
