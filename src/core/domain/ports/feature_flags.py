"""Feature flag evaluation port."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class FeatureFlagClient(ABC):
    """Port for evaluating boolean feature flags.

    实现方在任何求值错误时都必须返回 default，而不是抛出异常。
    """

    @abstractmethod
    async def get_boolean_value(
        self,
        flag_key: str,
        default: bool,
        context: Mapping[str, Any] | None = None,
    ) -> bool:
        """Evaluate a boolean flag, falling back to ``default`` on error."""
        pass

    async def aclose(self) -> None:
        """Optional hook for graceful shutdown."""
        return None
