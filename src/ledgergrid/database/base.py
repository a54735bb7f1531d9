"""Abstract settings store interface."""

from abc import ABC, abstractmethod
from typing import Any

from ledgergrid.utils.flags import coerce_bool


class SettingsStore(ABC):
    """Abstract key/value store for user preferences."""

    @abstractmethod
    def get_value(self, key: str, default: Any = None) -> Any:
        """Get a preference value, or ``default`` when it is not set."""
        pass

    @abstractmethod
    def set_value(self, key: str, value: Any) -> None:
        """Set a preference value."""
        pass

    @abstractmethod
    def get_all_preferences(self) -> dict[str, Any]:
        """Get every stored preference."""
        pass

    @abstractmethod
    def reset_all_preferences(self) -> None:
        """Delete every stored preference."""
        pass

    def get_boolean_value(self, key: str, default: bool = False) -> bool:
        """Get a preference coerced to a boolean."""
        return coerce_bool(self.get_value(key, default), default)

    def toggle_boolean_value(self, key: str, default: bool = False) -> bool:
        """Flip a boolean preference and return the new value."""
        new_value = not self.get_boolean_value(key, default)
        self.set_value(key, new_value)
        return new_value
