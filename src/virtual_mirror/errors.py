"""Error types raised by the virtual mirror core."""
from typing import Any, Iterable, Optional


class InvalidAttributeError(ValueError):
    """An avatar attribute is outside its closed set of values."""

    def __init__(self, field: str, value: Any, allowed: Optional[Iterable[str]] = None):
        self.field = field
        self.value = value
        self.allowed = tuple(allowed) if allowed is not None else None
        msg = f"Invalid value for '{field}': {value!r}"
        if self.allowed:
            msg += f" (expected one of: {', '.join(self.allowed)})"
        super().__init__(msg)


class DegenerateInputWarning(UserWarning):
    """Height or weight was not positive and fallback measurements were used."""
