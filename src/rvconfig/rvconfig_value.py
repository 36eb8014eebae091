"""Config value hierarchy - immutable value types for property assignments."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Tuple


class RVConfigValue(ABC):
    """
    Abstract base class for all config values.

    All config values are immutable and never refer to classes.
    """

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to a plain Python value."""

    @abstractmethod
    def type_name(self) -> str:
        """Return type name for diagnostics."""


@dataclass(frozen=True)
class RVConfigNumber(RVConfigValue):
    """Represents numeric values.  The engine stores every number as a float."""
    value: float

    def to_python(self) -> float:
        return self.value

    def type_name(self) -> str:
        return "number"


@dataclass(frozen=True)
class RVConfigString(RVConfigValue):
    """Represents string values, stored exactly as written between the quotes."""
    value: str

    def to_python(self) -> str:
        return self.value

    def type_name(self) -> str:
        return "string"


@dataclass(frozen=True)
class RVConfigArray(RVConfigValue):
    """Represents array values."""
    items: Tuple[RVConfigValue, ...] = ()

    def to_python(self) -> List[Any]:
        """Convert to Python list with Python values."""
        return [item.to_python() for item in self.items]

    def type_name(self) -> str:
        return "array"

    def length(self) -> int:
        """Return the number of items in the array."""
        return len(self.items)

    def extend(self, other: 'RVConfigArray') -> 'RVConfigArray':
        """Return a new array holding this array's items followed by `other`'s."""
        return RVConfigArray(self.items + other.items)


@dataclass(frozen=True)
class RVConfigUnresolved(RVConfigValue):
    """
    A macro call that could not be expanded.

    `raw` is the macro call as written, `text` the fallback text used in its place and
    `message` the diagnostic explaining why it was not expanded.
    """
    raw: str
    text: str
    message: str = ""

    def to_python(self) -> str:
        """Unresolved macros convert to their fallback text."""
        return self.text

    def type_name(self) -> str:
        return "unresolved macro"
