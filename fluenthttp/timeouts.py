from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class Timeout:
    connect: Optional[float] = None
    read: Optional[float] = None

    @classmethod
    def from_value(cls, value: Union["Timeout", float, int, None]) -> "Timeout":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        float_value = float(value)
        if float_value <= 0:
            raise ValueError("Timeout must be a positive number of seconds")
        return cls(connect=float_value, read=float_value)
