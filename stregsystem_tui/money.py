"""Fixed-point DKK amounts stored as whole øre."""

from __future__ import annotations

import re
from functools import total_ordering

from stregsystem_tui.errors import InputError

_AMOUNT_RE = re.compile(r"^(\d+)(?:[.,](\d{1,2}))?$")


@total_ordering
class Money:
    """An amount of money in minor units (øre).

    Every operation stays integral: scaling takes an integer quantity and
    division truncates toward zero. Comparisons also accept a bare ``int``,
    interpreted as øre, which is how balance thresholds are expressed.
    """

    __slots__ = ("_ore",)

    def __init__(self, ore: int = 0) -> None:
        if isinstance(ore, bool) or not isinstance(ore, int):
            raise TypeError(f"Money requires an integer amount of øre, got {type(ore).__name__}")
        self._ore = ore

    @classmethod
    def parse(cls, text: str) -> Money:
        """Parse user input such as ``50``, ``50,5`` or ``123.45`` kroner."""
        match = _AMOUNT_RE.match(text.strip())
        if match is None:
            raise InputError("Invalid amount format")
        kroner, fraction = match.groups()
        return cls(int(kroner) * 100 + int((fraction or "0").ljust(2, "0")))

    @property
    def ore(self) -> int:
        return self._ore

    @property
    def kroner(self) -> int:
        """Whole kroner, truncated toward zero."""
        return abs(self._ore) // 100 * (-1 if self._ore < 0 else 1)

    @property
    def minor(self) -> int:
        """The øre part, always in ``[0, 99]``."""
        return abs(self._ore) % 100

    def scale(self, quantity: int) -> Money:
        return self * quantity

    def divide(self, divisor: int) -> Money:
        return self / divisor

    def __add__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self._ore + other._ore)

    def __sub__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self._ore - other._ore)

    def __mul__(self, quantity: object) -> Money:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            return NotImplemented
        return Money(self._ore * quantity)

    __rmul__ = __mul__

    def __truediv__(self, divisor: object) -> Money:
        if isinstance(divisor, bool) or not isinstance(divisor, int):
            return NotImplemented
        if divisor == 0:
            raise ZeroDivisionError("cannot divide Money by zero")
        quotient = abs(self._ore) // abs(divisor)
        if (self._ore < 0) != (divisor < 0):
            quotient = -quotient
        return Money(quotient)

    def __neg__(self) -> Money:
        return Money(-self._ore)

    def _coerce(self, other: object) -> int | None:
        if isinstance(other, Money):
            return other._ore
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        return None

    def __eq__(self, other: object) -> bool:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return self._ore == value

    def __lt__(self, other: object) -> bool:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return self._ore < value

    def __hash__(self) -> int:
        return hash(self._ore)

    def __bool__(self) -> bool:
        return self._ore != 0

    def __repr__(self) -> str:
        return f"Money({self._ore})"

    def __str__(self) -> str:
        sign = "-" if self._ore < 0 else ""
        return f"{sign}{abs(self._ore) // 100},{self.minor:02d} DKK"
