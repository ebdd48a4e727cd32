"""Tests for the fixed-point Money type."""

import pytest

from stregsystem_tui.errors import InputError
from stregsystem_tui.money import Money


@pytest.mark.parametrize("a,b", [(0, 0), (1250, 375), (-999, 1), (2**40, -(2**35))])
def test_add_then_subtract_round_trips(a: int, b: int) -> None:
    assert (Money(a) + Money(b)) - Money(b) == Money(a)


def test_display_formatting() -> None:
    assert str(Money(12345)) == "123,45 DKK"
    assert str(Money(0)) == "0,00 DKK"
    assert str(Money(5)) == "0,05 DKK"
    assert str(Money(100)) == "1,00 DKK"


def test_negative_display_keeps_minor_in_range() -> None:
    assert Money(-150).minor == 50
    assert Money(-150).kroner == -1
    assert str(Money(-150)) == "-1,50 DKK"
    assert str(Money(-50)) == "-0,50 DKK"


def test_scale_and_divide_stay_integral() -> None:
    assert Money(1250) * 3 == Money(3750)
    assert 3 * Money(1250) == Money(3750)
    assert Money(1250).scale(2) == Money(2500)
    assert Money(1000).divide(3) == Money(333)
    assert Money(-1000) / 3 == Money(-333)


def test_rejects_non_integer_operands() -> None:
    with pytest.raises(TypeError):
        Money(1.5)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Money(100) * 1.5  # type: ignore[operator]
    with pytest.raises(ZeroDivisionError):
        Money(100) / 0


def test_compares_with_money_and_raw_ints() -> None:
    assert Money(5000) >= 5000
    assert Money(999) < 1000
    assert Money(1000) == 1000
    assert Money(1) < Money(2)
    assert max(Money(3), Money(7), Money(5)) == Money(7)
    assert len({Money(10), Money(10)}) == 1


@pytest.mark.parametrize(
    "raw,expected",
    [("50", 5000), ("50,5", 5050), ("123.45", 12345), (" 7 ", 700), ("0,05", 5)],
)
def test_parse_amounts(raw: str, expected: int) -> None:
    assert Money.parse(raw) == Money(expected)


@pytest.mark.parametrize("raw", ["", "abc", "1,234", "-5", "1.2.3", ","])
def test_parse_rejects_malformed_amounts(raw: str) -> None:
    with pytest.raises(InputError):
        Money.parse(raw)
