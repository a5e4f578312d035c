from decimal import Decimal

import pytest

from pricing.errors import CurrencyMismatchError, InvalidInputError
from pricing.money import Currency, Money, format_price_per_night, round_half_up, sum_money


def test_of_converts_major_units_to_minor():
    assert Money.of("200", Currency.USD) == Money(20000, Currency.USD)
    assert Money.of(Decimal("19.99"), "gbp") == Money(1999, Currency.GBP)
    assert Money.of(7, Currency.EUR).amount == 700


def test_of_rounds_half_up():
    assert Money.of("0.005", Currency.GBP).amount == 1
    assert Money.of("0.004", Currency.GBP).amount == 0


def test_float_input_is_rejected():
    with pytest.raises(InvalidInputError):
        Money.of(19.99, Currency.GBP)
    with pytest.raises(InvalidInputError):
        Money(1.5, Currency.GBP)


def test_unknown_currency_is_rejected():
    with pytest.raises(InvalidInputError):
        Money.of("10", "JPY")


def test_string_currency_is_normalized():
    assert Money(100, "eur").currency is Currency.EUR


def test_arithmetic_requires_same_currency():
    assert Money(500, Currency.GBP) + Money(250, Currency.GBP) == Money(750, Currency.GBP)
    assert Money(500, Currency.GBP) - Money(750, Currency.GBP) == Money(-250, Currency.GBP)
    with pytest.raises(CurrencyMismatchError):
        Money(500, Currency.GBP) + Money(500, Currency.USD)


def test_scale_and_percent_round_half_up():
    assert Money(12001, Currency.GBP).scale(Decimal("1.25")) == Money(15001, Currency.GBP)
    assert Money(3, Currency.GBP).scale("0.5") == Money(2, Currency.GBP)
    assert Money(999, Currency.GBP).percent(50) == Money(500, Currency.GBP)
    assert round_half_up(Decimal("-2.5")) == -3


def test_times_is_exact():
    assert Money(33333, Currency.USD).times(3) == Money(99999, Currency.USD)
    with pytest.raises(InvalidInputError):
        Money(100, Currency.USD).times(1.5)


def test_min_max():
    small, large = Money(100, Currency.GBP), Money(200, Currency.GBP)
    assert small.min(large) == small
    assert small.max(large) == large


def test_format():
    assert Money(123456, Currency.GBP).format() == "£1,234.56"
    assert Money(-500, Currency.USD).format() == "-$5.00"
    assert str(Money(5, Currency.EUR)) == "€0.05"
    assert format_price_per_night(Money(12000, Currency.GBP)) == "£120.00/night"


def test_sum_money():
    amounts = [Money(100, Currency.GBP), Money(250, Currency.GBP), Money(1, Currency.GBP)]
    assert sum_money(amounts, Currency.GBP) == Money(351, Currency.GBP)
    assert sum_money([], Currency.USD) == Money(0, Currency.USD)
