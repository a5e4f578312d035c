from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from enum import Enum
from typing import Iterable, Union

from .errors import CurrencyMismatchError, InvalidInputError


class Currency(str, Enum):
    GBP = "GBP"
    USD = "USD"
    EUR = "EUR"


MINOR_UNIT_EXPONENT = {
    Currency.GBP: 2,
    Currency.USD: 2,
    Currency.EUR: 2,
}

CURRENCY_SYMBOLS = {
    Currency.GBP: "£",
    Currency.USD: "$",
    Currency.EUR: "€",
}

Number = Union[int, str, Decimal]


def round_half_up(value: Decimal) -> int:
    """Round a Decimal to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_decimal(value: Number, field: str = "value") -> Decimal:
    """Convert user input to Decimal without passing through float."""
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidInputError(
            f"{field} must be an int, str or Decimal, not {type(value).__name__}",
            {"field": field},
        )
    try:
        result = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except InvalidOperation:
        raise InvalidInputError(f"{field} is not a number: {value!r}", {"field": field})
    if not result.is_finite():
        raise InvalidInputError(f"{field} must be finite", {"field": field})
    return result


def parse_currency(code: Union[str, Currency]) -> Currency:
    try:
        return Currency(str(code.value if isinstance(code, Currency) else code).upper())
    except ValueError:
        raise InvalidInputError(f"Unsupported currency: {code}", {"currency": str(code)})


@dataclass(frozen=True)
class Money:
    """An amount in integer minor units (pence, cents) of one currency."""

    amount: int
    currency: Currency

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidInputError(
                f"Money amount must be an integer number of minor units, got {self.amount!r}"
            )
        if not isinstance(self.currency, Currency):
            object.__setattr__(self, "currency", parse_currency(self.currency))

    @classmethod
    def zero(cls, currency: Currency) -> "Money":
        return cls(0, currency)

    @classmethod
    def of(cls, major: Number, currency: Union[str, Currency]) -> "Money":
        """Build Money from a major-unit amount such as "200.50"."""
        currency = parse_currency(currency)
        scale = Decimal(10) ** MINOR_UNIT_EXPONENT[currency]
        return cls(round_half_up(to_decimal(major, "amount") * scale), currency)

    def to_decimal(self) -> Decimal:
        exponent = MINOR_UNIT_EXPONENT[self.currency]
        return Decimal(self.amount).scaleb(-exponent)

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot combine Money with {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(
                f"Cannot combine {self.currency.value} with {other.currency.value}",
                {"expected": self.currency.value, "got": other.currency.value},
            )

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount >= other.amount

    def times(self, quantity: int) -> "Money":
        """Exact multiplication by a whole quantity."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidInputError(f"Quantity must be an integer, got {quantity!r}")
        return Money(self.amount * quantity, self.currency)

    def scale(self, factor: Number) -> "Money":
        """Multiply by a decimal factor, rounding half-up to the minor unit."""
        return Money(round_half_up(Decimal(self.amount) * to_decimal(factor, "factor")), self.currency)

    def percent(self, percentage: Number) -> "Money":
        return self.scale(to_decimal(percentage, "percentage") / Decimal(100))

    def min(self, other: "Money") -> "Money":
        return self if self <= other else other

    def max(self, other: "Money") -> "Money":
        return self if self >= other else other

    def format(self) -> str:
        exponent = MINOR_UNIT_EXPONENT[self.currency]
        sign = "-" if self.amount < 0 else ""
        value = abs(self.to_decimal()).quantize(Decimal(1).scaleb(-exponent))
        return f"{sign}{CURRENCY_SYMBOLS[self.currency]}{value:,}"

    def __str__(self) -> str:
        return self.format()


def sum_money(amounts: Iterable[Money], currency: Currency) -> Money:
    """Sum amounts that must all be in `currency`."""
    total = Money.zero(currency)
    for amount in amounts:
        total = total + amount
    return total


def format_price_per_night(amount: Money) -> str:
    return f"{amount.format()}/night"
