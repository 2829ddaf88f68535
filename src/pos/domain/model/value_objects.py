"""Money, quantities and tax rates.

All three are frozen dataclasses that validate on construction, so a
``Money`` with a negative amount or a ``Quantity`` of zero cannot exist
anywhere in the domain.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pos.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "EUR"
CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero (7.335 -> 7.34)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value: str | float | int | Decimal, what: str) -> Decimal:
    """Parse user input with at most two decimal places."""
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid {what}: {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"Invalid {what}: {value!r}")
    try:
        cents = round_money(result)
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid {what}: {value!r} is out of range") from exc
    if result != cents:
        raise ValidationError(f"Invalid {what}: {value!r} has more than two decimal places")
    return result


@dataclass(frozen=True)
class Money:
    """A non-negative Decimal amount in one currency.

    Arithmetic keeps full precision; only ``rounded()`` and ``str()``
    bring the amount to cents.  Mixing currencies raises.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    # --- Arithmetic -----------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._amount_of(other), self.currency)

    def __sub__(self, other: Money) -> Money:
        difference = self.amount - self._amount_of(other)
        if difference < 0:
            raise ValidationError(
                f"Subtracting {other} from {self} would give a negative amount"
            )
        return Money(difference, self.currency)

    def __mul__(self, units: int) -> Money:
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Money can only be multiplied by a unit count, not {units!r}")
        return Money(self.amount * units, self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._amount_of(other)

    def __le__(self, other: Money) -> bool:
        return self.amount <= self._amount_of(other)

    def __gt__(self, other: Money) -> bool:
        return self.amount > self._amount_of(other)

    def __ge__(self, other: Money) -> bool:
        return self.amount >= self._amount_of(other)

    def rounded(self) -> Money:
        return Money(round_money(self.amount), self.currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{round_money(self.amount)} {self.currency}"

    def _amount_of(self, other: Money) -> Decimal:
        if other.currency != self.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")
        return other.amount

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Build from user input; ``"3.5"``, ``3`` and ``Decimal`` all work."""
        return Money(_to_decimal(amount, "money amount"), currency)

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0.00"), currency)


@dataclass(frozen=True)
class Quantity:
    """Units of one product on a line; at least one."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError(f"Quantity must be positive, got {self.value}")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TaxRate:
    """A flat tax rate expressed as a percentage, e.g. ``19.00``."""

    percent: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.percent, Decimal):
            raise ValidationError(
                f"Tax rate must be a Decimal, got {type(self.percent).__name__}"
            )
        if not 0 <= self.percent <= 100:
            raise ValidationError(
                f"Tax rate must be between 0 and 100 percent, got {self.percent}"
            )

    @property
    def fraction(self) -> Decimal:
        return self.percent / Decimal("100")

    def __str__(self) -> str:
        return f"{self.percent:.2f}%"

    @staticmethod
    def of(percent: str | float | int | Decimal) -> TaxRate:
        return TaxRate(_to_decimal(percent, "tax rate"))
