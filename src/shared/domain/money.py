"""Money value object (amount + currency)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Union

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Immutable monetary amount with two decimal places.

    Arithmetic only combines amounts of the same currency; there is no
    conversion.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        amount = Decimal(str(self.amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)
        if amount < 0:
            raise ValueError("Money amount cannot be negative.")
        currency = (self.currency or "").strip().upper()
        if len(currency) != 3:
            raise ValueError(f"Invalid currency code: {self.currency!r}")
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "currency", currency)

    @classmethod
    def zero(cls, currency: str) -> Money:
        return cls(Decimal("0"), currency)

    @classmethod
    def of(cls, amount: Union[Decimal, int, str], currency: str) -> Money:
        return cls(Decimal(str(amount)), currency)

    def multiply(self, factor: int) -> Money:
        return Money(self.amount * factor, self.currency)

    def add(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValueError(
                f"Cannot add {other.currency} to {self.currency}."
            )
        return Money(self.amount + other.amount, self.currency)

    def to_dict(self) -> Dict[str, str]:
        return {"amount": str(self.amount), "currency": self.currency}

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"
