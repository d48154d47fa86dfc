"""
Общее ядро системы бронирования.

Содержит денежный тип, базовые исключения и утилиты,
используемые всеми слоями приложения.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CURRENCY = "INR"

_CURRENCY_SYMBOLS = {"INR": "₹"}


class Money(BaseModel):
    """Денежная сумма с валютой."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., ge=0, description="Сумма денег")
    currency: str = Field(
        default=DEFAULT_CURRENCY, max_length=3, description="Код валюты (ISO 4217)"
    )

    def __mul__(self, multiplier: int) -> "Money":
        if isinstance(multiplier, bool) or not isinstance(multiplier, int):
            raise TypeError("Multiplier must be an integer")
        if multiplier < 0:
            raise ValueError("Multiplier cannot be negative")
        return Money(amount=self.amount * multiplier, currency=self.currency)

    def __str__(self) -> str:
        symbol = _CURRENCY_SYMBOLS.get(self.currency)
        if symbol is not None:
            return f"{symbol}{self.amount:.2f}"
        return f"{self.amount:.2f} {self.currency}"


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


def now() -> datetime:
    """Возвращает текущую дату и время."""
    return datetime.now()
