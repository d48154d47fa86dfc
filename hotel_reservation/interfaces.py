"""
Интерфейсы (порты) системы бронирования.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from .domain import Hotel
from .shared_kernel import Money


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IPaymentGateway(Protocol):
    """Интерфейс платежного шлюза. Возвращает False, если платеж не прошел."""

    def process_payment(self, amount: Money) -> bool: ...


class IHotelRepository(Protocol):
    """Интерфейс хранилища снимков состояния отеля."""

    def save(self, hotel: Hotel) -> None: ...
    def load(self) -> Optional[Hotel]: ...
