"""
Общие фикстуры для тестов.
"""

from typing import List

import pytest

from hotel_reservation.application import HotelApplicationService
from hotel_reservation.domain import Hotel
from hotel_reservation.infrastructure import InMemoryHotelRepository
from hotel_reservation.shared_kernel import Money


class RecordingPaymentGateway:
    """Платежный шлюз без задержки, запоминающий принятые суммы."""

    def __init__(self) -> None:
        self.processed_payments: List[Money] = []

    def process_payment(self, amount: Money) -> bool:
        self.processed_payments.append(amount)
        return True


class DecliningPaymentGateway:
    """Платежный шлюз, отклоняющий все платежи."""

    def __init__(self) -> None:
        self.attempts: List[Money] = []

    def process_payment(self, amount: Money) -> bool:
        self.attempts.append(amount)
        return False


@pytest.fixture
def payment_gateway() -> RecordingPaymentGateway:
    return RecordingPaymentGateway()


@pytest.fixture
def declining_gateway() -> DecliningPaymentGateway:
    return DecliningPaymentGateway()


@pytest.fixture
def hotel() -> Hotel:
    return Hotel.create()


@pytest.fixture
def repository() -> InMemoryHotelRepository:
    return InMemoryHotelRepository()


@pytest.fixture
def service(
    repository: InMemoryHotelRepository, payment_gateway: RecordingPaymentGateway
) -> HotelApplicationService:
    return HotelApplicationService.open(repository, payment_gateway)
