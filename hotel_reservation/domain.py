"""
Доменная модель бронирования номеров.

Содержит каталог номеров, журнал бронирований и агрегат Hotel,
который отвечает за согласованность между ними.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from .shared_kernel import (
    BusinessRuleValidationException,
    DomainException,
    Money,
    now,
)

if TYPE_CHECKING:
    from .interfaces import IPaymentGateway


class _RoomTypeSpec(NamedTuple):
    label: str
    nightly_rate: Decimal
    amenities: str


class RoomType(str, Enum):
    """Типы номеров в отеле."""

    STANDARD = "standard"
    DELUXE = "deluxe"
    SUITE = "suite"

    @property
    def label(self) -> str:
        return _ROOM_TYPE_SPECS[self].label

    @property
    def price_per_night(self) -> Money:
        """Стоимость ночи определяется только типом номера."""
        return Money(amount=_ROOM_TYPE_SPECS[self].nightly_rate)

    @property
    def amenities(self) -> str:
        return _ROOM_TYPE_SPECS[self].amenities


_ROOM_TYPE_SPECS: Dict[RoomType, _RoomTypeSpec] = {
    RoomType.STANDARD: _RoomTypeSpec("Standard", Decimal("2000"), "AC, Wi-Fi, Television"),
    RoomType.DELUXE: _RoomTypeSpec(
        "Deluxe", Decimal("3500"), "AC, Wi-Fi, TV, Mini-Fridge, Breakfast"
    ),
    RoomType.SUITE: _RoomTypeSpec(
        "Suite", Decimal("6000"), "AC, Wi-Fi, TV, Kitchenette, Jacuzzi, Room-Service"
    ),
}

# Начальный набор номеров: по два номера каждого типа
SEED_ROOMS = (
    (101, RoomType.STANDARD),
    (102, RoomType.STANDARD),
    (201, RoomType.DELUXE),
    (202, RoomType.DELUXE),
    (301, RoomType.SUITE),
    (302, RoomType.SUITE),
)


# Доменные исключения
class RoomNotFoundException(DomainException):
    """Номер с указанным номером отсутствует в каталоге."""

    def __init__(self, room_number: int):
        self.room_number = room_number
        super().__init__(f"Invalid room number: {room_number}")


class RoomAlreadyBookedException(BusinessRuleValidationException):
    """Номер уже забронирован."""

    def __init__(self, room_number: int):
        self.room_number = room_number
        super().__init__(f"Room {room_number} is already booked")


class ReservationNotFoundException(DomainException):
    """Для номера нет активного бронирования."""

    def __init__(self, room_number: int):
        self.room_number = room_number
        super().__init__(f"No reservation found for room {room_number}")


class InvalidStayLengthException(BusinessRuleValidationException):
    """Количество ночей должно быть положительным целым числом."""

    def __init__(self, nights: object):
        self.nights = nights
        super().__init__(f"Number of nights must be a positive integer, got {nights!r}")


class PaymentDeclinedException(DomainException):
    """Платеж отклонен, бронирование не создано."""

    def __init__(self, amount: Money):
        self.amount = amount
        super().__init__(f"Payment of {amount} was declined")


class Room(BaseModel):
    """Номер в отеле."""

    number: int = Field(..., gt=0, frozen=True)
    type: RoomType = Field(..., frozen=True)
    is_booked: bool = False

    @property
    def price(self) -> Money:
        return self.type.price_per_night

    @property
    def amenities(self) -> str:
        return self.type.amenities


class Reservation(BaseModel):
    """Бронирование номера. После создания не изменяется."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    guest_name: str = Field(..., min_length=1)
    room_number: int = Field(..., gt=0)
    check_in: datetime
    nights: int = Field(..., gt=0)
    total_amount: Money


class RoomCatalog:
    """Фиксированный набор номеров в порядке добавления."""

    def __init__(self, rooms: Iterable[Room]):
        self._rooms: List[Room] = []
        for room in rooms:
            if self.find(room.number) is not None:
                raise BusinessRuleValidationException(
                    f"Duplicate room number in catalog: {room.number}"
                )
            self._rooms.append(room)

    @classmethod
    def seeded(cls) -> RoomCatalog:
        """Создает каталог из шести стандартных номеров."""
        return cls(Room(number=number, type=room_type) for number, room_type in SEED_ROOMS)

    def find(self, room_number: int) -> Optional[Room]:
        """Линейный поиск номера. Возвращает None, если номера нет."""
        for room in self._rooms:
            if room.number == room_number:
                return room
        return None

    def get(self, room_number: int) -> Room:
        room = self.find(room_number)
        if room is None:
            raise RoomNotFoundException(room_number)
        return room

    def list(self) -> List[Room]:
        return list(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(self._rooms)

    def __len__(self) -> int:
        return len(self._rooms)


class ReservationLedger:
    """Журнал бронирований в порядке их создания."""

    def __init__(self, reservations: Iterable[Reservation] = ()):
        self._reservations: List[Reservation] = list(reservations)

    def append(self, reservation: Reservation) -> None:
        self._reservations.append(reservation)

    def remove(self, reservation: Reservation) -> None:
        # Удаляем именно этот объект, а не первый равный ему
        for index, item in enumerate(self._reservations):
            if item is reservation:
                del self._reservations[index]
                return
        raise ReservationNotFoundException(reservation.room_number)

    def find_by_room(self, room_number: int) -> Optional[Reservation]:
        """Возвращает первое бронирование для номера."""
        for reservation in self._reservations:
            if reservation.room_number == room_number:
                return reservation
        return None

    def count_for_room(self, room_number: int) -> int:
        return sum(1 for r in self._reservations if r.room_number == room_number)

    def __iter__(self) -> Iterator[Reservation]:
        return iter(self._reservations)

    def __len__(self) -> int:
        return len(self._reservations)


class Hotel:
    """
    Агрегат 'Отель'.

    Владеет каталогом номеров и журналом бронирований. Флаг брони номера
    установлен тогда и только тогда, когда в журнале ровно одно
    бронирование для этого номера.
    """

    def __init__(self, catalog: RoomCatalog, ledger: Optional[ReservationLedger] = None):
        self._catalog = catalog
        self._ledger = ledger if ledger is not None else ReservationLedger()
        self.verify_consistency()

    @classmethod
    def create(cls) -> Hotel:
        """Создает отель с начальным каталогом и пустым журналом."""
        return cls(RoomCatalog.seeded())

    def verify_consistency(self) -> None:
        """
        Проверяет инварианты агрегата: каталог совпадает с начальным набором,
        сумма каждого бронирования равна цене номера за все ночи, флаги брони
        согласованы с журналом.
        """
        layout = tuple((room.number, room.type) for room in self._catalog)
        if layout != SEED_ROOMS:
            raise BusinessRuleValidationException("Room catalog differs from the fixed room set")

        for reservation in self._ledger:
            room = self._catalog.find(reservation.room_number)
            if room is None:
                raise BusinessRuleValidationException(
                    f"Reservation references unknown room {reservation.room_number}"
                )
            if reservation.total_amount != room.price * reservation.nights:
                raise BusinessRuleValidationException(
                    f"Reservation total for room {room.number} does not match "
                    f"{reservation.nights} nights at {room.price}"
                )

        for room in self._catalog:
            count = self._ledger.count_for_room(room.number)
            if count > 1:
                raise BusinessRuleValidationException(
                    f"Room {room.number} has {count} reservations"
                )
            if room.is_booked != (count == 1):
                raise BusinessRuleValidationException(
                    f"Booked flag of room {room.number} does not match the ledger"
                )

    # Наружу отдаются копии номеров: флаг брони меняют только book и cancel

    def find_room(self, room_number: int) -> Optional[Room]:
        room = self._catalog.find(room_number)
        return room.model_copy() if room is not None else None

    def rooms(self) -> Iterator[Room]:
        return (room.model_copy() for room in self._catalog)

    def available_rooms(self) -> Iterator[Room]:
        """Свободные номера в порядке каталога. Вычисляется при каждом вызове."""
        return (room.model_copy() for room in self._catalog if not room.is_booked)

    def all_reservations(self) -> Iterator[Reservation]:
        return iter(self._ledger)

    def book(
        self,
        guest_name: str,
        room_number: int,
        nights: int,
        payment_gateway: "IPaymentGateway",
    ) -> Reservation:
        """
        Бронирует номер.

        Проверки выполняются в порядке: существование номера, занятость,
        количество ночей, имя гостя, оплата. При любой ошибке состояние
        отеля не меняется.
        """
        room = self._catalog.get(room_number)
        if room.is_booked:
            raise RoomAlreadyBookedException(room_number)

        if isinstance(nights, bool) or not isinstance(nights, int) or nights < 1:
            raise InvalidStayLengthException(nights)

        guest_name = guest_name.strip()
        if not guest_name:
            raise BusinessRuleValidationException("Guest name must not be empty")

        total = room.price * nights
        if not payment_gateway.process_payment(total):
            raise PaymentDeclinedException(total)

        reservation = Reservation(
            guest_name=guest_name,
            room_number=room.number,
            check_in=now(),
            nights=nights,
            total_amount=total,
        )
        room.is_booked = True
        self._ledger.append(reservation)
        return reservation

    def cancel(self, room_number: int) -> Reservation:
        """Отменяет бронирование номера и возвращает удаленную запись."""
        reservation = self._ledger.find_by_room(room_number)
        if reservation is None:
            raise ReservationNotFoundException(room_number)

        room = self._catalog.find(room_number)
        if room is not None:
            room.is_booked = False
        self._ledger.remove(reservation)
        return reservation
