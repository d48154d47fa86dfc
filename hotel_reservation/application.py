"""
Прикладной слой системы бронирования.

Содержит сервис приложения, который координирует взаимодействие
между оболочкой, доменной моделью и хранилищем.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from . import interfaces as ports
from .domain import Hotel, Reservation, Room
from .infrastructure import ConsoleLogger
from .shared_kernel import DomainException, Money

# DTO для входящих данных


class BookRoomRequest(BaseModel):
    """Запрос на бронирование номера."""

    guest_name: str
    room_number: int
    nights: int


class CancelBookingRequest(BaseModel):
    """Запрос на отмену бронирования."""

    room_number: int


# DTO для исходящих данных


class RoomDTO(BaseModel):
    """DTO для представления номера."""

    number: int
    type: str
    price_per_night: Money
    amenities: str
    is_booked: bool

    @classmethod
    def from_domain(cls, room: Room) -> "RoomDTO":
        """Создает DTO из доменной модели."""
        return cls(
            number=room.number,
            type=room.type.label,
            price_per_night=room.price,
            amenities=room.amenities,
            is_booked=room.is_booked,
        )


class ReservationDTO(BaseModel):
    """DTO для представления бронирования."""

    guest_name: str
    room_number: int
    check_in: datetime
    nights: int
    total_amount: Money

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationDTO":
        """Создает DTO из доменной модели."""
        return cls(
            guest_name=reservation.guest_name,
            room_number=reservation.room_number,
            check_in=reservation.check_in,
            nights=reservation.nights,
            total_amount=reservation.total_amount,
        )


class HotelApplicationService:
    """Сервис приложения для работы с номерами и бронированиями."""

    def __init__(
        self,
        hotel: Hotel,
        repository: ports.IHotelRepository,
        payment_gateway: ports.IPaymentGateway,
        logger: Optional[ports.ILogger] = None,
        restored: bool = False,
    ):
        """Инициализирует сервис."""
        self._hotel = hotel
        self._repository = repository
        self._payment_gateway = payment_gateway
        self._logger = logger or ConsoleLogger()
        self.restored = restored

    @classmethod
    def open(
        cls,
        repository: ports.IHotelRepository,
        payment_gateway: ports.IPaymentGateway,
        logger: Optional[ports.ILogger] = None,
    ) -> "HotelApplicationService":
        """Загружает сохраненное состояние или создает новый отель."""
        logger = logger or ConsoleLogger()
        hotel = repository.load()
        restored = hotel is not None
        if hotel is None:
            hotel = Hotel.create()
            logger.info("New hotel data created", rooms=sum(1 for _ in hotel.rooms()))
        return cls(hotel, repository, payment_gateway, logger, restored=restored)

    @property
    def hotel(self) -> Hotel:
        return self._hotel

    def list_available_rooms(self) -> List[RoomDTO]:
        """Возвращает свободные номера в порядке каталога."""
        return [RoomDTO.from_domain(room) for room in self._hotel.available_rooms()]

    def list_rooms(self) -> List[RoomDTO]:
        return [RoomDTO.from_domain(room) for room in self._hotel.rooms()]

    def book_room(self, request: BookRoomRequest) -> ReservationDTO:
        """Бронирует номер с оплатой."""
        try:
            reservation = self._hotel.book(
                guest_name=request.guest_name,
                room_number=request.room_number,
                nights=request.nights,
                payment_gateway=self._payment_gateway,
            )
        except DomainException as exc:
            self._logger.warning(
                "Booking rejected", room_number=request.room_number, reason=str(exc)
            )
            raise

        self._logger.info(
            "Room booked",
            room_number=reservation.room_number,
            nights=reservation.nights,
            total=str(reservation.total_amount),
        )
        return ReservationDTO.from_domain(reservation)

    def cancel_booking(self, request: CancelBookingRequest) -> ReservationDTO:
        """Отменяет бронирование номера."""
        try:
            reservation = self._hotel.cancel(request.room_number)
        except DomainException as exc:
            self._logger.warning(
                "Cancellation rejected", room_number=request.room_number, reason=str(exc)
            )
            raise

        self._logger.info("Booking cancelled", room_number=reservation.room_number)
        return ReservationDTO.from_domain(reservation)

    def list_reservations(self) -> List[ReservationDTO]:
        """Возвращает все бронирования в порядке их создания."""
        return [ReservationDTO.from_domain(r) for r in self._hotel.all_reservations()]

    def save(self) -> None:
        """Сохраняет состояние. Состояние в памяти при ошибке не меняется."""
        try:
            self._repository.save(self._hotel)
        except OSError as exc:
            self._logger.error("Failed to save hotel state", error=str(exc))
            raise
