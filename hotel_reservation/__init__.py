"""
Консольная система бронирования номеров в отеле.

Хранит фиксированный набор номеров, журнал бронирований
и сохраняет состояние в локальный файл между запусками.
"""

from .application import (
    BookRoomRequest,
    CancelBookingRequest,
    HotelApplicationService,
    ReservationDTO,
    RoomDTO,
)
from .domain import (
    Hotel,
    InvalidStayLengthException,
    PaymentDeclinedException,
    Reservation,
    ReservationNotFoundException,
    Room,
    RoomAlreadyBookedException,
    RoomNotFoundException,
    RoomType,
)
from .infrastructure import JsonFileHotelRepository, StateSaveException
from .shared_kernel import BusinessRuleValidationException, DomainException, Money

__all__ = [
    # Доменные модели
    "Hotel",
    "Room",
    "RoomType",
    "Reservation",
    "Money",
    # Исключения
    "DomainException",
    "BusinessRuleValidationException",
    "RoomNotFoundException",
    "RoomAlreadyBookedException",
    "ReservationNotFoundException",
    "InvalidStayLengthException",
    "PaymentDeclinedException",
    "StateSaveException",
    # Прикладной слой
    "HotelApplicationService",
    "BookRoomRequest",
    "CancelBookingRequest",
    "RoomDTO",
    "ReservationDTO",
    "JsonFileHotelRepository",
]
