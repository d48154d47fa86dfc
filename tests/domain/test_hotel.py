import random
from datetime import datetime

import pytest
from pydantic import ValidationError

from hotel_reservation.domain import (
    Hotel,
    InvalidStayLengthException,
    PaymentDeclinedException,
    Reservation,
    ReservationLedger,
    ReservationNotFoundException,
    Room,
    RoomAlreadyBookedException,
    RoomCatalog,
    RoomNotFoundException,
    RoomType,
)
from hotel_reservation.shared_kernel import (
    BusinessRuleValidationException,
    DomainException,
    Money,
)


def snapshot_state(hotel: Hotel):
    return (
        [(room.number, room.is_booked) for room in hotel.rooms()],
        list(hotel.all_reservations()),
    )


def assert_invariant(hotel: Hotel) -> None:
    reservations = list(hotel.all_reservations())
    for room in hotel.rooms():
        count = sum(1 for r in reservations if r.room_number == room.number)
        assert room.is_booked == (count == 1)
        assert count <= 1


def test_fresh_hotel_is_seeded_and_empty(hotel: Hotel):
    assert len(list(hotel.rooms())) == 6
    assert len(list(hotel.available_rooms())) == 6
    assert list(hotel.all_reservations()) == []


def test_book_room_creates_reservation(hotel: Hotel, payment_gateway):
    """Тест: бронирование номера 101 на 2 ночи стоит 4000."""
    before = datetime.now()

    reservation = hotel.book("Alice", 101, 2, payment_gateway)

    assert reservation.guest_name == "Alice"
    assert reservation.room_number == 101
    assert reservation.nights == 2
    assert reservation.total_amount == Money(amount=4000)
    assert before <= reservation.check_in <= datetime.now()
    assert hotel.find_room(101).is_booked is True
    assert list(hotel.all_reservations()) == [reservation]
    assert payment_gateway.processed_payments == [Money(amount=4000)]


def test_book_unknown_room_fails_without_changes(hotel: Hotel, payment_gateway):
    before = snapshot_state(hotel)

    with pytest.raises(RoomNotFoundException):
        hotel.book("Alice", 999, 2, payment_gateway)

    assert snapshot_state(hotel) == before
    assert payment_gateway.processed_payments == []


def test_book_already_booked_room_fails_without_changes(hotel: Hotel, payment_gateway):
    hotel.book("Alice", 101, 2, payment_gateway)
    before = snapshot_state(hotel)

    with pytest.raises(RoomAlreadyBookedException):
        hotel.book("Bob", 101, 1, payment_gateway)

    assert snapshot_state(hotel) == before


@pytest.mark.parametrize("nights", [0, -1, True])
def test_book_rejects_non_positive_nights(hotel: Hotel, payment_gateway, nights):
    before = snapshot_state(hotel)

    with pytest.raises(InvalidStayLengthException):
        hotel.book("Alice", 101, nights, payment_gateway)

    assert snapshot_state(hotel) == before
    assert payment_gateway.processed_payments == []


def test_unknown_room_is_reported_before_invalid_nights(hotel: Hotel, payment_gateway):
    with pytest.raises(RoomNotFoundException):
        hotel.book("Alice", 999, 0, payment_gateway)


def test_booked_room_is_reported_before_invalid_nights(hotel: Hotel, payment_gateway):
    hotel.book("Alice", 101, 1, payment_gateway)

    with pytest.raises(RoomAlreadyBookedException):
        hotel.book("Bob", 101, 0, payment_gateway)


def test_book_rejects_blank_guest_name(hotel: Hotel, payment_gateway):
    with pytest.raises(BusinessRuleValidationException):
        hotel.book("   ", 101, 1, payment_gateway)

    assert hotel.find_room(101).is_booked is False


def test_guest_name_is_stripped(hotel: Hotel, payment_gateway):
    reservation = hotel.book("  Alice  ", 101, 1, payment_gateway)

    assert reservation.guest_name == "Alice"


def test_declined_payment_leaves_state_untouched(hotel: Hotel, declining_gateway):
    before = snapshot_state(hotel)

    with pytest.raises(PaymentDeclinedException) as exc_info:
        hotel.book("Alice", 301, 3, declining_gateway)

    assert exc_info.value.amount == Money(amount=18000)
    assert declining_gateway.attempts == [Money(amount=18000)]
    assert snapshot_state(hotel) == before


def test_cancel_removes_reservation_and_frees_room(hotel: Hotel, payment_gateway):
    """Тест: отмена бронирования освобождает номер, повторная отмена падает."""
    booked = hotel.book("Alice", 101, 2, payment_gateway)

    cancelled = hotel.cancel(101)

    assert cancelled is booked
    assert hotel.find_room(101).is_booked is False
    assert list(hotel.all_reservations()) == []

    with pytest.raises(ReservationNotFoundException):
        hotel.cancel(101)


def test_cancel_without_reservation_fails_without_changes(hotel: Hotel, payment_gateway):
    hotel.book("Alice", 202, 1, payment_gateway)
    before = snapshot_state(hotel)

    with pytest.raises(ReservationNotFoundException):
        hotel.cancel(101)

    assert snapshot_state(hotel) == before


def test_available_rooms_is_recomputed_on_each_call(hotel: Hotel, payment_gateway):
    available = hotel.available_rooms()
    assert [room.number for room in available] == [101, 102, 201, 202, 301, 302]
    # Генератор исчерпан, но новый вызов снова вычисляет список
    assert list(available) == []

    hotel.book("Alice", 201, 1, payment_gateway)

    assert [room.number for room in hotel.available_rooms()] == [101, 102, 202, 301, 302]


def test_reservations_are_listed_in_booking_order(hotel: Hotel, payment_gateway):
    hotel.book("Carol", 301, 1, payment_gateway)
    hotel.book("Alice", 101, 1, payment_gateway)
    hotel.book("Bob", 202, 1, payment_gateway)

    assert [r.guest_name for r in hotel.all_reservations()] == ["Carol", "Alice", "Bob"]


def test_invariant_holds_for_random_book_cancel_sequences(payment_gateway):
    """Тест: флаг брони согласован с журналом после любых операций."""
    rng = random.Random(42)
    hotel = Hotel.create()
    room_numbers = [101, 102, 201, 202, 301, 302, 999]

    for step in range(300):
        room_number = rng.choice(room_numbers)
        try:
            if rng.random() < 0.5:
                hotel.book(f"Guest {step}", room_number, rng.randint(-1, 5), payment_gateway)
            else:
                hotel.cancel(room_number)
        except DomainException:
            pass
        assert_invariant(hotel)

    hotel.verify_consistency()


def test_restored_hotel_with_inconsistent_flags_is_rejected():
    catalog = RoomCatalog.seeded()
    catalog.get(101).is_booked = True

    with pytest.raises(BusinessRuleValidationException, match="Booked flag of room 101"):
        Hotel(catalog)


@pytest.mark.parametrize(
    "rooms",
    [
        [Room(number=101, type=RoomType.STANDARD)],
        [
            Room(number=number, type=RoomType.SUITE)
            for number in (101, 102, 201, 202, 301, 302)
        ],
    ],
)
def test_restored_hotel_with_foreign_catalog_is_rejected(rooms):
    with pytest.raises(BusinessRuleValidationException, match="fixed room set"):
        Hotel(RoomCatalog(rooms))


def test_restored_hotel_with_wrong_reservation_total_is_rejected():
    catalog = RoomCatalog.seeded()
    catalog.get(101).is_booked = True
    reservation = Reservation(
        guest_name="Alice",
        room_number=101,
        check_in=datetime(2024, 1, 1, 12, 0),
        nights=2,
        total_amount=Money(amount=1),
    )

    with pytest.raises(BusinessRuleValidationException, match="does not match"):
        Hotel(catalog, ReservationLedger([reservation]))


def test_returned_rooms_do_not_change_hotel_state(hotel: Hotel, payment_gateway):
    """Тест: изменение выданных наружу номеров не влияет на отель."""
    hotel.find_room(101).is_booked = True
    for room in hotel.rooms():
        room.is_booked = True
    for room in hotel.available_rooms():
        room.is_booked = True

    assert [room.number for room in hotel.available_rooms()] == [101, 102, 201, 202, 301, 302]
    hotel.verify_consistency()

    hotel.book("Alice", 101, 1, payment_gateway)
    hotel.find_room(101).is_booked = False

    with pytest.raises(RoomAlreadyBookedException):
        hotel.book("Bob", 101, 1, payment_gateway)
    hotel.verify_consistency()


def test_restored_hotel_with_reservation_for_unknown_room_is_rejected():
    reservation = Reservation(
        guest_name="Alice",
        room_number=999,
        check_in=datetime(2024, 1, 1, 12, 0),
        nights=1,
        total_amount=Money(amount=2000),
    )

    with pytest.raises(BusinessRuleValidationException):
        Hotel(RoomCatalog.seeded(), ReservationLedger([reservation]))


def test_reservation_cannot_be_modified(hotel: Hotel, payment_gateway):
    reservation = hotel.book("Alice", 101, 2, payment_gateway)

    with pytest.raises(ValidationError):
        reservation.nights = 5
    assert reservation.nights == 2
