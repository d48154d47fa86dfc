"""
Интерактивная оболочка: текстовое меню поверх сервиса приложения.
"""

from typing import Callable, Dict, Optional

from .application import (
    BookRoomRequest,
    CancelBookingRequest,
    HotelApplicationService,
    ReservationDTO,
    RoomDTO,
)
from .bootstrap import bootstrap_app
from .shared_kernel import DomainException

MENU = (
    "\n===== HOTEL RESERVATION MENU =====",
    "1. View Available Rooms",
    "2. Book Room",
    "3. Cancel Booking",
    "4. View All Reservations",
    "5. Save & Exit",
)

SAVE_AND_EXIT = 5


def format_room(room: RoomDTO) -> str:
    return f"Room {room.number} ({room.type}) {room.price_per_night} | {room.amenities}"


def format_reservation(reservation: ReservationDTO) -> str:
    return (
        f"Guest: {reservation.guest_name} | Room: {reservation.room_number} "
        f"| Nights: {reservation.nights} | Amount: {reservation.total_amount} "
        f"| Date: {reservation.check_in:%Y-%m-%d %H:%M:%S}"
    )


class HotelConsole:
    """Цикл меню. Единственный штатный выход - сохранение и выход."""

    def __init__(
        self,
        service: HotelApplicationService,
        input_func: Optional[Callable[[str], str]] = None,
        output: Optional[Callable[[str], None]] = None,
    ):
        self._service = service
        self._input = input_func or input
        self._output = output or print
        self._actions: Dict[int, Callable[[], None]] = {
            1: self.show_available_rooms,
            2: self.book_room,
            3: self.cancel_booking,
            4: self.show_all_reservations,
        }

    def run(self) -> None:
        if self._service.restored:
            self._output("Existing data loaded.")
        else:
            self._output("New hotel data created.")

        while True:
            for line in MENU:
                self._output(line)
            choice = self._read_int("Enter choice: ")
            if choice is None:
                continue
            if choice == SAVE_AND_EXIT:
                if self.save():
                    self._output("Goodbye!")
                    return
                continue

            action = self._actions.get(choice)
            if action is None:
                self._output("Invalid option!")
                continue
            action()

    def _read_int(self, prompt: str) -> Optional[int]:
        raw = self._input(prompt)
        try:
            return int(raw.strip())
        except ValueError:
            self._output(f"Please enter a whole number, got {raw!r}.")
            return None

    def show_available_rooms(self) -> None:
        self._output("\n--- Available Rooms ---")
        rooms = self._service.list_available_rooms()
        if not rooms:
            self._output("No available rooms.")
        for room in rooms:
            self._output(format_room(room))

    def book_room(self) -> None:
        guest_name = self._input("Enter Guest Name: ")
        room_number = self._read_int("Enter Room Number: ")
        if room_number is None:
            return
        nights = self._read_int("Enter No. of Nights: ")
        if nights is None:
            return

        try:
            reservation = self._service.book_room(
                BookRoomRequest(guest_name=guest_name, room_number=room_number, nights=nights)
            )
        except DomainException as exc:
            self._output(f"Booking failed: {exc}")
            return

        self._output(
            f"Room {reservation.room_number} booked successfully for {reservation.guest_name}!"
        )

    def cancel_booking(self) -> None:
        room_number = self._read_int("Enter Room Number to Cancel: ")
        if room_number is None:
            return
        try:
            self._service.cancel_booking(CancelBookingRequest(room_number=room_number))
        except DomainException as exc:
            self._output(f"Cancellation failed: {exc}")
            return
        self._output(f"Booking for Room {room_number} cancelled.")

    def show_all_reservations(self) -> None:
        self._output("\n--- All Reservations ---")
        reservations = self._service.list_reservations()
        if not reservations:
            self._output("No reservations yet!")
        for reservation in reservations:
            self._output(format_reservation(reservation))

    def save(self) -> bool:
        try:
            self._service.save()
        except OSError as exc:
            self._output(f"Error saving data: {exc}")
            return False
        self._output("Data saved successfully.")
        return True


def main() -> int:
    components = bootstrap_app()
    console = HotelConsole(components["hotel_service"])
    try:
        console.run()
    except (EOFError, KeyboardInterrupt):
        components["logger"].warning("Input closed, exiting without saving")
        print("\nExiting without saving.")
        return 1
    return 0
