"""
Инфраструктурный слой системы бронирования.

Содержит реализации портов: логгер, имитацию платежного шлюза
и хранилища снимков состояния отеля.
"""

import json
import logging
import os
import stat
import sys
import tempfile
import time
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, List, Literal, Optional, Union

from pydantic import BaseModel

from . import interfaces as ports
from .domain import Hotel, Reservation, ReservationLedger, Room, RoomCatalog, RoomType
from .shared_kernel import DomainException, Money, now

SNAPSHOT_SCHEMA_VERSION = 1

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class StateSaveException(OSError):
    """Не удалось записать снимок состояния на диск."""

    pass


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Настраивает вывод логов в stderr, чтобы не смешивать их с меню."""
    logging.basicConfig(stream=sys.stderr, format=LOG_FORMAT, level=level)


class ConsoleLogger(ports.ILogger):
    """Реализация логгера поверх модуля logging с контекстом в JSON."""

    def __init__(self, name: str = "hotel_reservation"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, context: dict) -> None:
        if context:
            message = f"{message} | {json.dumps(context, default=str, ensure_ascii=False)}"
        self._logger.log(level, message)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)


class SimulatedPaymentGateway(ports.IPaymentGateway):
    """
    Заглушка платежного шлюза: ждет фиксированное время и всегда успешна.

    notify получает сообщения о ходе оплаты для пользователя.
    """

    def __init__(
        self,
        delay_seconds: float = 1.0,
        logger: Optional[ports.ILogger] = None,
        sleep: Callable[[float], None] = time.sleep,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.delay_seconds = delay_seconds
        self._logger = logger or ConsoleLogger()
        self._sleep = sleep
        self._notify = notify

    def process_payment(self, amount: Money) -> bool:
        self._logger.info("Processing payment", amount=str(amount))
        if self._notify is not None:
            self._notify(f"Processing payment of {amount}...")
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)
        self._logger.info("Payment successful", amount=str(amount))
        if self._notify is not None:
            self._notify("Payment successful!")
        return True


# Схема снимка состояния. Не зависит от внутреннего устройства доменных моделей.


class RoomRecord(BaseModel):
    number: int
    type: RoomType
    is_booked: bool


class ReservationRecord(BaseModel):
    guest_name: str
    room_number: int
    check_in: datetime
    nights: int
    total_amount: Decimal
    currency: str


class HotelSnapshot(BaseModel):
    """Полный снимок состояния отеля."""

    schema_version: Literal[1] = SNAPSHOT_SCHEMA_VERSION
    saved_at: datetime
    rooms: List[RoomRecord]
    reservations: List[ReservationRecord]

    @classmethod
    def from_domain(cls, hotel: Hotel) -> "HotelSnapshot":
        """Создает снимок из доменной модели."""
        return cls(
            saved_at=now(),
            rooms=[
                RoomRecord(number=room.number, type=room.type, is_booked=room.is_booked)
                for room in hotel.rooms()
            ],
            reservations=[
                ReservationRecord(
                    guest_name=r.guest_name,
                    room_number=r.room_number,
                    check_in=r.check_in,
                    nights=r.nights,
                    total_amount=r.total_amount.amount,
                    currency=r.total_amount.currency,
                )
                for r in hotel.all_reservations()
            ],
        )

    def to_domain(self) -> Hotel:
        """Восстанавливает агрегат. Нарушение инвариантов приводит к исключению."""
        catalog = RoomCatalog(
            Room(number=record.number, type=record.type, is_booked=record.is_booked)
            for record in self.rooms
        )
        ledger = ReservationLedger(
            Reservation(
                guest_name=record.guest_name,
                room_number=record.room_number,
                check_in=record.check_in,
                nights=record.nights,
                total_amount=Money(amount=record.total_amount, currency=record.currency),
            )
            for record in self.reservations
        )
        return Hotel(catalog, ledger)


class JsonFileHotelRepository(ports.IHotelRepository):
    """Хранит снимок состояния отеля в одном JSON-файле."""

    def __init__(self, file_path: Union[str, Path], logger: Optional[ports.ILogger] = None):
        """
        Инициализирует репозиторий.

        Args:
            file_path: Путь к JSON-файлу со снимком
            logger: Логгер для диагностических сообщений
        """
        self._file_path = Path(file_path)
        self._logger = logger or ConsoleLogger()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _target_mode(self) -> int:
        """Права старого снимка или права нового файла по текущей umask."""
        try:
            return stat.S_IMODE(os.stat(self._file_path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def save(self, hotel: Hotel) -> None:
        """
        Записывает снимок атомарно: сначала во временный файл рядом
        с целевым, затем переименовывает его поверх старого снимка.
        """
        snapshot = HotelSnapshot.from_domain(hotel)
        payload = json.dumps(snapshot.model_dump(mode="json"), indent=2, ensure_ascii=False)
        directory = self._file_path.parent

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._file_path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                # mkstemp создает файл с правами 0600, переносим права старого снимка
                os.chmod(tmp_name, self._target_mode())
                os.replace(tmp_name, self._file_path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StateSaveException(
                f"Could not save hotel data to {self._file_path}: {exc}"
            ) from exc

        self._logger.info(
            "Hotel state saved",
            path=str(self._file_path),
            rooms=len(snapshot.rooms),
            reservations=len(snapshot.reservations),
        )

    def load(self) -> Optional[Hotel]:
        """Загружает снимок. Любая ошибка означает отсутствие сохраненного состояния."""
        try:
            raw_data = self._file_path.read_text(encoding="utf-8")
            snapshot = HotelSnapshot.model_validate(json.loads(raw_data))
            hotel = snapshot.to_domain()
        except FileNotFoundError:
            self._logger.info("No saved hotel data", path=str(self._file_path))
            return None
        except (OSError, ValueError, TypeError, RecursionError, DomainException) as exc:
            # ValidationError и JSONDecodeError являются подклассами ValueError,
            # слишком глубокая вложенность JSON дает RecursionError
            self._logger.warning(
                "Saved hotel data is unreadable, ignoring it",
                path=str(self._file_path),
                error=str(exc),
            )
            return None

        self._logger.info(
            "Hotel state loaded",
            path=str(self._file_path),
            reservations=len(snapshot.reservations),
        )
        return hotel


class InMemoryHotelRepository(ports.IHotelRepository):
    """Реализация хранилища снимков в памяти."""

    def __init__(self) -> None:
        self._snapshot: Optional[HotelSnapshot] = None

    def save(self, hotel: Hotel) -> None:
        self._snapshot = HotelSnapshot.from_domain(hotel)

    def load(self) -> Optional[Hotel]:
        if self._snapshot is None:
            return None
        return self._snapshot.to_domain()
