from typing import Any, Callable, Dict, Optional

from .application import HotelApplicationService
from .config import HotelConfig
from .infrastructure import (
    ConsoleLogger,
    JsonFileHotelRepository,
    SimulatedPaymentGateway,
    configure_logging,
)


def bootstrap_app(
    config: Optional[HotelConfig] = None, output: Callable[[str], None] = print
) -> Dict[str, Any]:
    """
    Создает и настраивает все компоненты приложения.

    output получает сообщения платежного шлюза для пользователя.
    """
    config = config or HotelConfig()

    # 1. Логирование
    configure_logging(config.log_level)
    logger = ConsoleLogger()

    # 2. Адаптеры для портов
    payment_gateway = SimulatedPaymentGateway(
        delay_seconds=config.payment_delay_seconds, logger=logger, notify=output
    )
    repository = JsonFileHotelRepository(config.state_file, logger=logger)

    # 3. Загружаем сохраненное состояние или создаем новое
    hotel_service = HotelApplicationService.open(
        repository=repository, payment_gateway=payment_gateway, logger=logger
    )

    return {
        "logger": logger,
        "hotel_service": hotel_service,
    }
