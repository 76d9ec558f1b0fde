import logging
import os
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from .booking.application import BookingApplicationService
from .booking.domain import Booking
from .booking.infrastructure import (
    BookingUnitOfWork,
    InMemoryBookingStore,
    StandardLogger,
)

ENV_PREFIX = "HOTEL_MANAGER_"


class AppSettings(BaseModel):
    """Настройки приложения."""

    log_level: str = "INFO"
    log_format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    recent_bookings_limit: int = Field(10, gt=0)

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Неизвестный уровень логирования: {v}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "AppSettings":
        """Читает настройки из переменных окружения HOTEL_MANAGER_*."""
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for field_name, env_name in (
            ("log_level", "LOG_LEVEL"),
            ("log_format", "LOG_FORMAT"),
            ("recent_bookings_limit", "RECENT_LIMIT"),
        ):
            value = environ.get(ENV_PREFIX + env_name)
            if value not in (None, ""):
                values[field_name] = value
        return cls(**values)


def configure_logging(settings: AppSettings) -> None:
    """Настраивает стандартный логгер приложения."""
    logger = logging.getLogger("hotel_manager")
    logger.setLevel(settings.log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.log_format))
        logger.addHandler(handler)


def bootstrap_app(
    settings: Optional[AppSettings] = None, bookings: Iterable[Booking] = ()
) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or AppSettings.from_env()
    configure_logging(settings)

    # 1. Создаем хранилище и Unit of Work для контекста бронирования
    logger = StandardLogger()
    store = InMemoryBookingStore(list(bookings))
    booking_uow = BookingUnitOfWork(bookings_store=store, logger=logger)

    # 2. Создаем сервисы, передавая им зависимости
    booking_service = BookingApplicationService(
        uow=booking_uow,
        logger=logger,
        recent_bookings_limit=settings.recent_bookings_limit,
    )

    # Возвращаем настроенные компоненты
    return {
        "settings": settings,
        "booking_store": store,
        "booking_uow": booking_uow,
        "booking_service": booking_service,
    }
