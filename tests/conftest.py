"""
Общие фикстуры для тестов контекста бронирования.
"""
from datetime import date

import pytest

from hotel_manager.booking.application import BookingApplicationService
from hotel_manager.booking.domain import Booking
from hotel_manager.booking.infrastructure import (
    BookingUnitOfWork,
    InMemoryBookingStore,
)


@pytest.fixture
def typical_bookings():
    """Создает типичный набор бронирований."""
    return [
        Booking(
            id=1,
            room_id=101,
            person_id=5,
            start_date=date(2020, 1, 1),
            end_date=date(2020, 1, 5),
            is_active=True,
        ),
        Booking(
            id=2,
            room_id=102,
            person_id=6,
            start_date=date(2020, 1, 3),
            end_date=date(2020, 1, 10),
            is_active=True,
        ),
        Booking(
            id=3,
            room_id=201,
            person_id=7,
            start_date=date(2020, 2, 1),
            end_date=date(2020, 2, 3),
            is_active=False,
        ),
    ]


@pytest.fixture
def store(typical_bookings):
    """Хранилище, заполненное типичными бронированиями."""
    return InMemoryBookingStore(typical_bookings)


@pytest.fixture
def booking_service(store):
    """Сервис приложения поверх заполненного хранилища."""
    return BookingApplicationService(BookingUnitOfWork(bookings_store=store))


class RecordingLogger:
    """Логгер, запоминающий сообщения для проверок."""

    def __init__(self):
        self.records = []

    def info(self, message, **kwargs):
        self.records.append(("info", message, kwargs))

    def error(self, message, **kwargs):
        self.records.append(("error", message, kwargs))

    def warning(self, message, **kwargs):
        self.records.append(("warning", message, kwargs))

    def debug(self, message, **kwargs):
        self.records.append(("debug", message, kwargs))


@pytest.fixture
def recording_logger():
    return RecordingLogger()
