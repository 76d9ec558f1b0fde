"""
Инфраструктурный слой контекста бронирования.

Содержит хранилище бронирований в памяти, адаптер логгера
и единицу работы, которая сериализует команды над хранилищем.
"""
import json
import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..shared_kernel import EntityId
from . import interfaces as ports
from .domain import PREDICATE_SHOW_ALL_BOOKINGS, Booking


class InMemoryBookingStore(ports.IBookingStore):
    """
    Хранилище бронирований в памяти.

    Бронирования хранятся в порядке добавления и индексируются
    по идентификатору. Отфильтрованное представление задается предикатом
    и вычисляется при каждом запросе.
    """

    def __init__(self, bookings: Sequence[Booking] = ()):
        self._bookings: Dict[EntityId, Booking] = {}
        self._predicate: ports.BookingPredicate = PREDICATE_SHOW_ALL_BOOKINGS
        self.set_bookings(bookings)

    def has_booking_with_id(self, booking_id: EntityId) -> bool:
        return booking_id in self._bookings

    def get_booking_with_id(self, booking_id: EntityId) -> Booking:
        if booking_id not in self._bookings:
            raise KeyError(f"Booking with id {booking_id} not found")
        return self._bookings[booking_id]

    def has_booking(self, booking: Booking) -> bool:
        return any(
            existing.is_same_booking(booking) for existing in self._bookings.values()
        )

    def add_booking(self, booking: Booking) -> None:
        if booking.id in self._bookings:
            raise ValueError(f"Booking with id {booking.id} already exists")
        self._bookings[booking.id] = booking

    def set_booking(self, booking_id: EntityId, edited_booking: Booking) -> None:
        """Заменяет бронирование с указанным идентификатором."""
        if booking_id not in self._bookings:
            raise KeyError(f"Booking with id {booking_id} not found")
        if edited_booking.id != booking_id:
            raise ValueError(
                f"Booking id cannot change from {booking_id} to {edited_booking.id}"
            )
        self._bookings[booking_id] = edited_booking

    def set_bookings(self, bookings: Sequence[Booking]) -> None:
        """Полностью заменяет содержимое хранилища."""
        replacement: Dict[EntityId, Booking] = {}
        for booking in bookings:
            if booking.id in replacement:
                raise ValueError(f"Booking with id {booking.id} already exists")
            replacement[booking.id] = booking
        self._bookings = replacement

    def get_booking_list(self) -> List[Booking]:
        return list(self._bookings.values())

    def get_filtered_booking_list(self) -> List[Booking]:
        return [
            booking for booking in self._bookings.values() if self._predicate(booking)
        ]

    def update_filtered_booking_list(self, predicate: ports.BookingPredicate) -> None:
        self._predicate = predicate

    def snapshot(self) -> Tuple[Dict[EntityId, Booking], ports.BookingPredicate]:
        # Бронирования неизменяемы, достаточно копии словаря
        return dict(self._bookings), self._predicate

    def restore(
        self, snapshot: Tuple[Dict[EntityId, Booking], ports.BookingPredicate]
    ) -> None:
        bookings, predicate = snapshot
        self._bookings = dict(bookings)
        self._predicate = predicate

    def __len__(self) -> int:
        return len(self._bookings)


class StandardLogger(ports.ILogger):
    """Адаптер ILogger поверх стандартного модуля logging."""

    def __init__(self, name: str = "hotel_manager"):
        self._logger = logging.getLogger(name)

    @staticmethod
    def _format(message: str, context: Dict[str, Any]) -> str:
        if not context:
            return message
        return f"{message} | {json.dumps(context, default=str, ensure_ascii=False)}"

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._format(message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._format(message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._format(message, kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._format(message, kwargs))


class BookingUnitOfWork(ports.IBookingUnitOfWork):
    """
    Единица работы для контекста бронирования.

    Держит блокировку хранилища на все время блока ``with``, чтобы
    последовательность чтение-проверка-запись выполнялась целиком.
    При исключении состояние хранилища восстанавливается из снимка.
    """

    def __init__(
        self,
        bookings_store: Optional[ports.IBookingStore] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        self._bookings = bookings_store if bookings_store is not None else InMemoryBookingStore()
        self._logger = logger or StandardLogger()
        self._lock = threading.RLock()
        self._snapshots: List[Any] = []

    @property
    def bookings(self) -> ports.IBookingStore:
        return self._bookings

    def commit(self) -> None:
        """Фиксирует все изменения."""
        if self._snapshots:
            self._snapshots[-1] = self._bookings.snapshot()
        self._logger.debug("BookingUnitOfWork committed")

    def rollback(self) -> None:
        """Откатывает изменения к последнему снимку."""
        if self._snapshots:
            self._bookings.restore(self._snapshots[-1])
        self._logger.warning("BookingUnitOfWork rolled back")

    def __enter__(self) -> "BookingUnitOfWork":
        self._lock.acquire()
        self._snapshots.append(self._bookings.snapshot())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._snapshots.pop()
            self._lock.release()
        return False  # Пробрасываем исключение дальше, если оно было
