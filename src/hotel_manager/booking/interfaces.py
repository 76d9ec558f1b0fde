"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from typing import Any, Callable, List, Protocol, Sequence

from ..shared_kernel import EntityId
from .domain import Booking

BookingPredicate = Callable[[Booking], bool]


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IBookingStore(Protocol):
    """Интерфейс хранилища бронирований."""

    def has_booking_with_id(self, booking_id: EntityId) -> bool: ...
    def get_booking_with_id(self, booking_id: EntityId) -> Booking: ...
    def has_booking(self, booking: Booking) -> bool: ...
    def add_booking(self, booking: Booking) -> None: ...
    def set_booking(self, booking_id: EntityId, edited_booking: Booking) -> None: ...
    def set_bookings(self, bookings: Sequence[Booking]) -> None: ...
    def get_filtered_booking_list(self) -> List[Booking]: ...
    def update_filtered_booking_list(self, predicate: BookingPredicate) -> None: ...
    def snapshot(self) -> Any: ...
    def restore(self, snapshot: Any) -> None: ...


class IBookingUnitOfWork(Protocol):
    """Интерфейс Unit of Work для контекста Booking."""

    @property
    def bookings(self) -> IBookingStore: ...

    def __enter__(self) -> IBookingUnitOfWork: ...
    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...
