"""
Доменная модель контекста бронирования.

Содержит сущность бронирования, описание правки бронирования
и стандартные предикаты для отфильтрованного списка.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..shared_kernel import DateRange, EntityId


class Booking(BaseModel):
    """Бронирование номера гостем на диапазон дат."""

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(..., ge=0)
    room_id: EntityId = Field(..., ge=0)
    person_id: EntityId = Field(..., ge=0)
    start_date: date
    end_date: date
    is_active: bool = False

    @model_validator(mode="after")
    def end_not_before_start(self) -> "Booking":
        if self.start_date > self.end_date:
            raise ValueError("Start date must not be after end date.")
        return self

    @property
    def period(self) -> DateRange:
        """Период проживания."""
        return DateRange(start_date=self.start_date, end_date=self.end_date)

    def is_same_booking(self, other: "Booking") -> bool:
        """
        Проверяет, совпадают ли все наблюдаемые поля бронирований.

        Идентификатор не участвует в сравнении.
        """
        return (
            self.room_id == other.room_id
            and self.person_id == other.person_id
            and self.start_date == other.start_date
            and self.end_date == other.end_date
            and self.is_active == other.is_active
        )

    def has_conflict(self, other: "Booking") -> bool:
        """Проверяет, занимает ли другое бронирование тот же номер в те же даты."""
        if self.id == other.id:
            return False
        return self.room_id == other.room_id and self.period.overlaps(other.period)

    def __str__(self) -> str:
        status = "active" if self.is_active else "inactive"
        return (
            f"Booking {self.id}: Room {self.room_id}, Person {self.person_id}, "
            f"{self.start_date.isoformat()} to {self.end_date.isoformat()} ({status})"
        )


class EditBookingDescriptor(BaseModel):
    """
    Неизменяемое описание правки бронирования.

    Каждое заданное поле заменяет соответствующее поле бронирования,
    None означает, что поле не меняется.
    """

    model_config = ConfigDict(frozen=True)

    room_id: Optional[EntityId] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @classmethod
    def copy_of(cls, other: "EditBookingDescriptor") -> "EditBookingDescriptor":
        """Создает копию описания поле за полем."""
        return cls(
            room_id=other.room_id,
            start_date=other.start_date,
            end_date=other.end_date,
        )

    def is_any_field_edited(self) -> bool:
        """Возвращает True, если задано хотя бы одно поле."""
        return any(
            value is not None
            for value in (self.room_id, self.start_date, self.end_date)
        )


# Предикаты для отфильтрованного списка бронирований
def show_all_bookings(booking: Booking) -> bool:
    return True


def show_active_bookings(booking: Booking) -> bool:
    return booking.is_active


PREDICATE_SHOW_ALL_BOOKINGS = show_all_bookings
PREDICATE_SHOW_ALL_ACTIVE_BOOKINGS = show_active_bookings
