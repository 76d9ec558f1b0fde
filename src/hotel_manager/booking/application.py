"""
Прикладной слой контекста бронирования.

Содержит команды над хранилищем бронирований и сервис приложения,
который проверяет входящие запросы, выполняет команды в единице работы
и журналирует результат.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..shared_kernel import BusinessRuleValidationException, EntityId
from . import interfaces as ports
from .domain import (
    PREDICATE_SHOW_ALL_ACTIVE_BOOKINGS,
    PREDICATE_SHOW_ALL_BOOKINGS,
    Booking,
    EditBookingDescriptor,
)
from .infrastructure import StandardLogger

MESSAGE_BOOKINGS_LISTED_OVERVIEW = "%d bookings listed!"


# --- Исключения команд ---


class CommandException(BusinessRuleValidationException):
    """Ошибка выполнения команды, показываемая пользователю."""

    pass


class BookingNotFound(CommandException):
    """Исключение: бронирование не найдено."""

    def __init__(self, booking_id: EntityId):
        super().__init__(EditBookingCommand.MESSAGE_BOOKING_MISSING)
        self.booking_id = booking_id


class DuplicateBooking(CommandException):
    """Исключение: такое бронирование уже существует."""

    def __init__(self):
        super().__init__(EditBookingCommand.MESSAGE_DUPLICATE_BOOKING)


class ConflictingBooking(CommandException):
    """Исключение: номер уже занят на пересекающиеся даты."""

    def __init__(self):
        super().__init__(EditBookingCommand.MESSAGE_CONFLICTING_BOOKING)


class NoFieldsEdited(CommandException):
    """Исключение: в запросе на изменение нет ни одного поля."""

    def __init__(self):
        super().__init__(EditBookingCommand.MESSAGE_NOT_EDITED)


class InvalidBookingPeriod(CommandException):
    """Исключение: дата заезда позже даты выезда."""

    def __init__(self, start_date: date, end_date: date):
        super().__init__(EditBookingCommand.MESSAGE_INVALID_PERIOD)
        self.start_date = start_date
        self.end_date = end_date


# --- Команды ---


@dataclass(frozen=True)
class CommandResult:
    """Результат выполнения команды."""

    feedback_to_user: str
    show_help: bool = False
    exit: bool = False
    show_rooms: bool = False
    show_bookings: bool = False


class Command(ABC):
    """Базовый класс команды над хранилищем бронирований."""

    COMMAND_WORD: str = ""

    @abstractmethod
    def execute(self, store: ports.IBookingStore) -> CommandResult:
        raise NotImplementedError


class EditBookingCommand(Command):
    """Изменяет номер и даты существующего бронирования."""

    COMMAND_WORD = "editBooking"

    MESSAGE_EDIT_BOOKING_SUCCESS = "Edited Booking: %s"
    MESSAGE_NOT_EDITED = "At least one field to edit must be provided."
    MESSAGE_DUPLICATE_BOOKING = "This booking already exists in the booking book."
    MESSAGE_CONFLICTING_BOOKING = (
        "This booking conflicts with another booking in the booking book."
    )
    MESSAGE_BOOKING_MISSING = "No valid booking can be found."
    MESSAGE_INVALID_PERIOD = "The start date of a booking must not be after its end date."

    def __init__(self, booking_id: EntityId, descriptor: EditBookingDescriptor):
        if booking_id is None or descriptor is None:
            raise TypeError("booking_id and descriptor are required")
        if booking_id < 0:
            raise ValueError("booking_id must be non-negative")

        self.booking_id = booking_id
        self.descriptor = EditBookingDescriptor.copy_of(descriptor)

    def execute(self, store: ports.IBookingStore) -> CommandResult:
        if not store.has_booking_with_id(self.booking_id):
            raise BookingNotFound(self.booking_id)

        booking_to_edit = store.get_booking_with_id(self.booking_id)
        edited_booking = self.create_edited_booking(booking_to_edit, self.descriptor)

        # Совпадение с собственным прежним состоянием обходит обе проверки
        if edited_booking != booking_to_edit:
            if store.has_booking(edited_booking):
                raise DuplicateBooking()

            if any(
                edited_booking.has_conflict(booking)
                for booking in store.get_filtered_booking_list()
            ):
                raise ConflictingBooking()

        store.set_booking(self.booking_id, edited_booking)
        store.update_filtered_booking_list(PREDICATE_SHOW_ALL_BOOKINGS)
        return CommandResult(self.MESSAGE_EDIT_BOOKING_SUCCESS % edited_booking)

    @staticmethod
    def create_edited_booking(
        booking_to_edit: Booking, descriptor: EditBookingDescriptor
    ) -> Booking:
        """Создает бронирование с полями из описания правки."""
        room_id = _or_default(descriptor.room_id, booking_to_edit.room_id)
        start_date = _or_default(descriptor.start_date, booking_to_edit.start_date)
        end_date = _or_default(descriptor.end_date, booking_to_edit.end_date)

        if start_date > end_date:
            raise InvalidBookingPeriod(start_date, end_date)

        # id, person_id и is_active не меняются при правке
        return Booking(
            id=booking_to_edit.id,
            room_id=room_id,
            person_id=booking_to_edit.person_id,
            start_date=start_date,
            end_date=end_date,
            is_active=booking_to_edit.is_active,
        )

    def __eq__(self, other):
        if not isinstance(other, EditBookingCommand):
            return NotImplemented
        return (
            self.booking_id == other.booking_id
            and self.descriptor == other.descriptor
        )

    def __hash__(self):
        return hash((self.booking_id, self.descriptor))


class ListBookingCommand(Command):
    """Показывает все активные бронирования."""

    COMMAND_WORD = "listBooking"

    def execute(self, store: ports.IBookingStore) -> CommandResult:
        store.update_filtered_booking_list(PREDICATE_SHOW_ALL_ACTIVE_BOOKINGS)
        return CommandResult(
            MESSAGE_BOOKINGS_LISTED_OVERVIEW % len(store.get_filtered_booking_list()),
            show_bookings=True,
        )

    def __eq__(self, other):
        return isinstance(other, ListBookingCommand)

    def __hash__(self):
        return hash(self.COMMAND_WORD)


class ClearBookingCommand(Command):
    """Удаляет все бронирования."""

    COMMAND_WORD = "clearBooking"

    MESSAGE_SUCCESS = "Booking book has been cleared!"

    def execute(self, store: ports.IBookingStore) -> CommandResult:
        store.set_bookings([])
        store.update_filtered_booking_list(PREDICATE_SHOW_ALL_BOOKINGS)
        return CommandResult(self.MESSAGE_SUCCESS)

    def __eq__(self, other):
        return isinstance(other, ClearBookingCommand)

    def __hash__(self):
        return hash(self.COMMAND_WORD)


def _or_default(value, default):
    return default if value is None else value


# --- DTO (Data Transfer Objects) ---


class EditBookingRequest(BaseModel):
    """Запрос на изменение бронирования."""

    model_config = ConfigDict(frozen=True)

    booking_id: EntityId = Field(..., ge=0)
    room_id: Optional[EntityId] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def end_not_before_start(self) -> "EditBookingRequest":
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ValueError("Start date must not be after end date.")
        return self

    def to_descriptor(self) -> EditBookingDescriptor:
        return EditBookingDescriptor(
            room_id=self.room_id,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class BookingDTO(BaseModel):
    """DTO для представления бронирования."""

    id: EntityId
    room_id: EntityId
    person_id: EntityId
    start_date: date
    end_date: date
    is_active: bool

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=booking.id,
            room_id=booking.room_id,
            person_id=booking.person_id,
            start_date=booking.start_date,
            end_date=booking.end_date,
            is_active=booking.is_active,
        )


# --- Сервисы приложения ---


class BookingApplicationService:
    """Сервис приложения для работы с бронированиями."""

    def __init__(
        self,
        uow: ports.IBookingUnitOfWork,
        logger: Optional[ports.ILogger] = None,
        recent_bookings_limit: int = 10,
    ):
        """Инициализирует сервис."""
        self._uow = uow
        self._logger = logger or StandardLogger()
        self._recent_bookings_limit = recent_bookings_limit

    def execute(self, command: Command) -> CommandResult:
        """Выполняет команду в единице работы."""
        command_name = type(command).__name__
        try:
            with self._uow:
                result = command.execute(self._uow.bookings)
        except CommandException as e:
            self._logger.warning(
                f"{command_name} failed", reason=type(e).__name__, error=str(e)
            )
            raise

        self._logger.info(f"{command_name} executed", feedback=result.feedback_to_user)
        return result

    def edit_booking(self, request: EditBookingRequest) -> CommandResult:
        """Изменяет бронирование по запросу."""
        descriptor = request.to_descriptor()
        if not descriptor.is_any_field_edited():
            self._logger.warning(
                "EditBookingCommand rejected", booking_id=request.booking_id
            )
            raise NoFieldsEdited()

        return self.execute(EditBookingCommand(request.booking_id, descriptor))

    def list_bookings(self) -> CommandResult:
        """Показывает активные бронирования."""
        return self.execute(ListBookingCommand())

    def clear_bookings(self) -> CommandResult:
        """Удаляет все бронирования."""
        return self.execute(ClearBookingCommand())

    def get_booking(self, booking_id: EntityId) -> BookingDTO:
        """Возвращает информацию о бронировании."""
        with self._uow:
            store = self._uow.bookings
            booking = (
                store.get_booking_with_id(booking_id)
                if store.has_booking_with_id(booking_id)
                else None
            )

        if booking is None:
            raise BookingNotFound(booking_id)
        return BookingDTO.from_domain(booking)

    def filtered_bookings(self) -> List[BookingDTO]:
        """Возвращает бронирования текущего отфильтрованного списка."""
        with self._uow:
            bookings = self._uow.bookings.get_filtered_booking_list()
        return [BookingDTO.from_domain(booking) for booking in bookings]

    def recent_bookings(self) -> List[BookingDTO]:
        """Возвращает последние бронирования, начиная с самой поздней даты заезда."""
        with self._uow:
            bookings = self._uow.bookings.get_filtered_booking_list()
        bookings.sort(key=lambda booking: booking.start_date, reverse=True)
        return [
            BookingDTO.from_domain(booking)
            for booking in bookings[: self._recent_bookings_limit]
        ]
