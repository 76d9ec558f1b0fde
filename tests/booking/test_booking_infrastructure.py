import threading
from datetime import date

import pytest

from hotel_manager.booking.application import (
    BookingApplicationService,
    ConflictingBooking,
    EditBookingRequest,
)
from hotel_manager.booking.domain import (
    PREDICATE_SHOW_ALL_ACTIVE_BOOKINGS,
    PREDICATE_SHOW_ALL_BOOKINGS,
    Booking,
)
from hotel_manager.booking.infrastructure import (
    BookingUnitOfWork,
    InMemoryBookingStore,
    StandardLogger,
)


def new_booking(booking_id: int, room_id: int = 301) -> Booking:
    return Booking(
        id=booking_id,
        room_id=room_id,
        person_id=8,
        start_date=date(2020, 3, 1),
        end_date=date(2020, 3, 2),
    )


class TestInMemoryBookingStore:
    """Тесты для хранилища бронирований в памяти."""

    def test_lookup_by_id(self, store, typical_bookings):
        assert store.has_booking_with_id(1)
        assert not store.has_booking_with_id(42)
        assert store.get_booking_with_id(2) == typical_bookings[1]

    def test_get_unknown_id_raises(self, store):
        with pytest.raises(KeyError):
            store.get_booking_with_id(42)

    def test_has_booking_compares_observable_fields(self, store, typical_bookings):
        same_fields = typical_bookings[0].model_copy(update={"id": 99})
        assert store.has_booking(same_fields)
        assert not store.has_booking(new_booking(99))

    def test_add_booking(self, store):
        store.add_booking(new_booking(4))
        assert len(store) == 4
        assert store.has_booking_with_id(4)

    def test_add_booking_with_existing_id_raises(self, store):
        with pytest.raises(ValueError):
            store.add_booking(new_booking(1))

    def test_set_booking_replaces_by_id(self, store, typical_bookings):
        edited = typical_bookings[0].model_copy(update={"room_id": 202})
        store.set_booking(1, edited)

        assert store.get_booking_with_id(1) == edited
        assert len(store) == 3
        # Порядок хранения не меняется
        assert [b.id for b in store.get_booking_list()] == [1, 2, 3]

    def test_set_booking_unknown_id_raises(self, store):
        with pytest.raises(KeyError):
            store.set_booking(42, new_booking(42))

    def test_set_booking_cannot_change_id(self, store):
        with pytest.raises(ValueError):
            store.set_booking(1, new_booking(7))
        assert not store.has_booking_with_id(7)

    def test_set_bookings_rejects_duplicate_ids(self, store):
        with pytest.raises(ValueError):
            store.set_bookings([new_booking(5), new_booking(5)])
        assert len(store) == 3

    def test_filtered_list_follows_predicate(self, store):
        assert len(store.get_filtered_booking_list()) == 3

        store.update_filtered_booking_list(PREDICATE_SHOW_ALL_ACTIVE_BOOKINGS)
        assert [b.id for b in store.get_filtered_booking_list()] == [1, 2]

        store.update_filtered_booking_list(PREDICATE_SHOW_ALL_BOOKINGS)
        assert len(store.get_filtered_booking_list()) == 3

    def test_snapshot_and_restore(self, store):
        snapshot = store.snapshot()
        store.set_bookings([])
        store.update_filtered_booking_list(PREDICATE_SHOW_ALL_ACTIVE_BOOKINGS)

        store.restore(snapshot)

        assert len(store) == 3
        assert len(store.get_filtered_booking_list()) == 3


class TestBookingUnitOfWork:
    """Тесты для единицы работы контекста бронирования."""

    def test_changes_are_kept_on_success(self, store, recording_logger):
        uow = BookingUnitOfWork(bookings_store=store, logger=recording_logger)
        with uow:
            uow.bookings.add_booking(new_booking(4))

        assert store.has_booking_with_id(4)

    def test_changes_are_rolled_back_on_error(self, store, recording_logger):
        uow = BookingUnitOfWork(bookings_store=store, logger=recording_logger)

        with pytest.raises(RuntimeError):
            with uow:
                uow.bookings.add_booking(new_booking(4))
                raise RuntimeError("boom")

        assert not store.has_booking_with_id(4)
        assert ("warning", "BookingUnitOfWork rolled back", {}) in recording_logger.records

    def test_nested_rollback_keeps_outer_changes(self, store, recording_logger):
        uow = BookingUnitOfWork(bookings_store=store, logger=recording_logger)
        with uow:
            uow.bookings.add_booking(new_booking(4))
            with pytest.raises(RuntimeError):
                with uow:
                    uow.bookings.add_booking(new_booking(5))
                    raise RuntimeError("boom")

        assert store.has_booking_with_id(4)
        assert not store.has_booking_with_id(5)

    def test_concurrent_edits_into_same_room_are_serialized(self, recording_logger):
        """Тест: из параллельных переносов в один номер проходит ровно один."""
        workers = 8
        store = InMemoryBookingStore(
            [
                new_booking(i, room_id=400 + i).model_copy(update={"person_id": 10 + i})
                for i in range(workers)
            ]
        )
        service = BookingApplicationService(
            BookingUnitOfWork(bookings_store=store, logger=recording_logger),
            logger=recording_logger,
        )
        barrier = threading.Barrier(workers)
        outcomes = []

        def move_to_room_999(booking_id):
            barrier.wait()
            try:
                service.edit_booking(
                    EditBookingRequest(booking_id=booking_id, room_id=999)
                )
                outcomes.append("edited")
            except ConflictingBooking:
                outcomes.append("conflict")

        threads = [
            threading.Thread(target=move_to_room_999, args=(i,)) for i in range(workers)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["conflict"] * (workers - 1) + ["edited"]
        assert [b.room_id for b in store.get_booking_list()].count(999) == 1

    def test_default_store_is_empty(self, recording_logger):
        uow = BookingUnitOfWork(logger=recording_logger)
        assert uow.bookings.get_filtered_booking_list() == []


def test_standard_logger_appends_context(caplog):
    logger = StandardLogger("hotel_manager.test")
    with caplog.at_level("INFO", logger="hotel_manager.test"):
        logger.info("Booking edited", booking_id=1)

    assert 'Booking edited | {"booking_id": 1}' in caplog.text
