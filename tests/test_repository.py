import pytest

from splitty.models import Event, Expense, Participant, Payment
from splitty.repository import (
    EventNotFoundError,
    EventRepository,
    InMemoryEventRepository,
)


def _test_event() -> Event:
    return Event(
        name="Test Event",
        participants=[Participant(id=1, name="Alice"), Participant(id=2, name="Bob")],
        expenses=[
            Expense(
                id=1,
                category="Food",
                total_amount=100,
                payments=[Payment(participant_id=1, amount=100)],
                shared_with=[1, 2],
            )
        ],
    )


def test_save_and_find_by_id():
    repo = InMemoryEventRepository()
    event = _test_event()
    repo.save(event)
    assert event.id != 0
    saved = repo.find_by_id(event.id)
    assert saved.name == event.name
    assert len(saved.participants) == len(event.participants)
    assert len(saved.expenses) == len(event.expenses)
    assert saved == event


def test_find_all():
    repo = InMemoryEventRepository()
    for letter in "ABC":
        repo.save(Event(name=f"Event {letter}"))
    events = repo.find_all()
    assert len(events) == 3
    assert sorted(e.name for e in events) == ["Event A", "Event B", "Event C"]


def test_delete():
    repo = InMemoryEventRepository()
    event = Event(name="Test Event")
    repo.save(event)
    repo.delete(event.id)
    with pytest.raises(EventNotFoundError):
        repo.find_by_id(event.id)


def test_delete_missing_raises():
    repo = InMemoryEventRepository()
    with pytest.raises(EventNotFoundError, match="event not found"):
        repo.delete(42)


def test_ids_are_assigned_in_sequence_from_one():
    repo = InMemoryEventRepository()
    first, second = Event(name="A"), Event(name="B")
    repo.save(first)
    repo.save(second)
    assert (first.id, second.id) == (1, 2)


def test_save_with_existing_id_replaces_event():
    repo = InMemoryEventRepository()
    event = Event(name="Before")
    repo.save(event)
    repo.save(Event(id=event.id, name="After"))
    assert repo.find_by_id(event.id).name == "After"
    assert len(repo.find_all()) == 1


def test_stored_event_is_isolated_from_caller_changes():
    repo = InMemoryEventRepository()
    event = _test_event()
    repo.save(event)
    event.name = "Mutated"
    event.expenses[0].shared_with.append(3)
    fetched = repo.find_by_id(event.id)
    assert fetched.name == "Test Event"
    assert fetched.expenses[0].shared_with == [1, 2]
    fetched.participants.clear()
    assert len(repo.find_by_id(event.id).participants) == 2


def test_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        EventRepository()