import pytest

from splitty.expense_service import ExpenseService
from splitty.models import Event, Expense, Participant, ParticipantBalance, Payment


@pytest.fixture
def service() -> ExpenseService:
    return ExpenseService()


def _three_way_event() -> Event:
    return Event(
        id=1,
        name="Test Event",
        participants=[
            Participant(id=1, name="Alice"),
            Participant(id=2, name="Bob"),
            Participant(id=3, name="Charlie"),
        ],
        expenses=[
            Expense(
                id=1,
                category="Accommodation",
                total_amount=300,
                payments=[Payment(participant_id=1, amount=300)],
                shared_with=[1, 2, 3],
            ),
            Expense(
                id=2,
                category="Food",
                total_amount=150,
                payments=[Payment(participant_id=2, amount=150)],
                shared_with=[1, 2, 3],
            ),
            Expense(
                id=3,
                category="Transport",
                total_amount=90,
                payments=[Payment(participant_id=3, amount=90)],
                shared_with=[1, 2, 3],
            ),
        ],
    )


def test_calculate_summary(service):
    summary = service.calculate_summary(_three_way_event())
    assert summary.total_amount == 540
    assert summary.per_person_amount == 180

    balances = {b.id: b.balance for b in summary.paid_by_person}
    assert balances == {1: 120, 2: -30, 3: -90}

    assert len(summary.settlements) == 2
    transfers = {(s.from_id, s.to_id): s.amount for s in summary.settlements}
    assert transfers == {(2, 1): 30, (3, 1): 90}


def test_settlements_are_ordered_largest_debt_first(service):
    summary = service.calculate_summary(_three_way_event())
    assert [(s.from_name, s.to_name) for s in summary.settlements] == [
        ("Charlie", "Alice"),
        ("Bob", "Alice"),
    ]


def test_round_to_two_rounds_halves_away_from_zero(service):
    assert service.round_to_two(0.125) == 0.13
    assert service.round_to_two(-0.125) == -0.13
    assert service.round_to_two(120) == 120


def test_zero_total_falls_back_to_payment_sum(service):
    event = Event(
        name="Trip",
        participants=[Participant(id=1, name="Alice"), Participant(id=2, name="Bob")],
        expenses=[
            Expense(
                payments=[Payment(participant_id=1, amount=60), Payment(participant_id=2, amount=40)],
                shared_with=[1, 2],
            )
        ],
    )
    summary = service.calculate_summary(event)
    assert summary.total_amount == 100
    assert {b.id: b.should_pay for b in summary.paid_by_person} == {1: 50, 2: 50}


def test_no_participants_gives_zero_per_person(service):
    event = Event(
        name="Empty",
        expenses=[Expense(total_amount=90, payments=[Payment(participant_id=1, amount=90)])],
    )
    summary = service.calculate_summary(event)
    assert summary.total_amount == 90
    assert summary.per_person_amount == 0
    assert summary.paid_by_person == []
    assert summary.settlements == []


def test_person_not_sharing_owes_nothing(service):
    event = Event(
        name="Dinner",
        participants=[Participant(id=1, name="Alice"), Participant(id=2, name="Bob")],
        expenses=[
            Expense(total_amount=100, payments=[Payment(participant_id=1, amount=100)], shared_with=[1])
        ],
    )
    summary = service.calculate_summary(event)
    assert [b.balance for b in summary.paid_by_person] == [0, 0]
    assert summary.settlements == []


def test_small_balances_are_not_settled(service):
    balances = [
        ParticipantBalance(id=1, name="Alice", paid=0, should_pay=0, balance=0.02),
        ParticipantBalance(id=2, name="Bob", paid=0, should_pay=0, balance=-0.02),
    ]
    assert service.calculate_settlements(balances) == []


def test_settlements_clear_every_balance(service):
    balances = [
        ParticipantBalance(id=1, name="Alice", paid=0, should_pay=0, balance=70),
        ParticipantBalance(id=2, name="Bob", paid=0, should_pay=0, balance=30),
        ParticipantBalance(id=3, name="Charlie", paid=0, should_pay=0, balance=-55),
        ParticipantBalance(id=4, name="Dana", paid=0, should_pay=0, balance=-45),
    ]
    settlements = service.calculate_settlements(balances)
    net = {b.id: b.balance for b in balances}
    for s in settlements:
        net[s.from_id] += s.amount
        net[s.to_id] -= s.amount
    assert all(abs(value) < 0.02 for value in net.values())
    assert all(s.amount > 0.02 for s in settlements)