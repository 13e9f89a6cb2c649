"""Domain objects for events, expenses and their summaries."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Participant:
    """A person taking part in an event."""

    id: int = 0
    name: str = ""
    email: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.email:
            data["email"] = self.email
        return data


@dataclass
class Payment:
    """A single contribution made by a participant towards an expense."""

    participant_id: int = 0
    amount: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"participantId": self.participant_id, "amount": self.amount}


@dataclass
class Expense:
    """A group expense, paid by some participants and shared by others."""

    id: int = 0
    category: str = ""
    total_amount: float = 0.0
    payments: list[Payment] = field(default_factory=list)
    shared_with: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "totalAmount": self.total_amount,
            "payments": [payment.to_dict() for payment in self.payments],
            "sharedWith": list(self.shared_with),
        }


@dataclass
class Event:
    """An event with its participants and expenses."""

    id: int = 0
    name: str = ""
    participants: list[Participant] = field(default_factory=list)
    expenses: list[Expense] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "participants": [p.to_dict() for p in self.participants],
            "expenses": [e.to_dict() for e in self.expenses],
        }

    def copy(self) -> Event:
        """Return a deep copy that shares no mutable state with this event."""
        return copy.deepcopy(self)


@dataclass
class ParticipantBalance:
    """How much a participant paid, owed, and the resulting balance."""

    id: int
    name: str
    paid: float
    should_pay: float
    balance: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "paid": self.paid,
            "shouldPay": self.should_pay,
            "balance": self.balance,
        }


@dataclass
class Settlement:
    """A transfer from a debtor to a creditor."""

    from_id: int
    from_name: str
    to_id: int
    to_name: str
    amount: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_id,
            "fromName": self.from_name,
            "to": self.to_id,
            "toName": self.to_name,
            "amount": self.amount,
        }


@dataclass
class Summary:
    """The computed totals, balances and settlements of an event."""

    total_amount: float
    per_person_amount: float
    paid_by_person: list[ParticipantBalance] = field(default_factory=list)
    settlements: list[Settlement] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAmount": self.total_amount,
            "perPersonAmount": self.per_person_amount,
            "paidByPerson": [b.to_dict() for b in self.paid_by_person],
            "settlements": [s.to_dict() for s in self.settlements],
        }


_KINDS: dict[str, tuple[tuple[type, ...], str, Any]] = {
    "int": ((int,), "an integer", 0),
    "float": ((int, float), "a number", 0.0),
    "str": ((str,), "a string", ""),
    "list": ((list,), "an array", None),
}


def _check(value: Any, kind: str, where: str) -> Any:
    types, label, default = _KINDS[kind]
    if value is None:
        return [] if kind == "list" else default
    if isinstance(value, bool) or not isinstance(value, types):
        raise ValueError(f"{where}: expected {label}, got {value!r}")
    return float(value) if kind == "float" else value


def _object(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{where}: expected an object, got {value!r}")
    return value


def _get(data: Mapping[str, Any], key: str, kind: str, where: str) -> Any:
    return _check(data.get(key), kind, f"{where}.{key}")


def _items(data: Mapping[str, Any], key: str, where: str):
    for position, item in enumerate(_get(data, key, "list", where)):
        yield item, f"{where}.{key}[{position}]"


def _participant(value: Any, where: str) -> Participant:
    data = _object(value, where)
    return Participant(
        id=_get(data, "id", "int", where),
        name=_get(data, "name", "str", where),
        email=_get(data, "email", "str", where),
    )


def _payment(value: Any, where: str) -> Payment:
    data = _object(value, where)
    return Payment(
        participant_id=_get(data, "participantId", "int", where),
        amount=_get(data, "amount", "float", where),
    )


def _expense(value: Any, where: str) -> Expense:
    data = _object(value, where)
    return Expense(
        id=_get(data, "id", "int", where),
        category=_get(data, "category", "str", where),
        total_amount=_get(data, "totalAmount", "float", where),
        payments=[_payment(item, at) for item, at in _items(data, "payments", where)],
        shared_with=[
            _check(item, "int", at) if item is not None else 0
            for item, at in _items(data, "sharedWith", where)
        ],
    )


def event_from_dict(data: Any) -> Event:
    """Build an Event from decoded JSON, raising ValueError on malformed input."""
    where = "event"
    obj = _object(data, where)
    return Event(
        id=_get(obj, "id", "int", where),
        name=_get(obj, "name", "str", where),
        participants=[_participant(item, at) for item, at in _items(obj, "participants", where)],
        expenses=[_expense(item, at) for item, at in _items(obj, "expenses", where)],
    )