"""Expense totals, per-person balances and settlement planning."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from splitty.models import Event, ParticipantBalance, Settlement, Summary

_THRESHOLD = 0.02


@dataclass
class _WorkBalance:
    balance: ParticipantBalance
    remaining: float


def _exchange_sort(items: list[_WorkBalance], out_of_order: Callable[[float, float], bool]) -> None:
    """Sort in place by pairwise exchange; ties keep the order this produces."""
    count = len(items)
    for i in range(count - 1):
        for j in range(i + 1, count):
            if out_of_order(items[i].remaining, items[j].remaining):
                items[i], items[j] = items[j], items[i]


class ExpenseService:
    """Computes event summaries and the transfers that settle them."""

    def round_to_two(self, num: float) -> float:
        """Round to two decimals, halves away from zero."""
        scaled = num * 100
        if not math.isfinite(scaled):
            return scaled / 100
        whole = math.trunc(scaled)
        if abs(scaled - whole) >= 0.5:
            whole += int(math.copysign(1, scaled))
        return whole / 100

    def calculate_summary(self, event: Event) -> Summary:
        """Compute totals, per-participant balances and settlements."""
        total_amount = 0.0
        processed: list[tuple[list[int], float]] = []
        for expense in event.expenses:
            payments_sum = 0.0
            for payment in expense.payments:
                payments_sum = self.round_to_two(payments_sum + payment.amount)
            expense_total = expense.total_amount or payments_sum
            processed.append((expense.shared_with, expense_total))
            total_amount = self.round_to_two(total_amount + expense_total)

        per_person_amount = 0.0
        if event.participants:
            per_person_amount = self.round_to_two(total_amount / len(event.participants))

        paid_by_person = []
        for person in event.participants:
            paid = 0.0
            for expense in event.expenses:
                for payment in expense.payments:
                    if payment.participant_id == person.id:
                        paid = self.round_to_two(paid + payment.amount)

            should_pay = 0.0
            for shared_with, expense_total in processed:
                if person.id in shared_with:
                    share = self.round_to_two(expense_total / len(shared_with))
                    should_pay = self.round_to_two(should_pay + share)

            paid_by_person.append(
                ParticipantBalance(
                    id=person.id,
                    name=person.name,
                    paid=paid,
                    should_pay=should_pay,
                    balance=self.round_to_two(paid - should_pay),
                )
            )

        return Summary(
            total_amount=total_amount,
            per_person_amount=per_person_amount,
            paid_by_person=paid_by_person,
            settlements=self.calculate_settlements(paid_by_person),
        )

    def calculate_settlements(self, balances: Sequence[ParticipantBalance]) -> list[Settlement]:
        """Match debtors with creditors, largest amounts first."""
        debtors = [_WorkBalance(b, b.balance) for b in balances if b.balance < -_THRESHOLD]
        creditors = [_WorkBalance(b, b.balance) for b in balances if b.balance > _THRESHOLD]
        _exchange_sort(debtors, lambda a, b: a > b)
        _exchange_sort(creditors, lambda a, b: a < b)

        settlements = []
        debtor_iter = iter(debtors)
        creditor_iter = iter(creditors)
        debtor = next(debtor_iter, None)
        creditor = next(creditor_iter, None)
        while debtor is not None and creditor is not None:
            amount = self.round_to_two(min(abs(debtor.remaining), creditor.remaining))
            if amount > _THRESHOLD:
                settlements.append(
                    Settlement(
                        from_id=debtor.balance.id,
                        from_name=debtor.balance.name,
                        to_id=creditor.balance.id,
                        to_name=creditor.balance.name,
                        amount=amount,
                    )
                )
            debtor.remaining = self.round_to_two(debtor.remaining + amount)
            creditor.remaining = self.round_to_two(creditor.remaining - amount)
            if abs(debtor.remaining) < _THRESHOLD:
                debtor = next(debtor_iter, None)
            if creditor.remaining < _THRESHOLD:
                creditor = next(creditor_iter, None)
        return settlements