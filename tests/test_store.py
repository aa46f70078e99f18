"""Tests for the client finance store."""

import json
from datetime import date, datetime
from decimal import Decimal

import pytest

from moneytrack.domain.category import DEFAULT_CATEGORIES
from moneytrack.domain.entities import Category, CategoryKind, Period
from moneytrack.domain.errors import ConflictError, NotFoundError, ValidationError
from moneytrack.domain.store import (
    GOAL_COMPLETED,
    MONTHLY_LIMIT_EXCEEDED,
    AddCategory,
    FinanceState,
    FinanceStore,
    JsonFilePersistence,
    MemoryPersistence,
    reduce,
    state_from_json,
    state_to_json,
)

NOW = datetime(2024, 1, 20, 10, 0)


@pytest.fixture
def persistence():
    return MemoryPersistence()


@pytest.fixture
def store(persistence):
    return FinanceStore(persistence, clock=lambda: NOW)


@pytest.fixture
def events(store):
    received = []
    store.subscribe(received.append)
    return received


def test_default_state(store):
    assert store.state.transactions == ()
    assert store.state.goals == ()
    assert store.state.categories == DEFAULT_CATEGORIES
    assert store.state.alerts.alert_enabled is False


def test_every_change_is_persisted(store, persistence):
    store.add_transaction("income", Decimal("1000"), "Salary", "Salary", date(2024, 1, 5))
    store.add_transaction("expense", Decimal("300"), "Groceries", "Food", date(2024, 1, 10))

    assert persistence.writes == 2
    saved = json.loads(persistence.payload)
    assert set(saved) == {"transactions", "goals", "categories", "alerts"}
    assert [t["description"] for t in saved["transactions"]] == ["Salary", "Groceries"]


def test_month_scenario(store):
    store.add_transaction("income", Decimal("1000"), "Pay", "Salary", date(2024, 1, 5))
    store.add_transaction("expense", Decimal("300"), "Market", "Food", date(2024, 1, 10))
    store.add_transaction("expense", Decimal("200"), "Dinner", "Food", date(2024, 2, 1))

    assert store.total_income(Period.MONTH) == Decimal("1000")
    assert store.total_expenses(Period.MONTH) == Decimal("300")
    assert store.balance(Period.MONTH) == Decimal("700")
    assert [(c.category, c.amount) for c in store.expenses_by_category()] == [
        ("Food", Decimal("300"))
    ]


def test_transaction_ids_are_sequential(store):
    first = store.add_transaction("income", Decimal("10"), "a", "Salary", date(2024, 1, 1))
    second = store.add_transaction("income", Decimal("20"), "b", "Salary", date(2024, 1, 2))
    assert (first.id, second.id) == (1, 2)
    assert first.created_at == NOW


def test_add_transaction_validates(store, persistence):
    with pytest.raises(ValidationError):
        store.add_transaction("expense", Decimal("0"), "Free", "Food", date(2024, 1, 1))
    with pytest.raises(ValidationError):
        store.add_transaction("gift", Decimal("5"), "Odd", "Food", date(2024, 1, 1))
    assert persistence.writes == 0


def test_delete_transaction_leaves_others_unchanged(store):
    kept_a = store.add_transaction("income", Decimal("10"), "a", "Salary", date(2024, 1, 1))
    removed = store.add_transaction("expense", Decimal("20"), "b", "Food", date(2024, 1, 2))
    kept_b = store.add_transaction("expense", Decimal("30"), "c", "Food", date(2024, 1, 3))

    store.delete_transaction(removed.id)

    assert store.state.transactions == (kept_a, kept_b)


def test_delete_missing_transaction(store):
    with pytest.raises(NotFoundError):
        store.delete_transaction(42)


def test_goal_completion_event_fires_once(store, events):
    goal = store.add_goal("Trip", Decimal("1000"), date(2024, 6, 1))
    store.contribute(goal.id, Decimal("800"))
    assert events == []

    result = store.contribute(goal.id, Decimal("300"))
    assert result.completed_now is True
    assert result.goal.current_amount == Decimal("1000.00")

    store.contribute(goal.id, Decimal("50"))
    completions = [e for e in events if e.kind == GOAL_COMPLETED]
    assert len(completions) == 1
    assert store.state.goals[0].current_amount == Decimal("1000.00")


def test_add_goal_requires_future_deadline(store):
    with pytest.raises(ValidationError):
        store.add_goal("Past", Decimal("100"), date(2024, 1, 20))


def test_delete_goal(store):
    goal = store.add_goal("Trip", Decimal("1000"), date(2024, 6, 1))
    store.delete_goal(goal.id)
    assert store.state.goals == ()
    with pytest.raises(NotFoundError):
        store.contribute(goal.id, Decimal("10"))


def test_goal_progress_uses_store_clock(store):
    goal = store.add_goal("Soon", Decimal("100"), date(2024, 1, 23))
    store.contribute(goal.id, Decimal("25"))
    (snapshot,) = store.goal_progress()
    assert snapshot.days_remaining == 3
    assert snapshot.status.value == "urgent"
    assert snapshot.progress == Decimal("25")


def test_monthly_limit_alert(store, events):
    store.update_alerts(Decimal("500"), True)
    store.add_transaction("expense", Decimal("400"), "Rent", "Housing", date(2024, 1, 2))
    assert events == []

    store.add_transaction("expense", Decimal("150"), "Market", "Food", date(2024, 1, 3))
    assert [e.kind for e in events] == [MONTHLY_LIMIT_EXCEEDED]
    assert events[0].payload == Decimal("550.00")


def test_monthly_limit_alert_ignores_other_months_and_income(store, events):
    store.update_alerts(Decimal("100"), True)
    store.add_transaction("expense", Decimal("500"), "Old", "Food", date(2023, 12, 2))
    store.add_transaction("income", Decimal("500"), "Pay", "Salary", date(2024, 1, 2))
    assert events == []


def test_monthly_limit_alert_disabled(store, events):
    store.update_alerts(Decimal("100"), False)
    store.add_transaction("expense", Decimal("500"), "Big", "Food", date(2024, 1, 2))
    assert events == []


def test_unsubscribe(store):
    received = []
    unsubscribe = store.subscribe(received.append)
    unsubscribe()
    goal = store.add_goal("Trip", Decimal("10"), date(2024, 6, 1))
    store.contribute(goal.id, Decimal("10"))
    assert received == []


def test_add_category(store):
    category = store.add_category("Pets", "expense")
    assert category in store.categories(CategoryKind.EXPENSE)
    assert category not in store.categories("income")
    with pytest.raises(ConflictError):
        store.add_category("Pets", "expense")


def test_load_round_trips_persisted_state(persistence):
    writer = FinanceStore(persistence, clock=lambda: NOW)
    writer.add_transaction("income", Decimal("12.34"), "Pay", "Salary", date(2024, 1, 5))
    goal = writer.add_goal("Trip", Decimal("1000"), date(2024, 6, 1), description="Beach")
    writer.contribute(goal.id, Decimal("99.99"))
    writer.update_alerts(Decimal("700"), True)
    writer.add_category("Pets", "expense")

    reader = FinanceStore(persistence, clock=lambda: NOW)
    reader.load()

    assert reader.state == writer.state


def test_load_without_saved_state_keeps_defaults(store):
    assert store.load() == FinanceState()


def test_load_malformed_state_falls_back_to_defaults(caplog):
    persistence = MemoryPersistence("{not json")
    store = FinanceStore(persistence, clock=lambda: NOW)

    with caplog.at_level("ERROR"):
        state = store.load()

    assert state == FinanceState()
    assert "Could not load persisted finance state" in caplog.text


def test_load_state_with_missing_fields_falls_back(caplog):
    payload = json.dumps({"transactions": [{"id": 1, "type": "income"}]})
    store = FinanceStore(MemoryPersistence(payload), clock=lambda: NOW)
    assert store.load() == FinanceState()


_STORED_TXN = {
    "id": 1,
    "userId": None,
    "type": "expense",
    "amount": "12.50",
    "description": "Lunch",
    "category": "Food",
    "date": "2024-01-10",
    "createdAt": "2024-01-10T12:00:00",
}
_STORED_GOAL = {
    "id": 1,
    "userId": None,
    "title": "Trip",
    "targetAmount": "1000",
    "currentAmount": "100",
    "deadline": "2024-06-01",
    "description": None,
    "createdAt": "2024-01-01T09:00:00",
}


@pytest.mark.parametrize(
    "payload",
    [
        {"transactions": [{**_STORED_TXN, "amount": "abc"}]},
        {"goals": [{**_STORED_GOAL, "targetAmount": "1e"}]},
        {"goals": [{**_STORED_GOAL, "currentAmount": "NaN"}]},
        {"alerts": []},
        {"alerts": {"monthlyLimit": "lots"}},
        {"transactions": {"id": 1}},
        {"categories": "Food"},
    ],
)
def test_load_state_with_bad_values_falls_back(payload, caplog):
    store = FinanceStore(MemoryPersistence(json.dumps(payload)), clock=lambda: NOW)

    with caplog.at_level("ERROR"):
        assert store.load() == FinanceState()

    assert "Could not load persisted finance state" in caplog.text


def test_load_accepts_well_formed_entries():
    payload = json.dumps({"transactions": [_STORED_TXN], "goals": [_STORED_GOAL]})
    store = FinanceStore(MemoryPersistence(payload), clock=lambda: NOW)

    state = store.load()

    assert state.transactions[0].amount == Decimal("12.50")
    assert state.goals[0].current_amount == Decimal("100")


def test_partial_state_keeps_default_sections():
    state = state_from_json(json.dumps({"transactions": []}))
    assert state.categories == DEFAULT_CATEGORIES
    assert state.alerts.monthly_limit == Decimal("0")


def test_reduce_is_pure():
    state = FinanceState()
    category = Category(name="Pets", kind=CategoryKind.EXPENSE)

    new_state = reduce(state, AddCategory(category))

    assert category not in state.categories
    assert new_state.categories[-1] == category


def test_reduce_ignores_unknown_actions():
    state = FinanceState()
    assert reduce(state, object()) is state


def test_json_file_persistence(tmp_path):
    path = tmp_path / "state" / "finance.json"
    persistence = JsonFilePersistence(path)
    assert persistence.load() is None

    store = FinanceStore(persistence, clock=lambda: NOW)
    store.add_transaction("expense", Decimal("5"), "Coffee", "Food", date(2024, 1, 3))

    assert path.exists()
    assert state_to_json(store.state) == path.read_text(encoding="utf-8")
