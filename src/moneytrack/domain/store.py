"""Client-side finance state store.

State transitions are pure (``reduce(state, action) -> state``); the store
applies them and writes the whole state through a persistence port after
every change. Derived views (totals, balance, categories) are computed from
the current state with the store's clock.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Optional

from moneytrack.domain import aggregation
from moneytrack.domain.category import DEFAULT_CATEGORIES
from moneytrack.domain.entities import (
    Category,
    CategoryKind,
    CategoryTotal,
    ContributionResult,
    Goal,
    GoalProgress,
    Period,
    Transaction,
    TransactionType,
)
from moneytrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_exists,
    goal_not_found,
    transaction_not_found,
)
from moneytrack.domain.goal import apply_contribution, goal_progress
from moneytrack.domain.validation import (
    parse_category_kind,
    parse_transaction_type,
    require_positive,
    require_text,
    to_amount,
)

logger = logging.getLogger(__name__)

GOAL_COMPLETED = "goal_completed"
MONTHLY_LIMIT_EXCEEDED = "monthly_limit_exceeded"


class StatePersistence(ABC):
    """Read/write port for the serialized store state."""

    @abstractmethod
    def load(self) -> Optional[str]:
        """Return the saved payload, or None if nothing was saved."""
        pass

    @abstractmethod
    def save(self, payload: str) -> None:
        """Replace the saved payload."""
        pass


class MemoryPersistence(StatePersistence):
    """Keeps the payload in memory."""

    def __init__(self, payload: Optional[str] = None):
        self.payload = payload
        self.writes = 0

    def load(self) -> Optional[str]:
        return self.payload

    def save(self, payload: str) -> None:
        self.payload = payload
        self.writes += 1


class JsonFilePersistence(StatePersistence):
    """Keeps the payload in a JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def save(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(self.path)


@dataclass(frozen=True)
class AlertSettings:
    """Monthly expense limit alert configuration."""

    monthly_limit: Decimal = Decimal("0")
    alert_enabled: bool = False


@dataclass(frozen=True)
class FinanceState:
    """Complete client state."""

    transactions: tuple[Transaction, ...] = ()
    goals: tuple[Goal, ...] = ()
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES
    alerts: AlertSettings = field(default_factory=AlertSettings)


@dataclass(frozen=True)
class StoreEvent:
    """Notification emitted by the store after a state change."""

    kind: str
    message: str
    payload: Any = None


# Actions

@dataclass(frozen=True)
class LoadData:
    state: FinanceState


@dataclass(frozen=True)
class AddTransaction:
    transaction: Transaction


@dataclass(frozen=True)
class DeleteTransaction:
    transaction_id: int


@dataclass(frozen=True)
class AddGoal:
    goal: Goal


@dataclass(frozen=True)
class UpdateGoal:
    goal: Goal


@dataclass(frozen=True)
class DeleteGoal:
    goal_id: int


@dataclass(frozen=True)
class UpdateAlerts:
    alerts: AlertSettings


@dataclass(frozen=True)
class AddCategory:
    category: Category


def reduce(state: FinanceState, action) -> FinanceState:
    """Return the state that results from applying ``action``.

    Unknown actions leave the state unchanged.
    """
    if isinstance(action, LoadData):
        return action.state
    if isinstance(action, AddTransaction):
        return replace(state, transactions=state.transactions + (action.transaction,))
    if isinstance(action, DeleteTransaction):
        return replace(
            state,
            transactions=tuple(t for t in state.transactions if t.id != action.transaction_id),
        )
    if isinstance(action, AddGoal):
        return replace(state, goals=state.goals + (action.goal,))
    if isinstance(action, UpdateGoal):
        return replace(
            state,
            goals=tuple(action.goal if g.id == action.goal.id else g for g in state.goals),
        )
    if isinstance(action, DeleteGoal):
        return replace(state, goals=tuple(g for g in state.goals if g.id != action.goal_id))
    if isinstance(action, UpdateAlerts):
        return replace(state, alerts=action.alerts)
    if isinstance(action, AddCategory):
        return replace(state, categories=state.categories + (action.category,))
    return state


# Serialization of the persisted JSON blob

def _decimal(value: Any, name: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid {name} in persisted state: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid {name} in persisted state: {value!r}")
    return amount


def _section(data: dict[str, Any], key: str, kind: type) -> Any:
    value = data[key]
    if not isinstance(value, kind):
        raise ValueError(f"Persisted '{key}' must be a JSON {'object' if kind is dict else 'array'}")
    return value


def _transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    return {
        "id": txn.id,
        "userId": txn.user_id,
        "type": txn.type.value,
        "amount": str(txn.amount),
        "description": txn.description,
        "category": txn.category,
        "date": txn.date.isoformat(),
        "createdAt": txn.created_at.isoformat(),
    }


def _transaction_from_dict(data: dict[str, Any]) -> Transaction:
    return Transaction(
        id=int(data["id"]),
        user_id=data.get("userId"),
        type=TransactionType(data["type"]),
        amount=_decimal(data["amount"], "amount"),
        description=data.get("description", ""),
        category=data["category"],
        date=date.fromisoformat(data["date"][:10]),
        created_at=datetime.fromisoformat(data["createdAt"]),
    )


def _goal_to_dict(goal: Goal) -> dict[str, Any]:
    return {
        "id": goal.id,
        "userId": goal.user_id,
        "title": goal.title,
        "targetAmount": str(goal.target_amount),
        "currentAmount": str(goal.current_amount),
        "deadline": goal.deadline.isoformat(),
        "description": goal.description,
        "createdAt": goal.created_at.isoformat(),
    }


def _goal_from_dict(data: dict[str, Any]) -> Goal:
    return Goal(
        id=int(data["id"]),
        user_id=data.get("userId"),
        title=data["title"],
        target_amount=_decimal(data["targetAmount"], "targetAmount"),
        current_amount=_decimal(data["currentAmount"], "currentAmount"),
        deadline=date.fromisoformat(data["deadline"][:10]),
        created_at=datetime.fromisoformat(data["createdAt"]),
        description=data.get("description"),
    )


def state_to_json(state: FinanceState) -> str:
    """Serialize the state as the persisted JSON blob."""
    return json.dumps(
        {
            "transactions": [_transaction_to_dict(t) for t in state.transactions],
            "goals": [_goal_to_dict(g) for g in state.goals],
            "categories": [{"name": c.name, "kind": c.kind.value} for c in state.categories],
            "alerts": {
                "monthlyLimit": str(state.alerts.monthly_limit),
                "alertEnabled": state.alerts.alert_enabled,
            },
        }
    )


def state_from_json(payload: str) -> FinanceState:
    """Parse the persisted JSON blob; missing sections keep their defaults.

    Raises:
        ValueError, KeyError, TypeError: If the payload is malformed
    """
    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError("Persisted state must be a JSON object")

    defaults = FinanceState()
    categories = defaults.categories
    if "categories" in data:
        categories = tuple(
            Category(name=c["name"], kind=CategoryKind(c["kind"]))
            for c in _section(data, "categories", list)
        )
    alerts = defaults.alerts
    if "alerts" in data:
        settings = _section(data, "alerts", dict)
        alerts = AlertSettings(
            monthly_limit=_decimal(settings.get("monthlyLimit", "0"), "monthlyLimit"),
            alert_enabled=bool(settings.get("alertEnabled", False)),
        )

    transactions = _section(data, "transactions", list) if "transactions" in data else []
    goals = _section(data, "goals", list) if "goals" in data else []
    return FinanceState(
        transactions=tuple(_transaction_from_dict(t) for t in transactions),
        goals=tuple(_goal_from_dict(g) for g in goals),
        categories=categories,
        alerts=alerts,
    )


class FinanceStore:
    """In-memory finance state with write-through persistence."""

    def __init__(
        self,
        persistence: StatePersistence,
        clock: Optional[Callable[[], datetime]] = None,
        user_id: Optional[int] = None,
    ):
        """Initialize the store with default state.

        Args:
            persistence: Where the serialized state is read and written
            clock: Returns the reference time; defaults to datetime.now
            user_id: Owner recorded on new transactions and goals
        """
        self.persistence = persistence
        self.clock = clock or datetime.now
        self.user_id = user_id
        self.state = FinanceState()
        self._listeners: list[Callable[[StoreEvent], None]] = []

    def subscribe(self, listener: Callable[[StoreEvent], None]) -> Callable[[], None]:
        """Register a listener for store events. Returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _emit(self, event: StoreEvent) -> None:
        logger.info("Store event %s: %s", event.kind, event.message)
        for listener in list(self._listeners):
            listener(event)

    def dispatch(self, action) -> FinanceState:
        """Apply an action and persist the resulting state."""
        self.state = reduce(self.state, action)
        self.persistence.save(state_to_json(self.state))
        return self.state

    def load(self) -> FinanceState:
        """Replace the state with the persisted one.

        Malformed persisted data is logged and the default state is kept.
        """
        payload = self.persistence.load()
        if payload is None:
            return self.state
        try:
            loaded = state_from_json(payload)
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Could not load persisted finance state: %s", e)
            return self.state
        return self.dispatch(LoadData(loaded))

    def _next_id(self, items) -> int:
        return max((item.id for item in items), default=0) + 1

    # Transactions
    def add_transaction(
        self,
        txn_type: TransactionType | str,
        amount: Decimal,
        description: str,
        category: str,
        txn_date: date,
    ) -> Transaction:
        """Record a transaction and check the monthly expense alert."""
        txn_type = parse_transaction_type(txn_type)
        amount = require_positive(amount, "amount")
        transaction = Transaction(
            id=self._next_id(self.state.transactions),
            user_id=self.user_id,
            type=txn_type,
            amount=amount,
            description=require_text(description, "description"),
            category=require_text(category, "category"),
            date=txn_date,
            created_at=self.clock(),
        )

        self.dispatch(AddTransaction(transaction))

        alerts = self.state.alerts
        if (
            alerts.alert_enabled
            and txn_type == TransactionType.EXPENSE
            and aggregation.matches_period(txn_date, Period.MONTH, self.clock())
        ):
            month_expenses = self.total_expenses(Period.MONTH)
            if month_expenses > alerts.monthly_limit:
                self._emit(
                    StoreEvent(
                        kind=MONTHLY_LIMIT_EXCEEDED,
                        message=(
                            "Monthly expense limit of "
                            f"${alerts.monthly_limit:,.2f} exceeded"
                        ),
                        payload=month_expenses,
                    )
                )
        return transaction

    def delete_transaction(self, transaction_id: int) -> None:
        if not any(t.id == transaction_id for t in self.state.transactions):
            raise NotFoundError(transaction_not_found(transaction_id))
        self.dispatch(DeleteTransaction(transaction_id))

    # Goals
    def add_goal(
        self,
        title: str,
        target_amount: Decimal,
        deadline: date,
        description: Optional[str] = None,
    ) -> Goal:
        """Create a goal with no saved amount yet."""
        if deadline <= self.clock().date():
            raise ValidationError("deadline must be in the future")
        goal = Goal(
            id=self._next_id(self.state.goals),
            user_id=self.user_id,
            title=require_text(title, "title"),
            target_amount=require_positive(target_amount, "target_amount"),
            current_amount=Decimal("0.00"),
            deadline=deadline,
            created_at=self.clock(),
            description=description,
        )
        self.dispatch(AddGoal(goal))
        return goal

    def _require_goal(self, goal_id: int) -> Goal:
        for goal in self.state.goals:
            if goal.id == goal_id:
                return goal
        raise NotFoundError(goal_not_found(goal_id))

    def contribute(self, goal_id: int, amount: Decimal) -> ContributionResult:
        """Add money to a goal, signalling completion once when it is reached."""
        result = apply_contribution(self._require_goal(goal_id), amount)
        self.dispatch(UpdateGoal(result.goal))
        if result.completed_now:
            self._emit(
                StoreEvent(
                    kind=GOAL_COMPLETED,
                    message=f"Goal '{result.goal.title}' reached",
                    payload=result.goal,
                )
            )
        return result

    def delete_goal(self, goal_id: int) -> None:
        self._require_goal(goal_id)
        self.dispatch(DeleteGoal(goal_id))

    def goal_progress(self) -> list[GoalProgress]:
        now = self.clock()
        return [goal_progress(goal, now) for goal in self.state.goals]

    # Settings
    def update_alerts(self, monthly_limit: Decimal, alert_enabled: bool) -> AlertSettings:
        limit = to_amount(monthly_limit, "monthly_limit")
        if limit < 0:
            raise ValidationError("monthly_limit must be a non-negative number")
        alerts = AlertSettings(monthly_limit=limit, alert_enabled=alert_enabled)
        self.dispatch(UpdateAlerts(alerts))
        return alerts

    def add_category(self, name: str, kind: CategoryKind | str) -> Category:
        name = require_text(name, "name")
        if any(c.name == name for c in self.state.categories):
            raise ConflictError(category_exists(name))
        category = Category(name=name, kind=parse_category_kind(kind))
        self.dispatch(AddCategory(category))
        return category

    def categories(self, kind: Optional[CategoryKind | str] = None) -> list[Category]:
        if kind is None:
            return list(self.state.categories)
        kind = parse_category_kind(kind)
        return [c for c in self.state.categories if c.kind == kind]

    # Derived views
    def total_income(self, period: Period | str = Period.ALL) -> Decimal:
        return aggregation.total_income(self.state.transactions, period, self.clock())

    def total_expenses(self, period: Period | str = Period.ALL) -> Decimal:
        return aggregation.total_expenses(self.state.transactions, period, self.clock())

    def balance(self, period: Period | str = Period.ALL) -> Decimal:
        return aggregation.balance(self.state.transactions, period, self.clock())

    def expenses_by_category(self, period: Period | str = Period.MONTH) -> list[CategoryTotal]:
        return aggregation.expenses_by_category(self.state.transactions, period, self.clock())

    def recent_transactions(self, limit: int = 5) -> list[Transaction]:
        return aggregation.recent_transactions(self.state.transactions, limit)
