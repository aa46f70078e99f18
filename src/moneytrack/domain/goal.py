"""Goal progress logic and goal domain service."""

import logging
import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Optional

from moneytrack.database.base import Database
from moneytrack.domain.aggregation import HUNDRED, percentage
from moneytrack.domain.entities import (
    ContributionResult,
    Goal,
    GoalProgress,
    GoalStatus,
)
from moneytrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    goal_not_found,
    user_not_found,
)
from moneytrack.domain.validation import (
    require_non_negative,
    require_positive,
    require_text,
)

logger = logging.getLogger(__name__)

URGENT_DAYS = 7
UPCOMING_DAYS = 30
MAX_CONTRIBUTION_ATTEMPTS = 5

_SECONDS_PER_DAY = 24 * 60 * 60


def clamp_amount(amount: Decimal, target: Decimal) -> Decimal:
    """Limit a goal amount to the target."""
    return min(target, amount)


def apply_contribution(goal: Goal, amount: Decimal) -> ContributionResult:
    """Add a positive amount to a goal without exceeding its target.

    ``completed_now`` is True only when this contribution moves the goal from
    below its target to at or above it.
    """
    amount = require_positive(amount, "amount")
    new_amount = clamp_amount(goal.current_amount + amount, goal.target_amount)
    completed_now = goal.current_amount < goal.target_amount <= new_amount
    updated = Goal(
        id=goal.id,
        user_id=goal.user_id,
        title=goal.title,
        target_amount=goal.target_amount,
        current_amount=new_amount,
        deadline=goal.deadline,
        created_at=goal.created_at,
        description=goal.description,
    )
    return ContributionResult(goal=updated, completed_now=completed_now)


def days_remaining(deadline: date, now: datetime) -> int:
    """Whole days until the deadline, rounded up; negative when overdue."""
    deadline_at = datetime.combine(deadline, time.min, tzinfo=now.tzinfo)
    delta = deadline_at - now
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def goal_percentage(goal: Goal) -> Decimal:
    """Raw progress percentage, not capped."""
    return percentage(goal.current_amount, goal.target_amount)


def classify_status(goal: Goal, now: datetime) -> GoalStatus:
    """Classify a goal as completed, overdue, urgent or active, in that order."""
    if goal_percentage(goal) >= HUNDRED:
        return GoalStatus.COMPLETED
    remaining = days_remaining(goal.deadline, now)
    if remaining < 0:
        return GoalStatus.OVERDUE
    if remaining <= URGENT_DAYS:
        return GoalStatus.URGENT
    return GoalStatus.ACTIVE


def goal_progress(goal: Goal, now: datetime) -> GoalProgress:
    """Build the progress snapshot of a goal at ``now``."""
    return GoalProgress(
        goal=goal,
        progress=min(goal_percentage(goal), HUNDRED),
        is_completed=goal.is_completed,
        days_remaining=days_remaining(goal.deadline, now),
        amount_remaining=max(goal.target_amount - goal.current_amount, Decimal("0")),
        status=classify_status(goal, now),
    )


class GoalService:
    """Service for managing savings goals."""

    def __init__(self, db: Database, clock: Optional[Callable[[], datetime]] = None):
        """Initialize goal service.

        Args:
            db: Database instance
            clock: Returns the reference time; defaults to datetime.now
        """
        self.db = db
        self.clock = clock or datetime.now

    def _require_future(self, deadline: date) -> None:
        if deadline is None:
            raise ValidationError("deadline is required")
        if deadline <= self.clock().date():
            raise ValidationError("deadline must be in the future")

    def create_goal(
        self,
        user_id: int,
        title: str,
        target_amount: Decimal,
        deadline: date,
        current_amount: Decimal = Decimal("0"),
        description: Optional[str] = None,
    ) -> int:
        """Create a goal.

        Args:
            user_id: Owner user ID
            title: Goal title
            target_amount: Positive target amount
            deadline: Deadline, strictly after today
            current_amount: Starting amount, clamped to the target
            description: Optional description

        Returns:
            Goal ID

        Raises:
            ValidationError: If a field is missing or invalid
            NotFoundError: If the user doesn't exist
        """
        title = require_text(title, "title")
        target_amount = require_positive(target_amount, "target_amount")
        current_amount = require_non_negative(current_amount or 0, "current_amount")
        self._require_future(deadline)

        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        return self.db.create_goal(
            user_id=user_id,
            title=title,
            target_amount=target_amount,
            current_amount=clamp_amount(current_amount, target_amount),
            deadline=deadline,
            description=description,
        )

    def get_goal(self, goal_id: int) -> Optional[Goal]:
        """Get goal by ID, or None if not found."""
        return self.db.get_goal(goal_id)

    def require_goal(self, goal_id: int) -> Goal:
        """Get goal by ID.

        Raises:
            NotFoundError: If the goal doesn't exist
        """
        goal = self.db.get_goal(goal_id)
        if goal is None:
            raise NotFoundError(goal_not_found(goal_id))
        return goal

    def list_goals(self, user_id: int) -> list[Goal]:
        """List a user's goals ordered by deadline."""
        return self.db.list_goals(user_id)

    def update_goal(
        self,
        goal_id: int,
        title: Optional[str] = None,
        target_amount: Optional[Decimal] = None,
        current_amount: Optional[Decimal] = None,
        deadline: Optional[date] = None,
        description: Optional[str] = None,
    ) -> Goal:
        """Update goal fields that are provided.

        The stored current amount is clamped to the (possibly new) target.

        Raises:
            NotFoundError: If the goal doesn't exist
            ValidationError: If a provided field is invalid
        """
        existing = self.require_goal(goal_id)

        if title is not None:
            title = require_text(title, "title")
        if target_amount is not None:
            target_amount = require_positive(target_amount, "target_amount")
        if current_amount is not None:
            current_amount = require_non_negative(current_amount, "current_amount")
        if deadline is not None:
            self._require_future(deadline)

        effective_target = target_amount if target_amount is not None else existing.target_amount
        effective_current = (
            current_amount if current_amount is not None else existing.current_amount
        )
        if target_amount is not None or current_amount is not None:
            current_amount = clamp_amount(effective_current, effective_target)

        self.db.update_goal(
            goal_id,
            title=title,
            target_amount=target_amount,
            current_amount=current_amount,
            deadline=deadline,
            description=description,
        )
        return self.require_goal(goal_id)

    def delete_goal(self, goal_id: int) -> None:
        """Delete a goal.

        Raises:
            NotFoundError: If the goal doesn't exist
        """
        self.require_goal(goal_id)
        self.db.delete_goal(goal_id)

    def contribute(self, goal_id: int, amount: Decimal) -> ContributionResult:
        """Add money to a goal with a compare-and-set on the stored amount.

        Concurrent contributions never overwrite each other: if the stored
        amount changed since it was read, the contribution is recomputed
        against the fresh value.

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If the goal doesn't exist
            ConflictError: If the goal kept changing for every attempt
        """
        amount = require_positive(amount, "amount")

        for attempt in range(1, MAX_CONTRIBUTION_ATTEMPTS + 1):
            goal = self.require_goal(goal_id)
            result = apply_contribution(goal, amount)
            if result.goal.current_amount == goal.current_amount:
                return ContributionResult(goal=goal, completed_now=False)
            if self.db.compare_and_set_goal_amount(
                goal_id, goal.current_amount, result.goal.current_amount
            ):
                if result.completed_now:
                    logger.info("Goal %s reached its target of %s", goal_id, goal.target_amount)
                return result
            logger.warning("Goal %s changed during contribution, retry %d", goal_id, attempt)

        raise ConflictError(f"Goal {goal_id} was modified concurrently, please retry")

    def set_progress(self, goal_id: int, amount: Decimal) -> ContributionResult:
        """Set a goal's current amount directly, clamped to the target.

        Raises:
            ValidationError: If amount is negative
            NotFoundError: If the goal doesn't exist
        """
        amount = require_non_negative(amount, "amount")
        goal = self.require_goal(goal_id)
        new_amount = clamp_amount(amount, goal.target_amount)
        self.db.update_goal(goal_id, current_amount=new_amount)
        completed_now = goal.current_amount < goal.target_amount <= new_amount
        return ContributionResult(goal=self.require_goal(goal_id), completed_now=completed_now)

    def get_progress(self, goal_id: int) -> GoalProgress:
        """Progress snapshot of a goal at the service clock's current time."""
        return goal_progress(self.require_goal(goal_id), self.clock())

    def list_progress(self, user_id: int) -> list[GoalProgress]:
        """Progress snapshots for all of a user's goals."""
        now = self.clock()
        return [goal_progress(goal, now) for goal in self.list_goals(user_id)]

    def upcoming_goals(self, user_id: int, days: int = UPCOMING_DAYS) -> list[Goal]:
        """Goals whose deadline falls between today and ``days`` from now."""
        if days < 0:
            raise ValidationError("days must be a non-negative number")
        today = self.clock().date()
        return self.db.list_goals(
            user_id, deadline_from=today, deadline_to=today + timedelta(days=days)
        )

    def completed_goals(self, user_id: int) -> list[Goal]:
        """Goals whose current amount reached the target."""
        return [goal for goal in self.list_goals(user_id) if goal.is_completed]
