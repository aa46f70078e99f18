"""Goal endpoints."""

from fastapi import APIRouter, Depends, Query, Response

from moneytrack.api.dependencies import get_goal_service
from moneytrack.api.schemas import (
    GoalCreate,
    GoalOut,
    GoalProgressOut,
    GoalUpdate,
    ProgressAmount,
)
from moneytrack.domain.goal import UPCOMING_DAYS, GoalService, goal_progress
from moneytrack.domain.entities import ContributionResult

router = APIRouter(prefix="/goals", tags=["goals"])


def _progress_out(service: GoalService, result: ContributionResult) -> GoalProgressOut:
    snapshot = goal_progress(result.goal, service.clock())
    return GoalProgressOut.from_progress(snapshot, just_completed=result.completed_now)


@router.get("", response_model=list[GoalProgressOut])
def list_goals(
    user_id: int = Query(..., alias="userId"),
    service: GoalService = Depends(get_goal_service),
):
    return [GoalProgressOut.from_progress(p) for p in service.list_progress(user_id)]


@router.post("", response_model=GoalOut, status_code=201)
def create_goal(payload: GoalCreate, service: GoalService = Depends(get_goal_service)):
    goal_id = service.create_goal(
        user_id=payload.user_id,
        title=payload.title,
        target_amount=payload.target_amount,
        deadline=payload.deadline,
        current_amount=payload.current_amount,
        description=payload.description,
    )
    return GoalOut.from_entity(service.require_goal(goal_id))


# Fixed paths are declared before /{goal_id}
@router.get("/upcoming", response_model=list[GoalOut])
def upcoming_goals(
    user_id: int = Query(..., alias="userId"),
    days: int = UPCOMING_DAYS,
    service: GoalService = Depends(get_goal_service),
):
    return [GoalOut.from_entity(goal) for goal in service.upcoming_goals(user_id, days)]


@router.get("/completed", response_model=list[GoalOut])
def completed_goals(
    user_id: int = Query(..., alias="userId"),
    service: GoalService = Depends(get_goal_service),
):
    return [GoalOut.from_entity(goal) for goal in service.completed_goals(user_id)]


@router.get("/{goal_id}", response_model=GoalOut)
def get_goal(goal_id: int, service: GoalService = Depends(get_goal_service)):
    return GoalOut.from_entity(service.require_goal(goal_id))


@router.put("/{goal_id}", response_model=GoalOut)
def update_goal(
    goal_id: int, payload: GoalUpdate, service: GoalService = Depends(get_goal_service)
):
    goal = service.update_goal(
        goal_id,
        title=payload.title,
        target_amount=payload.target_amount,
        current_amount=payload.current_amount,
        deadline=payload.deadline,
        description=payload.description,
    )
    return GoalOut.from_entity(goal)


@router.delete("/{goal_id}", status_code=204)
def delete_goal(goal_id: int, service: GoalService = Depends(get_goal_service)):
    service.delete_goal(goal_id)
    return Response(status_code=204)


@router.get("/{goal_id}/progress", response_model=GoalProgressOut)
def get_progress(goal_id: int, service: GoalService = Depends(get_goal_service)):
    return GoalProgressOut.from_progress(service.get_progress(goal_id))


@router.put("/{goal_id}/progress", response_model=GoalProgressOut)
def set_progress(
    goal_id: int, payload: ProgressAmount, service: GoalService = Depends(get_goal_service)
):
    return _progress_out(service, service.set_progress(goal_id, payload.amount))


@router.post("/{goal_id}/add-progress", response_model=GoalProgressOut)
def add_progress(
    goal_id: int, payload: ProgressAmount, service: GoalService = Depends(get_goal_service)
):
    return _progress_out(service, service.contribute(goal_id, payload.amount))


def register_routes(app):
    """Register goal routes with the API app."""
    app.include_router(router)
