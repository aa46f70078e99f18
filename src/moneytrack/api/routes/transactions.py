"""Transaction endpoints."""

from datetime import datetime
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Query, Response

from moneytrack.api.dependencies import (
    get_clock,
    get_transaction_service,
    parse_query_date,
)
from moneytrack.api.schemas import (
    SummaryOut,
    TransactionCreate,
    TransactionOut,
    TransactionUpdate,
)
from moneytrack.domain.aggregation import coerce_period
from moneytrack.domain.transaction import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _out(transactions) -> list[TransactionOut]:
    return [TransactionOut.from_entity(txn) for txn in transactions]


@router.get("", response_model=list[TransactionOut])
def list_transactions(
    user_id: int = Query(..., alias="userId"),
    txn_type: Optional[str] = Query(None, alias="type"),
    category: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    service: TransactionService = Depends(get_transaction_service),
):
    return _out(
        service.list_transactions(
            user_id,
            txn_type=txn_type,
            category=category,
            start_date=parse_query_date(start_date, "startDate"),
            end_date=parse_query_date(end_date, "endDate"),
        )
    )


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(
    payload: TransactionCreate,
    service: TransactionService = Depends(get_transaction_service),
):
    transaction_id = service.create_transaction(
        user_id=payload.user_id,
        txn_type=payload.type,
        amount=payload.amount,
        description=payload.description,
        category=payload.category,
        date=payload.date,
    )
    return TransactionOut.from_entity(service.require_transaction(transaction_id))


# Fixed paths are declared before /{transaction_id}
@router.get("/summary", response_model=SummaryOut)
def get_summary(
    user_id: int = Query(..., alias="userId"),
    period: str = "all",
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    service: TransactionService = Depends(get_transaction_service),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    resolved = coerce_period(period)
    summary = service.get_summary(
        user_id,
        period=resolved,
        now=clock(),
        start_date=parse_query_date(start_date, "startDate"),
        end_date=parse_query_date(end_date, "endDate"),
    )
    return SummaryOut.from_summary(summary, resolved.value)


@router.get("/category/{category}", response_model=list[TransactionOut])
def list_by_category(
    category: str,
    user_id: int = Query(..., alias="userId"),
    service: TransactionService = Depends(get_transaction_service),
):
    return _out(service.list_by_category(user_id, category))


@router.get("/type/{txn_type}", response_model=list[TransactionOut])
def list_by_type(
    txn_type: str,
    user_id: int = Query(..., alias="userId"),
    service: TransactionService = Depends(get_transaction_service),
):
    return _out(service.list_by_type(user_id, txn_type))


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(
    transaction_id: int, service: TransactionService = Depends(get_transaction_service)
):
    return TransactionOut.from_entity(service.require_transaction(transaction_id))


@router.put("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    service: TransactionService = Depends(get_transaction_service),
):
    txn = service.update_transaction(
        transaction_id,
        txn_type=payload.type,
        amount=payload.amount,
        description=payload.description,
        category=payload.category,
        date=payload.date,
    )
    return TransactionOut.from_entity(txn)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int, service: TransactionService = Depends(get_transaction_service)
):
    service.delete_transaction(transaction_id)
    return Response(status_code=204)


def register_routes(app):
    """Register transaction routes with the API app."""
    app.include_router(router)
