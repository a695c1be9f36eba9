"""Shift exchange router - FastAPI endpoints for exchange requests"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from .schemas import ShiftExchangeCreate, ShiftExchangeDecision, ShiftExchangeResponse
from .service import ShiftExchangeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shift-exchanges", tags=["Shift Exchange"])


def get_shift_exchange_service(db: Session = Depends(get_db)) -> ShiftExchangeService:
    """Dependency injection for ShiftExchangeService"""
    return ShiftExchangeService(db)


@router.get("", response_model=list[ShiftExchangeResponse])
async def get_exchange_requests(
    current_user: Profile = Depends(get_current_user),
    service: ShiftExchangeService = Depends(get_shift_exchange_service),
):
    """Requests the current user takes part in; every request for admins"""
    return service.to_responses(service.list_requests(current_user))


@router.post("", response_model=ShiftExchangeResponse, status_code=201)
async def create_exchange_request(
    data: ShiftExchangeCreate,
    current_user: Profile = Depends(get_current_user),
    service: ShiftExchangeService = Depends(get_shift_exchange_service),
):
    exchange = service.create_request(data, current_user)
    return service.to_responses([exchange])[0]


@router.get("/{request_id}", response_model=ShiftExchangeResponse)
async def get_exchange_request(
    request_id: str,
    current_user: Profile = Depends(get_current_user),
    service: ShiftExchangeService = Depends(get_shift_exchange_service),
):
    return service.to_responses([service.get_request(request_id, current_user)])[0]


@router.patch("/{request_id}", response_model=ShiftExchangeResponse)
async def update_exchange_status(
    request_id: str,
    data: ShiftExchangeDecision,
    current_user: Profile = Depends(get_current_user),
    service: ShiftExchangeService = Depends(get_shift_exchange_service),
):
    """Approve, reject or cancel a pending request"""
    exchange = service.decide(request_id, data.status, current_user)
    return service.to_responses([exchange])[0]
