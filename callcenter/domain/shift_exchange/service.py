"""Shift exchange service - Creating requests, approvals and the shift swap"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Profile, ShiftExchangeRequest
from ..profiles.repository import ProfileRepository
from ..profiles.schemas import ProfileSummary
from ..schedules import workdays
from . import workflow
from .repository import ShiftExchangeRepository
from .schemas import ShiftExchangeCreate, ShiftExchangeResponse

logger = logging.getLogger(__name__)


class ShiftExchangeService:
    """Service layer for shift exchange business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ShiftExchangeRepository()
        self.profiles = ProfileRepository()

    def list_requests(self, user: Profile) -> list[ShiftExchangeRequest]:
        """Admins see every request, everyone else only their own"""
        return self.repo.get_requests(self.db, participant_id=None if user.is_admin else user.id)

    def get_request(self, request_id: str, user: Profile) -> ShiftExchangeRequest:
        exchange = self.repo.get_request_by_id(self.db, request_id)
        if not exchange or not self._can_view(exchange, user):
            raise HTTPException(status_code=404, detail="Exchange request not found")
        return exchange

    def create_request(self, data: ShiftExchangeCreate, user: Profile) -> ShiftExchangeRequest:
        if not data.target_user_id or not data.requester_date or not data.target_date:
            raise HTTPException(status_code=400, detail="Please fill in all required fields")

        if data.target_user_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot exchange shifts with yourself")

        target = self.profiles.get_profile(self.db, data.target_user_id)
        if not target:
            raise HTTPException(status_code=404, detail="Target user not found")

        requester_shift = workdays.find_entry(user.work_schedule, data.requester_date.isoformat())
        if not requester_shift:
            raise HTTPException(
                status_code=400, detail="You don't have a shift scheduled for the selected date"
            )

        target_shift = workdays.find_entry(target.work_schedule, data.target_date.isoformat())
        if not target_shift:
            raise HTTPException(
                status_code=400,
                detail="Target user doesn't have a shift scheduled for the selected date",
            )

        try:
            exchange = self.repo.create_request(
                self.db,
                requester_id=user.id,
                target_user_id=target.id,
                requester_date=data.requester_date,
                target_date=data.target_date,
                requester_shift=workflow.snapshot(requester_shift),
                target_shift=workflow.snapshot(target_shift),
                message=data.message or None,
                status=workflow.PENDING,
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating exchange request: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create exchange request") from e

        logger.info(
            f"🔁 Exchange {exchange.id}: {user.id} ({data.requester_date}) <-> "
            f"{target.id} ({data.target_date})"
        )
        return exchange

    def decide(self, request_id: str, status: str, user: Profile) -> ShiftExchangeRequest:
        """Approve, reject or cancel; swaps the schedules once both approvals are in"""
        exchange = self.get_request(request_id, user)

        try:
            transition = workflow.decide(exchange, user.id, user.is_admin, status)
        except workflow.TransitionError as e:
            logger.warning(f"🚫 {user.id} cannot set exchange {request_id} to {status}: {e.message}")
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

        try:
            for key, value in transition.updates.items():
                setattr(exchange, key, value)
            if transition.swap_shifts:
                self._swap_shifts(exchange)
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error updating request status: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to update request status") from e

        if transition.notify_admin:
            logger.info(f"📣 Exchange {exchange.id} approved by target user, awaiting administrator")
        if transition.swap_shifts:
            logger.info(f"✅ Exchange {exchange.id} fully approved, shifts swapped")

        self.db.refresh(exchange)
        return exchange

    def to_responses(self, exchanges: list[ShiftExchangeRequest]) -> list[ShiftExchangeResponse]:
        """Attach participant name cards and the approval label"""
        ids = {e.requester_id for e in exchanges} | {e.target_user_id for e in exchanges}
        profiles = self.profiles.get_profiles_by_ids(self.db, ids)

        responses = []
        for exchange in exchanges:
            response = ShiftExchangeResponse.model_validate(exchange)
            requester = profiles.get(exchange.requester_id)
            target = profiles.get(exchange.target_user_id)
            response.requester_profile = ProfileSummary.model_validate(requester) if requester else None
            response.target_profile = ProfileSummary.model_validate(target) if target else None
            response.approval_status = workflow.approval_summary(exchange)
            responses.append(response)
        return responses

    def _swap_shifts(self, exchange: ShiftExchangeRequest) -> None:
        requester = self.profiles.get_profile(self.db, exchange.requester_id)
        target = self.profiles.get_profile(self.db, exchange.target_user_id)
        if not requester or not target:
            raise HTTPException(status_code=404, detail="Profile not found")

        requester.work_schedule = workdays.replace_entry(
            requester.work_schedule, exchange.requester_date.isoformat(), exchange.target_shift
        )
        target.work_schedule = workdays.replace_entry(
            target.work_schedule, exchange.target_date.isoformat(), exchange.requester_shift
        )

    @staticmethod
    def _can_view(exchange: ShiftExchangeRequest, user: Profile) -> bool:
        return user.is_admin or user.id in (exchange.requester_id, exchange.target_user_id)
