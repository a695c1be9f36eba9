"""Shift exchange repository - Database operations for exchange requests"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import ShiftExchangeRequest


class ShiftExchangeRepository:
    """Repository for shift exchange database operations"""

    @staticmethod
    def get_requests(db: Session, participant_id: Optional[str] = None) -> list[ShiftExchangeRequest]:
        """Newest first; limited to one participant's requests when given"""
        query = db.query(ShiftExchangeRequest)
        if participant_id:
            query = query.filter(
                or_(
                    ShiftExchangeRequest.requester_id == participant_id,
                    ShiftExchangeRequest.target_user_id == participant_id,
                )
            )
        return query.order_by(
            ShiftExchangeRequest.created_at.desc(), ShiftExchangeRequest.id.desc()
        ).all()

    @staticmethod
    def get_request_by_id(db: Session, request_id: str) -> Optional[ShiftExchangeRequest]:
        return db.query(ShiftExchangeRequest).filter(ShiftExchangeRequest.id == request_id).first()

    @staticmethod
    def create_request(db: Session, **request_data) -> ShiftExchangeRequest:
        exchange = ShiftExchangeRequest(**request_data)
        db.add(exchange)
        db.commit()
        db.refresh(exchange)
        return exchange
