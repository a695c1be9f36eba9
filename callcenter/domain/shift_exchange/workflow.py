"""
Dual-approval state machine for shift exchange requests.

A request starts ``pending``. The target user and an administrator each
approve independently; once both have, it becomes ``approved`` and the two
shifts are swapped. The target user or an admin may reject, the requester may
cancel. Rejecting or cancelling clears both approvals.
"""

from dataclasses import dataclass, field
from typing import Optional

from ...models import ShiftExchangeRequest

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
CANCELLED = "cancelled"

DECISIONS = (APPROVED, REJECTED, CANCELLED)


class TransitionError(Exception):
    """Raised when an actor may not move a request to the requested status"""

    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class Transition:
    updates: dict = field(default_factory=dict)
    swap_shifts: bool = False
    notify_admin: bool = False


def decide(
    request: ShiftExchangeRequest, actor_id: str, actor_is_admin: bool, status: str
) -> Transition:
    """Compute the field updates for ``actor`` moving ``request`` to ``status``"""
    if status not in DECISIONS:
        raise TransitionError(f"Unknown status: {status}", status_code=400)
    if request.status != PENDING:
        raise TransitionError("Request is no longer pending", status_code=409)

    is_target = request.target_user_id == actor_id
    is_requester = request.requester_id == actor_id

    if status == APPROVED:
        if not (is_target or actor_is_admin):
            raise TransitionError("Only the target user or an administrator can approve")

        user_approved = True if is_target else bool(request.user_approved)
        admin_approved = True if actor_is_admin else bool(request.admin_approved)

        updates = {}
        if is_target:
            updates["user_approved"] = True
        if actor_is_admin:
            updates["admin_approved"] = True

        if user_approved and admin_approved:
            updates["status"] = APPROVED
            return Transition(updates=updates, swap_shifts=True)

        updates["status"] = PENDING
        notify = is_target and not admin_approved and not request.admin_notified
        if notify:
            updates["admin_notified"] = True
        return Transition(updates=updates, notify_admin=notify)

    if status == REJECTED and not (is_target or actor_is_admin):
        raise TransitionError("Only the target user or an administrator can reject")
    if status == CANCELLED and not is_requester:
        raise TransitionError("Only the requester can cancel")

    return Transition(updates={"status": status, "user_approved": False, "admin_approved": False})


def approval_summary(request: ShiftExchangeRequest) -> str:
    """Human readable approval state"""
    if request.status == APPROVED:
        return "Fully approved"

    approvals: list[str] = []
    if request.user_approved:
        approvals.append("user")
    if request.admin_approved:
        approvals.append("administrator")

    if not approvals:
        return "Awaiting approval"
    return f"Approved by: {', '.join(approvals)}"


def snapshot(entry: Optional[dict]) -> Optional[dict]:
    if entry is None:
        return None
    return {"date": entry.get("date"), "start": entry.get("start", ""), "end": entry.get("end", "")}
