from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from ..notifications.notifier import LeaveNotifier, NullLeaveNotifier
from ..users.model import User
from ..users.repository import UserRepository
from .evaluator import LeaveRequestEvaluator, parse_decision
from .model import LeaveRequest, StatusChange
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        users: UserRepository,
        *,
        evaluator: Optional[LeaveRequestEvaluator] = None,
        notifier: Optional[LeaveNotifier] = None,
    ):
        self._leaves = leaves
        self._users = users
        self._evaluator = evaluator or LeaveRequestEvaluator()
        self._notifier = notifier or NullLeaveNotifier()

    def _get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _get_request(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Leave not found")
        return req

    def _persist(self, change: StatusChange, owner: User) -> None:
        req = change.request
        ok = self._leaves.apply_status_change(
            request_id=int(req.request_id),
            user_id=owner.user_id,
            status=req.status,
            balance_delta=change.balance_delta,
        )
        if not ok:
            raise InvalidStateError("Leave request was already processed")

    def apply(
        self,
        *,
        current_role: Role,
        user_id: int,
        leave_type: str,
        start_date,
        end_date,
        reason: str = "",
    ) -> LeaveRequest:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can apply for leave")

        user = self._get_user(user_id)
        existing = self._leaves.list_for_user(user.user_id)
        logger.debug("Leave balance check: user_id=%s has %s days", user.user_id, user.leave_balance)

        new_request = self._evaluator.evaluate_new_request(
            user,
            existing,
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
        )
        request_id = self._leaves.create(new_request)
        logger.info(
            "Leave applied: request_id=%s user_id=%s days=%s", request_id, user.user_id, new_request.total_days
        )
        return self._leaves.get_by_id(request_id) or new_request

    def list_mine(self, *, user_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_user(int(user_id))

    def list_all(self, *, current_role: Role, status: Optional[str] = None) -> Sequence[dict]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Not authorized as an admin")
        status_filter = None
        if status:
            try:
                status_filter = LeaveStatus(status)
            except ValueError:
                raise ValidationError("Invalid status")
        return self._leaves.list_with_owner(status=status_filter, limit=DEFAULT_LIST_LIMIT)

    def decide(self, *, current_role: Role, request_id: int, decision: str) -> StatusChange:
        """Admin approval/rejection; approval also decrements the owner's balance."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Not authorized as an admin")

        decision = parse_decision(decision)
        if decision not in {LeaveStatus.APPROVED, LeaveStatus.REJECTED}:
            raise ValidationError("Invalid status")

        req = self._get_request(request_id)
        owner = self._get_user(req.user_id)
        change = self._evaluator.evaluate_status_change(req, decision, owner)
        self._persist(change, owner)
        logger.info(
            "Leave decided: request_id=%s status=%s remaining_balance=%s",
            req.request_id,
            change.request.status.value,
            change.remaining_balance,
        )

        remaining = change.remaining_balance if change.request.status == LeaveStatus.APPROVED else None
        try:
            self._notifier.notify_status_change(owner, change.request, remaining)
        except Exception:
            # The decision is already committed; a notifier bug must not surface as a failure.
            logger.exception("Leave notification failed for request_id=%s", req.request_id)
        return change

    def cancel(self, *, user_id: int, request_id: int) -> LeaveRequest:
        req = self._get_request(request_id)
        if req.user_id != int(user_id):
            raise AuthorizationError("Not authorized")
        if req.status != LeaveStatus.PENDING:
            raise InvalidStateError("Only pending requests can be cancelled")

        owner = self._get_user(user_id)
        change = self._evaluator.evaluate_status_change(req, LeaveStatus.CANCELLED, owner)
        self._persist(change, owner)
        logger.info("Leave cancelled: request_id=%s user_id=%s", req.request_id, owner.user_id)
        return change.request
