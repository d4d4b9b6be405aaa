from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import coerce_instant, now_utc
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_REQUEST_LIST_LIMIT
from ..core.enums import AdjustmentStatus, PunchKind
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..punches.repository import PunchRepository
from ..users.authorization import ManagementAuthorization
from .model import AdjustmentRequest
from .repository import AdjustmentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    request: AdjustmentRequest
    punch_updated: bool = False


class AdjustmentService:
    """Approval workflow for punch corrections.

    PENDING -> APPROVED | REJECTED, decided once. Approving rewrites the target
    punch's instant when that punch still exists; monthly balances are not
    recomputed here and pick the change up on their next recompute.
    """

    def __init__(
        self,
        requests: AdjustmentRepository,
        punches: PunchRepository,
        authorization: ManagementAuthorization,
        *,
        tz: tzinfo,
    ):
        self._requests = requests
        self._punches = punches
        self._authorization = authorization
        self._tz = tz

    def submit(
        self,
        *,
        user_id: int,
        punch_id: Optional[int],
        proposed_instant: object,
        justification: str,
        kind: Optional[PunchKind] = None,
        now: datetime | None = None,
    ) -> AdjustmentRequest:
        justification = require_non_empty(justification, "Justification")
        instant = coerce_instant(proposed_instant, self._tz)

        if punch_id is not None:
            punch = self._punches.get_by_id(int(punch_id))
            if not punch:
                raise NotFoundError("Punch does not exist")
            if punch.user_id != int(user_id):
                raise AuthorizationError("You can only correct your own punches")
            kind = punch.kind
        elif kind is None:
            raise ValidationError("Punch kind is required when no punch is referenced")

        req = self._requests.create(
            user_id=int(user_id),
            punch_id=int(punch_id) if punch_id is not None else None,
            proposed_instant=instant,
            kind=kind,
            justification=justification,
            now=now or now_utc(),
        )
        logger.info("Adjustment %s submitted: user=%s punch=%s", req.request_id, req.user_id, req.punch_id)
        return req

    def decide(
        self,
        *,
        reviewer_id: int,
        request_id: int,
        outcome: AdjustmentStatus,
        reviewer_justification: Optional[str] = None,
        now: datetime | None = None,
    ) -> Decision:
        if not outcome.is_terminal:
            raise ValidationError("Outcome must be approved or rejected")

        note = optional_text(reviewer_justification, "Reviewer justification")
        if outcome is AdjustmentStatus.REJECTED and not note:
            raise ValidationError("A justification is required to reject a request")

        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise NotFoundError("Request does not exist")
        if req.status is not AdjustmentStatus.PENDING:
            raise ConflictError("Request has already been decided")
        if not self._authorization.is_manager_of(int(reviewer_id), req.user_id):
            raise AuthorizationError("You are not allowed to review this request")

        decided_at = now or now_utc()
        decided = self._requests.decide(
            request_id=req.request_id,
            status=outcome,
            reviewer_id=int(reviewer_id),
            decided_at=decided_at,
            reviewer_justification=note,
        )
        if not decided:
            raise ConflictError("Request has already been decided")

        updated = replace(
            req,
            status=outcome,
            reviewer_id=int(reviewer_id),
            decided_at=decided_at,
            reviewer_justification=note,
            updated_at=decided_at,
        )
        logger.info("Adjustment %s %s by reviewer=%s", req.request_id, outcome.value, reviewer_id)

        if outcome is AdjustmentStatus.APPROVED:
            return Decision(request=updated, punch_updated=self._apply(updated))
        return Decision(request=updated)

    def _apply(self, req: AdjustmentRequest) -> bool:
        if req.punch_id is None or not self._punches.get_by_id(req.punch_id):
            logger.warning("Adjustment %s approved but punch %s no longer exists", req.request_id, req.punch_id)
            return False

        try:
            ok = self._punches.update_instant(punch_id=req.punch_id, instant=req.proposed_instant)
        except Exception:
            # put the request back in the queue so the approval can be retried
            logger.exception("Punch %s rewrite failed, reopening adjustment %s", req.punch_id, req.request_id)
            self._requests.reopen(request_id=req.request_id, reviewer_id=int(req.reviewer_id))
            raise
        if not ok:
            logger.warning("Adjustment %s approved but punch %s vanished before update", req.request_id, req.punch_id)
            return False

        logger.info("Punch %s moved to %s", req.punch_id, req.proposed_instant.isoformat())
        return True

    def approve(self, *, reviewer_id: int, request_id: int, reviewer_justification: str = "") -> Decision:
        return self.decide(
            reviewer_id=reviewer_id,
            request_id=request_id,
            outcome=AdjustmentStatus.APPROVED,
            reviewer_justification=reviewer_justification,
        )

    def reject(self, *, reviewer_id: int, request_id: int, reviewer_justification: str = "") -> Decision:
        return self.decide(
            reviewer_id=reviewer_id,
            request_id=request_id,
            outcome=AdjustmentStatus.REJECTED,
            reviewer_justification=reviewer_justification,
        )

    def list_mine(self, *, user_id: int, limit: int = DEFAULT_REQUEST_LIST_LIMIT) -> Sequence[AdjustmentRequest]:
        return self._requests.list_requests(user_id=int(user_id), limit=int(limit))

    def list_pending_for_reviewer(
        self,
        *,
        reviewer_id: int,
        limit: int = DEFAULT_REQUEST_LIST_LIMIT,
    ) -> Sequence[AdjustmentRequest]:
        pending = self._requests.list_requests(
            status=AdjustmentStatus.PENDING,
            exclude_user_id=int(reviewer_id),
            limit=None,
        )
        mine = [r for r in pending if self._authorization.is_manager_of(int(reviewer_id), r.user_id)]
        return mine[: int(limit)]
