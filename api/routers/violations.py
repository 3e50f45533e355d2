"""Violations Router - ghi nhận sự kiện proctoring do trang contest gửi lên.

Endpoints:
- POST /violation - Lưu một sự kiện (đổi tab, mất focus, ...)

Auth là tùy chọn: nếu token hợp lệ thì dùng uid trong token, nếu không thì dùng `userId` trong body.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Request
from pydantic import Field
from sqlalchemy.orm import Session

from app.auth import get_user_id_from_authorization_header
from app.db import get_db
from domain.grading.schemas import CamelModel
from domain.models import ContestViolation

router = APIRouter(tags=["violations"])

logger = logging.getLogger(__name__)


class ViolationRequest(CamelModel):
    contest_id: Optional[str] = None
    user_id: Optional[str] = None
    tab_id: Optional[str] = None
    type: str = "unknown"
    detail: Optional[Any] = None
    # Client timestamp (epoch milliseconds hoặc ISO string)
    ts: Optional[Any] = Field(default=None)


def _utc_naive(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_client_ts(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            logger.warning(f"Out-of-range client ts: {value!r}")
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return _utc_naive(parsed) if parsed.tzinfo else parsed
        except ValueError:
            logger.warning(f"Unparseable client ts: {value!r}")
    return datetime.now(timezone.utc).replace(tzinfo=None)


@router.post("/violation")
def report_violation(
    req: ViolationRequest,
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None),
):
    uid = get_user_id_from_authorization_header(authorization)

    record = ContestViolation(
        contest_id=req.contest_id,
        user_id=uid or req.user_id,
        tab_id=req.tab_id,
        type=req.type or "unknown",
        detail=req.detail,
        client_ts=_parse_client_ts(req.ts),
        ip=request.headers.get("x-forwarded-for"),
    )
    db.add(record)
    db.commit()

    logger.info(f"Violation recorded contest={req.contest_id} user={record.user_id} type={record.type}")
    return {"ok": True}


__all__ = ["router"]
