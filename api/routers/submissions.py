"""
Submissions Router - Endpoint cho người dùng xem lịch sử bài nộp của mình.

Endpoints:
- GET /submissions - Lấy danh sách bài nộp (có phân trang, lọc)
- GET /submissions/{id} - Xem chi tiết bài nộp (code + kết quả)

Submission là append-only: không có endpoint sửa/xoá.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth import CurrentUser, get_current_user
from app.db import get_db
from domain.grading import SubmissionStore
from domain.grading.schemas import CamelModel, TestSummary

router = APIRouter(prefix="/submissions", tags=["submissions"])


class MySubmissionItem(CamelModel):
    id: str
    contest_id: str
    question_id: str
    language: str
    status: str
    test_summary: TestSummary
    quick: bool
    submitted_at: Optional[str]


class MySubmissionsResponse(CamelModel):
    total: int
    skip: int
    limit: int
    items: List[MySubmissionItem]


class MySubmissionDetail(MySubmissionItem):
    code: str
    results: Optional[Any] = None
    triggered_by: str
    created_by_admin: Optional[str] = None


def _item_fields(sub) -> dict:
    return {
        "id": sub.id,
        "contest_id": sub.contest_id,
        "question_id": sub.question_id,
        "language": sub.language,
        "status": sub.status,
        "test_summary": TestSummary(passed_count=sub.passed_count, total=sub.total),
        "quick": bool(sub.quick),
        "submitted_at": sub.submitted_at.isoformat() if sub.submitted_at else None,
    }


@router.get("/", response_model=MySubmissionsResponse)
def list_my_submissions(
    skip: int = 0,
    limit: int = 50,
    contest_id: Optional[str] = None,
    question_id: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    skip = max(skip, 0)
    limit = max(min(limit, 200), 1)

    total, rows = SubmissionStore(db).list_for_user(
        user.uid,
        skip=skip,
        limit=limit,
        contest_id=contest_id,
        question_id=question_id,
        status=status,
    )

    items = [MySubmissionItem(**_item_fields(sub)) for sub in rows]
    return MySubmissionsResponse(total=total, skip=skip, limit=limit, items=items)


@router.get("/{submission_id}", response_model=MySubmissionDetail)
def get_my_submission(
    submission_id: str,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    sub = SubmissionStore(db).get_for_user(submission_id, user.uid)
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")

    return MySubmissionDetail(
        **_item_fields(sub),
        code=sub.code,
        results=sub.results,
        triggered_by=sub.triggered_by,
        created_by_admin=sub.created_by_admin,
    )


__all__ = ["router"]
