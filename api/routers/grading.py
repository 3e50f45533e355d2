"""Grading Router - chấm code của thí sinh với hidden test cases.

Endpoints:
- POST /run - Chấm và lưu submission cho chính caller (thường dùng `quick`)
- POST /submit - Như /run; nếu có `targetUserId` khác caller thì cần quyền admin
- POST /api/admin/impersonate - Admin chấm thay cho `targetUserId`

Cả ba endpoint dùng chung `domain.grading.grade`, chỉ khác chính sách phân quyền.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth import CurrentUser, get_current_admin_user, get_current_user, require_admin
from app.db import get_db
from app.state import get_runner
from domain.grading import Grader, NoTestCasesError, SubmissionStore, TestCaseStore, grade
from domain.grading.schemas import GradeRequest, GradeResponse, ImpersonateRequest, SubmitRequest
from infra.services import RunnerClient

router = APIRouter(tags=["grading"])

logger = logging.getLogger(__name__)


def _grade_or_raise(req: GradeRequest, grader: Grader, db: Session, runner: RunnerClient) -> GradeResponse:
    try:
        return grade(req, grader, TestCaseStore(db), SubmissionStore(db), runner)
    except NoTestCasesError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception(f"Unexpected grading error for caller={grader.caller_id}")
        raise HTTPException(status_code=500, detail="Server error")


@router.post("/run", response_model=GradeResponse)
def run_code(
    req: GradeRequest,
    db: Session = Depends(get_db),
    runner: RunnerClient = Depends(get_runner),
    user: CurrentUser = Depends(get_current_user),
):
    return _grade_or_raise(req, Grader(caller_id=user.uid), db, runner)


@router.post("/submit", response_model=GradeResponse)
def submit_code(
    req: SubmitRequest,
    db: Session = Depends(get_db),
    runner: RunnerClient = Depends(get_runner),
    user: CurrentUser = Depends(get_current_user),
):
    target = req.target_user_id
    if target and target != user.uid:
        require_admin(user)
        grader = Grader(caller_id=user.uid, target_user_id=target)
    else:
        grader = Grader(caller_id=user.uid)
    return _grade_or_raise(req, grader, db, runner)


@router.post("/api/admin/impersonate", response_model=GradeResponse)
def impersonate_submit(
    req: ImpersonateRequest,
    db: Session = Depends(get_db),
    runner: RunnerClient = Depends(get_runner),
    admin: CurrentUser = Depends(get_current_admin_user),
):
    if req.target_user_id == admin.uid:
        raise HTTPException(status_code=400, detail="targetUserId must differ from the caller")
    logger.info(f"Admin {admin.uid} grading on behalf of {req.target_user_id}")
    return _grade_or_raise(req, Grader(caller_id=admin.uid, target_user_id=req.target_user_id), db, runner)


__all__ = ["router"]
