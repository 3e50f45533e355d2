"""System/utility endpoints
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.auth import CurrentUser, get_current_user
from app.settings import (
	APP_TITLE,
	APP_VERSION,
	MAX_STORED_CODE_CHARS,
	MAX_STORED_OUTPUT_CHARS,
	RUNNER_MAX_RETRIES,
	RUNNER_TIMEOUT_SECONDS,
)
from app.state import get_runner
from domain.grading.schemas import ExecuteRequest, ExecuteResponse
from infra.services.runner_client import RunnerClient, RunnerError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return {"status": "healthy", "service": APP_TITLE, "version": APP_VERSION}


@router.get("/api/config")
async def get_config():
	return {
		"runner_timeout_seconds": RUNNER_TIMEOUT_SECONDS,
		"runner_max_retries": RUNNER_MAX_RETRIES,
		"max_code_chars": MAX_STORED_CODE_CHARS,
		"max_output_chars": MAX_STORED_OUTPUT_CHARS,
	}


@router.post("/execute", response_model=ExecuteResponse)
def execute_code(
	req: ExecuteRequest,
	runner: RunnerClient = Depends(get_runner),
	user: CurrentUser = Depends(get_current_user),
):
	"""Chạy thử code một lần (không chấm, không lưu submission)."""
	try:
		out = runner.execute(req.language, req.code, stdin=req.stdin, version=req.version)
	except RunnerError as e:
		logger.error(f"Execute failed for uid={user.uid}: {e}")
		raise HTTPException(status_code=502, detail=str(e))

	return ExecuteResponse(stdout=out.stdout, stderr=out.stderr, exit_code=out.exit_code)


__all__ = ["router"]
