"""Process-wide service clients.

Tạo một lần khi startup, lưu trên `app.state`, inject vào handler qua dependency.
Mỗi uvicorn worker có một bộ client riêng.
"""

import logging

from fastapi import FastAPI, Request

from infra.services import RunnerClient

from .db import Base, make_engine, make_session_factory
from .settings import (
    DATABASE_URL,
    DB_CREATE_TABLES,
    RUNNER_FILE_NAME,
    RUNNER_MAX_RETRIES,
    RUNNER_RETRY_DELAY_SECONDS,
    RUNNER_TIMEOUT_SECONDS,
    RUNNER_URL,
)

logger = logging.getLogger(__name__)


def init_state(app: FastAPI) -> None:
    engine = make_engine(DATABASE_URL)
    if DB_CREATE_TABLES:
        import domain.models  # noqa: F401  (register tables on Base.metadata)

        Base.metadata.create_all(bind=engine)
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.runner = RunnerClient(
        RUNNER_URL,
        timeout=RUNNER_TIMEOUT_SECONDS,
        max_retries=RUNNER_MAX_RETRIES,
        retry_delay=RUNNER_RETRY_DELAY_SECONDS,
        file_name=RUNNER_FILE_NAME,
    )
    logger.info("Service clients initialized")


def close_state(app: FastAPI) -> None:
    runner = getattr(app.state, "runner", None)
    if runner is not None:
        runner.close()
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        engine.dispose()
    logger.info("Service clients closed")


def get_runner(request: Request) -> RunnerClient:
    return request.app.state.runner
