import json
from typing import Dict, List, Optional, Sequence, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token
from app.db import Base, get_db
from app.main import app
from app.state import get_runner
from domain.models import Contest, Question, Submission, TestCase
from infra.services.runner_client import RunnerClient

RUNNER_URL = "http://runner.test/api/v2/piston/execute"

SUM_CODE = "print(sum(map(int, input().split())))"
ZERO_CODE = "print(0)"
ECHO_CODE = "import sys; print(sys.stdin.read())"


class FakeRunner:
    """Stand-in for a Piston server, driven through httpx.MockTransport."""

    def __init__(self):
        self.calls: List[Dict] = []
        # stdin -> HTTP status to answer with instead of running
        self.fail_status: Dict[str, int] = {}
        # stdin -> raw JSON body to answer with
        self.raw_body: Dict[str, object] = {}
        # stdins whose connection always fails
        self.unreachable: set = set()
        # stdins answered with a body that claims gzip but is not
        self.corrupt_encoding: set = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append(payload)
        stdin = payload["stdin"]

        if stdin in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if stdin in self.corrupt_encoding:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")
        if stdin in self.fail_status:
            return httpx.Response(self.fail_status[stdin], text="runner exploded")
        if stdin in self.raw_body:
            return httpx.Response(200, json=self.raw_body[stdin])

        code = payload["files"][0]["content"]
        return httpx.Response(
            200,
            json={
                "language": payload["language"],
                "version": "3.10.0",
                "run": {"stdout": self._program(code, stdin), "stderr": "", "code": 0, "signal": None},
            },
        )

    @staticmethod
    def _program(code: str, stdin: str) -> str:
        if code == SUM_CODE:
            return f"{sum(int(x) for x in stdin.split())}\n"
        if code == ZERO_CODE:
            return "0\n"
        if code == ECHO_CODE:
            return stdin
        return ""


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def runner(fake_runner):
    client = RunnerClient(
        RUNNER_URL,
        max_retries=2,
        retry_delay=0,
        transport=httpx.MockTransport(fake_runner.handler),
    )
    yield client
    client.close()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, runner):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_runner] = lambda: runner
    yield TestClient(app)
    app.dependency_overrides.clear()


def seed_question(
    db,
    cases: Sequence[Tuple[Optional[str], Optional[str]]],
    contest_id: str = "c1",
    question_id: str = "q1",
    runner_version: Optional[str] = None,
) -> Question:
    """Insert a contest/question with test cases given as (input, expected_output) pairs."""
    contest = db.get(Contest, contest_id)
    if contest is None:
        contest = Contest(id=contest_id, name=f"Contest {contest_id}", duration_minutes=90, created_by="admin-1")
        db.add(contest)
    question = Question(id=question_id, contest_id=contest_id, title="Sum", description="Add numbers", level=1)
    db.add(question)
    for i, (inp, expected) in enumerate(cases):
        db.add(TestCase(question_id=question_id, order=i, input=inp, expected_output=expected, runner_version=runner_version))
    db.commit()
    return question


def count_submissions(session_factory) -> int:
    session = session_factory()
    try:
        return session.query(Submission).count()
    finally:
        session.close()


def bearer(sub: str, **claims) -> Dict[str, str]:
    token = create_access_token({"sub": sub, **claims})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    return bearer("user-1")


@pytest.fixture
def admin_headers():
    return bearer("admin-1", role="admin")
