"""Submission grading workflow.

One routine shared by every grading endpoint (run, submit, admin impersonation):

1. Load the question's test cases (ordered by `order`); none -> `NoTestCasesError`.
2. `quick` keeps only the first test case.
3. Run each selected test case through the remote runner, one at a time.
4. Compare trimmed stdout with trimmed expected output.
5. Aggregate, persist one append-only submission, return the response payload.

Runner failures are recorded on the failing test case and grading continues.
Nothing is written unless every step before persistence succeeded.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from app.settings import MAX_STORED_CODE_CHARS, MAX_STORED_OUTPUT_CHARS
from domain.models import TestCase
from infra.services.runner_client import RunnerClient, RunnerError
from infra.utils.truncate import truncate

from .errors import NoTestCasesError
from .schemas import ExecutionResult, GradeRequest, GradeResponse, IndexedExecutionResult, TestSummary
from .store import SubmissionStore, TestCaseStore

logger = logging.getLogger(__name__)

STATUS_CORRECT = "correct"
STATUS_INCORRECT = "incorrect"


@dataclass(frozen=True)
class Grader:
    """Who triggered the grading and on whose behalf it is recorded."""
    caller_id: str
    target_user_id: Optional[str] = None

    @property
    def graded_user_id(self) -> str:
        return self.target_user_id or self.caller_id

    @property
    def is_impersonation(self) -> bool:
        return self.target_user_id is not None


def select_test_cases(test_cases: Sequence[TestCase], quick: bool) -> List[TestCase]:
    ordered = list(test_cases)
    return ordered[:1] if quick else ordered


def outputs_match(actual: Optional[str], expected: Optional[str]) -> bool:
    """Strict equality after trimming surrounding whitespace.

    Expected output rỗng thì không bao giờ pass, kể cả khi stdout cũng rỗng.
    """
    expected_trim = (expected or "").strip()
    if expected_trim == "":
        return False
    return (actual or "").strip() == expected_trim


def run_test_case(runner: RunnerClient, req: GradeRequest, tc: TestCase) -> ExecutionResult:
    stdin = tc.input if tc.input is not None else req.stdin
    try:
        out = runner.execute(req.language, req.code, stdin=stdin, version=tc.runner_version)
    except RunnerError as e:
        return ExecutionResult(stdout=None, stderr=None, passed=False, error=str(e))

    actual = out.stdout.strip()
    return ExecutionResult(
        stdout=truncate(actual, MAX_STORED_OUTPUT_CHARS),
        stderr=truncate(out.stderr or "", MAX_STORED_OUTPUT_CHARS),
        passed=outputs_match(actual, tc.expected_output),
        error=None,
    )


def aggregate(results: Sequence[ExecutionResult]) -> TestSummary:
    passed_count = sum(1 for r in results if r.passed)
    return TestSummary(passed_count=passed_count, total=len(results))


def verdict(summary: TestSummary) -> str:
    if summary.total > 0 and summary.passed_count == summary.total:
        return STATUS_CORRECT
    return STATUS_INCORRECT


def grade(
    req: GradeRequest,
    grader: Grader,
    test_cases: TestCaseStore,
    submissions: SubmissionStore,
    runner: RunnerClient,
) -> GradeResponse:
    tcs = test_cases.list_test_cases(req.contest_id, req.question_id)
    if not tcs:
        logger.warning(f"No testcases found for contest={req.contest_id} question={req.question_id}")
        raise NoTestCasesError(req.contest_id, req.question_id)

    selected = select_test_cases(tcs, req.quick)
    results: List[ExecutionResult] = [run_test_case(runner, req, tc) for tc in selected]

    summary = aggregate(results)
    status = verdict(summary)

    record = {
        "contest_id": req.contest_id,
        "question_id": req.question_id,
        "user_id": grader.graded_user_id,
        "code": truncate(req.code, MAX_STORED_CODE_CHARS),
        "language": req.language,
        "status": status,
        "passed_count": summary.passed_count,
        "total": summary.total,
        "results": [r.model_dump() for r in results],
        "quick": req.quick,
        "triggered_by": grader.caller_id,
        "created_by_admin": grader.caller_id if grader.is_impersonation else None,
    }
    submission_id = submissions.create_submission(record)

    logger.info(
        f"Submission saved id={submission_id} user={grader.graded_user_id} "
        f"status={status} passed={summary.passed_count}/{summary.total}"
    )

    return GradeResponse(
        submission_id=submission_id,
        status=status,
        test_summary=summary,
        outputs=[IndexedExecutionResult(index=i, **r.model_dump()) for i, r in enumerate(results)],
    )


__all__ = [
    "Grader",
    "grade",
    "select_test_cases",
    "outputs_match",
    "aggregate",
    "verdict",
    "STATUS_CORRECT",
    "STATUS_INCORRECT",
]
