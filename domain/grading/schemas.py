"""Request/response schemas of the grading endpoints.

Wire format is camelCase (`contestId`, `testSummary`, ...); Python code uses snake_case.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GradeRequest(CamelModel):
    contest_id: str = Field(min_length=1)
    question_id: str = Field(min_length=1)
    language: str = Field(min_length=1)
    code: str = Field(min_length=1)
    quick: bool = False
    # Chỉ dùng khi testcase không có input.
    stdin: Optional[str] = None


class SubmitRequest(GradeRequest):
    target_user_id: Optional[str] = None


class ImpersonateRequest(GradeRequest):
    target_user_id: str = Field(min_length=1)


class ExecutionResult(CamelModel):
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    passed: bool = False
    error: Optional[str] = None


class IndexedExecutionResult(ExecutionResult):
    index: int


class TestSummary(CamelModel):
    passed_count: int
    total: int


class GradeResponse(CamelModel):
    submission_id: str
    status: str
    test_summary: TestSummary
    outputs: List[IndexedExecutionResult]


class ExecuteRequest(CamelModel):
    language: str = Field(min_length=1)
    code: str = Field(min_length=1)
    stdin: Optional[str] = None
    version: Optional[str] = None


class ExecuteResponse(CamelModel):
    stdout: str
    stderr: Optional[str] = None
    exit_code: Optional[int] = None
