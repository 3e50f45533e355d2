import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class RunnerError(Exception):
    """Base class: the remote execution service could not give us a usable result."""


class RunnerHTTPError(RunnerError):
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Runner error {status_code}")


class RunnerTransportError(RunnerError):
    """Network-level failure (connect, timeout, reset)."""


class RunnerInvalidJSONError(RunnerError):
    def __init__(self):
        super().__init__("Runner returned invalid JSON")


class MalformedResponseError(RunnerError):
    """Response parsed as JSON but carries no stdout field we recognise."""


@dataclass(frozen=True)
class RunOutput:
    stdout: str
    stderr: Optional[str]
    exit_code: Optional[int] = None


def normalize_runner_response(body: Any) -> RunOutput:
    """Map the runner's JSON into a fixed `RunOutput`.

    Piston trả về `{"run": {"stdout", "stderr", "code", ...}}`, nhưng một số
    deployment trả stdout ở field `output` hoặc ở top-level. Mọi biến thể được
    xử lý tại đây để grading chỉ thấy một shape duy nhất.
    """
    if not isinstance(body, dict):
        raise MalformedResponseError("Runner response is not a JSON object")

    run = body.get("run")
    if not isinstance(run, dict):
        run = body

    if run.get("stdout") is not None:
        stdout = run["stdout"]
    elif run.get("output") is not None:
        stdout = run["output"]
    elif body.get("stdout") is not None:
        stdout = body["stdout"]
    else:
        raise MalformedResponseError("Runner response has no stdout/output field")

    stderr = run.get("stderr")
    if stderr is None:
        stderr = body.get("stderr")

    exit_code = run.get("code")
    if not isinstance(exit_code, int):
        exit_code = None

    return RunOutput(
        stdout=str(stdout),
        stderr=str(stderr) if stderr is not None else None,
        exit_code=exit_code,
    )


class RunnerClient:
    """Process-wide client for a Piston-compatible execution endpoint.

    Created once at startup and shared by every request; `close()` on shutdown.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        retry_delay: float = 0.5,
        file_name: str = "Main",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url
        self.max_retries = max(int(max_retries), 0)
        self.retry_delay = retry_delay
        self.file_name = file_name
        self._client = httpx.Client(timeout=timeout, transport=transport)
        logger.info(f"Using remote execution service at: {self.url}")

    def close(self) -> None:
        self._client.close()

    def build_payload(self, language: str, version: Optional[str], code: str, stdin: Optional[str]) -> Dict[str, Any]:
        return {
            "language": language,
            "version": version or "*",
            "files": [{"name": self.file_name, "content": code}],
            "stdin": stdin or "",
        }

    def execute(self, language: str, code: str, stdin: Optional[str] = None, version: Optional[str] = None) -> RunOutput:
        """Run `code` once and return its normalised output.

        Raises a `RunnerError` subclass on any failure; never returns partial data.
        """
        payload = self.build_payload(language, version, code, stdin)
        resp = self._post_with_backoff(payload)

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.error(f"Runner returned non-OK: {resp.status_code} {resp.text[:200]}")
            raise RunnerHTTPError(resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            logger.error(f"Failed to parse runner JSON: {e}")
            raise RunnerInvalidJSONError() from e

        return normalize_runner_response(body)

    def _post_with_backoff(self, payload: Dict[str, Any]) -> httpx.Response:
        delay = self.retry_delay
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self._client.post(self.url, json=payload)
            except httpx.TransportError as e:
                logger.warning(f"Runner call attempt {attempt} failed: {e}")
                if attempt == attempts:
                    logger.error("Runner call failed after retries")
                    raise RunnerTransportError(str(e) or e.__class__.__name__) from e
                if delay > 0:
                    time.sleep(delay)
                delay *= 2
            except httpx.HTTPError as e:
                # Lỗi đọc/giải mã response (vd. Content-Encoding sai): không retry.
                logger.error(f"Runner response could not be read: {e}")
                raise RunnerTransportError(str(e) or e.__class__.__name__) from e


__all__ = [
    "RunnerClient",
    "RunOutput",
    "RunnerError",
    "RunnerHTTPError",
    "RunnerTransportError",
    "RunnerInvalidJSONError",
    "MalformedResponseError",
    "normalize_runner_response",
]
