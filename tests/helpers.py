"""Test doubles shared across the suite."""

from collections.abc import Callable
from typing import Any

import httpx

from gemini_rest.transport import GeminiTransport

TEST_API_KEY = "test_api_key_12345_67890_abcdef_ghijkl"
TEST_BASE_URL = "https://generativelanguage.test/v1beta"


def operation_report(
    state: str | None = None,
    *,
    done: bool = False,
    error: dict[str, Any] | None = None,
    responses: list[dict[str, Any]] | None = None,
    stats: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Raw ``GET batches/...`` body (without ``name``)."""
    metadata: dict[str, Any] = {}
    if state is not None:
        metadata["state"] = state
    if stats is not None:
        metadata["batchStats"] = stats
    report: dict[str, Any] = {"metadata": metadata}
    if done:
        report["done"] = True
    if error is not None:
        report["error"] = error
    if responses is not None:
        report["response"] = {"inlinedResponses": {"inlinedResponses": responses}}
    return report


def text_response(text: str) -> dict[str, Any]:
    """Minimal ``generateContent`` body with one text candidate."""
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}
        ]
    }


class ScriptedBatchTransport:
    """``BatchTransport`` that replays canned reports.

    Each ``get_batch_operation`` pops the next report; the last one repeats.
    A report that is an exception instance is raised instead. Cancel and
    delete raise the queued errors in order, then succeed.
    """

    def __init__(
        self,
        reports: list[dict[str, Any] | Exception] | None = None,
        *,
        cancel_errors: list[Exception] | None = None,
        delete_errors: list[Exception] | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self.reports = list(reports or [operation_report("BATCH_STATE_PENDING")])
        self.cancel_errors = list(cancel_errors or [])
        self.delete_errors = list(delete_errors or [])
        self.on_cancel = on_cancel
        self.get_calls = 0
        self.cancel_calls = 0
        self.delete_calls = 0

    async def get_batch_operation(self, name: str) -> dict[str, Any]:
        self.get_calls += 1
        report = self.reports.pop(0) if len(self.reports) > 1 else self.reports[0]
        if isinstance(report, Exception):
            raise report
        return {"name": name, **report}

    async def cancel_batch_operation(self, name: str) -> None:  # noqa: ARG002
        self.cancel_calls += 1
        if self.cancel_errors:
            raise self.cancel_errors.pop(0)
        if self.on_cancel is not None:
            self.on_cancel()

    async def delete_batch_operation(self, name: str) -> None:  # noqa: ARG002
        self.delete_calls += 1
        if self.delete_errors:
            raise self.delete_errors.pop(0)


class RecordingHandler:
    """``httpx.MockTransport`` handler recording requests.

    Responses are matched on ``(method, path)``; unmatched requests get 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def add(
        self,
        method: str,
        path: str,
        response: httpx.Response | Callable[[httpx.Request], httpx.Response],
    ) -> None:
        if isinstance(response, httpx.Response):
            canned = response
            self.routes[(method, path)] = lambda _request: canned
        else:
            self.routes[(method, path)] = response

    def json(self, method: str, path: str, body: Any, status_code: int = 200) -> None:
        self.add(method, path, lambda _request: httpx.Response(status_code, json=body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                404, json={"error": {"code": 404, "message": "no route", "status": "NOT_FOUND"}}
            )
        return route(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_transport(handler: Callable[[httpx.Request], httpx.Response]) -> GeminiTransport:
    """Transport over an in-memory ``httpx.MockTransport``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiTransport(TEST_API_KEY, base_url=TEST_BASE_URL, http_client=client)
