"""HTTP transport for the Gemini REST API.

A single ``GeminiTransport`` owns (or borrows) one ``httpx.AsyncClient`` and
is shared by every builder and handle a client hands out. It knows how to
address the API, attach the key, map failures onto the exception hierarchy
and decode the server-sent-event framing used by streaming generation.

The transport never retries. Retry policy belongs to the caller.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable, Iterator
import json
import logging
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

import httpx

from .constants import (
    DEFAULT_BASE_URL,
    DOWNLOAD_PATH,
    MODEL_PREFIX,
    NETWORK_TIMEOUT,
    SSE_DATA_PREFIX,
    SSE_DONE_SENTINEL,
    UPLOAD_PATH,
)
from .exceptions import APIError, DecodeError, TransportError
from .telemetry import TelemetryContext, TelemetryContextProtocol

logger = logging.getLogger(__name__)


def normalize_model(model: str) -> str:
    """Return ``model`` with the ``models/`` prefix the API expects."""
    model = model.strip()
    if not model:
        raise ValueError("model name must not be empty")
    return model if model.startswith(MODEL_PREFIX) else f"{MODEL_PREFIX}{model}"


def redact_url(url: httpx.URL | str) -> str:
    """Render a URL for logging with the ``key`` parameter masked."""
    url = httpx.URL(str(url))
    if "key" in url.params:
        url = url.copy_set_param("key", "REDACTED")
    return str(url)


# --- Server-sent events ---


class _SSEFrameDecoder:
    """Incremental decoder for ``data:`` frames.

    Consecutive ``data:`` lines form one event and are joined with newlines;
    a blank line ends the event. Comment lines (leading ``:``) and other
    fields (``event:``, ``id:``) are ignored.
    """

    __slots__ = ("_buffer",)

    def __init__(self) -> None:
        self._buffer: list[str] = []

    def feed(self, line: str) -> dict[str, Any] | None:
        line = line.rstrip("\r\n")
        if not line:
            return self.flush()
        if line.startswith(SSE_DATA_PREFIX):
            self._buffer.append(line[len(SSE_DATA_PREFIX) :].lstrip(" "))
        return None

    def flush(self) -> dict[str, Any] | None:
        if not self._buffer:
            return None
        payload = "\n".join(self._buffer).strip()
        self._buffer.clear()
        if not payload or payload == SSE_DONE_SENTINEL:
            return None
        try:
            frame = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DecodeError(f"malformed stream frame: {payload[:200]!r}") from e
        if not isinstance(frame, dict):
            raise DecodeError(f"stream frame is not a JSON object: {payload[:200]!r}")
        return frame


def decode_sse_lines(lines: Iterable[str]) -> Iterator[dict[str, Any]]:
    """Decode server-sent-event lines into JSON objects.

    Args:
        lines: Raw lines of an ``alt=sse`` response body.

    Yields:
        One decoded object per ``data:`` frame, skipping ``[DONE]``.

    Raises:
        DecodeError: If a frame is not a JSON object.
    """
    decoder = _SSEFrameDecoder()
    for line in lines:
        frame = decoder.feed(line)
        if frame is not None:
            yield frame
    frame = decoder.flush()
    if frame is not None:
        yield frame


# --- Error mapping ---


def _api_error(response: httpx.Response) -> APIError:
    """Build an ``APIError`` from a non-2xx response (body already read)."""
    text = response.text
    message = text or response.reason_phrase
    status = None
    details: list[Any] | None = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        err = body["error"]
        message = err.get("message") or message
        status = err.get("status")
        details = err.get("details")
    return APIError(response.status_code, message, status=status, details=details)


def _decode_json(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError as e:
        raise DecodeError(
            f"response from {redact_url(response.request.url)} is not valid JSON"
        ) from e
    if not isinstance(body, dict):
        raise DecodeError(
            f"expected a JSON object from {redact_url(response.request.url)}, "
            f"got {type(body).__name__}"
        )
    return body


@runtime_checkable
class BatchTransport(Protocol):
    """Capability a ``BatchHandle`` needs from the transport."""

    async def get_batch_operation(self, name: str) -> dict[str, Any]: ...  # noqa: D102
    async def cancel_batch_operation(self, name: str) -> None: ...  # noqa: D102
    async def delete_batch_operation(self, name: str) -> None: ...  # noqa: D102


class GeminiTransport:
    """Shared HTTP access to the Gemini API.

    Args:
        api_key: API key sent as the ``key`` query parameter on every call.
        base_url: Versioned API root.
        timeout: Per-request timeout in seconds.
        http_client: Optional externally managed client. When omitted the
            transport creates one and closes it in ``aclose()``.
        telemetry: Telemetry context; defaults to the no-op context.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = NETWORK_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        parts = urlsplit(self.base_url)
        self.root_url = f"{parts.scheme}://{parts.netloc}"
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._telemetry = telemetry or TelemetryContext()

    def __repr__(self) -> str:
        return f"GeminiTransport(base_url={self.base_url!r})"

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    # --- Addressing ---

    def url(self, path: str) -> str:
        """Absolute URL for a path relative to the API root."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def model_url(self, model: str, verb: str) -> str:
        """``{base}/models/{id}:{verb}``."""
        return self.url(f"{normalize_model(model)}:{verb}")

    def _params(self, params: dict[str, Any] | None = None) -> dict[str, Any]:
        merged = {k: v for k, v in (params or {}).items() if v is not None}
        merged["key"] = self._api_key
        return merged

    # --- Core request path ---

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        stream: bool = False,
    ) -> httpx.Response:
        request = self._client.build_request(
            method,
            url,
            params=params,
            json=json_body,
            content=content,
            headers=headers,
        )
        logger.debug("%s %s", method, redact_url(request.url))
        with self._telemetry(f"http.{method.lower()}", url=redact_url(request.url)):
            try:
                response = await self._client.send(request, stream=stream)
            except httpx.TransportError as e:
                raise TransportError(
                    f"{method} {redact_url(request.url)} failed: {e}",
                    url=redact_url(request.url),
                ) from e

            if response.is_success:
                return response

            if stream:
                await response.aread()
                await response.aclose()
            logger.debug(
                "%s %s returned %d", method, redact_url(request.url), response.status_code
            )
            raise _api_error(response)

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Issue a JSON request and decode the JSON object response.

        Args:
            method: HTTP method.
            path: Path relative to the API root, e.g. ``batches/abc``.
            json: Request body; already in wire form.
            params: Extra query parameters (``None`` values are dropped).

        Returns:
            The decoded body, ``{}`` for an empty body.

        Raises:
            TransportError: No HTTP response was received.
            APIError: The server answered with a non-2xx status.
            DecodeError: The body is not a JSON object.
        """
        response = await self._send(
            method, self.url(path), params=self._params(params), json_body=json
        )
        return _decode_json(response)

    async def stream_sse(
        self, path: str, json: Any
    ) -> AsyncIterator[dict[str, Any]]:
        """POST ``json`` with ``alt=sse`` and yield each decoded frame."""
        response = await self._send(
            "POST",
            self.url(path),
            params=self._params({"alt": "sse"}),
            json_body=json,
            stream=True,
        )
        decoder = _SSEFrameDecoder()
        try:
            async for line in response.aiter_lines():
                frame = decoder.feed(line)
                if frame is not None:
                    yield frame
            frame = decoder.flush()
            if frame is not None:
                yield frame
        except httpx.TransportError as e:
            raise TransportError(
                f"stream from {redact_url(response.request.url)} interrupted: {e}",
                url=redact_url(response.request.url),
            ) from e
        finally:
            await response.aclose()

    # --- Files ---

    async def upload(
        self,
        data: bytes,
        *,
        mime_type: str,
        display_name: str | None = None,
    ) -> dict[str, Any]:
        """Upload bytes with the resumable protocol.

        Returns:
            The ``file`` object from the finalize response.
        """
        start = await self._send(
            "POST",
            f"{self.root_url}{UPLOAD_PATH}",
            params=self._params(),
            json_body={"file": {"displayName": display_name} if display_name else {}},
            headers={
                "X-Goog-Upload-Protocol": "resumable",
                "X-Goog-Upload-Command": "start",
                "X-Goog-Upload-Header-Content-Length": str(len(data)),
                "X-Goog-Upload-Header-Content-Type": mime_type,
            },
        )
        upload_url = start.headers.get("X-Goog-Upload-URL")
        if not upload_url:
            raise DecodeError("upload start response did not include X-Goog-Upload-URL")

        finished = await self._send(
            "POST",
            upload_url,
            content=data,
            headers={
                "X-Goog-Upload-Command": "upload, finalize",
                "X-Goog-Upload-Offset": "0",
            },
        )
        body = _decode_json(finished)
        file = body.get("file")
        if not isinstance(file, dict):
            raise DecodeError("upload finalize response did not include a file object")
        return file

    async def download(self, name: str) -> bytes:
        """Download the content of a generated file."""
        response = await self._send(
            "GET",
            f"{self.root_url}{DOWNLOAD_PATH}/{name}:download",
            params=self._params({"alt": "media"}),
        )
        return response.content

    # --- Batch operations ---

    async def get_batch_operation(self, name: str) -> dict[str, Any]:
        """GET the long-running operation behind a batch."""
        return await self.request_json("GET", name)

    async def cancel_batch_operation(self, name: str) -> None:
        """POST ``{name}:cancel``."""
        await self.request_json("POST", f"{name}:cancel")

    async def delete_batch_operation(self, name: str) -> None:
        """DELETE the batch resource."""
        await self.request_json("DELETE", name)

    # --- Pagination ---

    async def paginate(
        self, path: str, items_field: str, *, page_size: int | None = None
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield items from a list endpoint, following ``nextPageToken``."""
        page_token: str | None = None
        while True:
            page = await self.request_json(
                "GET", path, params={"pageSize": page_size, "pageToken": page_token}
            )
            for item in page.get(items_field) or ():
                yield item
            page_token = page.get("nextPageToken")
            if not page_token:
                return
