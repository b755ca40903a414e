"""Context caching and File API: builders, handles and expiration rules."""

from datetime import UTC, datetime, timedelta, timezone
import json

import httpx
import pytest

from gemini_rest.cache import CacheBuilder, CachedContentHandle, CacheExpiration
from gemini_rest.exceptions import (
    APIError,
    HandleConsumedError,
    MissingDownloadUriError,
    MissingExpirationError,
    ValidationError,
)
from gemini_rest.files import File, FileBuilder, FileHandle, FileState


class TestCacheExpiration:
    @pytest.mark.unit
    def test_ttl_renders_as_duration(self):
        assert CacheExpiration.from_ttl(3600).to_wire() == {"ttl": "3600s"}
        assert CacheExpiration.from_ttl(timedelta(seconds=1.5)).to_wire() == {"ttl": "1.5s"}

    @pytest.mark.unit
    def test_expire_time_renders_as_utc_timestamp(self):
        moment = datetime(2030, 1, 2, 5, 30, tzinfo=timezone(timedelta(hours=2)))

        expiration = CacheExpiration.from_expire_time(moment)

        assert expiration.to_wire() == {"expireTime": "2030-01-02T03:30:00Z"}
        assert expiration.field_name == "expireTime"

    @pytest.mark.unit
    def test_exactly_one_positive_expiration(self):
        with pytest.raises(ValidationError):
            CacheExpiration()
        with pytest.raises(ValidationError):
            CacheExpiration(ttl=timedelta(seconds=1), expire_time=datetime.now(UTC))
        with pytest.raises(ValidationError):
            CacheExpiration.from_ttl(0)


class TestCacheBuilder:
    @pytest.mark.unit
    def test_display_name_limit(self):
        builder = CacheBuilder(None, "gemini-2.5-flash")

        builder.with_display_name("x" * 128)
        with pytest.raises(ValidationError, match="too long"):
            builder.with_display_name("x" * 129)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_expiration_is_required(self):
        with pytest.raises(MissingExpirationError):
            await CacheBuilder(None, "gemini-2.5-flash").with_user_message("x").execute()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_execute_creates_cache(self, transport, http_handler):
        http_handler.json("POST", "/v1beta/cachedContents", {"name": "cachedContents/c1"})

        handle = await (
            CacheBuilder(transport, "gemini-2.5-flash")
            .with_display_name("manual")
            .with_system_instruction("You answer from the manual.")
            .with_user_message("The manual text")
            .with_ttl(600)
            .execute()
        )

        assert isinstance(handle, CachedContentHandle)
        assert handle.name == "cachedContents/c1"
        sent = json.loads(http_handler.last.content)
        assert sent["model"] == "models/gemini-2.5-flash"
        assert sent["displayName"] == "manual"
        assert sent["ttl"] == "600s"
        assert sent["contents"] == [{"parts": [{"text": "The manual text"}], "role": "user"}]


class TestCachedContentHandle:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_update_sends_update_mask(self, transport, http_handler):
        http_handler.json(
            "PATCH",
            "/v1beta/cachedContents/c1",
            {"name": "cachedContents/c1", "expireTime": "2030-01-01T00:00:00Z"},
        )
        handle = CachedContentHandle("cachedContents/c1", transport)

        cached = await handle.update(CacheExpiration.from_ttl(60))

        assert cached.expire_time == datetime(2030, 1, 1, tzinfo=UTC)
        request = http_handler.last
        assert request.url.params["updateMask"] == "ttl"
        assert json.loads(request.content) == {"ttl": "60s"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_consumes_and_failure_returns_handle(self, transport, http_handler):
        responses = iter([httpx.Response(500, text="oops"), httpx.Response(200, json={})])
        http_handler.add("DELETE", "/v1beta/cachedContents/c1", lambda _r: next(responses))
        handle = CachedContentHandle("cachedContents/c1", transport)

        failed = await handle.delete()
        returned, error = failed
        assert returned is handle
        assert isinstance(error, APIError)

        assert (await returned.delete()).ok
        with pytest.raises(HandleConsumedError):
            await handle.get()


def _file(**overrides) -> File:
    return File.from_wire({"name": "files/f1", "mimeType": "text/plain", **overrides})


class TestFileBuilder:
    @pytest.mark.unit
    def test_mime_type_and_display_name_from_path(self):
        builder = FileBuilder(None, b"{}").from_path("/tmp/data/report.json")

        assert builder.mime_type == "application/json"
        assert builder.display_name == "report.json"

    @pytest.mark.unit
    def test_explicit_values_win(self):
        builder = (
            FileBuilder(None, b"")
            .from_path("notes.txt")
            .with_mime_type("text/markdown")
            .with_display_name("Notes")
        )

        assert builder.mime_type == "text/markdown"
        assert builder.display_name == "Notes"

    @pytest.mark.unit
    def test_unknown_type_defaults_to_octet_stream(self):
        assert FileBuilder(None, b"").mime_type == "application/octet-stream"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_upload_returns_handle(self, transport, http_handler):
        http_handler.add(
            "POST",
            "/upload/v1beta/files",
            httpx.Response(
                200, headers={"X-Goog-Upload-URL": "https://generativelanguage.test/upload/s/9"}
            ),
        )
        http_handler.json(
            "POST",
            "/upload/s/9",
            {"file": {"name": "files/f9", "state": "PROCESSING", "sizeBytes": "4"}},
        )

        handle = await FileBuilder(transport, b"data").with_mime_type("text/plain").upload()

        assert isinstance(handle, FileHandle)
        assert handle.name == "files/f9"
        assert handle.file.state is FileState.PROCESSING
        assert handle.file.size_bytes == 4


class TestFileHandle:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_refresh_updates_metadata(self, transport, http_handler):
        http_handler.json("GET", "/v1beta/files/f1", {"name": "files/f1", "state": "ACTIVE"})
        handle = FileHandle(_file(state="PROCESSING"), transport)

        await handle.refresh()

        assert handle.file.state is FileState.ACTIVE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_download_requires_download_uri(self, transport):
        handle = FileHandle(_file(), transport)

        with pytest.raises(MissingDownloadUriError):
            await handle.download()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_download_generated_file(self, transport, http_handler):
        http_handler.add(
            "GET", "/download/v1beta/files/f1:download", httpx.Response(200, content=b"result")
        )
        handle = FileHandle(_file(downloadUri="https://example.test/f1"), transport)

        assert await handle.download() == b"result"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_consumes_handle(self, transport, http_handler):
        http_handler.json("DELETE", "/v1beta/files/f1", {})
        handle = FileHandle(_file(), transport)

        assert (await handle.delete()).ok
        assert handle.consumed
        with pytest.raises(HandleConsumedError):
            await handle.refresh()
