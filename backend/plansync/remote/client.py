"""Async HTTP client for the exercise-plans collection of the remote API."""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from plansync.errors import NetworkError, PayloadError, RemoteStatusError
from plansync.schemas import ExercisePlanPayload
from plansync.settings import Settings, get_settings

log = logging.getLogger("plansync")


class RemoteClient:
    def __init__(self, http: Optional[httpx.AsyncClient] = None, *, settings: Optional[Settings] = None):
        s = settings or get_settings()
        if http is None:
            headers = {"Authorization": f"Bearer {s.API_TOKEN}"} if s.API_TOKEN else None
            http = httpx.AsyncClient(base_url=s.API_BASE_URL, timeout=s.API_TIMEOUT_SECONDS, headers=headers)
        self._http = http

    async def upsert(self, records: Sequence[ExercisePlanPayload], collection_url: str) -> Any:
        """Create or replace ``records`` in one request; returns the decoded response body."""
        body = [record.to_json() for record in records]
        response = await self._send("PUT", collection_url, json=body)
        try:
            return response.json()
        except ValueError as exc:
            raise PayloadError(
                "Response body is not valid JSON",
                details={"url": str(response.request.url)},
                cause=exc,
            ) from exc

    async def delete(self, object_id: str, collection_url: str) -> None:
        await self._send("DELETE", f"{collection_url.rstrip('/')}/{object_id}")

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise NetworkError("request timed out", details={"method": method, "url": url}, cause=exc) from exc
        except httpx.RequestError as exc:
            raise NetworkError(
                str(exc) or "network unreachable",
                details={"method": method, "url": url},
                cause=exc,
            ) from exc

        log.debug("%s %s -> %s", method, url, response.status_code)
        if response.is_error:
            raise RemoteStatusError(
                f"{method} {url} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                details={"method": method, "url": url, "body": response.text[:500]},
            )
        return response
