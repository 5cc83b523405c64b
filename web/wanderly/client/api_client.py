"""Async HTTP client for the dashboard side of the catalog API.

Wraps the JSON envelope (``{success, message, data}``) so callers deal in
plain lists and dicts, and raises :class:`ApiError` for anything else.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from wanderly.ordering import EditSession

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer, ``success: false`` payload or transport failure"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class CatalogClient:
    """Calls ``{base_url}/{resource}`` endpoints with an admin token"""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(str(exc)) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {"success": False, "message": "Malformed response body"}
        if response.is_error or payload.get("success") is False:
            message = payload.get("message") or f"HTTP {response.status_code}"
            raise ApiError(message, response.status_code)
        return payload

    async def list(self, resource: str, *, search: Optional[str] = None) -> Dict[str, Any]:
        """Return ``{"items": [...], "reorderable": bool}``"""
        params = {"search": search} if search else None
        payload = await self._request("GET", f"/{resource}", params=params)
        return {
            "items": payload.get("data") or [],
            "reorderable": payload.get("reorderable", True),
        }

    async def reorder(self, resource: str, ids: Sequence[Any]) -> List[Dict[str, Any]]:
        """Persist the full ordered id list; the server assigns ``order``"""
        payload = await self._request("PATCH", f"/{resource}/reorder", json={"ids": list(ids)})
        return payload.get("data") or []

    async def update(self, edit: EditSession) -> Dict[str, Any]:
        """Send the pending changes of *edit*"""
        payload = await self._request(
            "PATCH", f"/{edit.resource}/{edit.entity_id}", json=dict(edit.changes),
        )
        return payload.get("data") or {}
