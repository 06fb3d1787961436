"""SnapshotStore implementation talking to the snapshot service (see boardsync.api.app) with httpx."""

import logging
from typing import Any, Optional

import httpx

from boardsync.core import config
from boardsync.core.exceptions import SnapshotStoreError

logger = logging.getLogger(__name__)


class HTTPSnapshotStore:
    """
    GET    /session/{id}?name={key}  -> {"state": str | null}
    POST   /session/{id}  {name, state} -> {"success": true}
    DELETE /session/{id}?name={key}  -> {"success": true}
    """

    def __init__(
        self,
        base_url: str = config.API_URL,
        timeout: float = config.HTTP_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout
        )

    async def get(self, session_id: int, key: str) -> str | None:
        data = await self._request("GET", f"/session/{session_id}", params={"name": key})
        state = data.get("state")
        if state is not None and not isinstance(state, str):
            raise SnapshotStoreError(f"Unexpected state payload for {key!r}: {state!r}")
        return state or None

    async def put(self, session_id: int, key: str, value: str) -> None:
        await self._request("POST", f"/session/{session_id}", json={"name": key, "state": value})

    async def delete(self, session_id: int, key: str) -> None:
        await self._request("DELETE", f"/session/{session_id}", params={"name": key})

    async def aclose(self) -> None:
        """Only closes the client if this store created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HTTPSnapshotStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Turn every transport / status / payload problem into a SnapshotStoreError."""
        try:
            response = await self.client.request(method, url, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise SnapshotStoreError(
                f"{method} {url} failed with status {exc.response.status_code}: {_error_detail(exc.response)}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SnapshotStoreError(f"{method} {url} failed: {exc}") from exc
        except ValueError as exc:
            raise SnapshotStoreError(f"{method} {url} returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise SnapshotStoreError(f"{method} {url} returned unexpected payload: {data!r}")
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return data


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict) and "error" in data:
        return str(data["error"])
    return response.text
