"""Async API client with a local, optimistic container cache.

Viewing clients (board screens, scripts) keep the container collection in a
dict keyed by id. A move is applied locally first, using the same lane
comparator and order-index assigner as the server, then sent to the API:

    snapshot = copy of the cache
    apply move locally
    PUT /api/containers/{id}/status
      ok     → refresh cache from the server
      failed → restore snapshot, raise BoardClientError

Usage:
    async with BoardClient("http://localhost:8000") as board:
        await board.refresh()
        await board.move(container_id, "AT_CUSTOMER_YARD", position="top")
"""

import logging

import httpx

from drayboard.schemas.container import ContainerOut
from drayboard.schemas.yard import YardOut
from drayboard.services.lanes import filter_lane, lane_key_for
from drayboard.services.ordering import compute_order_index
from drayboard.services.status import DEFAULT_STATUS, validate_transition

logger = logging.getLogger(__name__)


class BoardClientError(Exception):
    """An API call failed; carries the server's error code when it sent one."""

    def __init__(self, message: str, status_code: int | None = None, error_code: str | None = None):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "BoardClientError":
        try:
            error = response.json().get("error", {})
        except ValueError:
            error = {}
        return cls(
            error.get("message") or f"HTTP {response.status_code}",
            status_code=response.status_code,
            error_code=error.get("code"),
        )


class BoardClient:
    def __init__(self, base_url: str = "", *, http: httpx.AsyncClient | None = None):
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=10.0)
        self.containers: dict[str, ContainerOut] = {}
        self.yards: dict[str, YardOut] = {}

    async def __aenter__(self) -> "BoardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise BoardClientError(f"Request to {url} failed: {exc}") from exc
        if response.is_error:
            raise BoardClientError.from_response(response)
        return response

    # ── Cache ────────────────────────────────────────────────

    async def refresh(self) -> None:
        """Replace the local cache with the server's current state."""
        containers = (await self._request("GET", "/api/containers/")).json()
        yards = (await self._request("GET", "/api/yards/")).json()
        self.containers = {c["id"]: ContainerOut.model_validate(c) for c in containers}
        self.yards = {y["id"]: YardOut.model_validate(y) for y in yards}

    def lane(self, status: str, yard_id: str | None = None) -> list[ContainerOut]:
        return filter_lane(self.containers.values(), lane_key_for(status, yard_id))

    def search(self, text: str, status: str = DEFAULT_STATUS) -> list[ContainerOut]:
        """Lane members whose container number contains ``text`` (any case).

        Blank ``text`` returns the whole lane, as the terminal dashboard does.
        """
        members = self.lane(status)
        needle = text.strip().lower()
        if not needle:
            return members
        return [c for c in members if needle in (c.container_number or "").lower()]

    def yard_label(self, yard_id: str | None) -> str:
        """Display name for a yard id; dangling ids fall back to the raw id."""
        if not yard_id:
            return "Unassigned Yard"
        yard = self.yards.get(yard_id)
        return yard.name if yard else yard_id

    # ── Writes ───────────────────────────────────────────────

    async def create(self, **fields) -> ContainerOut:
        created = ContainerOut.model_validate(
            (await self._request("POST", "/api/containers/", json=fields)).json()
        )
        await self.refresh()
        return created

    async def update(self, container_id: str, **fields) -> ContainerOut:
        updated = ContainerOut.model_validate(
            (await self._request("PUT", f"/api/containers/{container_id}", json=fields)).json()
        )
        await self.refresh()
        return updated

    async def delete(self, container_id: str) -> None:
        await self._request("DELETE", f"/api/containers/{container_id}")
        await self.refresh()

    async def move(
        self,
        container_id: str,
        status: str,
        *,
        yard_id: str | None = None,
        yard_status: str | None = None,
        position: str = "top",
    ) -> ContainerOut:
        """Move a cached container to the top or bottom of a lane."""
        moving = self.containers.get(container_id)
        if moving is None:
            raise KeyError(container_id)

        triple = validate_transition(status, yard_id, yard_status)
        order_index = compute_order_index(
            self.lane(triple.status, triple.yard_id),
            position=position,
            exclude_id=container_id,
        )

        snapshot = dict(self.containers)
        self.containers[container_id] = moving.model_copy(update={
            "status": triple.status,
            "yard_id": triple.yard_id,
            "yard_status": triple.yard_status,
            "order_index": order_index,
        })

        try:
            response = await self._request(
                "PUT",
                f"/api/containers/{container_id}/status",
                json={
                    "status": triple.status,
                    "yardId": triple.yard_id,
                    "yardStatus": triple.yard_status,
                    "orderIndex": order_index,
                },
            )
        except BoardClientError:
            logger.warning("Move of %s to %s failed, rolling back", container_id, status)
            self.containers = snapshot
            raise

        moved = ContainerOut.model_validate(response.json())
        self.containers[container_id] = moved
        await self.refresh()
        return moved
