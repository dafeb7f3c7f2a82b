"""BoardClient tests: optimistic moves, rollback, refresh."""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from drayboard.board_client import BoardClient, BoardClientError
from drayboard.main import app
from drayboard.middleware.exceptions import MissingYardInfoError


@pytest_asyncio.fixture
async def board(client):
    # `client` installs the test database override on the app
    http = httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    async with BoardClient(http=http) as board:
        yield board


def serve_snapshot(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/containers/":
        return httpx.Response(200, json=[{
            "id": "c1", "caseNumber": "C1", "status": "AT_TERMINAL", "orderIndex": 0,
        }])
    return httpx.Response(200, json=[])


@pytest.mark.integration
@pytest.mark.asyncio
class TestBoardClient:

    async def test_refresh_caches_by_id(self, board: BoardClient, make_container, make_yard):
        c = await make_container("C1", status="RETURNED", order_index=2)
        yard = await make_yard("Alpha")
        await board.refresh()
        assert set(board.containers) == {c.id}
        assert board.containers[c.id].case_number == "C1"
        assert board.yard_label(yard.id) == "Alpha"
        assert board.yard_label("stale-id") == "stale-id"
        assert board.yard_label(None) == "Unassigned Yard"

    async def test_move_to_top(self, board: BoardClient, make_container):
        c1 = await make_container("C1", status="AT_CUSTOMER_YARD", order_index=5)
        c2 = await make_container("C2", status="AT_CUSTOMER_YARD", order_index=10)
        c3 = await make_container("C3", status="IN_TRANSIT_FROM_TERMINAL", order_index=0)
        await board.refresh()

        moved = await board.move(c3.id, "AT_CUSTOMER_YARD", position="top")
        assert moved.order_index == 4
        assert [c.id for c in board.lane("AT_CUSTOMER_YARD")] == [c3.id, c1.id, c2.id]

    async def test_move_to_bottom_of_yard(self, board: BoardClient, make_container):
        await make_container("A", status="AT_OTHER_YARD", yard_id="Y1", yard_status="EMPTY", order_index=3)
        await make_container("B", status="AT_OTHER_YARD", yard_id="Y2", yard_status="EMPTY", order_index=50)
        c = await make_container("C", status="ON_WAY_TO_YARD", order_index=0)
        await board.refresh()

        moved = await board.move(c.id, "AT_OTHER_YARD", yard_id="Y1", yard_status="LOADED", position="bottom")
        assert moved.order_index == 4
        assert moved.yard_id == "Y1"

    async def test_invalid_move_rejected_locally(self, board: BoardClient, make_container):
        c = await make_container("C", order_index=0)
        await board.refresh()
        before = dict(board.containers)

        with pytest.raises(MissingYardInfoError):
            await board.move(c.id, "AT_OTHER_YARD", yard_id="Y1")
        assert board.containers == before

    async def test_failed_write_rolls_back(self, board: BoardClient, make_container, client):
        c = await make_container("C", status="RETURNING_TO_TERMINAL", order_index=7)
        await board.refresh()
        snapshot = dict(board.containers)

        # Someone else deletes the container before our move lands
        await client.delete(f"/api/containers/{c.id}")

        with pytest.raises(BoardClientError) as exc_info:
            await board.move(c.id, "RETURNED")
        assert exc_info.value.status_code == 404
        assert exc_info.value.error_code == "RESOURCE_NOT_FOUND"
        assert board.containers == snapshot
        assert board.containers[c.id].status == "RETURNING_TO_TERMINAL"

    async def test_server_error_rolls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return serve_snapshot(request)
            return httpx.Response(503, json={"error": {"code": "DATABASE_UNAVAILABLE", "message": "down"}})

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
        async with BoardClient(http=http) as board:
            await board.refresh()
            with pytest.raises(BoardClientError) as exc_info:
                await board.move("c1", "IN_TRANSIT_FROM_TERMINAL")
            assert exc_info.value.error_code == "DATABASE_UNAVAILABLE"
            assert board.containers["c1"].status == "AT_TERMINAL"
            assert board.containers["c1"].order_index == 0

    async def test_create_and_delete_refresh_cache(self, board: BoardClient):
        created = await board.create(caseNumber="NEW-1")
        assert created.id in board.containers
        await board.delete(created.id)
        assert created.id not in board.containers

    async def test_connection_error_rolls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return serve_snapshot(request)
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
        async with BoardClient(http=http) as board:
            await board.refresh()
            with pytest.raises(BoardClientError) as exc_info:
                await board.move("c1", "IN_TRANSIT_FROM_TERMINAL")
            assert exc_info.value.status_code is None
            assert exc_info.value.error_code is None
            assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
            assert board.containers["c1"].status == "AT_TERMINAL"
            assert board.containers["c1"].order_index == 0

    async def test_search_terminal_lane(self, board: BoardClient, make_container):
        a = await make_container("A", container_number="MSCU1234567", order_index=0)
        b = await make_container("B", container_number="TGHU7654321", order_index=1)
        await make_container("C", status="RETURNED", container_number="MSCU0000000")
        d = await make_container("D", order_index=2)
        await board.refresh()

        assert [c.id for c in board.search("mscu")] == [a.id]
        assert [c.id for c in board.search("  ")] == [a.id, b.id, d.id]
        assert board.search("zzz") == []
