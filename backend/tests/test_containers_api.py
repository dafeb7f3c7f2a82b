"""Container endpoint tests: create, update, move, delete."""

import pytest
from httpx import AsyncClient


def error_code(resp) -> str:
    return resp.json()["error"]["code"]


@pytest.mark.api
@pytest.mark.asyncio
class TestContainerCreate:

    async def test_create_defaults_to_terminal(self, client: AsyncClient):
        resp = await client.post("/api/containers/", json={
            "caseNumber": "  CASE-1  ",
            "containerNumber": "MSCU1234567",
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["caseNumber"] == "CASE-1"
        assert data["status"] == "AT_TERMINAL"
        assert data["yardId"] is None
        assert data["yardStatus"] is None
        assert data["orderIndex"] == 0

    async def test_create_goes_to_top_of_lane(self, client: AsyncClient, make_container):
        await make_container("OLD", order_index=3)
        resp = await client.post("/api/containers/", json={"caseNumber": "NEW"})
        assert resp.json()["orderIndex"] == 2

    @pytest.mark.parametrize("case_number", [None, "", "   "])
    async def test_blank_case_number_rejected(self, client: AsyncClient, case_number):
        resp = await client.post("/api/containers/", json={"caseNumber": case_number})
        assert resp.status_code == 400
        assert error_code(resp) == "EMPTY_REQUIRED_FIELD"

    async def test_invalid_status_rejected(self, client: AsyncClient):
        resp = await client.post("/api/containers/", json={"caseNumber": "C", "status": "LOST"})
        assert resp.status_code == 400
        assert error_code(resp) == "INVALID_STATUS"

    async def test_yard_status_requires_yard_fields(self, client: AsyncClient):
        resp = await client.post("/api/containers/", json={
            "caseNumber": "C", "status": "AT_OTHER_YARD", "yardStatus": "LOADED",
        })
        assert resp.status_code == 400
        assert error_code(resp) == "MISSING_YARD_INFO"

    async def test_yard_fields_dropped_for_other_statuses(self, client: AsyncClient):
        resp = await client.post("/api/containers/", json={
            "caseNumber": "C", "status": "RETURNED", "yardId": "Y1", "yardStatus": "EMPTY",
        })
        assert resp.status_code == 201
        assert resp.json()["yardId"] is None
        assert resp.json()["yardStatus"] is None

    async def test_duplicate_case_number(self, client: AsyncClient, make_container):
        await make_container("C-1")
        resp = await client.post("/api/containers/", json={"caseNumber": "C-1"})
        assert resp.status_code == 422
        assert error_code(resp) == "DUPLICATE_CASE_NUMBER"


@pytest.mark.api
@pytest.mark.asyncio
class TestContainerMove:

    async def test_move_to_top_of_customer_yard(self, client: AsyncClient, make_container):
        c1 = await make_container("C1", status="AT_CUSTOMER_YARD", order_index=5)
        c2 = await make_container("C2", status="AT_CUSTOMER_YARD", order_index=10)
        c3 = await make_container("C3", status="IN_TRANSIT_FROM_TERMINAL", order_index=0)

        resp = await client.put(f"/api/containers/{c3.id}/status", json={
            "status": "AT_CUSTOMER_YARD", "position": "top",
        })
        assert resp.status_code == 200
        assert resp.json()["orderIndex"] == 4

        lane = await client.get("/api/containers/", params={"status": "AT_CUSTOMER_YARD"})
        assert [c["id"] for c in lane.json()] == [c3.id, c1.id, c2.id]

    async def test_move_without_placement_goes_to_top(self, client: AsyncClient, make_container):
        await make_container("C1", status="AT_CUSTOMER_YARD", order_index=5)
        c3 = await make_container("C3", order_index=0)

        resp = await client.put(f"/api/containers/{c3.id}/status", json={"status": "AT_CUSTOMER_YARD"})
        assert resp.json()["orderIndex"] == 4

    async def test_move_to_bottom(self, client: AsyncClient, make_container):
        await make_container("C1", status="RETURNED", order_index=5)
        await make_container("C2", status="RETURNED", order_index=10)
        c3 = await make_container("C3")

        resp = await client.put(f"/api/containers/{c3.id}/status", json={
            "status": "RETURNED", "position": "bottom",
        })
        assert resp.json()["orderIndex"] == 11

    async def test_explicit_order_index_kept(self, client: AsyncClient, make_container):
        c = await make_container("C1")
        resp = await client.put(f"/api/containers/{c.id}/status", json={
            "status": "ON_WAY_TO_CUSTOMER", "orderIndex": 7.25,
        })
        assert resp.json()["orderIndex"] == 7.25

    async def test_move_to_empty_lane_is_zero(self, client: AsyncClient, make_container):
        c = await make_container("C1", order_index=42)
        resp = await client.put(f"/api/containers/{c.id}/status", json={"status": "ON_WAY_TO_YARD"})
        assert resp.json()["orderIndex"] == 0

    async def test_yard_move_without_yard_status_fails(self, client: AsyncClient, make_container):
        c = await make_container("C1", status="IN_TRANSIT_FROM_TERMINAL", order_index=3)

        resp = await client.put(f"/api/containers/{c.id}/status", json={
            "status": "AT_OTHER_YARD", "yardId": "Y1",
        })
        assert resp.status_code == 400
        assert error_code(resp) == "MISSING_YARD_INFO"

        unchanged = (await client.get(f"/api/containers/{c.id}")).json()
        assert unchanged["status"] == "IN_TRANSIT_FROM_TERMINAL"
        assert unchanged["orderIndex"] == 3
        assert unchanged["yardId"] is None

    async def test_yard_lanes_ordered_per_yard(self, client: AsyncClient, make_container):
        await make_container("A1", status="AT_OTHER_YARD", yard_id="A", yard_status="LOADED", order_index=-50)
        await make_container("B1", status="AT_OTHER_YARD", yard_id="B", yard_status="EMPTY", order_index=8)
        c = await make_container("C1")

        resp = await client.put(f"/api/containers/{c.id}/status", json={
            "status": "AT_OTHER_YARD", "yardId": "B", "yardStatus": "LOADED",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["orderIndex"] == 7
        assert data["yardId"] == "B"
        assert data["yardStatus"] == "LOADED"

    async def test_leaving_yard_clears_yard_fields(self, client: AsyncClient, make_container):
        c = await make_container("C1", status="AT_OTHER_YARD", yard_id="A", yard_status="EMPTY", order_index=0)
        resp = await client.put(f"/api/containers/{c.id}/status", json={
            "status": "EMPTY_AT_CUSTOMER", "yardId": "A", "yardStatus": "EMPTY",
        })
        assert resp.json()["yardId"] is None
        assert resp.json()["yardStatus"] is None

    async def test_missing_status(self, client: AsyncClient, make_container):
        c = await make_container("C1")
        resp = await client.put(f"/api/containers/{c.id}/status", json={})
        assert resp.status_code == 400
        assert error_code(resp) == "EMPTY_REQUIRED_FIELD"

    async def test_invalid_status(self, client: AsyncClient, make_container):
        c = await make_container("C1")
        resp = await client.put(f"/api/containers/{c.id}/status", json={"status": "SHIPPED"})
        assert resp.status_code == 400
        assert error_code(resp) == "INVALID_STATUS"

    async def test_unknown_position_is_validation_error(self, client: AsyncClient, make_container):
        c = await make_container("C1")
        resp = await client.put(f"/api/containers/{c.id}/status", json={
            "status": "RETURNED", "position": "middle",
        })
        assert resp.status_code == 422

    async def test_move_missing_container(self, client: AsyncClient):
        resp = await client.put("/api/containers/nope/status", json={"status": "RETURNED"})
        assert resp.status_code == 404
        assert error_code(resp) == "RESOURCE_NOT_FOUND"


@pytest.mark.api
@pytest.mark.asyncio
class TestContainerUpdate:

    async def test_edit_keeps_position(self, client: AsyncClient, make_container):
        c = await make_container("C1", status="RETURNED", order_index=12)
        resp = await client.put(f"/api/containers/{c.id}", json={"notes": "call driver"})
        assert resp.status_code == 200
        assert resp.json()["notes"] == "call driver"
        assert resp.json()["orderIndex"] == 12

    async def test_same_status_keeps_position(self, client: AsyncClient, make_container):
        await make_container("C0", status="RETURNED", order_index=1)
        c = await make_container("C1", status="RETURNED", order_index=12)
        resp = await client.put(f"/api/containers/{c.id}", json={"status": "RETURNED"})
        assert resp.json()["orderIndex"] == 12

    async def test_status_change_recomputes_position(self, client: AsyncClient, make_container):
        await make_container("C0", status="RETURNED", order_index=1)
        c = await make_container("C1", status="RETURNING_TO_TERMINAL", order_index=12)
        resp = await client.put(f"/api/containers/{c.id}", json={"status": "RETURNED"})
        assert resp.json()["orderIndex"] == 0

    async def test_yard_change_recomputes_position(self, client: AsyncClient, make_container):
        await make_container("B1", status="AT_OTHER_YARD", yard_id="B", yard_status="LOADED", order_index=3)
        c = await make_container("A1", status="AT_OTHER_YARD", yard_id="A", yard_status="LOADED", order_index=9)
        resp = await client.put(f"/api/containers/{c.id}", json={"yardId": "B"})
        data = resp.json()
        assert data["yardId"] == "B"
        assert data["yardStatus"] == "LOADED"
        assert data["orderIndex"] == 2

    async def test_yard_status_flip_stays_in_lane(self, client: AsyncClient, make_container):
        c = await make_container("A1", status="AT_OTHER_YARD", yard_id="A", yard_status="LOADED", order_index=9)
        resp = await client.put(f"/api/containers/{c.id}", json={"yardStatus": "EMPTY"})
        assert resp.json()["yardStatus"] == "EMPTY"
        assert resp.json()["orderIndex"] == 9

    async def test_partial_yard_fields_normalized(self, client: AsyncClient, make_container):
        c = await make_container("C1", status="RETURNED", order_index=1)
        resp = await client.put(f"/api/containers/{c.id}", json={"yardId": "Y1"})
        assert resp.status_code == 200
        assert resp.json()["yardId"] is None

    async def test_entering_yard_without_yard_id_fails(self, client: AsyncClient, make_container):
        c = await make_container("C1", status="RETURNED", order_index=1)
        resp = await client.put(f"/api/containers/{c.id}", json={
            "status": "AT_OTHER_YARD", "yardStatus": "EMPTY",
        })
        assert resp.status_code == 400
        assert error_code(resp) == "MISSING_YARD_INFO"

    async def test_blank_case_number_rejected(self, client: AsyncClient, make_container):
        c = await make_container("C1")
        resp = await client.put(f"/api/containers/{c.id}", json={"caseNumber": " "})
        assert resp.status_code == 400
        assert error_code(resp) == "EMPTY_REQUIRED_FIELD"

    async def test_update_missing_container(self, client: AsyncClient):
        resp = await client.put("/api/containers/nope", json={"notes": "x"})
        assert resp.status_code == 404


@pytest.mark.api
@pytest.mark.asyncio
class TestContainerReadDelete:

    async def test_list_sorted_with_tie_break(self, client: AsyncClient, make_container):
        older = await make_container("OLD", status="RETURNED", order_index=1, age=60)
        newer = await make_container("NEW", status="RETURNED", order_index=1, age=5)
        unindexed = await make_container("NONE", status="RETURNED")
        resp = await client.get("/api/containers/")
        assert [c["id"] for c in resp.json()] == [newer.id, older.id, unindexed.id]

    async def test_list_rejects_unknown_status(self, client: AsyncClient):
        resp = await client.get("/api/containers/", params={"status": "NOPE"})
        assert resp.status_code == 400

    async def test_list_yard_lane(self, client: AsyncClient, make_container):
        a = await make_container("A", status="AT_OTHER_YARD", yard_id="Y1", yard_status="LOADED", order_index=0)
        await make_container("B", status="AT_OTHER_YARD", yard_id="Y2", yard_status="LOADED", order_index=0)
        resp = await client.get("/api/containers/", params={"status": "AT_OTHER_YARD", "yardId": "Y1"})
        assert [c["id"] for c in resp.json()] == [a.id]

    async def test_list_yard_lane_requires_yard_id(self, client: AsyncClient, make_container):
        await make_container("A", status="AT_OTHER_YARD", yard_id="Y1", yard_status="LOADED", order_index=0)
        resp = await client.get("/api/containers/", params={"status": "AT_OTHER_YARD"})
        assert resp.status_code == 400
        assert error_code(resp) == "MISSING_YARD_INFO"

    async def test_search_by_container_number(self, client: AsyncClient, make_container):
        match = await make_container("A", container_number="MSCU1234567", order_index=0)
        await make_container("B", container_number="TGHU7654321", order_index=1)
        await make_container("C", order_index=2)
        returned = await make_container("D", status="RETURNED", container_number="mscu9990000")

        resp = await client.get("/api/containers/", params={"search": "mscu"})
        assert {c["id"] for c in resp.json()} == {match.id, returned.id}

        resp = await client.get("/api/containers/", params={"status": "AT_TERMINAL", "search": " MSCU "})
        assert [c["id"] for c in resp.json()] == [match.id]

    async def test_search_treats_wildcards_literally(self, client: AsyncClient, make_container):
        await make_container("A", container_number="MSCU1234567")
        resp = await client.get("/api/containers/", params={"search": "%"})
        assert resp.json() == []

    async def test_get_missing(self, client: AsyncClient):
        resp = await client.get("/api/containers/missing")
        assert resp.status_code == 404

    async def test_delete(self, client: AsyncClient, make_container):
        c = await make_container("C1")
        resp = await client.delete(f"/api/containers/{c.id}")
        assert resp.status_code == 200
        assert resp.json()["caseNumber"] == "C1"
        assert (await client.get(f"/api/containers/{c.id}")).status_code == 404
        assert (await client.delete(f"/api/containers/{c.id}")).status_code == 404
