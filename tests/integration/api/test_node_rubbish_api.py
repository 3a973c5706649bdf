"""Integration tests for the rubbish bin API."""

from typing import Any
from uuid import UUID

import pytest
from httpx import AsyncClient

from domain.entities.audit import AuditSpaceAction, AuditSpaceEvent
from tests.conftest import CurrentUserSwitch, make_user
from tests.integration.api.helpers import (
    API,
    create_node,
    create_space,
    invite,
    space_headers,
    trash_node,
)
from tests.unit.conftest import RecordingPublisher

RUBBISH = f"{API}/node/rubbish"


async def _list(client: AsyncClient, space_id: str, **params: Any) -> dict[str, Any]:
    response = await client.get(f"{RUBBISH}/list", params=params, headers=space_headers(space_id))
    assert response.status_code == 200, response.text
    return response.json()


class TestListRubbish:
    @pytest.mark.asyncio
    async def test_lists_newest_deletion_first(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)
        first = await create_node(authenticated_client, space["id"], "First")
        second = await create_node(authenticated_client, space["id"], "Second")
        await trash_node(authenticated_client, space["id"], first["node_id"])
        await trash_node(authenticated_client, space["id"], second["node_id"])

        page = await _list(authenticated_client, space["id"])

        assert [n["node_id"] for n in page["data"]] == [second["node_id"], first["node_id"]]
        assert page["data"][0]["retention_days_left"] == 90
        assert page["meta"]["has_more"] is False

    @pytest.mark.asyncio
    async def test_paginates_with_last_node_id(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)
        for i in range(7):
            node = await create_node(authenticated_client, space["id"], f"Sheet {i}")
            await trash_node(authenticated_client, space["id"], node["node_id"])

        first = await _list(authenticated_client, space["id"], size=5)
        rest = await _list(
            authenticated_client, space["id"], size=5, lastNodeId=first["meta"]["last_node_id"]
        )

        assert len(first["data"]) == 5
        assert first["meta"]["has_more"] is True
        assert len(rest["data"]) == 2
        ids = [n["node_id"] for n in first["data"] + rest["data"]]
        assert len(set(ids)) == 7

    @pytest.mark.asyncio
    async def test_over_limit_page_is_empty_for_fresh_deletions(
        self, authenticated_client: AsyncClient
    ) -> None:
        space = await create_space(authenticated_client)
        node = await create_node(authenticated_client, space["id"], "Fresh")
        await trash_node(authenticated_client, space["id"], node["node_id"])

        page = await _list(authenticated_client, space["id"], isOverLimit="true")

        assert page["data"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [4, 101])
    async def test_size_out_of_range(self, authenticated_client: AsyncClient, size: int) -> None:
        space = await create_space(authenticated_client)

        response = await authenticated_client.get(
            f"{RUBBISH}/list", params={"size": size}, headers=space_headers(space["id"])
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_cursor_that_left_the_bin(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)
        node = await create_node(authenticated_client, space["id"], "Recovered")
        await trash_node(authenticated_client, space["id"], node["node_id"])
        await authenticated_client.post(
            f"{RUBBISH}/recover",
            json={"nodeId": node["node_id"]},
            headers=space_headers(space["id"]),
        )

        response = await authenticated_client.get(
            f"{RUBBISH}/list",
            params={"lastNodeId": node["node_id"]},
            headers=space_headers(space["id"]),
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "RUBBISH_NODE_POSITION_LOST"

    @pytest.mark.asyncio
    async def test_member_sees_only_own_deletions(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        owner = current_user.user
        space = await create_space(authenticated_client)
        admins_node = await create_node(authenticated_client, space["id"], "Admin's")
        await trash_node(authenticated_client, space["id"], admins_node["node_id"])

        guest = make_user("editor")
        await invite(authenticated_client, space["id"], guest.email)
        current_user.set(guest)
        await authenticated_client.post(f"{API}/spaces/{space['id']}/members/join")
        own = await create_node(authenticated_client, space["id"], "Mine")
        await trash_node(authenticated_client, space["id"], own["node_id"])

        guest_view = await _list(authenticated_client, space["id"])
        current_user.set(owner)
        admin_view = await _list(authenticated_client, space["id"])

        assert [n["node_id"] for n in guest_view["data"]] == [own["node_id"]]
        assert len(admin_view["data"]) == 2


class TestRecoverRubbish:
    @pytest.mark.asyncio
    async def test_recover_to_root(
        self,
        authenticated_client: AsyncClient,
        services: Any,
        publisher: RecordingPublisher,
    ) -> None:
        space = await create_space(authenticated_client)
        folder = await create_node(authenticated_client, space["id"], "Docs", "folder")
        sheet = await create_node(
            authenticated_client, space["id"], "Budget", parent_id=folder["node_id"]
        )
        await trash_node(authenticated_client, space["id"], sheet["node_id"])

        response = await authenticated_client.post(
            f"{RUBBISH}/recover",
            json={"nodeId": sheet["node_id"]},
            headers=space_headers(space["id"]),
        )

        assert response.status_code == 200
        body = response.json()
        root_id = await services.nodes.get_root_node_id(UUID(space["id"]))
        assert body["parent_id"] == str(root_id)
        assert body["role"] == "manager"
        assert (await _list(authenticated_client, space["id"]))["data"] == []
        audits = publisher.of_type(AuditSpaceEvent)
        assert audits[-1].action == AuditSpaceAction.RECOVER_RUBBISH_NODE

    @pytest.mark.asyncio
    async def test_recover_into_folder(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)
        folder = await create_node(authenticated_client, space["id"], "Docs", "folder")
        sheet = await create_node(authenticated_client, space["id"], "Budget")
        await trash_node(authenticated_client, space["id"], sheet["node_id"])

        response = await authenticated_client.post(
            f"{RUBBISH}/recover",
            json={"nodeId": sheet["node_id"], "parentId": folder["node_id"]},
            headers=space_headers(space["id"]),
        )

        assert response.json()["parent_id"] == folder["node_id"]

    @pytest.mark.asyncio
    async def test_recover_live_node(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)
        sheet = await create_node(authenticated_client, space["id"], "Budget")

        response = await authenticated_client.post(
            f"{RUBBISH}/recover",
            json={"nodeId": sheet["node_id"]},
            headers=space_headers(space["id"]),
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "RUBBISH_NODE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_member_cannot_recover_admins_deletion(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        space = await create_space(authenticated_client)
        sheet = await create_node(authenticated_client, space["id"], "Budget")
        await trash_node(authenticated_client, space["id"], sheet["node_id"])
        guest = make_user("editor")
        await invite(authenticated_client, space["id"], guest.email)
        current_user.set(guest)
        await authenticated_client.post(f"{API}/spaces/{space['id']}/members/join")

        response = await authenticated_client.post(
            f"{RUBBISH}/recover",
            json={"nodeId": sheet["node_id"]},
            headers=space_headers(space["id"]),
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "NODE_OPERATION_DENIED"


class TestDeleteRubbish:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["POST", "DELETE"])
    async def test_deletes_subtree(
        self, authenticated_client: AsyncClient, method: str
    ) -> None:
        space = await create_space(authenticated_client)
        folder = await create_node(authenticated_client, space["id"], "Docs", "folder")
        await create_node(authenticated_client, space["id"], "A", parent_id=folder["node_id"])
        await create_node(authenticated_client, space["id"], "B", parent_id=folder["node_id"])
        await trash_node(authenticated_client, space["id"], folder["node_id"])

        response = await authenticated_client.request(
            method, f"{RUBBISH}/delete/{folder['node_id']}", headers=space_headers(space["id"])
        )

        assert response.status_code == 200
        assert response.json() == {"deleted_count": 3}
        again = await authenticated_client.request(
            method, f"{RUBBISH}/delete/{folder['node_id']}", headers=space_headers(space["id"])
        )
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_not_a_member(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        space = await create_space(authenticated_client)
        current_user.set(make_user("stranger"))

        response = await authenticated_client.get(
            f"{RUBBISH}/list", headers=space_headers(space["id"])
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_A_MEMBER"
