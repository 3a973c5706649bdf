"""Integration tests for Spaces API."""

import pytest
from httpx import AsyncClient

from tests.conftest import CurrentUserSwitch, make_user
from tests.integration.api.helpers import API, create_node, create_space, space_headers, trash_node


class TestSpacesApi:
    @pytest.mark.asyncio
    async def test_create_and_get_space(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        space = await create_space(authenticated_client, "  Marketing  ")

        assert space["name"] == "Marketing"
        assert space["owner_id"] == str(current_user.user.id)

        response = await authenticated_client.get(f"{API}/spaces/{space['id']}")
        assert response.status_code == 200
        assert response.json()["id"] == space["id"]

    @pytest.mark.asyncio
    async def test_creator_is_active_admin_not_invited(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        space = await create_space(authenticated_client)

        response = await authenticated_client.get(f"{API}/spaces/{space['id']}/members")

        members = response.json()["data"]
        assert len(members) == 1
        assert members[0]["user_id"] == str(current_user.user.id)
        assert members[0]["is_admin"] is True
        assert members[0]["is_active"] is True
        assert members[0]["is_point"] is False
        assert members[0]["status"] == "active"

    @pytest.mark.asyncio
    async def test_non_member_is_forbidden(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        space = await create_space(authenticated_client)
        current_user.set(make_user("outsider"))

        response = await authenticated_client.get(f"{API}/spaces/{space['id']}")

        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_A_MEMBER"

    @pytest.mark.asyncio
    async def test_unknown_space(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get(
            f"{API}/spaces/00000000-0000-0000-0000-000000000000"
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "SPACE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(f"{API}/spaces", json={"name": ""})

        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == "name"

    @pytest.mark.asyncio
    async def test_usage_refreshes_after_rubbish_purge(
        self, authenticated_client: AsyncClient
    ) -> None:
        space = await create_space(authenticated_client)
        sheet = await create_node(authenticated_client, space["id"], "Budget")
        usage_url = f"{API}/spaces/{space['id']}/usage"

        before = (await authenticated_client.get(usage_url)).json()
        await trash_node(authenticated_client, space["id"], sheet["node_id"])
        await authenticated_client.delete(
            f"{API}/node/rubbish/delete/{sheet['node_id']}", headers=space_headers(space["id"])
        )
        after = (await authenticated_client.get(usage_url)).json()

        assert after["node_count"] == before["node_count"] - 1
        assert after["attachment_bytes"] == 0
