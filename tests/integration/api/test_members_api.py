"""Integration tests for Members API: invitation, join, removal and restoration."""

from typing import Any

import pytest
from httpx import AsyncClient

from domain.entities.audit import AuditSpaceAction, AuditSpaceEvent, InvitationSentEvent
from tests.conftest import CurrentUserSwitch, make_user
from tests.integration.api.helpers import API, create_space, invite, remove
from tests.unit.conftest import RecordingPublisher


async def _members(client: AsyncClient, space_id: str) -> list[dict[str, Any]]:
    response = await client.get(f"{API}/spaces/{space_id}/members")
    assert response.status_code == 200, response.text
    return response.json()["data"]


async def _join(client: AsyncClient, space_id: str) -> dict[str, Any]:
    response = await client.post(f"{API}/spaces/{space_id}/members/join")
    assert response.status_code == 200, response.text
    return response.json()


class TestInviteMembers:
    @pytest.mark.asyncio
    async def test_invites_new_emails(
        self, authenticated_client: AsyncClient, publisher: RecordingPublisher
    ) -> None:
        space = await create_space(authenticated_client)
        guest = make_user("guest")

        response = await invite(authenticated_client, space["id"], guest.email.upper())

        assert response.status_code == 200
        body = response.json()
        assert body["meta"] == {"total": 1, "failed": 0}
        item = body["data"][0]
        assert item["email"] == guest.email
        assert item["outcome"] == "created"

        pending = [m for m in await _members(authenticated_client, space["id"]) if not m["is_admin"]]
        assert pending[0]["id"] == item["member_id"]
        assert pending[0]["is_active"] is False
        assert pending[0]["is_point"] is True
        assert pending[0]["status"] == "inactive"

        notices = publisher.of_type(InvitationSentEvent)
        assert [n.email for n in notices] == [guest.email]

    @pytest.mark.asyncio
    async def test_duplicate_emails_in_one_request(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)
        guest = make_user("dup")

        response = await invite(authenticated_client, space["id"], guest.email, guest.email)

        assert len(response.json()["data"]) == 1

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)

        response = await invite(authenticated_client, space["id"], "not-an-email")

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_non_admin_cannot_invite(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        space = await create_space(authenticated_client)
        guest = make_user("guest")
        await invite(authenticated_client, space["id"], guest.email)
        current_user.set(guest)
        await _join(authenticated_client, space["id"])

        response = await invite(authenticated_client, space["id"], make_user("x").email)

        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"


class TestJoinSpace:
    @pytest.mark.asyncio
    async def test_join_activates_invitation(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        space = await create_space(authenticated_client)
        guest = make_user("joiner")
        invited = (await invite(authenticated_client, space["id"], guest.email)).json()

        current_user.set(guest)
        member = await _join(authenticated_client, space["id"])

        assert member["id"] == invited["data"][0]["member_id"]
        assert member["is_active"] is True
        assert member["user_id"] == str(guest.id)
        assert member["status"] == "active"

    @pytest.mark.asyncio
    async def test_join_without_invitation(
        self, authenticated_client: AsyncClient, current_user: CurrentUserSwitch
    ) -> None:
        space = await create_space(authenticated_client)
        current_user.set(make_user("uninvited"))

        response = await authenticated_client.post(f"{API}/spaces/{space['id']}/members/join")

        assert response.status_code == 404
        assert response.json()["error_code"] == "MEMBER_NOT_FOUND"


class TestRemoveAndRestore:
    @pytest.mark.asyncio
    async def test_reinvite_restores_same_membership(
        self,
        authenticated_client: AsyncClient,
        current_user: CurrentUserSwitch,
        publisher: RecordingPublisher,
    ) -> None:
        owner = current_user.user
        space = await create_space(authenticated_client)
        guest = make_user("returning")
        member_id = (await invite(authenticated_client, space["id"], guest.email)).json()["data"][
            0
        ]["member_id"]
        current_user.set(guest)
        await _join(authenticated_client, space["id"])
        current_user.set(owner)

        removed = await remove(authenticated_client, space["id"], member_id)
        assert removed.status_code == 200
        assert removed.json() == {"removed": 1}
        assert member_id not in [m["id"] for m in await _members(authenticated_client, space["id"])]

        again = (await invite(authenticated_client, space["id"], guest.email)).json()["data"][0]

        assert again["outcome"] == "restored"
        assert again["member_id"] == member_id
        restored = next(
            m for m in await _members(authenticated_client, space["id"]) if m["id"] == member_id
        )
        assert restored["is_active"] is False
        assert restored["user_id"] == str(guest.id)

        actions = [e.action for e in publisher.of_type(AuditSpaceEvent)]
        assert actions.count(AuditSpaceAction.REMOVE_MEMBER) == 1
        assert actions.count(AuditSpaceAction.INVITE_MEMBER) == 2

        current_user.set(guest)
        rejoined = await _join(authenticated_client, space["id"])
        assert rejoined["id"] == member_id
        assert rejoined["is_active"] is True

    @pytest.mark.asyncio
    async def test_removing_twice_is_a_no_op(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)
        member_id = (await invite(authenticated_client, space["id"], make_user("x").email)).json()[
            "data"
        ][0]["member_id"]

        first = await remove(authenticated_client, space["id"], member_id)
        second = await remove(authenticated_client, space["id"], member_id)

        assert first.json()["removed"] == 1
        assert second.json()["removed"] == 0

    @pytest.mark.asyncio
    async def test_owner_cannot_be_removed(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)
        owner_member = (await _members(authenticated_client, space["id"]))[0]

        response = await remove(authenticated_client, space["id"], owner_member["id"])

        assert response.status_code == 400
        assert response.json()["error_code"] == "CANNOT_REMOVE_OWNER"

    @pytest.mark.asyncio
    async def test_empty_member_list_rejected(self, authenticated_client: AsyncClient) -> None:
        space = await create_space(authenticated_client)

        response = await remove(authenticated_client, space["id"])

        assert response.status_code == 422
