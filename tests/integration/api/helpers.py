"""Request helpers shared by the API integration tests."""

from typing import Any

from httpx import AsyncClient, Response

API = "/api/v1"


async def create_space(client: AsyncClient, name: str = "Acme") -> dict[str, Any]:
    response = await client.post(f"{API}/spaces", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


def space_headers(space_id: str) -> dict[str, str]:
    return {"X-Space-Id": space_id}


async def invite(client: AsyncClient, space_id: str, *emails: str) -> Response:
    return await client.post(
        f"{API}/spaces/{space_id}/members/invitations", json={"emails": list(emails)}
    )


async def remove(client: AsyncClient, space_id: str, *member_ids: str) -> Response:
    return await client.request(
        "DELETE", f"{API}/spaces/{space_id}/members", json={"member_ids": list(member_ids)}
    )


async def create_node(
    client: AsyncClient,
    space_id: str,
    name: str,
    node_type: str = "datasheet",
    parent_id: str | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"name": name, "type": node_type}
    if parent_id:
        body["parentId"] = parent_id
    response = await client.post(f"{API}/nodes", json=body, headers=space_headers(space_id))
    assert response.status_code == 201, response.text
    return response.json()


async def trash_node(client: AsyncClient, space_id: str, node_id: str) -> None:
    response = await client.delete(f"{API}/nodes/{node_id}", headers=space_headers(space_id))
    assert response.status_code == 204, response.text
