"""Integration tests for the /team API endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


async def _add_team(client: AsyncClient, team_name: str, *user_ids: str) -> None:
    response = await client.post(
        "/team/add",
        json={
            "team_name": team_name,
            "members": [
                {"user_id": user_id, "username": f"user {user_id}", "is_active": True}
                for user_id in user_ids
            ],
        },
    )
    assert response.status_code == 201


@pytest.mark.integration
class TestTeamAPI:
    async def test_add_team(self, async_client: AsyncClient):
        response = await async_client.post(
            "/team/add",
            json={
                "team_name": "backend",
                "members": [
                    {"user_id": "u1", "username": "Alice", "is_active": True},
                    {"user_id": "u2", "username": "Bob", "is_active": False},
                ],
            },
        )

        assert response.status_code == 201
        assert response.json() == {
            "team": {
                "team_name": "backend",
                "members": [
                    {"user_id": "u1", "username": "Alice", "is_active": True},
                    {"user_id": "u2", "username": "Bob", "is_active": False},
                ],
            }
        }

    async def test_add_duplicate_team(self, async_client: AsyncClient):
        await _add_team(async_client, "backend", "u1")

        response = await async_client.post(
            "/team/add", json={"team_name": "backend", "members": []}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "TEAM_EXISTS"

    async def test_get_team(self, async_client: AsyncClient):
        await _add_team(async_client, "backend", "u2", "u1")

        response = await async_client.get("/team/get", params={"team_name": "backend"})

        assert response.status_code == 200
        body = response.json()
        assert body["team_name"] == "backend"
        assert [m["user_id"] for m in body["members"]] == ["u1", "u2"]

    async def test_get_unknown_team(self, async_client: AsyncClient):
        response = await async_client.get("/team/get", params={"team_name": "ghosts"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_get_team_requires_name(self, async_client: AsyncClient):
        response = await async_client.get("/team/get")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"


@pytest.mark.integration
class TestDeactivateAPI:
    async def test_deactivate_reassigns(self, async_client: AsyncClient):
        await _add_team(async_client, "backend", "A", "B", "C", "D")
        created = await async_client.post(
            "/pullRequest/create",
            json={"pull_request_id": "pr1", "pull_request_name": "Search", "author_id": "A"},
        )
        reviewers = created.json()["pr"]["assigned_reviewers"]
        departing = reviewers[0]

        response = await async_client.post(
            "/team/deactivate",
            json={"team_name": "backend", "users": [departing]},
        )

        assert response.status_code == 200
        body = response.json()
        members = {m["user_id"]: m["is_active"] for m in body["team"]["members"]}
        assert members[departing] is False
        assert len(body["pull_requests"]) == 1
        note = body["pull_requests"][0]
        assert note["pull_request_id"] == "pr1"
        assert note["old_reviewer_id"] == departing
        assert note["replaced_by"] not in {"A", departing, *reviewers}

    async def test_deactivate_outsider(self, async_client: AsyncClient):
        await _add_team(async_client, "backend", "A", "B")
        await _add_team(async_client, "frontend", "F")

        response = await async_client.post(
            "/team/deactivate",
            json={"team_name": "backend", "users": ["B", "F"]},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "TEAM_COMPATIBILITY"

    async def test_deactivate_unknown_team(self, async_client: AsyncClient):
        response = await async_client.post(
            "/team/deactivate",
            json={"team_name": "ghosts", "users": ["u1"]},
        )

        assert response.status_code == 404

    async def test_deactivate_requires_users(self, async_client: AsyncClient):
        response = await async_client.post(
            "/team/deactivate",
            json={"team_name": "backend", "users": []},
        )

        assert response.status_code == 400
