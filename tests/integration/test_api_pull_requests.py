"""Integration tests for the /pullRequest API endpoints."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient


@pytest.fixture
async def team_abc(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/team/add",
        json={
            "team_name": "backend",
            "members": [
                {"user_id": user_id, "username": user_id.lower(), "is_active": True}
                for user_id in ("A", "B", "C")
            ],
        },
    )
    assert response.status_code == 201


async def _create(client: AsyncClient, pull_request_id: str = "pr1", author_id: str = "A") -> Any:
    return await client.post(
        "/pullRequest/create",
        json={
            "pull_request_id": pull_request_id,
            "pull_request_name": "Add search",
            "author_id": author_id,
        },
    )


@pytest.mark.integration
class TestCreateAPI:
    async def test_create(self, async_client: AsyncClient, team_abc):
        response = await _create(async_client)

        assert response.status_code == 201
        pr = response.json()["pr"]
        assert pr["pull_request_id"] == "pr1"
        assert pr["pull_request_name"] == "Add search"
        assert pr["author_id"] == "A"
        assert pr["status"] == "OPEN"
        assert sorted(pr["assigned_reviewers"]) == ["B", "C"]
        assert pr["mergedAt"] is None

    async def test_duplicate(self, async_client: AsyncClient, team_abc):
        await _create(async_client)

        response = await _create(async_client)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "PR_EXISTS"

    async def test_unknown_author(self, async_client: AsyncClient):
        response = await _create(async_client, author_id="ghost")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_missing_fields(self, async_client: AsyncClient):
        response = await async_client.post("/pullRequest/create", json={"author_id": "A"})

        assert response.status_code == 400
        assert response.json() == {
            "error": {
                "code": "INVALID_REQUEST",
                "message": "invalid request body or parameters",
            }
        }


@pytest.mark.integration
class TestMergeAPI:
    async def test_merge(self, async_client: AsyncClient, team_abc):
        await _create(async_client)

        response = await async_client.post("/pullRequest/merge", json={"pull_request_id": "pr1"})

        assert response.status_code == 200
        pr = response.json()["pr"]
        assert pr["status"] == "MERGED"
        assert pr["mergedAt"] is not None
        assert pr["mergedAt"] == pr["merged_at"]

    async def test_merge_is_idempotent(self, async_client: AsyncClient, team_abc):
        await _create(async_client)
        first = await async_client.post("/pullRequest/merge", json={"pull_request_id": "pr1"})

        second = await async_client.post("/pullRequest/merge", json={"pull_request_id": "pr1"})

        assert second.status_code == 200
        assert second.json()["pr"]["mergedAt"] == first.json()["pr"]["mergedAt"]

    async def test_merge_unknown(self, async_client: AsyncClient):
        response = await async_client.post("/pullRequest/merge", json={"pull_request_id": "nope"})

        assert response.status_code == 404


@pytest.mark.integration
class TestReassignAPI:
    async def test_no_candidate(self, async_client: AsyncClient, team_abc):
        await _create(async_client)

        response = await async_client.post(
            "/pullRequest/reassign",
            json={"pull_request_id": "pr1", "old_reviewer_id": "B"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "NO_CANDIDATE"

    async def test_reassign(self, async_client: AsyncClient):
        await async_client.post(
            "/team/add",
            json={
                "team_name": "core",
                "members": [
                    {"user_id": user_id, "username": user_id, "is_active": True}
                    for user_id in ("K1", "K2", "K3", "K4")
                ],
            },
        )
        created = await _create(async_client, author_id="K1")
        reviewers = created.json()["pr"]["assigned_reviewers"]

        response = await async_client.post(
            "/pullRequest/reassign",
            json={"pull_request_id": "pr1", "old_reviewer_id": reviewers[0]},
        )

        assert response.status_code == 200
        body = response.json()
        (expected,) = {"K2", "K3", "K4"} - set(reviewers)
        assert body["replaced_by"] == expected
        assert sorted(body["pr"]["assigned_reviewers"]) == sorted([reviewers[1], expected])

    async def test_merged(self, async_client: AsyncClient, team_abc):
        await _create(async_client)
        await async_client.post("/pullRequest/merge", json={"pull_request_id": "pr1"})

        response = await async_client.post(
            "/pullRequest/reassign",
            json={"pull_request_id": "pr1", "old_reviewer_id": "B"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "PR_MERGED"

    async def test_not_assigned(self, async_client: AsyncClient, team_abc):
        await _create(async_client)

        response = await async_client.post(
            "/pullRequest/reassign",
            json={"pull_request_id": "pr1", "old_reviewer_id": "A"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "NOT_ASSIGNED"

    async def test_unknown_pull_request(self, async_client: AsyncClient):
        response = await async_client.post(
            "/pullRequest/reassign",
            json={"pull_request_id": "nope", "old_reviewer_id": "B"},
        )

        assert response.status_code == 404
