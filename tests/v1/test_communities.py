# mypy: ignore-errors
# tests/v1/test_communities.py
"""Tests for community and membership endpoints."""

from fastapi import status
from sqlalchemy.exc import OperationalError

from community_engine.services.community import (
    ALREADY_MEMBER,
    DUPLICATE_NAME,
    LAST_ADMIN,
    NOT_ADMIN,
    NOT_AUTHORIZED_TO_REMOVE,
)

ALICE = "user:Alice"
BOB = "user:Bob"
CHARLIE = "user:Charlie"


def _create(client, name="Deno Fans", creator=ALICE) -> str:
    response = client.post(
        "/api/v1/communities/",
        json={"name": name, "description": "A community.", "creator": creator},
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["community"]


def _membership_of(client, user: str, community_id: str) -> dict:
    response = client.get("/api/v1/memberships/", params={"user": user})
    assert response.status_code == status.HTTP_200_OK
    return next(m for m in response.json() if m["community"] == community_id)


def test_root(client) -> None:
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["docs"] == "/docs"


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_create_and_get_community(client) -> None:
    community_id = _create(client)

    response = client.get(f"/api/v1/communities/{community_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "id": community_id,
        "name": "Deno Fans",
        "description": "A community.",
    }

    members = client.get(f"/api/v1/communities/{community_id}/members").json()
    assert [(m["user"], m["role"]) for m in members] == [(ALICE, "ADMIN")]


def test_list_communities(client) -> None:
    first = _create(client, "Deno Fans")
    second = _create(client, "Node Fans", creator=CHARLIE)
    response = client.get("/api/v1/communities/")
    assert response.status_code == status.HTTP_200_OK
    assert {c["id"] for c in response.json()} == {first, second}


def test_get_nonexistent_community(client) -> None:
    response = client.get("/api/v1/communities/missing")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_duplicate_community(client) -> None:
    _create(client)
    response = client.post(
        "/api/v1/communities/",
        json={"name": "Deno Fans", "description": "Another one.", "creator": CHARLIE},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == DUPLICATE_NAME


def test_update_requires_admin(client) -> None:
    community_id = _create(client)
    response = client.put(
        f"/api/v1/communities/{community_id}",
        json={"new_name": "Deno Haters", "new_description": "x", "requester": CHARLIE},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == NOT_ADMIN

    response = client.put(
        f"/api/v1/communities/{community_id}",
        json={"new_name": "Deno Friends", "new_description": "Renamed.", "requester": ALICE},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {}
    assert client.get(f"/api/v1/communities/{community_id}").json()["name"] == "Deno Friends"


def test_add_and_remove_members(client) -> None:
    community_id = _create(client)

    response = client.post(
        f"/api/v1/communities/{community_id}/members",
        json={"user": BOB, "inviter": ALICE},
    )
    assert response.status_code == status.HTTP_201_CREATED

    response = client.post(
        f"/api/v1/communities/{community_id}/members",
        json={"user": BOB, "inviter": ALICE},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == ALREADY_MEMBER

    response = client.delete(
        f"/api/v1/communities/{community_id}/members/{ALICE}",
        params={"requester": BOB},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == NOT_AUTHORIZED_TO_REMOVE

    response = client.delete(
        f"/api/v1/communities/{community_id}/members/{BOB}",
        params={"requester": BOB},
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT

    response = client.delete(
        f"/api/v1/communities/{community_id}/members/{BOB}",
        params={"requester": BOB},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_role_changes(client) -> None:
    community_id = _create(client)
    client.post(f"/api/v1/communities/{community_id}/members", json={"user": BOB, "inviter": ALICE})
    bob = _membership_of(client, BOB, community_id)
    alice = _membership_of(client, ALICE, community_id)

    response = client.put(
        f"/api/v1/memberships/{bob['id']}/role",
        json={"new_role": "ADMIN", "requester": BOB},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.put(
        f"/api/v1/memberships/{alice['id']}/role",
        json={"new_role": "MEMBER", "requester": ALICE},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == LAST_ADMIN

    response = client.put(
        f"/api/v1/memberships/{bob['id']}/role",
        json={"new_role": "SUPERUSER", "requester": ALICE},
    )
    assert response.status_code == 422

    response = client.put(
        f"/api/v1/memberships/{bob['id']}/role",
        json={"new_role": "ADMIN", "requester": ALICE},
    )
    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/memberships/{bob['id']}").json()["role"] == "ADMIN"


def test_get_nonexistent_membership(client) -> None:
    response = client.get("/api/v1/memberships/missing")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_community_cascades(client) -> None:
    community_id = _create(client)
    client.post(f"/api/v1/communities/{community_id}/members", json={"user": BOB, "inviter": ALICE})
    other_id = _create(client, "Node Fans", creator=CHARLIE)

    response = client.delete(f"/api/v1/communities/{community_id}", params={"requester": BOB})
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/communities/{community_id}", params={"requester": ALICE})
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert client.get(f"/api/v1/communities/{community_id}").status_code == 404
    memberships = client.get("/api/v1/memberships/").json()
    assert [m["community"] for m in memberships] == [other_id]


def test_storage_failure_maps_to_503(client, db_session, monkeypatch) -> None:
    def _fail(*_args, **_kwargs):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", _fail)
    response = client.post(
        "/api/v1/communities/",
        json={"name": "Deno Fans", "description": "", "creator": ALICE},
    )
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json() == {"detail": "Storage unavailable"}
