# mypy: ignore-errors
# tests/v1/test_users.py
"""Tests for follow endpoints."""

from fastapi import status

from univibe.models import Follow


def test_follow_and_unfollow(client, db_session, test_user, other_user, other_auth_token) -> None:
    url = f"/api/v1/users/{test_user.id}/follow"

    response = client.post(url, headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"user_id": test_user.id, "following": True, "changed": True}
    assert db_session.get(Follow, (other_user.id, test_user.id)) is not None

    again = client.post(url, headers=other_auth_token)
    assert again.json()["changed"] is False

    removed = client.delete(url, headers=other_auth_token)
    assert removed.json() == {"user_id": test_user.id, "following": False, "changed": True}
    assert db_session.get(Follow, (other_user.id, test_user.id)) is None

    removed_again = client.delete(url, headers=other_auth_token)
    assert removed_again.json()["changed"] is False


def test_cannot_follow_self(client, test_user, auth_token) -> None:
    response = client.post(f"/api/v1/users/{test_user.id}/follow", headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_follow_unknown_user(client, auth_token) -> None:
    response = client.post("/api/v1/users/does-not-exist/follow", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
