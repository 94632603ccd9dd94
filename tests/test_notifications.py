from httpx import AsyncClient

from socialconnect.models.notification import Notification
from socialconnect.services import notification_service


async def _notifications(client: AsyncClient, headers: dict) -> dict:
    resp = await client.get("/api/notifications", headers=headers)
    assert resp.status_code == 200
    return resp.json()


async def test_follow_like_comment_notify_recipient(client: AsyncClient, register) -> None:
    alice, alice_headers = await register("alice")
    bob, bob_headers = await register("bob")

    await client.post(f"/api/users/{alice['id']}/follow", headers=bob_headers)
    post = (await client.post("/api/posts", json={"content": "hi"}, headers=alice_headers)).json()["post"]
    await client.post(f"/api/posts/{post['id']}/like", headers=bob_headers)
    await client.post(
        f"/api/posts/{post['id']}/comments", json={"content": "z" * 80}, headers=bob_headers
    )

    data = await _notifications(client, alice_headers)
    assert [n["type"] for n in data["notifications"]] == ["comment", "like", "follow"]
    assert all(n["actor"]["id"] == bob["id"] for n in data["notifications"])
    assert data["unread_count"] == 3
    comment_note = data["notifications"][0]
    assert comment_note["post"]["id"] == post["id"]
    assert comment_note["content"] == "z" * 50 + "..."

    assert (await _notifications(client, bob_headers))["notifications"] == []


async def test_no_notification_for_own_actions(client: AsyncClient, register) -> None:
    _, headers = await register("alice")
    post = (await client.post("/api/posts", json={"content": "mine"}, headers=headers)).json()["post"]
    await client.post(f"/api/posts/{post['id']}/like", headers=headers)
    await client.post(f"/api/posts/{post['id']}/comments", json={"content": "me too"}, headers=headers)

    data = await _notifications(client, headers)
    assert data["notifications"] == []
    assert data["unread_count"] == 0


async def test_mark_read_only_by_recipient(client: AsyncClient, register) -> None:
    alice, alice_headers = await register("alice")
    _, bob_headers = await register("bob")
    await client.post(f"/api/users/{alice['id']}/follow", headers=bob_headers)

    note = (await _notifications(client, alice_headers))["notifications"][0]
    url = f"/api/notifications/{note['id']}/read"

    forbidden = await client.put(url, headers=bob_headers)
    assert forbidden.status_code == 403

    ok = await client.patch(url, headers=alice_headers)
    assert ok.status_code == 200
    assert ok.json()["notification"]["is_read"] is True

    count = await client.get("/api/notifications/unread-count", headers=alice_headers)
    assert count.json() == {"count": 0}

    missing = await client.put("/api/notifications/00000000-0000-0000-0000-000000000000/read", headers=alice_headers)
    assert missing.status_code == 404


async def test_mark_all_read(client: AsyncClient, register) -> None:
    alice, alice_headers = await register("alice")
    for name in ("bob", "carol"):
        _, headers = await register(name)
        await client.post(f"/api/users/{alice['id']}/follow", headers=headers)

    resp = await client.post("/api/notifications/mark-all-read", headers=alice_headers)
    assert resp.json() == {"updated": 2}
    data = await _notifications(client, alice_headers)
    assert data["unread_count"] == 0
    assert all(n["is_read"] for n in data["notifications"])


async def test_notifications_require_auth(client: AsyncClient) -> None:
    assert (await client.get("/api/notifications")).status_code == 401


async def test_failed_notification_insert_keeps_primary_write(client: AsyncClient, register, monkeypatch) -> None:
    alice, alice_headers = await register("alice")
    _, bob_headers = await register("bob")
    post = (await client.post("/api/posts", json={"content": "hi"}, headers=alice_headers)).json()["post"]

    def rejected_notification(**fields):
        # Violates the type check constraint, so the insert fails at commit.
        return Notification(**{**fields, "type": "bogus"})

    monkeypatch.setattr(notification_service, "Notification", rejected_notification)

    follow = await client.post(f"/api/users/{alice['id']}/follow", headers=bob_headers)
    assert follow.status_code == 201
    like = await client.post(f"/api/posts/{post['id']}/like", headers=bob_headers)
    assert like.status_code == 201
    assert like.json()["message"] == "Post liked successfully"
    comment = await client.post(f"/api/posts/{post['id']}/comments", json={"content": "yo"}, headers=bob_headers)
    assert comment.status_code == 201

    monkeypatch.undo()

    stored = (await client.get(f"/api/posts/{post['id']}")).json()["post"]
    assert stored["like_count"] == 1
    assert stored["comment_count"] == 1
    profile = (await client.get(f"/api/users/{alice['id']}")).json()["user"]
    assert profile["followers_count"] == 1
    assert len((await client.get(f"/api/posts/{post['id']}/comments")).json()["comments"]) == 1

    data = await _notifications(client, alice_headers)
    assert data["notifications"] == []
    assert data["unread_count"] == 0
