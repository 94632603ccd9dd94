from httpx import AsyncClient


async def _post(client: AsyncClient, headers: dict, content: str = "a post") -> dict:
    resp = await client.post("/api/posts", json={"content": content}, headers=headers)
    return resp.json()["post"]


async def _get_post(client: AsyncClient, post_id: str) -> dict:
    return (await client.get(f"/api/posts/{post_id}")).json()["post"]


async def test_like_and_unlike(client: AsyncClient, register) -> None:
    _, alice_headers = await register("alice")
    bob, bob_headers = await register("bob")
    post = await _post(client, alice_headers)

    liked = await client.post(f"/api/posts/{post['id']}/like", headers=bob_headers)
    assert liked.status_code == 201
    assert liked.json()["like"]["user_id"] == bob["id"]
    assert (await _get_post(client, post["id"]))["like_count"] == 1

    again = await client.post(f"/api/posts/{post['id']}/like", headers=bob_headers)
    assert again.status_code == 400
    assert again.json()["detail"] == "Post already liked"
    assert (await _get_post(client, post["id"]))["like_count"] == 1

    unliked = await client.delete(f"/api/posts/{post['id']}/like", headers=bob_headers)
    assert unliked.json()["message"] == "Post unliked successfully"
    noop = await client.delete(f"/api/posts/{post['id']}/like", headers=bob_headers)
    assert noop.status_code == 200
    assert noop.json()["message"] == "Post was not liked"
    assert (await _get_post(client, post["id"]))["like_count"] == 0


async def test_like_counts_each_user_once(client: AsyncClient, register) -> None:
    _, alice_headers = await register("alice")
    post = await _post(client, alice_headers)
    for name in ("bob", "carol", "dan"):
        _, headers = await register(name)
        await client.post(f"/api/posts/{post['id']}/like", headers=headers)
    assert (await _get_post(client, post["id"]))["like_count"] == 3


async def test_like_missing_post_is_404(client: AsyncClient, register) -> None:
    _, headers = await register("alice")
    resp = await client.post("/api/posts/00000000-0000-0000-0000-000000000000/like", headers=headers)
    assert resp.status_code == 404


async def test_comment_lifecycle(client: AsyncClient, register) -> None:
    _, alice_headers = await register("alice")
    bob, bob_headers = await register("bob")
    post = await _post(client, alice_headers)

    created = await client.post(
        f"/api/posts/{post['id']}/comments", json={"content": "first!"}, headers=bob_headers
    )
    assert created.status_code == 201
    comment = created.json()["comment"]
    assert comment["user"]["id"] == bob["id"]
    assert (await _get_post(client, post["id"]))["comment_count"] == 1

    listing = (await client.get(f"/api/posts/{post['id']}/comments")).json()
    assert [c["id"] for c in listing["comments"]] == [comment["id"]]
    assert listing["pagination"]["total"] == 1

    url = f"/api/posts/{post['id']}/comments/{comment['id']}"
    assert (await client.patch(url, json={"content": "hijack"}, headers=alice_headers)).status_code == 403
    edited = await client.put(url, json={"content": "edited"}, headers=bob_headers)
    assert edited.status_code == 200
    assert edited.json()["comment"]["content"] == "edited"

    assert (await client.delete(url, headers=alice_headers)).status_code == 403
    assert (await client.delete(url, headers=bob_headers)).status_code == 200
    assert (await _get_post(client, post["id"]))["comment_count"] == 0
    assert (await client.delete(url, headers=bob_headers)).status_code == 404


async def test_comment_validation(client: AsyncClient, register) -> None:
    _, headers = await register("alice")
    post = await _post(client, headers)
    too_long = await client.post(f"/api/posts/{post['id']}/comments", json={"content": "c" * 501}, headers=headers)
    assert too_long.status_code == 400
    blank = await client.post(f"/api/posts/{post['id']}/comments", json={"content": " "}, headers=headers)
    assert blank.status_code == 400
    assert (await _get_post(client, post["id"]))["comment_count"] == 0
