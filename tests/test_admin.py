from httpx import AsyncClient


async def _admin(register, make_admin) -> tuple[dict, dict]:
    admin, headers = await register("root")
    await make_admin(admin["id"])
    return admin, headers


async def test_admin_routes_forbidden_for_users(client: AsyncClient, register) -> None:
    user, headers = await register("alice")
    assert (await client.get("/api/admin/users", headers=headers)).status_code == 403
    assert (await client.get("/api/admin/posts", headers=headers)).status_code == 403
    assert (await client.get("/api/admin/stats", headers=headers)).status_code == 403
    resp = await client.post(f"/api/admin/users/{user['id']}/deactivate", headers=headers)
    assert resp.status_code == 403
    assert (await client.get("/api/admin/stats")).status_code == 401


async def test_admin_lists_and_stats(client: AsyncClient, register, make_admin) -> None:
    _, admin_headers = await _admin(register, make_admin)
    _, alice_headers = await register("alice")
    _, bob_headers = await register("bob")
    post = (await client.post("/api/posts", json={"content": "hello"}, headers=alice_headers)).json()["post"]
    await client.post(f"/api/posts/{post['id']}/like", headers=bob_headers)
    await client.post(f"/api/posts/{post['id']}/comments", json={"content": "hey"}, headers=bob_headers)
    await client.post("/api/auth/login", json={"username": "alice", "password": "password123"})

    users = (await client.get("/api/admin/users", headers=admin_headers)).json()
    assert users["pagination"]["limit"] == 50
    assert users["pagination"]["total"] == 3
    assert "email" in users["users"][0]

    posts = (await client.get("/api/admin/posts", headers=admin_headers)).json()
    assert posts["pagination"]["total"] == 1

    stats = (await client.get("/api/admin/stats", headers=admin_headers)).json()["stats"]
    assert stats == {
        "total_users": 3,
        "total_posts": 1,
        "total_likes": 1,
        "total_comments": 1,
        "active_today": 1,
    }


async def test_deactivate_user(client: AsyncClient, register, make_admin) -> None:
    _, admin_headers = await _admin(register, make_admin)
    alice, alice_headers = await register("alice")

    resp = await client.post(f"/api/admin/users/{alice['id']}/deactivate", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["is_active"] is False

    assert (await client.get("/api/users/me", headers=alice_headers)).status_code == 403
    login = await client.post("/api/auth/login", json={"username": "alice", "password": "password123"})
    assert login.status_code == 403
    assert (await client.get(f"/api/users/{alice['id']}")).status_code == 404
    assert (await client.get(f"/api/users/{alice['id']}", headers=admin_headers)).status_code == 200

    listed = (await client.get("/api/admin/users", headers=admin_headers)).json()
    assert alice["id"] in [u["id"] for u in listed["users"]]
    public = (await client.get("/api/users")).json()
    assert alice["id"] not in [u["id"] for u in public["users"]]


async def test_deactivate_rules(client: AsyncClient, register, make_admin) -> None:
    admin, admin_headers = await _admin(register, make_admin)
    other, other_headers = await register("other_admin")
    await make_admin(other["id"])

    other_admin = await client.post(f"/api/admin/users/{other['id']}/deactivate", headers=admin_headers)
    assert other_admin.status_code == 200
    assert other_admin.json()["user"]["is_active"] is False
    assert (await client.get("/api/admin/stats", headers=other_headers)).status_code == 403

    own = await client.post(f"/api/admin/users/{admin['id']}/deactivate", headers=admin_headers)
    assert own.status_code == 400
    assert own.json()["detail"] == "Cannot deactivate your own account"
    missing = await client.post(
        "/api/admin/users/00000000-0000-0000-0000-000000000000/deactivate", headers=admin_headers
    )
    assert missing.status_code == 404
