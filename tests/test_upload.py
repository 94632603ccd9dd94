from pathlib import Path

from httpx import AsyncClient

from socialconnect.core.config import settings
from socialconnect.services.storage_service import LocalStorage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


async def test_upload_image(client: AsyncClient, register) -> None:
    user, headers = await register("alice")
    resp = await client.post(
        "/api/upload",
        files={"file": ("avatar.png", PNG_BYTES, "image/png")},
        data={"bucket": "avatars"},
        headers=headers,
    )
    assert resp.status_code == 200
    url = resp.json()["url"]
    assert f"/uploads/avatars/{user['id']}/" in url
    assert url.endswith(".png")

    rel = url.split("/uploads/", 1)[1]
    assert (Path(settings.UPLOAD_DIR) / rel).read_bytes() == PNG_BYTES

    served = await client.get(f"/uploads/{rel}")
    assert served.status_code == 200


async def test_upload_rejections(client: AsyncClient, register) -> None:
    _, headers = await register("alice")
    not_image = await client.post(
        "/api/upload", files={"file": ("notes.txt", b"hello", "text/plain")}, headers=headers
    )
    assert not_image.status_code == 400

    bad_bucket = await client.post(
        "/api/upload",
        files={"file": ("a.png", PNG_BYTES, "image/png")},
        data={"bucket": "secrets"},
        headers=headers,
    )
    assert bad_bucket.status_code == 400

    too_big = await client.post(
        "/api/upload",
        files={"file": ("big.png", b"0" * (settings.UPLOAD_MAX_BYTES + 1), "image/png")},
        headers=headers,
    )
    assert too_big.status_code == 400

    missing = await client.post("/api/upload", headers=headers)
    assert missing.status_code == 400


async def test_upload_requires_auth(client: AsyncClient) -> None:
    resp = await client.post("/api/upload", files={"file": ("a.png", PNG_BYTES, "image/png")})
    assert resp.status_code == 401


async def test_deleting_post_removes_its_image(client: AsyncClient, register) -> None:
    _, headers = await register("alice")
    url = (
        await client.post(
            "/api/upload", files={"file": ("p.png", PNG_BYTES, "image/png")}, headers=headers
        )
    ).json()["url"]
    post = (
        await client.post("/api/posts", json={"content": "pic", "image_url": url}, headers=headers)
    ).json()["post"]
    path = Path(settings.UPLOAD_DIR) / url.split("/uploads/", 1)[1]
    assert path.exists()

    await client.delete(f"/api/posts/{post['id']}", headers=headers)
    assert not path.exists()


async def test_deleting_post_keeps_images_owned_by_others(client: AsyncClient, register) -> None:
    _, alice_headers = await register("alice")
    _, mallory_headers = await register("mallory")
    avatar_url = (
        await client.post(
            "/api/upload",
            files={"file": ("me.png", PNG_BYTES, "image/png")},
            data={"bucket": "avatars"},
            headers=alice_headers,
        )
    ).json()["url"]
    post = (
        await client.post(
            "/api/posts", json={"content": "borrowed", "image_url": avatar_url}, headers=mallory_headers
        )
    ).json()["post"]

    resp = await client.delete(f"/api/posts/{post['id']}", headers=mallory_headers)
    assert resp.status_code == 200
    assert (Path(settings.UPLOAD_DIR) / avatar_url.split("/uploads/", 1)[1]).exists()


def test_storage_delete_checks_owner(tmp_path: Path) -> None:
    storage = LocalStorage(base_dir=str(tmp_path), base_url="http://media")
    url = storage.save("avatars", "alice-id", PNG_BYTES, ".png")
    escaped = url.replace("/uploads/avatars/alice-id/", "/uploads/posts/mallory-id/../../avatars/alice-id/")

    assert storage.delete(url, owner_id="mallory-id") is False
    assert storage.delete(escaped, owner_id="mallory-id") is False
    assert storage.delete(url, owner_id="alice-id") is True
    assert not any(tmp_path.rglob("*.png"))
