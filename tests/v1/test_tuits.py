# mypy: ignore-errors
"""Tests for tuit endpoints."""

import threading
import time

from fastapi import status
from sqlalchemy import select

from tuiter_stage.models import Like, Tuit
from tuiter_stage.services.object_store import MediaKind

from tests.fakes import MP4, PNG


def test_create_tuit_for_self(client, alice, headers_for) -> None:
    response = client.post(
        "/api/v1/users/my/tuits",
        data={"tuit": "hello world"},
        headers=headers_for(alice),
    )

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["tuit"] == "hello world"
    assert body["posted_by"] == alice.id
    assert body["likes"] == 0
    assert body["author"]["username"] == "alice"
    assert body["author"]["password"] == "******"


def test_create_tuit_with_images(client, alice, headers_for, object_store) -> None:
    response = client.post(
        f"/api/v1/users/{alice.id}/tuits",
        data={"tuit": "look"},
        files=[
            ("image", ("a.png", PNG, "image/png")),
            ("image", ("b.png", PNG, "image/png")),
        ],
        headers=headers_for(alice),
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert set(response.json()["image"]) == object_store.urls(MediaKind.IMAGE)
    assert len(response.json()["image"]) == 2


def test_create_tuit_with_image_and_video(client, alice, headers_for, object_store) -> None:
    response = client.post(
        f"/api/v1/users/{alice.id}/tuits",
        data={"tuit": "both"},
        files=[
            ("image", ("a.png", PNG, "image/png")),
            ("video", ("v.mp4", MP4, "video/mp4")),
        ],
        headers=headers_for(alice),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert object_store.upload_calls == 0


def test_create_tuit_too_many_images(client, alice, headers_for, object_store) -> None:
    files = [("image", (f"{i}.png", PNG, "image/png")) for i in range(7)]

    response = client.post(
        f"/api/v1/users/{alice.id}/tuits",
        data={"tuit": "gallery"},
        files=files,
        headers=headers_for(alice),
    )

    assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    assert object_store.upload_calls == 0


def test_create_tuit_empty_text(client, alice, headers_for) -> None:
    response = client.post(
        f"/api/v1/users/{alice.id}/tuits",
        data={"tuit": "   "},
        headers=headers_for(alice),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_tuit_for_someone_else(client, alice, bob, headers_for) -> None:
    response = client.post(
        f"/api/v1/users/{alice.id}/tuits",
        data={"tuit": "impersonation"},
        headers=headers_for(bob),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_creates_tuit_for_user(client, alice, admin, headers_for) -> None:
    response = client.post(
        f"/api/v1/users/{alice.id}/tuits",
        data={"tuit": "on behalf"},
        headers=headers_for(admin),
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["posted_by"] == alice.id


def test_create_tuit_requires_login(client, alice) -> None:
    response = client.post(f"/api/v1/users/{alice.id}/tuits", data={"tuit": "anon"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_get_tuit(client, alice, make_tuit) -> None:
    tuit = make_tuit(alice, "readable")

    response = client.get(f"/api/v1/tuits/{tuit.id}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["tuit"] == "readable"


def test_get_tuit_invalid_and_missing(client) -> None:
    assert client.get("/api/v1/tuits/not-an-id").status_code == status.HTTP_400_BAD_REQUEST
    assert client.get(f"/api/v1/tuits/{'0' * 32}").status_code == status.HTTP_404_NOT_FOUND


def test_list_tuits_by_user(client, alice, bob, make_tuit) -> None:
    make_tuit(alice, "one")
    make_tuit(alice, "two", image=["https://media.example.test/image/1"])
    make_tuit(bob, "other")

    everything = client.get("/api/v1/tuits").json()
    mine = client.get(f"/api/v1/users/{alice.id}/tuits").json()
    with_media = client.get(f"/api/v1/users/{alice.id}/tuits-with-media").json()

    assert len(everything) == 3
    assert {tuit["tuit"] for tuit in mine} == {"one", "two"}
    assert [tuit["tuit"] for tuit in with_media] == ["two"]


def test_update_by_non_owner_is_rejected(client, db_session, alice, bob, headers_for, make_tuit) -> None:
    tuit = make_tuit(alice, "original")

    response = client.put(
        f"/api/v1/tuits/{tuit.id}",
        data={"tuit": "defaced"},
        headers=headers_for(bob),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    db_session.expire_all()
    assert db_session.get(Tuit, tuit.id).tuit == "original"


def test_update_by_admin(client, alice, admin, headers_for, make_tuit) -> None:
    tuit = make_tuit(alice, "original")

    response = client.put(
        f"/api/v1/tuits/{tuit.id}",
        data={"tuit": "moderated"},
        headers=headers_for(admin),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["tuit"] == "moderated"


def test_update_merges_retained_and_new_images(client, alice, headers_for, make_tuit) -> None:
    kept = "https://media.example.test/image/kept"
    dropped = "https://media.example.test/image/dropped"
    tuit = make_tuit(alice, "gallery", image=[kept, dropped])

    response = client.put(
        f"/api/v1/tuits/{tuit.id}",
        data={"image": kept},
        files=[("image", ("new.png", PNG, "image/png"))],
        headers=headers_for(alice),
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["tuit"] == "gallery"
    assert body["image"][0] == kept
    assert dropped not in body["image"]
    assert len(body["image"]) == 2


def test_update_rejects_video_on_image_tuit(client, alice, headers_for, make_tuit, object_store) -> None:
    kept = "https://media.example.test/image/kept"
    tuit = make_tuit(alice, "gallery", image=[kept])

    response = client.put(
        f"/api/v1/tuits/{tuit.id}",
        data={"image": kept},
        files=[("video", ("v.mp4", MP4, "video/mp4"))],
        headers=headers_for(alice),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert object_store.upload_calls == 0


def test_delete_tuit(client, db_session, alice, headers_for, make_tuit) -> None:
    tuit_id = make_tuit(alice).id

    response = client.delete(f"/api/v1/tuits/{tuit_id}", headers=headers_for(alice))

    assert response.status_code == status.HTTP_200_OK
    db_session.expire_all()
    assert db_session.get(Tuit, tuit_id) is None


def test_delete_all_tuits_requires_admin(client, alice, admin, headers_for, make_tuit) -> None:
    make_tuit(alice)
    make_tuit(alice)

    assert client.delete("/api/v1/tuits", headers=headers_for(alice)).status_code == status.HTTP_403_FORBIDDEN

    response = client.delete("/api/v1/tuits", headers=headers_for(admin))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"deleted": 2}


def test_delete_by_non_owner_is_rejected(client, db_session, alice, bob, headers_for, make_tuit) -> None:
    tuit = make_tuit(alice, "keep me")
    tuit_id = tuit.id
    client.put(f"/api/v1/users/my/likes/{tuit_id}", headers=headers_for(alice))

    response = client.delete(f"/api/v1/tuits/{tuit_id}", headers=headers_for(bob))

    assert response.status_code == status.HTTP_403_FORBIDDEN
    db_session.expire_all()
    stored = db_session.get(Tuit, tuit_id)
    assert stored is not None
    assert stored.likes == 1
    assert db_session.scalars(select(Like).where(Like.tuit_id == tuit_id)).all() != []


def test_delete_by_admin(client, db_session, alice, admin, headers_for, make_tuit) -> None:
    tuit_id = make_tuit(alice).id
    client.put(f"/api/v1/users/my/likes/{tuit_id}", headers=headers_for(alice))

    response = client.delete(f"/api/v1/tuits/{tuit_id}", headers=headers_for(admin))

    assert response.status_code == status.HTTP_200_OK
    db_session.expire_all()
    assert db_session.get(Tuit, tuit_id) is None
    assert db_session.scalars(select(Like).where(Like.tuit_id == tuit_id)).all() == []


def test_non_text_tuit_body_is_invalid_input(client, alice, headers_for, make_tuit) -> None:
    tuit = make_tuit(alice, "original")

    created = client.post("/api/v1/users/my/tuits", json={"tuit": 5}, headers=headers_for(alice))
    updated = client.put(f"/api/v1/tuits/{tuit.id}", json={"tuit": 5}, headers=headers_for(alice))

    assert created.status_code == status.HTTP_400_BAD_REQUEST
    assert updated.status_code == status.HTTP_400_BAD_REQUEST


def test_non_text_retained_url_is_invalid_input(client, alice, headers_for, make_tuit) -> None:
    tuit = make_tuit(alice, "gallery", image=["https://media.example.test/image/1"])

    response = client.put(
        f"/api/v1/tuits/{tuit.id}",
        json={"image": ["https://media.example.test/image/1", 42]},
        headers=headers_for(alice),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_slow_upload_does_not_block_other_requests(client, alice, headers_for, object_store) -> None:
    """Uploads run off the event loop, so unrelated requests are served meanwhile."""
    object_store.upload_delay = 1.0
    headers = headers_for(alice)
    results = {}

    def post_tuit() -> None:
        results["create"] = client.post(
            "/api/v1/users/my/tuits",
            data={"tuit": "slow"},
            files=[("image", ("a.png", PNG, "image/png"))],
            headers=headers,
        )

    worker = threading.Thread(target=post_tuit)
    worker.start()
    time.sleep(0.2)
    started = time.monotonic()
    health = client.get("/health")
    elapsed = time.monotonic() - started
    worker.join()

    assert health.status_code == status.HTTP_200_OK
    assert elapsed < 0.5
    assert results["create"].status_code == status.HTTP_201_CREATED
