"""Tests for editors, public links and the advisory edit lock over HTTP."""

import uuid

import pytest

from conftest import add_editor, create_doc


# =============================================================================
# Editors
# =============================================================================


@pytest.mark.asyncio
async def test_add_editor_is_idempotent(client, alice, bob):
    doc = await create_doc(client, alice)

    first = await add_editor(client, alice, doc["id"], "bob@example.com")
    second = await add_editor(client, alice, doc["id"], "BOB@example.com")

    assert first == {"ok": True, "editorIds": [bob["id"]]}
    assert second == first


@pytest.mark.asyncio
async def test_add_owner_as_editor_is_rejected(client, alice):
    doc = await create_doc(client, alice)

    response = await client.post(
        f"/api/docs/{doc['id']}/editors", json={"email": "alice@example.com"}, headers=alice["headers"]
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Owner already has access"


@pytest.mark.asyncio
async def test_add_unknown_editor(client, alice):
    doc = await create_doc(client, alice)

    response = await client.post(
        f"/api/docs/{doc['id']}/editors", json={"email": "ghost@example.com"}, headers=alice["headers"]
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


@pytest.mark.asyncio
async def test_editor_cannot_add_editors(client, alice, bob, carol):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")

    response = await client.post(
        f"/api/docs/{doc['id']}/editors", json={"email": "carol@example.com"}, headers=bob["headers"]
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_remove_editor(client, alice, bob, carol):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")
    await add_editor(client, alice, doc["id"], "carol@example.com")

    response = await client.delete(f"/api/docs/{doc['id']}/editors/{bob['id']}", headers=alice["headers"])
    again = await client.delete(f"/api/docs/{doc['id']}/editors/{bob['id']}", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json() == {"ok": True, "editorIds": [carol["id"]]}
    assert again.json() == response.json()

    lost_access = await client.get(f"/api/docs/{doc['id']}", headers=bob["headers"])
    assert lost_access.status_code == 403


@pytest.mark.asyncio
async def test_remove_editor_requires_owner(client, alice, bob):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")

    response = await client.delete(f"/api/docs/{doc['id']}/editors/{bob['id']}", headers=bob["headers"])

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_remove_editor_bad_id(client, alice):
    doc = await create_doc(client, alice)

    response = await client.delete(f"/api/docs/{doc['id']}/editors/nope", headers=alice["headers"])

    assert response.status_code == 400


# =============================================================================
# Public links
# =============================================================================


@pytest.mark.asyncio
async def test_public_link_lifecycle(client, alice):
    doc = await create_doc(client, alice, title="Notes", content="hello")

    shared = await client.post(f"/api/docs/{doc['id']}/share", json={"isPublic": True}, headers=alice["headers"])
    assert shared.status_code == 200
    token = shared.json()["publicToken"]
    assert shared.json()["isPublic"] is True
    assert len(token) == 32

    public_view = await client.get(f"/api/public/{token}")
    assert public_view.status_code == 200
    body = public_view.json()
    assert body["title"] == "Notes"
    assert body["content"] == "hello"
    assert "ownerId" not in body
    assert "editorIds" not in body

    hidden = await client.post(f"/api/docs/{doc['id']}/share", json={"isPublic": False}, headers=alice["headers"])
    assert hidden.json() == {"isPublic": False, "publicToken": token}
    assert (await client.get(f"/api/public/{token}")).status_code == 404

    reshared = await client.post(f"/api/docs/{doc['id']}/share", json={"isPublic": True}, headers=alice["headers"])
    assert reshared.json()["publicToken"] == token
    assert (await client.get(f"/api/public/{token}")).status_code == 200


@pytest.mark.asyncio
async def test_share_twice_returns_same_token(client, alice):
    doc = await create_doc(client, alice)

    first = await client.post(f"/api/docs/{doc['id']}/share", json={"isPublic": True}, headers=alice["headers"])
    second = await client.post(f"/api/docs/{doc['id']}/share", json={"isPublic": True}, headers=alice["headers"])

    assert first.json()["publicToken"] == second.json()["publicToken"]


@pytest.mark.asyncio
async def test_share_requires_owner(client, alice, bob):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")

    response = await client.post(f"/api/docs/{doc['id']}/share", json={"isPublic": True}, headers=bob["headers"])

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_share_requires_boolean(client, alice):
    doc = await create_doc(client, alice)

    response = await client.post(f"/api/docs/{doc['id']}/share", json={"isPublic": "yes"}, headers=alice["headers"])

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_public_token(client):
    response = await client.get(f"/api/public/{uuid.uuid4().hex}")

    assert response.status_code == 404


# =============================================================================
# Edit lock
# =============================================================================


@pytest.mark.asyncio
async def test_lock_blocks_owner_until_released(client, alice, bob):
    doc = await create_doc(client, alice, title="Notes")
    await add_editor(client, alice, doc["id"], "bob@example.com")

    locked = await client.post(f"/api/docs/{doc['id']}/lock", headers=bob["headers"])
    assert locked.status_code == 200
    assert locked.json()["isLocked"] is True
    assert locked.json()["lockedBy"] == bob["id"]

    blocked = await client.patch(f"/api/docs/{doc['id']}", json={"title": "Notes2"}, headers=alice["headers"])
    assert blocked.status_code == 409
    assert blocked.json()["lockedBy"] == bob["id"]
    assert blocked.json()["lockedAt"]

    released = await client.post(f"/api/docs/{doc['id']}/unlock", headers=bob["headers"])
    assert released.status_code == 200
    assert released.json() == {"ok": True, "isLocked": False, "lockedBy": None, "lockedAt": None}

    allowed = await client.patch(f"/api/docs/{doc['id']}", json={"title": "Notes2"}, headers=alice["headers"])
    assert allowed.status_code == 200
    assert allowed.json()["title"] == "Notes2"


@pytest.mark.asyncio
async def test_second_lock_conflicts_until_ttl(client, clock, alice, bob):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")

    assert (await client.post(f"/api/docs/{doc['id']}/lock", headers=alice["headers"])).status_code == 200

    clock.advance(minutes=9)
    conflict = await client.post(f"/api/docs/{doc['id']}/lock", headers=bob["headers"])
    assert conflict.status_code == 409

    clock.advance(minutes=2)
    stolen = await client.post(f"/api/docs/{doc['id']}/lock", headers=bob["headers"])
    assert stolen.status_code == 200
    assert stolen.json()["lockedBy"] == bob["id"]


@pytest.mark.asyncio
async def test_expired_lock_reported_as_unlocked(client, clock, alice):
    doc = await create_doc(client, alice)
    await client.post(f"/api/docs/{doc['id']}/lock", headers=alice["headers"])

    clock.advance(minutes=11)
    view = await client.get(f"/api/docs/{doc['id']}", headers=alice["headers"])

    assert view.json()["isLocked"] is False
    assert view.json()["lockedBy"] == alice["id"]


@pytest.mark.asyncio
async def test_relock_by_holder_is_idempotent(client, alice):
    doc = await create_doc(client, alice)

    first = await client.post(f"/api/docs/{doc['id']}/lock", headers=alice["headers"])
    second = await client.post(f"/api/docs/{doc['id']}/lock", headers=alice["headers"])

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["lockedBy"] == alice["id"]


@pytest.mark.asyncio
async def test_holder_can_write_while_locked(client, alice, bob):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")
    await client.post(f"/api/docs/{doc['id']}/lock", headers=bob["headers"])

    response = await client.patch(f"/api/docs/{doc['id']}", json={"content": "draft"}, headers=bob["headers"])

    assert response.status_code == 200
    assert response.json()["isLocked"] is True


@pytest.mark.asyncio
async def test_unlock_permissions(client, alice, bob, carol):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")
    await add_editor(client, alice, doc["id"], "carol@example.com")
    await client.post(f"/api/docs/{doc['id']}/lock", headers=bob["headers"])

    by_other_editor = await client.post(f"/api/docs/{doc['id']}/unlock", headers=carol["headers"])
    assert by_other_editor.status_code == 403

    by_owner = await client.post(f"/api/docs/{doc['id']}/unlock", headers=alice["headers"])
    assert by_owner.status_code == 200
    assert by_owner.json()["isLocked"] is False

    again = await client.post(f"/api/docs/{doc['id']}/unlock", headers=alice["headers"])
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_lock_requires_access(client, alice, carol):
    doc = await create_doc(client, alice)

    lock = await client.post(f"/api/docs/{doc['id']}/lock", headers=carol["headers"])
    unlock = await client.post(f"/api/docs/{doc['id']}/unlock", headers=carol["headers"])

    assert lock.status_code == 403
    assert unlock.status_code == 403


@pytest.mark.asyncio
async def test_lock_missing_document(client, alice):
    response = await client.post(f"/api/docs/{uuid.uuid4()}/lock", headers=alice["headers"])

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_editor_unlock_without_lock_is_forbidden(client, alice, bob):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")

    response = await client.post(f"/api/docs/{doc['id']}/unlock", headers=bob["headers"])

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_editor_cannot_clear_expired_lock_of_another(client, clock, alice, bob, carol):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")
    await add_editor(client, alice, doc["id"], "carol@example.com")
    await client.post(f"/api/docs/{doc['id']}/lock", headers=bob["headers"])

    clock.advance(minutes=11)
    response = await client.post(f"/api/docs/{doc['id']}/unlock", headers=carol["headers"])

    assert response.status_code == 403
    view = await client.get(f"/api/docs/{doc['id']}", headers=alice["headers"])
    assert view.json()["lockedBy"] == bob["id"]


@pytest.mark.asyncio
async def test_removed_editor_releases_own_expired_lock(client, clock, alice, bob):
    doc = await create_doc(client, alice)
    await add_editor(client, alice, doc["id"], "bob@example.com")
    await client.post(f"/api/docs/{doc['id']}/lock", headers=bob["headers"])
    await client.delete(f"/api/docs/{doc['id']}/editors/{bob['id']}", headers=alice["headers"])

    clock.advance(minutes=11)
    response = await client.post(f"/api/docs/{doc['id']}/unlock", headers=bob["headers"])

    assert response.status_code == 200
    assert response.json() == {"ok": True, "isLocked": False, "lockedBy": None, "lockedAt": None}
    view = await client.get(f"/api/docs/{doc['id']}", headers=alice["headers"])
    assert view.json()["lockedBy"] is None


@pytest.mark.asyncio
async def test_locking_moves_document_to_top_of_list(client, clock, alice):
    first = await create_doc(client, alice, title="First")
    clock.advance(minutes=1)
    await create_doc(client, alice, title="Second")
    clock.advance(minutes=1)

    await client.post(f"/api/docs/{first['id']}/lock", headers=alice["headers"])
    listed = await client.get("/api/docs", headers=alice["headers"])

    assert [doc["title"] for doc in listed.json()] == ["First", "Second"]
