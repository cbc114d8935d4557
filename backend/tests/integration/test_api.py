"""Integration tests for the DataRoom API.

Test cases for:
- Room CRUD and opening a room
- Folder CRUD and error mapping
- File upload, rename, signed download, delete
- Explorer navigation, search and selection
"""

import base64
from unittest.mock import AsyncMock, patch

from dataroom.components.workspace import PersistenceError

API = "/api/v1"


def _create_room(client, name: str = "Deal Room") -> dict:
    response = client.post(f"{API}/rooms", json={"name": name})
    assert response.status_code == 200
    return response.json()


def _upload(client, room_id: str, name: str, content: bytes, folder_id: str | None = None) -> dict:
    response = client.post(
        f"{API}/files",
        json={
            "name": name,
            "mimeType": "application/pdf",
            "contentBase64": base64.b64encode(content).decode(),
            "dataRoomId": room_id,
            "folderId": folder_id,
        },
    )
    assert response.status_code == 200
    return response.json()


class TestHealth:
    """Service endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "DataRoom API"

    def test_health(self, client):
        response = client.get(f"{API}/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["initialized"] is True


class TestRooms:
    """Room endpoints."""

    def test_create_and_list(self, client):
        room = _create_room(client, "Series A")

        assert room["id"].startswith("room_")
        assert room["ownerId"] == "user_test"
        assert "createdAt" in room

        response = client.get(f"{API}/rooms")
        assert [r["id"] for r in response.json()] == [room["id"]]

    def test_list_includes_counts(self, client, pdf_bytes):
        room = _create_room(client)
        folder = client.post(f"{API}/folders", json={"name": "Docs", "dataRoomId": room["id"]}).json()
        _upload(client, room["id"], "a.pdf", pdf_bytes, folder["id"])
        _upload(client, room["id"], "b.pdf", pdf_bytes)

        listed = client.get(f"{API}/rooms").json()

        assert listed[0]["folderCount"] == 1
        assert listed[0]["fileCount"] == 2

    def test_create_invalid(self, client):
        response = client.post(f"{API}/rooms", json={"name": "  "})

        assert response.status_code == 400
        assert response.json()["detail"] == "Name is required"

    def test_update(self, client):
        room = _create_room(client)

        response = client.patch(f"{API}/rooms/{room['id']}", json={"name": "Closing"})

        assert response.status_code == 200
        assert response.json()["name"] == "Closing"

    def test_update_not_found(self, client):
        response = client.patch(f"{API}/rooms/room_missing", json={"name": "X"})
        assert response.status_code == 404

    def test_open_room(self, client):
        room = _create_room(client)

        response = client.post(f"{API}/rooms/{room['id']}/open")

        assert response.status_code == 200
        state = response.json()
        assert state["currentDataRoomId"] == room["id"]
        assert state["breadcrumbs"] == [{"id": None, "name": "Root"}]

        assert client.post(f"{API}/rooms/room_missing/open").status_code == 404

    def test_delete(self, client, pdf_bytes):
        room = _create_room(client)
        folder = client.post(f"{API}/folders", json={"name": "Docs", "dataRoomId": room["id"]}).json()
        file = _upload(client, room["id"], "a.pdf", pdf_bytes, folder["id"])

        response = client.delete(f"{API}/rooms/{room['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["deleted"] is True
        assert data["folderIds"] == [folder["id"]]
        assert data["fileIds"] == [file["id"]]
        assert client.get(f"{API}/rooms").json() == []

        again = client.delete(f"{API}/rooms/{room['id']}")
        assert again.json()["deleted"] is False


class TestFolders:
    """Folder endpoints."""

    def test_create_in_open_room(self, client):
        room = _create_room(client)
        client.post(f"{API}/rooms/{room['id']}/open")

        response = client.post(f"{API}/folders", json={"name": "Contracts"})

        assert response.status_code == 200
        data = response.json()
        assert data["dataRoomId"] == room["id"]
        assert data["parentId"] is None

    def test_duplicate_rejected(self, client):
        room = _create_room(client)
        client.post(f"{API}/folders", json={"name": "Legal", "dataRoomId": room["id"]})

        response = client.post(f"{API}/folders", json={"name": "legal", "dataRoomId": room["id"]})

        assert response.status_code == 400
        assert response.json()["detail"] == 'A folder named "legal" already exists in this location'

    def test_unknown_parent(self, client):
        room = _create_room(client)

        response = client.post(
            f"{API}/folders", json={"name": "Docs", "dataRoomId": room["id"], "parentId": "folder_missing"}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Parent folder not found"

    def test_no_room_selected(self, client):
        response = client.post(f"{API}/folders", json={"name": "Docs"})
        assert response.status_code == 400

    def test_rename_and_delete(self, client):
        room = _create_room(client)
        folder = client.post(f"{API}/folders", json={"name": "Old", "dataRoomId": room["id"]}).json()

        renamed = client.patch(f"{API}/folders/{folder['id']}", json={"name": "New"})
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "New"

        deleted = client.delete(f"{API}/folders/{folder['id']}")
        assert deleted.json()["folderIds"] == [folder["id"]]

    def test_persistence_failure_maps_to_502(self, client, persistence):
        room = _create_room(client)

        with patch.object(persistence, "insert_folder", AsyncMock(side_effect=PersistenceError("db down"))):
            response = client.post(f"{API}/folders", json={"name": "Docs", "dataRoomId": room["id"]})

        assert response.status_code == 502
        assert response.json()["detail"] == "db down"


class TestFiles:
    """File endpoints."""

    def test_upload_numbers_duplicates(self, client, pdf_bytes):
        room = _create_room(client)

        first = _upload(client, room["id"], "report.pdf", pdf_bytes)
        second = _upload(client, room["id"], "report.pdf", pdf_bytes)

        assert first["name"] == "report.pdf"
        assert second["name"] == "report (1).pdf"
        assert second["size"] == len(pdf_bytes)

    def test_upload_rejects_non_pdf(self, client):
        room = _create_room(client)

        response = client.post(
            f"{API}/files",
            json={
                "name": "notes.txt",
                "mimeType": "text/plain",
                "contentBase64": base64.b64encode(b"hello").decode(),
                "dataRoomId": room["id"],
            },
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Only PDF files are supported"

    def test_upload_rejects_bad_base64(self, client):
        room = _create_room(client)

        response = client.post(
            f"{API}/files",
            json={"name": "a.pdf", "mimeType": "application/pdf", "contentBase64": "***", "dataRoomId": room["id"]},
        )

        assert response.status_code == 400

    def test_rename_appends_extension(self, client, pdf_bytes):
        room = _create_room(client)
        file = _upload(client, room["id"], "scan.pdf", pdf_bytes)

        response = client.patch(f"{API}/files/{file['id']}", json={"name": "draft"})

        assert response.status_code == 200
        assert response.json()["name"] == "draft.pdf"

    def test_signed_download(self, client, pdf_bytes):
        room = _create_room(client)
        file = _upload(client, room["id"], "a.pdf", pdf_bytes)

        response = client.get(f"{API}/files/{file['id']}/url")
        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith(f"{API}/files/content?token=")

        download = client.get(url)
        assert download.status_code == 200
        assert download.content == pdf_bytes
        assert download.headers["content-type"] == "application/pdf"

    def test_download_with_bad_token(self, client):
        response = client.get(f"{API}/files/content", params={"token": "forged"})
        assert response.status_code == 403

    def test_url_for_unknown_file(self, client):
        assert client.get(f"{API}/files/file_missing/url").status_code == 404

    def test_delete(self, client, object_storage, pdf_bytes):
        room = _create_room(client)
        file = _upload(client, room["id"], "a.pdf", pdf_bytes)

        response = client.delete(f"{API}/files/{file['id']}")

        assert response.json()["deleted"] is True
        assert not object_storage.has_object(file["storageKey"])

    def test_link_to_deleted_file_is_not_found(self, client, pdf_bytes):
        room = _create_room(client)
        file = _upload(client, room["id"], "a.pdf", pdf_bytes)
        url = client.get(f"{API}/files/{file['id']}/url").json()["url"]

        client.delete(f"{API}/files/{file['id']}")

        assert client.get(url).status_code == 404


class TestExplorer:
    """Explorer endpoints."""

    def test_browse_search_and_select(self, client, pdf_bytes):
        room = _create_room(client)
        client.post(f"{API}/rooms/{room['id']}/open")
        contracts = client.post(f"{API}/folders", json={"name": "Contracts"}).json()
        nested = client.post(f"{API}/folders", json={"name": "2024", "parentId": contracts["id"]}).json()
        _upload(client, room["id"], "nda.pdf", pdf_bytes)

        view = client.get(f"{API}/explorer").json()
        assert [i["type"] for i in view["items"]] == ["folder", "file"]

        view = client.post(f"{API}/explorer/navigate", json={"folderId": nested["id"]}).json()
        assert [c["name"] for c in view["state"]["breadcrumbs"]] == ["Root", "Contracts", "2024"]

        client.post(f"{API}/explorer/navigate", json={"folderId": None})
        view = client.post(f"{API}/explorer/search", json={"query": "NDA"}).json()
        assert [i["name"] for i in view["items"]] == ["nda.pdf"]

        state = client.post(f"{API}/explorer/select-all").json()
        assert len(state["selectedItems"]) == 1

        state = client.post(f"{API}/explorer/select/{contracts['id']}").json()
        assert state["selectedItems"][-1] == contracts["id"]

        state = client.delete(f"{API}/explorer/selection").json()
        assert state["selectedItems"] == []

    def test_navigate_requires_open_room(self, client):
        response = client.post(f"{API}/explorer/navigate", json={"folderId": None})
        assert response.status_code == 400

    def test_navigate_to_unknown_folder(self, client):
        room = _create_room(client)
        client.post(f"{API}/rooms/{room['id']}/open")

        response = client.post(f"{API}/explorer/navigate", json={"folderId": "folder_missing"})

        assert response.status_code == 404
