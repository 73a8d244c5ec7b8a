"""Tests for document endpoints."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status

from docvault.core.security import create_document_view_token, create_user_token
from docvault.db.models import Document, InvoiceRecord, Tag


@pytest.fixture
def mock_extraction():
    """Keep uploads from scheduling real extraction work."""
    with patch(
        "docvault.api.documents.enqueue_content_extraction", new_callable=AsyncMock
    ) as mocked:
        mocked.return_value = None
        yield mocked


class TestUpload:
    def test_upload_to_root(self, client, alice, alice_headers, mock_extraction):
        response = client.post(
            "/api/documents/upload",
            files={"file": ("notes.txt", b"quarterly numbers", "text/plain")},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["original_name"] == "notes.txt"
        assert data["mime_type"] == "text/plain"
        assert data["size"] == len(b"quarterly numbers")
        assert data["folder_id"] is None
        assert data["owner_id"] == alice.id
        mock_extraction.assert_awaited_once()
        assert mock_extraction.await_args.args[0] == data["id"]

    def test_upload_writes_file(self, client, db, alice_headers, mock_extraction):
        response = client.post(
            "/api/documents/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=alice_headers,
        )

        document = db.get(Document, response.json()["id"])
        assert Path(document.path).read_bytes() == b"hello"
        assert document.content == ""

    def test_upload_into_folder_with_tags(
        self, client, db, alice, alice_headers, make_folder, mock_extraction
    ):
        folder = make_folder(alice, "Reports")
        tag = Tag(name="finance", owner_id=alice.id)
        db.add(tag)
        db.flush()

        response = client.post(
            "/api/documents/upload",
            files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")},
            data={"folder_id": folder.id, "tag_ids": [tag.id]},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["folder_id"] == folder.id
        assert [t["name"] for t in data["tags"]] == ["finance"]

    def test_upload_into_foreign_folder_denied(
        self, client, alice, bob_headers, make_folder, mock_extraction
    ):
        folder = make_folder(alice, "Private")

        response = client.post(
            "/api/documents/upload",
            files={"file": ("x.txt", b"x", "text/plain")},
            data={"folder_id": folder.id},
            headers=bob_headers,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        mock_extraction.assert_not_awaited()

    def test_foreign_tag_rejected(self, client, db, bob, alice_headers, mock_extraction):
        tag = Tag(name="bobs", owner_id=bob.id)
        db.add(tag)
        db.flush()

        response = client.post(
            "/api/documents/upload",
            files={"file": ("x.txt", b"x", "text/plain")},
            data={"tag_ids": [tag.id]},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["invalid_ids"] == [tag.id]

    def test_binary_upload_skips_extraction(self, client, alice_headers, mock_extraction):
        response = client.post(
            "/api/documents/upload",
            files={"file": ("photo.png", b"\x89PNG", "image/png")},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        mock_extraction.assert_not_awaited()

    def test_too_large(self, client, alice_headers, mock_extraction):
        with patch("docvault.api.documents.get_settings") as mock_settings:
            mock_settings.return_value.max_upload_size_mb = 0
            mock_settings.return_value.upload_dir = "/tmp/docvault-unused"
            response = client.post(
                "/api/documents/upload",
                files={"file": ("big.txt", b"too much", "text/plain")},
                headers=alice_headers,
            )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "FILE_TOO_LARGE"

    def test_falls_back_to_background_task(self, client, alice_headers):
        with (
            patch("docvault.api.documents.enqueue_job", new_callable=AsyncMock) as mock_enqueue,
            patch("docvault.api.documents.store_document_content") as mock_store,
        ):
            mock_enqueue.return_value = None
            response = client.post(
                "/api/documents/upload",
                files={"file": ("notes.txt", b"hello", "text/plain")},
                headers=alice_headers,
            )

        assert response.status_code == status.HTTP_201_CREATED
        mock_store.assert_called_once_with(response.json()["id"])


class TestListDocuments:
    def test_modes(self, client, alice, bob, alice_headers, bob_headers, make_folder, make_document):
        folder = make_folder(alice, "Finance")
        mine = make_document(alice, "mine.txt")
        make_document(alice, "nested.txt", folder=folder)
        make_document(bob, "bobs.txt")
        client.put(f"/api/documents/{mine.id}/share", json={"user_ids": [bob.id]}, headers=alice_headers)

        my_drive = client.get("/api/documents", params={"mode": "my_drive"}, headers=alice_headers)
        shared = client.get("/api/documents", params={"mode": "shared"}, headers=bob_headers)
        everything = client.get("/api/documents", headers=bob_headers)

        assert {d["original_name"] for d in my_drive.json()["documents"]} == {"mine.txt"}
        assert {d["original_name"] for d in shared.json()["documents"]} == {"mine.txt"}
        assert everything.json()["total"] == 2

    def test_invalid_mode(self, client, alice_headers):
        response = client.get("/api/documents", params={"mode": "everything"}, headers=alice_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_invalid_sort(self, client, alice_headers):
        response = client.get("/api/documents", params={"sort_by": "path"}, headers=alice_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_admin_sees_all(self, client, alice, bob, admin_headers, make_document):
        make_document(alice, "a.txt")
        make_document(bob, "b.txt")

        response = client.get("/api/documents", headers=admin_headers)

        assert response.json()["total"] == 2


class TestSingleDocument:
    def test_get_denied_for_stranger(self, client, alice, bob_headers, make_document):
        doc = make_document(alice, "secret.txt")
        response = client.get(f"/api/documents/{doc.id}", headers=bob_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error_code"] == "ACCESS_DENIED"

    def test_get_missing(self, client, alice_headers):
        response = client.get("/api/documents/missing", headers=alice_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_star_set_and_toggle(self, client, alice, alice_headers, make_document):
        doc = make_document(alice, "fav.txt")

        starred = client.put(
            f"/api/documents/{doc.id}/star", json={"starred": True}, headers=alice_headers
        )
        assert starred.json()["is_starred"] is True

        toggled = client.put(f"/api/documents/{doc.id}/star", headers=alice_headers)
        assert toggled.json()["is_starred"] is False

    def test_share_with_permissions(self, client, alice, bob, alice_headers, make_document):
        doc = make_document(alice, "plan.txt")

        response = client.put(
            f"/api/documents/{doc.id}/share",
            json={"user_ids": [bob.id], "permissions": {"write": [bob.id]}},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["is_shared"] is True
        assert [u["id"] for u in data["read_users"]] == [bob.id]
        assert [u["id"] for u in data["write_users"]] == [bob.id]
        assert data["delete_users"] == []

    def test_update_tags_requires_write(
        self, client, db, alice, bob, alice_headers, bob_headers, make_document
    ):
        doc = make_document(alice, "plan.txt")
        client.put(f"/api/documents/{doc.id}/share", json={"user_ids": [bob.id]}, headers=alice_headers)
        tag = Tag(name="mine", owner_id=bob.id)
        db.add(tag)
        db.flush()

        response = client.put(
            f"/api/documents/{doc.id}/tags", json={"tag_ids": [tag.id]}, headers=bob_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_tags(self, client, db, alice, alice_headers, make_document):
        doc = make_document(alice, "plan.txt")
        tag = Tag(name="urgent", owner_id=alice.id)
        db.add(tag)
        db.flush()

        response = client.put(
            f"/api/documents/{doc.id}/tags", json={"tag_ids": [tag.id]}, headers=alice_headers
        )

        assert [t["name"] for t in response.json()["tags"]] == ["urgent"]


class TestDeleteDocument:
    def test_delete_removes_record_file_and_invoices(
        self, client, db, alice, alice_headers, make_document
    ):
        doc = make_document(alice, "invoice.pdf")
        path = Path(doc.path)
        db.add(
            InvoiceRecord(
                document_id=doc.id,
                vendor_name="Acme",
                invoice_date=doc.created_at.date(),
                invoice_value=100.0,
                invoice_qty=2,
                owner_id=alice.id,
            )
        )
        db.flush()

        response = client.delete(f"/api/documents/{doc.id}", headers=alice_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert db.get(Document, doc.id) is None
        assert not path.exists()
        assert db.query(InvoiceRecord).filter_by(document_id=doc.id).count() == 0

    def test_read_share_cannot_delete(self, client, alice, bob, alice_headers, bob_headers, make_document):
        doc = make_document(alice, "plan.txt")
        client.put(f"/api/documents/{doc.id}/share", json={"user_ids": [bob.id]}, headers=alice_headers)

        response = client.delete(f"/api/documents/{doc.id}", headers=bob_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_grant_allows_delete(
        self, client, alice, bob, alice_headers, bob_headers, make_document
    ):
        doc = make_document(alice, "plan.txt")
        client.put(
            f"/api/documents/{doc.id}/share",
            json={"user_ids": [bob.id], "permissions": {"delete": [bob.id]}},
            headers=alice_headers,
        )

        response = client.delete(f"/api/documents/{doc.id}", headers=bob_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT


class TestFileAccess:
    def test_download(self, client, alice, alice_headers, make_document):
        doc = make_document(alice, "notes.txt", content="file body")

        response = client.get(f"/api/documents/{doc.id}/download", headers=alice_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.content == b"file body"
        assert "attachment" in response.headers["content-disposition"]

    def test_view_with_query_token(self, client, alice, make_document):
        doc = make_document(alice, "notes.txt", content="inline body")

        response = client.get(
            f"/api/documents/{doc.id}/view", params={"token": create_user_token(alice)}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-disposition"].startswith("inline")

    def test_view_binary_as_attachment(self, client, alice, make_document):
        doc = make_document(alice, "data.bin", content="raw", mime_type="application/octet-stream")

        response = client.get(
            f"/api/documents/{doc.id}/view", params={"token": create_user_token(alice)}
        )

        assert response.headers["content-disposition"].startswith("attachment")

    def test_view_without_token(self, client, alice, make_document):
        doc = make_document(alice, "notes.txt")
        response = client.get(f"/api/documents/{doc.id}/view")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_view_link_opens_document(self, client, alice, alice_headers, make_document):
        doc = make_document(alice, "notes.txt", content="linked body")

        link = client.get(f"/api/documents/{doc.id}/view-link", headers=alice_headers).json()
        assert link["expires_in"] == 15 * 60
        token = link["url"].split("token=", 1)[1]

        response = client.get(f"/api/documents/{doc.id}/view", params={"token": token})
        assert response.status_code == status.HTTP_200_OK
        assert response.content == b"linked body"

    def test_view_link_bound_to_document(self, client, alice, make_document):
        doc = make_document(alice, "a.txt")
        other = make_document(alice, "b.txt")
        token = create_document_view_token(alice.id, doc.id)

        response = client.get(f"/api/documents/{other.id}/view", params={"token": token})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_view_token_rejected_as_session(self, client, alice, make_document):
        doc = make_document(alice, "a.txt")
        token = create_document_view_token(alice.id, doc.id)

        response = client.get("/api/documents", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_view_link_requires_read(self, client, alice, bob_headers, make_document):
        doc = make_document(alice, "private.txt")
        response = client.get(f"/api/documents/{doc.id}/view-link", headers=bob_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_missing_file(self, client, alice, alice_headers, make_document):
        doc = make_document(alice, "gone.txt")
        Path(doc.path).unlink()

        response = client.get(f"/api/documents/{doc.id}/download", headers=alice_headers)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error_code"] == "STORAGE_FAILED"

    def test_content_before_and_after_extraction(self, client, db, alice, alice_headers, make_document):
        doc = make_document(alice, "notes.txt")

        pending = client.get(f"/api/documents/{doc.id}/content", headers=alice_headers).json()
        assert pending["extracted"] is False
        assert pending["content"] == ""

        doc.content = "extracted text"
        db.flush()
        ready = client.get(f"/api/documents/{doc.id}/content", headers=alice_headers).json()
        assert ready["extracted"] is True
        assert ready["content"] == "extracted text"
