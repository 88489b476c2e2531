"""
Tests for document endpoints
"""
import pytest
from fastapi import status

from app.models.document import Document, DocumentAccessLog
from app.models.enums import DocumentAccessType

PDF = b"%PDF-1.4 mountain care test document"


@pytest.fixture
def upload(client, auth_headers):
    def _upload(user, content=PDF, file_name="license.pdf", **form):
        data = {"title": "RN License", "document_type": "license", "access_level": "hr"}
        data.update({k: str(v).lower() if isinstance(v, bool) else str(v) for k, v in form.items()})
        return client.post(
            "/api/v1/documents",
            headers=auth_headers(user),
            files={"file": (file_name, content, "application/pdf")},
            data=data,
        )
    return _upload


def test_hr_uploads_document(upload, hr_user, storage, nursing):
    response = upload(hr_user, access_level="department", department_id=nursing.id, tags="license,rn")

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["title"] == "RN License"
    assert data["version"] == 1
    assert data["file_size"] == len(PDF)
    assert data["mime_type"] == "application/pdf"
    assert data["tags"] == ["license", "rn"]
    assert data["scheduled_deletion_date"] is not None
    assert len(data["checksum"]) == 64


def test_upload_writes_file_and_create_log(upload, hr_user, db, storage):
    document_id = upload(hr_user).json()["id"]

    document = db.query(Document).filter(Document.id == document_id).one()
    assert storage.exists(document.file_path)
    assert storage.path_for(document.file_path).read_bytes() == PDF
    log = db.query(DocumentAccessLog).filter(DocumentAccessLog.document_id == document_id).one()
    assert log.access_type == DocumentAccessType.CREATE


def test_empty_upload_rejected(upload, hr_user):
    response = upload(hr_user, content=b"")

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_employee_cannot_upload(upload, nurse_user):
    response = upload(nurse_user)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_manager_uploads_for_own_department(upload, nursing_manager, nursing):
    response = upload(nursing_manager, document_type="policy", access_level="department")

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["department_id"] == nursing.id


def test_manager_cannot_upload_for_other_department(upload, nursing_manager, operations):
    response = upload(nursing_manager, document_type="policy", department_id=operations.id)

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.parametrize("form", [
    {"document_type": "medical"},
    {"document_type": "policy", "is_hipaa_sensitive": True},
])
def test_manager_cannot_upload_sensitive_documents(upload, nursing_manager, form):
    response = upload(nursing_manager, **form)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_department_document_visibility(client, upload, hr_user, nurse_user, operations_user, nursing, auth_headers):
    document_id = upload(hr_user, access_level="department", department_id=nursing.id).json()["id"]

    assert client.get(f"/api/v1/documents/{document_id}", headers=auth_headers(nurse_user)).status_code == 200
    response = client.get(f"/api/v1/documents/{document_id}", headers=auth_headers(operations_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error_code"] == "PERMISSION_DENIED"


def test_missing_document_is_404(client, hr_user, auth_headers):
    response = client.get("/api/v1/documents/999", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_hipaa_document_redacted_for_non_hr(client, upload, hr_user, nurse_user, auth_headers):
    document_id = upload(
        hr_user, access_level="public", is_hipaa_sensitive=True, description="Fit-for-duty evaluation"
    ).json()["id"]

    redacted = client.get(f"/api/v1/documents/{document_id}", headers=auth_headers(nurse_user)).json()
    assert redacted["redacted"] is True
    assert redacted["title"] == "RN License"
    assert redacted["description"] is None
    assert redacted["checksum"] is None
    assert redacted["is_hipaa_sensitive"] is None

    full = client.get(f"/api/v1/documents/{document_id}", headers=auth_headers(hr_user)).json()
    assert full["redacted"] is False
    assert full["description"] == "Fit-for-duty evaluation"
    assert full["is_hipaa_sensitive"] is True


def test_list_filters_by_access(client, upload, hr_user, nurse_user, nursing, auth_headers):
    upload(hr_user, title="Handbook", document_type="handbook", access_level="public")
    upload(hr_user, title="Ward roster", access_level="department", department_id=nursing.id)
    upload(hr_user, title="Payroll", access_level="hr")

    nurse_titles = {d["title"] for d in client.get("/api/v1/documents", headers=auth_headers(nurse_user)).json()["items"]}
    hr_data = client.get("/api/v1/documents", headers=auth_headers(hr_user)).json()

    assert nurse_titles == {"Handbook", "Ward roster"}
    assert hr_data["total"] == 3


def test_download_returns_file_and_logs(client, upload, hr_user, db, auth_headers):
    document_id = upload(hr_user).json()["id"]

    response = client.get(f"/api/v1/documents/{document_id}/download", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_200_OK
    assert response.content == PDF
    access_types = [
        log.access_type for log in db.query(DocumentAccessLog).filter(
            DocumentAccessLog.document_id == document_id
        ).order_by(DocumentAccessLog.id)
    ]
    assert access_types == [DocumentAccessType.CREATE, DocumentAccessType.DOWNLOAD]


def test_access_log_endpoint_hr_only(client, upload, hr_user, nurse_user, auth_headers):
    document_id = upload(hr_user, access_level="public").json()["id"]
    client.get(f"/api/v1/documents/{document_id}", headers=auth_headers(nurse_user))

    response = client.get(f"/api/v1/documents/{document_id}/access-log", headers=auth_headers(hr_user))
    assert response.status_code == status.HTTP_200_OK
    assert [entry["access_type"] for entry in response.json()] == ["CREATE", "VIEW"]
    assert response.json()[1]["user_id"] == nurse_user.id

    response = client.get(f"/api/v1/documents/{document_id}/access-log", headers=auth_headers(nurse_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_manager_updates_own_department_document(client, upload, hr_user, nursing_manager, nursing, auth_headers):
    document_id = upload(hr_user, document_type="policy", access_level="department", department_id=nursing.id).json()["id"]

    response = client.patch(
        f"/api/v1/documents/{document_id}",
        headers=auth_headers(nursing_manager),
        json={"title": "Ward policy v2", "retention_period_days": 730},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Ward policy v2"
    assert response.json()["retention_period_days"] == 730


def test_manager_cannot_update_hipaa_document(client, upload, hr_user, nursing_manager, nursing, auth_headers):
    document_id = upload(
        hr_user, access_level="manager", department_id=nursing.id, is_hipaa_sensitive=True
    ).json()["id"]

    response = client.patch(
        f"/api/v1/documents/{document_id}",
        headers=auth_headers(nursing_manager),
        json={"title": "Renamed"},
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_replace_file_bumps_version(client, upload, hr_user, db, storage, auth_headers):
    first = upload(hr_user).json()
    old_path = db.query(Document).filter(Document.id == first["id"]).one().file_path

    response = client.put(
        f"/api/v1/documents/{first['id']}/file",
        headers=auth_headers(hr_user),
        files={"file": ("license-2026.pdf", b"%PDF-1.4 renewed", "application/pdf")},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["version"] == 2
    assert data["file_name"] == "license-2026.pdf"
    assert data["checksum"] != first["checksum"]
    assert not storage.exists(old_path)


def test_acknowledge_once(client, upload, hr_user, nurse_user, auth_headers):
    document_id = upload(
        hr_user, document_type="handbook", access_level="public", requires_acknowledgment=True
    ).json()["id"]

    first = client.post(f"/api/v1/documents/{document_id}/acknowledge", headers=auth_headers(nurse_user))
    second = client.post(f"/api/v1/documents/{document_id}/acknowledge", headers=auth_headers(nurse_user))

    assert first.status_code == status.HTTP_201_CREATED
    assert first.json()["user_id"] == nurse_user.id
    assert second.status_code == status.HTTP_409_CONFLICT


def test_acknowledge_not_required(client, upload, hr_user, nurse_user, auth_headers):
    document_id = upload(hr_user, access_level="public").json()["id"]

    response = client.post(f"/api/v1/documents/{document_id}/acknowledge", headers=auth_headers(nurse_user))

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_removes_row_and_file(client, upload, hr_user, nursing_manager, db, storage, auth_headers):
    document_id = upload(hr_user).json()["id"]
    path = db.query(Document).filter(Document.id == document_id).one().file_path

    assert client.delete(f"/api/v1/documents/{document_id}", headers=auth_headers(nursing_manager)).status_code == 403
    response = client.delete(f"/api/v1/documents/{document_id}", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert not storage.exists(path)
    db.expire_all()
    assert db.query(Document).filter(Document.id == document_id).first() is None
