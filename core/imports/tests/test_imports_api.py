import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings

from core.imports.models import ImportBatch
from core.leads.models import Lead

HEADER = "student_name,email,phone,school,city\n"


def csv_file(*lines, name="leads.csv"):
    return SimpleUploadedFile(name, (HEADER + "".join(lines)).encode(), content_type="text/csv")


@pytest.mark.django_db
def test_preview_confirm_flow(partner_client, partner, make_lead):
    make_lead(partner, student_name="Ana Souza", email="ana@example.com", phone="+5511987654321")

    upload = csv_file(
        "Carla Dias,not-an-email,+5511911112222,Colegio Dante,Sao Paulo\n",
        "Outra Pessoa,outra@example.com,+5511987654321,Colegio Dante,Sao Paulo\n",
        "Diego Reis,diego@example.com,+5521998765432,Colegio Dante,Rio de Janeiro\n",
    )
    r = partner_client.post("/v1/imports/xls/preview", {"file": upload}, format="multipart")
    assert r.status_code == 201
    body = r.json()
    assert (body["total_rows"], body["valid_rows"], body["invalid_rows"], body["duplicate_rows"]) == (3, 1, 2, 1)
    import_id = body["import_id"]

    detail = partner_client.get(f"/v1/imports/{import_id}").json()
    assert detail["status"] == "DRAFT"
    assert [row["row_number"] for row in detail["rows"]] == [2, 3, 4]

    rejected = partner_client.post(f"/v1/imports/{import_id}/confirm", {"ignore_duplicates": False}, format="json")
    assert rejected.status_code == 400
    assert ImportBatch.objects.get(id=import_id).status == ImportBatch.Status.DRAFT

    r = partner_client.post(f"/v1/imports/{import_id}/confirm", {}, format="json")
    assert r.status_code == 200
    assert r.json() == {
        "import_id": import_id,
        "status": "DONE",
        "total_rows": 3,
        "success_rows": 1,
        "error_rows": 2,
    }
    assert Lead.objects.filter(email="diego@example.com", partner=partner).exists()


@pytest.mark.django_db
def test_async_confirm_is_accepted(partner_client):
    upload = csv_file("Nina Rosa,nina@example.com,+5511940404040,Colegio Dante,Sao Paulo\n")
    import_id = partner_client.post("/v1/imports/xls/preview", {"file": upload}, format="multipart").json()["import_id"]

    r = partner_client.post(f"/v1/imports/{import_id}/confirm", {"run_async": True}, format="json")
    assert r.status_code == 202
    assert r.json()["import_id"] == import_id


@pytest.mark.django_db
def test_master_preview_needs_partner(master_client, partner):
    r = master_client.post("/v1/imports/xls/preview", {"file": csv_file()}, format="multipart")
    assert r.status_code == 400

    r = master_client.post(
        "/v1/imports/xls/preview",
        {"file": csv_file("Ana Souza,ana@example.com,+5511987654321,Dante,Sao Paulo\n"), "partner_id": str(partner.id)},
        format="multipart",
    )
    assert r.status_code == 201
    assert ImportBatch.objects.get(id=r.json()["import_id"]).partner_id == partner.id


@pytest.mark.django_db
def test_master_preview_unknown_partner_is_404(master_client):
    r = master_client.post(
        "/v1/imports/xls/preview",
        {"file": csv_file(), "partner_id": "00000000-0000-0000-0000-000000000005"},
        format="multipart",
    )
    assert r.status_code == 404


@pytest.mark.django_db
def test_partner_preview_for_other_partner_forbidden(partner_client, other_partner):
    r = partner_client.post(
        "/v1/imports/xls/preview", {"file": csv_file(), "partner_id": str(other_partner.id)}, format="multipart"
    )
    assert r.status_code == 403
    assert ImportBatch.objects.count() == 0


@pytest.mark.django_db
def test_preview_rejects_bad_uploads(partner_client):
    assert partner_client.post("/v1/imports/xls/preview", {}, format="multipart").status_code == 400

    txt = SimpleUploadedFile("leads.txt", b"hello", content_type="text/plain")
    assert partner_client.post("/v1/imports/xls/preview", {"file": txt}, format="multipart").status_code == 400

    missing = SimpleUploadedFile("leads.csv", b"student_name,email\nAna,ana@example.com\n", content_type="text/csv")
    r = partner_client.post("/v1/imports/xls/preview", {"file": missing}, format="multipart")
    assert r.status_code == 400
    assert r.json()["error"]["details"] == {"missing_columns": ["phone", "school", "city"]}


@pytest.mark.django_db
@override_settings(IMPORT_MAX_UPLOAD_BYTES=64)
def test_preview_rejects_oversized_file(partner_client):
    upload = csv_file("Ana Souza,ana@example.com,+5511987654321,Colegio Dante,Sao Paulo\n" * 3)
    r = partner_client.post("/v1/imports/xls/preview", {"file": upload}, format="multipart")
    assert r.status_code == 400
    assert r.json()["error"]["details"]["max_bytes"] == 64


@pytest.mark.django_db
def test_cancel_endpoint_and_foreign_access(partner_client, other_partner_client):
    upload = csv_file("Olga Prado,olga@example.com,+5511950505050,Colegio Dante,Sao Paulo\n")
    import_id = partner_client.post("/v1/imports/xls/preview", {"file": upload}, format="multipart").json()["import_id"]

    intruder = other_partner_client
    assert intruder.get(f"/v1/imports/{import_id}").status_code == 403
    assert intruder.post(f"/v1/imports/{import_id}/cancel").status_code == 403

    r = partner_client.post(f"/v1/imports/{import_id}/cancel")
    assert r.status_code == 200
    assert r.json()["status"] == "CANCELED"

    assert partner_client.post(f"/v1/imports/{import_id}/confirm", {}, format="json").status_code == 400
    assert partner_client.get("/v1/imports/00000000-0000-0000-0000-000000000003").status_code == 404
