import pytest

from core.audit.models import AuditLog
from core.partners.models import Partner


@pytest.mark.django_db
def test_me_for_partner_user(partner_client, partner):
    r = partner_client.get("/v1/partners/me")
    assert r.status_code == 200
    assert r.json()["id"] == str(partner.id)
    assert r.json()["name"] == partner.name


@pytest.mark.django_db
def test_me_for_master_is_synthetic(master_client):
    r = master_client.get("/v1/partners/me")
    assert r.status_code == 200
    assert r.json() == {"id": None, "name": "MASTER", "is_active": True}


@pytest.mark.django_db
def test_master_creates_and_lists_partners(master_client):
    r = master_client.post("/v1/partners", {"name": "Nova Escola"}, format="json")
    assert r.status_code == 201
    pid = r.json()["id"]
    assert AuditLog.objects.filter(action="partner.created", entity_id=pid).exists()

    listed = master_client.get("/v1/partners")
    assert pid in [p["id"] for p in listed.json()["items"]]


@pytest.mark.django_db
def test_master_patches_partner(master_client, partner):
    r = master_client.patch(f"/v1/partners/{partner.id}", {"is_active": False}, format="json")
    assert r.status_code == 200
    assert r.json()["is_active"] is False

    partner.refresh_from_db()
    assert partner.is_active is False
    assert AuditLog.objects.filter(action="partner.updated", entity_id=partner.id).count() == 1


@pytest.mark.django_db
def test_empty_patch_is_bad_request(master_client, partner):
    r = master_client.patch(f"/v1/partners/{partner.id}", {}, format="json")
    assert r.status_code == 400


@pytest.mark.django_db
def test_patch_unknown_partner_is_not_found(master_client):
    r = master_client.patch("/v1/partners/00000000-0000-0000-0000-000000000009", {"name": "Ghost"}, format="json")
    assert r.status_code == 404


@pytest.mark.django_db
def test_partner_user_cannot_administer_partners(partner_client, partner):
    assert partner_client.get("/v1/partners").status_code == 403
    assert partner_client.post("/v1/partners", {"name": "Mine"}, format="json").status_code == 403
    assert partner_client.patch(f"/v1/partners/{partner.id}", {"name": "Renamed"}, format="json").status_code == 403
    assert Partner.objects.get(id=partner.id).name == partner.name
