from unittest import mock

import pytest

from core.leads.models import Lead


def _lead_body(**overrides):
    body = {
        "student_name": "Bruno Lima",
        "email": "bruno@example.com",
        "phone_country": "BR",
        "phone_national": "11912345678",
        "school": "Colegio Dante",
        "city": "Sao Paulo",
    }
    body.update(overrides)
    return body


@pytest.mark.django_db
def test_partner_creates_lead_in_own_partner(partner_client, partner):
    r = partner_client.post("/v1/leads", _lead_body(), format="json")
    assert r.status_code == 201
    body = r.json()
    assert body["partner_id"] == str(partner.id)
    assert body["phone_e164"] == "+5511912345678"
    assert body["status"] == "NEW"


@pytest.mark.django_db
def test_partner_cannot_create_for_other_partner(partner_client, other_partner):
    r = partner_client.post("/v1/leads", _lead_body(partner_id=str(other_partner.id)), format="json")
    assert r.status_code == 403
    assert Lead.objects.count() == 0


@pytest.mark.django_db
def test_master_create_needs_partner_when_no_default(master_client):
    r = master_client.post("/v1/leads", _lead_body(), format="json")
    assert r.status_code == 400


@pytest.mark.django_db
def test_create_with_invalid_phone_is_422(partner_client):
    r = partner_client.post("/v1/leads", _lead_body(phone_national="123456"), format="json")
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "INVALID_PHONE"


@pytest.mark.django_db
def test_partner_list_is_scoped(partner_client, make_lead, partner, other_partner):
    make_lead(partner, student_name="Ana Souza", email="ana@example.com")
    make_lead(other_partner, student_name="Caio Alves", email="caio@example.com", phone="+5511911112222")

    r = partner_client.get("/v1/leads")
    assert r.status_code == 200
    names = [i["student_name"] for i in r.json()["items"]]
    assert names == ["Ana Souza"]
    assert r.json()["pagination"] == {"page": 1, "page_size": 20, "total": 1}


@pytest.mark.django_db
def test_partner_list_other_partner_forbidden_before_query(partner_client, other_partner):
    with mock.patch("core.leads.api.Lead.objects") as objects:
        r = partner_client.get("/v1/leads", {"partner_id": str(other_partner.id)})
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FORBIDDEN"
    assert not objects.mock_calls


@pytest.mark.django_db
def test_master_list_filters(master_client, make_lead, partner, other_partner):
    make_lead(partner, student_name="Ana Souza", email="ana@example.com", city="Sao Paulo")
    make_lead(partner, student_name="Davi Rocha", email="davi@example.com", phone="+5511933334444", city="Santos")
    make_lead(other_partner, student_name="Eva Melo", email="eva@example.com", phone="+5511955556666")

    assert master_client.get("/v1/leads").json()["pagination"]["total"] == 3
    assert master_client.get("/v1/leads", {"partner_id": str(partner.id)}).json()["pagination"]["total"] == 2

    by_city = master_client.get("/v1/leads", {"city": "santos"}).json()["items"]
    assert [i["student_name"] for i in by_city] == ["Davi Rocha"]

    by_search = master_client.get("/v1/leads", {"search": "EVA@"}).json()["items"]
    assert [i["student_name"] for i in by_search] == ["Eva Melo"]

    paged = master_client.get("/v1/leads", {"page": 2, "page_size": 2}).json()
    assert len(paged["items"]) == 1


@pytest.mark.django_db
def test_page_size_is_capped(master_client):
    r = master_client.get("/v1/leads", {"page_size": 500})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.django_db
def test_detail_missing_is_404_and_foreign_is_403(partner_client, make_lead, other_partner):
    foreign = make_lead(other_partner)

    assert partner_client.get("/v1/leads/00000000-0000-0000-0000-000000000042").status_code == 404
    assert partner_client.get(f"/v1/leads/{foreign.id}").status_code == 403


@pytest.mark.django_db
def test_patch_status_master_only(partner_client, master_client, make_lead, partner):
    lead = make_lead(partner)

    r = partner_client.patch(f"/v1/leads/{lead.id}", {"status": "WON"}, format="json")
    assert r.status_code == 403

    r = master_client.patch(f"/v1/leads/{lead.id}", {"status": "WON", "note": "Fechou pacote"}, format="json")
    assert r.status_code == 200
    assert r.json()["status"] == "WON"

    history = master_client.get(f"/v1/leads/{lead.id}/history").json()
    assert [(h["old_status"], h["new_status"]) for h in history["status_history"]] == [("NEW", "WON")]


@pytest.mark.django_db
def test_generate_message_endpoint(master_client, make_lead, partner):
    lead = make_lead(partner)

    r = master_client.post(f"/v1/leads/{lead.id}/generate-message")
    assert r.status_code == 200
    body = r.json()
    assert body["channel"] == "WHATSAPP"
    assert body["template_version"] == "v1"
    assert body["lead"]["status"] == "FIRST_CONTACT"

    history = master_client.get(f"/v1/leads/{lead.id}/history").json()
    assert len(history["contact_events"]) == 1
    assert history["contact_events"][0]["success"] is True
