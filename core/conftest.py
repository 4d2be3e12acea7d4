import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.common.phone import normalize_from_international
from core.iam.models import Role
from core.leads.lifecycle import create_lead
from core.partners.models import Partner

User = get_user_model()


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")
    return client


@pytest.fixture
def partner(db):
    return Partner.objects.create(name="Acme Intercambio")


@pytest.fixture
def other_partner(db):
    return Partner.objects.create(name="Globo Viagens")


@pytest.fixture
def master_user(db):
    return User.objects.create_user(email="master@leads.dev", password="pass12345", name="Master", role=Role.MASTER)


@pytest.fixture
def partner_user(db, partner):
    return User.objects.create_user(email="ops@acme.dev", password="pass12345", name="Ops", partner=partner)


@pytest.fixture
def other_partner_user(db, other_partner):
    return User.objects.create_user(email="ops@globo.dev", password="pass12345", name="Globo", partner=other_partner)


@pytest.fixture
def master_client(master_user):
    return client_for(master_user)


@pytest.fixture
def partner_client(partner_user):
    return client_for(partner_user)


@pytest.fixture
def make_lead(db, master_user):
    def _make(partner, student_name="Ana Souza", email="ana@example.com", phone="+5511987654321",
              school="Colegio Bandeirantes", city="Sao Paulo", created_by=None):
        return create_lead(
            partner_id=partner.id,
            created_by_id=(created_by or master_user).id,
            student_name=student_name,
            email=email,
            phone=normalize_from_international(phone),
            school=school,
            city=city,
        )

    return _make


@pytest.fixture
def other_partner_client(other_partner_user):
    return client_for(other_partner_user)
