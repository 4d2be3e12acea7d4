import uuid

import pytest
from django.test import override_settings

from core.common.exceptions import BadRequest, Forbidden
from core.iam.models import Role
from core.iam.tenancy import Actor, require_master, resolve_partner_id, resolve_required_partner_id

P1 = uuid.uuid4()
P2 = uuid.uuid4()

MASTER = Actor(id=uuid.uuid4(), role=Role.MASTER, partner_id=None)
PARTNER = Actor(id=uuid.uuid4(), role=Role.PARTNER, partner_id=P1)


@pytest.mark.parametrize("requested", [None, "", P1, str(P1)])
def test_partner_is_pinned_to_own_partner(requested):
    assert resolve_partner_id(PARTNER, requested) == P1


@pytest.mark.parametrize("requested", [P2, str(P2)])
def test_partner_cannot_request_another_partner(requested):
    with pytest.raises(Forbidden):
        resolve_partner_id(PARTNER, requested)


def test_partner_without_binding_is_forbidden():
    orphan = Actor(id=uuid.uuid4(), role=Role.PARTNER, partner_id=None)
    with pytest.raises(Forbidden):
        resolve_partner_id(orphan, None)


def test_master_gets_requested_partner_or_none():
    assert resolve_partner_id(MASTER, None) is None
    assert resolve_partner_id(MASTER, str(P2)) == P2


def test_malformed_partner_id_is_bad_request():
    with pytest.raises(BadRequest):
        resolve_partner_id(MASTER, "not-a-uuid")


@override_settings(DEFAULT_PARTNER_ID=None)
def test_required_partner_for_master_without_default_fails():
    with pytest.raises(BadRequest):
        resolve_required_partner_id(MASTER, None)


def test_required_partner_for_master_falls_back_to_default():
    with override_settings(DEFAULT_PARTNER_ID=str(P2)):
        assert resolve_required_partner_id(MASTER, None) == P2
        assert resolve_required_partner_id(MASTER, P1) == P1


def test_required_partner_for_partner_is_own():
    assert resolve_required_partner_id(PARTNER, None) == P1


def test_require_master():
    require_master(MASTER)
    with pytest.raises(Forbidden):
        require_master(PARTNER)
