"""
Partner (tenant) scoping.

Every partner-scoped operation goes through resolve_partner_id() before it
touches data. MASTER sees whatever partner it asks for (or all of them when it
asks for none); PARTNER is pinned to its own partner.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from core.common.exceptions import BadRequest, Forbidden
from core.iam.models import Role


@dataclass(frozen=True)
class Actor:
    id: uuid.UUID
    role: Role
    partner_id: Optional[uuid.UUID]

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=user.id, role=Role(user.role), partner_id=user.partner_id)

    @property
    def is_master(self) -> bool:
        return self.role == Role.MASTER


def _as_uuid(value) -> Optional[uuid.UUID]:
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise BadRequest("partner_id must be a valid UUID")


def resolve_partner_id(actor: Actor, requested_partner_id=None) -> Optional[uuid.UUID]:
    requested = _as_uuid(requested_partner_id)

    if actor.is_master:
        return requested

    if not actor.partner_id:
        raise Forbidden("PARTNER user has no partner bound")

    if requested and requested != actor.partner_id:
        raise Forbidden("PARTNER cannot access another partner's data")

    return actor.partner_id


def resolve_required_partner_id(actor: Actor, requested_partner_id=None) -> uuid.UUID:
    """
    Same as resolve_partner_id(), for writes that need a concrete partner.
    MASTER falls back to settings.DEFAULT_PARTNER_ID.
    """
    if actor.is_master and not requested_partner_id:
        requested_partner_id = getattr(settings, "DEFAULT_PARTNER_ID", None)

    partner_id = resolve_partner_id(actor, requested_partner_id)
    if not partner_id:
        raise BadRequest("partner_id is required (no DEFAULT_PARTNER_ID configured)")
    return partner_id


def require_master(actor: Actor) -> None:
    if not actor.is_master:
        raise Forbidden("Only MASTER can perform this action")
