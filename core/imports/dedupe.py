from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Mapping, Optional

from django.db.models import Q

from core.leads.models import Lead


class MatchField(str, enum.Enum):
    PHONE = "phone"
    EMAIL = "email"
    NAME = "name"


# order used when listing matched fields
MATCH_FIELD_ORDER = (MatchField.PHONE, MatchField.EMAIL, MatchField.NAME)


@dataclass(frozen=True)
class DuplicateMatch:
    lead: Lead
    matched_fields: frozenset

    def ordered_fields(self) -> list:
        return [f for f in MATCH_FIELD_ORDER if f in self.matched_fields]


def _same_text(a: str, b: str) -> bool:
    return (a or "").casefold() == (b or "").casefold()


def matched_fields_for(lead: Lead, row: Mapping[str, str], phone_e164: str) -> frozenset:
    """
    Re-check all three fields against the stored lead, whatever clause found it.
    """
    fields = set()
    if lead.phone_e164 == phone_e164:
        fields.add(MatchField.PHONE)
    if _same_text(lead.email, row.get("email", "")):
        fields.add(MatchField.EMAIL)
    if _same_text(lead.student_name, row.get("student_name", "")):
        fields.add(MatchField.NAME)
    return frozenset(fields)


def find_duplicate(partner_id, row: Mapping[str, str], phone_e164: str) -> Optional[DuplicateMatch]:
    """
    First lead of the partner (storage order) matching on email (iexact),
    phone (E.164 exact) or student name (iexact).
    """
    lead = (
        Lead.objects.filter(partner_id=partner_id)
        .filter(
            Q(email__iexact=row.get("email", "")) |
            Q(phone_e164=phone_e164) |
            Q(student_name__iexact=row.get("student_name", ""))
        )
        .order_by("created_at", "id")
        .first()
    )
    if not lead:
        return None

    return DuplicateMatch(lead=lead, matched_fields=matched_fields_for(lead, row, phone_e164))
