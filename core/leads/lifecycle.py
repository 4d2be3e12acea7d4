"""
Lead lifecycle: creation, field edits with status history, outreach messages.

Status changes are MASTER-only everywhere. Every observed status change writes
exactly one LeadStatusHistory row in the same transaction as the lead update.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from core.common.exceptions import BadRequest, UnprocessableEntity
from core.common.phone import NormalizedPhone, normalize_from_country_and_national
from core.iam.tenancy import Actor, require_master
from core.leads.models import ContactEvent, Lead, LeadStatusHistory

logger = logging.getLogger(__name__)

MESSAGE_TEMPLATE_VERSION = "v1"

EDITABLE_FIELDS = ("student_name", "email", "school", "city")

FIRST_CONTACT_NOTE = "Status alterado na primeira geracao de mensagem"


@dataclass(frozen=True)
class GeneratedMessage:
    lead: Lead
    message: str
    template_version: str
    channel: str
    to_address: str


def create_lead(
    *,
    partner_id,
    created_by_id,
    student_name: str,
    email: str,
    phone: NormalizedPhone,
    school: str,
    city: str,
) -> Lead:
    return Lead.objects.create(
        partner_id=partner_id,
        created_by_id=created_by_id,
        student_name=student_name,
        email=email,
        phone_raw=phone.raw,
        phone_e164=phone.e164,
        phone_country=phone.country,
        phone_valid=phone.valid,
        school=school,
        city=city,
        status=Lead.Status.NEW,
    )


def patch_lead(actor: Actor, lead: Lead, changes: dict) -> Lead:
    """
    Apply a partial edit. Keys: student_name, email, school, city,
    phone_country, phone_national, status, note.
    """
    if not changes:
        raise BadRequest("Provide at least one field to update")

    new_status = changes.get("status")
    if new_status is not None:
        require_master(actor)

    phone = None
    if changes.get("phone_country") or changes.get("phone_national"):
        phone = normalize_from_country_and_national(
            changes.get("phone_country") or lead.phone_country,
            changes.get("phone_national") or lead.phone_raw,
        )

    with transaction.atomic():
        locked = Lead.objects.select_for_update().get(pk=lead.pk)
        old_status = locked.status

        for field in EDITABLE_FIELDS:
            if field in changes:
                setattr(locked, field, changes[field])

        if phone is not None:
            locked.phone_raw = phone.raw
            locked.phone_e164 = phone.e164
            locked.phone_country = phone.country
            locked.phone_valid = phone.valid

        if new_status is not None:
            locked.status = new_status

        locked.updated_at = timezone.now()
        locked.save()

        if new_status is not None and new_status != old_status:
            LeadStatusHistory.objects.create(
                lead=locked,
                old_status=old_status,
                new_status=new_status,
                changed_by_id=actor.id,
                note=changes.get("note") or None,
            )

    return locked


def render_message(lead: Lead) -> str:
    name = (lead.student_name or "").strip()
    first_name = name.split(" ")[0] if name else lead.student_name
    return (
        f"Ola, {first_name}! Somos especialistas em passagens para intercambio. "
        f"Vimos seu interesse em {lead.school}, em {lead.city}. "
        "Posso te ajudar com as melhores opcoes de voo?"
    )


def generate_message(actor: Actor, lead: Lead) -> GeneratedMessage:
    """
    Render the outreach message and record the attempt.

    Invalid phone: a failed ContactEvent is written, the lead is left alone
    and 422 is raised. Otherwise contact timestamps move forward and a NEW lead
    goes to FIRST_CONTACT when a MASTER is acting.
    """
    message = render_message(lead)

    if not lead.phone_valid:
        ContactEvent.objects.create(
            lead=lead,
            user_id=actor.id,
            channel=ContactEvent.Channel.WHATSAPP,
            message_template_version=MESSAGE_TEMPLATE_VERSION,
            message_rendered=message,
            to_address=lead.phone_e164,
            success=False,
            error_reason="phone_valid=false",
        )
        logger.info("Message not generated for lead %s: invalid phone", lead.id)
        raise UnprocessableEntity("Lead has an invalid phone", code="INVALID_PHONE")

    now = timezone.now()
    with transaction.atomic():
        locked = Lead.objects.select_for_update().get(pk=lead.pk)

        ContactEvent.objects.create(
            lead=locked,
            user_id=actor.id,
            channel=ContactEvent.Channel.WHATSAPP,
            message_template_version=MESSAGE_TEMPLATE_VERSION,
            message_rendered=message,
            to_address=locked.phone_e164,
            success=True,
        )

        locked.last_contacted_at = now
        if locked.first_contacted_at is None:
            locked.first_contacted_at = now

        promote = locked.status == Lead.Status.NEW and actor.is_master
        if promote:
            locked.status = Lead.Status.FIRST_CONTACT

        locked.updated_at = now
        locked.save(update_fields=["last_contacted_at", "first_contacted_at", "status", "updated_at"])

        if promote:
            LeadStatusHistory.objects.create(
                lead=locked,
                old_status=Lead.Status.NEW,
                new_status=Lead.Status.FIRST_CONTACT,
                changed_by_id=actor.id,
                note=FIRST_CONTACT_NOTE,
            )

    return GeneratedMessage(
        lead=locked,
        message=message,
        template_version=MESSAGE_TEMPLATE_VERSION,
        channel=ContactEvent.Channel.WHATSAPP,
        to_address=locked.phone_e164,
    )
