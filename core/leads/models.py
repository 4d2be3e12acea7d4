import uuid
from django.conf import settings
from django.db import models
from django.utils import timezone


class Lead(models.Model):
    class Status(models.TextChoices):
        NEW = "NEW", "New"
        FIRST_CONTACT = "FIRST_CONTACT", "First contact"
        RESPONDED = "RESPONDED", "Responded"
        NO_RESPONSE = "NO_RESPONSE", "No response"
        WON = "WON", "Won"
        LOST = "LOST", "Lost"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    partner = models.ForeignKey("partners.Partner", on_delete=models.PROTECT, related_name="leads")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="created_leads"
    )

    student_name = models.CharField(max_length=160)
    email = models.EmailField()

    # phone_raw is what the user typed; phone_e164 is the dedupe/storage key
    phone_raw = models.CharField(max_length=40)
    phone_e164 = models.CharField(max_length=20)
    phone_country = models.CharField(max_length=2)
    phone_valid = models.BooleanField(default=True)

    school = models.CharField(max_length=160)
    city = models.CharField(max_length=120)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NEW)

    first_contacted_at = models.DateTimeField(null=True, blank=True)
    last_contacted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "leads"
        indexes = [
            models.Index(fields=["partner", "created_at"], name="leads_partner_created_idx"),
            models.Index(fields=["partner", "status"], name="leads_partner_status_idx"),
            models.Index(fields=["partner", "phone_e164"], name="leads_partner_phone_idx"),
            models.Index(fields=["partner", "email"], name="leads_partner_email_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.student_name} <{self.email}>"


class LeadStatusHistory(models.Model):
    """
    Append-only. One row per actual status change.
    """

    id = models.BigAutoField(primary_key=True)

    lead = models.ForeignKey("leads.Lead", on_delete=models.CASCADE, related_name="status_history")
    old_status = models.CharField(max_length=20, choices=Lead.Status.choices)
    new_status = models.CharField(max_length=20, choices=Lead.Status.choices)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="lead_status_changes"
    )
    note = models.CharField(max_length=1000, null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "lead_status_history"
        indexes = [models.Index(fields=["lead", "created_at"], name="lead_hist_lead_created_idx")]


class ContactEvent(models.Model):
    """
    Append-only. One row per outreach attempt, successful or not.
    """

    class Channel(models.TextChoices):
        WHATSAPP = "WHATSAPP", "WhatsApp"

    id = models.BigAutoField(primary_key=True)

    lead = models.ForeignKey("leads.Lead", on_delete=models.CASCADE, related_name="contact_events")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="contact_events")

    channel = models.CharField(max_length=16, choices=Channel.choices, default=Channel.WHATSAPP)
    message_template_version = models.CharField(max_length=16)
    message_rendered = models.TextField()
    to_address = models.CharField(max_length=40)

    success = models.BooleanField()
    error_reason = models.CharField(max_length=255, null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "contact_events"
        indexes = [models.Index(fields=["lead", "created_at"], name="contact_ev_lead_created_idx")]
