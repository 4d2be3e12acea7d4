from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid
from django.utils import timezone

STATUS_CHOICES = [
    ("NEW", "New"),
    ("FIRST_CONTACT", "First contact"),
    ("RESPONDED", "Responded"),
    ("NO_RESPONSE", "No response"),
    ("WON", "Won"),
    ("LOST", "Lost"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("partners", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Lead",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("student_name", models.CharField(max_length=160)),
                ("email", models.EmailField(max_length=254)),
                ("phone_raw", models.CharField(max_length=40)),
                ("phone_e164", models.CharField(max_length=20)),
                ("phone_country", models.CharField(max_length=2)),
                ("phone_valid", models.BooleanField(default=True)),
                ("school", models.CharField(max_length=160)),
                ("city", models.CharField(max_length=120)),
                ("status", models.CharField(choices=STATUS_CHOICES, default="NEW", max_length=20)),
                ("first_contacted_at", models.DateTimeField(blank=True, null=True)),
                ("last_contacted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(db_index=True, default=timezone.now)),
                ("updated_at", models.DateTimeField(default=timezone.now)),
                ("partner", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="leads", to="partners.partner")),
                ("created_by", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="created_leads", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "leads"},
        ),
        migrations.AddIndex(
            model_name="lead",
            index=models.Index(fields=["partner", "created_at"], name="leads_partner_created_idx"),
        ),
        migrations.AddIndex(
            model_name="lead",
            index=models.Index(fields=["partner", "status"], name="leads_partner_status_idx"),
        ),
        migrations.AddIndex(
            model_name="lead",
            index=models.Index(fields=["partner", "phone_e164"], name="leads_partner_phone_idx"),
        ),
        migrations.AddIndex(
            model_name="lead",
            index=models.Index(fields=["partner", "email"], name="leads_partner_email_idx"),
        ),
        migrations.CreateModel(
            name="LeadStatusHistory",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("old_status", models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ("new_status", models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ("note", models.CharField(blank=True, max_length=1000, null=True)),
                ("created_at", models.DateTimeField(db_index=True, default=timezone.now)),
                ("lead", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_history", to="leads.lead")),
                ("changed_by", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="lead_status_changes", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "lead_status_history"},
        ),
        migrations.AddIndex(
            model_name="leadstatushistory",
            index=models.Index(fields=["lead", "created_at"], name="lead_hist_lead_created_idx"),
        ),
        migrations.CreateModel(
            name="ContactEvent",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("channel", models.CharField(choices=[("WHATSAPP", "WhatsApp")], default="WHATSAPP", max_length=16)),
                ("message_template_version", models.CharField(max_length=16)),
                ("message_rendered", models.TextField()),
                ("to_address", models.CharField(max_length=40)),
                ("success", models.BooleanField()),
                ("error_reason", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(db_index=True, default=timezone.now)),
                ("lead", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="contact_events", to="leads.lead")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="contact_events", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "contact_events"},
        ),
        migrations.AddIndex(
            model_name="contactevent",
            index=models.Index(fields=["lead", "created_at"], name="contact_ev_lead_created_idx"),
        ),
    ]
