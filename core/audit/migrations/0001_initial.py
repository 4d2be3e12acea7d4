from django.db import migrations, models
from django.utils import timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("partner_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("actor_user_id", models.UUIDField(blank=True, null=True)),
                ("action", models.CharField(db_index=True, max_length=64)),
                ("entity_type", models.CharField(max_length=64)),
                ("entity_id", models.UUIDField()),
                ("data_json", models.JSONField(default=dict)),
                ("created_at", models.DateTimeField(db_index=True, default=timezone.now)),
            ],
            options={"db_table": "audit_logs"},
        ),
    ]
