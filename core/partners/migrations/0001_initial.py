from django.db import migrations, models
import uuid
from django.utils import timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Partner",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("name", models.CharField(max_length=120)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(db_index=True, default=timezone.now)),
            ],
            options={"db_table": "partners"},
        ),
        migrations.AddIndex(
            model_name="partner",
            index=models.Index(fields=["is_active"], name="partners_active_idx"),
        ),
    ]
