import uuid
from django.db import models
from django.utils import timezone


class Partner(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "partners"
        indexes = [models.Index(fields=["is_active"], name="partners_active_idx")]

    def __str__(self) -> str:
        return self.name
