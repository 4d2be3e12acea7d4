import uuid
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils import timezone


class Role(models.TextChoices):
    MASTER = "MASTER", "Master"
    PARTNER = "PARTNER", "Partner"


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", Role.PARTNER)
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields["role"] = Role.MASTER
        extra_fields["partner"] = None
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Login is by email. MASTER users have no partner; PARTNER users have exactly one.
    """

    username = None

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120, blank=True, default="")
    email = models.EmailField(unique=True)

    role = models.CharField(max_length=16, choices=Role.choices, default=Role.PARTNER)
    partner = models.ForeignKey(
        "partners.Partner",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="users",
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = "users"
        indexes = [models.Index(fields=["partner", "created_at"], name="users_partner_created_idx")]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(role=Role.MASTER, partner__isnull=True)
                    | models.Q(role=Role.PARTNER, partner__isnull=False)
                ),
                name="users_role_partner_ck",
            )
        ]

    @property
    def is_master(self) -> bool:
        return self.role == Role.MASTER
