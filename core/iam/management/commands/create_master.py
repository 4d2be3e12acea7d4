from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from core.iam.models import Role


class Command(BaseCommand):
    help = "Idempotently create the first MASTER user"

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True)
        parser.add_argument("--password", required=True)
        parser.add_argument("--name", default="Master")

    def handle(self, *args, **options):
        User = get_user_model()
        email = options["email"].strip().lower()

        existing = User.objects.filter(email=email).first()
        if existing:
            if existing.role != Role.MASTER:
                raise CommandError(f"{email} exists and is not a MASTER user")
            self.stdout.write(f"MASTER {email} already exists")
            return

        if len(options["password"]) < 6:
            raise CommandError("Password must have at least 6 characters")

        User.objects.create_user(
            email=email,
            password=options["password"],
            name=options["name"],
            role=Role.MASTER,
            partner=None,
        )
        self.stdout.write(self.style.SUCCESS(f"Created MASTER {email}"))
