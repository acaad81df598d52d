from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from accounts.models import GlobalAdmin


class Command(BaseCommand):
    help = "Creates the original global admin from GLOBAL_ADMIN_EMAIL / GLOBAL_ADMIN_PASSWORD"

    def handle(self, *args, **options):
        if GlobalAdmin.objects.exists():
            raise CommandError("Global admin already exists")

        admin = GlobalAdmin(email=settings.GLOBAL_ADMIN_EMAIL.strip().lower(), is_original=True)
        admin.set_password(settings.GLOBAL_ADMIN_PASSWORD)
        admin.save()
        self.stdout.write(f"Global admin {admin.email} initialized successfully")
