from django.core.management.base import BaseCommand, CommandError

from accounts.models import Account, GlobalAdmin
from authentication.models import AuthToken


class Command(BaseCommand):
    help = "Issues a bearer key for an account or a global admin"

    def add_arguments(self, parser):
        group = parser.add_mutually_exclusive_group(required=True)
        group.add_argument("--account", type=str, help="E-mail of the account")
        group.add_argument("--admin", type=str, help="E-mail of the global admin")

    def handle(self, *args, **options):
        if options["account"]:
            principal = Account.objects.filter(email__iexact=options["account"], is_deleted=False).first()
        else:
            principal = GlobalAdmin.objects.filter(email__iexact=options["admin"]).first()

        if principal is None:
            raise CommandError("No matching principal found")

        if isinstance(principal, GlobalAdmin):
            principal.touch_login()

        token, key = AuthToken.issue(principal)
        self.stdout.write(f"token {token.id} expires at {token.key_expires_at.isoformat()}")
        self.stdout.write(key)
