from accounts.models import Account, GlobalAdmin


def create_account(first_name, email=None, **kwargs):
    kwargs.setdefault('last_name', 'Tester')
    kwargs.setdefault('is_email_confirmed', True)
    return Account.objects.create(
        first_name=first_name,
        email=email or f'{first_name.lower()}@example.com',
        **kwargs
    )


def create_admin(email, is_original=False, password='secret123', created_by=None):
    admin = GlobalAdmin(email=email, is_original=is_original, created_by=created_by)
    admin.set_password(password)
    admin.save()
    return admin
