from django.db import models
from django.apps import apps
from django.conf import settings
from django.utils import timezone
from django.utils.crypto import get_random_string
from django.utils.translation import gettext_lazy as _
from cryptography.fernet import Fernet

import hashlib

import logging
logger = logging.getLogger(__name__)


class AuthToken(models.Model):
    class PrincipalType(models.TextChoices):
        USER = 'user', _('User')
        GLOBAL_ADMIN = 'global-admin', _('Global Admin')

    principal_type = models.CharField(max_length=20, choices=PrincipalType.choices)
    principal_id = models.PositiveBigIntegerField(db_index=True)
    key_digest = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    key_expires_at = models.DateTimeField()
    revoked_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f'{self.principal_type}:{self.principal_id}'

    @staticmethod
    def digest(key):
        return hashlib.sha256(key.encode('utf-8')).hexdigest()

    @classmethod
    def principal_type_of(cls, principal):
        GlobalAdmin = apps.get_model('accounts', 'GlobalAdmin')
        if isinstance(principal, GlobalAdmin):
            return cls.PrincipalType.GLOBAL_ADMIN
        return cls.PrincipalType.USER

    @classmethod
    def issue(cls, principal):
        '''
        Creates a token for an Account or GlobalAdmin and returns it together
        with the bearer key. Only the key digest is stored.
        '''
        principal_type = cls.principal_type_of(principal)
        payload = f'{principal_type}:{principal.pk}:{get_random_string(24)}'
        cipher_suite = Fernet(settings.FERNET_KEY)
        key = cipher_suite.encrypt(payload.encode()).decode()

        token = cls.objects.create(
            principal_type=principal_type,
            principal_id=principal.pk,
            key_digest=cls.digest(key),
            key_expires_at=timezone.now() + settings.AUTH_TOKEN_TTL
        )
        logger.info(f'Issued auth token {token.id} for {token}')
        return token, key

    def is_key_expired(self):
        return timezone.now() > self.key_expires_at

    def is_revoked(self):
        return self.revoked_at is not None

    def revoke(self):
        self.revoked_at = timezone.now()
        self.save(update_fields=['revoked_at'])

    def get_principal(self):
        if self.principal_type == self.PrincipalType.GLOBAL_ADMIN:
            Model = apps.get_model('accounts', 'GlobalAdmin')
        else:
            Model = apps.get_model('accounts', 'Account')
        return Model.objects.filter(pk=self.principal_id).first()
