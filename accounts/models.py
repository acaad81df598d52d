from django.db import models
from django.contrib.auth.hashers import make_password, check_password
from django.utils import timezone


class Account(models.Model):
    first_name = models.CharField(max_length=64)
    last_name = models.CharField(max_length=64)
    email = models.EmailField(max_length=254, unique=True, db_index=True)
    profile_image = models.URLField(max_length=500, null=True, blank=True)
    business_name = models.CharField(max_length=128, null=True, blank=True)

    is_active = models.BooleanField(default=True)
    is_email_confirmed = models.BooleanField(default=False)
    is_recommended = models.BooleanField(default=False)
    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    @property
    def is_authenticated(self):
        return True

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'

    def is_usable(self):
        return self.is_active and not self.is_deleted


class GlobalAdmin(models.Model):
    email = models.EmailField(max_length=254, unique=True, db_index=True)
    password = models.CharField(max_length=128)
    is_original = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        related_name='created_admins',
        null=True,
        blank=True
    )
    last_login = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.email

    @property
    def is_authenticated(self):
        return True

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    def touch_login(self):
        self.last_login = timezone.now()
        self.save(update_fields=['last_login', 'modified_at'])
