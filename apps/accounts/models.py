from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class StaffManager(BaseUserManager):
    """Staff accounts are keyed by email; there is no username."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('Staff accounts need an email address')

        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        """The bakery owner: manager rights plus every admin permission."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        for flag in ('is_staff', 'is_superuser'):
            if extra_fields[flag] is not True:
                raise ValueError(f'Owner accounts must have {flag}=True')

        return self._create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Bakery staff member.

    Counter staff take and edit orders. Managers (``is_staff``) can also
    reconcile customers and use the admin.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    display_name = models.CharField(max_length=100, blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False, help_text='Managers can reconcile customers and use the admin.')

    joined_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = StaffManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'staff_members'
        ordering = ['display_name', 'email']

    def __str__(self):
        return self.get_short_name()

    @property
    def is_manager(self):
        return self.is_staff

    def get_full_name(self):
        return self.display_name or self.email

    def get_short_name(self):
        """Display name, or the part of the email before the @."""
        return self.display_name or self.email.split('@')[0]
