from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserManager(BaseUserManager):
    """Custom user manager for wallet-based identification."""

    def create_user(self, wallet_address, password=None, **extra_fields):
        if not wallet_address:
            raise ValueError('Wallet address is required')

        user = self.model(wallet_address=wallet_address.strip(), **extra_fields)
        if password:
            user.set_password(password)
        else:
            # Tourists log in with their wallet address only
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, wallet_address, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(wallet_address, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Tourist taking part in the Smile Coin programme for the length of a trip."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    wallet_address = models.CharField(max_length=128, unique=True, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)

    # Trip
    origin_country = models.CharField(max_length=64, db_index=True)
    arrival_date = models.DateField(null=True, blank=True)
    departure_date = models.DateField(null=True, blank=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'wallet_address'
    REQUIRED_FIELDS = ['origin_country']

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['origin_country'], name='users_origin__6c1f2e_idx'),
            models.Index(fields=['created_at'], name='users_created_8b3d41_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                check=(
                    models.Q(arrival_date__isnull=True)
                    | models.Q(departure_date__isnull=True)
                    | models.Q(arrival_date__lt=models.F('departure_date'))
                ),
                name='user_arrival_before_departure',
            ),
        ]

    def __str__(self):
        return self.get_display_name()

    def get_display_name(self):
        """Return display name or a shortened wallet address."""
        if self.display_name:
            return self.display_name
        return f'{self.wallet_address[:6]}...{self.wallet_address[-4:]}'

    @property
    def has_trip(self):
        return self.arrival_date is not None and self.departure_date is not None
