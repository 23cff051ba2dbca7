"""
User Account Models

Accounts are the actors of every employee-record operation. Besides
authentication they carry the organizational placement (company, department,
section, position) and job role that scope what an actor may see and decide.

Two account types exist:
    hr     - HR user working inside its placement
    owner  - holding-level account; sees every company and may override
             cooling-off, mutation approval and blacklist locks
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models
from django.core.exceptions import PermissionDenied


OWNER_TYPE = 'owner'
HR_TYPE = 'hr'


class UserType(models.Model):
    type_name = models.CharField(max_length=50, unique=True, db_index=True)
    description = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'user_types'
        verbose_name = 'User Type'
        verbose_name_plural = 'User Types'

    def __str__(self):
        return self.type_name


class CustomUserManager(BaseUserManager):

    USER_TYPE_DESCRIPTIONS = {
        HR_TYPE: 'HR user scoped to their organization placement',
        OWNER_TYPE: 'Owner with full access across all companies',
    }

    def create_user(self, email, name, phone_number, password=None, user_type_name=HR_TYPE, **extra_fields):
        """
        Create and save an account of the given type.

        extra_fields: company, department, section, position, job_role
        """
        if not email:
            raise ValueError('Email is required')
        if not name:
            raise ValueError('Name is required')

        user_type, _ = UserType.objects.get_or_create(
            type_name=user_type_name,
            defaults={'description': self.USER_TYPE_DESCRIPTIONS.get(user_type_name, '')}
        )

        user = self.model(
            email=self.normalize_email(email),
            name=name,
            phone_number=phone_number or '',
            user_type=user_type,
            **extra_fields
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, phone_number, password=None, **extra_fields):
        """Used by createsuperuser; the result is an owner account."""
        return self.create_user(
            email, name, phone_number, password=password, user_type_name=OWNER_TYPE, **extra_fields
        )


class CustomUser(AbstractBaseUser):
    """Email-authenticated account with an organizational placement"""
    email = models.EmailField(unique=True, db_index=True)
    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=15, blank=True, default='')

    user_type = models.ForeignKey(UserType, on_delete=models.PROTECT, related_name='users')
    job_role = models.ForeignKey(
        'job_roles.JobRole',
        on_delete=models.PROTECT,
        related_name='users',
        null=True,
        blank=True,
        help_text="Authority level inside the placement"
    )

    # The narrowest placement set defines the data scope
    company = models.ForeignKey(
        'work_structures.Company', on_delete=models.PROTECT, related_name='users', null=True, blank=True
    )
    department = models.ForeignKey(
        'work_structures.Department', on_delete=models.PROTECT, related_name='users', null=True, blank=True
    )
    section = models.ForeignKey(
        'work_structures.Section', on_delete=models.PROTECT, related_name='users', null=True, blank=True
    )
    position = models.ForeignKey(
        'work_structures.Position', on_delete=models.PROTECT, related_name='users', null=True, blank=True
    )

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name', 'phone_number']

    class Meta:
        db_table = 'custom_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return f"{self.name} ({self.email})"

    def is_owner(self):
        return self.user_type.type_name == OWNER_TYPE

    def delete(self, *args, **kwargs):
        if self.is_owner():
            raise PermissionDenied("Owner accounts cannot be deleted.")
        return super().delete(*args, **kwargs)

    def save(self, *args, **kwargs):
        # An owner account keeps its type
        if self.pk:
            previous = CustomUser.objects.filter(pk=self.pk).select_related('user_type').first()
            if previous and previous.is_owner() and previous.user_type_id != self.user_type_id:
                raise PermissionDenied("Owner account type cannot be changed.")
        return super().save(*args, **kwargs)
