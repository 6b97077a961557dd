"""
Accounts models - organization users.
"""

from django.contrib.auth.base_user import AbstractBaseUser
from django.db import models

from apps.core.models import LedgerModel


class User(LedgerModel, AbstractBaseUser):
    """
    A person acting inside exactly one organization.

    Username is unique within the organization, email is globally unique.
    Passwords are stored with Django's salted PBKDF2 hasher via set_password();
    the plaintext is never persisted.

    This is a tenant user, not AUTH_USER_MODEL - Django admin staff accounts
    stay on django.contrib.auth.
    """

    username = models.CharField(max_length=150)
    email = models.EmailField(unique=True, db_index=True)
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.PROTECT,
        related_name="users",
    )

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "username"],
                name="uniq_user_username_per_org",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.username} <{self.email}>"
