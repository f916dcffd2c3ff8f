from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User Model inheriting from AbstractUser for flexibility.

    Accountants and farm managers sign in with these accounts; the ledger
    itself records the accountant by name, not by user.
    """

    name = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return self.name or self.username
