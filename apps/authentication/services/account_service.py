"""
Account registration and login
"""
import logging

from django.contrib.auth import authenticate
from django.db import IntegrityError, transaction

from apps.core.exceptions import EmailAlreadyRegistered, InvalidCredentials
from ..models import User
from .token_service import token_service

logger = logging.getLogger(__name__)


class AccountService:
    """
    Registers users and issues their access tokens.
    The role profile (and a customer's wallet) is created by signals.
    """

    @staticmethod
    def register(email: str, password: str, full_name: str, role: str, phone_number: str = '') -> dict:
        email = User.objects.normalize_email(email)
        if User.objects.filter(email=email).exists():
            raise EmailAlreadyRegistered()

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=email,
                    password=password,
                    full_name=full_name,
                    role=role,
                    phone_number=phone_number or '',
                )
        except IntegrityError:
            raise EmailAlreadyRegistered()

        logger.info(f"Registered {role} account {user.email}")
        return {'user': user, 'token': token_service.issue_token(user)}

    @staticmethod
    def login(email: str, password: str) -> dict:
        user = authenticate(email=User.objects.normalize_email(email), password=password)
        if user is None:
            logger.info(f"Failed login for {email}")
            raise InvalidCredentials()

        return {'user': user, 'token': token_service.issue_token(user)}


account_service = AccountService()
