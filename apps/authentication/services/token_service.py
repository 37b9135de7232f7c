"""
JWT issue and verification service
"""
import logging
from datetime import timedelta
from typing import Optional

import jwt
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS256'


class TokenService:
    """
    Service for issuing and validating HS256 access tokens
    """

    @staticmethod
    def issue_token(user) -> str:
        """
        Issue an access token for a user

        Args:
            user: User instance

        Returns:
            Encoded JWT string
        """
        now = timezone.now()
        payload = {
            'sub': str(user.id),
            'email': user.email,
            'role': user.role,
            'iat': int(now.timestamp()),
            'exp': int((now + timedelta(days=settings.JWT_EXPIRES_IN_DAYS)).timestamp()),
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Optional[dict]:
        """
        Decode and verify a token

        Returns:
            Decoded payload if valid, None otherwise
        """
        try:
            return jwt.decode(token, settings.JWT_SECRET, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired access token")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected invalid access token: {e}")
            return None

    @staticmethod
    def extract_bearer_token(auth_header: str) -> Optional[str]:
        """
        Extract the token from an Authorization header value
        """
        if not auth_header:
            return None

        parts = auth_header.split()
        if len(parts) != 2 or parts[0].lower() != 'bearer':
            return None

        return parts[1]


# Singleton instance
token_service = TokenService()
