"""Credential service.

Issues and verifies the signed bearer tokens that carry a principal's
identity and role attributes between requests.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.exceptions import InvalidTokenError
from schemas.user import Principal, User
from utils.converters import user_to_principal

logger = logging.getLogger(__name__)


class CredentialService:
    """Signs principals into JWTs and reads them back."""

    def __init__(
        self,
        secret_key: str = JWT_SECRET_KEY,
        algorithm: str = JWT_ALGORITHM,
        expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed access token for a user.

        Args:
            user: The user the token identifies.
            expires_delta: Optional lifetime; defaults to the configured one.

        Returns:
            Encoded JWT token string.
        """
        principal = user_to_principal(user)
        expire = datetime.now(pytz.utc) + (
            expires_delta or timedelta(minutes=self.expire_minutes)
        )
        to_encode = principal.model_dump(exclude={"id"})
        to_encode.update({"sub": str(principal.id), "exp": expire})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Principal:
        """Decode a token into the principal it was issued for.

        Args:
            token: Encoded JWT.

        Returns:
            The Principal embedded in the token.

        Raises:
            InvalidTokenError: If the signature, expiry or payload is invalid.
        """
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("Rejected token: %s", e)
            raise InvalidTokenError() from e

        subject = payload.get("sub")
        if subject is None:
            raise InvalidTokenError()
        try:
            return Principal(
                id=int(subject),
                email=payload.get("email", ""),
                role=payload.get("role"),
                guardian_id=payload.get("guardian_id") or 0,
                class_name=payload.get("class_name") or "",
                institution=payload.get("institution") or "",
            )
        except ValueError as e:
            raise InvalidTokenError() from e
