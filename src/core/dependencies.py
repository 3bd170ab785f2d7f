"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import UnauthorizedError
from schemas.user import Principal
from utils import card_manager
from utils import class_manager
from utils import credential_service
from utils import user_manager
from utils.converters import user_to_principal

# Singleton for CredentialService (holds no per-request state)
_credential_service_instance: Optional[credential_service.CredentialService] = None

# auto_error=False so a missing header is reported as our own UnauthorizedError
security = HTTPBearer(auto_error=False)


def get_credential_service() -> credential_service.CredentialService:
    """Get CredentialService singleton instance."""
    global _credential_service_instance
    if _credential_service_instance is None:
        _credential_service_instance = credential_service.CredentialService()
    return _credential_service_instance


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_card_manager(db: Session = Depends(get_db)) -> card_manager.CardManager:
    """Get CardManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        CardManager instance.
    """
    return card_manager.CardManager(db)


def get_class_manager(db: Session = Depends(get_db)) -> class_manager.ClassManager:
    """Get ClassManager instance with request-scoped DB session."""
    return class_manager.ClassManager(db)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    credentials_service: credential_service.CredentialService = Depends(get_credential_service),
    users: user_manager.UserManager = Depends(get_user_manager),
) -> Principal:
    """Resolve the principal of the current request.

    The token identifies the user; role and class assignment are read from
    the user's current row so roster changes apply without a new login.

    Raises:
        UnauthorizedError: If the token is missing, invalid, or names a user
            that no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")
    token_principal = credentials_service.verify(credentials.credentials)
    user = users.get_user_by_id(token_principal.id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user_to_principal(user)


# Type aliases for dependency injection
CredentialServiceDep = Annotated[
    credential_service.CredentialService, Depends(get_credential_service)
]
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
CardManagerDep = Annotated[
    card_manager.CardManager, Depends(get_card_manager)
]
ClassManagerDep = Annotated[
    class_manager.ClassManager, Depends(get_class_manager)
]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
