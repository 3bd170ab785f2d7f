"""Authentication routes.

This module handles HTTP endpoints for user registration and login.
"""

import logging

from fastapi import APIRouter, status

from core.dependencies import CredentialServiceDep, CurrentPrincipal, UserManagerDep
from schemas.user import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
def register(
    req: RegisterRequest,
    user_manager: UserManagerDep,
    credential_service: CredentialServiceDep,
) -> AuthResponse:
    """Register a new user and sign them in.

    Args:
        req: Registration request with email, name, password, role, institution.
        user_manager: Injected UserManager instance.
        credential_service: Injected CredentialService instance.

    Returns:
        AuthResponse with the new user and an access token.

    Raises:
        ConflictError: If the email is already registered.
    """
    user = user_manager.create_user(
        email=req.email,
        name=req.name,
        password=req.password,
        role=req.role,
        institution=req.institution,
    )
    return AuthResponse(
        message="User created successfully",
        token=credential_service.issue(user),
        user=UserPublic(**user.model_dump()),
    )


@router.post("/login", response_model=AuthResponse, summary="Log in")
def login(
    req: LoginRequest,
    user_manager: UserManagerDep,
    credential_service: CredentialServiceDep,
) -> AuthResponse:
    """Login with email and password.

    Raises:
        UnauthorizedError: If the email is unknown or the password is wrong.
    """
    user = user_manager.authenticate(req.email, req.password)
    logger.info("User %s logged in", user.id)
    return AuthResponse(
        token=credential_service.issue(user),
        user=UserPublic(**user.model_dump()),
    )


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(principal: CurrentPrincipal) -> CurrentUserResponse:
    return CurrentUserResponse(user=principal)
