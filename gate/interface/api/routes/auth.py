"""Authentication routes.

Each endpoint answers OPTIONS with an empty 200 for cross-origin preflight
and POST with a JSON body. Failures are rendered by the handlers in
``gate.interface.api.errors``.
"""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Response
from pydantic import BaseModel, ConfigDict, Field

from gate.application.usecase.auth import (
    LoginRequest,
    LoginResponse,
    LoginUseCase,
    RegisterRequest,
    RegisterResponse,
    RegisterUseCase,
    RequestPasswordResetRequest,
    RequestPasswordResetUseCase,
    ResetPasswordRequest,
    ResetPasswordUseCase,
)
from gate.domain.error import InvalidInputError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class CredentialsBody(BaseModel):
    """Email and password, as sent by the dashboard login and register forms."""

    email: str
    password: str


class ResetPasswordBody(BaseModel):
    """Reset body.

    ``{email}`` requests a reset link; ``{email, token, newPassword}``
    consumes one.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    token: str | None = None
    new_password: str | None = Field(default=None, alias="newPassword")


class ResetPasswordResult(BaseModel):
    """Reset response, the same shape for both phases."""

    success: bool = True
    message: str


def _preflight() -> Response:
    return Response(status_code=200)


@router.options("/login", include_in_schema=False)
async def login_preflight() -> Response:
    return _preflight()


@router.options("/register", include_in_schema=False)
async def register_preflight() -> Response:
    return _preflight()


@router.options("/reset-password", include_in_schema=False)
async def reset_password_preflight() -> Response:
    return _preflight()


@router.post("/login", response_model=LoginResponse)
async def login(
    body: CredentialsBody,
    use_case: FromDishka[LoginUseCase],
) -> LoginResponse:
    """Log in with email and password.

    Example:
        POST /auth/login
        {"email": "a@x.com", "password": "secret1"}

        Response:
        {"success": true, "session": {"access_token": "...", ...}}
    """
    logger.info("Login attempt")
    return await use_case.execute(
        LoginRequest(email=body.email, password=body.password)
    )


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: CredentialsBody,
    use_case: FromDishka[RegisterUseCase],
) -> RegisterResponse:
    """Complete registration of a pre-authorized operator.

    If the credentials are saved but the automatic login fails, the response
    is still a success with ``session: null`` and ``auto_login_failed: true``.
    """
    logger.info("Registration attempt")
    return await use_case.execute(
        RegisterRequest(email=body.email, password=body.password)
    )


@router.post("/reset-password", response_model=ResetPasswordResult)
async def reset_password(
    body: ResetPasswordBody,
    request_use_case: FromDishka[RequestPasswordResetUseCase],
    reset_use_case: FromDishka[ResetPasswordUseCase],
) -> ResetPasswordResult:
    """Request a reset link, or set a new password with a reset token.

    Sending only one of ``token`` and ``newPassword`` is rejected.
    """
    if not body.token and not body.new_password:
        logger.info("Password reset requested")
        requested = await request_use_case.execute(
            RequestPasswordResetRequest(email=body.email or "")
        )
        return ResetPasswordResult(success=requested.success, message=requested.message)

    if body.token and body.new_password:
        logger.info("Password reset submitted")
        result = await reset_use_case.execute(
            ResetPasswordRequest(
                email=body.email or "",
                token=body.token,
                new_password=body.new_password,
            )
        )
        if not result.identity_synced:
            logger.warning("Password reset not propagated to identity provider")
        return ResetPasswordResult(success=result.success, message=result.message)

    raise InvalidInputError("Invalid parameters")
