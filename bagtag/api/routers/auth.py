# bagtag/api/routers/auth.py
from fastapi import APIRouter, Depends, status

from bagtag.api.deps import get_account_service, get_session_context
from bagtag.schemas.auth import (
    LoginRequest,
    MeResponse,
    SignUpRequest,
    SignUpResponse,
    TokenResponse,
    VerifyEmailRequest,
)
from bagtag.schemas.common import ErrorResponse, OkResponse
from bagtag.services.accounts import AccountService, SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])


def _me(session: SessionContext) -> MeResponse:
    return MeResponse(
        user_id=session.user_id, email=session.email, display_name=session.display_name
    )


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    description="Creates an unverified account and sends its verification token.",
    responses={
        400: {"model": ErrorResponse, "description": "invalid email or password"},
        409: {"model": ErrorResponse, "description": "email already registered"},
    },
)
async def sign_up(body: SignUpRequest, svc: AccountService = Depends(get_account_service)):
    pending = await svc.sign_up(body.email, body.password, body.display_name)
    return SignUpResponse(user_id=pending.user_id, email=pending.email, message=pending.message)


@router.post(
    "/verify",
    response_model=OkResponse,
    summary="Confirm an email address",
    responses={401: {"model": ErrorResponse, "description": "unknown token"}},
)
async def verify_email(
    body: VerifyEmailRequest, svc: AccountService = Depends(get_account_service)
):
    await svc.verify_email(body.token)
    return {"ok": True}


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Sign in",
    responses={401: {"model": ErrorResponse, "description": "bad credentials or unverified"}},
)
async def login(body: LoginRequest, svc: AccountService = Depends(get_account_service)):
    session = await svc.login(body.email, body.password)
    return TokenResponse(
        access_token=session.token, expires_at=session.expires_at, user=_me(session)
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
    responses={401: {"model": ErrorResponse}},
)
async def logout(
    session: SessionContext = Depends(get_session_context),
    svc: AccountService = Depends(get_account_service),
) -> None:
    await svc.logout(session)


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Current user",
    responses={401: {"model": ErrorResponse}},
)
async def me(session: SessionContext = Depends(get_session_context)):
    return _me(session)
