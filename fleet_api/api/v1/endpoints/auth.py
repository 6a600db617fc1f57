import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_api import crud, schemas
from fleet_api.api import deps
from fleet_api.core.errors import StoreError
from fleet_api.services.clients.auth_provider import AuthProviderClient, AuthProviderError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=schemas.RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: schemas.RegisterRequest,
    db: Session = Depends(deps.get_db),
    auth_client: AuthProviderClient = Depends(deps.get_auth_client),
):
    """
    Create a confirmed user with the auth provider and store its profile.

    If the profile cannot be stored, the provider user is deleted again so no
    account is left without a role.
    """
    user = await auth_client.create_user(user_in.email, user_in.password)
    user_id = user.get("id")
    if not user_id:
        raise AuthProviderError("Auth provider did not return a user id")

    try:
        profile = crud.profile.create(
            db, id=user_id, name=user_in.name, email=user_in.email, role=user_in.role.value
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Profile insert failed for {user_in.email}, removing auth user {user_id}: {e}")
        try:
            await auth_client.delete_user(user_id)
        except AuthProviderError:
            logger.exception(f"Could not remove auth user {user_id} after failed registration")
        raise StoreError(str(getattr(e, "orig", None) or e))

    logger.info(f"Registered {profile.email} as {profile.role}")
    return {
        "message": "User registered successfully",
        "user": {"id": profile.id, "email": profile.email, "name": profile.name, "role": profile.role},
    }

@router.post("/login", response_model=schemas.LoginResponse)
async def login(
    credentials: schemas.LoginRequest,
    db: Session = Depends(deps.get_db),
    auth_client: AuthProviderClient = Depends(deps.get_auth_client),
):
    """
    Exchange email and password for an access token.
    """
    session = await auth_client.sign_in_with_password(credentials.email, credentials.password)
    user = session.get("user") or {}
    profile = crud.profile.get(db, user.get("id")) if user.get("id") else None
    return {
        "message": "Login successful",
        "token": session.get("access_token"),
        "user": {
            "id": user.get("id"),
            "email": user.get("email"),
            "name": profile.name if profile else None,
            "role": profile.role if profile else None,
        },
    }

@router.get("/profile", response_model=schemas.ProfileResponse)
async def read_profile(
    current_user: deps.CurrentUser = Depends(deps.require("auth:profile")),
):
    return {
        "user": {
            "id": current_user.id,
            "email": current_user.email,
            "name": current_user.name,
            "role": current_user.role,
        }
    }

@router.post("/forgot-password", response_model=schemas.MessageResponse)
async def forgot_password(
    request: schemas.ForgotPasswordRequest,
    auth_client: AuthProviderClient = Depends(deps.get_auth_client),
):
    """
    Ask the auth provider to email a password reset link.
    """
    await auth_client.send_password_reset(request.email)
    return {"message": "Password reset email sent"}
