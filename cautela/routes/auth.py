import logging
from fastapi import APIRouter, Depends, Response, status
from cautela.configs import SCHEME
from cautela.core import auth, users
from cautela.core.auth import Claims
from cautela.core.db import get_session
from cautela.core.exceptions import UnauthorizedError
from cautela.routes.api import get_claims
from cautela.schemas.user import LoginRequest, RegisterRequest, User

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/auth/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, session=Depends(get_session)):
    return users.register_user(session, data)


@router.post("/auth/login")
def login(data: LoginRequest, response: Response, session=Depends(get_session)):
    """
    Checks the credentials and opens a session. The token is set as an
    http-only `session` cookie and also returned for Bearer use.
    """
    user = auth.authenticate(session, data.email, data.password)
    if not user:
        raise UnauthorizedError("Invalid email or password")

    token = auth.create_session_token(user)
    response.set_cookie(
        key="session",
        value=token,
        max_age=auth.COOKIE_TTL,
        httponly=True,
        secure=SCHEME == "https",
        samesite="Lax",
        path="/"
    )
    logger.info(f"User {user.id} logged in")
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": auth.COOKIE_TTL,
        "user": User.model_validate(user).model_dump(mode="json"),
    }


@router.api_route("/auth/logout", methods=["GET", "POST"])
def logout(response: Response):
    response.delete_cookie(
        key="session",
        path="/",
        secure=SCHEME == "https",
        samesite="Lax"
    )
    return {"success": True, "message": "Logged out successfully"}


@router.get("/auth/me", response_model=User)
def me(session=Depends(get_session), claims: Claims = Depends(get_claims)):
    return users.get_user(session, claims.user_id)
