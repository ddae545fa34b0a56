import logging
import secrets
import string
from dataclasses import dataclass
from typing import Optional
from itsdangerous import URLSafeTimedSerializer, BadData
from werkzeug.security import generate_password_hash, check_password_hash
from cautela.configs import SEED, SESSION_TTL
from cautela.core.models import User
from cautela.core.permissions import Role, Permission, has_permission, to_role

logger = logging.getLogger(__name__)

SERIALIZER = None  # Will be initialized lazily
COOKIE_TTL = SESSION_TTL

PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class Claims:
    """Identity and role of the caller, decoded from a verified session."""
    user_id: int
    role: Optional[Role]
    name: str = ""
    email: str = ""

    def has(self, permission: Permission) -> bool:
        return has_permission(self.role, permission)


def _get_serializer():
    """Get or initialize the SERIALIZER lazily."""
    global SERIALIZER
    if SERIALIZER is None:
        SERIALIZER = URLSafeTimedSerializer(SEED, salt="auth-cookie")
    return SERIALIZER

def create_session_token(user: User) -> str:
    """Returns a signed session token carrying the user's claims."""
    role = to_role(user.role)
    return _get_serializer().dumps({
        "id": user.id,
        "role": role.value if role else None,
        "name": user.name,
        "email": user.email,
    })

def verify_session_token(token) -> Optional[Claims]:
    """Returns the Claims of a valid, unexpired token or None."""
    if not token:
        return None
    try:
        data = _get_serializer().loads(token, max_age=COOKIE_TTL)
    except BadData:
        return None
    if not isinstance(data, dict) or not isinstance(data.get("id"), int):
        logger.warning("Rejected session token with malformed payload")
        return None
    return Claims(
        user_id=data["id"],
        role=to_role(data.get("role")),
        name=data.get("name") or "",
        email=data.get("email") or "",
    )

def hash_password(password: str) -> str:
    return generate_password_hash(password)

def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return check_password_hash(hashed, password)

def generate_password(length: int = 8) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))

def authenticate(session, email: str, password: str) -> Optional[User]:
    """Returns the user whose credentials match, otherwise None."""
    if not email or not password:
        return None
    user = User.get_by_email(session, email)
    if user and verify_password(password, user.password_hash):
        return user
    logger.info(f"Failed login attempt for {email}")
    return None
