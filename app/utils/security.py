# app/utils/security.py
"""
Credential service: password hashing and signed session tokens.
No I/O happens here.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config.security import SecurityConfig
from app.models.user import UserRole
from app.schemas.tokens import Identity
from app.utils.errors import InvalidToken, ValidationError

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=SecurityConfig.PASSWORD['bcrypt_rounds'],
)


def hash_password(password: str) -> str:
    if not password:
        raise ValidationError("Password is required")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(identity: Identity, expires_delta: timedelta = None) -> str:
    """Sign {id, role} with a fixed expiry (7 days unless overridden)"""
    if expires_delta is None:
        expires_delta = timedelta(days=SecurityConfig.AUTH['token_expire_days'])
    payload = {
        "id": identity.id,
        "role": identity.role.value,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, SecurityConfig.AUTH['secret_key'], algorithm=SecurityConfig.AUTH['algorithm'])


def decode_access_token(token: str) -> Identity:
    """Verify a session token and return its claims.

    Raises InvalidToken when the token is missing, malformed, expired, signed
    with another key, or carries claims we don't recognise.
    """
    if not token:
        raise InvalidToken("No token found")
    try:
        payload = jwt.decode(token, SecurityConfig.AUTH['secret_key'], algorithms=[SecurityConfig.AUTH['algorithm']])
    except JWTError:
        raise InvalidToken()

    user_id = payload.get("id")
    role = payload.get("role")
    if not isinstance(user_id, int) or role not in {r.value for r in UserRole}:
        raise InvalidToken()
    return Identity(id=user_id, role=UserRole(role))
