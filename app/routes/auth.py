import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import create_session_token
from ..config import LOGIN_RATE_LIMIT, LOGIN_RATE_WINDOW_SECONDS
from ..database import get_db
from ..models import User
from ..rate_limiter import create_rate_limiter
from ..schemas import LoginRequest, LoginResponse, user_to_response
from ..security_utils import verify_password_bcrypt
from ..shared.responses import format_api_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

rate_limit_login = create_rate_limiter(
    limit=LOGIN_RATE_LIMIT, window_seconds=LOGIN_RATE_WINDOW_SECONDS, key_prefix="login"
)


@router.post("/login")
async def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_login),
):
    """Exchange email + password for a session token"""
    user = db.query(User).filter(User.email == data.email).first()

    # Same message for unknown email and wrong password
    if not user or not verify_password_bcrypt(data.password, user.password):
        logger.warning(f"🔒 Failed login attempt for {data.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        logger.warning(f"🔒 Login attempt on disabled account {data.email}")
        raise HTTPException(status_code=401, detail="Account is disabled")

    token, expires_at = create_session_token(user)
    logger.info(f"✅ User logged in: {user.email} ({user.role})")

    return format_api_response(
        LoginResponse(token=token, expiresAt=expires_at, user=user_to_response(user))
    )
