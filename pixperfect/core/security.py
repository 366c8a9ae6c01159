"""JWT helpers and the authenticated-owner dependency."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from pixperfect.core.config import get_settings
from pixperfect.interfaces.http.deps.database import get_db_session
from pixperfect.modules.accounts import Account as AccountDomain
from pixperfect.modules.accounts.service import AccountService
from pixperfect.schemas import TokenData

logger = logging.getLogger(__name__)

# Missing credentials are reported as 401 by get_current_account itself.
security = HTTPBearer(auto_error=False)


def create_access_token(account_id: str, username: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": account_id,
        "username": username,
        "exp": datetime.now(timezone.utc) + expire_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenData:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        logger.info("Authentication failed: invalid token (%s)", exc)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token") from exc

    account_id = payload.get("sub")
    username = payload.get("username")
    if not account_id or not username:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
    return TokenData(account_id=account_id, username=username)


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db_session),
) -> AccountDomain:
    if credentials is None or not credentials.credentials:
        logger.info("Authentication failed: no token provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token_data = decode_access_token(credentials.credentials)
    account = await AccountService.with_session(db).get_by_id(token_data.account_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
    return account
