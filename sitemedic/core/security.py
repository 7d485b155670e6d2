from datetime import datetime, timezone, timedelta
from typing import Optional
from jose import jwt, JWTError
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from sitemedic.core.config import settings
from sitemedic.core.enums import UserRole

JWT_ALGORITHM = "HS256"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


class Principal(BaseModel):
    user_id: str
    role: UserRole
    company_id: Optional[str] = None


def create_access_token(
    subject: str,
    role: str,
    company_id: Optional[str] = None,
    expires_minutes: int | None = None,
) -> str:
    expires = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire_dt = datetime.now(timezone.utc) + timedelta(minutes=expires)
    to_encode = {"sub": str(subject), "role": str(role), "exp": expire_dt}
    if company_id:
        to_encode["company_id"] = company_id
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=JWT_ALGORITHM)

async def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[JWT_ALGORITHM])
        user_id = payload.get("sub")
        if user_id is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        return Principal(user_id=user_id, role=payload.get("role"), company_id=payload.get("company_id"))
    except (JWTError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

def require_company_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role != UserRole.COMPANY_ADMIN or not principal.company_id:
        raise HTTPException(status_code=403, detail="Only marketplace company admins can manage pass-on handoffs")
    return principal
