"""
Bearer token authentication and role checks shared by all routers.

Tokens are HS256 JWTs whose payload carries the user's id, username and role
(Developer, Admin or Accountant).
"""
import os
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from dotenv import load_dotenv

load_dotenv()

SECRET_KEY = os.getenv("JWT_SECRET", "dev-secret-change-me")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

ROLE_DEVELOPER = "Developer"
ROLE_ADMIN = "Admin"
ROLE_ACCOUNTANT = "Accountant"
ROLES = (ROLE_DEVELOPER, ROLE_ADMIN, ROLE_ACCOUNTANT)


def create_access_token(user_id: int, username: str, role: str, secret: Optional[str] = None) -> str:
     if role not in ROLES:
          raise ValueError(f"Unknown role '{role}'")
     payload = {"id": user_id, "username": username, "role": role}
     return jwt.encode(payload, secret or SECRET_KEY, algorithm=ALGORITHM)


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
     except JWTError:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
     if payload.get("role") not in ROLES:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unknown role")
     return payload


def require_role(*roles: str):
     """Dependency factory: the token's role must be one of roles."""

     def _check(token: dict = Depends(verify_token)) -> dict:
          if token.get("role") not in roles:
               raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Only {' and '.join(roles)} users can perform this action"
               )
          return token

     return _check
