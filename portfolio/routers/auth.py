from fastapi import APIRouter, HTTPException

from ..schemas import LoginRequest, Token
from ..services.auth_service import authenticate_admin

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
def login(credentials: LoginRequest):
    token = authenticate_admin(credentials.email, credentials.password)
    if not token:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return {"access_token": token, "token_type": "bearer"}
