
from fastapi import APIRouter, Depends, Request, status

from ..schemas.auth import UserCreate, UserLogin, UserResponse
from ..dependencies import get_auth_service
from ..services.auth_service import AuthService
from ..limiter import limiter

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def register(
    user_data: UserCreate,
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """Register a user for an npub"""
    return await service.register_user(user_data)

@router.post("/login", response_model=UserResponse)
@limiter.limit("10/minute")
async def login(
    login_data: UserLogin,
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """Look up the user that owns an npub"""
    return await service.login(login_data.npub)
