from fastapi import Depends, Request

from .repositories.base import Repository
from .services.ad_service import AdService
from .services.auth_service import AuthService

# The repository is built once in the app lifespan and kept on app.state,
# so tests can swap in their own instance per app.
async def get_repository(request: Request) -> Repository:
    return request.app.state.repository

async def get_auth_service(repo: Repository = Depends(get_repository)) -> AuthService:
    return AuthService(repo)

async def get_ad_service(repo: Repository = Depends(get_repository)) -> AdService:
    return AdService(repo)
