
import logging
from fastapi import HTTPException, status

from ..repositories.base import Repository
from ..schemas.auth import User, UserCreate
from ..core.security import get_password_hash
from ..exceptions import DuplicateUserError

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, repo: Repository):
        self.repo = repo

    async def register_user(self, user_data: UserCreate) -> User:
        if await self.repo.get_user_by_npub(user_data.npub):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this npub already exists")
        if await self.repo.get_user_by_username(user_data.username):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already registered")

        hashed_password = get_password_hash(user_data.password)
        try:
            user = await self.repo.create_user(user_data.username, hashed_password, user_data.npub)
        except DuplicateUserError:
            # A concurrent registration got past the checks above first
            logger.warning("Duplicate registration rejected by storage")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def login(self, npub: str) -> User:
        # Ownership of the key was proven client side; this only looks the user up
        user = await self.repo.get_user_by_npub(npub)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user
