from ..errors import DashboardClientError
from ..logging_config import configure_logging
from ..models import AuthResponse, LoginCredentials, RegisterData, User
from .base import ResourceApi

logger = configure_logging("video-dashboard:auth_api")


class AuthApi(ResourceApi):
    async def login(self, credentials: LoginCredentials) -> AuthResponse:
        data = await self.client.post("/auth/login", body=credentials.model_dump())
        return self._parse(AuthResponse, data)

    async def register(self, user_data: RegisterData) -> User:
        data = await self.client.post("/auth/register", body=user_data.model_dump())
        return self._parse(User, data)

    async def get_current_user(self) -> User:
        data = await self.client.get("/auth/me")
        return self._parse(User, data)

    async def verify_token(self) -> bool:
        """True when the backend accepts the current bearer token"""
        try:
            await self.client.get("/auth/verify-token")
        except DashboardClientError as e:
            logger.debug("Token verification failed", error=str(e))
            return False
        return True
