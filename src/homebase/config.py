from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    API_BASE_URL: str = "http://localhost:5000"
    WS_URL: str = "ws://localhost:5000/ws"
    API_TOKEN: str = ""
    HTTP_TIMEOUT_SECONDS: float = 15.0

    TYPING_IDLE_SECONDS: float = 2.0
    TYPING_CLEAR_SECONDS: float = 3.0

    WS_HEARTBEAT_SECONDS: int = 30
    WS_RECONNECT_BASE_SECONDS: float = 1.0
    WS_RECONNECT_MAX_SECONDS: float = 30.0

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    @property
    def auth_headers(self) -> dict[str, str]:
        if not self.API_TOKEN:
            return {}
        return {"Authorization": f"Bearer {self.API_TOKEN}"}

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
