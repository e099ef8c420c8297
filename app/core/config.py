from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    database_url: str
    backend_cors_origins: str = "http://localhost:5173"
    sql_echo: bool = False
    log_level: str = "INFO"
    chat_reply_delay: float = 0.0  # segundos
    api_base_url: str = "http://localhost:8000"
    gateway_timeout: float = 10.0
    chat_session_ttl: float = 3600.0  # segundos sin uso; 0 = sin caducidad

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.backend_cors_origins.split(",") if origin.strip()]
