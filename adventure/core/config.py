from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # === PUBLIC DATA (not secrets) ===
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "AdVenture Backend"

    # === DATABASE SETTINGS (from .env) ===
    MONGODB_URL: str = Field(..., description="MongoDB connection string")

    # === APPLICATION SETTINGS ===
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24)

    # === UPLOAD SETTINGS ===
    UPLOAD_DIR: str = Field(default="uploads", description="Root directory for uploaded videos and assets")
    MAX_UPLOAD_SIZE: int = Field(default=50 * 1024 * 1024, description="Maximum upload size in bytes")

    # === LLM SETTINGS (from .env) ===
    LLM_PROVIDER: str = Field(default="openai", description="LLM provider: openai, anthropic, local, mock")
    LLM_API_KEY: Optional[str] = Field(default=None, description="API key for LLM service")
    LLM_MODEL: str = Field(default="gpt-4o-mini", description="LLM model used for matching and chat")
    LLM_BASE_URL: Optional[str] = Field(default=None, description="Base URL for LLM API (for local models)")
    LLM_MAX_TOKENS: int = Field(default=1000, description="Maximum tokens for LLM response")
    LLM_TEMPERATURE: float = Field(default=0.2, description="Temperature for LLM generation (0.0-1.0)")
    LLM_TIMEOUT_SECONDS: float = Field(default=30.0, description="Upper bound for a single LLM call")

    # === SECRETS (from .env) ===
    SECRET_KEY: str = Field(..., description="Secret key for JWT tokens")

    # === WEB APP SETTINGS ===
    CORS_ORIGINS: str = Field(default="*", description="Allowed CORS origins (comma-separated)")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get allowed CORS origins as a list"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def llm_configured(self) -> bool:
        """Whether the configured provider has what it needs to be called"""
        if self.LLM_PROVIDER in ("openai", "anthropic"):
            return bool(self.LLM_API_KEY)
        if self.LLM_PROVIDER == "local":
            return bool(self.LLM_BASE_URL)
        return self.LLM_PROVIDER == "mock"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
