import secrets
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class ModeEnum(str, Enum):
    development = "development"
    production = "production"
    testing = "testing"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file="../.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── App ───────────────────────────────────────────────────
    MODE: ModeEnum = ModeEnum.production
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "PITCHCRAFT"

    # Signs the session cookie that carries the conversation session id
    SECRET_KEY: str = secrets.token_urlsafe(32)

    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # ── OpenAI ────────────────────────────────────────────────
    OPENAI_API_KEY: str = ""
    ASSISTANT_MODEL: str = "openai:gpt-4o"
    EXTRACTION_MODEL: str = "openai:gpt-4o"
    LLM_TIMEOUT_SECONDS: float = 45.0

    # ── Vectorize (knowledge retrieval) ───────────────────────
    VECTORIZE_API_URL: str = "https://api.vectorize.io/v1"
    VECTORIZE_ORG_ID: str = ""
    VECTORIZE_PIPELINE_ID: str = ""
    VECTORIZE_ACCESS_TOKEN: str = ""
    RETRIEVAL_NUM_RESULTS: int = 5
    RETRIEVAL_TIMEOUT_SECONDS: float = 10.0

    # ── Conversation sessions ────────────────────────────────
    SESSION_MAX_COUNT: int = 1000
    SESSION_IDLE_SECONDS: float = 3600.0

    @property
    def vectorize_configured(self) -> bool:
        return bool(
            self.VECTORIZE_ORG_ID
            and self.VECTORIZE_PIPELINE_ID
            and self.VECTORIZE_ACCESS_TOKEN
        )


settings = Settings()
