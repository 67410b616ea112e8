# 환경변수 로딩 (.env)
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings

PLACEHOLDER_IMAGE = (
    "https://res.cloudinary.com/duxeqhtxe/image/upload/v1756270305/"
    "1cee65777195641ae9c270cd3970346b_ehwhce.jpg"
)

class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"  # 필요 시 prod/staging로 분리
    MONGO_DB: str = "recipes"

    # AI 생성 (키 없으면 생성 API는 500 "not configured")
    OPENAI_API_KEY: str | None = None
    OPENAI_TEXT_MODEL: str = "gpt-4o-mini"
    OPENAI_IMAGE_MODEL: str = "gpt-image-1"
    AI_TIMEOUT_SECONDS: float = 60.0

    DEFAULT_RECIPE_IMAGE: str = PLACEHOLDER_IMAGE
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

@lru_cache
def get_settings() -> Settings:
    # 라우터/서비스 주입용. 테스트에서는 dependency_overrides로 교체
    return Settings()
