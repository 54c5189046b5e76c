"""Application settings loaded from environment variables."""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application configuration settings."""

    # Server Configuration (개발용 HTTP 브리지)
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # GitHub API (필수: GITHUB_TOKEN)
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_HTML_URL: str = "https://github.com"
    GITHUB_API_VERSION: str = "2022-11-28"
    GITHUB_TIMEOUT: float = 30.0

    # Commit pipeline
    BLOB_UPLOAD_CONCURRENCY: int = 8
    DEFAULT_BRANCH_FALLBACK: str = "main"

    # Local git config lookups (owner 추론용)
    GIT_CONFIG_CWD: Optional[str] = None
    GIT_COMMAND_TIMEOUT: float = 5.0

    # Feature Flags
    ENABLE_DIRECT_TOOLS: bool = False  # 개발 환경에서만 직접 툴 실행 엔드포인트 활성화

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()


def require_github_token() -> str:
    """Return the configured GitHub token or fail at startup.

    토큰이 없으면 요청 단위 에러가 아니라 프로세스 시작 실패로 취급합니다.
    """
    if not settings.GITHUB_TOKEN:
        raise RuntimeError("GITHUB_TOKEN environment variable is required")
    return settings.GITHUB_TOKEN
