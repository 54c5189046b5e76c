"""FastAPI application entry point.

개발/운영 점검용 HTTP 브리지입니다. 에이전트용 주 인터페이스는 MCP stdio 서버
(src/mcp/server.py)이며, 이 앱은 헬스 체크와 (개발 환경에서만) 툴 직접 실행
엔드포인트를 제공합니다.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from src.server.routers import health
from src.server.settings import settings, require_github_token

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작/종료 시 실행되는 코드"""
    # GITHUB_TOKEN이 없으면 시작 자체를 실패시킴
    require_github_token()
    logger.info("Starting application...")

    yield

    logger.info("Shutting down application...")


# Create FastAPI app
app = FastAPI(
    title="GitHub Tools Bridge",
    description="HTTP bridge to the GitHub repository and commit tools",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Include routers
app.include_router(health.router)

# 조건부: 개발 환경에서만 직접 툴 실행 엔드포인트 활성화
if settings.ENABLE_DIRECT_TOOLS:
    from src.server.routers import commands
    app.include_router(commands.router)
    logger.warning("⚠️  Direct tool execution endpoints enabled (development mode)")


@app.get("/")
async def root():
    """Root endpoint.

    Returns:
        Welcome message with API info
    """
    return {
        "message": "GitHub Tools Bridge API",
        "version": "0.1.0",
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.server.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=True
    )
