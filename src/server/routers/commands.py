"""Command execution endpoints (개발 전용).

⚠️  이 모듈은 개발/디버깅 용도로만 사용됩니다.
프로덕션에서는 ENABLE_DIRECT_TOOLS=false로 설정하여 비활성화하세요.

MCP 클라이언트 없이 HTTP로 툴을 직접 지정하여 실행합니다.

엔드포인트:
- GET /internal/v1/commands: 사용 가능한 툴 목록 및 스키마 조회
- POST /internal/v1/commands/execute: 지정된 툴 실행
"""
from fastapi import APIRouter, HTTPException, Header, status
from typing import Optional
from src.commits.errors import (
    BranchNotFoundError,
    EmptyChangesetError,
    GitToolError,
    InvalidArguments,
    OwnerResolutionError,
    ReferenceConflictError,
)
from src.mcp.tools import TOOLS_REGISTRY
from src.server.schemas import (
    CommandExecuteRequest,
    CommandExecuteResult,
    CommandsListResponse,
    ErrorDetail,
    ToolSchema,
)
import logging
import uuid

router = APIRouter(prefix="/internal/v1/commands", tags=["commands (dev only)"])
logger = logging.getLogger(__name__)


def _status_for(error: GitToolError) -> int:
    """도구 에러 종류를 HTTP 상태 코드로 매핑합니다."""
    if isinstance(error, (InvalidArguments, EmptyChangesetError)):
        return 422
    if isinstance(error, BranchNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ReferenceConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, OwnerResolutionError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_502_BAD_GATEWAY


@router.get("", response_model=CommandsListResponse)
async def list_commands() -> CommandsListResponse:
    """사용 가능한 모든 툴의 메타데이터를 조회합니다.

    Returns:
        사용 가능한 모든 툴의 스키마 목록 (name, title, description, input_schema)
    """
    tools = []

    for tool_module in TOOLS_REGISTRY.values():
        tool_def = tool_module.TOOL
        tools.append(ToolSchema(
            name=tool_def["name"],
            title=tool_def.get("title", tool_def["name"]),
            description=tool_def.get("description", ""),
            input_schema=tool_def.get("input_schema", {})
        ))

    return CommandsListResponse(tools=tools)


@router.post("/execute", response_model=CommandExecuteResult)
async def execute_command(
    request: CommandExecuteRequest,
    x_request_id: Optional[str] = Header(None),
) -> CommandExecuteResult:
    """지정된 툴을 실행합니다.

    처리 과정:
    1. Request ID 생성 또는 사용 (요청 추적용)
    2. 툴 존재 여부 확인
    3. 툴 실행 (await tool.run(params))
    4. 결과 반환 또는 구조화된 에러 반환

    Raises:
        HTTPException:
            - 400: 툴이 존재하지 않음 / owner 결정 실패
            - 404: 브랜치 없음
            - 409: 브랜치 참조 충돌 (non-fast-forward)
            - 422: 인자 검증 실패 / 빈 변경 목록
            - 502: 그 외 GitHub 관련 실패
            - 500: 예상하지 못한 에러

    Example:
        >>> POST /internal/v1/commands/execute
        >>> Body: {
        >>>     "name": "create_commit",
        >>>     "params": {
        >>>         "repo": "hello-world",
        >>>         "message": "init",
        >>>         "files": [{"path": "a.txt", "content": "hello"}]
        >>>     }
        >>> }
        >>> Response: {
        >>>     "ok": true,
        >>>     "tool": "create_commit",
        >>>     "result": {"status": "success", "commit_sha": "...", ...}
        >>> }
    """
    request_id = x_request_id or str(uuid.uuid4())
    logger.info(f"Executing command '{request.name}' with request id: {request_id}")

    if request.name not in TOOLS_REGISTRY:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tool '{request.name}' not found"
        )

    tool_module = TOOLS_REGISTRY[request.name]

    try:
        result = await tool_module.run(dict(request.params or {}))
    except GitToolError as e:
        logger.error(f"Command '{request.name}' failed with {e.kind}: {e.message}")
        error = ErrorDetail(
            kind=e.kind,
            message=e.message,
            request_id=request_id,
            context=e.context,
        )
        raise HTTPException(
            status_code=_status_for(e),
            detail={"error": error.model_dump()}
        ) from e
    except Exception as e:
        logger.exception(f"Error executing command '{request.name}'")
        error = ErrorDetail(kind=type(e).__name__, message=str(e), request_id=request_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": error.model_dump()}
        ) from e

    return CommandExecuteResult(ok=True, tool=request.name, result=result)
