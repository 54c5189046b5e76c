"""Pydantic schemas for tool arguments and the command API.

이 파일은 두 종류의 모델을 정의합니다.
1. 툴 인자 모델: 네트워크 호출 전에 입력의 형태/타입을 검증 (실패 시 InvalidArguments)
2. Command API 요청/응답 모델: FastAPI 개발용 엔드포인트에서 사용
"""
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError

from src.commits.errors import InvalidArguments
from src.models.git_objects import FileChange

ArgsT = TypeVar("ArgsT", bound=BaseModel)


def validate_arguments(model: Type[ArgsT], tool_name: str, params: Any) -> ArgsT:
    """Validate raw tool arguments against ``model``.

    Raises:
        InvalidArguments: 인자가 객체가 아니거나 스키마와 맞지 않는 경우
    """
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise InvalidArguments(f"Invalid arguments for {tool_name}: expected an object")
    try:
        return model.model_validate(params)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidArguments(
            f"Invalid arguments for {tool_name}: {problems}",
            tool=tool_name,
        ) from exc


# ============================================================================
# Tool argument 스키마
# ============================================================================

class RepoTargetArgs(BaseModel):
    """저장소를 대상으로 하는 툴의 공통 인자.

    Attributes:
        repo: 저장소 이름 (필수)
        owner: 저장소 소유자 (없으면 git config → 인증 사용자 순으로 결정)
    """
    repo: str = Field(..., min_length=1, description="Repository name")
    owner: Optional[str] = Field(None, description="Repository owner")


class CreateCommitArgs(RepoTargetArgs):
    """create_commit 인자.

    files가 빈 배열이면 검증은 통과하고, 파이프라인에서 EmptyChangesetError가 발생합니다.
    """
    message: str = Field(..., min_length=1, description="Commit message")
    files: List[FileChange] = Field(..., description="Files to add or replace")
    branch: Optional[str] = Field(None, description="Target branch")


class PushArgs(RepoTargetArgs):
    branch: Optional[str] = None


class PullArgs(RepoTargetArgs):
    branch: str = Field(..., min_length=1, description="Branch to read")


class GitStatusArgs(RepoTargetArgs):
    branch: Optional[str] = None


class GetRepoArgs(RepoTargetArgs):
    pass


class ListUserReposArgs(BaseModel):
    visibility: Optional[Literal["all", "public", "private"]] = None
    affiliation: Optional[str] = None
    type: Optional[Literal["all", "owner", "public", "private", "member"]] = None
    sort: Optional[Literal["created", "updated", "pushed", "full_name"]] = None
    direction: Optional[Literal["asc", "desc"]] = None
    per_page: Optional[int] = Field(None, ge=1, le=100)
    page: Optional[int] = Field(None, ge=1)


class CreateRepoArgs(BaseModel):
    name: str = Field(..., min_length=1, description="Repository name")
    description: Optional[str] = None
    homepage: Optional[str] = None
    private: bool = False
    auto_init: bool = False


# ============================================================================
# Error 관련 스키마
# ============================================================================

class ErrorDetail(BaseModel):
    """에러 상세 정보 모델.

    Attributes:
        kind: 기계가 읽을 수 있는 에러 종류 (예: "BranchNotFoundError")
        message: 사람이 읽을 수 있는 에러 메시지
        request_id: 요청 추적용 ID
        context: repository, branch, paths, state 등 알려진 컨텍스트
    """
    kind: str
    message: str
    request_id: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: ErrorDetail


# ============================================================================
# Command 관련 스키마
# ============================================================================

class CommandExecuteRequest(BaseModel):
    """명령(툴) 실행 요청 모델.

    Attributes:
        name: 실행할 툴의 이름 (예: "create_commit", "git_status")
        params: 툴별 파라미터 딕셔너리
    """
    name: str = Field(..., description="Tool name to execute")
    params: Dict[str, Any] = Field(default_factory=dict, description="Tool parameters")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "create_commit",
                "params": {
                    "repo": "hello-world",
                    "message": "init",
                    "files": [{"path": "a.txt", "content": "hello"}]
                }
            }
        }


class CommandExecuteResult(BaseModel):
    """명령 실행 결과 응답 모델.

    Attributes:
        ok: 실행 성공 여부
        tool: 실행된 툴의 이름
        result: 툴 실행 결과 (툴마다 다른 형식, list_user_repos는 배열)
    """
    ok: bool
    tool: str
    result: Any


class ToolSchema(BaseModel):
    """툴 스키마 정의 모델.

    Attributes:
        name: 툴 식별자 (고유값)
        title: 사람이 읽을 수 있는 제목
        description: 툴의 기능 설명
        input_schema: JSON Schema 형식의 입력 파라미터 스키마
    """
    name: str
    title: str
    description: str
    input_schema: Dict[str, Any]


class CommandsListResponse(BaseModel):
    tools: List[ToolSchema]
