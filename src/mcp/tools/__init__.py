"""MCP tools package."""

# Export all tools for easy importing
from . import create_commit
from . import create_repo
from . import get_repo
from . import git_status
from . import list_user_repos
from . import pull
from . import push

# 툴 레지스트리: MCP 서버와 HTTP 브리지(commands 라우터)가 공유
# tool_name → 모듈 (TOOL 메타데이터 + async run(params))
TOOLS_REGISTRY = {
    module.TOOL["name"]: module
    for module in (
        list_user_repos,
        get_repo,
        create_repo,
        create_commit,
        push,
        pull,
        git_status,
    )
}

__all__ = [
    "TOOLS_REGISTRY",
    "create_commit",
    "create_repo",
    "get_repo",
    "git_status",
    "list_user_repos",
    "pull",
    "push",
]
