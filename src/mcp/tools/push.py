"""Tool reporting push status.

GitHub API에서는 create_commit이 브랜치 참조를 이동시키는 순간 push가 끝나므로
이 툴은 owner/branch만 결정하고 아무것도 변경하지 않습니다.
"""
from typing import Dict, Any
from src.commits import identity
from src.models.git_objects import utc_timestamp
from src.server.schemas import PushArgs, validate_arguments

TOOL = {
    "name": "push",
    "title": "Push",
    "description": "Confirm that committed changes are on the remote (commits are pushed when created)",
    "input_schema": {
        "type": "object",
        "properties": {
            "owner": {"type": "string", "description": "Repository owner"},
            "repo": {"type": "string", "description": "Repository name"},
            "branch": {"type": "string", "description": "Branch name"}
        },
        "required": ["repo"]
    }
}


async def run(params: Dict[str, Any]) -> Dict[str, Any]:
    args = validate_arguments(PushArgs, TOOL["name"], params)
    repository, branch = await identity.resolve_target(args.repo, args.owner, args.branch)

    return {
        "message": "Push successful (changes are automatically pushed when commits are created)",
        "repository": repository.full_name,
        "branch": branch,
        "timestamp": utc_timestamp(),
    }
