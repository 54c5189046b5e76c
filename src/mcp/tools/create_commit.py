"""Tool for committing file changes directly to a GitHub branch."""
from typing import Dict, Any
from src.commits import pipeline
from src.server.schemas import CreateCommitArgs, validate_arguments

TOOL = {
    "name": "create_commit",
    "title": "Create Commit",
    "description": (
        "Create a commit on a GitHub branch from a list of file paths and contents. "
        "The branch is fast-forwarded; no local repository is needed."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "owner": {
                "type": "string",
                "description": "Repository owner (defaults to git remote owner or authenticated user)"
            },
            "repo": {
                "type": "string",
                "description": "Repository name"
            },
            "branch": {
                "type": "string",
                "description": "Target branch (defaults to the repository's default branch)"
            },
            "message": {
                "type": "string",
                "description": "Commit message"
            },
            "files": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "path": {"type": "string", "description": "Repository-relative file path"},
                        "content": {"type": "string", "description": "UTF-8 file content"}
                    },
                    "required": ["path", "content"]
                },
                "description": "Files to add or replace"
            }
        },
        "required": ["repo", "message", "files"]
    }
}


async def run(params: Dict[str, Any]) -> Dict[str, Any]:
    """Execute the tool.

    Args:
        params: Tool parameters (repo, message, files, owner, branch)

    Returns:
        status, commit_sha, html_url, repository, branch, message,
        files_changed, file_paths, timestamp

    Raises:
        InvalidArguments: 인자 검증 실패 (네트워크 호출 전)
        GitToolError: 파이프라인 단계별 에러
    """
    args = validate_arguments(CreateCommitArgs, TOOL["name"], params)

    result = await pipeline.create_commit(
        repo=args.repo,
        message=args.message,
        files=args.files,
        owner=args.owner,
        branch=args.branch,
    )

    return result.to_payload()
