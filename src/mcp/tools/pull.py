"""Tool for fetching the latest commit of a branch."""
from typing import Dict, Any
from src.adapters import github
from src.commits import identity
from src.commits.errors import BranchNotFoundError, RemoteError
from src.models.git_objects import utc_timestamp
from src.server.schemas import PullArgs, validate_arguments

TOOL = {
    "name": "pull",
    "title": "Pull",
    "description": "Fetch the latest commit on a branch, including the files it changed",
    "input_schema": {
        "type": "object",
        "properties": {
            "owner": {"type": "string", "description": "Repository owner"},
            "repo": {"type": "string", "description": "Repository name"},
            "branch": {"type": "string", "description": "Branch to read"}
        },
        "required": ["repo", "branch"]
    }
}


async def run(params: Dict[str, Any]) -> Dict[str, Any]:
    """Execute the tool.

    Returns:
        status, commit_sha, html_url, message, author, date,
        files_changed (파일명 목록), repository, branch, timestamp
    """
    args = validate_arguments(PullArgs, TOOL["name"], params)
    repository, branch = await identity.resolve_target(args.repo, args.owner, args.branch)

    try:
        commit_data = await github.get_commit(repository.owner, repository.name, branch)
    except RemoteError as exc:
        if exc.status_code in (404, 422):
            raise BranchNotFoundError(branch, repository=repository.full_name) from exc
        exc.with_context(repository=repository.full_name, branch=branch)
        raise

    commit = commit_data.get("commit") or {}
    author = commit.get("author") or {}

    return {
        "status": "success",
        "commit_sha": commit_data.get("sha"),
        "html_url": commit_data.get("html_url"),
        "message": commit.get("message"),
        "author": author.get("name"),
        "date": author.get("date"),
        "files_changed": [f.get("filename") for f in commit_data.get("files") or []],
        "repository": repository.full_name,
        "branch": branch,
        "timestamp": utc_timestamp(),
    }
