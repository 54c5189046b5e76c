"""Tool for summarising the remote state of a branch."""
from typing import Dict, Any
from src.adapters import github
from src.commits import identity
from src.commits.errors import BranchNotFoundError, RemoteError
from src.models.git_objects import utc_timestamp
from src.server.schemas import GitStatusArgs, validate_arguments

TOOL = {
    "name": "git_status",
    "title": "Git Status",
    "description": (
        "Show a branch's latest commit, the files it changed and how far the branch "
        "is ahead of or behind the repository's default branch"
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "owner": {"type": "string", "description": "Repository owner"},
            "repo": {"type": "string", "description": "Repository name"},
            "branch": {"type": "string", "description": "Branch (defaults to the default branch)"}
        },
        "required": ["repo"]
    }
}


async def run(params: Dict[str, Any]) -> Dict[str, Any]:
    """Execute the tool.

    처리 순서:
    1. owner/branch 결정
    2. 저장소 메타데이터 조회 (default_branch)
    3. 브랜치 최신 커밋 조회
    4. default_branch...branch 비교 (ahead_by / behind_by)
    """
    args = validate_arguments(GitStatusArgs, TOOL["name"], params)
    repository, branch = await identity.resolve_target(args.repo, args.owner, args.branch)

    try:
        repo_data = await github.get_repo(repository.owner, repository.name)
        default_branch = repo_data.get("default_branch") or branch
        try:
            commit_data = await github.get_commit(repository.owner, repository.name, branch)
        except RemoteError as exc:
            if exc.status_code in (404, 422):
                raise BranchNotFoundError(branch) from exc
            raise
        comparison = await github.compare_commits(
            repository.owner, repository.name, base=default_branch, head=branch
        )
    except (BranchNotFoundError, RemoteError) as exc:
        exc.with_context(repository=repository.full_name, branch=branch)
        raise

    commit = commit_data.get("commit") or {}
    author = commit.get("author") or {}

    return {
        "status": "success",
        "repository": repository.full_name,
        "current_branch": branch,
        "default_branch": default_branch,
        "ahead_by": comparison.get("ahead_by"),
        "behind_by": comparison.get("behind_by"),
        "last_commit": {
            "sha": commit_data.get("sha"),
            "message": commit.get("message"),
            "author": author.get("name"),
            "date": author.get("date"),
        },
        "files_changed": [
            {
                "filename": f.get("filename"),
                "status": f.get("status"),
                "changes": f.get("changes"),
                "additions": f.get("additions"),
                "deletions": f.get("deletions"),
            }
            for f in commit_data.get("files") or []
        ],
        "timestamp": utc_timestamp(),
    }
