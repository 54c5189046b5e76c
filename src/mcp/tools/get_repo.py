"""Tool for fetching repository metadata."""
from typing import Dict, Any
from src.adapters import github
from src.commits import identity
from src.server.schemas import GetRepoArgs, validate_arguments

TOOL = {
    "name": "get_repo",
    "title": "Get Repository",
    "description": "Get details for a GitHub repository",
    "input_schema": {
        "type": "object",
        "properties": {
            "owner": {"type": "string", "description": "Repository owner"},
            "repo": {"type": "string", "description": "Repository name"}
        },
        "required": ["repo"]
    }
}


async def run(params: Dict[str, Any]) -> Dict[str, Any]:
    args = validate_arguments(GetRepoArgs, TOOL["name"], params)
    owner = await identity.resolve_owner(args.owner)

    data = await github.get_repo(owner, args.repo)
    license_info = data.get("license") or {}

    return {
        "name": data.get("name"),
        "full_name": data.get("full_name"),
        "description": data.get("description"),
        "html_url": data.get("html_url"),
        "default_branch": data.get("default_branch"),
        "private": data.get("private"),
        "fork": data.get("fork"),
        "stargazers_count": data.get("stargazers_count"),
        "watchers_count": data.get("watchers_count"),
        "forks_count": data.get("forks_count"),
        "open_issues_count": data.get("open_issues_count"),
        "language": data.get("language"),
        "updated_at": data.get("updated_at"),
        "license": license_info.get("name"),
        "topics": data.get("topics", []),
    }
