"""Tool for listing the authenticated user's repositories."""
from typing import Dict, Any, List
from src.adapters import github
from src.server.schemas import ListUserReposArgs, validate_arguments

TOOL = {
    "name": "list_user_repos",
    "title": "List User Repositories",
    "description": "List repositories the authenticated GitHub user can access",
    "input_schema": {
        "type": "object",
        "properties": {
            "visibility": {"type": "string", "enum": ["all", "public", "private"]},
            "affiliation": {
                "type": "string",
                "description": "Comma-separated: owner, collaborator, organization_member"
            },
            "type": {"type": "string", "enum": ["all", "owner", "public", "private", "member"]},
            "sort": {"type": "string", "enum": ["created", "updated", "pushed", "full_name"]},
            "direction": {"type": "string", "enum": ["asc", "desc"]},
            "per_page": {"type": "integer", "description": "Results per page (max 100)"},
            "page": {"type": "integer", "description": "Page number"}
        }
    }
}


async def run(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    args = validate_arguments(ListUserReposArgs, TOOL["name"], params)
    repos = await github.list_user_repos(**args.model_dump())

    return [
        {
            "name": repo.get("name"),
            "full_name": repo.get("full_name"),
            "description": repo.get("description"),
            "html_url": repo.get("html_url"),
            "private": repo.get("private"),
            "fork": repo.get("fork"),
            "stargazers_count": repo.get("stargazers_count"),
            "watchers_count": repo.get("watchers_count"),
            "language": repo.get("language"),
            "updated_at": repo.get("updated_at"),
        }
        for repo in repos
    ]
