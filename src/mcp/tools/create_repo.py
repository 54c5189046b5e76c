"""Tool for creating a repository owned by the authenticated user."""
from typing import Dict, Any
from src.adapters import github
from src.server.schemas import CreateRepoArgs, validate_arguments

TOOL = {
    "name": "create_repo",
    "title": "Create Repository",
    "description": "Create a new GitHub repository for the authenticated user",
    "input_schema": {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Repository name"},
            "description": {"type": "string", "description": "Repository description"},
            "homepage": {"type": "string", "description": "Project homepage URL"},
            "private": {"type": "boolean", "description": "Create a private repository", "default": False},
            "auto_init": {
                "type": "boolean",
                "description": "Create an initial commit with an empty README",
                "default": False
            }
        },
        "required": ["name"]
    }
}


async def run(params: Dict[str, Any]) -> Dict[str, Any]:
    args = validate_arguments(CreateRepoArgs, TOOL["name"], params)
    payload = {key: value for key, value in args.model_dump().items() if value is not None}

    data = await github.create_repo(payload)

    return {
        "name": data.get("name"),
        "full_name": data.get("full_name"),
        "html_url": data.get("html_url"),
        "private": data.get("private"),
        "default_branch": data.get("default_branch"),
    }
