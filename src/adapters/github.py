"""GitHub REST adapter for repository and git data operations.

GitHub REST API와 통신하는 유일한 모듈입니다.
- 저장소 조회/생성 (repos)
- Git Data API (refs, commits, blobs, trees)
- 커밋 조회 및 브랜치 비교

HTTP/전송 실패는 모두 ``RemoteError``로 변환되며, 상태 코드별 의미 부여
(예: 404 → 브랜치 없음)는 호출하는 쪽에서 담당합니다.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from src.commits.errors import RemoteError
from src.server.settings import settings

logger = logging.getLogger(__name__)


def _build_url(path: str) -> str:
    base = settings.GITHUB_API_URL.rstrip("/")
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base}{path}"


def _build_headers() -> Dict[str, str]:
    headers: Dict[str, str] = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": settings.GITHUB_API_VERSION,
    }
    if settings.GITHUB_TOKEN:
        headers["Authorization"] = f"Bearer {settings.GITHUB_TOKEN}"
    return headers


def _build_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.GITHUB_TIMEOUT)


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def _ref_path(branch: str) -> str:
    # 브랜치 이름의 "/"는 GitHub ref 경로에서 그대로 사용됩니다
    return quote(f"heads/{branch}", safe="/")


async def _request(
    method: str,
    path: str,
    *,
    json_body: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    url = _build_url(path)

    try:
        async with _build_client() as client:
            response = await client.request(
                method,
                url,
                json=json_body,
                params=params,
                headers=_build_headers(),
            )
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        body_preview = exc.response.text[:500]
        logger.error(
            "GitHub responded with status %s for %s %s: %s",
            exc.response.status_code,
            method,
            url,
            body_preview,
        )
        raise RemoteError(
            f"GitHub request failed with status {exc.response.status_code}: {_error_message(exc.response)}",
            status_code=exc.response.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        logger.error("GitHub request failed for %s %s: %s", method, url, exc)
        raise RemoteError(f"GitHub request failed: {exc}") from exc

    if not response.content:
        return {}

    try:
        return response.json()
    except ValueError as exc:  # JSONDecodeError, UnicodeDecodeError
        preview = response.text[:200]
        logger.error("Failed to decode GitHub JSON response from %s: %s", url, preview)
        raise RemoteError("Invalid JSON response from GitHub") from exc


def _error_message(response: httpx.Response) -> str:
    """Extract GitHub's ``message`` field, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "Unknown error"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or "Unknown error"


# ============================================================================
# Users & repositories
# ============================================================================

async def get_authenticated_user() -> Dict[str, Any]:
    """Return the user record of the token owner (``GET /user``)."""
    return await _request("GET", "/user")


async def list_user_repos(**params: Any) -> List[Dict[str, Any]]:
    """List repositories visible to the authenticated user."""
    query = {key: value for key, value in params.items() if value is not None}
    return await _request("GET", "/user/repos", params=query or None)


async def get_repo(owner: str, repo: str) -> Dict[str, Any]:
    return await _request("GET", _repo_path(owner, repo))


async def create_repo(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Create a repository for the authenticated user."""
    return await _request("POST", "/user/repos", json_body=payload)


# ============================================================================
# Git Data API
# ============================================================================

async def get_ref(owner: str, repo: str, branch: str) -> Dict[str, Any]:
    return await _request("GET", f"{_repo_path(owner, repo)}/git/ref/{_ref_path(branch)}")


async def get_git_commit(owner: str, repo: str, commit_sha: str) -> Dict[str, Any]:
    return await _request("GET", f"{_repo_path(owner, repo)}/git/commits/{commit_sha}")


async def create_blob(owner: str, repo: str, content: str) -> Dict[str, Any]:
    return await _request(
        "POST",
        f"{_repo_path(owner, repo)}/git/blobs",
        json_body={"content": content, "encoding": "utf-8"},
    )


async def create_tree(
    owner: str,
    repo: str,
    base_tree: str,
    tree: List[Dict[str, str]],
) -> Dict[str, Any]:
    return await _request(
        "POST",
        f"{_repo_path(owner, repo)}/git/trees",
        json_body={"base_tree": base_tree, "tree": tree},
    )


async def create_commit(
    owner: str,
    repo: str,
    message: str,
    tree: str,
    parents: List[str],
) -> Dict[str, Any]:
    return await _request(
        "POST",
        f"{_repo_path(owner, repo)}/git/commits",
        json_body={"message": message, "tree": tree, "parents": parents},
    )


async def update_ref(
    owner: str,
    repo: str,
    branch: str,
    sha: str,
    force: bool = False,
) -> Dict[str, Any]:
    return await _request(
        "PATCH",
        f"{_repo_path(owner, repo)}/git/refs/{_ref_path(branch)}",
        json_body={"sha": sha, "force": force},
    )


# ============================================================================
# Commits & comparisons
# ============================================================================

async def get_commit(owner: str, repo: str, ref: str) -> Dict[str, Any]:
    """Return the commit (with file list) that ``ref`` points at."""
    return await _request("GET", f"{_repo_path(owner, repo)}/commits/{quote(ref, safe='/')}")


async def compare_commits(owner: str, repo: str, base: str, head: str) -> Dict[str, Any]:
    basehead = quote(f"{base}...{head}", safe="/.")
    return await _request("GET", f"{_repo_path(owner, repo)}/compare/{basehead}")
