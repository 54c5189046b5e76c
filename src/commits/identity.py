"""Owner and branch resolution chains.

두 체인 모두 "순서가 있는 provider 목록"으로 표현됩니다.
provider는 값이 없으면 None을 반환하고, 처음으로 비어 있지 않은 값을 반환한
provider의 결과가 채택됩니다.

Owner: 인자 → git remote origin → git user.name → 인증된 사용자
Branch: 인자 → 저장소 기본 브랜치 → 리터럴 폴백 ("main")

주의: 기본 브랜치 조회가 실패하면 리터럴 폴백을 사용합니다. 실제 기본 브랜치가
다른 이름이면 잘못된 브랜치를 대상으로 할 수 있으며, 그 경우 Reference Reader
단계에서 BranchNotFoundError로 드러납니다.
"""
from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable, List, Optional, Tuple

from src.adapters import git_config, github
from src.commits.errors import OwnerResolutionError, RemoteError
from src.models.git_objects import RepositoryRef
from src.server.settings import settings

logger = logging.getLogger(__name__)

Provider = Callable[[], Awaitable[Optional[str]]]


async def _explicit_value(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


async def _owner_from_git_remote() -> Optional[str]:
    return await asyncio.to_thread(git_config.get_remote_owner)


async def _owner_from_git_user() -> Optional[str]:
    return await asyncio.to_thread(git_config.get_user_name)


async def _owner_from_authenticated_user() -> Optional[str]:
    # 마지막 수단: 여기서 실패하면 작업 전체가 실패합니다
    try:
        user = await github.get_authenticated_user()
    except RemoteError as exc:
        raise OwnerResolutionError(
            "Failed to determine repository owner. Please provide owner explicitly.",
            cause=exc.message,
        ) from exc
    login = user.get("login") if isinstance(user, dict) else None
    if not login:
        raise OwnerResolutionError(
            "Authenticated user has no login. Please provide owner explicitly."
        )
    return login


async def _default_branch(repo: str, owner: str) -> Optional[str]:
    try:
        repo_data = await github.get_repo(owner, repo)
    except RemoteError as exc:
        logger.warning("Failed to detect default branch for %s/%s: %s", owner, repo, exc)
        return None
    branch = repo_data.get("default_branch") if isinstance(repo_data, dict) else None
    if not branch:
        logger.warning("Repository %s/%s declares no default branch", owner, repo)
        return None
    logger.info("Detected default branch: %s", branch)
    return branch


async def _literal(value: str) -> Optional[str]:
    logger.warning('Falling back to "%s" branch', value)
    return value


async def _first_match(what: str, providers: List[Tuple[str, Provider]]) -> Optional[str]:
    for source, provider in providers:
        value = await provider()
        if value:
            logger.info("Using %s from %s: %s", what, source, value)
            return value
    return None


async def resolve_owner(explicit: Optional[str] = None) -> str:
    """Resolve the repository owner.

    Raises:
        OwnerResolutionError: 인증된 사용자 조회까지 실패한 경우
    """
    providers: List[Tuple[str, Provider]] = [
        ("argument", partial(_explicit_value, explicit)),
        ("git remote origin", _owner_from_git_remote),
        ("git user.name", _owner_from_git_user),
        ("authenticated user", _owner_from_authenticated_user),
    ]
    owner = await _first_match("owner", providers)
    if not owner:
        raise OwnerResolutionError(
            "Failed to determine repository owner. Please provide owner explicitly."
        )
    return owner


async def resolve_branch(repo: str, owner: str, explicit: Optional[str] = None) -> str:
    """Resolve the target branch. Never raises for a failed metadata read."""
    providers: List[Tuple[str, Provider]] = [
        ("argument", partial(_explicit_value, explicit)),
        ("repository default", partial(_default_branch, repo, owner)),
        ("literal fallback", partial(_literal, settings.DEFAULT_BRANCH_FALLBACK)),
    ]
    branch = await _first_match("branch", providers)
    return branch or settings.DEFAULT_BRANCH_FALLBACK


async def resolve_target(
    repo: str,
    owner: Optional[str] = None,
    branch: Optional[str] = None,
) -> Tuple[RepositoryRef, str]:
    """Resolve owner then branch, once each, for a single operation."""
    resolved_owner = await resolve_owner(owner)
    repository = RepositoryRef(owner=resolved_owner, name=repo)
    resolved_branch = await resolve_branch(repo, resolved_owner, branch)
    return repository, resolved_branch
