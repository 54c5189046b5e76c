"""Tests for owner/branch resolution chains.

Owner: 인자 → git remote → git user.name → 인증된 사용자
Branch: 인자 → 저장소 기본 브랜치 → "main"
"""
import pytest
from unittest.mock import patch

from src.commits import identity
from src.commits.errors import OwnerResolutionError, RemoteError
from src.models.git_objects import RepositoryRef

from tests.conftest import OWNER, REPO


def _git(remote_owner=None, user_name=None):
    """로컬 git 설정 조회 결과를 고정합니다."""
    return (
        patch("src.adapters.git_config.get_remote_owner", return_value=remote_owner),
        patch("src.adapters.git_config.get_user_name", return_value=user_name),
    )


@pytest.mark.asyncio
async def test_explicit_owner_wins(fake_github):
    """인자로 받은 owner가 있으면 git/GitHub를 조회하지 않음."""
    remote, user = _git(remote_owner="remote-owner", user_name="git-user")
    with remote as mock_remote, user as mock_user:
        owner = await identity.resolve_owner("explicit-owner")

    assert owner == "explicit-owner"
    mock_remote.assert_not_called()
    mock_user.assert_not_called()
    assert fake_github.mocks["get_authenticated_user"].await_count == 0


@pytest.mark.asyncio
async def test_git_remote_owner_before_user_name(fake_github):
    remote, user = _git(remote_owner="remote-owner", user_name="git-user")
    with remote, user as mock_user:
        owner = await identity.resolve_owner()

    assert owner == "remote-owner"
    mock_user.assert_not_called()


@pytest.mark.asyncio
async def test_git_user_name_used_without_remote(fake_github):
    remote, user = _git(remote_owner=None, user_name="git-user")
    with remote, user:
        owner = await identity.resolve_owner()

    assert owner == "git-user"
    assert fake_github.mocks["get_authenticated_user"].await_count == 0


@pytest.mark.asyncio
async def test_authenticated_user_is_last_resort(fake_github):
    """git 설정이 전혀 없으면 인증된 사용자의 login을 사용."""
    remote, user = _git()
    with remote, user:
        owner = await identity.resolve_owner("   ")

    assert owner == OWNER
    assert fake_github.mocks["get_authenticated_user"].await_count == 1


@pytest.mark.asyncio
async def test_owner_resolution_fails_when_auth_lookup_fails(fake_github):
    fake_github.login = None
    remote, user = _git()
    with remote, user, pytest.raises(OwnerResolutionError) as exc_info:
        await identity.resolve_owner()

    assert exc_info.value.to_dict()["kind"] == "OwnerResolutionError"
    assert "Bad credentials" in exc_info.value.context["cause"]


@pytest.mark.asyncio
async def test_explicit_branch_skips_metadata(fake_github):
    branch = await identity.resolve_branch(REPO, OWNER, "feature/x")

    assert branch == "feature/x"
    assert fake_github.mocks["get_repo"].await_count == 0


@pytest.mark.asyncio
async def test_default_branch_from_repository(fake_github):
    fake_github.repos[(OWNER, REPO)]["default_branch"] = "develop"

    branch = await identity.resolve_branch(REPO, OWNER)

    assert branch == "develop"


@pytest.mark.asyncio
async def test_branch_falls_back_to_main_when_metadata_fails(fake_github):
    """메타데이터 조회가 실패해도 예외 없이 "main"을 반환."""
    fake_github.mocks["get_repo"].side_effect = RemoteError("boom", status_code=500)

    branch = await identity.resolve_branch(REPO, OWNER)

    assert branch == "main"


@pytest.mark.asyncio
async def test_branch_falls_back_when_default_branch_missing(fake_github):
    fake_github.repos[(OWNER, REPO)].pop("default_branch")

    assert await identity.resolve_branch(REPO, OWNER) == "main"


@pytest.mark.asyncio
async def test_resolve_target_returns_repository_and_branch(fake_github):
    repository, branch = await identity.resolve_target(REPO, owner=OWNER)

    assert repository == RepositoryRef(owner=OWNER, name=REPO)
    assert repository.full_name == f"{OWNER}/{REPO}"
    assert branch == "main"
