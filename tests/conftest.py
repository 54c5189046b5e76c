"""Pytest configuration and fixtures.

이 모듈은 모든 테스트에서 공유되는 pytest fixture들을 정의합니다.

주요 Fixture:
- _test_settings (autouse): GitHub 토큰/URL 설정, 로컬 git 설정 격리
- fake_github: GitHub REST API를 메모리에서 흉내 내는 가짜 저장소
- client: FastAPI 테스트 클라이언트
- commands_client: 개발용 commands 라우터가 포함된 테스트 클라이언트

실제 GitHub를 호출하지 않으며, 가짜 저장소는 실제 API처럼
fast-forward가 아닌 ref 업데이트를 422로 거부합니다.
"""
import hashlib
import itertools
import os
from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters import github as github_adapter
from src.commits.errors import RemoteError


OWNER = "octocat"
REPO = "hello-world"
TIP_SHA = "T0"
TIP_TREE = "tree-T0"

ADAPTER_FUNCTIONS = [
    "get_authenticated_user",
    "list_user_repos",
    "get_repo",
    "create_repo",
    "get_ref",
    "get_git_commit",
    "create_blob",
    "create_tree",
    "create_commit",
    "update_ref",
    "get_commit",
    "compare_commits",
]


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch, tmp_path):
    """GitHub 설정을 테스트 값으로 고정하고 로컬 git 설정을 격리합니다.

    - GITHUB_TOKEN: 더미 토큰
    - git config 조회는 git 저장소가 아닌 임시 디렉토리에서, 전역/시스템 설정 없이 실행
    """
    from src.server.settings import settings
    monkeypatch.setattr(settings, "GITHUB_TOKEN", "test-token")
    monkeypatch.setattr(settings, "GITHUB_API_URL", "https://api.github.test")
    monkeypatch.setattr(settings, "GITHUB_HTML_URL", "https://github.test")
    monkeypatch.setattr(settings, "DEFAULT_BRANCH_FALLBACK", "main")
    monkeypatch.setattr(settings, "BLOB_UPLOAD_CONCURRENCY", 8)
    monkeypatch.setattr(settings, "GIT_CONFIG_CWD", str(tmp_path))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))


class FakeGitHub:
    """In-memory stand-in for the GitHub REST adapter.

    브랜치 → 커밋 → 트리 관계를 저장하고, 새 객체에는 고유한 SHA를 부여합니다.
    ``before_update_ref`` 훅으로 동시 쓰기(브랜치 이동)를 흉내 낼 수 있습니다.
    """

    def __init__(self, login: Optional[str] = OWNER, default_branch: str = "main"):
        self.login = login
        self.repos: Dict[Tuple[str, str], Dict[str, Any]] = {
            (OWNER, REPO): {
                "name": REPO,
                "full_name": f"{OWNER}/{REPO}",
                "html_url": f"https://github.test/{OWNER}/{REPO}",
                "default_branch": default_branch,
                "private": False,
                "fork": False,
                "description": "Test repository",
                "stargazers_count": 3,
                "watchers_count": 3,
                "forks_count": 1,
                "open_issues_count": 0,
                "language": "Python",
                "updated_at": "2024-01-01T00:00:00Z",
                "license": {"name": "MIT License"},
                "topics": ["testing"],
            }
        }
        self.refs: Dict[Tuple[str, str, str], str] = {}
        self.commits: Dict[str, Dict[str, Any]] = {}
        self.blobs: Dict[str, str] = {}
        self.trees: Dict[str, Dict[str, Any]] = {}
        self.before_update_ref: Optional[Callable[[], None]] = None
        self._seq = itertools.count(1)

        self.seed_branch(default_branch, TIP_SHA, TIP_TREE)

    # -- helpers -----------------------------------------------------------

    def _new_sha(self, prefix: str) -> str:
        return f"{prefix}-{next(self._seq):04d}"

    def seed_branch(self, branch: str, commit_sha: str, tree_sha: str,
                    parents: Optional[List[str]] = None) -> None:
        self.commits.setdefault(commit_sha, {
            "tree": tree_sha,
            "parents": parents or [],
            "message": f"seed {branch}",
        })
        self.refs[(OWNER, REPO, branch)] = commit_sha

    def move_branch(self, branch: str) -> str:
        """Simulate another writer pushing to ``branch``."""
        key = (OWNER, REPO, branch)
        sha = self._new_sha("concurrent")
        self.commits[sha] = {"tree": "tree-concurrent", "parents": [self.refs[key]], "message": "other"}
        self.refs[key] = sha
        return sha

    def tip(self, branch: str) -> str:
        return self.refs[(OWNER, REPO, branch)]

    def _require_repo(self, owner: str, repo: str) -> Dict[str, Any]:
        if (owner, repo) not in self.repos:
            raise RemoteError("GitHub request failed with status 404: Not Found", status_code=404)
        return self.repos[(owner, repo)]

    def _distance(self, head: str, base: str) -> int:
        count, sha = 0, head
        while sha and sha != base:
            count += 1
            parents = self.commits.get(sha, {}).get("parents") or []
            sha = parents[0] if parents else None
        return count if sha == base else 0

    # -- adapter surface ---------------------------------------------------

    async def get_authenticated_user(self):
        if not self.login:
            raise RemoteError("GitHub request failed with status 401: Bad credentials", status_code=401)
        return {"login": self.login, "id": 1}

    async def list_user_repos(self, **params):
        return list(self.repos.values())

    async def get_repo(self, owner, repo):
        return dict(self._require_repo(owner, repo))

    async def create_repo(self, payload):
        owner = self.login or OWNER
        data = {
            "name": payload["name"],
            "full_name": f"{owner}/{payload['name']}",
            "html_url": f"https://github.test/{owner}/{payload['name']}",
            "private": payload.get("private", False),
            "default_branch": "main",
        }
        self.repos[(owner, payload["name"])] = data
        return data

    async def get_ref(self, owner, repo, branch):
        self._require_repo(owner, repo)
        sha = self.refs.get((owner, repo, branch))
        if sha is None:
            raise RemoteError("GitHub request failed with status 404: Not Found", status_code=404)
        return {"ref": f"refs/heads/{branch}", "object": {"sha": sha, "type": "commit"}}

    async def get_git_commit(self, owner, repo, commit_sha):
        commit = self.commits[commit_sha]
        return {"sha": commit_sha, "tree": {"sha": commit["tree"]}, "parents": commit["parents"]}

    async def create_blob(self, owner, repo, content):
        sha = hashlib.sha1(content.encode("utf-8")).hexdigest()
        self.blobs[sha] = content
        return {"sha": sha}

    async def create_tree(self, owner, repo, base_tree, tree):
        sha = self._new_sha("tree")
        self.trees[sha] = {"base_tree": base_tree, "tree": list(tree)}
        return {"sha": sha}

    async def create_commit(self, owner, repo, message, tree, parents):
        sha = self._new_sha("commit")
        self.commits[sha] = {"tree": tree, "parents": list(parents), "message": message}
        return {"sha": sha}

    async def update_ref(self, owner, repo, branch, sha, force=False):
        if self.before_update_ref:
            self.before_update_ref()
        key = (owner, repo, branch)
        current = self.refs.get(key)
        if current is None:
            raise RemoteError(
                "GitHub request failed with status 422: Reference does not exist",
                status_code=422,
            )
        if not force and current not in self.commits[sha]["parents"]:
            raise RemoteError(
                "GitHub request failed with status 422: Update is not a fast forward",
                status_code=422,
            )
        self.refs[key] = sha
        return {"ref": f"refs/heads/{branch}", "object": {"sha": sha}}

    async def get_commit(self, owner, repo, ref):
        self._require_repo(owner, repo)
        sha = self.refs.get((owner, repo, ref), ref if ref in self.commits else None)
        if sha is None:
            raise RemoteError("GitHub request failed with status 422: No commit found", status_code=422)
        commit = self.commits[sha]
        return {
            "sha": sha,
            "html_url": f"https://github.test/{owner}/{repo}/commit/{sha}",
            "commit": {
                "message": commit["message"],
                "author": {"name": "Mona Lisa", "date": "2024-01-01T00:00:00Z"},
            },
            "files": [
                {"filename": "README.md", "status": "modified", "changes": 2,
                 "additions": 1, "deletions": 1},
            ],
        }

    async def compare_commits(self, owner, repo, base, head):
        base_sha = self.refs[(owner, repo, base)]
        head_sha = self.refs[(owner, repo, head)]
        return {
            "ahead_by": self._distance(head_sha, base_sha),
            "behind_by": self._distance(base_sha, head_sha),
        }


@pytest.fixture
def fake_github():
    """GitHub 어댑터 함수 전체를 FakeGitHub로 대체합니다.

    Yields:
        FakeGitHub: ``fake.mocks[name]``으로 각 AsyncMock의 호출 기록 확인 가능

    사용법:
        @pytest.mark.asyncio
        async def test_commit(fake_github):
            ...
            assert fake_github.mocks["create_blob"].await_count == 1
    """
    fake = FakeGitHub()
    fake.mocks = {}
    patchers = []
    for name in ADAPTER_FUNCTIONS:
        mock = AsyncMock(side_effect=getattr(fake, name))
        patcher = patch.object(github_adapter, name, mock)
        patcher.start()
        patchers.append(patcher)
        fake.mocks[name] = mock
    try:
        yield fake
    finally:
        for patcher in reversed(patchers):
            patcher.stop()


@pytest.fixture
def client():
    """FastAPI 테스트 클라이언트 (lifespan 미실행)."""
    from src.server.main import app
    return TestClient(app)


@pytest.fixture
def commands_client():
    """개발용 commands 라우터가 포함된 테스트 클라이언트.

    ENABLE_DIRECT_TOOLS는 import 시점에 평가되므로 별도의 앱에 라우터를 붙입니다.
    """
    from src.server.routers import commands
    app = FastAPI()
    app.include_router(commands.router)
    return TestClient(app)
