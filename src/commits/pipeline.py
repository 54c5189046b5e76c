"""Commit construction pipeline orchestrator.

상태 머신:
    Idle → ResolvingIdentity → ReadingTip → WritingBlobs → BuildingTree
         → WritingCommit → UpdatingBranch → Done
    (Idle/Done을 제외한 모든 상태에서 Failed로 전이 가능)

재시도는 없으며, 어떤 단계의 에러든 그대로 전파됩니다. 오케스트레이터는
이미 알고 있는 repository/branch/state 컨텍스트만 에러에 덧붙입니다.
브랜치 참조는 마지막 단계에서만 이동하므로, 중간에 실패해도 브랜치 이력은
절반만 쓰인 상태로 남지 않습니다.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Sequence

from src.commits import identity, steps
from src.commits.errors import GitToolError
from src.models.git_objects import CommitRecord, FileChange, PipelineResult, RepositoryRef
from src.server.settings import settings

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "Idle"
    RESOLVING_IDENTITY = "ResolvingIdentity"
    READING_TIP = "ReadingTip"
    WRITING_BLOBS = "WritingBlobs"
    BUILDING_TREE = "BuildingTree"
    WRITING_COMMIT = "WritingCommit"
    UPDATING_BRANCH = "UpdatingBranch"
    DONE = "Done"
    FAILED = "Failed"


_ORDER = [
    PipelineState.IDLE,
    PipelineState.RESOLVING_IDENTITY,
    PipelineState.READING_TIP,
    PipelineState.WRITING_BLOBS,
    PipelineState.BUILDING_TREE,
    PipelineState.WRITING_COMMIT,
    PipelineState.UPDATING_BRANCH,
    PipelineState.DONE,
]


def commit_html_url(repository: RepositoryRef, commit_sha: str) -> str:
    return f"{settings.GITHUB_HTML_URL.rstrip('/')}/{repository.full_name}/commit/{commit_sha}"


class CommitPipeline:
    """Single-use orchestrator turning file changes into one commit on a branch.

    한 번의 호출마다 새 인스턴스를 생성합니다 (전역 인스턴스 없음, 캐시 없음).

    Args:
        repo: 저장소 이름
        message: 커밋 메시지 (그대로 전달)
        files: 변경할 파일 목록 (입력 순서 유지)
        owner: 명시적 owner (없으면 identity chain으로 결정)
        branch: 명시적 브랜치 (없으면 기본 브랜치 → "main")
    """

    def __init__(
        self,
        repo: str,
        message: str,
        files: Sequence[FileChange],
        owner: Optional[str] = None,
        branch: Optional[str] = None,
    ) -> None:
        self.repo = repo
        self.message = message
        self.files: List[FileChange] = list(files)
        self.explicit_owner = owner
        self.explicit_branch = branch

        self.state = PipelineState.IDLE
        self.history: List[PipelineState] = [PipelineState.IDLE]
        self.repository: Optional[RepositoryRef] = None
        self.branch: Optional[str] = None

    def _advance(self, state: PipelineState) -> None:
        expected = _ORDER[_ORDER.index(self.state) + 1]
        if state is not expected:
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)
        logger.info("Commit pipeline state: %s", state.value)

    def _fail(self, exc: Exception) -> None:
        failed_in = self.state
        self.state = PipelineState.FAILED
        self.history.append(PipelineState.FAILED)
        if isinstance(exc, GitToolError):
            exc.with_context(
                repository=self.repository.full_name if self.repository else None,
                branch=self.branch,
                state=failed_in.value,
            )
        logger.error(
            "Commit pipeline failed in %s for %s@%s: %s",
            failed_in.value,
            self.repository.full_name if self.repository else self.repo,
            self.branch,
            exc,
        )

    async def run(self) -> PipelineResult:
        if self.state is not PipelineState.IDLE:
            raise RuntimeError("CommitPipeline instances are single-use")

        try:
            self._advance(PipelineState.RESOLVING_IDENTITY)
            self.repository, self.branch = await identity.resolve_target(
                self.repo, self.explicit_owner, self.explicit_branch
            )

            self._advance(PipelineState.READING_TIP)
            tip = await steps.read_tip(self.repository, self.branch)

            self._advance(PipelineState.WRITING_BLOBS)
            blobs = await steps.write_blobs(self.repository, self.files)

            self._advance(PipelineState.BUILDING_TREE)
            tree = await steps.build_tree(self.repository, tip.tree_sha, blobs)

            self._advance(PipelineState.WRITING_COMMIT)
            commit = await steps.write_commit(
                self.repository, self.message, tree.sha, tip.commit_sha
            )

            self._advance(PipelineState.UPDATING_BRANCH)
            await steps.update_branch(self.repository, self.branch, commit.sha)

            self._advance(PipelineState.DONE)
        except Exception as exc:
            self._fail(exc)
            raise

        return self._build_result(commit)

    def _build_result(self, commit: CommitRecord) -> PipelineResult:
        assert self.repository is not None and self.branch is not None
        logger.info(
            "Committed %d file(s) to %s@%s as %s",
            len(self.files),
            self.repository.full_name,
            self.branch,
            commit.sha,
        )
        return PipelineResult(
            status="success",
            commit_sha=commit.sha,
            html_url=commit_html_url(self.repository, commit.sha),
            repository=self.repository.full_name,
            branch=self.branch,
            message=commit.message,
            files_changed=len(self.files),
            file_paths=[file.path for file in self.files],
        )


async def create_commit(
    repo: str,
    message: str,
    files: Sequence[FileChange],
    owner: Optional[str] = None,
    branch: Optional[str] = None,
) -> PipelineResult:
    """Run a fresh pipeline for one commit request."""
    pipeline = CommitPipeline(repo, message, files, owner=owner, branch=branch)
    return await pipeline.run()
