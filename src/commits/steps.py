"""Individual steps of the commit construction pipeline.

각 단계는 한 번만 시도되며, 실패 시 해당 단계 고유의 에러를 즉시 발생시킵니다.
Blob/Tree/Commit 객체는 브랜치 참조가 이동하기 전까지는 참조되지 않는
불변 객체이므로, 중간 실패 시 보상(삭제) 작업을 하지 않습니다.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from src.adapters import github
from src.commits.errors import (
    BlobUploadError,
    BranchNotFoundError,
    CommitConstructionError,
    EmptyChangesetError,
    ReferenceConflictError,
    RemoteError,
    TreeConstructionError,
    TreeUnavailableError,
)
from src.models.git_objects import (
    BlobRecord,
    CommitRecord,
    FileChange,
    RepositoryRef,
    TipSnapshot,
    TreeSnapshot,
)
from src.server.settings import settings

logger = logging.getLogger(__name__)


def _sha_of(payload: object) -> Optional[str]:
    if isinstance(payload, dict):
        sha = payload.get("sha")
        if isinstance(sha, str) and sha:
            return sha
    return None


async def read_tip(repository: RepositoryRef, branch: str) -> TipSnapshot:
    """Read the branch tip commit SHA and that commit's tree SHA."""
    try:
        ref_data = await github.get_ref(repository.owner, repository.name, branch)
    except RemoteError as exc:
        if exc.status_code == 404:
            raise BranchNotFoundError(branch) from exc
        raise

    # 접두어가 일치하는 ref가 여러 개면 GitHub는 배열을 반환하므로 dict만 유효합니다
    commit_sha = _sha_of(ref_data.get("object")) if isinstance(ref_data, dict) else None
    if not commit_sha:
        raise BranchNotFoundError(
            branch,
            f"Invalid reference data received for branch '{branch}'. The branch may not exist.",
        )

    commit_data = await github.get_git_commit(repository.owner, repository.name, commit_sha)
    tree_sha = _sha_of(commit_data.get("tree")) if isinstance(commit_data, dict) else None
    if not tree_sha:
        raise TreeUnavailableError(
            "Invalid commit data received. Unable to access the commit tree.",
            commit_sha=commit_sha,
        )

    logger.info("Branch %s tip is %s (tree %s)", branch, commit_sha, tree_sha)
    return TipSnapshot(commit_sha=commit_sha, tree_sha=tree_sha)


async def write_blobs(
    repository: RepositoryRef,
    files: Sequence[FileChange],
    concurrency: Optional[int] = None,
) -> List[BlobRecord]:
    """Upload every file as a blob concurrently, preserving input order."""
    if not files:
        raise EmptyChangesetError("No files were provided; nothing to commit.")

    semaphore = asyncio.Semaphore(max(1, concurrency or settings.BLOB_UPLOAD_CONCURRENCY))

    async def upload(file: FileChange) -> BlobRecord:
        async with semaphore:
            logger.info("Creating blob for file: %s", file.path)
            data = await github.create_blob(repository.owner, repository.name, file.content)
        sha = _sha_of(data)
        if not sha:
            raise RemoteError(f"GitHub returned no blob SHA for {file.path}")
        return BlobRecord(path=file.path, sha=sha)

    results = await asyncio.gather(*(upload(file) for file in files), return_exceptions=True)

    failed_paths: List[str] = []
    first_error: Optional[BaseException] = None
    for file, result in zip(files, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            failed_paths.append(file.path)
            first_error = first_error or result

    if failed_paths:
        logger.error("Blob upload failed for %d file(s): %s", len(failed_paths), failed_paths)
        raise BlobUploadError(
            failed_paths,
            f"Failed to create file blobs for {', '.join(failed_paths)}: {first_error}",
        ) from first_error

    blobs = [result for result in results if isinstance(result, BlobRecord)]
    if not blobs:
        raise EmptyChangesetError(
            "No valid file blobs were created. Please check the file contents."
        )
    return blobs


async def build_tree(
    repository: RepositoryRef,
    base_sha: str,
    blobs: Sequence[BlobRecord],
) -> TreeSnapshot:
    """Layer the blob entries on top of ``base_sha`` in one remote call."""
    try:
        data = await github.create_tree(
            repository.owner,
            repository.name,
            base_tree=base_sha,
            tree=[blob.to_tree_entry() for blob in blobs],
        )
    except RemoteError as exc:
        raise TreeConstructionError(
            f"Failed to create tree: {exc.message}",
            status_code=exc.status_code,
        ) from exc

    tree_sha = _sha_of(data)
    if not tree_sha:
        raise TreeConstructionError("Failed to create a valid tree structure.")
    logger.info("Created new tree with SHA: %s", tree_sha)
    return TreeSnapshot(sha=tree_sha, base_sha=base_sha)


async def write_commit(
    repository: RepositoryRef,
    message: str,
    tree_sha: str,
    parent_sha: str,
) -> CommitRecord:
    """Create a single-parent commit object."""
    try:
        data = await github.create_commit(
            repository.owner,
            repository.name,
            message=message,
            tree=tree_sha,
            parents=[parent_sha],
        )
    except RemoteError as exc:
        raise CommitConstructionError(
            f"Failed to create commit: {exc.message}",
            status_code=exc.status_code,
        ) from exc

    commit_sha = _sha_of(data)
    if not commit_sha:
        raise CommitConstructionError(
            "Failed to create a valid commit. The commit data is invalid."
        )
    logger.info("Created new commit with SHA: %s", commit_sha)
    return CommitRecord(sha=commit_sha, tree_sha=tree_sha, parent_sha=parent_sha, message=message)


async def update_branch(repository: RepositoryRef, branch: str, commit_sha: str) -> None:
    """Fast-forward ``branch`` to ``commit_sha``; never forced."""
    try:
        await github.update_ref(repository.owner, repository.name, branch, commit_sha, force=False)
    except RemoteError as exc:
        if exc.status_code == 404 or (
            exc.status_code == 422 and "reference does not exist" in exc.message.lower()
        ):
            raise BranchNotFoundError(
                branch,
                f"Branch '{branch}' disappeared before it could be updated.",
            ) from exc
        if exc.status_code in (409, 422):
            raise ReferenceConflictError(
                f"Branch '{branch}' moved since its tip was read; refusing a non-fast-forward update.",
                branch=branch,
                commit_sha=commit_sha,
            ) from exc
        raise
    logger.info("Updated branch reference: %s to commit %s", branch, commit_sha)
