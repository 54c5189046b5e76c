"""Error taxonomy for GitHub tool operations.

모든 에러는 기계가 읽을 수 있는 ``kind``와 사람이 읽을 수 있는 메시지를 가지며,
알려진 컨텍스트(repository, branch, paths, state)를 함께 직렬화합니다.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class GitToolError(RuntimeError):
    """Base class for every error surfaced to a tool caller."""

    kind = "GitToolError"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = {
            key: value for key, value in context.items() if value is not None
        }

    def with_context(self, **context: Any) -> "GitToolError":
        """Attach context the raiser did not know, keeping existing values."""
        for key, value in context.items():
            if value is not None:
                self.context.setdefault(key, value)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message, **self.context}


class InvalidArguments(GitToolError):
    """Raised when tool arguments fail shape/type validation."""

    kind = "InvalidArguments"


class OwnerResolutionError(GitToolError):
    kind = "OwnerResolutionError"


class BranchNotFoundError(GitToolError):
    kind = "BranchNotFoundError"

    def __init__(self, branch: str, message: Optional[str] = None, **context: Any) -> None:
        super().__init__(
            message or f"Branch '{branch}' was not found. The branch may not exist.",
            branch=branch,
            **context,
        )


class TreeUnavailableError(GitToolError):
    kind = "TreeUnavailableError"


class BlobUploadError(GitToolError):
    kind = "BlobUploadError"

    def __init__(self, paths: List[str], message: Optional[str] = None, **context: Any) -> None:
        super().__init__(
            message or f"Failed to create blobs for: {', '.join(paths)}",
            paths=list(paths),
            **context,
        )


class EmptyChangesetError(GitToolError):
    kind = "EmptyChangesetError"


class TreeConstructionError(GitToolError):
    kind = "TreeConstructionError"


class CommitConstructionError(GitToolError):
    kind = "CommitConstructionError"


class ReferenceConflictError(GitToolError):
    kind = "ReferenceConflictError"


class RemoteError(GitToolError):
    """Raised for GitHub transport/API failures not otherwise classified."""

    kind = "RemoteError"

    def __init__(self, message: str, status_code: Optional[int] = None, **context: Any) -> None:
        super().__init__(message, status_code=status_code, **context)
        self.status_code = status_code
