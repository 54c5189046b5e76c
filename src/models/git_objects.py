"""Git object models used by the commit pipeline.

커밋 파이프라인 한 번의 실행 동안만 존재하는 값 객체들입니다.
원격 저장소가 유일한 진실의 원천이므로 어떤 모델도 호출 간에 유지되지 않습니다.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class RepositoryRef(BaseModel):
    """Owner/name pair identifying a remote repository."""
    owner: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    class Config:
        frozen = True

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class FileChange(BaseModel):
    """A repository-root-relative path and its new UTF-8 text content."""
    path: str = Field(..., min_length=1, description="Repository-root-relative path")
    content: str = Field(..., description="Raw UTF-8 file content")

    class Config:
        frozen = True


class TipSnapshot(BaseModel):
    """Branch tip captured at pipeline start."""
    commit_sha: str
    tree_sha: str

    class Config:
        frozen = True


class BlobRecord(BaseModel):
    """Tree entry for an uploaded blob."""
    path: str
    sha: str
    mode: Literal["100644"] = "100644"
    type: Literal["blob"] = "blob"

    class Config:
        frozen = True

    def to_tree_entry(self) -> Dict[str, str]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


class TreeSnapshot(BaseModel):
    sha: str
    base_sha: str

    class Config:
        frozen = True


class CommitRecord(BaseModel):
    sha: str
    tree_sha: str
    parent_sha: str
    message: str

    class Config:
        frozen = True


class PipelineResult(BaseModel):
    """Outcome of a successful commit pipeline run.

    실패 시에는 생성되지 않고 에러가 발생합니다.
    """
    status: Literal["success", "failure"] = "success"
    commit_sha: Optional[str] = None
    html_url: Optional[str] = None
    repository: str
    branch: str
    message: str
    files_changed: int
    file_paths: List[str]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        frozen = True

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump()
        payload["timestamp"] = self.timestamp.isoformat()
        return payload


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp used in every tool payload."""
    return datetime.now(timezone.utc).isoformat()
