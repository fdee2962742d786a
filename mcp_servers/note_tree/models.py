"""Pydantic models for the note tree store."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from .errors import ErrorKind, StoreError

NodeType = Literal["folder", "note"]


class NoteRecord(BaseModel):
    """On-disk payload of a single ``<id>.json`` note file.

    Unknown keys are kept so that read-modify-write updates never drop
    fields written by other versions of the application.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    title: str
    content: str = ""
    created_at: Optional[str] = Field(
        default=None,
        alias="createdAt",
        description="ISO-8601 creation timestamp",
    )

    @classmethod
    def new(cls, title: str) -> "NoteRecord":
        """Build a fresh record with a random id and the current UTC time."""
        return cls(
            id=str(uuid4()),
            title=title,
            content="",
            created_at=datetime.now(UTC).isoformat(),
        )

    def to_json(self) -> str:
        # Legacy files without a creation time keep it absent on rewrite.
        exclude = {"created_at"} if self.created_at is None else None
        return self.model_dump_json(by_alias=True, exclude=exclude, indent=2)


class Node(BaseModel):
    """A folder or note in a scanned tree.

    Folders carry ``children`` and use their relative path as ``id``;
    notes carry ``created_at`` and use the UUID stored in their file.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    type: NodeType
    path: str = Field(..., description="Path relative to the store root")
    children: Optional[list[Node]] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"

    def to_dict(self) -> dict:
        """Wire form: camelCase keys, ``children`` only on folders."""
        data = self.model_dump(by_alias=True, exclude={"children"})
        if self.is_folder:
            data.pop("createdAt", None)
            data["children"] = [c.to_dict() for c in self.children or []]
        return data


# Support for recursive model
Node.model_rebuild()


class OperationResult(BaseModel):
    """Outcome of a mutating store operation."""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, **kwargs) -> "OperationResult":
        return cls(success=True, **kwargs)

    @classmethod
    def failed(cls, exc: StoreError, message: Optional[str] = None, **kwargs):
        return cls(
            success=False,
            error=message or str(exc),
            error_kind=exc.kind,
            **kwargs,
        )


class CreateNoteResult(OperationResult):
    node: Optional[Node] = None


class CreateFolderResult(OperationResult):
    path: Optional[str] = None
    message: Optional[str] = None


class DeleteRequest(BaseModel):
    """One entry of a bulk delete."""

    path: str
    type: NodeType
