"""Documents: the nodes of the on-chain document graph.

A document is a row of the contract's ``documents`` table. Its identity is
the 256-bit `hash` the contract computes over the content groups when the
document is created, so a hash is never known before creation completes.
Documents are read-only on the client side.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from docgraph.content import CONTENT_GROUP_LABEL, Content, ContentGroup
from docgraph.errors import ContentError, ContentNotFoundError


class Document(BaseModel):
    """A document row as returned by the contract.

    Row fields the client does not model are kept as extras so newer
    contract versions still decode.
    """

    model_config = {"frozen": True, "extra": "allow"}

    hash: str = Field(description="Content hash assigned by the contract (checksum256 hex).")
    creator: str = Field(description="Account that created the document.")
    content_groups: list[ContentGroup] = Field(default_factory=list)
    id: int | None = Field(default=None, description="Primary key in the documents table.")
    created_date: datetime | None = None
    certificates: list[Any] = Field(default_factory=list)
    contract: str | None = None

    def get_group(self, label: str) -> tuple[int, ContentGroup | None]:
        """Return ``(index, group)`` for the group named `label`, or ``(-1, None)``."""
        for index, group in enumerate(self.content_groups):
            for content in group:
                if content.label != CONTENT_GROUP_LABEL:
                    continue
                if content.value.type != "string":
                    raise ContentError(
                        "get_group",
                        f"{CONTENT_GROUP_LABEL} must be a string",
                        hash=self.hash,
                        group_index=index,
                    )
                if content.value.value == label:
                    return index, group
        return -1, None

    def get_group_or_fail(self, label: str) -> ContentGroup:
        _, group = self.get_group(label)
        if group is None:
            raise ContentNotFoundError("get_group", "group not found", hash=self.hash, group=label)
        return group

    def get_content(self, group_label: str, content_label: str) -> Content | None:
        """Return the item `content_label` inside group `group_label`, if both exist."""
        _, group = self.get_group(group_label)
        if group is None:
            return None
        return group.find(content_label)

    def get_content_or_fail(self, group_label: str, content_label: str) -> Content:
        content = self.get_content(group_label, content_label)
        if content is None:
            raise ContentNotFoundError(
                "get_content",
                "content not found",
                hash=self.hash,
                group=group_label,
                label=content_label,
            )
        return content


class CreateDocumentRequest(BaseModel):
    """Arguments of the contract's ``create`` action.

    `creator` is always set by the client. Any other top-level fields found
    in the input file ride along untouched as extras.
    """

    model_config = {"extra": "allow"}

    creator: str
    content_groups: list[ContentGroup]

    def to_action_args(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
