"""Content items and content groups.

A document's payload is an ordered list of content groups, and each group is
an ordered list of labeled values. Values use the contract's tagged variant
encoding, a two-element JSON array of ``[type, value]``:

    [
        [
            {"label": "content_group_label", "value": ["string", "details"]},
            {"label": "title", "value": ["string", "Hello"]},
            {"label": "owner", "value": ["name", "johnnyhypha1"]}
        ]
    ]

The `content_group_label` item names a group so it can be found again with
`Document.get_group()`.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, RootModel

CONTENT_GROUP_LABEL = "content_group_label"

FlexType = Literal["monostate", "name", "string", "asset", "time_point", "int64", "checksum256"]


class FlexValue(RootModel[tuple[FlexType, Any]]):
    """A tagged value as the contract stores it: ``[type, value]``."""

    model_config = {"frozen": True}

    @property
    def type(self) -> str:
        return self.root[0]

    @property
    def value(self) -> Any:
        return self.root[1]


class Content(BaseModel):
    """A single labeled value within a content group."""

    model_config = {"frozen": True}

    label: str = Field(description="Label of this item, unique within its group by convention.")
    value: FlexValue = Field(description="Tagged value, serialized as [type, value].")

    @classmethod
    def of(cls, label: str, type_: str, value: Any) -> "Content":
        return cls(label=label, value=FlexValue((type_, value)))


class ContentGroup(RootModel[list[Content]]):
    """An ordered list of content items. Order is significant."""

    model_config = {"frozen": True}

    def __iter__(self):  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Content:
        return self.root[index]

    def find(self, label: str) -> Content | None:
        """Return the first item with `label`, or None."""
        for content in self.root:
            if content.label == label:
                return content
        return None

    @classmethod
    def labeled(cls, group_label: str, *items: Content) -> "ContentGroup":
        """Build a group whose first item is its `content_group_label`."""
        return cls([Content.of(CONTENT_GROUP_LABEL, "string", group_label), *items])
