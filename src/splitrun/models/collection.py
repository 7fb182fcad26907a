"""Collection tree models.

A collection is a tree of folders and requests. Folders and requests are
modelled as a tagged union so that tree walkers handle both cases
explicitly. Unknown keys are preserved on every node so a partition can
be handed back to the runner without losing request definitions, scripts
or auth settings.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, Discriminator, Field, Tag


class CollectionInfo(BaseModel):
    """The collection's `info` block (name, schema URL, id)."""

    model_config = {"extra": "allow", "populate_by_name": True}

    name: str
    postman_id: str | None = Field(default=None, alias="_postman_id")
    schema_url: str | None = Field(default=None, alias="schema")


class PartitionInfo(CollectionInfo):
    """Info synthesized for a top-level folder promoted to a collection."""

    original_index: int = Field(alias="originalIndex", ge=0)


class Request(BaseModel):
    """A leaf node: one HTTP request and its test scripts."""

    model_config = {"extra": "allow"}

    name: str | None = None
    id: str | None = None


class Folder(BaseModel):
    """A named grouping node with ordered children."""

    model_config = {"extra": "allow"}

    name: str | None = None
    id: str | None = None
    item: list[Item]
    info: PartitionInfo | None = None
    auth: dict[str, Any] | None = None
    event: list[dict[str, Any]] | None = None


def _item_kind(value: Any) -> str:
    """Tag a raw node or model instance as 'folder' or 'request'."""
    if isinstance(value, dict):
        return "folder" if "item" in value else "request"
    return "folder" if isinstance(value, Folder) else "request"


Item = Annotated[
    Union[
        Annotated[Folder, Tag("folder")],
        Annotated[Request, Tag("request")],
    ],
    Discriminator(_item_kind),
]

Folder.model_rebuild()


class Collection(BaseModel):
    """A whole collection document: info plus the ordered item tree."""

    model_config = {"extra": "allow"}

    info: CollectionInfo
    item: list[Item]
    variable: list[dict[str, Any]] | None = None
    auth: dict[str, Any] | None = None
    event: list[dict[str, Any]] | None = None

    @property
    def name(self) -> str:
        return self.info.name


class Partition(BaseModel):
    """A top-level folder elevated to a stand-alone collection.

    Carries the collection-level context (variables, auth, events) that
    requests inside the folder may depend on when run on their own.
    """

    folder: Folder
    info: PartitionInfo
    variable: list[dict[str, Any]] | None = None
    auth: dict[str, Any] | None = None
    event: list[dict[str, Any]] | None = None

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def original_index(self) -> int:
        return self.info.original_index

    def to_document(self) -> dict[str, Any]:
        """Build the collection document handed to the runner."""
        doc = self.folder.model_dump(by_alias=True, exclude_none=True, mode="json")
        doc["info"] = self.info.model_dump(by_alias=True, exclude_none=True, mode="json")

        if self.variable:
            doc["variable"] = list(self.variable)
        if self.auth is not None and "auth" not in doc:
            doc["auth"] = self.auth

        # Collection-level scripts run before the folder's own
        events = list(self.event or []) + list(doc.get("event", []))
        if events:
            doc["event"] = events

        return doc
