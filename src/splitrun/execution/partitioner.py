"""Split a collection into independently runnable top-level folders."""

from __future__ import annotations

from typing import Any

import structlog

from splitrun.errors import CollectionValidationError, ValidationErrorDetail
from splitrun.loader.collection_loader import load_collection
from splitrun.models.collection import (
    Collection,
    Folder,
    Partition,
    PartitionInfo,
    Request,
)

logger = structlog.get_logger("splitrun")


def partition(collection: Collection | dict[str, Any]) -> list[Partition]:
    """Promote every top-level folder of a collection to a Partition.

    Each partition's info copies the root info, renamed to
    "<root name> <folder name>" (or the folder's 1-based position when it
    has no name) and tagged with the folder's zero-based index. The
    top-level folder node is annotated with the same info.

    Args:
        collection: A validated Collection or a raw collection document.

    Returns:
        One Partition per top-level folder, in source order.

    Raises:
        CollectionValidationError: If the document is malformed or any
            top-level item is a request.
    """
    if not isinstance(collection, Collection):
        collection = load_collection(collection)

    requests = [
        (index, child)
        for index, child in enumerate(collection.item)
        if isinstance(child, Request)
    ]
    if requests:
        raise CollectionValidationError(
            "The collection has individual top-level requests, which is not supported. "
            "All top-level items in the collection must be folders",
            [
                ValidationErrorDetail(
                    field=f"item.{index}",
                    message=f"Request '{child.name or child.id or '?'}' is not inside a folder",
                    type="top_level_request",
                )
                for index, child in requests
            ],
        )

    root_info = collection.info.model_dump(by_alias=True, exclude_none=True)
    partitions: list[Partition] = []

    folders = [child for child in collection.item if isinstance(child, Folder)]
    for index, folder in enumerate(folders):
        info = PartitionInfo.model_validate(
            {
                **root_info,
                "name": f"{collection.name} {folder.name or index + 1}",
                "originalIndex": index,
            }
        )
        folder.info = info
        partitions.append(
            Partition(
                folder=folder,
                info=info,
                variable=collection.variable,
                auth=collection.auth,
                event=collection.event,
            )
        )

    logger.debug("collection_partitioned", collection=collection.name, partitions=len(partitions))
    return partitions
