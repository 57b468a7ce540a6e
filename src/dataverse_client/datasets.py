"""Dataset operations: read, list, create, remove, files and metadata."""

import logging
from typing import Iterator

from dataverse_client import VERSION_LATEST
from dataverse_client.dataverses import get_dataverse_contents
from dataverse_client.descriptors import DataSetDescriptor
from dataverse_client.errors import PreconditionError, RequestError
from dataverse_client.request import (
    ResourceHandle,
    child_dataverse_uri,
    create_dataset_uri,
    dataset_files_uri,
    dataset_metadata_uri,
    dataset_uri,
    invoke_request,
    normalize_target,
)
from dataverse_client.schema import CONTENT_TYPE_DATASET, CONTENT_TYPE_DATAVERSE

# Module logger
logger = logging.getLogger("dataverse_client.datasets")


def get_dataset(target, credential: str | None = None) -> ResourceHandle:
    """Fetch a dataset (.../datasets/{id})."""
    uri, credential = normalize_target(target, credential)
    return invoke_request(uri, credential)


def get_datasets(
    target,
    credential: str | None = None,
    recurse: bool = False,
) -> Iterator[ResourceHandle]:
    """Yield the datasets held by a dataverse.

    Items are visited in listing order: a dataset is fetched and yielded,
    and with ``recurse`` a child dataverse is expanded in place (pre-order).
    One request is issued per dataset and per visited dataverse.
    """
    uri, credential = normalize_target(target, credential)

    for item in get_dataverse_contents(uri, credential):
        kind = item.get("type")
        if kind == CONTENT_TYPE_DATASET:
            yield get_dataset(dataset_uri(uri, item["id"]), credential)
        elif kind == CONTENT_TYPE_DATAVERSE and recurse:
            yield from get_datasets(child_dataverse_uri(uri, item["id"]), credential, recurse=True)


def new_dataset(
    dataverse,
    descriptor: DataSetDescriptor,
    credential: str | None = None,
) -> ResourceHandle:
    """Create a dataset in a dataverse.

    The request is posted to .../dataverses/{alias}/datasets; the returned
    handle ({"id", "persistentId"}) points at .../datasets/{id}.

    Raises:
        RequestError: If the server does not report the new dataset's id
    """
    uri, credential = normalize_target(dataverse, credential)

    logger.info(f"Creating dataset in {uri}")
    created = invoke_request(create_dataset_uri(uri), credential, method="POST", body=descriptor)

    if not isinstance(created, dict) or "id" not in created:
        raise RequestError(f"Dataset creation in {uri} returned no dataset id")

    handle = ResourceHandle(created, dataset_uri(uri, created["id"]), credential)
    logger.info(f"Created dataset {created.get('persistentId', created['id'])}")
    return handle


def remove_dataset(target, credential: str | None = None):
    """Delete a dataset (only possible while it is an unpublished draft)."""
    uri, credential = normalize_target(target, credential)
    logger.info(f"Deleting dataset {uri}")
    return invoke_request(uri, credential, method="DELETE")


def get_dataset_files(
    target,
    version: str = VERSION_LATEST,
    credential: str | None = None,
) -> list[ResourceHandle]:
    """List the files of a dataset version.

    Args:
        target: Dataset handle or URI
        version: "major.minor", ":latest", ":latest-published" or ":draft"
    """
    uri, credential = normalize_target(target, credential)
    return invoke_request(dataset_files_uri(uri, version), credential) or []


def get_dataset_metadata(
    target,
    version: str = VERSION_LATEST,
    block: str | None = None,
    credential: str | None = None,
) -> ResourceHandle:
    """Fetch the metadata blocks of a dataset version, or a single block."""
    uri, credential = normalize_target(target, credential)
    return invoke_request(dataset_metadata_uri(uri, version, block), credential)


def get_metadata_field(metadata: dict, name: str) -> dict:
    """Pick one field out of a fetched metadata block.

    Args:
        metadata: A block ({"displayName", "fields"}) as returned by
            get_dataset_metadata(..., block=...)
        name: Field name (typeName)

    Returns:
        The field dict

    Raises:
        PreconditionError: If the block has no such field
    """
    for field in metadata.get("fields", []):
        if field.get("typeName") == name:
            return field
    raise PreconditionError(f"Metadata field '{name}' not found")
