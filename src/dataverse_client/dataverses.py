"""Dataverse operations: read, list, create, remove, role assignments.

Every function accepts either a ResourceHandle returned by an earlier call
or a raw dataverse URI plus a credential.
"""

import logging
from typing import Iterator

from dataverse_client.descriptors import DataverseDescriptor
from dataverse_client.errors import PreconditionError
from dataverse_client.request import (
    ResourceHandle,
    assignments_uri,
    child_dataverse_uri,
    contents_uri,
    invoke_request,
    normalize_target,
)
from dataverse_client.schema import CONTENT_TYPE_DATAVERSE
from dataverse_client.validation import is_empty

# Module logger
logger = logging.getLogger("dataverse_client.dataverses")


def get_dataverse(target, credential: str | None = None) -> ResourceHandle:
    """Fetch a dataverse."""
    uri, credential = normalize_target(target, credential)
    return invoke_request(uri, credential)


def get_dataverse_contents(target, credential: str | None = None) -> list[ResourceHandle]:
    """List the immediate children (dataverses and datasets) of a dataverse.

    The returned items carry the contents URI as their provenance; use
    get_child_dataverses or datasets.get_datasets to get fully addressed
    child handles.
    """
    uri, credential = normalize_target(target, credential)
    return invoke_request(contents_uri(uri), credential) or []


def get_child_dataverses(
    target,
    credential: str | None = None,
    recurse: bool = False,
) -> Iterator[ResourceHandle]:
    """Yield the child dataverses of a dataverse.

    Each child is fetched individually so its handle points at the child's
    own URI. With ``recurse`` every child is followed by its own descendants
    (pre-order). The listing is lazy: one request per visited node.
    """
    uri, credential = normalize_target(target, credential)

    for item in get_dataverse_contents(uri, credential):
        if item.get("type") != CONTENT_TYPE_DATAVERSE:
            continue
        child = get_dataverse(child_dataverse_uri(uri, item["id"]), credential)
        yield child
        if recurse:
            yield from get_child_dataverses(child, recurse=True)


def new_dataverse(
    parent,
    descriptor: DataverseDescriptor,
    credential: str | None = None,
) -> ResourceHandle:
    """Create a dataverse below ``parent``.

    The request is posted to the parent's URI; the returned handle points at
    the new dataverse (.../dataverses/{alias}).
    """
    uri, credential = normalize_target(parent, credential)
    child_uri = child_dataverse_uri(uri, descriptor.alias)

    logger.info(f"Creating dataverse '{descriptor.alias}' in {uri}")
    return invoke_request(uri, credential, method="POST", body=descriptor, request_uri=child_uri)


def remove_dataverse(target, credential: str | None = None):
    """Delete an (empty, unpublished) dataverse."""
    uri, credential = normalize_target(target, credential)
    logger.info(f"Deleting dataverse {uri}")
    return invoke_request(uri, credential, method="DELETE")


def get_role_assignments(target, credential: str | None = None) -> list[ResourceHandle]:
    """List the role assignments of a dataverse."""
    uri, credential = normalize_target(target, credential)
    return invoke_request(assignments_uri(uri), credential) or []


def add_role_assignment(
    target,
    assignee: str,
    role: str,
    credential: str | None = None,
) -> ResourceHandle:
    """Assign ``role`` to ``assignee`` (e.g. "@jdoe") on a dataverse.

    Raises:
        PreconditionError: If assignee or role is empty
    """
    if is_empty(assignee) or is_empty(role):
        raise PreconditionError("Both assignee and role are required")

    uri, credential = normalize_target(target, credential)
    logger.info(f"Assigning role '{role}' to {assignee} on {uri}")
    return invoke_request(
        assignments_uri(uri),
        credential,
        method="POST",
        body={"assignee": assignee, "role": role},
    )
