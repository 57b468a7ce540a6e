"""Dataverse native API schema - subset of the JSON structures used by this package.

Full API documentation:
    https://guides.dataverse.org/en/latest/api/native-api.html

This file documents the JSON structure we produce and consume. If the API
changes, update these types and the builders in fields.py, citation.py and
descriptors.py accordingly.
"""

from typing import Any, TypedDict


# =============================================================================
# Field Type Classes
# =============================================================================

TYPE_PRIMITIVE = "primitive"
TYPE_COMPOUND = "compound"
TYPE_CONTROLLED_VOCABULARY = "controlledVocabulary"

TYPE_CLASSES = frozenset({
    TYPE_PRIMITIVE,
    TYPE_COMPOUND,
    TYPE_CONTROLLED_VOCABULARY,
})


# =============================================================================
# Response Envelope
# =============================================================================

class Envelope(TypedDict, total=False):
    """Uniform response wrapper returned by every native API call.

    Note: Only "data" is handed back to callers; "status" must be "OK".
    """
    status: str    # "OK" or "ERROR"
    data: Any      # Payload: object, list, or message object
    message: str   # Present on errors


# =============================================================================
# Metadata Fields
# =============================================================================

class FieldDict(TypedDict):
    """Single metadata field.

    Path: datasetVersion/metadataBlocks/{block}/fields[]
    Docs: https://guides.dataverse.org/en/latest/api/native-api.html#create-a-dataset-in-a-dataverse-collection

    Value shapes:
        primitive, single:      "text"
        primitive, multiple:    ["a", "b"]
        compound, single:       {"subName": FieldDict, ...}
        compound, multiple:     [{"subName": FieldDict, ...}, ...]
    """
    typeName: str
    multiple: bool
    typeClass: str  # one of TYPE_CLASSES
    value: Any


class MetadataBlockDict(TypedDict, total=False):
    """A named metadata block such as "citation"."""
    displayName: str
    fields: list[FieldDict]


# =============================================================================
# Dataset
# =============================================================================

class DatasetVersionDict(TypedDict, total=False):
    """Dataset version as submitted on creation.

    Endpoint: POST {base}/dataverses/{alias}/datasets
    Body: {"datasetVersion": DatasetVersionDict}
    """
    license: str
    termsOfUse: str
    metadataBlocks: dict[str, MetadataBlockDict]


class CreatedDataset(TypedDict, total=False):
    """Payload returned when a dataset is created."""
    id: int
    persistentId: str  # "doi:10.5072/FK2/ABCDEF"


# =============================================================================
# Dataverse
# =============================================================================

class DataverseContact(TypedDict):
    """Contact e-mail of a dataverse."""
    contactEmail: str


class DataverseDict(TypedDict, total=False):
    """Dataverse as submitted on creation.

    Endpoint: POST {base}/dataverses/{parent}
    """
    alias: str
    name: str
    dataverseContacts: list[DataverseContact]
    dataverseType: str  # see dataverse_client.DATAVERSE_TYPES
    affiliation: str
    description: str


class ContentItem(TypedDict, total=False):
    """Element of a dataverse contents listing.

    Endpoint: GET {base}/dataverses/{alias}/contents
    """
    type: str   # "dataverse" or "dataset"
    id: int
    title: str          # dataverses only
    identifier: str     # datasets only
    persistentUrl: str  # datasets only


class RoleAssignment(TypedDict, total=False):
    """Role assignment request body.

    Endpoint: POST {base}/dataverses/{alias}/assignments
    """
    assignee: str  # "@username", ":authenticated-users", ...
    role: str      # "curator", "admin", ...


CONTENT_TYPE_DATAVERSE = "dataverse"
CONTENT_TYPE_DATASET = "dataset"
