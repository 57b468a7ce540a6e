"""Dataset and dataverse descriptors submitted on creation."""

import logging
from typing import Mapping

from dataverse_client import DATAVERSE_TYPES, DEFAULT_DATAVERSE_TYPE
from dataverse_client.citation import CITATION_BLOCK, CitationDocument
from dataverse_client.errors import ValidationError
from dataverse_client.fields import MetadataField
from dataverse_client.schema import DatasetVersionDict, DataverseDict, MetadataBlockDict
from dataverse_client.validation import is_empty, validate_alias, validate_email

# Module logger
logger = logging.getLogger("dataverse_client.descriptors")

DEFAULT_LICENSE = "CC0"


class CustomMetadataBlock:
    """A caller-defined metadata block (e.g. "geospatial", "socialscience")."""

    def __init__(self, display_name: str, fields: list[MetadataField]):
        if not fields:
            raise ValidationError(f"Metadata block '{display_name}' needs at least one field")
        names = [f.name for f in fields]
        if len(names) != len(set(names)):
            raise ValidationError(f"Metadata block '{display_name}' has duplicate field names")
        self.display_name = display_name
        self.fields = list(fields)

    def to_dict(self) -> MetadataBlockDict:
        return {
            "displayName": self.display_name,
            "fields": [field.to_dict() for field in self.fields],
        }


def _block_to_dict(block) -> dict:
    """Serialize a block object, passing raw mappings through unchanged."""
    if hasattr(block, "to_dict"):
        return block.to_dict()
    if isinstance(block, Mapping):
        return dict(block)
    raise ValidationError(f"Unsupported metadata block type: {type(block).__name__}")


class DataSetDescriptor:
    """License, terms of use, and the metadata blocks of a new dataset."""

    def __init__(self, license: str, terms_of_use: str | None, metadata_blocks: dict):
        self.license = license
        self.terms_of_use = terms_of_use
        self.metadata_blocks = metadata_blocks

    def to_dict(self) -> DatasetVersionDict:
        """Wire form of the dataset version.

        ``termsOfUse`` is omitted when no terms of use were given; the server
        then applies the license alone.
        """
        data = {"license": self.license}
        if self.terms_of_use:
            data["termsOfUse"] = self.terms_of_use
        data["metadataBlocks"] = {
            name: _block_to_dict(block) for name, block in self.metadata_blocks.items()
        }
        return data

    def to_request_body(self) -> dict:
        """Body for POST .../dataverses/{alias}/datasets."""
        return {"datasetVersion": self.to_dict()}


def new_dataset_descriptor(
    citation: CitationDocument,
    license: str = DEFAULT_LICENSE,
    terms_of_use: str | None = None,
    *,
    blocks: Mapping[str, CustomMetadataBlock] | None = None,
    other_metadata: Mapping[str, Mapping] | None = None,
) -> DataSetDescriptor:
    """Assemble a dataset descriptor.

    Blocks are keyed by block name. ``citation`` always comes first, then the
    named ``blocks``, then ``other_metadata``. When a key is already taken the
    later entry is dropped.

    Args:
        citation: The citation block
        license: License name
        terms_of_use: Optional terms of use text
        blocks: Named CustomMetadataBlock instances
        other_metadata: Raw block dicts in wire form

    Raises:
        ValidationError: If the citation block or the license is missing
    """
    if citation is None:
        raise ValidationError("Citation metadata is required")
    if is_empty(license):
        raise ValidationError("License is required")

    metadata_blocks = {CITATION_BLOCK: citation}

    for source in (blocks, other_metadata):
        for name, block in (source or {}).items():
            if name in metadata_blocks:
                logger.debug(f"Ignoring duplicate metadata block '{name}'")
                continue
            metadata_blocks[name] = block

    return DataSetDescriptor(license, terms_of_use, metadata_blocks)


class DataverseDescriptor:
    """Alias, name, contacts and category of a new dataverse."""

    def __init__(
        self,
        alias: str,
        name: str,
        contacts: list[str],
        dataverse_type: str = DEFAULT_DATAVERSE_TYPE,
        affiliation: str | None = None,
        description: str | None = None,
    ):
        self.alias = alias
        self.name = name
        self.contacts = contacts
        self.dataverse_type = dataverse_type
        self.affiliation = affiliation
        self.description = description

    def to_dict(self) -> DataverseDict:
        data = {
            "alias": self.alias,
            "name": self.name,
            "dataverseContacts": [{"contactEmail": email} for email in self.contacts],
            "dataverseType": self.dataverse_type,
        }
        if self.affiliation:
            data["affiliation"] = self.affiliation
        if self.description:
            data["description"] = self.description
        return data

    def to_request_body(self) -> dict:
        """Body for POST .../dataverses/{parent}."""
        return self.to_dict()


def new_dataverse_descriptor(
    alias: str,
    name: str,
    contacts: str | list[str],
    dataverse_type: str = DEFAULT_DATAVERSE_TYPE,
    affiliation: str | None = None,
    description: str | None = None,
) -> DataverseDescriptor:
    """Assemble and validate a dataverse descriptor.

    Raises:
        ValidationError: On an unsafe alias, a missing name, no contacts,
            an invalid contact e-mail, or an unknown dataverse type
    """
    if not validate_alias(alias):
        raise ValidationError(
            f"Invalid dataverse alias: {alias!r} (allowed: letters, digits, '_' and '-')"
        )
    if is_empty(name):
        raise ValidationError("Dataverse name is required")

    if isinstance(contacts, str):
        contacts = [contacts]
    contacts = [c for c in (contacts or []) if not is_empty(c)]
    if not contacts:
        raise ValidationError("At least one contact e-mail is required")
    for email in contacts:
        if not validate_email(email):
            raise ValidationError(f"Invalid contact e-mail address: {email}")

    if dataverse_type not in DATAVERSE_TYPES:
        raise ValidationError(
            f"Unknown dataverse type: {dataverse_type} (expected one of {', '.join(DATAVERSE_TYPES)})"
        )

    return DataverseDescriptor(alias, name, contacts, dataverse_type, affiliation, description)
