"""Citation metadata block: builder and in-place mutators.

``new_citation_metadata`` assembles the full block once. ``add_author`` and
``add_keyword`` then MUTATE the document they are given (no copy is made),
so several additions can be chained on one document without rebuilding it.
A document must not be mutated from several threads at once.
"""

import logging
from datetime import date, datetime
from typing import Mapping

from dataverse_client.compounds import new_author, new_description, new_keyword
from dataverse_client.errors import PreconditionError, ValidationError
from dataverse_client.fields import Document, MetadataField
from dataverse_client.schema import MetadataBlockDict
from dataverse_client.validation import (
    DEFAULT_DATE_FORMAT,
    format_date,
    format_person_name,
    is_empty,
)

# Module logger
logger = logging.getLogger("dataverse_client.citation")

CITATION_BLOCK = "citation"
CITATION_DISPLAY_NAME = "Citation Metadata"


class CitationDocument:
    """The ``citation`` metadata block: a display name and an ordered field list."""

    def __init__(self, fields: list[MetadataField], display_name: str = CITATION_DISPLAY_NAME):
        names = [field.name for field in fields]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValidationError(f"Citation block has duplicate fields: {', '.join(duplicates)}")
        self.display_name = display_name
        self.fields = fields

    def get_field(self, name: str) -> MetadataField | None:
        """Return the field with the given name, or None."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @property
    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]

    def to_dict(self) -> MetadataBlockDict:
        return {
            "displayName": self.display_name,
            "fields": [field.to_dict() for field in self.fields],
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "CitationDocument":
        """Parse a citation block from its wire form.

        Raises:
            ValidationError: If the block or one of its fields is malformed
        """
        if not isinstance(data, Mapping) or not isinstance(data.get("fields"), list):
            raise ValidationError("Malformed metadata block: 'fields' list missing")
        fields = [MetadataField.from_dict(f) for f in data["fields"]]
        return cls(fields, data.get("displayName", CITATION_DISPLAY_NAME))

    def __eq__(self, other):
        if not isinstance(other, CitationDocument):
            return NotImplemented
        return self.display_name == other.display_name and self.fields == other.fields

    def __repr__(self):
        return f"CitationDocument(fields={self.field_names!r})"


def _as_list(value) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _optional(fields: list[MetadataField], name: str, value) -> None:
    """Append a field only when its value is non-empty."""
    if is_empty(value):
        return
    if isinstance(value, (list, tuple)):
        value = [v for v in value if not is_empty(v)]
        if not value:
            return
    fields.append(MetadataField(name, value))


def _optional_list(fields: list[MetadataField], name: str, value) -> None:
    """Append a multi-valued primitive field; a bare string becomes one element."""
    if is_empty(value):
        return
    _optional(fields, name, _as_list(value))


def new_citation_metadata(
    title: str,
    authors: Document | list[Document],
    contact: Document,
    descriptions: str | list[str],
    depositor_surname: str,
    depositor_christian_name: str,
    deposit_date: date | datetime | str | None = None,
    *,
    subtitle: str | None = None,
    alternative_title: str | None = None,
    alternative_url: str | None = None,
    notes: str | None = None,
    production_date: date | datetime | str | None = None,
    production_place: str | None = None,
    distribution_date: date | datetime | str | None = None,
    kind_of_data: str | list[str] | None = None,
    related_material: str | list[str] | None = None,
    related_datasets: str | list[str] | None = None,
    other_references: str | list[str] | None = None,
    data_sources: str | list[str] | None = None,
    origin_of_sources: str | None = None,
    characteristic_of_sources: str | None = None,
    access_to_sources: str | None = None,
    keywords: list[Document] | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> CitationDocument:
    """Build a citation metadata block.

    Args:
        title: Dataset title
        authors: One author Document (see compounds.new_author) or a list
        contact: Contact Document (see compounds.new_contact)
        descriptions: One description text or a list; all share one date stamp
        depositor_surname: Depositor family name
        depositor_christian_name: Depositor given name
        deposit_date: Date of deposit (default: today)
        keywords: Optional keyword Documents, appended after the fixed fields
        date_format: strftime format for all dates built from date objects

    Remaining keyword arguments map onto the optional citation fields and are
    only included when non-empty.

    Returns:
        CitationDocument with fields in the service's canonical order

    Raises:
        ValidationError: On a missing title, zero authors, or zero descriptions
    """
    if is_empty(title):
        raise ValidationError("Title is required")

    author_list = [a for a in _as_list(authors) if a]
    if not author_list:
        raise ValidationError("At least one author is required")

    if not contact:
        raise ValidationError("A dataset contact is required")

    description_texts = [d for d in _as_list(descriptions) if not is_empty(d)]
    if not description_texts:
        raise ValidationError("At least one description is required")

    if is_empty(depositor_surname) or is_empty(depositor_christian_name):
        raise ValidationError("Depositor surname and christian name are required")

    # One stamp for every description built by this call
    description_date = format_date(None, date_format)
    description_list = [new_description(text, description_date) for text in description_texts]

    fields = [MetadataField("title", title)]
    _optional(fields, "subtitle", subtitle)
    _optional(fields, "alternativeTitle", alternative_title)
    _optional(fields, "alternativeURL", alternative_url)
    fields.append(MetadataField("author", author_list))
    fields.append(MetadataField("datasetContact", [contact]))
    fields.append(MetadataField("dsDescription", description_list))
    _optional(fields, "notesText", notes)
    if not is_empty(production_date):
        fields.append(MetadataField("productionDate", format_date(production_date, date_format)))
    _optional(fields, "productionPlace", production_place)
    if not is_empty(distribution_date):
        fields.append(MetadataField("distributionDate", format_date(distribution_date, date_format)))
    fields.append(MetadataField("depositor", format_person_name(depositor_surname, depositor_christian_name)))
    fields.append(MetadataField("dateOfDeposit", format_date(deposit_date, date_format)))
    _optional_list(fields, "kindOfData", kind_of_data)
    _optional_list(fields, "relatedMaterial", related_material)
    _optional_list(fields, "relatedDatasets", related_datasets)
    _optional_list(fields, "otherReferences", other_references)
    _optional_list(fields, "dataSources", data_sources)
    _optional(fields, "originOfSources", origin_of_sources)
    _optional(fields, "characteristicOfSources", characteristic_of_sources)
    _optional(fields, "accessToSources", access_to_sources)

    document = CitationDocument(fields)
    for keyword in keywords or []:
        _append_keyword(document, keyword)

    logger.debug(f"Built citation metadata with {len(fields)} fields")
    return document


def add_author(
    document: CitationDocument,
    surname: str,
    christian_name: str,
    affiliation: str | None = None,
    orcid: str | None = None,
    *,
    return_document: bool = False,
) -> CitationDocument | None:
    """Append an author to the document's ``author`` field, in place.

    Args:
        document: Citation document to mutate
        surname, christian_name, affiliation, orcid: See compounds.new_author
        return_document: Return the mutated document to allow chaining

    Returns:
        The same document if return_document is set, otherwise None

    Raises:
        ValidationError: On invalid author input
        PreconditionError: If the document has no ``author`` field
    """
    author = new_author(surname, christian_name, affiliation, orcid)

    field = document.get_field("author")
    if field is None:
        raise PreconditionError("Citation document has no 'author' field")
    field.append(author)

    logger.debug(f"Added author {author['authorName'].value!r} ({len(field.value)} total)")
    return document if return_document else None


def _append_keyword(document: CitationDocument, keyword: Document) -> None:
    field = document.get_field("keyword")
    if field is None:
        document.fields.append(MetadataField("keyword", [keyword]))
    else:
        field.append(keyword)


def add_keyword(
    document: CitationDocument,
    value: str,
    vocabulary: str | None = None,
    *,
    custom_vocabulary: str | None = None,
    custom_vocabulary_uri: str | None = None,
    return_document: bool = False,
) -> CitationDocument | None:
    """Append a keyword to the document, in place.

    The ``keyword`` field is created at the end of the field list on first
    use, and extended afterwards.

    Returns:
        The same document if return_document is set, otherwise None

    Raises:
        ValidationError: On invalid keyword input (see compounds.new_keyword)
    """
    keyword = new_keyword(
        value,
        vocabulary,
        custom_vocabulary=custom_vocabulary,
        custom_vocabulary_uri=custom_vocabulary_uri,
    )
    _append_keyword(document, keyword)

    logger.debug(f"Added keyword {value!r}")
    return document if return_document else None
