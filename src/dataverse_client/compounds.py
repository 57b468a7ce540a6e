"""Builders for the compound values of the citation block.

Each builder turns plain scalar inputs into a Document (a mapping of
sub-field name to MetadataField) ready to be used as an element of the
``author``, ``datasetContact``, ``dsDescription`` or ``keyword`` field.
"""

from datetime import date, datetime

from dataverse_client.errors import ValidationError
from dataverse_client.fields import Document, controlled, primitive
from dataverse_client.validation import (
    DEFAULT_DATE_FORMAT,
    format_date,
    format_person_name,
    is_empty,
    validate_email,
    validate_orcid_id,
)

AUTHOR_IDENTIFIER_SCHEME = "ORCID"

# Built-in keyword vocabularies: key -> (keywordVocabulary, keywordVocabularyURI)
KEYWORD_VOCABULARIES = {
    "GND": ("GND-Sachgruppen", "https://d-nb.info/standards/vocab/gnd/gnd-sc.html"),
    "LCSH": ("LCSH", "https://id.loc.gov/authorities/subjects.html"),
    "MeSH": ("MeSH", "https://www.nlm.nih.gov/mesh/meshhome.html"),
}

# Case-insensitive lookup ("Lcsh", "mesh", ...)
_VOCABULARY_KEYS = {key.lower(): key for key in KEYWORD_VOCABULARIES}


def _require(value, what: str) -> None:
    if is_empty(value):
        raise ValidationError(f"{what} is required")


def new_author(
    surname: str,
    christian_name: str,
    affiliation: str | None = None,
    orcid: str | None = None,
) -> Document:
    """Build an ``author`` element.

    Args:
        surname: Family name
        christian_name: Given name
        affiliation: Optional affiliation
        orcid: Optional ORCID iD; adds the identifier scheme and identifier
            sub-fields together

    Returns:
        Document with authorName and the optional sub-fields

    Raises:
        ValidationError: On a missing name or a malformed ORCID iD
    """
    _require(surname, "Author surname")
    _require(christian_name, "Author christian name")

    author = {"authorName": primitive("authorName", format_person_name(surname, christian_name))}

    if not is_empty(affiliation):
        author["authorAffiliation"] = primitive("authorAffiliation", affiliation)

    if not is_empty(orcid):
        if not validate_orcid_id(orcid):
            raise ValidationError(f"Invalid ORCID ID format: {orcid}")
        author["authorIdentifierScheme"] = controlled("authorIdentifierScheme", AUTHOR_IDENTIFIER_SCHEME)
        author["authorIdentifier"] = primitive("authorIdentifier", orcid)

    return author


def new_contact(
    surname: str,
    christian_name: str,
    email: str,
    affiliation: str | None = None,
) -> Document:
    """Build a ``datasetContact`` element.

    Raises:
        ValidationError: On a missing name or an invalid e-mail address
    """
    _require(surname, "Contact surname")
    _require(christian_name, "Contact christian name")
    if not validate_email(email):
        raise ValidationError(f"Invalid contact e-mail address: {email}")

    contact = {
        "datasetContactName": primitive("datasetContactName", format_person_name(surname, christian_name)),
        "datasetContactEmail": primitive("datasetContactEmail", email),
    }
    if not is_empty(affiliation):
        contact["datasetContactAffiliation"] = primitive("datasetContactAffiliation", affiliation)
    return contact


def new_description(
    text: str,
    description_date: date | datetime | str | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Document:
    """Build a ``dsDescription`` element.

    The date defaults to the current date at construction time.
    """
    _require(text, "Description text")
    return {
        "dsDescriptionValue": primitive("dsDescriptionValue", text),
        "dsDescriptionDate": primitive("dsDescriptionDate", format_date(description_date, date_format)),
    }


def resolve_vocabulary(key: str) -> tuple[str, str]:
    """Look up a built-in keyword vocabulary.

    Args:
        key: "GND", "LCSH" or "MeSH" (case-insensitive)

    Returns:
        (display name, URI)

    Raises:
        ValidationError: If the vocabulary is not built in
    """
    canonical = _VOCABULARY_KEYS.get(key.lower()) if isinstance(key, str) else None
    if canonical is None:
        raise ValidationError(f"unsupported vocabulary: {key}")
    return KEYWORD_VOCABULARIES[canonical]


def new_keyword(
    value: str,
    vocabulary: str | None = None,
    *,
    custom_vocabulary: str | None = None,
    custom_vocabulary_uri: str | None = None,
) -> Document:
    """Build a ``keyword`` element.

    A keyword names its vocabulary either through a built-in key
    (``vocabulary``) or through ``custom_vocabulary`` and an optional
    ``custom_vocabulary_uri``. The two modes are mutually exclusive.

    Raises:
        ValidationError: On an empty value, an unsupported built-in key,
            or a mix of both selection modes
    """
    _require(value, "Keyword value")

    if not is_empty(vocabulary) and not (is_empty(custom_vocabulary) and is_empty(custom_vocabulary_uri)):
        raise ValidationError("Use either a built-in vocabulary or a custom vocabulary, not both")
    if not is_empty(custom_vocabulary_uri) and is_empty(custom_vocabulary):
        raise ValidationError("A custom vocabulary URI requires a custom vocabulary name")

    keyword = {"keywordValue": primitive("keywordValue", value)}

    if not is_empty(vocabulary):
        name, uri = resolve_vocabulary(vocabulary)
        keyword["keywordVocabulary"] = primitive("keywordVocabulary", name)
        keyword["keywordVocabularyURI"] = primitive("keywordVocabularyURI", uri)
    elif not is_empty(custom_vocabulary):
        keyword["keywordVocabulary"] = primitive("keywordVocabulary", custom_vocabulary)
        if not is_empty(custom_vocabulary_uri):
            keyword["keywordVocabularyURI"] = primitive("keywordVocabularyURI", custom_vocabulary_uri)

    return keyword
