"""Typed metadata field model.

A field value is one of:
- Scalar:   str, int, float or bool
- Document: mapping of sub-field name to MetadataField (a compound value)
- a non-empty list of Scalars, or a non-empty list of Documents

The kind of value is classified once, when the field is constructed, and
determines ``multiple`` and ``type_class``.
"""

from typing import Any, Mapping, Union

from dataverse_client.errors import ValidationError
from dataverse_client.schema import (
    TYPE_CLASSES,
    TYPE_COMPOUND,
    TYPE_CONTROLLED_VOCABULARY,
    TYPE_PRIMITIVE,
    FieldDict,
)


Scalar = Union[str, int, float, bool]
# A Document maps sub-field names to MetadataField instances
Document = dict[str, "MetadataField"]


def _is_document(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def _check_document(name: str, document: Mapping) -> Document:
    """Ensure every entry of a compound value is a MetadataField."""
    if not document:
        raise ValidationError(f"Compound value of '{name}' must contain at least one sub-field")
    for key, sub_field in document.items():
        if not isinstance(sub_field, MetadataField):
            raise ValidationError(
                f"Sub-field '{key}' of '{name}' must be a MetadataField, got {type(sub_field).__name__}"
            )
    return dict(document)


def _check_scalar(name: str, value: Any) -> Scalar:
    if not _is_scalar(value):
        raise ValidationError(f"Unsupported value type for '{name}': {type(value).__name__}")
    if isinstance(value, str) and not value.strip():
        raise ValidationError(f"Value of '{name}' must not be empty")
    return value


class MetadataField:
    """A single named metadata value with its multiplicity and type class.

    Attributes:
        name: Field name (``typeName`` on the wire)
        multiple: True iff the value is a list
        type_class: "primitive", "compound" or "controlledVocabulary"
        value: Scalar, Document, or list of either
    """

    def __init__(self, name: str, value: Any, controlled_vocabulary: bool = False):
        """Create a field, classifying its value.

        Args:
            name: Non-empty field name
            value: Scalar, Document, or non-empty list/tuple of either
            controlled_vocabulary: Mark a single primitive value as drawn
                from a controlled vocabulary

        Raises:
            ValidationError: If the name or value violates the field invariants
        """
        if not name or not isinstance(name, str):
            raise ValidationError("Field name must be a non-empty string")
        if value is None:
            raise ValidationError(f"Value of '{name}' must not be None")

        self.name = name

        if isinstance(value, (list, tuple)):
            if len(value) == 0:
                raise ValidationError(f"Field '{name}': at least one element required")
            self.multiple = True
            if all(_is_document(v) for v in value):
                self.type_class = TYPE_COMPOUND
                self.value = [_check_document(name, v) for v in value]
            elif any(_is_document(v) for v in value):
                raise ValidationError(f"Field '{name}' mixes compound and primitive elements")
            else:
                self.type_class = TYPE_PRIMITIVE
                self.value = [_check_scalar(name, v) for v in value]
        elif _is_document(value):
            self.multiple = False
            self.type_class = TYPE_COMPOUND
            self.value = _check_document(name, value)
        else:
            self.multiple = False
            self.type_class = TYPE_PRIMITIVE
            self.value = _check_scalar(name, value)

        if controlled_vocabulary:
            if self.type_class == TYPE_COMPOUND:
                raise ValidationError(f"Field '{name}': compound values cannot be a controlled vocabulary")
            if self.multiple:
                raise ValidationError(f"Field '{name}': multi-valued fields cannot be a controlled vocabulary")
            self.type_class = TYPE_CONTROLLED_VOCABULARY

    @property
    def is_compound(self) -> bool:
        return self.type_class == TYPE_COMPOUND

    def append(self, value: Any) -> None:
        """Append an element to a multi-valued field, in place.

        The element must be of the same kind (Document or Scalar) as the
        existing elements.

        Raises:
            ValidationError: If the field is single-valued or the kind differs
        """
        if not self.multiple:
            raise ValidationError(f"Cannot append to single-valued field '{self.name}'")
        if self.is_compound:
            if not _is_document(value):
                raise ValidationError(f"Field '{self.name}' only accepts compound elements")
            self.value.append(_check_document(self.name, value))
        else:
            if _is_document(value):
                raise ValidationError(f"Field '{self.name}' only accepts primitive elements")
            self.value.append(_check_scalar(self.name, value))

    def to_dict(self) -> FieldDict:
        """Return the JSON-serializable wire form of this field."""
        if self.is_compound:
            if self.multiple:
                value = [_document_to_dict(doc) for doc in self.value]
            else:
                value = _document_to_dict(self.value)
        elif self.multiple:
            value = list(self.value)
        else:
            value = self.value

        return {
            "typeName": self.name,
            "multiple": self.multiple,
            "typeClass": self.type_class,
            "value": value,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "MetadataField":
        """Parse a field from its wire form.

        The ``multiple`` flag and ``typeClass`` in the input are checked
        against the classification of the parsed value.

        Raises:
            ValidationError: If the input is malformed or inconsistent
        """
        try:
            name = data["typeName"]
            raw_value = data["value"]
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Malformed metadata field: {e}") from e

        type_class = data.get("typeClass", TYPE_PRIMITIVE)
        if type_class not in TYPE_CLASSES:
            raise ValidationError(f"Field '{name}': unknown typeClass '{type_class}'")

        if type_class == TYPE_COMPOUND:
            if isinstance(raw_value, list):
                value = [_document_from_dict(v) for v in raw_value]
            else:
                value = _document_from_dict(raw_value)
        else:
            value = raw_value

        field = cls(name, value, controlled_vocabulary=(type_class == TYPE_CONTROLLED_VOCABULARY))

        if "multiple" in data and bool(data["multiple"]) != field.multiple:
            raise ValidationError(f"Field '{name}': 'multiple' flag does not match its value")
        if field.type_class != type_class:
            raise ValidationError(f"Field '{name}': typeClass '{type_class}' does not match its value")
        return field

    def __eq__(self, other):
        if not isinstance(other, MetadataField):
            return NotImplemented
        return (
            self.name == other.name
            and self.multiple == other.multiple
            and self.type_class == other.type_class
            and self.value == other.value
        )

    def __repr__(self):
        return (
            f"MetadataField(name={self.name!r}, multiple={self.multiple}, "
            f"type_class={self.type_class!r}, value={self.value!r})"
        )


def _document_to_dict(document: Document) -> dict[str, FieldDict]:
    return {key: sub_field.to_dict() for key, sub_field in document.items()}


def _document_from_dict(data: Any) -> Document:
    if not isinstance(data, Mapping):
        raise ValidationError(f"Compound value must be an object, got {type(data).__name__}")
    return {key: MetadataField.from_dict(sub) for key, sub in data.items()}


def primitive(name: str, value: Scalar) -> MetadataField:
    """Shorthand for a single-valued primitive field."""
    return MetadataField(name, value)


def controlled(name: str, value: str) -> MetadataField:
    """Shorthand for a single controlled-vocabulary field."""
    return MetadataField(name, value, controlled_vocabulary=True)
