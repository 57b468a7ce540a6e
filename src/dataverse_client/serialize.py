"""JSON export of documents and descriptors, and parse-back of citation blocks.

Anything with a ``to_request_body()`` or ``to_dict()`` method is exported in
the exact wire form the service expects; no extra keys are added.
"""

import json
from pathlib import Path
from typing import Any

from dataverse_client.citation import CitationDocument
from dataverse_client.errors import ValidationError


def to_wire(obj) -> Any:
    """Return the JSON-serializable wire form of a document or descriptor."""
    if hasattr(obj, "to_request_body"):
        return obj.to_request_body()
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return obj


def dumps(obj, indent: int | None = None) -> str:
    """Serialize a document, descriptor or plain value to a JSON string."""
    return json.dumps(to_wire(obj), indent=indent, ensure_ascii=False)


def write_json(obj, path: Path, indent: int | None = 2) -> Path:
    """Write a document or descriptor to a JSON file, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(obj, indent=indent), encoding="utf-8")
    return path


def load_citation_metadata(source: str | dict) -> CitationDocument:
    """Parse a citation block from a JSON string or an already decoded dict.

    Accepts the bare block ({"displayName", "fields"}) or a full dataset
    body ({"datasetVersion": {"metadataBlocks": {"citation": ...}}}).

    Raises:
        ValidationError: If the input is not valid JSON or not a citation block
    """
    if isinstance(source, str):
        try:
            data = json.loads(source)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e}") from e
    else:
        data = source

    if isinstance(data, dict) and "datasetVersion" in data:
        data = data["datasetVersion"]
    if isinstance(data, dict) and "metadataBlocks" in data:
        data = data["metadataBlocks"].get("citation")
        if data is None:
            raise ValidationError("No citation block in dataset metadata")

    return CitationDocument.from_dict(data)
