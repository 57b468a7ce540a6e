"""Request helper and resource addressing for the Dataverse native API.

Every call goes through the same steps:

1. ``normalize_target`` turns a ResourceHandle or a raw URI plus credential
   into a (URI, credential) pair.
2. Child and sibling addresses are derived from a parent URI by trimming
   trailing path segments and appending new ones (``derive_uri``).
3. ``invoke_request`` sends the call with the ``X-Dataverse-key`` header;
   any failure raises RequestError, nothing is retried.
4. The ``data`` member of the response envelope is returned as
   ResourceHandle(s) that remember the URI and credential they came from,
   so the result can be passed straight into the next call.
"""

import json
import logging
from urllib.parse import quote, urlsplit, urlunsplit

import requests

from dataverse_client.config import get_config
from dataverse_client.errors import PreconditionError, RequestError, ValidationError
from dataverse_client.serialize import to_wire
from dataverse_client.validation import validate_version

# Module logger
logger = logging.getLogger("dataverse_client.request")

AUTH_HEADER = "X-Dataverse-key"
DEFAULT_CONTENT_TYPE = "application/json"
ENVELOPE_STATUS_OK = "OK"

# Characters left unescaped in appended segments (":latest", "1.0", ...)
_SEGMENT_SAFE = ":-._~"


class ResourceHandle(dict):
    """Payload returned by the server, plus where and how it was fetched.

    Attributes:
        request_uri: Canonical address of this resource
        credential: API token used to fetch it
    """

    def __init__(self, data: dict, request_uri: str, credential: str):
        super().__init__(data)
        self.request_uri = request_uri
        self.credential = credential

    def __repr__(self):
        # Never include the credential
        return f"ResourceHandle({dict.__repr__(self)}, request_uri={self.request_uri!r})"


# ── Step 1: parameter normalization ──────────────────────────────────────


def normalize_target(target, credential: str | None = None) -> tuple[str, str]:
    """Resolve a handle or a raw URI to a (URI, credential) pair.

    Args:
        target: ResourceHandle or absolute URI string
        credential: API token; optional for handles (taken from the handle),
            required for raw URIs

    Returns:
        (uri, credential)

    Raises:
        PreconditionError: If no usable target or credential is given
    """
    if isinstance(target, ResourceHandle):
        uri = target.request_uri
        credential = credential or target.credential
    elif isinstance(target, str) and target:
        uri = target
    else:
        raise PreconditionError("A resource handle or a URI is required")

    if not uri:
        raise PreconditionError("Resource handle does not carry a request URI")
    if not credential:
        raise PreconditionError(f"A credential is required for {uri}")
    return uri, credential


# ── Step 2: address derivation ───────────────────────────────────────────


def derive_uri(uri: str, trim: int = 0, *segments) -> str:
    """Derive an address by dropping trailing path segments and appending new ones.

    Query string and fragment of the input are discarded. Appended segments
    may contain '/' to add several at once ("versions/:latest/files").

    Args:
        uri: Absolute parent URI
        trim: Number of trailing path segments to drop
        segments: Segments to append (converted with str())

    Returns:
        Derived absolute URI

    Raises:
        PreconditionError: If the URI is not absolute or has fewer than
            ``trim`` path segments
    """
    parts = urlsplit(uri)
    if not parts.scheme or not parts.netloc:
        raise PreconditionError(f"Not an absolute URI: {uri}")

    path_segments = [s for s in parts.path.split("/") if s]
    if trim < 0 or trim > len(path_segments):
        raise PreconditionError(
            f"Cannot drop {trim} segment(s) from {uri} ({len(path_segments)} available)"
        )

    kept = path_segments[:len(path_segments) - trim]
    for segment in segments:
        for piece in str(segment).split("/"):
            if piece:
                kept.append(quote(piece, safe=_SEGMENT_SAFE))

    return urlunsplit((parts.scheme, parts.netloc, "/" + "/".join(kept), "", ""))


def contents_uri(dataverse_uri: str) -> str:
    """.../dataverses/{alias} -> .../dataverses/{alias}/contents"""
    return derive_uri(dataverse_uri, 0, "contents")


def assignments_uri(dataverse_uri: str) -> str:
    """.../dataverses/{alias} -> .../dataverses/{alias}/assignments"""
    return derive_uri(dataverse_uri, 0, "assignments")


def sibling_uri(uri: str, name: str) -> str:
    """.../dataverses/{alias}/assignments -> .../dataverses/{alias}/{name}"""
    return derive_uri(uri, 1, name)


def child_dataverse_uri(dataverse_uri: str, child_id) -> str:
    """.../dataverses/{alias} -> .../dataverses/{child_id}"""
    return derive_uri(dataverse_uri, 1, child_id)


def dataset_base_uri(dataverse_uri: str) -> str:
    """.../dataverses/{alias} -> .../datasets"""
    return derive_uri(dataverse_uri, 2, "datasets")


def dataset_uri(dataverse_uri: str, dataset_id) -> str:
    """.../dataverses/{alias} -> .../datasets/{dataset_id}"""
    return derive_uri(dataverse_uri, 2, "datasets", dataset_id)


def create_dataset_uri(dataverse_uri: str) -> str:
    """.../dataverses/{alias} -> .../dataverses/{alias}/datasets"""
    return derive_uri(dataverse_uri, 0, "datasets")


def _check_version(version: str) -> None:
    if not validate_version(version):
        raise ValidationError(
            f"Invalid dataset version: {version!r} "
            "(expected major.minor, :latest, :latest-published or :draft)"
        )


def dataset_files_uri(dataset_uri: str, version: str = ":latest") -> str:
    """.../datasets/{id} -> .../datasets/{id}/versions/{version}/files"""
    _check_version(version)
    return derive_uri(dataset_uri, 0, "versions", version, "files")


def dataset_metadata_uri(dataset_uri: str, version: str = ":latest", block: str | None = None) -> str:
    """.../datasets/{id} -> .../datasets/{id}/versions/{version}/metadata[/{block}]"""
    _check_version(version)
    if block:
        return derive_uri(dataset_uri, 0, "versions", version, "metadata", block)
    return derive_uri(dataset_uri, 0, "versions", version, "metadata")


# ── Steps 3 and 4: dispatch, unwrap, attach provenance ───────────────────


def attach_provenance(data, request_uri: str, credential: str):
    """Wrap a payload in ResourceHandle(s).

    Objects become a ResourceHandle, lists become a list with every object
    element wrapped; anything else is returned unchanged.
    """
    if isinstance(data, dict):
        return ResourceHandle(data, request_uri, credential)
    if isinstance(data, list):
        return [
            ResourceHandle(item, request_uri, credential) if isinstance(item, dict) else item
            for item in data
        ]
    return data


def _encode_body(body) -> str | bytes:
    if isinstance(body, (str, bytes)):
        return body
    return json.dumps(to_wire(body))


def _error_message(response) -> str:
    """Best-effort extraction of the server's error message."""
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text


def invoke_request(
    uri: str,
    credential: str,
    method: str = "GET",
    body=None,
    content_type: str = DEFAULT_CONTENT_TYPE,
    timeout: float | None = None,
    request_uri: str | None = None,
):
    """Send one API call and unwrap the response envelope.

    Args:
        uri: Absolute URI to call
        credential: API token, sent as the X-Dataverse-key header
        method: HTTP method (default: GET)
        body: Descriptor or document (anything with to_request_body or
            to_dict), dict/list, or preencoded str/bytes
        content_type: Content-Type for requests with a body
        timeout: Timeout in seconds (default: from config)
        request_uri: Provenance URI for the result, when the resource lives
            somewhere other than ``uri`` (e.g. a newly created child)

    Returns:
        ResourceHandle, list of ResourceHandles, or the raw ``data`` value

    Raises:
        PreconditionError: If the URI or credential is missing
        RequestError: On transport failure, non-2xx status, a body that is
            not JSON, or an envelope status other than "OK"
    """
    if not uri:
        raise PreconditionError("A request URI is required")
    if not credential:
        raise PreconditionError(f"A credential is required for {uri}")

    headers = {AUTH_HEADER: credential, "Accept": "application/json"}
    data = None
    if body is not None:
        data = _encode_body(body)
        headers["Content-Type"] = content_type

    if timeout is None:
        timeout = get_config().api_timeout

    logger.debug(f"{method} {uri}")
    try:
        response = requests.request(method, uri, headers=headers, data=data, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Network error on {method} {uri}: {type(e).__name__}: {e}")
        raise RequestError(f"{method} {uri} failed: {type(e).__name__}: {e}") from e

    if not 200 <= response.status_code < 300:
        message = _error_message(response)
        logger.warning(f"{method} {uri} returned {response.status_code}: {message}")
        raise RequestError(
            f"{method} {uri} returned {response.status_code}: {message}",
            status_code=response.status_code,
            body=response.text,
        )

    try:
        envelope = response.json()
    except ValueError as e:
        logger.error(f"Failed to parse JSON response from {uri}: {e}")
        raise RequestError(
            f"{method} {uri} returned a non-JSON body",
            status_code=response.status_code,
            body=response.text,
        ) from e

    status = envelope.get("status") if isinstance(envelope, dict) else None
    if status != ENVELOPE_STATUS_OK:
        message = envelope.get("message", "") if isinstance(envelope, dict) else ""
        logger.warning(f"{method} {uri} reported status {status!r}: {message}")
        raise RequestError(
            f"{method} {uri} reported status {status!r}: {message}",
            status_code=response.status_code,
            body=response.text,
        )

    return attach_provenance(envelope.get("data"), request_uri or uri, credential)
