"""Tests for dataverse_client.datasets module."""

import json

import pytest

from dataverse_client.datasets import (
    get_dataset,
    get_dataset_files,
    get_dataset_metadata,
    get_datasets,
    get_metadata_field,
    new_dataset,
    remove_dataset,
)
from dataverse_client.descriptors import new_dataset_descriptor
from dataverse_client.errors import PreconditionError, RequestError, ValidationError
from dataverse_client.request import ResourceHandle

BASE = "https://demo.dataverse.org/api"


@pytest.fixture
def tree(mock_requests, response):
    """visus holds dataset 1, child dataverse 10 (dataset 2), then dataset 3."""
    routes = {
        f"{BASE}/dataverses/visus/contents": [
            {"type": "dataset", "id": 1},
            {"type": "dataverse", "id": 10},
            {"type": "dataset", "id": 3},
        ],
        f"{BASE}/dataverses/10/contents": [{"type": "dataset", "id": 2}],
        f"{BASE}/datasets/1": {"id": 1},
        f"{BASE}/datasets/2": {"id": 2},
        f"{BASE}/datasets/3": {"id": 3},
    }

    def serve(method, uri, **kwargs):
        return response(routes[uri])

    mock_requests.request.side_effect = serve
    return mock_requests


# ── get_datasets ─────────────────────────────────────────────────────────


def test_get_datasets_immediate(tree, visus_uri, token):
    datasets = list(get_datasets(visus_uri, token))
    assert [d["id"] for d in datasets] == [1, 3]
    assert datasets[0].request_uri == f"{BASE}/datasets/1"


def test_get_datasets_recursive_pre_order(tree, visus_uri, token):
    datasets = list(get_datasets(visus_uri, token, recurse=True))
    assert [d["id"] for d in datasets] == [1, 2, 3]
    assert datasets[1].request_uri == f"{BASE}/datasets/2"


def test_get_datasets_one_request_per_node(tree, visus_uri, token):
    list(get_datasets(visus_uri, token, recurse=True))
    # 2 dataverse listings + 3 dataset reads
    assert tree.request.call_count == 5


def test_get_dataset_from_handle(tree, token):
    handle = ResourceHandle({"id": 2}, f"{BASE}/datasets/2", token)
    assert get_dataset(handle)["id"] == 2


# ── new_dataset ──────────────────────────────────────────────────────────


def test_new_dataset(mock_requests, response, visus_uri, token, sample_citation):
    mock_requests.request.return_value = response({"id": 42, "persistentId": "doi:10.5072/FK2/ABC"})
    descriptor = new_dataset_descriptor(sample_citation, "CC0")

    created = new_dataset(visus_uri, descriptor, token)

    args, kwargs = mock_requests.request.call_args
    assert args == ("POST", f"{visus_uri}/datasets")
    body = json.loads(kwargs["data"])
    assert body["datasetVersion"]["metadataBlocks"]["citation"]["displayName"] == "Citation Metadata"
    assert created["persistentId"] == "doi:10.5072/FK2/ABC"
    assert created.request_uri == f"{BASE}/datasets/42"
    assert created.credential == token


def test_new_dataset_without_id_fails(mock_requests, response, visus_uri, token, sample_citation):
    mock_requests.request.return_value = response({"persistentId": "doi:10.5072/FK2/ABC"})
    with pytest.raises(RequestError):
        new_dataset(visus_uri, new_dataset_descriptor(sample_citation), token)


def test_new_dataset_then_files_chain(mock_requests, response, visus_uri, token, sample_citation):
    mock_requests.request.side_effect = [
        response({"id": 42, "persistentId": "doi:10.5072/FK2/ABC"}),
        response([{"label": "data.csv"}]),
    ]

    created = new_dataset(visus_uri, new_dataset_descriptor(sample_citation), token)
    files = get_dataset_files(created, ":draft")

    assert mock_requests.request.call_args.args[1] == f"{BASE}/datasets/42/versions/:draft/files"
    assert files[0]["label"] == "data.csv"


# ── remove / files / metadata ────────────────────────────────────────────


def test_remove_dataset(mock_requests, response, token):
    mock_requests.request.return_value = response({"message": "Dataset 42 deleted"})
    remove_dataset(f"{BASE}/datasets/42", token)
    assert mock_requests.request.call_args.args == ("DELETE", f"{BASE}/datasets/42")


def test_get_dataset_files_default_latest(mock_requests, response, token):
    mock_requests.request.return_value = response([])
    assert get_dataset_files(f"{BASE}/datasets/42", credential=token) == []
    assert mock_requests.request.call_args.args[1] == f"{BASE}/datasets/42/versions/:latest/files"


def test_get_dataset_files_invalid_version(mock_requests, token):
    with pytest.raises(ValidationError):
        get_dataset_files(f"{BASE}/datasets/42", "newest", token)
    mock_requests.request.assert_not_called()


def test_metadata_then_field(mock_requests, response, token):
    mock_requests.request.return_value = response({
        "displayName": "Citation Metadata",
        "fields": [
            {"typeName": "title", "multiple": False, "typeClass": "primitive", "value": "title"},
        ],
    })

    block = get_dataset_metadata(f"{BASE}/datasets/42", block="citation", credential=token)
    field = get_metadata_field(block, "title")

    assert mock_requests.request.call_args.args[1] == f"{BASE}/datasets/42/versions/:latest/metadata/citation"
    assert block.request_uri == f"{BASE}/datasets/42/versions/:latest/metadata/citation"
    assert field["value"] == "title"


def test_metadata_field_missing():
    with pytest.raises(PreconditionError):
        get_metadata_field({"fields": []}, "title")
