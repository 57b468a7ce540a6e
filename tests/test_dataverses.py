"""Tests for dataverse_client.dataverses module."""

import json

import pytest

from dataverse_client.dataverses import (
    add_role_assignment,
    get_child_dataverses,
    get_dataverse,
    get_dataverse_contents,
    get_role_assignments,
    new_dataverse,
    remove_dataverse,
)
from dataverse_client.descriptors import new_dataverse_descriptor
from dataverse_client.errors import PreconditionError
from dataverse_client.request import ResourceHandle

BASE = "https://demo.dataverse.org/api"


@pytest.fixture
def tree(mock_requests, response):
    """A small dataverse tree served by URI.

    visus
    ├── 10 (dataverse)
    │   ├── 11 (dataverse)
    │   └── dataset 100
    ├── dataset 101
    └── 20 (dataverse)
    """
    routes = {
        f"{BASE}/dataverses/visus": {"id": 1, "alias": "visus"},
        f"{BASE}/dataverses/visus/contents": [
            {"type": "dataverse", "id": 10, "title": "Ten"},
            {"type": "dataset", "id": 101, "identifier": "FK2/B"},
            {"type": "dataverse", "id": 20, "title": "Twenty"},
        ],
        f"{BASE}/dataverses/10": {"id": 10, "alias": "ten"},
        f"{BASE}/dataverses/10/contents": [
            {"type": "dataverse", "id": 11, "title": "Eleven"},
            {"type": "dataset", "id": 100, "identifier": "FK2/A"},
        ],
        f"{BASE}/dataverses/11": {"id": 11, "alias": "eleven"},
        f"{BASE}/dataverses/11/contents": [],
        f"{BASE}/dataverses/20": {"id": 20, "alias": "twenty"},
        f"{BASE}/dataverses/20/contents": [],
        f"{BASE}/datasets/100": {"id": 100},
        f"{BASE}/datasets/101": {"id": 101},
    }

    def serve(method, uri, **kwargs):
        return response(routes[uri])

    mock_requests.request.side_effect = serve
    return mock_requests


def _called_uris(mock_requests):
    return [c.args[1] for c in mock_requests.request.call_args_list]


# ── get_dataverse / contents ─────────────────────────────────────────────


def test_get_dataverse(tree, visus_uri, token):
    dataverse = get_dataverse(visus_uri, token)
    assert dataverse["alias"] == "visus"
    assert dataverse.request_uri == visus_uri
    assert dataverse.credential == token


def test_get_dataverse_requires_credential_for_uri(mock_requests, visus_uri):
    with pytest.raises(PreconditionError):
        get_dataverse(visus_uri)
    mock_requests.request.assert_not_called()


def test_contents_from_handle_reuses_credential(tree, visus_uri, token):
    dataverse = get_dataverse(visus_uri, token)
    contents = get_dataverse_contents(dataverse)

    assert [item["id"] for item in contents] == [10, 101, 20]
    headers = tree.request.call_args.kwargs["headers"]
    assert headers["X-Dataverse-key"] == token


# ── get_child_dataverses ─────────────────────────────────────────────────


def test_child_dataverses_immediate(tree, visus_uri, token):
    children = list(get_child_dataverses(visus_uri, token))

    assert [c["id"] for c in children] == [10, 20]
    assert children[0].request_uri == f"{BASE}/dataverses/10"
    assert children[1].request_uri == f"{BASE}/dataverses/20"


def test_child_dataverses_recursive_pre_order(tree, visus_uri, token):
    children = list(get_child_dataverses(visus_uri, token, recurse=True))
    assert [c["id"] for c in children] == [10, 11, 20]


def test_child_dataverses_is_lazy(tree, visus_uri, token):
    children = get_child_dataverses(visus_uri, token, recurse=True)
    tree.request.assert_not_called()

    first = next(children)
    assert first["id"] == 10
    assert _called_uris(tree) == [f"{BASE}/dataverses/visus/contents", f"{BASE}/dataverses/10"]


def test_child_handles_chain_into_next_call(tree, visus_uri, token):
    child = next(get_child_dataverses(visus_uri, token))
    contents = get_dataverse_contents(child)
    assert [item["id"] for item in contents] == [11, 100]


# ── new_dataverse ────────────────────────────────────────────────────────


def test_new_dataverse_posts_to_parent_and_points_at_child(mock_requests, response, visus_uri, token):
    mock_requests.request.return_value = response({"id": 30, "alias": "child"})
    descriptor = new_dataverse_descriptor("child", "Child", "a@example.org")

    created = new_dataverse(visus_uri, descriptor, token)

    args, kwargs = mock_requests.request.call_args
    assert args == ("POST", visus_uri)
    assert json.loads(kwargs["data"])["alias"] == "child"
    assert created.request_uri == f"{BASE}/dataverses/child"
    assert created.credential == token


def test_new_dataverse_from_handle(mock_requests, response, visus_uri, token):
    mock_requests.request.return_value = response({"id": 30, "alias": "child"})
    parent = ResourceHandle({"alias": "visus"}, visus_uri, token)

    created = new_dataverse(parent, new_dataverse_descriptor("child", "Child", "a@example.org"))

    assert created.request_uri == f"{BASE}/dataverses/child"
    assert mock_requests.request.call_args.kwargs["headers"]["X-Dataverse-key"] == token


# ── remove / role assignments ────────────────────────────────────────────


def test_remove_dataverse(mock_requests, response, visus_uri, token):
    mock_requests.request.return_value = response({"message": "Dataverse 1 deleted"})
    remove_dataverse(visus_uri, token)
    assert mock_requests.request.call_args.args == ("DELETE", visus_uri)


def test_get_role_assignments(mock_requests, response, visus_uri, token):
    mock_requests.request.return_value = response([{"assignee": "@jdoe", "_roleAlias": "admin"}])

    assignments = get_role_assignments(visus_uri, token)

    assert mock_requests.request.call_args.args[1] == f"{visus_uri}/assignments"
    assert assignments[0]["assignee"] == "@jdoe"


def test_add_role_assignment_body(mock_requests, response, visus_uri, token):
    mock_requests.request.return_value = response({"assignee": "@jdoe", "_roleAlias": "curator"})

    add_role_assignment(visus_uri, "@jdoe", "curator", token)

    args, kwargs = mock_requests.request.call_args
    assert args == ("POST", f"{visus_uri}/assignments")
    assert json.loads(kwargs["data"]) == {"assignee": "@jdoe", "role": "curator"}


def test_add_role_assignment_requires_role(mock_requests, visus_uri, token):
    with pytest.raises(PreconditionError):
        add_role_assignment(visus_uri, "@jdoe", "", token)
    mock_requests.request.assert_not_called()
