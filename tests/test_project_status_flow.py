import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

import etl.project_status_flow as flow
from api.errors import (
    InvalidProjectUrl,
    ProjectNotFound,
    StatusFieldNotFound,
    StatusOptionNotFound,
)
from api.models import FieldNode, StatusOption
from utils.inputs import StatusUpdateInputs

PROJECT_URL = "https://github.com/orgs/my-org/projects/7"

FIELD_NODES = [
    {"id": "PVTF_title", "name": "Title"},
    {
        "id": "PVTF_iter",
        "name": "Iteration",
        "configuration": {"iterations": [{"startDate": "2024-01-01", "id": "it1"}]},
    },
    {
        "id": "PVTF_y",
        "name": "Status",
        "options": [
            {"id": "f75ad846", "name": "Todo"},
            {"id": "47fc9ee4", "name": "In Progress"},
            {"id": "98236f", "name": "Done"},
        ],
    },
]


class FakeGraphQL:
    """Answers the project, field and mutation documents in order."""

    def __init__(self, project=None, fields=None, update=None):
        self.calls = []
        self._project = project if project is not None else {
            "organization": {"projectV2": {"id": "PVT_x"}}
        }
        self._fields = fields if fields is not None else {
            "node": {"fields": {"nodes": FIELD_NODES}}
        }
        self._update = update if update is not None else {
            "updateProjectV2ItemFieldValue": {"projectV2Item": {"id": "I123"}}
        }

    async def graphql(self, query, variables=None):
        self.calls.append((query, variables))
        if "getProject" in query:
            return self._project
        if "mutation" in query:
            return self._update
        return self._fields


def _inputs(status="Done", url=PROJECT_URL):
    return StatusUpdateInputs(project_url=url, github_token="T", item_id="I123", status=status)


def test_get_status_column_id_matches_exact_name():
    options = [StatusOption(id="A", name="Todo"), StatusOption(id="B", name="Done")]
    assert flow.get_status_column_id(options, "Done") == "B"


def test_get_status_column_id_missing_lists_options():
    options = [StatusOption(id="A", name="Todo"), StatusOption(id="B", name="Done")]
    with pytest.raises(StatusOptionNotFound) as excinfo:
        flow.get_status_column_id(options, "Missing")
    message = str(excinfo.value)
    assert "Todo" in message and "Done" in message
    assert excinfo.value.status == "Missing"


def test_get_status_column_id_is_case_sensitive():
    options = [StatusOption(id="B", name="Done")]
    with pytest.raises(StatusOptionNotFound):
        flow.get_status_column_id(options, "done")


def test_get_status_column_id_first_duplicate_wins():
    options = [StatusOption(id="first", name="Done"), StatusOption(id="second", name="Done")]
    assert flow.get_status_column_id(options, "Done") == "first"


def test_get_status_field_data_picks_status():
    nodes = [FieldNode.model_validate(node) for node in FIELD_NODES]
    field = flow.get_status_field_data(nodes)
    assert field.id == "PVTF_y"
    assert [option.name for option in field.options] == ["Todo", "In Progress", "Done"]


def test_get_status_field_data_skips_empty_nodes():
    nodes = [None, FieldNode(), FieldNode(id="PVTF_s", name="Status")]
    field = flow.get_status_field_data(nodes)
    assert field.id == "PVTF_s"
    assert field.options == []


def test_get_status_field_data_without_status_field():
    nodes = [FieldNode(id="PVTF_title", name="Title")]
    with pytest.raises(StatusFieldNotFound):
        flow.get_status_field_data(nodes)


@pytest.mark.asyncio
async def test_update_project_item_status_end_to_end():
    client = FakeGraphQL()
    result = await flow.update_project_item_status(_inputs(), client)

    assert result is not None
    assert result.project_item_id == "I123"
    assert len(client.calls) == 3

    project_query, project_vars = client.calls[0]
    assert "organization(login: $ownerName)" in project_query
    assert project_vars == {"ownerName": "my-org", "projectNumber": 7}

    fields_query, fields_vars = client.calls[1]
    assert "fields(first: 20)" in fields_query
    assert fields_vars == {"projectId": "PVT_x"}

    mutation, mutation_vars = client.calls[2]
    assert "updateProjectV2ItemFieldValue" in mutation
    assert mutation_vars == {
        "projectId": "PVT_x",
        "itemId": "I123",
        "statusFieldId": "PVTF_y",
        "statusColumnId": "98236f",
    }


@pytest.mark.asyncio
async def test_update_uses_user_root_field():
    client = FakeGraphQL(project={"user": {"projectV2": {"id": "PVT_u"}}})
    await flow.update_project_item_status(
        _inputs(url="https://github.com/users/octocat/projects/2"), client
    )
    assert "user(login: $ownerName)" in client.calls[0][0]
    assert client.calls[1][1] == {"projectId": "PVT_u"}


@pytest.mark.asyncio
async def test_repeated_update_sends_same_mutation():
    client = FakeGraphQL()
    await flow.update_project_item_status(_inputs(), client)
    await flow.update_project_item_status(_inputs(), client)
    assert client.calls[2] == client.calls[5]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "project",
    [
        {"organization": None},
        {"organization": {"projectV2": None}},
        {"user": {"projectV2": {"id": "PVT_wrong_root"}}},
        {},
    ],
)
async def test_missing_project_raises_project_not_found(project):
    client = FakeGraphQL(project=project)
    with pytest.raises(ProjectNotFound) as excinfo:
        await flow.update_project_item_status(_inputs(), client)
    assert "my-org/projects/7" in str(excinfo.value)
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_missing_node_raises_project_not_found():
    client = FakeGraphQL(fields={"node": None})
    with pytest.raises(ProjectNotFound):
        await flow.update_project_item_status(_inputs(), client)


@pytest.mark.asyncio
async def test_missing_status_field_stops_before_mutation():
    client = FakeGraphQL(fields={"node": {"fields": {"nodes": FIELD_NODES[:2]}}})
    with pytest.raises(StatusFieldNotFound):
        await flow.update_project_item_status(_inputs(), client)
    assert len(client.calls) == 2


@pytest.mark.asyncio
async def test_unknown_status_stops_before_mutation():
    client = FakeGraphQL()
    with pytest.raises(StatusOptionNotFound):
        await flow.update_project_item_status(_inputs(status="Blocked"), client)
    assert len(client.calls) == 2


@pytest.mark.asyncio
async def test_invalid_url_makes_no_requests():
    client = FakeGraphQL()
    with pytest.raises(InvalidProjectUrl):
        await flow.update_project_item_status(_inputs(url="https://github.com/my-org"), client)
    assert client.calls == []


@pytest.mark.asyncio
async def test_dry_run_skips_mutation(caplog):
    caplog.set_level(logging.INFO, logger="etl.project_status_flow")
    client = FakeGraphQL()
    result = await flow.update_project_item_status(_inputs(), client, dry_run=True)
    assert result is None
    assert len(client.calls) == 2
    assert any(
        record.levelno == logging.WARNING and "Dry run" in record.getMessage()
        for record in caplog.records
    )


@pytest.mark.asyncio
async def test_update_logs_resolved_ids(caplog):
    caplog.set_level(logging.INFO, logger="etl.project_status_flow")
    await flow.update_project_item_status(_inputs(), FakeGraphQL())
    messages = [record.getMessage() for record in caplog.records]
    assert "Project ID: PVT_x" in messages
    assert "Status field ID: PVTF_y" in messages
    assert "Status column ID: 98236f" in messages
    assert any(message.startswith("Update response: ") for message in messages)


@pytest.mark.asyncio
async def test_update_marks_confirmed_item():
    result = await flow.update_project_item_status(_inputs(), FakeGraphQL())
    assert result.confirmed is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "update",
    [
        {"updateProjectV2ItemFieldValue": {"projectV2Item": None}},
        {"updateProjectV2ItemFieldValue": None},
    ],
)
async def test_update_without_item_is_unconfirmed(caplog, update):
    caplog.set_level(logging.INFO, logger="etl.project_status_flow")
    result = await flow.update_project_item_status(_inputs(), FakeGraphQL(update=update))
    assert result.project_item_id == "I123"
    assert result.confirmed is False
    assert any(
        record.levelno == logging.WARNING and "unconfirmed" in record.getMessage()
        for record in caplog.records
    )
