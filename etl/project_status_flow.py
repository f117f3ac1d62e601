"""Flow setting a GitHub Projects (v2) item's Status column."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from adapters.base import GraphQLTransport
from api.errors import ProjectNotFound, StatusFieldNotFound, StatusOptionNotFound
from api.models import (
    FieldDescriptor,
    FieldNode,
    ProjectFieldNodeIDResponse,
    ProjectHandle,
    ProjectNodeIDResponse,
    ProjectReference,
    ProjectUpdateItemFieldResponse,
    StatusOption,
    StatusUpdateResult,
)
from api.parser import parse_project_url
from etl.logging_setup import log_outcome
from utils.inputs import StatusUpdateInputs

logger = logging.getLogger(__name__)

STATUS_FIELD_NAME = "Status"
# Only the first page of fields is fetched; later fields are never seen.
FIELD_PAGE_SIZE = 20

PROJECT_QUERY = """
query getProject($ownerName: String!, $projectNumber: Int!) {
  %(owner_type)s(login: $ownerName) {
    projectV2(number: $projectNumber) {
      id
    }
  }
}
"""

FIELDS_QUERY = """
query ($projectId: ID!) {
  node(id: $projectId) {
    ... on ProjectV2 {
      fields(first: %(page_size)d) {
        nodes {
          ... on ProjectV2Field {
            id
            name
          }
          ... on ProjectV2IterationField {
            id
            name
            configuration {
              iterations {
                startDate
                id
              }
            }
          }
          ... on ProjectV2SingleSelectField {
            id
            name
            options {
              id
              name
            }
          }
        }
      }
    }
  }
}
"""

UPDATE_STATUS_MUTATION = """
mutation ($projectId: ID!, $itemId: ID!, $statusFieldId: ID!, $statusColumnId: String!) {
  updateProjectV2ItemFieldValue(
    input: {
      projectId: $projectId
      itemId: $itemId
      fieldId: $statusFieldId
      value: {
        singleSelectOptionId: $statusColumnId
      }
    }
  ) {
    projectV2Item {
      id
    }
  }
}
"""


def get_status_field_data(nodes: Sequence[FieldNode | None]) -> FieldDescriptor:
    """Return the first field named ``Status``."""
    for node in nodes:
        if node is not None and node.name == STATUS_FIELD_NAME:
            return node.to_descriptor()
    raise StatusFieldNotFound(STATUS_FIELD_NAME)


def get_status_column_id(options: Sequence[StatusOption], status: str) -> str:
    """Return the id of the first option whose name equals ``status`` exactly."""
    for option in options:
        if option.name == status:
            return option.id
    raise StatusOptionNotFound(status, options)


async def resolve_project(client: GraphQLTransport, reference: ProjectReference) -> ProjectHandle:
    data = await client.graphql(
        PROJECT_QUERY % {"owner_type": reference.owner_type.value},
        {"ownerName": reference.owner_name, "projectNumber": reference.project_number},
    )
    project_id = ProjectNodeIDResponse.model_validate(data).project_id(reference.owner_type)
    if not project_id:
        raise ProjectNotFound(reference.owner_name, reference.project_number)
    logger.info("Project ID: %s", project_id)
    return ProjectHandle(id=project_id)


async def resolve_status_field(client: GraphQLTransport, project: ProjectHandle) -> FieldDescriptor:
    data = await client.graphql(
        FIELDS_QUERY % {"page_size": FIELD_PAGE_SIZE}, {"projectId": project.id}
    )
    response = ProjectFieldNodeIDResponse.model_validate(data)
    if response.node is None or response.node.fields is None:
        raise ProjectNotFound(project.id)
    field = get_status_field_data(response.node.fields.nodes)
    logger.info("Status field ID: %s", field.id)
    return field


async def set_item_status(
    client: GraphQLTransport,
    project: ProjectHandle,
    item_id: str,
    field: FieldDescriptor,
    option_id: str,
) -> StatusUpdateResult:
    """Point the item's Status field at ``option_id``. Repeating the call is harmless."""
    data = await client.graphql(
        UPDATE_STATUS_MUTATION,
        {
            "projectId": project.id,
            "itemId": item_id,
            "statusFieldId": field.id,
            "statusColumnId": option_id,
        },
    )
    logger.info("Update response: %s", json.dumps(data))
    payload = ProjectUpdateItemFieldResponse.model_validate(data).update_project_v2_item_field_value
    if payload is None or payload.project_v2_item is None:
        logger.warning("Update response did not include item %s; status change unconfirmed", item_id)
        return StatusUpdateResult(project_item_id=item_id, confirmed=False)
    return StatusUpdateResult(project_item_id=payload.project_v2_item.id)


async def update_project_item_status(
    inputs: StatusUpdateInputs,
    client: GraphQLTransport,
    *,
    dry_run: bool = False,
) -> StatusUpdateResult | None:
    """Resolve the board named by ``inputs`` and move the item to ``inputs.status``.

    Runs the project query, the field query and, unless ``dry_run`` is set,
    the update mutation, one after another. Any failure aborts the run before
    the board is touched.
    """
    logger.info("Project URL: %s", inputs.project_url)
    reference = parse_project_url(inputs.project_url)
    logger.info("Item ID: %s", inputs.item_id)
    logger.info("Status: %s", inputs.status)

    project = await resolve_project(client, reference)
    field = await resolve_status_field(client, project)
    option_id = get_status_column_id(field.options, inputs.status)
    logger.info("Status column ID: %s", option_id)

    if dry_run:
        log_outcome(
            logger,
            "Dry run: item status left unchanged",
            applied=False,
            extra={"item_id": inputs.item_id, "option_id": option_id},
        )
        return None

    result = await set_item_status(client, project, inputs.item_id, field, option_id)
    log_outcome(
        logger,
        f"Item {result.project_item_id} moved to {inputs.status}",
        applied=result.confirmed,
        extra={"item_id": result.project_item_id, "option_id": option_id},
    )
    return result
