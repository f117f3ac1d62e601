"""Parse GitHub project URLs into owner and project number."""

from __future__ import annotations

import logging
import re

from api.errors import InvalidProjectUrl, UnsupportedOwnerType
from api.models import OwnerType, ProjectReference

logger = logging.getLogger(__name__)

# https://github.com/orgs|users/<ownerName>/projects/<projectNumber>
# Prefix match: trailing segments such as /views/1 are accepted.
PROJECT_URL_RE = re.compile(
    r"^(?:https://)?github\.com/(?P<owner_type>orgs|users)/(?P<owner_name>[^/]+)"
    r"/projects/(?P<project_number>[0-9]+)"
)

_OWNER_TYPE_QUERIES = {
    "orgs": OwnerType.ORGANIZATION,
    "users": OwnerType.USER,
}


def owner_type_query(owner_type: str | None) -> OwnerType:
    """Map a URL segment (``orgs``/``users``) to its GraphQL root field."""
    query = _OWNER_TYPE_QUERIES.get(owner_type or "")
    if query is None:
        raise UnsupportedOwnerType(owner_type)
    return query


def parse_project_url(url: str) -> ProjectReference:
    """Return the project reference encoded in ``url``."""
    match = PROJECT_URL_RE.match(url)
    if match is None:
        raise InvalidProjectUrl(url)
    project_number = int(match.group("project_number"))
    if project_number < 1:
        raise InvalidProjectUrl(url)
    reference = ProjectReference(
        owner_type=owner_type_query(match.group("owner_type")),
        owner_name=match.group("owner_name"),
        project_number=project_number,
    )
    logger.info("Owner name: %s", reference.owner_name)
    logger.info("Project number: %s", reference.project_number)
    logger.info("Owner type: %s", match.group("owner_type"))
    return reference
