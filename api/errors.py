"""Errors raised while updating a project item's status."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class ProjectStatusError(Exception):
    """Base class for failures that abort a status update."""


class MissingRequiredInput(ProjectStatusError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Input required and not supplied: {name}")
        self.name = name


class InvalidProjectUrl(ProjectStatusError):
    def __init__(self, url: str) -> None:
        super().__init__(
            f"Invalid project URL: {url}. Project URL should match the format "
            "https://github.com/<orgs-or-users>/<ownerName>/projects/<projectNumber>"
        )
        self.url = url


class UnsupportedOwnerType(ProjectStatusError):
    def __init__(self, owner_type: str | None) -> None:
        super().__init__(f"Unsupported ownerType: {owner_type}. Must be one of 'orgs' or 'users'")
        self.owner_type = owner_type


class ProjectNotFound(ProjectStatusError):
    """The owner has no project with the requested number visible to the token."""

    def __init__(self, owner_name: str, project_number: int | None = None) -> None:
        target = owner_name if project_number is None else f"{owner_name}/projects/{project_number}"
        super().__init__(f"Project not found: {target}")
        self.owner_name = owner_name
        self.project_number = project_number


class StatusFieldNotFound(ProjectStatusError):
    def __init__(self, field_name: str = "Status") -> None:
        super().__init__(f"{field_name} field not found.")
        self.field_name = field_name


class StatusOptionNotFound(ProjectStatusError):
    def __init__(self, status: str, options: Sequence[Any]) -> None:
        available = ", ".join(f"{option.name} ({option.id})" for option in options) or "none"
        super().__init__(f"Status column ID not found for {status!r}. Available options: {available}")
        self.status = status
        self.options = list(options)


class RemoteApiError(ProjectStatusError):
    """GraphQL response carried an ``errors`` array."""

    def __init__(self, errors: list[dict[str, Any]], data: dict[str, Any] | None = None) -> None:
        messages = "; ".join(str(error.get("message", error)) for error in errors)
        super().__init__(f"GitHub GraphQL request failed: {messages}")
        self.errors = errors
        self.data = data


class InvalidConfiguration(ProjectStatusError):
    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"Invalid value for {name}: {value!r}")
        self.name = name
        self.value = value
