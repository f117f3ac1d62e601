"""Typed records for GitHub Projects (v2) GraphQL payloads."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OwnerType(str, Enum):
    """GraphQL root field that exposes a project's owner."""

    ORGANIZATION = "organization"
    USER = "user"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ProjectReference(_Record):
    """Owner and number parsed from a project URL."""

    owner_type: OwnerType = Field(..., description="Root field selector for the owner")
    owner_name: str = Field(..., description="Organization or user login")
    project_number: int = Field(..., gt=0, description="Project number from the URL")


class ProjectHandle(_Record):
    id: str = Field(..., description="Opaque ProjectV2 node ID")


class StatusOption(_Record):
    """One selectable value of a single-select field."""

    id: str = Field(..., description="Opaque option ID")
    name: str = Field(..., description="Display name of the option")


class FieldDescriptor(_Record):
    """A project field with the options it offers."""

    id: str = Field(..., description="Opaque field node ID")
    name: str = Field(..., description="Field display name")
    options: list[StatusOption] = Field(default_factory=list, description="Single-select options")


class StatusUpdateResult(_Record):
    project_item_id: str = Field(..., description="ID of the updated project item")
    confirmed: bool = Field(True, description="False when GitHub did not echo the item back")


# Raw response shapes. Every projection GitHub may null out is optional so
# callers check presence before walking nested paths.


class ProjectId(_Record):
    id: str | None = None


class ProjectOwner(_Record):
    project_v2: ProjectId | None = Field(None, alias="projectV2")


class ProjectNodeIDResponse(_Record):
    organization: ProjectOwner | None = None
    user: ProjectOwner | None = None

    def project_id(self, owner_type: OwnerType) -> str | None:
        owner = self.organization if owner_type is OwnerType.ORGANIZATION else self.user
        if owner is None or owner.project_v2 is None:
            return None
        return owner.project_v2.id


class FieldNode(_Record):
    """A field node; only single-select fields populate ``options``."""

    id: str | None = None
    name: str | None = None
    options: list[StatusOption] | None = None

    def to_descriptor(self) -> FieldDescriptor:
        return FieldDescriptor(id=self.id or "", name=self.name or "", options=self.options or [])


class FieldConnection(_Record):
    nodes: list[FieldNode | None] = Field(default_factory=list)


class ProjectFieldsNode(_Record):
    fields: FieldConnection | None = None


class ProjectFieldNodeIDResponse(_Record):
    node: ProjectFieldsNode | None = None


class ProjectItem(_Record):
    id: str


class UpdateItemFieldPayload(_Record):
    project_v2_item: ProjectItem | None = Field(None, alias="projectV2Item")


class ProjectUpdateItemFieldResponse(_Record):
    update_project_v2_item_field_value: UpdateItemFieldPayload | None = Field(
        None, alias="updateProjectV2ItemFieldValue"
    )
