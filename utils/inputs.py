"""Load the inputs of a status update from CLI values or the Actions environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from api.errors import MissingRequiredInput

INPUT_NAMES = ("project-url", "github-token", "item-id", "status")


@dataclass(frozen=True)
class StatusUpdateInputs:
    """Validated, non-blank inputs for one status update."""

    project_url: str
    github_token: str = field(repr=False)
    item_id: str
    status: str


def input_env_name(name: str) -> str:
    """Return the variable GitHub Actions uses for ``name`` (``INPUT_PROJECT-URL``)."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(
    name: str,
    *,
    overrides: Mapping[str, str | None] | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return a required input, preferring explicit overrides to the environment."""
    env = os.environ if environ is None else environ
    value = (overrides or {}).get(name)
    if not value or not value.strip():
        value = env.get(input_env_name(name), "")
    if name == "github-token" and not value.strip():
        value = env.get("GITHUB_TOKEN", "")
    value = value.strip()
    if not value:
        raise MissingRequiredInput(name)
    return value


def load_inputs(
    overrides: Mapping[str, str | None] | None = None,
    environ: Mapping[str, str] | None = None,
) -> StatusUpdateInputs:
    """Collect all four inputs, failing on the first one that is absent or blank."""
    values = {name: get_input(name, overrides=overrides, environ=environ) for name in INPUT_NAMES}
    return StatusUpdateInputs(
        project_url=values["project-url"],
        github_token=values["github-token"],
        item_id=values["item-id"],
        status=values["status"],
    )
