"""Utility to sync a GitHub Project (v2) item's status from CI."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx

from adapters.github import GitHubGraphQLClient
from api.errors import ProjectStatusError
from api.models import StatusUpdateResult
from etl.logging_setup import configure_logging
from etl.project_status_flow import update_project_item_status
from utils.inputs import StatusUpdateInputs, load_inputs

logger = logging.getLogger(__name__)


async def update_status(
    inputs: StatusUpdateInputs,
    *,
    dry_run: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> StatusUpdateResult | None:
    """Update the Project board status for one item."""
    async with GitHubGraphQLClient(inputs.github_token, transport=transport) as client:
        return await update_project_item_status(inputs, client, dry_run=dry_run)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Set the Status of a GitHub Project (v2) item",
        epilog="Omitted options fall back to INPUT_<NAME> environment variables.",
    )
    parser.add_argument(
        "--project-url",
        help="https://github.com/<orgs-or-users>/<ownerName>/projects/<projectNumber>",
    )
    parser.add_argument("--github-token", help="Token used for GraphQL calls")
    parser.add_argument("--item-id", help="Node ID of the project item to update")
    parser.add_argument("--status", help="Exact name of the target Status option")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve the project, field and option without updating the item",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    try:
        inputs = load_inputs(
            {
                "project-url": args.project_url,
                "github-token": args.github_token,
                "item-id": args.item_id,
                "status": args.status,
            }
        )
        asyncio.run(update_status(inputs, dry_run=args.dry_run))
    except (ProjectStatusError, httpx.HTTPError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
