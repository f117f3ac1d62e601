"""Adapter package exports."""

from .base import GraphQLTransport, tracked_call
from .github import GitHubGraphQLClient

__all__ = ["tracked_call", "GraphQLTransport", "GitHubGraphQLClient"]
