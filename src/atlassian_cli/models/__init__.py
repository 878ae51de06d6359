"""Wire models for Jira, Confluence, Bamboo and Bitbucket REST payloads."""

from atlassian_cli.core.models import WireModel
from atlassian_cli.models.bamboo import BambooList
from atlassian_cli.models.bitbucket import PagedResponse

__all__ = [
    "WireModel",
    "BambooList",
    "PagedResponse",
]
