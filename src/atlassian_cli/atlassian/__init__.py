"""REST clients for Jira, Confluence, Bamboo and Bitbucket.

Clients:
- JiraClient: issues, comments, transitions, assignment
- ConfluenceClient: page create, read and update
- BambooClient: projects, plans, build results, logs, queueing
- BitbucketClient: repositories, pull requests, code review, pipelines

Base classes:
- AtlassianClient: Base HTTP client with auth and error mapping
- AtlassianCredentials: Per-product connection settings

Example:
    from atlassian_cli.atlassian import JiraClient

    with JiraClient() as jira:
        issue = jira.get_issue("PROJ-123")
"""

from atlassian_cli.atlassian.bamboo import BambooClient
from atlassian_cli.atlassian.base import AtlassianClient
from atlassian_cli.atlassian.bitbucket import BitbucketClient
from atlassian_cli.atlassian.confluence import ConfluenceClient
from atlassian_cli.atlassian.credentials import AtlassianCredentials, get_credentials
from atlassian_cli.atlassian.jira import JiraClient

__all__ = [
    # Base classes
    "AtlassianClient",
    "AtlassianCredentials",
    "get_credentials",
    # Clients
    "JiraClient",
    "ConfluenceClient",
    "BambooClient",
    "BitbucketClient",
]
