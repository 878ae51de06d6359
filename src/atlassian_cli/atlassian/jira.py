"""Jira client for the REST API v2.

Example:
    from atlassian_cli.atlassian import JiraClient

    with JiraClient() as jira:
        issue = jira.get_issue("PROJ-123")
        jira.transition_issue("PROJ-123", "In Progress")
"""

import logging

from atlassian_cli.atlassian.base import AtlassianClient
from atlassian_cli.core.exceptions import ValidationError
from atlassian_cli.models.jira import (
    AddJiraCommentRequest,
    AssignJiraIssueRequest,
    CreateJiraIssueRequest,
    CreateJiraIssueResponse,
    JiraComment,
    JiraIssue,
    JiraTransition,
    JiraTransitionsResponse,
    JiraUserSearchResult,
    TransitionId,
    TransitionJiraIssueRequest,
    UpdateJiraIssueFields,
    UpdateJiraIssueRequest,
)

logger = logging.getLogger(__name__)

JIRA_API_V2 = "/rest/api/2"


class JiraClient(AtlassianClient):
    """Issue operations against Jira Server, Data Center or Cloud."""

    product = "jira"

    def get_issue(self, issue_key: str) -> JiraIssue:
        """Get an issue by its key.

        Args:
            issue_key: Jira issue key (e.g., 'PROJ-123')

        Returns:
            The issue with its fields

        Raises:
            NotFoundError: If the issue does not exist
        """
        data = self._get(
            f"{JIRA_API_V2}/issue/{issue_key}",
            params={"expand": "renderedFields"},
        )
        return JiraIssue.from_wire(data)

    def create_issue(
        self,
        project: str,
        summary: str,
        issue_type: str,
        description: str | None = None,
    ) -> CreateJiraIssueResponse:
        """Create an issue.

        Args:
            project: Project key
            summary: Issue title
            issue_type: Issue type name (Task, Story, Bug, ...)
            description: Issue description in wiki markup, omitted when None

        Returns:
            Id, key and self link of the new issue
        """
        request = CreateJiraIssueRequest.build(project, summary, issue_type, description)
        logger.debug("Creating issue in %s: %s", project, summary)

        data = self._post(f"{JIRA_API_V2}/issue", json=request.to_wire())
        created = CreateJiraIssueResponse.from_wire(data)

        logger.info("Created issue %s: %s", created.key, summary)
        return created

    def add_comment(self, issue_key: str, body: str) -> JiraComment:
        """Add a comment to an issue."""
        request = AddJiraCommentRequest(body=body)
        data = self._post(f"{JIRA_API_V2}/issue/{issue_key}/comment", json=request.to_wire())
        logger.info("Added comment to %s", issue_key)
        return JiraComment.from_wire(data)

    def get_transitions(self, issue_key: str) -> list[JiraTransition]:
        """List the transitions currently available for an issue."""
        data = self._get(f"{JIRA_API_V2}/issue/{issue_key}/transitions")
        return JiraTransitionsResponse.from_wire(data).transitions

    def transition_issue(self, issue_key: str, status: str) -> JiraTransition:
        """Move an issue through the transition matching ``status``.

        A transition matches when its own name or the name of its target
        status equals ``status``, ignoring case.

        Args:
            issue_key: Jira issue key
            status: Transition or target status name

        Returns:
            The transition that was applied

        Raises:
            ValidationError: If no available transition matches
        """
        transitions = self.get_transitions(issue_key)
        transition = next((t for t in transitions if t.matches(status)), None)

        if transition is None:
            available = ", ".join(t.name for t in transitions)
            raise ValidationError(
                f"Cannot transition to '{status}'. Available transitions: {available}",
                field="status",
                provider=self.product,
            )

        request = TransitionJiraIssueRequest(transition=TransitionId(id=transition.id))
        self._post(f"{JIRA_API_V2}/issue/{issue_key}/transitions", json=request.to_wire())

        logger.info("Transitioned %s via '%s'", issue_key, transition.name)
        return transition

    def search_users(self, query: str) -> list[JiraUserSearchResult]:
        """Find users by name, user name or e-mail."""
        data = self._get(f"{JIRA_API_V2}/user/search", params={"query": query})
        return JiraUserSearchResult.list_from_wire(data)

    def assign_issue(self, issue_key: str, username: str) -> AssignJiraIssueRequest:
        """Assign an issue to a user.

        The first user returned by a search for ``username`` is used. When the
        search finds nobody, the name is sent as-is, which older Jira Server
        versions accept.

        Returns:
            The assignee reference that was sent
        """
        users = self.search_users(username)
        if users:
            request = AssignJiraIssueRequest(account_id=users[0].account_id, name=users[0].name)
        else:
            logger.debug("No user found for '%s', assigning by name", username)
            request = AssignJiraIssueRequest(name=username)

        self._put(f"{JIRA_API_V2}/issue/{issue_key}/assignee", json=request.to_wire())

        logger.info("Assigned %s to %s", issue_key, username)
        return request

    def update_issue_description(self, issue_key: str, description: str) -> None:
        """Replace the description of an issue."""
        request = UpdateJiraIssueRequest(fields=UpdateJiraIssueFields(description=description))
        self._put(f"{JIRA_API_V2}/issue/{issue_key}", json=request.to_wire())
        logger.info("Updated description of %s", issue_key)
