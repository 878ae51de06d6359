"""Jira REST API v2 payloads.

Read shapes mirror what ``GET /rest/api/2/issue/{key}`` returns. Write
shapes are separate types: Jira expects bare references such as
``{"key": "PROJ"}`` or ``{"name": "Bug"}`` where it returns full objects,
so the two are never interchangeable.
"""

from pydantic import Field

from atlassian_cli.core.models import WireModel

# =============================================================================
# Read shapes
# =============================================================================


class JiraIssueType(WireModel):
    id: str = ""
    name: str = ""
    description: str | None = None


class JiraProject(WireModel):
    id: str = ""
    key: str = ""
    name: str = ""


class JiraStatusCategory(WireModel):
    id: int = 0
    key: str = ""
    name: str = ""


class JiraStatus(WireModel):
    id: str = ""
    name: str = ""
    description: str | None = None
    status_category: JiraStatusCategory | None = Field(default=None, alias="statusCategory")


class JiraUser(WireModel):
    """A user as embedded in issues and comments.

    Jira Cloud identifies users by ``accountId``; Server and Data Center
    use ``name``. Either may be missing.
    """

    account_id: str | None = Field(default=None, alias="accountId")
    name: str | None = None
    display_name: str = Field(default="", alias="displayName")
    email_address: str | None = Field(default=None, alias="emailAddress")
    active: bool = False


class JiraPriority(WireModel):
    id: str = ""
    name: str = ""


class JiraComment(WireModel):
    id: str = ""
    body: str = ""
    author: JiraUser | None = None
    created: str = ""
    updated: str | None = None


class JiraCommentContainer(WireModel):
    comments: list[JiraComment] = Field(default_factory=list)
    total: int = 0


class JiraIssueFields(WireModel):
    summary: str = ""
    description: str | None = None
    issue_type: JiraIssueType | None = Field(default=None, alias="issuetype")
    project: JiraProject | None = None
    status: JiraStatus | None = None
    assignee: JiraUser | None = None
    reporter: JiraUser | None = None
    priority: JiraPriority | None = None
    created: str = ""
    updated: str = ""
    comment: JiraCommentContainer | None = None


class JiraIssue(WireModel):
    id: str = ""
    key: str = ""
    self_url: str = Field(default="", alias="self")
    fields: JiraIssueFields = Field(default_factory=JiraIssueFields)


class JiraTransition(WireModel):
    id: str = ""
    name: str = ""
    to: JiraStatus | None = None

    def matches(self, status: str) -> bool:
        """Return True if this transition is named ``status`` or leads to it."""
        wanted = status.casefold()
        if self.name.casefold() == wanted:
            return True
        return self.to is not None and self.to.name.casefold() == wanted


class JiraTransitionsResponse(WireModel):
    transitions: list[JiraTransition] = Field(default_factory=list)


class JiraUserSearchResult(WireModel):
    account_id: str | None = Field(default=None, alias="accountId")
    name: str | None = None
    display_name: str = Field(default="", alias="displayName")
    active: bool = False


class CreateJiraIssueResponse(WireModel):
    id: str = ""
    key: str = ""
    self_url: str = Field(default="", alias="self")


# =============================================================================
# Write shapes
# =============================================================================


class ProjectKey(WireModel):
    key: str = ""


class IssueTypeName(WireModel):
    name: str = ""


class CreateJiraIssueFields(WireModel):
    project: ProjectKey = Field(default_factory=ProjectKey)
    summary: str = ""
    description: str | None = None
    issue_type: IssueTypeName = Field(default_factory=IssueTypeName, alias="issuetype")


class CreateJiraIssueRequest(WireModel):
    """Body of ``POST /rest/api/2/issue``."""

    fields: CreateJiraIssueFields = Field(default_factory=CreateJiraIssueFields)

    @classmethod
    def build(
        cls,
        project: str,
        summary: str,
        issue_type: str,
        description: str | None = None,
    ) -> "CreateJiraIssueRequest":
        return cls(
            fields=CreateJiraIssueFields(
                project=ProjectKey(key=project),
                summary=summary,
                description=description,
                issue_type=IssueTypeName(name=issue_type),
            )
        )


class AddJiraCommentRequest(WireModel):
    body: str = ""


class TransitionId(WireModel):
    id: str = ""


class TransitionJiraIssueRequest(WireModel):
    transition: TransitionId = Field(default_factory=TransitionId)


class AssignJiraIssueRequest(WireModel):
    """Body of ``PUT /rest/api/2/issue/{key}/assignee``.

    Cloud reads ``accountId``; Server reads ``name``. Unset keys are omitted.
    """

    account_id: str | None = Field(default=None, alias="accountId")
    name: str | None = None


class UpdateJiraIssueFields(WireModel):
    description: str | None = None
    summary: str | None = None


class UpdateJiraIssueRequest(WireModel):
    fields: UpdateJiraIssueFields = Field(default_factory=UpdateJiraIssueFields)
