"""Bitbucket Server and Cloud payloads.

Server endpoints page with ``start``/``limit`` and report ``isLastPage`` and
``nextPageStart``; every paged endpoint is parsed with :class:`PagedResponse`.
Pipeline models cover Bitbucket Cloud only and keep its snake_case keys.
"""

from typing import Any, Generic, TypeVar

from pydantic import Field

from atlassian_cli.core.models import WireModel

ValueT = TypeVar("ValueT")


class PagedResponse(WireModel, Generic[ValueT]):
    values: list[ValueT] = Field(default_factory=list)
    size: int = 0
    limit: int = 0
    start: int = 0
    is_last_page: bool = Field(default=False, alias="isLastPage")
    next_page_start: int | None = Field(default=None, alias="nextPageStart")

    @property
    def has_more(self) -> bool:
        return not self.is_last_page and self.next_page_start is not None


# =============================================================================
# Links, users, projects and repositories
# =============================================================================


class BitbucketLink(WireModel):
    href: str = ""


class BitbucketCloneLink(WireModel):
    href: str = ""
    name: str = ""


class BitbucketLinks(WireModel):
    self_links: list[BitbucketLink] | None = Field(default=None, alias="self")
    clone: list[BitbucketCloneLink] | None = None


class BitbucketUser(WireModel):
    name: str = ""
    display_name: str = Field(default="", alias="displayName")
    email_address: str | None = Field(default=None, alias="emailAddress")
    id: int | None = None
    type: str | None = None
    slug: str | None = None
    active: bool = False


class BitbucketProject(WireModel):
    key: str = ""
    name: str = ""
    description: str | None = None
    public: bool = False
    type: str | None = None
    links: BitbucketLinks | None = None


class BitbucketRepository(WireModel):
    slug: str = ""
    name: str = ""
    description: str | None = None
    scm_id: str = Field(default="git", alias="scmId")
    state: str | None = None
    forkable: bool = False
    public: bool = False
    project: BitbucketProject | None = None
    links: BitbucketLinks | None = None


class BitbucketBranch(WireModel):
    id: str = ""
    display_id: str = Field(default="", alias="displayId")
    type: str = "BRANCH"
    latest_commit: str | None = Field(default=None, alias="latestCommit")
    is_default: bool = Field(default=False, alias="isDefault")


# =============================================================================
# Commits
# =============================================================================


class BitbucketAuthor(WireModel):
    name: str = ""
    email_address: str | None = Field(default=None, alias="emailAddress")


class BitbucketParentCommit(WireModel):
    id: str = ""
    display_id: str = Field(default="", alias="displayId")


class BitbucketCommit(WireModel):
    id: str = ""
    display_id: str = Field(default="", alias="displayId")
    message: str = ""
    author: BitbucketAuthor | None = None
    author_timestamp: int = Field(default=0, alias="authorTimestamp")
    committer: BitbucketAuthor | None = None
    committer_timestamp: int = Field(default=0, alias="committerTimestamp")
    parents: list[BitbucketParentCommit] | None = None


# =============================================================================
# Pull requests
# =============================================================================


class BitbucketRef(WireModel):
    id: str = ""
    display_id: str = Field(default="", alias="displayId")
    latest_commit: str | None = Field(default=None, alias="latestCommit")
    repository: BitbucketRepository | None = None


class BitbucketParticipant(WireModel):
    """Author, reviewer or participant entry of a pull request."""

    user: BitbucketUser | None = None
    role: str | None = None
    approved: bool = False
    status: str | None = None


class BitbucketPullRequest(WireModel):
    id: int = 0
    version: int = 0
    title: str = ""
    description: str | None = None
    state: str = "OPEN"
    open: bool = False
    closed: bool = False
    created_date: int = Field(default=0, alias="createdDate")
    updated_date: int = Field(default=0, alias="updatedDate")
    from_ref: BitbucketRef | None = Field(default=None, alias="fromRef")
    to_ref: BitbucketRef | None = Field(default=None, alias="toRef")
    author: BitbucketParticipant | None = None
    reviewers: list[BitbucketParticipant] | None = None
    participants: list[BitbucketParticipant] | None = None
    links: BitbucketLinks | None = None


# =============================================================================
# Diffs
# =============================================================================


class BitbucketDiffPath(WireModel):
    path_display: str | None = Field(default=None, alias="toString")
    parent: str | None = None
    name: str | None = None
    extension: str | None = None


class BitbucketDiffLine(WireModel):
    source: int = 0
    destination: int = 0
    line: str | None = None
    truncated: bool = False


class BitbucketDiffSegment(WireModel):
    """Run of ADDED, REMOVED or CONTEXT lines."""

    type: str | None = None
    lines: list[BitbucketDiffLine] | None = None
    truncated: bool = False

    def is_truncated(self) -> bool:
        return self.truncated or any(line.truncated for line in self.lines or [])


class BitbucketDiffHunk(WireModel):
    source_line: int = Field(default=0, alias="sourceLine")
    source_span: int = Field(default=0, alias="sourceSpan")
    destination_line: int = Field(default=0, alias="destinationLine")
    destination_span: int = Field(default=0, alias="destinationSpan")
    segments: list[BitbucketDiffSegment] | None = None
    truncated: bool = False

    def is_truncated(self) -> bool:
        return self.truncated or any(s.is_truncated() for s in self.segments or [])


class BitbucketDiff(WireModel):
    source: BitbucketDiffPath | None = None
    destination: BitbucketDiffPath | None = None
    hunks: list[BitbucketDiffHunk] | None = None
    truncated: bool = False

    @property
    def path(self) -> str:
        """Display path of the file, preferring the destination side."""
        for side in (self.destination, self.source):
            if side is not None and side.path_display:
                return side.path_display
        return ""

    def is_truncated(self) -> bool:
        return self.truncated or any(h.is_truncated() for h in self.hunks or [])


class BitbucketDiffResponse(WireModel):
    """Diff of a pull request or commit range.

    The server may cut the diff short at any level of the tree, so
    :meth:`is_truncated` checks every level instead of just the top flag.
    """

    from_hash: str | None = Field(default=None, alias="fromHash")
    to_hash: str | None = Field(default=None, alias="toHash")
    context_lines: int = Field(default=0, alias="contextLines")
    whitespace: str | None = None
    diffs: list[BitbucketDiff] | None = None
    truncated: bool = False

    def is_truncated(self) -> bool:
        return self.truncated or any(d.is_truncated() for d in self.diffs or [])


# =============================================================================
# Activities and comments
# =============================================================================


class BitbucketComment(WireModel):
    id: int = 0
    version: int = 0
    text: str | None = None
    author: BitbucketUser | None = None
    created_date: int = Field(default=0, alias="createdDate")
    updated_date: int = Field(default=0, alias="updatedDate")
    comments: list["BitbucketComment"] | None = None
    tasks: list[Any] | None = None
    severity: str | None = None
    state: str | None = None


class BitbucketCommentAnchor(WireModel):
    from_hash: str | None = Field(default=None, alias="fromHash")
    to_hash: str | None = Field(default=None, alias="toHash")
    line: int = 0
    line_type: str | None = Field(default=None, alias="lineType")
    file_type: str | None = Field(default=None, alias="fileType")
    path: str | None = None
    src_path: str | None = Field(default=None, alias="srcPath")


class BitbucketActivity(WireModel):
    id: int = 0
    created_date: int = Field(default=0, alias="createdDate")
    user: BitbucketUser | None = None
    action: str | None = None
    comment: BitbucketComment | None = None
    comment_anchor: BitbucketCommentAnchor | None = Field(default=None, alias="commentAnchor")


class AddBitbucketCommentRequest(WireModel):
    text: str = ""


# =============================================================================
# Repository settings
# =============================================================================


class BitbucketBuildStatus(WireModel):
    state: str = ""
    key: str = ""
    name: str | None = None
    url: str | None = None
    description: str | None = None
    date_added: int = Field(default=0, alias="dateAdded")


class BitbucketRepositorySettings(WireModel):
    require_all_reviewers_approve: bool = Field(default=False, alias="requireAllReviewersApprove")
    required_approvals: int = Field(default=0, alias="requiredApprovals")
    required_all_tasks_complete: bool = Field(default=False, alias="requiredAllTasksComplete")
    required_successful_builds: int = Field(default=0, alias="requiredSuccessfulBuilds")


class BitbucketMatcherType(WireModel):
    id: str = ""
    name: str = ""


class BitbucketBranchMatcher(WireModel):
    id: str = ""
    display_id: str = Field(default="", alias="displayId")
    type: BitbucketMatcherType | None = None
    active: bool = False


class BitbucketBranchRestriction(WireModel):
    id: int = 0
    type: str = ""
    matcher: BitbucketBranchMatcher | None = None
    users: list[BitbucketUser] | None = None
    groups: list[str] | None = None


class BitbucketWebhook(WireModel):
    id: int = 0
    name: str = ""
    url: str = ""
    events: list[str] = Field(default_factory=list)
    active: bool = False


# =============================================================================
# Pipelines (Bitbucket Cloud)
# =============================================================================


class BitbucketPipelineSelector(WireModel):
    type: str = "custom"
    pattern: str = ""


class BitbucketPipelineTarget(WireModel):
    type: str = "pipeline_ref_target"
    ref_type: str = "branch"
    ref_name: str = ""
    selector: BitbucketPipelineSelector | None = None


class BitbucketPipelineVariable(WireModel):
    key: str = ""
    value: str = ""
    secured: bool = False


class BitbucketPipelineTriggerRequest(WireModel):
    """Body of ``POST /2.0/repositories/{workspace}/{repo}/pipelines/``."""

    target: BitbucketPipelineTarget = Field(default_factory=BitbucketPipelineTarget)
    variables: list[BitbucketPipelineVariable] | None = None

    @classmethod
    def for_branch(
        cls,
        branch: str,
        pipeline: str | None = None,
        variables: dict[str, str] | None = None,
    ) -> "BitbucketPipelineTriggerRequest":
        """Run the default pipeline of ``branch``, or the custom one named ``pipeline``."""
        selector = BitbucketPipelineSelector(pattern=pipeline) if pipeline else None
        return cls(
            target=BitbucketPipelineTarget(ref_name=branch, selector=selector),
            variables=[
                BitbucketPipelineVariable(key=k, value=v) for k, v in variables.items()
            ]
            if variables
            else None,
        )


class BitbucketPipelineResult(WireModel):
    name: str = ""
    type: str = ""


class BitbucketPipelineState(WireModel):
    """Pipeline lifecycle: PENDING, IN_PROGRESS, then COMPLETED with a result."""

    name: str = ""
    type: str = ""
    result: BitbucketPipelineResult | None = None

    @property
    def is_completed(self) -> bool:
        return self.name == "COMPLETED" or self.type == "pipeline_state_completed"

    @property
    def label(self) -> str:
        if self.is_completed and self.result is not None:
            return f"{self.name}/{self.result.name}"
        return self.name


class BitbucketPipelineCommit(WireModel):
    hash: str = ""
    type: str = "commit"


class BitbucketPipelineTargetInfo(WireModel):
    type: str = ""
    ref_type: str | None = None
    ref_name: str | None = None
    commit: BitbucketPipelineCommit | None = None


class BitbucketPipelineTrigger(WireModel):
    type: str = ""
    name: str | None = None


class BitbucketPipeline(WireModel):
    uuid: str = ""
    build_number: int = 0
    state: BitbucketPipelineState | None = None
    created_on: str | None = None
    completed_on: str | None = None
    target: BitbucketPipelineTargetInfo | None = None
    trigger: BitbucketPipelineTrigger | None = None
    duration_in_seconds: int | None = None


class BitbucketPipelineConfiguration(WireModel):
    enabled: bool = False
    repository: BitbucketRepository | None = None
