"""Bamboo REST API payloads.

Bamboo wraps every collection in the same envelope::

    {"size": 2, "start-index": 0, "max-result": 25, "plan": [...]}

Only the name of the item key changes between collections, so the envelope
is a single generic model. Each concrete list declares nothing but its
``item_key``.
"""

from typing import Any, ClassVar, Generic, TypeVar

from pydantic import Field, model_serializer

from atlassian_cli.core.models import WireModel

ItemT = TypeVar("ItemT")


class BambooList(WireModel, Generic[ItemT]):
    """Paginated Bamboo collection.

    Items are exposed as ``items`` in Python and travel under ``item_key``
    on the wire.
    """

    item_key: ClassVar[str] = "items"

    size: int = 0
    start_index: int = Field(default=0, alias="start-index")
    max_result: int = Field(default=0, alias="max-result")
    items: list[ItemT] = Field(default_factory=list)

    @classmethod
    def _prepare_wire(cls, data: dict[str, Any]) -> dict[str, Any]:
        if cls.item_key in data:
            data = dict(data)
            data["items"] = data.pop(cls.item_key)
        return data

    @model_serializer(mode="wrap")
    def _serialize_items(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if isinstance(data, dict) and "items" in data:
            return {self.item_key if k == "items" else k: v for k, v in data.items()}
        return data


class BambooLink(WireModel):
    href: str = ""
    rel: str | None = None


# =============================================================================
# Plans and projects
# =============================================================================


class BambooStage(WireModel):
    name: str = ""
    description: str | None = None


class BambooVariable(WireModel):
    name: str = ""
    value: str = ""


class BambooBranch(WireModel):
    key: str = ""
    name: str = ""
    short_key: str | None = Field(default=None, alias="shortKey")
    short_name: str | None = Field(default=None, alias="shortName")
    description: str | None = None
    enabled: bool = False
    link: BambooLink | None = None


class BambooStageList(BambooList[BambooStage]):
    item_key = "stage"


class BambooBranchList(BambooList[BambooBranch]):
    item_key = "branch"


class BambooVariableContext(BambooList[BambooVariable]):
    item_key = "variable"


class BambooPlan(WireModel):
    key: str = ""
    short_key: str | None = Field(default=None, alias="shortKey")
    name: str = ""
    short_name: str | None = Field(default=None, alias="shortName")
    description: str | None = None
    project_key: str | None = Field(default=None, alias="projectKey")
    project_name: str | None = Field(default=None, alias="projectName")
    enabled: bool = False
    type: str | None = None
    build_name: str | None = Field(default=None, alias="buildName")
    average_build_time_in_seconds: float | None = Field(
        default=None, alias="averageBuildTimeInSeconds"
    )
    link: BambooLink | None = None
    is_favourite: bool = Field(default=False, alias="isFavourite")
    is_active: bool = Field(default=False, alias="isActive")
    is_building: bool = Field(default=False, alias="isBuilding")
    stages: BambooStageList | None = None
    branches: BambooBranchList | None = None
    variable_context: BambooVariableContext | None = Field(default=None, alias="variableContext")


class BambooPlanList(BambooList[BambooPlan]):
    item_key = "plan"


class BambooProject(WireModel):
    key: str = ""
    name: str = ""
    description: str | None = None
    link: BambooLink | None = None
    plans: BambooPlanList | None = None


class BambooProjectList(BambooList[BambooProject]):
    item_key = "project"


class BambooProjectsResponse(WireModel):
    projects: BambooProjectList | None = None


class BambooPlansResponse(WireModel):
    plans: BambooPlanList | None = None


# =============================================================================
# Build results
# =============================================================================


class BambooStageResult(WireModel):
    name: str = ""
    state: str | None = None
    finished: bool = False
    successful: bool = False


class BambooChange(WireModel):
    changeset_id: str | None = Field(default=None, alias="changesetId")
    author: str | None = None
    full_name: str | None = Field(default=None, alias="fullName")
    user_name: str | None = Field(default=None, alias="userName")
    comment: str | None = None
    date: str | None = None
    commit_url: str | None = Field(default=None, alias="commitUrl")


class BambooLogEntry(WireModel):
    log: str | None = None
    date: str | None = None
    unstyled_log: str | None = Field(default=None, alias="unstyledLog")
    formatted_date: str | None = Field(default=None, alias="formattedDate")

    @property
    def text(self) -> str:
        """Plain log line, preferring the unstyled variant."""
        return self.unstyled_log or self.log or ""


class BambooStageResultList(BambooList[BambooStageResult]):
    item_key = "stage"


class BambooChangeList(BambooList[BambooChange]):
    item_key = "change"


class BambooLogEntryList(BambooList[BambooLogEntry]):
    item_key = "logEntry"


class BambooBuildResult(WireModel):
    key: str = ""
    build_number: int = Field(default=0, alias="buildNumber")
    build_result_key: str | None = Field(default=None, alias="buildResultKey")
    state: str = ""
    build_state: str | None = Field(default=None, alias="buildState")
    life_cycle_state: str | None = Field(default=None, alias="lifeCycleState")
    successful: bool = False
    finished: bool = False
    build_reason: str | None = Field(default=None, alias="buildReason")
    reason_summary: str | None = Field(default=None, alias="reasonSummary")
    plan: BambooPlan | None = None
    plan_name: str | None = Field(default=None, alias="planName")
    project_name: str | None = Field(default=None, alias="projectName")
    build_started_time: str | None = Field(default=None, alias="buildStartedTime")
    build_completed_time: str | None = Field(default=None, alias="buildCompletedTime")
    build_duration: int | None = Field(default=None, alias="buildDuration")
    build_duration_description: str | None = Field(default=None, alias="buildDurationDescription")
    build_duration_in_seconds: int | None = Field(default=None, alias="buildDurationInSeconds")
    build_relative_time: str | None = Field(default=None, alias="buildRelativeTime")
    link: BambooLink | None = None
    stages: BambooStageResultList | None = None
    changes: BambooChangeList | None = None
    log_entries: BambooLogEntryList | None = Field(default=None, alias="logEntries")
    successful_test_count: int = Field(default=0, alias="successfulTestCount")
    failed_test_count: int = Field(default=0, alias="failedTestCount")
    quarantined_test_count: int = Field(default=0, alias="quarantinedTestCount")
    skipped_test_count: int = Field(default=0, alias="skippedTestCount")


class BambooBuildResultList(BambooList[BambooBuildResult]):
    item_key = "result"


class BambooBuildResultsResponse(WireModel):
    results: BambooBuildResultList | None = None


class BambooQueueResponse(WireModel):
    """Answer to ``POST /rest/api/latest/queue/{planKey}``."""

    build_number: int = Field(default=0, alias="buildNumber")
    build_result_key: str | None = Field(default=None, alias="buildResultKey")
    plan_key: str | None = Field(default=None, alias="planKey")
    link: BambooLink | None = None
    trigger_reason: str | None = Field(default=None, alias="triggerReason")
