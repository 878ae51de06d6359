"""Bamboo client for the REST API (``/rest/api/latest``).

Example:
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        latest = bamboo.get_latest_build_result("PROJ-PLAN")
        print(latest.build_result_key, latest.state)
"""

import logging
from urllib.parse import quote

from atlassian_cli.atlassian.base import AtlassianClient
from atlassian_cli.core.exceptions import NotFoundError, ProviderError
from atlassian_cli.models.bamboo import (
    BambooBranch,
    BambooBranchList,
    BambooBuildResult,
    BambooBuildResultsResponse,
    BambooPlan,
    BambooPlansResponse,
    BambooProject,
    BambooProjectsResponse,
    BambooQueueResponse,
)

logger = logging.getLogger(__name__)

BAMBOO_API = "/rest/api/latest"

# Bamboo caps page sizes server-side; ask for everything it allows
MAX_RESULT = 1000
MAX_LOG_ENTRIES = 10000
RESULT_EXPAND = "stages.stage,changes.change"


class BambooClient(AtlassianClient):
    """Projects, plans, build results, logs and build queueing."""

    product = "bamboo"
    allow_bearer = True

    # =========================================================================
    # Projects and plans
    # =========================================================================

    def get_projects(self) -> list[BambooProject]:
        """List all projects with their plans."""
        data = self._get(
            f"{BAMBOO_API}/project",
            params={"expand": "projects.project.plans", "max-result": MAX_RESULT},
        )
        projects = BambooProjectsResponse.from_wire(data).projects
        return projects.items if projects else []

    def get_project(self, project_key: str) -> BambooProject:
        """Get a project with its plans."""
        data = self._get(f"{BAMBOO_API}/project/{project_key}", params={"expand": "plans.plan"})
        return BambooProject.from_wire(data)

    def get_plans(self, project_key: str | None = None) -> list[BambooPlan]:
        """List plans, optionally only those of one project.

        Args:
            project_key: Keep plans whose project key matches (case-insensitive)
        """
        data = self._get(f"{BAMBOO_API}/plan", params={"max-result": MAX_RESULT})
        plans = BambooPlansResponse.from_wire(data).plans
        items = plans.items if plans else []
        if project_key:
            wanted = project_key.casefold()
            items = [p for p in items if (p.project_key or "").casefold() == wanted]
        return items

    def get_plan(self, plan_key: str) -> BambooPlan:
        """Get a plan with stages, branches and variables expanded."""
        data = self._get(
            f"{BAMBOO_API}/plan/{plan_key}",
            params={"expand": "stages,branches,variableContext"},
        )
        return BambooPlan.from_wire(data)

    def get_plan_branches(self, plan_key: str) -> list[BambooBranch]:
        """List the branches of a plan."""
        data = self._get(f"{BAMBOO_API}/plan/{plan_key}/branch", params={"max-result": MAX_RESULT})
        return BambooBranchList.from_wire(data).items

    # =========================================================================
    # Build results
    # =========================================================================

    def get_build_results(self, plan_key: str, max_results: int = 25) -> list[BambooBuildResult]:
        """List the most recent build results of a plan, newest first."""
        data = self._get(
            f"{BAMBOO_API}/result/{plan_key}",
            params={"expand": "results.result", "max-result": max_results},
        )
        results = BambooBuildResultsResponse.from_wire(data).results
        return results.items if results else []

    def get_build_result(self, build_result_key: str) -> BambooBuildResult:
        """Get one build result (e.g. 'PROJ-PLAN-42') with stages and changes."""
        data = self._get(
            f"{BAMBOO_API}/result/{build_result_key}",
            params={"expand": RESULT_EXPAND},
        )
        return BambooBuildResult.from_wire(data)

    def get_latest_build_result(self, plan_key: str) -> BambooBuildResult:
        """Get the latest build result of a plan with stages and changes."""
        data = self._get(
            f"{BAMBOO_API}/result/{plan_key}/latest",
            params={"expand": RESULT_EXPAND},
        )
        return BambooBuildResult.from_wire(data)

    # =========================================================================
    # Logs
    # =========================================================================

    def get_build_logs(self, build_result_key: str) -> str:
        """Get the log of a build result as text.

        Uses the log entries of the REST result when Bamboo returns them and
        falls back to the downloadable log file otherwise.
        """
        data = self._get(
            f"{BAMBOO_API}/result/{build_result_key}",
            params={"expand": "logEntries", "max-results": MAX_LOG_ENTRIES},
        )
        result = BambooBuildResult.from_wire(data)

        if result.log_entries and result.log_entries.items:
            return "\n".join(entry.log or "" for entry in result.log_entries.items)

        logger.debug("No log entries for %s, downloading log file", build_result_key)
        return self.get_build_log_download(build_result_key)

    def get_build_log_download(self, build_result_key: str) -> str:
        """Download the raw build log, trying the browse page if the download fails."""
        try:
            return self._get_text(
                f"/download/{build_result_key}/build_logs/{build_result_key}.log"
            )
        except (NotFoundError, ProviderError) as e:
            logger.debug("Log download failed for %s (%s), trying browse URL", build_result_key, e)
        return self._get_text(f"/browse/{build_result_key}/log")

    def get_job_logs(self, build_result_key: str, job_key: str) -> str:
        """Download the log of one job of a build (e.g. job 'PROJ-PLAN-JOB1-42')."""
        return self._get_text(f"/download/{build_result_key}/build_logs/{job_key}.log")

    # =========================================================================
    # Queue
    # =========================================================================

    def queue_build(self, plan_key: str, branch: str | None = None) -> BambooQueueResponse:
        """Queue a build of a plan, or of one of its branches.

        Args:
            plan_key: Plan key
            branch: Branch name; URL-encoded into the path

        Returns:
            Queue response with the new build number and result key
        """
        path = f"{BAMBOO_API}/queue/{plan_key}"
        if branch:
            path += f"/branch/{quote(branch, safe='')}"

        data = self._post(path)
        queued = BambooQueueResponse.from_wire(data)

        logger.info("Queued %s build #%d", queued.plan_key or plan_key, queued.build_number)
        return queued
