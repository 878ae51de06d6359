"""Bitbucket client for Server/Data Center (REST 1.0) and Cloud (API 2.0).

The flavour is detected from the base URL: anything on ``bitbucket.org``
is Cloud. ``project`` means the project key on Server and the workspace on
Cloud. Pull request review operations (diff, commits, activities,
comments) use the Server API; pipelines exist only on Cloud.

Example:
    from atlassian_cli.atlassian import BitbucketClient

    with BitbucketClient() as bitbucket:
        pr = bitbucket.get_pull_request("PROJ", "repo", 42)
        diff = bitbucket.get_pull_request_diff("PROJ", "repo", 42)
"""

import logging
from typing import Any, TypeVar

from atlassian_cli.atlassian.base import AtlassianClient
from atlassian_cli.core.exceptions import ValidationError
from atlassian_cli.core.models import WireModel
from atlassian_cli.models.bitbucket import (
    AddBitbucketCommentRequest,
    BitbucketActivity,
    BitbucketBranch,
    BitbucketBranchRestriction,
    BitbucketBuildStatus,
    BitbucketComment,
    BitbucketCommit,
    BitbucketDiffResponse,
    BitbucketPipeline,
    BitbucketPipelineConfiguration,
    BitbucketPipelineTriggerRequest,
    BitbucketProject,
    BitbucketPullRequest,
    BitbucketRepository,
    BitbucketWebhook,
    PagedResponse,
)

logger = logging.getLogger(__name__)

SERVER_API = "/rest/api/1.0"
CLOUD_API = "/2.0"
BUILD_STATUS_API = "/rest/build-status/1.0"
BRANCH_PERMISSIONS_API = "/rest/branch-permissions/2.0"

DEFAULT_LIMIT = 25
# Page size when following every page of a pull request's commits or activities
PAGE_LIMIT = 100

ModelT = TypeVar("ModelT", bound=WireModel)


class BitbucketClient(AtlassianClient):
    """Repositories, pull requests, code review and pipelines."""

    product = "bitbucket"
    allow_bearer = True

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.is_cloud = "bitbucket.org" in self.base_url.lower()
        logger.debug("Bitbucket flavour: %s", "cloud" if self.is_cloud else "server")

    # =========================================================================
    # Paths and paging
    # =========================================================================

    def _repo_path(self, project: str, repo: str) -> str:
        if self.is_cloud:
            return f"{CLOUD_API}/repositories/{project}/{repo}"
        return f"{SERVER_API}/projects/{project}/repos/{repo}"

    def _page_params(self, limit: int, start: int) -> dict[str, Any]:
        self._check_limit(limit)
        if self.is_cloud:
            return {"pagelen": limit, "page": start // limit + 1}
        return {"limit": limit, "start": start}

    def _check_limit(self, limit: int) -> None:
        if limit < 1:
            raise ValidationError(
                f"Page limit must be at least 1, got {limit}", field="limit", provider=self.product
            )

    def _get_page(
        self,
        model: type[ModelT],
        path: str,
        params: dict[str, Any] | None = None,
    ) -> PagedResponse[ModelT]:
        data = self._get(path, params=params)
        return PagedResponse[model].from_wire(data)  # type: ignore[valid-type]

    def _get_all_pages(self, model: type[ModelT], path: str) -> list[ModelT]:
        """Follow ``nextPageStart`` until the server reports the last page."""
        values: list[ModelT] = []
        start = 0
        while True:
            page = self._get_page(model, path, params={"start": start, "limit": PAGE_LIMIT})
            values.extend(page.values)
            if not page.has_more:
                return values
            assert page.next_page_start is not None
            start = page.next_page_start

    def _require_cloud(self, message: str) -> None:
        if not self.is_cloud:
            raise ValidationError(message, provider=self.product)

    # =========================================================================
    # Projects, repositories and branches
    # =========================================================================

    def get_project(self, project: str) -> BitbucketProject:
        """Get a project (Server) or workspace (Cloud)."""
        path = (
            f"{CLOUD_API}/workspaces/{project}"
            if self.is_cloud
            else f"{SERVER_API}/projects/{project}"
        )
        return BitbucketProject.from_wire(self._get(path))

    def list_projects(
        self, limit: int = DEFAULT_LIMIT, start: int = 0
    ) -> PagedResponse[BitbucketProject]:
        """List projects (Server) or workspaces (Cloud)."""
        path = f"{CLOUD_API}/workspaces" if self.is_cloud else f"{SERVER_API}/projects"
        return self._get_page(BitbucketProject, path, self._page_params(limit, start))

    def get_repository(self, project: str, repo: str) -> BitbucketRepository:
        return BitbucketRepository.from_wire(self._get(self._repo_path(project, repo)))

    def list_repositories(
        self, project: str, limit: int = DEFAULT_LIMIT, start: int = 0
    ) -> PagedResponse[BitbucketRepository]:
        """List the repositories of a project or workspace."""
        path = (
            f"{CLOUD_API}/repositories/{project}"
            if self.is_cloud
            else f"{SERVER_API}/projects/{project}/repos"
        )
        return self._get_page(BitbucketRepository, path, self._page_params(limit, start))

    def list_branches(
        self, project: str, repo: str, limit: int = DEFAULT_LIMIT, start: int = 0
    ) -> PagedResponse[BitbucketBranch]:
        suffix = "/refs/branches" if self.is_cloud else "/branches"
        return self._get_page(
            BitbucketBranch,
            self._repo_path(project, repo) + suffix,
            self._page_params(limit, start),
        )

    def get_default_branch(self, project: str, repo: str) -> BitbucketBranch:
        """Get the default branch.

        Cloud has no default-branch endpoint, so the first branch named
        ``main`` or ``master`` is returned there.
        """
        if not self.is_cloud:
            return BitbucketBranch.from_wire(
                self._get(self._repo_path(project, repo) + "/default-branch")
            )

        page = self._get_page(
            BitbucketBranch,
            self._repo_path(project, repo) + "/refs/branches",
            {"q": 'name="main" OR name="master"'},
        )
        if not page.values:
            raise ValidationError(
                f"No main or master branch found in {project}/{repo}",
                provider=self.product,
            )
        return page.values[0]

    # =========================================================================
    # Commits and build statuses
    # =========================================================================

    def list_commits(
        self,
        project: str,
        repo: str,
        branch: str | None = None,
        limit: int = DEFAULT_LIMIT,
        start: int = 0,
    ) -> PagedResponse[BitbucketCommit]:
        """List commits, newest first, optionally reachable from ``branch``."""
        params = self._page_params(limit, start)
        if branch:
            params["include" if self.is_cloud else "until"] = branch
        return self._get_page(BitbucketCommit, self._repo_path(project, repo) + "/commits", params)

    def get_commit(self, project: str, repo: str, commit_id: str) -> BitbucketCommit:
        segment = "commit" if self.is_cloud else "commits"
        data = self._get(f"{self._repo_path(project, repo)}/{segment}/{commit_id}")
        return BitbucketCommit.from_wire(data)

    def get_build_statuses(
        self, project: str, repo: str, commit_id: str
    ) -> PagedResponse[BitbucketBuildStatus]:
        """List CI build statuses reported for a commit."""
        path = (
            f"{self._repo_path(project, repo)}/commit/{commit_id}/statuses"
            if self.is_cloud
            else f"{BUILD_STATUS_API}/commits/{commit_id}"
        )
        return self._get_page(BitbucketBuildStatus, path)

    # =========================================================================
    # Pull requests
    # =========================================================================

    def list_pull_requests(
        self,
        project: str,
        repo: str,
        state: str = "OPEN",
        limit: int = DEFAULT_LIMIT,
        start: int = 0,
    ) -> PagedResponse[BitbucketPullRequest]:
        """List pull requests in ``state`` (OPEN, MERGED, DECLINED, ALL)."""
        suffix = "/pullrequests" if self.is_cloud else "/pull-requests"
        params = {"state": state.upper(), **self._page_params(limit, start)}
        return self._get_page(BitbucketPullRequest, self._repo_path(project, repo) + suffix, params)

    def get_pull_request(self, project: str, repo: str, pr_id: int) -> BitbucketPullRequest:
        suffix = "pullrequests" if self.is_cloud else "pull-requests"
        data = self._get(f"{self._repo_path(project, repo)}/{suffix}/{pr_id}")
        return BitbucketPullRequest.from_wire(data)

    def _pull_request_path(self, project: str, repo: str, pr_id: int) -> str:
        return f"{SERVER_API}/projects/{project}/repos/{repo}/pull-requests/{pr_id}"

    def get_pull_request_diff(self, project: str, repo: str, pr_id: int) -> BitbucketDiffResponse:
        """Get the structured diff of a pull request."""
        data = self._get(self._pull_request_path(project, repo, pr_id) + "/diff")
        diff = BitbucketDiffResponse.from_wire(data)
        if diff.is_truncated():
            logger.warning("Diff of pull request #%d is truncated by the server", pr_id)
        return diff

    def get_pull_request_commits(
        self, project: str, repo: str, pr_id: int
    ) -> list[BitbucketCommit]:
        """Get every commit of a pull request, following all pages."""
        return self._get_all_pages(
            BitbucketCommit, self._pull_request_path(project, repo, pr_id) + "/commits"
        )

    def get_pull_request_activities(
        self, project: str, repo: str, pr_id: int
    ) -> list[BitbucketActivity]:
        """Get every activity (comments, approvals, updates) of a pull request."""
        return self._get_all_pages(
            BitbucketActivity, self._pull_request_path(project, repo, pr_id) + "/activities"
        )

    def add_pull_request_comment(
        self, project: str, repo: str, pr_id: int, text: str
    ) -> BitbucketComment:
        """Add a general comment to a pull request."""
        request = AddBitbucketCommentRequest(text=text)
        data = self._post(
            self._pull_request_path(project, repo, pr_id) + "/comments",
            json=request.to_wire(),
        )
        comment = BitbucketComment.from_wire(data)
        logger.info("Added comment %d to pull request #%d", comment.id, pr_id)
        return comment

    # =========================================================================
    # Repository settings
    # =========================================================================

    def get_branch_restrictions(
        self, project: str, repo: str
    ) -> PagedResponse[BitbucketBranchRestriction]:
        path = (
            f"{self._repo_path(project, repo)}/branch-restrictions"
            if self.is_cloud
            else f"{BRANCH_PERMISSIONS_API}/projects/{project}/repos/{repo}/restrictions"
        )
        return self._get_page(BitbucketBranchRestriction, path)

    def get_webhooks(self, project: str, repo: str) -> PagedResponse[BitbucketWebhook]:
        suffix = "/hooks" if self.is_cloud else "/webhooks"
        return self._get_page(BitbucketWebhook, self._repo_path(project, repo) + suffix)

    # =========================================================================
    # Pipelines (Cloud only)
    # =========================================================================

    def get_pipeline_configuration(
        self, project: str, repo: str
    ) -> BitbucketPipelineConfiguration:
        self._require_cloud(
            "Pipeline configuration is only available for Bitbucket Cloud. "
            "For Bitbucket Server, use build status APIs or external CI/CD tools."
        )
        data = self._get(self._repo_path(project, repo) + "/pipelines_config")
        return BitbucketPipelineConfiguration.from_wire(data)

    def list_pipelines(
        self, project: str, repo: str, limit: int = DEFAULT_LIMIT
    ) -> PagedResponse[BitbucketPipeline]:
        """List pipelines, most recently created first."""
        self._require_cloud(
            "Pipelines are only available for Bitbucket Cloud. "
            "For Bitbucket Server, use build status APIs or external CI/CD tools."
        )
        self._check_limit(limit)
        return self._get_page(
            BitbucketPipeline,
            self._repo_path(project, repo) + "/pipelines/",
            {"pagelen": limit, "sort": "-created_on"},
        )

    def get_pipeline(self, project: str, repo: str, pipeline_uuid: str) -> BitbucketPipeline:
        self._require_cloud(
            "Pipelines are only available for Bitbucket Cloud. "
            "For Bitbucket Server, use build status APIs or external CI/CD tools."
        )
        data = self._get(f"{self._repo_path(project, repo)}/pipelines/{pipeline_uuid}")
        return BitbucketPipeline.from_wire(data)

    def trigger_pipeline(
        self,
        project: str,
        repo: str,
        branch: str,
        pipeline: str | None = None,
        variables: dict[str, str] | None = None,
    ) -> BitbucketPipeline:
        """Run the pipeline of ``branch``.

        Args:
            project: Workspace
            repo: Repository slug
            branch: Branch to build
            pipeline: Custom pipeline name from bitbucket-pipelines.yml
            variables: Pipeline variables, sent unsecured

        Returns:
            The created pipeline
        """
        self._require_cloud(
            "Pipelines are only available for Bitbucket Cloud. "
            "For Bitbucket Server, use external CI/CD tools like Jenkins, Bamboo, "
            "or GitHub Actions."
        )
        request = BitbucketPipelineTriggerRequest.for_branch(branch, pipeline, variables)
        data = self._post(self._repo_path(project, repo) + "/pipelines/", json=request.to_wire())
        created = BitbucketPipeline.from_wire(data)
        logger.info("Triggered pipeline #%d on %s", created.build_number, branch)
        return created

    def stop_pipeline(self, project: str, repo: str, pipeline_uuid: str) -> None:
        self._require_cloud("Pipelines are only available for Bitbucket Cloud.")
        self._post(f"{self._repo_path(project, repo)}/pipelines/{pipeline_uuid}/stopPipeline")
        logger.info("Stopped pipeline %s", pipeline_uuid)
