"""Tests for the CLI module."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from atlassian_cli.cli import (
    build_parser,
    cmd_bamboo_get_build_logs,
    cmd_bamboo_get_plans,
    cmd_bamboo_queue_build,
    cmd_bitbucket_add_pr_comment,
    cmd_bitbucket_get_pr_comments,
    cmd_bitbucket_get_pr_diff,
    cmd_bitbucket_trigger_pipeline,
    cmd_confluence_get_page,
    cmd_confluence_update_page,
    cmd_jira_add_comment,
    cmd_jira_change_status,
    cmd_jira_create_issue,
    cmd_jira_get_issue,
    configure_logging,
    filter_log_lines,
    format_millis,
    main,
    positive_int,
)
from atlassian_cli.core.exceptions import (
    ConflictingSourcesError,
    MissingSourceError,
    NotFoundError,
    ValidationError,
)
from atlassian_cli.models.bamboo import BambooPlan, BambooQueueResponse
from atlassian_cli.models.bitbucket import (
    BitbucketActivity,
    BitbucketComment,
    BitbucketDiffResponse,
    BitbucketPipeline,
)
from atlassian_cli.models.confluence import ConfluencePage
from atlassian_cli.models.jira import (
    CreateJiraIssueResponse,
    JiraComment,
    JiraIssue,
    JiraTransition,
)

# =============================================================================
# Test Fixtures
# =============================================================================


def client_mock() -> MagicMock:
    """Create a client mock usable as a context manager."""
    client = MagicMock()
    client.__enter__ = MagicMock(return_value=client)
    client.__exit__ = MagicMock(return_value=False)
    return client


@pytest.fixture
def sample_issue() -> JiraIssue:
    """Create a sample issue for testing."""
    return JiraIssue.from_wire(
        {
            "id": "10001",
            "key": "PROJ-123",
            "fields": {
                "summary": "Test issue",
                "description": "Test description",
                "issuetype": {"name": "Story"},
                "status": {"name": "To Do"},
                "assignee": {"displayName": "Jane Doe"},
            },
        }
    )


@pytest.fixture
def sample_page() -> ConfluencePage:
    """Create a sample page for testing."""
    return ConfluencePage.from_wire(
        {
            "id": "12345",
            "title": "Test Page",
            "space": {"key": "TEST"},
            "body": {
                "storage": {"value": "<p>Test content</p>"},
                "view": {"value": "<p>Rendered</p>"},
            },
            "version": {"number": 2},
        }
    )


# =============================================================================
# Jira Command Tests
# =============================================================================


class TestJiraCommands:
    """Tests for jira commands."""

    def test_get_issue(self, sample_issue: JiraIssue, capsys: pytest.CaptureFixture) -> None:
        """Test printing an issue."""
        mock_jira = client_mock()
        mock_jira.get_issue.return_value = sample_issue

        args = argparse.Namespace(issue_key="PROJ-123", json=False)

        with patch("atlassian_cli.atlassian.JiraClient", return_value=mock_jira):
            result = cmd_jira_get_issue(args)

        assert result == 0
        mock_jira.get_issue.assert_called_once_with("PROJ-123")
        output = capsys.readouterr().out
        assert "Test issue" in output
        assert "Jane Doe" in output

    def test_get_issue_json(self, sample_issue: JiraIssue, capsys: pytest.CaptureFixture) -> None:
        """Test printing an issue as JSON with wire names."""
        mock_jira = client_mock()
        mock_jira.get_issue.return_value = sample_issue

        args = argparse.Namespace(issue_key="PROJ-123", json=True)

        with patch("atlassian_cli.atlassian.JiraClient", return_value=mock_jira):
            cmd_jira_get_issue(args)

        data = json.loads(capsys.readouterr().out)
        assert data["fields"]["issuetype"]["name"] == "Story"

    def test_create_issue_description_from_file(self, tmp_path: Path) -> None:
        """Test that --description-file content is sent as the description."""
        path = tmp_path / "desc.txt"
        path.write_text("From file\n", encoding="utf-8")
        mock_jira = client_mock()
        mock_jira.create_issue.return_value = CreateJiraIssueResponse(key="PROJ-9")

        args = argparse.Namespace(
            project="PROJ",
            summary="Title",
            type="Bug",
            description=None,
            description_file=str(path),
        )

        with patch("atlassian_cli.atlassian.JiraClient", return_value=mock_jira):
            result = cmd_jira_create_issue(args)

        assert result == 0
        mock_jira.create_issue.assert_called_once_with(
            project="PROJ", summary="Title", issue_type="Bug", description="From file\n"
        )

    def test_create_issue_without_description(self) -> None:
        """Test that the description is optional."""
        mock_jira = client_mock()
        mock_jira.create_issue.return_value = CreateJiraIssueResponse(key="PROJ-9")

        args = argparse.Namespace(
            project="PROJ", summary="Title", type="Task", description=None, description_file=None
        )

        with patch("atlassian_cli.atlassian.JiraClient", return_value=mock_jira):
            cmd_jira_create_issue(args)

        assert mock_jira.create_issue.call_args.kwargs["description"] is None

    def test_add_comment_conflicting_sources(self) -> None:
        """Test that content errors are raised before any request is made."""
        mock_jira = client_mock()
        args = argparse.Namespace(issue_key="PROJ-1", body="Hi", file="comment.txt")

        with patch("atlassian_cli.atlassian.JiraClient", return_value=mock_jira) as client_cls:
            with pytest.raises(ConflictingSourcesError):
                cmd_jira_add_comment(args)

        client_cls.assert_not_called()

    def test_add_comment(self) -> None:
        """Test adding an inline comment."""
        mock_jira = client_mock()
        mock_jira.add_comment.return_value = JiraComment(id="55", body="Hi")

        args = argparse.Namespace(issue_key="PROJ-1", body="Hi", file=None)

        with patch("atlassian_cli.atlassian.JiraClient", return_value=mock_jira):
            assert cmd_jira_add_comment(args) == 0

        mock_jira.add_comment.assert_called_once_with("PROJ-1", "Hi")

    def test_change_status(self, capsys: pytest.CaptureFixture) -> None:
        """Test printing the reached status."""
        mock_jira = client_mock()
        mock_jira.transition_issue.return_value = JiraTransition.from_wire(
            {"id": "31", "name": "Resolve", "to": {"name": "Done"}}
        )

        args = argparse.Namespace(issue_key="PROJ-1", status="done")

        with patch("atlassian_cli.atlassian.JiraClient", return_value=mock_jira):
            cmd_jira_change_status(args)

        assert "Transitioned PROJ-1 to 'Done'" in capsys.readouterr().out


# =============================================================================
# Confluence Command Tests
# =============================================================================


class TestConfluenceCommands:
    """Tests for confluence commands."""

    def test_get_page_by_title_view(
        self, sample_page: ConfluencePage, capsys: pytest.CaptureFixture
    ) -> None:
        """Test printing the rendered body of a page found by title."""
        mock_conf = client_mock()
        mock_conf.get_page_by_title.return_value = sample_page

        args = argparse.Namespace(
            id=None, space="TEST", title="Test Page", format="view", json=False
        )

        with patch("atlassian_cli.atlassian.ConfluenceClient", return_value=mock_conf):
            result = cmd_confluence_get_page(args)

        assert result == 0
        assert "<p>Rendered</p>" in capsys.readouterr().out

    def test_get_page_not_found(self, capsys: pytest.CaptureFixture) -> None:
        """Test a title that matches no page."""
        mock_conf = client_mock()
        mock_conf.get_page_by_title.return_value = None

        args = argparse.Namespace(id=None, space="TEST", title="Nope", format="storage", json=False)

        with patch("atlassian_cli.atlassian.ConfluenceClient", return_value=mock_conf):
            result = cmd_confluence_get_page(args)

        assert result == 1
        assert "not found" in capsys.readouterr().err

    def test_get_page_requires_selector(self) -> None:
        """Test that either --id or --space with --title is needed."""
        args = argparse.Namespace(id=None, space="TEST", title=None, format="storage", json=False)

        with pytest.raises(ValidationError):
            cmd_confluence_get_page(args)

    def test_update_page_append_from_file(
        self, sample_page: ConfluencePage, tmp_path: Path
    ) -> None:
        """Test appending file content to a page by id."""
        path = tmp_path / "more.html"
        path.write_text("<p>More</p>", encoding="utf-8")
        mock_conf = client_mock()
        mock_conf.update_page.return_value = sample_page

        args = argparse.Namespace(
            id="12345", space=None, title=None, body=None, file=str(path), append=True
        )

        with patch("atlassian_cli.atlassian.ConfluenceClient", return_value=mock_conf):
            assert cmd_confluence_update_page(args) == 0

        mock_conf.update_page.assert_called_once_with("12345", "<p>More</p>", append=True)


# =============================================================================
# Bamboo Command Tests
# =============================================================================


class TestBambooCommands:
    """Tests for bamboo commands."""

    def test_get_plans(self, capsys: pytest.CaptureFixture) -> None:
        """Test listing plans."""
        mock_bamboo = client_mock()
        mock_bamboo.get_plans.return_value = [
            BambooPlan(key="PROJ-PLAN", name="Build", enabled=True, is_building=True)
        ]

        args = argparse.Namespace(project="PROJ")

        with patch("atlassian_cli.atlassian.BambooClient", return_value=mock_bamboo):
            cmd_bamboo_get_plans(args)

        mock_bamboo.get_plans.assert_called_once_with(project_key="PROJ")
        assert "PROJ-PLAN" in capsys.readouterr().out

    def test_get_build_logs_filtered(self, capsys: pytest.CaptureFixture) -> None:
        """Test that only matching log lines are printed."""
        mock_bamboo = client_mock()
        mock_bamboo.get_build_logs.return_value = (
            "compile ok\nERROR: test failed\nwarning: slow\ndone"
        )

        args = argparse.Namespace(build_key="PROJ-PLAN-1", job=None, filter=["error", "WARN"])

        with patch("atlassian_cli.atlassian.BambooClient", return_value=mock_bamboo):
            cmd_bamboo_get_build_logs(args)

        output = capsys.readouterr().out
        assert "(2 matches)" in output
        assert "ERROR: test failed" in output
        assert "warning: slow" in output
        assert "compile ok" not in output

    def test_get_job_logs(self) -> None:
        """Test that --job reads the job's own log."""
        mock_bamboo = client_mock()
        mock_bamboo.get_job_logs.return_value = "job"

        args = argparse.Namespace(build_key="PROJ-PLAN-1", job="PROJ-PLAN-JOB1-1", filter=None)

        with patch("atlassian_cli.atlassian.BambooClient", return_value=mock_bamboo):
            cmd_bamboo_get_build_logs(args)

        mock_bamboo.get_job_logs.assert_called_once_with("PROJ-PLAN-1", "PROJ-PLAN-JOB1-1")
        mock_bamboo.get_build_logs.assert_not_called()

    def test_queue_build(self, capsys: pytest.CaptureFixture) -> None:
        """Test queueing a branch build."""
        mock_bamboo = client_mock()
        mock_bamboo.queue_build.return_value = BambooQueueResponse(
            build_number=12, build_result_key="PROJ-PLAN-12"
        )

        args = argparse.Namespace(plan_key="PROJ-PLAN", branch="feature/x")

        with patch("atlassian_cli.atlassian.BambooClient", return_value=mock_bamboo):
            cmd_bamboo_queue_build(args)

        mock_bamboo.queue_build.assert_called_once_with("PROJ-PLAN", branch="feature/x")
        assert "PROJ-PLAN-12" in capsys.readouterr().out


class TestFilterLogLines:
    """Tests for log filtering."""

    def test_any_pattern_matches(self) -> None:
        """Test that lines matching any pattern are kept, ignoring case."""
        logs = "alpha\nBeta\ngamma"

        assert filter_log_lines(logs, ["^b", "mm"]) == ["Beta", "gamma"]

    def test_invalid_pattern(self) -> None:
        """Test that a bad regular expression is a validation error."""
        with pytest.raises(ValidationError):
            filter_log_lines("x", ["("])


# =============================================================================
# Bitbucket Command Tests
# =============================================================================


class TestBitbucketCommands:
    """Tests for bitbucket commands."""

    def test_get_pr_diff(self, capsys: pytest.CaptureFixture) -> None:
        """Test printing a diff with line prefixes."""
        mock_bb = client_mock()
        mock_bb.get_pull_request_diff.return_value = BitbucketDiffResponse.from_wire(
            {
                "diffs": [
                    {
                        "destination": {"toString": "a.py"},
                        "hunks": [
                            {
                                "sourceLine": 1,
                                "sourceSpan": 1,
                                "destinationLine": 1,
                                "destinationSpan": 1,
                                "segments": [
                                    {"type": "REMOVED", "lines": [{"line": "old"}]},
                                    {"type": "ADDED", "lines": [{"line": "new"}]},
                                ],
                            }
                        ],
                    }
                ]
            }
        )

        args = argparse.Namespace(project="PROJ", repo="repo", pr_id=42)

        with patch("atlassian_cli.atlassian.BitbucketClient", return_value=mock_bb):
            cmd_bitbucket_get_pr_diff(args)

        output = capsys.readouterr().out
        assert "diff a.py" in output
        assert "@@ -1,1 +1,1 @@" in output
        assert "-old\n+new" in output

    def test_get_pr_comments(self, capsys: pytest.CaptureFixture) -> None:
        """Test printing comment threads with replies."""
        mock_bb = client_mock()
        mock_bb.get_pull_request_activities.return_value = [
            BitbucketActivity(
                action="COMMENTED",
                comment=BitbucketComment(
                    id=1, text="Why?", comments=[BitbucketComment(id=2, text="Because")]
                ),
            ),
            BitbucketActivity(action="APPROVED"),
        ]

        args = argparse.Namespace(project="PROJ", repo="repo", pr_id=42)

        with patch("atlassian_cli.atlassian.BitbucketClient", return_value=mock_bb):
            cmd_bitbucket_get_pr_comments(args)

        output = capsys.readouterr().out
        assert "1 comment thread(s)" in output
        assert "    Because" in output

    def test_add_pr_comment_missing_text(self) -> None:
        """Test that a comment needs --text or --file."""
        args = argparse.Namespace(project="PROJ", repo="repo", pr_id=42, text=None, file=None)

        with pytest.raises(MissingSourceError) as exc_info:
            cmd_bitbucket_add_pr_comment(args)

        assert str(exc_info.value) == "You must specify either --text or --file."

    def test_trigger_pipeline_variables(self) -> None:
        """Test that KEY=VALUE pairs become pipeline variables."""
        mock_bb = client_mock()
        mock_bb.trigger_pipeline.return_value = BitbucketPipeline(uuid="{p}", build_number=5)

        args = argparse.Namespace(
            project="ws", repo="repo", branch="main", pipeline=None, var=["ENV=qa", "URL=a=b"]
        )

        with patch("atlassian_cli.atlassian.BitbucketClient", return_value=mock_bb):
            cmd_bitbucket_trigger_pipeline(args)

        mock_bb.trigger_pipeline.assert_called_once_with(
            "ws", "repo", "main", pipeline=None, variables={"ENV": "qa", "URL": "a=b"}
        )

    def test_trigger_pipeline_bad_variable(self) -> None:
        """Test that a variable without '=' is rejected."""
        args = argparse.Namespace(
            project="ws", repo="repo", branch="main", pipeline=None, var=["ENV"]
        )

        with pytest.raises(ValidationError):
            cmd_bitbucket_trigger_pipeline(args)


def test_format_millis() -> None:
    """Test formatting Bitbucket timestamps."""
    assert format_millis(0) == "N/A"
    assert format_millis(1700000000000) == "2023-11-14 22:13:20 UTC"


@pytest.mark.parametrize(("verbose", "level"), [(True, logging.DEBUG), (False, logging.WARNING)])
def test_configure_logging(verbose: bool, level: int) -> None:
    """Test that --verbose switches logging to DEBUG."""
    with patch("atlassian_cli.cli.logging.basicConfig") as mock_config:
        configure_logging(verbose)

    assert mock_config.call_args.kwargs["level"] == level


# =============================================================================
# Main Entry Point Tests
# =============================================================================


class TestMain:
    """Tests for main function."""

    def test_main_no_args(self) -> None:
        """Test main with no arguments."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_main_help(self) -> None:
        """Test main with --help."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    @pytest.mark.parametrize("product", ["jira", "confluence", "bamboo", "bitbucket"])
    def test_product_help(self, product: str) -> None:
        """Test each product's subcommand help."""
        with pytest.raises(SystemExit) as exc_info:
            main([product, "--help"])
        assert exc_info.value.code == 0

    def test_content_error_printed_verbatim(self, capsys: pytest.CaptureFixture) -> None:
        """Test that content errors go to stderr without a prefix."""
        result = main(["jira", "update-issue", "PROJ-1"])

        assert result == 1
        assert capsys.readouterr().err.strip() == (
            "You must specify either --description or --file."
        )

    def test_missing_file_reported(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a missing content file is reported with its path."""
        missing = tmp_path / "none.txt"

        result = main(
            ["confluence", "create-page", "--space", "DEV", "--title", "T", "--file", str(missing)]
        )

        assert result == 1
        assert f"The specified file does not exist: {missing}" in capsys.readouterr().err

    def test_configuration_error(self, clean_env: None, capsys: pytest.CaptureFixture) -> None:
        """Test that missing settings are reported as configuration errors."""
        result = main(["bamboo", "get-projects"])

        assert result == 1
        assert "Configuration error: [bamboo] BAMBOO_BASE_URL is not set" in capsys.readouterr().err

    def test_client_error(self, capsys: pytest.CaptureFixture) -> None:
        """Test that client errors are printed with the product prefix."""
        mock_jira = client_mock()
        mock_jira.get_issue.side_effect = NotFoundError("Resource not found", provider="jira")

        with patch("atlassian_cli.atlassian.JiraClient", return_value=mock_jira):
            result = main(["jira", "get-issue", "PROJ-404"])

        assert result == 1
        assert "Error: [jira] Resource not found" in capsys.readouterr().err

    def test_parser_description_file_dest(self) -> None:
        """Test that --description-file is parsed into description_file."""
        args = build_parser().parse_args(
            ["jira", "create-issue", "-p", "PROJ", "-s", "T", "--description-file", "d.txt"]
        )

        assert args.description_file == "d.txt"
        assert args.description is None
        assert args.type == "Task"

    @pytest.mark.parametrize(
        "argv",
        [
            ["bitbucket", "list-repos", "ws", "--limit", "0"],
            ["bitbucket", "list-prs", "PROJ", "repo", "--limit", "-1"],
            ["bitbucket", "list-pipelines", "ws", "repo", "--limit", "x"],
            ["bamboo", "get-builds", "P-1", "--max-results", "0"],
        ],
    )
    def test_non_positive_limit_rejected(
        self, argv: list[str], capsys: pytest.CaptureFixture
    ) -> None:
        """Test that limits below 1 are a usage error, not a crash."""
        with pytest.raises(SystemExit) as exc_info:
            main(argv)

        assert exc_info.value.code == 2
        assert "argument --" in capsys.readouterr().err

    def test_positive_int(self) -> None:
        """Test the argparse type used for limits."""
        assert positive_int("3") == 3
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int("0")

    def test_parser_repeatable_filter(self) -> None:
        """Test that --filter can be given several times."""
        args = build_parser().parse_args(
            ["bamboo", "get-build-logs", "P-1", "--filter", "a", "--filter", "b"]
        )

        assert args.filter == ["a", "b"]
