"""Tests for Bitbucket wire models."""

from atlassian_cli.models.bitbucket import (
    BitbucketActivity,
    BitbucketCommit,
    BitbucketDiffResponse,
    BitbucketPipeline,
    BitbucketPipelineState,
    BitbucketPipelineTriggerRequest,
    BitbucketPullRequest,
    BitbucketRepository,
    PagedResponse,
)


def diff_payload(line_truncated: bool = False, top_truncated: bool = False) -> dict:
    """Build a one-file diff with a single added line."""
    return {
        "fromHash": "aaa",
        "toHash": "bbb",
        "contextLines": 10,
        "whitespace": "SHOW",
        "truncated": top_truncated,
        "diffs": [
            {
                "source": None,
                "destination": {
                    "components": ["src", "app.py"],
                    "parent": "src",
                    "name": "app.py",
                    "extension": "py",
                    "toString": "src/app.py",
                },
                "hunks": [
                    {
                        "sourceLine": 0,
                        "sourceSpan": 0,
                        "destinationLine": 1,
                        "destinationSpan": 1,
                        "segments": [
                            {
                                "type": "ADDED",
                                "lines": [
                                    {
                                        "source": 0,
                                        "destination": 1,
                                        "line": "print('hi')",
                                        "truncated": line_truncated,
                                    }
                                ],
                                "truncated": False,
                            }
                        ],
                        "truncated": False,
                    }
                ],
                "truncated": False,
            }
        ],
    }


class TestPagedResponse:
    """Tests for the Server paging envelope."""

    def test_last_page(self) -> None:
        """Test a final page of repositories."""
        page = PagedResponse[BitbucketRepository].from_wire(
            {
                "size": 1,
                "limit": 25,
                "start": 0,
                "isLastPage": True,
                "values": [{"slug": "repo", "name": "Repo", "scmId": "git"}],
            }
        )

        assert page.values[0].slug == "repo"
        assert not page.has_more

    def test_more_pages(self) -> None:
        """Test a page that points at the next one."""
        page = PagedResponse[BitbucketCommit].from_wire(
            {"values": [], "isLastPage": False, "nextPageStart": 25}
        )

        assert page.has_more
        assert page.next_page_start == 25

    def test_cloud_page_without_server_keys(self) -> None:
        """Test a Cloud page, which has no isLastPage key."""
        page = PagedResponse[BitbucketRepository].from_wire(
            {"pagelen": 10, "page": 1, "values": [{"slug": "a"}, {"slug": "b"}]}
        )

        assert [r.slug for r in page.values] == ["a", "b"]
        assert not page.has_more


class TestBitbucketPullRequest:
    """Tests for pull request parsing."""

    def test_parse(self) -> None:
        """Test parsing a Server pull request."""
        pr = BitbucketPullRequest.from_wire(
            {
                "id": 42,
                "version": 3,
                "title": "Add login",
                "state": "OPEN",
                "open": True,
                "createdDate": 1700000000000,
                "fromRef": {"id": "refs/heads/feature", "displayId": "feature"},
                "toRef": {"id": "refs/heads/main", "displayId": "main"},
                "author": {
                    "user": {"name": "jdoe", "displayName": "Jane Doe", "id": 7, "active": True},
                    "role": "AUTHOR",
                    "approved": False,
                },
                "reviewers": [
                    {
                        "user": {"name": "rev"},
                        "role": "REVIEWER",
                        "approved": True,
                        "status": "APPROVED",
                    }
                ],
            }
        )

        assert pr.id == 42
        assert pr.from_ref is not None
        assert pr.from_ref.display_id == "feature"
        assert pr.author is not None
        assert pr.author.user is not None
        assert pr.author.user.display_name == "Jane Doe"
        assert pr.reviewers is not None
        assert pr.reviewers[0].approved

    def test_state_default(self) -> None:
        """Test that state defaults to OPEN when missing."""
        assert BitbucketPullRequest.from_wire({"id": 1}).state == "OPEN"


class TestBitbucketDiff:
    """Tests for diff parsing and truncation."""

    def test_parse_diff(self) -> None:
        """Test the file path and line content of a diff."""
        diff = BitbucketDiffResponse.from_wire(diff_payload())

        assert diff.diffs is not None
        file_diff = diff.diffs[0]
        assert file_diff.source is None
        assert file_diff.path == "src/app.py"
        assert file_diff.hunks is not None
        segment = file_diff.hunks[0].segments[0]  # type: ignore[index]
        assert segment.type == "ADDED"
        assert segment.lines is not None
        assert segment.lines[0].line == "print('hi')"

    def test_path_serialized_as_to_string(self) -> None:
        """Test that the display path travels as toString."""
        wire = BitbucketDiffResponse.from_wire(diff_payload()).to_wire()

        assert wire["diffs"][0]["destination"]["toString"] == "src/app.py"

    def test_not_truncated(self) -> None:
        """Test a complete diff."""
        assert not BitbucketDiffResponse.from_wire(diff_payload()).is_truncated()

    def test_truncated_line(self) -> None:
        """Test that a truncated line marks the whole diff truncated."""
        diff = BitbucketDiffResponse.from_wire(diff_payload(line_truncated=True))

        assert diff.is_truncated()
        assert not diff.truncated

    def test_truncated_top_level(self) -> None:
        """Test the top-level truncation flag."""
        assert BitbucketDiffResponse.from_wire(diff_payload(top_truncated=True)).is_truncated()


class TestBitbucketActivity:
    """Tests for activities with comment threads."""

    def test_nested_comment_replies(self) -> None:
        """Test a comment with a reply and an inline anchor."""
        activity = BitbucketActivity.from_wire(
            {
                "id": 1,
                "action": "COMMENTED",
                "comment": {
                    "id": 10,
                    "text": "Why?",
                    "author": {"name": "rev", "displayName": "Reviewer"},
                    "comments": [{"id": 11, "text": "Because", "comments": []}],
                    "tasks": [],
                },
                "commentAnchor": {"path": "src/app.py", "line": 1, "lineType": "ADDED"},
            }
        )

        assert activity.comment is not None
        assert activity.comment.comments is not None
        assert activity.comment.comments[0].text == "Because"
        assert activity.comment_anchor is not None
        assert activity.comment_anchor.line_type == "ADDED"


class TestPipelines:
    """Tests for Cloud pipeline models."""

    def test_trigger_default_pipeline(self) -> None:
        """Test the body that runs a branch's default pipeline."""
        request = BitbucketPipelineTriggerRequest.for_branch("main")

        assert request.to_wire() == {
            "target": {"type": "pipeline_ref_target", "ref_type": "branch", "ref_name": "main"}
        }

    def test_trigger_custom_pipeline_with_variables(self) -> None:
        """Test the body that runs a custom pipeline with variables."""
        request = BitbucketPipelineTriggerRequest.for_branch(
            "main", pipeline="deploy", variables={"ENV": "staging"}
        )
        wire = request.to_wire()

        assert wire["target"]["selector"] == {"type": "custom", "pattern": "deploy"}
        assert wire["variables"] == [{"key": "ENV", "value": "staging", "secured": False}]

    def test_completed_state_label(self) -> None:
        """Test the label of a finished pipeline."""
        state = BitbucketPipelineState.from_wire(
            {
                "name": "COMPLETED",
                "type": "pipeline_state_completed",
                "result": {"name": "SUCCESSFUL", "type": "pipeline_state_completed_successful"},
            }
        )

        assert state.is_completed
        assert state.label == "COMPLETED/SUCCESSFUL"

    def test_running_state_label(self) -> None:
        """Test the label of a running pipeline."""
        state = BitbucketPipelineState(name="IN_PROGRESS", type="pipeline_state_in_progress")

        assert not state.is_completed
        assert state.label == "IN_PROGRESS"

    def test_parse_pipeline(self) -> None:
        """Test parsing a pipeline with its target."""
        pipeline = BitbucketPipeline.from_wire(
            {
                "uuid": "{1234}",
                "build_number": 17,
                "state": {"name": "PENDING", "type": "pipeline_state_pending"},
                "target": {"type": "pipeline_ref_target", "ref_name": "main"},
                "created_on": "2024-01-01T10:00:00Z",
            }
        )

        assert pipeline.build_number == 17
        assert pipeline.target is not None
        assert pipeline.target.ref_name == "main"
