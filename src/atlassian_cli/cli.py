"""Command-line interface for atlassian-cli.

This module provides one CLI for Jira, Confluence, Bamboo and Bitbucket.

Usage:
    # Jira
    atlassian-cli jira get-issue PROJ-123
    atlassian-cli jira create-issue --project PROJ --summary "Title" --type Bug \\
        --description-file details.txt
    atlassian-cli jira add-comment PROJ-123 --body "Work started"
    atlassian-cli jira change-status PROJ-123 --status "In Progress"
    atlassian-cli jira assign-user PROJ-123 --user jdoe
    atlassian-cli jira update-issue PROJ-123 --file description.txt

    # Confluence
    atlassian-cli confluence create-page --space DEV --title "Notes" --file notes.html
    atlassian-cli confluence get-page --id 123456 --format view
    atlassian-cli confluence update-page --space DEV --title "Notes" --body "<p>More</p>" --append

    # Bamboo
    atlassian-cli bamboo get-plans --project PROJ
    atlassian-cli bamboo get-latest-build PROJ-PLAN
    atlassian-cli bamboo get-build-logs PROJ-PLAN-42 --filter error --filter "fail(ed|ure)"
    atlassian-cli bamboo queue-build PROJ-PLAN --branch feature/login

    # Bitbucket
    atlassian-cli bitbucket get-pr PROJ repo 42
    atlassian-cli bitbucket get-pr-diff PROJ repo 42
    atlassian-cli bitbucket add-pr-comment PROJ repo 42 --file review.md
    atlassian-cli bitbucket trigger-pipeline workspace repo main --var ENV=staging
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any

from atlassian_cli import __version__
from atlassian_cli.core.content import resolve_content, resolve_optional_content
from atlassian_cli.core.exceptions import (
    AtlassianCliError,
    ConfigurationError,
    ContentSourceError,
    ValidationError,
)
from atlassian_cli.core.models import WireModel


def configure_logging(verbose: bool) -> None:
    """Send library logs to stderr; DEBUG shows every HTTP request."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def print_json(model: WireModel) -> None:
    """Print a model as indented JSON using its wire field names."""
    print(json.dumps(model.to_wire(), indent=2, ensure_ascii=False))


def positive_int(value: str) -> int:
    """argparse type for counts that must be 1 or more."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def format_millis(value: int) -> str:
    """Format a Bitbucket epoch-milliseconds timestamp."""
    if not value:
        return "N/A"
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


# =============================================================================
# Jira Commands
# =============================================================================


def cmd_jira_get_issue(args: argparse.Namespace) -> int:
    """Get issue details."""
    from atlassian_cli.atlassian import JiraClient

    with JiraClient() as jira:
        issue = jira.get_issue(args.issue_key)

    if args.json:
        print_json(issue)
        return 0

    fields = issue.fields
    print(f"Key:         {issue.key}")
    print(f"Summary:     {fields.summary}")
    print(f"Type:        {fields.issue_type.name if fields.issue_type else 'N/A'}")
    print(f"Status:      {fields.status.name if fields.status else 'N/A'}")
    print(f"Priority:    {fields.priority.name if fields.priority else 'None'}")
    print(f"Assignee:    {fields.assignee.display_name if fields.assignee else 'Unassigned'}")
    print(f"Reporter:    {fields.reporter.display_name if fields.reporter else 'Unknown'}")
    print(f"Created:     {fields.created}")
    print(f"Updated:     {fields.updated}")

    if fields.description:
        print("\nDescription:")
        print(fields.description)

    if fields.comment and fields.comment.comments:
        print(f"\nComments ({fields.comment.total}):")
        for comment in fields.comment.comments:
            author = comment.author.display_name if comment.author else "Unknown"
            print(f"  [{comment.created}] {author}:")
            print(f"    {comment.body}")

    return 0


def cmd_jira_create_issue(args: argparse.Namespace) -> int:
    """Create a new issue."""
    from atlassian_cli.atlassian import JiraClient

    description = resolve_optional_content(
        args.description, args.description_file, "description", "description-file"
    )

    with JiraClient() as jira:
        created = jira.create_issue(
            project=args.project,
            summary=args.summary,
            issue_type=args.type,
            description=description,
        )

    print(f"Created {created.key}: {args.summary}")
    if created.self_url:
        print(f"URL: {created.self_url}")
    return 0


def cmd_jira_add_comment(args: argparse.Namespace) -> int:
    """Add a comment to an issue."""
    from atlassian_cli.atlassian import JiraClient

    body = resolve_content(args.body, args.file, "body")

    with JiraClient() as jira:
        comment = jira.add_comment(args.issue_key, body)

    print(f"Added comment {comment.id} to {args.issue_key}")
    return 0


def cmd_jira_change_status(args: argparse.Namespace) -> int:
    """Transition an issue to a new status."""
    from atlassian_cli.atlassian import JiraClient

    with JiraClient() as jira:
        transition = jira.transition_issue(args.issue_key, args.status)

    target = transition.to.name if transition.to else args.status
    print(f"Transitioned {args.issue_key} to '{target}'")
    return 0


def cmd_jira_assign_user(args: argparse.Namespace) -> int:
    """Assign an issue to a user."""
    from atlassian_cli.atlassian import JiraClient

    with JiraClient() as jira:
        jira.assign_issue(args.issue_key, args.user)

    print(f"Assigned {args.issue_key} to {args.user}")
    return 0


def cmd_jira_update_issue(args: argparse.Namespace) -> int:
    """Replace the description of an issue."""
    from atlassian_cli.atlassian import JiraClient

    description = resolve_content(args.description, args.file, "description")

    with JiraClient() as jira:
        jira.update_issue_description(args.issue_key, description)

    print(f"Updated description of {args.issue_key}")
    return 0


# =============================================================================
# Confluence Commands
# =============================================================================


def _require_page_selector(args: argparse.Namespace) -> None:
    if not args.id and not (args.space and args.title):
        raise ValidationError("You must specify either --id or both --space and --title.")


def cmd_confluence_create_page(args: argparse.Namespace) -> int:
    """Create a new page."""
    from atlassian_cli.atlassian import ConfluenceClient

    body = resolve_content(args.body, args.file, "body")

    with ConfluenceClient() as confluence:
        page = confluence.create_page(args.space, args.title, body)

    print(f"Created page {page.id}: {page.title}")
    if page.links and page.links.webui:
        print(f"URL: {confluence.base_url}{page.links.webui}")
    return 0


def cmd_confluence_get_page(args: argparse.Namespace) -> int:
    """Get page details and body."""
    from atlassian_cli.atlassian import ConfluenceClient

    _require_page_selector(args)

    with ConfluenceClient() as confluence:
        if args.id:
            page = confluence.get_page(args.id)
        else:
            page = confluence.get_page_by_title(args.space, args.title)

    if page is None:
        print(f"Page '{args.title}' not found in space {args.space}", file=sys.stderr)
        return 1

    if args.json:
        print_json(page)
        return 0

    print(f"ID:          {page.id}")
    print(f"Title:       {page.title}")
    print(f"Space:       {page.space.key if page.space else 'N/A'}")
    print(f"Version:     {page.version.number if page.version else 'N/A'}")
    print(f"Status:      {page.status}")

    content = None
    if page.body:
        content = page.body.view if args.format == "view" else page.body.storage
    print(f"\nContent ({args.format}):")
    print(content.value if content else "(empty)")
    return 0


def cmd_confluence_update_page(args: argparse.Namespace) -> int:
    """Replace or append to the body of a page."""
    from atlassian_cli.atlassian import ConfluenceClient

    _require_page_selector(args)
    body = resolve_content(args.body, args.file, "body")

    with ConfluenceClient() as confluence:
        if args.id:
            page = confluence.update_page(args.id, body, append=args.append)
        else:
            page = confluence.update_page_by_title(args.space, args.title, body, append=args.append)

    action = "Appended to" if args.append else "Updated"
    version = page.version.number if page.version else "?"
    print(f"{action} page {page.id}: {page.title} (version {version})")
    return 0


# =============================================================================
# Bamboo Commands
# =============================================================================


def filter_log_lines(logs: str, patterns: list[str]) -> list[str]:
    """Keep log lines matching any of the regular expressions, ignoring case.

    Raises:
        ValidationError: If a pattern is not a valid regular expression
    """
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error as e:
            raise ValidationError(f"Invalid filter pattern '{pattern}': {e}", field="filter") from e
    return [line for line in logs.splitlines() if any(r.search(line) for r in compiled)]


def _print_build_result(build: Any) -> None:
    print(f"Key:           {build.key}")
    print(f"Build Number:  {build.build_number}")
    print(f"State:         {build.state or build.build_state or 'Unknown'}")
    print(f"Life Cycle:    {build.life_cycle_state or 'N/A'}")
    print(f"Plan:          {build.plan_name or 'N/A'}")
    print(f"Reason:        {build.reason_summary or build.build_reason or 'N/A'}")
    print(f"Started:       {build.build_started_time or 'N/A'}")
    print(f"Completed:     {build.build_completed_time or 'N/A'}")
    print(f"Duration:      {build.build_duration_description or 'N/A'}")
    print(
        f"Tests:         {build.successful_test_count} passed, "
        f"{build.failed_test_count} failed, {build.skipped_test_count} skipped"
    )
    if build.link:
        print(f"URL:           {build.link.href}")

    if build.stages and build.stages.items:
        print(f"\nStages ({len(build.stages.items)}):")
        for stage in build.stages.items:
            print(f"  {stage.name:<30} {stage.state or 'Unknown'}")

    if build.changes and build.changes.items:
        print(f"\nChanges ({len(build.changes.items)}):")
        for change in build.changes.items:
            revision = (change.changeset_id or "")[:10]
            author = change.author or change.user_name or ""
            print(f"  {revision:<10} {author}: {change.comment or ''}")


def cmd_bamboo_get_projects(args: argparse.Namespace) -> int:
    """List Bamboo projects."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        projects = bamboo.get_projects()

    print(f"Found {len(projects)} project(s):\n")
    for project in projects:
        print(f"  {project.key:<15} {project.name}")
        if project.description:
            print(f"                  {project.description}")
        if project.plans:
            print(f"                  Plans: {len(project.plans.items)}")
    return 0


def cmd_bamboo_get_project(args: argparse.Namespace) -> int:
    """Get a Bamboo project with its plans."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        project = bamboo.get_project(args.project_key)

    print(f"Key:         {project.key}")
    print(f"Name:        {project.name}")
    if project.description:
        print(f"Description: {project.description}")
    if project.link:
        print(f"URL:         {project.link.href}")
    if project.plans and project.plans.items:
        print(f"\nPlans ({len(project.plans.items)}):")
        for plan in project.plans.items:
            status = "enabled" if plan.enabled else "disabled"
            print(f"  {plan.key:<25} {plan.name} ({status})")
    return 0


def cmd_bamboo_get_plans(args: argparse.Namespace) -> int:
    """List Bamboo plans."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        plans = bamboo.get_plans(project_key=args.project)

    print(f"Found {len(plans)} plan(s):\n")
    for plan in plans:
        status = "enabled" if plan.enabled else "disabled"
        building = " [BUILDING]" if plan.is_building else ""
        print(f"  {plan.key:<25} {plan.name} ({status}){building}")
    return 0


def cmd_bamboo_get_plan(args: argparse.Namespace) -> int:
    """Get a Bamboo plan."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        plan = bamboo.get_plan(args.plan_key)

    if args.json:
        print_json(plan)
        return 0

    print(f"Key:           {plan.key}")
    print(f"Name:          {plan.name}")
    print(f"Project:       {plan.project_name or plan.project_key or 'N/A'}")
    print(f"Enabled:       {plan.enabled}")
    print(f"Is Building:   {plan.is_building}")
    if plan.average_build_time_in_seconds is not None:
        print(f"Avg Build:     {plan.average_build_time_in_seconds:.0f} seconds")
    if plan.stages and plan.stages.items:
        print(f"\nStages ({len(plan.stages.items)}):")
        for stage in plan.stages.items:
            print(f"  {stage.name}")
    if plan.branches and plan.branches.items:
        print(f"\nBranches ({len(plan.branches.items)}):")
        for branch in plan.branches.items:
            print(f"  {branch.key:<30} {branch.name}")
    if plan.variable_context and plan.variable_context.items:
        print(f"\nVariables ({len(plan.variable_context.items)}):")
        for variable in plan.variable_context.items:
            print(f"  {variable.name} = {variable.value}")
    return 0


def cmd_bamboo_get_branches(args: argparse.Namespace) -> int:
    """List the branches of a plan."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        branches = bamboo.get_plan_branches(args.plan_key)

    print(f"Found {len(branches)} branch(es) for {args.plan_key}:\n")
    for branch in branches:
        status = "enabled" if branch.enabled else "disabled"
        print(f"  {branch.key:<30} {branch.name} ({status})")
    return 0


def cmd_bamboo_get_builds(args: argparse.Namespace) -> int:
    """List recent build results of a plan."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        builds = bamboo.get_build_results(args.plan_key, max_results=args.max_results)

    print(f"Found {len(builds)} build(s) for {args.plan_key}:\n")
    for build in builds:
        state = build.state or build.build_state or "Unknown"
        print(
            f"  #{build.build_number:<6} {build.key:<25} {state:<10} "
            f"{build.build_relative_time or ''}"
        )
    return 0


def cmd_bamboo_get_build(args: argparse.Namespace) -> int:
    """Get one build result."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        build = bamboo.get_build_result(args.build_key)

    if args.json:
        print_json(build)
    else:
        _print_build_result(build)
    return 0


def cmd_bamboo_get_latest_build(args: argparse.Namespace) -> int:
    """Get the latest build result of a plan."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        build = bamboo.get_latest_build_result(args.plan_key)

    if args.json:
        print_json(build)
    else:
        _print_build_result(build)
    return 0


def cmd_bamboo_get_build_logs(args: argparse.Namespace) -> int:
    """Print the log of a build or job, optionally filtered."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        if args.job:
            logs = bamboo.get_job_logs(args.build_key, args.job)
        else:
            logs = bamboo.get_build_logs(args.build_key)

    patterns = [p for p in (args.filter or []) if p.strip()]
    if not patterns:
        print(logs)
        return 0

    lines = filter_log_lines(logs, patterns)
    description = ", ".join(f"'{p}'" for p in patterns)
    if not lines:
        print(f"No log lines found matching filter(s): {description}")
        return 0

    print(f"Log lines matching {description} ({len(lines)} matches):\n")
    for line in lines:
        print(line)
    return 0


def cmd_bamboo_queue_build(args: argparse.Namespace) -> int:
    """Queue a build of a plan or plan branch."""
    from atlassian_cli.atlassian import BambooClient

    with BambooClient() as bamboo:
        queued = bamboo.queue_build(args.plan_key, branch=args.branch)

    print("Build queued successfully!")
    print(f"  Build Number: {queued.build_number}")
    if queued.build_result_key:
        print(f"  Build Key:    {queued.build_result_key}")
    if queued.trigger_reason:
        print(f"  Trigger:      {queued.trigger_reason}")
    if queued.link:
        print(f"  URL:          {queued.link.href}")
    return 0


# =============================================================================
# Bitbucket Commands
# =============================================================================


def _print_comment(comment: Any, indent: int = 0) -> None:
    pad = "  " * indent
    author = comment.author.display_name if comment.author else "Unknown"
    print(f"{pad}[{format_millis(comment.created_date)}] {author}:")
    for line in (comment.text or "").splitlines():
        print(f"{pad}  {line}")
    for reply in comment.comments or []:
        _print_comment(reply, indent + 1)


def cmd_bitbucket_get_pr(args: argparse.Namespace) -> int:
    """Get pull request details."""
    from atlassian_cli.atlassian import BitbucketClient

    with BitbucketClient() as bitbucket:
        pr = bitbucket.get_pull_request(args.project, args.repo, args.pr_id)

    if args.json:
        print_json(pr)
        return 0

    author = pr.author.user.display_name if pr.author and pr.author.user else "Unknown"
    print(f"ID:          #{pr.id}")
    print(f"Title:       {pr.title}")
    print(f"State:       {pr.state}")
    print(f"Author:      {author}")
    print(f"From:        {pr.from_ref.display_id if pr.from_ref else 'N/A'}")
    print(f"To:          {pr.to_ref.display_id if pr.to_ref else 'N/A'}")
    print(f"Created:     {format_millis(pr.created_date)}")
    print(f"Updated:     {format_millis(pr.updated_date)}")
    if pr.reviewers:
        print("Reviewers:")
        for reviewer in pr.reviewers:
            name = reviewer.user.display_name if reviewer.user else "Unknown"
            status = reviewer.status or ("APPROVED" if reviewer.approved else "UNAPPROVED")
            print(f"  {name} ({status})")
    if pr.description:
        print("\nDescription:")
        print(pr.description)
    return 0


def cmd_bitbucket_get_pr_diff(args: argparse.Namespace) -> int:
    """Print the diff of a pull request."""
    from atlassian_cli.atlassian import BitbucketClient

    with BitbucketClient() as bitbucket:
        diff = bitbucket.get_pull_request_diff(args.project, args.repo, args.pr_id)

    prefixes = {"ADDED": "+", "REMOVED": "-"}
    for file_diff in diff.diffs or []:
        print(f"diff {file_diff.path}")
        for hunk in file_diff.hunks or []:
            print(
                f"@@ -{hunk.source_line},{hunk.source_span} "
                f"+{hunk.destination_line},{hunk.destination_span} @@"
            )
            for segment in hunk.segments or []:
                prefix = prefixes.get(segment.type or "", " ")
                for line in segment.lines or []:
                    print(f"{prefix}{line.line or ''}")
        print()

    if diff.is_truncated():
        print("(diff truncated by server)", file=sys.stderr)
    return 0


def cmd_bitbucket_get_pr_commits(args: argparse.Namespace) -> int:
    """List the commits of a pull request."""
    from atlassian_cli.atlassian import BitbucketClient

    with BitbucketClient() as bitbucket:
        commits = bitbucket.get_pull_request_commits(args.project, args.repo, args.pr_id)

    print(f"Found {len(commits)} commit(s) in #{args.pr_id}:\n")
    for commit in commits:
        author = commit.author.name if commit.author else "Unknown"
        summary = commit.message.splitlines()[0] if commit.message else ""
        print(f"  {commit.display_id:<12} {author:<20} {summary}")
    return 0


def cmd_bitbucket_get_pr_comments(args: argparse.Namespace) -> int:
    """Print the comment threads of a pull request."""
    from atlassian_cli.atlassian import BitbucketClient

    with BitbucketClient() as bitbucket:
        activities = bitbucket.get_pull_request_activities(args.project, args.repo, args.pr_id)

    threads = [a for a in activities if a.action == "COMMENTED" and a.comment is not None]
    print(f"Found {len(threads)} comment thread(s) in #{args.pr_id}:\n")
    for activity in threads:
        anchor = activity.comment_anchor
        if anchor and anchor.path:
            print(f"{anchor.path}:{anchor.line}")
        _print_comment(activity.comment)
        print()
    return 0


def cmd_bitbucket_add_pr_comment(args: argparse.Namespace) -> int:
    """Add a comment to a pull request."""
    from atlassian_cli.atlassian import BitbucketClient

    text = resolve_content(args.text, args.file, "text")

    with BitbucketClient() as bitbucket:
        comment = bitbucket.add_pull_request_comment(args.project, args.repo, args.pr_id, text)

    print(f"Added comment {comment.id} to #{args.pr_id}")
    return 0


def cmd_bitbucket_list_repos(args: argparse.Namespace) -> int:
    """List the repositories of a project or workspace."""
    from atlassian_cli.atlassian import BitbucketClient

    with BitbucketClient() as bitbucket:
        page = bitbucket.list_repositories(args.project, limit=args.limit)

    print(f"Found {len(page.values)} repositor{'y' if len(page.values) == 1 else 'ies'}:\n")
    for repo in page.values:
        print(f"  {repo.slug:<30} {repo.name}")
    return 0


def cmd_bitbucket_list_prs(args: argparse.Namespace) -> int:
    """List pull requests of a repository."""
    from atlassian_cli.atlassian import BitbucketClient

    with BitbucketClient() as bitbucket:
        page = bitbucket.list_pull_requests(
            args.project, args.repo, state=args.state, limit=args.limit
        )

    print(f"Found {len(page.values)} pull request(s):\n")
    for pr in page.values:
        author = pr.author.user.display_name if pr.author and pr.author.user else "Unknown"
        print(f"  #{pr.id:<6} {pr.state:<9} {pr.title} ({author})")
    return 0


def cmd_bitbucket_list_pipelines(args: argparse.Namespace) -> int:
    """List recent pipelines of a Cloud repository."""
    from atlassian_cli.atlassian import BitbucketClient

    with BitbucketClient() as bitbucket:
        page = bitbucket.list_pipelines(args.project, args.repo, limit=args.limit)

    print(f"Found {len(page.values)} pipeline(s):\n")
    for pipeline in page.values:
        state = pipeline.state.label if pipeline.state else "Unknown"
        ref = pipeline.target.ref_name if pipeline.target else ""
        print(
            f"  #{pipeline.build_number:<6} {state:<22} {ref or '':<25} "
            f"{pipeline.created_on or ''}"
        )
    return 0


def _parse_variables(pairs: list[str] | None) -> dict[str, str]:
    variables = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValidationError(f"Invalid variable '{pair}', expected KEY=VALUE", field="var")
        variables[key] = value
    return variables


def cmd_bitbucket_trigger_pipeline(args: argparse.Namespace) -> int:
    """Trigger a pipeline on a branch."""
    from atlassian_cli.atlassian import BitbucketClient

    variables = _parse_variables(args.var)

    with BitbucketClient() as bitbucket:
        pipeline = bitbucket.trigger_pipeline(
            args.project,
            args.repo,
            args.branch,
            pipeline=args.pipeline,
            variables=variables or None,
        )

    print(f"Triggered pipeline #{pipeline.build_number} on {args.branch}")
    print(f"  UUID:  {pipeline.uuid}")
    if pipeline.state:
        print(f"  State: {pipeline.state.label}")
    return 0


# =============================================================================
# Parser
# =============================================================================


def _add_content_options(
    parser: argparse.ArgumentParser, name: str, file_flag: str = "--file"
) -> None:
    parser.add_argument(f"--{name}", help=f"{name.capitalize()} text")
    parser.add_argument(
        file_flag,
        dest=file_flag.lstrip("-").replace("-", "_"),
        help=f"Read the {name} from a UTF-8 file",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all product subcommands."""
    parser = argparse.ArgumentParser(
        prog="atlassian-cli",
        description="Command-line client for Jira, Confluence, Bamboo and Bitbucket",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Connection settings come from <PRODUCT>_BASE_URL, <PRODUCT>_USERNAME,
<PRODUCT>_API_TOKEN and <PRODUCT>_PASSWORD (environment or .env file),
where PRODUCT is JIRA, CONFLUENCE, BAMBOO or BITBUCKET.

Examples:
  atlassian-cli jira get-issue PROJ-123
  atlassian-cli confluence get-page --space DEV --title "Release notes"
  atlassian-cli bamboo get-latest-build PROJ-PLAN
  atlassian-cli bitbucket get-pr PROJ repo 42
        """,
    )
    parser.add_argument("--version", action="version", version=f"atlassian-cli {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP requests to stderr")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # =========================================================================
    # Jira subcommands
    # =========================================================================
    jira_parser = subparsers.add_parser("jira", help="Jira issue commands")
    jira_sub = jira_parser.add_subparsers(dest="jira_command", required=True)

    jira_get = jira_sub.add_parser("get-issue", help="Get issue details")
    jira_get.add_argument("issue_key", help="Issue key (e.g., PROJ-123)")
    jira_get.add_argument("--json", action="store_true", help="Print the issue as JSON")

    jira_create = jira_sub.add_parser("create-issue", help="Create an issue")
    jira_create.add_argument("--project", "-p", required=True, help="Project key")
    jira_create.add_argument("--summary", "-s", required=True, help="Issue summary")
    jira_create.add_argument("--type", "-t", default="Task", help="Issue type (default: Task)")
    _add_content_options(jira_create, "description", "--description-file")

    jira_comment = jira_sub.add_parser("add-comment", help="Add a comment to an issue")
    jira_comment.add_argument("issue_key", help="Issue key")
    _add_content_options(jira_comment, "body")

    jira_status = jira_sub.add_parser("change-status", help="Transition an issue")
    jira_status.add_argument("issue_key", help="Issue key")
    jira_status.add_argument("--status", required=True, help="Transition or target status name")

    jira_assign = jira_sub.add_parser("assign-user", help="Assign an issue")
    jira_assign.add_argument("issue_key", help="Issue key")
    jira_assign.add_argument("--user", required=True, help="User name, display name or e-mail")

    jira_update = jira_sub.add_parser("update-issue", help="Replace an issue's description")
    jira_update.add_argument("issue_key", help="Issue key")
    _add_content_options(jira_update, "description")

    # =========================================================================
    # Confluence subcommands
    # =========================================================================
    conf_parser = subparsers.add_parser("confluence", help="Confluence page commands")
    conf_sub = conf_parser.add_subparsers(dest="confluence_command", required=True)

    conf_create = conf_sub.add_parser("create-page", help="Create a page")
    conf_create.add_argument("--space", required=True, help="Space key")
    conf_create.add_argument("--title", required=True, help="Page title")
    _add_content_options(conf_create, "body")

    conf_get = conf_sub.add_parser("get-page", help="Get a page")
    conf_get.add_argument("--id", help="Page ID")
    conf_get.add_argument("--space", help="Space key (with --title)")
    conf_get.add_argument("--title", help="Page title (with --space)")
    conf_get.add_argument(
        "--format", choices=["storage", "view"], default="storage", help="Body format to print"
    )
    conf_get.add_argument("--json", action="store_true", help="Print the page as JSON")

    conf_update = conf_sub.add_parser("update-page", help="Update a page")
    conf_update.add_argument("--id", help="Page ID")
    conf_update.add_argument("--space", help="Space key (with --title)")
    conf_update.add_argument("--title", help="Page title (with --space)")
    _add_content_options(conf_update, "body")
    conf_update.add_argument("--append", action="store_true", help="Append instead of replacing")

    # =========================================================================
    # Bamboo subcommands
    # =========================================================================
    bamboo_parser = subparsers.add_parser("bamboo", help="Bamboo build commands")
    bamboo_sub = bamboo_parser.add_subparsers(dest="bamboo_command", required=True)

    bamboo_sub.add_parser("get-projects", help="List projects")

    bamboo_project = bamboo_sub.add_parser("get-project", help="Get a project")
    bamboo_project.add_argument("project_key", help="Project key")

    bamboo_plans = bamboo_sub.add_parser("get-plans", help="List plans")
    bamboo_plans.add_argument("--project", help="Only plans of this project")

    bamboo_plan = bamboo_sub.add_parser("get-plan", help="Get a plan")
    bamboo_plan.add_argument("plan_key", help="Plan key (e.g., PROJ-PLAN)")
    bamboo_plan.add_argument("--json", action="store_true", help="Print the plan as JSON")

    bamboo_branches = bamboo_sub.add_parser("get-branches", help="List plan branches")
    bamboo_branches.add_argument("plan_key", help="Plan key")

    bamboo_builds = bamboo_sub.add_parser("get-builds", help="List recent build results")
    bamboo_builds.add_argument("plan_key", help="Plan key")
    bamboo_builds.add_argument(
        "--max-results", type=positive_int, default=25, help="Maximum results"
    )

    bamboo_build = bamboo_sub.add_parser("get-build", help="Get a build result")
    bamboo_build.add_argument("build_key", help="Build result key (e.g., PROJ-PLAN-42)")
    bamboo_build.add_argument("--json", action="store_true", help="Print the result as JSON")

    bamboo_latest = bamboo_sub.add_parser("get-latest-build", help="Get the latest build result")
    bamboo_latest.add_argument("plan_key", help="Plan key")
    bamboo_latest.add_argument("--json", action="store_true", help="Print the result as JSON")

    bamboo_logs = bamboo_sub.add_parser("get-build-logs", help="Print build logs")
    bamboo_logs.add_argument("build_key", help="Build result key")
    bamboo_logs.add_argument("--job", help="Job key, to print one job's log")
    bamboo_logs.add_argument(
        "--filter",
        action="append",
        help="Regular expression; keep matching lines (repeatable, case-insensitive)",
    )

    bamboo_queue = bamboo_sub.add_parser("queue-build", help="Queue a build")
    bamboo_queue.add_argument("plan_key", help="Plan key")
    bamboo_queue.add_argument("--branch", help="Plan branch name")

    # =========================================================================
    # Bitbucket subcommands
    # =========================================================================
    bb_parser = subparsers.add_parser("bitbucket", help="Bitbucket commands")
    bb_sub = bb_parser.add_subparsers(dest="bitbucket_command", required=True)

    def pr_parser(name: str, help_text: str) -> argparse.ArgumentParser:
        sub = bb_sub.add_parser(name, help=help_text)
        sub.add_argument("project", help="Project key (Server) or workspace (Cloud)")
        sub.add_argument("repo", help="Repository slug")
        sub.add_argument("pr_id", type=int, help="Pull request ID")
        return sub

    bb_pr = pr_parser("get-pr", "Get a pull request")
    bb_pr.add_argument("--json", action="store_true", help="Print the pull request as JSON")
    pr_parser("get-pr-diff", "Print the diff of a pull request")
    pr_parser("get-pr-commits", "List the commits of a pull request")
    pr_parser("get-pr-comments", "Print the comments of a pull request")
    bb_comment = pr_parser("add-pr-comment", "Comment on a pull request")
    _add_content_options(bb_comment, "text")

    bb_repos = bb_sub.add_parser("list-repos", help="List repositories")
    bb_repos.add_argument("project", help="Project key (Server) or workspace (Cloud)")
    bb_repos.add_argument("--limit", type=positive_int, default=25, help="Maximum results")

    bb_prs = bb_sub.add_parser("list-prs", help="List pull requests")
    bb_prs.add_argument("project", help="Project key (Server) or workspace (Cloud)")
    bb_prs.add_argument("repo", help="Repository slug")
    bb_prs.add_argument(
        "--state", default="OPEN", help="OPEN, MERGED, DECLINED or ALL (default: OPEN)"
    )
    bb_prs.add_argument("--limit", type=positive_int, default=25, help="Maximum results")

    bb_pipelines = bb_sub.add_parser("list-pipelines", help="List pipelines (Cloud)")
    bb_pipelines.add_argument("project", help="Workspace")
    bb_pipelines.add_argument("repo", help="Repository slug")
    bb_pipelines.add_argument("--limit", type=positive_int, default=25, help="Maximum results")

    bb_trigger = bb_sub.add_parser("trigger-pipeline", help="Trigger a pipeline (Cloud)")
    bb_trigger.add_argument("project", help="Workspace")
    bb_trigger.add_argument("repo", help="Repository slug")
    bb_trigger.add_argument("branch", help="Branch to build")
    bb_trigger.add_argument("--pipeline", help="Custom pipeline name")
    bb_trigger.add_argument(
        "--var", action="append", metavar="KEY=VALUE", help="Pipeline variable (repeatable)"
    )

    return parser


COMMANDS = {
    "jira": (
        "jira_command",
        {
            "get-issue": cmd_jira_get_issue,
            "create-issue": cmd_jira_create_issue,
            "add-comment": cmd_jira_add_comment,
            "change-status": cmd_jira_change_status,
            "assign-user": cmd_jira_assign_user,
            "update-issue": cmd_jira_update_issue,
        },
    ),
    "confluence": (
        "confluence_command",
        {
            "create-page": cmd_confluence_create_page,
            "get-page": cmd_confluence_get_page,
            "update-page": cmd_confluence_update_page,
        },
    ),
    "bamboo": (
        "bamboo_command",
        {
            "get-projects": cmd_bamboo_get_projects,
            "get-project": cmd_bamboo_get_project,
            "get-plans": cmd_bamboo_get_plans,
            "get-plan": cmd_bamboo_get_plan,
            "get-branches": cmd_bamboo_get_branches,
            "get-builds": cmd_bamboo_get_builds,
            "get-build": cmd_bamboo_get_build,
            "get-latest-build": cmd_bamboo_get_latest_build,
            "get-build-logs": cmd_bamboo_get_build_logs,
            "queue-build": cmd_bamboo_queue_build,
        },
    ),
    "bitbucket": (
        "bitbucket_command",
        {
            "get-pr": cmd_bitbucket_get_pr,
            "get-pr-diff": cmd_bitbucket_get_pr_diff,
            "get-pr-commits": cmd_bitbucket_get_pr_commits,
            "get-pr-comments": cmd_bitbucket_get_pr_comments,
            "add-pr-comment": cmd_bitbucket_add_pr_comment,
            "list-repos": cmd_bitbucket_list_repos,
            "list-prs": cmd_bitbucket_list_prs,
            "list-pipelines": cmd_bitbucket_list_pipelines,
            "trigger-pipeline": cmd_bitbucket_trigger_pipeline,
        },
    ),
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    dest, commands = COMMANDS[args.command]

    try:
        return commands[getattr(args, dest)](args)
    except ContentSourceError as e:
        print(e, file=sys.stderr)
        return 1
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except AtlassianCliError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
