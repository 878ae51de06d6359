"""Resolve long-form text from either an inline option or a file.

Commands that accept descriptions, page bodies or comments offer two
mutually exclusive options, e.g. ``--description`` / ``--description-file``
or ``--body`` / ``--file``. The helpers here enforce the same rules for all
of them, with error messages naming the options the command actually uses.

Example:
    from atlassian_cli.core.content import resolve_content

    body = resolve_content(args.body, args.file, "body")
"""

from pathlib import Path

from atlassian_cli.core.exceptions import (
    ConflictingSourcesError,
    MissingSourceError,
    SourceNotFoundError,
)


def _present(value: str | None) -> bool:
    return value is not None and value != ""


def _read_file(file_path: str) -> str:
    path = Path(file_path)
    if not path.is_file():
        raise SourceNotFoundError(file_path)
    # newline="" keeps CRLF and trailing newlines exactly as stored
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def resolve_optional_content(
    direct_content: str | None,
    file_path: str | None,
    content_option: str,
    file_option: str = "file",
) -> str | None:
    """Resolve content that the command may omit.

    Args:
        direct_content: Inline value of ``--<content_option>``
        file_path: Value of ``--<file_option>``
        content_option: Option name used for inline content
        file_option: Option name used for the file path

    Returns:
        The inline content, the file's full text, or None if neither was given

    Raises:
        ConflictingSourcesError: If both sources were supplied
        SourceNotFoundError: If the file does not exist
    """
    has_content = _present(direct_content)
    has_file = _present(file_path)

    if has_content and has_file:
        raise ConflictingSourcesError(content_option, file_option)
    if has_file:
        assert file_path is not None
        return _read_file(file_path)
    if has_content:
        return direct_content
    return None


def resolve_content(
    direct_content: str | None,
    file_path: str | None,
    content_option: str,
    file_option: str = "file",
) -> str:
    """Resolve content that the command requires.

    Same rules as :func:`resolve_optional_content`, except that supplying
    neither source is an error.

    Raises:
        ConflictingSourcesError: If both sources were supplied
        MissingSourceError: If neither source was supplied
        SourceNotFoundError: If the file does not exist
    """
    content = resolve_optional_content(direct_content, file_path, content_option, file_option)
    if content is None:
        raise MissingSourceError(content_option, file_option)
    return content
