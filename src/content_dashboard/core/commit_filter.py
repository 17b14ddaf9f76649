"""Documentation path predicate shared by the commit pipelines."""

from typing import Iterable, TypeVar, Union

from content_dashboard.core.entities import CommitFile

DOC_EXTENSIONS = (".md", ".mdx")
DOC_SEGMENTS = ("docs", "documentation")

FileLike = TypeVar("FileLike", bound=Union[str, CommitFile])


def is_documentation_path(filename: str) -> bool:
    """
    Check if a changed file counts as documentation.

    Args:
        filename: Repository-relative path of the changed file

    Returns:
        True for `.md`/`.mdx` files and for anything under a `docs` or
        `documentation` directory (case-insensitive)
    """
    if not filename:
        return False

    lowered = filename.lower()
    if lowered.endswith(DOC_EXTENSIONS):
        return True

    padded = f"/{lowered}"
    return any(f"/{segment}/" in padded for segment in DOC_SEGMENTS)


def filter_doc_files(files: Iterable[FileLike]) -> list[FileLike]:
    """Keep documentation files, preserving order."""
    return [
        f for f in files
        if is_documentation_path(f if isinstance(f, str) else f.filename)
    ]
