"""Core domain layer."""

from content_dashboard.core.categories import CATEGORIES, detect_categories
from content_dashboard.core.changelog_store import ChangelogStore
from content_dashboard.core.commit_filter import filter_doc_files, is_documentation_path
from content_dashboard.core.commit_normalizer import normalize_commit
from content_dashboard.core.entities import (
    Category,
    ChangelogEntry,
    Commit,
    CommitAuthor,
    CommitFile,
    ContentItem,
    ContentSource,
    FilesChanged,
)
from content_dashboard.core.errors import (
    ContentDashboardError,
    SignatureError,
    StorageError,
    UpstreamError,
)
from content_dashboard.core.interfaces import (
    ChangelogBackend,
    ItemSource,
    LLMClient,
    VersionControlClient,
)
from content_dashboard.core.signature import compute_signature, verify_signature

__all__ = [
    "CATEGORIES",
    "Category",
    "ChangelogBackend",
    "ChangelogEntry",
    "ChangelogStore",
    "Commit",
    "CommitAuthor",
    "CommitFile",
    "ContentDashboardError",
    "ContentItem",
    "ContentSource",
    "FilesChanged",
    "ItemSource",
    "LLMClient",
    "SignatureError",
    "StorageError",
    "UpstreamError",
    "VersionControlClient",
    "compute_signature",
    "detect_categories",
    "filter_doc_files",
    "is_documentation_path",
    "normalize_commit",
    "verify_signature",
]
