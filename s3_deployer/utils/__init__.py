# s3_deployer/utils/__init__.py
"""Utility functions for s3-deployer"""

from .async_utils import (
    run_async,
    retry_with_schedule,
    bounded_gather,
)

from .formatting import (
    format_duration,
    format_timestamp,
    short_sha,
    pluralize,
)

from .git_utils import (
    is_git_repository,
    get_head_commit,
    get_commit_summary,
    get_log_summaries,
)

from .revision_utils import (
    is_valid_revision,
    parse_revision,
    generate_revision,
    get_time_zone,
)

__all__ = [
    # Async
    "run_async",
    "retry_with_schedule",
    "bounded_gather",

    # Formatting
    "format_duration",
    "format_timestamp",
    "short_sha",
    "pluralize",

    # Git
    "is_git_repository",
    "get_head_commit",
    "get_commit_summary",
    "get_log_summaries",

    # Revisions
    "is_valid_revision",
    "parse_revision",
    "generate_revision",
    "get_time_zone",
]
