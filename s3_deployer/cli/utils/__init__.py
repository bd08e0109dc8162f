# s3_deployer/cli/utils/__init__.py
"""CLI utilities"""

from .output import (
    console,
    format_stage_result,
    format_switch_result,
    format_deploy_result,
    format_revision,
    format_revisions_table,
    format_changes,
)

__all__ = [
    "console",
    "format_stage_result",
    "format_switch_result",
    "format_deploy_result",
    "format_revision",
    "format_revisions_table",
    "format_changes",
]
