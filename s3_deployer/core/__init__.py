"""Core functionality for s3-deployer"""

from .path_resolver import KeyResolver, join_key
from .object_store import ObjectStore, guess_content_type
from .ledger import RevisionLedger, parse_shas, format_shas
from .upload_pipeline import UploadPipeline, scan_source_files
from .hooks import LifecycleHooks, ShellHook
from .source_control import SourceControl, GitSourceControl

__all__ = [
    "KeyResolver",
    "join_key",
    "ObjectStore",
    "guess_content_type",
    "RevisionLedger",
    "parse_shas",
    "format_shas",
    "UploadPipeline",
    "scan_source_files",
    "LifecycleHooks",
    "ShellHook",
    "SourceControl",
    "GitSourceControl",
]
