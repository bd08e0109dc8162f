"""Git operation utilities"""

import subprocess
from pathlib import Path
from typing import List, Optional


def is_git_repository(path: Path) -> bool:
    """
    Check if directory is a Git repository

    Args:
        path: Directory path

    Returns:
        True if it's a Git repository
    """
    try:
        result = subprocess.run(
            ['git', 'rev-parse', '--is-inside-work-tree'],
            cwd=path,
            capture_output=True,
            text=True
        )
        return result.returncode == 0
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False


def get_head_commit(path: Path) -> Optional[str]:
    """
    Get the full commit id of HEAD

    Args:
        path: Repository path

    Returns:
        Commit id or None
    """
    try:
        result = subprocess.run(
            ['git', 'rev-parse', 'HEAD'],
            cwd=path,
            capture_output=True,
            text=True,
            check=True
        )
        return result.stdout.strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def get_commit_summary(path: Path, commit: str) -> Optional[str]:
    """
    Get the one-line summary of a commit

    Args:
        path: Repository path
        commit: Commit id or prefix

    Returns:
        '<short sha> <subject>' or None if the commit is unknown
    """
    try:
        result = subprocess.run(
            ['git', 'log', '-1', '--oneline', commit],
            cwd=path,
            capture_output=True,
            text=True,
            check=True
        )
        return result.stdout.strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def get_log_summaries(path: Path, from_commit: str, to_commit: str) -> List[str]:
    """
    Get one-line summaries of commits between two commits

    Args:
        path: Repository path
        from_commit: Exclusive lower bound
        to_commit: Inclusive upper bound

    Returns:
        Summaries, newest first, empty on error
    """
    try:
        result = subprocess.run(
            ['git', 'log', '--oneline', f'{from_commit}..{to_commit}'],
            cwd=path,
            capture_output=True,
            text=True,
            check=True
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return []

    return [line for line in result.stdout.splitlines() if line.strip()]
