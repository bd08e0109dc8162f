"""Source-control collaborator"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..utils.git_utils import (
    is_git_repository,
    get_head_commit,
    get_commit_summary,
    get_log_summaries,
)

logger = logging.getLogger(__name__)


class SourceControl(ABC):
    """What the deployer needs to know about the source repository"""

    @abstractmethod
    def current_commit_id(self) -> Optional[str]:
        """Commit id the assets are being built from, None if unknown"""
        pass

    @abstractmethod
    def log_summaries(self, from_commit: str, to_commit: str) -> List[str]:
        """One-line summaries of the commits between two commit ids"""
        pass

    @abstractmethod
    def commit_summary(self, commit: str) -> Optional[str]:
        """One-line summary of a single commit"""
        pass


class GitSourceControl(SourceControl):
    """Source control backed by the local git executable"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else Path.cwd()

    def current_commit_id(self) -> Optional[str]:
        if not is_git_repository(self.path):
            logger.warning(f"{self.path} is not a git repository")
            return None
        return get_head_commit(self.path)

    def log_summaries(self, from_commit: str, to_commit: str) -> List[str]:
        return get_log_summaries(self.path, from_commit, to_commit)

    def commit_summary(self, commit: str) -> Optional[str]:
        return get_commit_summary(self.path, commit)
