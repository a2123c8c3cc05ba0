"""
Repository maintenance workflows.

- merge: squash-merge a branch into main and recreate it
- reset: collapse history into a single root commit
- publish: bump the version, build, upload, tag
"""

from .merge import branch_exists, merge_branch
from .publish import Publisher
from .reset import reset_repository
from .runner import ProcessRunner, ReleaseError
from .versioning import BUMP_TYPES, bump_version

__all__ = [
    "BUMP_TYPES",
    "ProcessRunner",
    "Publisher",
    "ReleaseError",
    "branch_exists",
    "bump_version",
    "merge_branch",
    "reset_repository",
]
