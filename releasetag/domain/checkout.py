"""
Checkout state domain object for releasetag.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .descriptor import VersionDescriptor


@dataclass(frozen=True)
class CheckoutState:
    """
    Snapshot of the working copy taken once per invocation.

    Attributes:
        branch: Current branch name, None when HEAD is detached
        dirty: Tracked files or the index differ from HEAD
        forked: The nearest release tag belongs to another branch's prefix
            and this branch has no tag of its own at least as near
        commit: Full hash of HEAD
        nearest: Nearest release tag of any prefix, if one exists
        own: Nearest release tag under the branch's own prefix, if one exists
    """

    branch: Optional[str]
    dirty: bool = False
    forked: bool = False
    commit: str = ''
    nearest: Optional[VersionDescriptor] = None
    own: Optional[VersionDescriptor] = None

    @property
    def detached(self) -> bool:
        return self.branch is None

    @property
    def descriptor(self) -> Optional[VersionDescriptor]:
        """Descriptor that decides the prefix for deploy lookups."""
        return self.own or self.nearest

    def to_dict(self) -> Dict[str, Any]:
        return {
            'branch': self.branch,
            'detached': self.detached,
            'dirty': self.dirty,
            'forked': self.forked,
            'commit': self.commit,
            'nearest': self.nearest.tag_name if self.nearest else None,
            'own': self.own.tag_name if self.own else None,
            'distance': self.descriptor.distance if self.descriptor else None,
        }
