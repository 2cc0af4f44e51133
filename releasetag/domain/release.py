"""
Release intents and plans for releasetag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from .descriptor import format_tag_name


class Intent(Enum):
    """Tagging operations."""
    INIT = "init"      # First tag of a prefix: 0.0.0
    PATCH = "patch"    # x.y.Z+1
    MINOR = "minor"    # x.Y+1.0
    MAJOR = "major"    # X+1.0.0
    MATCH = "match"    # Same ordinals as the nearest tag, under this branch
    EXACT = "exact"    # Caller-supplied ordinals
    DEFER = "defer"    # MATCH when forked, else PATCH


class DeployTarget(Enum):
    """Deploy checkout operations."""
    SYNC = "sync"      # Nearest tag
    NEXT = "next"      # Next newer tag of the prefix
    PREV = "prev"      # Next older tag of the prefix
    VER = "ver"        # Exact version of the prefix


@dataclass(frozen=True)
class ReleasePlan:
    """A tag waiting to be created: name parts plus message lines."""

    intent: Intent
    prefix: str
    major: int
    minor: int
    patch: int
    message_lines: Tuple[str, ...] = ()

    @property
    def tag_name(self) -> str:
        return format_tag_name(self.prefix, self.major, self.minor, self.patch)

    @property
    def message(self) -> str:
        return '\n'.join(self.message_lines) + '\n'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'intent': self.intent.value,
            'tag': self.tag_name,
            'prefix': self.prefix,
            'version': f"{self.major}.{self.minor}.{self.patch}",
            'message': list(self.message_lines),
        }
