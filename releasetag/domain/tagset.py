"""
Ordered set of release tags sharing one prefix.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..exit_codes import MalformedDescriptor, TagNotFound
from .descriptor import Ordinals, ReleaseTag, format_tag_name


@dataclass(frozen=True)
class TagSet:
    """
    Release tags of one prefix in ascending version order.

    Ordering compares (major, minor, patch) numerically, never lexically:
    ``v-1.10.0`` sorts after ``v-1.9.0``.
    """

    prefix: str
    tags: Tuple[ReleaseTag, ...] = ()

    @classmethod
    def from_names(cls, prefix: str, names: Iterable[str]) -> 'TagSet':
        """
        Build a TagSet from raw tag names.

        Names with another prefix or without a clean version triple
        (``master-1.2.3-rc1``, ``master-foo``) are skipped.
        """
        tags = []
        seen = set()
        for name in names:
            name = name.strip()
            if not name or name in seen:
                continue
            try:
                tag = ReleaseTag.parse(name)
            except MalformedDescriptor:
                continue
            if tag.prefix != prefix:
                continue
            seen.add(name)
            tags.append(tag)
        tags.sort(key=lambda t: t.version)
        return cls(prefix=prefix, tags=tuple(tags))

    @property
    def names(self) -> List[str]:
        return [tag.tag_name for tag in self.tags]

    def __len__(self) -> int:
        return len(self.tags)

    def index(self, name: str) -> int:
        """Position of ``name``; raises TagNotFound if absent."""
        for i, tag in enumerate(self.tags):
            if tag.tag_name == name:
                return i
        if not self.tags:
            raise TagNotFound(f"No release tags found for prefix '{self.prefix}'")
        raise TagNotFound(f"Tag {name} not found among '{self.prefix}' release tags")

    def find(self, name: str) -> ReleaseTag:
        return self.tags[self.index(name)]

    def successor(self, name: str) -> ReleaseTag:
        """The tag right after ``name``; TagNotFound at the newest tag."""
        i = self.index(name)
        if i + 1 >= len(self.tags):
            raise TagNotFound(f"No tag newer than {name} for prefix '{self.prefix}'")
        return self.tags[i + 1]

    def predecessor(self, name: str) -> ReleaseTag:
        """The tag right before ``name``; TagNotFound at the oldest tag."""
        i = self.index(name)
        if i == 0:
            raise TagNotFound(f"No tag older than {name} for prefix '{self.prefix}'")
        return self.tags[i - 1]

    def find_version(self, ordinals: Ordinals) -> ReleaseTag:
        """The tag with these ordinals, whatever zero-padding its name uses."""
        for tag in self.tags:
            if tag.ordinals == ordinals:
                return tag
        if not self.tags:
            raise TagNotFound(f"No release tags found for prefix '{self.prefix}'")
        name = format_tag_name(self.prefix, *ordinals)
        raise TagNotFound(f"Tag {name} not found among '{self.prefix}' release tags")
