"""
Version descriptor domain objects for releasetag.

Release tags are named ``<prefix>-<major>.<minor>.<patch>`` where the prefix
is the branch the release was cut from. ``git describe --long --abbrev=40``
reports the nearest such tag as::

    <prefix>-<major>.<minor>.<patch>-<distance>-g<commit>

Both are immutable value objects. Parsing anchors on the right: the version
triple, distance and commit are the last dash-delimited groups and everything
before them is the prefix, so ``release-2-1.2.3-4-gabc`` has prefix
``release-2``.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from packaging.version import Version

from ..exit_codes import MalformedDescriptor, MalformedVersion

PREFIX_PATTERN = r'[A-Za-z0-9_/-]+'

_TAG_RE = re.compile(
    rf'^(?P<name>(?P<prefix>{PREFIX_PATTERN})-(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+))$'
)
_DESCRIBE_RE = re.compile(
    rf'^(?P<name>(?P<prefix>{PREFIX_PATTERN})-(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+))'
    r'-(?P<distance>\d+)-g(?P<commit>[0-9a-f]+)$'
)
_PREFIX_RE = re.compile(rf'^{PREFIX_PATTERN}$')
_VERSION_RE = re.compile(r'^\d+\.\d+\.\d+$')

Ordinals = Tuple[int, int, int]


def format_tag_name(prefix: str, major: int, minor: int, patch: int) -> str:
    """Build a release tag name from its parts."""
    return f"{prefix}-{major}.{minor}.{patch}"


def is_valid_prefix(prefix: str) -> bool:
    """Check that a prefix only uses the ref-name subset releasetag allows."""
    return bool(_PREFIX_RE.match(prefix or ''))


def describe_pattern(prefix: str = '*') -> str:
    """Glob for ``git describe --match`` / ``git tag --list`` release tags."""
    return f"{prefix}-[0-9]*.[0-9]*.[0-9]*"


# Tags like master-1.2.3-rc1 also match describe_pattern(); git globs cannot
# say "digits only", so anything after the version is excluded separately.
DESCRIBE_EXCLUDE = '*.[0-9]*[!0-9.]*'


def describe_excludes(prefix: str = '*') -> List[str]:
    """
    Globs for ``git describe --exclude``.

    describe_pattern('rel') also matches ``rel-2-1.4.0``, a tag of the
    sibling prefix ``rel-2``, so deeper-dashed names are excluded for a
    concrete prefix.
    """
    excludes = [DESCRIBE_EXCLUDE]
    if prefix != '*':
        excludes.append(f"{prefix}-*-*")
    return excludes


def parse_version(text: str) -> Ordinals:
    """
    Parse a user-supplied ``MAJOR.MINOR.PATCH`` string.

    Raises:
        MalformedVersion: if the text is not exactly three dotted integers
    """
    text = (text or '').strip()
    if not _VERSION_RE.match(text):
        raise MalformedVersion(text)
    major, minor, patch = Version(text).release
    return major, minor, patch


@dataclass(frozen=True)
class ReleaseTag:
    """
    A release tag name split into prefix and ordinal triple.

    ``name`` keeps the tag exactly as it exists in the repository, so
    ``v-1.02.0`` is looked up, verified and checked out under that name
    even though it orders like ``v-1.2.0``.

    Examples:
        ReleaseTag.parse("master-1.2.3")  -> ReleaseTag("master", 1, 2, 3)
        ReleaseTag.parse("v-1.10.0").version > ReleaseTag.parse("v-1.9.0").version
    """

    prefix: str
    major: int
    minor: int
    patch: int
    name: str = field(default='', compare=False)

    @classmethod
    def parse(cls, name: str) -> 'ReleaseTag':
        match = _TAG_RE.match(name.strip())
        if not match:
            raise MalformedDescriptor(name)
        return cls(
            prefix=match.group('prefix'),
            major=int(match.group('major')),
            minor=int(match.group('minor')),
            patch=int(match.group('patch')),
            name=match.group('name'),
        )

    @property
    def tag_name(self) -> str:
        return self.name or format_tag_name(self.prefix, self.major, self.minor, self.patch)

    @property
    def ordinals(self) -> Ordinals:
        return (self.major, self.minor, self.patch)

    @property
    def version(self) -> Version:
        """Numeric sort key; ``1.10.0`` orders after ``1.9.0``."""
        return Version(f"{self.major}.{self.minor}.{self.patch}")

    def __str__(self) -> str:
        return self.tag_name


@dataclass(frozen=True)
class VersionDescriptor:
    """
    Parsed ``git describe`` output.

    Attributes:
        prefix: Tag namespace, usually the branch the tag was cut on
        major, minor, patch: Ordinal triple of the nearest tag
        distance: Commits between the nearest tag and HEAD
        commit: Full hash of HEAD
        name: The nearest tag's name as written in the repository
    """

    prefix: str
    major: int
    minor: int
    patch: int
    distance: int
    commit: str
    name: str = field(default='', compare=False)

    @classmethod
    def parse(cls, text: str) -> 'VersionDescriptor':
        """
        Parse a describe string.

        Raises:
            MalformedDescriptor: if the text does not match the grammar exactly
        """
        match = _DESCRIBE_RE.match(text.strip())
        if not match:
            raise MalformedDescriptor(text)
        return cls(
            prefix=match.group('prefix'),
            major=int(match.group('major')),
            minor=int(match.group('minor')),
            patch=int(match.group('patch')),
            distance=int(match.group('distance')),
            commit=match.group('commit'),
            name=match.group('name'),
        )

    @classmethod
    def initial(cls, commit: str) -> 'VersionDescriptor':
        """Descriptor for the first release, when no tag exists yet."""
        return cls(prefix='', major=0, minor=0, patch=0, distance=0, commit=commit)

    @property
    def is_initial(self) -> bool:
        return not self.prefix

    @property
    def tag_name(self) -> str:
        if self.is_initial:
            return ''
        return self.name or format_tag_name(self.prefix, self.major, self.minor, self.patch)

    @property
    def ordinals(self) -> Ordinals:
        return (self.major, self.minor, self.patch)

    def fields(self) -> Dict[str, str]:
        """
        Descriptor fields rendered into tag messages.

        The raw ordinals are left out since the tag name already carries them.
        Empty fields are dropped; ordering is fixed.
        """
        rendered = {
            'prior': self.tag_name,
            'prefix': self.prefix,
            'distance': '' if self.is_initial else str(self.distance),
            'commit': self.commit,
        }
        return {key: value for key, value in rendered.items() if value}

    def __str__(self) -> str:
        if self.is_initial:
            return self.commit
        return f"{self.tag_name}-{self.distance}-g{self.commit}"
