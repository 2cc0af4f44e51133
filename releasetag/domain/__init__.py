"""
Domain layer for releasetag.

Contains pure domain objects with no I/O or side effects:
- VersionDescriptor: Parsed `git describe` output
- ReleaseTag: A release tag name split into prefix and ordinals
- TagSet: Release tags of one prefix in version order
- CheckoutState: Branch, dirty and forked state of the working copy
- ReleasePlan: The tag about to be created

These objects are immutable and scoped to a single invocation.
"""

from .descriptor import (
    VersionDescriptor,
    ReleaseTag,
    format_tag_name,
    is_valid_prefix,
    describe_pattern,
    parse_version,
)
from .tagset import TagSet
from .checkout import CheckoutState
from .release import Intent, DeployTarget, ReleasePlan

__all__ = [
    'VersionDescriptor',
    'ReleaseTag',
    'TagSet',
    'CheckoutState',
    'Intent',
    'DeployTarget',
    'ReleasePlan',
    'format_tag_name',
    'is_valid_prefix',
    'describe_pattern',
    'parse_version',
]
