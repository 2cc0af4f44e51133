"""
Tag resolution service for releasetag.

Turns a deploy request (sync/next/prev/ver) into the name of an existing
release tag.
"""

import logging
from typing import Optional

from ..domain import (
    CheckoutState,
    DeployTarget,
    TagSet,
    describe_pattern,
    parse_version,
)
from ..exit_codes import TagNotFound
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


class TagResolver:
    """
    Locates release tags relative to the checkout.

    The prefix comes from the checkout's nearest tag; lookups happen in the
    version-sorted TagSet of that prefix.
    """

    def __init__(self, git_client: Optional[GitClient] = None):
        self.git = git_client or GitClient()

    def tag_set(self, path: str, prefix: str) -> TagSet:
        """All release tags of prefix, oldest first."""
        names = self.git.list_tags(path, describe_pattern(prefix))
        tags = TagSet.from_names(prefix, names)
        logger.debug("Found %d '%s' release tags", len(tags), prefix)
        return tags

    def resolve(
        self,
        path: str,
        target: DeployTarget,
        state: CheckoutState,
        version: Optional[str] = None
    ) -> str:
        """
        Resolve a deploy target to a tag name.

        Args:
            path: Repository path
            target: Which tag to pick
            state: Current checkout state
            version: MAJOR.MINOR.PATCH, required for DeployTarget.VER

        Raises:
            TagNotFound: no release tag is reachable, or the requested
                neighbour/version does not exist
            MalformedVersion: version is not MAJOR.MINOR.PATCH
        """
        descriptor = state.descriptor
        if descriptor is None:
            raise TagNotFound(f"No release tags reachable from {state.commit[:12] or 'HEAD'}")

        current = descriptor.tag_name
        tags = self.tag_set(path, descriptor.prefix)

        if target is DeployTarget.SYNC:
            return tags.find(current).tag_name
        if target is DeployTarget.NEXT:
            return tags.successor(current).tag_name
        if target is DeployTarget.PREV:
            return tags.predecessor(current).tag_name
        if target is DeployTarget.VER:
            if version is None:
                raise ValueError("DeployTarget.VER needs a version")
            return tags.find_version(parse_version(version)).tag_name
        raise ValueError(f"Unknown deploy target: {target}")
