"""
Verification and mutation gateway for releasetag.

The only place that changes the repository: creating signed tags, fetching
tags, and checking tags out after their signature verifies.
"""

import logging
from typing import List, Optional

from ..domain import CheckoutState, ReleasePlan
from ..exit_codes import (
    CheckoutFailed,
    FetchFailed,
    SignatureVerificationFailed,
    TagCreationFailed,
)
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


class Gateway:
    """
    Performs the single mutation of an invocation.

    Example:
        gateway = Gateway(signing_key="0xABCD1234")
        gateway.create_tag(repo, plan)
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        signing_key: Optional[str] = None
    ):
        self.git = git_client or GitClient()
        self.signing_key = signing_key or None

    def create_tag(self, path: str, plan: ReleasePlan) -> str:
        """
        Create the planned tag as a signed annotated tag on HEAD.

        Raises:
            TagCreationFailed: name collision, missing key, signing refused
        """
        logger.info(f"Creating signed tag {plan.tag_name}")
        result = self.git.create_signed_tag(
            path, plan.tag_name, plan.message, key=self.signing_key
        )
        if not result.ok:
            raise TagCreationFailed(plan.tag_name, result.detail)
        return plan.tag_name

    def fetch(self, path: str, remote: str) -> bool:
        """
        Fetch tags from remote if the repository has it.

        Returns:
            True if a fetch happened, False if the remote is not configured

        Raises:
            FetchFailed: the fetch itself failed
        """
        if remote not in self.git.remotes(path):
            logger.debug(f"No remote '{remote}', skipping fetch")
            return False
        logger.info(f"Fetching tags from {remote}")
        result = self.git.fetch_tags(path, remote)
        if not result.ok:
            raise FetchFailed(remote, result.detail)
        return True

    def verify(self, path: str, tag: str) -> None:
        """Raises SignatureVerificationFailed unless tag's signature is good."""
        result = self.git.verify_tag(path, tag)
        if not result.ok:
            raise SignatureVerificationFailed(tag, result.detail)
        logger.debug(f"Signature of {tag} verified")

    def deploy(self, path: str, tag: str, state: CheckoutState) -> List[str]:
        """
        Verify and check out tag, leaving HEAD detached.

        Returns:
            Warnings issued on the way

        Raises:
            SignatureVerificationFailed: nothing is checked out
            CheckoutFailed: git checkout failed
        """
        self.verify(path, tag)

        warnings = []
        nearest = state.descriptor
        if nearest is not None and nearest.tag_name == tag:
            if nearest.distance == 0:
                warnings.append(f"Already at {tag}; checking it out again")
            else:
                warnings.append(
                    f"{tag} is already the nearest tag ({nearest.distance} commits back); checking it out"
                )
        if not state.detached:
            warnings.append(f"Overriding branch '{state.branch}': HEAD will be detached at {tag}")
        for warning in warnings:
            logger.warning(warning)

        result = self.git.checkout(path, tag)
        if not result.ok:
            raise CheckoutFailed(tag, result.detail)
        logger.info(f"Checked out {tag}")
        return warnings
