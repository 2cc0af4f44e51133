"""
Release planning service for releasetag.

Computes the next tag from a bump intent and the checkout state:

    init   0.0.0 under the branch (or given) prefix
    patch  x.y.Z+1           needs new commits since the branch's last tag
    minor  x.Y+1.0           likewise
    major  X+1.0.0           likewise
    match  nearest tag's ordinals under this branch; only on a forked branch
    exact  caller's ordinals; needs new commits if the branch has a tag
    defer  match when forked, else patch

Planning has no side effects; the gateway creates the tag.
"""

import logging
from typing import Optional

from ..domain import (
    CheckoutState,
    Intent,
    ReleasePlan,
    VersionDescriptor,
    format_tag_name,
    is_valid_prefix,
)
from ..domain.descriptor import Ordinals
from ..exit_codes import (
    DetachedHeadError,
    MalformedDescriptor,
    MatchNotMeaningful,
    NoChangesError,
    TagNotFound,
)

logger = logging.getLogger(__name__)


def bump(intent: Intent, ordinals: Ordinals) -> Ordinals:
    """Apply a patch/minor/major bump to an ordinal triple."""
    major, minor, patch = ordinals
    if intent is Intent.PATCH:
        return major, minor, patch + 1
    if intent is Intent.MINOR:
        return major, minor + 1, 0
    if intent is Intent.MAJOR:
        return major + 1, 0, 0
    raise ValueError(f"Not a bump intent: {intent.value}")


def build_message(descriptor: VersionDescriptor, tag_name: str):
    """Tag message lines: descriptor fields, then the new tag name."""
    lines = [f"{field}: {value}" for field, value in descriptor.fields().items()]
    lines.append(f"tagname: {tag_name}")
    return tuple(lines)


class ReleasePlanner:
    """Decides the name and message of the next release tag."""

    @staticmethod
    def resolve_intent(intent: Intent, state: CheckoutState) -> Intent:
        """Replace DEFER with the concrete intent the checkout calls for."""
        if intent is not Intent.DEFER:
            return intent
        resolved = Intent.MATCH if state.forked else Intent.PATCH
        logger.debug("Deferred intent resolved to %s", resolved.value)
        return resolved

    def plan(
        self,
        intent: Intent,
        state: CheckoutState,
        ordinals: Optional[Ordinals] = None,
        prefix: Optional[str] = None
    ) -> ReleasePlan:
        """
        Plan a tag for a concrete intent.

        Args:
            intent: Any intent except DEFER (resolve it first)
            state: Checkout state from CheckoutInspector.inspect()
            ordinals: (major, minor, patch) for Intent.EXACT
            prefix: Explicit prefix for Intent.INIT

        Raises:
            DetachedHeadError, NoChangesError, MatchNotMeaningful, TagNotFound
        """
        if intent is Intent.DEFER:
            raise ValueError("Resolve Intent.DEFER before planning")

        if intent is Intent.INIT:
            return self._plan_init(state, prefix)

        if state.detached:
            raise DetachedHeadError(intent.value)
        branch = state.branch
        self._check_prefix(branch)

        if intent is Intent.MATCH:
            if not state.forked or state.nearest is None:
                nearest = state.nearest.tag_name if state.nearest else None
                raise MatchNotMeaningful(branch, nearest)
            return self._build(intent, state.nearest, branch, state.nearest.ordinals)

        own = state.own
        if intent is Intent.EXACT:
            if ordinals is None:
                raise ValueError("Intent.EXACT needs ordinals")
            if own is not None and own.distance == 0:
                raise NoChangesError(own.tag_name)
            descriptor = own or VersionDescriptor.initial(state.commit)
            return self._build(intent, descriptor, branch, ordinals)

        # patch / minor / major
        if own is None:
            hint = "use 'match'" if state.forked else "use 'init'"
            raise TagNotFound(f"No release tag for branch '{branch}' to bump from; {hint}")
        if own.distance == 0:
            raise NoChangesError(own.tag_name)
        return self._build(intent, own, branch, bump(intent, own.ordinals))

    def _plan_init(self, state: CheckoutState, prefix: Optional[str]) -> ReleasePlan:
        prefix = prefix or state.branch
        if not prefix:
            raise DetachedHeadError(Intent.INIT.value)
        self._check_prefix(prefix)
        descriptor = VersionDescriptor.initial(state.commit)
        return self._build(Intent.INIT, descriptor, prefix, (0, 0, 0))

    @staticmethod
    def _check_prefix(prefix: str) -> None:
        if not is_valid_prefix(prefix):
            raise MalformedDescriptor(prefix)

    @staticmethod
    def _build(
        intent: Intent,
        descriptor: VersionDescriptor,
        prefix: str,
        ordinals: Ordinals
    ) -> ReleasePlan:
        major, minor, patch = ordinals
        tag_name = format_tag_name(prefix, major, minor, patch)
        plan = ReleasePlan(
            intent=intent,
            prefix=prefix,
            major=major,
            minor=minor,
            patch=patch,
            message_lines=build_message(descriptor, tag_name),
        )
        logger.debug("Planned %s: %s", intent.value, plan.tag_name)
        return plan
