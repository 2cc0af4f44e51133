"""
releasetag - Signed semantic-version tags for git branches and deploy checkouts.

Development branches are tagged `<branch>-MAJOR.MINOR.PATCH` with GPG-signed
annotated tags; deployment checkouts move between those tags, verifying each
signature before checking it out.

Quick Start:
    from releasetag import Dispatcher

    dispatcher = Dispatcher()

    # On a branch: bump the patch version of the branch's last tag
    result = dispatcher.run("/path/to/repo", "patch")
    print(result['tag'])         # e.g. "master-1.2.4"

    # On a deploy checkout: move to the next release of the same prefix
    dispatcher.run("/srv/app", "next")

Domain Objects:
    VersionDescriptor - Parsed `git describe` output
    ReleaseTag - Tag name split into prefix and ordinals
    TagSet - Release tags of one prefix, version-sorted
    CheckoutState - Branch, dirty and forked state
    ReleasePlan - The next tag's name and message

Services:
    CheckoutInspector, TagResolver, ReleasePlanner, Gateway, Dispatcher
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    VersionDescriptor,
    ReleaseTag,
    TagSet,
    CheckoutState,
    Intent,
    DeployTarget,
    ReleasePlan,
)

# Services
from .services import (
    CheckoutInspector,
    TagResolver,
    ReleasePlanner,
    Gateway,
    Dispatcher,
    DispatchOptions,
)

# Configuration
from .config import load_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "VersionDescriptor",
    "ReleaseTag",
    "TagSet",
    "CheckoutState",
    "Intent",
    "DeployTarget",
    "ReleasePlan",
    # Services
    "CheckoutInspector",
    "TagResolver",
    "ReleasePlanner",
    "Gateway",
    "Dispatcher",
    "DispatchOptions",
    # Configuration
    "load_config",
]
