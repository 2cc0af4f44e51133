"""
Service layer for releasetag.

Contains the logic that orchestrates domain objects and the git client:
- CheckoutInspector: Repository root, write access, branch/dirty/forked state
- TagResolver: Version-sorted tag sets and deploy target lookup
- ReleasePlanner: Bump intents to new tag names and messages
- Gateway: Signature verification, checkout, tag creation, fetch
- Dispatcher: Command tokens to flows, with preconditions

The Dispatcher is the primary API for the CLI to use.
"""

from .checkout_service import CheckoutInspector
from .resolver_service import TagResolver
from .release_service import ReleasePlanner
from .gateway_service import Gateway
from .dispatch_service import Dispatcher, DispatchOptions

__all__ = [
    'CheckoutInspector',
    'TagResolver',
    'ReleasePlanner',
    'Gateway',
    'Dispatcher',
    'DispatchOptions',
]
