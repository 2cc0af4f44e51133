"""
Command dispatch service for releasetag.

Maps a command token to the tagging or deploy flow:

    tagging:    init [prefix] | patch | minor | major | match
                | exact MAJOR MINOR PATCH | defer
    deploy:     sync | next | prev | ver VERSION
    read-only:  status | list

With no token, a detached HEAD means `sync` and a branch means `defer`.
Preconditions (top-level directory, write access, clean tree) are checked
before anything is changed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from ..config import load_config
from ..domain import CheckoutState, DeployTarget, Intent, parse_version
from ..exit_codes import DirtyWorkingTree, UnrecognizedCommand
from ..infra.git_client import GitClient
from .checkout_service import CheckoutInspector
from .gateway_service import Gateway
from .release_service import ReleasePlanner
from .resolver_service import TagResolver

logger = logging.getLogger(__name__)

TAGGING_TOKENS = {intent.value: intent for intent in Intent}
DEPLOY_TOKENS = {target.value: target for target in DeployTarget}
READ_ONLY_TOKENS = ('status', 'list')

USAGE = {
    'init': 'init [PREFIX]',
    'patch': 'patch',
    'minor': 'minor',
    'major': 'major',
    'match': 'match',
    'exact': 'exact MAJOR MINOR PATCH',
    'defer': 'defer',
    'sync': 'sync',
    'next': 'next',
    'prev': 'prev',
    'ver': 'ver VERSION',
    'status': 'status',
    'list': 'list',
}


@dataclass
class DispatchOptions:
    """Per-invocation switches."""
    allow_dirty: bool = False
    fetch: bool = True
    remote: str = "origin"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'DispatchOptions':
        general = config.get('general', {})
        return cls(
            allow_dirty=bool(general.get('allow_dirty', False)),
            fetch=bool(general.get('fetch_before_deploy', True)),
            remote=general.get('remote', 'origin') or 'origin',
        )


def default_command(state: CheckoutState) -> str:
    """Token used when none is given."""
    return DeployTarget.SYNC.value if state.detached else Intent.DEFER.value


def parse_arguments(token: str, args: Sequence[str]) -> Dict[str, Any]:
    """
    Validate a token's arguments.

    Raises:
        UnrecognizedCommand: unknown token or wrong number of arguments
        MalformedVersion: a version argument is not MAJOR.MINOR.PATCH
    """
    if token not in USAGE:
        known = ', '.join(USAGE)
        raise UnrecognizedCommand(f"Unrecognized command '{token}' (expected one of: {known})")

    args = list(args)
    if token == 'init':
        if len(args) > 1:
            raise UnrecognizedCommand(f"Usage: {USAGE[token]}")
        return {'prefix': args[0] if args else None}
    if token == 'exact':
        if len(args) == 1:
            return {'ordinals': parse_version(args[0])}
        if len(args) == 3:
            return {'ordinals': parse_version('.'.join(args))}
        raise UnrecognizedCommand(f"Usage: {USAGE[token]}")
    if token == 'ver':
        if len(args) != 1:
            raise UnrecognizedCommand(f"Usage: {USAGE[token]}")
        parse_version(args[0])
        return {'version': args[0].strip()}
    if args:
        raise UnrecognizedCommand(f"Usage: {USAGE[token]} (takes no arguments)")
    return {}


class Dispatcher:
    """
    Runs one releasetag command against a repository.

    Example:
        dispatcher = Dispatcher()
        result = dispatcher.run("/srv/app", "next")
        print(result['tag'])
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        options: Optional[DispatchOptions] = None
    ):
        """
        Initialize Dispatcher.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
            options: Switches (derived from config if None)
        """
        self.config = config or load_config()
        timeout = self.config.get('git', {}).get('timeout_seconds', 60)
        self.git = git_client or GitClient(timeout=timeout)
        self.options = options or DispatchOptions.from_config(self.config)

        self.inspector = CheckoutInspector(self.git)
        self.resolver = TagResolver(self.git)
        self.planner = ReleasePlanner()
        self.gateway = Gateway(
            self.git,
            signing_key=self.config.get('signing', {}).get('key') or None
        )

    def run(
        self,
        path: str,
        command: Optional[str] = None,
        args: Sequence[str] = ()
    ) -> Dict[str, Any]:
        """
        Run a command token.

        Returns:
            Result dict; 'action' is one of tag, deploy, status, list
        """
        root = self.inspector.ensure_repository(path)
        state = self.inspector.inspect(root)

        token = command or default_command(state)
        if not command:
            logger.debug(f"No command given, defaulting to '{token}'")
        arguments = parse_arguments(token, args)

        if token == 'status':
            return self.status(state)
        if token == 'list':
            return self.list_tags(root, state)

        self.check_preconditions(root, state)

        if token in TAGGING_TOKENS:
            return self.tag(root, TAGGING_TOKENS[token], state, **arguments)
        return self.deploy(root, DEPLOY_TOKENS[token], state, **arguments)

    def check_preconditions(self, root: str, state: CheckoutState) -> None:
        """Write access and a clean tree are required before mutating."""
        self.inspector.ensure_writable(root)
        if state.dirty:
            if not self.options.allow_dirty:
                raise DirtyWorkingTree(root)
            logger.warning("Working tree has uncommitted changes; continuing (--dirty)")

    def tag(
        self,
        root: str,
        intent: Intent,
        state: CheckoutState,
        ordinals=None,
        prefix: Optional[str] = None
    ) -> Dict[str, Any]:
        """Plan and create a release tag."""
        concrete = self.planner.resolve_intent(intent, state)
        plan = self.planner.plan(concrete, state, ordinals=ordinals, prefix=prefix)
        self.gateway.create_tag(root, plan)

        result = plan.to_dict()
        result['action'] = 'tag'
        result['requested'] = intent.value
        return result

    def deploy(
        self,
        root: str,
        target: DeployTarget,
        state: CheckoutState,
        version: Optional[str] = None
    ) -> Dict[str, Any]:
        """Fetch, resolve, verify and check out a release tag."""
        fetched = False
        if self.options.fetch:
            fetched = self.gateway.fetch(root, self.options.remote)
            if fetched:
                state = self.inspector.inspect(root)

        tag = self.resolver.resolve(root, target, state, version=version)
        warnings = self.gateway.deploy(root, tag, state)

        return {
            'action': 'deploy',
            'target': target.value,
            'tag': tag,
            'previous': state.descriptor.tag_name if state.descriptor else None,
            'fetched': fetched,
            'warnings': warnings,
        }

    def status(self, state: CheckoutState) -> Dict[str, Any]:
        """Describe the checkout without changing anything."""
        result = state.to_dict()
        result['action'] = 'status'
        result['default_command'] = default_command(state)
        if not state.detached:
            result['defer_resolves_to'] = self.planner.resolve_intent(Intent.DEFER, state).value
        return result

    def list_tags(self, root: str, state: CheckoutState) -> Dict[str, Any]:
        """Release tags of the checkout's prefix, oldest first."""
        descriptor = state.descriptor
        prefix = descriptor.prefix if descriptor else state.branch
        names = self.resolver.tag_set(root, prefix).names if prefix else []
        return {
            'action': 'list',
            'prefix': prefix,
            'current': descriptor.tag_name if descriptor else None,
            'tags': names,
        }
