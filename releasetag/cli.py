#!/usr/bin/env python3

import os

import click

from releasetag import __version__
from releasetag.cli_utils import handle_errors
from releasetag.config import load_config, configure_logging
from releasetag.infra.git_client import GitClient
from releasetag.output import emit
from releasetag.services.dispatch_service import Dispatcher, DispatchOptions

CONTEXT_SETTINGS = {'help_option_names': ['-h', '--help']}


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument('command', required=False)
@click.argument('args', nargs=-1)
@click.option('--dirty', '-d', is_flag=True, help='Allow uncommitted changes in the working tree')
@click.option('--no-fetch', is_flag=True, help='Do not fetch tags before a deploy checkout')
@click.option('--json', 'json_output', is_flag=True, help='Output results as JSON')
@click.option('--pretty', is_flag=True, help='Render tag lists as a table')
@click.option('--verbose', '-v', is_flag=True, help='Log every git command')
@click.version_option(version=__version__, prog_name='releasetag')
@handle_errors
def cli(command, args, dirty, no_fetch, json_output, pretty, verbose):
    """releasetag - Signed semantic-version tags for branches and deploy checkouts.

    Run from the top-level directory of a git repository.

    \b
    Tagging (on a branch; creates <branch>-MAJOR.MINOR.PATCH):
        init [PREFIX]            first tag, 0.0.0
        patch | minor | major    bump the branch's last tag
        match                    re-tag the nearest tag of the branch this
                                 one was forked from, under this branch
        exact MAJOR MINOR PATCH  tag with the given version
        defer                    match if forked, else patch

    \b
    Deploy (verifies the signature, then detaches HEAD at the tag):
        sync                     nearest tag
        next | prev              neighbouring tag of the same prefix
        ver VERSION              given version of the same prefix

    \b
    Read-only:
        status                   branch, dirty, forked and nearest tags
        list                     release tags of the current prefix

    Without COMMAND: 'sync' on a detached HEAD, 'defer' on a branch.
    """
    config = load_config()
    configure_logging(config, verbose=verbose)

    options = DispatchOptions.from_config(config)
    if dirty:
        options.allow_dirty = True
    if no_fetch:
        options.fetch = False

    timeout = config.get('git', {}).get('timeout_seconds', 60)
    dispatcher = Dispatcher(
        config=config,
        git_client=GitClient(timeout=timeout),
        options=options
    )
    result = dispatcher.run(os.getcwd(), command, args)
    emit(result, json_output=json_output, pretty=pretty)


def main():
    cli()

if __name__ == "__main__":
    main()
