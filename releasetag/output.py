"""
Output module for releasetag.

Results go to stdout, either as plain text for people and shell scripts or
as JSON (`--json`). Diagnostics never go to stdout; they go through logging
or `emit_error` to stderr.

Usage:
    from releasetag.output import emit, emit_error

    emit(result, json_output=args.json)
    emit_error("Tag master-0.0.1 not found", type="TagNotFound")
"""

import json
import sys
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def emit(result: Dict[str, Any], json_output: bool = False, pretty: bool = False) -> None:
    """
    Emit a dispatcher result.

    Args:
        result: Dict returned by Dispatcher.run()
        json_output: Output JSON (JSONL for tag lists) instead of text
        pretty: Render tables/panels with Rich where text mode has them
    """
    if json_output:
        _emit_json(result)
        return

    action = result.get('action')
    if action == 'tag':
        click.echo(result['tag'])
        for line in result.get('message', []):
            click.echo(line)
    elif action == 'deploy':
        click.echo(result['tag'])
    elif action == 'list':
        if pretty:
            _emit_tag_table(result)
        else:
            for name in result.get('tags', []):
                click.echo(name)
    elif action == 'status':
        _emit_status(result)
    else:
        _emit_json(result)


def _emit_json(result: Dict[str, Any]) -> None:
    """Emit JSON; lists of tags stream one object per line."""
    if result.get('action') == 'list':
        current = result.get('current')
        for name in result.get('tags', []):
            data = {'tag': name, 'prefix': result.get('prefix'), 'current': name == current}
            print(json.dumps(data, ensure_ascii=False), flush=True)
        return
    print(json.dumps(result, ensure_ascii=False), flush=True)


def _emit_tag_table(result: Dict[str, Any]) -> None:
    """Emit a tag list as a Rich table."""
    tags = result.get('tags', [])
    console = Console()
    if not tags:
        console.print(f"[yellow]No release tags for prefix '{result.get('prefix')}'[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("tag")
    table.add_column("current")
    for name in tags:
        table.add_row(name, "*" if name == result.get('current') else "")
    console.print(table)


def _emit_status(result: Dict[str, Any]) -> None:
    """Show checkout status as a Rich panel."""
    body = Text()
    body.append("Branch: ", style="bold blue")
    if result.get('detached'):
        body.append("(detached)\n", style="yellow")
    else:
        body.append(f"{result.get('branch')}\n", style="bold white")
    body.append("Commit: ", style="dim")
    body.append(f"{result.get('commit')}\n", style="dim")

    body.append("Working tree: ", style="bold blue")
    if result.get('dirty'):
        body.append("dirty\n", style="yellow")
    else:
        body.append("clean\n", style="green")

    body.append("Nearest tag: ", style="bold blue")
    body.append(f"{result.get('nearest') or '-'}")
    if result.get('distance') is not None:
        body.append(f" (+{result['distance']})", style="dim")
    body.append("\n")
    if not result.get('detached'):
        body.append("Own tag: ", style="bold blue")
        body.append(f"{result.get('own') or '-'}\n")
        body.append("Forked: ", style="bold blue")
        body.append(f"{'yes' if result.get('forked') else 'no'}\n")
        body.append("'defer' runs: ", style="bold blue")
        body.append(f"{result.get('defer_resolves_to')}\n")
    body.append("Default command: ", style="bold blue")
    body.append(f"{result.get('default_command')}", style="bold white")

    Console().print(Panel(body, border_style="cyan"))


def emit_error(
    error: str,
    type: str = "error",
    context: Optional[Dict[str, Any]] = None,
    json_output: bool = False
) -> None:
    """
    Emit error to stderr.

    Args:
        error: Error message
        type: Error type (e.g., "TagNotFound", "DirtyWorkingTree")
        context: Additional context dict
        json_output: Emit a JSON object instead of a formatted message
    """
    if json_output:
        obj = {
            'error': error,
            'type': type
        }
        if context:
            obj['context'] = context
        print(json.dumps(obj, ensure_ascii=False), file=sys.stderr, flush=True)
        return

    Console(stderr=True).print(Text.assemble(("Error: ", "bold red"), error))
