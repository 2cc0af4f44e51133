"""
Common CLI utilities and decorators for consistent command behavior.
"""

import logging
import sys
import click
from functools import wraps

from .exit_codes import (
    INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .output import emit_error

logger = logging.getLogger("releasetag")


def handle_errors(func):
    """
    Decorator that provides standard error behavior:
    - CommandError: message on stderr, exit with its own code
    - KeyboardInterrupt: exit 130
    - Anything else: message on stderr, exit code by exception type

    Reads the command's `json_output` keyword to pick the error format.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        json_output = kwargs.get('json_output', False)
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            emit_error("Interrupted by user", type="KeyboardInterrupt", json_output=json_output)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            # Our custom command errors with specific exit codes
            emit_error(str(e), type=type(e).__name__, json_output=json_output)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.debug("Unexpected failure", exc_info=True)
            emit_error(f"Command failed: {e}", type=type(e).__name__, json_output=json_output)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper
