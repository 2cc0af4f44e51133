"""
Standard exit codes and error taxonomy for releasetag.

Following Unix/POSIX conventions for command-line tools. Every failure the
tool can report is a CommandError subclass carrying its own exit code.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOT_A_REPOSITORY = 64    # Not run from a repository's top-level directory
DIRTY_WORKING_TREE = 65  # Uncommitted changes in working tree or index
TAG_NOT_FOUND = 66       # Requested tag (relative or exact) does not exist
PERMISSION_ERROR = 67    # Insufficient permissions
NETWORK_ERROR = 68       # Fetching tags from the remote failed
SIGNATURE_ERROR = 69     # Tag signature could not be verified
DATA_ERROR = 70          # Data format or validation error
PRECONDITION_ERROR = 71  # Branch/history state does not allow the operation
GIT_ERROR = 72           # git rejected a tag creation, checkout or query
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for exceptions outside the taxonomy
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'TimeoutError': GIT_ERROR,
    'ValueError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class UnrecognizedCommand(CommandError):
    """Raised for an unknown command token or a bad argument count."""
    def __init__(self, message: str):
        super().__init__(message, USAGE_ERROR)


class MalformedVersion(CommandError):
    """Raised when a user-supplied version is not MAJOR.MINOR.PATCH."""
    def __init__(self, value: str):
        super().__init__(f"Malformed version '{value}': expected MAJOR.MINOR.PATCH", USAGE_ERROR)
        self.value = value


class NotARepository(CommandError):
    """Raised when not invoked at the top level of a git repository."""
    def __init__(self, message: str):
        super().__init__(message, NOT_A_REPOSITORY)


class WriteAccessDenied(CommandError):
    """Raised when the repository cannot be written to."""
    def __init__(self, path: str):
        super().__init__(f"Repository directory is not writable: {path}", PERMISSION_ERROR)
        self.path = path


class DirtyWorkingTree(CommandError):
    """Raised when the working tree or index has uncommitted changes."""
    def __init__(self, path: str):
        super().__init__(
            f"Working tree at {path} has uncommitted changes (use --dirty to override)",
            DIRTY_WORKING_TREE,
        )
        self.path = path


class MalformedDescriptor(CommandError):
    """Raised when describe output or a tag name does not match the grammar."""
    def __init__(self, text: str):
        super().__init__(f"Malformed version descriptor: '{text}'", DATA_ERROR)
        self.text = text


class TagNotFound(CommandError):
    """Raised when a requested relative or exact tag does not exist."""
    def __init__(self, message: str):
        super().__init__(message, TAG_NOT_FOUND)


class DetachedHeadError(CommandError):
    """Raised when a tagging operation needs a named branch."""
    def __init__(self, intent: str):
        super().__init__(
            f"Cannot '{intent}' on a detached HEAD: check out a branch first",
            PRECONDITION_ERROR,
        )
        self.intent = intent


class NoChangesError(CommandError):
    """Raised when there are no commits since the last tag."""
    def __init__(self, tag: str):
        super().__init__(f"No new commits since {tag}", PRECONDITION_ERROR)
        self.tag = tag


class MatchNotMeaningful(CommandError):
    """Raised when 'match' is requested on a branch that was not forked."""
    def __init__(self, branch: str, nearest: Optional[str] = None):
        if nearest:
            message = f"Branch '{branch}' is not forked (nearest tag is {nearest}); nothing to match"
        else:
            message = f"Branch '{branch}' is not forked; nothing to match"
        super().__init__(message, PRECONDITION_ERROR)
        self.branch = branch


class SignatureVerificationFailed(CommandError):
    """Raised when git verify-tag rejects a tag."""
    def __init__(self, tag: str, detail: str = ""):
        message = f"Signature verification failed for tag {tag}"
        if detail:
            message += f": {detail}"
        super().__init__(message, SIGNATURE_ERROR)
        self.tag = tag


class TagCreationFailed(CommandError):
    """Raised when git refuses to create (or sign) a tag."""
    def __init__(self, tag: str, detail: str = ""):
        message = f"Failed to create tag {tag}"
        if detail:
            message += f": {detail}"
        super().__init__(message, GIT_ERROR)
        self.tag = tag


class CheckoutFailed(CommandError):
    """Raised when git checkout of a tag fails."""
    def __init__(self, tag: str, detail: str = ""):
        message = f"Failed to check out tag {tag}"
        if detail:
            message += f": {detail}"
        super().__init__(message, GIT_ERROR)
        self.tag = tag


class FetchFailed(CommandError):
    """Raised when fetching tags from the remote fails."""
    def __init__(self, remote: str, detail: str = ""):
        message = f"Failed to fetch tags from '{remote}'"
        if detail:
            message += f": {detail}"
        super().__init__(message, NETWORK_ERROR)
        self.remote = remote


class GitCommandError(CommandError):
    """Raised when any other git query fails."""
    def __init__(self, message: str):
        super().__init__(message, GIT_ERROR)
