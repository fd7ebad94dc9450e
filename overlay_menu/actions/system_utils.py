"""Shell command execution for menu side effects."""

import shlex
import subprocess
from typing import Optional

from loguru import logger


DEFAULT_PERCENTAGE = 50


def _escape_braces(text: str) -> str:
    """Escape curly braces for loguru formatting."""
    return text.replace("{", "{{").replace("}", "}}")


def validate_command_args(args: list[str]) -> None:
    """Validate command arguments before executing."""
    if not args or not all(isinstance(arg, str) and arg for arg in args):
        raise ValueError("Command args must be a non-empty list of strings.")


def split_command(command: str, *extra_args: object) -> list[str]:
    """Split a configured command string and append extra arguments."""
    return shlex.split(command) + [str(arg) for arg in extra_args]


def run_command(
    args: list[str],
    *,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command and capture output."""
    validate_command_args(args)
    logger.debug(f"Running command: {_escape_braces(repr(args))}", component="system")
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
    )
    logger.debug(f"Command return code: {result.returncode}", component="system")
    logger.debug(
        f"Command stdout: {_escape_braces(repr(result.stdout.strip()))}",
        component="system",
    )
    logger.debug(
        f"Command stderr: {_escape_braces(repr(result.stderr.strip()))}",
        component="system",
    )
    return result


def _try_run(
    command: str, *extra_args: object, timeout: Optional[float] = None
) -> Optional[subprocess.CompletedProcess[str]]:
    try:
        args = split_command(command, *extra_args)
        return run_command(args, timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.error(
            f"Command timed out after {timeout}s: {_escape_braces(command)}",
            component="system",
        )
    except (OSError, ValueError) as error:
        logger.error(
            f"Failed to run command {_escape_braces(command)!r}: "
            f"{_escape_braces(str(error))}",
            component="system",
        )
    return None


def execute(command: str, *extra_args: object, timeout: Optional[float] = None) -> bool:
    """Run ``command`` for its side effect; True when it exits with status 0."""
    result = _try_run(command, *extra_args, timeout=timeout)
    if result is None:
        return False
    if result.returncode != 0:
        logger.error(
            f"Command {_escape_braces(command)!r} failed with return code "
            f"{result.returncode}",
            component="system",
        )
        return False
    return True


def spawn(command: str, *extra_args: object) -> bool:
    """Start ``command`` without waiting for it; True when it was started."""
    try:
        args = split_command(command, *extra_args)
        validate_command_args(args)
        logger.debug(f"Starting command: {_escape_braces(repr(args))}", component="system")
        subprocess.Popen(
            args,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except (OSError, ValueError) as error:
        logger.error(
            f"Failed to start command {_escape_braces(command)!r}: "
            f"{_escape_braces(str(error))}",
            component="system",
        )
        return False
    return True


def check(command: str, *, timeout: Optional[float] = None) -> bool:
    """Run a yes/no query command; any failure reads as "no"."""
    result = _try_run(command, timeout=timeout)
    return result is not None and result.returncode == 0


def parse_percentage(output: str) -> Optional[int]:
    """Read a 0-100 percentage from the first line of command output."""
    lines = output.strip().splitlines()
    if not lines:
        return None
    try:
        value = int(lines[0].strip())
    except ValueError:
        return None
    return max(0, min(100, value))


def query_percentage(command: str, *, timeout: Optional[float] = None) -> int:
    """Return the percentage printed by ``command``, or 50 when unreadable."""
    result = _try_run(command, timeout=timeout)
    value = None
    if result is not None and result.returncode == 0:
        value = parse_percentage(result.stdout)
    if value is None:
        logger.warning(
            f"Could not read a percentage from {_escape_braces(command)!r}, "
            f"using {DEFAULT_PERCENTAGE}%",
            component="system",
        )
        return DEFAULT_PERCENTAGE
    return value
