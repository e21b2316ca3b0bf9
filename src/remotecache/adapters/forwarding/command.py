"""Forward a resolved file path to an external command."""

from __future__ import annotations

import os
import shlex
import subprocess

from remotecache.core.exceptions import PathResolutionError, ProcessStartError
from remotecache.core.models import ForwardResult
from remotecache.logging import get_logger


logger = get_logger(__name__)

PATH_TOKENS = ("{0}", "{1}")


def quote_path(file_path: str) -> str:
    """Return the absolute path wrapped in single quotes.

    Embedded single quotes are written as ``'"'"'``, so shell-style
    splitting still yields the path as one argument.

    Example:
        >>> print(quote_path("/media/Don't Stop.mp4"))
        '/media/Don'"'"'t Stop.mp4'

    Raises:
        PathResolutionError: If the path cannot be made absolute.
    """
    try:
        absolute = os.path.abspath(file_path)
    except (OSError, ValueError) as e:
        raise PathResolutionError(file_path, cause=e) from e
    escaped = absolute.replace("'", "'\"'\"'")
    return f"'{escaped}'"


def build_forward_arguments(template: str | None, file_path: str) -> str:
    """Substitute the quoted absolute path into an argument template.

    - empty template: the quoted path alone
    - template containing {0} or {1}: every occurrence of both is replaced
    - otherwise: the quoted path is appended

    Example:
        >>> build_forward_arguments("-i {0} -o {1}.out", "/a/b.mp4")
        "-i '/a/b.mp4' -o '/a/b.mp4'.out"
    """
    quoted = quote_path(file_path)

    if template is None or not template.strip():
        return quoted

    if any(token in template for token in PATH_TOKENS):
        for token in PATH_TOKENS:
            template = template.replace(token, quoted)
        return template

    return f"{template} {quoted}"


class SubprocessCommandForwarder:
    """Runs the forwarding command as a child process and waits for it.

    Implements CommandForwarderPort. The argument string is split with
    shell rules, so the single quotes around the path group it into one
    argument, but no shell is involved.
    """

    def forward(
        self, command: str, arguments: str | None, file_path: str
    ) -> ForwardResult:
        """Run command with file_path substituted into arguments.

        Args:
            command: Executable to run.
            arguments: Argument template (see build_forward_arguments).
            file_path: Resolved file path to hand over.

        Returns:
            ForwardResult with the child's exit code.

        Raises:
            PathResolutionError: If file_path cannot be made absolute.
            ProcessStartError: If the process cannot be started.
        """
        argument_string = build_forward_arguments(arguments, file_path)
        try:
            argv = [command, *shlex.split(argument_string)]
        except ValueError as e:
            raise ProcessStartError(command, cause=e) from e

        logger.info("Running %s %s", command, argument_string)
        try:
            completed = subprocess.run(argv, check=False)  # noqa: S603
        except OSError as e:
            raise ProcessStartError(command, cause=e) from e

        logger.info("%s exited with %d", command, completed.returncode)
        return ForwardResult(exit_code=completed.returncode)
