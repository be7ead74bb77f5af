# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging interface for sitewrap.

Library modules log through a small logger object instead of printing
directly, so the upgrade resolver and the option pipeline stay quiet when
used programmatically and chatty when driven from the CLI.

Output levels:

- Step: Always printed (progress indicators such as "[1/3] Locating app")
- Warning: Always printed, to stderr (recoverable problems, e.g. a
  user-agent lookup that fell back to the built-in Chrome version)
- Verbose: Only printed when verbose mode is enabled
- Debug: Only printed when debug mode is enabled (implies verbose)

Example:
    Configure global logger (what the CLI does):
        ```python
        from sitewrap.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Use in library code:
        ```python
        from sitewrap.logging import get_global_logger

        logger = get_global_logger()
        logger.verbose("UPGRADE", f"Searching for sitewrap.json in {path}")
        logger.debug("OPTIONS", "Merging 6 fragment(s)")
        ```

Note:
    The default global logger is silent, so library functions print nothing
    unless a caller installs another logger.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def warning(self, prefix: str, message: str) -> None:
        """Print a warning that does not stop the current operation.

        Args:
            prefix: Message prefix (e.g., "USERAGENT").
            message: Warning text.
        """
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "UPGRADE", "BUILD").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "OPTIONS", "USERAGENT").
            message: Log message.
        """
        ...


class DefaultLogger:
    """Logger that writes to stdout, with warnings on stderr.

    Respects verbose and debug flags and formats every line as
    ``[PREFIX] message`` to match the CLI output format.
    """

    def __init__(
        self,
        verbose: bool = False,
        debug: bool = False,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
    ) -> None:
        """Initialize logger with verbosity settings.

        Args:
            verbose: If True, print verbose messages.
            debug: If True, print debug messages (implies verbose).
            stream: Destination for regular output. Default is sys.stdout
                (looked up at write time so pytest capture works).
            error_stream: Destination for warnings. Default is sys.stderr.
        """
        self._verbose = verbose or debug
        self._debug = debug
        self._stream = stream
        self._error_stream = error_stream

    def _write(self, line: str, error: bool = False) -> None:
        if error:
            target = self._error_stream or sys.stderr
        else:
            target = self._stream or sys.stdout
        print(line, file=target)

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator."""
        self._write(f"[{step}/{total}] {message}")

    def warning(self, prefix: str, message: str) -> None:
        """Print a warning to the error stream."""
        self._write(f"[{prefix}] WARNING: {message}", error=True)

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message (only when verbose mode is active)."""
        if self._verbose:
            self._write(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message (only when debug mode is active)."""
        if self._debug:
            self._write(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output, warnings included."""

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def warning(self, prefix: str, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


_global_logger: Logger = SilentLogger()


def get_logger(
    verbose: bool = False, debug: bool = False, stream: TextIO | None = None
) -> Logger:
    """Get a console logger with the given verbosity.

    Args:
        verbose: If True, logger will print verbose messages.
        debug: If True, logger will print debug messages (implies verbose).
        stream: Destination for progress output. Default is stdout; commands
            that print machine-readable output pass sys.stderr.

    Returns:
        A DefaultLogger configured with the specified verbosity.
    """
    return DefaultLogger(verbose=verbose, debug=debug, stream=stream)


def get_global_logger() -> Logger:
    """Get the global logger instance (silent unless configured)."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger instance to use as the global logger.

    Note:
        This affects every library function that logs through
        get_global_logger(). The CLI calls this once per command.
    """
    global _global_logger
    _global_logger = logger
