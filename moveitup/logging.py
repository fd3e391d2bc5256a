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

"""Logging interface for moveitup.

Library modules write their output through a small logger object instead of
printing directly, so the CLI decides how chatty a run is. The logger can be
configured globally or passed in as a parameter.

Output levels:
- Step: Always printed (pipeline progress, e.g. "[2/5] Resolving home folder...")
- Verbose: Only printed when verbose mode is enabled
- Debug: Only printed when debug mode is enabled (implies verbose)
- Error: Always printed, to stderr

Upload progress ("Progress: N%") does not go through the logger; see
moveitup.io.transfer.ProgressReporter.

Example:
    Configure global logger:
        ```python
        from moveitup.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Use in library code:
        ```python
        from moveitup.logging import get_global_logger

        logger = get_global_logger()
        logger.step(1, 5, "Authenticating...")
        logger.verbose("HTTP", "POST https://.../api/v1/token")
        logger.debug("HTTP", "Response body: {...}")
        ```

Note:
    The default global logger is silent, so library functions print nothing
    unless explicitly configured. The CLI configures it for every run.
"""

from __future__ import annotations

import sys
from typing import Protocol


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

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "HTTP", "FILE").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "HTTP", "FILE").
            message: Log message.
        """
        ...

    def error(self, message: str) -> None:
        """Print a diagnostic for a failed step.

        Args:
            message: Error description.
        """
        ...


class DefaultLogger:
    """Logger that prints to stdout, and errors to stderr."""

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        """Initialize logger with verbosity settings.

        Args:
            verbose: If True, print verbose messages.
            debug: If True, print debug messages (implies verbose).
        """
        self._verbose = verbose or debug
        self._debug = debug

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator."""
        print(f"[{step}/{total}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message (only when verbose mode is active)."""
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message (only when debug mode is active)."""
        if self._debug:
            print(f"[{prefix}] {message}")

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        print(f"Error: {message}", file=sys.stderr)


class SilentLogger:
    """Logger that suppresses all output.

    Useful for programmatic usage when output is not desired.
    """

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


# Global logger instance (defaults to silent)
_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Get a logger instance with specified verbosity.

    Args:
        verbose: If True, logger will print verbose messages.
        debug: If True, logger will print debug messages (implies verbose).

    Returns:
        A logger instance configured with the specified verbosity.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Get the global logger instance.

    Returns:
        The current global logger instance.
    """
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger instance to use as the global logger.

    Note:
        This affects all library functions that fall back to
        get_global_logger() when no logger is passed in.
    """
    global _global_logger
    _global_logger = logger
