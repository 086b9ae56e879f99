"""
Run output: messages, warnings and configuration errors.

Printing follows the rest of the package (plain ``print``). Warnings and
errors are also collected so that callers can inspect them after setup.
"""

import threading
from typing import List, Optional

from .parameters import ConfigurationError, Parameter


def _describe(message: str, param: Optional[Parameter], default: Optional[Parameter]) -> str:
    if param is None and default is None:
        return message
    names = [str(p) for p in (param, default) if p is not None]
    return f"{message} (PARAMETER: {', '.join(names)})"


class Output:
    """
    Collects and prints run messages.

    Attributes:
        quiet: If True, nothing is printed (messages are still recorded)
        warnings: Every warning issued so far
        errors: Errors waiting for ``exit_if_errors``
    """

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.warnings: List[str] = []
        self.errors: List[str] = []
        self._warned_once: set = set()
        self._lock = threading.Lock()

    def message(self, text: str) -> None:
        if not self.quiet:
            print(text)

    def warning(
        self,
        text: str,
        param: Optional[Parameter] = None,
        default: Optional[Parameter] = None
    ) -> None:
        """Record and print a non-fatal warning."""
        text = _describe(text, param, default)
        with self._lock:
            self.warnings.append(text)
        if not self.quiet:
            print(f"Warning: {text}")

    def warn_once(self, text: str) -> None:
        """Like ``warning`` but each distinct text is reported only once."""
        with self._lock:
            if text in self._warned_once:
                return
            self._warned_once.add(text)
        self.warning(text)

    def error(
        self,
        text: str,
        param: Optional[Parameter] = None,
        default: Optional[Parameter] = None
    ) -> None:
        """Record an error; raised later by ``exit_if_errors``."""
        text = _describe(text, param, default)
        with self._lock:
            self.errors.append(text)
        if not self.quiet:
            print(f"Error: {text}")

    def exit_if_errors(self) -> None:
        """
        Raise all collected errors at once.

        Raises:
            ConfigurationError: If any error was recorded
        """
        with self._lock:
            if not self.errors:
                return
            issues = self.errors
            self.errors = []
        raise ConfigurationError("\n".join(issues))

    def fatal(
        self,
        text: str,
        param: Optional[Parameter] = None,
        default: Optional[Parameter] = None
    ) -> None:
        """
        Abort the run immediately.

        Raises:
            ConfigurationError: Always
        """
        raise ConfigurationError(_describe(text, param, default))
