"""Interface for reporting to the user of the maintenance CLI.

Defines the contract for displaying information, errors, warnings and
store statistics, and for asking confirmation, so the CLI commands can be
exercised against a mock.
"""

import abc
from typing import Any, Mapping

class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays standard output to the user.

        Args:
            output: The text to display.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    @abc.abstractmethod
    def display_stats(self, title: str, stats: Mapping[str, Any]) -> None:
        """Displays a two-column table of named values.

        Args:
            title: Table title.
            stats: Row labels mapped to their values, in display order.
        """
        pass

    @abc.abstractmethod
    def ask_yes_no_question(self, question: str) -> bool:
        """Asks a yes/no question and returns True for yes."""
        pass
