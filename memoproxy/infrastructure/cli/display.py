import logging
from typing import Any, Mapping

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from memoproxy.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self):
        """Initializes the rich Console."""
        self.console = Console()

    def display_output(self, output: str, **kwargs: Any) -> None:
        """Prints output as-is; stored records are shown without markup processing."""
        self.console.print(output, markup=False, highlight=False, soft_wrap=True)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_stats(self, title: str, stats: Mapping[str, Any]) -> None:
        """Renders the stats as a rounded two-column table."""
        table = Table(title=title, box=ROUNDED, show_header=False, title_style="bold cyan")
        table.add_column("Name", style="bold white")
        table.add_column("Value", style="cyan")
        for name, value in stats.items():
            table.add_row(str(name), str(value))
        self.console.print(table)

    def ask_yes_no_question(self, question: str) -> bool:
        """Asks a yes/no question and returns the answer.

        Args:
            question: The question to ask

        Returns:
            True if the answer is yes, False otherwise
        """
        logger.debug(f"Asking yes/no question: {question}")
        panel = Panel(
            Text(f"{question} (y/n)", style="white"),
            title="[bold yellow]Question[/bold yellow]",
            border_style="yellow",
            box=ROUNDED,
            padding=(0, 1)
        )
        self.console.print(panel)
        response = self.console.input("[bold yellow]> [/bold yellow]").strip().lower()
        return response in ('y', 'yes')
