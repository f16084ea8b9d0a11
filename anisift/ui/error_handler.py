"""
Error Handler - Error displays with context and suggestions.

This module provides consistent error handling and display across the
CLI, with specific hints for each error type.
"""

import traceback
from typing import List, Optional

from rich.markup import escape
from rich.panel import Panel

from anisift.core.exceptions import (
    AniSiftError,
    ConfigurationError,
    DownloadError,
    InvalidQueryError,
    NetworkError,
    SourceError,
)
from anisift.ui.console import get_console


class ErrorHandler:
    """Handles error display with consistent formatting and helpful context."""

    def __init__(self):
        self.console = get_console()

    def handle_error(
        self,
        error: Exception,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """
        Handle and display an error with appropriate formatting.

        Args:
            error: Exception to handle
            context: Additional context about where the error occurred
            show_traceback: Whether to show the full traceback
        """
        if isinstance(error, AniSiftError):
            title, lines, suggestions = self._describe_anisift_error(error)
        else:
            title = "💥 Unexpected Error"
            lines = [f"[red]{error.__class__.__name__}: {escape(str(error))}[/red]"]
            suggestions = [
                "Check the command syntax and arguments",
                "Run again with [cyan]--debug[/cyan] for details",
            ]

        if context:
            lines.append(f"\n[dim]Context:[/dim] {context}")

        if suggestions:
            lines.append("\n\n[cyan]💡 Suggestions:[/cyan]")
            lines.extend(f"• {suggestion}" for suggestion in suggestions)

        if show_traceback:
            if isinstance(error, AniSiftError) and error.details:
                lines.append(f"\n\n[dim]Details:[/dim]\n{escape(str(error.details))}")
            lines.append(f"\n\n[dim]Traceback:[/dim]\n{escape(traceback.format_exc())}")

        self.console.print(Panel(
            "\n".join(lines),
            title=title,
            border_style="red",
            padding=(1, 2)
        ))

    def _describe_anisift_error(self, error: AniSiftError):
        lines: List[str] = [f"[red]{escape(error.message)}[/red]"]

        if isinstance(error, InvalidQueryError):
            if error.criterion:
                lines.append(f"\n[dim]Criterion:[/dim] [cyan]{error.criterion}[/cyan]")
            if error.value is not None:
                lines.append(f"[dim]Value:[/dim] [cyan]{escape(str(error.value))}[/cyan]")
            return "🔎 Invalid Query", lines, [
                "Numbers and ranges look like [cyan]3[/cyan] or [cyan]1..12[/cyan]",
                "Resolutions are 1080p, 720p, 480p or [cyan]any[/cyan]",
                "Use [cyan]any[/cyan] on its own to clear a restriction",
            ]

        if isinstance(error, ConfigurationError):
            if error.config_path:
                lines.append(f"\n[dim]Configuration file:[/dim] [cyan]{error.config_path}[/cyan]")
            return "⚙️  Configuration Error", lines, [
                "Check configuration file syntax and format",
                "Reset to defaults with [cyan]anisift config reset[/cyan]",
            ]

        if isinstance(error, SourceError):
            if error.source_name:
                lines.append(f"\n[dim]Source:[/dim] [cyan]{error.source_name}[/cyan]")
            return "🔌 Source Error", lines, [
                "List sources and their options with [cyan]anisift sources[/cyan]",
            ]

        if isinstance(error, NetworkError):
            if error.url:
                lines.append(f"\n[dim]URL:[/dim] [cyan]{error.url}[/cyan]")
            if error.status_code:
                lines.append(f"[dim]Status:[/dim] {error.status_code}")
            return "🌐 Network Error", lines, [
                "Check your internet connection",
                "The catalog may be temporarily unavailable",
            ]

        if isinstance(error, DownloadError):
            if error.episode_title:
                lines.append(f"\n[dim]Episode:[/dim] [cyan]{error.episode_title}[/cyan]")
            return "⬇️  Download Error", lines, [
                "Check that the output directory is writable",
            ]

        return "❌ Error", lines, []

    def display_warning(self, message: str, title: str = "⚠️  Warning") -> None:
        self.console.print(Panel(
            f"[yellow]{message}[/yellow]",
            title=f"[yellow]{title}[/yellow]",
            border_style="yellow",
            padding=(1, 2)
        ))

    def display_info(self, message: str, title: str = "ℹ️  Information") -> None:
        self.console.print(Panel(
            f"[cyan]{message}[/cyan]",
            title=f"[cyan]{title}[/cyan]",
            border_style="cyan",
            padding=(1, 2)
        ))


def handle_error(
    error: Exception,
    context: Optional[str] = None,
    show_traceback: bool = False
) -> None:
    """Handle and display an error."""
    ErrorHandler().handle_error(error, context, show_traceback)


def display_warning(message: str, title: str = "⚠️  Warning") -> None:
    ErrorHandler().display_warning(message, title)


def display_info(message: str, title: str = "ℹ️  Information") -> None:
    ErrorHandler().display_info(message, title)


__all__ = [
    "ErrorHandler",
    "handle_error",
    "display_warning",
    "display_info",
]
