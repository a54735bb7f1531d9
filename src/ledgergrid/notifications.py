"""User-facing notifications."""

from abc import ABC, abstractmethod

import click


class Notifier(ABC):
    """Fire-and-forget progress, success and error notices."""

    @abstractmethod
    def show_progress(self, message: str) -> None:
        pass

    @abstractmethod
    def show_success(self, message: str) -> None:
        pass

    @abstractmethod
    def show_error(self, title: str, message: str) -> None:
        pass


class ClickNotifier(Notifier):
    """Notifier echoing to the terminal."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def show_progress(self, message: str) -> None:
        if not self.quiet:
            click.echo(message)

    def show_success(self, message: str) -> None:
        if not self.quiet:
            click.echo(click.style(message, fg="green"))

    def show_error(self, title: str, message: str) -> None:
        click.echo(click.style(f"{title}: {message}", fg="red"), err=True)
