"""CLI error handling helpers."""

import click

from timebill.domain.errors import DomainError, NotFoundError

EXIT_INVALID = 1
EXIT_NOT_FOUND = 3


def exit_code_for(error: Exception) -> int:
    """Exit status for a failed command: missing records are told apart from bad input."""
    if isinstance(error, NotFoundError):
        return EXIT_NOT_FOUND
    return EXIT_INVALID


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: ...`` on stderr and exit with the matching status."""
    message = f"Error: {error}"
    if isinstance(error, NotFoundError):
        message += " (use the matching 'list' command to see valid IDs)"
    click.echo(message, err=True)
    ctx.exit(exit_code_for(error))
