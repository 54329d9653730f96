"""Helpers shared by command groups"""

import sys
import traceback

import click


def fail(ctx, error: Exception) -> None:
    """Report an error on stderr and exit with status 1"""
    click.echo(f"Error: {error}", err=True)
    if ctx is not None and ctx.verbose:
        traceback.print_exc()
    sys.exit(1)
