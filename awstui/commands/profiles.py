"""Profile command group for aws-tui"""

import click

from awstui.collectors.profiles import list_profiles
from awstui.commands.common import fail
from awstui.utils.output import OutputFormatter


@click.group()
def profiles():
    """List AWS profiles and show the active identity"""
    pass


@profiles.command('list')
@click.pass_obj
def list_cmd(ctx):
    """List profiles from ~/.aws/config and ~/.aws/credentials"""
    formatter = OutputFormatter(ctx.output_format)
    active = ctx.active_profile
    rows = [{'profile': name, 'active': name == active} for name in list_profiles()]
    formatter.output(rows, title="AWS profiles")


@profiles.command('whoami')
@click.pass_obj
def whoami(ctx):
    """Show the caller identity of the active profile"""
    formatter = OutputFormatter(ctx.output_format)

    try:
        identity = ctx.get_collector().get_identity()
    except Exception as e:
        fail(ctx, e)
        return

    formatter.output({'profile': ctx.active_profile, **identity}, title="Identity")
