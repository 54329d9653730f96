"""IAM command group for aws-tui"""

import click

from awstui.commands.common import fail
from awstui.utils.output import OutputFormatter


@click.group()
def iam():
    """Browse and manage IAM users"""
    pass


@iam.command('users')
@click.pass_obj
def users(ctx):
    """List IAM users"""
    formatter = OutputFormatter(ctx.output_format)

    try:
        data = ctx.get_collector().list_iam_users()
    except Exception as e:
        fail(ctx, e)
        return

    if ctx.output_format == 'table':
        formatter.output(data, title=f"IAM users - {ctx.active_profile}",
                         headers=['user_name', 'path', 'create_date', 'password_last_used'])
    else:
        formatter.output(data)


@iam.command('user')
@click.argument('name')
@click.pass_obj
def user(ctx, name: str):
    """Show details and access keys of user NAME"""
    formatter = OutputFormatter(ctx.output_format)

    try:
        details = ctx.get_collector().get_iam_user_details(name)
    except Exception as e:
        fail(ctx, e)
        return

    formatter.output(details, title=f"IAM user - {name}")


@iam.command('create-user')
@click.argument('name')
@click.pass_obj
def create_user(ctx, name: str):
    """Create user NAME"""
    try:
        ctx.get_collector().create_iam_user(name)
    except Exception as e:
        fail(ctx, e)
        return

    click.echo(f"User created: {name}")


@iam.command('delete-user')
@click.argument('name')
@click.option('--force', '-f', is_flag=True, help='Skip confirmation')
@click.pass_obj
def delete_user(ctx, name: str, force: bool):
    """Delete user NAME"""
    if not force:
        if not click.confirm(f"Delete IAM user '{name}'?"):
            click.echo("Cancelled.")
            return

    try:
        ctx.get_collector().delete_iam_user(name)
    except Exception as e:
        fail(ctx, e)
        return

    click.echo(f"User deleted: {name}")


@iam.command('delete-key')
@click.argument('name')
@click.argument('access_key_id')
@click.option('--force', '-f', is_flag=True, help='Skip confirmation')
@click.pass_obj
def delete_key(ctx, name: str, access_key_id: str, force: bool):
    """Delete access key ACCESS_KEY_ID of user NAME"""
    if not force:
        if not click.confirm(f"Delete access key {access_key_id} of '{name}'?"):
            click.echo("Cancelled.")
            return

    try:
        ctx.get_collector().delete_access_key(name, access_key_id)
    except Exception as e:
        fail(ctx, e)
        return

    click.echo(f"Access key deleted: {access_key_id}")
