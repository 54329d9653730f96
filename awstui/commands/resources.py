"""Read-only resource listings for aws-tui"""

import click

from awstui.collectors.aws import CATEGORIES
from awstui.commands.common import fail
from awstui.utils.output import OutputFormatter


@click.group()
def resources():
    """List resources of any browsable category"""
    pass


@resources.command('categories')
@click.pass_obj
def categories(ctx):
    """List browsable categories"""
    formatter = OutputFormatter(ctx.output_format)
    rows = [{'name': name, 'description': c.label} for name, c in CATEGORIES.items()]
    formatter.output(rows, title="Categories")


@resources.command('list')
@click.argument('category', type=click.Choice(list(CATEGORIES)))
@click.pass_obj
def list_cmd(ctx, category: str):
    """List resources of CATEGORY"""
    formatter = OutputFormatter(ctx.output_format)

    try:
        data = ctx.get_collector().collect(category)
    except Exception as e:
        fail(ctx, e)
        return

    formatter.output(data, title=f"{CATEGORIES[category].label} - {ctx.active_profile}")


@resources.command('images')
@click.argument('repository')
@click.pass_obj
def images(ctx, repository: str):
    """List images of ECR REPOSITORY"""
    formatter = OutputFormatter(ctx.output_format)

    try:
        data = ctx.get_collector().list_ecr_images(repository)
    except Exception as e:
        fail(ctx, e)
        return

    formatter.output(data, title=f"ECR images - {repository}")
