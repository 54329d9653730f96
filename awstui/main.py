#!/usr/bin/env python3
"""
aws-tui - Browse AWS resources across profiles from the terminal

Supports:
- S3, IAM, EC2, VPC, Lambda, RDS, SQS, DynamoDB and ECR listings
- Profile switching with per-profile cache isolation
- An interactive browser that reuses cached results between views
"""

import logging
import sys

import click

from awstui import __version__
from awstui.commands import browse, iam, profiles, resources, s3
from awstui.commands.common import fail
from awstui.config.cli_config import ConfigError, get_default_config_path, load_config, validate_config
from awstui.context import AppContext
from awstui.utils.logging_utils import set_level
from awstui.utils.output import OutputFormatter

pass_context = click.make_pass_decorator(AppContext, ensure=True)


@click.group()
@click.version_option(version=__version__, prog_name='aws-tui')
@click.option('--profile', '-p', envvar='AWS_PROFILE',
              help='AWS profile to use')
@click.option('--region', '-r', envvar='AWS_REGION',
              help='AWS region (default: from config or us-east-1)')
@click.option('--config', '-c', 'config_path', envvar='AWS_TUI_CONFIG',
              type=click.Path(exists=True),
              help='Path to config file (default: ~/.aws-tui/config.yaml)')
@click.option('--output', '-o', 'output_format',
              type=click.Choice(['table', 'json', 'yaml']),
              default='table',
              help='Output format (default: table)')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose output')
@pass_context
def cli(ctx, profile, region, config_path, output_format, verbose):
    """
    aws-tui - AWS resource dashboard for the terminal

    Examples:

    \b
      # Browse interactively with the dev profile
      aws-tui -p dev browse

    \b
      # List objects under a prefix
      aws-tui s3 ls my-bucket logs/

    \b
      # List EC2 instances as JSON
      aws-tui -o json resources list ec2
    """
    ctx.verbose = verbose
    ctx.output_format = output_format
    ctx.profile = profile
    ctx.region = region

    if verbose:
        set_level(logging.DEBUG)

    path = config_path or get_default_config_path()
    if path:
        try:
            ctx.config = load_config(path)
        except ConfigError as e:
            fail(ctx, e)
        if ctx.verbose:
            click.echo(f"Loaded config from {path}", err=True)

        issues = validate_config(ctx.config)
        for issue in issues:
            click.echo(issue, err=True)
        if any(issue.startswith('Error') for issue in issues):
            sys.exit(1)
    else:
        ctx.config = {}


# Register command groups
cli.add_command(profiles.profiles)
cli.add_command(s3.s3)
cli.add_command(iam.iam)
cli.add_command(resources.resources)
cli.add_command(browse.browse)


@cli.command()
@pass_context
def config(ctx):
    """Show current configuration"""
    formatter = OutputFormatter(ctx.output_format)
    cache_settings = ctx.cache_settings

    config_info = {
        'profile': ctx.active_profile,
        'region': ctx.active_region,
        'sweep_interval': cache_settings['sweep_interval'],
        'ttl_overrides': cache_settings['ttls'] or '-',
        'config_file': ctx.config.get('_config_path', 'not loaded'),
    }

    formatter.output(config_info, title="Configuration")


def main():
    """Main entry point"""
    cli(auto_envvar_prefix='AWS_TUI')


if __name__ == '__main__':
    main()
