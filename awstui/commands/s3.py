"""S3 command group for aws-tui"""

import click
from typing import Optional

from awstui.commands.common import fail
from awstui.utils.output import OutputFormatter, format_datetime, format_size


@click.group()
def s3():
    """Browse and manage S3 buckets and objects"""
    pass


@s3.command('buckets')
@click.pass_obj
def buckets(ctx):
    """List buckets"""
    formatter = OutputFormatter(ctx.output_format)

    try:
        data = ctx.get_collector().list_buckets()
    except Exception as e:
        fail(ctx, e)
        return

    formatter.output(data, title=f"S3 buckets - {ctx.active_profile}")


@s3.command('ls')
@click.argument('bucket')
@click.argument('prefix', required=False, default='')
@click.pass_obj
def ls(ctx, bucket: str, prefix: str):
    """List one level of BUCKET under PREFIX"""
    formatter = OutputFormatter(ctx.output_format)

    try:
        data = ctx.get_collector().list_objects(bucket, prefix)
    except Exception as e:
        fail(ctx, e)
        return

    if ctx.output_format == 'table':
        table_data = [
            {
                'key': obj['key'],
                'size': '-' if obj['is_folder'] else format_size(obj['size']),
                'last_modified': format_datetime(obj['last_modified']),
            }
            for obj in data
        ]
        formatter.output(table_data, title=f"s3://{bucket}/{prefix}")
    else:
        formatter.output(data, title=f"s3://{bucket}/{prefix}")


@s3.command('mb')
@click.argument('name')
@click.option('--bucket-region', help='Bucket region (default: active region)')
@click.pass_obj
def make_bucket(ctx, name: str, bucket_region: Optional[str]):
    """Create bucket NAME"""
    try:
        ctx.get_collector().create_bucket(name, region=bucket_region)
    except Exception as e:
        fail(ctx, e)
        return

    click.echo(f"Bucket created: {name}")


@s3.command('rb')
@click.argument('name')
@click.option('--force', '-f', is_flag=True, help='Skip confirmation')
@click.pass_obj
def remove_bucket(ctx, name: str, force: bool):
    """Delete bucket NAME (must be empty)"""
    if not force:
        if not click.confirm(f"Delete bucket '{name}'?"):
            click.echo("Cancelled.")
            return

    try:
        ctx.get_collector().delete_bucket(name)
    except Exception as e:
        fail(ctx, e)
        return

    click.echo(f"Bucket deleted: {name}")


@s3.command('mkdir')
@click.argument('bucket')
@click.argument('name')
@click.option('--prefix', default='', help='Parent prefix of the new folder')
@click.pass_obj
def mkdir(ctx, bucket: str, name: str, prefix: str):
    """Create folder NAME in BUCKET"""
    try:
        key = ctx.get_collector().create_folder(bucket, prefix, name)
    except Exception as e:
        fail(ctx, e)
        return

    click.echo(f"Folder created: s3://{bucket}/{key}")


@s3.command('rm')
@click.argument('bucket')
@click.argument('key')
@click.option('--force', '-f', is_flag=True, help='Skip confirmation')
@click.pass_obj
def remove_object(ctx, bucket: str, key: str, force: bool):
    """Delete object KEY from BUCKET"""
    if not force:
        if not click.confirm(f"Delete s3://{bucket}/{key}?"):
            click.echo("Cancelled.")
            return

    # the listing that showed this object is the one to invalidate
    stripped = key.rstrip('/')
    prefix = stripped.rsplit('/', 1)[0] + '/' if '/' in stripped else ''

    try:
        ctx.get_collector().delete_object(bucket, prefix, key)
    except Exception as e:
        fail(ctx, e)
        return

    click.echo(f"Object deleted: s3://{bucket}/{key}")
