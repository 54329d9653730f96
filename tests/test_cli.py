"""Tests for the aws-tui command line."""

from __future__ import annotations

import json

import pytest
from botocore.exceptions import ProfileNotFound
from click.testing import CliRunner

from aws_fakes import client_error
from awstui import __version__
from awstui.context import AppContext
from awstui.main import cli


@pytest.fixture()
def invoke(isolated_env, app_context):
    runner = CliRunner()

    def run(*args, input=None):
        return runner.invoke(cli, list(args), obj=app_context, input=input)

    return run


def test_version(invoke):
    result = invoke("--version")

    assert result.exit_code == 0
    assert __version__ in result.output


def test_s3_buckets_table(invoke, s3_client):
    result = invoke("s3", "buckets")

    assert result.exit_code == 0, result.output
    assert "S3 buckets - default" in result.output
    assert "bucket-a" in result.output
    assert s3_client.list_buckets.call_count == 1


def test_s3_buckets_json(invoke):
    result = invoke("-o", "json", "s3", "buckets")

    assert result.exit_code == 0, result.output
    assert [b["name"] for b in json.loads(result.output)] == ["bucket-a", "bucket-b"]


def test_profile_option_selects_session(invoke, app_context):
    result = invoke("-p", "prod", "-r", "eu-central-1", "s3", "buckets")

    assert result.exit_code == 0, result.output
    assert list(app_context.sessions) == ["prod"]
    assert app_context.keys.profile == "prod"


def test_aws_error_exits_with_status_1(invoke, s3_client):
    s3_client.list_buckets.side_effect = client_error("AccessDenied", "ListBuckets")

    result = invoke("s3", "buckets")

    assert result.exit_code == 1
    assert "Error: list buckets" in result.output


def test_rm_with_force_invalidates_parent_listing(invoke, app_context, s3_client, store):
    store.set(app_context.get_collector().keys.s3_objects("bucket-a", "logs/"), [], 600)

    result = invoke("s3", "rm", "bucket-a", "logs/app.log", "--force")

    assert result.exit_code == 0, result.output
    s3_client.delete_object.assert_called_once_with(Bucket="bucket-a", Key="logs/app.log")
    assert store.size() == 0


def test_rb_can_be_cancelled(invoke, s3_client):
    result = invoke("s3", "rb", "bucket-a", input="n\n")

    assert result.exit_code == 0
    assert "Cancelled." in result.output
    s3_client.delete_bucket.assert_not_called()


def test_mkdir(invoke, s3_client):
    result = invoke("s3", "mkdir", "bucket-a", "reports", "--prefix", "2024/")

    assert result.exit_code == 0, result.output
    assert "s3://bucket-a/2024/reports/" in result.output
    s3_client.put_object.assert_called_once_with(Bucket="bucket-a", Key="2024/reports/", Body=b"")


def test_resources_list(invoke):
    result = invoke("-o", "json", "resources", "list", "s3")

    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)) == 2


def test_resources_list_rejects_unknown_category(invoke):
    result = invoke("resources", "list", "mainframes")

    assert result.exit_code == 2


def test_resources_categories(invoke):
    result = invoke("resources", "categories")

    assert result.exit_code == 0
    assert "security-groups" in result.output


def test_profiles_list(invoke, monkeypatch):
    monkeypatch.setattr("awstui.commands.profiles.list_profiles", lambda: ["default", "prod"])

    result = invoke("-o", "json", "-p", "prod", "profiles", "list")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {"profile": "default", "active": False},
        {"profile": "prod", "active": True},
    ]


def test_config_command_reads_yaml(invoke, isolated_env):
    path = isolated_env / "custom.yaml"
    path.write_text(
        "default_profile: staging\n"
        "default_region: eu-west-3\n"
        "cache:\n"
        "  sweep_interval: 60\n"
        "  ttls:\n"
        "    s3-buckets: 30\n"
    )

    result = invoke("-o", "json", "-c", str(path), "config")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "profile": "staging",
        "region": "eu-west-3",
        "sweep_interval": 60.0,
        "ttl_overrides": {"s3-buckets": 30},
        "config_file": str(path),
    }


def test_invalid_config_exits_with_status_1(invoke, isolated_env):
    path = isolated_env / "bad.yaml"
    path.write_text("cache:\n  sweep_interval: -5\n")

    result = invoke("-c", str(path), "config")

    assert result.exit_code == 1
    assert "cache.sweep_interval" in result.output


def test_unparsable_config_exits_with_status_1(invoke, isolated_env):
    path = isolated_env / "broken.yaml"
    path.write_text("- not\n- a mapping\n")

    result = invoke("-c", str(path), "config")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_ttls_given_as_a_list_exits_with_status_1(invoke, isolated_env):
    path = isolated_env / "list-ttls.yaml"
    path.write_text("cache:\n  ttls:\n    - s3-buckets\n")

    result = invoke("-c", str(path), "config")

    assert result.exit_code == 1
    assert "Error: 'cache.ttls' must be a mapping" in result.output


def test_unknown_profile_exits_with_status_1(isolated_env, store):
    def session_factory(profile_name=None, region_name=None):
        raise ProfileNotFound(profile=profile_name)

    ctx = AppContext(cache=store, session_factory=session_factory)

    result = CliRunner().invoke(cli, ["-p", "missing", "s3", "buckets"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: open session for profile missing" in result.output
