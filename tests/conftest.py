"""Shared fixtures for aws-tui tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from aws_fakes import FakeClock, make_session
from awstui.cache import CacheStore, KeyBuilder
from awstui.collectors.aws import ResourceCollector
from awstui.context import AppContext


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    return CacheStore(clock=clock)


@pytest.fixture()
def keys():
    return KeyBuilder("dev")


@pytest.fixture()
def s3_client():
    client = MagicMock()
    client.list_buckets.return_value = {
        "Buckets": [{"Name": "bucket-a"}, {"Name": "bucket-b"}],
    }
    return client


@pytest.fixture()
def collector(store, keys, s3_client):
    return ResourceCollector(make_session(s3=s3_client), store, keys)


@pytest.fixture()
def isolated_env(tmp_path, monkeypatch):
    """No user config, no AWS env vars leaking into CLI tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for var in ("AWS_PROFILE", "AWS_DEFAULT_PROFILE", "AWS_REGION", "AWS_TUI_CONFIG",
                "AWS_CONFIG_FILE", "AWS_SHARED_CREDENTIALS_FILE"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture()
def app_context(store, s3_client):
    """AppContext whose sessions all hand out the same mocked S3 client."""
    sessions = {}

    def session_factory(profile_name=None, region_name=None):
        if profile_name not in sessions:
            sessions[profile_name] = make_session(region=region_name, s3=s3_client)
        return sessions[profile_name]

    ctx = AppContext(cache=store, session_factory=session_factory)
    ctx.sessions = sessions
    return ctx
