"""Fakes for boto3 sessions, clients and the cache clock."""

from __future__ import annotations

from unittest.mock import MagicMock

from botocore.exceptions import ClientError


class FakeClock:
    """Manually advanced clock for deterministic TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_session(region: str = "eu-west-1", **clients) -> MagicMock:
    """boto3.Session stand-in whose client(service) returns the given mocks."""
    session = MagicMock()
    session.region_name = region
    session.client.side_effect = lambda service, **kwargs: clients[service]
    return session


def paginated(client: MagicMock, *pages: dict) -> MagicMock:
    """Make every paginator of ``client`` yield ``pages``."""
    client.get_paginator.return_value.paginate.return_value = list(pages)
    return client


def client_error(code: str = "AccessDenied", operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)
