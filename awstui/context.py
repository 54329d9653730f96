"""
Application context shared by every aws-tui command.

One CacheStore and one ExpirySweeper are created per process. Switching
profile replaces the KeyBuilder and the boto3 session; entries cached under
the previous profile are left to expire.
"""

from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError

from awstui.cache import CacheStore, ExpirySweeper, KeyBuilder
from awstui.collectors.aws import CollectorError, ResourceCollector
from awstui.collectors.profiles import list_profiles, select_default_profile
from awstui.config.cli_config import DEFAULT_REGION, get_cache_settings
from awstui.utils.logging_utils import get_logger

logger = get_logger(__name__)


class AppContext:
    """Context object passed to all commands"""

    def __init__(self, cache: Optional[CacheStore] = None, session_factory=boto3.Session):
        self.config: Dict[str, Any] = {}
        self.profile: Optional[str] = None
        self.region: Optional[str] = None
        self.output_format = 'table'
        self.verbose = False
        self.cache = cache if cache is not None else CacheStore()
        self.sweeper: Optional[ExpirySweeper] = None
        self.keys: Optional[KeyBuilder] = None
        self._session_factory = session_factory
        self._collector: Optional[ResourceCollector] = None
        self._default_profile: Optional[str] = None

    @property
    def cache_settings(self) -> Dict[str, Any]:
        return get_cache_settings(self.config or {})

    @property
    def active_profile(self) -> str:
        if self.profile:
            return self.profile
        if self.config.get('default_profile'):
            return self.config['default_profile']
        # shared config files are only read once per process
        if self._default_profile is None:
            self._default_profile = select_default_profile(list_profiles())
        return self._default_profile

    @property
    def active_region(self) -> str:
        return self.region or self.config.get('default_region') or DEFAULT_REGION

    def start_sweeper(self) -> ExpirySweeper:
        """Start the background expiry sweeper (once per process)"""
        if self.sweeper is None:
            self.sweeper = ExpirySweeper(self.cache, self.cache_settings['sweep_interval'])
        self.sweeper.start()
        return self.sweeper

    def use_profile(self, profile: str) -> KeyBuilder:
        """
        Make ``profile`` the active identity.

        A fresh KeyBuilder is built every time; the old one is never mutated,
        so keys of the previous profile can't be returned for the new one.
        """
        if self.keys is not None and self.keys.profile != profile:
            logger.debug("Switching profile %s -> %s", self.keys.profile, profile)
        self.profile = profile
        self.keys = KeyBuilder(profile)
        self._collector = None
        return self.keys

    def get_aws_session(self, profile: Optional[str] = None, region: Optional[str] = None):
        """Get boto3 session with specified or configured profile/region"""
        return self._session_factory(
            profile_name=profile or self.active_profile,
            region_name=region or self.active_region,
        )

    def get_collector(self) -> ResourceCollector:
        """Collector for the active profile, sharing the process-wide cache"""
        if self.keys is None or self.keys.profile != self.active_profile:
            self.use_profile(self.active_profile)
        if self._collector is None:
            try:
                session = self.get_aws_session()
            except BotoCoreError as e:
                raise CollectorError(f"open session for profile {self.active_profile}", e) from e
            self._collector = ResourceCollector(
                session,
                self.cache,
                self.keys,
                ttl_overrides=self.cache_settings['ttls'],
            )
        return self._collector

    def close(self) -> None:
        if self.sweeper is not None:
            self.sweeper.stop(timeout=1.0)
