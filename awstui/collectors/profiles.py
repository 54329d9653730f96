"""AWS profile discovery from ~/.aws/config and ~/.aws/credentials"""

import os
from typing import List, Mapping, Optional

import botocore.session

DEFAULT_PROFILE = 'default'


def list_profiles(session: Optional[botocore.session.Session] = None) -> List[str]:
    """
    List the profile names botocore knows about.

    Args:
        session: botocore session to read the shared config from (optional)

    Returns:
        Sorted profile names, or ['default'] when none are configured
    """
    session = session or botocore.session.Session()
    profiles = sorted(set(session.available_profiles))
    return profiles or [DEFAULT_PROFILE]


def select_default_profile(profiles: List[str], env: Optional[Mapping[str, str]] = None) -> str:
    """
    Pick the profile to start with.

    Order: AWS_PROFILE (if it names a known profile), then 'default',
    then the first profile in the list.
    """
    env = os.environ if env is None else env

    env_profile = env.get('AWS_PROFILE')
    if env_profile and env_profile in profiles:
        return env_profile

    if DEFAULT_PROFILE in profiles:
        return DEFAULT_PROFILE

    if profiles:
        return profiles[0]

    return DEFAULT_PROFILE
