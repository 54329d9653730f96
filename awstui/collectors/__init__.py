"""
Collectors fetch AWS resources for display.

- ResourceCollector: cached boto3 reads and invalidating writes for one profile
- list_profiles / select_default_profile: shared-config profile discovery
"""

from .aws import CATEGORIES, Category, CollectorError, ResourceCollector
from .profiles import list_profiles, select_default_profile

__all__ = [
    "CATEGORIES",
    "Category",
    "CollectorError",
    "ResourceCollector",
    "list_profiles",
    "select_default_profile",
]
