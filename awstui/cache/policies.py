"""
Cache policies and TTLs for AWS resources.
"""

from typing import Dict, Optional

RESOURCE_TTLS_SECONDS = {
    "identity": 3600,
    "iam-users": 300,
    "iam-user-details": 120,
    "iam-access-keys": 120,
    "s3-buckets": 600,
    "s3-objects-long": 120,
    "s3-objects-short": 30,
    "vpc": 600,
    "lambda": 300,
    "ec2": 600,
    "rds": 600,
    "cloudwatch": 300,
    "cloudfront": 600,
    "elasticache": 600,
    "msk": 600,
    "sqs": 600,
    "secretsmanager": 600,
    "route53": 600,
    "acm": 600,
    "sns": 600,
    "kms": 600,
    "dms": 600,
    "ecs": 600,
    "billing": 1800,
    "securityhub": 600,
    "waf": 600,
    "ecr": 600,
    "efs": 600,
    "backup": 600,
    "dynamodb": 600,
    "transfer": 600,
}

# Listings above this many objects are cached longer
S3_LARGE_LISTING_THRESHOLD = 100


def get_ttl(resource: str, default: int = 600, overrides: Optional[Dict[str, int]] = None) -> int:
    if overrides and resource in overrides:
        return int(overrides[resource])
    return RESOURCE_TTLS_SECONDS.get(resource, default)


def s3_objects_ttl(count: int, overrides: Optional[Dict[str, int]] = None) -> int:
    """TTL for an S3 object listing, based on how many objects it holds"""
    if count > S3_LARGE_LISTING_THRESHOLD:
        return get_ttl("s3-objects-long", overrides=overrides)
    return get_ttl("s3-objects-short", overrides=overrides)
