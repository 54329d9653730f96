"""
Cache key construction.

Keys look like ``<profile>:<category>[:<sub>...]``. The profile segment is
percent-encoded so that no two profiles can share a key. Prefix helpers always
end with the ``:`` separator so that invalidating ``s3:`` never touches a
sibling category such as ``s3x:``.
"""

from urllib.parse import quote


SEPARATOR = ":"


class KeyBuilder:
    """Builds cache keys scoped to one AWS profile"""

    def __init__(self, profile: str):
        self._profile = profile
        self._scope = quote(profile, safe="")

    @property
    def profile(self) -> str:
        return self._profile

    def __repr__(self) -> str:
        return f"KeyBuilder(profile={self._profile!r})"

    def _key(self, *parts: str) -> str:
        return SEPARATOR.join((self._scope,) + parts)

    # =========================================================================
    # PREFIXES
    # =========================================================================

    def profile_prefix(self) -> str:
        """Prefix shared by every key of this profile"""
        return self._scope + SEPARATOR

    def category_key(self, category: str) -> str:
        """Key of a category that is cached as a single entry (e.g. ``billing``)"""
        return self._key(category)

    def category_prefix(self, category: str) -> str:
        """Prefix shared by every key of one category (e.g. ``iam``)"""
        return self._key(category) + SEPARATOR

    def iam_prefix(self) -> str:
        return self.category_prefix("iam")

    def s3_prefix(self) -> str:
        return self.category_prefix("s3")

    def s3_bucket_prefix(self, bucket: str) -> str:
        """Prefix of every object listing cached for one bucket"""
        return self._key("s3", "bucket", bucket) + SEPARATOR

    # =========================================================================
    # IDENTITY / IAM / S3
    # =========================================================================

    def identity(self) -> str:
        return self._key("identity")

    def iam_users(self) -> str:
        return self._key("iam", "users")

    def iam_user_details(self, user_name: str) -> str:
        return self._key("iam", "user", user_name)

    def s3_buckets(self) -> str:
        return self._key("s3", "buckets")

    def s3_objects(self, bucket: str, prefix: str) -> str:
        return self._key("s3", "bucket", bucket, "prefix", prefix)

    # =========================================================================
    # RESOURCE CATEGORIES
    # =========================================================================

    def vpc_resources(self, resource_type: str) -> str:
        return self._key("vpc", resource_type)

    def lambda_functions(self) -> str:
        return self._key("lambda", "functions")

    def ec2_resources(self, resource_type: str) -> str:
        return self._key("ec2", resource_type)

    def rds_resources(self, resource_type: str) -> str:
        return self._key("rds", resource_type)

    def cw_resources(self, resource_type: str) -> str:
        return self._key("cw", resource_type)

    def cf_resources(self, resource_type: str) -> str:
        return self._key("cf", resource_type)

    def elasticache_resources(self, resource_type: str) -> str:
        return self._key("elasticache", resource_type)

    def msk_resources(self, resource_type: str) -> str:
        return self._key("msk", resource_type)

    def sqs_resources(self, resource_type: str) -> str:
        return self._key("sqs", resource_type)

    def sm_resources(self, resource_type: str) -> str:
        return self._key("sm", resource_type)

    def route53_resources(self, resource_type: str) -> str:
        return self._key("route53", resource_type)

    def acm_resources(self, resource_type: str) -> str:
        return self._key("acm", resource_type)

    def sns_resources(self, resource_type: str) -> str:
        return self._key("sns", resource_type)

    def kms_resources(self, resource_type: str) -> str:
        return self._key("kms", resource_type)

    def dms_resources(self, resource_type: str) -> str:
        return self._key("dms", resource_type)

    def ecs_resources(self, resource_type: str) -> str:
        return self._key("ecs", resource_type)

    def billing_resources(self) -> str:
        return self._key("billing")

    def securityhub_resources(self) -> str:
        return self._key("securityhub")

    def waf_resources(self, resource_type: str, scope: str) -> str:
        return self._key("waf", resource_type, scope)

    def ecr_resources(self, resource_type: str) -> str:
        return self._key("ecr", resource_type)

    def ecr_images(self, repository_name: str) -> str:
        return self._key("ecr", "repository", repository_name, "images")

    def efs_resources(self, resource_type: str) -> str:
        return self._key("efs", resource_type)

    def efs_mount_targets(self, file_system_id: str) -> str:
        return self._key("efs", "filesystem", file_system_id, "mount-targets")

    def backup_resources(self, resource_type: str) -> str:
        return self._key("backup", resource_type)

    def dynamodb_resources(self, resource_type: str) -> str:
        return self._key("dynamodb", resource_type)

    def transfer_resources(self, resource_type: str) -> str:
        return self._key("transfer", resource_type)

    def transfer_users(self, server_id: str) -> str:
        return self._key("transfer", "server", server_id, "users")
