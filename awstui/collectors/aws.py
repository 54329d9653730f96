"""
AWS resource collector backed by the in-process cache.

Every read goes through the same pipeline: look the key up in the cache,
call AWS on a miss, map the response into plain display rows, store them
with the category TTL. Mutations call AWS first and invalidate the keys
they affect only once the call succeeded.

Usage:
    from awstui.cache import CacheStore, KeyBuilder
    from awstui.collectors.aws import ResourceCollector

    collector = ResourceCollector(boto3.Session(profile_name='dev'), CacheStore(), KeyBuilder('dev'))
    buckets = collector.list_buckets()
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from awstui.cache.base import CacheBackend
from awstui.cache.keys import KeyBuilder
from awstui.cache.policies import get_ttl, s3_objects_ttl
from awstui.utils.logging_utils import get_logger

logger = get_logger(__name__)


class CollectorError(Exception):
    """Raised when an AWS call made by the collector fails."""

    def __init__(self, context: str, cause: Optional[Exception] = None):
        self.context = context
        self.cause = cause
        message = f"{context}: {cause}" if cause else context
        super().__init__(message)


@dataclass(frozen=True)
class Category:
    """A browsable resource category"""
    label: str
    method: str
    cache_category: str


CATEGORIES = {
    'identity': Category('Caller identity', 'get_identity', 'identity'),
    's3': Category('S3 buckets', 'list_buckets', 's3'),
    'iam': Category('IAM users', 'list_iam_users', 'iam'),
    'ec2': Category('EC2 instances', 'list_ec2_instances', 'ec2'),
    'security-groups': Category('EC2 security groups', 'list_security_groups', 'ec2'),
    'vpc': Category('VPCs', 'list_vpcs', 'vpc'),
    'subnets': Category('VPC subnets', 'list_subnets', 'vpc'),
    'lambda': Category('Lambda functions', 'list_lambda_functions', 'lambda'),
    'rds': Category('RDS instances', 'list_rds_instances', 'rds'),
    'sqs': Category('SQS queues', 'list_sqs_queues', 'sqs'),
    'dynamodb': Category('DynamoDB tables', 'list_dynamodb_tables', 'dynamodb'),
    'ecr': Category('ECR repositories', 'list_ecr_repositories', 'ecr'),
}


@contextmanager
def _aws_errors(context: str):
    try:
        yield
    except (ClientError, BotoCoreError) as e:
        raise CollectorError(context, e) from e


def _name_tag(tags: Optional[List[Dict[str, str]]]) -> str:
    for tag in tags or []:
        if tag.get('Key') == 'Name':
            return tag.get('Value', '')
    return ''


def _paginate(client, operation: str, **kwargs) -> Iterable[dict]:
    return client.get_paginator(operation).paginate(**kwargs)


class ResourceCollector:
    """
    Cached AWS reads and cache-invalidating AWS writes for one profile.

    Args:
        session: boto3 session for the active profile
        cache: Shared cache store (one per process)
        keys: Key builder for the active profile
        ttl_overrides: Per-category TTLs from configuration (optional)
    """

    def __init__(
        self,
        session: boto3.Session,
        cache: CacheBackend,
        keys: KeyBuilder,
        ttl_overrides: Optional[Dict[str, int]] = None,
    ):
        self.session = session
        self.cache = cache
        self.keys = keys
        self.ttl_overrides = ttl_overrides or {}
        self._clients: Dict[str, Any] = {}
        self._clients_lock = threading.Lock()

    # boto3 sessions are not thread-safe, clients are: build each client once
    def _client(self, service: str):
        with self._clients_lock:
            client = self._clients.get(service)
            if client is None:
                client = self.session.client(service)
                self._clients[service] = client
            return client

    def _ttl(self, resource: str) -> int:
        return get_ttl(resource, overrides=self.ttl_overrides)

    def _fetch_with_cache(
        self,
        key: str,
        ttl: Union[int, Callable[[Any], int]],
        fetch_fn: Callable[[], Any],
        expected: type = list,
    ) -> Tuple[Any, str]:
        cached, found = self.cache.get(key)
        if found and isinstance(cached, expected):
            logger.debug("Cache hit: %s", key)
            return cached, "hit"

        logger.debug("Cache miss: %s", key)
        data = fetch_fn()
        self.cache.set(key, data, ttl(data) if callable(ttl) else ttl)
        return data, "miss"

    # =========================================================================
    # CATEGORY HELPERS
    # =========================================================================

    def collect(self, name: str) -> Any:
        """Fetch one category from CATEGORIES by name"""
        category = CATEGORIES.get(name)
        if category is None:
            raise ValueError(f"Unknown resource category: {name}")
        return getattr(self, category.method)()

    def refresh(self, name: Optional[str] = None) -> int:
        """
        Drop cached results so the next read goes to AWS.

        Args:
            name: Category from CATEGORIES; every key of the profile when omitted

        Returns:
            Number of cache entries removed
        """
        if name is None:
            return self.cache.delete_prefix(self.keys.profile_prefix())

        category = CATEGORIES.get(name)
        if category is None:
            raise ValueError(f"Unknown resource category: {name}")
        self.cache.delete(self.keys.category_key(category.cache_category))
        return self.cache.delete_prefix(self.keys.category_prefix(category.cache_category))

    def prefetch(self, names: Iterable[str], max_workers: int = 8) -> Dict[str, Any]:
        """
        Warm several categories concurrently.

        Returns:
            Dict mapping category name to its rows, or to the CollectorError it raised
        """
        names = list(names)
        unknown = [name for name in names if name not in CATEGORIES]
        if unknown:
            raise ValueError(f"Unknown resource categories: {', '.join(unknown)}")

        results: Dict[str, Any] = {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(self.collect, name): name for name in names}
            for future in as_completed(futures):
                name = futures[future]
                try:
                    results[name] = future.result()
                except CollectorError as e:
                    logger.warning("Prefetch of %s failed: %s", name, e)
                    results[name] = e
        return results

    # =========================================================================
    # IDENTITY
    # =========================================================================

    def get_identity(self) -> dict:
        def fetch():
            with _aws_errors("get caller identity"):
                identity = self._client('sts').get_caller_identity()
            alias = None
            try:
                aliases = self._client('iam').list_account_aliases().get('AccountAliases', [])
                alias = aliases[0] if aliases else None
            except (ClientError, BotoCoreError) as e:
                logger.debug("Account alias unavailable: %s", e)
            return {
                'account': identity.get('Account'),
                'arn': identity.get('Arn'),
                'user_id': identity.get('UserId'),
                'alias': alias,
            }

        data, _ = self._fetch_with_cache(self.keys.identity(), self._ttl('identity'), fetch, expected=dict)
        return data

    # =========================================================================
    # S3
    # =========================================================================

    def list_buckets(self) -> List[dict]:
        def fetch():
            with _aws_errors("list buckets"):
                response = self._client('s3').list_buckets()
            return [
                {'name': b['Name'], 'creation_date': b.get('CreationDate')}
                for b in response.get('Buckets', [])
            ]

        data, _ = self._fetch_with_cache(self.keys.s3_buckets(), self._ttl('s3-buckets'), fetch)
        return data

    def list_objects(self, bucket: str, prefix: str = '') -> List[dict]:
        """List one level of a bucket: folders first, then objects"""
        def fetch():
            folders, objects = [], []
            with _aws_errors(f"list objects in {bucket}"):
                for page in _paginate(self._client('s3'), 'list_objects_v2',
                                      Bucket=bucket, Prefix=prefix, Delimiter='/'):
                    for cp in page.get('CommonPrefixes', []):
                        folders.append({'key': cp['Prefix'], 'size': 0,
                                        'last_modified': None, 'is_folder': True})
                    for obj in page.get('Contents', []):
                        if obj['Key'] == prefix:
                            continue
                        objects.append({'key': obj['Key'], 'size': obj.get('Size', 0),
                                        'last_modified': obj.get('LastModified'), 'is_folder': False})
            return folders + objects

        def ttl(rows):
            return s3_objects_ttl(len(rows), overrides=self.ttl_overrides)

        data, _ = self._fetch_with_cache(self.keys.s3_objects(bucket, prefix), ttl, fetch)
        return data

    def create_bucket(self, name: str, region: Optional[str] = None) -> None:
        region = region or self.session.region_name
        kwargs: Dict[str, Any] = {'Bucket': name}
        if region and region != 'us-east-1':
            kwargs['CreateBucketConfiguration'] = {'LocationConstraint': region}
        with _aws_errors(f"create bucket {name}"):
            self._client('s3').create_bucket(**kwargs)
        self.cache.delete(self.keys.s3_buckets())

    def delete_bucket(self, name: str) -> None:
        with _aws_errors(f"delete bucket {name}"):
            self._client('s3').delete_bucket(Bucket=name)
        self.cache.delete(self.keys.s3_buckets())
        self.cache.delete_prefix(self.keys.s3_bucket_prefix(name))

    def create_folder(self, bucket: str, prefix: str, name: str) -> str:
        key = prefix + name
        if not key.endswith('/'):
            key += '/'
        with _aws_errors(f"create folder {key} in {bucket}"):
            self._client('s3').put_object(Bucket=bucket, Key=key, Body=b'')
        self.cache.delete(self.keys.s3_objects(bucket, prefix))
        return key

    def delete_object(self, bucket: str, prefix: str, key: str) -> None:
        """Delete an object; ``prefix`` is the listing it was shown in"""
        with _aws_errors(f"delete object {key} from {bucket}"):
            self._client('s3').delete_object(Bucket=bucket, Key=key)
        self.cache.delete(self.keys.s3_objects(bucket, prefix))

    # =========================================================================
    # IAM
    # =========================================================================

    def list_iam_users(self) -> List[dict]:
        def fetch():
            users = []
            with _aws_errors("list IAM users"):
                for page in _paginate(self._client('iam'), 'list_users'):
                    for u in page.get('Users', []):
                        users.append({
                            'user_name': u['UserName'],
                            'user_id': u.get('UserId'),
                            'arn': u.get('Arn'),
                            'path': u.get('Path'),
                            'create_date': u.get('CreateDate'),
                            'password_last_used': u.get('PasswordLastUsed'),
                        })
            return users

        data, _ = self._fetch_with_cache(self.keys.iam_users(), self._ttl('iam-users'), fetch)
        return data

    def get_iam_user_details(self, user_name: str) -> dict:
        def fetch():
            with _aws_errors(f"get IAM user {user_name}"):
                iam = self._client('iam')
                user = iam.get_user(UserName=user_name)['User']
                keys = iam.list_access_keys(UserName=user_name).get('AccessKeyMetadata', [])
                mfa_devices = iam.list_mfa_devices(UserName=user_name).get('MFADevices', [])
            password_exists = True
            try:
                iam.get_login_profile(UserName=user_name)
            except ClientError as e:
                if e.response.get('Error', {}).get('Code') != 'NoSuchEntity':
                    raise CollectorError(f"get login profile for {user_name}", e) from e
                password_exists = False
            except BotoCoreError as e:
                raise CollectorError(f"get login profile for {user_name}", e) from e

            return {
                'user': {
                    'user_name': user['UserName'],
                    'user_id': user.get('UserId'),
                    'arn': user.get('Arn'),
                    'path': user.get('Path'),
                    'create_date': user.get('CreateDate'),
                    'password_last_used': user.get('PasswordLastUsed'),
                    'password_exists': password_exists,
                    'mfa_enabled': bool(mfa_devices),
                    'access_keys_count': len(keys),
                },
                'access_keys': [
                    {
                        'access_key_id': k['AccessKeyId'],
                        'status': k.get('Status'),
                        'create_date': k.get('CreateDate'),
                    }
                    for k in keys
                ],
            }

        data, _ = self._fetch_with_cache(
            self.keys.iam_user_details(user_name), self._ttl('iam-user-details'), fetch, expected=dict
        )
        return data

    def create_iam_user(self, user_name: str) -> None:
        with _aws_errors(f"create IAM user {user_name}"):
            self._client('iam').create_user(UserName=user_name)
        self.cache.delete(self.keys.iam_users())

    def delete_iam_user(self, user_name: str) -> None:
        with _aws_errors(f"delete IAM user {user_name}"):
            self._client('iam').delete_user(UserName=user_name)
        self.cache.delete(self.keys.iam_users())
        self.cache.delete(self.keys.iam_user_details(user_name))

    def delete_access_key(self, user_name: str, access_key_id: str) -> None:
        with _aws_errors(f"delete access key {access_key_id}"):
            self._client('iam').delete_access_key(UserName=user_name, AccessKeyId=access_key_id)
        self.cache.delete(self.keys.iam_user_details(user_name))

    # =========================================================================
    # EC2 / VPC
    # =========================================================================

    def list_ec2_instances(self) -> List[dict]:
        def fetch():
            instances = []
            with _aws_errors("describe EC2 instances"):
                for page in _paginate(self._client('ec2'), 'describe_instances'):
                    for reservation in page.get('Reservations', []):
                        for i in reservation.get('Instances', []):
                            instances.append({
                                'id': i['InstanceId'],
                                'name': _name_tag(i.get('Tags')),
                                'type': i.get('InstanceType'),
                                'state': i.get('State', {}).get('Name'),
                                'public_ip': i.get('PublicIpAddress', ''),
                                'private_ip': i.get('PrivateIpAddress', ''),
                                'az': i.get('Placement', {}).get('AvailabilityZone'),
                            })
            return instances

        data, _ = self._fetch_with_cache(self.keys.ec2_resources('instances'), self._ttl('ec2'), fetch)
        return data

    def list_security_groups(self) -> List[dict]:
        def fetch():
            groups = []
            with _aws_errors("describe security groups"):
                for page in _paginate(self._client('ec2'), 'describe_security_groups'):
                    for sg in page.get('SecurityGroups', []):
                        groups.append({
                            'id': sg['GroupId'],
                            'name': sg.get('GroupName'),
                            'description': sg.get('Description'),
                            'vpc_id': sg.get('VpcId'),
                        })
            return groups

        data, _ = self._fetch_with_cache(self.keys.ec2_resources('security-groups'), self._ttl('ec2'), fetch)
        return data

    def list_vpcs(self) -> List[dict]:
        def fetch():
            vpcs = []
            with _aws_errors("describe VPCs"):
                for page in _paginate(self._client('ec2'), 'describe_vpcs'):
                    for v in page.get('Vpcs', []):
                        vpcs.append({
                            'id': v['VpcId'],
                            'name': _name_tag(v.get('Tags')),
                            'cidr_block': v.get('CidrBlock'),
                            'state': v.get('State'),
                            'is_default': v.get('IsDefault', False),
                        })
            return vpcs

        data, _ = self._fetch_with_cache(self.keys.vpc_resources('vpcs'), self._ttl('vpc'), fetch)
        return data

    def list_subnets(self) -> List[dict]:
        def fetch():
            subnets = []
            with _aws_errors("describe subnets"):
                for page in _paginate(self._client('ec2'), 'describe_subnets'):
                    for s in page.get('Subnets', []):
                        subnets.append({
                            'id': s['SubnetId'],
                            'name': _name_tag(s.get('Tags')),
                            'vpc_id': s.get('VpcId'),
                            'cidr_block': s.get('CidrBlock'),
                            'az': s.get('AvailabilityZone'),
                            'state': s.get('State'),
                        })
            return subnets

        data, _ = self._fetch_with_cache(self.keys.vpc_resources('subnets'), self._ttl('vpc'), fetch)
        return data

    # =========================================================================
    # LAMBDA / RDS / SQS / DYNAMODB / ECR
    # =========================================================================

    def list_lambda_functions(self) -> List[dict]:
        def fetch():
            functions = []
            with _aws_errors("list Lambda functions"):
                for page in _paginate(self._client('lambda'), 'list_functions'):
                    for f in page.get('Functions', []):
                        functions.append({
                            'name': f['FunctionName'],
                            'runtime': f.get('Runtime', ''),
                            'handler': f.get('Handler', ''),
                            'memory_size': f.get('MemorySize'),
                            'timeout': f.get('Timeout'),
                            'last_modified': f.get('LastModified'),
                        })
            return functions

        data, _ = self._fetch_with_cache(self.keys.lambda_functions(), self._ttl('lambda'), fetch)
        return data

    def list_rds_instances(self) -> List[dict]:
        def fetch():
            instances = []
            with _aws_errors("describe RDS instances"):
                for page in _paginate(self._client('rds'), 'describe_db_instances'):
                    for db in page.get('DBInstances', []):
                        instances.append({
                            'identifier': db['DBInstanceIdentifier'],
                            'engine': db.get('Engine'),
                            'engine_version': db.get('EngineVersion'),
                            'instance_class': db.get('DBInstanceClass'),
                            'status': db.get('DBInstanceStatus'),
                            'az': db.get('AvailabilityZone'),
                        })
            return instances

        data, _ = self._fetch_with_cache(self.keys.rds_resources('instances'), self._ttl('rds'), fetch)
        return data

    def list_sqs_queues(self) -> List[dict]:
        def fetch():
            queues = []
            with _aws_errors("list SQS queues"):
                for page in _paginate(self._client('sqs'), 'list_queues'):
                    for url in page.get('QueueUrls', []):
                        queues.append({'name': url.rsplit('/', 1)[-1], 'url': url})
            return queues

        data, _ = self._fetch_with_cache(self.keys.sqs_resources('queues'), self._ttl('sqs'), fetch)
        return data

    def list_dynamodb_tables(self) -> List[dict]:
        def fetch():
            tables = []
            with _aws_errors("list DynamoDB tables"):
                for page in _paginate(self._client('dynamodb'), 'list_tables'):
                    tables.extend({'name': name} for name in page.get('TableNames', []))
            return tables

        data, _ = self._fetch_with_cache(self.keys.dynamodb_resources('tables'), self._ttl('dynamodb'), fetch)
        return data

    def list_ecr_repositories(self) -> List[dict]:
        def fetch():
            repositories = []
            with _aws_errors("describe ECR repositories"):
                for page in _paginate(self._client('ecr'), 'describe_repositories'):
                    for r in page.get('repositories', []):
                        repositories.append({
                            'name': r['repositoryName'],
                            'uri': r.get('repositoryUri'),
                            'created_at': r.get('createdAt'),
                        })
            return repositories

        data, _ = self._fetch_with_cache(self.keys.ecr_resources('repositories'), self._ttl('ecr'), fetch)
        return data

    def list_ecr_images(self, repository_name: str) -> List[dict]:
        def fetch():
            images = []
            with _aws_errors(f"describe images in {repository_name}"):
                for page in _paginate(self._client('ecr'), 'describe_images', repositoryName=repository_name):
                    for img in page.get('imageDetails', []):
                        size = img.get('imageSizeInBytes')
                        images.append({
                            'digest': img['imageDigest'],
                            'tags': img.get('imageTags', []),
                            'pushed_at': img.get('imagePushedAt'),
                            'size_mb': round(size / (1024 * 1024), 2) if size else None,
                        })
            return images

        data, _ = self._fetch_with_cache(self.keys.ecr_images(repository_name), self._ttl('ecr'), fetch)
        return data
