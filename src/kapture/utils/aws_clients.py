"""
AWS Client Factory for LocalStack and Production environments.
"""
import os
import boto3
from kapture.config import LOCALSTACK_ENDPOINT, AWS_REGION


def is_local_environment():
    """Check if running in local development environment."""
    return os.environ.get('AWS_SAM_LOCAL') == 'true' or \
           os.environ.get('LOCALSTACK', 'true').lower() == 'true'


def get_ssm_client():
    """
    Get SSM client configured for LocalStack or AWS.

    Credentials are read at call time so tests and deploy scripts can
    override them through the environment.

    Returns:
        boto3.client: SSM client instance
    """
    region = os.environ.get('AWS_REGION', AWS_REGION)
    if is_local_environment():
        return boto3.client(
            'ssm',
            endpoint_url=os.environ.get('LOCALSTACK_ENDPOINT', LOCALSTACK_ENDPOINT),
            aws_access_key_id=os.environ.get('AWS_ACCESS_KEY_ID'),
            aws_secret_access_key=os.environ.get('AWS_SECRET_ACCESS_KEY'),
            region_name=region
        )
    return boto3.client('ssm', region_name=region)
