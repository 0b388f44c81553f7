"""
Configuration settings for the Kapture image API.
"""
import os
import logging
from dataclasses import dataclass
from typing import Optional

# AWS/LocalStack Configuration
AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')
LOCALSTACK_ENDPOINT = os.environ.get('LOCALSTACK_ENDPOINT', 'http://localhost:4566')

# Media API endpoints
CLOUDINARY_API_BASE = 'https://api.cloudinary.com/v1_1'
CLOUDINARY_DELIVERY_BASE = 'https://res.cloudinary.com'

# Upload Configuration
DEFAULT_UPLOAD_FOLDER = 'worker_uploads'
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
MAX_IMAGE_SIZE_MB = 10
MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024
MAX_FOLDER_LENGTH = 255
MAX_PUBLIC_ID_LENGTH = 255
MAX_TAGS = 20
MAX_TAG_LENGTH = 50

# Listing
MAX_RESULTS = 50
EXCLUDED_PUBLIC_ID_MARKERS = ('cld-sample', 'samples/')

# Auth
AUTH_COOKIE_NAME = 'password'

DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class Settings:
    """Runtime settings handed to handlers and the media API client."""

    cloud_name: str = ''
    api_key: str = ''
    api_secret: str = ''
    auth_password: str = ''
    api_base: str = CLOUDINARY_API_BASE
    delivery_base: str = CLOUDINARY_DELIVERY_BASE
    default_folder: str = DEFAULT_UPLOAD_FOLDER
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def auth_enabled(self) -> bool:
        return bool(self.auth_password)


def _get_parameter(name: str) -> str:
    # aws_clients imports this module
    from kapture.utils.aws_clients import get_ssm_client

    response = get_ssm_client().get_parameter(Name=name, WithDecryption=True)
    return response['Parameter']['Value']


def _resolve_secret(value_var: str, parameter_var: str) -> str:
    """Return the secret from SSM when a parameter name is configured, else from the env."""
    parameter_name = os.environ.get(parameter_var)
    if parameter_name:
        return _get_parameter(parameter_name)
    return os.environ.get(value_var, '')


def load_settings() -> Settings:
    """
    Build Settings from the current environment.

    Secrets named by CLOUDINARY_API_SECRET_PARAMETER or AUTH_PASSWORD_PARAMETER
    are fetched from SSM Parameter Store and take precedence over the plain
    environment values.

    Returns:
        Settings instance
    """
    timeout_raw = os.environ.get('MEDIA_API_TIMEOUT')
    timeout: Optional[float] = None
    if timeout_raw:
        try:
            timeout = float(timeout_raw)
        except ValueError:
            logging.getLogger(__name__).warning(
                "Ignoring invalid MEDIA_API_TIMEOUT value %r", timeout_raw
            )

    return Settings(
        cloud_name=os.environ.get('CLOUDINARY_CLOUD_NAME', ''),
        api_key=os.environ.get('CLOUDINARY_API_KEY', ''),
        api_secret=_resolve_secret('CLOUDINARY_API_SECRET', 'CLOUDINARY_API_SECRET_PARAMETER'),
        auth_password=_resolve_secret('AUTH_PASSWORD', 'AUTH_PASSWORD_PARAMETER'),
        api_base=os.environ.get('CLOUDINARY_API_BASE', CLOUDINARY_API_BASE).rstrip('/'),
        delivery_base=os.environ.get('CLOUDINARY_DELIVERY_BASE', CLOUDINARY_DELIVERY_BASE).rstrip('/'),
        default_folder=os.environ.get('DEFAULT_UPLOAD_FOLDER') or DEFAULT_UPLOAD_FOLDER,
        timeout=timeout if timeout is not None else DEFAULT_TIMEOUT_SECONDS,
    )


def configure_logging() -> None:
    """Apply LOG_LEVEL to the root logger (the Lambda runtime installs the handler)."""
    level_name = os.environ.get('LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level)
    root.setLevel(level)
