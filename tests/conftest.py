"""
Pytest fixtures and configuration for testing.
"""
import pytest
import json
import os
from unittest.mock import MagicMock

from kapture.config import Settings

# Set environment variables for testing
os.environ['LOCALSTACK'] = 'false'  # Use moto instead of LocalStack for tests
os.environ['AWS_REGION'] = 'us-east-1'
os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'


@pytest.fixture
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'


@pytest.fixture
def settings():
    """Settings for a test media account with the password gate enabled."""
    return Settings(
        cloud_name='demo-cloud',
        api_key='123456',
        api_secret='shhh',
        auth_password='open sesame',
        timeout=5
    )


@pytest.fixture
def open_settings(settings):
    """Settings with the password gate disabled."""
    return Settings(
        cloud_name=settings.cloud_name,
        api_key=settings.api_key,
        api_secret=settings.api_secret,
        auth_password='',
        timeout=settings.timeout
    )


@pytest.fixture
def auth_cookie():
    """Cookie header value matching the settings fixture password."""
    return 'theme=dark; password=open%20sesame'


def make_response(status_code=200, payload=None, content=b'', headers=None):
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = payload if payload is not None else {}
    response.text = json.dumps(payload) if payload is not None else ''
    response.content = content
    response.iter_content.return_value = [content] if content else []
    response.headers = headers or {}
    return response


@pytest.fixture
def response_factory():
    """Factory for fake requests responses."""
    return make_response


@pytest.fixture
def sample_image_base64():
    """Return a sample base64 encoded image (1x1 red pixel PNG)."""
    # This is a minimal valid PNG file (1x1 red pixel)
    return "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="


@pytest.fixture
def sample_upload_event(sample_image_base64):
    """Return a sample upload event."""
    return {
        'httpMethod': 'POST',
        'path': '/api/upload',
        'body': json.dumps({
            'image_data': sample_image_base64,
            'filename': 'test_image.png',
            'folder': 'holidays',
            'tags': 'sunset, nature'
        })
    }


@pytest.fixture
def sample_list_event():
    """Return a sample list event."""
    return {
        'httpMethod': 'GET',
        'path': '/api/images',
        'queryStringParameters': {
            'folder': 'holidays'
        }
    }


@pytest.fixture
def sample_transform_event():
    """Return a sample transform event."""
    return {
        'httpMethod': 'GET',
        'path': '/api/transform',
        'queryStringParameters': {
            'public_id': 'holidays/beach',
            'transformations': json.dumps({
                'c': {'crop_mode': 'fill', 'width': 200, 'height': 100},
                'sepia': {}
            })
        }
    }


@pytest.fixture
def sample_delete_event():
    """Return a sample delete event."""
    return {
        'httpMethod': 'DELETE',
        'path': '/api/delete-image',
        'queryStringParameters': {
            'public_id': 'holidays/beach'
        }
    }


@pytest.fixture
def upload_result():
    """A trimmed-down upload result as returned by the media API."""
    return {
        'public_id': 'holidays/abc123',
        'secure_url': 'https://res.cloudinary.com/demo-cloud/image/upload/v1/holidays/abc123.png',
        'format': 'png',
        'bytes': 68
    }
