"""
Lambda handler for listing images stored with the media API.
"""
import logging
from typing import Dict, Any, Optional

import requests

from kapture.config import Settings, load_settings
from kapture.utils.auth import run_authenticated
from kapture.utils.media_client import MediaApiClient, MediaApiError
from kapture.utils.request_helpers import get_query_params
from kapture.utils.validators import validate_folder
from kapture.utils.response_helpers import create_success_response, create_error_response

logger = logging.getLogger(__name__)


def list_images(event: Dict[str, Any], context: Any, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Lambda handler for listing images.

    Supports the following query parameters:
    - tag: Only images carrying this tag (takes precedence over folder)
    - folder: Only images under this folder

    Returns:
        API Gateway response with a list of {public_id, secure_url}
    """
    try:
        settings = settings or load_settings()

        params = get_query_params(event)
        folder = params.get('folder')
        tag = params.get('tag')

        is_valid, error_msg = validate_folder(folder)
        if not is_valid:
            return create_error_response(400, error_msg, 'INVALID_FOLDER')

        client = MediaApiClient(settings)
        images = client.list_images(folder=folder, tag=tag)

        return create_success_response(data=images)

    except MediaApiError as e:
        return create_error_response(e.status_code, e.message, 'MEDIA_API_ERROR', e.details)
    except requests.RequestException as e:
        logger.error("Media API unreachable while listing images: %s", e)
        return create_error_response(502, 'Failed to fetch images.', 'MEDIA_API_UNREACHABLE', str(e))
    except Exception as e:
        logger.exception("Error listing images")
        return create_error_response(500, 'Failed to fetch images.', 'INTERNAL_ERROR', str(e))


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Main Lambda handler entry point."""
    return run_authenticated(list_images, event, context)
