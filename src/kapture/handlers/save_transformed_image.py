"""
Lambda handler for saving a transformed image back to the media library.
"""
import json
import logging
from typing import Dict, Any, Optional

import requests

from kapture.config import Settings, load_settings
from kapture.utils.auth import run_authenticated
from kapture.utils.media_client import MediaApiClient, MediaApiError
from kapture.utils.request_helpers import parse_json_body
from kapture.utils.validators import validate_image_url, validate_folder
from kapture.utils.response_helpers import create_success_response, create_error_response

logger = logging.getLogger(__name__)

SAVED_FILENAME = 'transformed_image.png'


def save_transformed_image(event: Dict[str, Any], context: Any, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Lambda handler for saving a transformed image.

    The image behind imageUrl (typically a transformed delivery URL) is
    downloaded and uploaded again as a new asset.

    Expected request body:
    {
        "imageUrl": "https://res.cloudinary.com/...",
        "folder": "edited"        (optional)
    }

    Returns:
        API Gateway response with the media API's upload result
    """
    try:
        settings = settings or load_settings()

        body = parse_json_body(event)
        image_url = body.get('imageUrl')
        folder = body.get('folder')

        is_valid, error_msg = validate_image_url(image_url)
        if not is_valid:
            return create_error_response(400, error_msg, 'INVALID_IMAGE_URL')

        is_valid, error_msg = validate_folder(folder)
        if not is_valid:
            return create_error_response(400, error_msg, 'INVALID_FOLDER')

        client = MediaApiClient(settings)

        try:
            content, content_type = client.fetch_image(image_url)
        except MediaApiError as e:
            return create_error_response(e.status_code, e.message, 'SOURCE_FETCH_FAILED', e.details)

        result = client.upload((SAVED_FILENAME, content, content_type), folder=folder or None)

        return create_success_response(
            data=result,
            message='Transformed image saved successfully'
        )

    except json.JSONDecodeError as e:
        return create_error_response(400, 'Invalid JSON in request body', 'INVALID_JSON', str(e))
    except ValueError as e:
        return create_error_response(400, str(e), 'INVALID_BODY')
    except MediaApiError as e:
        return create_error_response(e.status_code, e.message, 'MEDIA_API_ERROR', e.details)
    except requests.RequestException as e:
        logger.error("Network failure while saving transformed image: %s", e)
        return create_error_response(502, 'Failed to save transformed image.', 'MEDIA_API_UNREACHABLE', str(e))
    except Exception as e:
        logger.exception("Error saving transformed image")
        return create_error_response(500, 'Failed to save transformed image.', 'INTERNAL_ERROR', str(e))


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Main Lambda handler entry point."""
    return run_authenticated(save_transformed_image, event, context)
