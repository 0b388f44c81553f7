"""
Lambda handler for uploading images to the media API.
"""
import json
import base64
import logging
import mimetypes
from typing import Dict, Any, Optional

import requests

from kapture.config import Settings, load_settings
from kapture.utils.auth import run_authenticated
from kapture.utils.media_client import MediaApiClient, MediaApiError
from kapture.utils.request_helpers import parse_json_body
from kapture.utils.validators import validate_image_file, validate_folder, validate_tags, parse_tags
from kapture.utils.response_helpers import create_success_response, create_error_response

logger = logging.getLogger(__name__)


def upload_image(event: Dict[str, Any], context: Any, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Lambda handler for uploading an image.

    Expected request body:
    {
        "image_data": "base64_encoded_image",
        "filename": "image.jpg",
        "folder": "holidays",          (optional, defaults to worker_uploads)
        "tags": "sunset, nature"       (optional, comma separated)
    }

    Returns:
        API Gateway response with the media API's upload result
    """
    try:
        settings = settings or load_settings()

        # Parse request body
        body = parse_json_body(event)

        image_data = body.get('image_data')
        filename = body.get('filename')
        folder = body.get('folder')
        tags = body.get('tags')

        # Validate image file
        is_valid, error_msg = validate_image_file(image_data, filename)
        if not is_valid:
            return create_error_response(400, error_msg, 'INVALID_IMAGE')

        is_valid, error_msg = validate_folder(folder)
        if not is_valid:
            return create_error_response(400, error_msg, 'INVALID_FOLDER')

        is_valid, error_msg = validate_tags(tags)
        if not is_valid:
            return create_error_response(400, error_msg, 'INVALID_TAGS')

        decoded_image = base64.b64decode(image_data)
        content_type = mimetypes.guess_type(filename)[0] or 'application/octet-stream'

        client = MediaApiClient(settings)
        result = client.upload(
            (filename, decoded_image, content_type),
            folder=folder or None,
            tags=parse_tags(tags)
        )

        return create_success_response(
            data=result,
            message='Image uploaded successfully'
        )

    except json.JSONDecodeError as e:
        return create_error_response(400, 'Invalid JSON in request body', 'INVALID_JSON', str(e))
    except ValueError as e:
        return create_error_response(400, str(e), 'INVALID_BODY')
    except MediaApiError as e:
        return create_error_response(e.status_code, e.message, 'MEDIA_API_ERROR', e.details)
    except requests.RequestException as e:
        logger.error("Media API unreachable during upload: %s", e)
        return create_error_response(502, 'Image upload failed.', 'MEDIA_API_UNREACHABLE', str(e))
    except Exception as e:
        logger.exception("Error uploading image")
        return create_error_response(500, 'Image upload failed.', 'INTERNAL_ERROR', str(e))


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Main Lambda handler entry point."""
    return run_authenticated(upload_image, event, context)
