"""
Lambda handler for deleting images.
"""
import logging
from typing import Dict, Any, Optional

import requests

from kapture.config import Settings, load_settings
from kapture.utils.auth import run_authenticated
from kapture.utils.media_client import MediaApiClient, MediaApiError
from kapture.utils.request_helpers import get_query_params
from kapture.utils.validators import validate_public_id
from kapture.utils.response_helpers import create_success_response, create_error_response

logger = logging.getLogger(__name__)


def delete_image(event: Dict[str, Any], context: Any, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Lambda handler for deleting an image.

    Query parameter:
    - public_id: The public id of the image to delete

    Returns:
        API Gateway response with the media API's destroy result
    """
    try:
        settings = settings or load_settings()

        public_id = get_query_params(event).get('public_id')

        is_valid, error_msg = validate_public_id(public_id)
        if not is_valid:
            return create_error_response(400, error_msg, 'INVALID_PUBLIC_ID')

        result = MediaApiClient(settings).destroy(public_id)

        return create_success_response(
            data=result,
            message='Image deleted successfully'
        )

    except MediaApiError as e:
        return create_error_response(e.status_code, e.message, 'MEDIA_API_ERROR', e.details)
    except requests.RequestException as e:
        logger.error("Media API unreachable during delete: %s", e)
        return create_error_response(502, 'Failed to delete image.', 'MEDIA_API_UNREACHABLE', str(e))
    except Exception as e:
        logger.exception("Error deleting image")
        return create_error_response(500, 'Failed to delete image.', 'INTERNAL_ERROR', str(e))


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Main Lambda handler entry point."""
    return run_authenticated(delete_image, event, context)
