"""
Lambda handler for building transformed image URLs.
"""
import json
import logging
from typing import Dict, Any, Optional

from kapture.config import Settings, load_settings
from kapture.utils.auth import run_authenticated
from kapture.utils.media_client import MediaApiClient
from kapture.utils.request_helpers import get_query_params
from kapture.utils.transformations import build_transformation
from kapture.utils.validators import validate_public_id
from kapture.utils.response_helpers import create_success_response, create_error_response

logger = logging.getLogger(__name__)


def transform_image(event: Dict[str, Any], context: Any, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Lambda handler for generating a transformed image URL.

    No call is made to the media API; the URL is assembled locally.

    Query parameters:
    - public_id: The image to transform (required)
    - transformations: JSON object of effect name -> parameters, e.g.
      {"c": {"crop_mode": "fill", "width": 200}, "sepia": {}}

    Returns:
        API Gateway response with transformed_url and the transformation string
    """
    try:
        settings = settings or load_settings()

        params = get_query_params(event)
        public_id = params.get('public_id')

        is_valid, error_msg = validate_public_id(public_id)
        if not is_valid:
            return create_error_response(400, error_msg, 'INVALID_PUBLIC_ID')

        effects = {}
        transformations_json = params.get('transformations')
        if transformations_json:
            try:
                effects = json.loads(transformations_json)
            except json.JSONDecodeError as e:
                return create_error_response(400, 'Invalid transformations JSON.', 'INVALID_JSON', str(e))

        transformation = build_transformation(effects)
        transformed_url = MediaApiClient(settings).build_url(public_id, transformation)

        return create_success_response(data={
            'transformed_url': transformed_url,
            'transformation': transformation
        })

    except Exception as e:
        logger.exception("Error generating transformed image URL")
        return create_error_response(500, 'Failed to generate transformed image URL.', 'INTERNAL_ERROR', str(e))


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Main Lambda handler entry point."""
    return run_authenticated(transform_image, event, context)
