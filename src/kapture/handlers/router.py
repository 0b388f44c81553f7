"""
Single Lambda entry point that gates every request and dispatches by route.

Used behind an API Gateway ``{proxy+}`` resource; the per-endpoint modules
keep their own ``lambda_handler`` for one-function-per-route deployments.
"""
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from kapture.config import Settings, configure_logging, load_settings
from kapture.handlers.delete_image import delete_image
from kapture.handlers.list_images import list_images
from kapture.handlers.save_transformed_image import save_transformed_image
from kapture.handlers.transform_image import transform_image
from kapture.handlers.upload_image import upload_image
from kapture.utils.auth import handle_login, is_authenticated, login_page_response
from kapture.utils.request_helpers import get_method, get_path
from kapture.utils.response_helpers import create_error_response, create_success_response

logger = logging.getLogger(__name__)

RouteHandler = Callable[[Dict[str, Any], Any, Settings], Dict[str, Any]]

ROUTES: Dict[Tuple[str, str], RouteHandler] = {
    ('/api/upload', 'POST'): upload_image,
    ('/api/images', 'GET'): list_images,
    ('/api/transform', 'GET'): transform_image,
    ('/api/save-transformed-image', 'POST'): save_transformed_image,
    ('/api/delete-image', 'DELETE'): delete_image,
}


def route(event: Dict[str, Any], context: Any, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Apply the password gate and dispatch the request.

    - POST / is the login form submission
    - any other request without a valid cookie gets the login page
    - known API routes go to their handler, everything else is a 404
    """
    try:
        settings = settings or load_settings()
    except Exception as e:
        logger.exception("Could not load settings")
        return create_error_response(500, 'Internal Server Error', 'INTERNAL_ERROR', str(e))

    method = get_method(event)
    path = get_path(event)

    if not settings.auth_enabled:
        logger.warning("AUTH_PASSWORD is not set; requests are not protected")
    else:
        if method == 'POST' and path == '/':
            return handle_login(event, settings)
        if not is_authenticated(event, settings):
            return login_page_response()

    handler = ROUTES.get((path, method))
    if handler is not None:
        return handler(event, context, settings)

    if path == '/' and method == 'GET':
        return create_success_response(data={'authenticated': True})

    return create_error_response(404, f'No route for {method} {path}', 'NOT_FOUND')


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Main Lambda handler entry point."""
    configure_logging()
    return route(event, context)
