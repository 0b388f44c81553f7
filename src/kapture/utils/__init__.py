# Utils Package
from .transformations import build_transformation, build_delivery_url
from .media_client import MediaApiClient, MediaApiError
from .response_helpers import create_response, create_error_response, create_success_response
