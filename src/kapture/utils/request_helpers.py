"""
Helpers for reading API Gateway proxy events (REST v1 and HTTP API v2 payloads).
"""
import base64
import json
from typing import Any, Dict, Optional


def get_header(event: Dict[str, Any], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def get_query_params(event: Dict[str, Any]) -> Dict[str, str]:
    return event.get('queryStringParameters') or {}


def get_method(event: Dict[str, Any]) -> str:
    method = event.get('httpMethod')
    if not method:
        method = ((event.get('requestContext') or {}).get('http') or {}).get('method', 'GET')
    return method.upper()


def get_path(event: Dict[str, Any]) -> str:
    path = event.get('path') or event.get('rawPath') or '/'
    if len(path) > 1:
        path = path.rstrip('/')
    return path


def get_body(event: Dict[str, Any]) -> str:
    """Return the request body as text, undoing API Gateway's base64 wrapping."""
    body = event.get('body') or ''
    if event.get('isBase64Encoded') and body:
        body = base64.b64decode(body).decode('utf-8')
    return body


def parse_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Parse the request body as a JSON object.

    Raises:
        json.JSONDecodeError: body is not valid JSON
        ValueError: body is JSON but not an object
    """
    body = json.loads(get_body(event) or '{}')
    if not isinstance(body, dict):
        raise ValueError('Request body must be a JSON object')
    return body


def get_cookies(event: Dict[str, Any]) -> Dict[str, str]:
    """Collect cookies from the Cookie header and the v2 ``cookies`` list."""
    raw = []
    header = get_header(event, 'Cookie')
    if header:
        raw.extend(header.split(';'))
    raw.extend(event.get('cookies') or [])

    cookies = {}
    for item in raw:
        name, sep, value = item.strip().partition('=')
        if sep and name and name not in cookies:
            cookies[name] = value
    return cookies
