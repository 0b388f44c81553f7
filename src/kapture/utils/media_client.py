"""
Client for the Cloudinary upload and admin REST APIs.
"""
import hashlib
import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import quote

import requests

from kapture.config import Settings, MAX_RESULTS, EXCLUDED_PUBLIC_ID_MARKERS, MAX_IMAGE_SIZE_BYTES
from kapture.utils.transformations import build_delivery_url

logger = logging.getLogger(__name__)

FileInput = Union[bytes, Tuple[str, bytes], Tuple[str, bytes, str]]


class MediaApiError(Exception):
    """Raised when the media API (or an image source) answers with an error status."""

    def __init__(self, status_code: int, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


def generate_signature(params: Dict[str, Any], api_secret: str) -> str:
    """
    Sign request parameters the way the media API expects.

    Parameters are sorted by name, empty values are dropped, lists are
    joined with commas, and the SHA-1 hex digest of
    ``k1=v1&k2=v2<api_secret>`` is returned.
    """
    pairs = []
    for key in sorted(params):
        value = params[key]
        if value is None or value == '':
            continue
        if isinstance(value, (list, tuple)):
            value = ','.join(str(item) for item in value)
        pairs.append(f"{key}={value}")
    to_sign = '&'.join(pairs) + api_secret
    return hashlib.sha1(to_sign.encode('utf-8')).hexdigest()


def _error_details(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or 'Unknown error'
    if isinstance(payload, dict):
        error = payload.get('error')
        if isinstance(error, dict) and error.get('message'):
            return str(error['message'])
    return 'Unknown error'


class MediaApiClient:
    """
    Thin wrapper over the media API.

    All credentials come from the Settings instance given at construction.
    Non-2xx answers raise MediaApiError carrying the downstream status code;
    network failures propagate as requests.RequestException.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def _endpoint(self, *parts: str) -> str:
        return '/'.join([self.settings.api_base, self.settings.cloud_name, *parts])

    def _signed_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = dict(params, timestamp=int(time.time()))
        signed = {k: v for k, v in params.items() if v is not None and v != ''}
        signed['signature'] = generate_signature(params, self.settings.api_secret)
        signed['api_key'] = self.settings.api_key
        return signed

    def _json_or_raise(self, response: requests.Response, failure_message: str) -> Any:
        if not response.ok:
            details = _error_details(response)
            logger.error("%s (status %s): %s", failure_message, response.status_code, details)
            raise MediaApiError(response.status_code, failure_message, details)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            logger.error("%s (status %s): response is not a JSON object", failure_message, response.status_code)
            raise MediaApiError(502, failure_message, response.text or 'Malformed response')
        return payload

    def upload(
        self,
        file: FileInput,
        folder: Optional[str] = None,
        tags: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Upload an image.

        Args:
            file: Raw bytes or a requests style (filename, bytes[, content_type]) tuple
            folder: Target folder (defaults to settings.default_folder)
            tags: Optional list of tags

        Returns:
            The media API's upload result
        """
        params = {'folder': folder or self.settings.default_folder}
        if tags:
            params['tags'] = ','.join(tags)
        data = self._signed_params(params)

        if isinstance(file, bytes):
            file = ('upload', file)

        response = self.session.post(
            self._endpoint('image', 'upload'),
            data=data,
            files={'file': file},
            timeout=self.settings.timeout
        )
        result = self._json_or_raise(response, 'Cloudinary upload failed.')
        logger.info("Uploaded image %s to folder %s", result.get('public_id'), params['folder'])
        return result

    def list_images(self, folder: Optional[str] = None, tag: Optional[str] = None) -> List[Dict[str, str]]:
        """
        List uploaded images, optionally by tag or folder (tag wins).

        Sample assets shipped with new accounts are filtered out.

        Returns:
            List of {'public_id', 'secure_url'} dictionaries
        """
        params: Dict[str, Any] = {'max_results': MAX_RESULTS}
        if tag:
            url = self._endpoint('resources', 'image', 'tags', quote(tag, safe=''))
        else:
            url = self._endpoint('resources', 'image', 'upload')
            if folder:
                params['prefix'] = f"{folder.rstrip('/')}/"

        response = self.session.get(
            url,
            params=params,
            auth=(self.settings.api_key, self.settings.api_secret),
            timeout=self.settings.timeout
        )
        result = self._json_or_raise(response, 'Failed to fetch images from Cloudinary.')

        images = [
            {'public_id': resource.get('public_id'), 'secure_url': resource.get('secure_url')}
            for resource in result.get('resources', [])
        ]
        return [
            image for image in images
            if image['public_id']
            and not any(marker in image['public_id'] for marker in EXCLUDED_PUBLIC_ID_MARKERS)
        ]

    def destroy(self, public_id: str) -> Dict[str, Any]:
        """Delete an image by public id and return the media API's result."""
        data = self._signed_params({'public_id': public_id})
        response = self.session.post(
            self._endpoint('image', 'destroy'),
            data=data,
            timeout=self.settings.timeout
        )
        result = self._json_or_raise(response, 'Cloudinary delete failed.')
        logger.info("Destroyed image %s: %s", public_id, result.get('result'))
        return result

    def fetch_image(self, image_url: str) -> Tuple[bytes, str]:
        """
        Download an image so it can be re-uploaded.

        The body is streamed and the download is abandoned with a 413 once it
        grows past MAX_IMAGE_SIZE_BYTES.

        Returns:
            Tuple of (content, content_type)
        """
        message = f"Failed to fetch image from URL: {image_url}"
        response = self.session.get(image_url, timeout=self.settings.timeout, stream=True)
        try:
            if not response.ok:
                logger.error("%s (status %s)", message, response.status_code)
                raise MediaApiError(response.status_code, message, f"Source answered with status {response.status_code}")

            too_large = f"Source image exceeds maximum allowed size of {MAX_IMAGE_SIZE_BYTES // (1024*1024)}MB"
            declared = response.headers.get('Content-Length')
            if declared and declared.isdigit() and int(declared) > MAX_IMAGE_SIZE_BYTES:
                raise MediaApiError(413, message, too_large)

            chunks = []
            received = 0
            for chunk in response.iter_content(chunk_size=64 * 1024):
                received += len(chunk)
                if received > MAX_IMAGE_SIZE_BYTES:
                    raise MediaApiError(413, message, too_large)
                chunks.append(chunk)
        finally:
            response.close()

        content_type = response.headers.get('Content-Type', 'application/octet-stream')
        return b''.join(chunks), content_type

    def build_url(self, public_id: str, transformation: str = '') -> str:
        """Delivery URL for public_id with an optional transformation segment."""
        return build_delivery_url(
            self.settings.delivery_base,
            self.settings.cloud_name,
            public_id,
            transformation
        )
