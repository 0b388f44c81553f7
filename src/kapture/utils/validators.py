"""
Validation utilities for uploads, public ids and request parameters.
"""
import base64
import binascii
from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse

from kapture.config import (
    ALLOWED_EXTENSIONS,
    MAX_IMAGE_SIZE_BYTES,
    MAX_FOLDER_LENGTH,
    MAX_PUBLIC_ID_LENGTH,
    MAX_TAGS,
    MAX_TAG_LENGTH,
)


def validate_image_file(image_data: str, filename: str) -> Tuple[bool, Optional[str]]:
    """
    Validate the uploaded image file.

    Args:
        image_data: Base64 encoded image data
        filename: Original filename of the image

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not image_data:
        return False, "Image data is required"

    if not isinstance(image_data, str):
        return False, "Image data must be a base64 string"

    if not filename:
        return False, "Filename is required"

    if not isinstance(filename, str):
        return False, "Filename must be a string"

    # Check file extension
    extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    if extension not in ALLOWED_EXTENSIONS:
        return False, f"File extension '{extension}' not allowed. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"

    # Check file size (base64 encoded)
    try:
        decoded_data = base64.b64decode(image_data, validate=True)
    except (binascii.Error, ValueError) as e:
        return False, f"Invalid base64 image data: {str(e)}"

    if len(decoded_data) > MAX_IMAGE_SIZE_BYTES:
        return False, f"Image size exceeds maximum allowed size of {MAX_IMAGE_SIZE_BYTES // (1024*1024)}MB"

    return True, None


def validate_public_id(public_id: Any) -> Tuple[bool, Optional[str]]:
    """
    Validate a media API public id.

    Args:
        public_id: The public id to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not public_id:
        return False, "Public ID is required."

    if not isinstance(public_id, str):
        return False, "Public ID must be a string"

    if len(public_id) > MAX_PUBLIC_ID_LENGTH:
        return False, "Public ID is too long"

    return True, None


def validate_folder(folder: Any) -> Tuple[bool, Optional[str]]:
    """Validate an optional target folder name."""
    if folder is None or folder == '':
        return True, None  # Falls back to the default folder

    if not isinstance(folder, str):
        return False, "Folder must be a string"

    if len(folder) > MAX_FOLDER_LENGTH:
        return False, f"Folder must be {MAX_FOLDER_LENGTH} characters or less"

    if folder.startswith('/') or '..' in folder.split('/'):
        return False, "Folder must be a relative path"

    return True, None


def parse_tags(tags: Any) -> List[str]:
    """Split a comma separated tag string into trimmed, non-empty tags."""
    if not tags:
        return []
    return [tag.strip() for tag in str(tags).split(',') if tag.strip()]


def validate_tags(tags: Any) -> Tuple[bool, Optional[str]]:
    """
    Validate an optional comma separated tag string.

    Args:
        tags: e.g. "sunset, nature"

    Returns:
        Tuple of (is_valid, error_message)
    """
    if tags is None or tags == '':
        return True, None

    if not isinstance(tags, str):
        return False, "Tags must be a comma separated string"

    tag_list = parse_tags(tags)
    if len(tag_list) > MAX_TAGS:
        return False, f"Maximum {MAX_TAGS} tags allowed"
    for tag in tag_list:
        if len(tag) > MAX_TAG_LENGTH:
            return False, f"Each tag must be {MAX_TAG_LENGTH} characters or less"

    return True, None


def validate_image_url(image_url: Any) -> Tuple[bool, Optional[str]]:
    """Validate the source URL of an image to be re-uploaded."""
    if not image_url:
        return False, "Image URL is required."

    if not isinstance(image_url, str):
        return False, "Image URL must be a string"

    parsed = urlparse(image_url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return False, "Image URL must be an absolute http(s) URL"

    return True, None
