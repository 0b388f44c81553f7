"""
Unit tests for list_images Lambda handler.
"""
import json
import requests
from unittest.mock import patch

from kapture.handlers.list_images import list_images


RESOURCES = {
    'resources': [
        {'public_id': 'holidays/beach', 'secure_url': 'https://x/beach.jpg', 'format': 'jpg'},
        {'public_id': 'holidays/sunset', 'secure_url': 'https://x/sunset.jpg', 'format': 'jpg'},
        {'public_id': 'samples/landscapes/nature', 'secure_url': 'https://x/nature.jpg'},
        {'public_id': 'cld-sample-5', 'secure_url': 'https://x/cld.jpg'},
    ]
}


class TestListImagesHandler:
    """Tests for list_images Lambda handler."""

    def test_list_all_images(self, settings, response_factory):
        """Test listing without filters hides sample assets."""
        with patch.object(requests.Session, 'get', return_value=response_factory(200, RESOURCES)) as get:
            response = list_images({'queryStringParameters': None}, None, settings)

        assert response['statusCode'] == 200
        images = json.loads(response['body'])['data']
        assert [img['public_id'] for img in images] == ['holidays/beach', 'holidays/sunset']
        assert set(images[0]) == {'public_id', 'secure_url'}
        assert 'prefix' not in get.call_args[1]['params']

    def test_filter_by_folder(self, settings, sample_list_event, response_factory):
        """Test the folder is sent as a prefix."""
        with patch.object(requests.Session, 'get', return_value=response_factory(200, RESOURCES)) as get:
            response = list_images(sample_list_event, None, settings)

        assert response['statusCode'] == 200
        assert get.call_args[1]['params']['prefix'] == 'holidays/'

    def test_filter_by_tag(self, settings, response_factory):
        """Test tag listing hits the tag endpoint."""
        event = {'queryStringParameters': {'tag': 'sunset'}}
        with patch.object(requests.Session, 'get', return_value=response_factory(200, RESOURCES)) as get:
            response = list_images(event, None, settings)

        assert response['statusCode'] == 200
        assert get.call_args[0][0].endswith('/resources/image/tags/sunset')

    def test_invalid_folder(self, settings):
        response = list_images({'queryStringParameters': {'folder': '/root'}}, None, settings)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['error']['code'] == 'INVALID_FOLDER'

    def test_media_api_error(self, settings, response_factory):
        """Test downstream errors surface their status code."""
        failure = response_factory(420, {'error': {'message': 'Rate Limit Exceeded'}})
        with patch.object(requests.Session, 'get', return_value=failure):
            response = list_images({}, None, settings)

        assert response['statusCode'] == 420
        body = json.loads(response['body'])
        assert body['error']['message'] == 'Failed to fetch images from Cloudinary.'
        assert body['error']['details'] == 'Rate Limit Exceeded'

    def test_unreachable(self, settings):
        with patch.object(requests.Session, 'get', side_effect=requests.Timeout('slow')):
            response = list_images({}, None, settings)

        assert response['statusCode'] == 502
