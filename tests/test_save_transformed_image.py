"""
Unit tests for save_transformed_image Lambda handler.
"""
import json
import requests
from unittest.mock import patch

from kapture.handlers.save_transformed_image import save_transformed_image

SOURCE_URL = 'https://res.cloudinary.com/demo-cloud/image/upload/e_sepia/holidays/beach'


def _event(**body):
    return {'httpMethod': 'POST', 'path': '/api/save-transformed-image', 'body': json.dumps(body)}


class TestSaveTransformedImageHandler:
    """Tests for save_transformed_image Lambda handler."""

    def test_successful_save(self, settings, response_factory, upload_result):
        """Test the source image is fetched and re-uploaded."""
        source = response_factory(200, content=b'\x89PNG...', headers={'Content-Type': 'image/png'})
        with patch.object(requests.Session, 'get', return_value=source) as get, \
                patch.object(requests.Session, 'post', return_value=response_factory(200, upload_result)) as post:
            response = save_transformed_image(_event(imageUrl=SOURCE_URL, folder='edited'), None, settings)

        assert response['statusCode'] == 200
        body = json.loads(response['body'])
        assert body['data']['public_id'] == 'holidays/abc123'

        assert get.call_args[0][0] == SOURCE_URL
        kwargs = post.call_args[1]
        assert kwargs['data']['folder'] == 'edited'
        assert kwargs['files']['file'] == ('transformed_image.png', b'\x89PNG...', 'image/png')

    def test_default_folder(self, settings, response_factory, upload_result):
        source = response_factory(200, content=b'img', headers={'Content-Type': 'image/jpeg'})
        with patch.object(requests.Session, 'get', return_value=source), \
                patch.object(requests.Session, 'post', return_value=response_factory(200, upload_result)) as post:
            save_transformed_image(_event(imageUrl=SOURCE_URL), None, settings)

        assert post.call_args[1]['data']['folder'] == 'worker_uploads'

    def test_missing_image_url(self, settings):
        response = save_transformed_image(_event(folder='x'), None, settings)

        assert response['statusCode'] == 400
        body = json.loads(response['body'])
        assert body['error']['code'] == 'INVALID_IMAGE_URL'
        assert body['error']['message'] == 'Image URL is required.'

    def test_invalid_json(self, settings):
        response = save_transformed_image({'body': '{'}, None, settings)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['error']['code'] == 'INVALID_JSON'

    def test_source_fetch_failure(self, settings, response_factory):
        """Test a failed download surfaces the source status."""
        with patch.object(requests.Session, 'get', return_value=response_factory(404)), \
                patch.object(requests.Session, 'post') as post:
            response = save_transformed_image(_event(imageUrl=SOURCE_URL), None, settings)

        assert response['statusCode'] == 404
        body = json.loads(response['body'])
        assert body['error']['code'] == 'SOURCE_FETCH_FAILED'
        assert SOURCE_URL in body['error']['message']
        assert body['error']['details'] == 'Source answered with status 404'
        post.assert_not_called()

    def test_upload_failure(self, settings, response_factory):
        source = response_factory(200, content=b'img', headers={'Content-Type': 'image/png'})
        failure = response_factory(500, {'error': {'message': 'General Error'}})
        with patch.object(requests.Session, 'get', return_value=source), \
                patch.object(requests.Session, 'post', return_value=failure):
            response = save_transformed_image(_event(imageUrl=SOURCE_URL), None, settings)

        assert response['statusCode'] == 500
        body = json.loads(response['body'])
        assert body['error']['code'] == 'MEDIA_API_ERROR'
        assert body['error']['details'] == 'General Error'
