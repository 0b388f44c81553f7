"""
Unit tests for the routing Lambda entry point.
"""
import json
import requests
from urllib.parse import urlencode
from unittest.mock import patch

from kapture.handlers.router import route, lambda_handler


class TestRouter:
    """Tests for route dispatch and the password gate."""

    def test_unauthenticated_gets_login_page(self, settings, sample_transform_event):
        response = route(sample_transform_event, None, settings)

        assert response['statusCode'] == 401
        assert '<form method="POST"' in response['body']

    def test_login_post(self, settings):
        event = {
            'httpMethod': 'POST',
            'path': '/',
            'headers': {'Content-Type': 'application/x-www-form-urlencoded'},
            'body': urlencode({'password': 'open sesame'})
        }

        response = route(event, None, settings)

        assert response['statusCode'] == 302
        assert 'Set-Cookie' in response['headers']

    def test_authenticated_transform(self, settings, sample_transform_event, auth_cookie):
        event = dict(sample_transform_event, headers={'Cookie': auth_cookie})

        response = route(event, None, settings)

        assert response['statusCode'] == 200
        assert json.loads(response['body'])['data']['transformation'] == 'c_fill,w_200,h_100,e_sepia'

    def test_authenticated_delete(self, settings, sample_delete_event, auth_cookie, response_factory):
        event = dict(sample_delete_event, headers={'Cookie': auth_cookie})

        with patch.object(requests.Session, 'post', return_value=response_factory(200, {'result': 'ok'})):
            response = route(event, None, settings)

        assert response['statusCode'] == 200

    def test_wrong_method_is_not_found(self, settings, auth_cookie):
        event = {'httpMethod': 'GET', 'path': '/api/delete-image', 'headers': {'Cookie': auth_cookie}}

        response = route(event, None, settings)

        assert response['statusCode'] == 404
        assert json.loads(response['body'])['error']['code'] == 'NOT_FOUND'

    def test_trailing_slash_tolerated(self, settings, auth_cookie):
        event = {
            'httpMethod': 'GET',
            'path': '/api/transform/',
            'headers': {'Cookie': auth_cookie},
            'queryStringParameters': {'public_id': 'cat'}
        }

        assert route(event, None, settings)['statusCode'] == 200

    def test_http_api_v2_event(self, settings):
        """Test v2 payloads (rawPath / requestContext.http) route the same way."""
        event = {
            'rawPath': '/api/transform',
            'requestContext': {'http': {'method': 'GET'}},
            'cookies': ['password=open%20sesame'],
            'queryStringParameters': {'public_id': 'cat', 'transformations': '{"q": {"level": "auto"}}'}
        }

        response = route(event, None, settings)

        assert response['statusCode'] == 200
        assert json.loads(response['body'])['data']['transformation'] == 'q_auto'

    def test_gate_disabled(self, open_settings, sample_transform_event):
        assert route(sample_transform_event, None, open_settings)['statusCode'] == 200

    def test_settings_failure(self, sample_transform_event):
        """Test a settings lookup failure becomes a 500."""
        with patch('kapture.handlers.router.load_settings', side_effect=RuntimeError('ssm down')):
            response = lambda_handler(sample_transform_event, None)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['error']['code'] == 'INTERNAL_ERROR'
