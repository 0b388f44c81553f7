#!/usr/bin/env python3
"""
Setup script to deploy the Kapture image API to LocalStack (SSM parameters, Lambda, API Gateway).
Run this script after starting LocalStack with docker-compose.
"""
import boto3
import os
import shutil
import subprocess
import sys
import tempfile
import zipfile

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Configuration from environment variables
LOCALSTACK_ENDPOINT = os.environ.get('LOCALSTACK_ENDPOINT', 'http://localhost:4566')
AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')
AWS_ACCESS_KEY_ID = os.environ.get('AWS_ACCESS_KEY_ID')
AWS_SECRET_ACCESS_KEY = os.environ.get('AWS_SECRET_ACCESS_KEY')
CLOUDINARY_CLOUD_NAME = os.environ.get('CLOUDINARY_CLOUD_NAME', '')
CLOUDINARY_API_KEY = os.environ.get('CLOUDINARY_API_KEY', '')
CLOUDINARY_API_SECRET = os.environ.get('CLOUDINARY_API_SECRET', '')
AUTH_PASSWORD = os.environ.get('AUTH_PASSWORD', '')
API_SECRET_PARAMETER = '/kapture/cloudinary-api-secret'
AUTH_PASSWORD_PARAMETER = '/kapture/auth-password'
FUNCTION_NAME = 'kapture_router'
API_NAME = 'KaptureImageAPI'
LAMBDA_ROLE_ARN = "arn:aws:iam::000000000000:role/lambda-role"
PACKAGE_ROOT = os.path.join('src', 'kapture')
RUNTIME_REQUIREMENTS = ['requests']


def get_client(service):
    """Get AWS client for LocalStack."""
    return boto3.client(
        service,
        endpoint_url=LOCALSTACK_ENDPOINT,
        aws_access_key_id=AWS_ACCESS_KEY_ID,
        aws_secret_access_key=AWS_SECRET_ACCESS_KEY,
        region_name=AWS_REGION
    )


def store_secrets():
    """Store the media API secret and login password in SSM Parameter Store."""
    ssm = get_client('ssm')
    for name, value in ((API_SECRET_PARAMETER, CLOUDINARY_API_SECRET), (AUTH_PASSWORD_PARAMETER, AUTH_PASSWORD)):
        if not value:
            print(f"! Skipping SSM parameter '{name}' (no value in environment)")
            continue
        ssm.put_parameter(Name=name, Value=value, Type='SecureString', Overwrite=True)
        print(f"✓ Stored SSM parameter '{name}'")


def package_lambda_code():
    """Package the kapture package and its runtime dependencies into a zip file."""
    if os.path.exists('lambda_package.zip'):
        os.remove('lambda_package.zip')

    with tempfile.TemporaryDirectory() as build_dir:
        # boto3 ships with the Lambda runtime; everything else is vendored
        subprocess.run(
            [sys.executable, '-m', 'pip', 'install', '--quiet', '--target', build_dir, *RUNTIME_REQUIREMENTS],
            check=True
        )
        shutil.copytree(PACKAGE_ROOT, os.path.join(build_dir, 'kapture'),
                        ignore=shutil.ignore_patterns('__pycache__', '*.pyc'))

        with zipfile.ZipFile('lambda_package.zip', 'w', zipfile.ZIP_DEFLATED) as zipf:
            for root, dirs, files in os.walk(build_dir):
                dirs[:] = [d for d in dirs if d != '__pycache__']
                for file in files:
                    file_path = os.path.join(root, file)
                    zipf.write(file_path, os.path.relpath(file_path, build_dir))

    print(f"✓ Packaged Lambda code with {', '.join(RUNTIME_REQUIREMENTS)} to lambda_package.zip")
    return 'lambda_package.zip'


def create_lambda_function(zip_file):
    """Create or update the router Lambda function."""
    client = get_client('lambda')

    with open(zip_file, 'rb') as f:
        code_content = f.read()

    environment = {
        'CLOUDINARY_CLOUD_NAME': CLOUDINARY_CLOUD_NAME,
        'CLOUDINARY_API_KEY': CLOUDINARY_API_KEY,
        'LOCALSTACK_ENDPOINT': 'http://localstack:4566',
        'AWS_REGION': AWS_REGION,
        'LOG_LEVEL': 'INFO',
    }
    if CLOUDINARY_API_SECRET:
        environment['CLOUDINARY_API_SECRET_PARAMETER'] = API_SECRET_PARAMETER
    if AUTH_PASSWORD:
        environment['AUTH_PASSWORD_PARAMETER'] = AUTH_PASSWORD_PARAMETER

    try:
        response = client.create_function(
            FunctionName=FUNCTION_NAME,
            Runtime='python3.11',
            Role=LAMBDA_ROLE_ARN,
            Handler='kapture.handlers.router.lambda_handler',
            Code={'ZipFile': code_content},
            Environment={'Variables': environment},
            Timeout=30
        )
        print(f"✓ Created Lambda function '{FUNCTION_NAME}'")
        return response['FunctionArn']
    except client.exceptions.ResourceConflictException:
        client.update_function_code(FunctionName=FUNCTION_NAME, ZipFile=code_content)
        response = client.get_function(FunctionName=FUNCTION_NAME)
        print(f"✓ Updated Lambda function '{FUNCTION_NAME}'")
        return response['Configuration']['FunctionArn']


def create_api_gateway(function_arn):
    """Create an API Gateway with a catch-all proxy resource pointing at the router."""
    apigateway = get_client('apigateway')

    apis = apigateway.get_rest_apis().get('items', [])
    api_id = next((api['id'] for api in apis if api['name'] == API_NAME), None)

    if not api_id:
        api_id = apigateway.create_rest_api(name=API_NAME)['id']
        print(f"✓ Created API Gateway '{API_NAME}' (ID: {api_id})")
    else:
        print(f"✓ Found existing API Gateway '{API_NAME}' (ID: {api_id})")

    resources = apigateway.get_resources(restApiId=api_id).get('items', [])
    root_id = next(r['id'] for r in resources if r['path'] == '/')

    proxy_resource = next((r for r in resources if r.get('pathPart') == '{proxy+}'), None)
    if not proxy_resource:
        proxy_resource = apigateway.create_resource(restApiId=api_id, parentId=root_id, pathPart='{proxy+}')
        print("✓ Created /{proxy+} resource")
    proxy_id = proxy_resource['id']

    uri = f"arn:aws:apigateway:{AWS_REGION}:lambda:path/2015-03-31/functions/{function_arn}/invocations"

    def setup_method(resource_id, label):
        try:
            apigateway.put_method(
                restApiId=api_id,
                resourceId=resource_id,
                httpMethod='ANY',
                authorizationType='NONE'
            )
        except apigateway.exceptions.ConflictException:
            pass
        apigateway.put_integration(
            restApiId=api_id,
            resourceId=resource_id,
            httpMethod='ANY',
            type='AWS_PROXY',
            integrationHttpMethod='POST',
            uri=uri
        )
        print(f"✓ Configured ANY {label}")

    # The root carries the login form POST, the proxy carries /api/*
    setup_method(root_id, '/')
    setup_method(proxy_id, '/{proxy+}')

    apigateway.create_deployment(restApiId=api_id, stageName='dev')
    print("✓ Deployed API to 'dev' stage")

    return f"{LOCALSTACK_ENDPOINT}/restapis/{api_id}/dev/_user_request_"


def main():
    print("=" * 60)
    print("Setting up Kapture on LocalStack (SSM, Lambda, API Gateway)")
    print("=" * 60)

    try:
        print("\n[1/4] Storing secrets...")
        store_secrets()

        print("\n[2/4] Packaging Lambda Code...")
        zip_file = package_lambda_code()

        print("\n[3/4] Deploying Lambda...")
        function_arn = create_lambda_function(zip_file)

        print("\n[4/4] Configuring API Gateway...")
        api_url = create_api_gateway(function_arn)

        print("\n" + "=" * 60)
        print("✓ SETUP COMPLETE")
        print("=" * 60)
        print("Your API is ready at:")
        print(api_url)
        print("=" * 60)

        with open('api_url.txt', 'w') as f:
            f.write(api_url)
        return 0

    except Exception as e:
        print(f"\n✗ Error during setup: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1
    finally:
        if os.path.exists('lambda_package.zip'):
            os.remove('lambda_package.zip')


if __name__ == '__main__':
    sys.exit(main())
