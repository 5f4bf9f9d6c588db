"""
Pytest configuration for user-data-service tests

DynamoDB is faked with moto, the API is exercised through TestClient with
the repository dependency pointed at the mocked table.
"""
import pytest
import boto3
from fastapi.testclient import TestClient
from moto import mock_aws

from app.config import Settings
from app.dynamo import DynamoDBClient, UserDataRepository, get_repository, table_definition
from app.main import app

TABLE_NAME = "test-user-words"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def dynamodb_table(aws_credentials):
    """Create the mock user data table"""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        table = dynamodb.create_table(**table_definition(TABLE_NAME))
        yield table


@pytest.fixture
def settings():
    return Settings(USER_WORDS_TABLE=TABLE_NAME, AWS_REGION="us-east-1")


@pytest.fixture
def repository(dynamodb_table, settings):
    return UserDataRepository(DynamoDBClient(settings))


def make_client(repository: UserDataRepository) -> TestClient:
    app.dependency_overrides[get_repository] = lambda: repository
    return TestClient(app)


@pytest.fixture
def client(repository):
    """HTTP test client backed by the mock table"""
    yield make_client(repository)
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(aws_credentials):
    """HTTP test client whose repository has no table name configured"""
    repository = UserDataRepository(DynamoDBClient(Settings(USER_WORDS_TABLE=None)))
    yield make_client(repository)
    app.dependency_overrides.clear()

