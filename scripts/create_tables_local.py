#!/usr/bin/env python3
"""
Create the user data DynamoDB table in LocalStack for local development

Usage:
    USER_WORDS_TABLE=user-words python scripts/create_tables_local.py
"""
import sys
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.dynamo import table_definition


def create_tables(endpoint_url: str = 'http://localhost:4566'):
    """Create the user data table if it does not exist yet"""
    settings = get_settings()
    table_name = settings.USER_WORDS_TABLE or 'user-words'

    # Connect to LocalStack
    dynamodb = boto3.client(
        'dynamodb',
        endpoint_url=settings.DYNAMODB_ENDPOINT or endpoint_url,
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or 'test',
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or 'test'
    )

    try:
        dynamodb.describe_table(TableName=table_name)
        print(f"✓ Table {table_name} already exists")
    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceNotFoundException':
            dynamodb.create_table(**table_definition(table_name))
            print(f"✓ Created table {table_name}")
        else:
            raise

    print(f"\nSet USER_WORDS_TABLE={table_name} DYNAMODB_ENDPOINT={settings.DYNAMODB_ENDPOINT or endpoint_url} to use it")


if __name__ == "__main__":
    create_tables()
