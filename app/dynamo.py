"""
DynamoDB operations for user-data-service

Single-table layout, PK ``userId`` and SK ``sk`` (see app.keys):
- PROFILE items
- BOOK / PAGE / WORD items addressed by hierarchical sort keys

boto3 is synchronous, every call runs in a worker thread through
asyncio.to_thread so handlers never block the event loop.
"""
import asyncio
import time
import boto3
from boto3.dynamodb.conditions import Key, Attr
from typing import Optional, Dict, Any, List, Tuple
from decimal import Decimal
import logging

from app import keys
from app.config import get_settings, Settings
from app.errors import StoreFailure

logger = logging.getLogger(__name__)


class TableNotConfigured(RuntimeError):
    """USER_WORDS_TABLE is unset, raised when a store call is attempted"""


class DynamoDBClient:
    """DynamoDB client with lazy initialization"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._dynamodb = None
        self._user_words_table = None

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource"""
        if self._dynamodb is None:
            kwargs = {
                'region_name': self.settings.AWS_REGION,
            }

            # Only use endpoint_url for LocalStack
            if self.settings.DYNAMODB_ENDPOINT:
                kwargs['endpoint_url'] = self.settings.DYNAMODB_ENDPOINT

            # In ECS boto3 picks up the task IAM role
            if self.settings.DYNAMODB_ENDPOINT and self.settings.AWS_ACCESS_KEY_ID:
                kwargs['aws_access_key_id'] = self.settings.AWS_ACCESS_KEY_ID
                kwargs['aws_secret_access_key'] = self.settings.AWS_SECRET_ACCESS_KEY
                logger.info("Using explicit AWS credentials (LocalStack mode)")
            else:
                logger.info("Using IAM role credentials (AWS/ECS mode)")

            self._dynamodb = boto3.resource('dynamodb', **kwargs)
        return self._dynamodb

    @property
    def user_words_table(self):
        if not self.settings.USER_WORDS_TABLE:
            raise TableNotConfigured("USER_WORDS_TABLE env var is missing")
        if self._user_words_table is None:
            self._user_words_table = self.dynamodb.Table(self.settings.USER_WORDS_TABLE)
        return self._user_words_table


class UserDataRepository:
    """Reads and writes the profile/book/page/word hierarchy of one table."""

    def __init__(self, db_client: DynamoDBClient):
        self.db_client = db_client

    # ============= LOW LEVEL =============

    def _put(self, item: Dict[str, Any]) -> None:
        self.db_client.user_words_table.put_item(Item=dynamodb_dict(item))

    def _query(self, **kwargs) -> List[Dict[str, Any]]:
        """Run a query and follow LastEvaluatedKey until the result is complete"""
        table = self.db_client.user_words_table
        items = []
        while True:
            response = table.query(**kwargs)
            items.extend(python_dict(item) for item in response.get('Items', []))
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return items
            kwargs['ExclusiveStartKey'] = last_key

    async def _run(self, failure_message: str, func, *args, **kwargs):
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except Exception as e:
            raise StoreFailure(failure_message) from e

    # ============= PROFILE =============

    async def put_profile(self, user_id: str, user_level: int) -> Dict[str, Any]:
        """
        Upsert the PROFILE item of a user

        Args:
            user_id: Partition key
            user_level: Validated level (1, 2 or 3)

        Returns:
            The item written
        """
        item = {
            'userId': user_id,
            'sk': keys.profile_sk(),
            'entityType': keys.ENTITY_PROFILE,
            'userLevel': user_level,
            'updatedAt': now_ms(),
        }
        await self._run("Failed to update profile", self._put, item)
        logger.info(f"Profile updated for user {user_id}: level {user_level}")
        return item

    async def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Exact-match query on (userId, PROFILE), None when the user has no profile"""
        items = await self._run(
            "Failed to fetch profile",
            self._query,
            KeyConditionExpression=Key('userId').eq(user_id) & Key('sk').eq(keys.profile_sk()),
        )
        return items[0] if items else None

    # ============= BOOKS =============

    async def put_book(self, user_id: str, book_id: Any, title: str) -> Dict[str, Any]:
        item = {
            'userId': user_id,
            'sk': keys.book_sk(book_id),
            'entityType': keys.ENTITY_BOOK,
            'bookId': book_id,
            'title': title,
            'createdAt': now_ms(),
        }
        await self._run("Failed to create book", self._put, item)
        logger.info(f"Book {book_id} saved for user {user_id}")
        return item

    async def list_books(self, user_id: str) -> List[Dict[str, Any]]:
        """
        BOOK items of a user in sort key order.

        Pages and words share the BOOK# prefix, the entityType filter keeps
        them out of the result.
        """
        return await self._run(
            "Failed to fetch books",
            self._query,
            KeyConditionExpression=Key('userId').eq(user_id) & Key('sk').begins_with(keys.books_prefix()),
            FilterExpression=Attr('entityType').eq(keys.ENTITY_BOOK),
        )

    # ============= PAGES =============

    async def put_page(self, user_id: str, book_id: Any, page_number: Any) -> Dict[str, Any]:
        item = {
            'userId': user_id,
            'sk': keys.page_sk(book_id, page_number),
            'entityType': keys.ENTITY_PAGE,
            'bookId': book_id,
            'pageNumber': page_number,
            'createdAt': now_ms(),
        }
        await self._run("Failed to create page", self._put, item)
        logger.info(f"Page {page_number} of book {book_id} saved for user {user_id}")
        return item

    async def list_pages(self, user_id: str, book_id: Any) -> List[Dict[str, Any]]:
        """
        Every item whose sort key starts with BOOK#{bookId}#PAGE#.

        Word items nest under their page and match the same prefix, so they
        are returned alongside the pages.
        """
        return await self._run(
            "Failed to fetch pages",
            self._query,
            KeyConditionExpression=Key('userId').eq(user_id) & Key('sk').begins_with(keys.pages_prefix(book_id)),
        )

    # ============= WORDS =============

    async def put_words(self, user_id: str, book_id: Any, page_number: Any, words: List[Dict[str, Any]]) -> int:
        """
        Upsert one WORD item per entry, all puts in flight at once.

        There is no batch atomicity: when one put fails the others may already
        be persisted and a single StoreFailure is raised.

        Returns:
            Number of words written
        """
        items = [
            {
                'userId': user_id,
                'sk': keys.word_sk(book_id, page_number, w['word']),
                'entityType': keys.ENTITY_WORD,
                'bookId': book_id,
                'pageNumber': page_number,
                'word': w['word'],
                'meaning': w.get('meaning'),
                'example': w.get('example'),
                'createdAt': now_ms(),
            }
            for w in words
        ]
        await asyncio.gather(*(self._run("Failed to save words", self._put, item) for item in items))
        logger.info(f"Saved {len(items)} words on page {page_number} of book {book_id} for user {user_id}")
        return len(items)

    async def list_user_items(self, user_id: str) -> Tuple[int, List[Dict[str, Any]]]:
        """
        Every item in the user's partition (profile, books, pages and words),
        ordered by sort key: Book, then Page, then Word.

        Returns:
            (count, items)
        """
        items = await self._run(
            "Failed to fetch user data",
            self._query,
            KeyConditionExpression=Key('userId').eq(user_id),
        )
        return len(items), items


# ============= HELPER FUNCTIONS =============

def now_ms() -> int:
    """Current time as epoch milliseconds"""
    return int(time.time() * 1000)


def dynamodb_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert Python dict to DynamoDB compatible dict (handles Decimal, drops None)"""
    return {k: dynamodb_value(v) for k, v in data.items() if v is not None}


def dynamodb_value(value: Any) -> Any:
    """Convert Python value to DynamoDB compatible value"""
    if isinstance(value, float):
        return Decimal(str(value))
    elif isinstance(value, dict):
        return {k: dynamodb_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [dynamodb_value(item) for item in value]
    return value


def python_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert DynamoDB dict to Python dict (handles Decimal)"""
    return {k: python_value(v) for k, v in data.items()}


def python_value(value: Any) -> Any:
    """Convert DynamoDB value to Python value"""
    if isinstance(value, Decimal):
        return int(value) if value % 1 == 0 else float(value)
    elif isinstance(value, dict):
        return {k: python_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [python_value(item) for item in value]
    return value


# Global instance, built on first use
_repository: Optional[UserDataRepository] = None


def get_repository() -> UserDataRepository:
    """FastAPI dependency returning the process-wide repository"""
    global _repository
    if _repository is None:
        _repository = UserDataRepository(DynamoDBClient())
    return _repository


def table_definition(table_name: str) -> Dict[str, Any]:
    """CreateTable arguments for the user data table (PK userId, SK sk)"""
    return {
        'TableName': table_name,
        'KeySchema': [
            {'AttributeName': 'userId', 'KeyType': 'HASH'},
            {'AttributeName': 'sk', 'KeyType': 'RANGE'}
        ],
        'AttributeDefinitions': [
            {'AttributeName': 'userId', 'AttributeType': 'S'},
            {'AttributeName': 'sk', 'AttributeType': 'S'}
        ],
        'BillingMode': 'PAY_PER_REQUEST'
    }
