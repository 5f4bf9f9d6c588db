"""
Tests for the DynamoDB repository with moto
"""
from decimal import Decimal

import pytest

from app import dynamo
from app.errors import StoreFailure


@pytest.mark.asyncio
async def test_put_and_get_profile(repository):
    item = await repository.put_profile("u1", 3)
    assert item["sk"] == "PROFILE"

    profile = await repository.get_profile("u1")
    assert profile["userLevel"] == 3
    assert isinstance(profile["updatedAt"], int)


@pytest.mark.asyncio
async def test_get_missing_profile(repository):
    assert await repository.get_profile("nobody") is None


@pytest.mark.asyncio
async def test_list_books_only_returns_books(repository):
    await repository.put_book("u1", "b1", "Alpha")
    await repository.put_page("u1", "b1", 1)
    await repository.put_words("u1", "b1", 1, [{"word": "casa"}])

    books = await repository.list_books("u1")
    assert [b["entityType"] for b in books] == ["BOOK"]


@pytest.mark.asyncio
async def test_list_pages_prefix_scan(repository):
    await repository.put_page("u1", "b1", 1)
    await repository.put_page("u1", "b1", 2)
    await repository.put_words("u1", "b1", 1, [{"word": "casa", "meaning": "house"}])
    await repository.put_page("u1", "b10", 1)

    items = await repository.list_pages("u1", "b1")
    assert [i["sk"] for i in items] == [
        "BOOK#b1#PAGE#1",
        "BOOK#b1#PAGE#1#WORD#casa",
        "BOOK#b1#PAGE#2",
    ]


@pytest.mark.asyncio
async def test_put_words_returns_count(repository):
    words = [{"word": w} for w in ["uno", "dos", "tres", "cuatro"]]
    assert await repository.put_words("u1", "b1", 1, words) == 4

    count, items = await repository.list_user_items("u1")
    assert count == 4
    assert sorted(i["word"] for i in items) == ["cuatro", "dos", "tres", "uno"]


@pytest.mark.asyncio
async def test_put_words_drops_missing_optional_fields(repository, dynamodb_table):
    await repository.put_words("u1", "b1", 1, [{"word": "sol", "meaning": None, "example": None}])

    item = dynamodb_table.get_item(Key={"userId": "u1", "sk": "BOOK#b1#PAGE#1#WORD#sol"})["Item"]
    assert "meaning" not in item
    assert "example" not in item


@pytest.mark.asyncio
async def test_put_words_partial_failure(repository, monkeypatch):
    """One failing put fails the batch, the other words stay persisted"""
    original_put = repository._put

    def flaky_put(item):
        if item["word"] == "bad":
            raise RuntimeError("throttled")
        original_put(item)

    monkeypatch.setattr(repository, "_put", flaky_put)

    words = [{"word": "good"}, {"word": "bad"}, {"word": "fine"}]
    with pytest.raises(StoreFailure) as exc_info:
        await repository.put_words("u1", "b1", 1, words)

    assert exc_info.value.message == "Failed to save words"
    assert isinstance(exc_info.value.__cause__, RuntimeError)

    _, items = await repository.list_user_items("u1")
    assert {i["word"] for i in items} == {"good", "fine"}


@pytest.mark.asyncio
async def test_missing_table_is_store_failure(aws_credentials, dynamodb_table):
    settings = dynamo.Settings(USER_WORDS_TABLE="does-not-exist", AWS_REGION="us-east-1")
    repository = dynamo.UserDataRepository(dynamo.DynamoDBClient(settings))

    with pytest.raises(StoreFailure) as exc_info:
        await repository.put_book("u1", "b1", "Alpha")
    assert exc_info.value.message == "Failed to create book"


@pytest.mark.asyncio
async def test_query_follows_pagination(repository, monkeypatch):
    table = repository.db_client.user_words_table
    pages = [
        {"Items": [{"userId": "u1", "sk": "BOOK#a"}], "LastEvaluatedKey": {"userId": "u1", "sk": "BOOK#a"}},
        {"Items": [{"userId": "u1", "sk": "BOOK#b"}]},
    ]
    calls = []

    def fake_query(**kwargs):
        calls.append(kwargs)
        return pages[len(calls) - 1]

    monkeypatch.setattr(table, "query", fake_query)

    count, items = await repository.list_user_items("u1")
    assert count == 2
    assert [i["sk"] for i in items] == ["BOOK#a", "BOOK#b"]
    assert "ExclusiveStartKey" not in calls[0]
    assert calls[1]["ExclusiveStartKey"] == {"userId": "u1", "sk": "BOOK#a"}


# ============= HELPERS =============

def test_dynamodb_dict_converts_floats_and_drops_none():
    assert dynamo.dynamodb_dict({"a": 1.5, "b": None, "c": [0.5]}) == {"a": Decimal("1.5"), "c": [Decimal("0.5")]}


def test_python_dict_converts_decimals():
    assert dynamo.python_dict({"a": Decimal("2"), "b": Decimal("2.5"), "c": {"d": Decimal("1")}}) == {
        "a": 2, "b": 2.5, "c": {"d": 1}
    }


def test_table_definition():
    definition = dynamo.table_definition("t")
    assert definition["TableName"] == "t"
    assert definition["KeySchema"] == [
        {"AttributeName": "userId", "KeyType": "HASH"},
        {"AttributeName": "sk", "KeyType": "RANGE"},
    ]


def test_unconfigured_table_raises():
    client = dynamo.DynamoDBClient(dynamo.Settings(USER_WORDS_TABLE=None))
    with pytest.raises(dynamo.TableNotConfigured):
        client.user_words_table
