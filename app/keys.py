"""
Sort key construction for the user data table.

Every item of a user lives in the same partition (``userId``). The sort key
encodes the position of the item in the profile/book/page/word hierarchy so
that a ``begins_with`` query returns a whole subtree in lexicographic order::

    PROFILE
    BOOK#{bookId}
    BOOK#{bookId}#PAGE#{pageNumber}
    BOOK#{bookId}#PAGE#{pageNumber}#WORD#{word}

Values are concatenated as-is, without padding or escaping, so ``BOOK#10``
sorts before ``BOOK#9``.
"""
from typing import Any

ENTITY_PROFILE = "PROFILE"
ENTITY_BOOK = "BOOK"
ENTITY_PAGE = "PAGE"
ENTITY_WORD = "WORD"

SEPARATOR = "#"


def key_part(value: Any) -> str:
    """
    Render a key segment the way JSON clients write it: true/false for
    booleans and 2 rather than 2.0 for whole floats.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def profile_sk() -> str:
    """Build sort key for the user profile item"""
    return ENTITY_PROFILE


def books_prefix() -> str:
    """Prefix shared by every book and everything nested under a book"""
    return f"{ENTITY_BOOK}{SEPARATOR}"


def book_sk(book_id: Any) -> str:
    """Build sort key for a book: BOOK#{bookId}"""
    return f"{books_prefix()}{key_part(book_id)}"


def pages_prefix(book_id: Any) -> str:
    """Prefix of every page of a book: BOOK#{bookId}#PAGE#"""
    return f"{book_sk(book_id)}{SEPARATOR}{ENTITY_PAGE}{SEPARATOR}"


def page_sk(book_id: Any, page_number: Any) -> str:
    """Build sort key for a page: BOOK#{bookId}#PAGE#{pageNumber}"""
    return f"{pages_prefix(book_id)}{key_part(page_number)}"


def word_sk(book_id: Any, page_number: Any, word: Any) -> str:
    """Build sort key for a word: BOOK#{bookId}#PAGE#{pageNumber}#WORD#{word}"""
    return f"{page_sk(book_id, page_number)}{SEPARATOR}{ENTITY_WORD}{SEPARATOR}{key_part(word)}"
