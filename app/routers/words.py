"""
Word endpoints

Words can be saved through two routes that share the same write path:
- POST /userdata/books/{bookId}/pages/{pageNumber}/words (book and page in the URL)
- POST /userdata/words (book and page in the body, identified callers only)
"""
import logging

from fastapi import APIRouter, Depends, status

from app import schemas
from app.dynamo import UserDataRepository, get_repository
from app.middleware import UserIdentity, get_current_user, require_identified_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/userdata", tags=["Words"])


@router.post(
    "/books/{book_id}/pages/{page_number}/words",
    response_model=schemas.WordsSaveResponse,
    status_code=status.HTTP_201_CREATED,
)
async def save_page_words(
    book_id: str,
    page_number: str,
    request: schemas.WordsSave,
    user: UserIdentity = Depends(get_current_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """Save a list of words on a page, one item per word written concurrently."""
    words = [w.model_dump() for w in request.words]
    await repository.put_words(user.id, book_id, page_number, words)
    return schemas.WordsSaveResponse()


@router.post("/words", response_model=schemas.ScopedWordsSaveResponse, status_code=status.HTTP_201_CREATED)
async def save_words(
    request: schemas.ScopedWordsSave,
    user: UserIdentity = Depends(require_identified_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """Save a list of words on the page named in the body."""
    words = [w.model_dump() for w in request.words]
    await repository.put_words(user.id, request.bookId, request.pageNumber, words)
    return schemas.ScopedWordsSaveResponse(bookId=request.bookId, pageNumber=request.pageNumber)


@router.get("/words", response_model=schemas.UserItemsResponse)
async def list_words(
    user: UserIdentity = Depends(require_identified_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """
    Every item stored for the caller.

    The query covers the whole partition, so the profile, books and pages
    come back together with the words, ordered Book, Page, Word by sort key.
    """
    count, items = await repository.list_user_items(user.id)
    logger.info(f"Fetched {count} items for user {user.id}")
    return schemas.UserItemsResponse(count=count, items=items)
