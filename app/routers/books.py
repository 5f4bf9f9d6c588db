"""
Book and page endpoints
"""
from fastapi import APIRouter, Depends, status

from app import schemas
from app.dynamo import UserDataRepository, get_repository
from app.middleware import UserIdentity, get_current_user

router = APIRouter(prefix="/userdata/books", tags=["Books"])


@router.post("", response_model=schemas.BookCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    request: schemas.BookCreate,
    user: UserIdentity = Depends(get_current_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """Create a book. Re-using a bookId overwrites the existing book."""
    await repository.put_book(user.id, request.bookId, request.title)
    return schemas.BookCreateResponse(bookId=request.bookId)


@router.get("", response_model=schemas.BookListResponse)
async def list_books(
    user: UserIdentity = Depends(get_current_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """Books of the caller, ordered by sort key (lexicographic bookId)."""
    books = await repository.list_books(user.id)
    return schemas.BookListResponse(books=books)


@router.post("/{book_id}/pages", response_model=schemas.PageCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_page(
    book_id: str,
    request: schemas.PageCreate,
    user: UserIdentity = Depends(get_current_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """Create a page under a book. The book itself is not required to exist."""
    await repository.put_page(user.id, book_id, request.pageNumber)
    return schemas.PageCreateResponse(pageNumber=request.pageNumber)


@router.get("/{book_id}/pages", response_model=schemas.PageListResponse)
async def list_pages(
    book_id: str,
    user: UserIdentity = Depends(get_current_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """
    Pages of a book.

    This is a prefix scan on BOOK#{bookId}#PAGE#, so the words saved on
    those pages are returned as well.
    """
    pages = await repository.list_pages(user.id, book_id)
    return schemas.PageListResponse(pages=pages)
