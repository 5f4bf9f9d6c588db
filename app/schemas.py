"""
Pydantic schemas for user-data-service

Request models validate once at the boundary. Model validators raise
ValueError with the message returned to the client as {"error": ...}.
All schemas use Pydantic v2 syntax with ConfigDict
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, Any, List


# ============= CONSTANTS =============

VALID_USER_LEVELS = (1, 2, 3)

# Book and page identifiers, titles and word fields are stored as given
# (string, number or boolean), only presence is checked
Identifier = Any


# ============= PROFILE SCHEMAS =============

class ProfileUpdate(BaseModel):
    """Schema for POST /userdata/profile"""
    userLevel: Any = Field(default=None, description="Learner level: 1, 2 or 3")

    @model_validator(mode="after")
    def validate_user_level(self) -> "ProfileUpdate":
        level = self.userLevel
        # bool is an int subclass, True must not pass as level 1
        if isinstance(level, bool) or not isinstance(level, (int, float)) or level not in VALID_USER_LEVELS:
            raise ValueError("userLevel must be 1, 2, or 3")
        self.userLevel = int(level)
        return self


class ProfileUpdateResponse(BaseModel):
    message: str = "Profile updated"
    userLevel: int


class ProfileResponse(BaseModel):
    """userLevel is omitted when the user has no profile yet"""
    userLevel: Optional[int] = None


# ============= BOOK SCHEMAS =============

class BookCreate(BaseModel):
    """Schema for POST /userdata/books"""
    bookId: Optional[Identifier] = None
    title: Any = None

    @model_validator(mode="after")
    def validate_required(self) -> "BookCreate":
        if not self.bookId or not self.title:
            raise ValueError("bookId and title required")
        return self


class BookCreateResponse(BaseModel):
    message: str = "Book created"
    bookId: Identifier


class BookListResponse(BaseModel):
    books: List[dict]


# ============= PAGE SCHEMAS =============

class PageCreate(BaseModel):
    """Schema for POST /userdata/books/{bookId}/pages"""
    pageNumber: Optional[Identifier] = None

    @model_validator(mode="after")
    def validate_required(self) -> "PageCreate":
        if not self.pageNumber:
            raise ValueError("pageNumber required")
        return self


class PageCreateResponse(BaseModel):
    message: str = "Page created"
    pageNumber: Identifier


class PageListResponse(BaseModel):
    pages: List[dict]


# ============= WORD SCHEMAS =============

class WordEntry(BaseModel):
    """A single vocabulary entry, unknown fields are ignored"""
    word: Any = Field(...)
    meaning: Any = None
    example: Any = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("word")
    @classmethod
    def validate_word(cls, v: Any) -> Any:
        """The word is part of the sort key, it can be any type but not empty"""
        if v is None or v == "":
            raise ValueError("word required")
        return v


class WordsSave(BaseModel):
    """Schema for POST /userdata/books/{bookId}/pages/{pageNumber}/words"""
    words: Optional[List[WordEntry]] = None

    @model_validator(mode="after")
    def validate_required(self) -> "WordsSave":
        if self.words is None:
            raise ValueError("words[] required")
        return self


class ScopedWordsSave(BaseModel):
    """Schema for POST /userdata/words, book and page travel in the body"""
    bookId: Optional[Identifier] = None
    pageNumber: Optional[Identifier] = None
    words: Optional[List[WordEntry]] = None

    @model_validator(mode="after")
    def validate_required(self) -> "ScopedWordsSave":
        if not self.bookId or not self.pageNumber or self.words is None:
            raise ValueError("bookId, pageNumber and words[] required")
        return self


class WordsSaveResponse(BaseModel):
    message: str = "Words saved"


class ScopedWordsSaveResponse(BaseModel):
    message: str = "Words saved"
    bookId: Identifier
    pageNumber: Identifier


class UserItemsResponse(BaseModel):
    count: int
    items: List[dict]


# ============= HEALTH =============

class HealthResponse(BaseModel):
    status: str = "UP"
    service: str
