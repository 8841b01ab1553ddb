"""Library endpoints: books, reading progress, goal and collections."""

from fastapi import APIRouter, Depends, HTTPException, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.pages.library import STATUSES, LibraryPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    BookCreate,
    BookListResponse,
    BookResponse,
    CollectionCreate,
    CollectionResponse,
    GoalCreate,
    GoalResponse,
    LibraryStatsResponse,
    ProgressResponse,
    ProgressUpdate,
)

router = APIRouter(prefix="/api/library", tags=["library"])


def _library_page(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> LibraryPage:
    page = LibraryPage(client, session)
    page.load()
    return page


@router.get("/books", response_model=BookListResponse)
async def list_books(
    search: str = "",
    genre: str = "all",
    reading_status: str = "all",
    page: LibraryPage = Depends(_library_page),
) -> BookListResponse:
    """Catalog filtered by search, genre and the caller's reading status."""
    books = page.visible(search=search, genre=genre, status=reading_status)
    return BookListResponse(books=[BookResponse(**b) for b in books], count=len(books))


@router.post("/books", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def add_book(body: BookCreate, page: LibraryPage = Depends(_library_page)) -> BookResponse:
    if not body.title.strip() or not body.author.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title and author are required",
        )
    book = page.add_book(**body.model_dump())
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not add book",
        )
    return BookResponse(**book)


@router.get("/progress", response_model=list[ProgressResponse])
async def list_progress(page: LibraryPage = Depends(_library_page)) -> list[ProgressResponse]:
    return [ProgressResponse(**p) for p in page.progress]


@router.put("/books/{book_id}/progress", response_model=ProgressResponse)
async def update_progress(
    book_id: str,
    body: ProgressUpdate,
    page: LibraryPage = Depends(_library_page),
) -> ProgressResponse:
    if body.status not in STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Status must be one of: {', '.join(STATUSES)}",
        )
    if page.find(page.books, book_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book '{book_id}' not found",
        )
    entry = page.update_progress(book_id, body.status, body.current_page)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update progress",
        )
    return ProgressResponse(**entry)


@router.get("/stats", response_model=LibraryStatsResponse)
async def library_stats(page: LibraryPage = Depends(_library_page)) -> LibraryStatsResponse:
    counts = page.stats()
    return LibraryStatsResponse(
        total=counts["total"],
        to_read=counts["to-read"],
        reading=counts["reading"],
        completed=counts["completed"],
        paused=counts["paused"],
        goal=GoalResponse(**page.goal) if page.goal else None,
        goal_progress=page.goal_progress(),
    )


@router.post("/goal", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(body: GoalCreate, page: LibraryPage = Depends(_library_page)) -> GoalResponse:
    """Set this year's reading goal."""
    if page.goal is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A reading goal already exists for this year",
        )
    goal = page.create_goal(body.target_books, body.target_pages)
    if goal is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create goal",
        )
    return GoalResponse(**goal)


@router.get("/collections", response_model=list[CollectionResponse])
async def list_collections(page: LibraryPage = Depends(_library_page)) -> list[CollectionResponse]:
    return [CollectionResponse(**c) for c in page.collections]


@router.post(
    "/collections",
    response_model=CollectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_collection(
    body: CollectionCreate,
    page: LibraryPage = Depends(_library_page),
) -> CollectionResponse:
    if not body.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name is required",
        )
    collection = page.create_collection(body.name, body.description, body.is_public)
    if collection is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create collection",
        )
    return CollectionResponse(**collection)
