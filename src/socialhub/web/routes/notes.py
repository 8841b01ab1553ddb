"""Notes endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.pages.notes import NotesPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate

router = APIRouter(prefix="/api/notes", tags=["notes"])


def _notes_page(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> NotesPage:
    page = NotesPage(client, session)
    page.load()
    return page


def _not_found(note_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Note '{note_id}' not found",
    )


@router.get("", response_model=NoteListResponse)
async def list_notes(
    search: str = "",
    category: str = "all",
    sort_by: str = Query(default="updated_at", pattern="^(updated_at|created_at|title)$"),
    page: NotesPage = Depends(_notes_page),
) -> NoteListResponse:
    """List non-archived notes, pinned first."""
    notes = page.visible(search=search, category=category, sort_by=sort_by)
    return NoteListResponse(
        notes=[NoteResponse(**n) for n in notes],
        count=len(notes),
        categories=page.categories(),
    )


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(body: NoteCreate, page: NotesPage = Depends(_notes_page)) -> NoteResponse:
    if not body.title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required",
        )
    note = page.create(
        title=body.title,
        content=body.content,
        category=body.category,
        tags=body.tags,
        reminder_date=body.reminder_date,
    )
    if note is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create note",
        )
    return NoteResponse(**note)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    body: NoteUpdate,
    page: NotesPage = Depends(_notes_page),
) -> NoteResponse:
    if page.find(page.notes, note_id) is None:
        raise _not_found(note_id)
    note = page.update(note_id, **body.model_dump(exclude_unset=True))
    if note is None:
        raise _not_found(note_id)
    return NoteResponse(**note)


@router.post("/{note_id}/pin", response_model=NoteResponse)
async def toggle_pin(note_id: str, page: NotesPage = Depends(_notes_page)) -> NoteResponse:
    note = page.toggle_pin(note_id)
    if note is None:
        raise _not_found(note_id)
    return NoteResponse(**note)


@router.post("/{note_id}/archive", response_model=NoteResponse)
async def archive_note(note_id: str, page: NotesPage = Depends(_notes_page)) -> NoteResponse:
    if page.find(page.notes, note_id) is None:
        raise _not_found(note_id)
    note = page.archive(note_id)
    if note is None:
        raise _not_found(note_id)
    return NoteResponse(**note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(note_id: str, page: NotesPage = Depends(_notes_page)) -> None:
    if not page.delete(note_id):
        raise _not_found(note_id)
