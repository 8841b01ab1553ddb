"""Chat endpoints: conversations, participants and messages."""

from fastapi import APIRouter, Depends, HTTPException, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.pages.chat import CONVERSATION_TYPES, ROLES, ChatPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    ConversationCreate,
    ConversationListResponse,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
    ParticipantAdd,
    ParticipantResponse,
)

router = APIRouter(prefix="/api/chat", tags=["chat"])


def _chat_page(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> ChatPage:
    page = ChatPage(client, session)
    page.load()
    return page


def _not_found(conversation_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Conversation '{conversation_id}' not found",
    )


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(
    search: str = "",
    page: ChatPage = Depends(_chat_page),
) -> ConversationListResponse:
    """The caller's conversations with last message and unread count."""
    conversations = page.search(search)
    return ConversationListResponse(
        conversations=[ConversationResponse(**c) for c in conversations],
        count=len(conversations),
    )


@router.post(
    "/conversations",
    response_model=ConversationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation(
    body: ConversationCreate,
    page: ChatPage = Depends(_chat_page),
) -> ConversationResponse:
    if not body.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name is required",
        )
    if body.type not in CONVERSATION_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Type must be one of: {', '.join(CONVERSATION_TYPES)}",
        )
    conversation = page.create_conversation(body.name, body.description, body.type)
    if conversation is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create conversation",
        )
    return ConversationResponse(**conversation)


@router.get("/conversations/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: str,
    page: ChatPage = Depends(_chat_page),
) -> list[MessageResponse]:
    """Messages oldest first; marks the conversation read."""
    messages = page.select(conversation_id)
    if page.selected is None:
        raise _not_found(conversation_id)
    return [MessageResponse(**m) for m in messages]


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: str,
    body: MessageCreate,
    page: ChatPage = Depends(_chat_page),
) -> MessageResponse:
    if not body.content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message is empty",
        )
    page.selected = page.find(page.conversations, conversation_id)
    if page.selected is None:
        raise _not_found(conversation_id)
    message = page.send(body.content)
    if message is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not send message",
        )
    return MessageResponse(**message)


@router.get(
    "/conversations/{conversation_id}/participants",
    response_model=list[ParticipantResponse],
)
async def list_participants(
    conversation_id: str,
    page: ChatPage = Depends(_chat_page),
) -> list[ParticipantResponse]:
    if page.find(page.conversations, conversation_id) is None:
        raise _not_found(conversation_id)
    return [ParticipantResponse(**p) for p in page.participants(conversation_id)]


@router.post(
    "/conversations/{conversation_id}/participants",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_participant(
    conversation_id: str,
    body: ParticipantAdd,
    page: ChatPage = Depends(_chat_page),
) -> ParticipantResponse:
    if body.role not in ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Role must be one of: {', '.join(ROLES)}",
        )
    if page.find(page.conversations, conversation_id) is None:
        raise _not_found(conversation_id)
    participant = page.add_participant(conversation_id, body.user_id, body.role)
    if participant is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not add participant",
        )
    return ParticipantResponse(**participant)


@router.patch("/messages/{message_id}", response_model=MessageResponse)
async def edit_message(
    message_id: str,
    body: MessageCreate,
    page: ChatPage = Depends(_chat_page),
) -> MessageResponse:
    if not body.content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message is empty",
        )
    message = page.edit_message(message_id, body.content)
    if message is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Message '{message_id}' not found",
        )
    return MessageResponse(**message)


@router.delete("/messages/{message_id}", response_model=MessageResponse)
async def delete_message(message_id: str, page: ChatPage = Depends(_chat_page)) -> MessageResponse:
    """Soft delete: the message stays, flagged and emptied."""
    message = page.delete_message(message_id)
    if message is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Message '{message_id}' not found",
        )
    return MessageResponse(**message)
