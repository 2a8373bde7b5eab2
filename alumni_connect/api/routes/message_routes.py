"""
Message Routes

GET  /messages/contacts - Users the caller may message
GET  /messages/conversations - Conversation list (last message, unread count)
GET  /messages/unread-count - Total unread, for polling the inbox badge
GET  /messages/threads/{contact_id} - Full thread, marks it read when opened
POST /messages/threads/{contact_id} - Send a message
POST /messages/threads/{contact_id}/read - Mark incoming messages read

Domain errors (FetchFailed, ValidationError, ContactNotFound) propagate to
the AppError handler in main.py, which renders {"error", "detail"} bodies.
"""

import logging

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from alumni_connect.core.auth import get_current_user
from alumni_connect.core.errors import FetchFailed
from alumni_connect.db.record_store import RecordStore, get_record_store
from alumni_connect.services import contact_directory, conversation_service, thread_service
from alumni_connect.schemas.schemas import (
    ConversationList, CurrentUser, MarkReadResponse, Message, SendMessageRequest,
    ThreadResponse, UnreadCountResponse, User
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("/contacts", response_model=List[User])
async def list_contacts(
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """Everyone the caller's role allows them to message."""
    return await contact_directory.list_contacts(store, user)


@router.get("/conversations", response_model=ConversationList)
async def list_conversations(
    search: Optional[str] = Query(None, description="Filter by contact name or email"),
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """
    Conversation list for the inbox, most recent activity first.

    If some contacts fail to load the rest are still returned, with
    ``failed_lookups`` and ``partial_failure`` describing what is missing.
    ``total_unread`` counts the conversations returned, after ``search``.
    """
    contacts = await contact_directory.list_contacts(store, user)
    result = await conversation_service.build_conversations(store, user, contacts)
    result.conversations = conversation_service.filter_conversations(result.conversations, search)
    result.total_unread = sum(c.unread_count for c in result.conversations)
    return result


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    return UnreadCountResponse(unread_count=await conversation_service.count_unread(store, user))


@router.get("/threads/{contact_id}", response_model=ThreadResponse)
async def get_thread(
    contact_id: int,
    mark_read: bool = Query(True, description="Thread is in the foreground; mark incoming messages read"),
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """
    Full history with one contact, oldest first.

    The response echoes contact_id so a polling client can drop responses
    for a thread it has already navigated away from. If marking read fails
    the history is still returned, with marked_read=0.
    """
    contact = await contact_directory.get_contact(store, user, contact_id)
    history = await thread_service.load_thread(store, user, contact.id)
    marked = 0
    if mark_read:
        try:
            marked = await thread_service.mark_incoming_read(store, user, contact.id)
        except FetchFailed as e:
            logger.warning("Thread %s loaded but not marked read for user %s: %s", contact.id, user.id, e.message)
    return ThreadResponse(contact_id=contact.id, contact=contact, messages=history, marked_read=marked)


@router.post("/threads/{contact_id}", response_model=Message, status_code=201)
async def send_message(
    contact_id: int,
    data: SendMessageRequest,
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """Send a message. Blank bodies are rejected before anything is stored."""
    thread_service.clean_body(data.body)
    contact = await contact_directory.get_contact(store, user, contact_id)
    return await thread_service.send(store, user, contact.id, data.body)


@router.post("/threads/{contact_id}/read", response_model=MarkReadResponse)
async def mark_read(
    contact_id: int,
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    contact = await contact_directory.get_contact(store, user, contact_id)
    marked = await thread_service.mark_incoming_read(store, user, contact.id)
    return MarkReadResponse(contact_id=contact.id, marked_read=marked)
