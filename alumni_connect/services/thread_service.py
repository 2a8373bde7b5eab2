"""
Message Thread - history, sending and read receipts for one contact.

Message lifecycle:
    Sent (is_read=false) -> Read (is_read=true)
Read is terminal. Messages are never edited or deleted.
"""
import logging
from typing import List

from alumni_connect.core.errors import ValidationError
from alumni_connect.db.record_store import RecordStore
from alumni_connect.db.tables import messages, utcnow
from alumni_connect.schemas.schemas import CurrentUser, Message
from alumni_connect.services.conversation_service import between, unread_from

logger = logging.getLogger(__name__)

MAX_BODY_LENGTH = 5000


async def load_thread(store: RecordStore, current_user: CurrentUser, contact_id: int) -> List[Message]:
    """Every message between the two users, oldest first."""
    rows = await store.find(
        messages,
        between(current_user.id, contact_id),
        order_by=[messages.c.created_at, messages.c.id],
    )
    return [Message.model_validate(row) for row in rows]


def clean_body(body: str) -> str:
    text = (body or "").strip()
    if not text:
        raise ValidationError("Message body cannot be empty")
    if len(text) > MAX_BODY_LENGTH:
        raise ValidationError(f"Message body exceeds {MAX_BODY_LENGTH} characters")
    return text


async def send(store: RecordStore, current_user: CurrentUser, contact_id: int, body: str) -> Message:
    """
    Store a new message from the current user to ``contact_id``.

    Validation happens before any store call. On a store failure FetchFailed
    propagates and nothing is queued for retry; the client keeps its draft.
    """
    text = clean_body(body)
    if contact_id == current_user.id:
        raise ValidationError("Cannot send a message to yourself")

    now = utcnow()
    row = await store.insert(messages, {
        "sender_id": current_user.id,
        "recipient_id": contact_id,
        "body": text,
        "is_read": False,
        "created_at": now,
        "updated_at": now,
    })
    logger.info("Message %s sent: user %s -> user %s", row["id"], current_user.id, contact_id)
    return Message.model_validate(row)


async def mark_incoming_read(store: RecordStore, current_user: CurrentUser, contact_id: int) -> int:
    """
    Mark unread messages from ``contact_id`` to the current user as read.

    Call when the thread is actually in the foreground. Returns the number
    of messages that changed state; a repeat call returns 0.
    """
    changed = await store.update(
        messages,
        {"is_read": True},
        *unread_from(contact_id, current_user.id),
    )
    if changed:
        logger.debug("User %s read %d messages from user %s", current_user.id, changed, contact_id)
    return changed
