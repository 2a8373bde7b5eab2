"""
Conversation Aggregator - builds the conversation list for the inbox.

For every contact two independent reads are issued:
1. the latest message of the pair (either direction)
2. how many messages from the contact are still unread by the current user

Contacts are processed concurrently (bounded fan-out) and the results are
sorted once everything has been joined, so request completion order never
leaks into the list order.

Ordering:
- conversations with a message first, newest last_activity first
- equal last_activity, and conversations without messages, by contact id
"""
import asyncio
import logging
from operator import attrgetter
from typing import List, Optional, Sequence

from sqlalchemy import and_, or_

from alumni_connect.core.config import get_settings
from alumni_connect.core.errors import FetchFailed, PartialAggregationFailure
from alumni_connect.db.record_store import RecordStore
from alumni_connect.db.tables import messages
from alumni_connect.schemas.schemas import (
    Conversation, ConversationList, CurrentUser, Message, User
)

logger = logging.getLogger(__name__)


def between(user_id: int, contact_id: int):
    """Clause matching every message exchanged by the two users."""
    return or_(
        and_(messages.c.sender_id == user_id, messages.c.recipient_id == contact_id),
        and_(messages.c.sender_id == contact_id, messages.c.recipient_id == user_id),
    )


def unread_from(contact_id: int, user_id: int) -> list:
    return [
        messages.c.sender_id == contact_id,
        messages.c.recipient_id == user_id,
        messages.c.is_read.is_(False),
    ]


async def fetch_conversation(store: RecordStore, current_user: CurrentUser, contact: User) -> Conversation:
    """Last message and unread count for one contact."""
    last = await store.find_one(
        messages,
        between(current_user.id, contact.id),
        order_by=[messages.c.created_at.desc(), messages.c.id.desc()],
    )
    unread = await store.count(messages, *unread_from(contact.id, current_user.id))

    last_message = Message.model_validate(last) if last else None
    return Conversation(
        contact=contact,
        last_message=last_message,
        unread_count=unread,
        last_activity=last_message.created_at if last_message else None,
    )


def sort_conversations(conversations: Sequence[Conversation]) -> List[Conversation]:
    by_contact = sorted(conversations, key=attrgetter("contact.id"))
    active = [c for c in by_contact if c.last_activity is not None]
    idle = [c for c in by_contact if c.last_activity is None]
    # sort is stable under reverse=True, so equal timestamps keep contact id order
    active.sort(key=attrgetter("last_activity"), reverse=True)
    return active + idle


async def build_conversations(
    store: RecordStore,
    current_user: CurrentUser,
    contacts: Sequence[User],
    concurrency: Optional[int] = None,
) -> ConversationList:
    """
    Build the sorted conversation list for ``contacts``.

    A failed lookup for one contact is logged and counted; the others still
    load. If every lookup fails the whole call raises FetchFailed.
    """
    limit = concurrency or get_settings().conversation_fanout_limit
    gate = asyncio.Semaphore(max(1, limit))

    async def one(contact: User) -> Optional[Conversation]:
        async with gate:
            try:
                return await fetch_conversation(store, current_user, contact)
            except FetchFailed as e:
                logger.warning(
                    "Conversation lookup failed for user %s / contact %s: %s",
                    current_user.id, contact.id, e.message,
                )
                return None

    results = await asyncio.gather(*(one(c) for c in contacts))
    loaded = [r for r in results if r is not None]
    failed = len(results) - len(loaded)

    if contacts and not loaded:
        raise FetchFailed(f"Could not load any of {len(contacts)} conversations")

    conversations = sort_conversations(loaded)
    partial = PartialAggregationFailure(failed, len(contacts)) if failed else None
    return ConversationList(
        conversations=conversations,
        failed_lookups=failed,
        partial_failure=partial.to_dict() if partial else None,
        total_unread=sum(c.unread_count for c in conversations),
    )


def filter_conversations(conversations: Sequence[Conversation], search: Optional[str]) -> List[Conversation]:
    """Case-insensitive match on contact name or email. Blank search keeps everything."""
    term = (search or "").strip().lower()
    if not term:
        return list(conversations)
    return [
        c for c in conversations
        if term in c.contact.full_name.lower() or term in c.contact.email.lower()
    ]


async def count_unread(store: RecordStore, current_user: CurrentUser) -> int:
    """Total unread messages addressed to the current user, across all senders."""
    return await store.count(
        messages,
        messages.c.recipient_id == current_user.id,
        messages.c.is_read.is_(False),
    )
