"""Note service functions."""

from typing import Iterable, List, Optional
import logging

from sqlalchemy import select, delete

from core.exceptions import NotFoundError, ValidationError
from core.utils.formatting import extract_mentions
from database.models.candidates import Candidate
from database.models.notes import Note
from database.store import EntityStore, NOTES

logger = logging.getLogger(__name__)


async def list_notes(store: EntityStore, candidate_id: int) -> List[Note]:
    """Notes for a candidate, oldest first."""
    async with store.session() as session:
        if await session.get(Candidate, candidate_id) is None:
            raise NotFoundError("Candidate", candidate_id)
        result = await session.execute(
            select(Note)
            .where(Note.candidate_id == candidate_id)
            .order_by(Note.created_at, Note.id)
        )
        return list(result.scalars().all())


async def add_note(
    store: EntityStore,
    candidate_id: int,
    text: str,
    mentions: Optional[Iterable[str]] = None,
) -> Note:
    """
    Attach a note to a candidate.

    Args:
        candidate_id: Candidate the note is about
        text: Note text (required)
        mentions: Mentioned handles; extracted from ``@handle`` tokens in
            the text when omitted

    Returns:
        The stored note
    """
    text = (text or "").strip()
    if not text:
        raise ValidationError("Text is required")

    handles = list(mentions) if mentions is not None else extract_mentions(text)

    async with store.transaction(NOTES) as session:
        if await session.get(Candidate, candidate_id) is None:
            raise NotFoundError("Candidate", candidate_id)
        note = Note(candidate_id=candidate_id, text=text, mentions=handles)
        session.add(note)
        await session.flush()

    logger.info(f"Added note {note.id} to candidate {candidate_id} ({len(handles)} mentions)")
    return note


async def delete_note(store: EntityStore, note_id: int) -> None:
    """Delete a note."""
    async with store.transaction(NOTES) as session:
        result = await session.execute(delete(Note).where(Note.id == note_id))
        if not result.rowcount:
            raise NotFoundError("Note", note_id)
    logger.info(f"Deleted note {note_id}")
