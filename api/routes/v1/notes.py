"""Candidate note endpoints."""

from fastapi import APIRouter, Depends, Path, status

from api.dependencies import EntityStore, get_store
from api.schemas.common import ListResponse, OkResponse
from api.schemas.notes import NoteCreate, NoteResponse
from api.services import notes as note_service

router = APIRouter(tags=["notes"])


@router.get(
    "/candidates/{candidate_id}/notes",
    response_model=ListResponse[NoteResponse],
    summary="List Notes",
    description="Notes on a candidate, oldest first.",
)
async def list_notes(
    candidate_id: int = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
):
    notes = await note_service.list_notes(store, candidate_id)
    return ListResponse[NoteResponse](data=[NoteResponse.model_validate(n) for n in notes])


@router.post(
    "/candidates/{candidate_id}/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Note",
    description="Attach a note. Mentions default to the @handles found in the text.",
)
async def add_note(
    request: NoteCreate,
    candidate_id: int = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
):
    return await note_service.add_note(store, candidate_id, request.text, request.mentions)


@router.delete(
    "/notes/{note_id}",
    response_model=OkResponse,
    summary="Delete Note",
)
async def delete_note(
    note_id: int = Path(..., description="Note ID"),
    store: EntityStore = Depends(get_store),
):
    await note_service.delete_note(store, note_id)
    return OkResponse()
