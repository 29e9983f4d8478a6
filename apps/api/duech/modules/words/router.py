from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Request

from duech.core.auth import Principal, require_staff
from duech.core.errors import ValidationError
from duech.core.observability import request_id_of

from .schemas import (
    NoteCreateIn,
    NoteCreateOut,
    WordCreateIn,
    WordCreateOut,
    WordGetOut,
    WordMutationOut,
    WordUpdateIn,
)
from .service import (
    UNSET,
    add_note_to_word,
    create_word,
    delete_word_by_lemma,
    get_word_by_lemma,
    update_word_by_lemma,
)

router = APIRouter(tags=["words"])


@router.get("/words/{lemma}", response_model=WordGetOut)
def api_get_word(lemma: str = Path(..., min_length=1)) -> WordGetOut:
    return WordGetOut(data=get_word_by_lemma(lemma, include_unpublished=False))


@router.get("/editor/words/{lemma}", response_model=WordGetOut)
def api_get_word_editor(
    lemma: str = Path(..., min_length=1),
    principal: Principal = Depends(require_staff),
) -> WordGetOut:
    return WordGetOut(data=get_word_by_lemma(lemma, include_unpublished=True))


@router.post("/words/{lemma}", response_model=WordCreateOut, status_code=201)
def api_create_word(
    body: WordCreateIn,
    request: Request,
    lemma: str = Path(..., min_length=1),
    principal: Principal = Depends(require_staff),
) -> WordCreateOut:
    # the body is authoritative; the path only has to agree with it
    if body.lemma.strip() and body.lemma.strip() != lemma.strip():
        raise ValidationError("lemma in path and body differ", {"path": lemma, "body": body.lemma})

    created_by = body.created_by if body.created_by is not None else principal.user_id
    res = create_word(
        body,
        created_by=created_by,
        assigned_to=body.assigned_to,
        letter=body.letter,
        status=body.status,
        request_id=request_id_of(request),
    )
    return WordCreateOut(data={"word_id": res["word_id"], "lemma": res["lemma"], "letter": res["letter"]})


@router.put("/words/{lemma}", response_model=WordMutationOut)
def api_update_word(
    body: WordUpdateIn,
    request: Request,
    lemma: str = Path(..., min_length=1),
    principal: Principal = Depends(require_staff),
) -> WordMutationOut:
    sent = body.model_fields_set
    res = update_word_by_lemma(
        lemma,
        body,
        status=body.status if "status" in sent else UNSET,
        assigned_to=body.assigned_to if "assigned_to" in sent else UNSET,
        request_id=request_id_of(request),
    )
    return WordMutationOut(data={"lemma": res["lemma"]})


@router.delete("/words/{lemma}", response_model=WordMutationOut)
def api_delete_word(
    request: Request,
    lemma: str = Path(..., min_length=1),
    principal: Principal = Depends(require_staff),
) -> WordMutationOut:
    res = delete_word_by_lemma(lemma, request_id=request_id_of(request))
    return WordMutationOut(data={"lemma": res["lemma"]})


@router.post("/words/{lemma}/notes", response_model=NoteCreateOut, status_code=201)
def api_add_note(
    body: NoteCreateIn,
    request: Request,
    lemma: str = Path(..., min_length=1),
    principal: Principal = Depends(require_staff),
) -> NoteCreateOut:
    note = add_note_to_word(lemma, body.note, principal.user_id, request_id=request_id_of(request))
    return NoteCreateOut(data=note)
