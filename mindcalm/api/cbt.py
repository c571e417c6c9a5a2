"""CBT tools API: thought records, activation, worry postponement, chat."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException, status

from mindcalm.core.deps import get_store
from mindcalm.schemas.cbt import (
    ActivityCreate,
    ActivityPlan,
    ChatIntro,
    ChatRequest,
    ChatResponse,
    Distortion,
    DraftStepMove,
    PostponedWorry,
    ThoughtDraft,
    ThoughtDraftUpdate,
    ThoughtRecord,
    WorryBoard,
    WorryCreate,
    WorrySchedule,
)
from mindcalm.services import ai_service, cbt_service
from mindcalm.services.ai_service import AIServiceError
from mindcalm.services.state_store import StateStore

router = APIRouter(prefix="/cbt", tags=["cbt"])


@router.get("/distortions", response_model=list[Distortion])
def get_distortions():
    return cbt_service.DISTORTIONS


# --- Thought records ---


@router.get("/thoughts", response_model=list[ThoughtRecord])
def get_thoughts(store: StateStore = Depends(get_store)):
    """Saved thought records, newest first."""
    return cbt_service.list_thoughts(store)


@router.post("/thoughts", response_model=ThoughtRecord, status_code=201)
def create_thought(
    form: ThoughtDraft | None = Body(default=None),
    store: StateStore = Depends(get_store),
):
    """Save a record from the given form, or from the stored draft when no body is sent."""
    try:
        return cbt_service.save_thought(store, form)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/draft", response_model=ThoughtDraft)
def get_draft(store: StateStore = Depends(get_store)):
    return cbt_service.get_draft(store)


@router.patch("/draft", response_model=ThoughtDraft)
def update_draft(data: ThoughtDraftUpdate, store: StateStore = Depends(get_store)):
    return cbt_service.update_draft(store, data)


@router.delete("/draft", status_code=204)
def discard_draft(store: StateStore = Depends(get_store)):
    cbt_service.discard_draft(store)


@router.post("/draft/step", response_model=ThoughtDraft)
def move_draft_step(data: DraftStepMove, store: StateStore = Depends(get_store)):
    try:
        return cbt_service.move_draft_step(store, data.direction)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/draft/identify-distortion", response_model=ThoughtDraft)
def identify_distortion(store: StateStore = Depends(get_store)):
    """Tag the draft with a distortion and suggest an alternative thought."""
    try:
        return cbt_service.identify_distortion(store)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AIServiceError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.post("/draft/check-evidence", response_model=ThoughtDraft)
def check_evidence(store: StateStore = Depends(get_store)):
    try:
        return cbt_service.check_evidence(store)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


# --- Behavioural activation ---


@router.get("/activities", response_model=list[ActivityPlan])
def get_activities(store: StateStore = Depends(get_store)):
    return cbt_service.list_activities(store)


@router.post("/activities", response_model=ActivityPlan, status_code=201)
def create_activity(data: ActivityCreate, store: StateStore = Depends(get_store)):
    return cbt_service.add_activity(store, data)


@router.post("/activities/{activity_id}/toggle", response_model=ActivityPlan)
def toggle_activity(activity_id: str, store: StateStore = Depends(get_store)):
    try:
        return cbt_service.toggle_activity(store, activity_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/activities/{activity_id}", status_code=204)
def delete_activity(activity_id: str, store: StateStore = Depends(get_store)):
    try:
        cbt_service.delete_activity(store, activity_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


# --- Worry postponement ---


@router.get("/worries", response_model=WorryBoard)
def get_worries(store: StateStore = Depends(get_store)):
    """Waiting and processed worries plus whether worry time is open now."""
    return cbt_service.worry_board(store)


@router.post("/worries", response_model=PostponedWorry, status_code=201)
def create_worry(data: WorryCreate, store: StateStore = Depends(get_store)):
    try:
        return cbt_service.add_worry(store, data.text)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/worries/{worry_id}/toggle", response_model=PostponedWorry)
def toggle_worry(worry_id: str, store: StateStore = Depends(get_store)):
    try:
        return cbt_service.toggle_worry(store, worry_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/worries/{worry_id}", status_code=204)
def delete_worry(worry_id: str, store: StateStore = Depends(get_store)):
    try:
        cbt_service.delete_worry(store, worry_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/worry-schedule", response_model=WorrySchedule)
def get_worry_schedule(store: StateStore = Depends(get_store)):
    return cbt_service.get_worry_schedule(store)


@router.put("/worry-schedule", response_model=WorrySchedule)
def update_worry_schedule(data: WorrySchedule, store: StateStore = Depends(get_store)):
    return cbt_service.save_worry_schedule(store, data)


# --- Chat ---


@router.get("/chat", response_model=ChatIntro)
def get_chat_intro():
    return cbt_service.chat_intro()


@router.post("/chat", response_model=ChatResponse)
def chat(data: ChatRequest):
    history = [turn.model_dump() for turn in data.history]
    return ChatResponse(reply=ai_service.chat_with_therapist(data.message, history))
