"""Medication hub API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from mindcalm.core.deps import get_store
from mindcalm.schemas.medication import (
    DoseConfirm,
    DoseConfirmed,
    InteractionCheckRequest,
    MedicationCreate,
    MedicationCreated,
    MedicationLog,
    MedicationStatus,
    TextResult,
)
from mindcalm.services import ai_service, medication_service
from mindcalm.services.state_store import StateStore

router = APIRouter(prefix="/medications", tags=["medications"])


@router.get("", response_model=list[MedicationStatus])
def get_medications(store: StateStore = Depends(get_store)):
    """Medications with today's intake and low-inventory flags."""
    return medication_service.medication_statuses(store)


@router.post("", response_model=MedicationCreated, status_code=201)
def create_medication(data: MedicationCreate, store: StateStore = Depends(get_store)):
    return medication_service.add_medication(store, data)


@router.post("/interactions", response_model=TextResult)
def check_interactions(data: InteractionCheckRequest, store: StateStore = Depends(get_store)):
    existing = [m.name for m in medication_service.list_medications(store)]
    return TextResult(text=ai_service.check_drug_interactions(data.name, existing))


@router.get("/logs", response_model=list[MedicationLog])
def get_logs(store: StateStore = Depends(get_store)):
    return medication_service.list_logs(store)


@router.get("/logs/export", response_model=TextResult)
def export_logs(store: StateStore = Depends(get_store)):
    """Plain-text dose history, one line per log."""
    return TextResult(text=medication_service.export_logs(store))


@router.post("/{medication_id}/doses", response_model=DoseConfirmed, status_code=201)
def confirm_dose(medication_id: str, data: DoseConfirm, store: StateStore = Depends(get_store)):
    try:
        return medication_service.confirm_dose(store, medication_id, data)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/{medication_id}/info", response_model=TextResult)
def get_info(medication_id: str, store: StateStore = Depends(get_store)):
    try:
        return TextResult(text=medication_service.medication_info(store, medication_id))
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{medication_id}", status_code=204)
def delete_medication(medication_id: str, store: StateStore = Depends(get_store)):
    try:
        medication_service.delete_medication(store, medication_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
