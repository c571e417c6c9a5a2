"""Medication hub: inventory, dose confirmation, adherence."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from mindcalm.schemas.common import utcnow
from mindcalm.schemas.medication import (
    DoseConfirm,
    DoseConfirmed,
    Medication,
    MedicationCreate,
    MedicationCreated,
    MedicationLog,
    MedicationStatus,
)
from mindcalm.services import ai_service
from mindcalm.services.state_store import MED_LOGS_KEY, MEDICATIONS_KEY, StateStore

logger = logging.getLogger(__name__)

LOW_INVENTORY_THRESHOLD = 5
COMPLIANCE_WINDOW_DAYS = 7


def list_medications(store: StateStore) -> list[Medication]:
    return store.load_list(MEDICATIONS_KEY, Medication)


def list_logs(store: StateStore) -> list[MedicationLog]:
    return store.load_list(MED_LOGS_KEY, MedicationLog)


def get_medication(store: StateStore, medication_id: str) -> Medication:
    for med in list_medications(store):
        if med.id == medication_id:
            return med
    raise LookupError("Medication not found")


def add_medication(store: StateStore, data: MedicationCreate) -> MedicationCreated:
    warning = None
    if data.check_interactions:
        existing = [m.name for m in list_medications(store)]
        warning = ai_service.check_drug_interactions(data.name, existing)

    med = Medication(
        name=data.name,
        dosage=data.dosage,
        frequency=data.frequency or "Daily",
        type=data.type,
        instructions=data.instructions,
        total_pills=data.total_pills or 30,
        refill_date=data.refill_date,
    )
    store.append(MEDICATIONS_KEY, Medication, med)
    logger.info("Medication added: %s %s", med.name, med.dosage)
    return MedicationCreated(medication=med, interaction_warning=warning)


def delete_medication(store: StateStore, medication_id: str) -> None:
    meds = list_medications(store)
    remaining = [m for m in meds if m.id != medication_id]
    if len(remaining) == len(meds):
        raise LookupError("Medication not found")
    store.save_list(MEDICATIONS_KEY, remaining)


def confirm_dose(
    store: StateStore, medication_id: str, data: DoseConfirm, now: datetime | None = None
) -> DoseConfirmed:
    """Log one dose (newest first) and take one pill out of the inventory."""
    meds = list_medications(store)
    med = next((m for m in meds if m.id == medication_id), None)
    if med is None:
        raise LookupError("Medication not found")

    log = MedicationLog(
        medication_id=med.id,
        medication_name=med.name,
        date=now or utcnow(),
        taken=True,
        side_effects=data.side_effects,
        efficacy_rating=data.efficacy_rating,
    )
    store.prepend(MED_LOGS_KEY, MedicationLog, log)

    if med.total_pills and med.total_pills > 0:
        med.total_pills -= 1
        store.save_list(MEDICATIONS_KEY, meds)

    return DoseConfirmed(log=log, medication=med)


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def taken_today(logs: list[MedicationLog], medication_id: str, now: datetime | None = None) -> bool:
    cutoff = start_of_day(now or utcnow())
    return any(log.medication_id == medication_id and log.date >= cutoff for log in logs)


def is_low_inventory(med: Medication) -> bool:
    return med.total_pills is not None and med.total_pills <= LOW_INVENTORY_THRESHOLD


def medication_statuses(store: StateStore, now: datetime | None = None) -> list[MedicationStatus]:
    logs = list_logs(store)
    return [
        MedicationStatus(
            medication=med,
            taken_today=taken_today(logs, med.id, now),
            low_inventory=is_low_inventory(med),
        )
        for med in list_medications(store)
    ]


def medication_info(store: StateStore, medication_id: str) -> str:
    med = get_medication(store, medication_id)
    return ai_service.get_medication_info(med.name)


def export_logs(store: StateStore) -> str:
    lines = []
    for log in list_logs(store):
        side_effects = log.side_effects or "None"
        lines.append(
            f"{log.date.date().isoformat()} - {log.medication_name}: Taken. "
            f"Eff: {log.efficacy_rating}/10. SE: {side_effects}"
        )
    return "\n".join(lines)


def med_compliance(
    medications: list[Medication], logs: list[MedicationLog], now: datetime | None = None
) -> float:
    """Percent of expected doses logged over the past week, capped at 100."""
    if not medications:
        return 0.0
    cutoff = (now or utcnow()) - timedelta(days=COMPLIANCE_WINDOW_DAYS)
    recent = [log for log in logs if log.date > cutoff]
    expected = len(medications) * COMPLIANCE_WINDOW_DAYS
    return min(100.0, len(recent) / expected * 100)
