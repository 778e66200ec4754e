"""Upsert, list and delete the record collections embedded in a plan document."""
import logging
import random
import string
import time
from pathlib import Path
from typing import Any, Type, Union

from pydantic import ValidationError

from studyplan.errors import InvalidInputError, PlanNotFoundError
from studyplan.models.plan import (
    Document,
    PlanDocument,
    ReviewRecord,
    SimuladoRecord,
    StudyRecord,
    new_plan_skeleton,
)
from studyplan.tools.plan_store import load_plan, save_plan

logger = logging.getLogger(__name__)

# attribute on PlanDocument -> record model
COLLECTIONS: dict[str, Type[Document]] = {
    "records": StudyRecord,
    "review_records": ReviewRecord,
    "simulado_records": SimuladoRecord,
}

MIGRATED_ID_SUFFIX = "-migrated"
_BASE36 = string.digits + string.ascii_lowercase


def load_plan_or_skeleton(user_dir: Path, file_name: str) -> PlanDocument:
    """Load the plan, or a fresh skeleton if the file does not exist. Corrupt files still raise."""
    try:
        return load_plan(user_dir, file_name)
    except PlanNotFoundError:
        logger.info(f"Plan {file_name} not found, starting from an empty document")
        return new_plan_skeleton()


def _coerce_record(collection: str, record: Union[Document, dict[str, Any]]) -> Document:
    model = COLLECTIONS[collection]
    if isinstance(record, model):
        parsed = record
    else:
        data = record.to_json_data() if isinstance(record, Document) else record
        try:
            parsed = model.model_validate(data)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid {model.__name__}: {e}") from e
    if not parsed.id:
        raise InvalidInputError(f"{model.__name__} has no id")
    return parsed


def upsert_record(
    user_dir: Path,
    file_name: str,
    collection: str,
    record: Union[Document, dict[str, Any]],
) -> bool:
    """
    Replace the record with the same id, or append it.

    Returns:
        True if the record was appended, False if an existing one was replaced
    """
    if collection not in COLLECTIONS:
        raise InvalidInputError(f"Unknown record collection: {collection}")
    parsed = _coerce_record(collection, record)

    plan = load_plan_or_skeleton(user_dir, file_name)
    items = list(getattr(plan, collection))
    index = next((i for i, r in enumerate(items) if r.id == parsed.id), None)
    if index is None:
        items.append(parsed)
    else:
        items[index] = parsed
    # Assign (not mutate) so the collection counts as set and gets written
    setattr(plan, collection, items)

    save_plan(user_dir, file_name, plan)
    logger.info(f"{'Added' if index is None else 'Updated'} {collection} entry {parsed.id} in {file_name}")
    return index is None


def list_records(user_dir: Path, file_name: str, collection: str) -> list:
    """Records of one collection; empty if the plan or the collection is absent."""
    if collection not in COLLECTIONS:
        raise InvalidInputError(f"Unknown record collection: {collection}")
    try:
        plan = load_plan(user_dir, file_name)
    except PlanNotFoundError:
        return []
    return list(getattr(plan, collection))


def delete_record(user_dir: Path, file_name: str, collection: str, record_id: str) -> int:
    """Remove a record by id. Writes only if something was removed. Returns the removed count."""
    if collection not in COLLECTIONS:
        raise InvalidInputError(f"Unknown record collection: {collection}")
    if not record_id:
        raise InvalidInputError("Record id was not provided")
    if collection == "records":
        return delete_study_record(user_dir, file_name, record_id)["records"]

    try:
        plan = load_plan(user_dir, file_name)
    except PlanNotFoundError:
        return 0
    items = getattr(plan, collection)
    kept = [r for r in items if r.id != record_id]
    removed = len(items) - len(kept)
    if removed:
        setattr(plan, collection, kept)
        save_plan(user_dir, file_name, plan)
        logger.info(f"Deleted {collection} entry {record_id} from {file_name}")
    return removed


def delete_study_record(user_dir: Path, file_name: str, record_id: str) -> dict[str, int]:
    """
    Remove a study record and every review scheduled from it.

    Returns:
        dict with counts: {"records": int, "review_records": int}
    """
    if not record_id:
        raise InvalidInputError("Record id was not provided")
    stats = {"records": 0, "review_records": 0}
    try:
        plan = load_plan(user_dir, file_name)
    except PlanNotFoundError:
        return stats

    kept = [r for r in plan.records if r.id != record_id]
    stats["records"] = len(plan.records) - len(kept)
    if not stats["records"]:
        return stats

    plan.records = kept
    kept_reviews = [r for r in plan.review_records if r.study_record_id != record_id]
    stats["review_records"] = len(plan.review_records) - len(kept_reviews)
    if stats["review_records"]:
        plan.review_records = kept_reviews

    save_plan(user_dir, file_name, plan)
    logger.info(
        f"Deleted study record {record_id} from {file_name} "
        f"({stats['review_records']} review(s) removed)"
    )
    return stats


# Convenience wrappers, one per collection

def upsert_study_record(user_dir: Path, file_name: str, record) -> bool:
    return upsert_record(user_dir, file_name, "records", record)


def upsert_review_record(user_dir: Path, file_name: str, record) -> bool:
    return upsert_record(user_dir, file_name, "review_records", record)


def upsert_simulado_record(user_dir: Path, file_name: str, record) -> bool:
    return upsert_record(user_dir, file_name, "simulado_records", record)


def list_study_records(user_dir: Path, file_name: str) -> list[StudyRecord]:
    return list_records(user_dir, file_name, "records")


def list_review_records(user_dir: Path, file_name: str) -> list[ReviewRecord]:
    return list_records(user_dir, file_name, "review_records")


def list_simulado_records(user_dir: Path, file_name: str) -> list[SimuladoRecord]:
    return list_records(user_dir, file_name, "simulado_records")


def delete_review_record(user_dir: Path, file_name: str, record_id: str) -> int:
    return delete_record(user_dir, file_name, "review_records", record_id)


def delete_simulado_record(user_dir: Path, file_name: str, record_id: str) -> int:
    return delete_record(user_dir, file_name, "simulado_records", record_id)


# ---------------------------------------------------------------------------
# Legacy data migration
# ---------------------------------------------------------------------------

def generate_migrated_id() -> str:
    """<epoch ms>-<7 random base36 chars>-migrated"""
    suffix = "".join(random.choices(_BASE36, k=7))
    return f"{int(time.time() * 1000)}-{suffix}{MIGRATED_ID_SUFFIX}"


def migrate_study_record_ids(user_dir: Path, file_name: str) -> int:
    """
    Give every study record without an id a generated one.

    The file is rewritten only if at least one record changed, so running
    this twice leaves the second run as a no-op.

    Returns:
        Number of records that received an id (0 if the plan does not exist)
    """
    try:
        plan = load_plan(user_dir, file_name)
    except PlanNotFoundError:
        return 0

    existing_ids = {r.id for r in plan.records if r.id}
    migrated = 0
    for record in plan.records:
        if record.id:
            continue
        new_id = generate_migrated_id()
        while new_id in existing_ids:
            new_id = generate_migrated_id()
        record.id = new_id
        existing_ids.add(new_id)
        migrated += 1

    if migrated:
        save_plan(user_dir, file_name, plan)
        logger.info(f"Migrated {migrated} study record id(s) in {file_name}")
    return migrated
