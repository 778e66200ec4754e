"""Request-scoped entry points for the study plan data core.

Every action takes the authenticated user's id (supplied by the caller's auth
layer) and returns a dict:

    {"status": "success", ...payload}
    {"status": "error", "error_type": <code>, "message": <text>}

Failures never propagate as exceptions, so a UI can show the message directly.
"""
import logging
from pathlib import Path
from typing import Any, Optional

from studyplan.errors import InvalidInputError, NotFoundError, StudyPlanError
from studyplan.tools import backup, guide_import, plan_lifecycle, plan_store, records, topics

logger = logging.getLogger(__name__)


def _success(**payload) -> dict:
    return {"status": "success", **payload}


def _failure(action: str, error: Exception) -> dict:
    """Log a failure and convert it to an error result."""
    if isinstance(error, StudyPlanError):
        if isinstance(error, (NotFoundError, InvalidInputError)):
            logger.warning(f"{action}: {error}")
        else:
            logger.error(f"{action} failed: {error}")
        return {"status": "error", "error_type": error.error_type, "message": str(error)}

    logger.error(f"{action} failed with an I/O error: {error}")
    return {
        "status": "error",
        "error_type": "storage_error",
        "message": f"{action} failed: could not access the data directory",
    }


# ============================================================================
# PLANS
# ============================================================================

def list_plans(user_id: Optional[str], data_root: Optional[Path] = None) -> dict:
    """
    List the user's plan files (cycle files excluded).

    Returns:
        dict with:
        - status: "success" or "error"
        - files: sorted plan file names
    """
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(files=plan_store.list_plan_files(user_dir))
    except (StudyPlanError, OSError) as e:
        return _failure("list_plans", e)


def list_plan_summaries(user_id: Optional[str], data_root: Optional[Path] = None) -> dict:
    """
    Summaries for the plans page.

    Returns:
        dict with:
        - status: "success" or "error"
        - plans: list of {fileName, name, iconUrl, banca, subjectCount, topicCount}
    """
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        summaries = plan_lifecycle.list_plan_summaries(user_dir)
        return _success(plans=[s.model_dump(by_alias=True) for s in summaries])
    except (StudyPlanError, OSError) as e:
        return _failure("list_plan_summaries", e)


def get_plan(user_id: Optional[str], file_name: str, data_root: Optional[Path] = None) -> dict:
    """Raw content of one plan document, under "plan"."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(plan=plan_store.read_plan_data(user_dir, file_name))
    except (StudyPlanError, OSError) as e:
        return _failure("get_plan", e)


def create_plan(
    user_id: Optional[str],
    name: str,
    observations: str = "",
    cargo: str = "",
    edital: str = "",
    icon_filename: Optional[str] = None,
    icon_content: Optional[bytes] = None,
    data_root: Optional[Path] = None,
    public_dir: Optional[Path] = None,
) -> dict:
    """
    Create an empty plan, optionally with an icon.

    Returns:
        dict with:
        - status: "success" or "error"
        - file_name: the new plan's file name
        - error_type: "already_exists" when the name is taken
    """
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        file_name = plan_lifecycle.create_plan(
            user_dir,
            name,
            observations=observations,
            cargo=cargo,
            edital=edital,
            icon_filename=icon_filename,
            icon_content=icon_content,
            public_dir=public_dir,
        )
        return _success(file_name=file_name)
    except (StudyPlanError, OSError) as e:
        return _failure("create_plan", e)


def update_plan(
    user_id: Optional[str],
    file_name: str,
    fields: dict[str, Any],
    data_root: Optional[Path] = None,
) -> dict:
    """Shallow-merge top-level fields into a plan."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        plan_lifecycle.update_plan(user_dir, file_name, fields)
        return _success()
    except (StudyPlanError, OSError) as e:
        return _failure("update_plan", e)


def delete_plan(user_id: Optional[str], file_name: str, data_root: Optional[Path] = None) -> dict:
    """Delete a plan and its study cycle. A missing plan is an error."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        plan_lifecycle.delete_plan(user_dir, file_name)
        return _success()
    except (StudyPlanError, OSError) as e:
        return _failure("delete_plan", e)


def upload_image(
    user_id: Optional[str],
    base_name: str,
    image_filename: str,
    image_content: bytes,
    data_root: Optional[Path] = None,
    public_dir: Optional[Path] = None,
) -> dict:
    """Store a plan icon; returns its URL under "icon_url"."""
    try:
        plan_store.get_user_dir(user_id, data_root)
        icon_url = plan_lifecycle.save_plan_icon(public_dir, base_name, image_filename, image_content)
        return _success(icon_url=icon_url)
    except (StudyPlanError, OSError) as e:
        return _failure("upload_image", e)


def import_guide(user_id: Optional[str], guide: dict[str, Any], data_root: Optional[Path] = None) -> dict:
    """
    Create a plan from a scraped study guide.

    Returns:
        dict with:
        - status: "success" or "error"
        - file_name: plan file written
        - plan: the plan content
        - message: summary message
    """
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        file_name, plan = guide_import.import_guide(user_dir, guide)
        return _success(
            file_name=file_name,
            plan=plan.to_json_data(),
            message=f"Guide imported: {len(plan.subjects)} subjects",
        )
    except (StudyPlanError, OSError) as e:
        return _failure("import_guide", e)


# ============================================================================
# STUDY CYCLE
# ============================================================================

def save_study_cycle(
    user_id: Optional[str],
    file_name: str,
    cycle: dict[str, Any],
    data_root: Optional[Path] = None,
) -> dict:
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        plan_store.save_cycle(user_dir, file_name, cycle)
        return _success()
    except (StudyPlanError, OSError) as e:
        return _failure("save_study_cycle", e)


def get_study_cycle(user_id: Optional[str], file_name: str, data_root: Optional[Path] = None) -> dict:
    """The plan's study cycle under "cycle", or None if it has none."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        cycle = plan_store.load_cycle(user_dir, file_name)
        return _success(cycle=cycle.to_json_data() if cycle is not None else None)
    except (StudyPlanError, OSError) as e:
        return _failure("get_study_cycle", e)


def delete_study_cycle(user_id: Optional[str], file_name: str, data_root: Optional[Path] = None) -> dict:
    """Idempotent: deleting a missing cycle succeeds with deleted=False."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(deleted=plan_store.delete_cycle(user_dir, file_name))
    except (StudyPlanError, OSError) as e:
        return _failure("delete_study_cycle", e)


# ============================================================================
# RECORDS
# ============================================================================

def _save_record(action: str, collection: str, user_id, file_name, record, data_root) -> dict:
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        created = records.upsert_record(user_dir, file_name, collection, record)
        return _success(created=created)
    except (StudyPlanError, OSError) as e:
        return _failure(action, e)


def _get_records(action: str, collection: str, user_id, file_name, data_root) -> dict:
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        items = records.list_records(user_dir, file_name, collection)
        return _success(records=[r.to_json_data() for r in items])
    except (StudyPlanError, OSError) as e:
        return _failure(action, e)


def save_study_record(user_id: Optional[str], file_name: str, record: dict[str, Any],
                      data_root: Optional[Path] = None) -> dict:
    """Insert or replace (by id) a study record. "created" tells which happened."""
    return _save_record("save_study_record", "records", user_id, file_name, record, data_root)


def get_study_records(user_id: Optional[str], file_name: str, data_root: Optional[Path] = None) -> dict:
    return _get_records("get_study_records", "records", user_id, file_name, data_root)


def delete_study_record(user_id: Optional[str], file_name: str, record_id: str,
                        data_root: Optional[Path] = None) -> dict:
    """
    Delete a study record and the reviews scheduled from it.

    Returns:
        dict with:
        - status: "success" or "error"
        - deleted: study records removed (0 if it did not exist)
        - reviews_deleted: review records removed with it
    """
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        stats = records.delete_study_record(user_dir, file_name, record_id)
        return _success(deleted=stats["records"], reviews_deleted=stats["review_records"])
    except (StudyPlanError, OSError) as e:
        return _failure("delete_study_record", e)


def save_review_record(user_id: Optional[str], file_name: str, record: dict[str, Any],
                       data_root: Optional[Path] = None) -> dict:
    return _save_record("save_review_record", "review_records", user_id, file_name, record, data_root)


def get_review_records(user_id: Optional[str], file_name: str, data_root: Optional[Path] = None) -> dict:
    return _get_records("get_review_records", "review_records", user_id, file_name, data_root)


def delete_review_record(user_id: Optional[str], file_name: str, record_id: str,
                         data_root: Optional[Path] = None) -> dict:
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(deleted=records.delete_review_record(user_dir, file_name, record_id))
    except (StudyPlanError, OSError) as e:
        return _failure("delete_review_record", e)


def save_simulado_record(user_id: Optional[str], file_name: str, record: dict[str, Any],
                         data_root: Optional[Path] = None) -> dict:
    return _save_record("save_simulado_record", "simulado_records", user_id, file_name, record, data_root)


# Editing a practice exam goes through the same upsert
def update_simulado_record(user_id: Optional[str], file_name: str, record: dict[str, Any],
                           data_root: Optional[Path] = None) -> dict:
    return _save_record("update_simulado_record", "simulado_records", user_id, file_name, record, data_root)


def get_simulado_records(user_id: Optional[str], file_name: str, data_root: Optional[Path] = None) -> dict:
    return _get_records("get_simulado_records", "simulado_records", user_id, file_name, data_root)


def delete_simulado_record(user_id: Optional[str], file_name: str, record_id: str,
                           data_root: Optional[Path] = None) -> dict:
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(deleted=records.delete_simulado_record(user_dir, file_name, record_id))
    except (StudyPlanError, OSError) as e:
        return _failure("delete_simulado_record", e)


def migrate_study_record_ids(user_id: Optional[str], file_name: str, data_root: Optional[Path] = None) -> dict:
    """Assign ids to legacy study records. "migrated" is the number of records changed."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(migrated=records.migrate_study_record_ids(user_dir, file_name))
    except (StudyPlanError, OSError) as e:
        return _failure("migrate_study_record_ids", e)


# ============================================================================
# TOPIC WEIGHTS
# ============================================================================

def update_topic_weight(
    user_id: Optional[str],
    file_name: str,
    subject_name: str,
    topic_text: str,
    weight: float,
    data_root: Optional[Path] = None,
) -> dict:
    """Set the user weight of a topic (exact name match on subject and topic)."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        topics.set_topic_weight(user_dir, file_name, subject_name, topic_text, weight)
        return _success()
    except (StudyPlanError, OSError) as e:
        return _failure("update_topic_weight", e)


# ============================================================================
# BACKUP
# ============================================================================

def export_full_backup(user_id: Optional[str], data_root: Optional[Path] = None) -> dict:
    """
    Export every plan.

    Returns:
        dict with:
        - status: "success" or "error"
        - backup: {"plans": [{"fileName": str, "content": dict}, ...]}
    """
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(backup=backup.export_all(user_dir).to_json_data())
    except (StudyPlanError, OSError) as e:
        return _failure("export_full_backup", e)


def restore_full_backup(user_id: Optional[str], backup_data: dict[str, Any],
                        data_root: Optional[Path] = None) -> dict:
    """Replace all of the user's plans with the backup. "restored" is the plan count."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(restored=backup.restore_all(user_dir, backup_data))
    except (StudyPlanError, OSError) as e:
        return _failure("restore_full_backup", e)


def clear_all_data(user_id: Optional[str], data_root: Optional[Path] = None) -> dict:
    """Delete every plan and cycle file of the user. No undo."""
    try:
        user_dir = plan_store.get_user_dir(user_id, data_root)
        return _success(deleted=backup.clear_all(user_dir))
    except (StudyPlanError, OSError) as e:
        return _failure("clear_all_data", e)
