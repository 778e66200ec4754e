"""Full export, restore and wipe of a user's plan collection."""
import logging
import shutil
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from studyplan.errors import InvalidInputError, PlanParseError, StorageError
from studyplan.models.backup import BackupEntry, BackupPayload
from studyplan.tools.plan_store import (
    PLAN_SUFFIX,
    list_cycle_files,
    list_plan_files,
    read_plan_data,
    serialize,
    write_text,
)

logger = logging.getLogger(__name__)


def export_all(user_dir: Path) -> BackupPayload:
    """
    Read every plan document of the user.

    Plans that cannot be read or parsed are skipped; the export itself never fails
    because of a single bad document.
    """
    entries = []
    for file_name in list_plan_files(user_dir):
        try:
            content = read_plan_data(user_dir, file_name)
        except (PlanParseError, StorageError) as e:
            logger.warning(f"Skipping {file_name} in export: {e}")
            continue
        entries.append(BackupEntry(file_name=file_name, content=content))

    logger.info(f"Exported {len(entries)} plan(s) from {user_dir}")
    return BackupPayload(plans=entries)


def parse_backup(payload: Union[BackupPayload, dict[str, Any]]) -> BackupPayload:
    if isinstance(payload, BackupPayload):
        return payload
    if not isinstance(payload, dict):
        raise InvalidInputError("Backup data must be an object with a 'plans' array")
    try:
        return BackupPayload.model_validate(payload)
    except ValidationError as e:
        raise InvalidInputError(f"Backup data is missing 'plans' array or is invalid: {e}") from e


def restore_all(user_dir: Path, payload: Union[BackupPayload, dict[str, Any]]) -> int:
    """
    Replace every plan and cycle document of the user with the backup's plans.

    The payload is validated and serialized before anything is touched. New
    documents are written to a staging directory which is then swapped in with
    renames, so a failure at any step leaves the previous documents in place.
    Everything in the user directory that is not a plan or cycle document,
    subdirectories included, is carried over.

    Returns:
        Number of plans restored
    """
    backup = parse_backup(payload)
    documents = [(entry.file_name, serialize(entry.content)) for entry in backup.plans]

    staging_dir = user_dir.parent / f".{user_dir.name}.restore"
    previous_dir = user_dir.parent / f".{user_dir.name}.previous"
    for leftover in (staging_dir, previous_dir):
        if leftover.exists():
            shutil.rmtree(leftover)

    staged = False
    try:
        staging_dir.mkdir(parents=True)
        if user_dir.is_dir():
            for path in user_dir.iterdir():
                if path.is_dir():
                    shutil.copytree(path, staging_dir / path.name, dirs_exist_ok=True)
                # Plan/cycle documents and stale temp files are dropped
                elif path.suffix not in (PLAN_SUFFIX, ".tmp"):
                    shutil.copy2(path, staging_dir / path.name)
        for file_name, text in documents:
            write_text(staging_dir / file_name, text)
        staged = True
    except OSError as e:
        raise StorageError(f"Failed to stage backup: {e}") from e
    finally:
        if not staged:
            shutil.rmtree(staging_dir, ignore_errors=True)

    try:
        if user_dir.exists():
            user_dir.rename(previous_dir)
        staging_dir.rename(user_dir)
    except OSError as e:
        if previous_dir.exists() and not user_dir.exists():
            previous_dir.rename(user_dir)
        shutil.rmtree(staging_dir, ignore_errors=True)
        raise StorageError(f"Failed to swap in restored data: {e}") from e

    shutil.rmtree(previous_dir, ignore_errors=True)
    logger.info(f"Restored {len(backup.plans)} plan(s) into {user_dir}")
    return len(backup.plans)


def clear_all(user_dir: Path) -> int:
    """Delete every plan and cycle document of the user. Returns the number of files removed."""
    removed = 0
    for file_name in list_plan_files(user_dir) + list_cycle_files(user_dir):
        try:
            (user_dir / file_name).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {file_name}: {e}") from e
        removed += 1
    logger.info(f"🗑️  Cleared {removed} file(s) from {user_dir}")
    return removed
