"""Plan store: load, save and delete plan and cycle documents in a user directory."""
import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from studyplan import config
from studyplan.errors import (
    InvalidInputError,
    PlanNotFoundError,
    PlanParseError,
    StorageError,
    UnauthenticatedError,
)
from studyplan.models.cycle import StudyCycle
from studyplan.models.plan import Document, PlanDocument

logger = logging.getLogger(__name__)

PLAN_SUFFIX = ".json"
CYCLE_SUFFIX = ".cycle.json"


def get_user_dir(user_id: Optional[str], data_root: Optional[Path] = None) -> Path:
    """Return (and create) data/<user_id>/. Raises UnauthenticatedError without a usable id."""
    user_id = (user_id or "").strip()
    if not user_id:
        raise UnauthenticatedError("User is not authenticated")
    # Dot-prefixed names are reserved for restore staging directories
    if "/" in user_id or "\\" in user_id or user_id.startswith("."):
        raise UnauthenticatedError(f"Invalid user identifier: {user_id!r}")

    root = data_root if data_root is not None else config.get_data_dir()
    user_dir = root / user_id
    try:
        user_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Failed to create user directory: {e}") from e
    return user_dir


def normalize_plan_file_name(file_name: Optional[str]) -> str:
    """Validate a plan file name, appending .json when it is missing."""
    name = (file_name or "").strip()
    if not name:
        raise InvalidInputError("Plan file name was not provided")
    if "/" in name or "\\" in name or name.startswith("."):
        raise InvalidInputError(f"Invalid plan file name: {name!r}")
    if not name.endswith(PLAN_SUFFIX):
        name = f"{name}{PLAN_SUFFIX}"
    if name.endswith(CYCLE_SUFFIX):
        raise InvalidInputError(f"'{name}' is a study cycle file, not a plan")
    return name


def cycle_file_name(plan_file_name: str) -> str:
    """direito-penal.json -> direito-penal.cycle.json"""
    name = normalize_plan_file_name(plan_file_name)
    return name[: -len(PLAN_SUFFIX)] + CYCLE_SUFFIX


def serialize(data: Union[Document, dict[str, Any]]) -> str:
    """Pretty-printed JSON; the same input always yields the same text."""
    if isinstance(data, Document):
        data = data.to_json_data()
    try:
        return json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Document is not JSON serializable: {e}") from e


def write_text(path: Path, text: str) -> None:
    """Write text atomically (write temp then replace)."""
    temp_path = path.with_suffix(".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(text, encoding="utf-8")
        temp_path.replace(path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise StorageError(f"Failed to write {path.name}: {e}") from e


def write_json(path: Path, data: Union[Document, dict[str, Any]]) -> None:
    write_text(path, serialize(data))


def _read_json_value(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise PlanNotFoundError(path.name) from None
    except OSError as e:
        raise StorageError(f"Failed to read {path.name}: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise PlanParseError(f"{path.name} is not valid JSON: {e}") from e


def _read_json(path: Path) -> dict[str, Any]:
    data = _read_json_value(path)
    if not isinstance(data, dict):
        raise PlanParseError(f"{path.name} does not contain a JSON object")
    return data


def _unlink(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StorageError(f"Failed to delete {path.name}: {e}") from e
    return True


# ---------------------------------------------------------------------------
# Plan documents
# ---------------------------------------------------------------------------

def read_plan_data(user_dir: Path, file_name: str) -> dict[str, Any]:
    """Raw parsed JSON of a plan document."""
    return _read_json(user_dir / normalize_plan_file_name(file_name))


def read_plan_value(user_dir: Path, file_name: str) -> Any:
    """Parsed JSON of a plan file whatever its top-level shape (legacy plans are bare subject arrays)."""
    return _read_json_value(user_dir / normalize_plan_file_name(file_name))


def load_plan(user_dir: Path, file_name: str) -> PlanDocument:
    """
    Load a plan document.

    Raises:
        PlanNotFoundError: the file does not exist
        PlanParseError: invalid JSON or not a plan document
        StorageError: any other filesystem failure
    """
    data = read_plan_data(user_dir, file_name)
    try:
        return PlanDocument.model_validate(data)
    except ValidationError as e:
        raise PlanParseError(f"{file_name} is not a valid plan document: {e}") from e


def save_plan(user_dir: Path, file_name: str, plan: Union[PlanDocument, dict[str, Any]]) -> None:
    """Overwrite the whole plan document."""
    name = normalize_plan_file_name(file_name)
    write_json(user_dir / name, plan)
    logger.debug(f"Saved plan {name}")


def delete_plan_file(user_dir: Path, file_name: str) -> bool:
    """Delete a plan document. Already absent counts as success; returns whether a file was removed."""
    name = normalize_plan_file_name(file_name)
    removed = _unlink(user_dir / name)
    if removed:
        logger.info(f"Deleted plan {name}")
    return removed


def list_plan_files(user_dir: Path) -> list[str]:
    """Plan file names in the user directory, excluding cycle files."""
    if not user_dir.is_dir():
        return []
    return sorted(
        p.name for p in user_dir.glob(f"*{PLAN_SUFFIX}")
        if p.is_file() and not p.name.endswith(CYCLE_SUFFIX)
    )


# ---------------------------------------------------------------------------
# Study cycle documents
# ---------------------------------------------------------------------------

def load_cycle(user_dir: Path, plan_file_name: str) -> Optional[StudyCycle]:
    """Study cycle of a plan, or None if the plan has none yet."""
    path = user_dir / cycle_file_name(plan_file_name)
    try:
        data = _read_json(path)
    except PlanNotFoundError:
        return None
    try:
        return StudyCycle.model_validate(data)
    except ValidationError as e:
        raise PlanParseError(f"{path.name} is not a valid study cycle: {e}") from e


def save_cycle(user_dir: Path, plan_file_name: str, cycle: Union[StudyCycle, dict[str, Any]]) -> None:
    name = cycle_file_name(plan_file_name)
    if not isinstance(cycle, StudyCycle):
        try:
            cycle = StudyCycle.model_validate(cycle)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid study cycle: {e}") from e
    write_json(user_dir / name, cycle)
    logger.debug(f"Saved study cycle {name}")


def delete_cycle(user_dir: Path, plan_file_name: str) -> bool:
    name = cycle_file_name(plan_file_name)
    removed = _unlink(user_dir / name)
    if removed:
        logger.info(f"Deleted study cycle {name}")
    return removed


def list_cycle_files(user_dir: Path) -> list[str]:
    if not user_dir.is_dir():
        return []
    return sorted(p.name for p in user_dir.glob(f"*{CYCLE_SUFFIX}") if p.is_file())
