"""Create, update, delete and list plans; store plan icons."""
import logging
import re
import time
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from studyplan import config
from studyplan.errors import (
    InvalidInputError,
    PlanExistsError,
    PlanNotFoundError,
    PlanParseError,
    StorageError,
)
from studyplan.models.plan import PlanDocument, PlanSummary
from studyplan.tools.plan_store import (
    PLAN_SUFFIX,
    delete_cycle,
    delete_plan_file,
    list_plan_files,
    normalize_plan_file_name,
    read_plan_data,
    read_plan_value,
    save_plan,
)
from studyplan.tools.topics import count_topics

logger = logging.getLogger(__name__)

# Legacy files that live in the data directory but are not plans
NON_PLAN_FILES = {"users.json", "study_records.json"}


def sanitize_plan_name(name: str) -> str:
    """'Direito  Penal ' -> 'direito-penal'"""
    return re.sub(r"\s+", "-", name.strip().lower())


def plan_file_name_for(name: str) -> str:
    return f"{sanitize_plan_name(name)}{PLAN_SUFFIX}"


def save_plan_icon(
    public_dir: Optional[Path],
    base_name: str,
    original_filename: str,
    content: bytes,
) -> str:
    """
    Store an icon under <public>/plan-icons/<base>-<epoch ms><ext>.

    Returns:
        Root-relative URL of the stored icon, e.g. /plan-icons/direito-penal-1718000000000.png
    """
    if not content:
        raise InvalidInputError("No image file provided")
    if not base_name or not base_name.strip():
        raise InvalidInputError("Base name for the image was not provided")

    sanitized = sanitize_plan_name(base_name)
    if "/" in sanitized or "\\" in sanitized:
        raise InvalidInputError(f"Invalid base name for the image: {base_name!r}")

    icons_dir = (public_dir if public_dir is not None else config.get_public_dir()) / config.ICON_SUBDIR
    extension = Path(original_filename or "").suffix
    icon_name = f"{sanitized}-{int(time.time() * 1000)}{extension}"
    try:
        icons_dir.mkdir(parents=True, exist_ok=True)
        (icons_dir / icon_name).write_bytes(content)
    except OSError as e:
        raise StorageError(f"Failed to save the image: {e}") from e

    logger.info(f"Saved plan icon {icon_name}")
    return f"/{config.ICON_SUBDIR}/{icon_name}"


def create_plan(
    user_dir: Path,
    name: str,
    observations: str = "",
    cargo: str = "",
    edital: str = "",
    icon_filename: Optional[str] = None,
    icon_content: Optional[bytes] = None,
    public_dir: Optional[Path] = None,
) -> str:
    """
    Create an empty plan document.

    Returns:
        The new plan's file name (its identity)

    Raises:
        InvalidInputError: empty name
        PlanExistsError: a plan with the same file name already exists
    """
    if not name or not name.strip():
        raise InvalidInputError("Plan name cannot be empty")

    file_name = plan_file_name_for(name)
    normalize_plan_file_name(file_name)
    if (user_dir / file_name).exists():
        raise PlanExistsError(name.strip())

    fields: dict[str, Any] = {
        "name": name.strip(),
        "observations": (observations or "").strip(),
        "cargo": (cargo or "").strip(),
        "edital": (edital or "").strip(),
    }
    if icon_content:
        fields["icon_url"] = save_plan_icon(public_dir, name, icon_filename or "", icon_content)

    plan = PlanDocument(**fields, subjects=[], records=[], review_records=[])
    save_plan(user_dir, file_name, plan)
    logger.info(f"✅ Created plan {file_name}")
    return file_name


def _to_alias_keys(fields: dict[str, Any]) -> dict[str, Any]:
    """Accept attribute names (icon_url) as well as on-disk keys (iconUrl)."""
    mapped = {}
    for key, value in fields.items():
        field = PlanDocument.model_fields.get(key)
        mapped[field.alias if field is not None and field.alias else key] = value
    return mapped


def update_plan(user_dir: Path, file_name: str, fields: dict[str, Any]) -> PlanDocument:
    """
    Shallow-merge the given top-level fields over the stored plan.

    Nested structures such as subjects are replaced wholesale, not merged.
    """
    if not isinstance(fields, dict):
        raise InvalidInputError("Plan update must be a mapping of fields")
    current = read_plan_data(user_dir, file_name)
    merged = {**current, **_to_alias_keys(fields)}
    try:
        plan = PlanDocument.model_validate(merged)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid plan update: {e}") from e

    save_plan(user_dir, file_name, plan)
    logger.info(f"Updated plan {normalize_plan_file_name(file_name)}: {', '.join(sorted(fields))}")
    return plan


def delete_plan(user_dir: Path, file_name: str) -> None:
    """
    Delete a plan and its study cycle.

    Unlike the store-level delete, a missing plan is reported (PlanNotFoundError).
    """
    name = normalize_plan_file_name(file_name)
    if not delete_plan_file(user_dir, name):
        raise PlanNotFoundError(name)
    delete_cycle(user_dir, name)


def _legacy_plan_name(file_name: str) -> str:
    """direito-penal.json -> Direito Penal"""
    stem = file_name[: -len(PLAN_SUFFIX)]
    return " ".join(word[:1].upper() + word[1:] for word in stem.split("-"))


def _load_plan_for_summary(user_dir: Path, file_name: str) -> PlanDocument:
    data = read_plan_value(user_dir, file_name)
    if isinstance(data, list):
        data = {"name": _legacy_plan_name(file_name), "observations": "", "subjects": data}
    elif not isinstance(data, dict):
        data = {"name": _legacy_plan_name(file_name), "observations": "", "subjects": []}
    try:
        return PlanDocument.model_validate(data)
    except ValidationError as e:
        raise PlanParseError(f"{file_name} is not a valid plan document: {e}") from e


def list_plan_summaries(user_dir: Path) -> list[PlanSummary]:
    """Summary of every readable plan; unreadable files are skipped."""
    summaries = []
    for file_name in list_plan_files(user_dir):
        if file_name.lower() in NON_PLAN_FILES:
            continue
        try:
            plan = _load_plan_for_summary(user_dir, file_name)
        except (PlanParseError, StorageError) as e:
            logger.warning(f"Skipping {file_name}: {e}")
            continue
        # Subjects repeated by name count once, the last one wins
        subjects = list({s.subject: s for s in plan.subjects}.values())
        summaries.append(PlanSummary(
            file_name=file_name,
            name=plan.name or file_name[: -len(PLAN_SUFFIX)].upper(),
            icon_url=plan.icon_url,
            banca=plan.banca,
            subject_count=len(subjects),
            topic_count=sum(count_topics(s.topics) for s in subjects),
        ))
    return summaries
