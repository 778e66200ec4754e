"""Turn a parsed study guide into a plan document and store it."""
import logging
import re
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from studyplan.errors import InvalidInputError
from studyplan.models.guide import ParsedGuide
from studyplan.models.plan import PlanDocument, Subject
from studyplan.tools.plan_store import PLAN_SUFFIX, save_plan
from studyplan.tools.topics import count_topics, extract_banca_topic_weights

logger = logging.getLogger(__name__)

SUBJECT_COLORS = ["#ef4444", "#3b82f6", "#22c55e", "#eab308", "#8b5cf6", "#ec4899"]


def slugify(text: str) -> str:
    """Safe file stem: 'PF 2024 - Agente!' -> 'pf-2024-agente'. Non-ASCII letters are dropped."""
    if not text:
        return ""
    slug = re.sub(r"\s+", "-", text.lower().strip())
    slug = re.sub(r"[^\w\-]+", "", slug, flags=re.ASCII)
    return re.sub(r"--+", "-", slug)


def build_plan_from_guide(guide: Union[ParsedGuide, dict[str, Any]]) -> PlanDocument:
    """Colour the subjects, count their topics and seed the board's topic weights."""
    if not isinstance(guide, ParsedGuide):
        try:
            guide = ParsedGuide.model_validate(guide)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid guide data: {e}") from e

    subjects = []
    for index, parsed in enumerate(guide.subjects):
        subjects.append(Subject(
            subject=parsed.subject,
            topics=parsed.topics,
            total_topics_count=count_topics(parsed.topics),
            color=SUBJECT_COLORS[index % len(SUBJECT_COLORS)],
        ))

    fields: dict[str, Any] = {
        "name": guide.name,
        "cargo": guide.cargo,
        "edital": guide.edital,
        "icon_url": guide.icon_url,
    }
    if guide.banca is not None:
        fields["banca"] = guide.banca
    return PlanDocument(
        **fields,
        subjects=subjects,
        banca_topic_weights=extract_banca_topic_weights(subjects),
    )


def import_guide(user_dir: Path, guide: Union[ParsedGuide, dict[str, Any]]) -> tuple[str, PlanDocument]:
    """
    Build a plan from a guide and write it as <slug>.json, replacing any plan with that name.

    Returns:
        (file_name, plan)
    """
    plan = build_plan_from_guide(guide)
    slug = slugify(plan.name)
    if not slug:
        raise InvalidInputError("Guide has no usable name")

    file_name = f"{slug}{PLAN_SUFFIX}"
    save_plan(user_dir, file_name, plan)
    logger.info(
        f"✅ Imported guide '{plan.name}' as {file_name} "
        f"({len(plan.subjects)} subjects, {sum(s.total_topics_count or 0 for s in plan.subjects)} topics)"
    )
    return file_name, plan
