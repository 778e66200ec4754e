"""Topic tree helpers and the topic weight editor."""
import logging
from numbers import Real
from pathlib import Path
from typing import Iterator, Optional, Union

from studyplan.errors import InvalidInputError, SubjectNotFoundError, TopicNotFoundError
from studyplan.models.plan import Subject, Topic
from studyplan.tools.plan_store import load_plan, save_plan

logger = logging.getLogger(__name__)


def iter_topics(topics: Optional[list[Topic]]) -> Iterator[Topic]:
    """Depth-first, pre-order walk over a topic tree."""
    for topic in topics or []:
        yield topic
        yield from iter_topics(topic.sub_topics)


def find_topic(topics: Optional[list[Topic]], topic_text: str) -> Optional[Topic]:
    """First node whose text matches exactly. Duplicate labels: the first in pre-order wins."""
    return next((t for t in iter_topics(topics) if t.topic_text == topic_text), None)


def count_topics(topics: Optional[list[Topic]]) -> int:
    """Number of nodes in the tree, grouping nodes included."""
    return sum(1 for _ in iter_topics(topics))


def extract_banca_topic_weights(subjects: list[Subject]) -> dict[str, dict[str, int]]:
    """
    Seed weights from the board's historical question counts.

    Returns:
        {subject name: {topic text: question_count or 0}} over every node of each tree
    """
    weights: dict[str, dict[str, int]] = {}
    for subject in subjects:
        subject_weights = weights.setdefault(subject.subject, {})
        for topic in iter_topics(subject.topics):
            if topic.topic_text:
                subject_weights[topic.topic_text] = topic.question_count or 0
    return weights


def set_topic_weight(
    user_dir: Path,
    file_name: str,
    subject_name: str,
    topic_text: str,
    weight: Union[int, float],
) -> Topic:
    """
    Set the user weight of a topic and save the plan.

    Raises:
        InvalidInputError: missing subject/topic or non-numeric weight
        SubjectNotFoundError: no subject with that exact name
        TopicNotFoundError: no node with that exact text (document left unchanged)
    """
    if not subject_name or not topic_text:
        raise InvalidInputError("Subject name and topic text are required")
    if weight is None or isinstance(weight, bool) or not isinstance(weight, Real):
        raise InvalidInputError(f"Weight must be a number, got {weight!r}")

    plan = load_plan(user_dir, file_name)
    subject = plan.find_subject(subject_name)
    if subject is None:
        raise SubjectNotFoundError(subject_name)

    topic = find_topic(subject.topics, topic_text)
    if topic is None:
        raise TopicNotFoundError(topic_text, subject_name)

    topic.user_weight = weight
    save_plan(user_dir, file_name, plan)
    logger.info(f"Set weight of '{topic_text}' ({subject_name}) to {weight} in {file_name}")
    return topic
