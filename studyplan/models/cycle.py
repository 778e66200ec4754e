"""Study cycle model (stored beside its plan as <slug>.cycle.json)."""
from typing import Any, Optional, Union

from pydantic import Field

from studyplan.models.plan import Document


class StudyCycle(Document):
    """Rotation of study time across subjects, with weekly goals."""
    study_cycle: Optional[list[Any]] = Field(None, alias="studyCycle")
    study_hours: str = Field("", alias="studyHours")
    weekly_questions_goal: str = Field("", alias="weeklyQuestionsGoal")
    current_progress_minutes: Union[int, float] = Field(0, alias="currentProgressMinutes")
    session_progress_map: dict[str, Union[int, float]] = Field(default_factory=dict, alias="sessionProgressMap")
    reminder_notes: list[Any] = Field(default_factory=list, alias="reminderNotes")
    study_days: list[str] = Field(default_factory=list, alias="studyDays")
