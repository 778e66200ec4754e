"""Study plan document model.

Attributes are snake_case; JSON keys on disk keep their camelCase names through
field aliases. Unknown keys are preserved and fields that were never set are
left out on dump, so a document keeps its shape across a read/write cycle.
"""
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

Number = Union[int, float]


class Document(BaseModel):
    """Base for every persisted JSON structure."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_json_data(self) -> dict[str, Any]:
        """Plain JSON-ready dict using on-disk key names."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class Topic(Document):
    """Node of a subject's topic tree."""
    topic_text: str
    sub_topics: Optional[list["Topic"]] = None
    question_count: Optional[int] = None
    is_grouping_topic: Optional[bool] = None
    user_weight: Optional[Number] = Field(None, alias="userWeight")


class Subject(Document):
    subject: str  # subject name
    color: str = ""
    topics: list[Topic] = Field(default_factory=list)
    total_topics_count: Optional[int] = None


class QuestionTally(Document):
    correct: int = 0
    total: int = 0


class PageRange(Document):
    start: int = 0
    end: int = 0


class VideoRange(Document):
    title: str = ""
    start: str = ""  # "hh:mm:ss"
    end: str = ""


class StudyRecord(Document):
    """One logged study session."""
    id: Optional[str] = None  # legacy records may lack an id, see migrate_study_record_ids
    date: str = ""
    subject: str = ""
    topic: str = ""
    study_time: Number = Field(0, alias="studyTime")
    questions: QuestionTally = Field(default_factory=QuestionTally)
    pages: list[PageRange] = Field(default_factory=list)
    videos: list[VideoRange] = Field(default_factory=list)
    notes: str = ""
    category: str = ""
    review_periods: Optional[list[str]] = Field(None, alias="reviewPeriods")
    teoria_finalizada: bool = Field(False, alias="teoriaFinalizada")
    count_in_planning: bool = Field(True, alias="countInPlanning")


class ReviewRecord(Document):
    """Scheduled spaced-repetition revisit of a study record."""
    id: str
    study_record_id: str = Field(..., alias="studyRecordId")
    scheduled_date: str = Field("", alias="scheduledDate")
    status: Literal["pending", "completed", "skipped"] = "pending"
    original_date: str = Field("", alias="originalDate")
    subject: str = ""
    topic: str = ""
    review_period: str = Field("", alias="reviewPeriod")
    completed_date: Optional[str] = Field(None, alias="completedDate")
    ignored: Optional[bool] = None


class SimuladoSubject(Document):
    """Per-subject score breakdown of a practice exam."""
    name: str
    weight: Number = 1
    total_questions: int = Field(0, alias="totalQuestions")
    correct: int = 0
    incorrect: int = 0
    color: str = ""


class SimuladoRecord(Document):
    """Practice exam result."""
    id: str
    date: str = ""
    name: str = ""
    style: str = ""
    banca: str = ""
    time_spent: str = Field("", alias="timeSpent")
    subjects: list[SimuladoSubject] = Field(default_factory=list)
    comments: str = ""


class PlanDocument(Document):
    """Complete study plan, one file per plan."""
    name: str = ""
    observations: str = ""
    cargo: Optional[str] = None
    edital: Optional[str] = None
    icon_url: Optional[str] = Field(None, alias="iconUrl")
    banca: Optional[str] = None
    subjects: list[Subject] = Field(default_factory=list)

    # subject name -> topic text -> expected question count
    banca_topic_weights: Optional[dict[str, dict[str, Number]]] = Field(None, alias="bancaTopicWeights")

    records: list[StudyRecord] = Field(default_factory=list)
    review_records: list[ReviewRecord] = Field(default_factory=list, alias="reviewRecords")
    simulado_records: list[SimuladoRecord] = Field(default_factory=list, alias="simuladoRecords")

    @model_validator(mode="after")
    def always_has_subjects(self) -> "PlanDocument":
        """Mark subjects as set so it is written even when the source omitted it."""
        if "subjects" not in self.model_fields_set:
            self.subjects = []
        return self

    def find_subject(self, subject_name: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.subject == subject_name), None)


def new_plan_skeleton() -> PlanDocument:
    """Minimal document used when a record is saved to a plan that does not exist yet."""
    return PlanDocument(name="", observations="", subjects=[])


class PlanSummary(BaseModel):
    """Row of the plans listing."""
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName")
    name: str
    icon_url: Optional[str] = Field(None, alias="iconUrl")
    banca: Optional[str] = None
    subject_count: int = Field(0, alias="subjectCount")
    topic_count: int = Field(0, alias="topicCount")
