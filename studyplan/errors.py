"""Exception hierarchy for the plan data core.

Every error carries a machine-readable ``error_type`` so the actions layer can
turn it into a result dict without inspecting messages.
"""


class StudyPlanError(Exception):
    """Base class for all data-core failures."""
    error_type = "error"


class UnauthenticatedError(StudyPlanError):
    """No valid user identifier was supplied."""
    error_type = "unauthenticated"


class InvalidInputError(StudyPlanError):
    """A required argument is missing or malformed. Raised before any I/O."""
    error_type = "invalid_input"


class NotFoundError(StudyPlanError):
    error_type = "not_found"


class PlanNotFoundError(NotFoundError):
    def __init__(self, file_name: str):
        super().__init__(f"Plan '{file_name}' not found")
        self.file_name = file_name


class SubjectNotFoundError(NotFoundError):
    def __init__(self, subject_name: str):
        super().__init__(f"Subject '{subject_name}' not found")
        self.subject_name = subject_name


class TopicNotFoundError(NotFoundError):
    def __init__(self, topic_text: str, subject_name: str):
        super().__init__(f"Topic '{topic_text}' not found in subject '{subject_name}'")
        self.topic_text = topic_text
        self.subject_name = subject_name


class PlanExistsError(StudyPlanError):
    error_type = "already_exists"

    def __init__(self, plan_name: str):
        super().__init__(f"Plan '{plan_name}' already exists")
        self.plan_name = plan_name


class PlanParseError(StudyPlanError):
    """The document exists but is not valid JSON or does not match the schema."""
    error_type = "parse_error"


class StorageError(StudyPlanError):
    """Filesystem failure other than absence."""
    error_type = "storage_error"
