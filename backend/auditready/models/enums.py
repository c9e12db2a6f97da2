"""Closed value sets shared by models, schemas and the scoring service."""
import enum


class RequirementStatus(str, enum.Enum):
    FULFILLED = "fulfilled"
    PARTIALLY_FULFILLED = "partially-fulfilled"
    NOT_FULFILLED = "not-fulfilled"
    NOT_APPLICABLE = "not-applicable"


class StandardType(str, enum.Enum):
    FRAMEWORK = "framework"
    REGULATION = "regulation"
    POLICY = "policy"
    GUIDELINE = "guideline"


class AssessmentStatus(str, enum.Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# status -> statuses reachable from it (besides itself)
ASSESSMENT_TRANSITIONS: dict[AssessmentStatus, set[AssessmentStatus]] = {
    AssessmentStatus.DRAFT: {AssessmentStatus.IN_PROGRESS},
    AssessmentStatus.IN_PROGRESS: {AssessmentStatus.COMPLETED},
    AssessmentStatus.COMPLETED: set(),
}
