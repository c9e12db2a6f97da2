from .base import Base
from .enums import AssessmentStatus, RequirementStatus, StandardType
from .standard import Standard
from .requirement import Requirement, RequirementHistory, RequirementVariable
from .assessment import Assessment, assessment_standards
