"""
Internship Module.

Responsibility:
    University internship placements: students, supervisors and host
    companies, five placement variants with their universities' rules,
    progress tracking, status lifecycle and reports.

Invariants:
    - Student, supervisor, company and internship IDs are unique,
      case-insensitive.
    - A student holds at most one PENDING or ONGOING placement.
    - Status moves only PENDING -> ONGOING -> COMPLETED.
"""

from mgmt_modules.internship.config import InternshipConfig
from mgmt_modules.internship.models import (
    AUCAInternship,
    Internship,
    InternshipType,
    RemoteInternship,
    UKInternship,
    ULKInternship,
    URInternship,
)
from mgmt_modules.internship.records import (
    Company,
    IndustryType,
    Qualification,
    Student,
    Supervisor,
    University,
)
from mgmt_modules.internship.service import InternshipService
from mgmt_modules.internship.workflows import INTERNSHIP_WORKFLOW

__all__ = [
    "Internship",
    "InternshipType",
    "ULKInternship",
    "URInternship",
    "AUCAInternship",
    "UKInternship",
    "RemoteInternship",
    "Student",
    "Supervisor",
    "Company",
    "University",
    "Qualification",
    "IndustryType",
    "InternshipConfig",
    "InternshipService",
    "INTERNSHIP_WORKFLOW",
]
