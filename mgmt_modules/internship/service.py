"""
Internship Service -- placements, people, search and reports.

Responsibility:
    Owns the session's student, supervisor, company and internship
    registries (IDs unique, case-insensitive), enforces the one-active-
    placement-per-student rule and drives the status workflow.

Failure modes:
    - ``register_internship`` raises ``ActiveInternshipExistsError`` when the
      student already holds a PENDING or ONGOING placement,
      ``DuplicateEntityError`` for a taken internship ID,
      ``EntityValidationError`` when the variant's placement rules fail and
      ``InvalidArgumentError`` for invalid fields.  Nothing is registered
      on failure.
    - ``advance_status`` raises ``InvalidStatusTransitionError`` for an
      action the current status does not allow.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from mgmt_kernel.clock import Clock, SystemClock
from mgmt_kernel.exceptions import ActiveInternshipExistsError, InvalidArgumentError
from mgmt_kernel.logging_config import get_logger
from mgmt_kernel.registry import Registry, UniqueKey
from mgmt_kernel.sample_data import load_package_yaml, require_section
from mgmt_kernel.validation import require_choice, require_text
from mgmt_modules.internship.config import InternshipConfig
from mgmt_modules.internship.models import (
    INTERNSHIP_CLASSES,
    UNIVERSITY_INTERNSHIPS,
    Internship,
    InternshipType,
)
from mgmt_modules.internship.records import (
    Company,
    IndustryType,
    Qualification,
    Student,
    Supervisor,
    University,
    require_member,
)
from mgmt_modules.internship.workflows import ACTIVE_STATES, INTERNSHIP_WORKFLOW, PENDING

logger = get_logger("modules.internship.service")

STUDENT_ID_KEY = "Student ID"
SUPERVISOR_ID_KEY = "Supervisor ID"
COMPANY_ID_KEY = "Company ID"
INTERNSHIP_ID_KEY = "Internship ID"


class InternshipService:
    """
    Session-scoped internship operations.

    Contract:
        Internships created here share the service's ``Clock`` and
        ``InternshipConfig``.  Students, supervisors and companies are
        referenced by internships, never copied.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        config: InternshipConfig | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or InternshipConfig.with_defaults()
        self._students: Registry[Student] = Registry(
            "student", (UniqueKey(STUDENT_ID_KEY, lambda s: s.student_id),)
        )
        self._supervisors: Registry[Supervisor] = Registry(
            "supervisor", (UniqueKey(SUPERVISOR_ID_KEY, lambda s: s.supervisor_id),)
        )
        self._companies: Registry[Company] = Registry(
            "company", (UniqueKey(COMPANY_ID_KEY, lambda c: c.company_id),)
        )
        self._internships: Registry[Internship] = Registry(
            "internship", (UniqueKey(INTERNSHIP_ID_KEY, lambda i: i.internship_id),)
        )

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def config(self) -> InternshipConfig:
        return self._config

    # =========================================================================
    # People and companies
    # =========================================================================

    def register_student(self, student_id: str, full_name: str,
                         university: University | str, email: str) -> Student:
        student = Student(student_id, full_name, university, email)
        self._students.add(student)
        logger.info(
            "student_registered",
            extra={"student_id": student.student_id, "university": student.university},
        )
        return student

    def register_supervisor(self, supervisor_id: str, full_name: str,
                            qualification: Qualification | str, email: str) -> Supervisor:
        supervisor = Supervisor(supervisor_id, full_name, qualification, email)
        self._supervisors.add(supervisor)
        logger.info(
            "supervisor_registered",
            extra={
                "supervisor_id": supervisor.supervisor_id,
                "qualification": supervisor.qualification,
            },
        )
        return supervisor

    def register_company(self, company_id: str, name: str,
                         industry_type: IndustryType | str, location: str) -> Company:
        company = Company(company_id, name, industry_type, location)
        self._companies.add(company)
        logger.info(
            "company_registered",
            extra={"company_id": company.company_id, "industry_type": company.industry_type},
        )
        return company

    def is_student_id_taken(self, student_id: str) -> bool:
        return self._students.is_taken(STUDENT_ID_KEY, student_id)

    def is_supervisor_id_taken(self, supervisor_id: str) -> bool:
        return self._supervisors.is_taken(SUPERVISOR_ID_KEY, supervisor_id)

    def is_company_id_taken(self, company_id: str) -> bool:
        return self._companies.is_taken(COMPANY_ID_KEY, company_id)

    def is_internship_id_taken(self, internship_id: str) -> bool:
        return self._internships.is_taken(INTERNSHIP_ID_KEY, internship_id)

    def students(self) -> list[Student]:
        return self._students.all()

    def supervisors(self) -> list[Supervisor]:
        return self._supervisors.all()

    def companies(self) -> list[Company]:
        return self._companies.all()

    def get_student(self, position: int) -> Student:
        return self._students.get(position, "student")

    def get_supervisor(self, position: int) -> Supervisor:
        return self._supervisors.get(position, "supervisor")

    def get_company(self, position: int) -> Company:
        return self._companies.get(position, "company")

    # =========================================================================
    # Internships
    # =========================================================================

    def has_active_internship(self, student: Student) -> bool:
        return any(
            i.student.student_id.casefold() == student.student_id.casefold()
            and i.status in ACTIVE_STATES
            for i in self._internships
        )

    def available_types(self, student: Student) -> tuple[InternshipType, InternshipType]:
        """The student's university placement and the remote option."""
        return UNIVERSITY_INTERNSHIPS[student.university], InternshipType.REMOTE

    def register_internship(
        self,
        kind: InternshipType | str,
        internship_id: str,
        student: Student,
        company_name: str,
        supervisor: Supervisor,
        start_date: date,
        end_date: date,
        **fields: Any,
    ) -> Internship:
        """
        Build and register a PENDING placement.

        ``fields`` are the variant extras: ``secondary_supervisor`` (UR),
        ``university_supervisor`` and ``english_proficiency_cert`` (UK),
        ``remote_access_url`` (Remote).
        """
        internship_type = require_choice(
            kind, InternshipType, f"Unknown internship type: {kind}", "internship_type"
        )
        if self.has_active_internship(student):
            logger.warning(
                "internship_active_rejected",
                extra={"student_id": student.student_id},
            )
            raise ActiveInternshipExistsError(student.student_id)

        cls = INTERNSHIP_CLASSES[internship_type]
        try:
            internship = cls(
                internship_id,
                student,
                company_name,
                supervisor,
                start_date,
                end_date,
                PENDING,
                clock=self._clock,
                config=self._config,
                **fields,
            )
        except TypeError as exc:
            raise InvalidArgumentError(
                f"Invalid fields for {internship_type.value} internship: {exc}"
            ) from exc

        self._internships.add(internship)
        logger.info(
            "internship_registered",
            extra={
                "internship_id": internship.internship_id,
                "internship_type": internship_type,
                "student_id": student.student_id,
                "weeks": internship.duration_in_weeks(),
            },
        )
        return internship

    def internships(self) -> list[Internship]:
        return self._internships.all()

    def get_internship(self, position: int) -> Internship:
        return self._internships.get(position, "internship")

    def find_internship(self, internship_id: str) -> Internship | None:
        return self._internships.find_by(INTERNSHIP_ID_KEY, internship_id)

    def search_by_student_name(self, term: str) -> list[Internship]:
        """Case-insensitive substring match on the student's full name."""
        needle = require_text(term, "Search term cannot be empty", "term").casefold()
        return self._internships.filter(
            lambda i: needle in i.student.full_name.casefold()
        )

    def search_by_university(self, university: University | str) -> list[Internship]:
        wanted = require_member(university, University, "University", "university")
        return self._internships.filter(lambda i: i.student.university is wanted)

    def allowed_actions(self, internship: Internship) -> tuple[str, ...]:
        return INTERNSHIP_WORKFLOW.allowed_actions(internship.status)

    def advance_status(self, internship: Internship, action: str) -> str:
        """Apply ``start`` or ``complete`` and return the new status."""
        previous = internship.status
        internship.status = INTERNSHIP_WORKFLOW.apply(previous, action)
        logger.info(
            "internship_status_changed",
            extra={
                "internship_id": internship.internship_id,
                "action": action,
                "from_status": previous,
                "to_status": internship.status,
            },
        )
        return internship.status

    def track_progress(self, internship: Internship, **entry: Any) -> str:
        message = internship.track_progress(**entry)
        logger.info(
            "internship_progress_tracked",
            extra={
                "internship_id": internship.internship_id,
                "internship_type": internship.internship_kind,
            },
        )
        return message

    def detailed_reports(self) -> list[str]:
        return [i.generate_detailed_report() for i in self._internships]

    # =========================================================================
    # Seeding
    # =========================================================================

    def seed_sample_data(self) -> None:
        """Register the bundled sample students, supervisors and companies."""
        data = load_package_yaml("mgmt_modules.internship", "sample_data.yaml")
        for row in require_section(data, "students"):
            self.register_student(
                row["student_id"], row["full_name"], row["university"], row["email"]
            )
        for row in require_section(data, "supervisors"):
            self.register_supervisor(
                row["supervisor_id"], row["full_name"], row["qualification"], row["email"]
            )
        for row in require_section(data, "companies"):
            self.register_company(
                row["company_id"], row["name"], row["industry_type"], row["location"]
            )
        logger.info(
            "internship_sample_data_seeded",
            extra={
                "students": len(self._students),
                "supervisors": len(self._supervisors),
                "companies": len(self._companies),
            },
        )
