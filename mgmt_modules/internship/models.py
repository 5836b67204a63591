"""
Internship Domain Models.

Responsibility:
    The placement hierarchy: an abstract ``Internship`` holding the shared,
    validated placement fields and five concrete variants.  Each variant
    imposes its university's placement rules at construction, keeps its own
    progress log and renders its own report section.

Invariants:
    - ``end_date`` is never before ``start_date``.
    - ``status`` is one of the internship workflow states.
    - Construction runs ``validation_errors()``; any error aborts it with
      ``EntityValidationError``, so no rule-breaking placement escapes.
    - Durations are whole units: weeks are ``days // 7``; months are whole
      calendar months (a partial final month does not count).

Failure modes:
    - ``InvalidArgumentError`` from any setter.
    - ``EntityValidationError`` when a variant's placement rules fail.

Placement rules:

    ULK     student from ULK, >= min_weeks, supervisor Masters or PhD
    UR      student from UR, ur_min_months..ur_max_months
    AUCA    student from AUCA
    UK      student from UK, university supervisor and English certificate
    Remote  any university, >= min_weeks, remote access URL
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import Any, ClassVar

from mgmt_kernel.clock import Clock, SystemClock
from mgmt_kernel.exceptions import EntityValidationError, InvalidArgumentError
from mgmt_kernel.formatting import fmt_date_iso
from mgmt_kernel.logging_config import get_logger
from mgmt_kernel.periods import months_between, weeks_between
from mgmt_kernel.validation import require_date, require_non_negative_int, require_text
from mgmt_modules.internship.config import InternshipConfig
from mgmt_modules.internship.records import Student, Supervisor, University
from mgmt_modules.internship.workflows import INTERNSHIP_WORKFLOW, PENDING

logger = get_logger("modules.internship.models")

REPORT_RULE = "=" * 39


class InternshipType(Enum):
    ULK = "ULK"
    UR = "UR"
    AUCA = "AUCA"
    UK = "UK"
    REMOTE = "Remote"


def _require_supervisor(value: Any, message: str, field: str) -> Supervisor:
    if not isinstance(value, Supervisor):
        raise InvalidArgumentError(message, field=field)
    return value


def _same_person(a: Supervisor, b: Supervisor) -> bool:
    return a.supervisor_id.casefold() == b.supervisor_id.casefold()


class Internship(ABC):
    """
    Abstract base for all placements.

    Contract:
        Subclasses implement ``validation_errors``, ``assign_supervisor``,
        ``track_progress`` (keyword arguments named by ``progress_fields``)
        and ``report_lines``, and call ``_check_valid()`` once their own
        fields are set.
    """

    internship_kind: ClassVar[InternshipType]
    progress_fields: ClassVar[tuple[str, ...]]

    def __init__(
        self,
        internship_id: str,
        student: Student,
        company_name: str,
        supervisor: Supervisor,
        start_date: date,
        end_date: date,
        status: str = PENDING,
        *,
        clock: Clock | None = None,
        config: InternshipConfig | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or InternshipConfig.with_defaults()
        self.internship_id = internship_id
        self.student = student
        self.company_name = company_name
        self.supervisor = supervisor
        self.start_date = start_date
        self.end_date = end_date
        self.status = status

    # -- shared fields -------------------------------------------------------

    @property
    def internship_id(self) -> str:
        return self._internship_id

    @internship_id.setter
    def internship_id(self, value: str) -> None:
        self._internship_id = require_text(
            value, "Internship ID cannot be empty", "internship_id"
        )

    @property
    def student(self) -> Student:
        return self._student

    @student.setter
    def student(self, value: Student) -> None:
        if not isinstance(value, Student):
            raise InvalidArgumentError("Student cannot be empty", field="student")
        self._student = value

    @property
    def company_name(self) -> str:
        return self._company_name

    @company_name.setter
    def company_name(self, value: str) -> None:
        self._company_name = require_text(
            value, "Company name cannot be empty", "company_name"
        )

    @property
    def supervisor(self) -> Supervisor:
        return self._supervisor

    @supervisor.setter
    def supervisor(self, value: Supervisor) -> None:
        self._supervisor = _require_supervisor(
            value, "Supervisor cannot be empty", "supervisor"
        )

    @property
    def start_date(self) -> date:
        return self._start_date

    @start_date.setter
    def start_date(self, value: date) -> None:
        start = require_date(value, "Start date cannot be empty", "start_date")
        end = getattr(self, "_end_date", None)
        if end is not None and end < start:
            raise InvalidArgumentError(
                "End date cannot be before start date", field="start_date"
            )
        self._start_date = start

    @property
    def end_date(self) -> date:
        return self._end_date

    @end_date.setter
    def end_date(self, value: date) -> None:
        end = require_date(value, "End date cannot be empty", "end_date")
        if end < self._start_date:
            raise InvalidArgumentError(
                "End date cannot be before start date", field="end_date"
            )
        self._end_date = end

    @property
    def status(self) -> str:
        return self._status

    @status.setter
    def status(self, value: str) -> None:
        text = require_text(value, "Status cannot be empty", "status").upper()
        if text not in INTERNSHIP_WORKFLOW.states:
            raise InvalidArgumentError(
                "Status must be 'PENDING', 'ONGOING', or 'COMPLETED'", field="status"
            )
        self._status = text

    @property
    def label(self) -> str:
        """``ULK Internship``, ``Remote Internship`` ..."""
        return f"{self.internship_kind.value} Internship"

    def duration_in_weeks(self) -> int:
        return weeks_between(self._start_date, self._end_date)

    def duration_in_months(self) -> int:
        return months_between(self._start_date, self._end_date)

    # -- polymorphic behaviour ----------------------------------------------

    @abstractmethod
    def validation_errors(self) -> list[str]:
        """Placement rules this internship breaks; empty when valid."""

    @abstractmethod
    def assign_supervisor(self) -> str:
        """Confirm supervision and return the confirmation text."""

    @abstractmethod
    def track_progress(self, **entry: Any) -> str:
        """Record one progress entry and return the confirmation text."""

    @abstractmethod
    def report_lines(self) -> list[str]:
        """Variant-specific report section."""

    def validate_internship(self) -> bool:
        return not self.validation_errors()

    def _check_valid(self) -> None:
        errors = self.validation_errors()
        if errors:
            logger.warning(
                "internship_validation_failed",
                extra={
                    "internship_id": self.internship_id,
                    "internship_type": self.internship_kind,
                    "reasons": errors,
                },
            )
            raise EntityValidationError(self.label, errors)

    def _dated(self, text: str) -> str:
        return f"{fmt_date_iso(self._clock.today())}: {text}"

    def generate_report(self) -> str:
        return "\n".join(self.report_lines())

    def generate_detailed_report(self) -> str:
        """Full placement report; pure, so repeated calls give identical text."""
        lines = [
            "===== DETAILED INTERNSHIP REPORT =====",
            f"Internship ID: {self.internship_id}",
            "",
            "STUDENT INFORMATION:",
            f"Name: {self.student.full_name}",
            f"University: {self.student.university.value}",
            f"Email: {self.student.email}",
            "",
            "INTERNSHIP DETAILS:",
            f"Company: {self.company_name}",
            f"Duration: {self.duration_in_weeks()} weeks "
            f"({fmt_date_iso(self.start_date)} to {fmt_date_iso(self.end_date)})",
            "",
            "SUPERVISOR INFORMATION:",
            f"Name: {self.supervisor.full_name}",
            f"Qualification: {self.supervisor.qualification.value}",
            f"Email: {self.supervisor.email}",
            "",
            "STATUS INFORMATION:",
            f"Current Status: {self.status}",
            "",
        ]
        lines.extend(self.report_lines())
        lines.append(REPORT_RULE)
        return "\n".join(lines)

    def summary_lines(self) -> list[str]:
        return [
            self.label,
            f"Internship ID: {self.internship_id}",
            f"Student: {self.student.full_name}",
            f"Company: {self.company_name}",
            f"Supervisor: {self.supervisor.full_name}",
            f"Period: {fmt_date_iso(self.start_date)} to {fmt_date_iso(self.end_date)}",
            f"Status: {self.status}",
        ]

    def __str__(self) -> str:
        return "\n".join(self.summary_lines())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(internship_id={self.internship_id!r}, "
            f"student_id={self.student.student_id!r}, status={self.status!r})"
        )


def _log_section(title: str, entries: list[str], empty: str) -> list[str]:
    return ["", f"{title}:", *(entries or [empty])]


class ULKInternship(Internship):
    internship_kind = InternshipType.ULK
    progress_fields = ("notes",)

    def __init__(self, internship_id, student, company_name, supervisor,
                 start_date, end_date, status=PENDING, **kwargs: Any):
        super().__init__(internship_id, student, company_name, supervisor,
                         start_date, end_date, status, **kwargs)
        self._progress_notes: list[str] = []
        self._check_valid()

    @property
    def progress_notes(self) -> list[str]:
        return list(self._progress_notes)

    def has_senior_supervisor(self) -> bool:
        return self.supervisor.qualification.value in self._config.senior_qualifications

    def validation_errors(self) -> list[str]:
        errors = []
        if self.student.university is not University.ULK:
            errors.append("Student must be from ULK for a ULK internship")
        if self.duration_in_weeks() < self._config.min_weeks:
            errors.append(
                f"ULK internship must be at least {self._config.min_weeks} weeks long"
            )
        if not self.has_senior_supervisor():
            errors.append("ULK internship supervisor must have a Master's degree or higher")
        return errors

    def assign_supervisor(self) -> str:
        if not self.has_senior_supervisor():
            raise InvalidArgumentError(
                "ULK internships require supervisors with a Master's degree or higher",
                field="supervisor",
            )
        return (
            f"Supervisor {self.supervisor.full_name} assigned to ULK internship "
            f"for {self.student.full_name}"
        )

    def track_progress(self, *, notes: str) -> str:
        text = require_text(notes, "Progress notes cannot be empty", "notes")
        self._progress_notes.append(self._dated(text))
        return "Progress updated successfully"

    def report_lines(self) -> list[str]:
        minimum = self._config.min_weeks
        valid = self.duration_in_weeks() >= minimum
        return [
            "ULK INTERNSHIP SPECIFIC DETAILS:",
            "Duration check: "
            + (f"Valid (>= {minimum} weeks)" if valid else f"Invalid (< {minimum} weeks)"),
            f"Supervisor qualification: {self.supervisor.qualification.value} "
            f"(Required: {' or '.join(self._config.senior_qualifications)})",
            *_log_section("PROGRESS NOTES", self._progress_notes, "No progress notes available"),
        ]


class URInternship(Internship):
    internship_kind = InternshipType.UR
    progress_fields = ("feedback",)

    def __init__(self, internship_id, student, company_name, supervisor,
                 start_date, end_date, status=PENDING, *,
                 secondary_supervisor: Supervisor | None = None, **kwargs: Any):
        super().__init__(internship_id, student, company_name, supervisor,
                         start_date, end_date, status, **kwargs)
        self.secondary_supervisor = secondary_supervisor
        self._feedback_log: list[str] = []
        self._check_valid()

    @property
    def secondary_supervisor(self) -> Supervisor | None:
        return self._secondary_supervisor

    @secondary_supervisor.setter
    def secondary_supervisor(self, value: Supervisor | None) -> None:
        if value is not None:
            value = _require_supervisor(
                value, "Secondary supervisor is invalid", "secondary_supervisor"
            )
            if _same_person(value, self.supervisor):
                raise InvalidArgumentError(
                    "Secondary supervisor must be different from the primary supervisor",
                    field="secondary_supervisor",
                )
        self._secondary_supervisor = value

    @property
    def feedback_log(self) -> list[str]:
        return list(self._feedback_log)

    def duration_in_range(self) -> bool:
        months = self.duration_in_months()
        return self._config.ur_min_months <= months <= self._config.ur_max_months

    def validation_errors(self) -> list[str]:
        errors = []
        if self.student.university is not University.UR:
            errors.append("Student must be from UR for a UR internship")
        if not self.duration_in_range():
            errors.append(
                f"UR internship must be between {self._config.ur_min_months} "
                f"and {self._config.ur_max_months} months"
            )
        return errors

    def assign_supervisor(self) -> str:
        lines = [
            f"Primary Supervisor {self.supervisor.full_name} assigned to UR internship "
            f"for {self.student.full_name}"
        ]
        if self.secondary_supervisor is not None:
            lines.append(
                f"Secondary Supervisor {self.secondary_supervisor.full_name} "
                "also assigned to this internship"
            )
        return "\n".join(lines)

    def track_progress(self, *, feedback: str) -> str:
        text = require_text(feedback, "Feedback cannot be empty", "feedback")
        self._feedback_log.append(self._dated(text))
        return "Feedback logged successfully"

    def report_lines(self) -> list[str]:
        low, high = self._config.ur_min_months, self._config.ur_max_months
        lines = [
            "UR INTERNSHIP SPECIFIC DETAILS:",
            "Duration check: "
            + (f"Valid ({low}-{high} months)" if self.duration_in_range()
               else f"Invalid (outside {low}-{high} months range)"),
            f"Primary Supervisor: {self.supervisor.full_name}",
        ]
        if self.secondary_supervisor is not None:
            lines.append(f"Secondary Supervisor: {self.secondary_supervisor.full_name}")
        else:
            lines.append("No secondary supervisor assigned")
        lines.extend(_log_section("FEEDBACK HISTORY", self._feedback_log, "No feedback available"))
        return lines

    def summary_lines(self) -> list[str]:
        lines = super().summary_lines()
        if self.secondary_supervisor is not None:
            lines.append(f"Secondary Supervisor: {self.secondary_supervisor.full_name}")
        return lines


class AUCAInternship(Internship):
    internship_kind = InternshipType.AUCA
    progress_fields = ("report", "hours")

    def __init__(self, internship_id, student, company_name, supervisor,
                 start_date, end_date, status=PENDING, **kwargs: Any):
        super().__init__(internship_id, student, company_name, supervisor,
                         start_date, end_date, status, **kwargs)
        self._community_service_hours = 0
        self._weekly_reports: list[str] = []
        self._check_valid()

    @property
    def community_service_hours(self) -> int:
        return self._community_service_hours

    @community_service_hours.setter
    def community_service_hours(self, value: int) -> None:
        self._community_service_hours = require_non_negative_int(
            value, "Community service hours cannot be negative", "community_service_hours"
        )

    @property
    def weekly_reports(self) -> list[str]:
        return list(self._weekly_reports)

    def validation_errors(self) -> list[str]:
        if self.student.university is not University.AUCA:
            return ["Student must be from AUCA for an AUCA internship"]
        return []

    def assign_supervisor(self) -> str:
        return (
            f"Supervisor {self.supervisor.full_name} assigned to AUCA internship "
            f"for {self.student.full_name}"
        )

    def track_progress(self, *, report: str, hours: int) -> str:
        """Append the next weekly report and add community service hours.

        Both inputs are validated before anything is recorded.
        """
        text = require_text(report, "Weekly report cannot be empty", "report")
        added = require_non_negative_int(
            hours, "Community service hours cannot be negative", "hours"
        )
        self._weekly_reports.append(f"Week {len(self._weekly_reports) + 1}: {text}")
        self._community_service_hours += added
        return (
            f"Added {added} community service hours. "
            f"Total: {self._community_service_hours}"
        )

    def report_lines(self) -> list[str]:
        return [
            "AUCA INTERNSHIP SPECIFIC DETAILS:",
            f"Community Service Hours: {self.community_service_hours}",
            f"Number of Weekly Reports: {len(self._weekly_reports)}",
            *_log_section("WEEKLY REPORTS", self._weekly_reports, "No weekly reports available"),
        ]

    def summary_lines(self) -> list[str]:
        return [*super().summary_lines(),
                f"Community Service Hours: {self.community_service_hours}"]


class UKInternship(Internship):
    internship_kind = InternshipType.UK
    progress_fields = ("company_notes", "university_notes")

    def __init__(self, internship_id, student, company_name, supervisor,
                 start_date, end_date, status=PENDING, *,
                 university_supervisor: Supervisor, english_proficiency_cert: str,
                 **kwargs: Any):
        super().__init__(internship_id, student, company_name, supervisor,
                         start_date, end_date, status, **kwargs)
        self.university_supervisor = university_supervisor
        self.english_proficiency_cert = english_proficiency_cert
        self._evaluation_notes: list[str] = []
        self._check_valid()

    @property
    def university_supervisor(self) -> Supervisor:
        return self._university_supervisor

    @university_supervisor.setter
    def university_supervisor(self, value: Supervisor) -> None:
        supervisor = _require_supervisor(
            value, "University supervisor cannot be empty", "university_supervisor"
        )
        if _same_person(supervisor, self.supervisor):
            raise InvalidArgumentError(
                "University supervisor must be different from the company supervisor",
                field="university_supervisor",
            )
        self._university_supervisor = supervisor

    @property
    def english_proficiency_cert(self) -> str:
        return self._english_proficiency_cert

    @english_proficiency_cert.setter
    def english_proficiency_cert(self, value: str) -> None:
        self._english_proficiency_cert = require_text(
            value,
            "English proficiency certification cannot be empty",
            "english_proficiency_cert",
        )

    @property
    def evaluation_notes(self) -> list[str]:
        return list(self._evaluation_notes)

    def validation_errors(self) -> list[str]:
        if self.student.university is not University.UK:
            return ["Student must be from UK for a UK internship"]
        return []

    def assign_supervisor(self) -> str:
        return (
            f"Company Supervisor {self.supervisor.full_name} and University Supervisor "
            f"{self.university_supervisor.full_name} assigned to UK internship "
            f"for {self.student.full_name}"
        )

    def track_progress(self, *, company_notes: str, university_notes: str) -> str:
        company = require_text(company_notes, "Company notes cannot be empty", "company_notes")
        university = require_text(
            university_notes, "University notes cannot be empty", "university_notes"
        )
        self._evaluation_notes.append(
            f"{fmt_date_iso(self._clock.today())}:\n"
            f"Company: {company}\n"
            f"University: {university}"
        )
        return "Evaluation notes added successfully"

    def report_lines(self) -> list[str]:
        return [
            "UK INTERNSHIP SPECIFIC DETAILS:",
            f"English Proficiency: {self.english_proficiency_cert}",
            f"Company Supervisor: {self.supervisor.full_name}",
            f"University Supervisor: {self.university_supervisor.full_name}",
            *_log_section("EVALUATION NOTES", self._evaluation_notes,
                          "No evaluation notes available"),
        ]

    def summary_lines(self) -> list[str]:
        return [
            *super().summary_lines(),
            f"University Supervisor: {self.university_supervisor.full_name}",
            f"English Proficiency: {self.english_proficiency_cert}",
        ]


class RemoteInternship(Internship):
    internship_kind = InternshipType.REMOTE
    progress_fields = ("entry",)

    def __init__(self, internship_id, student, company_name, supervisor,
                 start_date, end_date, status=PENDING, *,
                 remote_access_url: str, **kwargs: Any):
        super().__init__(internship_id, student, company_name, supervisor,
                         start_date, end_date, status, **kwargs)
        self.remote_access_url = remote_access_url
        self._communication_log: list[str] = []
        self._check_valid()

    @property
    def remote_access_url(self) -> str:
        return self._remote_access_url

    @remote_access_url.setter
    def remote_access_url(self, value: str) -> None:
        self._remote_access_url = require_text(
            value, "Remote access URL cannot be empty", "remote_access_url"
        )

    @property
    def communication_log(self) -> list[str]:
        return list(self._communication_log)

    def validation_errors(self) -> list[str]:
        if self.duration_in_weeks() < self._config.min_weeks:
            return [f"Remote internship must be at least {self._config.min_weeks} weeks long"]
        return []

    def assign_supervisor(self) -> str:
        return (
            f"Remote Supervisor {self.supervisor.full_name} assigned to Remote internship "
            f"for {self.student.full_name}"
        )

    def log_communication(self, entry: str) -> None:
        text = require_text(entry, "Communication entry cannot be empty", "entry")
        self._communication_log.append(self._dated(text))

    def track_progress(self, *, entry: str) -> str:
        self.log_communication(entry)
        return "Communication logged successfully"

    def report_lines(self) -> list[str]:
        return [
            "REMOTE INTERNSHIP SPECIFIC DETAILS:",
            f"Remote Access URL: {self.remote_access_url}",
            f"University: {self.student.university.value} "
            "(Remote internships valid for all universities)",
            *_log_section("COMMUNICATION LOG", self._communication_log,
                          "No communication logs available"),
        ]

    def summary_lines(self) -> list[str]:
        return [*super().summary_lines(), f"Remote Access URL: {self.remote_access_url}"]


INTERNSHIP_CLASSES: dict[InternshipType, type[Internship]] = {
    InternshipType.ULK: ULKInternship,
    InternshipType.UR: URInternship,
    InternshipType.AUCA: AUCAInternship,
    InternshipType.UK: UKInternship,
    InternshipType.REMOTE: RemoteInternship,
}

# The university-specific placement each student's university offers.
UNIVERSITY_INTERNSHIPS: dict[University, InternshipType] = {
    University.ULK: InternshipType.ULK,
    University.UR: InternshipType.UR,
    University.AUCA: InternshipType.AUCA,
    University.UK: InternshipType.UK,
}
