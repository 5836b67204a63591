"""
Tests for the internship module.

Validates:
- Record validation (students, supervisors, companies)
- Each variant's placement rules and progress log
- Distinct-supervisor rules for UR and UK placements
- One active placement per student
- Search, status lifecycle and report idempotence
"""

from __future__ import annotations

from datetime import date

import pytest

from mgmt_kernel.exceptions import (
    ActiveInternshipExistsError,
    DuplicateEntityError,
    EntityValidationError,
    InvalidArgumentError,
    InvalidStatusTransitionError,
)
from mgmt_modules.internship.config import InternshipConfig
from mgmt_modules.internship.models import (
    AUCAInternship,
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

START = date(2025, 7, 1)


def _student(university="ULK", student_id="S100"):
    return Student(student_id, "Test Student", university, "test@uni.ac.rw")


def _supervisor(qualification="PhD", supervisor_id="SUP100", name="Dr. Test"):
    return Supervisor(supervisor_id, name, qualification, "sup@company.com")


# =============================================================================
# Records
# =============================================================================


class TestRecords:

    def test_student_fields(self):
        student = Student(" S001 ", "John Doe", "ULK", "john.doe@ulk.ac.rw")
        assert student.student_id == "S001"
        assert student.university is University.ULK
        assert str(student) == (
            "ID: S001, Name: John Doe, University: ULK, Email: john.doe@ulk.ac.rw"
        )

    def test_unknown_university(self):
        with pytest.raises(InvalidArgumentError, match="University must be 'ULK', 'UR', 'AUCA', or 'UK'"):
            _student(university="MIT")

    def test_blank_university(self):
        with pytest.raises(InvalidArgumentError, match="University cannot be empty"):
            _student(university="  ")

    def test_email_needs_at_sign(self):
        with pytest.raises(InvalidArgumentError, match="Email must contain '@'"):
            Student("S1", "Name", "UR", "no-at-sign")

    def test_supervisor_qualification(self):
        assert _supervisor("Masters").qualification is Qualification.MASTERS
        with pytest.raises(InvalidArgumentError, match="Qualification must be"):
            _supervisor("Diploma")

    def test_company(self):
        company = Company("C009", "AgriTech", "IT", "Huye")
        assert company.industry_type is IndustryType.IT
        assert str(company) == "ID: C009, Name: AgriTech, Industry: IT, Location: Huye"
        with pytest.raises(InvalidArgumentError, match="Location cannot be empty"):
            company.location = ""
        assert company.location == "Huye"


# =============================================================================
# Variant rules
# =============================================================================


class TestPlacementRules:

    def test_valid_ulk(self, clock):
        internship = ULKInternship(
            "I1", _student("ULK"), "TechInnovate", _supervisor("Masters"),
            START, date(2025, 9, 1), clock=clock,
        )
        assert internship.duration_in_weeks() == 8
        assert internship.status == "PENDING"
        assert internship.validate_internship()
        assert internship.assign_supervisor() == (
            "Supervisor Dr. Test assigned to ULK internship for Test Student"
        )

    def test_ulk_collects_every_broken_rule(self, clock):
        with pytest.raises(EntityValidationError) as exc_info:
            ULKInternship(
                "I1", _student("UR"), "TechInnovate", _supervisor("Bachelors"),
                START, date(2025, 8, 1), clock=clock,
            )
        message = str(exc_info.value)
        assert message.startswith("ULK Internship validation failed")
        assert "Student must be from ULK" in message
        assert "ULK internship must be at least 6 weeks long" in message
        assert "Master's degree or higher" in message

    def test_end_before_start(self, clock):
        with pytest.raises(InvalidArgumentError, match="End date cannot be before start date"):
            RemoteInternship(
                "I1", _student(), "TechInnovate", _supervisor(),
                START, date(2025, 6, 30), remote_access_url="https://x", clock=clock,
            )

    def test_ur_month_range(self, clock):
        internship = URInternship(
            "I2", _student("UR"), "HealthPlus", _supervisor(),
            START, date(2025, 10, 1), clock=clock,
        )
        assert internship.duration_in_months() == 3
        assert "Duration check: Valid (2-6 months)" in internship.generate_report()
        with pytest.raises(EntityValidationError, match="between 2 and 6 months"):
            URInternship(
                "I3", _student("UR"), "HealthPlus", _supervisor(),
                START, date(2025, 8, 15), clock=clock,
            )

    def test_ur_partial_month_does_not_count(self, clock):
        with pytest.raises(EntityValidationError):
            URInternship(
                "I3", _student("UR"), "HealthPlus", _supervisor(),
                date(2025, 7, 15), date(2025, 9, 14), clock=clock,
            )

    def test_ur_secondary_must_differ(self, clock):
        primary = _supervisor(supervisor_id="SUP1")
        with pytest.raises(InvalidArgumentError, match="must be different from the primary"):
            URInternship(
                "I2", _student("UR"), "HealthPlus", primary,
                START, date(2025, 10, 1), secondary_supervisor=_supervisor(supervisor_id="sup1"),
                clock=clock,
            )

    def test_ur_assign_with_secondary(self, clock):
        internship = URInternship(
            "I2", _student("UR"), "HealthPlus", _supervisor(supervisor_id="SUP1", name="A"),
            START, date(2025, 10, 1),
            secondary_supervisor=_supervisor(supervisor_id="SUP2", name="B"), clock=clock,
        )
        assert internship.assign_supervisor().splitlines() == [
            "Primary Supervisor A assigned to UR internship for Test Student",
            "Secondary Supervisor B also assigned to this internship",
        ]
        assert "Secondary Supervisor: B" in internship.summary_lines()

    def test_uk_requires_distinct_university_supervisor(self, clock):
        company_side = _supervisor(supervisor_id="SUP1")
        with pytest.raises(InvalidArgumentError, match="must be different from the company supervisor"):
            UKInternship(
                "I4", _student("UK"), "EduLearn", company_side, START, date(2025, 8, 1),
                university_supervisor=company_side, english_proficiency_cert="IELTS 7.0",
                clock=clock,
            )

    def test_uk_requires_certificate(self, clock):
        with pytest.raises(InvalidArgumentError, match="English proficiency certification cannot be empty"):
            UKInternship(
                "I4", _student("UK"), "EduLearn", _supervisor(supervisor_id="SUP1"),
                START, date(2025, 8, 1),
                university_supervisor=_supervisor(supervisor_id="SUP2"),
                english_proficiency_cert=" ", clock=clock,
            )

    def test_auca_wrong_university(self, clock):
        with pytest.raises(EntityValidationError, match="Student must be from AUCA"):
            AUCAInternship(
                "I5", _student("ULK"), "EduLearn", _supervisor(), START, date(2025, 7, 2),
                clock=clock,
            )

    def test_remote_any_university_at_least_six_weeks(self, clock):
        internship = RemoteInternship(
            "I6", _student("AUCA"), "TechInnovate", _supervisor(),
            START, date(2025, 8, 12), remote_access_url="https://meet.example/room",
            clock=clock,
        )
        assert internship.duration_in_weeks() == 6
        with pytest.raises(EntityValidationError, match="Remote internship must be at least 6 weeks long"):
            RemoteInternship(
                "I7", _student("AUCA"), "TechInnovate", _supervisor(),
                START, date(2025, 8, 11), remote_access_url="https://meet.example/room",
                clock=clock,
            )

    def test_config_overrides_minimum(self, clock):
        config = InternshipConfig(min_weeks=10)
        with pytest.raises(EntityValidationError, match="at least 10 weeks"):
            ULKInternship(
                "I1", _student("ULK"), "TechInnovate", _supervisor(),
                START, date(2025, 9, 1), clock=clock, config=config,
            )

    def test_config_validation(self):
        with pytest.raises(ValueError):
            InternshipConfig(ur_min_months=4, ur_max_months=3)
        config = InternshipConfig.from_dict({"senior_qualifications": ["PhD"]})
        assert config.senior_qualifications == ("PhD",)


# =============================================================================
# Progress tracking
# =============================================================================


class TestProgress:

    def test_ulk_notes(self, clock):
        internship = ULKInternship(
            "I1", _student("ULK"), "TechInnovate", _supervisor(),
            START, date(2025, 9, 1), clock=clock,
        )
        assert internship.track_progress(notes="Week one done") == "Progress updated successfully"
        assert internship.progress_notes == ["2025-06-15: Week one done"]
        with pytest.raises(InvalidArgumentError, match="Progress notes cannot be empty"):
            internship.track_progress(notes="   ")
        assert len(internship.progress_notes) == 1

    def test_auca_hours_accumulate(self, clock):
        internship = AUCAInternship(
            "I5", _student("AUCA"), "EduLearn", _supervisor(), START, date(2025, 9, 1),
            clock=clock,
        )
        assert internship.track_progress(report="Onboarding", hours=4) == (
            "Added 4 community service hours. Total: 4"
        )
        internship.track_progress(report="Tutoring", hours=6)
        assert internship.community_service_hours == 10
        assert internship.weekly_reports == ["Week 1: Onboarding", "Week 2: Tutoring"]

    def test_auca_negative_hours_record_nothing(self, clock):
        internship = AUCAInternship(
            "I5", _student("AUCA"), "EduLearn", _supervisor(), START, date(2025, 9, 1),
            clock=clock,
        )
        with pytest.raises(InvalidArgumentError, match="cannot be negative"):
            internship.track_progress(report="Bad week", hours=-3)
        assert internship.weekly_reports == []
        assert internship.community_service_hours == 0

    def test_uk_evaluation_notes(self, clock):
        internship = UKInternship(
            "I4", _student("UK"), "EduLearn", _supervisor(supervisor_id="SUP1"),
            START, date(2025, 8, 1), university_supervisor=_supervisor(supervisor_id="SUP2"),
            english_proficiency_cert="IELTS 7.0", clock=clock,
        )
        assert internship.track_progress(
            company_notes="Punctual", university_notes="On track"
        ) == "Evaluation notes added successfully"
        assert internship.evaluation_notes == [
            "2025-06-15:\nCompany: Punctual\nUniversity: On track"
        ]

    def test_remote_communication_log(self, clock):
        internship = RemoteInternship(
            "I6", _student("UR"), "TechInnovate", _supervisor(),
            START, date(2025, 9, 1), remote_access_url="https://meet.example/room",
            clock=clock,
        )
        assert internship.track_progress(entry="Weekly call") == "Communication logged successfully"
        assert internship.communication_log == ["2025-06-15: Weekly call"]


# =============================================================================
# Service
# =============================================================================


class TestInternshipService:

    def _ulk(self, service, internship_id="INT1", supervisor_position=1):
        return service.register_internship(
            InternshipType.ULK, internship_id, service.get_student(1), "TechInnovate",
            service.get_supervisor(supervisor_position), START, date(2025, 9, 1),
        )

    def test_seeded_records(self, internship_service):
        assert [s.student_id for s in internship_service.students()] == [
            "S001", "S002", "S003", "S004",
        ]
        assert len(internship_service.supervisors()) == 4
        assert [c.name for c in internship_service.companies()] == [
            "TechInnovate", "HealthPlus", "EduLearn",
        ]

    def test_duplicate_ids_case_insensitive(self, internship_service):
        with pytest.raises(DuplicateEntityError, match="Student ID already exists"):
            internship_service.register_student("s001", "Copy", "UR", "c@ur.ac.rw")
        assert internship_service.is_company_id_taken("c002")

    def test_available_types(self, internship_service):
        student = internship_service.get_student(2)
        assert internship_service.available_types(student) == (
            InternshipType.UR, InternshipType.REMOTE,
        )

    def test_register_and_find(self, internship_service):
        internship = self._ulk(internship_service)
        assert internship_service.find_internship("int1") is internship
        assert internship_service.internships() == [internship]

    def test_ulk_bachelors_supervisor_rejected(self, internship_service):
        with pytest.raises(EntityValidationError, match="Master's degree or higher"):
            self._ulk(internship_service, supervisor_position=3)
        assert internship_service.internships() == []

    def test_one_active_placement(self, internship_service):
        internship = self._ulk(internship_service)
        with pytest.raises(ActiveInternshipExistsError):
            self._ulk(internship_service, internship_id="INT2")
        internship_service.advance_status(internship, "start")
        with pytest.raises(ActiveInternshipExistsError):
            self._ulk(internship_service, internship_id="INT2")
        internship_service.advance_status(internship, "complete")
        second = self._ulk(internship_service, internship_id="INT2")
        assert second.status == "PENDING"

    def test_duplicate_internship_id(self, internship_service):
        self._ulk(internship_service)
        with pytest.raises(DuplicateEntityError, match="Internship ID already exists"):
            internship_service.register_internship(
                InternshipType.REMOTE, "int1", internship_service.get_student(2), "HealthPlus",
                internship_service.get_supervisor(1), START, date(2025, 9, 1),
                remote_access_url="https://meet.example/room",
            )

    def test_missing_variant_field(self, internship_service):
        with pytest.raises(InvalidArgumentError, match="Invalid fields for Remote internship"):
            internship_service.register_internship(
                "Remote", "INT9", internship_service.get_student(2), "HealthPlus",
                internship_service.get_supervisor(1), START, date(2025, 9, 1),
            )

    def test_status_workflow(self, internship_service):
        internship = self._ulk(internship_service)
        assert internship_service.allowed_actions(internship) == ("start",)
        with pytest.raises(InvalidStatusTransitionError, match="Cannot complete internship in state PENDING"):
            internship_service.advance_status(internship, "complete")
        assert internship_service.advance_status(internship, "start") == "ONGOING"
        assert internship_service.advance_status(internship, "complete") == "COMPLETED"
        assert internship_service.allowed_actions(internship) == ()

    def test_search(self, internship_service):
        ulk = self._ulk(internship_service)
        remote = internship_service.register_internship(
            InternshipType.REMOTE, "INT2", internship_service.get_student(2), "HealthPlus",
            internship_service.get_supervisor(2), START, date(2025, 9, 1),
            remote_access_url="https://meet.example/room",
        )
        assert internship_service.search_by_student_name("JOHN") == [ulk]
        assert internship_service.search_by_student_name("smith") == [remote]
        assert internship_service.search_by_university("UR") == [remote]
        assert internship_service.search_by_university(University.AUCA) == []
        with pytest.raises(InvalidArgumentError, match="Search term cannot be empty"):
            internship_service.search_by_student_name(" ")

    def test_track_progress_through_service(self, internship_service):
        internship = self._ulk(internship_service)
        message = internship_service.track_progress(internship, notes="Kickoff")
        assert message == "Progress updated successfully"

    def test_detailed_report(self, internship_service):
        internship = self._ulk(internship_service)
        internship.track_progress(notes="Kickoff")
        report = internship.generate_detailed_report()
        lines = report.splitlines()
        assert lines[0] == "===== DETAILED INTERNSHIP REPORT ====="
        assert "Name: John Doe" in lines
        assert "Duration: 8 weeks (2025-07-01 to 2025-09-01)" in lines
        assert "Current Status: PENDING" in lines
        assert "Duration check: Valid (>= 6 weeks)" in lines
        assert "Supervisor qualification: PhD (Required: Masters or PhD)" in lines
        assert "2025-06-15: Kickoff" in lines
        assert lines[-1] == "=" * 39
        assert internship.generate_detailed_report() == report
        assert internship_service.detailed_reports() == [report]

    def test_empty_logs_in_report(self, internship_service):
        internship = self._ulk(internship_service)
        assert "No progress notes available" in internship.generate_report()
