"""Scripted sessions against the internship shell."""

from mgmt_cli.internship import run_internship_shell


def _register_ulk(internship_id="INT001"):
    # Manage Internships > Register: John Doe (ULK), ULK type, TechInnovate, Dr. Michael Chen
    return ["4", "1", "1", "1", internship_id, "1", "1", "2025-07-01", "2025-09-01"]


class TestInternshipShell:

    def test_register_track_and_start(self, internship_service, feed_input, capsys):
        feed_input(
            *_register_ulk(),
            "6", "3", "1", "Kickoff meeting",
            "6", "4", "1", "1",
            "7",
        )
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert out.startswith("Welcome to Internship Management System")
        assert "1. ULK Internship" in out
        assert "2. Remote Internship" in out
        assert "Internship registered successfully!" in out
        assert "Supervisor Dr. Michael Chen assigned to ULK internship for John Doe" in out
        assert "Tracking progress for ULK internship INT001" in out
        assert "Progress updated successfully" in out
        assert "Status updated to ONGOING" in out
        internship = internship_service.find_internship("INT001")
        assert internship.status == "ONGOING"
        assert internship.progress_notes == ["2025-06-15: Kickoff meeting"]

    def test_rule_violation_reported(self, internship_service, feed_input, capsys):
        feed_input("4", "1", "1", "1", "INT001", "1", "3", "2025-07-01", "2025-09-01", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "Registration failed: ULK Internship validation failed" in out
        assert internship_service.internships() == []

    def test_end_before_start_reprompts(self, internship_service, feed_input, capsys):
        feed_input("4", "1", "1", "1", "INT001", "1", "1",
                   "2025-07-01", "2025-06-01", "2025-09-01", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "Error: End date cannot be before start date" in out
        assert len(internship_service.internships()) == 1

    def test_second_active_placement_rejected(self, internship_service, feed_input, capsys):
        feed_input(*_register_ulk(), "4", "1", "1", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "Registration failed: This student already has an active internship" in out

    def test_ur_secondary_cannot_be_primary(self, internship_service, feed_input, capsys):
        # Jane Smith (UR), UR type, HealthPlus, Prof. Sarah Wilson twice
        feed_input("4", "1", "2", "1", "INT002", "2", "2",
                   "2025-07-01", "2025-10-01", "yes", "2", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "Registration failed: Invalid secondary supervisor selection" in out
        assert internship_service.internships() == []

    def test_ur_with_secondary(self, internship_service, feed_input, capsys):
        feed_input("4", "1", "2", "1", "INT002", "2", "2",
                   "2025-07-01", "2025-10-01", "yes", "1", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "Secondary Supervisor Dr. Michael Chen also assigned to this internship" in out

    def test_uk_registration(self, internship_service, feed_input, capsys):
        # Bob Brown (UK), UK type, EduLearn, Dr. Emily Taylor + Dr. Michael Chen
        feed_input("4", "1", "4", "1", "INT004", "3", "4",
                   "2025-07-01", "2025-08-01", "1", "IELTS 7.5", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert (
            "Company Supervisor Dr. Emily Taylor and University Supervisor "
            "Dr. Michael Chen assigned to UK internship for Bob Brown"
        ) in out

    def test_register_student_and_list(self, internship_service, feed_input, capsys):
        feed_input("1", "1", "s001", "S005", "Grace Uwimana", "2", "grace.ur.ac.rw",
                   "grace@ur.ac.rw", "1", "2", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "Error: Student ID already exists. Please enter a unique value." in out
        assert "Error: Email must contain '@'" in out
        assert "Student registered successfully!" in out
        assert "5. ID: S005, Name: Grace Uwimana, University: UR, Email: grace@ur.ac.rw" in out

    def test_company_menu_wording(self, internship_service, feed_input, capsys):
        feed_input("3", "2", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "2. View all companies" in out
        assert "3. ID: C003, Name: EduLearn, Industry: Education, Location: Musanze" in out

    def test_search(self, internship_service, feed_input, capsys):
        feed_input(*_register_ulk(), "5", "1", "JOHN", "5", "2", "2", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "Student: John Doe" in out
        assert "No internships found for UR students" in out

    def test_reports_need_internships(self, internship_service, feed_input, capsys):
        feed_input("5", "6", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert out.count("No internships registered yet.") == 2

    def test_detailed_report(self, internship_service, feed_input, capsys):
        feed_input(*_register_ulk(), "6", "2", "1", "7")
        run_internship_shell(internship_service)
        out = capsys.readouterr().out
        assert "===== DETAILED INTERNSHIP REPORT =====" in out
        assert "Duration: 8 weeks (2025-07-01 to 2025-09-01)" in out
