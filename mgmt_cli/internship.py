"""Internship shell: people, placements, search, reports and status updates."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable

from mgmt_cli.menu import (
    INTERNSHIP_MENU,
    REPORT_MENU,
    SEARCH_MENU,
    entity_menu,
    print_section,
    print_submenu,
    run_menu_loop,
)
from mgmt_cli.util import (
    print_blocks,
    print_numbered,
    prompt_date,
    prompt_int,
    prompt_non_negative_int,
    prompt_text,
    prompt_until_valid,
    prompt_validated,
    prompt_yes_no,
    select_member,
    select_position,
)
from mgmt_kernel.exceptions import (
    ActiveInternshipExistsError,
    DuplicateEntityError,
    InvalidArgumentError,
    InvalidSelectionError,
    ManagementError,
)
from mgmt_kernel.validation import parse_date, require_email, require_text
from mgmt_modules.internship.models import Internship, InternshipType
from mgmt_modules.internship.records import (
    IndustryType,
    Qualification,
    Student,
    Supervisor,
    University,
)
from mgmt_modules.internship.service import (
    COMPANY_ID_KEY,
    INTERNSHIP_ID_KEY,
    STUDENT_ID_KEY,
    SUPERVISOR_ID_KEY,
    InternshipService,
)

DATE_PATTERN = "yyyy-MM-dd"
INTERNSHIP_RULE = "-" * 29
SEARCH_RULE = "-" * 25


def _unique_id(raw: str, label: str, entity_kind: str,
               is_taken: Callable[[str], bool]) -> str:
    value = require_text(raw, f"{label} cannot be empty")
    if is_taken(value):
        raise DuplicateEntityError(entity_kind, label, value)
    return value


def _prompt_unique_id(prompt: str, label: str, entity_kind: str,
                      is_taken: Callable[[str], bool]) -> str:
    return prompt_until_valid(
        prompt, lambda raw: _unique_id(raw, label, entity_kind, is_taken)
    )


# -----------------------------------------------------------------------------
# Students, supervisors, companies
# -----------------------------------------------------------------------------

def register_student(service: InternshipService) -> None:
    print_section("STUDENT REGISTRATION")
    student_id = _prompt_unique_id(
        "Enter student ID: ", STUDENT_ID_KEY, "student", service.is_student_id_taken
    )
    full_name = prompt_text("Enter full name: ", "Full name cannot be empty")
    print("Select university:")
    university = select_member("Enter choice: ", list(University), "university")
    email = prompt_validated("Enter email: ", require_email)
    service.register_student(student_id, full_name, university, email)
    print("Student registered successfully!")


def register_supervisor(service: InternshipService) -> None:
    print_section("SUPERVISOR REGISTRATION")
    supervisor_id = _prompt_unique_id(
        "Enter supervisor ID: ", SUPERVISOR_ID_KEY, "supervisor",
        service.is_supervisor_id_taken,
    )
    full_name = prompt_text("Enter full name: ", "Full name cannot be empty")
    print("Select qualification:")
    qualification = select_member("Enter choice: ", list(Qualification), "qualification")
    email = prompt_validated("Enter email: ", require_email)
    service.register_supervisor(supervisor_id, full_name, qualification, email)
    print("Supervisor registered successfully!")


def register_company(service: InternshipService) -> None:
    print_section("COMPANY REGISTRATION")
    company_id = _prompt_unique_id(
        "Enter company ID: ", COMPANY_ID_KEY, "company", service.is_company_id_taken
    )
    name = prompt_text("Enter company name: ", "Company name cannot be empty")
    print("Select industry type:")
    industry_type = select_member("Enter choice: ", list(IndustryType), "industry type")
    location = prompt_text("Enter location: ", "Location cannot be empty")
    service.register_company(company_id, name, industry_type, location)
    print("Company registered successfully!")


def _list_entities(title: str, items: list, empty: str) -> None:
    print_section(f"{title} LIST")
    if not items:
        print(empty)
        return
    print_numbered(items)


def view_students(service: InternshipService) -> None:
    _list_entities("STUDENT", service.students(), "No students registered yet.")


def view_supervisors(service: InternshipService) -> None:
    _list_entities("SUPERVISOR", service.supervisors(), "No supervisors registered yet.")


def view_companies(service: InternshipService) -> None:
    _list_entities("COMPANY", service.companies(), "No companies registered yet.")


def view_internships(service: InternshipService) -> None:
    internships = service.internships()
    print_section("INTERNSHIP LIST")
    if not internships:
        print("No internships registered yet.")
        return
    print_blocks(internships, "Internship", INTERNSHIP_RULE)


def manage_entity(entity: str, register: Callable[[], None], view: Callable[[], None],
                  plural: str | None = None) -> None:
    """Register / view / back submenu for one entity kind."""
    print_submenu(f"{entity.upper()} MANAGEMENT", entity_menu(entity, plural))
    choice = prompt_int("Enter your choice: ")
    if choice == 1:
        try:
            register()
        except ManagementError as exc:
            print(f"Registration failed: {exc}")
    elif choice == 2:
        view()
    elif choice != 3:
        print("Invalid choice. Returning to main menu.")


# -----------------------------------------------------------------------------
# Internship registration
# -----------------------------------------------------------------------------

def _end_date(raw: str, start: date) -> date:
    end = parse_date(raw, DATE_PATTERN)
    if end < start:
        raise InvalidArgumentError("End date cannot be before start date", field="end_date")
    return end


def _select_other_supervisor(service: InternshipService, primary_position: int,
                             heading: str, what: str) -> Supervisor:
    """Pick a supervisor other than the one at ``primary_position``."""
    supervisors = service.supervisors()
    print(f"\n{heading}")
    for i, supervisor in enumerate(supervisors, 1):
        if i != primary_position:
            print(f"{i}. {supervisor}")
    choice = select_position("Enter choice: ", len(supervisors), what)
    if choice == primary_position:
        raise InvalidSelectionError(what, choice, len(supervisors))
    return service.get_supervisor(choice)


def _variant_fields(service: InternshipService, kind: InternshipType,
                    primary_position: int) -> dict[str, Any]:
    if kind is InternshipType.UR:
        fields: dict[str, Any] = {}
        wants_secondary = prompt_yes_no(
            "Do you want to assign a secondary supervisor? (yes/no): "
        )
        if wants_secondary and len(service.supervisors()) > 1:
            fields["secondary_supervisor"] = _select_other_supervisor(
                service, primary_position, "Select secondary supervisor:",
                "secondary supervisor",
            )
        return fields
    if kind is InternshipType.UK:
        if len(service.supervisors()) < 2:
            raise InvalidArgumentError(
                "UK internships need a second supervisor registered as university supervisor"
            )
        return {
            "university_supervisor": _select_other_supervisor(
                service, primary_position, "Select university supervisor:",
                "university supervisor",
            ),
            "english_proficiency_cert": prompt_text(
                "Enter English proficiency certification: ",
                "English certification cannot be empty",
            ),
        }
    if kind is InternshipType.REMOTE:
        return {"remote_access_url": prompt_text(
            "Enter remote access URL: ", "Remote access URL cannot be empty")}
    return {}


def _select_company_name(service: InternshipService) -> str:
    companies = service.companies()
    if not companies:
        return prompt_text("Enter company name: ", "Company name cannot be empty")
    print("\nAvailable Companies:")
    print_numbered([c.name for c in companies])
    position = select_position("Select company (enter number): ", len(companies), "company")
    return service.get_company(position).name


def _select_student(service: InternshipService) -> Student:
    students = service.students()
    print("\nAvailable Students:")
    print_numbered(students)
    return service.get_student(
        select_position("Select student (enter number): ", len(students), "student")
    )


def register_internship(service: InternshipService) -> None:
    if not service.students() or not service.supervisors():
        print("Error: You need to register at least one student and one supervisor first.")
        return

    print_section("INTERNSHIP REGISTRATION")
    student = _select_student(service)
    if service.has_active_internship(student):
        raise ActiveInternshipExistsError(student.student_id)

    print("\nSelect internship type:")
    types = service.available_types(student)
    kind = select_member("Enter choice: ", types, "internship type",
                         [f"{t.value} Internship" for t in types])

    internship_id = _prompt_unique_id(
        "Enter internship ID: ", INTERNSHIP_ID_KEY, "internship",
        service.is_internship_id_taken,
    )
    company_name = _select_company_name(service)

    supervisors = service.supervisors()
    print("\nAvailable Supervisors:")
    print_numbered(supervisors)
    primary_position = select_position(
        "Select primary supervisor (enter number): ", len(supervisors), "supervisor"
    )
    supervisor = service.get_supervisor(primary_position)

    start_date = prompt_date(f"Enter start date ({DATE_PATTERN}): ", DATE_PATTERN)
    end_date = prompt_until_valid(
        f"Enter end date ({DATE_PATTERN}): ", lambda raw: _end_date(raw, start_date)
    )
    fields = _variant_fields(service, kind, primary_position)

    try:
        internship = service.register_internship(
            kind, internship_id, student, company_name, supervisor,
            start_date, end_date, **fields,
        )
    except ManagementError as exc:
        print(f"Registration failed: {exc}")
        return
    print("Internship registered successfully!")
    print(internship.assign_supervisor())


def manage_internships(service: InternshipService) -> None:
    manage_entity(
        "internship",
        lambda: register_internship(service),
        lambda: view_internships(service),
    )


# -----------------------------------------------------------------------------
# Search
# -----------------------------------------------------------------------------

def _print_matches(matches: list[Internship]) -> None:
    for internship in matches:
        print(internship)
        print(SEARCH_RULE)


def search_by_student(service: InternshipService) -> None:
    term = prompt_text("Enter student name to search: ", "Search term cannot be empty")
    matches = service.search_by_student_name(term)
    print_section("SEARCH RESULTS")
    if not matches:
        print(f"No internships found for students with name containing '{term}'")
        return
    _print_matches(matches)


def search_by_university(service: InternshipService) -> None:
    print("Select university:")
    university = select_member("Enter choice: ", list(University), "university")
    matches = service.search_by_university(university)
    print_section(f"INTERNSHIPS FOR {university.value}")
    if not matches:
        print(f"No internships found for {university.value} students")
        return
    _print_matches(matches)


def search_internships(service: InternshipService) -> None:
    if not service.internships():
        print("No internships registered yet.")
        return
    print_submenu("SEARCH INTERNSHIPS", SEARCH_MENU)
    choice = prompt_int("Enter your choice: ")
    if choice == 1:
        search_by_student(service)
    elif choice == 2:
        search_by_university(service)
    elif choice != 3:
        print("Invalid choice. Returning to main menu.")


# -----------------------------------------------------------------------------
# Reports, progress and status
# -----------------------------------------------------------------------------

def _select_internship(service: InternshipService, purpose: str) -> Internship:
    internships = service.internships()
    print(f"\nSelect internship to {purpose}:")
    for i, internship in enumerate(internships, 1):
        print(f"{i}. {internship.internship_id} - {internship.student.full_name} "
              f"at {internship.company_name}")
    return service.get_internship(
        select_position("Enter choice: ", len(internships), "internship")
    )


def _progress_prompts(internship: Internship) -> dict[str, Callable[[], Any]]:
    return {
        "notes": lambda: prompt_text(
            "Enter progress notes: ", "Progress notes cannot be empty"),
        "feedback": lambda: prompt_text(
            f"Enter feedback for {internship.student.full_name}: ",
            "Feedback cannot be empty"),
        "report": lambda: prompt_text(
            f"Enter weekly report for week #{len(internship.weekly_reports) + 1}: ",
            "Weekly report cannot be empty"),
        "hours": lambda: prompt_non_negative_int(
            "Enter community service hours completed this week: ",
            "Community service hours cannot be negative"),
        "company_notes": lambda: prompt_text(
            "Enter evaluation notes from company supervisor: ",
            "Company notes cannot be empty"),
        "university_notes": lambda: prompt_text(
            "Enter evaluation notes from university supervisor: ",
            "University notes cannot be empty"),
        "entry": lambda: prompt_text(
            "Enter communication log entry: ", "Communication entry cannot be empty"),
    }


def generate_all_reports(service: InternshipService) -> None:
    print_section("ALL INTERNSHIP REPORTS")
    for report in service.detailed_reports():
        print(report)
        print()


def generate_internship_report(service: InternshipService) -> None:
    internship = _select_internship(service, "generate report")
    print(internship.generate_detailed_report())


def track_progress(service: InternshipService) -> None:
    internship = _select_internship(service, "track progress")
    print(f"Tracking progress for {internship.internship_kind.value} "
          f"internship {internship.internship_id}")
    prompts = _progress_prompts(internship)
    entry = {name: prompts[name]() for name in internship.progress_fields}
    print(service.track_progress(internship, **entry))


def update_status(service: InternshipService) -> None:
    internship = _select_internship(service, "update status")
    actions = service.allowed_actions(internship)
    if not actions:
        print(f"Internship {internship.internship_id} is {internship.status}; "
              "no further status changes.")
        return
    print(f"Current status: {internship.status}")
    print_numbered(actions)
    action = actions[select_position("Enter choice: ", len(actions), "action") - 1]
    print(f"Status updated to {service.advance_status(internship, action)}")


def generate_reports(service: InternshipService) -> None:
    if not service.internships():
        print("No internships registered yet.")
        return
    print_submenu("GENERATE REPORTS", REPORT_MENU)
    choice = prompt_int("Enter your choice: ")
    handlers = {
        1: generate_all_reports,
        2: generate_internship_report,
        3: track_progress,
        4: update_status,
    }
    handler = handlers.get(choice)
    if handler is not None:
        handler(service)
    elif choice != len(REPORT_MENU):
        print("Invalid choice. Returning to main menu.")


def run_internship_shell(service: InternshipService) -> None:
    print("Welcome to Internship Management System")
    run_menu_loop(
        "INTERNSHIP MANAGEMENT SYSTEM",
        INTERNSHIP_MENU,
        {
            1: lambda: manage_entity(
                "student",
                lambda: register_student(service),
                lambda: view_students(service)),
            2: lambda: manage_entity(
                "supervisor",
                lambda: register_supervisor(service),
                lambda: view_supervisors(service)),
            3: lambda: manage_entity(
                "company",
                lambda: register_company(service),
                lambda: view_companies(service),
                "companies"),
            4: lambda: manage_internships(service),
            5: lambda: search_internships(service),
            6: lambda: generate_reports(service),
        },
        "Thank you for using Internship Management System.",
    )
