"""
Students, supervisors and host companies.

Plain validated records referenced by internships.  They carry no behaviour
beyond validation; internships hold them as shared, read-only references.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from mgmt_kernel.validation import require_choice, require_email, require_text

E = TypeVar("E", bound=Enum)


class University(Enum):
    ULK = "ULK"
    UR = "UR"
    AUCA = "AUCA"
    UK = "UK"


class Qualification(Enum):
    BACHELORS = "Bachelors"
    MASTERS = "Masters"
    PHD = "PhD"


class IndustryType(Enum):
    IT = "IT"
    FINANCE = "Finance"
    HEALTH = "Health"
    EDUCATION = "Education"


def _allowed(enum_type: type[Enum]) -> str:
    """``'ULK', 'UR', 'AUCA', or 'UK'``."""
    quoted = [f"'{member.value}'" for member in enum_type]
    return ", ".join(quoted[:-1]) + f", or {quoted[-1]}"


def require_member(value: Any, enum_type: type[E], label: str, field: str) -> E:
    """Enum member or its value string; distinct messages for blank and unknown."""
    if isinstance(value, enum_type):
        return value
    text = require_text(value, f"{label} cannot be empty", field)
    return require_choice(
        text, enum_type, f"{label} must be {_allowed(enum_type)}", field
    )


class Student:
    def __init__(self, student_id: str, full_name: str,
                 university: University | str, email: str):
        self.student_id = student_id
        self.full_name = full_name
        self.university = university
        self.email = email

    @property
    def student_id(self) -> str:
        return self._student_id

    @student_id.setter
    def student_id(self, value: str) -> None:
        self._student_id = require_text(value, "Student ID cannot be empty", "student_id")

    @property
    def full_name(self) -> str:
        return self._full_name

    @full_name.setter
    def full_name(self, value: str) -> None:
        self._full_name = require_text(value, "Full name cannot be empty", "full_name")

    @property
    def university(self) -> University:
        return self._university

    @university.setter
    def university(self, value: University | str) -> None:
        self._university = require_member(value, University, "University", "university")

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = require_email(value)

    def __str__(self) -> str:
        return (
            f"ID: {self.student_id}, Name: {self.full_name}, "
            f"University: {self.university.value}, Email: {self.email}"
        )

    def __repr__(self) -> str:
        return f"Student(student_id={self.student_id!r}, university={self.university.value!r})"


class Supervisor:
    def __init__(self, supervisor_id: str, full_name: str,
                 qualification: Qualification | str, email: str):
        self.supervisor_id = supervisor_id
        self.full_name = full_name
        self.qualification = qualification
        self.email = email

    @property
    def supervisor_id(self) -> str:
        return self._supervisor_id

    @supervisor_id.setter
    def supervisor_id(self, value: str) -> None:
        self._supervisor_id = require_text(
            value, "Supervisor ID cannot be empty", "supervisor_id"
        )

    @property
    def full_name(self) -> str:
        return self._full_name

    @full_name.setter
    def full_name(self, value: str) -> None:
        self._full_name = require_text(value, "Full name cannot be empty", "full_name")

    @property
    def qualification(self) -> Qualification:
        return self._qualification

    @qualification.setter
    def qualification(self, value: Qualification | str) -> None:
        self._qualification = require_member(
            value, Qualification, "Qualification", "qualification"
        )

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = require_email(value)

    def __str__(self) -> str:
        return (
            f"ID: {self.supervisor_id}, Name: {self.full_name}, "
            f"Qualification: {self.qualification.value}, Email: {self.email}"
        )

    def __repr__(self) -> str:
        return f"Supervisor(supervisor_id={self.supervisor_id!r})"


class Company:
    def __init__(self, company_id: str, name: str,
                 industry_type: IndustryType | str, location: str):
        self.company_id = company_id
        self.name = name
        self.industry_type = industry_type
        self.location = location

    @property
    def company_id(self) -> str:
        return self._company_id

    @company_id.setter
    def company_id(self, value: str) -> None:
        self._company_id = require_text(value, "Company ID cannot be empty", "company_id")

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = require_text(value, "Company name cannot be empty", "name")

    @property
    def industry_type(self) -> IndustryType:
        return self._industry_type

    @industry_type.setter
    def industry_type(self, value: IndustryType | str) -> None:
        self._industry_type = require_member(
            value, IndustryType, "Industry type", "industry_type"
        )

    @property
    def location(self) -> str:
        return self._location

    @location.setter
    def location(self, value: str) -> None:
        self._location = require_text(value, "Location cannot be empty", "location")

    def __str__(self) -> str:
        return (
            f"ID: {self.company_id}, Name: {self.name}, "
            f"Industry: {self.industry_type.value}, Location: {self.location}"
        )

    def __repr__(self) -> str:
        return f"Company(company_id={self.company_id!r})"
