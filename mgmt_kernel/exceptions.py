"""
Typed exception hierarchy for the management systems.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every failure in the three programs is, from the user's point of view, the
same thing: an argument was not acceptable and the shell must ask again.
Callers still need to tell a bad number from a duplicate registration
number without parsing message strings, so each refinement is its own class
with a class-level ``code`` and its context stored as attributes:

    try:
        service.register_vehicle("car", ...)
    except DuplicateEntityError as e:
        print(f"{e.key_name} {e.key_value} is already registered")
    except InvalidArgumentError as e:
        print(f"Error: {e}")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ManagementError (base)
    |
    +-- InvalidArgumentError
        +-- InvalidNumberFormatError
        +-- InvalidDateFormatError
        +-- InvalidSelectionError
        +-- DuplicateEntityError
        +-- DuplicateDeclarationError
        +-- EntityValidationError
        +-- InvalidStatusTransitionError
        +-- ActiveInternshipExistsError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                        | When Raised
----------------------------|--------------------------------------------------
INVALID_ARGUMENT            | Empty string, out-of-range number, bad enum value
INVALID_NUMBER_FORMAT       | Text could not be parsed as a number
INVALID_DATE_FORMAT         | Text did not match the program's date pattern
INVALID_SELECTION           | Menu / list choice outside the offered range
DUPLICATE_ENTITY            | Unique key (ID, registration number, TIN) taken
DUPLICATE_DECLARATION       | Same declaration type, same taxpayer, same month
ENTITY_VALIDATION_FAILED    | Variant-level validate() predicate returned False
INVALID_STATUS_TRANSITION   | Internship status action not allowed from state
ACTIVE_INTERNSHIP_EXISTS    | Student already has a PENDING/ONGOING internship

===============================================================================
DESIGN DECISIONS
===============================================================================

1. WHY INHERIT FROM Exception (not ValueError)?
   Domain errors should be catchable as a group without also catching
   programming errors raised by the standard library.

2. WHY IS EVERYTHING AN InvalidArgumentError?
   The shells have exactly one recovery policy (report and re-prompt), so
   one ``except InvalidArgumentError`` covers every domain failure.
"""


class ManagementError(Exception):
    """
    Base exception for all management-system errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "MANAGEMENT_ERROR"


class InvalidArgumentError(ManagementError):
    """A value was rejected by validation."""

    code: str = "INVALID_ARGUMENT"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class InvalidNumberFormatError(InvalidArgumentError):
    """Text could not be parsed as a number."""

    code: str = "INVALID_NUMBER_FORMAT"

    def __init__(self, raw_value: str, expected: str = "number"):
        self.raw_value = raw_value
        self.expected = expected
        super().__init__(
            f"Invalid number format. Please enter a valid {expected}."
        )


class InvalidDateFormatError(InvalidArgumentError):
    """Text did not match the expected date pattern."""

    code: str = "INVALID_DATE_FORMAT"

    def __init__(self, raw_value: str, pattern: str):
        self.raw_value = raw_value
        self.pattern = pattern
        super().__init__(f"Invalid date format. Please use {pattern} format.")


class InvalidSelectionError(InvalidArgumentError):
    """A numbered choice was outside the offered range."""

    code: str = "INVALID_SELECTION"

    def __init__(self, what: str, choice: int, upper_bound: int):
        self.what = what
        self.choice = choice
        self.upper_bound = upper_bound
        super().__init__(f"Invalid {what} selection")


class DuplicateEntityError(InvalidArgumentError):
    """A unique key is already present in a registry."""

    code: str = "DUPLICATE_ENTITY"

    def __init__(self, entity_kind: str, key_name: str, key_value: str):
        self.entity_kind = entity_kind
        self.key_name = key_name
        self.key_value = key_value
        super().__init__(
            f"{key_name} already exists. Please enter a unique value.",
            field=key_name,
        )


class DuplicateDeclarationError(InvalidArgumentError):
    """A taxpayer already filed this declaration type for the month."""

    code: str = "DUPLICATE_DECLARATION"

    def __init__(self, tin: str, declaration_type: str, period: str):
        self.tin = tin
        self.declaration_type = declaration_type
        self.period = period
        super().__init__("Duplicate declaration for the same period")


class EntityValidationError(InvalidArgumentError):
    """A variant's validation predicate rejected the constructed entity."""

    code: str = "ENTITY_VALIDATION_FAILED"

    def __init__(self, entity_kind: str, reasons: list[str]):
        self.entity_kind = entity_kind
        self.reasons = list(reasons)
        detail = "; ".join(self.reasons)
        message = f"{entity_kind} validation failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidStatusTransitionError(InvalidArgumentError):
    """The requested status action is not allowed from the current state."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, workflow: str, from_state: str, action: str):
        self.workflow = workflow
        self.from_state = from_state
        self.action = action
        super().__init__(
            f"Cannot {action} {workflow} in state {from_state}"
        )


class ActiveInternshipExistsError(InvalidArgumentError):
    """The student already holds a PENDING or ONGOING internship."""

    code: str = "ACTIVE_INTERNSHIP_EXISTS"

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__("This student already has an active internship")
