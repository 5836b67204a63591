"""Internship Workflows.

State machine for the placement lifecycle.
"""

from mgmt_kernel.logging_config import get_logger
from mgmt_kernel.workflow import Transition, Workflow

logger = get_logger("modules.internship.workflows")

PENDING = "PENDING"
ONGOING = "ONGOING"
COMPLETED = "COMPLETED"

# Statuses that block a student from starting another placement.
ACTIVE_STATES = (PENDING, ONGOING)


INTERNSHIP_WORKFLOW = Workflow(
    name="internship",
    description="Internship placement lifecycle",
    initial_state=PENDING,
    states=(PENDING, ONGOING, COMPLETED),
    transitions=(
        Transition(PENDING, ONGOING, action="start"),
        Transition(ONGOING, COMPLETED, action="complete"),
    ),
    terminal_states=(COMPLETED,),
)

logger.debug(
    "internship_workflow_defined",
    extra={
        "workflow": INTERNSHIP_WORKFLOW.name,
        "actions": [t.action for t in INTERNSHIP_WORKFLOW.transitions],
    },
)
