"""Type definitions for the build-step registry."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class CallType(str, Enum):
    """How many times a step executes within one orchestration."""
    SINGULAR = "singular"  # Once per orchestration
    PER_LOOKUP = "per_lookup"  # Once per lookup spec
    PER_EXTRA_FIELD = "per_extra_field"  # Once per extra junction field


@dataclass
class BuildStepDefinition:
    """Canonical metadata for one step of an orchestrated build.
    
    Builds run their steps strictly in ``order``; every step after the first
    depends on an identifier produced by an earlier one.
    """
    step_id: str  # e.g., "REL_S1_REFERENCE_FIELD"
    operation: str
    order: int
    name: str
    call_type: CallType
    # Client method issuing the remote call
    remote_call: str
    dependencies: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.order < 1:
            raise ValueError(f"Step {self.step_id}: order must be >= 1")
        if self.step_id in self.dependencies:
            raise ValueError(f"Step {self.step_id}: cannot depend on itself")
