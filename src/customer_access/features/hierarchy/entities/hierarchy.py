"""Hierarchy entities for customer-access."""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional


class ScopeNuance(str, Enum):
    """How widely a customer member sees within their tenant."""
    DIVISION = "division"  # own branch's agency division only
    TENANT = "tenant"      # every branch of the tenant


@dataclass(frozen=True)
class BranchBridge:
    """A branch and the external references it bridges to."""
    branch_id: int
    customer_id: int
    agency_id: Optional[int] = None
    division_id: Optional[int] = None
    inspector_id: Optional[int] = None


@dataclass(frozen=True)
class EmployeeContext:
    """A user's employee row joined with the branch it belongs to."""
    employee_id: int
    user_id: int
    customer_id: int
    branch_id: Optional[int] = None
    agency_id: Optional[int] = None
    division_id: Optional[int] = None
    inspector_id: Optional[int] = None

    @property
    def has_division(self) -> bool:
        return self.division_id is not None

    @classmethod
    def from_row(cls, row) -> "EmployeeContext":
        return cls(
            employee_id=int(row["employee_id"]),
            user_id=int(row["user_id"]),
            customer_id=int(row["customer_id"]),
            branch_id=_optional_int(row["branch_id"]),
            agency_id=_optional_int(row["agency_id"]),
            division_id=_optional_int(row["division_id"]),
            inspector_id=_optional_int(row["inspector_id"]),
        )

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "user_id": self.user_id,
            "customer_id": self.customer_id,
            "branch_id": self.branch_id,
            "agency_id": self.agency_id,
            "division_id": self.division_id,
            "inspector_id": self.inspector_id,
        }


@dataclass(frozen=True)
class CallerScope:
    """Classification of a customer member for role-specific filtering."""
    nuance: ScopeNuance
    customer_id: int
    employee: Optional[EmployeeContext] = None
    owned_customer_ids: FrozenSet[int] = frozenset()

    @property
    def is_division_scoped(self) -> bool:
        return self.nuance == ScopeNuance.DIVISION


def _optional_int(value) -> Optional[int]:
    return int(value) if value is not None else None
