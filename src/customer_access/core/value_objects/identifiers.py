"""Identifier value objects for customer-access.

Row ids in the hierarchy are positive integers. Wrapping the two ids that
cross component boundaries keeps user ids and tenant ids from being swapped.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class _IntegerId:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"{self.__class__.__name__} must be an integer")
        if self.value <= 0:
            raise ValueError(f"{self.__class__.__name__} must be positive, got {self.value}")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(_IntegerId):
    """Id of an application user (the actor being resolved)."""
    pass


@dataclass(frozen=True)
class TenantId(_IntegerId):
    """Id of a Customer row, the top of the ownership hierarchy."""
    pass
