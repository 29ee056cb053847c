"""Salary profile model and the income-model variant it resolves to."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from errors import ValidationError

ROLE_FIXED = "fixed"
ROLE_VARIABLE = "variable"
INCOME_ROLES = (ROLE_FIXED, ROLE_VARIABLE)


@dataclass(frozen=True)
class FixedIncome:
    """A flat monthly salary in local currency."""

    amount: Decimal


@dataclass(frozen=True)
class VariableIncome:
    """An hourly wage billed in a foreign currency."""

    hourly_rate: Decimal


IncomeModel = Union[FixedIncome, VariableIncome]


@dataclass
class SalaryProfile:
    """A participant's income configuration (one per participant).

    Attributes:
        id: Unique identifier (auto-generated).
        participant_id: Owning participant.
        role: "fixed" or "variable"; selects which amount field applies.
        fixed_amount: Monthly salary for fixed earners, else None.
        hourly_rate: Hourly rate for variable earners, else None.
        currency: Currency of the populated amount field.
        created_at: Creation timestamp.
        updated_at: Last upsert timestamp.
    """

    id: int
    participant_id: int
    role: str
    fixed_amount: Optional[Decimal]
    hourly_rate: Optional[Decimal]
    currency: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def income_model(self) -> IncomeModel:
        """Resolve the profile into its income variant.

        Raises:
            ValidationError: If the amount field required by the role is
                missing. There is no fallback to the other shape.
        """
        if self.role == ROLE_FIXED:
            if self.fixed_amount is None:
                raise ValidationError(
                    f"Salary profile {self.id} is fixed but has no fixed amount",
                    "fixed_amount",
                )
            return FixedIncome(amount=self.fixed_amount)

        if self.role == ROLE_VARIABLE:
            if self.hourly_rate is None:
                raise ValidationError(
                    f"Salary profile {self.id} is variable but has no hourly rate",
                    "hourly_rate",
                )
            return VariableIncome(hourly_rate=self.hourly_rate)

        raise ValidationError(f"Unknown income role: {self.role!r}", "role")
