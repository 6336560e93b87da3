"""Marginal-rate bracket tables.

A bracket table maps each filing status to an ascending list of
``(floor, rate)`` steps.  The rate for an income is the rate of the last
step whose floor does not exceed it.  Tables are configuration: the
default below is the 2024 US federal schedule and can be replaced through
``AppConfig.tax.brackets``.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import BaseModel, Field, RootModel, model_validator

from .models import FilingStatus


class TaxBracket(BaseModel):
    """One step of the marginal-rate schedule."""

    floor: Decimal = Field(ge=0, description="Lowest taxable income in the step")
    rate: Decimal = Field(ge=0, le=100, description="Marginal rate in percent")


class BracketTable(RootModel[dict[FilingStatus, list[TaxBracket]]]):
    """Bracket schedule for every filing status."""

    @model_validator(mode="after")
    def _check_monotonic(self) -> "BracketTable":
        missing = [s.value for s in FilingStatus if s not in self.root]
        if missing:
            raise ValueError(f"bracket table missing filing statuses: {missing}")
        for status, steps in self.root.items():
            if not steps:
                raise ValueError(f"no brackets for {status.value}")
            if steps[0].floor != 0:
                raise ValueError(f"first {status.value} bracket must start at 0")
            for lower, upper in zip(steps, steps[1:]):
                if upper.floor <= lower.floor:
                    raise ValueError(
                        f"{status.value} bracket floors must strictly increase"
                    )
                if upper.rate < lower.rate:
                    raise ValueError(
                        f"{status.value} bracket rates must not decrease"
                    )
        return self

    def for_status(self, status: FilingStatus) -> list[TaxBracket]:
        return self.root[status]


def _steps(*pairs: tuple[int, int]) -> list[TaxBracket]:
    return [TaxBracket(floor=Decimal(f), rate=Decimal(r)) for f, r in pairs]


_RATES = (10, 12, 22, 24, 32, 35, 37)

_FLOORS_2024 = {
    FilingStatus.SINGLE: (0, 11600, 47150, 100525, 191950, 243725, 609350),
    FilingStatus.MARRIED_FILING_JOINTLY: (
        0, 23200, 94300, 201050, 383900, 487450, 731200,
    ),
    FilingStatus.MARRIED_FILING_SEPARATELY: (
        0, 11600, 47150, 100525, 191950, 243725, 365600,
    ),
    FilingStatus.HEAD_OF_HOUSEHOLD: (0, 16550, 63100, 100500, 191950, 243700, 609350),
}


@lru_cache(maxsize=1)
def default_bracket_table() -> BracketTable:
    """2024 federal ordinary-income brackets."""
    return BracketTable(
        {
            status: _steps(*zip(floors, _RATES))
            for status, floors in _FLOORS_2024.items()
        }
    )
