"""Calculation requests and results.

Requests are parsed from the string-valued form fields the browser posts
(``{"annualIncome": "100000", ...}``).  Results serialize with the camelCase
keys the frontend renders.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taxadvisor.core.errors import InvalidInput

ESTIMATE_SAVINGS = "estimate_savings"
EVALUATE_DONATION = "evaluate_donation"

_STRIP_CHARS = (",", "$", "%")

# Largest magnitude accepted for any form amount (one quadrillion dollars).
MAX_AMOUNT = Decimal("1e15")


class FilingStatus(str, Enum):
    """Tax-household classification used for bracket lookup."""

    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married-filing-jointly"
    MARRIED_FILING_SEPARATELY = "married-filing-separately"
    HEAD_OF_HOUSEHOLD = "head-of-household"

    @classmethod
    def parse(cls, value: Any) -> "FilingStatus":
        """Accept enum members or case-insensitive strings (``_`` or ``-``)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for status in cls:
                if status.value == normalized:
                    return status
        raise InvalidInput(
            f"Unrecognized filing status: {value!r}", field="filingStatus"
        )


def to_decimal(value: Any, field: str) -> Decimal:
    """Convert a number or numeric form string to a finite ``Decimal``."""
    if isinstance(value, bool) or value is None:
        raise InvalidInput(f"{field} is required and must be numeric", field=field)
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip()
        for ch in _STRIP_CHARS:
            cleaned = cleaned.replace(ch, "")
        if not cleaned:
            raise InvalidInput(f"{field} is required", field=field)
        try:
            number = Decimal(cleaned)
        except InvalidOperation:
            raise InvalidInput(
                f"{field} must be numeric, got {value!r}", field=field
            ) from None
    else:
        raise InvalidInput(f"{field} must be numeric, got {value!r}", field=field)
    if not number.is_finite():
        raise InvalidInput(f"{field} must be a finite number", field=field)
    if abs(number) > MAX_AMOUNT:
        raise InvalidInput(f"{field} is too large", field=field)
    return number


@dataclass(frozen=True)
class EstimateRequest:
    """Inputs of the "estimate tax savings" form."""

    annual_income: Decimal
    current_tax_rate: Decimal
    donation_amount: Decimal
    filing_status: FilingStatus

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> "EstimateRequest":
        return cls(
            annual_income=to_decimal(data.get("annualIncome"), "annualIncome"),
            current_tax_rate=to_decimal(
                data.get("currentTaxRate"), "currentTaxRate"
            ),
            donation_amount=to_decimal(data.get("donationAmount"), "donationAmount"),
            filing_status=FilingStatus.parse(data.get("filingStatus")),
        )


@dataclass(frozen=True)
class EvaluateRequest:
    """Inputs of the "evaluate donation amount" form."""

    target_tax_savings: Decimal
    annual_income: Decimal
    filing_status: FilingStatus
    current_deductions: Decimal

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> "EvaluateRequest":
        # An untouched deductions field means "no deductions yet".
        raw_deductions = data.get("currentDeductions")
        if raw_deductions is None or (
            isinstance(raw_deductions, str) and not raw_deductions.strip()
        ):
            raw_deductions = "0"
        return cls(
            target_tax_savings=to_decimal(
                data.get("targetTaxSavings"), "targetTaxSavings"
            ),
            annual_income=to_decimal(data.get("annualIncome"), "annualIncome"),
            filing_status=FilingStatus.parse(data.get("filingStatus")),
            current_deductions=to_decimal(raw_deductions, "currentDeductions"),
        )


class _ResultModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class EstimateResult(_ResultModel):
    """Outcome of ``estimate_savings``; money in dollars, rates in percent."""

    donation_amount: float = Field(description="Donation being evaluated")
    estimated_tax_savings: float = Field(description="Tax reduction from the gift")
    effective_deduction_rate: float = Field(description="Rate actually applied")
    net_cost_of_donation: float = Field(description="Donation minus tax savings")
    marginal_tax_rate: float = Field(description="Supplied marginal rate")
    recommendation: str = Field(description="Templated explanation")


class EvaluateResult(_ResultModel):
    """Outcome of ``evaluate_donation``; money in dollars."""

    target_tax_savings: float = Field(description="Savings the user asked for")
    recommended_donation_amount: float = Field(
        description="Gift needed to reach the target"
    )
    projected_tax_savings: float = Field(
        description="Savings produced by the recommended gift"
    )
    net_cost_to_you: float = Field(description="Recommended gift minus savings")
    current_tax_liability: float = Field(description="Tax before the gift")
    new_tax_liability: float = Field(description="Tax after the gift")
    recommendation: str = Field(description="Templated explanation")


CalculationResult = EstimateResult | EvaluateResult
