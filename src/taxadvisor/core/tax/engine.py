"""Tax savings arithmetic.

Every function here is pure: the same inputs always produce the same
result, nothing is cached and nothing is persisted.  Money is computed
with ``Decimal`` and rounded half-up to cents only when a result is built.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping

from taxadvisor.core.errors import InvalidInput

from .brackets import BracketTable, default_bracket_table
from .models import (
    ESTIMATE_SAVINGS,
    EVALUATE_DONATION,
    CalculationResult,
    EstimateRequest,
    EstimateResult,
    EvaluateRequest,
    EvaluateResult,
    FilingStatus,
    to_decimal,
)

CENT = Decimal("0.01")
HUNDRED = Decimal(100)
ZERO = Decimal(0)


def round_money(value: Decimal) -> Decimal:
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidInput("Amount is too large to calculate") from None


def _non_negative(value: Any, field: str) -> Decimal:
    number = to_decimal(value, field)
    if number < 0:
        raise InvalidInput(f"{field} must not be negative", field=field)
    return number


def _percentage(value: Any, field: str) -> Decimal:
    number = to_decimal(value, field)
    if number < 0 or number > HUNDRED:
        raise InvalidInput(f"{field} must be between 0 and 100", field=field)
    return number


def _table(brackets: BracketTable | None) -> BracketTable:
    return brackets if brackets is not None else default_bracket_table()


def _fmt_money(value: Decimal) -> str:
    return f"${round_money(value):,.2f}"


def _fmt_rate(value: Decimal) -> str:
    return f"{value.normalize():f}%"


# ---------------------------------------------------------------------------
# Bracket helpers
# ---------------------------------------------------------------------------


def marginal_rate(
    income: Any,
    filing_status: Any,
    brackets: BracketTable | None = None,
) -> Decimal:
    """Return the marginal rate (percent) that applies to ``income``."""
    amount = _non_negative(income, "annualIncome")
    status = FilingStatus.parse(filing_status)
    table = _table(brackets)
    rate = ZERO
    for step in table.for_status(status):
        if amount < step.floor:
            break
        rate = step.rate
    return rate


def progressive_tax(
    income: Any,
    filing_status: Any,
    brackets: BracketTable | None = None,
) -> Decimal:
    """Total tax on ``income`` when each slice is taxed at its own rate."""
    amount = _non_negative(income, "annualIncome")
    status = FilingStatus.parse(filing_status)
    steps = _table(brackets).for_status(status)
    tax = ZERO
    for i, step in enumerate(steps):
        if amount <= step.floor:
            break
        ceiling = steps[i + 1].floor if i + 1 < len(steps) else amount
        tax += (min(amount, ceiling) - step.floor) * step.rate / HUNDRED
    return tax


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def _estimate_recommendation(
    income: Decimal, rate: Decimal, donation: Decimal, savings: Decimal
) -> str:
    if donation == 0:
        return (
            "Enter a donation amount to see how much of it would come back "
            "to you as a tax deduction."
        )
    if rate == 0:
        return (
            f"At a 0% marginal rate a donation of {_fmt_money(donation)} does "
            "not reduce your income tax; the full amount is your net cost."
        )
    text = (
        f"Donating {_fmt_money(donation)} at your {_fmt_rate(rate)} marginal "
        f"rate could reduce your taxes by about {_fmt_money(savings)}, so the "
        f"gift effectively costs you {_fmt_money(donation - savings)}."
    )
    if donation > income:
        text += (
            " The donation exceeds your annual income; deduction limits "
            "based on adjusted gross income may reduce the actual benefit."
        )
    return text


def estimate_savings(
    income: Any,
    tax_rate: Any,
    donation_amount: Any,
    filing_status: Any,
) -> EstimateResult:
    """Estimate the tax saved by deducting ``donation_amount``.

    The supplied marginal rate is applied directly; adjusted-gross-income
    deduction caps are not modeled, so the effective deduction rate equals
    the input rate.
    """
    income_d = _non_negative(income, "annualIncome")
    rate = _percentage(tax_rate, "currentTaxRate")
    donation = _non_negative(donation_amount, "donationAmount")
    FilingStatus.parse(filing_status)

    savings = max(round_money(donation * rate / HUNDRED), ZERO)
    net_cost = round_money(donation) - savings
    return EstimateResult(
        donation_amount=float(round_money(donation)),
        estimated_tax_savings=float(savings),
        effective_deduction_rate=float(rate),
        net_cost_of_donation=float(net_cost),
        marginal_tax_rate=float(rate),
        recommendation=_estimate_recommendation(income_d, rate, donation, savings),
    )


def _evaluate_recommendation(
    target: Decimal, rate: Decimal, donation: Decimal, net_cost: Decimal
) -> str:
    if target == 0:
        return "Set a target tax savings amount to get a donation recommendation."
    return (
        f"To save about {_fmt_money(target)} in taxes at your "
        f"{_fmt_rate(rate)} marginal rate, consider donating "
        f"{_fmt_money(donation)}. After the deduction, the donation costs you "
        f"roughly {_fmt_money(net_cost)}."
    )


def evaluate_donation(
    target_savings: Any,
    income: Any,
    filing_status: Any,
    current_deductions: Any,
    brackets: BracketTable | None = None,
) -> EvaluateResult:
    """Find the donation that yields ``target_savings`` in tax reduction.

    The marginal rate comes from the bracket table applied to income net of
    current deductions.  Feeding ``recommendedDonationAmount`` back through
    ``estimate_savings`` at that rate reproduces the target within a cent.
    """
    target = _non_negative(target_savings, "targetTaxSavings")
    income_d = _non_negative(income, "annualIncome")
    status = FilingStatus.parse(filing_status)
    deductions = _non_negative(current_deductions, "currentDeductions")

    taxable = max(income_d - deductions, ZERO)
    rate = marginal_rate(taxable, status, brackets)
    if rate == 0 and target > 0:
        raise InvalidInput(
            "Target tax savings cannot be reached at a 0% marginal rate",
            field="targetTaxSavings",
        )

    donation = round_money(target * HUNDRED / rate) if target > 0 else ZERO
    projected = round_money(donation * rate / HUNDRED)
    net_cost = donation - projected
    current = round_money(progressive_tax(taxable, status, brackets))
    new = max(current - projected, ZERO)
    return EvaluateResult(
        target_tax_savings=float(round_money(target)),
        recommended_donation_amount=float(donation),
        projected_tax_savings=float(projected),
        net_cost_to_you=float(net_cost),
        current_tax_liability=float(current),
        new_tax_liability=float(new),
        recommendation=_evaluate_recommendation(target, rate, donation, net_cost),
    )


def calculate(
    kind: str,
    data: Mapping[str, Any],
    brackets: BracketTable | None = None,
) -> CalculationResult:
    """Dispatch a ``{type, data}`` calculation request from the browser form."""
    if not isinstance(data, Mapping):
        raise InvalidInput("data must be an object of form fields", field="data")
    if kind == ESTIMATE_SAVINGS:
        req = EstimateRequest.from_form(data)
        return estimate_savings(
            req.annual_income,
            req.current_tax_rate,
            req.donation_amount,
            req.filing_status,
        )
    if kind == EVALUATE_DONATION:
        ev = EvaluateRequest.from_form(data)
        return evaluate_donation(
            ev.target_tax_savings,
            ev.annual_income,
            ev.filing_status,
            ev.current_deductions,
            brackets,
        )
    raise InvalidInput(f"Unknown calculation type: {kind!r}", field="type")
