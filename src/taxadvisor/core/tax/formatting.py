"""Markdown rendering of calculation results for chat transcripts."""

import json
from typing import Any, Mapping

from .models import ESTIMATE_SAVINGS, EVALUATE_DONATION

NOT_AVAILABLE = "N/A"
PLANNING_NOTE = (
    "*This is an estimate for planning purposes. Please consult with a "
    "qualified tax professional before making any financial decisions.*"
)


def _money(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"${value:,.2f}"


def _rate(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:g}%"


def format_calculation_result(kind: str, result: Mapping[str, Any]) -> str:
    """Render a camelCase result payload as a Markdown transcript entry."""
    analysis = result.get("recommendation") or "No recommendation available."
    if kind == ESTIMATE_SAVINGS:
        return (
            "## Tax Savings Calculation Results\n\n"
            f"**Donation Amount:** {_money(result.get('donationAmount'))}\n"
            f"**Estimated Tax Savings:** {_money(result.get('estimatedTaxSavings'))}\n"
            "**Effective Deduction Rate:** "
            f"{_rate(result.get('effectiveDeductionRate'))}\n"
            f"**Net Cost of Donation:** {_money(result.get('netCostOfDonation'))}\n"
            f"**Your Marginal Tax Rate:** {_rate(result.get('marginalTaxRate'))}\n\n"
            f"**Analysis:** {analysis}\n\n"
            f"{PLANNING_NOTE}"
        )
    if kind == EVALUATE_DONATION:
        return (
            "## Donation Amount Evaluation Results\n\n"
            f"**Target Tax Savings:** {_money(result.get('targetTaxSavings'))}\n"
            "**Recommended Donation Amount:** "
            f"{_money(result.get('recommendedDonationAmount'))}\n"
            f"**Projected Tax Savings:** {_money(result.get('projectedTaxSavings'))}\n"
            f"**Net Cost to You:** {_money(result.get('netCostToYou'))}\n\n"
            "**Tax Liability Comparison:**\n"
            f"- Current: {_money(result.get('currentTaxLiability'))}\n"
            f"- With Donation: {_money(result.get('newTaxLiability'))}\n\n"
            f"**Analysis:** {analysis}\n\n"
            f"{PLANNING_NOTE}"
        )
    return f"Calculation completed for {kind}: {json.dumps(dict(result), indent=2)}"
