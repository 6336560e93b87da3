"""Charitable-donation tax calculations."""

from .brackets import BracketTable, TaxBracket, default_bracket_table  # noqa: F401
from .engine import (  # noqa: F401
    calculate,
    estimate_savings,
    evaluate_donation,
    marginal_rate,
    progressive_tax,
)
from .formatting import format_calculation_result  # noqa: F401
from .models import (  # noqa: F401
    ESTIMATE_SAVINGS,
    EVALUATE_DONATION,
    CalculationResult,
    EstimateRequest,
    EstimateResult,
    EvaluateRequest,
    EvaluateResult,
    FilingStatus,
)
