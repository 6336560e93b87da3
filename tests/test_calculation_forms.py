"""Tests for form parsing, calculation dispatch and result rendering."""

from decimal import Decimal

import pytest

from taxadvisor.core.errors import InvalidInput
from taxadvisor.core.tax import (
    ESTIMATE_SAVINGS,
    EVALUATE_DONATION,
    BracketTable,
    EstimateRequest,
    EvaluateRequest,
    EvaluateResult,
    FilingStatus,
    TaxBracket,
    calculate,
    estimate_savings,
    evaluate_donation,
    format_calculation_result,
)

ESTIMATE_FORM = {
    "annualIncome": "100000",
    "currentTaxRate": "24",
    "donationAmount": "5000",
    "filingStatus": "single",
}

EVALUATE_FORM = {
    "targetTaxSavings": "2200",
    "annualIncome": "100000",
    "filingStatus": "single",
    "currentDeductions": "10000",
}


class TestFilingStatus:
    @pytest.mark.parametrize(
        "raw",
        ["married-filing-jointly", "MARRIED_FILING_JOINTLY", " Married-Filing-Jointly"],
    )
    def test_parse_variants(self, raw):
        assert FilingStatus.parse(raw) is FilingStatus.MARRIED_FILING_JOINTLY

    @pytest.mark.parametrize("raw", ["bogus", "", None, 3])
    def test_parse_rejects_unknown(self, raw):
        with pytest.raises(InvalidInput):
            FilingStatus.parse(raw)


class TestFormParsing:
    def test_estimate_from_form(self):
        req = EstimateRequest.from_form(ESTIMATE_FORM)
        assert req.annual_income == Decimal("100000")
        assert req.current_tax_rate == Decimal("24")
        assert req.filing_status is FilingStatus.SINGLE

    def test_strips_currency_formatting(self):
        form = dict(ESTIMATE_FORM, annualIncome=" $120,000.50 ", currentTaxRate="24%")
        req = EstimateRequest.from_form(form)
        assert req.annual_income == Decimal("120000.50")
        assert req.current_tax_rate == Decimal("24")

    @pytest.mark.parametrize("value", ["", "   ", "twelve", "NaN", "Infinity", None])
    def test_non_numeric_fields_fail(self, value):
        form = dict(ESTIMATE_FORM, donationAmount=value)
        with pytest.raises(InvalidInput) as exc_info:
            EstimateRequest.from_form(form)
        assert exc_info.value.field == "donationAmount"

    def test_blank_deductions_default_to_zero(self):
        req = EvaluateRequest.from_form(dict(EVALUATE_FORM, currentDeductions=""))
        assert req.current_deductions == 0

    def test_missing_target_fails(self):
        form = {k: v for k, v in EVALUATE_FORM.items() if k != "targetTaxSavings"}
        with pytest.raises(InvalidInput):
            EvaluateRequest.from_form(form)


class TestCalculate:
    def test_dispatch_estimate(self):
        result = calculate(ESTIMATE_SAVINGS, ESTIMATE_FORM)
        assert result.estimated_tax_savings == 1200.00

    def test_dispatch_evaluate(self):
        result = calculate(EVALUATE_DONATION, EVALUATE_FORM)
        assert isinstance(result, EvaluateResult)
        assert result.recommended_donation_amount == 10000.00

    def test_unknown_type(self):
        with pytest.raises(InvalidInput) as exc_info:
            calculate("compound_interest", ESTIMATE_FORM)
        assert exc_info.value.field == "type"

    def test_negative_form_value(self):
        with pytest.raises(InvalidInput):
            calculate(ESTIMATE_SAVINGS, dict(ESTIMATE_FORM, annualIncome="-5"))


class TestFormatting:
    def test_estimate_markdown(self):
        payload = calculate(ESTIMATE_SAVINGS, ESTIMATE_FORM).model_dump(by_alias=True)
        text = format_calculation_result(ESTIMATE_SAVINGS, payload)

        assert text.startswith("## Tax Savings Calculation Results")
        assert "**Estimated Tax Savings:** $1,200.00" in text
        assert "**Your Marginal Tax Rate:** 24%" in text
        assert "consult with a qualified tax professional" in text

    def test_evaluate_markdown(self):
        payload = calculate(EVALUATE_DONATION, EVALUATE_FORM).model_dump(by_alias=True)
        text = format_calculation_result(EVALUATE_DONATION, payload)

        assert "**Recommended Donation Amount:** $10,000.00" in text
        assert "- With Donation:" in text

    def test_missing_values_render_as_not_available(self):
        text = format_calculation_result(ESTIMATE_SAVINGS, {})
        assert "**Donation Amount:** N/A" in text
        assert "No recommendation available." in text

    def test_unknown_kind_falls_back_to_json(self):
        text = format_calculation_result("other", {"a": 1})
        assert text.startswith("Calculation completed for other:")


class TestAmountLimits:
    def test_huge_direct_amounts_are_rejected(self):
        with pytest.raises(InvalidInput) as exc_info:
            estimate_savings("1e27", "24", "1e27", "single")
        assert exc_info.value.field == "annualIncome"

    def test_huge_form_donation_is_rejected(self):
        form = dict(ESTIMATE_FORM, donationAmount="100000000000000000000000000")
        with pytest.raises(InvalidInput) as exc_info:
            calculate(ESTIMATE_SAVINGS, form)
        assert exc_info.value.field == "donationAmount"

    def test_largest_accepted_amount(self):
        form = dict(
            ESTIMATE_FORM, annualIncome="1,000,000,000,000,000", donationAmount="1e15"
        )
        result = calculate(ESTIMATE_SAVINGS, form)
        assert result.estimated_tax_savings == 240_000_000_000_000.00

    def test_result_too_large_to_round(self):
        step = TaxBracket(floor=Decimal(0), rate=Decimal("1e-20"))
        table = BracketTable({status: [step] for status in FilingStatus})
        with pytest.raises(InvalidInput):
            evaluate_donation("1e15", "100000", "single", "0", brackets=table)
