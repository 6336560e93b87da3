"""CLI argument mapping and the chat/calculate client flow."""

import io
import json

import httpx
import pytest

from taxadvisor.cli.__main__ import form_data, parse_args
from taxadvisor.cli.client import AdvisorAPIClient
from taxadvisor.cli.config import CLIConfig
from taxadvisor.cli.repl import AdvisorCLI


def _cli(handler, user_input: str = "") -> tuple[AdvisorCLI, io.StringIO]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    output = io.StringIO()
    cli = AdvisorCLI(
        AdvisorAPIClient(CLIConfig(), client=http),
        input_stream=io.StringIO(user_input),
        output_stream=output,
    )
    return cli, output


def test_estimate_args_map_to_form():
    args = parse_args(
        ["estimate", "--income", "100000", "--rate", "24", "--donation", "5000"]
    )
    kind, data = form_data(args)

    assert kind == "estimate_savings"
    assert data == {
        "annualIncome": "100000",
        "currentTaxRate": "24",
        "donationAmount": "5000",
        "filingStatus": "single",
    }


def test_evaluate_args_map_to_form():
    args = parse_args(["evaluate", "--target", "2200", "--income", "100000"])
    kind, data = form_data(args)

    assert kind == "evaluate_donation"
    assert data["currentDeductions"] == "0"


@pytest.mark.asyncio
async def test_chat_loop_keeps_session_id():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        requests.append(body)
        return httpx.Response(
            200,
            json={
                "sessionId": "sess_abc",
                "message": {"id": "msg_1", "role": "assistant", "content": "Hi!"},
            },
        )

    cli, output = _cli(handler, "hello\nmore\nexit\n")
    await cli.run()

    assert requests == [
        {"message": "hello"},
        {"message": "more", "sessionId": "sess_abc"},
    ]
    assert "Hi!" in output.getvalue()
    assert output.getvalue().endswith("Goodbye!\n")


@pytest.mark.asyncio
async def test_calculate_prints_markdown():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"donationAmount": 5000.0, "estimatedTaxSavings": 1200.0}
        )

    cli, output = _cli(handler)
    code = await cli.calculate("estimate_savings", {})

    assert code == 0
    assert "**Estimated Tax Savings:** $1,200.00" in output.getvalue()


@pytest.mark.asyncio
async def test_calculate_reports_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400, json={"detail": "annualIncome is required", "code": "INVALID_INPUT"}
        )

    cli, output = _cli(handler)
    code = await cli.calculate("estimate_savings", {})

    assert code == 1
    assert "Error (INVALID_INPUT)" in output.getvalue()
