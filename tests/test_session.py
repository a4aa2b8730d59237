"""Tests for operator session state."""

import asyncio
import json

import httpx
import pytest

from email_triage.batch.cost import RateConfig
from email_triage.batch.runner import BatchState
from email_triage.config import TriageConfig
from email_triage.exceptions import BatchInProgressError
from email_triage.session import SAMPLE_INPUT, TriageSession


def _service(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/healthz":
        return httpx.Response(200, json={"status": "ok"})
    email = request.read().decode()
    category = "Sales" if "discount" in email else "Support"
    return httpx.Response(200, json={"email": "echo", "category": category, "auto_response": "Thanks!"})


@pytest.fixture
def session():
    config = TriageConfig(api_base="https://svc.test/")
    return TriageSession.from_config(config, transport=httpx.MockTransport(_service))


def test_sample_input_splits_into_four(session):
    assert session.raw_text == SAMPLE_INPUT
    assert len(session.emails) == 4
    assert session.classify_label == "Classify 4"
    assert session.total_cost == "0.0000"
    assert session.projected_cost == "0.0120"


def test_classify_label_without_emails(session):
    session.raw_text = "  \n\n "
    assert session.classify_label == "Classify"


def test_classify_all_updates_results_and_cost(session):
    outcome = asyncio.run(session.classify_all())
    assert outcome.state is BatchState.COMPLETED
    assert len(session.results) == 4
    assert session.results[2].category == "Sales"
    assert session.total_cost == "0.0120"


def test_set_rate_coerces(session):
    asyncio.run(session.classify_all())
    session.set_rate("classify_per_email", "abc")
    session.set_rate("generate_per_email", "0.01")
    assert session.rates.classify_per_email == 0.0
    assert session.total_cost == "0.0400"


def test_set_rate_unknown_field(session):
    with pytest.raises(ValueError):
        session.set_rate("per_token", 1)


def test_busy_guard(session):
    session.runner.busy = True
    assert session.classify_label == "Classifying..."
    with pytest.raises(BatchInProgressError):
        asyncio.run(session.classify_all())


def test_ping_ok(session):
    message = asyncio.run(session.ping())
    assert message == 'OK: {"status":"ok"}'
    assert session.ping_message == message


def test_ping_failure():
    transport = httpx.MockTransport(lambda request: httpx.Response(502))
    session = TriageSession.from_config(TriageConfig(api_base="https://svc.test"), transport=transport)
    asyncio.run(session.ping())
    assert session.ping_message.startswith("Failed: ")
    assert "502" in session.ping_message


def test_ping_without_endpoint():
    session = TriageSession.from_config(TriageConfig())
    asyncio.run(session.ping())
    assert session.ping_message.startswith("Failed: ")


def test_from_config_carries_settings():
    config = TriageConfig(
        api_base="https://svc.test",
        timeout=3.0,
        rates=RateConfig(0.01, 0.02),
        keep_partial_results=False,
    )
    session = TriageSession.from_config(config)
    assert session.client.base_url == "https://svc.test"
    assert session.client.timeout == 3.0
    assert session.rates.classify_per_email == 0.01
    assert session.runner.keep_partial_results is False


def test_set_rate_does_not_touch_injected_config():
    config = TriageConfig(api_base="https://svc.test", rates=RateConfig(0.001, 0.002))
    session = TriageSession.from_config(config)
    session.set_rate("classify_per_email", "0.5")
    assert session.rates.classify_per_email == 0.5
    assert config.rates.classify_per_email == 0.001


def test_ping_during_running_batch_leaves_batch_alone():
    release = None
    entered = None

    async def handler(request):
        if request.url.path == "/healthz":
            return httpx.Response(200, json={"status": "ok"})
        email = json.loads(await request.aread())["email"]
        if email == "second":
            entered.set()
            await release.wait()
        return httpx.Response(200, json={"email": email, "category": "Support", "auto_response": "ok"})

    async def scenario():
        nonlocal release, entered
        release = asyncio.Event()
        entered = asyncio.Event()
        session = TriageSession.from_config(
            TriageConfig(api_base="https://svc.test"),
            raw_text="first\nsecond\nthird",
            transport=httpx.MockTransport(handler),
        )
        batch = asyncio.get_running_loop().create_task(session.classify_all())
        await entered.wait()

        before = (session.runner.state, session.busy, list(session.results))
        message = await session.ping()
        after = (session.runner.state, session.busy, list(session.results))

        release.set()
        outcome = await batch
        return session, message, before, after, outcome

    session, message, before, after, outcome = asyncio.run(scenario())
    assert message == 'OK: {"status":"ok"}'
    assert before == after
    assert before[0] is BatchState.RUNNING
    assert before[1] is True
    assert [r.email for r in before[2]] == ["first"]
    assert outcome.state is BatchState.COMPLETED
    assert [r.email for r in session.results] == ["first", "second", "third"]
    assert session.busy is False
