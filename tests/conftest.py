"""Pytest fixtures for testing"""

import asyncio
import json
import pytest
from typing import Callable, List, Optional
from fastapi.testclient import TestClient

from future_letter.api.main import create_app
from future_letter.api.dependencies import get_llm_client, get_settings
from future_letter.config import Settings
from future_letter.domain.models import Goal, LetterInput
from future_letter.infrastructure.clients.llm import LLMResult

BASE_LETTER_MARKER = "【元のレター】"


def base_letter_from_prompt(prompt: str) -> str:
    """Pull the template letter back out of a polish prompt"""
    body = prompt.split(BASE_LETTER_MARKER, 1)[1].strip()
    return body.split("\n\n", 1)[0].strip()


def echo_letter(prompt: str) -> LLMResult:
    """Well-behaved polish: hand the base letter back unchanged"""
    letter = base_letter_from_prompt(prompt)
    return LLMResult(raw_text=json.dumps({"letter": letter}, ensure_ascii=False), duration_ms=12.0)


class FakeLLMClient:
    """Stand-in for LLMClient; responder maps the user prompt to an LLMResult"""

    def __init__(
        self,
        responder: Callable[[str], LLMResult] = echo_letter,
        delay: float = 0.0,
        model: str = "gpt-5-mini",
    ):
        self.responder = responder
        self.delay = delay
        self.model = model
        self.prompts: List[str] = []

    async def generate_structured_json(self, system, user, schema, schema_name="letter_from_future") -> LLMResult:
        self.prompts.append(user)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.responder(user)


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env"""
    values = {"openai_api_key": "", "polish_enabled": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def build_client(app_settings: Settings, llm_client: Optional[FakeLLMClient] = None) -> TestClient:
    app = create_app(app_settings)
    app.dependency_overrides[get_settings] = lambda: app_settings
    if llm_client is not None:
        app.dependency_overrides[get_llm_client] = lambda: llm_client
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    """Test client with LLM polish disabled (template letters only)"""
    return build_client(make_settings())


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def polish_client(fake_llm: FakeLLMClient) -> TestClient:
    """Test client with polish enabled against the fake LLM"""
    return build_client(make_settings(openai_api_key="test-key", polish_enabled=True), fake_llm)


@pytest.fixture
def sample_input() -> LetterInput:
    """Single earner with a comfortable margin"""
    return LetterInput(
        age=30,
        household_now=1,
        kids_future=0,
        annual_income_jpy=6_000_000,
        monthly_savings_jpy=30_000,
        current_savings_jpy=1_000_000,
        monthly_invest_jpy=20_000,
        current_invest_jpy=500_000,
        goal=Goal.FIRE,
    )


@pytest.fixture
def strained_input() -> LetterInput:
    """Family plan with contributions beyond income"""
    return LetterInput(
        age=35,
        household_now=2,
        kids_future=2,
        annual_income_jpy=3_600_000,
        monthly_savings_jpy=50_000,
        current_savings_jpy=100_000,
        monthly_invest_jpy=30_000,
        current_invest_jpy=0,
        goal=Goal.MORTGAGE,
    )


@pytest.fixture
def sample_payload(sample_input: LetterInput) -> dict:
    return {
        "age": sample_input.age,
        "household_now": sample_input.household_now,
        "kids_future": sample_input.kids_future,
        "annual_income_jpy": sample_input.annual_income_jpy,
        "monthly_savings_jpy": sample_input.monthly_savings_jpy,
        "current_savings_jpy": sample_input.current_savings_jpy,
        "monthly_invest_jpy": sample_input.monthly_invest_jpy,
        "current_invest_jpy": sample_input.current_invest_jpy,
        "goal": sample_input.goal.value,
    }
