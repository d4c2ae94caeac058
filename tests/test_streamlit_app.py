"""Tests for the Streamlit front end."""

from __future__ import annotations

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from snowday import GENERATION_ERROR_MESSAGE

APP_PATH = str(Path(__file__).resolve().parent.parent / "streamlit_app.py")


@pytest.fixture()
def app(monkeypatch: pytest.MonkeyPatch) -> AppTest:
    monkeypatch.setenv("SNOWDAY_SIMULATED_LATENCY", "0")
    return AppTest.from_file(APP_PATH).run()


def submit(app: AppTest, postal_code: str) -> AppTest:
    app.text_input[0].input(postal_code)
    return app.button[0].click().run()


def test_initial_render_has_no_result(app: AppTest) -> None:
    assert not app.exception
    assert app.title[0].value == "Snow Day Calculator"
    assert len(app.metric) == 0
    assert len(app.error) == 0


def test_shows_probability_and_weather(app: AppTest) -> None:
    app = submit(app, "55401")

    assert not app.exception
    values = [metric.value for metric in app.metric]
    assert values == ["95%", "18°F", '10.4" expected', "15 mph"]


def test_no_snowfall_label(app: AppTest) -> None:
    app = submit(app, "90210")

    values = [metric.value for metric in app.metric]
    assert values == ["0%", "40°F", "None expected", "14 mph"]


def test_blank_input_rejected_before_calculation(app: AppTest) -> None:
    app = submit(app, "   ")

    assert app.error[0].value == "Please enter a postal code"
    assert len(app.metric) == 0


def test_invalid_postal_code_shows_generic_error(app: AppTest) -> None:
    app = submit(app, "ab")

    assert app.error[0].value == GENERATION_ERROR_MESSAGE
    assert len(app.metric) == 0
