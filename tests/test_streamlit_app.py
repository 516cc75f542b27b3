from __future__ import annotations

import datetime

import pytest
import requests
from streamlit.testing.v1 import AppTest

from fakes import FakeResponse

APP = "../app/streamlit_app.py"


class _ImageService:
    """Stands in for requests.get and records requested dates."""

    def __init__(self, response: FakeResponse):
        self.response = response
        self.dates: list[str] = []

    def __call__(self, url, params=None, timeout=None):
        self.dates.append(params["date_str"])
        return self.response


@pytest.fixture
def service(monkeypatch, png_body) -> _ImageService:
    fake = _ImageService(FakeResponse(200, png_body))
    monkeypatch.setattr(requests, "get", fake)
    return fake


def _run_page() -> AppTest:
    at = AppTest.from_file(APP, default_timeout=30)
    at.run()
    assert not at.exception
    return at


def _readout(at: AppTest) -> str:
    values = [m.value for m in at.markdown]
    return next(v for v in values if v.replace(" ", "").lstrip("-").isdigit())


def test_first_render_fetches_default_date(service) -> None:
    at = _run_page()
    assert service.dates == ["20240925"]
    assert _readout(at) == "20 20 0 0"
    assert len(at.error) == 0
    assert not any("Loading image..." in m.value for m in at.markdown)
    assert at.session_state["map_view"].state.image_url is not None


def test_date_picker_starts_on_selected_date(service) -> None:
    at = _run_page()
    assert at.date_input(key="date_picker").value == datetime.date(2024, 9, 25)


@pytest.mark.parametrize(
    "side, after_increase",
    [
        ("north", "21 20 0 0"),
        ("south", "20 21 0 0"),
        ("east", "20 20 1 0"),
        ("west", "20 20 0 1"),
    ],
)
def test_margin_buttons_update_readout(service, side, after_increase) -> None:
    at = _run_page()

    at.button(key=f"inc_{side}").click().run()
    assert _readout(at) == after_increase

    at.button(key=f"dec_{side}").click().run()
    assert _readout(at) == "20 20 0 0"

    at.button(key=f"dec_{side}").click().run()
    view = at.session_state["map_view"]
    assert getattr(view.state, f"{side}_margin") == (19 if side in ("north", "south") else -1)


def test_margin_buttons_do_not_refetch(service) -> None:
    at = _run_page()
    at.button(key="inc_north").click().run()
    at.button(key="dec_west").click().run()
    assert service.dates == ["20240925"]


def test_picking_a_date_refetches(service) -> None:
    at = _run_page()
    at.date_input(key="date_picker").set_value(datetime.date(2024, 5, 1)).run()
    assert not at.exception
    assert service.dates == ["20240925", "20240501"]
    assert at.session_state["map_view"].state.date == "20240501"


def test_failed_fetch_shows_error(monkeypatch) -> None:
    monkeypatch.setattr(requests, "get", _ImageService(FakeResponse(500, reason="Internal Server Error")))
    at = _run_page()
    assert [e.value for e in at.error] == ["Failed to fetch the image."]
    view = at.session_state["map_view"]
    assert view.state.loading is False
    assert view.state.image_url is None
