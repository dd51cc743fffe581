import asyncio

import pytest

from config import DEFAULTS
from main import build
from web_app import create_app


@pytest.fixture
def mirror():
    config = dict(DEFAULTS)
    config["modules"] = [
        {"module": "clock", "position": "top_left", "header": "Time"},
        {"module": "compliments", "position": "lower_third", "hidden_on_startup": True},
        {"module": "bogus", "position": "middle_of_nowhere"},
    ]
    shell, orchestrator = build(config)
    asyncio.run(orchestrator.run(config["modules"]))
    app = create_app(orchestrator, shell, config)
    app.config["TESTING"] = True
    try:
        yield app.test_client(), orchestrator, shell
    finally:
        orchestrator.shutdown()


def test_page_renders_modules_and_resources(mirror):
    client, orchestrator, _ = mirror
    resp = client.get("/")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)

    assert 'id="module_2_clock"' in html
    assert "Time" in html
    assert 'class="module compliments hidden"' in html
    assert "bogus" not in html
    assert "/modules/default/clock/clock_styles.css" in html
    assert html.index("clock_styles.css") < html.index("/css/custom.css")


def test_env_endpoint(mirror):
    client, _, _ = mirror
    data = client.get("/env").get_json()
    assert data["modules_dir"] == "modules"
    assert data["custom_css"] == "css/custom.css"


def test_modules_endpoint_reports_state(mirror):
    client, _, _ = mirror
    data = client.get("/api/modules").get_json()
    assert data["started"] is True
    states = {m["name"]: m["state"] for m in data["modules"]}
    assert states == {
        "notification": "started",
        "alert": "started",
        "clock": "started",
        "compliments": "hidden",
    }


def test_module_actions(mirror):
    client, _, shell = mirror
    resp = client.post("/api/modules/module_3_compliments/show")
    assert resp.status_code == 200
    assert resp.get_json()["hidden"] is False
    assert not shell.get_module("module_3_compliments").hidden

    assert client.post("/api/modules/module_2_clock/explode").status_code == 400
    assert client.post("/api/modules/nope/hide").status_code == 404


def test_posted_notification_reaches_modules(mirror):
    client, _, shell = mirror
    resp = client.post("/api/notifications", json={
        "notification": "SHOW_ALERT",
        "payload": {"title": "Door", "message": "Front door open"},
    })
    assert resp.status_code == 200
    alert = shell.get_module("module_1_alert")
    assert alert.current["message"] == "Front door open"
    assert "Front door open" in client.get("/").get_data(as_text=True)

    assert client.post("/api/notifications", json={}).status_code == 400


def test_static_resources_are_restricted(mirror):
    client, _, _ = mirror
    assert client.get("/css/custom.css").status_code == 200
    assert client.get("/modules/default/clock/clock_styles.css").status_code == 200
    assert client.get("/modules/default/clock/clock.py").status_code == 404
    assert client.get("/config.py").status_code == 404


def test_broken_module_renders_as_empty_region(mirror):
    client, _, shell = mirror
    clock = shell.get_module("module_2_clock")

    def broken_dom():
        raise KeyError("missing field")

    clock.get_dom = broken_dom
    resp = client.get("/")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert 'id="module_2_clock"' in html
    assert 'id="module_3_compliments"' in html
