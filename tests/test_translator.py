import asyncio
import json
import time

from core import translator as translator_module
from core.translator import Translator, read_translation_file


def test_lookup_falls_back_to_core_and_key(tmp_path):
    (tmp_path / "en.json").write_text(json.dumps({"LOADING": "Loading", "WEEK": "Week {n}"}))
    (tmp_path / "de.json").write_text(json.dumps({"LOADING": "Lade"}))
    translator = Translator("de")
    translator.load_core(str(tmp_path))

    assert translator.translate("clock", "LOADING") == "Lade"
    assert translator.translate("clock", "WEEK", {"n": 7}) == "Week 7"
    assert translator.translate("clock", "MISSING") == "MISSING"
    assert translator.translate("clock", "MISSING", {"fallback": "-"}) == "-"


def test_module_translations_take_precedence(tmp_path):
    path = tmp_path / "mod.json"
    path.write_text(json.dumps({"LOADING": "Fetching {what}"}))
    translator = Translator("en")
    translator.core = {"LOADING": "Loading"}
    asyncio.run(translator.load("weather", str(path)))

    assert translator.translate("weather", "LOADING", {"what": "rain"}) == "Fetching rain"
    assert translator.translate("weather", "LOADING") == "Fetching {what}"
    assert translator.translate("clock", "LOADING") == "Loading"


def test_bad_translation_files_yield_empty_tables(tmp_path):
    assert read_translation_file(str(tmp_path / "missing.json")) == {}
    (tmp_path / "bad.json").write_text("{not json")
    assert read_translation_file(str(tmp_path / "bad.json")) == {}
    (tmp_path / "list.json").write_text("[1, 2]")
    assert read_translation_file(str(tmp_path / "list.json")) == {}


def test_slow_translation_file_times_out(tmp_path, monkeypatch):
    def slow_read(path):
        time.sleep(0.5)
        return {"LOADING": "late"}

    monkeypatch.setattr(translator_module, "read_translation_file", slow_read)
    translator = Translator("en", timeout=0.05)
    asyncio.run(translator.load("weather", str(tmp_path / "en.json")))

    assert translator.translations["weather"] == {}
    assert translator.translate("weather", "LOADING") == "LOADING"
