from core.models import MergeStrategy
from core.resolver import resolve_modules

POSITIONS = ["top_left", "top_right"]
ENV = {"modules_dir": "modules"}


def _resolve(configured, system=None, env=None, defaults=()):
    return resolve_modules(configured, system or [], env or ENV, POSITIONS, defaults)


def test_invalid_position_is_excluded_and_order_kept():
    descriptors = _resolve([
        {"module": "clock", "position": "top_left"},
        {"module": "bogus", "position": "not_a_region"},
        {"module": "calendar", "position": "top_left"},
    ])
    configured = [d.name for d in descriptors if d.name != "notification"]
    assert configured == ["clock", "calendar"]
    assert descriptors[0].name == "notification"
    assert len(descriptors) == 3


def test_empty_config_still_yields_notification():
    descriptors = _resolve([])
    assert [d.name for d in descriptors] == ["notification"]
    assert descriptors[0].position is None

    assert [d.name for d in resolve_modules(None, None, ENV, POSITIONS)] == ["notification"]


def test_system_modules_sit_between_notification_and_user_modules():
    descriptors = _resolve(
        [{"module": "clock", "position": "top_left"}],
        system=[{"module": "alert"}],
    )
    assert [d.name for d in descriptors] == ["notification", "alert", "clock"]
    assert [d.index for d in descriptors] == [0, 1, 2]


def test_disabled_and_bad_position_types_are_skipped():
    descriptors = _resolve([
        {"module": "a", "position": "top_left", "disabled": True},
        {"module": "b", "position": 3},
        {"module": "c", "position": ["top_left"]},
        {"module": "d"},
        {"position": "top_left"},
    ])
    assert [d.name for d in descriptors] == ["notification", "d"]


def test_index_and_identifier_count_skipped_entries():
    descriptors = _resolve([
        {"module": "bogus", "position": "nowhere"},
        {"module": "clock", "position": "top_left"},
        {"module": "clock", "position": "top_right"},
    ])
    clocks = [d for d in descriptors if d.name == "clock"]
    assert [d.index for d in clocks] == [2, 3]
    assert [d.identifier for d in clocks] == ["module_2_clock", "module_3_clock"]
    identifiers = [d.identifier for d in descriptors]
    assert len(identifiers) == len(set(identifiers))


def test_namespaced_module_class():
    descriptors = _resolve(
        [{"module": "vendor/ModuleX", "position": "top_left"}],
        env={"modules_dir": "/opt/mirror/modules/"},
    )
    module = descriptors[-1]
    assert module.name == "ModuleX"
    assert module.path == "/opt/mirror/modules/vendor/ModuleX/"
    assert module.url == "/opt/mirror/modules/vendor/ModuleX/ModuleX.py"
    assert module.classes == "vendor/ModuleX"


def test_default_modules_resolve_to_builtin_directory():
    descriptors = _resolve(
        [{"module": "clock", "position": "top_left"}, {"module": "MMM-ip"}],
        env={"modules_dir": "custom"},
        defaults=["clock", "notification"],
    )
    paths = {d.name: d.path for d in descriptors}
    assert paths["clock"] == "modules/default/clock/"
    assert paths["notification"] == "modules/default/notification/"
    assert paths["MMM-ip"] == "custom/MMM-ip/"


def test_default_modules_can_be_shadowed_by_test_tree():
    env = {"modules_dir": "tests/fixtures", "shadow_default_modules": True}
    descriptors = _resolve([{"module": "clock"}], env=env, defaults=["clock"])
    assert descriptors[-1].path == "tests/fixtures/clock/"

    env = {"modules_dir": "modules", "shadow_default_modules": True}
    descriptors = _resolve([{"module": "clock"}], env=env, defaults=["clock"])
    assert descriptors[-1].path == "modules/default/clock/"


def test_descriptor_fields_copied_through():
    descriptors = _resolve([{
        "module": "weather",
        "position": "top_right",
        "header": "Forecast",
        "hidden_on_startup": True,
        "animate_in": "fadeIn",
        "animate_out": "fadeOut",
        "classes": "small dimmed",
        "config_deep_merge": True,
        "config": {"type": "forecast"},
    }])
    weather = descriptors[-1]
    assert weather.header == "Forecast"
    assert weather.hidden_on_startup is True
    assert weather.animate_in == "fadeIn"
    assert weather.animate_out == "fadeOut"
    assert weather.classes == "small dimmed weather"
    assert weather.config_merge is MergeStrategy.DEEP
    assert weather.config == {"type": "forecast"}


def test_deep_merge_only_when_literally_true():
    descriptors = _resolve([
        {"module": "a", "config_deep_merge": "yes"},
        {"module": "b", "config_deep_merge": 1},
        {"module": "c"},
    ])
    assert all(d.config_merge is MergeStrategy.SHALLOW for d in descriptors)


def test_non_mapping_config_falls_back_to_defaults():
    descriptors = _resolve([{"module": "clock", "config": ["not", "a", "dict"]}])
    assert descriptors[-1].config == {}
