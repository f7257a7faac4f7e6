import pytest

from kube_ir.framework.config import RunConfig
from kube_ir.optimize import DEFAULT_PASS_SEQUENCE


def test_run_config_defaults_from_empty_mapping():
    cfg, warnings = RunConfig.from_dict({})

    assert warnings == []
    assert cfg.strict is False
    assert cfg.optimize.passes == DEFAULT_PASS_SEQUENCE
    assert cfg.optimize.on_error == "continue"
    assert cfg.logging.level == "INFO"
    assert cfg.logging.log_dir is None


def test_run_config_parses_values():
    cfg, warnings = RunConfig.from_dict(
        {
            "optimize": {"passes": ["image_pull_policy"], "on_error": "halt"},
            "logging": {"level": "debug", "log_dir": "/tmp/kube-ir-logs"},
        }
    )

    assert warnings == []
    assert cfg.optimize.passes == ("image_pull_policy",)
    assert cfg.optimize.on_error == "halt"
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.log_dir == "/tmp/kube-ir-logs"


def test_run_config_null_sections_use_defaults():
    cfg, warnings = RunConfig.from_dict({"optimize": None, "logging": None})

    assert warnings == []
    assert cfg.optimize.passes == DEFAULT_PASS_SEQUENCE
    assert cfg.logging.level == "INFO"


def test_run_config_empty_pass_list_is_allowed_with_warning():
    cfg, warnings = RunConfig.from_dict({"optimize": {"passes": []}})

    assert cfg.optimize.passes == ()
    assert len(warnings) == 1
    assert "optimize.passes is empty" in warnings[0]
    assert "image pull policies stay unset" in warnings[0]


def test_run_config_unknown_keys_warn_by_default():
    _cfg, warnings = RunConfig.from_dict({"optimize": {"pases": []}, "extra": 1})

    assert warnings == ["Unknown config keys ignored: extra, optimize.pases"]


def test_run_config_unknown_keys_fail_when_strict():
    with pytest.raises(ValueError, match=r"Unknown config keys under optimize: pases"):
        RunConfig.from_dict({"strict": True, "optimize": {"pases": []}})


@pytest.mark.parametrize("level", [None, "chatty", 10])
def test_run_config_rejects_bad_log_level_with_value_or_type_error(level):
    with pytest.raises((ValueError, TypeError), match=r"logging\.level"):
        RunConfig.from_dict({"logging": {"level": level}})


def test_run_config_null_log_level_names_allowed_levels():
    with pytest.raises(ValueError, match=r"logging\.level must be one of: DEBUG, INFO, WARNING, ERROR \(got None\)"):
        RunConfig.from_dict({"logging": {"level": None}})


def test_run_config_rejects_null_on_error():
    with pytest.raises(ValueError, match=r"optimize\.on_error cannot be null"):
        RunConfig.from_dict({"optimize": {"on_error": None}})


def test_run_config_rejects_invalid_values():
    with pytest.raises(ValueError, match=r"optimize\.on_error must be one of: continue, halt"):
        RunConfig.from_dict({"optimize": {"on_error": "retry"}})
    with pytest.raises(TypeError, match=r"strict must be a boolean"):
        RunConfig.from_dict({"strict": "yes"})
    with pytest.raises(ValueError, match=r"Config must be a mapping"):
        RunConfig.from_dict(["not", "a", "mapping"])  # type: ignore[arg-type]
