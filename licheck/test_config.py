import datetime
import json
import os

import pytest

from licheck.config import (
    Configuration,
    HeaderTemplate,
    InvalidConfiguration,
    config_from_dict,
    current_year,
    load_config,
    render_timeframe,
    validate_config,
)

TEMPLATE = "// Copyright {TIMEFRAME}. MIT license."


def make_config(**kwargs) -> Configuration:
    defaults = dict(extensions=[".ts"], header_text=TEMPLATE, root_dir=".")
    defaults.update(kwargs)
    return Configuration(**defaults)


def test_valid_configurations():
    validate_config(make_config(), 2026)
    validate_config(make_config(first_year=1901), 2026)
    validate_config(make_config(first_year=2026), 2026)


@pytest.mark.parametrize("first_year", [0, 1900, 2027])
def test_invalid_first_year(first_year):
    with pytest.raises(InvalidConfiguration) as excinfo:
        validate_config(make_config(first_year=first_year), 2026)
    assert excinfo.value.reason == "Invalid first year"


def test_empty_fields():
    with pytest.raises(InvalidConfiguration, match="No extensions provided"):
        validate_config(make_config(extensions=[]), 2026)
    with pytest.raises(InvalidConfiguration, match="No root directory provided"):
        validate_config(make_config(root_dir=""), 2026)
    with pytest.raises(InvalidConfiguration, match="No header text provided"):
        validate_config(make_config(header_text=""), 2026)


def test_checks_run_in_fixed_order():
    config = make_config(first_year=1800, extensions=[], root_dir="", header_text="")
    with pytest.raises(InvalidConfiguration, match="Invalid first year"):
        validate_config(config, 2026)
    config = make_config(extensions=[], root_dir="", header_text="")
    with pytest.raises(InvalidConfiguration, match="No extensions provided"):
        validate_config(config, 2026)


@pytest.mark.parametrize("header_text", [
    "// Copyright 2020. MIT license.",
    "// Copyright {TIMEFRAME}-{TIMEFRAME}. MIT license.",
])
def test_timeframe_token_must_appear_once(header_text):
    with pytest.raises(InvalidConfiguration, match="exactly once"):
        validate_config(make_config(header_text=header_text), 2026)


def test_render_timeframe():
    assert render_timeframe(2018, 2026) == "2018-2026"
    assert render_timeframe(None, 2026) == "2026"
    assert render_timeframe(2026, 2026) == "2026"


def test_header_template_split():
    header = HeaderTemplate.render(make_config(first_year=2018), 2026)
    assert header.prefix == "// Copyright "
    assert header.suffix == ". MIT license."
    assert header.text == "// Copyright 2018-2026. MIT license."


@pytest.mark.parametrize("header_text", [
    "{TIMEFRAME}",
    "// Copyright {TIMEFRAME}",
    "{TIMEFRAME} Acme Corp. MIT license.",
])
def test_timeframe_token_needs_text_on_both_sides(header_text):
    with pytest.raises(InvalidConfiguration, match="text before and after"):
        validate_config(make_config(header_text=header_text), 2026)


def test_current_year():
    assert current_year(datetime.date(2019, 12, 31)) == 2019
    assert current_year() == datetime.date.today().year


def test_configuration_is_immutable():
    config = make_config(exclusions=["a.ts"])
    assert config.extensions == (".ts",)
    assert config.exclusions == ("a.ts",)
    with pytest.raises(AttributeError):
        config.root_dir = "elsewhere"


@pytest.mark.parametrize("field", ["extensions", "exclusions"])
def test_configuration_rejects_bare_string_lists(field):
    with pytest.raises(InvalidConfiguration, match=f"{field} must be a list of strings"):
        make_config(**{field: ".ts"})


# --- Loading ---

def test_config_from_dict():
    config = config_from_dict({
        "extensions": [".ts", ".js"],
        "exclusions": ["**/vendor/**"],
        "firstYear": 2022,
        "headerText": TEMPLATE,
        "rootDir": "src",
        "quiet": True,
    })
    assert config == Configuration(
        extensions=(".ts", ".js"),
        exclusions=("**/vendor/**",),
        first_year=2022,
        header_text=TEMPLATE,
        root_dir="src",
        quiet=True,
    )


def test_config_defaults():
    config = config_from_dict({"extensions": [".ts"], "headerText": TEMPLATE, "rootDir": "."})
    assert config.exclusions == ()
    assert config.first_year is None
    assert config.quiet is False
    assert config.keep_going is False


def test_config_legacy_license_text():
    config = config_from_dict({"extensions": [".ts"], "licenseText": TEMPLATE, "rootDir": "."})
    assert config.header_text == TEMPLATE


def test_config_unknown_key_is_ignored(capsys):
    config = config_from_dict({"extensions": [".ts"], "headerText": TEMPLATE, "rootDir": ".", "colour": "red"})
    assert config.header_text == TEMPLATE
    assert "Ignoring unknown configuration key: colour" in capsys.readouterr().out


@pytest.mark.parametrize("data, message", [
    ({"extensions": ".ts", "headerText": TEMPLATE, "rootDir": "."}, "extensions must be a list of strings"),
    ({"extensions": [1], "headerText": TEMPLATE, "rootDir": "."}, "extensions must be a list of strings"),
    ({"extensions": [".ts"], "headerText": TEMPLATE, "rootDir": ".", "firstYear": "2020"}, "firstYear must be an integer"),
    ({"extensions": [".ts"], "headerText": TEMPLATE, "rootDir": ".", "firstYear": True}, "firstYear must be an integer"),
    ({"extensions": [".ts"], "headerText": TEMPLATE, "rootDir": ".", "quiet": "yes"}, "quiet must be a boolean"),
    ({"extensions": [".ts"], "rootDir": "."}, "Missing required configuration key: headerText"),
    ([".ts"], "Configuration must be a JSON object"),
])
def test_config_type_errors(data, message):
    with pytest.raises(InvalidConfiguration, match=message):
        config_from_dict(data)


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"extensions": [".py"], "headerText": "# (c) {TIMEFRAME}", "rootDir": "."}))
    config = load_config(path)
    assert config.extensions == (".py",)
    assert config.header_text == "# (c) {TIMEFRAME}"


def test_load_config_missing_file(tmp_path):
    with pytest.raises(InvalidConfiguration, match="Configuration file not found"):
        load_config(tmp_path / "nope.json")


def test_load_config_malformed(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{ not json")
    with pytest.raises(InvalidConfiguration, match="Malformed configuration file"):
        load_config(path)


def test_load_config_invalid_utf8(tmp_path):
    path = tmp_path / "config.json"
    path.write_bytes(b'{"rootDir": "\xff"}')
    with pytest.raises(InvalidConfiguration, match="not valid UTF-8"):
        load_config(path)


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as a regular user")
def test_load_config_unreadable(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{}")
    path.chmod(0o000)
    try:
        with pytest.raises(InvalidConfiguration, match="Could not read configuration file"):
            load_config(path)
    finally:
        path.chmod(0o644)
