import json
import logging

import pytest
import yaml

from fieldgraph.cli.config import FieldgraphConfig, load_config
from fieldgraph.cli.main import app
from fieldgraph.core.errors import ConfigError


@pytest.fixture()
def project(tmp_path, schema_document):
    (tmp_path / "schema.yaml").write_text(yaml.safe_dump(schema_document))
    FieldgraphConfig(schema="schema.yaml").save(tmp_path / "fieldgraph.yaml")
    return tmp_path


# --- config ---

def test_config_defaults():
    config = FieldgraphConfig()

    assert config.input_field_formatter == "camel_case"
    assert config.output_field_formatter == "camel_case"
    assert config.log_level == "WARNING"


def test_config_roundtrip(tmp_path):
    path = tmp_path / "fieldgraph.yaml"
    FieldgraphConfig(schema="api.yaml", output_field_formatter="snake_case", log_level="debug").save(path)

    config = load_config(path)

    assert config.schema == "api.yaml"
    assert config.output_field_formatter == "snake_case"
    assert config.log_level == "DEBUG"


def test_missing_config_returns_none(tmp_path):
    assert load_config(tmp_path / "nope.yaml") is None


def test_invalid_formatter_in_config():
    with pytest.raises(ConfigError):
        FieldgraphConfig.from_dict({"input_field_formatter": "kebab_case"})


def test_unknown_config_key_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="fieldgraph.cli.config"):
        FieldgraphConfig.from_dict({"schemas": "x.yaml"})

    assert "Ignoring unknown config key 'schemas'" in caplog.text


# --- commands ---

def test_init_writes_config_and_schema(tmp_path, capsys):
    config_path = tmp_path / "fieldgraph.yaml"

    assert app(["--config", str(config_path), "init"]) == 0
    assert config_path.exists()
    assert (tmp_path / "schema.yaml").exists()

    assert app(["--config", str(config_path), "check-schema"]) == 0
    assert "OK (1 resources)" in capsys.readouterr().out


def test_init_refuses_to_overwrite(project):
    assert app(["--config", str(project / "fieldgraph.yaml"), "init"]) == 1


def test_check_schema_reports_errors(tmp_path, capsys):
    bad = tmp_path / "bad.yaml"
    bad.write_text(yaml.safe_dump({"resources": {"A": {"attributes": {"x": "bogus"}}}}))

    assert app(["--config", str(tmp_path / "fieldgraph.yaml"), "check-schema", str(bad)]) == 1
    assert "[A.x] Unknown type 'bogus'" in capsys.readouterr().out


def test_process_prints_selection(project, capsys):
    fields = json.dumps(["id", {"user": ["name"]}, {"coordinates": ["latitude"]}])

    assert app(["--config", str(project / "fieldgraph.yaml"), "process", "Todo", "read", fields]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output == {
        "select": ["id", "coordinates"],
        "load": [{"user": ["name"]}],
        "template": ["id", {"user": ["name"]}, {"coordinates": [{"index": 0, "field": "latitude"}]}],
    }


def test_process_reports_field_errors(project, capsys):
    fields = json.dumps([{"user": ["bogus"]}])

    assert app(["--config", str(project / "fieldgraph.yaml"), "process", "Todo", "read", fields]) == 1

    output = json.loads(capsys.readouterr().out)
    assert output["error"]["type"] == "unknown_field"
    assert output["error"]["field_path"] == "user.bogus"


def test_process_rejects_invalid_json(project, capsys):
    assert app(["--config", str(project / "fieldgraph.yaml"), "process", "Todo", "read", "[id"]) == 1
    assert "fields must be a JSON list" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert app([]) == 0
    assert "fieldgraph" in capsys.readouterr().out
