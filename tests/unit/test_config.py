from __future__ import annotations

from pathlib import Path

import pytest
from sample_records import Car

from keydiff import ConfigFileError
from keydiff.config import layer_config, load_config, parse_key_option, resolve_type


def _write(path: Path, content: str) -> Path:
    path.write_text(content.strip() + "\n", encoding="utf-8")
    return path


def test_load_config_builds_item_and_attribute_providers(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "keydiff.yaml",
        """
key_providers:
  dict: [id, name]
  "sample_records:Car": brand
""",
    )

    config = load_config(config_path)

    registry = config.key_providers
    assert config.source_path == config_path.resolve()
    assert registry.lookup(dict)({"name": "n"}) == "n"
    assert registry.lookup(Car)(Car("Ford", "Blue", 1)) == "Ford"


def test_explicit_access_style(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "keydiff.yaml",
        """
key_providers:
  "sample_records:Car":
    attribute: [brand, color]
""",
    )

    registry = load_config(config_path).key_providers

    assert registry.lookup(Car)(Car("Ford", "Blue", 1)) == ("Ford", "Blue")


def test_extends_merges_base_config(tmp_path: Path) -> None:
    _write(
        tmp_path / "base.yaml",
        """
key_providers:
  dict: id
  "sample_records:Car": brand
""",
    )
    config_path = _write(
        tmp_path / "keydiff.yaml",
        """
extends: base.yaml
key_providers:
  dict: uuid
""",
    )

    registry = load_config(config_path).key_providers

    assert registry.lookup(dict)({"uuid": "u", "id": 1}) == "u"
    assert Car in registry


def test_extends_cycle_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path / "a.yaml", "extends: b.yaml")
    _write(tmp_path / "b.yaml", "extends: a.yaml")

    with pytest.raises(ConfigFileError, match="extends cycle") as excinfo:
        load_config(tmp_path / "a.yaml")

    assert "a.yaml -> " in str(excinfo.value)


def test_self_extends_is_a_cycle(tmp_path: Path) -> None:
    _write(tmp_path / "self.yaml", "extends: self.yaml")

    with pytest.raises(ConfigFileError, match="extends cycle"):
        load_config(tmp_path / "self.yaml")


def test_extends_chain_without_cycle_reuses_shared_base(tmp_path: Path) -> None:
    _write(tmp_path / "root.yaml", "key_providers:\n  dict: id")
    _write(tmp_path / "middle.yaml", "extends: root.yaml")
    config_path = _write(tmp_path / "keydiff.yaml", "extends: middle.yaml")

    registry = load_config(config_path).key_providers

    assert registry.lookup(dict)({"id": 5}) == 5


def test_extends_must_be_a_path(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "keydiff.yaml", "extends: [a.yaml]")

    with pytest.raises(ConfigFileError, match="must be a file path"):
        load_config(config_path)


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list",
        "unknown_key: 1",
        "key_providers: [dict]",
        "key_providers:\n  dict: []",
        "key_providers:\n  dict:\n    attribute: id\n    item: id",
        "key_providers:\n  object: id",
        "key_providers:\n  'no.such.module:Thing': id",
    ],
)
def test_invalid_config_content(tmp_path: Path, content: str) -> None:
    config_path = _write(tmp_path / "keydiff.yaml", content)
    with pytest.raises(ConfigFileError):
        load_config(config_path)


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigFileError, match="not found"):
        load_config(tmp_path / "missing.yaml")


def test_resolve_type() -> None:
    assert resolve_type("dict") is dict
    assert resolve_type("sample_records:Car") is Car
    with pytest.raises(ConfigFileError):
        resolve_type("sample_records:car_key")


def test_parse_key_option() -> None:
    element_type, provider = parse_key_option("dict=id,name")
    assert element_type is dict
    assert provider({"name": "x"}) == "x"
    with pytest.raises(ConfigFileError):
        parse_key_option("dict")
    with pytest.raises(ConfigFileError):
        parse_key_option("dict=id,")


def test_layer_config_overrides_scalars_and_combines_tables() -> None:
    base = {"a": {"x": 1, "y": 2}, "b": [1]}
    overlay = {"a": {"y": 3}, "b": [2]}
    assert layer_config(base, overlay) == {"a": {"x": 1, "y": 3}, "b": [2]}
