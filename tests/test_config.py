from pathlib import Path

import pytest
import yaml

from mama_brain.config import ImportConfig, MamaBrainConfig, PipelineConfig, load_config


def test_defaults(config: MamaBrainConfig) -> None:
    assert config.pipeline.step_delays == {}
    assert not config.pipeline.faq_overrides_civic
    assert config.faq_import.batch_size == 5
    assert config.faq_import.batch_delay == pytest.approx(0.05)
    assert config.privacy.prompt_excerpt_length == 50
    assert config.logging.level == "INFO"


def test_load_yaml_with_overrides(tmp_path: Path) -> None:
    path = tmp_path / "mama.yaml"
    path.write_text(
        yaml.safe_dump({"pipeline": {"step_delays": {"3": 0.25}}, "faq_import": {"batch_size": 10}}),
        encoding="utf8",
    )
    config = load_config(path, overrides=[{"faq_import": {"batch_delay": 0}}, {"logging": {"level": "DEBUG"}}])
    assert config.pipeline.step_delays == {3: 0.25}
    assert config.faq_import.batch_size == 10
    assert config.faq_import.batch_delay == 0
    assert config.logging.level == "DEBUG"


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf8")
    assert load_config(path) == MamaBrainConfig()


def test_json_root_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[]", encoding="utf8")
    with pytest.raises(TypeError):
        load_config(path)


@pytest.mark.parametrize(("name", "text"), [("list.yaml", "- 1\n- 2\n"), ("scalar.json", "3")])
def test_non_mapping_roots_are_rejected(tmp_path: Path, name: str, text: str) -> None:
    path = tmp_path / name
    path.write_text(text, encoding="utf8")
    with pytest.raises(TypeError, match=name):
        load_config(path)


def test_null_json_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "null.json"
    path.write_text("null", encoding="utf8")
    assert load_config(path) == MamaBrainConfig()


@pytest.mark.parametrize("suffix", [".json", ".yaml"])
def test_save_and_reload(tmp_path: Path, suffix: str) -> None:
    config = MamaBrainConfig(pipeline=PipelineConfig(step_delays={1: 0.1}, faq_overrides_civic=True))
    path = tmp_path / "nested" / f"config{suffix}"
    config.save(path)
    assert load_config(path) == config


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValueError):
        PipelineConfig(step_delays={2: -1})
    with pytest.raises(ValueError):
        ImportConfig(batch_size=0)
    with pytest.raises(ValueError):
        ImportConfig(batch_delay=-0.1)
