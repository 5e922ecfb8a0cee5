"""Tests for persistence safety features (backups, atomic writes, broken files)."""

import json
import threading
from pathlib import Path

import pytest

from midirelay.exceptions import ConfigFileInvalidError, ConfigValidationError
from midirelay.models import RelayConfig, Trigger
from midirelay.utils import PydanticPersistence


@pytest.mark.unit
class TestPersistenceSafety:
    """Test safety features of PydanticPersistence."""

    def test_save_creates_backup(self, tmp_path: Path):
        """The previous file is kept as .bak before overwriting."""
        config_path = tmp_path / "config.json"

        PydanticPersistence.save_json(RelayConfig(http_timeout=1000), config_path, backup=False)
        PydanticPersistence.save_json(RelayConfig(http_timeout=2000), config_path, backup=True)

        backup = PydanticPersistence.load_json(config_path.with_suffix(".json.bak"), RelayConfig)
        assert backup.http_timeout == 1000
        assert PydanticPersistence.load_json(config_path, RelayConfig).http_timeout == 2000

    def test_save_without_backup(self, tmp_path: Path):
        config_path = tmp_path / "config.json"

        PydanticPersistence.save_json(RelayConfig(), config_path, backup=False)
        PydanticPersistence.save_json(RelayConfig(), config_path, backup=False)

        assert not config_path.with_suffix(".json.bak").exists()

    def test_atomic_write_cleans_up_temp_file(self, tmp_path: Path):
        config_path = tmp_path / "nested" / "config.json"

        PydanticPersistence.save_json(RelayConfig(), config_path)

        assert config_path.exists()
        assert list(config_path.parent.glob("*.tmp")) == []

    def test_triggers_survive_round_trip(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        trigger = Trigger(id="t1", midicommand="cc", controller="*", actiontype="http", url="http://h", label="x")

        PydanticPersistence.save_json(RelayConfig(triggers=[trigger]), config_path)
        loaded = PydanticPersistence.load_json(config_path, RelayConfig)

        assert loaded.triggers[0].controller == "*"
        assert loaded.triggers[0].model_dump()["label"] == "x"

    def test_load_json_or_default_missing_file(self, tmp_path: Path):
        config_path = tmp_path / "missing.json"

        result = PydanticPersistence.load_json_or_default(config_path, RelayConfig)

        assert result.http_timeout == 5000
        assert not config_path.exists()

    def test_load_json_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            PydanticPersistence.load_json(tmp_path / "missing.json", RelayConfig)

    def test_corrupted_file_raises(self, tmp_path: Path):
        config_path = tmp_path / "corrupted.json"
        config_path.write_text("{ invalid }", encoding="utf-8")

        with pytest.raises(ConfigFileInvalidError):
            PydanticPersistence.load_json_or_default(config_path, RelayConfig)

        assert config_path.read_text() == "{ invalid }"

    def test_empty_file_raises(self, tmp_path: Path):
        config_path = tmp_path / "empty.json"
        config_path.write_text("  ", encoding="utf-8")

        with pytest.raises(ConfigFileInvalidError) as exc_info:
            PydanticPersistence.load_json(config_path, RelayConfig)
        assert "File is empty" in exc_info.value.technical_message

    def test_invalid_value_raises_validation_error(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"http_timeout": 0}), encoding="utf-8")

        with pytest.raises(ConfigValidationError) as exc_info:
            PydanticPersistence.load_json(config_path, RelayConfig)

        assert exc_info.value.field == "http_timeout"
        assert "milliseconds" in exc_info.value.recovery_hint

    def test_concurrent_saves_do_not_collide(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        errors = []

        def saver(index):
            try:
                for _ in range(10):
                    PydanticPersistence.save_json(RelayConfig(http_timeout=1000 + index), config_path)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=saver, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert 1000 <= PydanticPersistence.load_json(config_path, RelayConfig).http_timeout < 1008
        assert list(tmp_path.glob("*.tmp")) == []
