import logging

import pytest

from app.components.configuration.configuration import Configuration
from app.components.logger.logger import Logger


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "development.yaml").write_text(
        "LOG_LEVEL: DEBUG\nMAX_TOOL_ITERATIONS: 3\nFEATURE_FLAG: 'false'\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.mark.unit
class TestConfiguration:
    def test_reads_yaml_values(self, config_dir, monkeypatch) -> None:
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        configuration = Configuration("development", str(config_dir))

        assert configuration.get_configuration("LOG_LEVEL", str) == "DEBUG"
        assert configuration.get_configuration("MAX_TOOL_ITERATIONS", int) == 3

    def test_environment_overrides_file(self, config_dir, monkeypatch) -> None:
        monkeypatch.setenv("MAX_TOOL_ITERATIONS", "5")
        configuration = Configuration("development", str(config_dir))

        assert configuration.get_configuration("MAX_TOOL_ITERATIONS", int) == 5

    def test_bool_cast(self, config_dir, monkeypatch) -> None:
        monkeypatch.delenv("FEATURE_FLAG", raising=False)
        configuration = Configuration("development", str(config_dir))

        assert configuration.get_configuration("FEATURE_FLAG", bool) is False

    def test_missing_key_with_default(self, config_dir, monkeypatch) -> None:
        monkeypatch.delenv("TAVILY_API_KEY", raising=False)
        configuration = Configuration("development", str(config_dir))

        assert configuration.get_configuration("TAVILY_API_KEY", str, default="") == ""

    def test_missing_key_without_default(self, config_dir, monkeypatch) -> None:
        monkeypatch.delenv("SQLITE_DB_PATH", raising=False)
        configuration = Configuration("development", str(config_dir))

        with pytest.raises(KeyError):
            configuration.get_configuration("SQLITE_DB_PATH", str)

    def test_missing_file_is_empty(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("API_PORT", "9000")
        configuration = Configuration("staging", str(tmp_path))

        assert configuration.get_configuration("API_PORT", int) == 9000


@pytest.mark.unit
def test_logger_namespaces_under_app() -> None:
    logger = Logger(log_format="%(message)s", log_level="warning")

    child = logger.get_logger("ChatService")

    assert child.name == "app.ChatService"
    assert logging.getLogger("app").level == logging.WARNING
