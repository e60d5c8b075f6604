import pytest

from hopcrawler.utils.config import ConfigError, ConfigManager, load_config


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


def test_defaults_without_path():
    config = load_config()

    assert config.crawler.retries == 3
    assert config.crawler.frontier_policy == 'depth_first'
    assert config.crawler.retry_scope == 'shared'
    assert config.logging.file is None
    assert config.monitoring.metrics_enabled is False


def test_partial_file_keeps_defaults(tmp_path):
    path = write_config(tmp_path, """
crawler:
  retries: 5
  retry_scope: per_url
logging:
  level: debug
""")

    config = load_config(path)

    assert config.crawler.retries == 5
    assert config.crawler.retry_scope == 'per_url'
    assert config.crawler.request_timeout == 30
    assert config.logging.level == 'debug'


def test_empty_file_gives_defaults(tmp_path):
    assert load_config(write_config(tmp_path, "")).crawler.retries == 3


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "absent.yaml"))


@pytest.mark.parametrize("text, message", [
    ("crawler:\n  retries: 0\n", "retries"),
    ("crawler:\n  request_timeout: 0\n", "request_timeout"),
    ("crawler:\n  frontier_policy: random\n", "frontier_policy"),
    ("crawler:\n  retry_scope: global\n", "retry_scope"),
    ("crawler:\n  politeness_delay: 1\n", "Unknown keys"),
    ("logging:\n  level: LOUD\n", "log level"),
    ("storage:\n  type: file\n", "Unknown configuration sections"),
    ("crawler: 3\n", "mapping"),
    ("- a\n- b\n", "mapping"),
    ("crawler: [unclosed\n", "Invalid YAML"),
    ("crawler:\n  request_timeout: fast\n", "request_timeout"),
    ("crawler:\n  max_content_size: null\n", "max_content_size"),
    ("crawler:\n  max_content_size: 1.5\n", "max_content_size"),
    ("crawler:\n  retries: true\n", "retries"),
    ("crawler:\n  retries: \"3\"\n", "retries"),
    ("crawler:\n  user_agent: 12\n", "user_agent"),
    ("monitoring:\n  prometheus_port: high\n", "prometheus_port"),
    ("logging:\n  level: 10\n", "log level"),
])
def test_invalid_config(tmp_path, text, message):
    with pytest.raises(ConfigError, match=message):
        load_config(write_config(tmp_path, text))


def test_config_property_requires_load():
    manager = ConfigManager()

    with pytest.raises(ConfigError):
        manager.config

    manager.load_config()
    assert manager.config.crawler.retries == 3
