import pytest

from publisher.common.config_init import config_publisher
from subscriber.common.config_init import config_subscriber

PUBLISHER_INI = """
[DEFAULT]
LOGGING_LEVEL = DEBUG

[RABBITMQ]
RABBITMQ_HOST = broker
RABBITMQ_PORT = 5673
RABBITMQ_VHOST = /
RABBITMQ_USER = guest
RABBITMQ_PASSWORD = guest
CONNECTION_RETRIES = 3
RETRY_DELAY = 0.5
TOPIC = jokes
HEARTBEAT = 60

[PUBLISHER]
PUBLISH_INTERVAL = 5
JOKE_API_URL = https://joke.deno.dev/
JOKE_API_TIMEOUT =
"""

ENV_KEYS = [
    "LOGGING_LEVEL", "RABBITMQ_HOST", "RABBITMQ_PORT", "RABBITMQ_VHOST", "RABBITMQ_USER",
    "RABBITMQ_PASSWORD", "CONNECTION_RETRIES", "RETRY_DELAY", "TOPIC", "PUBLISH_INTERVAL",
    "JOKE_API_URL", "JOKE_API_TIMEOUT", "HEARTBEAT",
]


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    path = tmp_path / "config.ini"
    path.write_text(PUBLISHER_INI)
    monkeypatch.setenv("CONFIG_FILE", str(path))
    return path


def test_publisher_reads_config_file(config_file):
    config = config_publisher()

    assert config["logging_level"] == "DEBUG"
    assert config["rabbitmq_host"] == "broker"
    assert config["rabbitmq_port"] == 5673
    assert config["retry_delay"] == 0.5
    assert config["topic"] == "jokes"
    assert config["publish_interval"] == 5.0
    assert config["joke_api_url"] == "https://joke.deno.dev/"
    assert config["joke_api_timeout"] is None
    assert config["heartbeat"] == 60


def test_env_vars_override_config_file(config_file, monkeypatch):
    monkeypatch.setenv("TOPIC", "dad-jokes")
    monkeypatch.setenv("PUBLISH_INTERVAL", "0.5")
    monkeypatch.setenv("JOKE_API_TIMEOUT", "3")

    config = config_publisher()

    assert config["topic"] == "dad-jokes"
    assert config["publish_interval"] == 0.5
    assert config["joke_api_timeout"] == 3.0


def test_missing_key_raises_key_error(config_file):
    config_file.write_text(PUBLISHER_INI.replace("TOPIC = jokes\n", ""))
    with pytest.raises(KeyError, match="Aborting publisher"):
        config_publisher()


@pytest.mark.parametrize("interval", ["soon", "0", "-1"])
def test_bad_interval_raises_value_error(config_file, monkeypatch, interval):
    monkeypatch.setenv("PUBLISH_INTERVAL", interval)
    with pytest.raises(ValueError, match="Aborting publisher"):
        config_publisher()


def test_subscriber_shares_broker_settings(config_file):
    config = config_subscriber()

    assert config["rabbitmq_host"] == "broker"
    assert config["connection_retries"] == 3
    assert config["topic"] == "jokes"
    assert "publish_interval" not in config


def test_env_vars_alone_are_enough(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_FILE", str(tmp_path / "missing.ini"))
    values = {
        "LOGGING_LEVEL": "INFO", "RABBITMQ_HOST": "localhost", "RABBITMQ_PORT": "5672",
        "RABBITMQ_VHOST": "/", "RABBITMQ_USER": "guest", "RABBITMQ_PASSWORD": "guest",
        "CONNECTION_RETRIES": "1", "RETRY_DELAY": "0", "TOPIC": "jokes",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)

    assert config_subscriber()["rabbitmq_host"] == "localhost"


@pytest.mark.parametrize("timeout", ["0", "-1", "never"])
def test_bad_api_timeout_raises_value_error(config_file, monkeypatch, timeout):
    monkeypatch.setenv("JOKE_API_TIMEOUT", timeout)
    with pytest.raises(ValueError, match="Aborting publisher"):
        config_publisher()


def test_blank_heartbeat_keeps_broker_default(config_file, monkeypatch):
    monkeypatch.setenv("HEARTBEAT", "")
    assert config_subscriber()["heartbeat"] is None


@pytest.mark.parametrize("heartbeat", ["-5", "often"])
def test_bad_heartbeat_raises_value_error(config_file, monkeypatch, heartbeat):
    monkeypatch.setenv("HEARTBEAT", heartbeat)
    with pytest.raises(ValueError, match="Aborting subscriber"):
        config_subscriber()
