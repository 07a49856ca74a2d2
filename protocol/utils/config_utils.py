import os


def get_param(config, section, key):
    """Env var named key if set, else key from section of the parsed file.

    Raises KeyError if neither is present.
    """
    value = os.getenv(key)
    if value is None:
        value = config[section][key]
    return value


def get_optional_param(config, section, key):
    """Like get_param, but a missing or blank value gives None."""
    value = os.getenv(key)
    if value is None:
        value = config[section].get(key, "") if config.has_section(section) else ""
    value = value.strip()
    return value or None


def get_optional_float(config, section, key):
    value = get_optional_param(config, section, key)
    return float(value) if value is not None else None


def broker_params(config):
    """RabbitMQ connection and topic settings shared by both processes."""
    params = {
        "rabbitmq_host": get_param(config, "RABBITMQ", "RABBITMQ_HOST"),
        "rabbitmq_port": int(get_param(config, "RABBITMQ", "RABBITMQ_PORT")),
        "rabbitmq_vhost": get_param(config, "RABBITMQ", "RABBITMQ_VHOST"),
        "rabbitmq_user": get_param(config, "RABBITMQ", "RABBITMQ_USER"),
        "rabbitmq_password": get_param(config, "RABBITMQ", "RABBITMQ_PASSWORD"),
        "connection_retries": int(get_param(config, "RABBITMQ", "CONNECTION_RETRIES")),
        "retry_delay": float(get_param(config, "RABBITMQ", "RETRY_DELAY")),
        "topic": get_param(config, "RABBITMQ", "TOPIC"),
    }
    # Blank keeps the value the broker proposes
    heartbeat = get_optional_param(config, "RABBITMQ", "HEARTBEAT")
    params["heartbeat"] = int(heartbeat) if heartbeat is not None else None
    if params["heartbeat"] is not None and params["heartbeat"] < 0:
        raise ValueError(f"HEARTBEAT can not be negative, got {params['heartbeat']}")
    return params
