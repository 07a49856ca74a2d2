from configparser import ConfigParser
import os

from protocol.utils.config_utils import broker_params, get_optional_float, get_param

CONFIG_FILE = "config.ini"


def config_publisher():
    """Publisher settings, each key read from its env var or else from the
    ini file named by CONFIG_FILE.

    Raises KeyError for a missing key and ValueError for a value that does
    not parse or is out of range.
    """
    config_file = os.getenv("CONFIG_FILE", CONFIG_FILE)
    publisher_config = ConfigParser(interpolation=None)
    # If the file does not exist the parser stays empty and only env vars count
    publisher_config.read(config_file)

    try:
        config_params = {"logging_level": get_param(publisher_config, "DEFAULT", "LOGGING_LEVEL")}
        config_params.update(broker_params(publisher_config))

        config_params["publish_interval"] = float(get_param(publisher_config, "PUBLISHER", "PUBLISH_INTERVAL"))
        if config_params["publish_interval"] <= 0:
            raise ValueError(f"PUBLISH_INTERVAL must be positive, got {config_params['publish_interval']}")
        config_params["joke_api_url"] = get_param(publisher_config, "PUBLISHER", "JOKE_API_URL")
        config_params["joke_api_timeout"] = get_optional_float(publisher_config, "PUBLISHER", "JOKE_API_TIMEOUT")
        if config_params["joke_api_timeout"] is not None and config_params["joke_api_timeout"] <= 0:
            raise ValueError(f"JOKE_API_TIMEOUT must be positive or blank, got {config_params['joke_api_timeout']}")

    except KeyError as e:
        raise KeyError(f"Required key was not found in {config_file} or Env Vars. Error: {e} .Aborting publisher")
    except ValueError as e:
        raise ValueError(f"Key could not be parsed in {config_file} or Env Vars. Error: {e}. Aborting publisher")

    return config_params
