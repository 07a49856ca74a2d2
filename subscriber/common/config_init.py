from configparser import ConfigParser
import os

from protocol.utils.config_utils import broker_params, get_param

CONFIG_FILE = "config.ini"


def config_subscriber():
    """ Parse env variables or config file to find program config params

    Env variables take precedence over the config file. A missing parameter
    raises KeyError and an unparsable one raises ValueError.
    """
    config_file = os.getenv("CONFIG_FILE", CONFIG_FILE)
    subscriber_config = ConfigParser(interpolation=None)
    subscriber_config.read(config_file)

    try:
        config_params = {"logging_level": get_param(subscriber_config, "DEFAULT", "LOGGING_LEVEL")}
        config_params.update(broker_params(subscriber_config))

    except KeyError as e:
        raise KeyError(f"Required key was not found in {config_file} or Env Vars. Error: {e} .Aborting subscriber")
    except ValueError as e:
        raise ValueError(f"Key could not be parsed in {config_file} or Env Vars. Error: {e}. Aborting subscriber")

    return config_params
