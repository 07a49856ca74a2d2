import logging
import sys

from protocol.rabbit_protocol import RabbitMQ
from protocol.utils.logger import config_logger
from publisher.common.config_init import config_publisher
from publisher.common.joke_api import JokeAPI
from publisher.common.publisher import JokePublisher


def main():
    try:
        config = config_publisher()
    except (KeyError, ValueError) as e:
        logging.basicConfig(level=logging.INFO)
        logging.error(f"Publisher config error: {e}")
        sys.exit(1)
    config_logger(config["logging_level"])

    logging.debug(f"action: config | result: success | topic: {config['topic']} | "
                  f"interval: {config['publish_interval']} | api: {config['joke_api_url']}")

    try:
        topic = RabbitMQ.from_config(config)
    except Exception as e:
        logging.error(f"Publisher could not open topic {config['topic']}: {e}")
        sys.exit(1)

    joke_api = JokeAPI(config["joke_api_url"], timeout=config["joke_api_timeout"])
    publisher = JokePublisher(joke_api, topic, config["publish_interval"])
    publisher.setup_signal_handlers()

    try:
        publisher.run()
    except KeyboardInterrupt:
        logging.info("Publisher stopped by user")
    finally:
        publisher.close()
        logging.info("Publisher stopped")


if __name__ == "__main__":
    main()
