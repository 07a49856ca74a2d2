import logging
import sys

from protocol.rabbit_protocol import RabbitMQ
from protocol.utils.logger import config_logger
from subscriber.common.config_init import config_subscriber
from subscriber.common.subscriber import JokeSubscriber


def main():
    try:
        config = config_subscriber()
    except (KeyError, ValueError) as e:
        logging.basicConfig(level=logging.INFO)
        logging.error(f"Subscriber config error: {e}")
        sys.exit(1)
    config_logger(config["logging_level"])

    logging.debug(f"action: config | result: success | topic: {config['topic']} | "
                  f"host: {config['rabbitmq_host']}:{config['rabbitmq_port']}")

    try:
        topic = RabbitMQ.from_config(config)
    except Exception as e:
        logging.error(f"Subscriber could not open topic {config['topic']}: {e}")
        sys.exit(1)

    subscriber = JokeSubscriber(topic)
    subscriber.setup_signal_handlers()

    try:
        subscriber.run()
    except Exception as e:
        logging.error(f"Subscriber error: {e}")
        sys.exit(1)
    finally:
        logging.info("Subscriber stopped")


if __name__ == "__main__":
    main()
