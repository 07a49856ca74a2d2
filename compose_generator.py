from configparser import ConfigParser
import sys

FILE_NAME = "docker-compose.yaml"
GENERATOR_VALUES = "generator_values.ini"

NETWORK_NAME = "jokes_network"
NETWORK_IP = "172.25.126.0/24"

CONFIG_FILE = "config.ini"
CONFIG_FILE_TARGET = "/config.ini" # Target path inside container


def docker_yaml_generator(subscribers):
    with open(FILE_NAME, 'w') as f:
        f.write(create_yaml_file(subscribers))


def create_yaml_file(subscribers):
    print(f"Creating:")
    print(f"  Publishers: 1")
    print(f"  Subscribers: {subscribers}")

    rabbit = create_rabbit()
    publisher = create_publisher()
    subscriber_services = write_subscribers(subscribers)
    network = create_network()
    content = f"""
services:
  {rabbit}
  {publisher}
  {subscriber_services}
networks:
  {network}
"""
    return content


def create_network():
    network = f"""{NETWORK_NAME}:
    ipam:
      driver: default
      config:
        - subnet: {NETWORK_IP}
    """
    return network


def create_rabbit():
    rabbit = f"""rabbitmq:
    image: rabbitmq:3-management
    hostname: rabbitmq
    ports:
      - 5672:5672
      - 15672:15672
    networks:
      - {NETWORK_NAME}
    healthcheck:
        test: ["CMD", "rabbitmq-diagnostics", "-q", "ping"]
        interval: 10s
        timeout: 5s
        retries: 10
    """
    return rabbit


def create_publisher():
    publisher = f"""
  publisher:
    container_name: publisher
    build:
      context: .
      dockerfile: publisher.dockerfile
    image: joke-publisher:latest
    networks:
      - {NETWORK_NAME}
    depends_on:
      rabbitmq:
        condition: service_healthy
        restart: true
    volumes:
      - ./publisher/{CONFIG_FILE}:{CONFIG_FILE_TARGET}
    """
    return publisher


def write_subscribers(amount):
    subscribers = ""
    for i in range(1, amount + 1):
        subscribers += create_subscriber(i)
    return subscribers


def create_subscriber(id):
    subscriber = f"""
  subscriber-{id}:
    container_name: subscriber-{id}
    build:
      context: .
      dockerfile: subscriber.dockerfile
    image: joke-subscriber:latest
    networks:
      - {NETWORK_NAME}
    depends_on:
      rabbitmq:
        condition: service_healthy
        restart: true
    volumes:
      - ./subscriber/{CONFIG_FILE}:{CONFIG_FILE_TARGET}
    """
    return subscriber


def subscribers_amount(argv, config):
    """Subscriber count from the command line, else from generator_values.ini."""
    if len(argv) > 1:
        value = argv[1]
    else:
        value = config["DEFAULT"].get("SUBSCRIBERS", "1")
    amount = int(value)
    if amount < 1:
        raise ValueError(f"At least one subscriber is needed, got {amount}")
    return amount


def main():
    config = ConfigParser()
    # If generator_values.ini does not exists original config object is not modified
    config.read(GENERATOR_VALUES)

    try:
        subscribers = subscribers_amount(sys.argv, config)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    docker_yaml_generator(subscribers)


if __name__ == "__main__":
    main()
