import pika
import time
import logging
import threading

rabbit_logger = logging.getLogger("RabbitMQ")

FANOUT = "fanout"
JSON_CONTENT_TYPE = "application/json"
# Longest stretch between two reads of the connection while idling
SLEEP_SLICE = 1.0


class RabbitMQ:
    """A pub/sub topic backed by a RabbitMQ exchange.

    Publishers send to the exchange with an empty routing key. Every consumer
    binds its own exclusive, server-named queue, so each live subscriber gets
    every message and nothing is kept for subscribers that are not connected.
    """

    def __init__(self, host, topic, port=5672, virtual_host="/", user="guest", password="guest",
                 exc_type=FANOUT, connection_retries=5, retry_delay=5, heartbeat=None):
        self.host = host
        self.port = port
        self.topic = topic
        self.exc_type = exc_type
        self.connection_retries = connection_retries
        self.retry_delay = retry_delay
        self.parameters = pika.ConnectionParameters(
            host=host,
            port=port,
            virtual_host=virtual_host,
            credentials=pika.PlainCredentials(user, password),
            heartbeat=heartbeat,
        )
        self.q_name = None
        self.stop_watcher = None
        self.connection = self._connect_with_retry()
        self.channel = self.create_channel()

    @classmethod
    def from_config(cls, config):
        """Open the topic described by the broker keys of a process config."""
        return cls(
            host=config["rabbitmq_host"],
            topic=config["topic"],
            port=config["rabbitmq_port"],
            virtual_host=config["rabbitmq_vhost"],
            user=config["rabbitmq_user"],
            password=config["rabbitmq_password"],
            connection_retries=config["connection_retries"],
            retry_delay=config["retry_delay"],
            heartbeat=config.get("heartbeat"),
        )

    def _connect_with_retry(self):
        """Opens the connection, retrying a bounded number of times."""
        retries = 0
        while True:
            try:
                connection = pika.BlockingConnection(self.parameters)
                rabbit_logger.info(f"Connected to RabbitMQ at {self.host}:{self.port}")
                return connection
            except pika.exceptions.AMQPConnectionError as e:
                retries += 1
                if retries >= self.connection_retries:
                    logging.error(f"Could not connect to RabbitMQ at {self.host}:{self.port} after {retries} attempts")
                    raise
                logging.warning(f"Connection attempt {retries}/{self.connection_retries} failed: {e}. Retrying in {self.retry_delay}s...")
                time.sleep(self.retry_delay)

    def create_channel(self):
        """Used to create a channel and declare the topic exchange."""
        try:
            channel = self.connection.channel()
            channel.exchange_declare(exchange=self.topic, exchange_type=self.exc_type, durable=False)
            rabbit_logger.debug(f"Channel created with exchange {self.topic} of type {self.exc_type}")
            return channel
        except Exception as e:
            logging.error(f"Failed to create channel for topic {self.topic}: {e}")
            if self.connection.is_open:
                self.connection.close()
            raise

    def _ensure_channel(self):
        """Reopens the connection or the channel if the broker dropped them."""
        if self.connection is None or self.connection.is_closed:
            logging.warning(f"Connection to {self.host}:{self.port} is closed. Reconnecting...")
            self.connection = self._connect_with_retry()
            self.channel = self.create_channel()
        elif self.channel is None or self.channel.is_closed:
            logging.warning(f"Channel for topic {self.topic} is closed. Recreating channel...")
            self.channel = self.create_channel()

    def publish(self, message):
        """Used to publish one message to the topic."""
        try:
            self._ensure_channel()
            self.channel.basic_publish(exchange=self.topic,
                                       routing_key="",
                                       body=message,
                                       properties=pika.BasicProperties(
                                           content_type=JSON_CONTENT_TYPE,
                                       ))
            rabbit_logger.debug(f"Sent message to topic {self.topic}")
        except Exception as e:
            logging.error(f"Failed to send message to topic {self.topic}: {e}")
            raise e

    def consume(self, callback_func, stop_event=None):
        """Blocks dispatching the topic messages to callback_func.

        Returns when stop_event is set, on KeyboardInterrupt, or raises if the
        connection breaks.
        """
        try:
            result = self.channel.queue_declare(queue="", exclusive=True, auto_delete=True)
            self.q_name = result.method.queue
            self.channel.queue_bind(exchange=self.topic, queue=self.q_name)

            self.channel.basic_consume(queue=self.q_name, on_message_callback=callback_func, auto_ack=True)

            if stop_event is not None:
                connection, channel = self.connection, self.channel

                def check_stop():
                    stop_event.wait()
                    try:
                        connection.add_callback_threadsafe(channel.stop_consuming)
                        rabbit_logger.debug(f"Scheduled stop consuming in {self.q_name}")
                    except Exception as e:
                        rabbit_logger.error(f"Error scheduling stop for {self.q_name}: {e}")

                self.stop_watcher = threading.Thread(target=check_stop, daemon=True)
                self.stop_watcher.start()

            logging.info(f"Subscribed to topic {self.topic} through queue {self.q_name}")
            self.channel.start_consuming()

        except KeyboardInterrupt:
            rabbit_logger.info("Exiting...")

        except Exception as e:
            logging.error(f"Failed to consume from topic {self.topic}: {e}")
            raise e

        finally:
            self.close()

    def sleep(self, seconds, stop_event=None):
        """Idles for up to `seconds` while keeping the connection serviced.

        BlockingConnection only answers heartbeats inside pika calls, so the
        wait is spent in process_data_events, one slice at a time. Returns
        early once stop_event is set.
        """
        deadline = time.monotonic() + seconds
        while stop_event is None or not stop_event.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            time_limit = min(remaining, SLEEP_SLICE)
            if self.connection is None or self.connection.is_closed:
                # Reconnection is left to the next publish
                if stop_event is not None:
                    stop_event.wait(time_limit)
                else:
                    time.sleep(time_limit)
                continue
            try:
                self.connection.process_data_events(time_limit=time_limit)
            except pika.exceptions.AMQPError as e:
                logging.warning(f"Connection to {self.host}:{self.port} lost while idle: {e}")

    def close(self):
        """Closes the channel and the connection, if still open."""
        try:
            if self.channel is not None and self.channel.is_open:
                self.channel.close()
                rabbit_logger.info("Channel closed")
            if self.connection is not None and self.connection.is_open:
                self.connection.close()
                rabbit_logger.info("Connection closed")
        except Exception as e:
            logging.error(f"Error closing RabbitMQ resources: {e}", exc_info=True)
        finally:
            self.channel = None
            self.connection = None
