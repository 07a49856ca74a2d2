import logging
import signal
import threading

from protocol.joke_protocol import JokeDecodeError, JokeProtocol


class JokeSubscriber:
    """Prints every joke delivered on the topic."""

    def __init__(self, topic, protocol=None):
        self.topic = topic
        self.protocol = protocol or JokeProtocol()
        self.stop_event = threading.Event()

    def setup_signal_handlers(self):
        signal.signal(signal.SIGTERM, self._handle_shutdown)
        signal.signal(signal.SIGINT, self._handle_shutdown)

    def _handle_shutdown(self, signum, _frame):
        logging.info(f"Received signal {signum}. Shutting down gracefully...")
        self.stop()

    def callback(self, ch, method, properties, body):
        """Decode and print one message. Undecodable messages are dropped."""
        try:
            joke = self.protocol.decode(body)
        except JokeDecodeError as e:
            logging.error(f"error while parsing message: {e}")
            return
        print(joke, flush=True)

    def run(self):
        """Consume the topic until stop() is called."""
        self.topic.consume(callback_func=self.callback, stop_event=self.stop_event)
        logging.info("Subscriber done consuming")

    def stop(self):
        if self.stop_event.is_set():
            return
        self.stop_event.set()
        logging.info("Subscriber stopping")
