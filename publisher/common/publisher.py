import logging
import signal
import threading
import time

from protocol.joke import Joke
from protocol.joke_protocol import JokeProtocol


class JokePublisher:
    """Relays one joke from the API to the topic on every timer tick."""

    def __init__(self, joke_api, topic, publish_interval, protocol=None):
        self.joke_api = joke_api
        self.topic = topic
        self.publish_interval = publish_interval
        self.protocol = protocol or JokeProtocol()
        self.stop_event = threading.Event()

    def setup_signal_handlers(self):
        signal.signal(signal.SIGTERM, self._handle_shutdown)
        signal.signal(signal.SIGINT, self._handle_shutdown)

    def _handle_shutdown(self, signum, _frame):
        logging.info(f"Received signal {signum}. Shutting down gracefully...")
        self.stop()

    def publish_joke(self) -> Joke:
        """One fetch-then-publish cycle.

        Errors from the API or the broker propagate; nothing is retried and
        nothing is sent if the fetch fails.
        """
        joke = self.joke_api.fetch()
        logging.info(f"Sending message: \n{joke}")
        self.topic.publish(self.protocol.encode(joke))
        return joke

    def run(self):
        """Fixed-rate loop: each cycle is scheduled publish_interval seconds
        after the previous scheduled start, not after the previous end. A
        cycle that overruns is followed right away by the next one.
        """
        logging.info(f"Publishing a joke every {self.publish_interval}s")
        next_run = time.monotonic()
        while not self.stop_event.is_set():
            try:
                self.publish_joke()
            except Exception as e:
                logging.error(f"Publish cycle failed: {e}", exc_info=True)

            next_run += self.publish_interval
            delay = next_run - time.monotonic()
            if delay > 0:
                self.topic.sleep(delay, self.stop_event)

    def stop(self):
        if self.stop_event.is_set():
            return
        self.stop_event.set()
        logging.info("Publisher stopping")

    def close(self):
        self.topic.close()
        self.joke_api.close()
        logging.info("Publisher closed")
