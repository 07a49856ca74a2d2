import pytest

from protocol.joke import Joke


class FakeTopic:
    """Stands in for a RabbitMQ topic, keeping what gets published."""

    def __init__(self, fail_with=None):
        self.published = []
        self.fail_with = fail_with
        self.closed = False
        self.consumed_with = None
        self.sleeps = []

    def publish(self, message):
        if self.fail_with is not None:
            raise self.fail_with
        self.published.append(message)

    def sleep(self, seconds, stop_event=None):
        self.sleeps.append(seconds)
        if stop_event is not None:
            stop_event.wait(seconds)

    def consume(self, callback_func, stop_event=None):
        self.consumed_with = (callback_func, stop_event)

    def close(self):
        self.closed = True


class FakeJokeAPI:
    """Returns the queued results in order; exceptions in the queue are raised."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0
        self.closed = False

    def fetch(self):
        self.calls += 1
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.closed = True


@pytest.fixture
def joke():
    return Joke(setup="A", punchline="B")


@pytest.fixture
def topic():
    return FakeTopic()
