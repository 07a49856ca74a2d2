from pydantic import ValidationError

from protocol.joke import Joke


class JokeDecodeError(ValueError):
    def __init__(self, message: str, source: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.source = source


class JokeProtocol:
    """JSON codec for the jokes travelling through the topic.

    The payload is a bare object with the two joke fields, no envelope.
    """

    ENCODING = "utf-8"

    def encode(self, joke: Joke) -> bytes:
        return joke.model_dump_json().encode(self.ENCODING)

    def decode(self, body: bytes | str) -> Joke:
        """Build a Joke from a raw payload.

        Raises JokeDecodeError if the payload is not a JSON object holding a
        string setup and a string punchline.
        """
        try:
            return Joke.model_validate_json(body, strict=True)
        except ValidationError as e:
            raise JokeDecodeError(f"Invalid joke payload: {e.error_count()} error(s)", e) from e
