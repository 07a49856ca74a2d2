"""Client for the public joke API the publisher relays from."""

import logging

import requests
from pydantic import ValidationError

from protocol.joke import Joke


__all__ = ("JokeAPI", "JokeAPIError", "DEFAULT_ENDPOINT")


DEFAULT_ENDPOINT = "https://joke.deno.dev/"


class JokeAPIError(Exception):
    def __init__(self, message: str, source: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.source = source


class JokeAPI:
    def __init__(self, url: str = DEFAULT_ENDPOINT, timeout: float | None = None, session: requests.Session | None = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self) -> Joke:
        """Call the API once and decode the body into a Joke.

        Any failure, including an empty (null) body, raises JokeAPIError.
        """
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            joke_data = response.json()
        except requests.HTTPError as e:
            raise JokeAPIError(f"Joke API request failed (status: {e.response.status_code})", e) from e
        except requests.ConnectionError as e:
            raise JokeAPIError("Connection error", e) from e
        except requests.Timeout as e:
            raise JokeAPIError("Joke API request timed out", e) from e
        except requests.exceptions.JSONDecodeError as e:
            raise JokeAPIError("Joke API returned invalid JSON", e) from e
        except requests.RequestException as e:
            raise JokeAPIError("An unexpected error occurred", e) from e

        if joke_data is None:
            raise JokeAPIError("Joke API returned no joke")

        try:
            joke = Joke.model_validate(joke_data)
        except ValidationError as e:
            raise JokeAPIError(f"Joke API returned an unexpected body: {joke_data!r}", e) from e

        logging.debug(f"Fetched joke from {self.url}")
        return joke

    def close(self):
        self.session.close()
