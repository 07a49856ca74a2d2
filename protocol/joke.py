from pydantic import BaseModel, ConfigDict


__all__ = ("Joke",)


JOKE_FORMAT = "Q: {} \nA: {}"


class Joke(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    setup: str
    punchline: str

    def __str__(self):
        return JOKE_FORMAT.format(self.setup, self.punchline)
