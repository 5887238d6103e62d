""" Shared fakes for the unit tests. """

from shrthnder.app.errors import RuleLoadFailure
from shrthnder.app.models import ShorthandCategory, ShorthandRule


def rules(*pairs) -> tuple:
    return tuple(ShorthandRule(s, e) for s, e in pairs)


GENERAL = ShorthandCategory("general", "Hey everyone, by the way I'm on my way.",
                            rules(("btw", "by the way"), ("imo", "in my opinion"), ("asap", "as soon as possible")))
MEDICAL = ShorthandCategory("medical", "",
                            rules(("pt", "Patient"), ("c/o", "Complains of"), ("hr", "Heart rate")))


class FakeClock:
    """ Manually advanced clock in seconds. """
    def __init__(self, start=1000.0):
        self.now = start
    def __call__(self) -> float:
        return self.now
    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """ Rule provider returning a fixed category list, or failing on demand. """
    def __init__(self, categories=(), fail=False):
        self.categories = list(categories)
        self.fail = fail
        self.calls = 0
    async def fetch_categories(self):
        self.calls += 1
        if self.fail:
            raise RuleLoadFailure("server down")
        return list(self.categories)
