class ShorthandError(Exception):
    """Base class for everything this app raises on purpose."""


class RuleLoadFailure(ShorthandError):
    """The rule provider could not be reached or sent something unreadable.
    Soft: the cache logs it and hands out empty rule lists."""


class SubmissionFailure(ShorthandError):
    """Results could not be saved. The attempt is kept so the user can retry."""


class IncompleteResultsError(ShorthandError):
    """Both test phases must finish before their results can be combined."""


class SessionFinishedError(ShorthandError):
    """A finished typing session does not accept more input."""


class InvalidRuleError(ShorthandError):
    pass


class DatabaseError(ShorthandError):
    pass
