"""
Exceptions raised by idea stores.

Callers in the core catch these and turn them into result objects; none of
them is meant to reach the end user as a traceback.
"""


class IdeaStoreError(Exception):
    """Base class for store failures."""


class SourceFetchError(IdeaStoreError):
    """One ranked query could not be loaded."""


class ScoreIncrementError(IdeaStoreError):
    """A vote could not be recorded."""


class IdeaSubmissionError(IdeaStoreError):
    """A new idea could not be saved."""
