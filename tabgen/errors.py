"""
Errors raised by the tab generator engine.

Only hard contract violations are raised. Soft conditions (unknown chord
names, empty note sets, unreachable notes) degrade to empty results instead.
"""


class InvalidNoteError(ValueError):
    """A note name that is not one of the 12 chromatic pitch classes."""


class InvalidTuningError(ValueError):
    """A tuning with the wrong number of strings or an unknown note."""


class InvalidFormulaError(ValueError):
    """A progression formula that does not have exactly four steps."""
