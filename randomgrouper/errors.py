"""
Domain errors for the grouper.

Everything raised on purpose by the core derives from RandomGrouperError.
"""


class RandomGrouperError(Exception):
    """Base class for all grouper errors."""
    pass


class EmptyRosterError(RandomGrouperError):
    """The roster has no names left after blank entries are removed."""
    pass


class InvalidGroupCountError(RandomGrouperError):
    def __init__(self, group_count, low: int | None = None, high: int | None = None):
        self.group_count = group_count
        if high is None:
            message = f"Group count must be at least {low}, got {group_count}"
        else:
            message = f"Group count must be between {low} and {high}, got {group_count}"
        super().__init__(message)


class RosterFileError(RandomGrouperError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Missing roster file: {path}")
