# errors.py


class FretlabError(ValueError):
    """Base class for every data error raised by fretlab."""


class UnknownNoteSpelling(FretlabError):
    def __init__(self, name):
        super().__init__(f"Unknown note spelling: {name!r}")
        self.name = name


class UnknownIntervalLabel(FretlabError):
    def __init__(self, label):
        super().__init__(f"Unknown interval: {label!r}")
        self.label = label


class InvalidTuning(FretlabError):
    """A tuning name is unknown or one of its open strings cannot be resolved."""

    def __init__(self, message, string_index=None):
        super().__init__(message)
        self.string_index = string_index
