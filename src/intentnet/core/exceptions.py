"""Exception hierarchy for intentnet."""


class IntentNetError(Exception):
    """Base class for all intentnet errors."""
    pass


class UnknownCategoryError(IntentNetError):
    """A scene observation names a category the catalog does not know."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Unknown object category: {label!r}")


class InvalidSceneError(IntentNetError):
    """A scene cannot be turned into an intention network."""
    pass


class SceneFileError(IntentNetError):
    """A scene-list file is malformed."""

    def __init__(self, path: str, line_number: int, message: str):
        self.path = path
        self.line_number = line_number
        super().__init__(f"{path}:{line_number}: {message}")


class NoCandidatesError(IntentNetError):
    """A session operation needs a candidate but the list is empty."""
    pass


class SessionClosedError(IntentNetError):
    """A session operation was attempted after the session terminated."""
    pass
