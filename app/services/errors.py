"""Exceptions raised by the matching core."""


class MatchingError(Exception):
    """Base class for matching-core errors that reach the caller."""


class ProfileNotFoundError(MatchingError):
    """The acting user's own profile could not be loaded."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Profile {user_id} could not be loaded.")
        self.user_id = user_id


class InvalidSwipeError(MatchingError):
    """A swipe decision that can never be valid, e.g. a user swiping on themselves."""
