"""Base exception for trellolink."""


class TrellolinkError(Exception):
    """Base exception for all trellolink errors.

    Every error raised while handling a pull request event derives from this
    class, so the CLI can turn any of them into a single failure message.
    """
