class PlaybackError(Exception):
    """Base class for playback engine errors."""


class InvalidParameterError(PlaybackError, ValueError):
    """Raised when a Run is refused because its parameters are unusable."""


class RunCancelled(PlaybackError):
    """Raised inside a producer at the first checkpoint after cancel()."""

    def __init__(self, run_id: int):
        super().__init__(f"run {run_id} cancelled")
        self.run_id = run_id
