"""Exception types shared by the search engine and the calibration harness."""


class ConfigurationError(ValueError):
    """Invalid weights, ranges, run counts or search depth.

    Raised before any work starts.
    """


class NoLegalMovesError(RuntimeError):
    """A non-terminal state offered no legal moves.

    Terminal detection and move enumeration disagree, which would otherwise
    corrupt search results and calibration statistics.
    """
