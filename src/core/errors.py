"""Error taxonomy for the post-game summary pipeline.

Only total structural failure surfaces as an exception. Field-level problems
(missing keys, wrong types, negative counters) are repaired in place by the
normalizer and never reach the caller.
"""


class PipelineError(Exception):
    """Base exception for summary pipeline failures."""

    pass


class MalformedPayloadError(PipelineError):
    """Raised when no participant list can be located in the payload."""

    pass


class EmptyMatchError(PipelineError):
    """Raised when the payload is well-formed but lists zero participants."""

    pass
