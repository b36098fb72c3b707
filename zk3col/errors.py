"""
Error taxonomy of the 3-coloring zero-knowledge proof.

Everything here except the verification outcome is fatal to a session.
A rejected proof is not an exception: it is reported as an `Outcome`
with a `FailureKind` (see `zk3col.verifier`).
"""

from enum import Enum
from typing import NamedTuple, Optional


class ZKPError(Exception):
    pass


class OutOfRange(ZKPError, IndexError):
    """A vertex index outside [0, n), or an edge from a vertex to itself."""


class ConfigurationError(ZKPError):
    """Bad session parameters, e.g. an invalid secret coloring."""


class TransportError(ZKPError):
    """The underlying stream failed, timed out or was closed by the peer."""


class ProtocolDecodeError(ZKPError):
    """A message that could not be parsed or carries out-of-range values."""


class UnexpectedMessage(ZKPError):
    """A well-formed message of the wrong kind (or round) for the current state."""


class FailureKind(Enum):
    TOO_MANY_COLOURS = 'too many colours'
    COMMITMENT_MISMATCH = 'commitment mismatch'
    SAME_COLOUR = 'adjacent vertices share a colour'

    @property
    def reason(self) -> str:
        return self.value


class Outcome(NamedTuple):
    """
    Terminal status of a completed session, as seen by either party.

    `failure` is set only for a rejected proof whose reason is one of
    the `FailureKind`s.
    """
    verified: bool
    message: str
    rounds_completed: int
    failure: Optional[FailureKind] = None

    @classmethod
    def rejected(cls, failure: FailureKind, rounds_completed: int) -> 'Outcome':
        return cls(False, failure.reason, rounds_completed, failure)

    @classmethod
    def from_result(cls, result) -> 'Outcome':
        failure = None
        if not result.verified:
            failure = next((k for k in FailureKind if k.reason == result.message), None)
        return cls(result.verified, result.message, result.totalRounds, failure)
