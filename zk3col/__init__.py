"""
zk3col: interactive zero-knowledge proof of knowledge of a graph 3-coloring.
"""

from .errors import (
    ZKPError,
    OutOfRange,
    ConfigurationError,
    TransportError,
    ProtocolDecodeError,
    UnexpectedMessage,
    FailureKind,
    Outcome,
)
from .graph import ColourGraph, sample_graph, sample_colouring, load_graph, load_colouring
from .utils import commit, verify_commitment, generate_nonce, generate_permutation
from .messages import Commit, Challenge, Reveal, Result, encode_message, decode_message
from .transport import LineTransport
from .prover import Prover, RoundSecrets, commit_to_colouring
from .verifier import Verifier, soundness_error, rounds_for_soundness
