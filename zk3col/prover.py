import logging
from typing import NamedTuple

from .errors import ConfigurationError, Outcome, ProtocolDecodeError, TransportError, UnexpectedMessage
from .graph import ColourGraph, as_colouring_map, used_colours
from .messages import Challenge, Commit, Result, Reveal
from .utils import commit, generate_nonce, generate_permutation, is_colour_label

logger = logging.getLogger(__name__)


class RoundSecrets(NamedTuple):
    round: int
    permutation: dict
    colouring: dict
    nonces: dict
    commitments: list

    def opening(self, v: int) -> (str, str):
        return self.colouring[v], self.nonces[v]


def commit_to_colouring(colouring: dict, rnd: int) -> RoundSecrets:
    """
    Commit to a permuted version of the given graph coloring.

    Input: a coloring as a vertex -> colour mapping over 0, ..., n-1
    Outputs a fresh RoundSecrets holding:
    - a random permutation of the colours in use
    - the permuted coloring
    - one new nonce per vertex
    - commitments to the permuted color of each vertex, indexed by vertex
    """
    n = len(colouring)
    perm = generate_permutation(used_colours(colouring))
    permuted = {v: perm[colouring[v]] for v in range(n)}
    nonces = {v: generate_nonce() for v in range(n)}
    commitments = [commit(permuted[v], nonces[v]) for v in range(n)]
    return RoundSecrets(rnd, perm, permuted, nonces, commitments)


class Prover:
    """
    Prover side of the protocol, driven by a secret coloring.

    The coloring is checked once, here; with `check_colouring=False` an
    invalid (cheating) coloring is accepted as long as it assigns a
    well-formed colour label to every vertex.
    """

    def __init__(self, graph: ColourGraph, colouring, transport, check_colouring=True):
        self.graph = graph
        self.colouring = as_colouring_map(colouring)
        self.transport = transport

        n = graph.num_vertices
        if sorted(self.colouring) != list(range(n)):
            raise ConfigurationError(f'coloring must assign a colour to each of the {n} vertices')
        if not all(is_colour_label(c) for c in self.colouring.values()):
            raise ConfigurationError('coloring contains an invalid colour label')
        if check_colouring and not graph.is_valid_colouring(self.colouring):
            raise ConfigurationError('invalid coloring provided')

    def run(self, num_rounds: int) -> Outcome:
        """
        Run the whole session and return the verifier's verdict.

        Stops early, without sending anything more, when the verifier
        answers a commitment with a Result instead of a Challenge.
        """
        if num_rounds < 1:
            raise ConfigurationError('number of rounds must be at least 1')
        logger.info('starting proof: %d vertices, %d edges, %d rounds',
                    self.graph.num_vertices, self.graph.num_edges, num_rounds)

        for rnd in range(1, num_rounds + 1):
            result = self.run_round(rnd)
            if result is not None:
                logger.info('verifier stopped the session in round %d: %s', rnd, result.message)
                return Outcome.from_result(result)

        msg = self.transport.receive_message()
        if not isinstance(msg, Result):
            raise UnexpectedMessage(f'expected RESULT after the last round, got {msg.type}')
        logger.info('session finished: verified=%s, %s', msg.verified, msg.message)
        return Outcome.from_result(msg)

    def run_round(self, rnd: int):
        """One commit/challenge/reveal cycle. Returns the Result if the verifier aborted."""
        round_secrets = commit_to_colouring(self.colouring, rnd)
        logger.debug('round %d: sending %d commitments', rnd, len(round_secrets.commitments))
        try:
            self.transport.send_message(Commit(round=rnd, commitments=round_secrets.commitments))
        except TransportError:
            # The verifier may have hung up right after an early Result.
            result = self._pending_result()
            if result is None:
                raise
            return result

        msg = self.transport.receive_message()
        if isinstance(msg, Result):
            return msg
        if not isinstance(msg, Challenge):
            raise UnexpectedMessage(f'expected CHALLENGE or RESULT, got {msg.type}')
        self.transport.send_message(self.reveal(round_secrets, msg))
        return None

    def _pending_result(self):
        try:
            msg = self.transport.receive_message()
        except (TransportError, ProtocolDecodeError):
            return None
        return msg if isinstance(msg, Result) else None

    def reveal(self, round_secrets: RoundSecrets, challenge: Challenge) -> Reveal:
        if challenge.round != round_secrets.round:
            raise UnexpectedMessage(f'challenge for round {challenge.round} during round {round_secrets.round}')
        n = self.graph.num_vertices
        u, v = challenge.vertex1, challenge.vertex2
        if not (0 <= u < n and 0 <= v < n):
            raise ProtocolDecodeError(f'challenge names vertex outside the graph: ({u}, {v})')
        logger.debug('round %d: opening vertices %d and %d', round_secrets.round, u, v)
        colour_u, nonce_u = round_secrets.opening(u)
        colour_v, nonce_v = round_secrets.opening(v)
        return Reveal(round=round_secrets.round, colour1=colour_u, colour2=colour_v,
                      nonce1=nonce_u, nonce2=nonce_v)
