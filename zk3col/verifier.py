"""
Honest verifier for the 3-coloring zero-knowledge proof protocol.

Per round the verifier receives one commitment per vertex, challenges a
uniformly random edge and checks the two openings. A prover holding no
valid coloring has at least one bad edge, so it survives a round with
probability at most 1 - 1/|E|, and R rounds with (1 - 1/|E|)^R.
"""

import logging
import math
from enum import Enum
from secrets import SystemRandom

from .errors import (ConfigurationError, FailureKind, Outcome, ProtocolDecodeError, TransportError,
                     UnexpectedMessage)
from .graph import MAX_COLOURS, ColourGraph
from .messages import Challenge, Commit, Result, Reveal
from .utils import verify_commitment

logger = logging.getLogger(__name__)


def soundness_error(num_edges: int, rounds: int) -> float:
    """Probability that a prover with one bad edge passes all rounds."""
    if num_edges < 1:
        raise ValueError('graph has no edges')
    return (1 - 1 / num_edges) ** rounds


def rounds_for_soundness(num_edges: int, bits: int = 40) -> int:
    """Smallest number of rounds for a soundness error of at most 2^(-bits)."""
    if num_edges < 1:
        raise ValueError('graph has no edges')
    if num_edges == 1:
        return 1
    return math.ceil(bits * math.log(2) / -math.log1p(-1 / num_edges))


class State(Enum):
    AWAIT_COMMIT = 'await-commit'
    AWAIT_REVEAL = 'await-reveal'
    ABORTED = 'aborted'
    COMPLETED = 'completed'


class Verifier:
    def __init__(self, graph: ColourGraph, transport, num_rounds: int):
        if num_rounds < 1:
            raise ConfigurationError('number of rounds must be at least 1')
        if graph.num_edges == 0:
            raise ConfigurationError('cannot challenge a graph without edges')
        self.graph = graph
        self.transport = transport
        self.num_rounds = num_rounds
        self.edges = graph.edges()
        self.sr = SystemRandom()

        self.state = State.AWAIT_COMMIT
        self.round = 0
        self.rounds_completed = 0
        self.commitments = None
        self.challenge = None
        self.revealed_colours = set()
        self.failure = None

    def verify(self) -> Outcome:
        """
        Execute the full verification protocol.

        Returns the Outcome that was also sent to the prover. Transport
        and protocol errors propagate; for the latter the prover is told
        about the violation first, if the stream still works.
        """
        logger.info('starting verification: %d rounds over %d edges (soundness error %.3g)',
                    self.num_rounds, len(self.edges), soundness_error(len(self.edges), self.num_rounds))
        try:
            while self.state in (State.AWAIT_COMMIT, State.AWAIT_REVEAL):
                msg = self.transport.receive_message()
                outcome = self.handle(msg)
        except (ProtocolDecodeError, UnexpectedMessage) as e:
            self.state = State.ABORTED
            self._notify_violation(e)
            raise

        self.transport.send_message(Result(verified=outcome.verified, message=outcome.message,
                                           totalRounds=outcome.rounds_completed))
        return outcome

    def handle(self, msg):
        """
        Feed one received message to the state machine.

        Returns the Challenge it sent while the round is in progress,
        or the final Outcome once the session is over.
        """
        if self.state == State.AWAIT_COMMIT:
            if not isinstance(msg, Commit):
                raise UnexpectedMessage(f'expected COMMIT, got {msg.type}')
            challenge = self.receive_commit(msg)
            self.transport.send_message(challenge)
            return challenge
        if self.state == State.AWAIT_REVEAL:
            if not isinstance(msg, Reveal):
                raise UnexpectedMessage(f'expected REVEAL, got {msg.type}')
            return self.receive_reveal(msg)
        raise UnexpectedMessage(f'session is {self.state.value}, got {msg.type}')

    def receive_commit(self, msg: Commit) -> Challenge:
        rnd = self.round + 1
        if msg.round != rnd:
            raise UnexpectedMessage(f'round mismatch: expected {rnd}, got {msg.round}')
        if len(msg.commitments) != self.graph.num_vertices:
            raise ProtocolDecodeError(f'expected {self.graph.num_vertices} commitments, '
                                      f'got {len(msg.commitments)}')
        self.round = rnd
        self.commitments = msg.commitments

        # Choose a random edge
        u, v = self.sr.choice(self.edges)
        logger.debug('round %d: challenging edge (%d, %d)', rnd, u, v)
        self.challenge = Challenge(round=rnd, vertex1=u, vertex2=v)
        self.state = State.AWAIT_REVEAL
        return self.challenge

    def receive_reveal(self, msg: Reveal):
        rnd = self.round
        if msg.round != rnd:
            raise UnexpectedMessage(f'round mismatch: expected {rnd}, got {msg.round}')
        u, v = self.challenge.vertex1, self.challenge.vertex2

        # Counted over the whole session, before any other check.
        self.revealed_colours.update((msg.colour1, msg.colour2))
        if len(self.revealed_colours) > MAX_COLOURS:
            logger.warning('round %d: %d distinct colours revealed: %s', rnd,
                           len(self.revealed_colours), sorted(self.revealed_colours))
            return self._abort(FailureKind.TOO_MANY_COLOURS)

        if not verify_commitment(self.commitments[u], msg.colour1, msg.nonce1) or \
                not verify_commitment(self.commitments[v], msg.colour2, msg.nonce2):
            logger.warning('round %d: invalid opening for edge (%d, %d)', rnd, u, v)
            return self._abort(FailureKind.COMMITMENT_MISMATCH)

        if msg.colour1 == msg.colour2:
            logger.warning('round %d: same colour on adjacent vertices %d and %d', rnd, u, v)
            return self._abort(FailureKind.SAME_COLOUR)

        self.rounds_completed += 1
        self.commitments = None
        self.challenge = None
        logger.debug('round %d passed', rnd)
        if self.rounds_completed == self.num_rounds:
            self.state = State.COMPLETED
            logger.info('all %d rounds passed', self.num_rounds)
            return Outcome(True, f'Verification successful: all {self.num_rounds} rounds passed.',
                           self.num_rounds)
        self.state = State.AWAIT_COMMIT
        return None

    def _abort(self, failure: FailureKind) -> Outcome:
        self.state = State.ABORTED
        self.failure = failure
        return Outcome.rejected(failure, self.round)

    def _notify_violation(self, error):
        try:
            self.transport.send_message(Result(verified=False, message=f'protocol violation: {error}',
                                               totalRounds=self.round))
        except TransportError:
            logger.debug('could not report protocol violation to prover', exc_info=True)
