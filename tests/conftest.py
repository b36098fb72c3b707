import socket
import threading
from collections import deque

import pytest

from zk3col.errors import TransportError
from zk3col.graph import COLOUR_POOL, sample_colouring, sample_graph
from zk3col.prover import Prover
from zk3col.transport import LineTransport
from zk3col.verifier import Verifier

SESSION_TIMEOUT = 30


class FakeTransport:
    """Scripted transport: hands out queued messages and records what was sent."""

    def __init__(self, incoming=(), broken_sends=()):
        self.incoming = deque(incoming)
        self.sent = []
        self.broken_sends = set(broken_sends)

    def send_message(self, msg):
        if msg.type in self.broken_sends:
            raise TransportError('send failed: [Errno 32] Broken pipe')
        self.sent.append(msg)

    def receive_message(self):
        if not self.incoming:
            raise TransportError('connection closed')
        item = self.incoming.popleft()
        if callable(item):
            item = item(self.sent)
        return item


class FixedChoice:
    """Stands in for the verifier's SystemRandom to force the challenged edge."""

    def __init__(self, edge):
        self.edge = edge

    def choice(self, edges):
        assert self.edge in edges
        return self.edge


def run_session(G, colouring, num_rounds, check_colouring=True):
    """
    Run an honest Verifier against a Prover over a socket pair.

    Returns (verifier outcome, prover outcome).
    """
    a, b = socket.socketpair()
    prover_transport = LineTransport.from_socket(a, SESSION_TIMEOUT)
    verifier_transport = LineTransport.from_socket(b, SESSION_TIMEOUT)
    prover = Prover(G, colouring, prover_transport, check_colouring=check_colouring)
    results = {}

    def prove():
        try:
            results['outcome'] = prover.run(num_rounds)
        except Exception as e:
            results['error'] = e

    t = threading.Thread(target=prove)
    t.start()
    try:
        verifier_outcome = Verifier(G, verifier_transport, num_rounds).verify()
    finally:
        t.join(SESSION_TIMEOUT)
        prover_transport.close()
        verifier_transport.close()
    if 'error' in results:
        raise results['error']
    return verifier_outcome, results['outcome']


@pytest.fixture
def graph():
    return sample_graph()


@pytest.fixture
def colouring():
    return sample_colouring()


@pytest.fixture
def same_colour_edge(graph, colouring):
    """A cheating coloring: both endpoints of edge (0, 1) get the same colour."""
    cheat = dict(colouring)
    cheat[1] = cheat[0]
    return cheat


@pytest.fixture
def four_colours(colouring):
    """A cheating coloring: vertex 0 gets a fourth colour label."""
    cheat = dict(colouring)
    cheat[0] = next(c for c in COLOUR_POOL if c not in colouring.values())
    return cheat
