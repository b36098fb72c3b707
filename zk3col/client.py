"""
Prover client for the 3-coloring zero-knowledge proof protocol.

Convinces the verifier server that it knows a coloring of the shared
graph, without revealing it.
"""

import argparse
import logging
import socket
import sys

from .errors import ZKPError
from .graph import load_colouring, load_graph, sample_colouring, sample_graph
from .prover import Prover
from .transport import LineTransport

HOST = 'localhost'
PORT = 1337
GRAPH_FILE = '3col-graph.json'
COLOR_FILE = '3col-coloring.json'
ROUNDS = 100


def prove(host, port, G, colouring, num_rounds, timeout=None):
    """Connect to the verifier and run one session. Returns the Outcome."""
    sock = socket.create_connection((host, port), timeout=timeout)
    transport = LineTransport.from_socket(sock, timeout)
    try:
        return Prover(G, colouring, transport).run(num_rounds)
    finally:
        transport.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description='Prover for the 3-coloring zero-knowledge proof.')
    parser.add_argument('--host', default=HOST)
    parser.add_argument('--port', type=int, default=PORT)
    parser.add_argument('--graph', help=f'graph in networkx adjacency JSON, e.g. {GRAPH_FILE}')
    parser.add_argument('--coloring', help=f'secret coloring as a JSON list, e.g. {COLOR_FILE}')
    parser.add_argument('--rounds', type=int, default=ROUNDS,
                        help='number of rounds; must match the verifier')
    parser.add_argument('--timeout', type=float, default=None, help='per-receive timeout in seconds')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(asctime)s %(name)s %(levelname)s %(message)s')

    if (args.graph is None) != (args.coloring is None):
        parser.error('--graph and --coloring must be given together')
    if args.graph:
        G, colouring = load_graph(args.graph), load_colouring(args.coloring)
    else:
        G, colouring = sample_graph(), sample_colouring()

    print('=' * 60)
    print('Prover - 3-Coloring Zero-Knowledge Proof')
    print('=' * 60)
    print(f'[+] Graph has {G.num_vertices} nodes and {G.num_edges} edges')
    print(f'[+] Running {args.rounds} rounds against {args.host}:{args.port}')

    try:
        outcome = prove(args.host, args.port, G, colouring, args.rounds, args.timeout)
    except (ZKPError, OSError) as e:
        print(f'[!] session failed: {type(e).__name__}: {e}')
        return 2

    if outcome.verified:
        print(f'\n[+] Proof ACCEPTED after {outcome.rounds_completed} rounds')
        return 0
    print(f'\n[+] Proof REJECTED in round {outcome.rounds_completed}: {outcome.message}')
    return 1


if __name__ == '__main__':
    sys.exit(main())
