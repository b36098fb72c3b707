"""Verifier server: runs one proof session per incoming prover connection."""

import argparse
import logging
from socketserver import ForkingTCPServer, StreamRequestHandler

from .errors import ZKPError
from .graph import load_graph, sample_graph
from .transport import LINGER_TIMEOUT, LineTransport
from .verifier import Verifier, rounds_for_soundness, soundness_error

HOST = 'localhost'
PORT = 1337
ROUNDS = 100


class VerifierHandler(StreamRequestHandler):
    def handle(self):
        print(f'[+] handling connection with "{self.client_address}"')
        self.connection.settimeout(self.server.receive_timeout)
        transport = LineTransport(self.rfile, self.wfile, self.connection)
        try:
            outcome = Verifier(self.server.G, transport, self.server.num_rounds).verify()
        except ZKPError as e:
            print(f'[!] session with "{self.client_address}" failed: {type(e).__name__}: {e}')
        else:
            if outcome.verified:
                print(f'[+] ACCEPT: {outcome.rounds_completed} rounds passed')
            else:
                print(f'[!] REJECT in round {outcome.rounds_completed}: {outcome.message}')
        finally:
            transport.linger(self.server.receive_timeout or LINGER_TIMEOUT)
        print(f'[+] closing connection with "{self.client_address}"')


class Server(ForkingTCPServer):
    allow_reuse_address = True

    def __init__(self, server_address, G, num_rounds, receive_timeout=None):
        self.G = G
        self.num_rounds = num_rounds
        self.receive_timeout = receive_timeout
        ForkingTCPServer.__init__(self, server_address, VerifierHandler)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Verifier for the 3-coloring zero-knowledge proof.')
    parser.add_argument('--host', default=HOST)
    parser.add_argument('--port', type=int, default=PORT)
    parser.add_argument('--graph', help='graph in networkx adjacency JSON (default: built-in sample graph)')
    rounds = parser.add_mutually_exclusive_group()
    rounds.add_argument('--rounds', type=int, help=f'number of rounds (default: {ROUNDS})')
    rounds.add_argument('--security', type=int, metavar='BITS',
                        help='choose the number of rounds for a soundness error of at most 2^-BITS')
    parser.add_argument('--timeout', type=float, default=None, help='per-receive timeout in seconds')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(name)s %(levelname)s %(message)s')

    G = load_graph(args.graph) if args.graph else sample_graph()
    if G.num_edges == 0:
        parser.error('the graph has no edges to challenge')
    if args.security is not None:
        num_rounds = rounds_for_soundness(G.num_edges, args.security)
    else:
        num_rounds = ROUNDS if args.rounds is None else args.rounds
    if num_rounds < 1:
        parser.error(f'number of rounds must be at least 1 (got {num_rounds})')

    server = Server((args.host, args.port), G, num_rounds, args.timeout)
    print(f'[+] Verifier running on {args.host}:{args.port}')
    print(f'[+] Graph: {G.num_vertices} nodes, {G.num_edges} edges')
    print(f'[+] Using k={num_rounds} rounds (soundness error {soundness_error(G.num_edges, num_rounds):.3g})')
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print('[+] shutting down')
    finally:
        server.server_close()


if __name__ == '__main__':
    main()
