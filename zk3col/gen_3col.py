import argparse
from secrets import SystemRandom

from .graph import COLOUR_POOL, ColourGraph, dump_colouring, dump_graph

N = 999
C = 10


def gen_3col(n: int, c: float = C, colours=None) -> (ColourGraph, dict):
    """
    Random graph with a planted 3-coloring.

    The vertices are shuffled into three classes of n/3; every pair of
    vertices from different classes becomes an edge with probability c/n.
    """
    assert n % 3 == 0
    t = n // 3
    sr = SystemRandom()
    if colours is None:
        colours = sr.sample(COLOUR_POOL, 3)
    G = ColourGraph(n)
    perm = list(range(n))
    sr.shuffle(perm)
    p = c / n
    for k in range(2):
        for u in range(k * t, (k+1) * t):
            for v in range((k+1) * t, n):
                if sr.random() <= p:
                    G.add_edge(perm[u], perm[v])

    colouring = {}
    for k in range(3):
        for u in range(k * t, (k+1) * t):
            colouring[perm[u]] = colours[k]

    return G, colouring


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate a random 3-colourable graph and its coloring.')
    parser.add_argument('prefix', help='writes <prefix>-graph.json and <prefix>-coloring.json')
    parser.add_argument('-n', '--vertices', type=int, default=N, help='number of vertices (multiple of 3)')
    parser.add_argument('-c', '--degree', type=float, default=C, help='expected degree parameter')
    args = parser.parse_args(argv)
    if args.vertices % 3 != 0:
        parser.error('number of vertices must be a multiple of 3')

    G, colouring = gen_3col(args.vertices, args.degree)
    assert G.is_valid_colouring(colouring)

    dump_graph(G, f'{args.prefix}-graph.json')
    dump_colouring(colouring, f'{args.prefix}-coloring.json')
    print(f'[+] {G.num_vertices} vertices, {G.num_edges} edges')
    print(f'[+] wrote {args.prefix}-graph.json and {args.prefix}-coloring.json')


if __name__ == '__main__':
    main()
