import json
from secrets import SystemRandom

import networkx as nx
from networkx.readwrite import json_graph

from .errors import OutOfRange
from .utils import is_colour_label

COLOUR_POOL = ['RED', 'BLUE', 'GREEN', 'YELLOW', 'ORANGE', 'PURPLE', 'PINK', 'CYAN']
MAX_COLOURS = 3


class ColourGraph:
    """
    Undirected graph on the vertices 0, ..., n-1.

    Both parties of a proof session hold their own instance; it is only
    read once the session has started.
    """

    def __init__(self, num_vertices: int):
        if num_vertices < 0:
            raise ValueError('number of vertices must be non-negative')
        self._G = nx.empty_graph(num_vertices)

    @classmethod
    def from_edges(cls, num_vertices: int, edges) -> 'ColourGraph':
        graph = cls(num_vertices)
        for u, v in edges:
            graph.add_edge(u, v)
        return graph

    @classmethod
    def from_networkx(cls, G: nx.Graph) -> 'ColourGraph':
        n = G.number_of_nodes()
        if sorted(G.nodes) != list(range(n)):
            raise OutOfRange('graph nodes must be labelled 0, ..., n-1')
        return cls.from_edges(n, G.edges)

    @property
    def num_vertices(self) -> int:
        return self._G.number_of_nodes()

    @property
    def num_edges(self) -> int:
        return self._G.number_of_edges()

    def _check_vertex(self, v):
        if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v < self.num_vertices:
            raise OutOfRange(f'invalid vertex index {v!r} (graph has {self.num_vertices} vertices)')

    def add_edge(self, u: int, v: int):
        self._check_vertex(u)
        self._check_vertex(v)
        if u == v:
            raise OutOfRange(f'self-loop on vertex {u}')
        self._G.add_edge(u, v)

    def neighbours(self, v: int) -> [int]:
        self._check_vertex(v)
        return sorted(self._G.neighbors(v))

    def has_edge(self, u: int, v: int) -> bool:
        return self._G.has_edge(u, v)

    def edges(self) -> [(int, int)]:
        """Every undirected edge exactly once, as a sorted list of (min, max) pairs."""
        return sorted((min(u, v), max(u, v)) for u, v in self._G.edges)

    def to_networkx(self) -> nx.Graph:
        return self._G.copy(as_view=True)

    def is_valid_colouring(self, colouring) -> bool:
        n = self.num_vertices
        colouring = as_colouring_map(colouring)
        if any(v not in colouring for v in range(n)):
            return False
        if len(colouring) != n:
            return False
        if any(not is_colour_label(c) for c in colouring.values()):
            return False
        if len(used_colours(colouring)) > MAX_COLOURS:
            return False
        if any(colouring[u] == colouring[v] for u, v in self._G.edges):
            return False
        return True

    def __repr__(self):
        return f'ColourGraph(num_vertices={self.num_vertices}, num_edges={self.num_edges})'


def as_colouring_map(colouring) -> dict:
    """Accept a coloring either as a vertex -> colour mapping or a list indexed by vertex."""
    if isinstance(colouring, dict):
        return dict(colouring)
    return dict(enumerate(colouring))


def used_colours(colouring) -> set:
    return set(as_colouring_map(colouring).values())


def load_graph(path) -> ColourGraph:
    with open(path, 'r') as f:
        G = json_graph.adjacency_graph(json.load(f))
    return ColourGraph.from_networkx(G)


def dump_graph(graph: ColourGraph, path):
    with open(path, 'w') as f:
        json.dump(json_graph.adjacency_data(graph.to_networkx()), f)


def load_colouring(path) -> dict:
    with open(path, 'r') as f:
        return as_colouring_map(json.load(f))


def dump_colouring(colouring, path):
    colouring = as_colouring_map(colouring)
    with open(path, 'w') as f:
        json.dump([colouring[v] for v in range(len(colouring))], f)


def sample_graph() -> ColourGraph:
    """The 10-vertex demo graph: two pentagons joined by spokes, plus four chords."""
    edges = [
        # outer pentagon
        (0, 1), (1, 2), (2, 3), (3, 4), (4, 0),
        # inner pentagon
        (5, 6), (6, 7), (7, 8), (8, 9), (9, 5),
        # spokes
        (0, 5), (1, 6), (2, 7), (3, 8), (4, 9),
        # chords
        (0, 2), (5, 7), (1, 3), (6, 8),
    ]
    return ColourGraph.from_edges(10, edges)


def sample_colouring() -> dict:
    """A valid coloring of `sample_graph()` using three labels drawn from the pool."""
    c1, c2, c3 = SystemRandom().sample(COLOUR_POOL, 3)
    pattern = [c1, c2, c3, c1, c3, c2, c3, c1, c2, c1]
    return dict(enumerate(pattern))
