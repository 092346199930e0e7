"""
Graph Model
Read-only dependency graph shared by every analyzer
"""

from typing import Dict, Iterator, List, Optional

import networkx as nx

from .models import EDGE_DIRECT, NODE_TYPE_MODULE, Edge, Node


class GraphModel:
    """Immutable view over a frozen networkx DiGraph

    Nodes keep the order of the input modules; edges keep the order in which
    the builder added them. Node attributes are ``name``, ``size``, ``type``,
    ``path`` and ``depth``; edge attribute ``kind`` is one of the edge kinds.
    """

    def __init__(self, graph: nx.DiGraph):
        if not nx.is_frozen(graph):
            # Freeze a private copy so the caller keeps a mutable graph
            graph = nx.freeze(graph.copy())
        self._graph = graph

    @property
    def graph(self) -> nx.DiGraph:
        """The underlying frozen DiGraph, for callers that want networkx algorithms"""
        return self._graph

    @property
    def node_ids(self) -> List[str]:
        return list(self._graph.nodes)

    @property
    def nodes(self) -> List[Node]:
        return [self._make_node(node_id, data) for node_id, data in self._graph.nodes(data=True)]

    @property
    def edges(self) -> List[Edge]:
        return [
            Edge(source, target, data.get('kind', EDGE_DIRECT))
            for source, target, data in self._graph.edges(data=True)
        ]

    def get_node(self, node_id: str) -> Optional[Node]:
        if node_id not in self._graph:
            return None
        return self._make_node(node_id, self._graph.nodes[node_id])

    def has_node(self, node_id: str) -> bool:
        return node_id in self._graph

    def successors(self, node_id: str) -> Iterator[str]:
        return self._graph.successors(node_id)

    def predecessors(self, node_id: str) -> Iterator[str]:
        return self._graph.predecessors(node_id)

    def in_degree(self, node_id: str) -> int:
        return self._graph.in_degree(node_id)

    def number_of_nodes(self) -> int:
        return self._graph.number_of_nodes()

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()

    def is_empty(self) -> bool:
        return self._graph.number_of_nodes() == 0

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, node_id) -> bool:
        return node_id in self._graph

    def to_dict(self) -> Dict:
        """Export graph data for reporting"""
        return {
            'nodes': [node.to_dict() for node in self.nodes],
            'edges': [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'GraphModel':
        """Rebuild a model from the shape produced by ``to_dict``"""
        graph = nx.DiGraph()
        for node in data.get('nodes', []):
            graph.add_node(node['id'],
                           name=node.get('name', node['id']),
                           size=node.get('size', 0),
                           type=node.get('type', NODE_TYPE_MODULE),
                           path=node.get('path'),
                           depth=node.get('depth'))

        for edge in data.get('edges', []):
            source, target = edge['source'], edge['target']
            # Edges must reference existing nodes and stay unique per pair
            if source not in graph or target not in graph or graph.has_edge(source, target):
                continue
            graph.add_edge(source, target, kind=edge.get('type', EDGE_DIRECT))

        return cls(graph)

    @staticmethod
    def _make_node(node_id: str, data: Dict) -> Node:
        return Node(
            id=node_id,
            name=data.get('name', node_id),
            size=data.get('size', 0),
            type=data.get('type', NODE_TYPE_MODULE),
            path=data.get('path'),
            depth=data.get('depth'),
        )

    def __repr__(self) -> str:
        return f"GraphModel(nodes={self.number_of_nodes()}, edges={self.number_of_edges()})"
