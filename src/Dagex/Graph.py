#! /usr/bin/env python
# -*- coding: utf-8 -*-

##############################################################################
##  -- Dagex --
##  Library for Directed Graphs, Phylogenetic Networks and Episode Feasibility
##
##  Copyright 2025 The Dagex Developers.
##  All rights reserved.
##
##  See "LICENSE.txt" for terms and conditions of usage.
##
##  If you use this work or any portion thereof in published work,
##  please cite it as:
##
##     The Dagex Developers. 2025.
##
##############################################################################

"""
Author : The Dagex Developers
Last Edit : 3/11/25
First Included in Version : 1.0.0

Immutable directed graphs over the node space 0..N-1, built from an arrow
list by a validating constructor that also derives the basic structural
properties (acyclic, connected, rooted, binary, tree).

Docs   - [x]
Tests  - [x]
Design - [x]
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from operator import index
from typing import Iterator, Sequence

import networkx as nx

from .DTO import ArrowDTO, DirectedGraphDTO
from .GlobalId import next_graph_id
from .Node import Node

#########################
#### EXCEPTION CLASS ####
#########################

class GraphError(Exception):
    """
    Base class for every reason a DirectedGraph can not be built.
    """
    def __init__(self, message : str = "Error with a Graph Instance") -> None:
        self.message = message
        super().__init__(self.message)

class EmptyGraphError(GraphError):
    def __init__(self, number_of_nodes : int = 0) -> None:
        self.number_of_nodes = number_of_nodes
        super().__init__(f"A graph needs at least one node, got \
{number_of_nodes}")

class TooBigGraphError(GraphError):
    def __init__(self, number_of_nodes : int) -> None:
        self.number_of_nodes = number_of_nodes
        super().__init__(f"A graph may have at most \
{DirectedGraph.max_size()} nodes, got {number_of_nodes}")

class MultipleParallelArrowsError(GraphError):
    """
    Raised when the same ordered (source, target) pair is given twice.
    """
    def __init__(self, arrow : ArrowDTO) -> None:
        self.arrow = arrow
        super().__init__(f"Arrow {arrow.source} -> {arrow.target} appears \
more than once")

class ArrowOutsideOfNodesRangeError(GraphError):
    """
    Raised when an arrow endpoint is not a node of the graph.
    """
    def __init__(self, arrow : ArrowDTO) -> None:
        self.arrow = arrow
        super().__init__(f"Arrow {arrow.source} -> {arrow.target} has an \
endpoint outside of the node range")

##########################
#### HELPER FUNCTIONS ####
##########################

_UNVISITED = 0
_ON_STACK = 1
_DONE = 2

def _is_acyclic(successors : Sequence[Sequence[int]]) -> bool:
    """
    Iterative depth first search with node coloring. A node finished from
    one start is never searched again from another.

    Args:
        successors (Sequence[Sequence[int]]): adjacency by node index
    Returns:
        bool: True if no directed cycle exists.
    """
    state = bytearray(len(successors))

    for start in range(len(successors)):
        if state[start] != _UNVISITED:
            continue

        state[start] = _ON_STACK
        stack : list[tuple[int, int]] = [(start, 0)]

        while stack:
            node, position = stack[-1]
            children = successors[node]

            if position < len(children):
                stack[-1] = (node, position + 1)
                child = children[position]
                if state[child] == _ON_STACK:
                    return False
                if state[child] == _UNVISITED:
                    state[child] = _ON_STACK
                    stack.append((child, 0))
            else:
                state[node] = _DONE
                stack.pop()

    return True

def _is_weakly_connected(successors : Sequence[Sequence[int]],
                         predecessors : Sequence[Sequence[int]]) -> bool:
    """
    Breadth first search from node 0 that ignores arrow direction.
    """
    visited = bytearray(len(successors))
    visited[0] = 1
    seen = 1
    queue = deque([0])

    while queue:
        node = queue.popleft()
        for neighbors in (successors[node], predecessors[node]):
            for neighbor in neighbors:
                if not visited[neighbor]:
                    visited[neighbor] = 1
                    seen += 1
                    queue.append(neighbor)

    return seen == len(successors)

####################################
#### BASIC PROPERTIES AND GRAPH ####
####################################

@dataclass(frozen=True)
class DirectedGraphBasicProperties:
    """
    Structural facts derived once, when a graph is built.

    acyclic   : no directed cycle
    connected : connected when arrow direction is ignored
    rooted    : exactly one node without predecessors
    binary    : every node has at most 2 predecessors and 2 successors
    tree      : every node has at most 1 predecessor
    """
    acyclic : bool
    connected : bool
    rooted : bool
    binary : bool
    tree : bool


class DirectedGraph:
    """
    An immutable directed graph whose nodes are Node(0) .. Node(N-1).

    Instances are only made by DirectedGraph.from_dto, which validates its
    input, or by trusted code in this package through _new_unchecked.
    Parallel arrows are not allowed, though both A -> B and B -> A may be
    present.
    """

    _MAX_SIZE : int = 1 << 22

    __slots__ = ("_id", "_hash", "_number_of_nodes", "_nodes", "_successors",
                 "_predecessors", "_properties", "_root", "_leaves")

    def __init__(self, *args, **kwargs) -> None:
        raise TypeError("DirectedGraph instances are built with \
DirectedGraph.from_dto")

    @staticmethod
    def max_size() -> int:
        """
        Returns:
            int: The largest number of nodes a graph may have.
        """
        return DirectedGraph._MAX_SIZE

    @classmethod
    def from_dto(cls, dto : DirectedGraphDTO) -> DirectedGraph:
        """
        Validate an interchange value and build a graph from it.

        Checks are made in this order: the node count must be positive,
        then no larger than max_size(), then no arrow may be repeated
        (anywhere in the list), then every arrow endpoint must lie in
        [0, N).

        Args:
            dto (DirectedGraphDTO): node count and arrow list
        Raises:
            EmptyGraphError: if the node count is not positive
            TooBigGraphError: if the node count exceeds max_size()
            MultipleParallelArrowsError: if an arrow is given twice
            ArrowOutsideOfNodesRangeError: if an endpoint is out of range
        Returns:
            DirectedGraph: the validated graph
        """
        number_of_nodes = dto.number_of_nodes
        if number_of_nodes <= 0:
            raise EmptyGraphError(number_of_nodes)
        if number_of_nodes > cls._MAX_SIZE:
            raise TooBigGraphError(number_of_nodes)

        seen : set[tuple[int, int]] = set()
        for arrow in dto.arrows:
            pair = arrow.as_tuple()
            if pair in seen:
                raise MultipleParallelArrowsError(arrow)
            seen.add(pair)

        for arrow in dto.arrows:
            if not (0 <= arrow.source < number_of_nodes
                    and 0 <= arrow.target < number_of_nodes):
                raise ArrowOutsideOfNodesRangeError(arrow)

        successors : list[list[int]] = [[] for _ in range(number_of_nodes)]
        predecessors : list[list[int]] = [[] for _ in range(number_of_nodes)]
        for arrow in dto.arrows:
            successors[arrow.source].append(arrow.target)
            predecessors[arrow.target].append(arrow.source)

        return cls._new_unchecked(number_of_nodes, successors, predecessors)

    @classmethod
    def _new_unchecked(cls,
                       number_of_nodes : int,
                       successors : Sequence[Sequence[int]],
                       predecessors : Sequence[Sequence[int]]) \
                           -> DirectedGraph:
        """
        Build a graph from adjacency that the caller guarantees is valid:
        1 <= number_of_nodes <= max_size(), every index in range,
        predecessors the exact inverse of successors and no parallel
        arrows. Nothing is checked.

        Args:
            number_of_nodes (int): N
            successors (Sequence[Sequence[int]]): per node successor indices
            predecessors (Sequence[Sequence[int]]): per node predecessor
                                                    indices
        Returns:
            DirectedGraph: the graph
        """
        graph = object.__new__(cls)

        succ = tuple(tuple(sorted(set(s))) for s in successors)
        pred = tuple(tuple(sorted(set(p))) for p in predecessors)
        nodes = tuple(Node(i) for i in range(number_of_nodes))

        roots = [i for i in range(number_of_nodes) if not pred[i]]
        root = nodes[roots[0]] if len(roots) == 1 else None
        leaves = frozenset(nodes[i] for i in range(number_of_nodes)
                           if not succ[i])

        binary = True
        tree = True
        for i in range(number_of_nodes):
            if len(pred[i]) > 2 or len(succ[i]) > 2:
                binary = False
            if len(pred[i]) > 1:
                tree = False

        rooted = root is not None
        acyclic = _is_acyclic(succ)

        # A single source in a DAG reaches every node.
        if rooted and acyclic:
            connected = True
        else:
            connected = _is_weakly_connected(succ, pred)

        graph._id = next_graph_id()
        graph._hash = hash((number_of_nodes, succ, pred))
        graph._number_of_nodes = number_of_nodes
        graph._nodes = nodes
        graph._successors = tuple(tuple(nodes[j] for j in s) for s in succ)
        graph._predecessors = tuple(tuple(nodes[j] for j in p) for p in pred)
        graph._properties = DirectedGraphBasicProperties(acyclic = acyclic,
                                                         connected = connected,
                                                         rooted = rooted,
                                                         binary = binary,
                                                         tree = tree)
        graph._root = root
        graph._leaves = leaves
        return graph

    #### ACCESSORS ####

    @property
    def id(self) -> int:
        """
        Returns:
            int: The process unique id of this instance.
        """
        return self._id

    @property
    def basic_properties(self) -> DirectedGraphBasicProperties:
        return self._properties

    @property
    def root(self) -> Node | None:
        """
        Returns:
            Node | None: The unique node with no predecessors, or None when
                         there are zero or several such nodes.
        """
        return self._root

    @property
    def leaves(self) -> frozenset[Node]:
        """
        Returns:
            frozenset[Node]: Every node with no successors.
        """
        return self._leaves

    def number_of_nodes(self) -> int:
        return self._number_of_nodes

    def nodes(self) -> tuple[Node, ...]:
        """
        Returns:
            tuple[Node, ...]: Node(0) .. Node(N-1), in order.
        """
        return self._nodes

    def node(self, node_index : int) -> Node:
        """
        Args:
            node_index (int): an index in [0, N)
        Raises:
            IndexError: if the index is out of range
        Returns:
            Node: the node with that index
        """
        if not 0 <= node_index < self._number_of_nodes:
            raise IndexError(f"Node index {node_index} is out of range")
        return self._nodes[node_index]

    def successors(self, node : Node) -> tuple[Node, ...]:
        """
        Args:
            node (Node): a node of this graph
        Returns:
            tuple[Node, ...]: its successors, sorted by index
        """
        return self._successors[index(node)]

    def predecessors(self, node : Node) -> tuple[Node, ...]:
        """
        Args:
            node (Node): a node of this graph
        Returns:
            tuple[Node, ...]: its predecessors, sorted by index
        """
        return self._predecessors[index(node)]

    def out_degree(self, node : Node) -> int:
        return len(self._successors[index(node)])

    def in_degree(self, node : Node) -> int:
        return len(self._predecessors[index(node)])

    def is_leaf(self, node : Node) -> bool:
        return not self._successors[index(node)]

    def arrows(self) -> Iterator[tuple[Node, Node]]:
        """
        Yields every arrow, ordered by source and then by target.
        """
        for source in self._nodes:
            for target in self._successors[source.id]:
                yield (source, target)

    def number_of_arrows(self) -> int:
        return sum(len(s) for s in self._successors)

    #### CONVERSION ####

    def to_dto(self) -> DirectedGraphDTO:
        """
        Returns:
            DirectedGraphDTO: an interchange value that rebuilds an equal
                              graph through from_dto.
        """
        return DirectedGraphDTO(self._number_of_nodes,
                                tuple(ArrowDTO(s.id, t.id)
                                      for s, t in self.arrows()))

    def to_networkx(self) -> nx.DiGraph:
        """
        Export to networkx, using the node indices as networkx nodes.

        Returns:
            nx.DiGraph: an equivalent networkx graph
        """
        nx_graph = nx.DiGraph()
        nx_graph.add_nodes_from(range(self._number_of_nodes))
        nx_graph.add_edges_from((s.id, t.id) for s, t in self.arrows())
        return nx_graph

    #### EQUALITY ####

    def __eq__(self, other : object) -> bool:
        if not isinstance(other, DirectedGraph):
            return NotImplemented
        if self._id == other._id:
            return True
        return (self._hash == other._hash
                and self._number_of_nodes == other._number_of_nodes
                and self._successors == other._successors
                and self._predecessors == other._predecessors)

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"DirectedGraph(id={self._id}, \
number_of_nodes={self._number_of_nodes}, arrows={self.number_of_arrows()})"
