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

Phylogenetic networks: rooted, acyclic, binary directed graphs whose leaves
may carry taxon labels.

Docs   - [x]
Tests  - [x]
Design - [x]
"""

from __future__ import annotations
from operator import index
from types import MappingProxyType
from typing import Mapping

from .DTO import DirectedGraphDTO, PhylogeneticNetworkDTO
from .GlobalId import next_network_id
from .Graph import DirectedGraph, GraphError
from .Node import Node
from .Taxon import Taxon

#############################
#### EXCEPTION SPECIFICS ####
#############################

class NetworkError(Exception):
    """
    This exception is raised when a graph and taxon mapping do not form a
    valid phylogenetic network.
    """
    def __init__(self, message : str = "Error with a Network Instance") \
        -> None:
        self.message = message
        super().__init__(self.message)

class NotAcyclicError(NetworkError):
    def __init__(self) -> None:
        super().__init__("A phylogenetic network must be acyclic")

class NotRootedError(NetworkError):
    def __init__(self) -> None:
        super().__init__("A phylogenetic network must have exactly one root")

class NotBinaryError(NetworkError):
    def __init__(self) -> None:
        super().__init__("Every node of a phylogenetic network must have at \
most two parents and at most two children")

class TaxaNotLeavesError(NetworkError):
    """
    Raised when a taxon is attached to a node that is not a leaf.
    """
    def __init__(self, node_indices : list[int]) -> None:
        self.node_indices = node_indices
        super().__init__(f"Taxa may only label leaves, offending nodes: \
{node_indices}")

class InvalidGraphError(NetworkError):
    """
    Wraps the GraphError raised while building the underlying graph.
    """
    def __init__(self, graph_error : GraphError) -> None:
        self.graph_error = graph_error
        super().__init__(f"Invalid graph: {graph_error.message}")

##########################
#### HELPER FUNCTIONS ####
##########################

def _as_taxon(value : Taxon | str) -> Taxon:
    return value if isinstance(value, Taxon) else Taxon(value)

##############################
#### PHYLOGENETIC NETWORK ####
##############################

class PhylogeneticNetwork:
    """
    A DirectedGraph that is acyclic, rooted and binary, plus a partial
    labeling of its leaves with taxa.

    Node roles are read off the degrees of the underlying graph:

    leaf              : out degree 0
    tree node         : not a leaf, in degree at most 1
    reticulation node : in degree 2, out degree 1
    cross node        : in degree 2, out degree 2
    """

    __slots__ = ("_id", "_hash", "_graph", "_taxa")

    def __init__(self, *args, **kwargs) -> None:
        raise TypeError("PhylogeneticNetwork instances are built with \
PhylogeneticNetwork.from_graph_and_taxa or PhylogeneticNetwork.from_dto")

    @classmethod
    def from_graph_and_taxa(cls,
                            graph : DirectedGraph,
                            taxa : Mapping[Node | int, Taxon | str]) \
                                -> PhylogeneticNetwork:
        """
        Validate a graph and a taxon mapping.

        Args:
            graph (DirectedGraph): the underlying graph
            taxa (Mapping[Node | int, Taxon | str]): labels, keyed by node
        Raises:
            NotAcyclicError: if the graph has a directed cycle
            NotRootedError: if the graph does not have exactly one root
            NotBinaryError: if a node has more than 2 parents or children
            TaxaNotLeavesError: if a key is not a leaf of the graph
        Returns:
            PhylogeneticNetwork: the network
        """
        properties = graph.basic_properties
        if not properties.acyclic:
            raise NotAcyclicError()
        if not properties.rooted:
            raise NotRootedError()
        if not properties.binary:
            raise NotBinaryError()

        labels : dict[Node, Taxon] = {}
        misplaced : list[int] = []
        for key, value in taxa.items():
            node_index = index(key)
            if not 0 <= node_index < graph.number_of_nodes() \
                    or not graph.is_leaf(node_index):
                misplaced.append(node_index)
                continue
            labels[graph.node(node_index)] = _as_taxon(value)

        if misplaced:
            raise TaxaNotLeavesError(sorted(misplaced))

        return cls._new_unchecked(graph, labels)

    @classmethod
    def from_dto(cls, dto : PhylogeneticNetworkDTO) -> PhylogeneticNetwork:
        """
        Build the graph and then the network from one interchange value.

        Args:
            dto (PhylogeneticNetworkDTO): graph interchange value and taxa
        Raises:
            InvalidGraphError: if the graph itself is invalid
            NetworkError: any error from from_graph_and_taxa
        Returns:
            PhylogeneticNetwork: the network
        """
        try:
            graph = DirectedGraph.from_dto(dto.graph)
        except GraphError as err:
            raise InvalidGraphError(err) from err
        return cls.from_graph_and_taxa(graph, dto.taxa)

    @classmethod
    def _new_unchecked(cls,
                       graph : DirectedGraph,
                       taxa : dict[Node, Taxon]) -> PhylogeneticNetwork:
        """
        No validation. The caller guarantees the graph is acyclic, rooted
        and binary and that the taxa only label leaves.
        """
        network = object.__new__(cls)
        network._id = next_network_id()
        network._graph = graph
        network._taxa = MappingProxyType(dict(taxa))
        network._hash = hash((hash(graph),
                              tuple(sorted((node.id, taxon.value)
                                           for node, taxon in taxa.items()))))
        return network

    #### ACCESSORS ####

    @property
    def id(self) -> int:
        return self._id

    @property
    def graph(self) -> DirectedGraph:
        return self._graph

    @property
    def taxa(self) -> Mapping[Node, Taxon]:
        """
        Returns:
            Mapping[Node, Taxon]: a read only view of the leaf labels
        """
        return self._taxa

    @property
    def root(self) -> Node:
        # Validation guarantees the graph is rooted.
        return self._graph.root

    @property
    def leaves(self) -> frozenset[Node]:
        return self._graph.leaves

    def taxon(self, node : Node) -> Taxon | None:
        """
        Args:
            node (Node): a node of this network
        Returns:
            Taxon | None: its label, or None if it is unlabeled
        """
        return self._taxa.get(node)

    def taxa_values(self) -> frozenset[Taxon]:
        return frozenset(self._taxa.values())

    def successors(self, node : Node) -> tuple[Node, ...]:
        return self._graph.successors(node)

    def predecessors(self, node : Node) -> tuple[Node, ...]:
        return self._graph.predecessors(node)

    def number_of_nodes(self) -> int:
        return self._graph.number_of_nodes()

    def nodes(self) -> tuple[Node, ...]:
        return self._graph.nodes()

    #### NODE ROLES ####

    def is_leaf(self, node : Node) -> bool:
        return self._graph.out_degree(node) == 0

    def is_tree_node(self, node : Node) -> bool:
        """
        A tree node is any non leaf with at most one parent, the root
        included.
        """
        return not self.is_leaf(node) and self._graph.in_degree(node) <= 1

    def is_reticulation_node(self, node : Node) -> bool:
        return self._graph.in_degree(node) == 2 \
            and self._graph.out_degree(node) == 1

    def is_cross_node(self, node : Node) -> bool:
        return self._graph.in_degree(node) == 2 \
            and self._graph.out_degree(node) == 2

    def all_leaves_are_labeled(self) -> bool:
        """
        Returns:
            bool: True if every leaf carries a taxon
        """
        return all(leaf in self._taxa for leaf in self._graph.leaves)

    #### CONVERSION ####

    def to_dto(self) -> PhylogeneticNetworkDTO:
        graph_dto : DirectedGraphDTO = self._graph.to_dto()
        return PhylogeneticNetworkDTO(graph_dto,
                                      {node.id : taxon.value
                                       for node, taxon in self._taxa.items()})

    #### EQUALITY ####

    def __eq__(self, other : object) -> bool:
        if not isinstance(other, PhylogeneticNetwork):
            return NotImplemented
        if self._id == other._id:
            return True
        return (self._hash == other._hash
                and self._graph == other._graph
                and dict(self._taxa) == dict(other._taxa))

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"PhylogeneticNetwork(id={self._id}, \
number_of_nodes={self.number_of_nodes()}, taxa={len(self._taxa)})"
