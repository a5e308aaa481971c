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

Docs   - [x]
Tests  - [x]
Design - [ ]
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Mapping

from .GenesOverSpecies import GenesOverSpecies
from .Node import Node

class LeastCommonAncestorMapping:
    """
    Holds, for each gene network of a GenesOverSpecies, the species node
    that every gene node maps to. The mapping is computed elsewhere and is
    taken as given.
    """

    __slots__ = ("_genes_over_species", "_mapping")

    def __init__(self, *args, **kwargs) -> None:
        raise TypeError("LeastCommonAncestorMapping instances are built with \
LeastCommonAncestorMapping.from_unchecked")

    @classmethod
    def from_unchecked(cls,
                       genes_over_species : GenesOverSpecies,
                       mapping : Mapping[int, Mapping[Node, Node]]) \
                           -> LeastCommonAncestorMapping:
        """
        Nothing is validated. The caller guarantees that every key of
        'mapping' is a gene network id of 'genes_over_species' and that the
        node mappings point from gene nodes to species nodes.

        Args:
            genes_over_species (GenesOverSpecies): the pairing
            mapping (Mapping[int, Mapping[Node, Node]]): gene network id ->
                                                         gene node ->
                                                         species node
        Returns:
            LeastCommonAncestorMapping: the holder
        """
        holder = object.__new__(cls)
        holder._genes_over_species = genes_over_species
        holder._mapping = {network_id : MappingProxyType(dict(nodes))
                           for network_id, nodes in mapping.items()}
        return holder

    @property
    def genes_over_species(self) -> GenesOverSpecies:
        return self._genes_over_species

    def get_mapping_for_network(self, network_id : int) \
        -> Mapping[Node, Node] | None:
        """
        Args:
            network_id (int): a gene network id
        Returns:
            Mapping[Node, Node] | None: the node mapping of that gene
                                        network, None if there is none
        """
        return self._mapping.get(network_id)
