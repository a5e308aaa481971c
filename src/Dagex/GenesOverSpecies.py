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
Design - [x]
"""

from __future__ import annotations
from typing import Sequence

from .Network import PhylogeneticNetwork
from .Taxon import Taxon

#########################
#### EXCEPTION CLASS ####
#########################

class GenesOverSpeciesError(Exception):
    def __init__(self, message : str = "Genes Over Species Module Error") \
        -> None:
        super().__init__(message)
        self.message = message

class EmptyGeneNetworksError(GenesOverSpeciesError):
    def __init__(self) -> None:
        super().__init__("At least one gene network is required")

class IncorrectTaxaError(GenesOverSpeciesError):
    """
    Raised when a gene network uses a taxon the species network lacks.
    """
    def __init__(self, network_id : int, unknown : set[Taxon]) -> None:
        self.network_id = network_id
        self.unknown = unknown
        super().__init__(f"Gene network {network_id} has taxa missing from \
the species network: {sorted(t.value for t in unknown)}")

class DuplicatedIdsError(GenesOverSpeciesError):
    def __init__(self, network_id : int) -> None:
        self.network_id = network_id
        super().__init__(f"Gene network id {network_id} is given more than \
once")

class SpeciesContainsTaxaDuplicatesError(GenesOverSpeciesError):
    """
    Raised when two species leaves carry the same taxon.
    """
    def __init__(self, taxon : Taxon) -> None:
        self.taxon = taxon
        super().__init__(f"Taxon {taxon.value!r} labels more than one species \
leaf")

############################
#### GENES OVER SPECIES ####
############################

class GenesOverSpecies:
    """
    One species network together with the gene networks that evolved
    inside it. Every gene taxon is also a species taxon, and no two
    species leaves share a taxon.
    """

    __slots__ = ("_gene_networks", "_id_to_position", "_species_network")

    def __init__(self, *args, **kwargs) -> None:
        raise TypeError("GenesOverSpecies instances are built with \
GenesOverSpecies.new or GenesOverSpecies.new_single_gene")

    @classmethod
    def new(cls,
            gene_networks : Sequence[PhylogeneticNetwork],
            species_network : PhylogeneticNetwork) -> GenesOverSpecies:
        """
        Validate and pair gene networks with a species network.

        Args:
            gene_networks (Sequence[PhylogeneticNetwork]): non empty list
            species_network (PhylogeneticNetwork): the species network
        Raises:
            EmptyGeneNetworksError: if gene_networks is empty
            SpeciesContainsTaxaDuplicatesError: if two species leaves share
                                                a taxon
            IncorrectTaxaError: if a gene network has a taxon that the
                                species network does not
            DuplicatedIdsError: if two gene networks share an id
        Returns:
            GenesOverSpecies: the pairing
        """
        if len(gene_networks) == 0:
            raise EmptyGeneNetworksError()

        species_taxa : set[Taxon] = set()
        for taxon in species_network.taxa.values():
            if taxon in species_taxa:
                raise SpeciesContainsTaxaDuplicatesError(taxon)
            species_taxa.add(taxon)

        id_to_position : dict[int, int] = {}
        for position, gene in enumerate(gene_networks):
            unknown = gene.taxa_values() - species_taxa
            if unknown:
                raise IncorrectTaxaError(gene.id, set(unknown))
            if gene.id in id_to_position:
                raise DuplicatedIdsError(gene.id)
            id_to_position[gene.id] = position

        return cls._new_unchecked(gene_networks, species_network,
                                  id_to_position)

    @classmethod
    def new_single_gene(cls,
                        gene_network : PhylogeneticNetwork,
                        species_network : PhylogeneticNetwork) \
                            -> GenesOverSpecies:
        return cls.new([gene_network], species_network)

    @classmethod
    def _new_unchecked(cls,
                       gene_networks : Sequence[PhylogeneticNetwork],
                       species_network : PhylogeneticNetwork,
                       id_to_position : dict[int, int] | None = None) \
                           -> GenesOverSpecies:
        pairing = object.__new__(cls)
        pairing._gene_networks = tuple(gene_networks)
        if id_to_position is None:
            id_to_position = {gene.id : position for position, gene
                              in enumerate(pairing._gene_networks)}
        pairing._id_to_position = id_to_position
        pairing._species_network = species_network
        return pairing

    @property
    def gene_networks(self) -> tuple[PhylogeneticNetwork, ...]:
        return self._gene_networks

    @property
    def species_network(self) -> PhylogeneticNetwork:
        return self._species_network

    def get_gene_network_by_id(self, network_id : int) \
        -> PhylogeneticNetwork | None:
        """
        Args:
            network_id (int): the id of a gene network
        Returns:
            PhylogeneticNetwork | None: that gene network, or None if no
                                        gene network has the id
        """
        position = self._id_to_position.get(network_id)
        if position is None:
            return None
        return self._gene_networks[position]

    def __eq__(self, other : object) -> bool:
        if not isinstance(other, GenesOverSpecies):
            return NotImplemented
        return self._species_network == other._species_network \
            and self._gene_networks == other._gene_networks

    def __hash__(self) -> int:
        return hash((self._species_network, self._gene_networks))

    def __repr__(self) -> str:
        return f"GenesOverSpecies(species={self._species_network.id}, \
genes={[g.id for g in self._gene_networks]})"
