#! /usr/bin/env python
# -*- coding: utf-8 -*-

##############################################################################
##  -- Dagex --
##  Library for Directed Graphs, Phylogenetic Networks and Episode Feasibility
##
##  Copyright 2025 The Dagex Developers.
##  All rights reserved.
##############################################################################

"""
Dagex - Directed Graphs and Episode Feasibility

Immutable directed graphs, phylogenetic networks built on them, and the
three valued episode feasibility algorithm over gene and species networks.
"""

# Core data structures
from .Node import Node
from .DTO import ArrowDTO, DirectedGraphDTO, PhylogeneticNetworkDTO
from .Graph import (
    DirectedGraph,
    DirectedGraphBasicProperties,
    GraphError,
    EmptyGraphError,
    TooBigGraphError,
    MultipleParallelArrowsError,
    ArrowOutsideOfNodesRangeError,
)
from .Taxon import Taxon
from .Network import (
    PhylogeneticNetwork,
    NetworkError,
    NotAcyclicError,
    NotRootedError,
    NotBinaryError,
    TaxaNotLeavesError,
    InvalidGraphError,
)
from .GenesOverSpecies import (
    GenesOverSpecies,
    GenesOverSpeciesError,
    EmptyGeneNetworksError,
    IncorrectTaxaError,
    DuplicatedIdsError,
    SpeciesContainsTaxaDuplicatesError,
)
from .LCAMapping import LeastCommonAncestorMapping
from .Tribool import Tribool

# Algorithms
from .Algorithm import AlgorithmInputError
from .EpisodeFeasibility import (
    FormulaData,
    EpisodeFeasibilityInput,
    EpisodeFeasibilityOutput,
    EpisodeFeasibilityAlgorithm,
    EpisodeFeasibilityAlgorithmFactory,
    EpisodeFeasibilityAlgorithmFactoryBuilder,
    EpisodeFeasibilityInputError,
)
from .Depth import (
    DepthAlgorithm,
    DepthAlgorithmFactory,
    DepthAlgorithmFactoryBuilder,
    DepthInputError,
    DepthResult,
)

# Parsing and I/O
from .Newick import parse_newick, parse_newick_dto, NewickParseError
from .Serialization import (
    BinarySerializer,
    BinaryDeserializer,
    SerializationError,
    DeserializationError,
)

__version__ = "1.0.0"
