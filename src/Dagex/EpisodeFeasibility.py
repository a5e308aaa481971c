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

Episode feasibility: given a species network, a set of candidate episode
nodes on it and gene networks that evolved inside it, decide for every gene
network whether its evolution can be confined to those episodes.

The decision is made by four mutually recursive formulas over pairs
(gene node, species node), evaluated in three valued logic:

    sigma      : the gene node aligns exactly with the species node
    epsilon    : sigma OR delta
    delta      : an episode at the species node explains the gene node
    delta_star : one gene child lies at the species node, the other below
    delta_down : the gene node fits at the species node or anywhere below

Docs   - [x]
Tests  - [x]
Design - [x]
"""

from __future__ import annotations
import logging
from typing import Callable, Generator, Iterable

from .Algorithm import (Algorithm, AlgorithmFactory, AlgorithmFactoryBuilder,
                        AlgorithmInputError)
from .GenesOverSpecies import GenesOverSpecies
from .Network import PhylogeneticNetwork
from .Node import Node
from .Tribool import Tribool

logger = logging.getLogger(__name__)

#########################
#### EXCEPTION CLASS ####
#########################

class EpisodeFeasibilityInputError(AlgorithmInputError):
    def __init__(self, message : str = "Invalid episode feasibility input") \
        -> None:
        super().__init__(message)

##################
#### FORMULAS ####
##################

_SIGMA = "sigma"
_EPSILON = "epsilon"
_DELTA = "delta"
_DELTA_STAR = "delta_star"
_DELTA_DOWN = "delta_down"

# A formula yields (formula name, gene node, species node) requests and
# receives each requested value back, returning its own value at the end.
_Request = tuple[str, Node, Node]
_Formula = Generator[_Request, Tribool, Tribool]


class FormulaData:
    """
    The formulas for one gene network against one species network.

    Each formula is written as a generator that hands the sub evaluations it
    needs to a single driver loop instead of calling them directly, so deep
    networks never exhaust the Python call stack. Values are optionally
    memoized per (formula, gene node, species node); memoization changes
    running time only, never results.
    """

    def __init__(self,
                 gene_network : PhylogeneticNetwork,
                 species_network : PhylogeneticNetwork,
                 episode_candidates : Iterable[Node],
                 memoize : bool = True) -> None:
        """
        Args:
            gene_network (PhylogeneticNetwork): the gene network
            species_network (PhylogeneticNetwork): the species network
            episode_candidates (Iterable[Node]): species nodes where an
                                                 episode may sit
            memoize (bool, optional): cache formula values. Defaults to
                                      True.
        """
        self.genes : PhylogeneticNetwork = gene_network
        self.species : PhylogeneticNetwork = species_network
        self.episode_candidates : frozenset[Node] = \
            frozenset(episode_candidates)
        self._memo : dict[_Request, Tribool] | None = {} if memoize else None
        self._formulas : dict[str, Callable[[Node, Node], _Formula]] = {
            _SIGMA : self._sigma,
            _EPSILON : self._epsilon,
            _DELTA : self._delta,
            _DELTA_STAR : self._delta_star,
            _DELTA_DOWN : self._delta_down,
        }

    #### PUBLIC ENTRY POINTS ####

    def sigma(self, gene_node : Node, species_node : Node) -> Tribool:
        return self._evaluate((_SIGMA, gene_node, species_node))

    def epsilon(self, gene_node : Node, species_node : Node) -> Tribool:
        return self._evaluate((_EPSILON, gene_node, species_node))

    def delta(self, gene_node : Node, species_node : Node) -> Tribool:
        return self._evaluate((_DELTA, gene_node, species_node))

    def delta_star(self, gene_node : Node, species_node : Node) -> Tribool:
        return self._evaluate((_DELTA_STAR, gene_node, species_node))

    def delta_down(self, gene_node : Node, species_node : Node) -> Tribool:
        return self._evaluate((_DELTA_DOWN, gene_node, species_node))

    #### DRIVER ####

    def _evaluate(self, request : _Request) -> Tribool:
        """
        Run a formula and everything it asks for on an explicit stack.

        Args:
            request (_Request): (formula name, gene node, species node)
        Returns:
            Tribool: the value of the formula
        """
        memo = self._memo
        if memo is not None and request in memo:
            return memo[request]

        frames : list[tuple[_Request, _Formula]] = \
            [(request, self._start(request))]
        value : Tribool | None = None

        while frames:
            current, frame = frames[-1]
            try:
                wanted = frame.send(value)
            except StopIteration as done:
                frames.pop()
                value = done.value
                if memo is not None:
                    memo[current] = value
                continue

            if memo is not None and wanted in memo:
                value = memo[wanted]
            else:
                frames.append((wanted, self._start(wanted)))
                value = None

        return value

    def _start(self, request : _Request) -> _Formula:
        name, gene_node, species_node = request
        return self._formulas[name](gene_node, species_node)

    #### FORMULAS ####

    def _sigma(self, g : Node, s : Node) -> _Formula:
        genes, species = self.genes, self.species
        g_leaf, s_leaf = genes.is_leaf(g), species.is_leaf(s)

        if not g_leaf and not s_leaf:
            g_children = genes.successors(g)
            s_children = species.successors(s)
            # Unary or reticulation nodes can not align two children.
            if len(g_children) != 2 or len(s_children) != 2:
                return Tribool.FALSE
            left_g, right_g = g_children
            left_s, right_s = s_children

            straight = (yield (_DELTA_DOWN, left_g, left_s)) \
                & (yield (_DELTA_DOWN, right_g, right_s))
            crossed = (yield (_DELTA_DOWN, left_g, right_s)) \
                & (yield (_DELTA_DOWN, right_g, left_s))
            return Tribool.from_bool((straight | crossed).is_certain())

        if g_leaf and s_leaf:
            gene_taxon = genes.taxon(g)
            if gene_taxon is None:
                return Tribool.TRUE
            return Tribool.from_bool(gene_taxon == species.taxon(s))

        return Tribool.FALSE

    def _epsilon(self, g : Node, s : Node) -> _Formula:
        sigma = yield (_SIGMA, g, s)
        if sigma is Tribool.TRUE:
            return Tribool.TRUE
        delta = yield (_DELTA, g, s)
        return sigma | delta

    def _delta(self, g : Node, s : Node) -> _Formula:
        if not self.genes.is_tree_node(g):
            return Tribool.FALSE
        result = yield (_DELTA_STAR, g, s)
        if s in self.episode_candidates:
            return result
        return result & Tribool.UNKNOWN

    def _delta_star(self, g : Node, s : Node) -> _Formula:
        children = self.genes.successors(g)
        if len(children) != 2:
            raise AssertionError(f"Gene tree node {g.id} has \
{len(children)} children, expected 2")
        left_g, right_g = children

        left = (yield (_EPSILON, left_g, s)) \
            & (yield (_DELTA_DOWN, right_g, s))
        if left is Tribool.TRUE:
            return Tribool.TRUE

        right = (yield (_EPSILON, right_g, s)) \
            & (yield (_DELTA_DOWN, left_g, s))
        return left | right

    def _delta_down(self, g : Node, s : Node) -> _Formula:
        result = yield (_EPSILON, g, s)
        if self.species.is_leaf(s):
            return result

        is_candidate = s in self.episode_candidates
        for successor in self.species.successors(s):
            below = yield (_DELTA_DOWN, g, successor)
            if is_candidate:
                # Past an episode boundary a match is at best unknown.
                below = Tribool.UNKNOWN if below.is_possible() \
                    else Tribool.FALSE
            result = result | below

        return result

##########################
#### INPUT AND OUTPUT ####
##########################

class EpisodeFeasibilityInput:
    """
    A GenesOverSpecies and the episode candidates on its species network.
    """

    __slots__ = ("_genes_over_species", "_episode_candidates")

    def __init__(self,
                 genes_over_species : GenesOverSpecies,
                 episode_candidates : Iterable[Node]) -> None:
        self._genes_over_species = genes_over_species
        self._episode_candidates : frozenset[Node] = \
            frozenset(episode_candidates)

    @property
    def genes_over_species(self) -> GenesOverSpecies:
        return self._genes_over_species

    @property
    def episode_candidates(self) -> frozenset[Node]:
        return self._episode_candidates

    def __eq__(self, other : object) -> bool:
        if not isinstance(other, EpisodeFeasibilityInput):
            return NotImplemented
        return self._genes_over_species == other._genes_over_species \
            and self._episode_candidates == other._episode_candidates

    def __hash__(self) -> int:
        return hash((self._genes_over_species, self._episode_candidates))


class EpisodeFeasibilityOutput:
    """
    Per gene network id, whether the gene network is certainly feasible.
    """

    __slots__ = ("_result",)

    def __init__(self, result : dict[int, bool]) -> None:
        self._result : dict[int, bool] = dict(result)

    @property
    def result(self) -> dict[int, bool]:
        return dict(self._result)

    def __getitem__(self, network_id : int) -> bool:
        return self._result[network_id]

    def __eq__(self, other : object) -> bool:
        if not isinstance(other, EpisodeFeasibilityOutput):
            return NotImplemented
        return self._result == other._result

    def __hash__(self) -> int:
        return hash(frozenset(self._result.items()))

    def __repr__(self) -> str:
        return f"EpisodeFeasibilityOutput({self._result})"

###################
#### ALGORITHM ####
###################

class EpisodeFeasibilityAlgorithm(Algorithm[EpisodeFeasibilityOutput]):
    """
    Evaluates delta_down(gene root, species root) for every gene network.
    Made by EpisodeFeasibilityAlgorithmFactory.create.
    """

    def __init__(self,
                 input : EpisodeFeasibilityInput,
                 logger : logging.Logger,
                 memoize : bool = True) -> None:
        super().__init__(logger)
        self.input : EpisodeFeasibilityInput = input
        self.memoize : bool = memoize

    def run(self) -> EpisodeFeasibilityOutput:
        """
        Returns:
            EpisodeFeasibilityOutput: True for a gene network exactly when
                                      delta_down at the two roots is TRUE
        """
        pairing = self.input.genes_over_species
        species = pairing.species_network
        candidates = self.input.episode_candidates

        self.logger.debug("Running episode feasibility on %d gene networks \
with %d episode candidates", len(pairing.gene_networks), len(candidates))

        result : dict[int, bool] = {}
        for gene in pairing.gene_networks:
            formulas = FormulaData(gene, species, candidates,
                                   memoize = self.memoize)
            verdict = formulas.delta_down(gene.root, species.root)
            result[gene.id] = verdict is Tribool.TRUE

        self.logger.info("Episode feasibility: %d of %d gene networks are \
feasible", sum(result.values()), len(result))
        return EpisodeFeasibilityOutput(result)

#############################
#### FACTORY AND BUILDER ####
#############################

class EpisodeFeasibilityAlgorithmFactory(
        AlgorithmFactory[EpisodeFeasibilityInput, EpisodeFeasibilityOutput]):

    def __init__(self, logger : logging.Logger, memoize : bool = True) \
        -> None:
        super().__init__(logger)
        self.memoize : bool = memoize

    def create(self, input : EpisodeFeasibilityInput) \
        -> EpisodeFeasibilityAlgorithm:
        """
        Validate the input and create an algorithm over it.

        Args:
            input (EpisodeFeasibilityInput): pairing and candidates
        Raises:
            EpisodeFeasibilityInputError: if a candidate is not a species
                                          node, or a gene tree node does
                                          not have exactly two children
        Returns:
            EpisodeFeasibilityAlgorithm: the algorithm, ready to run
        """
        pairing = input.genes_over_species
        species = pairing.species_network

        for candidate in input.episode_candidates:
            if not isinstance(candidate, Node):
                raise EpisodeFeasibilityInputError(f"Episode candidate \
{candidate!r} is not a Node")
            if candidate.id >= species.number_of_nodes():
                raise EpisodeFeasibilityInputError(f"Episode candidate \
{candidate.id} is not a node of the species network")

        for gene in pairing.gene_networks:
            for node in gene.nodes():
                if gene.is_tree_node(node) and len(gene.successors(node)) != 2:
                    raise EpisodeFeasibilityInputError(f"Node {node.id} of \
gene network {gene.id} is a tree node without exactly two children")

        return EpisodeFeasibilityAlgorithm(input,
                                           self.algorithm_logger("EF", input),
                                           memoize = self.memoize)


class EpisodeFeasibilityAlgorithmFactoryBuilder(
        AlgorithmFactoryBuilder[EpisodeFeasibilityInput,
                                EpisodeFeasibilityOutput]):

    def __init__(self) -> None:
        super().__init__()
        self._memoize : bool = True

    def set_memoize(self, memoize : bool) \
        -> EpisodeFeasibilityAlgorithmFactoryBuilder:
        self._memoize = memoize
        return self

    def create(self) -> EpisodeFeasibilityAlgorithmFactory:
        return EpisodeFeasibilityAlgorithmFactory(self._logger_or(logger),
                                                  memoize = self._memoize)
