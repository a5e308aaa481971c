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

Longest root to leaf path, in arrows, of a rooted acyclic graph.

Docs   - [x]
Tests  - [x]
Design - [ ]
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .Algorithm import (Algorithm, AlgorithmFactory, AlgorithmFactoryBuilder,
                        AlgorithmInputError)
from .Graph import DirectedGraph

logger = logging.getLogger(__name__)

#########################
#### EXCEPTION CLASS ####
#########################

class DepthInputErrorReason(Enum):
    INPUT_NOT_ROOTED = "InputNotRooted"
    INPUT_NOT_ACYCLIC = "InputNotAcyclic"
    GRAPH_TOO_BIG = "GraphTooBig"

class DepthInputError(AlgorithmInputError):
    def __init__(self, reason : DepthInputErrorReason) -> None:
        self.reason = reason
        super().__init__(f"Can not compute depth: {reason.value}")

################
#### RESULT ####
################

@dataclass(frozen=True)
class DepthResult:
    max_depth : int

###################
#### ALGORITHM ####
###################

_NOT_COMPUTED = -1

class DepthAlgorithm(Algorithm[DepthResult]):

    def __init__(self, graph : DirectedGraph, logger : logging.Logger) \
        -> None:
        super().__init__(logger)
        self.graph : DirectedGraph = graph

    def run(self) -> DepthResult:
        """
        Post order scan with an explicit stack. depth[v] is the longest
        path from v down to a leaf; the answer is depth[root].

        Returns:
            DepthResult: the depth of the graph
        """
        graph = self.graph
        depth = np.full(graph.number_of_nodes(), _NOT_COMPUTED, dtype=np.int32)
        root = graph.root

        self.logger.debug("Computing depth of a graph with %d nodes",
                          graph.number_of_nodes())

        stack = [root.id]
        while stack:
            node = stack[-1]
            if depth[node] != _NOT_COMPUTED:
                stack.pop()
                continue

            children = graph.successors(node)
            pending = [c.id for c in children
                       if depth[c.id] == _NOT_COMPUTED]
            if pending:
                stack.extend(pending)
                continue

            if children:
                depth[node] = 1 + max(int(depth[c.id]) for c in children)
            else:
                depth[node] = 0
            stack.pop()

        result = DepthResult(int(depth[root.id]))
        self.logger.info("Graph depth is %d", result.max_depth)
        return result

#############################
#### FACTORY AND BUILDER ####
#############################

class DepthAlgorithmFactory(AlgorithmFactory[DirectedGraph, DepthResult]):

    _MAX_SIZE : int = 1 << 30

    @staticmethod
    def max_size() -> int:
        return DepthAlgorithmFactory._MAX_SIZE

    def create(self, input : DirectedGraph) -> DepthAlgorithm:
        """
        Args:
            input (DirectedGraph): the graph to measure
        Raises:
            DepthInputError: if the graph is not rooted, not acyclic, or
                             has more than max_size() nodes
        Returns:
            DepthAlgorithm: the algorithm, ready to run
        """
        properties = input.basic_properties
        if not properties.rooted:
            raise DepthInputError(DepthInputErrorReason.INPUT_NOT_ROOTED)
        if not properties.acyclic:
            raise DepthInputError(DepthInputErrorReason.INPUT_NOT_ACYCLIC)
        if input.number_of_nodes() > self._MAX_SIZE:
            raise DepthInputError(DepthInputErrorReason.GRAPH_TOO_BIG)

        return DepthAlgorithm(input, self.algorithm_logger("DEPTH", input))


class DepthAlgorithmFactoryBuilder(
        AlgorithmFactoryBuilder[DirectedGraph, DepthResult]):

    def create(self) -> DepthAlgorithmFactory:
        return DepthAlgorithmFactory(self._logger_or(logger))
