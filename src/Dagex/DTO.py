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

Plain interchange values. These carry no behavior and are how graphs and
networks cross the boundary to parsers, codecs and other collaborators.

Docs   - [x]
Tests  - [x]
Design - [x]
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Mapping

@dataclass(frozen=True)
class ArrowDTO:
    """
    An ordered pair of (possibly invalid) node indices.
    """
    source : int
    target : int

    def as_tuple(self) -> tuple[int, int]:
        return (self.source, self.target)


@dataclass(frozen=True)
class DirectedGraphDTO:
    """
    A node count and a list of arrows. Nothing is validated here, that is
    the job of DirectedGraph.from_dto.
    """
    number_of_nodes : int
    arrows : tuple[ArrowDTO, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "arrows", _as_arrows(self.arrows))


@dataclass(frozen=True)
class PhylogeneticNetworkDTO:
    """
    A graph interchange value plus a node index -> taxon text mapping.
    """
    graph : DirectedGraphDTO
    taxa : Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "taxa", dict(self.taxa))

    def __hash__(self) -> int:
        return hash((self.graph, tuple(sorted(self.taxa.items()))))


def _as_arrows(arrows : Iterable[ArrowDTO | tuple[int, int]]) \
    -> tuple[ArrowDTO, ...]:
    """
    Accept ArrowDTO objects or plain (source, target) pairs.
    """
    converted = []
    for arrow in arrows:
        if isinstance(arrow, ArrowDTO):
            converted.append(arrow)
        else:
            source, target = arrow
            converted.append(ArrowDTO(source, target))
    return tuple(converted)
