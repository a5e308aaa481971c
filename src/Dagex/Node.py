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
from functools import total_ordering

##############
#### NODE ####
##############

@total_ordering
class Node:
    """
    An opaque, zero based index into the node space of a DirectedGraph.
    Nodes carry no data of their own and are freely copied; two Nodes are
    equal when their indices are equal.
    """

    __slots__ = ("_id",)

    def __init__(self, id : int) -> None:
        """
        Wrap a node index.

        Args:
            id (int): A non-negative index.
        Raises:
            ValueError: If the index is negative.
        """
        if id < 0:
            raise ValueError(f"Node index must be non-negative, got {id}")
        self._id : int = int(id)

    @property
    def id(self) -> int:
        """
        Returns:
            int: The index of this node.
        """
        return self._id

    def __index__(self) -> int:
        return self._id

    def __eq__(self, other : object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._id == other._id

    def __lt__(self, other : Node) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._id < other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Node({self._id})"
