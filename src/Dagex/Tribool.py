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
from enum import Enum

class Tribool(Enum):
    """
    Three valued (Kleene) logic. With FALSE < UNKNOWN < TRUE, 'and' is the
    minimum, 'or' is the maximum and negation mirrors the order.

    Truth value testing is refused, since UNKNOWN has no boolean meaning.
    Use is_certain or is_possible instead.
    """

    FALSE = 0
    UNKNOWN = 1
    TRUE = 2

    @staticmethod
    def from_bool(value : bool) -> Tribool:
        return Tribool.TRUE if value else Tribool.FALSE

    def and_(self, other : Tribool) -> Tribool:
        return self if self.value <= other.value else other

    def or_(self, other : Tribool) -> Tribool:
        return self if self.value >= other.value else other

    def neg(self) -> Tribool:
        return Tribool(2 - self.value)

    def is_certain(self) -> bool:
        """
        Returns:
            bool: True only for TRUE
        """
        return self is Tribool.TRUE

    def is_possible(self) -> bool:
        """
        Returns:
            bool: True for TRUE and UNKNOWN
        """
        return self is not Tribool.FALSE

    def __and__(self, other : Tribool) -> Tribool:
        if not isinstance(other, Tribool):
            return NotImplemented
        return self.and_(other)

    def __or__(self, other : Tribool) -> Tribool:
        if not isinstance(other, Tribool):
            return NotImplemented
        return self.or_(other)

    def __invert__(self) -> Tribool:
        return self.neg()

    def __bool__(self) -> bool:
        raise TypeError("A Tribool has no truth value, use is_certain() or \
is_possible()")
