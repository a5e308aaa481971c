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
import sys

class Taxon:
    """
    An immutable, interned text label naming a species or gene identity.
    Equality and hashing are by value.
    """

    __slots__ = ("_value",)

    def __init__(self, value : str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Taxon value must be a str, got \
{type(value).__name__}")
        self._value : str = sys.intern(value)

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other : object) -> bool:
        if not isinstance(other, Taxon):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other : Taxon) -> bool:
        return self._value < other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Taxon({self._value!r})"
