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

Process wide id minting for graphs and networks.

Docs   - [x]
Tests  - [x]
Design - [x]
"""

import itertools
import threading

class IdGenerator:
    """
    A monotonically increasing counter that is safe to call from several
    threads at once. Only uniqueness is guaranteed.
    """

    def __init__(self, start : int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        """
        Returns:
            int: A fresh id, never returned before by this generator.
        """
        with self._lock:
            return next(self._counter)


_GRAPH_IDS = IdGenerator()
_NETWORK_IDS = IdGenerator()

def next_graph_id() -> int:
    return _GRAPH_IDS.next_id()

def next_network_id() -> int:
    return _NETWORK_IDS.next_id()
