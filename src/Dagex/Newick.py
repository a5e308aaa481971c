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

Reads extended Newick strings into phylogenetic networks. A label of the
form 'name#tag' marks a reticulation: every occurrence of the same tag is
the same node.

Docs   - [x]
Tests  - [x]
Design - [x]
"""

from __future__ import annotations
from io import StringIO
from typing import Any
from warnings import warn

from Bio import Phylo
from Bio.Phylo.NewickIO import NewickError

from .DTO import DirectedGraphDTO, PhylogeneticNetworkDTO
from .Network import NetworkError, PhylogeneticNetwork

#####################
#### Error Class ####
#####################

class NewickParseError(Exception):
    """
    Error that is raised whenever a newick string contains issues that
    disallow a proper parse of a network.
    """
    def __init__(self, message : str = "Something went wrong parsing a \
newick string") -> None:
        self.message = message
        super().__init__(self.message)

##########################
#### HELPER FUNCTIONS ####
##########################

def _split_label(label : str | None) -> tuple[str, str | None]:
    """
    Split 'name#tag' into its name and tag. Labels without '#' have no tag.

    Args:
        label (str | None): a biopython clade name
    Returns:
        tuple[str, str | None]: (name, tag), name is "" when absent
    """
    if label is None:
        return "", None
    name, sep, tag = label.partition("#")
    if not sep:
        return label.strip(), None
    return name.strip(), tag.strip()

def _read_tree(text : str) -> Any:
    if not text.strip():
        raise NewickParseError("Empty newick string")
    try:
        return Phylo.read(StringIO(text.strip()), "newick")
    except (NewickError, ValueError) as err:
        raise NewickParseError(f"Malformed newick string: {err}") from err

#####################
#### NEWICK READ ####
#####################

def parse_newick_dto(text : str) -> PhylogeneticNetworkDTO:
    """
    Translate a newick string into a network interchange value. Nodes are
    numbered in pre order, so the root is node 0. Names on nodes that end
    up with children are dropped (with a warning), since taxa label leaves.

    Args:
        text (str): one newick network, ie "((A,(D)B#1),(B#1,C));"
    Raises:
        NewickParseError: if the string can not be tokenized, or if two
                          occurrences of a reticulation tag carry
                          different names
    Returns:
        PhylogeneticNetworkDTO: node count, arrows and leaf taxa
    """
    tree = _read_tree(text)

    tag_to_node : dict[str, int] = {}
    names : dict[int, str] = {}
    arrows : list[tuple[int, int]] = []
    node_count = 0

    stack : list[tuple[Any, int | None]] = [(tree.root, None)]
    while stack:
        clade, parent = stack.pop()
        name, tag = _split_label(clade.name)

        if tag is not None and tag in tag_to_node:
            node = tag_to_node[tag]
        else:
            node = node_count
            node_count += 1
            if tag is not None:
                tag_to_node[tag] = node

        if name:
            known = names.get(node)
            if known is not None and known != name:
                raise NewickParseError(f"Reticulation #{tag} is named both \
{known!r} and {name!r}")
            names[node] = name

        if parent is not None:
            arrows.append((parent, node))

        for child in reversed(clade.clades):
            stack.append((child, node))

    sources = {source for source, _ in arrows}
    taxa : dict[int, str] = {}
    for node, name in names.items():
        if node in sources:
            warn(f"Dropping label {name!r} from internal node {node}")
        else:
            taxa[node] = name

    return PhylogeneticNetworkDTO(DirectedGraphDTO(node_count, arrows), taxa)

def parse_newick(text : str) -> PhylogeneticNetwork:
    """
    Parse a newick string straight into a validated network.

    Args:
        text (str): one newick network
    Raises:
        NewickParseError: if the string is malformed or does not describe
                          a valid phylogenetic network
    Returns:
        PhylogeneticNetwork: the network
    """
    dto = parse_newick_dto(text)
    try:
        return PhylogeneticNetwork.from_dto(dto)
    except NetworkError as err:
        raise NewickParseError(f"Newick string is not a valid phylogenetic \
network: {err.message}") from err
