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

Shared shape of the algorithms in this package. A factory validates an
input and creates an algorithm; running the algorithm produces the output.

Docs   - [x]
Tests  - [x]
Design - [x]
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

I = TypeVar("I")
O = TypeVar("O")

#########################
#### EXCEPTION CLASS ####
#########################

class AlgorithmInputError(Exception):
    """
    Raised by a factory when it is given input the algorithm can not run on.
    """
    def __init__(self, message : str = "Invalid algorithm input") -> None:
        self.message = message
        super().__init__(self.message)

######################
#### BASE CLASSES ####
######################

class Algorithm(ABC, Generic[O]):
    """
    A ready to run computation. Instances are made by an AlgorithmFactory.
    """

    def __init__(self, logger : logging.Logger) -> None:
        self.logger : logging.Logger = logger

    @abstractmethod
    def run(self) -> O:
        """
        Carry out the computation.

        Returns:
            O: the algorithm output
        """
        pass


class AlgorithmFactory(ABC, Generic[I, O]):
    """
    Validates input and creates algorithms over it.
    """

    def __init__(self, logger : logging.Logger) -> None:
        self.logger : logging.Logger = logger

    @abstractmethod
    def create(self, input : I) -> Algorithm[O]:
        pass

    def algorithm_logger(self, prefix : str, key : Any) -> logging.Logger:
        """
        A child of the factory logger, named after the input it serves.

        Args:
            prefix (str): short algorithm name, ie "EF"
            key (Any): hashable input
        Returns:
            logging.Logger: the child logger
        """
        return self.logger.getChild(f"{prefix}_{hash(key) & 0xFFFFFFFF:08x}")


class AlgorithmFactoryBuilder(ABC, Generic[I, O]):
    """
    Collects optional factory settings.
    """

    def __init__(self) -> None:
        self._logger : logging.Logger | None = None

    def set_logger(self, logger : logging.Logger) -> AlgorithmFactoryBuilder:
        self._logger = logger
        return self

    def _logger_or(self, default : logging.Logger) -> logging.Logger:
        return self._logger if self._logger is not None else default

    @abstractmethod
    def create(self) -> AlgorithmFactory[I, O]:
        pass
