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

Compact binary encoding of the interchange values.

Unsigned integers are written 7 bits at a time, least significant group
first. Each group is stored shifted left by one; the lowest bit is set only
on the final byte. Signed integers are zig-zag mapped first. Strings,
sequences and mappings are prefixed by their length, and mappings are
written in ascending key order so equal values encode identically.

Docs   - [x]
Tests  - [x]
Design - [x]
"""

from __future__ import annotations
from io import BytesIO
from typing import BinaryIO, Callable, Iterable, Mapping, TypeVar

from .DTO import ArrowDTO, DirectedGraphDTO, PhylogeneticNetworkDTO

T = TypeVar("T")

_MAX_UNSIGNED = (1 << 64) - 1
_MIN_SIGNED = -(1 << 63)
_MAX_SIGNED = (1 << 63) - 1
_MAX_VARINT_BYTES = 10

###########################
#### EXCEPTION CLASSES ####
###########################

class SerializationError(Exception):
    def __init__(self, message : str = "Could not serialize value") -> None:
        self.message = message
        super().__init__(self.message)

class DeserializationError(Exception):
    def __init__(self, message : str = "Could not deserialize value") \
        -> None:
        self.message = message
        super().__init__(self.message)

##########################
#### HELPER FUNCTIONS ####
##########################

def zigzag_encode(value : int) -> int:
    """
    0, -1, 1, -2, 2 ... -> 0, 1, 2, 3, 4 ...
    """
    return value << 1 if value >= 0 else ((-value) << 1) - 1

def zigzag_decode(value : int) -> int:
    return value >> 1 if not value & 1 else -((value + 1) >> 1)

####################
#### SERIALIZER ####
####################

class BinarySerializer:
    """
    Writes values to a binary stream. Every write returns the number of
    bytes it produced.
    """

    def __init__(self, stream : BinaryIO) -> None:
        self.stream : BinaryIO = stream

    def write_unsigned(self, value : int) -> int:
        """
        Args:
            value (int): an integer in [0, 2^64)
        Raises:
            SerializationError: if the value is out of range
        Returns:
            int: bytes written
        """
        if not 0 <= value <= _MAX_UNSIGNED:
            raise SerializationError(f"{value} does not fit an unsigned \
64 bit integer")

        encoded = bytearray()
        while True:
            group = value & 0x7F
            value >>= 7
            if value == 0:
                encoded.append((group << 1) | 1)
                break
            encoded.append(group << 1)

        self.stream.write(bytes(encoded))
        return len(encoded)

    def write_signed(self, value : int) -> int:
        if not _MIN_SIGNED <= value <= _MAX_SIGNED:
            raise SerializationError(f"{value} does not fit a signed 64 bit \
integer")
        return self.write_unsigned(zigzag_encode(value))

    def write_str(self, value : str) -> int:
        data = value.encode("utf-8")
        written = self.write_unsigned(len(data))
        self.stream.write(data)
        return written + len(data)

    def write_arrow(self, arrow : ArrowDTO) -> int:
        return self.write_signed(arrow.source) \
            + self.write_signed(arrow.target)

    def write_sequence(self,
                       items : Iterable[T],
                       write_item : Callable[[T], int]) -> int:
        items = list(items)
        written = self.write_unsigned(len(items))
        for item in items:
            written += write_item(item)
        return written

    def write_taxa(self, taxa : Mapping[int, str]) -> int:
        """
        Write an int -> str mapping in ascending key order.
        """
        written = self.write_unsigned(len(taxa))
        for key in sorted(taxa):
            written += self.write_signed(key)
            written += self.write_str(taxa[key])
        return written

    def write_graph_dto(self, dto : DirectedGraphDTO) -> int:
        """
        A graph is written exactly like a network without taxa.
        """
        return self.write_signed(dto.number_of_nodes) \
            + self.write_sequence(dto.arrows, self.write_arrow) \
            + self.write_taxa({})

    def write_network_dto(self, dto : PhylogeneticNetworkDTO) -> int:
        return self.write_signed(dto.graph.number_of_nodes) \
            + self.write_sequence(dto.graph.arrows, self.write_arrow) \
            + self.write_taxa(dto.taxa)

######################
#### DESERIALIZER ####
######################

class BinaryDeserializer:
    """
    Reads values written by BinarySerializer. The number of bytes consumed
    so far is kept in 'bytes_read'.
    """

    def __init__(self, stream : BinaryIO) -> None:
        self.stream : BinaryIO = stream
        self.bytes_read : int = 0

    def _read_exact(self, count : int) -> bytes:
        data = self.stream.read(count)
        if data is None or len(data) != count:
            raise DeserializationError(f"Unexpected end of stream, wanted \
{count} bytes")
        self.bytes_read += count
        return data

    def read_unsigned(self) -> int:
        """
        Raises:
            DeserializationError: at end of stream, or if the encoding runs
                                  past ten bytes
        Returns:
            int: the decoded integer
        """
        value = 0
        shift = 0
        for _ in range(_MAX_VARINT_BYTES):
            byte = self._read_exact(1)[0]
            value |= (byte >> 1) << shift
            if byte & 1:
                if value > _MAX_UNSIGNED:
                    raise DeserializationError("Varint overflows 64 bits")
                return value
            shift += 7
        raise DeserializationError(f"Varint longer than {_MAX_VARINT_BYTES} \
bytes")

    def read_signed(self) -> int:
        return zigzag_decode(self.read_unsigned())

    def read_str(self) -> str:
        length = self.read_unsigned()
        data = self._read_exact(length)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as err:
            raise DeserializationError(f"Invalid utf-8 string: {err}") \
                from err

    def read_arrow(self) -> ArrowDTO:
        source = self.read_signed()
        target = self.read_signed()
        return ArrowDTO(source, target)

    def read_sequence(self, read_item : Callable[[], T]) -> list[T]:
        length = self.read_unsigned()
        return [read_item() for _ in range(length)]

    def read_taxa(self) -> dict[int, str]:
        length = self.read_unsigned()
        taxa : dict[int, str] = {}
        for _ in range(length):
            key = self.read_signed()
            taxa[key] = self.read_str()
        return taxa

    def read_network_dto(self) -> PhylogeneticNetworkDTO:
        number_of_nodes = self.read_signed()
        arrows = self.read_sequence(self.read_arrow)
        taxa = self.read_taxa()
        return PhylogeneticNetworkDTO(DirectedGraphDTO(number_of_nodes,
                                                       arrows), taxa)

    def read_graph_dto(self) -> DirectedGraphDTO:
        """
        Reads a graph payload. Any taxa present are discarded.
        """
        return self.read_network_dto().graph

###############################
#### BYTES LEVEL SHORTCUTS ####
###############################

def graph_dto_to_bytes(dto : DirectedGraphDTO) -> bytes:
    buffer = BytesIO()
    BinarySerializer(buffer).write_graph_dto(dto)
    return buffer.getvalue()

def graph_dto_from_bytes(data : bytes) -> DirectedGraphDTO:
    return BinaryDeserializer(BytesIO(data)).read_graph_dto()

def network_dto_to_bytes(dto : PhylogeneticNetworkDTO) -> bytes:
    buffer = BytesIO()
    BinarySerializer(buffer).write_network_dto(dto)
    return buffer.getvalue()

def network_dto_from_bytes(data : bytes) -> PhylogeneticNetworkDTO:
    return BinaryDeserializer(BytesIO(data)).read_network_dto()
