import pytest
from typing import Mapping, Sequence, Tuple

from Dagex.DTO import DirectedGraphDTO, PhylogeneticNetworkDTO
from Dagex.GenesOverSpecies import (GenesOverSpecies, EmptyGeneNetworksError,
                                    IncorrectTaxaError, DuplicatedIdsError,
                                    SpeciesContainsTaxaDuplicatesError,
                                    GenesOverSpeciesError)
from Dagex.LCAMapping import LeastCommonAncestorMapping
from Dagex.Network import PhylogeneticNetwork
from Dagex.Node import Node
from Dagex.Taxon import Taxon


#################
#### HELPERS ####
#################

def _network(number_of_nodes: int,
             arrows: Sequence[Tuple[int, int]],
             taxa: Mapping[int, str]) -> PhylogeneticNetwork:
    dto = PhylogeneticNetworkDTO(DirectedGraphDTO(number_of_nodes, arrows),
                                 taxa)
    return PhylogeneticNetwork.from_dto(dto)


def _species() -> PhylogeneticNetwork:
    return _network(3, [(0, 1), (0, 2)], {1: "a", 2: "baz"})


############################
#### GENES OVER SPECIES ####
############################

def test_gene_over_species():
    species = _species()
    gene = _network(2, [(0, 1)], {1: "a"})
    pairing = GenesOverSpecies.new([gene], species)
    assert pairing.species_network is species
    assert pairing.gene_networks == (gene,)
    assert pairing.get_gene_network_by_id(gene.id) is gene


def test_single_gene_shortcut():
    species = _species()
    gene = _network(2, [(0, 1)], {1: "baz"})
    assert GenesOverSpecies.new_single_gene(gene, species) \
        == GenesOverSpecies.new([gene], species)


def test_unknown_id_lookup():
    gene = _network(2, [(0, 1)], {1: "a"})
    pairing = GenesOverSpecies.new([gene], _species())
    assert pairing.get_gene_network_by_id(gene.id + 1000) is None


def test_several_genes_are_indexed_by_id():
    species = _species()
    genes = [_network(2, [(0, 1)], {1: "a"}),
             _network(2, [(0, 1)], {1: "baz"}),
             _network(3, [(0, 1), (0, 2)], {1: "a", 2: "baz"})]
    pairing = GenesOverSpecies.new(genes, species)
    for gene in genes:
        assert pairing.get_gene_network_by_id(gene.id) is gene


def test_unlabeled_gene_leaves_are_fine():
    gene = _network(3, [(0, 1), (0, 2)], {})
    GenesOverSpecies.new([gene], _species())


def test_empty_gene_list():
    with pytest.raises(EmptyGeneNetworksError):
        GenesOverSpecies.new([], _species())


def test_incorrect_taxa():
    gene = _network(2, [(0, 1)], {1: "Test"})
    species = _network(2, [(0, 1)], {1: "Baz"})
    with pytest.raises(IncorrectTaxaError) as info:
        GenesOverSpecies.new([gene], species)
    assert info.value.network_id == gene.id
    assert info.value.unknown == {Taxon("Test")}


def test_duplicated_ids():
    gene = _network(2, [(0, 1)], {1: "a"})
    with pytest.raises(DuplicatedIdsError) as info:
        GenesOverSpecies.new([gene, gene], _species())
    assert info.value.network_id == gene.id


def test_species_with_duplicate_taxa():
    species = _network(3, [(0, 1), (0, 2)], {1: "Baz", 2: "Baz"})
    gene = _network(2, [(0, 1)], {1: "Baz"})
    with pytest.raises(SpeciesContainsTaxaDuplicatesError):
        GenesOverSpecies.new([gene], species)


def test_error_order():
    """
    Empty list first, species duplicates next, then per gene checks.
    """
    duplicated = _network(3, [(0, 1), (0, 2)], {1: "Baz", 2: "Baz"})
    with pytest.raises(EmptyGeneNetworksError):
        GenesOverSpecies.new([], duplicated)

    wrong = _network(2, [(0, 1)], {1: "Test"})
    with pytest.raises(SpeciesContainsTaxaDuplicatesError):
        GenesOverSpecies.new([wrong], duplicated)

    with pytest.raises(IncorrectTaxaError):
        GenesOverSpecies.new([wrong, wrong], _species())


def test_errors_share_a_base_class():
    with pytest.raises(GenesOverSpeciesError):
        GenesOverSpecies.new([], _species())


#####################
#### LCA MAPPING ####
#####################

def test_lca_mapping_holder():
    species = _species()
    gene = _network(3, [(0, 1), (0, 2)], {1: "a", 2: "baz"})
    pairing = GenesOverSpecies.new([gene], species)
    nodes = {Node(0): Node(0), Node(1): Node(1), Node(2): Node(2)}

    mapping = LeastCommonAncestorMapping.from_unchecked(pairing,
                                                        {gene.id: nodes})
    assert mapping.genes_over_species is pairing
    assert dict(mapping.get_mapping_for_network(gene.id)) == nodes
    assert mapping.get_mapping_for_network(gene.id + 1000) is None


def test_lca_mapping_is_a_copy():
    gene = _network(2, [(0, 1)], {1: "a"})
    pairing = GenesOverSpecies.new([gene], _species())
    nodes = {Node(0): Node(0)}
    mapping = LeastCommonAncestorMapping.from_unchecked(pairing,
                                                        {gene.id: nodes})
    nodes[Node(1)] = Node(1)
    assert Node(1) not in mapping.get_mapping_for_network(gene.id)
    with pytest.raises(TypeError):
        LeastCommonAncestorMapping()
