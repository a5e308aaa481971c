import logging
import pytest
from itertools import combinations
from typing import Iterable, Mapping, Sequence, Tuple

from Dagex.DTO import DirectedGraphDTO, PhylogeneticNetworkDTO
from Dagex.EpisodeFeasibility import (FormulaData, EpisodeFeasibilityInput,
                                      EpisodeFeasibilityOutput,
                                      EpisodeFeasibilityAlgorithmFactory,
                                      EpisodeFeasibilityAlgorithmFactoryBuilder,
                                      EpisodeFeasibilityInputError)
from Dagex.GenesOverSpecies import GenesOverSpecies
from Dagex.Network import PhylogeneticNetwork
from Dagex.Newick import parse_newick
from Dagex.Node import Node
from Dagex.Tribool import Tribool


#######################
#### TEST NETWORKS ####
#######################

def build_cherry(left: str, right: str) -> PhylogeneticNetwork:
    """
    (left, right): root 0, leaves 1 and 2.
    """
    return _network(3, [(0, 1), (0, 2)], {1: left, 2: right})


def build_left_cherry_species() -> PhylogeneticNetwork:
    """
    ((a, b), c): root 0, internal 1, leaves a=2, b=3, c=4.
    """
    return _network(5, [(0, 1), (0, 4), (1, 2), (1, 3)],
                    {2: "a", 3: "b", 4: "c"})


def build_right_cherry_species() -> PhylogeneticNetwork:
    """
    (a, (b, c)): root 0, leaf a=1, internal 2, leaves b=3, c=4.
    """
    return _network(5, [(0, 1), (0, 2), (2, 3), (2, 4)],
                    {1: "a", 3: "b", 4: "c"})


def build_caterpillar_species(depth: int) -> PhylogeneticNetwork:
    """
    Internal nodes 0 .. depth-1 form a chain; internal i also has leaf
    depth+i, and the last internal node has the extra leaf 2*depth.
    """
    arrows = []
    for i in range(depth):
        arrows.append((i, depth + i))
        arrows.append((i, i + 1 if i < depth - 1 else 2 * depth))
    taxa = {leaf: f"t{leaf}" for leaf in range(depth, 2 * depth + 1)}
    return _network(2 * depth + 1, arrows, taxa)


def build_reticulated_species() -> PhylogeneticNetwork:
    """
    ((a,(c)#H1),((#H1,b),d)): root 0, internal 1 and 5 and 6, leaves
    a=2, c=4, b=7, d=8. Node 3 is the reticulation, with parents 1 and 6
    and the single child 4.
    """
    return parse_newick("((a,(c)#H1),((#H1,b),d));")


#################
#### HELPERS ####
#################

def _network(number_of_nodes: int,
             arrows: Sequence[Tuple[int, int]],
             taxa: Mapping[int, str]) -> PhylogeneticNetwork:
    dto = PhylogeneticNetworkDTO(DirectedGraphDTO(number_of_nodes, arrows),
                                 taxa)
    return PhylogeneticNetwork.from_dto(dto)


def _feasible(genes: Sequence[PhylogeneticNetwork],
              species: PhylogeneticNetwork,
              candidates: Iterable[int],
              memoize: bool = True) -> EpisodeFeasibilityOutput:
    pairing = GenesOverSpecies.new(genes, species)
    factory = EpisodeFeasibilityAlgorithmFactoryBuilder() \
        .set_memoize(memoize).create()
    algorithm = factory.create(
        EpisodeFeasibilityInput(pairing, [Node(c) for c in candidates]))
    return algorithm.run()


#######################
#### TOP LEVEL RUN ####
#######################

@pytest.mark.parametrize("memoize", [True, False])
def test_matching_cherry_with_root_episode(memoize):
    gene = build_cherry("a", "b")
    species = build_cherry("a", "b")
    output = _feasible([gene], species, [0], memoize)
    assert output.result == {gene.id: True}


@pytest.mark.parametrize("memoize", [True, False])
def test_gene_cherry_inside_right_cherry(memoize):
    gene = build_cherry("a", "b")
    output = _feasible([gene], build_right_cherry_species(), [], memoize)
    assert output[gene.id] is True


@pytest.mark.parametrize("memoize", [True, False])
def test_gene_cherry_inside_left_cherry(memoize):
    gene = build_cherry("a", "b")
    output = _feasible([gene], build_left_cherry_species(), [], memoize)
    assert output[gene.id] is True


@pytest.mark.parametrize("memoize", [True, False])
def test_episode_above_the_match_makes_it_uncertain(memoize):
    """
    The gene cherry matches species node 1 exactly, but reaching it from
    the root crosses the episode candidate at the root.
    """
    gene = build_cherry("a", "b")
    output = _feasible([gene], build_left_cherry_species(), [0], memoize)
    assert output[gene.id] is False


@pytest.mark.parametrize("candidates, expected", [([1], True), ([], False)])
def test_duplication_needs_an_episode(candidates, expected):
    """
    Gene (a, a) over species (a, b): both gene leaves sit at species leaf
    a, which is only certain when an episode may sit there.
    """
    gene = build_cherry("a", "a")
    output = _feasible([gene], build_cherry("a", "b"), candidates)
    assert output[gene.id] is expected


def test_several_gene_networks():
    species = build_cherry("a", "b")
    matching = build_cherry("a", "b")
    duplicated = build_cherry("a", "a")
    output = _feasible([matching, duplicated], species, [0])
    assert output == EpisodeFeasibilityOutput({matching.id: True,
                                               duplicated.id: False})
    assert hash(output) == hash(EpisodeFeasibilityOutput(output.result))


def test_unlabeled_gene_leaves_match_anything():
    gene = _network(3, [(0, 1), (0, 2)], {})
    output = _feasible([gene], build_cherry("a", "b"), [0])
    assert output[gene.id] is True


def test_gene_trees_from_newick():
    species = parse_newick("((a,b),c);")
    gene = parse_newick("(a,b);")
    output = _feasible([gene], species, [])
    assert output[gene.id] is True


@pytest.mark.parametrize("memoize", [True, False])
def test_episodes_at_root_and_leaf_are_uncertain(memoize):
    """
    Episodes at the species root and at leaf a. The gene tree only fits
    below the root episode, so delta_down at the roots is UNKNOWN and the
    gene network is reported infeasible. Reading every successor result
    past an episode as at best UNKNOWN is what makes this False; the
    older reading of this case expected True.
    """
    gene = parse_newick("((, (b, ((,), (,)))), (d, (c, a)));")
    species = parse_newick("((a, c), (b, d));")
    candidates = {Node(0), Node(2)}
    assert species.taxon(Node(2)).value == "a"

    formulas = FormulaData(gene, species, candidates, memoize)
    assert formulas.delta_down(gene.root, species.root) is Tribool.UNKNOWN

    output = _feasible([gene], species, [0, 2], memoize)
    assert output[gene.id] is False


@pytest.mark.parametrize("candidates, expected", [([], True), ([3], False)])
def test_gene_leaf_below_reticulation(candidates, expected):
    """
    Leaf c is only reachable through the reticulation, so an episode
    there leaves the match uncertain on both paths.
    """
    gene = _network(1, [], {0: "c"})
    output = _feasible([gene], build_reticulated_species(), candidates)
    assert output[gene.id] is expected


def test_gene_cherry_over_reticulated_species():
    gene = build_cherry("a", "c")
    output = _feasible([gene], build_reticulated_species(), [])
    assert output[gene.id] is True


def test_deep_species_network():
    """
    A chain far deeper than the interpreter recursion limit.
    """
    depth = 3000
    species = build_caterpillar_species(depth)
    gene = _network(1, [], {0: f"t{2 * depth}"})
    output = _feasible([gene], species, [])
    assert output[gene.id] is True


##################
#### FORMULAS ####
##################

def test_delta_down_is_unknown_past_an_episode():
    formulas = FormulaData(build_cherry("a", "b"),
                           build_left_cherry_species(),
                           {Node(0)})
    assert formulas.delta_down(Node(0), Node(0)) is Tribool.UNKNOWN
    assert formulas.delta_down(Node(0), Node(1)) is Tribool.TRUE
    assert formulas.sigma(Node(0), Node(0)) is Tribool.FALSE
    assert formulas.sigma(Node(0), Node(1)) is Tribool.TRUE


@pytest.mark.parametrize("candidates, expected", [
    ({Node(1)}, Tribool.TRUE),
    (set(), Tribool.UNKNOWN),
])
def test_delta_is_weakened_outside_episodes(candidates, expected):
    formulas = FormulaData(build_cherry("a", "a"), build_cherry("a", "b"),
                           candidates)
    assert formulas.delta_star(Node(0), Node(1)) is Tribool.TRUE
    assert formulas.delta(Node(0), Node(1)) is expected


def test_sigma_on_leaves():
    gene = _network(3, [(0, 1), (0, 2)], {1: "a"})
    species = _network(4, [(0, 1), (0, 2), (2, 3)], {1: "a", 3: "b"})
    formulas = FormulaData(gene, species, set())
    assert formulas.sigma(Node(1), Node(1)) is Tribool.TRUE
    assert formulas.sigma(Node(1), Node(3)) is Tribool.FALSE
    # Unlabeled gene leaf
    assert formulas.sigma(Node(2), Node(3)) is Tribool.TRUE
    # Leaf against internal node
    assert formulas.sigma(Node(1), Node(0)) is Tribool.FALSE
    assert formulas.sigma(Node(0), Node(1)) is Tribool.FALSE
    # Species node 2 has a single child
    assert formulas.sigma(Node(0), Node(2)) is Tribool.FALSE


def test_delta_is_false_for_leaves():
    formulas = FormulaData(build_cherry("a", "b"), build_cherry("a", "b"),
                           {Node(0)})
    assert formulas.delta(Node(1), Node(0)) is Tribool.FALSE


def test_epsilon_short_circuits_on_sigma():
    formulas = FormulaData(build_cherry("a", "b"), build_cherry("a", "b"),
                           set())
    assert formulas.epsilon(Node(1), Node(1)) is Tribool.TRUE
    assert formulas.epsilon(Node(0), Node(0)) is Tribool.TRUE


def test_delta_star_requires_two_gene_children():
    gene = _network(2, [(0, 1)], {1: "a"})
    formulas = FormulaData(gene, build_cherry("a", "b"), set())
    with pytest.raises(AssertionError):
        formulas.delta_star(Node(0), Node(0))


def test_memoization_does_not_change_results():
    gene = build_cherry("a", "b")
    species = build_left_cherry_species()
    for candidates in [set(), {Node(0)}, {Node(1)}, {Node(0), Node(1)}]:
        cached = FormulaData(gene, species, candidates, memoize=True)
        plain = FormulaData(gene, species, candidates, memoize=False)
        for g in gene.nodes():
            for s in species.nodes():
                assert cached.delta_down(g, s) is plain.delta_down(g, s)
                assert cached.epsilon(g, s) is plain.epsilon(g, s)


@pytest.mark.parametrize("candidates, expected", [
    (set(), Tribool.TRUE),
    ({Node(3)}, Tribool.UNKNOWN),
    ({Node(1)}, Tribool.TRUE),
])
def test_delta_down_at_the_reticulation(candidates, expected):
    species = build_reticulated_species()
    assert species.is_reticulation_node(Node(3))
    gene = _network(1, [], {0: "c"})
    formulas = FormulaData(gene, species, candidates)
    assert formulas.sigma(Node(0), Node(3)) is Tribool.FALSE
    assert formulas.delta_down(Node(0), Node(4)) is Tribool.TRUE
    assert formulas.delta_down(Node(0), Node(3)) is expected


def test_sigma_around_the_reticulation():
    species = build_reticulated_species()
    below_first_parent = FormulaData(build_cherry("a", "c"), species, set())
    below_second_parent = FormulaData(build_cherry("c", "b"), species, set())

    # The reticulation has one child, so nothing aligns with it exactly.
    assert below_first_parent.sigma(Node(0), Node(3)) is Tribool.FALSE
    assert below_first_parent.delta_down(Node(0), Node(3)) is Tribool.FALSE
    # Both parents of the reticulation reach leaf c through it.
    assert below_first_parent.sigma(Node(0), Node(1)) is Tribool.TRUE
    assert below_second_parent.sigma(Node(0), Node(6)) is Tribool.TRUE

    guarded = FormulaData(build_cherry("a", "c"), species, {Node(3)})
    assert guarded.sigma(Node(0), Node(1)) is Tribool.FALSE


@pytest.mark.parametrize("left, right", [("a", "c"), ("c", "b"), ("c", "c")])
def test_memoization_on_reticulated_species(left, right):
    """
    Every set of at most two species nodes as episode candidates, every
    pair of gene and species nodes.
    """
    gene = build_cherry(left, right)
    species = build_reticulated_species()
    nodes = species.nodes()
    for size in range(3):
        for candidates in combinations(nodes, size):
            cached = FormulaData(gene, species, candidates, memoize=True)
            plain = FormulaData(gene, species, candidates, memoize=False)
            for g in gene.nodes():
                for s in nodes:
                    assert cached.delta_down(g, s) is plain.delta_down(g, s)
                    assert cached.sigma(g, s) is plain.sigma(g, s)


###########################
#### FACTORY AND INPUT ####
###########################

def test_candidate_outside_species_is_rejected():
    gene = build_cherry("a", "b")
    pairing = GenesOverSpecies.new([gene], build_cherry("a", "b"))
    factory = EpisodeFeasibilityAlgorithmFactoryBuilder().create()
    with pytest.raises(EpisodeFeasibilityInputError):
        factory.create(EpisodeFeasibilityInput(pairing, [Node(3)]))


@pytest.mark.parametrize("candidate", [0, 3, "0", None])
def test_candidate_that_is_not_a_node_is_rejected(candidate):
    pairing = GenesOverSpecies.new([build_cherry("a", "b")],
                                   build_cherry("a", "b"))
    factory = EpisodeFeasibilityAlgorithmFactoryBuilder().create()
    with pytest.raises(EpisodeFeasibilityInputError):
        factory.create(EpisodeFeasibilityInput(pairing, [candidate]))


def test_unary_gene_tree_node_is_rejected():
    gene = _network(2, [(0, 1)], {1: "a"})
    pairing = GenesOverSpecies.new([gene], build_cherry("a", "b"))
    factory = EpisodeFeasibilityAlgorithmFactoryBuilder().create()
    with pytest.raises(EpisodeFeasibilityInputError):
        factory.create(EpisodeFeasibilityInput(pairing, []))


def test_input_equality_ignores_candidate_order():
    pairing = GenesOverSpecies.new([build_cherry("a", "b")],
                                   build_cherry("a", "b"))
    first = EpisodeFeasibilityInput(pairing, [Node(0), Node(1)])
    second = EpisodeFeasibilityInput(pairing, [Node(1), Node(0)])
    assert first == second
    assert hash(first) == hash(second)


def test_factory_logs_with_the_given_logger(caplog):
    gene = build_cherry("a", "b")
    pairing = GenesOverSpecies.new([gene], build_cherry("a", "b"))
    custom = logging.getLogger("feasibility-test")
    factory = EpisodeFeasibilityAlgorithmFactoryBuilder() \
        .set_logger(custom).create()
    assert isinstance(factory, EpisodeFeasibilityAlgorithmFactory)

    algorithm = factory.create(EpisodeFeasibilityInput(pairing, [Node(0)]))
    assert algorithm.logger.name.startswith("feasibility-test.EF_")

    with caplog.at_level(logging.DEBUG, logger="feasibility-test"):
        algorithm.run()
    messages = [record.getMessage() for record in caplog.records]
    assert any("1 of 1 gene networks are feasible" in m for m in messages)
