"""
先修关系图测试：建图、找环、Kahn 分层、学期安排
"""
import random

from snapshots import PrerequisiteLink
from services.prerequisite_graph import (
    build_prerequisite_graph,
    build_catalog_graph,
    graph_nodes,
    detect_cycle,
    topological_levels,
    semester_mapping,
)


def _links(edges):
    return [PrerequisiteLink(course_id=c, prerequisite_course_id=p) for c, p in edges]


def test_build_prerequisite_graph_dedupes_edges():
    graph = build_prerequisite_graph(_links([(101, None), (201, 101), (201, 101), (301, 201)]))
    assert graph == {101: [], 201: [101], 301: [201]}


def test_starting_link_registers_node_without_edges():
    links = _links([(101, None), (201, None), (201, 101)])
    assert [l.is_starting_course() for l in links] == [True, True, False]
    assert build_prerequisite_graph(links) == {101: [], 201: [101]}


def test_build_catalog_graph(catalog):
    graph = build_catalog_graph(catalog.values())
    assert graph[301] == [201]
    assert graph[101] == []


def test_graph_nodes_includes_prerequisite_only_nodes():
    assert graph_nodes({201: [101]}) == [201, 101]


def test_linear_chain_levels_and_semesters():
    """101 ← 201 ← 301：三层，三个学期"""
    graph = {101: [], 201: [101], 301: [201]}

    assert detect_cycle(graph) is None
    levels = topological_levels(graph)
    assert levels == [[101], [201], [301]]
    assert semester_mapping(levels) == {101: 1, 201: 2, 301: 3}


def test_three_course_cycle_is_reported_exactly():
    """加上 101 → 301 后形成环"""
    graph = {101: [301], 201: [101], 301: [201]}

    cycle = detect_cycle(graph)

    assert cycle is not None
    assert cycle[0] == cycle[-1]
    assert sorted(cycle[:-1]) == [101, 201, 301]
    for course_id, prereq in zip(cycle, cycle[1:]):
        assert prereq in graph[course_id]


def test_self_loop_is_a_cycle():
    assert detect_cycle({101: [101]}) == [101, 101]


def test_cycle_reachable_from_acyclic_prefix():
    graph = {1: [2], 2: [3], 3: [4], 4: [2]}
    cycle = detect_cycle(graph)
    assert cycle == [2, 3, 4, 2]


def test_diamond_levels():
    graph = {301: [201, 202], 201: [101], 202: [101], 101: []}
    assert topological_levels(graph) == [[101], [201, 202], [301]]


def test_cycle_members_are_left_out_of_levels():
    graph = {101: [], 201: [301], 301: [201]}
    assert topological_levels(graph) == [[101]]


def test_random_dags_levels_respect_every_edge():
    """无环图：每条边 a → b 都满足 level(a) > level(b)，且所有节点都被分层"""
    rng = random.Random(7)
    for _ in range(50):
        nodes = list(range(1, 16))
        graph = {n: [] for n in nodes}
        for a in nodes:
            for b in nodes:
                if b < a and rng.random() < 0.2:
                    graph[a].append(b)

        assert detect_cycle(graph) is None
        levels = topological_levels(graph)
        level_of = {cid: i for i, level in enumerate(levels) for cid in level}
        assert set(level_of) == set(nodes)
        for a, prereqs in graph.items():
            for b in prereqs:
                assert level_of[a] > level_of[b]


def test_random_cycles_are_sound():
    """随机图中找到的环必须由真实存在的边组成"""
    rng = random.Random(11)
    for _ in range(50):
        nodes = list(range(1, 10))
        graph = {n: [m for m in nodes if m != n and rng.random() < 0.25] for n in nodes}
        cycle = detect_cycle(graph)
        if cycle is None:
            levels = topological_levels(graph)
            assert sum(len(level) for level in levels) == len(nodes)
            continue
        assert cycle[0] == cycle[-1]
        assert len(set(cycle[:-1])) == len(cycle) - 1
        for course_id, prereq in zip(cycle, cycle[1:]):
            assert prereq in graph[course_id]
