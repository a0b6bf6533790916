"""
先修关系图

图的表示：{course_id: [prerequisite_course_id, ...]}，边方向为 课程 → 先修课。

- build_prerequisite_graph: 由 PrerequisiteLink 列表建图
- build_catalog_graph:      由课程目录的 prerequisite_ids 建图
- detect_cycle:             三色 DFS 找环，返回环路径（首尾为同一门课），无环返回 None
- topological_levels:       Kahn 算法分层，先修课在前
- semester_mapping:         分层结果 → {course_id: 建议学期（从 1 开始）}

环是校验问题而不是异常：detect_cycle 总是正常返回。
"""

WHITE, GRAY, BLACK = 0, 1, 2


def build_prerequisite_graph(links) -> dict:
    """
    由先修边建邻接表

    prerequisite_course_id 为 None 的边只登记节点本身。重复边只保留一条。

    Args:
        links: PrerequisiteLink 列表

    Returns:
        dict: {course_id: [prerequisite_course_id, ...]}
    """
    graph = {}
    for link in links:
        edges = graph.setdefault(link.course_id, [])
        if link.is_starting_course():
            continue
        if link.prerequisite_course_id not in edges:
            edges.append(link.prerequisite_course_id)
    return graph


def build_catalog_graph(courses) -> dict:
    """
    由课程目录建先修图

    Args:
        courses: CourseInfo 列表

    Returns:
        dict: {course_id: [prerequisite_course_id, ...]}
    """
    graph = {}
    for course in courses:
        edges = graph.setdefault(course.id, [])
        for prereq in course.prerequisite_ids:
            if prereq not in edges:
                edges.append(prereq)
    return graph


def graph_nodes(graph) -> list:
    """所有节点（含只作为先修课出现的节点），按首次出现顺序"""
    nodes = []
    seen = set()
    for course_id, prereqs in graph.items():
        for node in [course_id] + list(prereqs):
            if node not in seen:
                seen.add(node)
                nodes.append(node)
    return nodes


def detect_cycle(graph):
    """
    三色 DFS 检测环

    遇到仍在栈中（GRAY）的节点时，返回当前 DFS 路径中从该节点第一次出现处开始的片段，
    再补上该节点本身，因此返回值首尾相同，相邻两项都是图中真实存在的边。

    Args:
        graph: {course_id: [prerequisite_course_id, ...]}

    Returns:
        list | None: 环路径，如 [101, 301, 201, 101]；无环返回 None

    Examples:
        >>> detect_cycle({101: [301], 201: [101], 301: [201]})
        [101, 301, 201, 101]
        >>> detect_cycle({101: [], 201: [101]}) is None
        True
    """
    color = {}

    for start in list(graph):
        if color.get(start, WHITE) != WHITE:
            continue

        color[start] = GRAY
        path = [start]
        stack = [iter(graph.get(start, ()))]

        while stack:
            advanced = False
            for neighbor in stack[-1]:
                state = color.get(neighbor, WHITE)
                if state == GRAY:
                    index = path.index(neighbor)
                    return path[index:] + [neighbor]
                if state == WHITE:
                    color[neighbor] = GRAY
                    path.append(neighbor)
                    stack.append(iter(graph.get(neighbor, ())))
                    advanced = True
                    break

            if not advanced:
                stack.pop()
                color[path.pop()] = BLACK

    return None


def topological_levels(graph) -> list:
    """
    Kahn 算法分层

    第 i 层包含所有先修课都在 < i 层的课程；同层按 course_id 排序。
    环上的课程（以及依赖它们的课程）不会出现在结果中，调用前应先 detect_cycle。

    Args:
        graph: {course_id: [prerequisite_course_id, ...]}

    Returns:
        list: [[course_id, ...], ...]

    Examples:
        >>> topological_levels({101: [], 201: [101], 301: [201]})
        [[101], [201], [301]]
    """
    nodes = graph_nodes(graph)
    remaining = {node: len(graph.get(node, ())) for node in nodes}

    # 先修课 → 依赖它的课程
    dependents = {node: [] for node in nodes}
    for course_id, prereqs in graph.items():
        for prereq in prereqs:
            dependents[prereq].append(course_id)

    current = sorted(node for node in nodes if remaining[node] == 0)
    levels = []

    while current:
        levels.append(current)
        next_level = []
        for node in current:
            for dependent in dependents[node]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    next_level.append(dependent)
        current = sorted(next_level)

    return levels


def semester_mapping(levels) -> dict:
    """
    分层结果转建议学期

    Examples:
        >>> semester_mapping([[101], [201, 202]])
        {101: 1, 201: 2, 202: 2}
    """
    mapping = {}
    for index, level in enumerate(levels):
        for course_id in level:
            mapping[course_id] = index + 1
    return mapping
