"""
E(ObF) 中的桥

对象层图表 ObF 的元素范畴：节点 (i, a)，每个 u: i → j 给出边 (i, a) → (j, ũ(a))。
BFS 找第一条最短路径（FIFO，平局按箭头枚举顺序打破），
只用来见证两个元素相连，不计算任何度量。
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .diagram import ObFDiagram
from .errors import DiagramError
from .object_quotient import Element, tag


_logger = logging.getLogger(__name__)


def elements_graph(obf: ObFDiagram) -> Dict[Element, List[Element]]:
    """邻接表：每个元素的出边按 J-箭头枚举顺序排列。"""
    adj: Dict[Element, List[Element]] = {e: [] for e in obf.elements()}
    for u in obf.J.arrows:
        f = obf.u_obj[u.id]
        for a in obf.ob[u.src]:
            target = (u.dst, f(a))
            if target not in adj:
                raise DiagramError(f"ObF: arrow {u.id!r} sends {tag(u.src, a)} outside Ob_{u.dst}")
            adj[(u.src, a)].append(target)
    return adj


def elements_path(obf: ObFDiagram, src: Element, dst: Element) -> Optional[List[Element]]:
    """
    从 src 到 dst 的最短有向路径（含两端）；不可达返回 None。

    src == dst 时返回 [src]。
    """
    adj = elements_graph(obf)
    for e in (src, dst):
        if e not in adj:
            raise DiagramError(f"elements_path: unknown element {tag(*e)}")

    prev: Dict[Element, Optional[Element]] = {src: None}
    queue: List[Element] = [src]
    while queue:
        current = queue.pop(0)
        if current == dst:
            break
        for neighbor in adj[current]:
            if neighbor not in prev:
                prev[neighbor] = current
                queue.append(neighbor)

    if dst not in prev:
        _logger.debug("elements_path: %s unreachable from %s", tag(*dst), tag(*src))
        return None

    path: List[Element] = []
    node: Optional[Element] = dst
    while node is not None:
        path.append(node)
        node = prev[node]
    path.reverse()
    _logger.debug("elements_path: %s ⇒ %s in %d steps", tag(*src), tag(*dst), len(path) - 1)
    return path


__all__ = [
    "elements_graph",
    "elements_path",
]
