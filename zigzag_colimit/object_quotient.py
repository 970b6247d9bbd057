"""
对象商：colim_i Ob(C_i)

数学定义：
    Ob(colim C) = (⊔_i Ob(C_i)) / ~，其中 ~ 由 (i, o) ~ (j, ũ(o)) 对每个 u: i → j 生成。

算法：
    以标签 "i::o" 为键的并查集（每次调用一个独立 arena，不用全局单例），
    带路径压缩。代表元是并查集最终落定的根，调用者只能依赖一致性，
    不能假设是类中某个特定成员。

另外给出一个独立的 π0 计算（scipy 稀疏图的弱连通分量），
用来交叉验证并查集结果。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
import scipy.sparse
from scipy.sparse.csgraph import connected_components

from .diagram import Diagram, IndexId, ObFDiagram, ObjId
from .errors import DiagramError


_logger = logging.getLogger(__name__)

Element = Tuple[IndexId, ObjId]
RepKey = str


def tag(index: IndexId, obj: ObjId) -> RepKey:
    """元素 (i, o) 的纤维标签 "i::o"。"""
    return f"{index}::{obj}"


class UnionFind:
    """以字符串标签为键的不相交集合。"""

    def __init__(self) -> None:
        self._parent: Dict[str, str] = {}

    def add(self, x: str) -> None:
        if x not in self._parent:
            self._parent[x] = x

    def find(self, x: str) -> str:
        self.add(x)
        p = self._parent[x]
        if p != x:
            self._parent[x] = self.find(p)
        return self._parent[x]

    def union(self, a: str, b: str) -> bool:
        """合并两个类；返回是否真的发生了合并。"""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        self._parent[ra] = rb
        return True

    def __len__(self) -> int:
        return len(self._parent)


@dataclass(frozen=True, eq=False)
class ObjectQuotient:
    """
    对象商的结果（只读）。

    Attributes:
        rep_of: (i, o) → 代表元标签
        classes: 代表元标签 → 类中全部 (i, o)，按枚举顺序
    """
    rep_of: Dict[Element, RepKey]
    classes: Dict[RepKey, List[Element]]

    def rep(self, index: IndexId, obj: ObjId) -> RepKey:
        key = (index, obj)
        if key not in self.rep_of:
            raise DiagramError(f"Unknown element {tag(index, obj)}")
        return self.rep_of[key]

    def same_class(self, x: Element, y: Element) -> bool:
        return self.rep(*x) == self.rep(*y)

    @property
    def reps(self) -> List[RepKey]:
        return list(self.classes.keys())


def colim_objects(diagram: Diagram) -> ObjectQuotient:
    """对每个 u: i → j 和每个 o ∈ C_i，合并 "i::o" 与 "j::ũ(o)"。"""
    uf = UnionFind()
    merges = 0
    for u in diagram.J.arrows:
        fun = diagram.functor(u.id)
        for o in diagram.category(u.src).objects:
            if uf.union(tag(u.src, o), tag(u.dst, fun.on_obj(o))):
                merges += 1

    rep_of: Dict[Element, RepKey] = {}
    classes: Dict[RepKey, List[Element]] = {}
    for i in diagram.J.objects:
        for o in diagram.category(i).objects:
            r = uf.find(tag(i, o))
            rep_of[(i, o)] = r
            classes.setdefault(r, []).append((i, o))

    _logger.debug(
        "colim_objects: %d elements, %d merges, %d classes", len(rep_of), merges, len(classes)
    )
    return ObjectQuotient(rep_of=rep_of, classes=classes)


def pi0_of_elements(obf: ObFDiagram) -> Dict[Element, int]:
    """
    π0(E(ObF))：每个元素所在连通分量的编号。

    编号按元素枚举顺序首次出现的次序分配（0, 1, 2, ...）。
    """
    elements = list(obf.elements())
    position = {e: n for n, e in enumerate(elements)}
    rows: List[int] = []
    cols: List[int] = []
    for u in obf.J.arrows:
        f = obf.u_obj[u.id]
        for a in obf.ob[u.src]:
            target = (u.dst, f(a))
            if target not in position:
                raise DiagramError(f"ObF: arrow {u.id!r} sends {tag(u.src, a)} outside Ob_{u.dst}")
            rows.append(position[(u.src, a)])
            cols.append(position[target])

    n = len(elements)
    if n == 0:
        return {}
    graph = scipy.sparse.coo_matrix(
        (np.ones(len(rows), dtype=np.int8), (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64))),
        shape=(n, n),
    )
    _n_components, labels = connected_components(graph, directed=True, connection="weak")

    renumber: Dict[int, int] = {}
    out: Dict[Element, int] = {}
    for e, lab in zip(elements, labels):
        comp = renumber.setdefault(int(lab), len(renumber))
        out[e] = comp
    return out


__all__ = [
    "Element",
    "RepKey",
    "tag",
    "UnionFind",
    "ObjectQuotient",
    "colim_objects",
    "pi0_of_elements",
]
