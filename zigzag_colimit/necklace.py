"""
Necklace 与 proper 装饰

数学定义：
    N = Δ^{n0} ∨ … ∨ Δ^{nk}，相邻珠首尾相接。
    顶点编号 0..Σnᵢ；joins J_N 是珠与珠之间共享的内部顶点（不含两个外端点）。

    旗 U⃗ = (U0 ⊆ … ⊆ Up) 是 |N| 顶点的子集链。
    proper：len(U⃗) = p+1 且 J_N ⊆ U0。

实现细节：
    - 旗的每一层存为有序去重的整数元组（顶点子集）
    - 顶点映射可以是回调，也可以是 numpy 查找表；推前 = 映射、去重、排序
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import ProperDecorationError, ShapeMismatchError


Flag = Tuple[Tuple[int, ...], ...]
VertexMap = Union[Callable[[int], int], Sequence[int], np.ndarray]


def _require_exact_int(x: Any, *, name: str = "value") -> int:
    """
    将输入强制为可证明的整数。

    允许 Python int / numpy integer；浮点只有在与最近整数的差落在机器精度内时才接受。
    """
    if isinstance(x, bool):
        raise TypeError(f"{name} must be an integer, got bool.")
    if isinstance(x, (int, np.integer)):
        return int(x)
    if isinstance(x, (float, np.floating)):
        if not np.isfinite(x):
            raise ValueError(f"{name} must be a finite integer, got {x!r}.")
        nearest = int(np.rint(x))
        tol = np.finfo(np.float64).eps * max(1.0, abs(float(x)))
        if abs(float(x) - float(nearest)) <= tol:
            return nearest
        raise ValueError(f"{name} must be an exact integer; refusing to round {x!r}.")
    raise TypeError(f"{name} must be an integer, got {type(x)}.")


def as_flag(levels: Iterable[Iterable[Any]]) -> Flag:
    """规范化旗：每层转为有序去重的整数元组。"""
    return tuple(
        tuple(sorted({_require_exact_int(v, name="vertex") for v in level}))
        for level in levels
    )


# =============================================================================
# 1) Necklace
# =============================================================================


@dataclass(frozen=True)
class Necklace:
    """珠维数 (n0, …, nk) 加可选标签。"""
    beads: Tuple[int, ...]
    label: Optional[str] = None

    def __post_init__(self) -> None:
        beads = tuple(_require_exact_int(n, name="bead dimension") for n in self.beads)
        for n in beads:
            if n < 0:
                raise ValueError(f"bead dimensions must be non-negative, got {list(beads)}")
        object.__setattr__(self, "beads", beads)

    @property
    def length(self) -> int:
        """Σnᵢ，即最后一个顶点的编号。"""
        return sum(self.beads)

    @property
    def vertex_count(self) -> int:
        return self.length + 1


def vertices_of(beads: Sequence[int]) -> List[int]:
    return list(range(sum(beads) + 1))


def joins_of(necklace: Necklace) -> List[int]:
    """J_N：累积珠边界上的内部顶点。"""
    last = necklace.length
    joins: List[int] = []
    acc = 0
    for n in necklace.beads[:-1]:
        acc += n
        joins.append(acc)
    return [v for v in joins if 0 < v < last]


# =============================================================================
# 2) Proper 装饰
# =============================================================================


@dataclass(frozen=True)
class ProperDecoration:
    """层数 p 与旗 U⃗（应有 p+1 层）。"""
    p: int
    flag: Flag

    def __post_init__(self) -> None:
        object.__setattr__(self, "p", _require_exact_int(self.p, name="p"))
        object.__setattr__(self, "flag", as_flag(self.flag))


def missing_joins(necklace: Necklace, flag: Flag) -> Tuple[int, ...]:
    u0 = set(flag[0]) if flag else set()
    return tuple(j for j in joins_of(necklace) if j not in u0)


def is_proper_decoration(necklace: Necklace, dec: ProperDecoration) -> bool:
    if len(dec.flag) != dec.p + 1:
        return False
    return not missing_joins(necklace, dec.flag)


def identity_vertex_map(length: int) -> np.ndarray:
    return np.arange(length + 1, dtype=np.int64)


def push_flag(vertex_map: VertexMap, flag: Iterable[Iterable[int]]) -> Flag:
    """
    沿保端点的单纯映射 ρ: |N| → |M| 推前旗：逐层映射、去重、排序。

    vertex_map 为回调时逐点调用；否则视作查找表 table[v] = ρ(v)。
    """
    if callable(vertex_map):
        return as_flag([vertex_map(v) for v in level] for level in flag)

    table = np.asarray(vertex_map, dtype=np.int64)
    out: List[Tuple[int, ...]] = []
    for level in flag:
        idx = np.asarray(list(level), dtype=np.int64)
        bad = idx[(idx < 0) | (idx >= table.size)]
        if bad.size:
            raise ShapeMismatchError(
                "push_flag", f"vertex {int(bad[0])} outside a map defined on 0..{table.size - 1}"
            )
        out.append(tuple(int(v) for v in np.unique(table[idx])))
    return tuple(out)


@dataclass(frozen=True)
class ProperHoriz:
    """
    proper 水平态射 (N → X_{a,b}, U⃗)。

    构造时即校验，存活的值在整个生命周期内都满足 J_N ⊆ U0。
    """
    necklace: Necklace
    decoration: ProperDecoration
    a: str = ""
    b: str = ""

    def __post_init__(self) -> None:
        dec = self.decoration
        if len(dec.flag) != dec.p + 1:
            raise ProperDecorationError(
                (), f"flag has {len(dec.flag)} levels, expected p+1 = {dec.p + 1}"
            )
        missing = missing_joins(self.necklace, dec.flag)
        if missing:
            raise ProperDecorationError(missing)


def mk_proper_horiz(
    necklace: Necklace,
    decoration: ProperDecoration,
    a: str = "",
    b: str = "",
) -> ProperHoriz:
    """校验构造：装饰不 proper 时抛 ProperDecorationError。"""
    return ProperHoriz(necklace=necklace, decoration=decoration, a=a, b=b)


# =============================================================================
# 3) S(X) 中的 zig-zag 骨架
# =============================================================================


class Inclusion(Enum):
    INITIAL = "α"
    TERMINAL = "ω"


@dataclass(frozen=True)
class ZigZagInSX:
    chain: Tuple[Tuple[str, Inclusion], ...]


def necklace_to_zigzag(bead_simplex_ids: Sequence[str]) -> ZigZagInSX:
    """(N → X) 的骨架：相邻珠单纯形之间交替 ω/α 包含。"""
    chain: List[Tuple[str, Inclusion]] = []
    for left, right in zip(bead_simplex_ids, bead_simplex_ids[1:]):
        chain.append((left, Inclusion.TERMINAL))
        chain.append((right, Inclusion.INITIAL))
    return ZigZagInSX(chain=tuple(chain))


__all__ = [
    "Flag",
    "VertexMap",
    "as_flag",
    "Necklace",
    "vertices_of",
    "joins_of",
    "ProperDecoration",
    "missing_joins",
    "is_proper_decoration",
    "identity_vertex_map",
    "push_flag",
    "ProperHoriz",
    "mk_proper_horiz",
    "Inclusion",
    "ZigZagInSX",
    "necklace_to_zigzag",
]
