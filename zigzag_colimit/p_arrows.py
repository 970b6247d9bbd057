"""
p-箭头与旗代数

数学定义：
    Δ^n_p 中的 p-箭头：区间 [i, j] 上的旗 U⃗ = (U0 ⊆ … ⊆ Up)。
    复合 g ∘ f（f.j = g.i）：逐层取并集（不是余积，两段区间在接点共享结构）。

    C_X 中的 p-箭头：(|N| → X_{a,b}, U⃗) 且 J_N ⊆ U0，
    模去保端点的单纯映射 ρ: |N| → |M|，ρ(U⃗) = V⃗。

等价搜索：
    1. 枚举珠指标上的单调满射 θ: [0..k] ↠ [0..l]（隔板法，惰性生成，l > k 时为空）
    2. 每个 θ 拼出分段仿射顶点映射：珠 i 上 [0..n_i] → [0..m_θ(i)]，
       精确有理数上四舍五入（半数向上），两珠共享的顶点由前一个珠决定
    3. 不固定两端点的候选直接丢弃；否则推前 U⃗ 与 V⃗ 比较
    4. 第一个匹配即返回 True；穷尽返回 False

    搜索量是单调满射的个数 C(k, l)，只适合小 necklace。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .config import DEFAULT_CONFIG, ColimitConfig
from .errors import ShapeMismatchError
from .necklace import Flag, Necklace, as_flag, missing_joins, push_flag


_logger = logging.getLogger(__name__)


# =============================================================================
# 1) Δ^n_p 中的 p-箭头
# =============================================================================


@dataclass(frozen=True)
class PArrow:
    """区间 [i, j] 上的旗。"""
    i: int
    j: int
    flag: Flag

    def __post_init__(self) -> None:
        object.__setattr__(self, "flag", as_flag(self.flag))


def compose_p(p: int, g: PArrow, f: PArrow) -> PArrow:
    """g ∘ f：要求 f.j == g.i 且两面旗都有 p+1 层，逐层取并。"""
    if f.j != g.i:
        raise ShapeMismatchError("compose_p", f"f ends at {f.j} but g starts at {g.i}")
    for name, arrow in (("f", f), ("g", g)):
        if len(arrow.flag) != p + 1:
            raise ShapeMismatchError(
                "compose_p", f"{name} has {len(arrow.flag)} flag levels, expected p+1 = {p + 1}"
            )
    levels = [set(uf) | set(ug) for uf, ug in zip(f.flag, g.flag)]
    return PArrow(i=f.i, j=g.j, flag=as_flag(levels))


# =============================================================================
# 2) C_X 中的 p-箭头表示
# =============================================================================


@dataclass(frozen=True)
class PArrowRep:
    """端点 a, b；necklace N；旗 U⃗（应有 p+1 层，下标是 |N| 的顶点）。"""
    a: str
    b: str
    N: Necklace
    flag: Flag
    p: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "flag", as_flag(self.flag))


def is_valid_p_arrow(rep: PArrowRep) -> bool:
    """良构 + proper：旗长 p+1，necklace 非空，J_N ⊆ U0。"""
    return (
        len(rep.flag) == rep.p + 1
        and len(rep.N.beads) > 0
        and not missing_joins(rep.N, rep.flag)
    )


# =============================================================================
# 3) 单调满射与顶点映射
# =============================================================================


def gen_surjections(k: int, l: int) -> Iterator[Tuple[int, ...]]:
    """
    惰性枚举单调满射 θ: [0..k] ↠ [0..l]。

    隔板法：在 k 个间隙中选 l 个切口，共 C(k, l) 个。
    """
    if l < 0 or l > k:
        return
    if l == 0:
        yield (0,) * (k + 1)
        return
    if l == k:
        yield tuple(range(k + 1))
        return

    def cuts(pos: int, rem: int, acc: Tuple[int, ...]) -> Iterator[Tuple[int, ...]]:
        if rem == 0:
            yield acc
            return
        for c in range(pos, k - rem + 1):
            yield from cuts(c + 1, rem - 1, acc + (c,))

    for sel in cuts(0, l, ()):
        theta: List[int] = []
        j = 0
        for i in range(k + 1):
            theta.append(j)
            if i in sel:
                j += 1
        yield tuple(theta)


def _round_half_up(x: Fraction) -> int:
    return math.floor(x + Fraction(1, 2))


def bead_vertex_map(beads_n: Sequence[int], beads_m: Sequence[int], theta: Sequence[int]) -> np.ndarray:
    """
    θ 诱导的分段仿射顶点表 table[v] = ρ(v)，v ∈ 0..Σnᵢ。

    珠 i 的局部顶点 t ↦ offset_M(θ(i)) + round(t · m_θ(i) / n_i)；
    0 维珠只有 t = 0 ↦ offset_M(θ(i))。共享顶点取前一个珠的值。
    """
    if len(theta) != len(beads_n):
        raise ShapeMismatchError("bead_vertex_map", f"theta has {len(theta)} entries for {len(beads_n)} beads")
    offsets_m = [0]
    for m in beads_m:
        offsets_m.append(offsets_m[-1] + m)

    size_n = sum(beads_n)
    table = np.zeros(size_n + 1, dtype=np.int64)
    filled = np.zeros(size_n + 1, dtype=bool)
    acc = 0
    for n, target in zip(beads_n, theta):
        m = beads_m[target]
        base = offsets_m[target]
        for t in range(n + 1):
            v = acc + t
            if filled[v]:
                continue
            local = 0 if n == 0 else _round_half_up(Fraction(t * m, n))
            table[v] = base + local
            filled[v] = True
        acc += n
    return table


def equiv_p_arrow(lhs: PArrowRep, rhs: PArrowRep, *, config: Optional[ColimitConfig] = None) -> bool:
    """(N, U⃗) ~ (M, V⃗)：存在保端点的 ρ: |N| → |M| 使 ρ(U⃗) = V⃗。"""
    if lhs.a != rhs.a or lhs.b != rhs.b or lhs.p != rhs.p:
        return False
    if not is_valid_p_arrow(lhs) or not is_valid_p_arrow(rhs):
        return False

    cfg = config or DEFAULT_CONFIG
    beads_n, beads_m = lhs.N.beads, rhs.N.beads
    size_n, size_m = lhs.N.length, rhs.N.length
    examined = 0
    for theta in gen_surjections(len(beads_n) - 1, len(beads_m) - 1):
        if cfg.max_surjections is not None and examined >= cfg.max_surjections:
            _logger.warning(
                "equiv_p_arrow: stopped after %d surjections (max_surjections), treating as not equivalent",
                examined,
            )
            return False
        examined += 1
        table = bead_vertex_map(beads_n, beads_m, theta)
        if table[0] != 0 or table[size_n] != size_m:
            continue
        if push_flag(table, lhs.flag) == rhs.flag:
            _logger.debug("equiv_p_arrow: witness theta=%s after %d candidates", theta, examined)
            return True
    _logger.debug("equiv_p_arrow: no witness among %d candidates", examined)
    return False


__all__ = [
    "PArrow",
    "compose_p",
    "PArrowRep",
    "is_valid_p_arrow",
    "gen_surjections",
    "bead_vertex_map",
    "equiv_p_arrow",
]
