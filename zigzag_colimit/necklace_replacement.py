"""
Necklace 替换

(B) 穿过 x0..xk 的装饰 zig-zag：每个单纯形一个选定顶点 a_i，相邻两个单纯形之间一个 p-箭头 U_i
(A) 单个 necklace，珠维数 [n0..nk]，加上在 joins 处切开的 p-箭头链

目前只做恒等重定基：旗本来就按珠局部编号，链原样复制。
跨珠边界的顶点偏移重定基尚未实现。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Tuple

from .errors import ZigZagAlignmentError
from .necklace import Necklace
from .p_arrows import PArrow


_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecoratedZigZagB:
    """simplices 为 (单纯形 id, 维数) 对；vertices 每个单纯形一个；arrows 每对相邻单纯形一个。"""
    simplices: Tuple[Tuple[str, int], ...]
    vertices: Tuple[Any, ...]
    p: int
    arrows: Tuple[PArrow, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "simplices", tuple(tuple(s) for s in self.simplices))
        object.__setattr__(self, "vertices", tuple(self.vertices))
        object.__setattr__(self, "arrows", tuple(self.arrows))


@dataclass(frozen=True)
class NecklaceReplacementA:
    necklace: Necklace
    p: int
    chain: Tuple[PArrow, ...]


def necklace_replacement(dzz: DecoratedZigZagB) -> NecklaceReplacementA:
    """
    (B) ↦ (A)：校验对齐，珠维数取各单纯形的维数，p-箭头链在恒等重定基下复制。

    对齐失败（空链、顶点数 ≠ 单纯形数、箭头数 ≠ 单纯形数 - 1）抛 ZigZagAlignmentError。
    """
    n = len(dzz.simplices)
    if n < 1:
        raise ZigZagAlignmentError("empty decorated zig-zag")
    if len(dzz.vertices) != n:
        raise ZigZagAlignmentError(
            f"vertices must align: one per simplex, got {len(dzz.vertices)} for {n} simplices"
        )
    if len(dzz.arrows) != n - 1:
        raise ZigZagAlignmentError(
            f"need one p-arrow per adjacent pair, got {len(dzz.arrows)} for {n} simplices"
        )

    necklace = Necklace(beads=tuple(dim for _, dim in dzz.simplices), label=f"N[x0..x{n - 1}]")
    chain = tuple(PArrow(i=u.i, j=u.j, flag=u.flag) for u in dzz.arrows)
    _logger.debug("necklace_replacement: %s with beads %s", necklace.label, list(necklace.beads))
    return NecklaceReplacementA(necklace=necklace, p=dzz.p, chain=chain)


__all__ = [
    "DecoratedZigZagB",
    "NecklaceReplacementA",
    "necklace_replacement",
]
