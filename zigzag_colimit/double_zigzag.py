"""
双范畴 Z_J / Z_F：装饰 zig-zag 与 2-胞作用

长度 1 的 F-装饰 zig-zag（DecoratedLR）：
    i ←l— k —r→ j,  a ∈ C_i, a1 ∈ C_k, b ∈ C_j
    f0: a → l̃(a1) in C_i,   f1: r̃(a1) → b in C_j

两类生成元 2-胞：
    (i)  square：交换方块把 (l, r) 塌缩到平凡 zig-zag {k}
         ρ* f̄ = ρ̃_j(f1) ∘ ρ̃_i(f0) : a′ → b′ in C_k        （终态，不可反塌缩）
    (ii) ladder：id:[1]→[1] 梯子把 (l, r) 重标成 (l′, r′)
         ρ*(f0, f1) = (ρ̃_i f0, ρ̃_j f1)                      （非终态）

所有作用都是纯函数：返回新装饰，从不修改输入。
复合永远由调用者注入（compose_in_ck / compose_in_apex），本模块不发明复合。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar, Union

from .config import DEFAULT_CONFIG, ColimitConfig
from .diagram import FunctorLike
from .errors import DecorationError


_logger = logging.getLogger(__name__)

IDENTITY_LEG = "id"

FLookup = Callable[[str], FunctorLike]
ComposeFn = Callable[[Any, Any], Any]


# =============================================================================
# 1) 装饰
# =============================================================================


@dataclass(frozen=True)
class DecoratedLR:
    """长度 1 的 zig-zag (l, r): i ← k → j 及其 F-装饰。"""
    i: str
    j: str
    k: str
    l_id: str
    r_id: str
    a: Any
    a1: Any
    b: Any
    f0: Any
    f1: Any

    def has_identity_legs(self) -> bool:
        return self.l_id == IDENTITY_LEG and self.r_id == IDENTITY_LEG


@dataclass(frozen=True)
class DecoratedTrivial:
    """平凡 zig-zag {k} 的装饰：C_k 中的单个态射 g: a′ → b′。"""
    k: str
    a_prime: Any
    b_prime: Any
    g: Any


Decoration = Union[DecoratedLR, DecoratedTrivial]


# =============================================================================
# 2) 生成元 2-胞
# =============================================================================


@dataclass(frozen=True)
class TwoCellSquare:
    """i ←l— k —r→ j 配上腿 ρi: i → k、ρj: j → k（apex）。"""
    i: str
    j: str
    k: str
    rhoi_id: str
    rhoj_id: str


@dataclass(frozen=True)
class TwoCellLadder:
    """
    i ←l— j1 —r→ j 到 i′ ←l′— j1′ —r′→ j′ 的梯子，
    分量 ρi: i → i′, ρj1: j1 → j1′, ρj: j → j′。
    """
    i: str
    j1: str
    j: str
    i_prime: str
    j1_prime: str
    j_prime: str
    l_id: str
    r_id: str
    l_prime_id: str
    r_prime_id: str
    rhoi_id: str
    rhoj1_id: str
    rhoj_id: str


@dataclass(frozen=True)
class RhoGen:
    """生成元：kind 为 "square" 或 "ladder"，cell 为对应的 2-胞。"""
    kind: str
    cell: Union[TwoCellSquare, TwoCellLadder]

    def __post_init__(self) -> None:
        if self.kind == "square" and isinstance(self.cell, TwoCellSquare):
            return
        if self.kind == "ladder" and isinstance(self.cell, TwoCellLadder):
            return
        raise DecorationError(f"RhoGen kind {self.kind!r} does not match cell {type(self.cell).__name__}")

    @classmethod
    def square(cls, cell: TwoCellSquare) -> RhoGen:
        return cls(kind="square", cell=cell)

    @classmethod
    def ladder(cls, cell: TwoCellLadder) -> RhoGen:
        return cls(kind="ladder", cell=cell)


# =============================================================================
# 3) 作用
# =============================================================================


def act_square(
    F: FLookup,
    cell: TwoCellSquare,
    d: DecoratedLR,
    compose_in_ck: ComposeFn,
) -> DecoratedTrivial:
    """生成元 (i)：g = ρ̃_j(f1) ∘ ρ̃_i(f0) in C_k。"""
    rhoi = F(cell.rhoi_id)   # C_i → C_k
    rhoj = F(cell.rhoj_id)   # C_j → C_k
    f0p = rhoi.on_mor(d.f0)
    f1p = rhoj.on_mor(d.f1)
    return DecoratedTrivial(
        k=cell.k,
        a_prime=rhoi.on_obj(d.a),
        b_prime=rhoj.on_obj(d.b),
        g=compose_in_ck(f1p, f0p),
    )


def act_ladder(F: FLookup, cell: TwoCellLadder, d: DecoratedLR) -> DecoratedLR:
    """生成元 (ii)：沿 ρ 重标全部端点、腿和态射。"""
    rhoi = F(cell.rhoi_id)
    rhoj1 = F(cell.rhoj1_id)
    rhoj = F(cell.rhoj_id)
    return DecoratedLR(
        i=cell.i_prime,
        j=cell.j_prime,
        k=cell.j1_prime,
        l_id=cell.l_prime_id,
        r_id=cell.r_prime_id,
        a=rhoi.on_obj(d.a),
        a1=rhoj1.on_obj(d.a1),
        b=rhoj.on_obj(d.b),
        f0=rhoi.on_mor(d.f0),
        f1=rhoj.on_mor(d.f1),
    )


def _compose_trivial(
    F: FLookup,
    cell: TwoCellSquare,
    t: DecoratedTrivial,
    step: int,
) -> DecoratedTrivial:
    """
    已塌缩的 {k} 上再作用 square：只在同一个 apex 内继续复合。

    方块必须是 k 上的自方块（i = j = k = t.k），否则 apex 会移动，抛 DecorationError。
    塌缩装饰读作退化珠 (f0 = g, f1 = id_{b′})，于是 act_square 给出
    ρ̃_j(id) ∘ ρ̃_i(g) = ρ̃_i(g)，恒等那一侧不再调用 compose_in_apex。
    """
    if cell.k != t.k:
        raise DecorationError(
            f"square generator #{step} collapses to {{{cell.k}}}, "
            f"but the decoration already collapsed to {{{t.k}}}"
        )
    if cell.i != t.k or cell.j != t.k:
        raise DecorationError(
            f"square generator #{step} has legs from {cell.i}, {cell.j}; "
            f"after collapsing to {{{t.k}}} both legs must leave {t.k}"
        )
    rhoi = F(cell.rhoi_id)
    rhoj = F(cell.rhoj_id)
    return DecoratedTrivial(
        k=t.k,
        a_prime=rhoi.on_obj(t.a_prime),
        b_prime=rhoj.on_obj(t.b_prime),
        g=rhoi.on_mor(t.g),
    )


def act_rho_concat(
    F: FLookup,
    gens: Sequence[RhoGen],
    d0: Decoration,
    compose_in_apex: ComposeFn,
    *,
    config: Optional[ColimitConfig] = None,
) -> Decoration:
    """
    水平串 ρ = ρ_n ∘ … ∘ ρ_1 从左到右作用在装饰上。

    square 一旦触发，装饰变为 DecoratedTrivial：
      - 之后的 square 必须是同一 apex 上的自方块，在 apex 内继续作用；apex 不同抛 DecorationError
      - 之后的 ladder 是 no-op（strict_ladder_after_collapse 时抛 DecorationError）
    """
    cfg = config or DEFAULT_CONFIG
    d: Decoration = d0
    for step, gen in enumerate(gens):
        if gen.kind == "square":
            if isinstance(d, DecoratedTrivial):
                d = _compose_trivial(F, gen.cell, d, step)
            else:
                d = act_square(F, gen.cell, d, compose_in_apex)
        else:
            if isinstance(d, DecoratedTrivial):
                if cfg.strict_ladder_after_collapse:
                    raise DecorationError(
                        f"ladder generator #{step} applied after the decoration collapsed to {{{d.k}}}"
                    )
                _logger.warning(
                    "act_rho_concat: ladder generator #%d ignored, decoration already collapsed to {%s}",
                    step, d.k,
                )
                continue
            d = act_ladder(F, gen.cell, d)
    return d


# =============================================================================
# 4) Z_F / Z̃_F 结构外观
# =============================================================================


O = TypeVar("O")
H = TypeVar("H")
V = TypeVar("V")
C = TypeVar("C")


@dataclass(frozen=True)
class DoubleCategory(Generic[O, H, V, C]):
    objs: List[O]
    horiz: List[H]   # 水平 1-胞
    vert: List[V]    # 垂直 1-胞
    cells: List[C]   # 方块（2-胞）


@dataclass(frozen=True)
class ZigzagDouble(Generic[O, H, V, C]):
    objs: List[O]
    horiz: List[H]
    vert: List[V]
    v_cells: List[List[C]] = field(default_factory=list)


def build_zf(objs: Sequence[O], horiz: Sequence[H], vert: Sequence[V], cells: Sequence[C]) -> DoubleCategory:
    """结构化的 Z_F：对象、F-装饰 zig-zag、垂直 u*、由 Z_J 诱导的 2-胞。"""
    return DoubleCategory(objs=list(objs), horiz=list(horiz), vert=list(vert), cells=list(cells))


def zigzag_double(zf: DoubleCategory) -> ZigzagDouble:
    """Z̃_F = Z(Z_F)：同样的对象和 1-胞，垂直 2-胞为垂直 zig-zag（初始为空）。"""
    return ZigzagDouble(objs=list(zf.objs), horiz=list(zf.horiz), vert=list(zf.vert), v_cells=[])


__all__ = [
    "IDENTITY_LEG",
    "DecoratedLR",
    "DecoratedTrivial",
    "Decoration",
    "TwoCellSquare",
    "TwoCellLadder",
    "RhoGen",
    "act_square",
    "act_ladder",
    "act_rho_concat",
    "DoubleCategory",
    "ZigzagDouble",
    "build_zf",
    "zigzag_double",
]
