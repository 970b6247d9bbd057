"""
Zig-zag 态射表示

余极限中的态射 [a] → [b] 用 roof 表示：
    i ←l— k —r→ j,   f: a → l̃(c) in C_i,   g: r̃(c) → b in C_j

ZigZag = 起始态射 + 珠序列，每个珠是一条跨 J-箭头的腿（fwd/bwd）加上
住在该腿所在范畴里的一个态射。复合就是拼接，前提是中间代表元字面相等；
等价但不相等的端点由上一层（explicit_colimit）用 E(ObF) 的桥解决。

反向腿只允许恒等使用：反向传输只接受对象和恒等态射，
并且要求对象在腿的对象映射下有唯一原像。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from .diagram import Diagram, IndexId, MorphismSpec, ObjId
from .errors import BackwardTransportError, DiagramError, ShapeMismatchError
from .object_quotient import ObjectQuotient, RepKey, colim_objects, tag


_logger = logging.getLogger(__name__)


class LegDirection(Enum):
    FWD = "fwd"   # i → j，应用 ũ
    BWD = "bwd"   # j → i，沿腿反向走


@dataclass(frozen=True)
class RoofLeg:
    """由函子 ũ 沿 u 给出的一条腿。"""
    arrow_id: str
    direction: LegDirection


@dataclass(frozen=True)
class ZigZagStart:
    at: IndexId
    mor: MorphismSpec


@dataclass(frozen=True)
class Bead:
    leg: RoofLeg
    mor: MorphismSpec


@dataclass(frozen=True)
class ZigZag:
    """
    代表元之间的 necklace/zig-zag 见证 [a] → [b]。

    Attributes:
        src_rep: 源类代表元（如 "i::a"）
        dst_rep: 目标类代表元
        start: C_{i0} 中的起始态射 f0
        beads: (leg, f_k) 序列
    """
    src_rep: RepKey
    dst_rep: RepKey
    start: ZigZagStart
    beads: Tuple[Bead, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "beads", tuple(self.beads))


@dataclass(frozen=True)
class RoofSpan:
    """
    roof 参数：l: k → i, r: k → j in J，
    a ∈ C_i, c ∈ C_k, b ∈ C_j，f: a → l̃(c) in C_i，g: r̃(c) → b in C_j。
    """
    i: IndexId
    j: IndexId
    k: IndexId
    l_id: str
    r_id: str
    a: ObjId
    c: ObjId
    b: ObjId
    f: MorphismSpec
    g: MorphismSpec


def transport_along_leg(
    diagram: Diagram,
    leg: RoofLeg,
    x: Union[ObjId, MorphismSpec],
) -> Tuple[Union[ObjId, MorphismSpec], IndexId]:
    """
    沿一条腿传输对象或态射，返回 (像, 落脚的 J-对象)。

    fwd: x 住在 C_src，结果住在 C_dst。
    bwd: x 住在 C_dst，结果是 C_src 中的唯一原像；只接受对象和恒等态射。
    """
    u = diagram.J.arrow(leg.arrow_id)
    fun = diagram.functor(leg.arrow_id)
    if leg.direction is LegDirection.FWD:
        if isinstance(x, MorphismSpec):
            return fun.on_mor(x), u.dst
        return fun.on_obj(x), u.dst

    if isinstance(x, MorphismSpec):
        if not x.is_identity():
            raise BackwardTransportError(
                leg.arrow_id, f"cannot transport non-identity morphism {x!r} backwards"
            )
        pre = _unique_preimage(diagram, leg.arrow_id, x.src)
        return MorphismSpec.identity(pre), u.src
    return _unique_preimage(diagram, leg.arrow_id, x), u.src


def _unique_preimage(diagram: Diagram, arrow_id: str, obj: ObjId) -> ObjId:
    u = diagram.J.arrow(arrow_id)
    fun = diagram.functor(arrow_id)
    pre = [o for o in diagram.category(u.src).objects if fun.on_obj(o) == obj]
    if len(pre) != 1:
        raise BackwardTransportError(
            arrow_id, f"object {tag(u.dst, obj)} has {len(pre)} preimages in {u.src}, need exactly one"
        )
    return pre[0]


def roof_arrow(
    diagram: Diagram,
    span: RoofSpan,
    quotient: Optional[ObjectQuotient] = None,
) -> ZigZag:
    """由 roof i ← k → j 构造态射；第一个珠是过 l 的反向腿（携带 id_c），第二个珠是过 r 的正向腿。"""
    l = diagram.J.arrow(span.l_id)
    r = diagram.J.arrow(span.r_id)
    if (l.src, l.dst) != (span.k, span.i):
        raise DiagramError(f"roof_arrow: leg {l.id!r} is {l.src} → {l.dst}, expected {span.k} → {span.i}")
    if (r.src, r.dst) != (span.k, span.j):
        raise DiagramError(f"roof_arrow: leg {r.id!r} is {r.src} → {r.dst}, expected {span.k} → {span.j}")

    lc = diagram.functor(span.l_id).on_obj(span.c)
    rc = diagram.functor(span.r_id).on_obj(span.c)
    if (span.f.src, span.f.dst) != (span.a, lc):
        raise DiagramError(f"roof_arrow: f must be {span.a} → {lc} in {span.i}, got {span.f!r}")
    if (span.g.src, span.g.dst) != (rc, span.b):
        raise DiagramError(f"roof_arrow: g must be {rc} → {span.b} in {span.j}, got {span.g!r}")

    q = quotient or colim_objects(diagram)
    return ZigZag(
        src_rep=q.rep(span.i, span.a),
        dst_rep=q.rep(span.j, span.b),
        start=ZigZagStart(at=span.i, mor=span.f),
        beads=(
            Bead(leg=RoofLeg(span.l_id, LegDirection.BWD), mor=MorphismSpec.identity(span.c)),
            Bead(leg=RoofLeg(span.r_id, LegDirection.FWD), mor=span.g),
        ),
    )


def compose_zigzag(diagram: Diagram, g: ZigZag, f: ZigZag) -> ZigZag:
    """g ∘ f：要求 f.dst_rep 与 g.src_rep 字面相等（不是等价意义下）。"""
    if f.dst_rep != g.src_rep:
        raise ShapeMismatchError(
            "compose_zigzag",
            f"middle representatives don't match: {f.dst_rep!r} vs {g.src_rep!r}",
        )
    return ZigZag(
        src_rep=f.src_rep,
        dst_rep=g.dst_rep,
        start=f.start,
        beads=f.beads + g.beads,
    )


class ZigZagColimit:
    """
    余极限范畴的朴素外观：对象代表元 + zig-zag 箭头。

    不做规范化，也不插桥；需要这些时用 ExplicitColimitCategory。
    """

    def __init__(self, diagram: Diagram):
        self.diagram = diagram
        self._quotient = colim_objects(diagram)

    @property
    def quotient(self) -> ObjectQuotient:
        return self._quotient

    @property
    def reps(self) -> List[RepKey]:
        return self._quotient.reps

    def class_of(self, index: IndexId, obj: ObjId) -> RepKey:
        return self._quotient.rep(index, obj)

    def id(self, index: IndexId, obj: ObjId) -> ZigZag:
        rep = self.class_of(index, obj)
        return ZigZag(
            src_rep=rep,
            dst_rep=rep,
            start=ZigZagStart(at=index, mor=self.diagram.category(index).identity(obj)),
            beads=(),
        )

    def roof(self, span: RoofSpan) -> ZigZag:
        return roof_arrow(self.diagram, span, self._quotient)

    def compose(self, g: ZigZag, f: ZigZag) -> ZigZag:
        return compose_zigzag(self.diagram, g, f)


__all__ = [
    "LegDirection",
    "RoofLeg",
    "ZigZagStart",
    "Bead",
    "ZigZag",
    "RoofSpan",
    "transport_along_leg",
    "roof_arrow",
    "compose_zigzag",
    "ZigZagColimit",
]
