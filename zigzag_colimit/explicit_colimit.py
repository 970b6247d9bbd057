"""
显式余极限范畴 C = colim F

    Ob(C) = colim_i Ob(C_i)        （经由 E(ObF)，见 object_quotient）
    Mor([a] → [b]) = F-装饰 zig-zag 模去 Z_F 中的 2-胞

复合：拼接两条珠链；若中间端点 (j,b) 与 (j′,b′) 不字面相等，
在 E(ObF) 中 BFS 找桥，每条边插入一个恒等装饰的珠。

相等：端点不同直接 False；否则两边逐珠作用调用者给的 ρ 串，
塌缩结果改写为退化的恒等腿珠，再做局部规范化后结构比较。
这是相对于给定生成元和规范化规则的近似判定，不是真正余极限等价关系的判定过程。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, ColimitConfig
from .diagram import Diagram, IndexId, ObFDiagram, ObjId
from .double_zigzag import (
    IDENTITY_LEG, ComposeFn, DecoratedLR, DecoratedTrivial, FLookup, RhoGen, act_rho_concat
)
from .elements import elements_path
from .errors import BridgeNotFoundError, EmptyChainError, ShapeMismatchError
from .necklace import ProperHoriz
from .object_quotient import ObjectQuotient, RepKey, colim_objects


_logger = logging.getLogger(__name__)

IdIn = Callable[[IndexId, Any], Any]


@dataclass(frozen=True)
class MorRep:
    """
    余极限态射 [a] → [b]：长度 1 装饰 zig-zag 的链（复合时拼接）。

    不变量：链非空。
    """
    src: RepKey
    dst: RepKey
    chain: Tuple[DecoratedLR, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "chain", tuple(self.chain))
        if not self.chain:
            raise EmptyChainError(f"MorRep {self.src} → {self.dst} needs at least one bead")


# =============================================================================
# 1) 规范化
# =============================================================================


def _degenerate_bead(t: DecoratedTrivial) -> DecoratedLR:
    return DecoratedLR(
        i=t.k, j=t.k, k=t.k,
        l_id=IDENTITY_LEG, r_id=IDENTITY_LEG,
        a=t.a_prime, a1=t.a_prime, b=t.b_prime,
        f0=t.g, f1=t.g,
    )


def normalize_by_rho(
    f_lookup: FLookup,
    gens: Sequence[RhoGen],
    m: MorRep,
    compose_in_apex: ComposeFn,
    *,
    config: Optional[ColimitConfig] = None,
) -> MorRep:
    """逐珠作用 ρ 串；塌缩到 {k} 的珠保留端点，把 apex 中的复合箭头同时存为 f0/f1。"""
    beads: List[DecoratedLR] = []
    for lr in m.chain:
        acted = act_rho_concat(f_lookup, gens, lr, compose_in_apex, config=config)
        if isinstance(acted, DecoratedTrivial):
            beads.append(_degenerate_bead(acted))
        else:
            beads.append(acted)
    return MorRep(src=m.src, dst=m.dst, chain=tuple(beads))


def _is_trivial_bead(lr: DecoratedLR) -> bool:
    return lr.i == lr.j == lr.k and lr.has_identity_legs() and lr.f0 == lr.f1


def normalize_chain(chain: Sequence[DecoratedLR]) -> List[DecoratedLR]:
    """
    局部规范化：
      (i)  丢弃平凡珠（i=j=k，腿都是 "id"，f0 == f1）
      (ii) 相邻两珠都只有 "id" 腿且 prev.b == bead.a 时合并，保留右侧的 f1
    """
    out: List[DecoratedLR] = []
    for bead in chain:
        if _is_trivial_bead(bead):
            continue
        if out:
            prev = out[-1]
            if prev.has_identity_legs() and bead.has_identity_legs() and prev.b == bead.a:
                out[-1] = DecoratedLR(
                    i=prev.i, j=bead.j, k=prev.k,
                    l_id=prev.l_id, r_id=prev.r_id,
                    a=prev.a, a1=prev.a1, b=bead.b,
                    f0=prev.f0, f1=bead.f1,
                )
                continue
        out.append(bead)
    return out


# =============================================================================
# 2) 外观
# =============================================================================


class InclusionFunctor:
    """φ_i: C_i → C，对象取类，态射取平凡 zig-zag {i}。"""

    def __init__(self, owner: ExplicitColimitCategory):
        self._owner = owner

    def on_obj(self, index: IndexId, obj: ObjId) -> RepKey:
        return self._owner.class_of(index, obj)

    def on_mor(self, index: IndexId, f: Any, src: ObjId, dst: ObjId, id_in: IdIn) -> MorRep:
        """f: src → dst in C_i 映为珠 (i=j=k, 腿 "id", a=src, a1=b=dst, f0=f, f1=id_dst)。"""
        lr = DecoratedLR(
            i=index, j=index, k=index,
            l_id=IDENTITY_LEG, r_id=IDENTITY_LEG,
            a=src, a1=dst, b=dst,
            f0=f, f1=id_in(index, dst),
        )
        return MorRep(src=self._owner.class_of(index, src), dst=self._owner.class_of(index, dst), chain=(lr,))


class ExplicitColimitCategory:
    """
    显式余极限范畴的外观。

    对象商在构造时计算一次并缓存；MorRep 值按需创建，查询结束即丢弃。
    """

    def __init__(self, diagram: Diagram, config: Optional[ColimitConfig] = None):
        self.diagram = diagram
        self.config = config or DEFAULT_CONFIG
        self._quotient = colim_objects(diagram)
        self.phi = InclusionFunctor(self)

    @property
    def quotient(self) -> ObjectQuotient:
        return self._quotient

    def class_of(self, index: IndexId, obj: ObjId) -> RepKey:
        return self._quotient.rep(index, obj)

    # -------------------------------------------------------------------------
    # 构造
    # -------------------------------------------------------------------------

    def mk_mor(
        self,
        src_idx: IndexId, src_obj: ObjId,
        dst_idx: IndexId, dst_obj: ObjId,
        lr: DecoratedLR,
    ) -> MorRep:
        """长度 1 的装饰 zig-zag 态射 [a] → [b]。"""
        return MorRep(src=self.class_of(src_idx, src_obj), dst=self.class_of(dst_idx, dst_obj), chain=(lr,))

    def mk_mor_from_proper(
        self,
        left_idx: IndexId, left_obj: ObjId,
        right_idx: IndexId, right_obj: ObjId,
        chain: Sequence[DecoratedLR],
        proper: Optional[ProperHoriz] = None,
    ) -> MorRep:
        """
        由 proper χ_p-装饰 necklace 上的珠链构造态射。

        给出 proper 见证时，要求 necklace 的珠数与链长一致。
        """
        if proper is not None and len(proper.necklace.beads) != len(chain):
            raise ShapeMismatchError(
                "mk_mor_from_proper",
                f"necklace has {len(proper.necklace.beads)} beads but the chain has {len(chain)}",
            )
        return MorRep(
            src=self.class_of(left_idx, left_obj),
            dst=self.class_of(right_idx, right_obj),
            chain=tuple(chain),
        )

    def id(self, index: IndexId, obj: ObjId, id_in: IdIn) -> MorRep:
        """[a] 上的恒等：代表 (i, a) 上的平凡 zig-zag {i}，装饰为 id_a。"""
        ida = id_in(index, obj)
        lr = DecoratedLR(
            i=index, j=index, k=index,
            l_id=IDENTITY_LEG, r_id=IDENTITY_LEG,
            a=obj, a1=obj, b=obj,
            f0=ida, f1=ida,
        )
        rep = self.class_of(index, obj)
        return MorRep(src=rep, dst=rep, chain=(lr,))

    # -------------------------------------------------------------------------
    # 复合
    # -------------------------------------------------------------------------

    def compose(
        self,
        m2: MorRep,
        m1: MorRep,
        *,
        id_in: IdIn,
        ob_f: Optional[ObFDiagram] = None,
    ) -> MorRep:
        """m2 ∘ m1：必要时插入 ObF-桥 (j,b) ⇒ (j′,b′)，桥上每条边一个恒等装饰珠。"""
        last1 = m1.chain[-1]
        first2 = m2.chain[0]
        left = (last1.j, last1.b)
        right = (first2.i, first2.a)

        bridge: List[DecoratedLR] = []
        if left != right:
            obf = ob_f or self.diagram.object_diagram()
            path = elements_path(obf, left, right)
            if path is None:
                raise BridgeNotFoundError(left, right)
            for (pi, pa), (qi, qa) in zip(path, path[1:]):
                bridge.append(DecoratedLR(
                    i=pi, j=qi, k=pi,
                    l_id=IDENTITY_LEG, r_id=IDENTITY_LEG,
                    a=pa, a1=pa, b=qa,
                    f0=id_in(pi, pa), f1=id_in(qi, qa),
                ))
            _logger.debug("compose: inserted %d bridge beads", len(bridge))

        return MorRep(src=m1.src, dst=m2.dst, chain=m1.chain + tuple(bridge) + m2.chain)

    # -------------------------------------------------------------------------
    # 相等
    # -------------------------------------------------------------------------

    def normalize(
        self,
        f_lookup: FLookup,
        gens: Sequence[RhoGen],
        compose_in_apex: ComposeFn,
        m: MorRep,
    ) -> List[DecoratedLR]:
        acted = normalize_by_rho(f_lookup, gens, m, compose_in_apex, config=self.config)
        return normalize_chain(acted.chain)

    def equal_modulo(
        self,
        f_lookup: FLookup,
        gens: Sequence[RhoGen],
        compose_in_apex: ComposeFn,
        g: MorRep,
        f: MorRep,
    ) -> bool:
        """模去给定 ρ 生成元判断 g == f。"""
        if g.src != f.src or g.dst != f.dst:
            return False
        gn = self.normalize(f_lookup, gens, compose_in_apex, g)
        fn = self.normalize(f_lookup, gens, compose_in_apex, f)
        return gn == fn


__all__ = [
    "IdIn",
    "MorRep",
    "normalize_by_rho",
    "normalize_chain",
    "InclusionFunctor",
    "ExplicitColimitCategory",
]
