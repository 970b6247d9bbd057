"""
图表模型（Diagram Model）

数学定义：
    小范畴 J 上的图表 F: J → Cat 由以下数据给出
      - J 的对象 i 与箭头 u: i → j
      - 每个 i 一个小范畴 C_i（对象 + 态射 (id, src, dst) 三元组，不存复合表）
      - 每个箭头 u 一个函子 F(u) = ũ: C_i → C_j（对象映射 + 态射映射）

    复合只在装饰 zig-zag 内部由调用者注入的回调见证，这里不存储复合律。

不变量：
    - 每个态射的 src/dst 都是所属范畴的对象
    - 每个 J-箭头恰有一个函子，且函子的端点与箭头一致
    - 函子的对象映射落在目标范畴的对象集中

图表构造一次后不再修改；派生的查询全部只读。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any, Callable, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple
)

from .errors import DiagramError


ObjId = str
MorId = str
IndexId = str


# =============================================================================
# 1) 小范畴
# =============================================================================


@dataclass(frozen=True)
class MorphismSpec:
    """态射三元组 (id, src, dst)。"""
    id: MorId
    src: ObjId
    dst: ObjId

    @classmethod
    def identity(cls, obj: ObjId) -> MorphismSpec:
        return cls(id=f"id_{obj}", src=obj, dst=obj)

    def is_identity(self) -> bool:
        """只承认显式标记的恒等态射（id_<obj> 或 id）。"""
        if self.src != self.dst:
            return False
        return self.id == f"id_{self.src}" or self.id == "id"

    def __repr__(self) -> str:
        return f"{self.id}: {self.src} → {self.dst}"


@dataclass(frozen=True)
class SmallCategory:
    """
    有限小范畴的描述。

    Attributes:
        name: 范畴名（仅用于诊断）
        objects: 对象标识（顺序即枚举顺序）
        morphisms: 态射三元组；恒等态射隐式存在，不必列出
    """
    name: str
    objects: Tuple[ObjId, ...]
    morphisms: Tuple[MorphismSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "morphisms", tuple(self.morphisms))
        if len(set(self.objects)) != len(self.objects):
            raise DiagramError(f"Category '{self.name}' has duplicate objects: {list(self.objects)}")
        obs = set(self.objects)
        for m in self.morphisms:
            if m.src not in obs or m.dst not in obs:
                raise DiagramError(
                    f"Category '{self.name}': morphism {m!r} has an endpoint outside {sorted(obs)}"
                )

    def has_object(self, obj: ObjId) -> bool:
        return obj in self.objects

    def identity(self, obj: ObjId) -> MorphismSpec:
        if obj not in self.objects:
            raise DiagramError(f"Object {obj!r} not in category '{self.name}'")
        return MorphismSpec.identity(obj)

    def __repr__(self) -> str:
        return f"SmallCategory('{self.name}', {len(self.objects)} objects, {len(self.morphisms)} morphisms)"


# =============================================================================
# 2) 指标范畴 J
# =============================================================================


@dataclass(frozen=True)
class IndexArrow:
    """J 中的箭头 u: src → dst。"""
    id: str
    src: IndexId
    dst: IndexId


@dataclass(frozen=True)
class IndexingCategory:
    """
    指标范畴 J：有限对象集 + 有限箭头集。

    2-胞不直接存储，需要时由调用者以生成元列表的形式提供。
    """
    objects: Tuple[IndexId, ...]
    arrows: Tuple[IndexArrow, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "arrows", tuple(self.arrows))
        obs = set(self.objects)
        seen: set = set()
        for u in self.arrows:
            if u.id in seen:
                raise DiagramError(f"Duplicate arrow id in J: {u.id!r}")
            seen.add(u.id)
            if u.src not in obs or u.dst not in obs:
                raise DiagramError(f"Arrow {u.id!r}: {u.src} → {u.dst} leaves J-objects {sorted(obs)}")

    def arrow(self, arrow_id: str) -> IndexArrow:
        for u in self.arrows:
            if u.id == arrow_id:
                return u
        raise DiagramError(f"Unknown arrow in J: {arrow_id!r}")

    def arrows_from(self, index: IndexId) -> List[IndexArrow]:
        """以 index 为源的箭头，保持枚举顺序。"""
        return [u for u in self.arrows if u.src == index]


# =============================================================================
# 3) 函子
# =============================================================================


class FunctorLike(Protocol):
    """任何带 on_obj/on_mor 的对象都可以充当 ρ̃。"""

    def on_obj(self, o: Any) -> Any: ...

    def on_mor(self, m: Any) -> Any: ...


@dataclass(frozen=True)
class Functor:
    """
    函子 F(u) = ũ: C_src → C_dst（u: src → dst in J）。

    on_obj / on_mor 是调用者提供的回调；态射的具体类型由调用者决定。
    """
    id: str
    src: IndexId
    dst: IndexId
    on_obj: Callable[[Any], Any]
    on_mor: Callable[[Any], Any]

    @classmethod
    def from_tables(
        cls,
        arrow_id: str,
        src: IndexId,
        dst: IndexId,
        obj_map: Mapping[ObjId, ObjId],
        mor_map: Optional[Mapping[MorId, MorId]] = None,
    ) -> Functor:
        """
        由有限对象表和态射表构造函子。

        态射表只需覆盖非恒等态射；恒等态射 id_o 自动映到 id_{ũ(o)}。
        表中缺失的键视为调用者错误，抛出 DiagramError。
        """
        objs = dict(obj_map)
        mors = dict(mor_map or {})

        def _on_obj(o: ObjId) -> ObjId:
            if o not in objs:
                raise DiagramError(f"Functor '{arrow_id}': no image for object {o!r}")
            return objs[o]

        def _on_mor(m: MorphismSpec) -> MorphismSpec:
            if m.is_identity():
                return MorphismSpec.identity(_on_obj(m.src))
            if m.id not in mors:
                raise DiagramError(f"Functor '{arrow_id}': no image for morphism {m!r}")
            return MorphismSpec(id=mors[m.id], src=_on_obj(m.src), dst=_on_obj(m.dst))

        return cls(id=arrow_id, src=src, dst=dst, on_obj=_on_obj, on_mor=_on_mor)

    @classmethod
    def identity(cls, index: IndexId, arrow_id: str = "id") -> Functor:
        return cls(id=arrow_id, src=index, dst=index, on_obj=lambda o: o, on_mor=lambda m: m)


# =============================================================================
# 4) 图表
# =============================================================================


@dataclass(frozen=True, eq=False)
class Diagram:
    """
    图表 F: J → Cat。

    Attributes:
        J: 指标范畴
        C: J-对象 → 小范畴
        F: J-箭头 id → 函子
    """
    J: IndexingCategory
    C: Mapping[IndexId, SmallCategory]
    F: Mapping[str, Functor] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "C", dict(self.C))
        object.__setattr__(self, "F", dict(self.F))
        for i in self.J.objects:
            if i not in self.C:
                raise DiagramError(f"No category given for J-object {i!r}")
        for u in self.J.arrows:
            if u.id not in self.F:
                raise DiagramError(f"No functor given for arrow {u.id!r}: {u.src} → {u.dst}")
            fun = self.F[u.id]
            if fun.src != u.src or fun.dst != u.dst:
                raise DiagramError(
                    f"Functor '{u.id}' is {fun.src} → {fun.dst} but the arrow is {u.src} → {u.dst}"
                )
            target = self.C[u.dst]
            for o in self.C[u.src].objects:
                image = fun.on_obj(o)
                if not target.has_object(image):
                    raise DiagramError(
                        f"Functor '{u.id}' sends {u.src}::{o} to {image!r}, which is not an object of {u.dst}"
                    )

    def category(self, index: IndexId) -> SmallCategory:
        if index not in self.C:
            raise DiagramError(f"Unknown J-object: {index!r}")
        return self.C[index]

    def functor(self, arrow_id: str) -> Functor:
        if arrow_id not in self.F:
            raise DiagramError(f"Unknown J-arrow: {arrow_id!r}")
        return self.F[arrow_id]

    def functor_lookup(self, arrow_id: str) -> Functor:
        """F(uId) 查找，可直接作为 Flookup 回调传给 2-胞作用。"""
        return self.functor(arrow_id)

    def object_diagram(self) -> ObFDiagram:
        """对象层图表 ObF：J + 每个 i 的 Ob_i + 每个箭头的对象映射 ũ。"""
        return ObFDiagram(
            J=self.J,
            ob={i: self.C[i].objects for i in self.J.objects},
            u_obj={u.id: self.F[u.id].on_obj for u in self.J.arrows},
        )


@dataclass(frozen=True, eq=False)
class ObFDiagram:
    """
    对象层图表 ObF: J → Set。

    Attributes:
        J: 指标范畴
        ob: J-对象 → 对象集 Ob_i
        u_obj: J-箭头 id → 对象映射 ũ
    """
    J: IndexingCategory
    ob: Mapping[IndexId, Sequence[ObjId]]
    u_obj: Mapping[str, Callable[[ObjId], ObjId]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ob", {i: tuple(xs) for i, xs in self.ob.items()})
        object.__setattr__(self, "u_obj", dict(self.u_obj))
        for u in self.J.arrows:
            if u.id not in self.u_obj:
                raise DiagramError(f"ObF: no object map for arrow {u.id!r}")
        for i in self.J.objects:
            if i not in self.ob:
                raise DiagramError(f"ObF: no object set for J-object {i!r}")

    def elements(self) -> Iterator[Tuple[IndexId, ObjId]]:
        """范畴 E(ObF) 的全部元素 (i, a)，按 J-对象顺序再按 Ob_i 顺序。"""
        for i in self.J.objects:
            for a in self.ob[i]:
                yield (i, a)


__all__ = [
    "ObjId",
    "MorId",
    "IndexId",
    "MorphismSpec",
    "SmallCategory",
    "IndexArrow",
    "IndexingCategory",
    "FunctorLike",
    "Functor",
    "Diagram",
    "ObFDiagram",
]
