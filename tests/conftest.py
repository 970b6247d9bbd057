import pytest

from zigzag_colimit import (
    Diagram,
    Functor,
    IndexArrow,
    IndexingCategory,
    MorphismSpec,
    SmallCategory,
)


def _id_in(index, obj):
    return MorphismSpec.identity(obj)


def _compose_in_apex(g, f):
    """g ∘ f，恒等态射两侧吸收。"""
    if f.is_identity():
        return g
    if g.is_identity():
        return f
    return MorphismSpec(id=f"{g.id}∘{f.id}", src=f.src, dst=g.dst)


@pytest.fixture
def id_in():
    return _id_in


@pytest.fixture
def compose_in_apex():
    return _compose_in_apex


@pytest.fixture
def pushout_diagram():
    """
    A ←l— K —r→ B，K={x1,x2}，A={a1,a2}，B={b1,b2}；
    l(xi)=ai，r(xi)=bi。A 里有 f: a1 → a2，B 里有 g: b1 → b2。
    """
    J = IndexingCategory(
        objects=("K", "A", "B"),
        arrows=(IndexArrow("l", "K", "A"), IndexArrow("r", "K", "B")),
    )
    C = {
        "K": SmallCategory("K", ("x1", "x2")),
        "A": SmallCategory("A", ("a1", "a2"), (MorphismSpec("f", "a1", "a2"),)),
        "B": SmallCategory("B", ("b1", "b2"), (MorphismSpec("g", "b1", "b2"),)),
    }
    F = {
        "l": Functor.from_tables("l", "K", "A", {"x1": "a1", "x2": "a2"}),
        "r": Functor.from_tables("r", "K", "B", {"x1": "b1", "x2": "b2"}),
    }
    return Diagram(J=J, C=C, F=F)


@pytest.fixture
def bridging_diagram():
    """
    j —t→ j′，外加两个孤立的 i、h：
    C_i={a}，C_j={b}（带 u: b → b），C_j′={bp}（带 v: bp → bp），C_h={z}；t(b)=bp。
    """
    J = IndexingCategory(
        objects=("i", "j", "jp", "h"),
        arrows=(IndexArrow("t", "j", "jp"),),
    )
    C = {
        "i": SmallCategory("i", ("a",)),
        "j": SmallCategory("j", ("b",), (MorphismSpec("u", "b", "b"),)),
        "jp": SmallCategory("jp", ("bp",), (MorphismSpec("v", "bp", "bp"),)),
        "h": SmallCategory("h", ("z",)),
    }
    F = {"t": Functor.from_tables("t", "j", "jp", {"b": "bp"}, {"u": "v"})}
    return Diagram(J=J, C=C, F=F)


@pytest.fixture
def square_diagram():
    """
    i —ri→ k ←rj— j，外加 k 上的恒等箭头 id_k。
    C_i: f0, f0b: a → x；C_j: f1: y → b；C_k: m0: c0 → c1，m1: c1 → c2。
    ri 把 f0 和 f0b 都送到 m0，rj 把 f1 送到 m1。
    """
    J = IndexingCategory(
        objects=("i", "j", "k"),
        arrows=(
            IndexArrow("ri", "i", "k"),
            IndexArrow("rj", "j", "k"),
            IndexArrow("id_k", "k", "k"),
        ),
    )
    C = {
        "i": SmallCategory("i", ("a", "x"), (MorphismSpec("f0", "a", "x"), MorphismSpec("f0b", "a", "x"))),
        "j": SmallCategory("j", ("y", "b"), (MorphismSpec("f1", "y", "b"),)),
        "k": SmallCategory(
            "k", ("c0", "c1", "c2"), (MorphismSpec("m0", "c0", "c1"), MorphismSpec("m1", "c1", "c2"))
        ),
    }
    F = {
        "ri": Functor.from_tables("ri", "i", "k", {"a": "c0", "x": "c1"}, {"f0": "m0", "f0b": "m0"}),
        "rj": Functor.from_tables("rj", "j", "k", {"y": "c1", "b": "c2"}, {"f1": "m1"}),
        "id_k": Functor.identity("k", "id_k"),
    }
    return Diagram(J=J, C=C, F=F)
