"""
2-胞作用测试

square 把 (l, r) 塌缩到 {k}；ladder 重标腿；两者都是纯函数。
"""

import logging

import pytest

from zigzag_colimit import (
    ColimitConfig,
    DecoratedLR,
    DecoratedTrivial,
    DecorationError,
    Functor,
    MorphismSpec,
    RhoGen,
    TwoCellLadder,
    TwoCellSquare,
    act_ladder,
    act_rho_concat,
    act_square,
    build_zf,
    zigzag_double,
)


SQUARE = TwoCellSquare(i="i", j="j", k="k", rhoi_id="ri", rhoj_id="rj")
SQUARE_ON_K = TwoCellSquare(i="k", j="k", k="k", rhoi_id="id_k", rhoj_id="id_k")
LADDER = TwoCellLadder(
    i="i", j1="i", j="j",
    i_prime="k", j1_prime="k", j_prime="k",
    l_id="l", r_id="r", l_prime_id="id", r_prime_id="id",
    rhoi_id="ri", rhoj1_id="ri", rhoj_id="rj",
)


def _bead(f0="f0"):
    return DecoratedLR(
        i="i", j="j", k="i", l_id="l", r_id="r",
        a="a", a1="x", b="b",
        f0=MorphismSpec(f0, "a", "x"),
        f1=MorphismSpec("f1", "y", "b"),
    )


class TestActSquare:
    def test_square_collapses_to_apex(self, square_diagram, compose_in_apex):
        out = act_square(square_diagram.functor_lookup, SQUARE, _bead(), compose_in_apex)
        assert out == DecoratedTrivial(
            k="k", a_prime="c0", b_prime="c2", g=MorphismSpec("m1∘m0", "c0", "c2")
        )

    def test_square_does_not_mutate_input(self, square_diagram, compose_in_apex):
        bead = _bead()
        act_square(square_diagram.functor_lookup, SQUARE, bead, compose_in_apex)
        assert bead == _bead()


class TestActLadder:
    def test_ladder_relabels_everything(self, square_diagram):
        out = act_ladder(square_diagram.functor_lookup, LADDER, _bead())
        assert out == DecoratedLR(
            i="k", j="k", k="k", l_id="id", r_id="id",
            a="c0", a1="c1", b="c2",
            f0=MorphismSpec("m0", "c0", "c1"),
            f1=MorphismSpec("m1", "c1", "c2"),
        )


class TestActRhoConcat:
    def test_empty_string_is_identity(self, square_diagram, compose_in_apex):
        bead = _bead()
        assert act_rho_concat(square_diagram.functor_lookup, [], bead, compose_in_apex) is bead

    def test_ladder_then_square(self, square_diagram, compose_in_apex):
        gens = [RhoGen.ladder(LADDER), RhoGen.square(SQUARE_ON_K)]
        out = act_rho_concat(square_diagram.functor_lookup, gens, _bead(), compose_in_apex)
        assert out == DecoratedTrivial(
            k="k", a_prime="c0", b_prime="c2", g=MorphismSpec("m1∘m0", "c0", "c2")
        )

    def test_identity_square_after_collapse_keeps_decoration(self, square_diagram, compose_in_apex):
        gens = [RhoGen.square(SQUARE), RhoGen.square(SQUARE_ON_K)]
        once = act_rho_concat(square_diagram.functor_lookup, gens[:1], _bead(), compose_in_apex)
        twice = act_rho_concat(square_diagram.functor_lookup, gens, _bead(), compose_in_apex)
        assert twice == once

    def test_second_square_into_other_apex_raises(self, square_diagram, compose_in_apex):
        k_to_m = TwoCellSquare(i="k", j="k", k="m", rhoi_id="km", rhoj_id="km")
        gens = [RhoGen.square(SQUARE), RhoGen.square(k_to_m)]
        with pytest.raises(DecorationError, match=r"collapses to \{m\}.*already collapsed to \{k\}"):
            act_rho_concat(square_diagram.functor_lookup, gens, _bead(), compose_in_apex)

    def test_second_square_with_foreign_legs_raises(self, square_diagram, compose_in_apex):
        gens = [RhoGen.square(SQUARE), RhoGen.square(SQUARE)]
        with pytest.raises(DecorationError, match="both legs must leave k"):
            act_rho_concat(square_diagram.functor_lookup, gens, _bead(), compose_in_apex)

    def test_endo_square_transports_within_apex(self, square_diagram):
        shift = {"c0": "c1", "c1": "c2", "c2": "c2"}
        sk = Functor(
            id="sk", src="k", dst="k",
            on_obj=lambda o: shift[o],
            on_mor=lambda m: MorphismSpec(m.id + "'", shift[m.src], shift[m.dst]),
        )
        lookup = lambda uid: sk if uid == "sk" else square_diagram.functor_lookup(uid)
        calls = []

        def compose(g, f):
            calls.append((g, f))
            return MorphismSpec(f"{g.id}∘{f.id}", f.src, g.dst)

        endo = TwoCellSquare(i="k", j="k", k="k", rhoi_id="sk", rhoj_id="sk")
        out = act_rho_concat(lookup, [RhoGen.square(SQUARE), RhoGen.square(endo)], _bead(), compose)
        assert out == DecoratedTrivial(
            k="k", a_prime="c1", b_prime="c2", g=MorphismSpec("m1∘m0'", "c1", "c2")
        )
        assert len(calls) == 1

    def test_ladder_after_collapse_is_ignored_with_warning(self, square_diagram, compose_in_apex, caplog):
        gens = [RhoGen.square(SQUARE), RhoGen.ladder(LADDER)]
        with caplog.at_level(logging.WARNING, logger="zigzag_colimit"):
            out = act_rho_concat(square_diagram.functor_lookup, gens, _bead(), compose_in_apex)
        assert isinstance(out, DecoratedTrivial)
        assert out.g == MorphismSpec("m1∘m0", "c0", "c2")
        assert "ladder generator #1 ignored" in caplog.text

    def test_ladder_after_collapse_strict(self, square_diagram, compose_in_apex):
        gens = [RhoGen.square(SQUARE), RhoGen.ladder(LADDER)]
        strict = ColimitConfig(strict_ladder_after_collapse=True)
        with pytest.raises(DecorationError, match="after the decoration collapsed"):
            act_rho_concat(square_diagram.functor_lookup, gens, _bead(), compose_in_apex, config=strict)


class TestRhoGen:
    def test_kind_must_match_cell(self):
        with pytest.raises(DecorationError):
            RhoGen(kind="square", cell=LADDER)
        with pytest.raises(DecorationError):
            RhoGen(kind="ladder", cell=SQUARE)

    def test_constructors(self):
        assert RhoGen.square(SQUARE).kind == "square"
        assert RhoGen.ladder(LADDER).kind == "ladder"


class TestDoubleCategoryFacades:
    def test_zigzag_double_keeps_cells_and_starts_empty(self):
        zf = build_zf(["i::a"], [_bead()], ["u*"], [SQUARE])
        assert zf.cells == [SQUARE]
        zd = zigzag_double(zf)
        assert zd.objs == zf.objs
        assert zd.horiz == zf.horiz
        assert zd.vert == zf.vert
        assert zd.v_cells == []
