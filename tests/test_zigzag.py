"""
Zig-zag 态射表示测试：roof 构造、腿传输、朴素复合。
"""

import pytest

from zigzag_colimit import (
    BackwardTransportError,
    DiagramError,
    LegDirection,
    MorphismSpec,
    RoofLeg,
    RoofSpan,
    ShapeMismatchError,
    ZigZagColimit,
    compose_zigzag,
    roof_arrow,
    transport_along_leg,
)


def _pushout_span(**overrides):
    params = dict(
        i="A", j="B", k="K", l_id="l", r_id="r",
        a="a1", c="x1", b="b2",
        f=MorphismSpec.identity("a1"),
        g=MorphismSpec("g", "b1", "b2"),
    )
    params.update(overrides)
    return RoofSpan(**params)


class TestTransportAlongLeg:
    def test_forward_object_and_morphism(self, pushout_diagram):
        leg = RoofLeg("l", LegDirection.FWD)
        assert transport_along_leg(pushout_diagram, leg, "x2") == ("a2", "A")
        image, at = transport_along_leg(pushout_diagram, leg, MorphismSpec.identity("x1"))
        assert image == MorphismSpec.identity("a1")
        assert at == "A"

    def test_backward_uses_unique_preimage(self, pushout_diagram):
        leg = RoofLeg("r", LegDirection.BWD)
        assert transport_along_leg(pushout_diagram, leg, "b2") == ("x2", "K")
        image, at = transport_along_leg(pushout_diagram, leg, MorphismSpec.identity("b1"))
        assert image == MorphismSpec.identity("x1")
        assert at == "K"

    def test_backward_rejects_non_identity(self, pushout_diagram):
        leg = RoofLeg("r", LegDirection.BWD)
        with pytest.raises(BackwardTransportError) as exc:
            transport_along_leg(pushout_diagram, leg, MorphismSpec("g", "b1", "b2"))
        assert exc.value.arrow_id == "r"

    def test_backward_without_preimage(self, square_diagram):
        leg = RoofLeg("ri", LegDirection.BWD)
        with pytest.raises(BackwardTransportError, match="0 preimages"):
            transport_along_leg(square_diagram, leg, "c2")


class TestRoofArrow:
    def test_roof_beads(self, pushout_diagram):
        zz = roof_arrow(pushout_diagram, _pushout_span())
        assert zz.start.at == "A"
        assert zz.start.mor == MorphismSpec.identity("a1")
        assert [b.leg for b in zz.beads] == [
            RoofLeg("l", LegDirection.BWD),
            RoofLeg("r", LegDirection.FWD),
        ]
        assert zz.beads[0].mor == MorphismSpec.identity("x1")
        assert zz.beads[1].mor == MorphismSpec("g", "b1", "b2")

    def test_roof_endpoints_are_class_reps(self, pushout_diagram):
        cc = ZigZagColimit(pushout_diagram)
        zz = cc.roof(_pushout_span())
        assert zz.src_rep == cc.class_of("A", "a1")
        assert zz.dst_rep == cc.class_of("B", "b2")
        assert zz.src_rep != zz.dst_rep

    def test_f_must_land_on_left_leg_image(self, pushout_diagram):
        with pytest.raises(DiagramError, match="f must be"):
            roof_arrow(pushout_diagram, _pushout_span(f=MorphismSpec("f", "a1", "a2")))

    def test_g_must_start_at_right_leg_image(self, pushout_diagram):
        with pytest.raises(DiagramError, match="g must be"):
            roof_arrow(pushout_diagram, _pushout_span(g=MorphismSpec.identity("b2")))

    def test_legs_must_leave_apex(self, pushout_diagram):
        with pytest.raises(DiagramError):
            roof_arrow(pushout_diagram, _pushout_span(l_id="r", r_id="l"))


class TestZigZagColimit:
    def test_reps_and_identity(self, pushout_diagram):
        cc = ZigZagColimit(pushout_diagram)
        assert len(cc.reps) == 2
        ida = cc.id("A", "a1")
        assert ida.src_rep == ida.dst_rep == cc.class_of("A", "a1")
        assert ida.beads == ()
        assert ida.start.mor == MorphismSpec.identity("a1")

    def test_compose_concatenates_beads(self, pushout_diagram):
        cc = ZigZagColimit(pushout_diagram)
        roof = cc.roof(_pushout_span())
        composed = cc.compose(cc.id("B", "b2"), roof)
        assert composed.src_rep == roof.src_rep
        assert composed.dst_rep == roof.dst_rep
        assert composed.beads == roof.beads
        assert composed.start == roof.start

    def test_compose_requires_literal_middle(self, pushout_diagram):
        cc = ZigZagColimit(pushout_diagram)
        roof = cc.roof(_pushout_span())
        with pytest.raises(ShapeMismatchError):
            compose_zigzag(pushout_diagram, roof, roof)
