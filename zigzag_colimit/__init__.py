"""
zigzag_colimit: 小范畴图表的余极限

对象层：并查集商 colim_i Ob(C_i)
态射层：F-装饰 zig-zag 模去 Z_F 中的 2-胞，复合时在 E(ObF) 中找桥
单纯层：necklace、proper 装饰、p-箭头与其等价搜索
"""

from .config import DEFAULT_CONFIG, ColimitConfig, configure_logging
from .diagram import (
    Diagram, Functor, FunctorLike, IndexArrow, IndexingCategory, MorphismSpec, ObFDiagram, SmallCategory
)
from .double_zigzag import (
    IDENTITY_LEG,
    DecoratedLR,
    DecoratedTrivial,
    Decoration,
    DoubleCategory,
    RhoGen,
    TwoCellLadder,
    TwoCellSquare,
    ZigzagDouble,
    act_ladder,
    act_rho_concat,
    act_square,
    build_zf,
    zigzag_double,
)
from .elements import elements_graph, elements_path
from .errors import (
    BackwardTransportError,
    BridgeNotFoundError,
    ColimitError,
    ConfigError,
    DecorationError,
    DiagramError,
    EmptyChainError,
    ProperDecorationError,
    ShapeMismatchError,
    ZigZagAlignmentError,
)
from .explicit_colimit import (
    ExplicitColimitCategory, InclusionFunctor, MorRep, normalize_by_rho, normalize_chain
)
from .necklace import (
    Flag,
    Inclusion,
    Necklace,
    ProperDecoration,
    ProperHoriz,
    ZigZagInSX,
    identity_vertex_map,
    is_proper_decoration,
    joins_of,
    mk_proper_horiz,
    necklace_to_zigzag,
    push_flag,
    vertices_of,
)
from .necklace_replacement import DecoratedZigZagB, NecklaceReplacementA, necklace_replacement
from .object_quotient import ObjectQuotient, UnionFind, colim_objects, pi0_of_elements, tag
from .p_arrows import (
    PArrow, PArrowRep, bead_vertex_map, compose_p, equiv_p_arrow, gen_surjections, is_valid_p_arrow
)
from .zigzag import (
    Bead,
    LegDirection,
    RoofLeg,
    RoofSpan,
    ZigZag,
    ZigZagColimit,
    ZigZagStart,
    compose_zigzag,
    roof_arrow,
    transport_along_leg,
)

__version__ = "0.1.0"

__all__ = [
    # config
    "ColimitConfig", "DEFAULT_CONFIG", "configure_logging",
    # diagram
    "MorphismSpec", "SmallCategory", "IndexArrow", "IndexingCategory",
    "FunctorLike", "Functor", "Diagram", "ObFDiagram",
    # errors
    "ColimitError", "DiagramError", "ShapeMismatchError", "BridgeNotFoundError",
    "DecorationError", "BackwardTransportError", "ProperDecorationError",
    "ZigZagAlignmentError", "EmptyChainError", "ConfigError",
    # object quotient
    "tag", "UnionFind", "ObjectQuotient", "colim_objects", "pi0_of_elements",
    # zig-zag
    "LegDirection", "RoofLeg", "ZigZagStart", "Bead", "ZigZag", "RoofSpan",
    "transport_along_leg", "roof_arrow", "compose_zigzag", "ZigZagColimit",
    # double zig-zag
    "IDENTITY_LEG", "DecoratedLR", "DecoratedTrivial", "Decoration",
    "TwoCellSquare", "TwoCellLadder", "RhoGen",
    "act_square", "act_ladder", "act_rho_concat",
    "DoubleCategory", "ZigzagDouble", "build_zf", "zigzag_double",
    # elements bridge
    "elements_graph", "elements_path",
    # explicit colimit
    "MorRep", "normalize_by_rho", "normalize_chain", "InclusionFunctor", "ExplicitColimitCategory",
    # necklace
    "Flag", "Necklace", "vertices_of", "joins_of", "ProperDecoration", "is_proper_decoration",
    "identity_vertex_map", "push_flag", "ProperHoriz", "mk_proper_horiz",
    "Inclusion", "ZigZagInSX", "necklace_to_zigzag",
    # p-arrows
    "PArrow", "compose_p", "PArrowRep", "is_valid_p_arrow",
    "gen_surjections", "bead_vertex_map", "equiv_p_arrow",
    # necklace replacement
    "DecoratedZigZagB", "NecklaceReplacementA", "necklace_replacement",
]
