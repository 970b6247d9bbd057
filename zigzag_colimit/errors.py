"""
范畴余极限引擎异常系统

所有失败都是立即、同步的：要么完整构造并返回不可变值，要么抛出异常，
不留下部分状态。包内不捕获、不吞掉任何异常。
"""

from __future__ import annotations

from typing import Any, Optional, Tuple


class ColimitError(Exception):
    """余极限模块总异常基类。"""


class DiagramError(ColimitError):
    """图表输入不合法（态射端点不是对象、箭头缺函子、对象映射越界等）。"""


class ShapeMismatchError(ColimitError):
    """不可复合的一对：端点既不字面相等，也没有可用的桥。"""

    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"{operation}: {details}")


class BridgeNotFoundError(ShapeMismatchError):
    """E(ObF) 中找不到连接 (j,b) 与 (j′,b′) 的路径。"""

    def __init__(self, left: Tuple[str, Any], right: Tuple[str, Any]):
        self.left = left
        self.right = right
        super().__init__(
            "compose",
            f"No ObF-bridge found from ({left[0]},{left[1]}) to ({right[0]},{right[1]})",
        )


class DecorationError(ColimitError):
    """2-胞生成元与当前装饰不匹配。"""


class BackwardTransportError(ColimitError):
    """反向腿只允许恒等使用；非恒等态射或无唯一原像的对象不能反向传输。"""

    def __init__(self, arrow_id: str, details: str):
        self.arrow_id = arrow_id
        self.details = details
        super().__init__(f"Backward leg '{arrow_id}': {details}")


class ProperDecorationError(ColimitError):
    """装饰不是 proper（J_N ⊄ U0 或旗长度不等于 p+1）。"""

    def __init__(self, missing_joins: Tuple[int, ...], details: Optional[str] = None):
        self.missing_joins = missing_joins
        msg = details or f"joins {list(missing_joins)} not contained in U0"
        super().__init__(f"Improper decoration: {msg}")


class ZigZagAlignmentError(ColimitError):
    """装饰 zig-zag 的单纯形、顶点、p-箭头长度不对齐。"""


class EmptyChainError(ColimitError):
    """MorRep 的珠链不能为空。"""


class ConfigError(ColimitError):
    """配置值不合法（构造参数或环境变量）。"""


__all__ = [
    "ColimitError",
    "DiagramError",
    "ShapeMismatchError",
    "BridgeNotFoundError",
    "DecorationError",
    "BackwardTransportError",
    "ProperDecorationError",
    "ZigZagAlignmentError",
    "EmptyChainError",
    "ConfigError",
]
