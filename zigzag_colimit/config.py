"""
配置与日志

ColimitConfig 控制两处可选行为：
  - 塌缩后再遇到 ladder 生成元时是静默跳过还是抛错
  - equiv_p_arrow 穷举满射时的可选上限

环境变量读取是严格的：非法值必须抛异常（部署/配置错误），不得静默降级。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import ConfigError


_ENV_PREFIX = "ZIGZAG_COLIMIT_"
_LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE_WORDS: Tuple[str, ...] = ("1", "TRUE", "YES", "ON")
_FALSE_WORDS: Tuple[str, ...] = ("0", "FALSE", "NO", "OFF")


def _env_strict_enum(name: str, *, allowed: Tuple[str, ...], default: str) -> str:
    """
    Read an env var as an enum-like string with strict validation.
    """
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return str(default)
    val = str(raw).strip().upper()
    if val not in allowed:
        raise ConfigError(f"{name} must be one of {list(allowed)}, got {raw!r}")
    return val


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return None
    try:
        return int(str(raw).strip(), 10)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer (base-10), got {raw!r}") from e


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return bool(default)
    val = str(raw).strip().upper()
    if val in _TRUE_WORDS:
        return True
    if val in _FALSE_WORDS:
        return False
    raise ConfigError(f"{name} must be a boolean word {list(_TRUE_WORDS + _FALSE_WORDS)}, got {raw!r}")


@dataclass(frozen=True)
class ColimitConfig:
    """
    余极限引擎配置。

    strict_ladder_after_collapse:
        False（默认）：square 塌缩之后的 ladder 生成元是 no-op（记录 WARNING）。
        True：抛出 DecorationError。
    max_surjections:
        None 表示穷举全部单调满射；否则最多检查这么多个候选，
        达到上限后返回 False 并记录 WARNING。
    log_level:
        configure_logging 使用的级别名。
    """
    strict_ladder_after_collapse: bool = False
    max_surjections: Optional[int] = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.max_surjections is not None and self.max_surjections <= 0:
            raise ConfigError(f"max_surjections must be positive or None, got {self.max_surjections}")
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {list(_LOG_LEVELS)}, got {self.log_level!r}")

    @classmethod
    def from_env(cls) -> ColimitConfig:
        """从 ZIGZAG_COLIMIT_* 环境变量构造配置。"""
        return cls(
            strict_ladder_after_collapse=_env_bool(f"{_ENV_PREFIX}STRICT_LADDER", default=False),
            max_surjections=_env_optional_int(f"{_ENV_PREFIX}MAX_SURJECTIONS"),
            log_level=_env_strict_enum(f"{_ENV_PREFIX}LOG_LEVEL", allowed=_LOG_LEVELS, default="WARNING"),
        )


DEFAULT_CONFIG = ColimitConfig()


def configure_logging(config: Optional[ColimitConfig] = None) -> None:
    """健康日志输出：只在未配置 handler 时注入默认配置，避免污染宿主应用。"""
    cfg = config or DEFAULT_CONFIG
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=cfg.log_level,
            format="[%(levelname)s] %(name)s: %(message)s",
        )
    logging.getLogger("zigzag_colimit").setLevel(cfg.log_level)


__all__ = [
    "ColimitConfig",
    "DEFAULT_CONFIG",
    "configure_logging",
]
