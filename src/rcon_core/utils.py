# File: src/rcon_core/utils.py
"""
RCON 核心库 - 响应文本清洗工具

Minecraft 等游戏使用 “§ + 一个字符” 作为颜色 / 样式代码。
"""

import re

FORMAT_MARKER = "\u00a7"  # §

# 标记字符后紧跟的任意一个字符 (包括换行)
_FORMAT_CODE_RE = re.compile(FORMAT_MARKER + ".", re.DOTALL)
# 可打印 ASCII 范围之外的所有字符 (控制字符 + 非 ASCII)
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7e]")


def strip_format_codes(text: str) -> str:
    """移除游戏格式代码 (§ + 一个字符)。

    Args:
        text: 原始响应文本。

    Returns:
        str: 去除格式代码后的文本，其余字符保持不变。
    """
    return _FORMAT_CODE_RE.sub("", text)


def sanitize_response(text: str) -> str:
    """清洗响应文本，只保留可打印 ASCII。

    算法逻辑:
    1. 先移除 “§ + 一个字符” 格式代码。
    2. 再移除所有控制字符 (< 0x20, 0x7F) 与非 ASCII 字符。

    结果只含可打印 ASCII，因此再次清洗不会产生变化 (幂等)。

    Args:
        text: 原始响应文本。

    Returns:
        str: 清洗后的文本。
    """
    return _NON_PRINTABLE_RE.sub("", strip_format_codes(text))
