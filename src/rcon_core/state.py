# File: src/rcon_core/state.py
"""
RCON 核心库 - 状态模块

负责定义和存储连接的易变会话状态。
本模块不包含业务逻辑，仅作为数据容器供 RconClient 读写。
"""

from dataclasses import dataclass
from enum import Enum, auto


class ConnectionStatus(Enum):
    """连接的生命周期状态枚举。

    状态流转示意:
    DISCONNECTED -> CONNECTING -> AUTHENTICATING -> AUTHORIZED
         ^              |               |
         +--------------+---------------+
    """

    DISCONNECTED = auto()
    """初始状态，或连接已关闭 (主动断开 / 认证失败 / 传输错误)。"""

    CONNECTING = auto()
    """正在建立 TCP 连接。"""

    AUTHENTICATING = auto()
    """TCP 已连接，正在等待认证响应。"""

    AUTHORIZED = auto()
    """认证成功，可以执行命令。"""


@dataclass
class RconState:
    """存储 RCON 会话的易变状态数据。

    Attributes:
        status: 当前连接状态。
        last_response: 最近一次命令返回的原始文本 (未清洗)。
            连接失败时保存底层错误文本。
        last_error: 最近一次发生的错误信息描述，用于 UI 显示。
    """

    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    last_response: str = ""
    last_error: str = ""

    @property
    def authorized(self) -> bool:
        """判断当前是否已通过认证。"""
        return self.status is ConnectionStatus.AUTHORIZED
