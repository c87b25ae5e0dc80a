# src/rcon_core/protocols/__init__.py
"""
RCON 协议层 (Protocol Layer)

本包负责协议数据包的构建 (Build)、解析 (Parse) 以及握手 / 命令的交互流程。

- 不直接创建 socket，只通过传输对象的 send() / recv_exactly() 收发字节。
- 不包含任何会话状态 (State)。
- 不依赖于 core 层。
"""

from . import constants
from .auth import authorize, build_auth_packet, parse_auth_response
from .command import (
    build_command_packets,
    collect_response,
    execute,
    is_command_fragment,
    trim_response,
)
from .constants import PacketId, PacketType
from .packets import (
    Packet,
    decode_packet,
    encode_packet,
    parse_size,
    read_packet,
)

# 公共 API
__all__ = [
    "constants",
    "PacketId",
    "PacketType",
    "Packet",
    "encode_packet",
    "decode_packet",
    "parse_size",
    "read_packet",
    "build_auth_packet",
    "parse_auth_response",
    "authorize",
    "build_command_packets",
    "is_command_fragment",
    "collect_response",
    "trim_response",
    "execute",
]
