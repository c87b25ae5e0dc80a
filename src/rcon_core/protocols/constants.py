# src/rcon_core/protocols/constants.py
"""
Source RCON 协议常量表 (Constants)

仅定义协议的结构性常量（包 ID、包类型、帧长度）。
参考: https://developer.valvesoftware.com/wiki/Source_RCON_Protocol
"""

from enum import IntEnum


# =========================================================================
# 包 ID (Packet IDs)
# =========================================================================
class PacketId(IntEnum):
    """客户端使用的固定请求 ID"""

    AUTHORIZE = 5  # 认证请求
    COMMAND = 6  # 真实命令
    COMMAND_ENDING = 7  # 结束标记命令 (用于判断多包响应的边界)
    AUTH_FAILED = -1  # 服务器拒绝认证时回填的 ID


# =========================================================================
# 包类型 (Packet Types)
# =========================================================================
class PacketType(IntEnum):
    """协议包头部的 Type 字段定义

    注意: AUTH_RESPONSE 与 EXECCOMMAND 数值相同 (2)，
    只能依据所处阶段 (握手 / 命令) 区分。
    """

    RESPONSE_VALUE = 0  # 命令响应 (Server -> Client)
    EXECCOMMAND = 2  # 执行命令 (Client -> Server)
    AUTH_RESPONSE = 2  # 认证响应 (Server -> Client)
    AUTH = 3  # 认证请求 (Client -> Server)


# =========================================================================
# 帧结构 (Frame Structure)
# =========================================================================
SIZE_FIELD_LEN = 4
HEADER_LEN = 8  # id(4) + type(4)
TERMINATOR = b"\x00\x00"  # body 结束符 + 空字符串结束符
MIN_FRAME_LEN = HEADER_LEN + len(TERMINATOR)

# 单帧响应上限 (Valve 文档值)，超出部分不做特殊处理
MAX_FRAME_LEN = 4096

# =========================================================================
# 命令执行 (Command Execution)
# =========================================================================
COMMAND_ENDING_BODY = "ping"

# 拼接后的响应末尾固定裁掉的字节数 (经验值，未经协议验证)
RESPONSE_TRIM = 3

# =========================================================================
# 超时 (Timeouts)
# =========================================================================
DEFAULT_CONNECT_TIMEOUT = 3.0
READ_TIMEOUT = 3.0  # 连接成功后固定使用，与连接超时无关

DEFAULT_PORT = 25575
