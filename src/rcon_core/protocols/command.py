# src/rcon_core/protocols/command.py
"""
RCON 命令执行 (Command Execution)

服务器可能把一条命令的输出拆成多个 RESPONSE_VALUE 包，且全部回显同一个 id，
协议本身不标记“最后一个分片”。
因此在真实命令 (id=6) 之后立即追加一个结束标记命令 (id=7, body="ping")，
读取循环遇到第一个 id != 6 的包即认为响应结束。

已知限制:
1. 结束判定沿用 “id != 6”，而不是显式匹配标记包的 id 7。
2. 拼接结果末尾固定裁掉 RESPONSE_TRIM (3) 个字节，这是经验值，
   未经真实服务器的协议验证。
3. 单个分片超过 4096 字节的响应不做特殊处理。
"""

import logging
from typing import TYPE_CHECKING

from . import constants
from .constants import PacketId, PacketType
from .packets import Packet, encode_packet, read_packet

if TYPE_CHECKING:
    from ..network import TcpTransport

logger = logging.getLogger(__name__)


def build_command_packets(command: str, encoding: str = "utf-8") -> bytes:
    """构建 “真实命令 + 结束标记” 两个连续的数据包。"""
    return encode_packet(
        PacketId.COMMAND, PacketType.EXECCOMMAND, command, encoding
    ) + encode_packet(
        PacketId.COMMAND_ENDING,
        PacketType.EXECCOMMAND,
        constants.COMMAND_ENDING_BODY,
        encoding,
    )


def is_command_fragment(packet: Packet) -> bool:
    """判断数据包是否属于真实命令的响应分片。"""
    return (
        packet.packet_id == PacketId.COMMAND
        and packet.packet_type == PacketType.RESPONSE_VALUE
    )


def collect_response(transport: "TcpTransport") -> bytes:
    """读取并拼接命令响应分片，直到遇到第一个非分片包。

    Raises:
        TransportError: 读取失败。
        FramingError: 帧结构无效。
    """
    chunks: list[bytes] = []
    packet = read_packet(transport)
    while is_command_fragment(packet):
        chunks.append(packet.body)
        packet = read_packet(transport)

    if packet.packet_id != PacketId.COMMAND_ENDING:
        logger.debug(
            f"响应终止于非标记包: id={packet.packet_id} type={packet.packet_type}"
        )
    return b"".join(chunks)


def trim_response(raw: bytes, trim: int = constants.RESPONSE_TRIM) -> bytes:
    """裁掉响应末尾固定长度的字节。"""
    if trim <= 0:
        return raw
    return raw[:-trim]


def execute(
    transport: "TcpTransport",
    command: str,
    encoding: str = "utf-8",
    trim: int = constants.RESPONSE_TRIM,
) -> str:
    """发送一条命令并返回拼接、裁剪后的原始响应文本。

    Returns:
        str: 响应文本；服务器无输出时为空字符串。

    Raises:
        TransportError: 读写失败。
        FramingError: 帧结构无效。
        EncodingError: 命令无法用 encoding 编码，此时尚未写出任何数据。
    """
    transport.send(build_command_packets(command, encoding))
    raw = trim_response(collect_response(transport), trim)
    return raw.decode(encoding, "replace")
