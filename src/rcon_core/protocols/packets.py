# File: src/rcon_core/protocols/packets.py
"""
Source RCON 封包编解码器 (Packet Codec)

负责 Python 数据结构与二进制帧之间的转换。
帧结构 (全部为 32 位小端有符号整数):

    Size(4B) | ID(4B) | Type(4B) | Body(变长) | 0x00 | 0x00

Size 为其后所有字节的长度，不包含自身。
本模块的 encode/decode 是无状态的；read_packet 只依赖传输对象的
recv_exactly() 接口。
"""

import logging
import struct
from typing import TYPE_CHECKING, NamedTuple

from ..exceptions import EncodingError, FramingError
from . import constants

if TYPE_CHECKING:
    from ..network import TcpTransport

logger = logging.getLogger(__name__)

_SIZE = struct.Struct("<i")
_HEADER = struct.Struct("<ii")


class Packet(NamedTuple):
    """解码后的 RCON 数据包。"""

    packet_id: int
    packet_type: int
    body: bytes


def encode_packet(
    packet_id: int, packet_type: int, body: str | bytes, encoding: str = "utf-8"
) -> bytes:
    """构建一个完整的 RCON 帧 (含 Size 前缀)。

    Args:
        packet_id: 请求 ID。
        packet_type: 包类型。
        body: 包体。str 会按 encoding 编码。
        encoding: 文本编码，默认 UTF-8。

    Returns:
        bytes: 可直接写入流的字节。

    Raises:
        EncodingError: body 无法用 encoding 编码。
    """
    if isinstance(body, str):
        try:
            body = body.encode(encoding)
        except (UnicodeEncodeError, LookupError) as e:
            raise EncodingError(f"包体编码失败 ({encoding}): {e}") from e

    payload = _HEADER.pack(packet_id, packet_type) + body + constants.TERMINATOR
    return _SIZE.pack(len(payload)) + payload


def decode_packet(data: bytes) -> Packet:
    """解析 Size 字段之后的帧内容。

    Args:
        data: 长度已知的帧内容 (id + type + body + 结束符)。

    Returns:
        Packet: 解析结果。body 已去除末尾的两个结束符。

    Raises:
        FramingError: 数据不足 8 字节，无法解析 id / type。
    """
    if len(data) < constants.HEADER_LEN:
        raise FramingError(
            f"数据包长度不足: {len(data)} 字节 (至少需要 {constants.HEADER_LEN})"
        )

    packet_id, packet_type = _HEADER.unpack_from(data, 0)
    rest = data[constants.HEADER_LEN :]
    body = rest[: -len(constants.TERMINATOR)] if len(rest) >= 2 else b""
    return Packet(packet_id, packet_type, body)


def parse_size(header: bytes) -> int:
    """解析并校验 Size 字段。

    Raises:
        FramingError: Size 字段长度错误，或数值小于 id + type 的长度。
    """
    if len(header) != constants.SIZE_FIELD_LEN:
        raise FramingError(f"Size 字段长度错误: {len(header)}")

    (size,) = _SIZE.unpack(header)
    if size < constants.HEADER_LEN:
        raise FramingError(f"Size 字段无效: {size}")

    if size > constants.MAX_FRAME_LEN:
        # 多包响应不在支持范围内，仍然照常读取
        logger.warning(f"数据包超出单帧上限: {size} > {constants.MAX_FRAME_LEN}")
    return size


def read_packet(transport: "TcpTransport") -> Packet:
    """从传输流中读取一个完整的数据包。

    Raises:
        TransportError: 读取失败、超时或连接被关闭。
        FramingError: 帧结构无效。
    """
    size = parse_size(transport.recv_exactly(constants.SIZE_FIELD_LEN))
    packet = decode_packet(transport.recv_exactly(size))
    logger.debug(
        f"<- id={packet.packet_id} type={packet.packet_type} len={len(packet.body)}"
    )
    return packet
