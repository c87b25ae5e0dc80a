# src/rcon_core/protocols/auth.py
"""
RCON 认证握手 (Authorization Handshake)

发送一个 AUTH 包，读取恰好一个响应包。
成功条件: 响应 type == AUTH_RESPONSE 且 id == PacketId.AUTHORIZE。
不做任何重试。
"""

import logging
from typing import TYPE_CHECKING

from ..exceptions import AuthenticationError, AuthFailure, FramingError, TransportError
from .constants import PacketId, PacketType
from .packets import Packet, encode_packet, read_packet

if TYPE_CHECKING:
    from ..network import TcpTransport

logger = logging.getLogger(__name__)


def build_auth_packet(password: str, encoding: str = "utf-8") -> bytes:
    """构建认证请求包 (id=5, type=AUTH)。"""
    return encode_packet(PacketId.AUTHORIZE, PacketType.AUTH, password, encoding)


def parse_auth_response(packet: Packet) -> None:
    """校验认证响应包。

    Raises:
        AuthenticationError: 响应表示认证失败，或结构与预期不符。
    """
    if packet.packet_id == PacketId.AUTH_FAILED:
        raise AuthenticationError(AuthFailure.REJECTED)

    if packet.packet_type != PacketType.AUTH_RESPONSE:
        raise AuthenticationError(
            AuthFailure.UNEXPECTED_TYPE, f"type={packet.packet_type}"
        )

    if packet.packet_id != PacketId.AUTHORIZE:
        raise AuthenticationError(AuthFailure.UNEXPECTED_ID, f"id={packet.packet_id}")


def authorize(transport: "TcpTransport", password: str, encoding: str = "utf-8") -> None:
    """在已打开的传输上执行一次认证握手。

    Args:
        transport: 已连接的传输对象。
        password: RCON 密码。
        encoding: 密码编码。

    Raises:
        AuthenticationError: 认证失败。读取失败同样视为认证失败
            (AuthFailure.NO_RESPONSE)。
        TransportError: 认证包写入失败。
        EncodingError: 密码无法用 encoding 编码，此时尚未写出任何数据。
    """
    transport.send(build_auth_packet(password, encoding))

    try:
        response = read_packet(transport)
    except (TransportError, FramingError) as e:
        raise AuthenticationError(AuthFailure.NO_RESPONSE, str(e)) from e

    parse_auth_response(response)
    logger.debug("认证响应校验通过")
