# tests/conftest.py
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rcon_core.config import RconConfig
from rcon_core.exceptions import TransportError
from rcon_core.protocols import constants
from rcon_core.protocols.packets import decode_packet, encode_packet


class FakeTransport:
    """
    内存中的传输对象，模拟 TcpTransport 的接口。

    incoming 是服务器“将要发送”的字节流；sent 记录客户端写出的每一次 send()。
    """

    def __init__(self):
        self.incoming = bytearray()
        self.sent: list[bytes] = []
        self.is_open = False
        self.open_calls = 0
        self.open_errors: list[Exception] = []

    def feed(self, *frames: bytes) -> None:
        for f in frames:
            self.incoming.extend(f)

    def open(self, connect_timeout: float) -> None:
        self.open_calls += 1
        if self.open_errors:
            raise self.open_errors.pop(0)
        self.is_open = True

    def send(self, data: bytes) -> None:
        if not self.is_open:
            raise TransportError("连接未建立")
        self.sent.append(data)

    def recv_exactly(self, size: int) -> bytes:
        if not self.is_open:
            raise TransportError("连接未建立")
        if len(self.incoming) < size:
            raise TransportError("连接已被对端关闭")
        data = bytes(self.incoming[:size])
        del self.incoming[:size]
        return data

    def close(self) -> None:
        self.is_open = False

    def sent_packets(self):
        """把所有写出的字节重新切分为数据包"""
        stream = b"".join(self.sent)
        packets = []
        while stream:
            size = int.from_bytes(stream[:4], "little", signed=True)
            packets.append(decode_packet(stream[4 : 4 + size]))
            stream = stream[4 + size :]
        return packets


def frame(packet_id: int, packet_type: int, body: str | bytes = b"") -> bytes:
    """辅助函数：构造服务器端发出的一个完整帧"""
    return encode_packet(packet_id, packet_type, body)


def auth_ok() -> bytes:
    return frame(constants.PacketId.AUTHORIZE, constants.PacketType.AUTH_RESPONSE)


def auth_rejected() -> bytes:
    return frame(constants.PacketId.AUTH_FAILED, constants.PacketType.AUTH_RESPONSE)


def fragment(body: str | bytes) -> bytes:
    return frame(constants.PacketId.COMMAND, constants.PacketType.RESPONSE_VALUE, body)


def ending(body: str | bytes = b"") -> bytes:
    return frame(
        constants.PacketId.COMMAND_ENDING, constants.PacketType.RESPONSE_VALUE, body
    )


@pytest.fixture
def valid_config():
    """
    [Fixture] 返回一个标准的 RconConfig 对象。
    """
    return RconConfig(
        host="127.0.0.1",
        port=25575,
        password="test_password",
        timeout=1.0,
        encoding="utf-8",
        response_trim=3,
    )


@pytest.fixture
def fake_transport():
    """
    [Fixture] 用 FakeTransport 替换 RconClient 内部创建的 TcpTransport。
    """
    fake = FakeTransport()
    with patch("rcon_core.core.TcpTransport", return_value=fake):
        yield fake
