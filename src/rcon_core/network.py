# src/rcon_core/network.py
"""
RCON 核心库 - 网络模块 (Network)

封装 TCP Socket 的连接、发送、接收和关闭逻辑。
该模块屏蔽了底层 Socket 的复杂性，向协议层提供纯粹的 bytes 收发接口。
"""

import logging
import socket

from .exceptions import TransportError
from .protocols.constants import READ_TIMEOUT

logger = logging.getLogger(__name__)


class TcpTransport:
    """
    阻塞式 TCP 字节流传输。

    一个实例只由一个 RconClient 独占使用，同一时刻只允许一条命令在途。
    """

    def __init__(self, host: str, port: int, read_timeout: float = READ_TIMEOUT):
        self.host = host
        self.port = port
        self.read_timeout = read_timeout
        self.sock: socket.socket | None = None

    @property
    def is_open(self) -> bool:
        return self.sock is not None

    def open(self, connect_timeout: float) -> None:
        """
        建立 TCP 连接。

        连接阶段使用调用方指定的超时；连接成功后切换为固定的读超时。

        Raises:
            TransportError: 连接失败，消息为底层系统错误文本。
        """
        self.close()
        target = (self.host, self.port)
        try:
            self.sock = socket.create_connection(target, timeout=connect_timeout)
        except OSError as e:
            raise TransportError(str(e) or f"连接 {target} 失败") from e

        self.sock.settimeout(self.read_timeout)
        logger.debug(f"TCP 连接已建立: {target}")

    def send(self, data: bytes) -> None:
        """
        发送全部字节。

        Raises:
            TransportError: 未连接或写入失败。
        """
        if self.sock is None:
            raise TransportError("连接未建立")
        try:
            self.sock.sendall(data)
        except OSError as e:
            raise TransportError(f"发送失败: {e}") from e

    def recv_exactly(self, size: int) -> bytes:
        """
        读取恰好 size 个字节。

        流式传输可能把一个帧拆成多次到达，这里循环读取直到凑满。

        Raises:
            TransportError: 未连接、读取超时、读取失败或对端关闭连接。
        """
        if self.sock is None:
            raise TransportError("连接未建立")

        buf = bytearray()
        while len(buf) < size:
            try:
                chunk = self.sock.recv(size - len(buf))
            except socket.timeout:
                raise TransportError(f"接收超时 ({self.read_timeout}s)") from None
            except OSError as e:
                raise TransportError(f"接收错误: {e}") from e

            if not chunk:
                raise TransportError(
                    f"连接已被对端关闭 (已接收 {len(buf)}/{size} 字节)"
                )
            buf.extend(chunk)
        return bytes(buf)

    def close(self) -> None:
        """关闭连接 (幂等)"""
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError as e:
                logger.warning(f"关闭 Socket 异常: {e}")
            finally:
                self.sock = None
            logger.debug("TCP 连接已关闭")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
