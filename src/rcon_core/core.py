# File: src/rcon_core/core.py
"""
RCON 客户端引擎 (Client Engine)

职责：
1. 资源组装：State + Transport + Config。
2. 生命周期：Connect -> Authorize -> Command ... -> Disconnect。
3. 错误边界：将传输 / 认证 / 帧错误转化为布尔值或 None 结果，不向调用方抛出。
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from .config import RconConfig, create_config_from_dict
from .exceptions import (
    AuthenticationError,
    EncodingError,
    FramingError,
    TransportError,
)
from .network import TcpTransport
from .protocols import auth, command
from .protocols.constants import DEFAULT_CONNECT_TIMEOUT
from .state import ConnectionStatus, RconState
from .utils import sanitize_response

logger = logging.getLogger(__name__)

# 回调函数类型别名
StatusCallback = Callable[[ConnectionStatus, str], Any]


class RconClient:
    """Source / Minecraft RCON 客户端 (同步阻塞)。

    一个实例独占一条 TCP 连接，同一时刻只允许一条命令在途。
    构造时默认立即连接并认证；失败不会抛异常，可通过 is_connected()
    与 state.last_error 查看结果。
    """

    def __init__(
        self,
        config: RconConfig,
        status_callback: StatusCallback | None = None,
        auto_connect: bool = True,
    ) -> None:
        """初始化客户端。

        Args:
            config: 连接配置。
            status_callback: 初始状态回调。也可以之后用 add_listener 注册。
            auto_connect: 是否在构造时立即连接并认证。
        """
        self.config = config

        self._listeners: list[StatusCallback] = []
        if status_callback:
            self.add_listener(status_callback)

        self._state = RconState()
        self.transport = TcpTransport(config.host, config.port)

        if auto_connect:
            self.connect()

    @classmethod
    def create(
        cls,
        host: str,
        port: int,
        password: str,
        timeout: float = DEFAULT_CONNECT_TIMEOUT,
        **kwargs: Any,
    ) -> "RconClient":
        """便捷构造：直接用地址、端口、密码和连接超时创建客户端。

        Raises:
            ConfigError: 参数校验失败。
        """
        config = create_config_from_dict(
            {"host": host, "port": port, "password": password, "timeout": timeout}
        )
        return cls(config, **kwargs)

    @property
    def state(self) -> RconState:
        """获取当前会话状态的只读副本。"""
        return replace(self._state)

    def add_listener(self, callback: StatusCallback) -> None:
        """注册状态变更监听器。"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: StatusCallback) -> None:
        """移除状态变更监听器。"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def connect(self) -> bool:
        """建立连接并执行认证握手。

        已有连接会先被关闭。任何失败路径都会关闭 Socket。

        Returns:
            bool: 认证成功返回 True；连接失败或认证失败返回 False。
        """
        self.transport.close()
        self._update_status(
            ConnectionStatus.CONNECTING,
            f"正在连接 {self.config.host}:{self.config.port}...",
        )

        try:
            try:
                self.transport.open(self.config.timeout)
            except TransportError as e:
                # 与服务器响应共用同一个缓存，便于调用方直接展示
                self._state.last_response = str(e)
                self._state.last_error = str(e)
                self._update_status(ConnectionStatus.DISCONNECTED, f"连接失败: {e}")
                return False

            self._update_status(ConnectionStatus.AUTHENTICATING, "正在认证...")
            try:
                auth.authorize(
                    self.transport, self.config.password, self.config.encoding
                )
            except (AuthenticationError, TransportError, EncodingError) as e:
                if isinstance(e, TransportError):
                    self._state.last_response = str(e)
                self._state.last_error = str(e)
                self._update_status(ConnectionStatus.DISCONNECTED, f"认证失败: {e}")
                return False

            self._update_status(ConnectionStatus.AUTHORIZED, "认证成功")
            return True

        finally:
            if not self._state.authorized:
                self.transport.close()
                self._state.status = ConnectionStatus.DISCONNECTED

    def disconnect(self) -> None:
        """断开连接 (幂等)。"""
        self.transport.close()
        if self._state.status is not ConnectionStatus.DISCONNECTED:
            self._update_status(ConnectionStatus.DISCONNECTED, "已断开")

    def is_connected(self) -> bool:
        """是否已连接 **且已认证**。

        注意: 返回的是认证状态而不是 Socket 存活状态，
        已建立 TCP 但尚未通过认证的连接同样返回 False。
        """
        return self._state.authorized

    def send_command(self, cmd: str, clear_format: bool = True) -> str | None:
        """发送一条命令。

        未认证时会先尝试一次完整的重连 + 认证 (只尝试一次)。

        Args:
            cmd: 要执行的命令。
            clear_format: 是否清洗返回文本中的格式代码和不可打印字符。

        Returns:
            str: 服务器输出 (按 clear_format 清洗)。
            "": 命令已执行但服务器没有输出。
            None: 连接、认证或读写失败，错误信息见 state.last_error。
        """
        if not self.is_connected():
            logger.info("当前未认证，尝试重新连接...")
            if not self.connect():
                return None

        done = False
        try:
            text = command.execute(
                self.transport,
                cmd,
                encoding=self.config.encoding,
                trim=self.config.response_trim,
            )
            done = True
        except EncodingError as e:
            # 命令在写出前就编码失败，连接仍可继续使用
            done = True
            self._state.last_response = str(e)
            self._state.last_error = str(e)
            logger.error(f"命令编码失败: {e}")
            return None
        except (TransportError, FramingError) as e:
            self._state.last_response = str(e)
            self._state.last_error = str(e)
            logger.error(f"命令执行失败: {e}")
            return None
        finally:
            if not done:
                # 响应流已错位，不能继续复用
                self.disconnect()

        self._state.last_response = text
        if not text:
            logger.debug(f"命令无输出: {cmd!r}")
            return ""
        return self.get_response(clear_format)

    def get_response(self, clear_format: bool = True) -> str:
        """获取最近一次的响应文本。

        Args:
            clear_format: 是否清洗格式代码和不可打印字符。
        """
        if clear_format:
            return sanitize_response(self._state.last_response)
        return self._state.last_response

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    def _update_status(self, status: ConnectionStatus, msg: str) -> None:
        """更新内部状态并同步触发所有回调。"""
        self._state.status = status
        logger.info(f"[{status.name}] {msg}")

        for callback in list(self._listeners):
            try:
                callback(status, msg)
            except Exception as e:
                logger.error(f"回调执行异常: {e}")
