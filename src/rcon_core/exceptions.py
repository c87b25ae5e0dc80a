# File: src/rcon_core/exceptions.py
"""
RCON 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类。
编解码层与传输层直接抛出异常；RconClient 作为边界，将其转换为布尔值 / None 结果。
"""

from enum import IntEnum


class RconError(Exception):
    """RCON 核心库所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 rcon-core 抛出的已知错误。
    """

    pass


class ConfigError(RconError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 host/password)。
    2. 字段格式错误 (如端口越界、编码名称无效)。
    3. 找不到配置文件或环境变量。
    """

    pass


class TransportError(RconError):
    """传输层错误 (I/O 级别)。

    触发场景:
    1. TCP 连接失败 (拒绝连接、DNS 解析失败、连接超时)。
    2. 读取或写入失败。
    3. 读取超时。
    4. 对端关闭连接 (EOF)。
    """

    pass


class FramingError(RconError):
    """数据帧错误 (协议结构级别)。

    触发场景:
    1. 数据包长度不足以容纳 id + type 字段。
    2. size 字段为负数或小于最小帧长度。
    """

    pass


class EncodingError(FramingError):
    """包体文本无法用配置的编码转换为字节。

    在写出任何数据之前抛出，连接的收发顺序不受影响。
    """

    pass


class AuthFailure(IntEnum):
    """RCON 认证失败原因枚举。"""

    REJECTED = 1  # 服务器返回 id = -1，密码错误
    UNEXPECTED_TYPE = 2  # 响应类型不是 AUTH_RESPONSE
    UNEXPECTED_ID = 3  # 响应 id 与认证请求 id 不一致
    NO_RESPONSE = 4  # 读取响应失败 (超时 / 断开 / 帧损坏)

    @property
    def description(self) -> str:
        """获取失败原因对应的人类可读中文描述。"""
        _DESC_MAP = {
            1: "RCON 密码错误",
            2: "认证响应类型无效",
            3: "认证响应 ID 不匹配",
            4: "未收到有效的认证响应",
        }
        return _DESC_MAP.get(self.value, f"未知认证错误 (Code: {self.value})")


class AuthenticationError(RconError):
    """认证被拒绝或认证响应无效。

    握手失败后连接会被关闭；下一次 send_command 会尝试一次完整的重连 + 重新认证。
    """

    def __init__(self, failure: AuthFailure, detail: str | None = None) -> None:
        """初始化认证错误。

        Args:
            failure: 失败原因枚举。
            detail: 附加说明 (如底层传输错误文本)。
        """
        message = failure.description
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.failure = failure
