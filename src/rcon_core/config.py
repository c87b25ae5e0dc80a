"""
RCON 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (可选 .env 文件) 或字典中加载配置。
"""

import codecs
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .exceptions import ConfigError
from .protocols.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_PORT, RESPONSE_TRIM

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RconConfig:
    """RconClient 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: RCON 服务器地址 (IP 或域名)。
        port: RCON 端口 (Minecraft 默认为 25575)。
        password: RCON 密码。
        timeout: TCP 连接超时 (秒)。连接成功后的读超时是固定值，与此无关。
        encoding: 包体文本编码。
        response_trim: 命令响应末尾固定裁掉的字节数。
    """

    host: str
    password: str
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_CONNECT_TIMEOUT
    encoding: str = "utf-8"
    response_trim: int = RESPONSE_TRIM

    def __repr__(self) -> str:
        """
        覆盖默认的 repr，隐藏密码字段，防止日志泄露敏感信息。
        """
        return (
            f"<{self.__class__.__name__} "
            f"server={self.host}:{self.port}, "
            f"password='******', "
            f"timeout={self.timeout}, "
            f"encoding='{self.encoding}'>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> RconConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        RconConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    try:
        # --- 内部辅助函数 ---
        def _req(key: str) -> Any:
            """获取必要字段，缺失则报错"""
            if key not in raw_data or raw_data[key] in (None, ""):
                raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
            return raw_data[key]

        def _get(key: str, default: Any) -> Any:
            """获取可选字段，缺失则使用默认值"""
            return raw_data.get(key, default)

        def _to_port(key: str) -> int:
            val = _get(key, DEFAULT_PORT)
            try:
                port = int(val)
            except (TypeError, ValueError):
                raise ConfigError(f"端口格式无效 '{key}': {val}")
            if not 0 < port < 65536:
                raise ConfigError(f"端口超出范围 '{key}': {port}")
            return port

        def _to_timeout(key: str) -> float:
            val = _get(key, DEFAULT_CONNECT_TIMEOUT)
            try:
                timeout = float(val)
            except (TypeError, ValueError):
                raise ConfigError(f"超时格式无效 '{key}': {val}")
            if timeout <= 0:
                raise ConfigError(f"超时必须大于 0 '{key}': {timeout}")
            return timeout

        def _to_encoding(key: str) -> str:
            val = str(_get(key, "utf-8"))
            try:
                # "hex"、"rot13" 等编解码器能被 lookup 找到，但不能用于 str.encode
                "".encode(val)
                return codecs.lookup(val).name
            except LookupError:
                raise ConfigError(f"未知编码 '{key}': {val}")

        def _to_trim(key: str) -> int:
            val = _get(key, RESPONSE_TRIM)
            try:
                trim = int(val)
            except (TypeError, ValueError):
                raise ConfigError(f"裁剪长度格式无效 '{key}': {val}")
            if trim < 0:
                raise ConfigError(f"裁剪长度不能为负 '{key}': {trim}")
            return trim

        # --- 构建对象 ---
        return RconConfig(
            host=str(_req("host")),
            password=str(_req("password")),
            port=_to_port("port"),
            timeout=_to_timeout("timeout"),
            encoding=_to_encoding("encoding"),
            response_trim=_to_trim("response_trim"),
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> RconConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [rcon]: 单服务器配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    raw_config = {}

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]

    elif "rcon" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [rcon] 节，忽略 profile='{profile}'。")
        raw_config = data["rcon"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env(env_file: Path | None = None) -> RconConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    读取所有以 `RCON_` 开头的相关环境变量，例如 `RCON_PASSWORD` -> `password`。
    如果给出 env_file，会先用 python-dotenv 将其载入环境 (不覆盖已有变量)。

    Args:
        env_file: 可选的 .env 文件路径。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: env_file 不存在，或未检测到任何相关环境变量。
    """
    if env_file is not None:
        if not env_file.exists():
            raise ConfigError(f".env 文件未找到: {env_file}")
        load_dotenv(dotenv_path=env_file, override=False)

    # 字段映射表 (Config Field -> Env Suffix)
    env_map = {
        "host": "HOST",
        "port": "PORT",
        "password": "PASSWORD",
        "timeout": "TIMEOUT",
        "encoding": "ENCODING",
        "response_trim": "RESPONSE_TRIM",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"RCON_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 RCON_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
