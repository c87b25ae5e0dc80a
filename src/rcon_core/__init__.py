# src/rcon_core/__init__.py
"""
RCON-Core v1.0.0
Source Engine / Minecraft RCON 协议的同步客户端核心库。
"""

# 暴露核心配置
from .config import (
    RconConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露客户端与状态
from .core import RconClient

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AuthenticationError,
    AuthFailure,
    EncodingError,
    ConfigError,
    FramingError,
    RconError,
    TransportError,
)
from .protocols.packets import Packet, decode_packet, encode_packet
from .state import ConnectionStatus, RconState
from .utils import sanitize_response, strip_format_codes

__version__ = "1.0.0"

__all__ = [
    "RconClient",
    "RconConfig",
    "RconState",
    "ConnectionStatus",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "Packet",
    "encode_packet",
    "decode_packet",
    "sanitize_response",
    "strip_format_codes",
    "RconError",
    "ConfigError",
    "TransportError",
    "AuthenticationError",
    "AuthFailure",
    "EncodingError",
    "FramingError",
]
