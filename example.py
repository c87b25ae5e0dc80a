# example.py
"""
这是一个 RconClient API 的最小示例。

它演示了如何将 rcon-core 作为一个库导入到你自己的项目中，
执行一条命令并打印清洗后的结果。

运行此示例：
1. 在根目录创建 .env 文件，写入 RCON_HOST / RCON_PORT / RCON_PASSWORD。
2. 确保已安装： pip install -e .
3. 从项目根目录运行： python example.py [命令]
"""

import logging
import sys
from pathlib import Path

from rcon_core import ConfigError, ConnectionStatus, RconClient, load_config_from_env

# 日志配置
logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("RconExample")


def on_status_change(status: ConnectionStatus, msg: str) -> None:
    print(f">>> 状态变更: {status.name} | 消息: {msg}")


def main() -> None:
    """
    程序主入口点。
    """
    cmd = " ".join(sys.argv[1:]) or "list"
    env_file = Path(__file__).resolve().parent / ".env"

    try:
        config = load_config_from_env(env_file if env_file.exists() else None)
    except ConfigError as ce:
        logger.error(f"配置错误: {ce}")
        sys.exit(1)

    # with 块结束时无论成功与否都会关闭连接
    with RconClient(config, status_callback=on_status_change) as client:
        if not client.is_connected():
            logger.error(f"连接或认证失败: {client.state.last_error}")
            sys.exit(1)

        result = client.send_command(cmd)
        if result is None:
            logger.error(f"命令执行失败: {client.state.last_error}")
        elif result == "":
            logger.info("命令已执行，服务器没有输出。")
        else:
            print(result)
            logger.debug(f"原始响应: {client.get_response(False)!r}")


if __name__ == "__main__":
    main()
