# tests/test_core.py
"""
测试 RconClient 的连接生命周期、错误边界与响应缓存。
"""

from unittest.mock import MagicMock, patch

import pytest

from conftest import auth_ok, auth_rejected, ending, fragment, frame
from rcon_core import ConfigError, ConnectionStatus, RconClient
from rcon_core.config import RconConfig
from rcon_core.exceptions import TransportError
from rcon_core.protocols import auth
from rcon_core.protocols.constants import PacketId


def test_connect_with_correct_password(valid_config, fake_transport):
    fake_transport.feed(auth_ok())
    client = RconClient(valid_config)

    assert client.is_connected() is True
    assert client.state.status is ConnectionStatus.AUTHORIZED
    assert fake_transport.sent == [auth.build_auth_packet(valid_config.password)]


def test_connect_with_wrong_password(valid_config, fake_transport):
    """密码错误: 未连接，Socket 已关闭，不抛异常"""
    fake_transport.feed(auth_rejected())
    client = RconClient(valid_config)

    assert client.is_connected() is False
    assert fake_transport.is_open is False
    assert client.state.status is ConnectionStatus.DISCONNECTED
    assert "密码错误" in client.state.last_error


def test_connect_with_unexpected_auth_id(valid_config, fake_transport):
    fake_transport.feed(frame(PacketId.COMMAND, 2))
    client = RconClient(valid_config)

    assert client.is_connected() is False
    assert fake_transport.is_open is False


def test_connect_without_auth_response(valid_config, fake_transport):
    client = RconClient(valid_config)

    assert client.is_connected() is False
    assert fake_transport.is_open is False


def test_connect_transport_failure(valid_config, fake_transport):
    """连接失败时，底层错误文本被记为最近一次响应"""
    fake_transport.open_errors.append(TransportError("[Errno 111] Connection refused"))
    client = RconClient(valid_config)

    assert client.is_connected() is False
    assert client.get_response(False) == "[Errno 111] Connection refused"
    assert client.state.last_error == "[Errno 111] Connection refused"


def test_connect_auth_send_failure(valid_config, fake_transport):
    """认证包写入失败时，错误文本同样被记为最近一次响应"""
    fake_transport.send = MagicMock(side_effect=TransportError("[Errno 32] Broken pipe"))
    client = RconClient(valid_config)

    assert client.is_connected() is False
    assert fake_transport.is_open is False
    assert client.state.last_error == "[Errno 32] Broken pipe"
    assert client.get_response(False) == client.state.last_error


@pytest.mark.parametrize(
    "encoding, password",
    [
        ("ascii", "pässwörd"),
        # 绕过配置校验直接构造，"hex" 不是文本编码
        ("hex", "pw"),
    ],
)
def test_connect_password_unencodable(fake_transport, encoding, password):
    """密码无法编码时构造函数不抛异常，也不写出任何数据"""
    config = RconConfig(host="mc.example.org", password=password, encoding=encoding)
    client = RconClient(config)

    assert client.is_connected() is False
    assert fake_transport.is_open is False
    assert fake_transport.sent == []
    assert "编码" in client.state.last_error


def test_auto_connect_disabled(valid_config, fake_transport):
    client = RconClient(valid_config, auto_connect=False)

    assert fake_transport.open_calls == 0
    assert client.is_connected() is False


def test_is_connected_reports_auth_state(valid_config, fake_transport):
    """TCP 已连接但未认证时同样返回 False"""
    client = RconClient(valid_config, auto_connect=False)
    fake_transport.open(1.0)

    assert fake_transport.is_open is True
    assert client.is_connected() is False


def test_send_command_reassembles(valid_config, fake_transport):
    fake_transport.feed(
        auth_ok(),
        fragment("§6There are §c2§6 players online:\n"),
        fragment("Alex, Steve..."),
        ending(),
    )
    client = RconClient(valid_config)

    result = client.send_command("list")

    raw = "§6There are §c2§6 players online:\nAlex, Steve"
    assert result == "There are 2 players online:Alex, Steve"
    assert client.get_response(False) == raw
    assert client.get_response(True) == result


def test_send_command_without_clear_format(valid_config, fake_transport):
    fake_transport.feed(auth_ok(), fragment("§aok..."), ending())
    client = RconClient(valid_config)

    assert client.send_command("say hi", clear_format=False) == "§aok"
    assert client.get_response(True) == "ok"


def test_send_command_sends_marker_after_command(valid_config, fake_transport):
    fake_transport.feed(auth_ok(), fragment("done..."), ending())
    client = RconClient(valid_config)
    client.send_command("save-all")

    ids = [(p.packet_id, p.body) for p in fake_transport.sent_packets()]
    assert ids == [(5, b"test_password"), (6, b"save-all"), (7, b"ping")]


def test_response_cache_tracks_latest_command(valid_config, fake_transport):
    fake_transport.feed(
        auth_ok(),
        fragment("§cfirst..."),
        ending(),
        fragment("§9second..."),
        ending(),
    )
    client = RconClient(valid_config)

    client.send_command("one")
    client.send_command("two")

    assert client.get_response(False) == "§9second"
    assert client.get_response(True) == "second"


def test_send_command_empty_result(valid_config, fake_transport):
    """无输出与传输错误可以区分: "" 与 None"""
    fake_transport.feed(auth_ok(), fragment("§aprevious..."), ending(), ending())
    client = RconClient(valid_config)
    client.send_command("first")

    result = client.send_command("save-all")

    assert result == ""
    assert result is not None
    assert client.get_response(False) == ""
    assert client.is_connected() is True


def test_send_command_transport_error(valid_config, fake_transport):
    fake_transport.feed(auth_ok(), fragment("partial"))
    client = RconClient(valid_config)

    assert client.send_command("list") is None
    assert client.is_connected() is False
    assert fake_transport.is_open is False
    assert "关闭" in client.state.last_error
    assert client.get_response(False) == client.state.last_error


def test_send_command_framing_error(valid_config, fake_transport):
    fake_transport.feed(auth_ok(), b"\x02\x00\x00\x00\x06\x00")
    client = RconClient(valid_config)

    assert client.send_command("list") is None
    assert "Size" in client.state.last_error
    assert fake_transport.is_open is False


def test_send_command_unencodable_keeps_connection(valid_config, fake_transport):
    """命令无法编码时返回 None，但连接仍可继续使用"""
    fake_transport.feed(auth_ok(), fragment("§aok..."), ending())
    client = RconClient(valid_config)

    assert client.send_command("say \udc80") is None
    assert "编码" in client.state.last_error
    assert client.is_connected() is True
    assert fake_transport.is_open is True
    assert [p.packet_id for p in fake_transport.sent_packets()] == [5]

    assert client.send_command("say hi") == "ok"
    assert fake_transport.open_calls == 1


def test_send_command_reconnects_exactly_once(valid_config, fake_transport):
    """未认证时只尝试一次重连 + 认证，失败后不发送命令"""
    fake_transport.feed(auth_rejected(), auth_rejected())
    client = RconClient(valid_config)
    assert fake_transport.open_calls == 1

    assert client.send_command("list") is None

    assert fake_transport.open_calls == 2
    assert [p.packet_id for p in fake_transport.sent_packets()] == [5, 5]
    assert fake_transport.is_open is False


def test_send_command_reconnect_success(valid_config, fake_transport):
    fake_transport.open_errors.append(TransportError("timed out"))
    client = RconClient(valid_config)
    assert client.is_connected() is False

    fake_transport.feed(auth_ok(), fragment("Time is 1000..."), ending())
    assert client.send_command("time query daytime") == "Time is 1000"
    assert client.is_connected() is True
    assert fake_transport.open_calls == 2


def test_status_listeners(valid_config, fake_transport):
    fake_transport.feed(auth_ok())
    seen = []
    client = RconClient(valid_config, status_callback=lambda s, m: seen.append(s))
    client.disconnect()

    assert seen == [
        ConnectionStatus.CONNECTING,
        ConnectionStatus.AUTHENTICATING,
        ConnectionStatus.AUTHORIZED,
        ConnectionStatus.DISCONNECTED,
    ]


def test_failing_listener_is_isolated(valid_config, fake_transport):
    fake_transport.feed(auth_ok())
    bad = MagicMock(side_effect=RuntimeError("boom"))
    client = RconClient(valid_config, status_callback=bad)

    assert client.is_connected() is True
    assert bad.call_count == 3

    client.remove_listener(bad)
    client.disconnect()
    assert bad.call_count == 3


def test_disconnect_is_idempotent(valid_config, fake_transport):
    fake_transport.feed(auth_ok())
    listener = MagicMock()
    client = RconClient(valid_config)
    client.add_listener(listener)

    client.disconnect()
    client.disconnect()

    assert client.is_connected() is False
    assert fake_transport.is_open is False
    listener.assert_called_once_with(ConnectionStatus.DISCONNECTED, "已断开")


def test_context_manager_closes_transport(valid_config, fake_transport):
    fake_transport.feed(auth_ok())
    with RconClient(valid_config) as client:
        assert client.is_connected() is True

    assert fake_transport.is_open is False


def test_state_is_a_copy(valid_config, fake_transport):
    fake_transport.feed(auth_ok())
    client = RconClient(valid_config)

    snapshot = client.state
    snapshot.last_response = "tampered"
    assert client.get_response(False) == ""


def test_create_builds_config(fake_transport):
    fake_transport.feed(auth_ok())
    with patch("rcon_core.core.TcpTransport", return_value=fake_transport) as cls:
        client = RconClient.create("mc.example.org", 25575, "pw", 5)

    cls.assert_called_once_with("mc.example.org", 25575)
    assert client.config.timeout == 5.0
    assert client.is_connected() is True


def test_create_rejects_bad_port():
    with pytest.raises(ConfigError, match="端口"):
        RconClient.create("mc.example.org", 70000, "pw")
