from __future__ import annotations

import orjson
import pytest

from tcpbridge.errors import ProtocolError
from tcpbridge.protocol import (
    ErrorEvent,
    ConnectResult,
    ConnectCommand,
    DisconnectNotice,
    DisconnectCommand,
    encode_event,
    parse_command,
)


def test_parse_connect_command() -> None:
    cmd = parse_command('{"type":"connect","host":"127.0.0.1","port":9000}')
    assert cmd == ConnectCommand(host="127.0.0.1", port=9000)
    assert cmd.address == "127.0.0.1:9000"


def test_parse_connect_strips_host_and_ignores_extra_keys() -> None:
    cmd = parse_command(b'{"type":" connect ","host":"  example.test ","port":1,"extra":true}')
    assert cmd == ConnectCommand(host="example.test", port=1)


def test_parse_disconnect_command() -> None:
    assert parse_command('{"type":"disconnect"}') == DisconnectCommand()


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        '"connect"',
        "{}",
        '{"type":""}',
        '{"type":"reboot"}',
        '{"type":"connect","port":80}',
        '{"type":"connect","host":"","port":80}',
        '{"type":"connect","host":"h"}',
        '{"type":"connect","host":"h","port":"80"}',
        '{"type":"connect","host":"h","port":true}',
        '{"type":"connect","host":"h","port":0}',
        '{"type":"connect","host":"h","port":65536}',
        '{"type":"connect","host":"h","port":80.5}',
    ],
)
def test_parse_rejects_malformed_commands(raw: str) -> None:
    with pytest.raises(ProtocolError):
        parse_command(raw)


def test_encode_connect_results() -> None:
    assert orjson.loads(encode_event(ConnectResult(ok=True))) == {"type": "connect", "ok": True, "error": None}
    assert orjson.loads(encode_event(ConnectResult(ok=False, error="Failed to connect: refused"))) == {
        "type": "connect",
        "ok": False,
        "error": "Failed to connect: refused",
    }


def test_encode_disconnect_and_error_events() -> None:
    assert orjson.loads(encode_event(DisconnectNotice(reason="client requested"))) == {
        "type": "disconnect",
        "reason": "client requested",
    }
    assert orjson.loads(encode_event(ErrorEvent("not connected"))) == {"type": "error", "message": "not connected"}
