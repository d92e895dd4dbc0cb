from __future__ import annotations

import pytest

from mcprelay.config import (
    RelayConfig,
    load_config_file,
    parse_headers_json,
    parse_transport,
)
from mcprelay.exceptions import RelayConfigError
from mcprelay.types import (
    DEFAULT_RECONNECT_DELAY,
    DEFAULT_URL,
    TransportMode,
)


class TestRelayConfig:

    def test_defaults(self):
        config = RelayConfig()
        assert config.url == DEFAULT_URL
        assert config.transport is TransportMode.HTTP
        assert config.headers == {}
        assert config.debug is False
        assert config.log_file is None
        assert config.reconnect_delay == DEFAULT_RECONNECT_DELAY
        assert config.log_level == "INFO"

    def test_transport_given_as_text(self):
        assert (
            RelayConfig(transport="sse").transport
            is TransportMode.SSE
        )

    def test_debug_raises_log_level(self):
        assert RelayConfig(debug=True).log_level == "DEBUG"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"url": ""},
            {"transport": "websocket"},
            {"headers": ["Authorization"]},
            {"headers": {"X-Retries": 3}},
            {"headers": {"X-Trace": "a\r\nb"}},
            {"debug": "yes"},
            {"reconnect_delay": -1},
            {"reconnect_delay": True},
        ],
    )
    def test_invalid_values_are_rejected(self, kwargs):
        with pytest.raises(RelayConfigError):
            RelayConfig(**kwargs)

    def test_merged_with_skips_none(self):
        base = RelayConfig(
            url="http://a.example/mcp",
            headers={"X-Team": "core"},
        )
        merged = base.merged_with(
            url=None, transport="sse", headers=None
        )
        assert merged.url == "http://a.example/mcp"
        assert merged.transport is TransportMode.SSE
        assert merged.headers == {"X-Team": "core"}
        assert base.transport is TransportMode.HTTP

    def test_merged_with_rejects_unknown_keys(self):
        with pytest.raises(RelayConfigError, match="timeout"):
            RelayConfig().merged_with(timeout=3)


class TestParseTransport:

    def test_known_modes(self):
        assert parse_transport("http") is TransportMode.HTTP
        assert parse_transport(TransportMode.SSE) is TransportMode.SSE

    def test_unknown_mode_message(self):
        with pytest.raises(RelayConfigError) as exc_info:
            parse_transport("grpc")
        assert str(exc_info.value) == (
            "Invalid transport mode: grpc (must be 'http' or 'sse')"
        )


class TestParseHeadersJson:

    def test_object(self):
        assert parse_headers_json(
            '{"Authorization": "Bearer abc", "X-Trace": "1"}'
        ) == {"Authorization": "Bearer abc", "X-Trace": "1"}

    @pytest.mark.parametrize("text", [None, ""])
    def test_missing_means_no_headers(self, text):
        assert parse_headers_json(text) == {}

    def test_malformed_json(self):
        with pytest.raises(
            RelayConfigError, match="Failed to parse headers JSON"
        ):
            parse_headers_json("{Authorization: x}")

    @pytest.mark.parametrize(
        "text", ['["Authorization"]', '{"X-Retries": 3}']
    )
    def test_non_string_mapping(self, text):
        with pytest.raises(RelayConfigError):
            parse_headers_json(text)

    @pytest.mark.parametrize(
        "text",
        [
            '{"X-Trace": "a\\r\\nInjected: b"}',
            '{"X-Trace": "a\\nb"}',
            '{"X-Trace": "a\\u0000b"}',
            '{"X Trace": "a"}',
            '{"X-Trace:": "a"}',
            '{"": "a"}',
        ],
    )
    def test_unsendable_headers_are_rejected(self, text):
        with pytest.raises(RelayConfigError):
            parse_headers_json(text)

    def test_tab_and_printable_values_are_accepted(self):
        assert parse_headers_json(
            '{"X-Trace": "a\\tb", "Authorization": "Bearer x/y=="}'
        ) == {"X-Trace": "a\tb", "Authorization": "Bearer x/y=="}


class TestLoadConfigFile:

    def test_full_file(self, tmp_path):
        path = tmp_path / "relay.yaml"
        path.write_text(
            "url: http://127.0.0.1:9000/sse\n"
            "transport: sse\n"
            "headers:\n"
            "  Authorization: Bearer abc123\n"
            "debug: true\n"
            "log_file: /tmp/mcprelay.log\n"
            "reconnect_delay: 0.5\n"
        )
        config = load_config_file(path)
        assert config.url == "http://127.0.0.1:9000/sse"
        assert config.transport is TransportMode.SSE
        assert config.headers == {"Authorization": "Bearer abc123"}
        assert config.debug is True
        assert config.log_file == "/tmp/mcprelay.log"
        assert config.reconnect_delay == 0.5

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config_file(path) == RelayConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(
            RelayConfigError, match="Cannot read config file"
        ):
            load_config_file(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("url: [unclosed\n")
        with pytest.raises(RelayConfigError, match="Invalid YAML"):
            load_config_file(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- http://a\n- http://b\n")
        with pytest.raises(
            RelayConfigError, match="must contain a mapping"
        ):
            load_config_file(path)

    def test_unknown_keys(self, tmp_path):
        path = tmp_path / "extra.yaml"
        path.write_text("url: http://a/mcp\nretries: 3\n")
        with pytest.raises(RelayConfigError, match="retries"):
            load_config_file(path)
