from __future__ import annotations


class TestCoreImports:

    def test_top_level_package(self):
        import mcprelay

        assert hasattr(mcprelay, "__version__")

    def test_public_api_exports(self):
        from mcprelay import (
            PRODUCT,
            EndpointPhase,
            EndpointStore,
            HttpBridge,
            InputClosed,
            MessageWriter,
            Relay,
            RelayConfig,
            RelayConfigError,
            RelayError,
            RelayLogger,
            StreamBridge,
            TransportMode,
            get_logger,
            load_config_file,
            parse_headers_json,
            setup_logging,
        )

    def test_product_name(self):
        from mcprelay import PRODUCT, __version__

        assert PRODUCT == f"MCPRelay v{__version__}"


class TestBridgeImports:

    def test_bridges_package(self):
        from mcprelay.bridges import (
            BRIDGE_REGISTRY,
            BaseBridge,
            DataDisposition,
            EndpointDiscovery,
            HttpBridge,
            StreamBridge,
            StreamLine,
            resolve_bridge_for_mode,
        )

    def test_registry_covers_every_mode(self):
        from mcprelay.bridges import (
            BRIDGE_REGISTRY,
            resolve_bridge_for_mode,
        )
        from mcprelay.types import TransportMode

        assert set(BRIDGE_REGISTRY) == set(TransportMode)
        for mode in TransportMode:
            assert resolve_bridge_for_mode(mode).mode is mode


class TestSupportImports:

    def test_stdio_package(self):
        from mcprelay.stdio import (
            MessageWriter,
            create_stdin_reader,
            read_line,
        )

    def test_endpoint_package(self):
        from mcprelay.endpoint import EndpointStore, ReadWriteLock

    def test_cli_entry_point(self):
        from mcprelay.cli import cli, main

        assert callable(main)
        assert "run" in cli.commands
        assert "info" in cli.commands
