"""Tests for Wake-on-LAN dispatch."""

import socket

import pytest

from app.exceptions import NetworkError, ValidationError
from app.services.wol_service import WakeOnLanService, format_mac, normalize_mac

EXPECTED_PACKET = b"\xff" * 6 + bytes.fromhex("001122334455") * 16


@pytest.mark.unit
class TestNormalizeMac:
    """Test MAC normalization."""

    @pytest.mark.parametrize(
        "value",
        [
            "AA:BB:CC:DD:EE:FF",
            "aa-bb-cc-dd-ee-ff",
            "aabbccddeeff",
            "AABBCCDDEEFF",
            "Aa:bB-Cc:dD-eE:Ff",
            " aa:bb:cc:dd:ee:ff ",
        ],
    )
    def test_equivalent_forms(self, value):
        assert normalize_mac(value) == "aabbccddeeff"

    @pytest.mark.parametrize(
        "value",
        [
            "12345",
            "zz:zz:zz:zz:zz:zz",
            "",
            "aa:bb:cc:dd:ee",
            "aa:bb:cc:dd:ee:ff:00",
            "aa.bb.cc.dd.ee.ff",
            "gg:bb:cc:dd:ee:ff",
            None,
            123456789012,
        ],
    )
    def test_malformed(self, value):
        with pytest.raises(ValidationError):
            normalize_mac(value)

    def test_format_for_display(self):
        assert format_mac("00d86178e934") == "00-D8-61-78-E9-34"


@pytest.mark.unit
class TestWake:
    """Test magic packet dispatch."""

    def test_build_packet(self):
        packet = WakeOnLanService.build_packet("00:11:22:33:44:55")
        assert packet == EXPECTED_PACKET
        assert len(packet) == 102

    def test_sends_exactly_one_broadcast(self, wol_service, mock_socket):
        result = wol_service.wake("00:11:22:33:44:55")

        mock_socket.setsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        mock_socket.settimeout.assert_called_once_with(1.0)
        mock_socket.sendto.assert_called_once_with(EXPECTED_PACKET, ("192.168.1.255", 9))

        assert result.sent is True
        assert result.mac == "001122334455"
        assert result.broadcast_address == "192.168.1.255"
        assert result.port == 9
        assert result.bytes_sent == 102

    def test_override_target(self, wol_service, mock_socket):
        wol_service.wake("001122334455", broadcast_address="10.0.0.255", port=7)
        mock_socket.sendto.assert_called_once_with(EXPECTED_PACKET, ("10.0.0.255", 7))

    def test_default_settings(self, mock_socket):
        WakeOnLanService().wake("001122334455")
        mock_socket.sendto.assert_called_once_with(EXPECTED_PACKET, ("255.255.255.255", 9))

    def test_malformed_mac_sends_nothing(self, wol_service, mock_socket):
        with pytest.raises(ValidationError):
            wol_service.wake("zz:zz:zz:zz:zz:zz")
        mock_socket.sendto.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [OSError(101, "Network is unreachable"), PermissionError(13, "Permission denied"), socket.timeout("timed out")],
    )
    def test_transport_failure_is_not_retried(self, wol_service, mock_socket, error):
        mock_socket.sendto.side_effect = error

        with pytest.raises(NetworkError):
            wol_service.wake("00:11:22:33:44:55")

        assert mock_socket.sendto.call_count == 1
