"""Wake-on-LAN dispatch service."""

import logging
import re
import socket
from typing import Optional

from wakeonlan import create_magic_packet

from app.exceptions import NetworkError, ValidationError
from app.models.config import WakeOnLanSettings
from app.models.device import WakeResult

logger = logging.getLogger("homelab")

NORMALIZED_MAC_PATTERN = re.compile(r"^[0-9a-f]{12}$")


def normalize_mac(value: str) -> str:
    """
    Normalize a MAC address to 12 lowercase hex characters.

    Accepts colon, dash or bare notation in any case.

    Example:
        >>> normalize_mac("AA:BB:CC:DD:EE:FF")
        'aabbccddeeff'

    Raises:
        ValidationError: If the result is not exactly 12 hex characters
    """
    if not isinstance(value, str) or not value:
        raise ValidationError("MAC address is required")

    mac = value.strip().replace(":", "").replace("-", "").lower()
    if not NORMALIZED_MAC_PATTERN.match(mac):
        raise ValidationError("Invalid MAC address format. Expected 12 hex characters (e.g., 00:11:22:33:44:55)")
    return mac


def format_mac(mac: str) -> str:
    """Format a MAC for display as ``AA-BB-CC-DD-EE-FF``."""
    normalized = normalize_mac(mac).upper()
    return "-".join(normalized[i : i + 2] for i in range(0, 12, 2))


class WakeOnLanService:
    """Sends Wake-on-LAN magic packets to the local broadcast domain."""

    def __init__(self, settings: Optional[WakeOnLanSettings] = None):
        self.settings = settings or WakeOnLanSettings()

    @staticmethod
    def build_packet(mac: str) -> bytes:
        """Build the 102-byte magic packet: 6 x 0xFF then the MAC 16 times."""
        return create_magic_packet(normalize_mac(mac))

    def wake(
        self,
        mac: str,
        broadcast_address: Optional[str] = None,
        port: Optional[int] = None,
    ) -> WakeResult:
        """
        Send one magic packet.

        Success only means the datagram was handed to the network stack.
        There is no retry.

        Args:
            mac: Target MAC in any accepted notation
            broadcast_address: Override for the configured broadcast address
            port: Override for the configured UDP port

        Returns:
            Transmission result

        Raises:
            ValidationError: If the MAC is malformed
            NetworkError: If the send fails or times out
        """
        normalized = normalize_mac(mac)
        address = broadcast_address or self.settings.broadcast_address
        target_port = port or self.settings.port
        packet = create_magic_packet(normalized)

        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
                sock.settimeout(self.settings.timeout_seconds)
                sent = sock.sendto(packet, (address, target_port))
        except OSError as e:
            logger.error(f"Failed to send magic packet to {format_mac(normalized)} via {address}:{target_port}: {e}")
            raise NetworkError(f"Failed to send Wake-on-LAN packet: {e}")

        logger.info(f"Magic packet sent to {format_mac(normalized)} via {address}:{target_port}")
        return WakeResult(
            mac=normalized,
            broadcast_address=address,
            port=target_port,
            bytes_sent=sent,
        )
