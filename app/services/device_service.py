"""Saved device management."""

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.device import Device
from app.services.database import Database, utcnow_iso
from app.services.wol_service import normalize_mac

logger = logging.getLogger("homelab")

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def validate_device_name(name: str) -> str:
    trimmed = name.strip()
    if not trimmed:
        raise ValidationError("Device name cannot be empty")
    if len(trimmed) > NAME_MAX_LENGTH:
        raise ValidationError(f"Device name cannot exceed {NAME_MAX_LENGTH} characters")
    return trimmed


def validate_device_description(description: Optional[str]) -> str:
    if description is None:
        return ""
    trimmed = description.strip()
    if len(trimmed) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Device description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")
    return trimmed


def _row_to_device(row: sqlite3.Row) -> Device:
    return Device(
        mac=row["mac"],
        name=row["name"],
        description=row["description"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class DeviceService:
    """CRUD for devices saved for one-click wake."""

    def __init__(self, database: Database):
        self.db = database

    def list_devices(self) -> list[Device]:
        with self.db.read() as conn:
            rows = conn.execute("SELECT * FROM devices ORDER BY updated_at DESC").fetchall()
        return [_row_to_device(row) for row in rows]

    def get_device(self, mac: str) -> Device:
        """
        Get a saved device by MAC in any notation.

        Raises:
            ValidationError: If the MAC is malformed
            NotFoundError: If no device is saved under that MAC
        """
        normalized = normalize_mac(mac)
        with self.db.read() as conn:
            row = conn.execute("SELECT * FROM devices WHERE mac = ?", (normalized,)).fetchone()
        if row is None:
            raise NotFoundError(f"Device not found: {normalized}")
        return _row_to_device(row)

    def create_device(self, name: str, mac: str, description: Optional[str] = None) -> Device:
        """
        Save a new device.

        Raises:
            ValidationError: If any field is malformed
            ConflictError: If a device with this MAC already exists
        """
        normalized = normalize_mac(mac)
        name = validate_device_name(name)
        description = validate_device_description(description)
        now = utcnow_iso()

        with self.db.transaction() as conn:
            try:
                conn.execute(
                    "INSERT INTO devices (mac, name, description, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                    (normalized, name, description, now, now),
                )
            except sqlite3.IntegrityError:
                raise ConflictError(f"Device with MAC address already exists: {normalized}")
            row = conn.execute("SELECT * FROM devices WHERE mac = ?", (normalized,)).fetchone()

        logger.info(f"Device saved: {name} ({normalized})")
        return _row_to_device(row)

    def update_device(
        self,
        mac: str,
        name: Optional[str] = None,
        new_mac: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Device:
        """
        Update a saved device. Fields left as None keep their value.

        Raises:
            ValidationError: If any field is malformed
            NotFoundError: If the device does not exist
            ConflictError: If ``new_mac`` belongs to another saved device
        """
        current_mac = normalize_mac(mac)
        fields: dict[str, str] = {}
        if name is not None:
            fields["name"] = validate_device_name(name)
        if description is not None:
            fields["description"] = validate_device_description(description)
        if new_mac is not None:
            fields["mac"] = normalize_mac(new_mac)

        with self.db.transaction() as conn:
            if conn.execute("SELECT mac FROM devices WHERE mac = ?", (current_mac,)).fetchone() is None:
                raise NotFoundError(f"Device not found: {current_mac}")

            fields["updated_at"] = utcnow_iso()
            assignments = ", ".join(f"{column} = ?" for column in fields)
            try:
                conn.execute(f"UPDATE devices SET {assignments} WHERE mac = ?", (*fields.values(), current_mac))
            except sqlite3.IntegrityError:
                raise ConflictError(f"Device with MAC address already exists: {fields['mac']}")

            row = conn.execute("SELECT * FROM devices WHERE mac = ?", (fields.get("mac", current_mac),)).fetchone()

        logger.info(f"Device updated: {row['name']} ({row['mac']})")
        return _row_to_device(row)

    def delete_device(self, mac: str) -> None:
        normalized = normalize_mac(mac)
        with self.db.transaction() as conn:
            cursor = conn.execute("DELETE FROM devices WHERE mac = ?", (normalized,))
            if cursor.rowcount == 0:
                raise NotFoundError(f"Device not found: {normalized}")
        logger.info(f"Device deleted: {normalized}")
