"""
Schema Migrations

The stored document carries an integer "schemaVersion". Every bump of
the layout adds one function here that upgrades a document from the
previous version. Documents without the field are version 1, the
layout written before versioning existed.
"""

from typing import Any, Callable

from clinic_ledger.services.storage.interface import NewerSchemaError, SchemaVersionError


SCHEMA_VERSION_FIELD = "schemaVersion"
LEGACY_SCHEMA_VERSION = 1
CURRENT_SCHEMA_VERSION = 2

# Version 1 stored Portuguese payment keys.
LEGACY_PAYMENT_METHODS = {
    "pix": "pix",
    "dinheiro": "cash",
    "cartao": "card",
    "unimed": "insurance_partner",
}


def _migrate_v1_to_v2(document: dict[str, Any]) -> dict[str, Any]:
    """Translate legacy payment method keys on receipts."""
    receipts = document.get("receipts")
    if isinstance(receipts, list):
        migrated = []
        for receipt in receipts:
            if isinstance(receipt, dict):
                method = receipt.get("paymentMethod")
                if isinstance(method, str) and method in LEGACY_PAYMENT_METHODS:
                    receipt = {
                        **receipt,
                        "paymentMethod": LEGACY_PAYMENT_METHODS[method],
                    }
            migrated.append(receipt)
        document = {**document, "receipts": migrated}
    return document


# Maps a version to the function upgrading it to version + 1.
MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _migrate_v1_to_v2,
}


def schema_version_of(document: dict[str, Any]) -> int:
    """Read the schema version of a document, defaulting to the legacy layout."""
    version = document.get(SCHEMA_VERSION_FIELD, LEGACY_SCHEMA_VERSION)
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise SchemaVersionError(f"Invalid schema version: {version!r}")
    return version


def migrate(document: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """
    Upgrade a document to the current schema.

    Returns:
        (migrated_document, original_version)

    Raises:
        NewerSchemaError: If the document is newer than this code
        SchemaVersionError: If the version is invalid or a migration
            step is missing
    """
    original = schema_version_of(document)
    if original > CURRENT_SCHEMA_VERSION:
        raise NewerSchemaError(
            f"Document schema {original} is newer than supported "
            f"schema {CURRENT_SCHEMA_VERSION}"
        )

    version = original
    while version < CURRENT_SCHEMA_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise SchemaVersionError(f"No migration from schema {version}")
        document = step(document)
        version += 1

    document = {**document, SCHEMA_VERSION_FIELD: CURRENT_SCHEMA_VERSION}
    return document, original
