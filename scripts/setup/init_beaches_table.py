#!/usr/bin/env python3
"""
Initialize Beaches Table

Creates the geodata_cip schema and the beaches table read by the map UI.
The sync run does this too; use this script to prepare a fresh database.

Usage:
    python scripts/setup/init_beaches_table.py
"""

import sys
from pathlib import Path

from sqlalchemy import create_engine

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from src.common.config import load_settings
from src.sync.repository import BeachRepository


def init_beaches_table() -> bool:
    """Create geodata_cip.beaches if it does not exist."""
    settings = load_settings()
    engine = create_engine(settings.database_url)

    print("Initializing geodata_cip.beaches...")
    print("=" * 60)

    try:
        BeachRepository(engine).create_table_if_not_exists()
    except Exception as e:
        print(f"ERROR: {e}")
        return False
    finally:
        engine.dispose()

    print("  Table ready")
    return True


if __name__ == "__main__":
    sys.exit(0 if init_beaches_table() else 1)
