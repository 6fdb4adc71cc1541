#!/usr/bin/env python3
"""
Reseed the JSON data file for a preset, keeping a backup of the old file.

Usage:
  python scripts/reset_store.py [--file data.json] [--preset blog|research|full] [--no-backup]
"""
from __future__ import annotations

import argparse
import shutil
import sys
import time
from pathlib import Path

# Keep the agora package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agora.core.config import PRESETS, get_settings  # noqa: E402
from agora.domain.seeds import seed_document  # noqa: E402
from agora.repositories.json_storage import JsonStorage  # noqa: E402


def backup(path: Path) -> Path | None:
    if not path.exists():
        return None
    target = path.with_name(f"{path.name}.{int(time.time())}.bak")
    shutil.copy2(path, target)
    return target


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Reseed the Agora data file")
    ap.add_argument("--file", default=settings.data_file, help="Data file (default: AGORA_DATA_FILE or data.json)")
    ap.add_argument("--preset", choices=PRESETS, default=settings.preset, help="Seed content to write")
    ap.add_argument("--no-backup", action="store_true", help="Do not copy the old file before overwriting")
    args = ap.parse_args(argv)

    path = Path(args.file)
    saved = None if args.no_backup else backup(path)
    storage = JsonStorage(path, atomic_writes=settings.atomic_writes)
    db = storage.reset(seed_document(args.preset))

    print("OK: data file reseeded")
    print(f"  File: {path}")
    print(f"  Preset: {args.preset}")
    print(f"  Posts: {len(db['posts'])}  Projects: {len(db['projects'])}  Discussions: {len(db['discussions'])}")
    if saved:
        print(f"  Backup: {saved}")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
