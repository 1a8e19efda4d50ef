"""
Load material candidates for the prioritization dashboard.

Sources:
  - CSV file (one row per material, camelCase or snake_case headers)
  - JSON file (a list of materials, or {"materials": [...]})
  - HTTP(S) feed returning the same JSON shape

Environment (.env supported):
  MATERIALS_SOURCE=materials_sample.csv     # path or https:// URL
  MATERIALS_FEED_TOKEN=...                  # optional bearer token for the feed
"""

from __future__ import annotations

import csv
import json
import os
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from materials import Material, material_from_record

load_dotenv()

DEFAULT_SOURCE = Path(__file__).resolve().parent / "materials_sample.csv"


def read_text_auto(path: Path) -> str:
    """Read text with BOM detection (UTF-16/UTF-8-SIG/UTF-8)."""
    raw = path.read_bytes()
    if raw.startswith(b"\xff\xfe") or raw.startswith(b"\xfe\xff"):
        return raw.decode("utf-16")
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode("utf-8-sig")
    return raw.decode("utf-8")


def http_get_json(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 25,
    retries: int = 2,
) -> Any:
    for attempt in range(retries + 1):
        try:
            r = requests.get(url, headers=headers, timeout=timeout)
            if r.status_code >= 400:
                raise RuntimeError(f"HTTP {r.status_code} for {r.url}: {r.text[:400]}")
            return r.json()
        except (requests.RequestException, RuntimeError):
            if attempt < retries:
                time.sleep(0.6 * (attempt + 1))
            else:
                raise


def materials_from_records(records: List[Dict[str, Any]]) -> List[Material]:
    out: List[Material] = []
    seen = set()
    for r in records:
        if not isinstance(r, dict):
            raise ValueError(f"Material record is not an object: {r!r}")
        m = material_from_record(r)
        if m.id in seen:
            raise ValueError(f"Duplicate material id: {m.id}")
        seen.add(m.id)
        out.append(m)
    return out


def _records_from_payload(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get("materials")
    if not isinstance(data, list):
        raise ValueError("Expected a list of materials or an object with a 'materials' list")
    return data


def load_materials_csv(path: Path) -> List[Material]:
    # utf-8-sig is Excel-friendly and reads BOM safely
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return materials_from_records([dict(r) for r in reader])


def load_materials_json(path: Path) -> List[Material]:
    data = json.loads(read_text_auto(path))
    return materials_from_records(_records_from_payload(data))


def fetch_materials(url: str, token: Optional[str] = None) -> List[Material]:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    data = http_get_json(url, headers=headers)
    return materials_from_records(_records_from_payload(data))


def load_materials(source: Optional[str] = None) -> List[Material]:
    """Load from a path or URL; falls back to MATERIALS_SOURCE, then the sample CSV."""
    source = (source or os.environ.get("MATERIALS_SOURCE") or "").strip() or str(DEFAULT_SOURCE)

    if source.startswith("http://") or source.startswith("https://"):
        token = (os.environ.get("MATERIALS_FEED_TOKEN") or "").strip()
        return fetch_materials(source, token=token or None)

    path = Path(source).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Not found: {path}")
    if path.suffix.lower() == ".json":
        return load_materials_json(path)
    return load_materials_csv(path)
