# dashboard/api_client.py

import os
from pathlib import Path

import requests

# Load workspace .env for local dev UX (optional)
try:
    from dotenv import load_dotenv

    load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")
except Exception:
    pass

API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")


# -------------------------------
# Blocklist
# -------------------------------


def get_blocklist() -> dict:
    r = requests.get(f"{API_BASE}/api/blocklist", timeout=5)
    r.raise_for_status()
    return r.json()


def add_website(url: str) -> dict:
    r = requests.post(f"{API_BASE}/api/websites", json={"url": url}, timeout=5)
    r.raise_for_status()
    return r.json()


def delete_website(website_id: int) -> dict:
    r = requests.delete(f"{API_BASE}/api/websites/{website_id}", timeout=5)
    r.raise_for_status()
    return r.json()


def add_program(name: str, path: str, process_name: str | None = None) -> dict:
    r = requests.post(
        f"{API_BASE}/api/programs",
        json={"name": name, "path": path, "processName": process_name or None},
        timeout=5,
    )
    r.raise_for_status()
    return r.json()


def delete_program(program_id: int) -> dict:
    r = requests.delete(f"{API_BASE}/api/programs/{program_id}", timeout=5)
    r.raise_for_status()
    return r.json()


# -------------------------------
# Exports
# -------------------------------


def get_versions(page: int = 1, per_page: int = 5) -> dict:
    r = requests.get(
        f"{API_BASE}/api/versions",
        params={"page": page, "per_page": per_page},
        timeout=5,
    )
    r.raise_for_status()
    return r.json()


def export_scripts() -> dict:
    r = requests.post(f"{API_BASE}/api/export", timeout=10)
    r.raise_for_status()
    return r.json()


def preview_scripts() -> dict:
    r = requests.get(f"{API_BASE}/api/preview", timeout=10)
    r.raise_for_status()
    return r.json()


def download_file(filename: str) -> bytes:
    r = requests.get(f"{API_BASE}/api/download/{filename}", timeout=10)
    r.raise_for_status()
    return r.content


def delete_history(version: str) -> dict:
    r = requests.delete(f"{API_BASE}/api/history/{version}", timeout=5)
    r.raise_for_status()
    return r.json()


def error_detail(exc: Exception) -> str:
    """Best-effort extraction of the API's ``detail`` message."""
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return str(response.json().get("detail", exc))
        except ValueError:
            return response.text or str(exc)
    return str(exc)
