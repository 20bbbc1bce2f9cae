import json
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

# ключи config.json -> ключи SiteSettings для schema.py
SITE_KEYS = {
    "name": "siteName",
    "description": "siteDescription",
    "url": "siteUrl",
    "author": "author",
    "email": "email",
    "logo": "logo",
    "default_og_image": "defaultOgImage",
}


def read_json(path: Path, default=None):
    if not path.exists():
        return {} if default is None else default
    try:
        return json.loads(path.read_text(encoding="utf-8")) or ({} if default is None else default)
    except Exception:
        # битый конфиг не должен ронять сборку
        return {} if default is None else default


def site_settings(base_config: dict) -> dict:
    site = (base_config or {}).get("site", {}) or {}
    settings = {"id": "site-config"}
    for key, target in SITE_KEYS.items():
        if site.get(key):
            settings[target] = site[key]
    if settings.get("siteUrl"):
        settings["siteUrl"] = settings["siteUrl"].rstrip("/")
    return settings


def load_configs(root=None):
    root = Path(root or ROOT).resolve()
    # base config (основные настройки сайта)
    base_config = read_json(root / "config" / "config.json", {})
    site = base_config.get("site", {}) or {}
    return {
        "root": root,
        "base_config": base_config,
        "site_settings": site_settings(base_config),
        "base_url": (site.get("base_url") or "").rstrip("/"),
        "site_url": (site.get("url") or "").rstrip("/"),
        "schema_type": site.get("schema_type") or "Article",
    }
