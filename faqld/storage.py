import json
import re
from datetime import date, datetime
from pathlib import Path

import yaml

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.S)


def _parse_date(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def split_frontmatter(text: str):
    """'---\\nyaml\\n---\\nbody' -> (dict, body). Битый YAML — ({}, весь текст)."""
    text = text or ""
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        meta = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError:
        return {}, text
    if not isinstance(meta, dict):
        return {}, text
    for key in ("pubDate", "updatedDate"):
        if key in meta:
            meta[key] = _parse_date(meta[key])
    return meta, text[m.end():]


def load_article(path):
    path = Path(path)
    return split_frontmatter(path.read_text(encoding="utf-8"))


def choose_content_root(repo_root: Path) -> Path:
    # Если есть blog-src/posts — используем его, иначе классический каталог posts
    blog_src_posts = repo_root / "blog-src" / "posts"
    if blog_src_posts.exists():
        return blog_src_posts
    return repo_root / "posts"


def find_articles(repo_root: Path):
    content_root = choose_content_root(Path(repo_root))
    if not content_root.exists():
        return []
    return sorted(content_root.rglob("*.md"))


def write_schema(out_dir: Path, slug: str, schema) -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{slug}.json"
    path.write_text(json.dumps(schema, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
