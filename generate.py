import argparse
import sys
from datetime import datetime
from pathlib import Path

from faqld.config import load_configs
from faqld.render import inject_jsonld, plain_text, slugify
from faqld.schema import generate_blog_post_schema_data
from faqld.storage import find_articles, load_article, write_schema


def post_url(meta: dict, slug: str, configs: dict) -> str:
    if meta.get("url"):
        url = str(meta["url"])
        if url.startswith(("http://", "https://")):
            return url
        return f"{configs['site_url']}{configs['base_url']}/{url.lstrip('/')}"
    pub = meta.get("pubDate")
    if isinstance(pub, datetime):
        rel = f"/posts/{pub:%Y/%m/%d}/{slug}.html"
    else:
        rel = f"/posts/{slug}.html"
    return f"{configs['site_url']}{configs['base_url']}{rel}"


def build_article(path: Path, configs: dict, schema_type: str, out_dir: Path, html_dir=None):
    meta, body = load_article(path)
    title = meta.get("title") or path.stem
    slug = slugify(meta.get("slug") or title)
    if not meta.get("description"):
        meta["description"] = plain_text(body)[:160]
    meta["title"] = title

    schema = generate_blog_post_schema_data(
        meta, post_url(meta, slug, configs), schema_type, content=body,
        settings=configs["site_settings"],
    )
    if schema is None:
        print(f"⏭️ Skipped (draft or no title/description): {path}")
        return None

    out_path = write_schema(out_dir, slug, schema)
    has_faq = isinstance(schema, list)
    print(f"✅ Wrote {out_path}{' (+FAQ)' if has_faq else ''}")

    if html_dir:
        page = Path(html_dir) / f"{slug}.html"
        if page.exists():
            page.write_text(inject_jsonld(page.read_text(encoding="utf-8"), schema), encoding="utf-8")
            print(f"   ↳ JSON-LD injected into {page}")
    return out_path


def main(argv=None):
    ap = argparse.ArgumentParser(description="Build Article + FAQPage JSON-LD for markdown posts")
    ap.add_argument("paths", nargs="*", help="Markdown files (default: all posts under root)")
    ap.add_argument("--root", default=None, help="Site root with config/ and posts/")
    ap.add_argument("--schema-type", choices=["Article", "BlogPosting"], default=None)
    ap.add_argument("--out", default=None, help="Output dir for <slug>.json (default: <root>/feeds/schema)")
    ap.add_argument("--html", default=None, help="Dir with rendered <slug>.html pages to inject into")
    args = ap.parse_args(argv)

    configs = load_configs(args.root)
    root = configs["root"]
    schema_type = args.schema_type or configs["schema_type"]
    out_dir = Path(args.out) if args.out else root / "feeds" / "schema"
    paths = [Path(p) for p in args.paths] or find_articles(root)

    built = 0
    for path in paths:
        try:
            if build_article(path, configs, schema_type, out_dir, args.html):
                built += 1
        except Exception as ex:
            print("Article error:", path, ex)
    print(f"🏁 Built {built}/{len(paths)} schema files")
    return 0


if __name__ == "__main__":
    sys.exit(main())
