"""
JSON-LD (schema.org) для статей и FAQ.

generate_faq_schema / generate_faq_schema_items фильтруют данные сами и могут
вызываться без validate_faq_data. Все функции здесь чистые: конфиг сайта
передаётся аргументом, а не читается из файлов.
"""
import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .faq import parse_faq_from_content, validate_faq_data
from .models import MISSING, get_field

logger = logging.getLogger(__name__)

SCHEMA_CONTEXT = "https://schema.org"
SCHEMA_TYPES = ("Article", "BlogPosting")


def _question_node(question, answer):
    return {
        "@type": "Question",
        "name": str(question),
        "acceptedAnswer": {"@type": "Answer", "text": str(answer)},
    }


def generate_faq_schema_items(data) -> Optional[List[Dict[str, Any]]]:
    """Bare list of Question nodes, for appending next to an Article schema."""
    try:
        if not data:
            return None
        items = get_field(data, "items")
        if not isinstance(items, (list, tuple)) or not items:
            return None
        nodes = []
        for item in items:
            if not item:
                continue
            question = get_field(item, "question")
            answer = get_field(item, "answer")
            if question is MISSING or answer is MISSING:
                continue
            if question and answer:
                nodes.append(_question_node(question, answer))
        return nodes or None
    except Exception as e:
        logger.debug(f"FAQ schema items failed: {e}")
        return None


def generate_faq_schema(data) -> Optional[Dict[str, Any]]:
    main_entity = generate_faq_schema_items(data)
    if not main_entity:
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": main_entity,
    }


# --- Article / BlogPosting ---

def _iso(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).isoformat()
    return str(value or "")


def _ref(value, default_name):
    """author/category/tag: строковый id или dict с полями — приводим к dict с id и name."""
    if isinstance(value, Mapping):
        ref = dict(value)
        ref.setdefault("id", ref.get("name") or default_name)
        ref.setdefault("name", ref.get("id") or default_name)
        return ref
    if value:
        return {"id": str(value), "name": str(value)}
    return {"id": default_name.lower().replace(" ", "-"), "name": default_name}


def default_site_settings(url: str) -> Dict[str, Any]:
    parsed = urlparse(url or "")
    origin = f"{parsed.scheme}://{parsed.netloc}" if parsed.scheme and parsed.netloc else ""
    return {
        "id": "site-config",
        "siteName": "Website",
        "siteDescription": "A website",
        "siteUrl": origin,
        "author": "Website Author",
        "email": "contact@example.com",
        "defaultOgImage": "/og-image.jpg",
    }


def generate_article_schema(frontmatter: Dict[str, Any], url: str, settings: Dict[str, Any]) -> Dict[str, Any]:
    author = frontmatter["author"]
    person = {"@type": "Person", "name": author["name"]}
    if author.get("bio"):
        person["description"] = author["bio"]
    if author.get("website"):
        person["url"] = author["website"]
    if author.get("email"):
        person["email"] = author["email"]

    published = _iso(frontmatter.get("pubDate"))
    schema = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Article",
        "headline": frontmatter["title"],
        "description": frontmatter["description"],
        "author": person,
        "publisher": {
            "@type": "Organization",
            "name": settings.get("siteName"),
            "url": settings.get("siteUrl"),
        },
        "datePublished": published,
        "dateModified": _iso(frontmatter.get("updatedDate")) or published,
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
        "url": url,
        "keywords": [tag["name"] for tag in frontmatter.get("tags") or []],
    }

    image = frontmatter.get("image")
    if image:
        schema["image"] = {
            "@type": "ImageObject",
            "url": image["url"],
            "name": image.get("alt", ""),
            "description": image.get("alt", ""),
        }
    category = frontmatter.get("category") or {}
    if category.get("name"):
        schema["articleSection"] = category["name"]
    return schema


def generate_blog_posting_schema(frontmatter: Dict[str, Any], url: str, settings: Dict[str, Any]) -> Dict[str, Any]:
    schema = generate_article_schema(frontmatter, url, settings)
    schema["@type"] = "BlogPosting"
    return schema


def _fallback_article(frontmatter, url, schema_type, author, settings):
    published = _iso(frontmatter.get("pubDate"))
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": schema_type,
        "headline": frontmatter.get("title"),
        "description": frontmatter.get("description"),
        "author": {"@type": "Person", "name": author["name"]},
        "publisher": {
            "@type": "Organization",
            "name": settings.get("siteName"),
            "url": settings.get("siteUrl"),
        },
        "datePublished": published,
        "dateModified": published,
        "url": url,
    }


def faq_schema_from_content(content) -> Optional[Dict[str, Any]]:
    """Extract -> validate -> FAQPage. None, если FAQ нет или он битый."""
    data = parse_faq_from_content(content)
    if data is None or not validate_faq_data(data):
        return None
    return generate_faq_schema(data)


def generate_blog_post_schema_data(
    frontmatter: Optional[Dict[str, Any]],
    url: str,
    schema_type: str = "Article",
    content: Optional[str] = None,
    settings: Optional[Dict[str, Any]] = None,
):
    """
    Article/BlogPosting для поста + FAQPage отдельным соседним объектом.

    Returns [article, faq_page] when the content has a valid FAQ section, the
    article schema alone otherwise, and None for drafts or posts without
    title/description.
    """
    if not frontmatter or not frontmatter.get("title") or not frontmatter.get("description"):
        return None
    if frontmatter.get("status", "published") != "published":
        return None
    if schema_type not in SCHEMA_TYPES:
        schema_type = "Article"

    try:
        author = _ref(frontmatter.get("author"), "Anonymous Author")
        enhanced = dict(frontmatter)
        enhanced["author"] = author
        enhanced["category"] = _ref(frontmatter.get("category"), "General")
        enhanced["tags"] = [_ref(tag, str(tag)) for tag in frontmatter.get("tags") or [] if tag]
        site = dict(default_site_settings(url))
        site.update({k: v for k, v in (settings or {}).items() if v})

        faq_schema = None
        if content:
            try:
                faq_schema = faq_schema_from_content(content)
            except Exception as e:
                logger.debug(f"FAQ schema skipped for {url}: {e}")

        try:
            if schema_type == "BlogPosting":
                main_schema = generate_blog_posting_schema(enhanced, url, site)
            else:
                main_schema = generate_article_schema(enhanced, url, site)
        except Exception as e:
            logger.debug(f"Article schema fallback for {url}: {e}")
            main_schema = _fallback_article(frontmatter, url, schema_type, author, site)

        if faq_schema:
            return [main_schema, faq_schema]
        return main_schema
    except Exception as e:
        logger.debug(f"Blog post schema failed for {url}: {e}")
        return None
