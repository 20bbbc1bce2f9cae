"""
Tests for site config loading and markdown/frontmatter article loading.
"""

import json
from datetime import datetime

from faqld.config import load_configs, read_json, site_settings
from faqld.storage import choose_content_root, find_articles, load_article, split_frontmatter, write_schema


POST = """---
title: Coffee Guide
description: Everything about brewing.
pubDate: 2024-01-15
tags: [brewing, beans]
---
# Coffee Guide

## FAQ

### Q1: Why?
A1: Because.
"""


class TestFrontmatter:

    def test_split(self):
        meta, body = split_frontmatter(POST)
        assert meta["title"] == "Coffee Guide"
        assert meta["tags"] == ["brewing", "beans"]
        assert meta["pubDate"] == datetime(2024, 1, 15)
        assert body.startswith("# Coffee Guide")

    def test_iso_string_date(self):
        meta, _ = split_frontmatter('---\npubDate: "2024-03-01T10:30:00Z"\n---\nbody')
        assert meta["pubDate"].year == 2024
        assert meta["pubDate"].hour == 10

    def test_no_frontmatter(self):
        assert split_frontmatter("# Just body") == ({}, "# Just body")

    def test_broken_yaml_keeps_whole_text(self):
        text = "---\ntitle: [unclosed\n---\nbody"
        assert split_frontmatter(text) == ({}, text)

    def test_non_mapping_yaml(self):
        text = "---\n- a\n- b\n---\nbody"
        assert split_frontmatter(text) == ({}, text)

    def test_load_article(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text(POST, encoding="utf-8")
        meta, body = load_article(path)
        assert meta["description"] == "Everything about brewing."
        assert "### Q1: Why?" in body


class TestArticleDiscovery:

    def test_prefers_blog_src(self, tmp_path):
        assert choose_content_root(tmp_path) == tmp_path / "posts"
        (tmp_path / "blog-src" / "posts").mkdir(parents=True)
        assert choose_content_root(tmp_path) == tmp_path / "blog-src" / "posts"

    def test_find_articles(self, tmp_path):
        assert find_articles(tmp_path) == []
        day = tmp_path / "posts" / "2024" / "01"
        day.mkdir(parents=True)
        (day / "b.md").write_text("b", encoding="utf-8")
        (day / "a.md").write_text("a", encoding="utf-8")
        (day / "skip.html").write_text("x", encoding="utf-8")
        assert [p.name for p in find_articles(tmp_path)] == ["a.md", "b.md"]

    def test_write_schema(self, tmp_path):
        path = write_schema(tmp_path / "out", "coffee", [{"@type": "Article"}, {"@type": "FAQPage"}])
        assert path.name == "coffee.json"
        assert json.loads(path.read_text(encoding="utf-8"))[1]["@type"] == "FAQPage"


class TestConfig:

    def test_load_configs(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.json").write_text(json.dumps({
            "site": {
                "name": "Coffee Blog",
                "url": "https://example.com/",
                "base_url": "/blog/",
                "email": "hi@example.com",
                "schema_type": "BlogPosting",
            }
        }), encoding="utf-8")
        configs = load_configs(tmp_path)
        assert configs["root"] == tmp_path.resolve()
        assert configs["site_url"] == "https://example.com"
        assert configs["base_url"] == "/blog"
        assert configs["schema_type"] == "BlogPosting"
        assert configs["site_settings"] == {
            "id": "site-config",
            "siteName": "Coffee Blog",
            "siteUrl": "https://example.com",
            "email": "hi@example.com",
        }

    def test_missing_config(self, tmp_path):
        configs = load_configs(tmp_path)
        assert configs["base_config"] == {}
        assert configs["site_settings"] == {"id": "site-config"}
        assert configs["schema_type"] == "Article"

    def test_broken_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        assert read_json(path, {"fallback": True}) == {"fallback": True}

    def test_site_settings_ignores_empty(self):
        assert site_settings({"site": {"name": "", "logo": "/logo.png"}}) == {"id": "site-config", "logo": "/logo.png"}
