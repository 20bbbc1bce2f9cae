import json
import re
from bs4 import BeautifulSoup
from jinja2 import Template
from slugify import slugify as _slugify

from .models import get_field

MARKER_ATTR = "data-faqld"

FAQ_BLOCK_TPL = Template(
    "<section class='article-card faq'><h3>{{ title }}</h3>\n"
    "{% for q, a in items %}<details><summary>{{ q }}</summary><p>{{ a }}</p></details>\n{% endfor %}"
    "</section>",
    autoescape=False,
)


def slugify(s: str, max_length: int = 80) -> str:
    # имя файла <slug>.json / <slug>.html: длинные заголовки режем по границе слова
    s = (s or "").strip()
    return _slugify(s, max_length=max_length, word_boundary=True) if s else "post"


def plain_text(html: str) -> str:
    txt = BeautifulSoup(html or "", "html.parser").get_text(" ", strip=True)
    return re.sub(r"\s+", " ", txt).strip()


def _schema_docs(schema):
    if not schema:
        return []
    if isinstance(schema, (list, tuple)):
        return [doc for doc in schema if doc]
    return [schema]


def _dump(doc) -> str:
    # "</" внутри JSON не должен закрыть <script>
    return json.dumps(doc, ensure_ascii=False).replace("</", "<\\/")


def jsonld_script(schema) -> str:
    """Один <script type="application/ld+json"> на каждый документ схемы (Article и FAQPage — соседи)."""
    return "\n".join(
        f'<script type="application/ld+json" {MARKER_ATTR}="">{_dump(doc)}</script>'
        for doc in _schema_docs(schema)
    )


def inject_jsonld(html: str, schema) -> str:
    """Кладёт JSON-LD в <head> готовой страницы, убирая ранее вставленные нами скрипты."""
    soup = BeautifulSoup(html or "", "html.parser")
    for old in soup.find_all("script", attrs={MARKER_ATTR: True}):
        old.decompose()

    head = soup.find("head")
    if head is None:
        head = soup.new_tag("head")
        html_tag = soup.find("html")
        if html_tag is not None:
            html_tag.insert(0, head)
        else:
            soup.insert(0, head)

    for doc in _schema_docs(schema):
        tag = soup.new_tag("script", attrs={"type": "application/ld+json", MARKER_ATTR: ""})
        tag.string = _dump(doc)
        head.append(tag)
    return str(soup)


def render_faq_block(data, heading: str = "FAQs") -> str:
    """Видимый FAQ-блок <details>/<summary>. Вопросы и ответы вставляются как есть (авторский HTML)."""
    if not data:
        return ""
    items = get_field(data, "items")
    if not isinstance(items, (list, tuple)):
        return ""
    pairs = []
    for item in items:
        q, a = get_field(item, "question"), get_field(item, "answer")
        if isinstance(q, str) and isinstance(a, str) and q.strip() and a.strip():
            pairs.append((q, a))
    if not pairs:
        return ""
    title = get_field(data, "title")
    return FAQ_BLOCK_TPL.render(title=title if isinstance(title, str) and title else heading, items=pairs)
