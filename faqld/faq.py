import logging
import re
from enum import Enum

from .models import FAQData, FAQItem, Found, NoValidPairs, NotFound, ScanResult, get_field

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?!#)[ \t]*(.*)$")
FAQ_HEADING_RE = re.compile(r"faq|frequently asked questions", re.I)
FAQ_SUFFIX = "(faq)"
LIST_ITEM_RE = re.compile(r"^[ \t]*(?:[-*+]|\d+[.)])[ \t]")
QUESTION_MARK_RE = re.compile(r"^Q\d*(?:[ \t]*:|[ \t]+|$)[ \t]*")
ANSWER_MARK_RE = re.compile(r"^(?:A\d*[ \t]*:|A\d+[ \t]+)[ \t]*")
THEMATIC_BREAK_RE = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
MD_LINK_RE = re.compile(r"\[([^\[\]]*)\]\([^()]*\)")
WS_RE = re.compile(r"\s+")


class State(Enum):
    SEEKING_HEADING = "seeking_heading"
    SEEKING_QUESTION = "seeking_question"
    SEEKING_ANSWER = "seeking_answer"
    ACCUMULATING_ANSWER = "accumulating_answer"
    DONE = "done"


def clean_text(text: str) -> str:
    """[text](url) -> text, пробелы/переводы строк схлопываются. HTML не трогаем."""
    text = MD_LINK_RE.sub(r"\1", text)
    return WS_RE.sub(" ", text).strip()


def faq_title(heading_text: str) -> str:
    title = heading_text.strip()
    if not title.lower().endswith(FAQ_SUFFIX):
        return title
    return title[:-len(FAQ_SUFFIX)].strip() or title


def _heading(line: str):
    m = HEADING_RE.match(line)
    if not m:
        return None
    text = m.group(2).rstrip(" \t")
    # "## FAQ ##" -> "FAQ", но "C#" остаётся как есть
    unhashed = text.rstrip("#")
    if unhashed != text and (not unhashed or unhashed[-1] in " \t"):
        text = unhashed.rstrip(" \t")
    return len(m.group(1)), text


def _is_continuation(line: str) -> bool:
    """После пустой строки ответ продолжают только списки и строки с отступом."""
    return bool(LIST_ITEM_RE.match(line)) or line.startswith(("    ", "\t")) or line.lstrip().startswith(">")


class FAQScanner:
    """
    Однопроходный сканер FAQ-секции по строкам.

    SEEKING_HEADING -> SEEKING_QUESTION -> SEEKING_ANSWER -> ACCUMULATING_ANSWER -> DONE.
    Each line is classified once; no state looks back, so the whole scan is
    linear in the number of lines.
    """

    def __init__(self):
        self.state = State.SEEKING_HEADING
        self.title = None
        self.section_level = 0
        self.items = []
        self.discarded = 0
        self._question = None
        self._question_level = None
        self._answer = []
        self._seen_question = False
        self._after_blank = False
        self._in_subheading = False

    # --- классификация строки ---
    def _classify(self, line: str):
        if not line.strip():
            return "blank", None, ""
        heading = _heading(line)
        if heading:
            level, text = heading
            m = QUESTION_MARK_RE.match(text)
            if m:
                return "question", level, text[m.end():]
            if level <= self.section_level:
                return "section_end", level, text
            return "heading", level, text
        if THEMATIC_BREAK_RE.match(line):
            return "break", None, ""
        plain = line.lstrip()
        m = QUESTION_MARK_RE.match(plain)
        if m:
            return "question", None, plain[m.end():]
        m = ANSWER_MARK_RE.match(plain)
        if m:
            return "answer", None, plain[m.end():]
        return "text", None, line

    def feed(self, line: str) -> None:
        if self.state is State.DONE:
            return
        if self.state is State.SEEKING_HEADING:
            heading = _heading(line)
            if heading and FAQ_HEADING_RE.search(heading[1]):
                self.section_level, text = heading
                self.title = faq_title(text)
                self.state = State.SEEKING_QUESTION
            return

        kind, level, text = self._classify(line)
        if self.state is State.SEEKING_QUESTION:
            self._seeking_question(kind, level, text)
        elif self.state is State.SEEKING_ANSWER:
            self._seeking_answer(kind, level, text)
        else:
            self._accumulating(kind, level, text, line)

    def _seeking_question(self, kind, level, text):
        if kind in ("question", "heading"):
            self._start_question(level, text)
        elif kind == "answer":
            self._start_answer(None, text)
        elif kind == "section_end":
            self.state = State.DONE
        elif kind != "blank" and self._seen_question:
            self.state = State.DONE
        # до первого вопроса вступительный текст пропускаем

    def _seeking_answer(self, kind, level, text):
        if kind == "blank":
            return
        if kind == "answer":
            self._start_answer(self._question, text)
            return
        self.discarded += 1
        if kind in ("question", "heading"):
            self._start_question(level, text)
        else:
            self.state = State.DONE

    def _accumulating(self, kind, level, text, line):
        after_blank = self._after_blank
        self._after_blank = kind == "blank"
        if kind == "heading" and self._nested(level):
            self._in_subheading = True
            self._answer.append(line)
        elif kind == "blank":
            self._answer.append(line)
        elif kind == "text":
            if after_blank and not self._in_subheading and not _is_continuation(line):
                # абзац после пустой строки — уже не ответ, а текст статьи
                self._flush()
                self.state = State.DONE
            else:
                self._answer.append(line)
        elif kind in ("question", "heading"):
            self._flush()
            self._start_question(level, text)
        elif kind == "answer":
            # второй A: подряд — ответ без вопроса, съедаем и выбрасываем
            self._flush()
            self._start_answer(None, text)
        else:
            self._flush()
            self.state = State.DONE

    def _nested(self, level) -> bool:
        # у Q: без заголовка любой подзаголовок внутри секции относится к ответу
        if self._question_level is None:
            return level > self.section_level
        return level > self._question_level

    def _start_question(self, level, text):
        self._seen_question = True
        self._question = text
        self._question_level = level
        self._answer = []
        self.state = State.SEEKING_ANSWER

    def _start_answer(self, question, text):
        if question is None:
            self._question_level = None
        self._question = question
        self._answer = [text]
        self._after_blank = False
        self._in_subheading = False
        self.state = State.ACCUMULATING_ANSWER

    def _flush(self):
        if self._question is None:
            self.discarded += 1
        else:
            question = clean_text(self._question)
            answer = clean_text("\n".join(self._answer))
            if question and answer:
                self.items.append(FAQItem(question=question, answer=answer))
            else:
                self.discarded += 1
        self._question = None
        self._answer = []

    def finish(self) -> None:
        if self.state is State.ACCUMULATING_ANSWER:
            self._flush()
        elif self.state is State.SEEKING_ANSWER:
            self.discarded += 1
        if self.state is not State.SEEKING_HEADING:
            self.state = State.DONE


def scan_faq(text) -> ScanResult:
    if not isinstance(text, str) or not text:
        return NotFound()
    scanner = FAQScanner()
    for line in text.splitlines():
        scanner.feed(line)
        if scanner.state is State.DONE:
            break
    scanner.finish()
    if scanner.title is None:
        return NotFound()
    if not scanner.items:
        return NoValidPairs(title=scanner.title, discarded=scanner.discarded)
    return Found(FAQData(items=tuple(scanner.items), title=scanner.title))


def parse_faq_from_content(text):
    """Первая FAQ-секция статьи -> FAQData, иначе None. Никогда не бросает."""
    try:
        result = scan_faq(text)
    except Exception as e:
        logger.debug(f"FAQ scan failed: {e}")
        return None
    if isinstance(result, Found):
        return result.data
    return None


def validate_faq_data(data) -> bool:
    try:
        if data is None:
            return False
        items = get_field(data, "items")
        if not isinstance(items, (list, tuple)) or not items:
            return False
        for item in items:
            question = get_field(item, "question")
            answer = get_field(item, "answer")
            if not isinstance(question, str) or not isinstance(answer, str):
                return False
            if not question.strip() or not answer.strip():
                return False
        return True
    except Exception as e:
        logger.debug(f"FAQ validation failed: {e}")
        return False
