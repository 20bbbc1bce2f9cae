from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class FAQItem:
    question: str
    answer: str

    def to_dict(self) -> dict:
        return {"question": self.question, "answer": self.answer}


@dataclass(frozen=True)
class FAQData:
    """Один FAQ-блок статьи: заголовок секции и пары вопрос/ответ в порядке документа."""
    items: Tuple[FAQItem, ...] = ()
    title: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"items": [it.to_dict() for it in self.items]}
        if self.title is not None:
            data["title"] = self.title
        return data


# --- Результат сканирования (внутренний, публичный API отдаёт FAQData | None) ---

@dataclass(frozen=True)
class Found:
    data: FAQData


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class NoValidPairs:
    title: str = ""
    discarded: int = field(default=0, compare=False)


ScanResult = Union[Found, NotFound, NoValidPairs]


MISSING = object()


def get_field(obj, name: str):
    """FAQData может прийти и dataclass'ом, и dict'ом из JSON/YAML — читаем поле плоско."""
    if isinstance(obj, Mapping):
        return obj.get(name, MISSING)
    return getattr(obj, name, MISSING)
