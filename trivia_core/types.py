
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Literal, Tuple, Union

QuestionType = Literal["property->name","name->property","properties->name","name->image","image->name"]
PoolKind = Literal["names","values","imaged_names","images"]
MatchKind = Literal["exact","fuzzy","no-match"]
SessionPhase = Literal["setup","in_progress","finished"]

NAME_ANSWER_TYPES: Tuple[str, ...] = ("property->name", "properties->name", "image->name")


@dataclass(frozen=True)
class AttrValue:
    """Tagged scalar attribute value.

    ``0`` and ``"0"`` are different values; ``1`` and ``1.0`` are the same.
    Missing/null values are never wrapped, callers use ``None`` instead.
    """
    kind: Literal["str","num","bool"]
    raw: Union[str, int, float, bool]

    @classmethod
    def from_raw(cls, raw: object) -> Optional["AttrValue"]:
        if raw is None:
            return None
        if isinstance(raw, bool):
            return cls("bool", raw)
        if isinstance(raw, (int, float)):
            if isinstance(raw, float) and raw.is_integer():
                raw = int(raw)
            return cls("num", raw)
        if isinstance(raw, str):
            return cls("str", raw)
        # nested lists/objects are not quiz facts
        return None

    @property
    def label(self) -> str:
        if self.kind == "bool":
            return "true" if self.raw else "false"
        return str(self.raw)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, eq=False)
class Item:
    name: str
    attributes: Dict[str, Optional[AttrValue]] = field(default_factory=dict)
    images: Tuple[str, ...] = ()

    def get(self, prop: str) -> Optional[AttrValue]:
        return self.attributes.get(prop)

    @property
    def has_image(self) -> bool:
        return bool(self.images)


@dataclass(frozen=True)
class CategoryConfig:
    typed: bool = False
    typed_probability: float = 0.0

    @property
    def effective_probability(self) -> float:
        return self.typed_probability if self.typed else 0.0


@dataclass
class Category:
    name: str
    items: List[Item]
    properties: List[str]
    config: CategoryConfig = field(default_factory=CategoryConfig)
    schema_warnings: List[str] = field(default_factory=list)

    def find(self, name: str) -> Optional[Item]:
        return next((it for it in self.items if it.name == name), None)


@dataclass
class Dataset:
    categories: Dict[str, Category] = field(default_factory=dict)

    def names(self) -> List[str]:
        return list(self.categories)

    def __contains__(self, name: object) -> bool:
        return name in self.categories

    def __getitem__(self, name: str) -> Category:
        return self.categories[name]


@dataclass(frozen=True)
class SingleFact:
    property: str; value: AttrValue; item: Item

@dataclass(frozen=True)
class ComboFact:
    properties: Tuple[str, ...]; values: Tuple[AttrValue, ...]; item: Item

@dataclass(frozen=True)
class ImageFact:
    item: Item; image: str


@dataclass(frozen=True)
class Question:
    category: str
    type: QuestionType
    subject: str
    correct: str
    pool: PoolKind
    property: Optional[str] = None
    value: Optional[AttrValue] = None
    properties: Tuple[str, ...] = ()
    values: Tuple[AttrValue, ...] = ()
    image: Optional[str] = None


@dataclass(frozen=True)
class Option:
    label: str
    image: Optional[str] = None


@dataclass
class QuestionView:
    index: int
    total: int
    category: str
    type: QuestionType
    template: str
    fields: Dict[str, object]
    options: List[Option] = field(default_factory=list)
    typed: bool = False
    image: Optional[str] = None


@dataclass
class Verdict:
    correct: bool
    match: Optional[MatchKind]
    submitted: str
    expected: str
    canonical: Optional[str] = None
    score: int = 0
    streak: int = 0
    best_streak: int = 0
    new_best: bool = False


@dataclass
class SessionSummary:
    score: int
    attempted: int
    total: int
    best_streak: int
    finished: bool
    categories: List[str] = field(default_factory=list)
    events: List[Dict[str, object]] = field(default_factory=list)
