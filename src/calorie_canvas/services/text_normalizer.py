"""Text cleanup for model-generated food descriptions.

Generative models describe meals in full sentences with hedges ("this
appears to be...") and scaffolding ("the image shows..."). Nutrition
databases match best on short ingredient-focused queries, so descriptions
are reduced to either a single recognised dish name or the list of food
terms joined with " with ".
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PatternRule:
    """Case-insensitive regex substitution applied to a description."""

    pattern: str
    replacement: str = ""

    def apply(self, text: str) -> str:
        return re.sub(self.pattern, self.replacement, text, flags=re.IGNORECASE)


SCAFFOLDING_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        r"here['’]?s\s+(?:a|an|the)\s+(?:clear,?\s+)?(?:concise\s+)?"
        r"description\s+of\s+(?:just\s+)?the\s+food(?:\s+items?)?"
        r"(?:\s+in\s+(?:the|this)\s+(?:image|photo|picture))?\s*:?\s*"
    ),
    PatternRule(
        r"\b(?:the\s+|this\s+)?(?:(?:image|photo|picture)\s+)?(?:shows|depicts)\b\s*"
    ),
    PatternRule(r"\b(?:i\s+)?(?:can\s+)?see\b\s*"),
    PatternRule(r"\b(?:in|from)\s+(?:the|this)\s+(?:image|photo|picture)\b\s*"),
    PatternRule(r"\bthere\s+(?:is|are)\b\s*"),
    PatternRule(r"(?m)^\s*[-•]\s+"),
    PatternRule(r"[*_#`]+"),
)

HEDGE_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        r"\b(?:it|this|that|there)\s+(?:appears|seems|looks)\s+(?:to\s+be|like)\b\s*"
    ),
    PatternRule(r"\b(?:what\s+)?(?:appears|seems|looks)\s+to\s+be\b\s*"),
    PatternRule(r"\blooks\s+like\b\s*"),
    PatternRule(r"\b(?:appears|seems|possibly|probably|likely|maybe|perhaps)\b\s*"),
)

QUALIFIER_RULES: tuple[PatternRule, ...] = (
    PatternRule(r"\b(?:garnished|topped|served|sprinkled)\s+with\b", "with"),
    PatternRule(r"\bchopped\b\s*"),
    PatternRule(r"\b(?:a|an|one)\s+(?:bowl|plate|dish|serving|portion)\s+of\s+"),
)

COMPOUND_DISHES: tuple[str, ...] = ("jollof", "fried rice", "curry", "stew", "soup")

_ALTERNATIVES = re.compile(r"\s+or\s+[^,;\n.]*", re.IGNORECASE)
_ABBREVIATIONS = ("approx", "dr", "mr", "mrs", "st", "oz", "lb", "lbs", "tbsp", "tsp")
_SENTENCE_BREAK = (
    "".join(rf"(?<!\b{abbreviation})" for abbreviation in _ABBREVIATIONS)
    + r"\.(?:\s+(?![\s\d])|\s*$)"
)
_SEPARATORS: tuple[PatternRule, ...] = (
    PatternRule(r"\s*[,;]\s*", " and "),
    PatternRule(_SENTENCE_BREAK, " and "),
    PatternRule(r"\s+-\s+", " and "),
    PatternRule(r"\s+with\s+", " and "),
)
_NEWLINES = re.compile(r"\s*\n+\s*")
_SPACES = re.compile(r"\s{2,}")
_JOINER = re.compile(r"\s*\band\b\s*", re.IGNORECASE)
_TERM_PUNCTUATION = " \t.:;,-*\"'"
_FILLER_TERMS = {"a", "an", "the", "some"}
_DISH_PREFIX = re.compile(
    r"^(?:(?:a|an|the|some)\s+)?"
    r"(?:(?:reddish|brownish|yellowish|greenish|orangish|whitish|pinkish|golden|"
    r"vibrant|bright|deep)(?:-[a-z]+)?\s+)+"
)


@dataclass(frozen=True)
class TextNormalizer:
    """Configurable hedge removal and food-term extraction."""

    scaffolding_rules: tuple[PatternRule, ...] = SCAFFOLDING_RULES
    hedge_rules: tuple[PatternRule, ...] = HEDGE_RULES
    qualifier_rules: tuple[PatternRule, ...] = QUALIFIER_RULES
    compound_dishes: tuple[str, ...] = COMPOUND_DISHES

    def extract_food_terms(self, description: str) -> str:
        """Reduce a description to a compact query for nutrition lookups."""
        text = description
        for rule in (*self.scaffolding_rules, *self.hedge_rules, *self.qualifier_rules):
            text = rule.apply(text)
        text = _ALTERNATIVES.sub("", text)
        for rule in _SEPARATORS:
            text = rule.apply(text)
        text = _SPACES.sub(" ", _NEWLINES.sub(" ", text)).strip()

        terms = [term.strip(_TERM_PUNCTUATION) for term in _JOINER.split(text)]
        terms = [term for term in terms if term and term.lower() not in _FILLER_TERMS]

        dish = self._first_compound_dish(terms)
        if dish is not None:
            return _DISH_PREFIX.sub("", dish.lower()).strip()
        return " with ".join(terms)

    def clean_display_text(self, description: str) -> str:
        """Strip scaffolding and hedges but keep the description readable."""
        text = description
        for rule in (*self.scaffolding_rules, *self.hedge_rules):
            text = rule.apply(text)
        text = _SPACES.sub(" ", text).strip()
        return text[:1].upper() + text[1:]

    def _first_compound_dish(self, terms: list[str]) -> str | None:
        for term in terms:
            lowered = term.lower()
            if any(dish in lowered for dish in self.compound_dishes):
                return term
        return None


_DEFAULT_NORMALIZER = TextNormalizer()


def extract_food_terms(description: str) -> str:
    """Reduce a description to a compact query using the default rules."""
    return _DEFAULT_NORMALIZER.extract_food_terms(description)


def clean_display_text(description: str) -> str:
    """Strip scaffolding and hedges using the default rules."""
    return _DEFAULT_NORMALIZER.clean_display_text(description)
