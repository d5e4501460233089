"""
Word pools for the language tasks.

Two sources live here:
- CATEGORIES: themed word lists tiered 1 (concrete) to 3 (abstract), used by
  the odd-one-out task.
- RELATIONS_DB: a compact authoring table of words with part of speech,
  tier, synonyms and antonyms. It is indexed once per process into a
  RelationIndex (word ids plus directed synonym/antonym edges).
"""

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

logger = logging.getLogger(__name__)

PartOfSpeech = Literal["adj", "verb", "noun"]
RelationKind = Literal["synonym", "antonym"]


@dataclass(frozen=True)
class WordCategory:
    tier: int
    words: tuple[str, ...]


CATEGORIES: dict[str, WordCategory] = {
    # Tier 1: concrete, visual
    "ANIMALS": WordCategory(1, ("Cat", "Dog", "Lion", "Tiger", "Bear", "Wolf", "Fox", "Rabbit", "Mouse", "Horse", "Cow", "Pig", "Sheep", "Elephant", "Giraffe", "Monkey")),
    "FRUITS": WordCategory(1, ("Apple", "Banana", "Orange", "Grape", "Lemon", "Pear", "Peach", "Cherry", "Berry", "Melon", "Kiwi", "Pineapple")),
    "COLORS": WordCategory(1, ("Red", "Blue", "Green", "Yellow", "Pink", "Purple", "Orange", "Black", "White", "Grey", "Brown", "Turquoise", "Gold", "Silver")),
    "FURNITURE": WordCategory(1, ("Chair", "Table", "Bed", "Sofa", "Desk", "Lamp", "Carpet", "Shelf", "Wardrobe", "Armchair", "Stool")),
    "CLOTHES": WordCategory(1, ("Shirt", "Trousers", "Shoe", "Hat", "Coat", "Sock", "Dress", "Skirt", "Jacket", "Glove", "Scarf", "Cap")),
    # Tier 2: everyday, functional
    "VEHICLES": WordCategory(2, ("Car", "Bus", "Truck", "Bicycle", "Train", "Plane", "Boat", "Ship", "Taxi", "Motorbike", "Subway")),
    "TOOLS": WordCategory(2, ("Hammer", "Saw", "Drill", "Pliers", "Screw", "Nail", "Axe", "File", "Brush", "Wrench")),
    "JOBS": WordCategory(2, ("Doctor", "Cook", "Pilot", "Painter", "Baker", "Farmer", "Officer", "Judge", "Teacher", "Lawyer", "Firefighter")),
    "SPORTS": WordCategory(2, ("Football", "Tennis", "Golf", "Rugby", "Hockey", "Judo", "Yoga", "Swimming", "Running", "Boxing")),
    "INSTRUMENTS": WordCategory(2, ("Piano", "Guitar", "Drum", "Flute", "Violin", "Bass", "Harp", "Trumpet", "Saxophone")),
    # Tier 3: abstract, conceptual
    "EMOTIONS": WordCategory(3, ("Joy", "Sadness", "Anger", "Fear", "Delight", "Love", "Hate", "Hope", "Envy", "Pride", "Shame", "Courage")),
    "MATH_TERMS": WordCategory(3, ("Plus", "Minus", "Sum", "Factor", "Graph", "Line", "Area", "Root", "Divisor", "Fraction")),
    "WEATHER": WordCategory(3, ("Rain", "Snow", "Wind", "Storm", "Cloud", "Hail", "Fog", "Heat", "Frost", "Thunder", "Lightning")),
    "SPACE": WordCategory(3, ("Earth", "Mars", "Venus", "Jupiter", "Saturn", "Pluto", "Moon", "Sun", "Star", "Comet")),
    "METALS": WordCategory(3, ("Gold", "Silver", "Iron", "Steel", "Copper", "Zinc", "Lead", "Tin", "Brass", "Bronze", "Platinum")),
}


@dataclass(frozen=True)
class WordDef:
    tier: int
    pos: PartOfSpeech
    synonyms: tuple[str, ...] = ()
    antonyms: tuple[str, ...] = ()


RELATIONS_DB: dict[str, WordDef] = {
    # adjectives
    "good": WordDef(1, "adj", ("great", "fine", "nice"), ("bad", "awful")),
    "bad": WordDef(1, "adj", ("awful", "poor", "terrible"), ("good", "great")),
    "big": WordDef(1, "adj", ("large", "huge", "giant"), ("small", "tiny")),
    "small": WordDef(1, "adj", ("tiny", "little"), ("big", "large", "huge")),
    "fast": WordDef(1, "adj", ("quick", "rapid", "swift"), ("slow", "sluggish")),
    "slow": WordDef(1, "adj", ("sluggish", "leisurely"), ("fast", "quick")),
    "hot": WordDef(1, "adj", ("warm", "boiling"), ("cold", "cool", "icy")),
    "cold": WordDef(1, "adj", ("icy", "cool", "chilly"), ("hot", "warm")),
    "new": WordDef(1, "adj", ("fresh", "modern"), ("old", "ancient")),
    "old": WordDef(1, "adj", ("ancient", "aged"), ("new", "young", "modern")),
    "happy": WordDef(1, "adj", ("glad", "cheerful"), ("sad", "gloomy")),
    "sad": WordDef(1, "adj", ("gloomy", "unhappy"), ("happy", "cheerful")),
    "large": WordDef(1, "adj", ("big", "huge"), ("small", "tiny")),
    "tiny": WordDef(1, "adj", ("small", "little"), ("huge", "giant")),
    "warm": WordDef(1, "adj", ("hot",), ("cool", "cold")),
    "young": WordDef(1, "adj", (), ("old", "aged")),
    "quick": WordDef(1, "adj", ("fast", "swift"), ("slow",)),
    "great": WordDef(2, "adj", ("good", "excellent"), ("awful", "bad")),
    "huge": WordDef(2, "adj", ("giant", "large", "big"), ("tiny", "small")),
    "cheerful": WordDef(2, "adj", ("happy", "glad"), ("gloomy", "sad")),
    "brave": WordDef(2, "adj", ("bold", "fearless"), ("cowardly", "timid")),
    "timid": WordDef(2, "adj", ("shy",), ("bold", "brave")),
    "rich": WordDef(2, "adj", ("wealthy", "affluent"), ("poor",)),
    "poor": WordDef(2, "adj", ("needy",), ("rich", "wealthy")),
    "ancient": WordDef(2, "adj", ("old", "antique"), ("modern", "new")),
    "modern": WordDef(2, "adj", ("new", "current"), ("ancient", "old")),
    "loud": WordDef(2, "adj", ("noisy",), ("quiet", "silent")),
    "quiet": WordDef(2, "adj", ("silent", "calm"), ("loud", "noisy")),
    "awful": WordDef(2, "adj", ("terrible", "bad"), ("great", "good")),
    "wealthy": WordDef(3, "adj", ("rich", "affluent"), ("poor", "needy")),
    "gloomy": WordDef(3, "adj", ("sad", "dismal"), ("cheerful", "happy")),
    "swift": WordDef(3, "adj", ("quick", "rapid"), ("sluggish", "slow")),
    "sluggish": WordDef(3, "adj", ("slow",), ("swift", "fast")),
    "fearless": WordDef(3, "adj", ("brave", "bold"), ("timid",)),
    "bold": WordDef(3, "adj", ("brave", "daring"), ("timid", "shy")),
    "silent": WordDef(3, "adj", ("quiet",), ("loud", "noisy")),
    # verbs
    "begin": WordDef(1, "verb", ("start",), ("end", "finish")),
    "start": WordDef(1, "verb", ("begin",), ("stop", "finish")),
    "stop": WordDef(1, "verb", ("halt", "end"), ("start", "go")),
    "go": WordDef(1, "verb", ("leave",), ("come", "stay")),
    "come": WordDef(1, "verb", ("arrive",), ("go", "leave")),
    "give": WordDef(1, "verb", ("offer",), ("take",)),
    "take": WordDef(1, "verb", ("grab",), ("give",)),
    "laugh": WordDef(1, "verb", ("giggle",), ("cry",)),
    "cry": WordDef(1, "verb", ("weep", "sob"), ("laugh",)),
    "finish": WordDef(2, "verb", ("end", "complete"), ("start", "begin")),
    "end": WordDef(2, "verb", ("finish", "stop"), ("begin", "start")),
    "leave": WordDef(2, "verb", ("depart", "go"), ("arrive", "stay")),
    "arrive": WordDef(2, "verb", ("come",), ("leave", "depart")),
    "buy": WordDef(2, "verb", ("purchase",), ("sell",)),
    "sell": WordDef(2, "verb", (), ("buy", "purchase")),
    "win": WordDef(2, "verb", ("triumph",), ("lose",)),
    "lose": WordDef(2, "verb", (), ("win", "find")),
    "find": WordDef(2, "verb", ("discover",), ("lose",)),
    "purchase": WordDef(3, "verb", ("buy",), ("sell",)),
    "depart": WordDef(3, "verb", ("leave",), ("arrive",)),
    "discover": WordDef(3, "verb", ("find",), ("conceal",)),
    "conceal": WordDef(3, "verb", ("hide",), ("reveal", "discover")),
    "reveal": WordDef(3, "verb", ("show",), ("conceal", "hide")),
    "hide": WordDef(3, "verb", ("conceal",), ("reveal", "show")),
    "show": WordDef(3, "verb", ("reveal",), ("hide",)),
    # nouns
    "man": WordDef(1, "noun", ("gentleman",), ("woman",)),
    "woman": WordDef(1, "noun", ("lady",), ("man",)),
    "day": WordDef(1, "noun", (), ("night",)),
    "night": WordDef(1, "noun", (), ("day",)),
    "friend": WordDef(1, "noun", ("buddy", "pal"), ("enemy",)),
    "enemy": WordDef(2, "noun", ("foe", "rival"), ("friend", "ally")),
    "war": WordDef(2, "noun", ("conflict",), ("peace",)),
    "peace": WordDef(2, "noun", ("calm",), ("war", "conflict")),
    "beginning": WordDef(2, "noun", ("start", "origin"), ("ending",)),
    "ending": WordDef(2, "noun", ("finale",), ("beginning",)),
    "ally": WordDef(3, "noun", ("partner", "friend"), ("enemy", "foe")),
    "foe": WordDef(3, "noun", ("enemy",), ("ally", "friend")),
    "conflict": WordDef(3, "noun", ("war", "dispute"), ("peace",)),
    "victory": WordDef(3, "noun", ("triumph", "win"), ("defeat",)),
    "defeat": WordDef(3, "noun", ("loss",), ("victory",)),
    "lady": WordDef(3, "noun", ("woman",), ("gentleman",)),
    "gentleman": WordDef(3, "noun", ("man",), ("lady",)),
}


# Legacy task content, served when no generator family exists for the type.
FALLBACK_SYNONYMS: tuple[dict, ...] = (
    {"word": "Big", "synonyms": ["Large", "Huge", "Giant", "Massive"], "hint": "Opposite of small"},
    {"word": "Fast", "synonyms": ["Quick", "Rapid", "Swift", "Speedy"], "hint": "Opposite of slow"},
)
FALLBACK_RHYMES: tuple[dict, ...] = (
    {"word": "Cat", "rhymes": ["Bat", "Hat", "Mat", "Rat", "Sat"], "hint": "Animal"},
    {"word": "Moon", "rhymes": ["Soon", "Noon", "Spoon", "Tune"], "hint": "Night sky"},
)
FALLBACK_SENTENCES: tuple[dict, ...] = (
    {"word1": "Sun", "word2": "Ice", "example_sentence": "The sun melted the ice."},
    {"word1": "Dog", "word2": "Park", "example_sentence": "The dog ran around the park."},
)


# =============================================================================
# Relation index
# =============================================================================


@dataclass(frozen=True)
class WordEntry:
    id: str
    text: str
    tier: int
    pos: PartOfSpeech


@dataclass(frozen=True)
class Relation:
    kind: RelationKind
    target_id: str
    partner_id: str


@dataclass(frozen=True)
class RelationIndex:
    """Immutable lookup tables built from RELATIONS_DB."""

    words: tuple[WordEntry, ...]
    relations: tuple[Relation, ...]
    by_id: Mapping[str, WordEntry]
    id_by_text: Mapping[str, str]

    def partners_of(self, word_id: str, kind: RelationKind) -> set[str]:
        return {r.partner_id for r in self.relations if r.kind == kind and r.target_id == word_id}


def build_relation_index(db: Mapping[str, WordDef] = RELATIONS_DB) -> RelationIndex:
    """
    Index the authoring table: assign word ids, then resolve directed
    synonym/antonym edges. Partners that are not themselves entries are
    dropped.
    """
    words: list[WordEntry] = []
    id_by_text: dict[str, str] = {}

    for counter, (text, definition) in enumerate(db.items(), start=1):
        word_id = f"w_{counter}"
        id_by_text[text] = word_id
        words.append(WordEntry(id=word_id, text=text, tier=definition.tier, pos=definition.pos))

    relations: list[Relation] = []
    for text, definition in db.items():
        target_id = id_by_text[text]
        for kind, partners in (("synonym", definition.synonyms), ("antonym", definition.antonyms)):
            for partner in partners:
                partner_id = id_by_text.get(partner)
                if partner_id is not None and partner_id != target_id:
                    relations.append(Relation(kind=kind, target_id=target_id, partner_id=partner_id))

    return RelationIndex(
        words=tuple(words),
        relations=tuple(relations),
        by_id=MappingProxyType({w.id: w for w in words}),
        id_by_text=MappingProxyType(id_by_text),
    )


_relation_index: RelationIndex | None = None
_relation_index_lock = threading.Lock()


def get_relation_index() -> RelationIndex:
    """Build the relation index on first use; safe under concurrent callers."""
    global _relation_index
    if _relation_index is None:
        with _relation_index_lock:
            if _relation_index is None:
                index = build_relation_index()
                logger.info(f"Relation index built: {len(index.words)} words, {len(index.relations)} relations")
                _relation_index = index
    return _relation_index
