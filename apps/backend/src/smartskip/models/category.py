"""Skip categories and the classifier vocabulary that maps onto them."""

from __future__ import annotations

from enum import Enum

MERGED_CATEGORY_SEPARATOR = " + "


class Category(str, Enum):
    """Fixed set of skippable segment categories."""

    SPONSOR = "Sponsor"
    INTRO = "Intro"
    OUTRO = "Outro"
    DONATIONS = "Donations"
    SELF_PROMO = "Self-Promo"

    @property
    def prompt_key(self) -> str:
        """Identifier the classifier is asked to emit for this category."""
        return _PROMPT_KEYS[self]

    @property
    def prompt_description(self) -> str:
        return _PROMPT_DESCRIPTIONS[self]

    @classmethod
    def from_label(cls, label: str) -> Category | None:
        """Resolve a raw classifier label or display name to a category.

        Exact matches against the translation table win; otherwise the
        first table key contained in the label is used.
        """
        normalized = label.strip().lower()
        if not normalized:
            return None
        if normalized in CATEGORY_TRANSLATIONS:
            return CATEGORY_TRANSLATIONS[normalized]
        for raw, category in CATEGORY_TRANSLATIONS.items():
            if raw in normalized:
                return category
        return None

    @classmethod
    def components(cls, label: str) -> list[Category | None]:
        """Resolve every part of a possibly merged label (``"A + B"``)."""
        return [cls.from_label(part) for part in label.split(MERGED_CATEGORY_SEPARATOR)]


# Raw classifier vocabulary -> category. Insertion order is the substring
# match priority, so longer and more specific keys come first.
CATEGORY_TRANSLATIONS: dict[str, Category] = {
    "sponsorships": Category.SPONSOR,
    "sponsorship": Category.SPONSOR,
    "sponsored": Category.SPONSOR,
    "sponsor": Category.SPONSOR,
    "paid promotion": Category.SPONSOR,
    "opening sequence": Category.INTRO,
    "intro": Category.INTRO,
    "closing sequence": Category.OUTRO,
    "end screen": Category.OUTRO,
    "outro": Category.OUTRO,
    "super chat": Category.DONATIONS,
    "donations": Category.DONATIONS,
    "donation": Category.DONATIONS,
    "acknowledgments": Category.DONATIONS,
    "acknowledgment": Category.DONATIONS,
    "channel_self_promo": Category.SELF_PROMO,
    "self_promo": Category.SELF_PROMO,
    "self-promotion": Category.SELF_PROMO,
    "self-promo": Category.SELF_PROMO,
    "merchandise": Category.SELF_PROMO,
    "merch": Category.SELF_PROMO,
    "promo": Category.SELF_PROMO,
}

_PROMPT_KEYS: dict[Category, str] = {
    Category.SPONSOR: "sponsorships",
    Category.INTRO: "intro",
    Category.OUTRO: "outro",
    Category.DONATIONS: "donations",
    Category.SELF_PROMO: "channel_self_promo",
}

_PROMPT_DESCRIPTIONS: dict[Category, str] = {
    Category.SPONSOR: "Paid promotions and sponsored reads for a third-party product or service",
    Category.INTRO: "Opening sequences, channel intros, animated title cards",
    Category.OUTRO: "Closing sequences, end screens, sign-offs after the content has ended",
    Category.DONATIONS: "Super chat, patron or donation acknowledgments and shout-outs",
    Category.SELF_PROMO: "Promotion of the creator's own channel, merch, socials or other projects",
}

ALL_CATEGORIES: tuple[Category, ...] = tuple(Category)
