"""User-level skip preferences."""

from pydantic import BaseModel, Field

from smartskip.models.category import Category


class SkipPreferences(BaseModel):
    """Which categories to skip and how playback should behave."""

    skip_sponsors: bool = Field(default=True, description="Skip sponsor reads")
    skip_intros: bool = Field(default=True, description="Skip intros")
    skip_outros: bool = Field(default=True, description="Skip outros")
    skip_donations: bool = Field(default=True, description="Skip donation shout-outs")
    skip_self_promo: bool = Field(default=True, description="Skip self-promotion")

    skip_buffer: float = Field(
        default=0.5, ge=0.0, le=10.0, description="Preview countdown before a skip, in seconds"
    )
    enable_preview: bool = Field(default=True, description="Show a cancellable preview before skipping")
    auto_skip: bool = Field(default=True, description="Skip automatically during playback")
    confidence_threshold: float = Field(
        default=0.85, ge=0.0, le=1.0, description="Minimum classifier confidence"
    )

    def is_enabled(self, category: Category) -> bool:
        toggles = {
            Category.SPONSOR: self.skip_sponsors,
            Category.INTRO: self.skip_intros,
            Category.OUTRO: self.skip_outros,
            Category.DONATIONS: self.skip_donations,
            Category.SELF_PROMO: self.skip_self_promo,
        }
        return toggles[category]

    def enabled_categories(self) -> list[Category]:
        """Return enabled categories in canonical order."""
        return [c for c in Category if self.is_enabled(c)]

    def should_skip(self, label: str) -> bool:
        """Check whether a segment with this category label should be skipped.

        Merged labels are skipped only when every component category is
        enabled. Unknown labels are never skipped.
        """
        components = Category.components(label)
        return all(c is not None and self.is_enabled(c) for c in components)
