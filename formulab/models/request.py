"""Formulation request model and the closed option sets the form offers."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class ProductType(str, Enum):
    """Product category."""

    LOTION = "化粧水"
    CREAM = "クリーム"
    SERUM = "美容液"
    CLEANSER = "クレンザー"
    SUNSCREEN = "日焼け止め"


class SkinType(str, Enum):
    """Target skin type."""

    OILY = "脂性肌"
    DRY = "乾燥肌"
    COMBINATION = "混合肌"
    SENSITIVE = "敏感肌"
    NORMAL = "普通肌"


class Effect(str, Enum):
    """Desired product effect."""

    MOISTURIZING = "保湿"
    AGING_CARE = "エイジングケア"
    BRIGHTENING = "美白"
    ACNE_CARE = "ニキビケア"
    SOOTHING = "鎮静"
    UV_PROTECTION = "UVカット"


class Texture(str, Enum):
    """Preferred texture."""

    LIGHT = "さっぱり"
    RICH = "しっとり"
    GEL = "ジェル状"
    WATERY = "ウォータリー"


class FormulationRequest(BaseModel):
    """Client requirements for one generation cycle.

    Frozen: a field change produces a new request (see ``with_changes``).
    Wire form uses camelCase keys; snake_case names are accepted too.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    product_name: str = Field(min_length=1)
    email: EmailStr
    concept: str = ""
    product_type: ProductType
    skin_types: tuple[SkinType, ...] = ()
    effects: tuple[Effect, ...] = ()
    featured_ingredients: tuple[str, ...] = ()
    include_ingredients: str = ""
    exclude_ingredients: str = ""
    texture: Texture

    @field_validator("skin_types", "effects")
    @classmethod
    def _dedupe(cls, values: tuple) -> tuple:
        # Checkbox groups are sets; keep first-seen order so prompts stay deterministic
        return tuple(dict.fromkeys(values))

    @field_validator("featured_ingredients")
    @classmethod
    def _drop_blank_names(cls, values: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(v.strip() for v in values if v and v.strip()))

    def with_changes(self, **changes) -> "FormulationRequest":
        """Return a new, re-validated request with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})
