"""Formulation response models (the schema the model must conform to)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictStr
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Ingredient(BaseModel):
    """One ingredient line of a phase."""

    model_config = _CAMEL

    name: StrictStr = Field(description="成分名")
    percentage: StrictFloat = Field(ge=0, description="配合率 (%)")
    role: StrictStr = Field(description="成分の役割 (例: 保湿剤, 乳化剤)")


class Phase(BaseModel):
    """A manufacturing phase (e.g. water phase, oil phase)."""

    model_config = _CAMEL

    phase_name: StrictStr = Field(description="相の名前 (例: A. 水相)")
    ingredients: list[Ingredient] = Field(min_length=1, description="その相に含まれる成分のリスト")

    @property
    def total_percentage(self) -> float:
        return sum(i.percentage for i in self.ingredients)


class Formulation(BaseModel):
    """Generated formulation as returned by the model."""

    model_config = _CAMEL

    product_name: StrictStr = Field(description="生成された処方の製品名")
    product_type: StrictStr = Field(description="製品のカテゴリ (例: 美容液, クリーム)")
    concept: StrictStr = Field(description="製品のコンセプトやキャッチコピー")
    suitability: StrictStr = Field(description="製品が適している肌質や得られる効果の概要")
    estimated_cost: StrictStr = Field(description='製品1個あたりの概算製造コスト (例: "約500円〜800円/個")')
    moq: StrictStr = Field(description='最小発注ロット (例: "3,000個から")')
    phases: list[Phase] = Field(min_length=1, description="製造工程の各相（水相、油相など）")
    instructions: list[StrictStr] = Field(description="製造手順のステップバイステップガイド")
    notes: StrictStr = Field(description="防腐、安定性、pH調整、使用感に関する追加の注意点")

    @property
    def total_percentage(self) -> float:
        """Sum over all phases. Informational only; not enforced to be 100."""
        return sum(p.total_percentage for p in self.phases)

    @property
    def ingredient_count(self) -> int:
        return sum(len(p.ingredients) for p in self.phases)


class SavedFormulation(BaseModel):
    """A formulation kept in the local saved list."""

    model_config = _CAMEL

    id: str
    created_at: datetime
    output: Formulation
