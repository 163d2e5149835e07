"""Prompt builder: FormulationRequest -> natural-language instruction for the model."""

from collections.abc import Iterable
from enum import Enum

from formulab.models.request import FormulationRequest

# Substituted for empty lists / blank free text so the model never sees an empty token
NONE_SPECIFIED = "特になし"

SYSTEM_ROLE = (
    "あなたは化粧品OEM企業の経験豊富な処方開発担当者です。"
    "クライアントからの以下の要望に基づき、革新的で安定性が高く、製造可能な化粧品の処方を提案してください。"
)

DELIVERABLES = (
    "**処方詳細**: 各成分の配合率(%)と役割を明確にした、水相・油相などのフェーズごとの処方。"
    "合計が100%になるように構成してください。",
    "**製造手順**: 専門家が理解できるレベルの詳細な製造工程。",
    "**概算コスト**: この処方を製造した場合の、製品1個あたりの参考価格帯を文字列で提示してください。"
    '(例: "約500円〜800円/個")',
    "**最小発注ロット(MOQ)**: この処方を弊社で製造する場合の、最小発注ロットを文字列で提示してください。"
    '(例: "3,000個から")',
    "**注記事項**: 防腐設計、安定性、pH調整などに関する専門的な補足事項。",
)

CLOSING = (
    "提案は、クライアントがすぐにでも製品開発を進めたいと思えるような、魅力的かつ具体的な内容にしてください。\n"
    "必ずJSON形式で出力してください。"
)


def _join(values: Iterable) -> str:
    items = [v.value if isinstance(v, Enum) else str(v) for v in values]
    return ", ".join(items) if items else NONE_SPECIFIED


def _text_or_placeholder(value: str) -> str:
    value = (value or "").strip()
    return value or NONE_SPECIFIED


def build_prompt(request: FormulationRequest) -> str:
    """Build the instruction prompt for one request.

    Deterministic: the same request always yields the same string.
    """
    requirements = [
        ("製品名", request.product_name),
        ("ご担当者連絡先", request.email),
        ("製品コンセプト", _text_or_placeholder(request.concept)),
        ("製品タイプ", request.product_type.value),
        ("対象肌質", _join(request.skin_types)),
        ("期待される効果", _join(request.effects)),
        ("弊社からの注目原料の利用希望", _join(request.featured_ingredients)),
        ("その他、配合したい成分", _text_or_placeholder(request.include_ingredients)),
        ("配合したくない成分", _text_or_placeholder(request.exclude_ingredients)),
        ("テクスチャの希望", request.texture.value),
    ]

    lines = [SYSTEM_ROLE, "", "# クライアントの要望"]
    lines += [f"- {label}: {value}" for label, value in requirements]
    lines += ["", "# 提案に含めるべき項目"]
    lines += [f"{i}. {item}" for i, item in enumerate(DELIVERABLES, 1)]
    lines += ["", CLOSING]
    return "\n".join(lines)
