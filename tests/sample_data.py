"""Shared sample payloads for tests."""

import json

SAMPLE_FORMULATION = {
    "productName": "ハイドラ ペプチド セラム",
    "productType": "美容液",
    "concept": "ペプチドとヒアルロン酸で、乾燥小じわにアプローチするさっぱり美容液。",
    "suitability": "乾燥肌・普通肌の方の保湿とエイジングケアに。",
    "estimatedCost": "約500円〜800円/個",
    "moq": "3,000個から",
    "phases": [
        {
            "phaseName": "A. 水相",
            "ingredients": [
                {"name": "精製水", "percentage": 85.5, "role": "基剤"},
                {"name": "ヒアルロン酸Na", "percentage": 10.0, "role": "保湿剤"},
            ],
        },
        {
            "phaseName": "B. 添加相",
            "ingredients": [
                {"name": "パルミトイルペンタペプチド-4", "percentage": 4.5, "role": "エイジングケア成分"},
            ],
        },
    ],
    "instructions": ["A相を75℃で溶解する。", "40℃まで冷却しB相を添加する。"],
    "notes": "pHは5.5〜6.5に調整。パラベンフリーの防腐設計。",
}

SAMPLE_FORMULATION_JSON = json.dumps(SAMPLE_FORMULATION, ensure_ascii=False)

SAMPLE_REQUEST = {
    "productName": "エイジングケア美容液",
    "email": "buyer@example.com",
    "concept": "次世代のエイジングケア体験を提供する美容液。",
    "productType": "美容液",
    "skinTypes": ["乾燥肌"],
    "effects": ["保湿"],
    "featuredIngredients": [],
    "includeIngredients": "ヒアルロン酸",
    "excludeIngredients": "",
    "texture": "さっぱり",
}
