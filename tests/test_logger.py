"""Tests for log redaction of contact details."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from formulab.utils.logger import mask_email, redact_sensitive


def test_mask_email_keeps_domain_only():
    assert mask_email("buyer@example.com") == "b***@example.com"
    assert mask_email("not-an-email") == "***"
    assert mask_email(None) == "***"


def test_redacts_top_level_and_nested_fields():
    event = {
        "event": "inquiry.submitted",
        "email": "buyer@example.com",
        "inquiry": {
            "productName": "セラム",
            "email": "sato@example.jp",
            "companyName": "A社",
        },
        "requests": [{"concept": "ペプチド美容液", "texture": "さっぱり"}],
    }
    out = redact_sensitive(None, "info", event)
    assert out["email"] == "b***@example.com"
    assert out["inquiry"]["email"] == "s***@example.jp"
    assert out["inquiry"]["companyName"] == "A社"
    assert out["requests"][0]["concept"] == "<7 chars>"
    assert out["requests"][0]["texture"] == "さっぱり"
    assert "buyer@example.com" not in repr(out)


def test_leaves_other_values_untouched():
    exc_info = (ValueError, ValueError("x"), None)
    event = {"event": "x", "exc_info": exc_info, "count": 3}
    out = redact_sensitive(None, "error", event)
    assert out["exc_info"] is exc_info
    assert out["count"] == 3
