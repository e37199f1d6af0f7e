from __future__ import annotations


AUTH_TAG = "auth-service"


def normalize_email(email: str) -> str:
    return email.strip().lower()
