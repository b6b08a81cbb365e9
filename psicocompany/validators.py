"""
Client-side form validators and formatters.

Messages returned here are shown to users as-is (pt-BR).
"""

from __future__ import annotations

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NON_DIGITS = re.compile(r"[^0-9]")
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 3


def validate_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(value or ""))


def validate_password(value: str) -> Optional[str]:
    """Return an error message for a weak password, None when acceptable."""
    if len(value or "") < MIN_PASSWORD_LENGTH:
        return f"A senha deve ter no mínimo {MIN_PASSWORD_LENGTH} caracteres"
    return None


def validate_full_name(value: str) -> Optional[str]:
    name = (value or "").strip()
    if not name:
        return "Nome completo é obrigatório"
    if len(name) < MIN_NAME_LENGTH:
        return f"Nome deve ter pelo menos {MIN_NAME_LENGTH} caracteres"
    return None


def phone_digits(raw: str) -> str:
    return NON_DIGITS.sub("", raw or "")


def format_phone(raw: str) -> str:
    """
    Format a Brazilian phone number.

    11 digits (mobile) -> "(NN) NNNNN-NNNN"
    10 digits (landline) -> "(NN) NNNN-NNNN"
    Anything else is returned as the bare digits.
    """
    digits = phone_digits(raw)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return digits


def validate_phone(value: str) -> Optional[str]:
    # Phone is optional on the profile.
    if not (value or "").strip():
        return None
    if len(phone_digits(value)) not in (10, 11):
        return "Telefone inválido. Use DDD + número"
    return None
