"""Shared validation utilities"""

import re
from typing import Optional


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_br_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a Brazilian phone number to E.164 format.

    Accepts 10 digits (landline) or 11 digits (mobile) including the area
    code, optionally prefixed by the country code 55.

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)

    if digits.startswith("55") and len(digits) in (12, 13):
        digits = digits[2:]

    if len(digits) not in (10, 11):
        raise ValueError("Phone number must have 10 or 11 digits including area code")

    return f"+55{digits}"


def validate_cpf(cpf: Optional[str]) -> Optional[str]:
    """
    Validate a CPF (Brazilian taxpayer id) using its two check digits.

    Returns:
        The 11 digits without punctuation

    Raises:
        ValueError: If the CPF is malformed or the check digits do not match
    """
    if not cpf:
        return cpf

    digits = re.sub(r"\D", "", cpf)
    if len(digits) != 11 or digits == digits[0] * 11:
        raise ValueError("Invalid CPF")

    for position in (9, 10):
        total = sum(int(digits[i]) * (position + 1 - i) for i in range(position))
        check = (total * 10) % 11 % 10
        if check != int(digits[position]):
            raise ValueError("Invalid CPF")

    return digits
