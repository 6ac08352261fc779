"""Validation rules for account and message fields

The ``is_valid_*`` predicates are pure: no I/O, no clock, no randomness.
The ``ensure_valid_*`` helpers raise ``ValidationError`` carrying the
message shown to the user.
"""

import re

from quickchat.core.exceptions import ValidationError

USERNAME_MAX_LENGTH = 5
PASSWORD_MIN_LENGTH = 8
MESSAGE_MAX_LENGTH = 250
PASSWORD_SYMBOLS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

_UPPERCASE_PATTERN = re.compile(r"[A-Z]")
_DIGIT_PATTERN = re.compile(r"[0-9]")
_SYMBOL_PATTERN = re.compile("[" + re.escape(PASSWORD_SYMBOLS) + "]")
# ASCII digits only; fullmatch so a trailing newline is rejected
_CELL_NUMBER_PATTERN = re.compile(r"\+27[0-9]{9,10}")

USERNAME_ERROR = (
    "Username is not correctly formatted, please ensure that your username contains "
    "an underscore and is no more than five characters in length."
)
PASSWORD_ERROR = (
    "Password is not correctly formatted; please ensure that the password contains "
    "at least eight characters, a capital letter, a number, and a special character."
)
CELL_NUMBER_ERROR = (
    "Cell number is incorrectly formatted or does not contain international code, "
    "please correct the number and try again."
)
RECIPIENT_ERROR = (
    "Cell phone number incorrectly formatted or does not contain international code. "
    "Please correct the number and try again."
)
MESSAGE_ERROR = "Message exceeds 250 characters, please reduce size."


def is_valid_username(username: str) -> bool:
    """Username must contain an underscore and be at most five characters"""
    return "_" in username and len(username) <= USERNAME_MAX_LENGTH


def is_valid_password(password: str) -> bool:
    """Password needs eight characters, a capital, a digit and a symbol"""
    if len(password) < PASSWORD_MIN_LENGTH:
        return False
    if not _UPPERCASE_PATTERN.search(password):
        return False
    if not _DIGIT_PATTERN.search(password):
        return False
    return _SYMBOL_PATTERN.search(password) is not None


def is_valid_cell_number(cell_number: str) -> bool:
    """South African number: +27 followed by nine or ten digits"""
    return _CELL_NUMBER_PATTERN.fullmatch(cell_number) is not None


def check_recipient_cell(cell_number: str) -> bool:
    """Recipients follow the same rule as account cell numbers"""
    return is_valid_cell_number(cell_number)


def is_valid_message_body(body: str) -> bool:
    return len(body) <= MESSAGE_MAX_LENGTH


def ensure_valid_username(username: str) -> str:
    if not is_valid_username(username):
        raise ValidationError(USERNAME_ERROR, field="username")
    return username


def ensure_valid_password(password: str) -> str:
    if not is_valid_password(password):
        raise ValidationError(PASSWORD_ERROR, field="password")
    return password


def ensure_valid_cell_number(cell_number: str) -> str:
    if not is_valid_cell_number(cell_number):
        raise ValidationError(CELL_NUMBER_ERROR, field="cell_number")
    return cell_number


def ensure_valid_recipient(cell_number: str) -> str:
    if not check_recipient_cell(cell_number):
        raise ValidationError(RECIPIENT_ERROR, field="recipient")
    return cell_number


def ensure_valid_message_body(body: str) -> str:
    if not is_valid_message_body(body):
        raise ValidationError(MESSAGE_ERROR, field="body")
    return body
