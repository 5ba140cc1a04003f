# src/todo_sync/tasks/task_validation.py

"""
Field rules for new tasks.

Rules are checked in declaration order per field and stop at the first failure,
so every field reports at most one message. The owner field is reported first
when both fields fail.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..core.errors import ValidationError

USER_NAME_MAX_LEN = 20
TEXT_MIN_LEN = 4

# Latin/Cyrillic letters plus ".", "_" and "-". An empty value matches; "required" catches it.
USER_NAME_PATTERN = re.compile(r"[a-zA-Zа-яА-Я._-]*")

MSG_REQUIRED = "Все поля являются обязательными"
MSG_USER_NAME_PATTERN = 'ERROR: Имя должно содержать только кириллицу, латиницу, ".", "_" и "-"'
MSG_USER_NAME_MAX = "ERROR: Имя не должен быть длиннее 20 символов"
MSG_TEXT_MIN = "ERROR: новое дело не должен быть короче 4 символов"

FIELD_USER_NAME = "userName"
FIELD_TEXT = "toDo"


@dataclass(slots=True, frozen=True)
class FieldError:
    field: str
    rule: str
    message: str

    def to_exception(self) -> ValidationError:
        return ValidationError(self.field, self.rule, self.message)


def check_user_name(value: str | None) -> FieldError | None:
    if not value:
        return FieldError(FIELD_USER_NAME, "required", MSG_REQUIRED)
    if USER_NAME_PATTERN.fullmatch(value) is None:
        return FieldError(FIELD_USER_NAME, "pattern", MSG_USER_NAME_PATTERN)
    if len(value) > USER_NAME_MAX_LEN:
        return FieldError(FIELD_USER_NAME, "max", MSG_USER_NAME_MAX)
    return None


def check_text(value: str | None) -> FieldError | None:
    # An empty string fails "min"; only a missing value is "required".
    if value is None:
        return FieldError(FIELD_TEXT, "required", MSG_REQUIRED)
    if len(value) < TEXT_MIN_LEN:
        return FieldError(FIELD_TEXT, "min", MSG_TEXT_MIN)
    return None


def validate_new_task(user_name: str | None, text: str | None) -> list[FieldError]:
    errors: list[FieldError] = []
    for err in (check_user_name(user_name), check_text(text)):
        if err is not None:
            errors.append(err)
    return errors


def first_error(user_name: str | None, text: str | None) -> FieldError | None:
    errors = validate_new_task(user_name, text)
    return errors[0] if errors else None
