"""Answer forms attached to topics"""

from typing import Mapping


def missing_required_fields(form_fields: list[dict], values: Mapping[str, str]) -> list[str]:
    """Labels of required fields left blank"""
    return [
        field.get("label") or field.get("id", "")
        for field in form_fields
        if field.get("required") and not values.get(field.get("id"))
    ]


def render_answer(template: str, values: Mapping[str, str]) -> str:
    """Fill ``{field_id}`` placeholders; each supplied value replaces its first occurrence"""
    answer = template or ""
    for field_id, value in values.items():
        answer = answer.replace(f"{{{field_id}}}", str(value), 1)
    return answer
