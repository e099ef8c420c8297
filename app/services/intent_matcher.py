import re
from typing import Iterable

from app.schemas.chat import ResponseRule
from app.services.responses import RESPONSE_TABLE, FALLBACK_RULE


def rule_matches(rule: ResponseRule, text: str) -> bool:
    return any(re.search(pattern, text, re.IGNORECASE) for pattern in rule.triggers)


def match_intent(text: str, table: Iterable[ResponseRule] = RESPONSE_TABLE) -> ResponseRule:
    """
    Devuelve la primera regla de la tabla cuyo patrón aparece en el texto.
    Sin coincidencias devuelve FALLBACK_RULE (sin señal de UI).
    """
    text = text.strip()
    for rule in table:
        if rule_matches(rule, text):
            return rule
    return FALLBACK_RULE
