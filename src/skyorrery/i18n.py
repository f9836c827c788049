"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "body_Sun": {"ko": "태양", "en": "Sun"},
    "body_Moon": {"ko": "달", "en": "Moon"},
    "body_Mercury": {"ko": "수성", "en": "Mercury"},
    "body_Venus": {"ko": "금성", "en": "Venus"},
    "body_Earth": {"ko": "지구", "en": "Earth"},
    "body_Mars": {"ko": "화성", "en": "Mars"},
    "body_Jupiter": {"ko": "목성", "en": "Jupiter"},
    "body_Saturn": {"ko": "토성", "en": "Saturn"},
    "body_Uranus": {"ko": "천왕성", "en": "Uranus"},
    "body_Neptune": {"ko": "해왕성", "en": "Neptune"},
    "list_separator": {"ko": "·", "en": ", "},
    "phenomenon_opposition": {
        "ko": "{body} 충",
        "en": "{body} at opposition",
    },
    "phenomenon_conjunction": {
        "ko": "{body} 합",
        "en": "{body} in conjunction with the Sun",
    },
    "phenomenon_alignment": {
        "ko": "{bodies} 행성 정렬",
        "en": "Planetary alignment: {bodies}",
    },
    "phenomenon_solar_eclipse": {
        "ko": "{kind} 일식",
        "en": "{kind} solar eclipse",
    },
    "phenomenon_lunar_eclipse": {
        "ko": "{kind} 월식",
        "en": "{kind} lunar eclipse",
    },
    "phenomenon_possible_solar_eclipse": {
        "ko": "일식 가능성",
        "en": "Possible solar eclipse",
    },
    "phenomenon_possible_lunar_eclipse": {
        "ko": "월식 가능성",
        "en": "Possible lunar eclipse",
    },
    "eclipse_total": {"ko": "개기", "en": "Total"},
    "eclipse_annular": {"ko": "금환", "en": "Annular"},
    "eclipse_partial": {"ko": "부분", "en": "Partial"},
    "eclipse_penumbral": {"ko": "반영", "en": "Penumbral"},
}


def t(key: str, lang: str, **kwargs: str) -> str:
    """Return the translated string for key in lang, formatted with kwargs.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    text = entry.get(lang) or entry.get("en") or key
    return text.format(**kwargs) if kwargs else text


def body_name(body_id: str, lang: str) -> str:
    """Localized body name; unknown ids are returned unchanged."""
    key = f"body_{body_id}"
    return body_id if key not in _STRINGS else t(key, lang)
