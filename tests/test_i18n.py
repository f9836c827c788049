from skyorrery.i18n import body_name, t


def test_translation_and_formatting():
    assert t("phenomenon_opposition", "ko", body="목성") == "목성 충"
    assert t("phenomenon_conjunction", "en", body="Mars") == "Mars in conjunction with the Sun"
    assert t("eclipse_annular", "ko") == "금환"


def test_unknown_language_falls_back_to_english():
    assert t("eclipse_total", "fr") == "Total"


def test_unknown_key_returns_key():
    assert t("no_such_key", "en") == "no_such_key"


def test_body_name():
    assert body_name("Saturn", "ko") == "토성"
    assert body_name("Saturn", "en") == "Saturn"
    assert body_name("Ceres", "ko") == "Ceres"
