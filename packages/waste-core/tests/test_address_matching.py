from waste_core.core.models import Municipality
from waste_core.matching import KeywordAddressMatcher, significant_words


def _municipality(user_id: str, address: str | None) -> Municipality:
    return Municipality(user_id=user_id, full_name=user_id.title(), email=f"{user_id}@city.test", address=address)


def test_significant_words_drop_short_words_and_roadway_suffixes() -> None:
    assert significant_words("123 Oak Avenue, Downtown") == ["downtown"]
    assert significant_words("  Lake   Road,,Hillside ") == ["lake", "hillside"]


def test_matches_shared_locality_keyword() -> None:
    downtown = _municipality("downtown", "Downtown Municipal Office")
    uptown = _municipality("uptown", "Uptown Ward Office")

    matched = KeywordAddressMatcher().match("123 Oak Avenue, Downtown", [uptown, downtown])

    assert matched == downtown


def test_substring_matches_in_both_directions() -> None:
    matcher = KeywordAddressMatcher()
    municipality = _municipality("north", "Northfield")

    assert matcher.match("North Gate, Sector", [municipality]) == municipality
    assert matcher.match("Greater Northfieldshire", [_municipality("n2", "Northfield")]) is not None


def test_first_match_in_iteration_order_wins() -> None:
    first = _municipality("first", "Central Market")
    second = _municipality("second", "Central Station")

    assert KeywordAddressMatcher().match("Central Plaza", [first, second]) == first


def test_no_match_cases() -> None:
    matcher = KeywordAddressMatcher()
    municipalities = [_municipality("blank", None), _municipality("ward", "Riverside Ward")]

    assert matcher.match("", municipalities) is None
    assert matcher.match("12 Elm St", municipalities) is None
    assert matcher.match("Main Street", [_municipality("blank", None)]) is None
