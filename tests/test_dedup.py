from lajme.dedup import deduplicate, is_similar_title, normalize_title, word_overlap
from lajme.models import RawFeedItem


def item(title, link, source="Telegrafi"):
    return RawFeedItem(title=title, link=link, source=source)


def test_normalize_title():
    assert normalize_title("Hello, World!!  Again ") == "hello world again"
    assert normalize_title("Kurti: “Po”") == "kurti po"
    assert len(normalize_title("a" * 150)) == 100


def test_word_overlap_uses_larger_set():
    a = normalize_title("Kurti takon Vuçiqin në Bruksel")
    b = normalize_title("Kurti takon Vuçiqin në Bruksel për dialogun")
    # {kurti, takon, vuçiqin, bruksel} vs the same plus "dialogun"
    assert word_overlap(a, b) == 4 / 5
    assert word_overlap("", "") == 0.0


def test_no_duplicates_keeps_order():
    items = [
        item("Qeveria miraton buxhetin", "https://a.com/1"),
        item("Ndeshja e mbrëmjes", "https://a.com/2"),
        item("Moti për fundjavë", "https://b.com/3", source="Insajderi"),
    ]
    assert deduplicate(items) == items


def test_exact_link_duplicate_keeps_first():
    first = item("Titulli i parë i lajmit", "https://a.com/1")
    second = item("Titull krejt tjetër për lajmin", "https://a.com/1", source="Insajderi")
    assert deduplicate([first, second]) == [first]


def test_punctuation_and_case_duplicate():
    first = item("Kurti takon Bislimin në Bruksel!", "https://telegrafi.com/1")
    second = item("kurti takon bislimin në bruksel", "https://insajderi.org/2", source="Insajderi")
    assert deduplicate([first, second]) == [first]


def test_high_word_overlap_is_duplicate():
    first = item("Kurti takon Vuçiqin në Bruksel për dialogun", "https://telegrafi.com/1")
    second = item("Kurti takon Vuçiqin në Bruksel për dialogun sot", "https://insajderi.org/2")
    assert deduplicate([first, second]) == [first]


def test_low_word_overlap_is_kept():
    first = item("Qeveria miraton buxhetin për vitin 2025 sot", "https://telegrafi.com/1")
    second = item("Qeveria refuzon kërkesën e sindikatave për rritje", "https://insajderi.org/2")
    assert deduplicate([first, second]) == [first, second]


def test_short_titles_need_exact_match():
    assert not is_similar_title("kurti flet", "kurti flet sot")
    assert is_similar_title("kurti flet", "kurti flet")


def test_empty_links_and_titles_are_not_keys():
    a = item("Lajmi i parë i ditës", "")
    b = item("Një tjetër ngjarje e rëndësishme", "")
    c = item("", "https://a.com/1")
    d = item("", "https://a.com/2")
    assert deduplicate([a, b, c, d]) == [a, b, c, d]
