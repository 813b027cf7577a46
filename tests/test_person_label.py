import pytest

from standbydesk.model import TextFragment
from standbydesk.pdf.person_label import identify_person, is_boilerplate
from standbydesk.pdf.spatial_index import FragmentIndex


@pytest.mark.parametrize(
    "text, expected",
    [
        ("KRÉTA", True),
        ("2024/2025 1. hét", True),
        ("42", True),
        ("", True),
        ("Kovács Éva", False),
        ("Hétfő", False),
    ],
)
def test_is_boilerplate(text, expected):
    assert is_boilerplate(text) is expected


def test_identify_person_skips_boilerplate_and_takes_topmost():
    index = FragmentIndex.build(
        [
            TextFragment("KRÉTA", 40.0, 800.0),
            TextFragment("12", 500.0, 790.0),
            TextFragment("Nagy Pál", 40.0, 760.0),
            TextFragment("Osztályfőnök", 40.0, 740.0),
            TextFragment("Hétfő", 120.0, 700.0),
        ]
    )
    assert identify_person(index, 700.0) == "Nagy Pál"


def test_identify_person_requires_header_buffer():
    # 715 is not above header_y + 20
    index = FragmentIndex.build([TextFragment("Nagy Pál", 40.0, 715.0)])
    assert identify_person(index, 700.0) is None


def test_identify_person_first_wins_on_ties():
    index = FragmentIndex.build(
        [
            TextFragment("Első Név", 40.0, 760.0),
            TextFragment("Második Név", 300.0, 760.0),
        ]
    )
    assert identify_person(index, 700.0) == "Első Név"
