import json
import random

import pytest

from chatplugins.tarot import (
    BED,
    Card,
    DrawnCard,
    Formation,
    TarotDeck,
    arcana_range,
    load_deck,
    parse_draw_command,
)


def _cards():
    return {
        str(i): Card(f"c{i}", f"up{i}", f"down{i}", f"{i}.png") for i in range(78)
    }


def _formations():
    return {"圣三角": Formation(3, False, [["past", "now", "future"]])}


@pytest.fixture
def deck():
    return TarotDeck(_cards(), _formations(), random.Random(7))


def _index(drawn):
    return int(drawn.card.name[1:])


def test_parse_single():
    assert parse_draw_command("抽塔罗牌") == (1, "塔罗牌")


def test_parse_many():
    assert parse_draw_command("抽5张小阿卡纳") == (5, "小阿卡纳")


def test_parse_no_match():
    assert parse_draw_command("抽牌") is None


def test_parse_too_many():
    with pytest.raises(ValueError):
        parse_draw_command("抽21张塔罗牌")


def test_parse_zero():
    with pytest.raises(ValueError):
        parse_draw_command("抽0张大阿卡纳")


def test_arcana_range_values():
    assert arcana_range("塔罗牌") == (0, 22)
    assert arcana_range("小阿尔卡纳") == (22, 55)
    assert arcana_range("混合") == (0, 77)


def test_draw_unique(deck):
    drawn = deck.draw(20, "塔罗牌")
    names = [d.card.name for d in drawn]
    assert len(names) == 20
    assert len(set(names)) == 20


def test_draw_minor_in_range(deck):
    start, length = arcana_range("小阿卡纳")
    for d in deck.draw(20, "小阿卡纳"):
        assert start <= _index(d) < start + length


def test_draw_major_in_range(deck):
    start, length = arcana_range("大阿卡纳")
    for d in deck.draw(5, "大阿卡纳"):
        assert start <= _index(d) < start + length


def test_draw_rejects_zero(deck):
    with pytest.raises(ValueError):
        deck.draw(0, "塔罗牌")


def test_draw_reproducible():
    a = TarotDeck(_cards(), _formations(), random.Random(3)).draw(6, "混合")
    b = TarotDeck(_cards(), _formations(), random.Random(3)).draw(6, "混合")
    assert a == b


def test_drawn_card_orientation():
    card = Card("x", "upright", "reversed", "x.png")
    up = DrawnCard(card, False)
    down = DrawnCard(card, True)
    assert up.description == "upright"
    assert down.description == "reversed"
    assert up.position == "『正位』"
    assert down.position == "『逆位』"
    assert up.image_url == BED + "x.png"
    assert down.image_url == BED + "Reverse/" + "x.png"
    assert up.title == "『正位』的『x』"


def test_lookup(deck):
    assert deck.lookup("c5") == Card("c5", "up5", "down5", "5.png")
    assert deck.lookup("nope") is None


def test_card_list_text(deck):
    text = deck.card_list_text()
    assert text.startswith("塔罗牌列表\n大阿尔卡纳:\n")
    for i in range(22):
        assert f"c{i}" in text.split()
    assert "c22" not in text.split()


def test_spread_labels(deck):
    laid = deck.spread("塔罗", "圣三角")
    assert [label for label, _ in laid] == ["past", "now", "future"]
    assert len({d.card.name for _, d in laid}) == 3


def test_spread_unknown(deck):
    with pytest.raises(KeyError) as info:
        deck.spread("塔罗", "missing")
    assert "圣三角" in str(info.value)


def test_formation_names(deck):
    assert deck.formation_names == ["圣三角"]


def test_load_deck(tmp_path):
    cards_file = tmp_path / "tarots.json"
    formations_file = tmp_path / "formation.json"
    cards_file.write_text(
        json.dumps(
            {
                str(i): {
                    "name": f"n{i}",
                    "info": {
                        "description": f"d{i}",
                        "reverseDescription": f"r{i}",
                        "imgUrl": f"{i}.png",
                    },
                }
                for i in range(78)
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    formations_file.write_text(
        json.dumps(
            {"pair": {"cards_num": 2, "is_cut": True, "represent": [["a", "b"]]}}
        ),
        encoding="utf-8",
    )
    deck = load_deck(cards_file, formations_file, random.Random(1))
    assert len(deck) == 78
    assert deck.lookup("n3") == Card("n3", "d3", "r3", "3.png")
    assert [label for label, _ in deck.spread("混合", "pair")] == ["a", "b"]