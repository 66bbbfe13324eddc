import pytest
from bs4 import BeautifulSoup

from wtc.extraction import paths
from wtc.extraction.extractor import (
    PairingExtractor,
    clean_team_label,
    decode_pairing,
    find_pairing_rows,
)
from wtc.extraction.paths import MalformedPairingError
from wtc.models.pairing import Game, Match, Page

from pages import SCENARIO_ROW, game_row, pairing_row, results_page


def first_row(html: str):
    return next(find_pairing_rows(BeautifulSoup(html, "html.parser")))


def test_scenario_pairing_decodes_to_match():
    match = decode_pairing(first_row(SCENARIO_ROW), round_number=1)

    assert match == Match(
        round=1,
        zone="Zone A",
        teams=("USA Team Eagles", "France Team Wolves"),
        games=[Game(players=("Alice", "Bob"), lists=("Caine 2", "Absylonia 2"), winner=0)],
    )


@pytest.mark.parametrize("count", [0, 1, 3, 5])
def test_one_game_per_game_row(count):
    games = [game_row((f"P{i}a", f"P{i}b"), ("Haley 2", "Skarre 1")) for i in range(count)]
    match = decode_pairing(first_row(pairing_row("Zone B", ("USA A", "Wales B"), games)), 2)

    assert len(match.teams) == 2
    assert len(match.games) == count
    assert [g.players[0] for g in match.games] == [f"P{i}a" for i in range(count)]


def test_game_rows_beyond_five_are_ignored(log_records):
    games = [game_row((f"P{i}a", f"P{i}b"), ("Haley 2", "Skarre 1")) for i in range(7)]
    match = decode_pairing(first_row(pairing_row("Zone B", ("USA A", "Wales B"), games)), 2)

    assert len(match.games) == 5
    assert any("beyond 5" in r["message"] for r in log_records)


def test_winner_is_second_side_without_winner_class():
    row = pairing_row("Zone C", ("USA A", "Wales B"), [game_row(("A", "B"), ("Nemo 3", "Zaal 1"), winner=1)])
    (game,) = decode_pairing(first_row(row), 1).games

    assert game.winner == 1


def test_no_winner_marker_on_either_side_means_second_side():
    row = pairing_row("Zone C", ("USA A", "Wales B"), [game_row(("A", "B"), ("Nemo 3", "Zaal 1"), winner=None)])
    (game,) = decode_pairing(first_row(row), 1).games

    assert game.winner == 1


@pytest.mark.parametrize(
    "label, expected",
    [
        ("USA Team Eagles", "USA Team Eagles"),
        ("Team France Wolves", "France Wolves"),
        ("  TeamPoland Hussars ", "Poland Hussars"),
        (" Wales Dragons\n", "Wales Dragons"),
    ],
)
def test_clean_team_label(label, expected):
    assert clean_team_label(label) == expected


def test_walk_prunes_at_pairing_rows():
    nested = SCENARIO_ROW.replace(
        '<div class="score">3 - 2</div>', '<div class="score"><div class="pairing-row">x</div></div>'
    )
    soup = BeautifulSoup(results_page([nested, SCENARIO_ROW]), "html.parser")

    rows = list(find_pairing_rows(soup))

    assert len(rows) == 2
    assert all("pairing-row" in row["class"] for row in rows)


def test_extract_preserves_document_order():
    rows = [
        pairing_row(f"Zone {z}", ("USA A", "Wales B"), [game_row(("A", "B"), ("Nemo 3", "Zaal 1"))])
        for z in "ABC"
    ]
    matches = list(PairingExtractor().extract(Page(round=3, content=results_page(rows))))

    assert [m.zone for m in matches] == ["Zone A", "Zone B", "Zone C"]
    assert {m.round for m in matches} == {3}


def test_malformed_pairing_is_skipped_and_siblings_survive(log_records):
    broken = (
        '<div class="pairing-row"><div class="zone"><span>Zone X</span></div>'
        '<div class="team"><div><span>USA A</span></div></div></div>'
    )
    extractor = PairingExtractor()
    page = Page(round=1, content=results_page([SCENARIO_ROW, broken, SCENARIO_ROW]))

    matches = list(extractor.extract(page))

    assert len(matches) == 2
    assert extractor.malformed == 1
    errors = [r for r in log_records if r["level"].name == "ERROR"]
    assert len(errors) == 1
    assert "team_2" in errors[0]["message"]
    assert errors[0]["extra"]["position"] == 2


def test_game_row_missing_list_names_the_field():
    row = pairing_row(
        "Zone A",
        ("USA A", "Wales B"),
        ['<div class="game"><div class="player winner">Alice</div><div class="player">Bob<span>Zaal 1</span></div></div>'],
    )

    with pytest.raises(MalformedPairingError) as excinfo:
        decode_pairing(first_row(row), 1)

    assert excinfo.value.field == "game_1.list_1"


def test_page_without_pairings_yields_nothing():
    page = Page(round=4, content="<html><body><p>No pairings published yet</p></body></html>")

    assert list(PairingExtractor().extract(page)) == []


def test_text_step_requires_a_text_node():
    soup = BeautifulSoup("<div><p><b>bold</b></p></div>", "html.parser")

    with pytest.raises(MalformedPairingError) as excinfo:
        paths.path("label", paths.Step.FIRST, paths.Step.TEXT).resolve(soup.div)

    assert excinfo.value.field == "label"
    assert "text node" in excinfo.value.detail


def test_missing_node_reports_the_trail():
    soup = BeautifulSoup("<div><p>only</p></div>", "html.parser")

    with pytest.raises(MalformedPairingError) as excinfo:
        paths.TEAM_1.resolve(soup.div)

    assert excinfo.value.detail == "no node at first/next"


def test_deeply_nested_page_is_walked_without_recursion():
    depth = 1500
    content = "<html><body>" + "<div>" * depth + SCENARIO_ROW + "</div>" * depth + SCENARIO_ROW + "</body></html>"

    matches = list(PairingExtractor().extract(Page(round=1, content=content)))

    assert [m.zone for m in matches] == ["Zone A", "Zone A"]


def test_unparseable_page_yields_no_matches(log_records):
    extractor = PairingExtractor(parser="no-such-parser")

    matches = list(extractor.extract(Page(round=5, content=results_page([SCENARIO_ROW]))))

    assert matches == []
    assert extractor.unparsed_pages == 1
    errors = [r for r in log_records if r["level"].name == "ERROR"]
    assert len(errors) == 1
    assert errors[0]["extra"]["round"] == 5
