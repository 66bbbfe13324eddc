"""Minified results-page markup, shaped like the live site's pairing rows."""
from typing import List, Optional, Sequence, Tuple


def game_row(
    players: Tuple[str, str],
    lists: Tuple[str, str],
    winner: Optional[int] = 0,
) -> str:
    """One game row: each side is "<name><span>caster</span>"."""
    classes = ["player winner" if winner == side else "player" for side in (0, 1)]
    return (
        '<div class="game">'
        f'<div class="{classes[0]}">{players[0]}<span>{lists[0]}</span></div>'
        f'<div class="{classes[1]}">{players[1]}<span>{lists[1]}</span></div>'
        "</div>"
    )


def team_cell(label: str) -> str:
    return f'<div class="team"><div><span class="flag"></span><span>{label}</span></div></div>'


def pairing_row(zone: str, teams: Tuple[str, str], games: Sequence[str] = ()) -> str:
    return (
        '<div class="pairing-row">'
        f'<div class="zone"><span>Table</span><span>{zone}</span></div>'
        + team_cell(teams[0])
        + '<div class="score">3 - 2</div>'
        + team_cell(teams[1])
        + '<div class="games">'
        + "".join(games)
        + "</div></div>"
    )


def results_page(rows: List[str]) -> str:
    return (
        "<!DOCTYPE html><html><head><title>Round results</title></head><body>"
        '<div id="content"><h1>Pairings</h1><section class="pairings">'
        + "".join(rows)
        + "</section></div></body></html>"
    )


SCENARIO_GAME = game_row(("Alice", "Bob"), ("Caine 2", "Absylonia 2"), winner=0)
SCENARIO_ROW = pairing_row("Zone A", ("USA Team Eagles", "France Team Wolves"), [SCENARIO_GAME])
