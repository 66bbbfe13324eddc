from typing import Dict

from wtc.models.pairing import Game, Match

# Known data-entry variants on the results site
CASTER_CORRECTIONS: Dict[str, str] = {
    "vHarkevich 1": "Harkevich 1",
}


def correct_caster(caster: str) -> str:
    return CASTER_CORRECTIONS.get(caster, caster)


def fix_match(match: Match) -> Match:
    """Returns a copy of match with every caster name corrected."""
    games = [
        Game(
            players=game.players,
            lists=(correct_caster(game.lists[0]), correct_caster(game.lists[1])),
            winner=game.winner,
        )
        for game in match.games
    ]
    return match.model_copy(update={"games": games})
