import asyncio

from main import build_parser, cli
from wtc.extraction.interchange import encode_match
from wtc.models.entities import ArmyList, GameRecord, MatchRecord, Player, Report
from wtc.models.pairing import Game, Match
from wtc.storage.sqlite_store import SQLiteStore


def test_fix_command_rewrites_file(tmp_path):
    source, target = tmp_path / "matches.jsonl", tmp_path / "fixed.jsonl"
    match = Match(
        round=1,
        zone="Zone A",
        teams=("USA A", "Wales B"),
        games=[Game(players=("Ivan", "Bob"), lists=("vHarkevich 1", "Zaal 1"), winner=0)],
    )
    source.write_text(encode_match(match) + "\n", encoding="utf-8")

    assert cli(["--silent", "fix", "--in", str(source), "--out", str(target)]) == 0
    assert '"Harkevich 1"' in target.read_text(encoding="utf-8")


def test_check_command_prints_unknown_casters(tmp_path, capsys):
    path = str(tmp_path / "data.sqlite")
    store = SQLiteStore(path)

    async def seed():
        for record in [
            Player(id=1, name="Bob"),
            ArmyList(id=1, caster="Kaine 2", player_id=1),
            MatchRecord(id=1, round=3, zone="Zone F"),
            GameRecord(id=1, match_id=1),
            Report(id=1, game_id=1, list_id=1, won=True),
        ]:
            await store.write(record)
        await store.close()

    asyncio.run(seed())

    assert cli(["--silent", "check", "--db", path]) == 0
    assert "Kaine 2" in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args(["crawl"])

    assert args.out == "-"
    assert args.rounds >= 1
