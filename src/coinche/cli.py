"""
Command-line interface for scoring rounds and querying a scorebook.

Usage examples:

    python -m coinche.cli score-round --contract 80 --declarer blue \\
        --blue-points 90 --red-points 62 --last-trick blue

    python -m coinche.cli stats --scorebook books/office ABC
"""
from __future__ import annotations

import argparse
from datetime import datetime, timezone
from typing import Optional
import uuid

from .announcements import BELOTE_REBELOTE, CATALOG
from .rules import CONTRACTS, Contract, Team
from .scoring import RoundInput, score_round
from .scorebook import scorebook_load, scorebook_save
from .stats import (
    MatchRecord,
    best_and_worst_duo,
    global_score,
    head_to_head,
    leaderboard,
    rivalries,
    unlocked_badges,
)

TEAM_CHOICES = [t.value for t in Team]
ANNOUNCE_CHOICES = [e.title for e in CATALOG if e.title != BELOTE_REBELOTE]


def _add_score_round_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "score-round",
        help="Compute the points of one round.",
    )
    parser.add_argument(
        "--contract",
        choices=[c.value for c in CONTRACTS],
        required=True,
        help="Declared contract (80..160 or capot).",
    )
    parser.add_argument(
        "--declarer",
        choices=TEAM_CHOICES,
        required=True,
        help="Team that took the contract.",
    )
    parser.add_argument("--coinche", action="store_true", help="Contract was coinched (x2).")
    parser.add_argument("--surcoinche", action="store_true", help="Contract was surcoinched (x4).")
    parser.add_argument("--blue-points", type=int, default=0, help="Trick points taken by blue.")
    parser.add_argument("--red-points", type=int, default=0, help="Trick points taken by red.")
    parser.add_argument(
        "--last-trick",
        choices=TEAM_CHOICES,
        default=None,
        help="Team that took the last trick (+10).",
    )
    parser.add_argument(
        "--blue-announce",
        action="append",
        choices=ANNOUNCE_CHOICES,
        default=[],
        help="Announcement declared by blue (repeat the flag for several).",
    )
    parser.add_argument(
        "--red-announce",
        action="append",
        choices=ANNOUNCE_CHOICES,
        default=[],
        help="Announcement declared by red (repeat the flag for several).",
    )
    parser.add_argument(
        "--belote",
        choices=TEAM_CHOICES,
        default=None,
        help="Team holding Belote-Rebelote.",
    )
    parser.set_defaults(func=_cmd_score_round)


def _cmd_score_round(args: argparse.Namespace) -> None:
    rnd = RoundInput(
        contract=Contract(args.contract),
        declaring_team=Team(args.declarer),
        is_coinched=args.coinche or args.surcoinche,
        is_surcoinched=args.surcoinche,
        blue_points=args.blue_points,
        red_points=args.red_points,
        blue_last_trick=args.last_trick == Team.BLUE.value,
        red_last_trick=args.last_trick == Team.RED.value,
        blue_announcements=tuple(args.blue_announce),
        red_announcements=tuple(args.red_announce),
        blue_belote_rebelote=args.belote == Team.BLUE.value,
        red_belote_rebelote=args.belote == Team.RED.value,
    )
    result = score_round(rnd)
    status = "made" if result.contract_fulfilled else "failed"
    print(f"Contract {args.contract} by {args.declarer}: {status}")
    print(f"blue={result.blue_points} red={result.red_points}")


def _add_scorebook_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scorebook",
        type=str,
        default="scorebook",
        help="Scorebook directory.",
    )


def _add_add_player_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("add-player", help="Register a player by trigramme.")
    _add_scorebook_arg(parser)
    parser.add_argument("trigramme", type=str, help="Three-letter player code.")
    parser.set_defaults(func=_cmd_add_player)


def _cmd_add_player(args: argparse.Namespace) -> None:
    book = scorebook_load(args.scorebook)
    player = book.add_player(args.trigramme)
    scorebook_save(args.scorebook, book)
    print(f"Added {player.trigramme} ({len(book.players)} players)")


def _add_record_match_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("record-match", help="Record a finished match by its final totals.")
    _add_scorebook_arg(parser)
    parser.add_argument("--blue", nargs=2, required=True, metavar="TRI", help="Blue team trigrammes.")
    parser.add_argument("--red", nargs=2, required=True, metavar="TRI", help="Red team trigrammes.")
    parser.add_argument("--blue-score", type=int, required=True, help="Final blue total.")
    parser.add_argument("--red-score", type=int, required=True, help="Final red total.")
    parser.set_defaults(func=_cmd_record_match)


def _cmd_record_match(args: argparse.Namespace) -> None:
    if args.blue_score == args.red_score:
        raise ValueError(f"Tied match ({args.blue_score}-{args.red_score}) has no winner")
    book = scorebook_load(args.scorebook)
    blue = tuple(book.player_by_trigramme(t).id for t in args.blue)
    red = tuple(book.player_by_trigramme(t).id for t in args.red)
    blue_won = args.blue_score > args.red_score
    record = MatchRecord(
        id=uuid.uuid4().hex,
        played_at=datetime.now(timezone.utc).isoformat(),
        blue_score=args.blue_score,
        red_score=args.red_score,
        winners=blue if blue_won else red,
        losers=red if blue_won else blue,
    )
    book.record_match(record)
    scorebook_save(args.scorebook, book)
    winners = " ".join(book.trigramme(pid) for pid in record.winners)
    print(f"Recorded {args.blue_score}-{args.red_score}, won by {winners}")


def _add_stats_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("stats", help="Show a player's profile.")
    _add_scorebook_arg(parser)
    parser.add_argument("trigramme", type=str)
    parser.set_defaults(func=_cmd_stats)


def _cmd_stats(args: argparse.Namespace) -> None:
    book = scorebook_load(args.scorebook)
    player = book.player_by_trigramme(args.trigramme)
    st = book.stats()[player.id]
    print(
        f"{player.trigramme}: played={st.games_played} won={st.games_won} "
        f"lost={st.games_lost} win%={st.win_percentage:.1f} score={global_score(st)}"
    )

    riv = rivalries(player.id, book.matches)
    names = {k: book.trigramme(v) if v else "N/A" for k, v in vars(riv).items()}
    print(f"Nemesis: {names['nemesis']}  Best ally: {names['best_ally']}  Worst ally: {names['worst_ally']}")

    best, worst = best_and_worst_duo(player.id, book.matches)
    for label, duo in (("Best duo", best), ("Worst duo", worst)):
        if duo is None:
            print(f"{label}: N/A")
        else:
            print(f"{label}: {book.trigramme(duo.partner_id)} {duo.win_rate:.1f}% ({duo.games} games)")

    badges = unlocked_badges(st)
    print("Badges: " + (", ".join(b.title for b in badges) if badges else "none"))
    for m in book.recent_matches(player.id):
        outcome = "W" if m.won_by(player.id) else "L"
        print(f"  {m.played_at[:10]} {outcome} {m.blue_score}-{m.red_score}")


def _add_compare_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("compare", help="Compare two players head to head.")
    _add_scorebook_arg(parser)
    parser.add_argument("first", type=str)
    parser.add_argument("second", type=str)
    parser.set_defaults(func=_cmd_compare)


def _cmd_compare(args: argparse.Namespace) -> None:
    book = scorebook_load(args.scorebook)
    p1 = book.player_by_trigramme(args.first)
    p2 = book.player_by_trigramme(args.second)
    h2h = head_to_head(p1.id, p2.id, book.matches)
    synergy = f"{h2h.synergy}%" if h2h.synergy is not None else "N/A"
    print(f"Together: {h2h.duo_wins}W {h2h.duo_losses}L, {h2h.duo_points} points, synergy {synergy}")
    print(f"{p1.trigramme} beat {p2.trigramme} {h2h.vs_wins} times, {p2.trigramme} beat {p1.trigramme} {h2h.vs_losses} times")
    print(f"Points scored against each other: {p1.trigramme}={h2h.p1_points} {p2.trigramme}={h2h.p2_points}")


def _add_leaderboard_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("leaderboard", help="Show the podium and the struggling players.")
    _add_scorebook_arg(parser)
    parser.add_argument(
        "--min-games",
        type=int,
        default=10,
        help="Minimum games played to be ranked.",
    )
    parser.set_defaults(func=_cmd_leaderboard)


def _cmd_leaderboard(args: argparse.Namespace) -> None:
    book = scorebook_load(args.scorebook)
    stats = book.stats()
    top, struggling = leaderboard(list(book.players), book.matches, min_games=args.min_games)
    print("Podium:")
    for rank, pid in enumerate(top, start=1):
        st = stats[pid]
        print(f"  {rank}. {book.trigramme(pid)} {st.win_percentage:.1f}% ({st.games_played} games)")
    if struggling:
        print("Struggling:")
        for pid in struggling:
            st = stats[pid]
            print(f"  {book.trigramme(pid)} {st.win_percentage:.1f}% ({st.games_played} games)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="coinche", description="Coinche scorekeeping CLI.")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_score_round_parser(subparsers)
    _add_add_player_parser(subparsers)
    _add_record_match_parser(subparsers)
    _add_stats_parser(subparsers)
    _add_compare_parser(subparsers)
    _add_leaderboard_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    try:
        args.func(args)
    except KeyError as exc:
        parser.error(f"unknown player or match: {exc.args[0]}")
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
