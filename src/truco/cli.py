"""
Command-line interface: play against the computer in the terminal, or run
headless simulations.

Usage examples (after installing in editable mode):

    python -m truco.cli play --seed 7
    python -m truco.cli play --fast --points-to-win 3
    python -m truco.cli simulate --matches 500 --opponent lowest
"""
from __future__ import annotations

import argparse
import json
import logging
import random
from typing import Callable, Optional

from .agents import POLICY_NAMES, make_policy
from .config import MatchConfig, load_config
from .deck import Card
from .errors import IllegalMove
from .events import (
    CardPlayed,
    GameEvent,
    HandResolved,
    HandStarted,
    MatchResolved,
    TrickResolved,
)
from .match import MatchController
from .play import Seat, Winner
from .scheduler import ManualScheduler, RealtimeScheduler
from .simulate import simulate_matches

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _config_from_args(args: argparse.Namespace) -> MatchConfig:
    cfg = load_config(args.config) if args.config else MatchConfig()
    if getattr(args, "fast", False):
        cfg = MatchConfig.instant(cfg.points_to_win)
    if args.points_to_win is not None:
        cfg = cfg.with_points_to_win(args.points_to_win)
    return cfg


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with match settings (points_to_win, delays).",
    )
    parser.add_argument(
        "--points-to-win",
        type=int,
        default=None,
        help="Override the points needed to win the match (default 12).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for shuffles and the computer's choices.",
    )


# ---- play ----


def _describe_event(event: GameEvent) -> str | None:
    if isinstance(event, HandStarted):
        who = "You start" if event.first_turn is Seat.PLAYER else "The bot starts"
        return f"-- Hand {event.hand_number}. {who}."
    if isinstance(event, CardPlayed):
        who = "You play" if event.seat is Seat.PLAYER else "The bot plays"
        return f"{who} {event.card}."
    if isinstance(event, TrickResolved):
        if event.is_tie:
            return f"Trick {event.trick_number} tied ({event.player_card} vs {event.opponent_card})."
        who = "You won" if event.winner is Winner.PLAYER else "The bot won"
        return f"{who} trick {event.trick_number}! ({event.player_card} vs {event.opponent_card})"
    if isinstance(event, HandResolved):
        tricks = f"(Tricks: You {event.tally.player_wins} x {event.tally.opponent_wins} Bot)"
        if event.winner is Winner.TIE:
            return f"Hand tied {tricks}. Nobody scores. Score: {event.score}"
        who = "You won" if event.winner is Winner.PLAYER else "The bot won"
        return f"{who} the hand! {tricks} +1 point. Score: {event.score}"
    if isinstance(event, MatchResolved):
        who = "You won the match!" if event.winner is Winner.PLAYER else "The bot won the match!"
        return f"{who} Final score: {event.score}"
    return None


def _status_line(ctrl: MatchController) -> str:
    tally = ctrl.tally
    return (
        f"Trick {ctrl.trick_number}/3. Tricks: You {tally.player_wins} x {tally.opponent_wins} Bot. "
        f"Score: {ctrl.score}. Your turn."
    )


def _parse_choice(text: str, playable: list[Card]) -> Card:
    """Accept a 1-based index into ``playable`` or a card such as ``3s``."""
    text = text.strip()
    if text.isdigit():
        idx = int(text) - 1
        if not 0 <= idx < len(playable):
            raise ValueError(f"Pick a number between 1 and {len(playable)}")
        return playable[idx]
    return Card.parse(text)


def play_interactive(
    ctrl: MatchController,
    scheduler: ManualScheduler,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> None:
    """Terminal front-end: narrate events, prompt for the human's cards."""

    def on_event(event: GameEvent) -> None:
        line = _describe_event(event)
        if line:
            output_fn(line)

    ctrl.subscribe(on_event)
    output_fn(f"New match! First to {ctrl.config.points_to_win} points wins.")
    ctrl.start_match()

    while True:
        while not ctrl.playable_cards() and not ctrl.is_match_over():
            if not scheduler.run_next():
                break

        if ctrl.is_match_over():
            answer = input_fn("Play again? [y/N] ").strip().lower()
            if answer != "y":
                return
            output_fn(f"New match! First to {ctrl.config.points_to_win} points wins.")
            ctrl.start_match()
            continue

        playable = ctrl.playable_cards()
        output_fn(_status_line(ctrl))
        output_fn("Your hand: " + "  ".join(f"[{i}] {c}" for i, c in enumerate(playable, start=1)))
        text = input_fn("Card (number or e.g. 3s, n = new match, q = quit): ").strip().lower()
        if text == "q":
            return
        if text == "n":
            output_fn(f"New match! First to {ctrl.config.points_to_win} points wins.")
            ctrl.start_match()
            continue
        try:
            card = _parse_choice(text, playable)
            ctrl.play_card(Seat.PLAYER, card)
        except IllegalMove as exc:
            output_fn(f"Illegal move: {exc}")
        except ValueError as exc:
            output_fn(str(exc))


def _add_play_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "play",
        help="Play a match against the computer in the terminal.",
    )
    _add_common_args(parser)
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Skip the pauses between the computer's steps.",
    )
    parser.add_argument(
        "--opponent",
        choices=POLICY_NAMES,
        default="random",
        help="Computer policy.",
    )
    parser.set_defaults(func=_cmd_play)


def _cmd_play(args: argparse.Namespace) -> None:
    cfg = _config_from_args(args)
    rng = random.Random(args.seed)
    scheduler = RealtimeScheduler()
    ctrl = MatchController(
        config=cfg,
        rng=rng,
        policy=make_policy(args.opponent, seed=rng.randrange(2**32)),
        scheduler=scheduler,
    )
    try:
        play_interactive(ctrl, scheduler)
    except (KeyboardInterrupt, EOFError):
        print()


# ---- simulate ----


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "simulate",
        help="Run headless policy-vs-policy matches and print summary statistics.",
    )
    _add_common_args(parser)
    parser.add_argument(
        "--matches",
        type=int,
        default=100,
        help="Number of matches to simulate.",
    )
    parser.add_argument(
        "--player",
        choices=POLICY_NAMES,
        default="random",
        help="Policy standing in for the human seat.",
    )
    parser.add_argument(
        "--opponent",
        choices=POLICY_NAMES,
        default="random",
        help="Computer policy.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON.",
    )
    parser.set_defaults(func=_cmd_simulate)


def _cmd_simulate(args: argparse.Namespace) -> None:
    cfg = _config_from_args(args)
    seed = args.seed if args.seed is not None else 0
    summary = simulate_matches(
        args.matches,
        seed=seed,
        player_policy=make_policy(args.player, seed=seed + 1),
        opponent_policy=make_policy(args.opponent, seed=seed + 2),
        config=MatchConfig.instant(cfg.points_to_win),
    )
    if args.json:
        print(json.dumps(summary.as_dict(), indent=2))
        return
    print(
        f"{args.player} vs {args.opponent}: matches={summary.num_matches} "
        f"player_win_rate={summary.player_win_rate:.3f} "
        f"hands/match={summary.mean_hands_per_match:.2f}±{summary.std_hands_per_match:.2f} "
        f"tied_hand_rate={summary.tied_hand_rate:.3f} "
        f"tricks/hand={summary.mean_tricks_per_hand:.2f}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="truco", description="Simplified two-player Truco.")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_play_parser(subparsers)
    _add_simulate_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
