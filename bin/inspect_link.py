"""Decode a share link and print what each tab would derive from it.

Accepts a full URL, a ``#fragment`` or a bare token, either as an argument or
on stdin. Useful when a player reports that a link "does nothing".

Usage:
    uv run python bin/inspect_link.py 'http://localhost:5173/#eNq...'
    pbpaste | uv run python bin/inspect_link.py
    uv run python bin/inspect_link.py --json '#eNq...'
    uv run python bin/inspect_link.py --reencode '#eNq...'
"""

from __future__ import annotations

import argparse
import logging
import sys

from shared.logging import setup_logging
from spaces.logic.derive import (
    derive_current_round,
    derive_opponent_score,
    derive_phase,
    derive_player_score,
    derive_who_moves_first,
    is_round_complete,
)
from spaces.logic.state import GameState
from spaces.messaging.codec import compression_ratio, decode_game_state, encode_game_state, normalize_token
from spaces.settings import SyncSettings


def _print_summary(state: GameState, token_length: int) -> None:
    """Print the derived view of a decoded state."""
    phase = derive_phase(state)
    current = derive_current_round(state)

    print("=" * 60)
    print("LINK")
    print("=" * 60)
    print(f"Token length: {token_length}")
    print(f"Checksum: {state.checksum}")
    print(f"Compression ratio: {compression_ratio(state):.2f}")
    print()
    print("=" * 60)
    print("GAME")
    print("=" * 60)
    print(f"Game id: {state.game_id or '-'}")
    print(f"Player: {state.user.name or '(no name)'} ({state.user.id})")
    print(f"Opponent: {state.opponent.name if state.opponent else '-'}")
    print(f"Mode: {state.game_mode.value if state.game_mode else '-'}")
    print(f"Board size: {state.board_size or '-'}")
    print(f"Phase: {phase.type.value}")
    print(f"Current round: {current}")
    print(f"Moves first: {derive_who_moves_first(current, state.user.id, state.game_creator_id).value}")
    print(f"Score: {derive_player_score(state)} - {derive_opponent_score(state)}")
    print()

    if not state.round_history:
        return
    print(f"{'round':>5}  {'player':<20}  {'opponent':<20}  {'winner':<8}  points")
    for entry in state.round_history:
        player = entry.player_board.name if entry.player_board else "-"
        opponent = entry.opponent_board.name if entry.opponent_board else "-"
        winner = entry.winner.value if is_round_complete(entry) and entry.winner else "-"
        points = f"{entry.player_points or 0}-{entry.opponent_points or 0}"
        print(f"{entry.round:>5}  {player:<20.20}  {opponent:<20.20}  {winner:<8}  {points}")
    print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Decode a share link and print the derived game view")
    parser.add_argument(
        "link",
        nargs="?",
        help="share URL, #fragment or bare token (default: read stdin)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="print the decoded GameState as JSON instead of a summary",
    )
    parser.add_argument(
        "--reencode",
        action="store_true",
        help="print a fresh share URL for the decoded state using SPACES_BASE_URL",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log why a link was rejected",
    )
    args = parser.parse_args()

    settings = SyncSettings()
    setup_logging(log_dir=settings.log_dir, level=logging.DEBUG if args.verbose else logging.WARNING)

    raw = args.link if args.link is not None else sys.stdin.read()
    token = normalize_token(raw)
    if not token:
        print("No token given", file=sys.stderr)
        sys.exit(1)

    state = decode_game_state(token)
    if state is None:
        print("Link could not be decoded (run with -v for the reason)", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(state.model_dump_json(indent=2, exclude_none=True))
    else:
        _print_summary(state, len(token))

    if args.reencode:
        fresh = encode_game_state(state, settings.max_token_length)
        if fresh is None:
            print("State is too large to share", file=sys.stderr)
            sys.exit(1)
        print(f"{settings.base_url.split('#', 1)[0]}#{fresh}")


if __name__ == "__main__":
    main()
