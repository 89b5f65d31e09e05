#!/usr/bin/env python3
"""
Play the shared bingo board from a terminal.

Usage:
    python3 play_bingo.py show                  # Print the current board
    python3 play_bingo.py new                   # Generate a new board
    python3 play_bingo.py mark 7                # Toggle cell 7 (asks first)
    python3 play_bingo.py --yes mark 7          # Toggle without asking
    python3 play_bingo.py --server http://127.0.0.1:8080 show

Cells are numbered 0-24, left to right, top to bottom.
"""

import argparse
import sys

from bingo_constants import EMPTY_LABEL, GRID_SIZE
from board_client import DEFAULT_SERVER, BOARD_LOCKED, BoardClient, HttpTransport
from win_detector import winning_cells

CELL_WIDTH = 16


def ask(message):
    answer = input(f"{message} [y/N] ")
    return answer.strip().lower() in ('y', 'yes')


def render_board(client):
    """Return the board as printable text."""
    if client.activities is None:
        return client.message or "No board."

    on_line = set(winning_cells(client.marked))

    border = "+" + "+".join("-" * CELL_WIDTH for _ in range(GRID_SIZE)) + "+"
    lines = [border]
    for row in range(GRID_SIZE):
        cells = []
        for col in range(GRID_SIZE):
            index = row * GRID_SIZE + col
            label = client.activities[index]
            if label == EMPTY_LABEL:
                mark = "   "
            elif index in on_line:
                mark = "[*]"
            elif client.display[index]:
                mark = "[x]"
            else:
                mark = "[ ]"
            text = f"{index:>2} {mark} {label}"
            if len(text) > CELL_WIDTH:
                text = text[:CELL_WIDTH - 1] + "~"
            cells.append(text.ljust(CELL_WIDTH))
        lines.append("|" + "|".join(cells) + "|")
        lines.append(border)
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play the shared bingo board.")
    parser.add_argument('--server', default=DEFAULT_SERVER, help="Bingo server URL")
    parser.add_argument('--yes', action='store_true', help="Skip the confirmation prompt")
    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('show', help="Print the current board")
    sub.add_parser('new', help="Generate a new board")
    mark_parser = sub.add_parser('mark', help="Mark or unmark a cell")
    mark_parser.add_argument('index', type=int, help="Cell number 0-24")
    args = parser.parse_args(argv)

    client = BoardClient(HttpTransport(args.server), confirm=None if args.yes else ask)

    if args.command == 'new':
        ok = client.generate_new_board()
    else:
        ok = client.load_initial_board()
        if ok and args.command == 'mark':
            if not client.can_toggle(args.index):
                if client.board_status == BOARD_LOCKED:
                    print("Board is locked after Bingo. Generate a new board to play again.")
                else:
                    print(f"Cell {args.index} cannot be marked.")
                return 1
            ok = client.toggle_cell(args.index)

    print(render_board(client))
    if client.message:
        print(client.message)
    if client.save_status:
        print(client.save_status)
    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
