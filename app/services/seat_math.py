"""
Seat arithmetic for round tables.

Seats are numbered 1..capacity around the table, so seat ``capacity`` sits
next to seat 1. Every helper here is pure; callers pass in the occupied
positions they read from the store.
"""

from typing import Iterable, List, Optional, Sequence, Tuple


def next_seat(position: int, capacity: int) -> int:
    """Clockwise neighbour"""
    return position % capacity + 1


def previous_seat(position: int, capacity: int) -> int:
    """Counter-clockwise neighbour"""
    return (position - 2) % capacity + 1


def are_adjacent(first: int, second: int, capacity: int) -> bool:
    if first == second or capacity < 2:
        return False
    return (first - second) % capacity in (1, capacity - 1)


def is_valid_position(position: int, capacity: int) -> bool:
    return 1 <= position <= capacity


def free_seats(capacity: int, occupied: Iterable[int]) -> List[int]:
    """Free positions in ascending order"""
    taken = set(occupied)
    return [pos for pos in range(1, capacity + 1) if pos not in taken]


def partner_seat(position: int, capacity: int, occupied: Iterable[int]) -> Optional[int]:
    """Seat for a companion of whoever sits at ``position``.

    Clockwise neighbour first, then counter-clockwise. ``None`` when both are
    taken.
    """
    taken = set(occupied)
    for candidate in (next_seat(position, capacity), previous_seat(position, capacity)):
        if candidate != position and candidate not in taken:
            return candidate
    return None


def first_adjacent_pair(capacity: int, occupied: Iterable[int]) -> Optional[Tuple[int, int]]:
    """Lowest ``(i, i+1)`` pair, wrapping at the end, with both seats free"""
    taken = set(occupied)
    for position in range(1, capacity + 1):
        following = next_seat(position, capacity)
        if following == position:
            continue
        if position not in taken and following not in taken:
            return position, following
    return None


def adjacent_pair_near(
    preferred: Optional[int], capacity: int, occupied: Iterable[int]
) -> Optional[Tuple[int, int]]:
    """Pair anchored at ``preferred`` when possible, else the first free pair"""
    taken = set(occupied)
    if preferred is not None and is_valid_position(preferred, capacity) and preferred not in taken:
        partner = partner_seat(preferred, capacity, taken)
        if partner is not None:
            return preferred, partner
    return first_adjacent_pair(capacity, taken)


def pick_couple_color(used_colors: Iterable[Optional[str]], palette: Sequence[str]) -> str:
    """First palette colour not used at the table; the first colour once all are taken"""
    used = {color for color in used_colors if color}
    for color in palette:
        if color not in used:
            return color
    return palette[0]
