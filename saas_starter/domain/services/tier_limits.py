from __future__ import annotations


def is_notes_threshold_reached(*, notes_count: int, max_number_of_notes: int | None) -> bool:
    if max_number_of_notes is None:
        return False
    return notes_count >= max_number_of_notes
