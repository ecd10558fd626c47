"""
Ranked slot recommendations read from a schedule matrix.
"""

from typing import Optional, Sequence

from ...schemas.scheduling import RoomMatrix, SlotRecommendation, normalize_slot
from .config import time_str_to_minutes

_REASON_RANK = {"same therapist": 0, "same gender": 1, "other": 2}


def get_recommended_slots(
    matrix: Sequence[RoomMatrix],
    original_slot: str,
    original_therapist_ids: Sequence[str],
    patient_gender: Optional[str],
) -> list[SlotRecommendation]:
    """
    Every (room, slot, therapist) still open in the matrix, best first.

    Ordering: distance in minutes from original_slot, then
    same therapist > same gender > other. Ties keep matrix order.
    """
    original_slot = normalize_slot(original_slot)
    origin = time_str_to_minutes(original_slot)
    gender = patient_gender.lower() if patient_gender else None

    proposals = []
    for room in matrix:
        for cell in room.slots:
            if not cell.is_room_available or cell.is_booked:
                continue
            for therapist in cell.available_therapists:
                if therapist.id in original_therapist_ids:
                    reason = "same therapist"
                elif gender and therapist.gender.lower() == gender:
                    reason = "same gender"
                else:
                    reason = "other"
                proposals.append(SlotRecommendation(
                    room_number=room.id,
                    slot=cell.slot,
                    therapist_id=therapist.id,
                    reason=reason,
                ))

    proposals.sort(key=lambda p: (
        abs(time_str_to_minutes(p.slot) - origin),
        _REASON_RANK[p.reason],
    ))
    return proposals
