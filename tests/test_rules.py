"""Test the feasibility check and the gender-match filter."""
import pytest

from clinic.app.services.scheduling import can_book_appointment, filter_therapists_by_gender


class TestCanBookAppointment:
    """Room and therapist exclusivity at one (date, slot)."""

    def test_booked_room_is_refused(self, day, make_appointment):
        appointments = [make_appointment(room_id="r1", therapist_ids=["t1"], slot="09:00")]

        assert can_book_appointment(
            appointments, room_id="r1", therapist_ids=["t1"], target_date=day, slot="09:00"
        ) is False

    def test_therapist_booked_in_another_room_is_refused(self, day, make_appointment):
        appointments = [make_appointment(room_id="r1", therapist_ids=["t1"], slot="09:00")]

        assert can_book_appointment(
            appointments, room_id="r2", therapist_ids=["t1"], target_date=day, slot="09:00"
        ) is False

    def test_other_room_with_free_therapist(self, day, make_appointment):
        appointments = [make_appointment(room_id="r1", therapist_ids=["t1"], slot="09:00")]

        assert can_book_appointment(
            appointments, room_id="r2", therapist_ids=["t2"], target_date=day, slot="09:00"
        ) is True

    def test_one_busy_therapist_blocks_the_group(self, day, make_appointment):
        appointments = [make_appointment(room_id="r1", therapist_ids=["t1"], slot="09:00")]

        assert can_book_appointment(
            appointments, room_id="r3", therapist_ids=["t2", "t1"], target_date=day, slot="09:00"
        ) is False

    def test_other_slot_and_other_date_do_not_conflict(self, day, make_appointment):
        appointments = [make_appointment(room_id="r1", therapist_ids=["t1"], slot="09:00")]

        assert can_book_appointment(
            appointments, room_id="r1", therapist_ids=["t1"], target_date=day, slot="10:00"
        )
        assert can_book_appointment(
            appointments,
            room_id="r1",
            therapist_ids=["t1"],
            target_date=day.replace(day=21),
            slot="09:00",
        )

    def test_cancelled_appointment_frees_room_and_therapist(self, day, make_appointment):
        appointments = [make_appointment(status="cancelled")]

        assert can_book_appointment(
            appointments, room_id="r1", therapist_ids=["t1"], target_date=day, slot="09:00"
        )

    def test_room_check_skipped_without_room(self, day, make_appointment):
        appointments = [make_appointment(room_id="r1", therapist_ids=["t1"])]

        assert can_book_appointment(
            appointments, room_id=None, therapist_ids=["t2"], target_date=day, slot="09:00"
        )

    def test_check_is_idempotent(self, day, make_appointment):
        appointments = [make_appointment()]
        snapshot = [a.model_copy(deep=True) for a in appointments]

        first = can_book_appointment(
            appointments, room_id="r2", therapist_ids=["t2"], target_date=day, slot="09:00"
        )
        second = can_book_appointment(
            appointments, room_id="r2", therapist_ids=["t2"], target_date=day, slot="09:00"
        )

        assert first == second is True
        assert appointments == snapshot

    @pytest.mark.parametrize("bad", [None, "appointments", {"a1": None}])
    def test_non_list_snapshot_raises(self, day, bad):
        with pytest.raises(TypeError):
            can_book_appointment(
                bad, room_id="r1", therapist_ids=["t1"], target_date=day, slot="09:00"
            )


class TestGenderFilter:

    def test_same_gender_only_when_enforced(self, therapists):
        result = filter_therapists_by_gender(therapists, "female", enforce_gender_match=True)
        assert [t.id for t in result] == ["t2", "t4"]

    def test_match_is_case_insensitive(self, therapists):
        result = filter_therapists_by_gender(therapists, " Male ", enforce_gender_match=True)
        assert [t.id for t in result] == ["t1", "t3"]

    def test_full_roster_when_disabled(self, therapists):
        result = filter_therapists_by_gender(therapists, "female", enforce_gender_match=False)
        assert len(result) == 4

    def test_full_roster_when_gender_unknown(self, therapists):
        assert len(filter_therapists_by_gender(therapists, None, True)) == 4
        assert len(filter_therapists_by_gender(therapists, "", True)) == 4

    def test_show_all_overrides_policy(self, therapists):
        result = filter_therapists_by_gender(therapists, "female", True, show_all=True)
        assert len(result) == 4


class TestIsoDateInput:
    """Dates given as "YYYY-MM-DD" strings behave like date objects."""

    def test_booked_room_refused_for_string_date(self, make_appointment):
        appointments = [make_appointment(room_id="r1", therapist_ids=["t1"], slot="09:00")]

        assert can_book_appointment(
            appointments, room_id="r1", therapist_ids=["t1"], target_date="2025-05-20", slot="09:00"
        ) is False
        assert can_book_appointment(
            appointments, room_id="r2", therapist_ids=["t2"], target_date="2025-05-20", slot="9:00"
        ) is True

    def test_malformed_date_raises(self):
        with pytest.raises(ValueError):
            can_book_appointment(
                [], room_id="r1", therapist_ids=["t1"], target_date="20/05/2025", slot="09:00"
            )

    def test_non_date_raises(self):
        with pytest.raises(TypeError):
            can_book_appointment(
                [], room_id="r1", therapist_ids=["t1"], target_date=20250520, slot="09:00"
            )
