"""Tests for core.match.transformer module."""

import pendulum
import pytest

from core.errors import UpstreamRecordError, ValidationError
from core.match import MatchStatus, parse_upstream_match, transform_matches
from core.match.transformer import synthetic_match_id
from core.week_window import compute_week_window


@pytest.fixture
def window(now):
    """Window 2024-03-01T00:00Z .. 2024-03-08T00:00Z."""
    return compute_week_window(-1, now)


class TestParseUpstreamMatch:
    """Tests for the explicit parsing step."""

    def test_maps_all_fields(self, make_record):
        match = parse_upstream_match(make_record(42, "2024-03-02T12:30:00Z"))

        assert match.external_id == 42
        assert match.id is None
        assert match.home_team == "Arsenal FC"
        assert match.away_team == "Chelsea FC"
        assert match.home_team_crest == "https://crests.example/ars.png"
        assert match.away_team_crest == "https://crests.example/che.png"
        assert match.home_score == 2
        assert match.away_score == 1
        assert match.match_date == pendulum.datetime(2024, 3, 2, 12, 30, tz="UTC")
        assert match.status is MatchStatus.FINISHED
        assert match.gameweek == 28
        assert match.season == "2023"
        assert match.is_goalless is False

    def test_defaults_gameweek_and_season(self, make_record):
        record = make_record(matchday=None, season_start=None)

        match = parse_upstream_match(record)

        assert match.gameweek == 1
        assert match.season == "2024"

    def test_missing_crest_is_none(self, make_record):
        record = make_record()
        del record["homeTeam"]["crest"]

        match = parse_upstream_match(record)

        assert match.home_team_crest is None

    def test_goalless(self, make_record):
        match = parse_upstream_match(make_record(home_score=0, away_score=0))

        assert match.is_goalless is True

    def test_missing_team_name_raises(self, make_record):
        record = make_record(9)
        record["awayTeam"] = {"crest": None}

        with pytest.raises(UpstreamRecordError) as exc_info:
            parse_upstream_match(record)

        assert exc_info.value.record_id == 9
        assert isinstance(exc_info.value, ValidationError)

    def test_bad_kickoff_raises(self, make_record):
        with pytest.raises(UpstreamRecordError, match="Invalid ISO datetime"):
            parse_upstream_match(make_record(utc_date="next saturday"))

    def test_missing_id_raises_without_override(self, make_record):
        with pytest.raises(UpstreamRecordError, match="missing match id"):
            parse_upstream_match(make_record(match_id=None))

    def test_negative_score_raises(self, make_record):
        with pytest.raises(UpstreamRecordError):
            parse_upstream_match(make_record(home_score=-1))


class TestTransformMatches:
    """Tests for the filter/map/dedupe/sort pipeline."""

    def test_keeps_only_finished_with_scores(self, make_record, window):
        records = [
            make_record(1, "2024-03-02T15:00:00Z"),
            make_record(
                2,
                "2024-03-02T17:30:00Z",
                status="IN_PLAY",
                home_score=None,
                away_score=None,
            ),
            make_record(3, "2024-03-03T14:00:00Z", home_score=None),
            make_record(
                4,
                "2024-03-04T20:00:00Z",
                status="SCHEDULED",
                home_score=None,
                away_score=None,
            ),
        ]

        matches = transform_matches(records, window)

        assert [m.external_id for m in matches] == [1]
        assert all(m.status is MatchStatus.FINISHED for m in matches)

    def test_window_bounds_are_inclusive(self, make_record, window):
        records = [
            make_record(1, "2024-03-01T00:00:00Z"),
            make_record(2, "2024-03-08T00:00:00Z"),
            make_record(3, "2024-02-29T23:59:59Z"),
            make_record(4, "2024-03-08T00:00:01Z"),
        ]

        matches = transform_matches(records, window)

        assert [m.external_id for m in matches] == [1, 2]

    def test_window_applied_to_primary_results_too(self, make_record, window):
        """Test that upstream day filtering is not trusted."""
        records = [make_record(1, "2024-03-08T19:45:00Z")]

        assert transform_matches(records, window, was_fallback=False) == []

    def test_no_window_keeps_everything_finished(self, make_record):
        records = [
            make_record(1, "2023-08-11T19:00:00Z"),
            make_record(2, "2024-05-19T15:00:00Z"),
        ]

        matches = transform_matches(records, None, was_fallback=True)

        assert [m.external_id for m in matches] == [1, 2]

    def test_sorted_by_kickoff_then_id(self, make_record, window):
        records = [
            make_record(30, "2024-03-03T16:30:00Z"),
            make_record(20, "2024-03-02T15:00:00Z"),
            make_record(10, "2024-03-02T15:00:00Z"),
        ]

        matches = transform_matches(records, window)

        assert [m.external_id for m in matches] == [10, 20, 30]

    def test_later_duplicate_wins(self, make_record, window):
        records = [
            make_record(5, "2024-03-02T15:00:00Z", home_score=1, away_score=1),
            make_record(5, "2024-03-02T15:00:00Z", home_score=2, away_score=1),
        ]

        matches = transform_matches(records, window)

        assert len(matches) == 1
        assert (matches[0].home_score, matches[0].away_score) == (2, 1)

    def test_synthesized_ids_are_unique(self, make_record, window):
        records = [
            make_record(None, "2024-03-02T15:00:00Z", home="Fulham FC"),
            make_record(None, "2024-03-02T15:00:00Z", home="Everton FC"),
            make_record(11, "2024-03-02T15:00:00Z"),
        ]

        matches = transform_matches(records, window)

        ids = [m.external_id for m in matches]
        assert len(set(ids)) == 3
        assert sum(1 for i in ids if i < 0) == 2

    def test_synthesized_id_is_stable_across_batches(self, make_record, window):
        record = make_record(None, "2024-03-02T15:00:00Z")

        first = transform_matches([record], window)
        second = transform_matches([dict(record)], window)

        assert first[0].external_id == second[0].external_id
        assert first[0].external_id == synthetic_match_id(record)

    def test_identical_id_less_records_stay_distinct(self, make_record, window):
        record = make_record(None, "2024-03-02T15:00:00Z")

        matches = transform_matches([record, dict(record)], window)

        assert len({m.external_id for m in matches}) == 2

    def test_synthesized_id_depends_on_content(self, make_record):
        base = make_record(None, "2024-03-02T15:00:00Z")
        later = make_record(None, "2024-03-02T17:30:00Z")
        other_teams = make_record(None, "2024-03-02T15:00:00Z", away="Fulham FC")

        ids = {synthetic_match_id(r) for r in (base, later, other_teams)}

        assert len(ids) == 3
        assert all(i < 0 for i in ids)

    def test_invalid_record_is_skipped(self, make_record, window):
        broken = make_record(1, "2024-03-02T15:00:00Z")
        broken["homeTeam"] = None
        records = [broken, make_record(2, "2024-03-02T17:30:00Z")]

        matches = transform_matches(records, window)

        assert [m.external_id for m in matches] == [2]

    def test_goalless_flag(self, make_record, window):
        records = [
            make_record(1, "2024-03-02T15:00:00Z", home_score=0, away_score=0),
            make_record(2, "2024-03-02T17:30:00Z", home_score=0, away_score=1),
        ]

        matches = transform_matches(records, window)

        assert [m.is_goalless for m in matches] == [True, False]

    def test_empty_batch(self, window):
        assert transform_matches([], window) == []
