"""
Tests for the ranking engine and result validator.

Runs over hand-built state so scores are independent of encryption.
"""

from typing_extensions import override

from fhe_tournament.interfaces import ScoringFunction, TournamentState
from fhe_tournament.models import DecryptedMatchRecord
from fhe_tournament.rankers import ConstantScore, PlayerStatsScore, RankingEngine, ResultValidator
from fhe_tournament.storage import InMemoryStore


def make_store(*matches: tuple[str, str, bool]) -> InMemoryStore:
    """Store with (player_id, player_stats, verified) matches numbered from 1."""
    state = TournamentState()
    for match_id, (player_id, stats, verified) in enumerate(matches, 1):
        state.decrypted[match_id] = DecryptedMatchRecord(
            player_stats=stats, game_log="log", player_id=player_id, verified=verified
        )
    state.next_match_id = len(matches) + 1
    return InMemoryStore(state)


class StatsAsDelta(ScoringFunction):
    """Signed score straight from the stats field."""

    @override
    def score(self, record: DecryptedMatchRecord) -> int:
        return int(record.player_stats)


class TestRankingEngine:
    """Test RankingEngine behavior through public interface."""

    def test_totals_in_first_appearance_order(self) -> None:
        """[(A,100),(A,100),(B,100)] should rank A=200 then B=100."""
        # Arrange
        store = make_store(("A", "", True), ("A", "", True), ("B", "", True))
        engine = RankingEngine(store, ConstantScore(100))

        # Act
        result = engine.calculate_rankings([1, 2, 3])

        # Assert
        assert result.player_ids == ["A", "B"]
        assert result.scores == [200, 100]
        assert result.unique_players == 2

    def test_first_appearance_not_score_order(self) -> None:
        store = make_store(("B", "", True), ("A", "", True), ("A", "", True))
        result = RankingEngine(store).calculate_rankings([1, 2, 3])
        assert result.as_dict() == {"B": 100, "A": 200}
        assert result.player_ids == ["B", "A"]

    def test_unverified_and_unknown_matches_skipped(self) -> None:
        # Arrange
        store = make_store(("A", "", True), ("B", "", False))
        engine = RankingEngine(store)

        # Act
        result = engine.calculate_rankings([1, 2, 99])

        # Assert
        assert result.player_ids == ["A"]
        assert result.scores == [100]

    def test_zero_net_player_excluded_but_counted(self) -> None:
        """A player whose scores cancel out is seen but not emitted."""
        # Arrange
        store = make_store(("A", "5", True), ("B", "7", True), ("A", "-5", True))
        engine = RankingEngine(store, StatsAsDelta())

        # Act
        result = engine.calculate_rankings([1, 2, 3])

        # Assert
        assert result.player_ids == ["B"]
        assert result.scores == [7]
        assert result.unique_players == 2

    def test_only_supplied_matches_are_used(self) -> None:
        store = make_store(("A", "", True), ("B", "", True), ("B", "", True))
        result = RankingEngine(store).calculate_rankings([1, 2])
        assert result.as_dict() == {"A": 100, "B": 100}

    def test_empty_match_set(self) -> None:
        result = RankingEngine(make_store()).calculate_rankings([])
        assert result.player_ids == []
        assert result.unique_players == 0


class TestPlayerStatsScore:
    """Test stats parsing for the stats-based scoring function."""

    def test_bare_integer(self) -> None:
        assert PlayerStatsScore().score(DecryptedMatchRecord(player_stats="95")) == 95

    def test_key_value_list(self) -> None:
        record = DecryptedMatchRecord(player_stats="kills=3; score=42")
        assert PlayerStatsScore().score(record) == 42

    def test_missing_field_uses_default(self) -> None:
        record = DecryptedMatchRecord(player_stats="kills=3")
        assert PlayerStatsScore(default=7).score(record) == 7


class TestResultValidator:
    """Test ResultValidator behavior through public interface."""

    def test_claimed_winner_matches(self) -> None:
        # Arrange
        store = make_store(("A", "", True), ("A", "", True), ("B", "", True))
        validator = ResultValidator(RankingEngine(store))

        # Act / Assert
        assert validator.validate_tournament_result([1, 2, 3], "A") is True
        assert validator.validate_tournament_result([1, 2, 3], "B") is False

    def test_tie_goes_to_first_in_iteration(self) -> None:
        """With equal maxima the first player to reach it is authoritative."""
        # Arrange
        store = make_store(("B", "", True), ("A", "", True))
        validator = ResultValidator(RankingEngine(store))

        # Act / Assert
        assert validator.expected_winner([1, 2]) == "B"
        assert validator.validate_tournament_result([1, 2], "B") is True
        assert validator.validate_tournament_result([1, 2], "A") is False

    def test_no_verified_matches(self) -> None:
        store = make_store(("A", "", False))
        validator = ResultValidator(RankingEngine(store))
        assert validator.expected_winner([1]) is None
        assert validator.validate_tournament_result([1], "A") is False
