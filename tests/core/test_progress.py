"""Tests for player progress: reducer, store and persistence."""

import json
import math

import pytest
from pydantic import ValidationError

from config import ProgressConfig
from core.progress import (
    STATE_KEY,
    AppState,
    FileBlobStore,
    GameStats,
    GameType,
    InMemoryBlobStore,
    PlayerData,
    ProgressStore,
    initial_state,
)
from core.progress.reducer import (
    EndGame,
    LoadSavedState,
    PauseGame,
    ResetGame,
    ResumeGame,
    StartGame,
    UpdateScore,
    UpdateSettings,
    UpdateTime,
    record_result,
    reduce,
)


class TestDefaults:
    """Tests for a fresh installation."""

    def test_initial_player(self):
        state = initial_state()
        assert state.player.name == "Player"
        assert state.player.level == 1
        assert state.player.experience == 0
        assert state.player.coins == 100
        assert state.player.achievements == []

    def test_stats_for_every_game(self):
        stats = initial_state().player.stats
        assert set(stats) == set(GameType)
        for game_stats in stats.values():
            assert game_stats.games_played == 0
            assert math.isinf(game_stats.best_time)
            assert not game_stats.has_best_time

    def test_initial_flags(self):
        state = initial_state()
        assert state.current_game is None
        assert not state.is_playing
        assert not state.is_paused

    def test_starting_coins_configurable(self):
        assert initial_state(ProgressConfig(starting_coins=7)).player.coins == 7

    def test_missing_stats_filled_in(self):
        player = PlayerData(stats={GameType.WAR: GameStats(games_played=3)})
        assert player.stats[GameType.WAR].games_played == 3
        assert player.stats[GameType.HEARTS].games_played == 0

    def test_achievements_deduplicated(self):
        assert PlayerData(achievements=["first-win", "first-win", "streak"]).achievements == ["first-win", "streak"]


class TestRecordResult:
    """Tests for folding one result into the statistics."""

    def test_win(self):
        stats = record_result(GameStats(), won=True, elapsed_time=90)
        assert stats.games_played == 1
        assert stats.games_won == 1
        assert stats.best_time == 90
        assert stats.current_streak == 1
        assert stats.best_streak == 1

    def test_loss_keeps_best_time(self):
        stats = record_result(GameStats(best_time=60), won=False, elapsed_time=10)
        assert stats.best_time == 60
        assert stats.games_won == 0

    def test_slower_win_keeps_best_time(self):
        stats = record_result(GameStats(best_time=60), won=True, elapsed_time=80)
        assert stats.best_time == 60

    def test_streaks(self):
        stats = GameStats()
        for won in (True, True, True, False, True):
            stats = record_result(stats, won, 100)

        assert stats.games_played == 5
        assert stats.games_won == 4
        assert stats.current_streak == 1
        assert stats.best_streak == 3

    def test_negative_time_rejected(self):
        with pytest.raises(ValueError):
            record_result(GameStats(), won=True, elapsed_time=-1)

    def test_win_rate(self):
        assert GameStats().win_rate == 0.0
        assert GameStats(games_played=4, games_won=1).win_rate == 0.25


class TestReducer:
    """Tests for the action handlers."""

    def test_start_game(self):
        state = reduce(initial_state(), StartGame(GameType.SOLITAIRE))
        assert state.current_game == GameType.SOLITAIRE
        assert state.is_playing
        assert state.score == 0

    def test_end_game_win(self):
        state = reduce(initial_state(), StartGame(GameType.BLACKJACK))
        state = reduce(state, EndGame(GameType.BLACKJACK, won=True, elapsed_time=30))

        assert state.player.experience == 50
        assert state.player.coins == 120
        assert state.player.stats[GameType.BLACKJACK].games_won == 1
        assert state.player.stats[GameType.SOLITAIRE].games_played == 0
        assert not state.is_playing

    def test_end_game_loss(self):
        state = reduce(initial_state(), EndGame(GameType.BLACKJACK, won=False, elapsed_time=30))
        assert state.player.experience == 10
        assert state.player.coins == 105

    def test_level_and_achievements_untouched(self):
        state = initial_state()
        for _ in range(50):
            state = reduce(state, EndGame(GameType.SOLITAIRE, won=True, elapsed_time=100))
        assert state.player.level == 1
        assert state.player.achievements == []

    def test_economy_override(self):
        economy = ProgressConfig(win_experience=1, win_coins=2)
        state = reduce(initial_state(), EndGame(GameType.WAR, won=True, elapsed_time=5), economy)
        assert state.player.experience == 1
        assert state.player.coins == 102

    def test_pause_and_resume(self):
        state = reduce(initial_state(), PauseGame())
        assert state.is_paused
        assert not reduce(state, ResumeGame()).is_paused

    def test_score_and_time(self):
        state = reduce(initial_state(), UpdateScore(40))
        state = reduce(state, UpdateTime(12))
        assert state.score == 40
        assert state.game_time == 12

    def test_update_settings(self):
        state = reduce(initial_state(), UpdateSettings({"theme": "dark", "sound_enabled": False}))
        assert state.settings.theme == "dark"
        assert not state.settings.sound_enabled
        assert state.settings.card_back == "classic"

    def test_invalid_settings_rejected(self):
        with pytest.raises(ValidationError):
            reduce(initial_state(), UpdateSettings({"theme": "neon"}))
        with pytest.raises(ValidationError):
            reduce(initial_state(), UpdateSettings({"volume": 3}))

    def test_reset_game(self):
        state = reduce(initial_state(), StartGame(GameType.HEARTS))
        state = reduce(state, UpdateScore(10))
        state = reduce(state, ResetGame())
        assert state.current_game is None
        assert not state.is_playing
        assert state.score == 0

    def test_load_saved_state(self):
        saved = initial_state().model_copy(update={"score": 99})
        assert reduce(initial_state(), LoadSavedState(saved)) == saved

    def test_input_state_unchanged(self):
        state = initial_state()
        reduce(state, EndGame(GameType.SOLITAIRE, won=True, elapsed_time=1))
        assert state == initial_state()

    def test_unknown_action(self):
        with pytest.raises(TypeError):
            reduce(initial_state(), object())


class TestProgressStore:
    """Tests for the store and its persistence."""

    def test_end_game_persists(self, blob_store):
        store = ProgressStore(storage=blob_store)
        store.end_game(GameType.SOLITAIRE, True, 200)

        saved = json.loads(blob_store.get(STATE_KEY))
        assert saved["player"]["stats"]["solitaire"]["games_won"] == 1
        assert saved["player"]["stats"]["solitaire"]["best_time"] == 200

    def test_infinite_best_time_saved_as_null(self, blob_store):
        store = ProgressStore(storage=blob_store)
        store.end_game(GameType.SOLITAIRE, False, 200)

        saved = json.loads(blob_store.get(STATE_KEY))
        assert saved["player"]["stats"]["solitaire"]["best_time"] is None

    def test_rehydrates(self, blob_store):
        store = ProgressStore(storage=blob_store)
        store.end_game(GameType.BLACKJACK, True, 15)
        store.end_game(GameType.BLACKJACK, False, 20)
        store.update_settings(theme="light")

        reloaded = ProgressStore(storage=blob_store)
        assert reloaded.state == store.state
        assert math.isinf(reloaded.stats_for(GameType.SOLITAIRE).best_time)
        assert reloaded.stats_for(GameType.BLACKJACK).best_time == 15
        assert reloaded.settings.theme == "light"

    @pytest.mark.parametrize("blob", ["not json", "{\"player\": {\"coins\": -5}}", "[]"])
    def test_corrupted_snapshot_uses_defaults(self, blob_store, blob, caplog):
        blob_store.set(STATE_KEY, blob)
        store = ProgressStore(storage=blob_store)

        assert store.state == initial_state()
        assert "Discarding unreadable saved progress" in caplog.text

    def test_undecodable_snapshot_file_uses_defaults(self, tmp_path, caplog):
        (tmp_path / f"{STATE_KEY}.json").write_bytes(b"\xff\xfe{not utf8")
        store = ProgressStore(storage=FileBlobStore(tmp_path))

        assert store.state == initial_state()
        assert "Discarding unreadable saved progress" in caplog.text

        store.end_game(GameType.WAR, True, 5)
        assert ProgressStore(storage=FileBlobStore(tmp_path)).stats_for(GameType.WAR).games_won == 1

    def test_listeners_notified(self, progress):
        seen = []
        progress.subscribe(seen.append)
        progress.start_game(GameType.WAR)
        progress.pause_game()

        assert len(seen) == 2
        assert seen[-1].is_paused

    def test_unchanged_state_not_saved(self, blob_store):
        store = ProgressStore(storage=blob_store)
        store.resume_game()
        assert blob_store.get(STATE_KEY) is None

    def test_custom_key(self, blob_store):
        store = ProgressStore(storage=blob_store, key="otherSlot")
        store.update_score(3)
        assert blob_store.exists("otherSlot")
        assert not blob_store.exists(STATE_KEY)

    def test_reload_discards_memory(self, blob_store):
        store = ProgressStore(storage=blob_store)
        store.update_score(5)
        blob_store.set(STATE_KEY, initial_state().model_dump_json())

        assert store.reload().score == 0

    def test_save_failure_does_not_block(self, caplog):
        class BrokenStore(InMemoryBlobStore):
            def set(self, key, blob):
                raise OSError("disk full")

        store = ProgressStore(storage=BrokenStore())
        store.end_game(GameType.SOLITAIRE, True, 10)

        assert store.stats_for(GameType.SOLITAIRE).games_won == 1
        assert "Could not save progress" in caplog.text

    def test_negative_time_keeps_saved_profile(self, tmp_path):
        """Test that a bad result is refused before it can reach storage."""
        store = ProgressStore(storage=FileBlobStore(tmp_path))
        store.end_game(GameType.BLACKJACK, True, 30)

        with pytest.raises(ValueError):
            store.end_game(GameType.SOLITAIRE, True, -1)
        assert store.stats_for(GameType.SOLITAIRE).games_played == 0

        reloaded = ProgressStore(storage=FileBlobStore(tmp_path))
        assert reloaded.player.experience == 50
        assert reloaded.stats_for(GameType.BLACKJACK).best_time == 30

    def test_load_saved_state(self, progress):
        snapshot = AppState(score=12)
        assert progress.load_saved_state(snapshot).score == 12


class TestFileBlobStore:
    """Tests for file persistence."""

    def test_round_trip(self, tmp_path):
        store = FileBlobStore(tmp_path / "data")
        assert store.get("cardGameState") is None

        store.set("cardGameState", "{}")
        assert store.get("cardGameState") == "{}"
        assert (tmp_path / "data" / "cardGameState.json").exists()

    def test_delete(self, tmp_path):
        store = FileBlobStore(tmp_path)
        store.set("slot", "x")
        store.delete("slot")
        store.delete("slot")
        assert not store.exists("slot")

    @pytest.mark.parametrize("key", ["", "../escape", ".hidden", "a/b"])
    def test_invalid_keys(self, tmp_path, key):
        with pytest.raises(ValueError):
            FileBlobStore(tmp_path).get(key)

    def test_progress_survives_restart(self, tmp_path):
        ProgressStore(storage=FileBlobStore(tmp_path)).end_game(GameType.SOLITAIRE, True, 321)

        store = ProgressStore(storage=FileBlobStore(tmp_path))
        assert store.stats_for(GameType.SOLITAIRE).best_time == 321
        assert store.player.coins == 120
