from spaces.logic.actions import (
    apply_round_stats,
    clear_phase_override,
    complete_all_rounds,
    complete_round,
    load_state,
    reset_game,
    select_board,
    select_deck,
    select_opponent,
    select_opponent_board,
    select_player_board,
    set_board_size,
    set_game_mode,
    set_phase_override,
)
from spaces.logic.derive import derive_current_round, derive_phase, is_round_complete
from spaces.logic.enums import GameMode, Side, Winner
from spaces.logic.phase import DeckManagementPhase, RoundResultsPhase
from spaces.logic.settings import GameRules
from spaces.logic.types import UserStats
from spaces.tests.conftest import (
    create_board,
    create_complete_round,
    create_completed_rounds,
    create_deck,
    create_game_state,
    create_opponent,
    create_round_entry,
)


class TestApplyRoundStats:
    def test_counts_win(self):
        stats = apply_round_stats(UserStats(), Winner.PLAYER)
        assert stats == UserStats(total_games=1, wins=1)

    def test_counts_loss_and_tie(self):
        stats = apply_round_stats(apply_round_stats(UserStats(), Winner.OPPONENT), Winner.TIE)
        assert stats == UserStats(total_games=2, losses=1, ties=1)


class TestSetupActions:
    def test_phase_override_set_and_cleared(self):
        state = set_phase_override(create_game_state(), DeckManagementPhase())
        assert state.phase_override == DeckManagementPhase()
        assert clear_phase_override(state).phase_override is None

    def test_set_game_mode_clears_override(self):
        state = create_game_state(phase_override=DeckManagementPhase())
        new_state = set_game_mode(state, GameMode.DECK)

        assert new_state.game_mode is GameMode.DECK
        assert new_state.phase_override is None

    def test_set_board_size(self):
        assert set_board_size(create_game_state(), 5).board_size == 5

    def test_select_opponent_sets_mode(self):
        opponent = create_opponent("Carol")
        state = select_opponent(create_game_state(with_opponent=False, game_mode=None), opponent, GameMode.DECK)

        assert state.opponent == opponent
        assert state.game_mode is GameMode.DECK

    def test_select_deck_per_side(self):
        mine, theirs = create_deck("mine"), create_deck("theirs")
        state = select_deck(create_game_state(), Side.PLAYER, mine)
        state = select_deck(state, Side.OPPONENT, theirs)

        assert state.player_selected_deck == mine
        assert state.opponent_selected_deck == theirs

    def test_actions_clear_checksum(self):
        state = create_game_state().model_copy(update={"checksum": "abcd"})
        assert set_board_size(state, 3).checksum == ""

    def test_input_state_is_untouched(self):
        state = create_game_state()
        select_player_board(state, create_board())

        assert state.round_history == ()


class TestSelectBoard:
    def test_first_board_creates_round_one(self):
        board = create_board()
        state = select_player_board(create_game_state(), board)

        assert len(state.round_history) == 1
        assert state.round_history[0].round == 1
        assert state.round_history[0].player_board == board
        assert state.round_history[0].opponent_board is None

    def test_second_board_updates_same_entry(self):
        state = select_player_board(create_game_state(), create_board("a"))
        state = select_opponent_board(state, create_board("b"))

        assert len(state.round_history) == 1
        assert state.round_history[0].player_board.id == "a"
        assert state.round_history[0].opponent_board.id == "b"

    def test_after_complete_round_opens_next_slot(self):
        state = create_game_state(round_history=create_completed_rounds(2))
        state = select_board(state, Side.OPPONENT, create_board("next"))

        assert len(state.round_history) == 3
        assert state.round_history[2].round == 3
        assert state.round_history[2].opponent_board.id == "next"
        assert state.round_history[:2] == create_completed_rounds(2)

    def test_fills_placeholder_entry(self):
        history = (*create_completed_rounds(1), create_round_entry(2))
        state = select_player_board(create_game_state(round_history=history), create_board("x"))

        assert len(state.round_history) == 2
        assert state.round_history[1].player_board.id == "x"

    def test_clears_override(self):
        state = create_game_state(phase_override=DeckManagementPhase())
        assert select_player_board(state, create_board()).phase_override is None


class TestCompleteRound:
    def test_replaces_partial_entry(self):
        state = select_player_board(create_game_state(), create_board("p1"))
        result = create_complete_round(1)
        state = complete_round(state, result)

        assert state.round_history == (result,)
        assert derive_current_round(state) == 2
        assert derive_phase(state) == RoundResultsPhase(round=1, result=result)

    def test_appends_round_this_tab_never_saw(self):
        state = create_game_state(round_history=create_completed_rounds(1))
        state = complete_round(state, create_complete_round(2))

        assert len(state.round_history) == 2
        assert derive_current_round(state) == 3

    def test_never_downgrades_complete_round(self):
        state = create_game_state(round_history=create_completed_rounds(2))
        partial = create_round_entry(2, player_board=create_board("late"))

        assert complete_round(state, partial) is state

    def test_replacing_complete_round_with_complete_result(self):
        state = create_game_state(round_history=create_completed_rounds(1))
        corrected = create_complete_round(1, winner=Winner.TIE, player_points=1, opponent_points=1)

        assert complete_round(state, corrected).round_history == (corrected,)

    def test_stats_untouched_before_last_round(self):
        state = create_game_state(round_history=create_completed_rounds(3))
        state = complete_round(state, create_complete_round(4))

        assert state.user.stats.total_games == 0

    def test_final_round_updates_stats(self):
        state = create_game_state(round_history=create_completed_rounds(4))
        state = complete_round(state, create_complete_round(5))

        assert state.user.stats == UserStats(total_games=1, wins=1)

    def test_final_round_loss(self):
        history = tuple(
            create_complete_round(i, winner=Winner.OPPONENT, player_points=0, opponent_points=1) for i in range(1, 5)
        )
        state = complete_round(
            create_game_state(round_history=history),
            create_complete_round(5, winner=Winner.OPPONENT, player_points=0, opponent_points=1),
        )

        assert state.user.stats == UserStats(total_games=1, losses=1)

    def test_reapplying_result_after_game_over_keeps_stats(self):
        state = complete_round(create_game_state(round_history=create_completed_rounds(4)), create_complete_round(5))
        assert state.user.stats.total_games == 1

        state = complete_round(state, create_complete_round(5))
        state = complete_round(state, create_complete_round(2))

        assert state.user.stats == UserStats(total_games=1, wins=1)

    def test_resolved_log_without_prior_stats_is_not_counted(self):
        state = create_game_state(round_history=create_completed_rounds(5))

        assert complete_round(state, create_complete_round(5)).user.stats.total_games == 0

    def test_respects_custom_total_rounds(self):
        state = complete_round(create_game_state(), create_complete_round(1), GameRules(total_rounds=1))
        assert state.user.stats.total_games == 1


class TestCompleteAllRounds:
    def test_replaces_log_and_counts_game(self):
        results = create_completed_rounds(10)
        state = complete_all_rounds(create_game_state(game_mode=GameMode.DECK), results)

        assert state.round_history == results
        assert state.user.stats == UserStats(total_games=1, wins=1)


class TestResetAndLoad:
    def test_reset_keeps_only_user(self):
        state = create_game_state(round_history=create_completed_rounds(2))
        fresh = reset_game(state)

        assert fresh.user == state.user
        assert fresh.round_history == ()
        assert fresh.opponent is None
        assert fresh.game_mode is None

    def test_load_state_replaces_wholesale(self):
        incoming = create_game_state(round_history=create_completed_rounds(3))
        assert load_state(create_game_state(), incoming) is incoming


class TestMonotonicLog:
    def test_log_never_shrinks_or_reverts(self):
        state = create_game_state()
        steps = [
            lambda s: select_player_board(s, create_board("p1")),
            lambda s: select_opponent_board(s, create_board("o1")),
            lambda s: complete_round(s, create_complete_round(1)),
            lambda s: complete_round(s, create_round_entry(1, player_board=create_board("stale"))),
            lambda s: select_opponent_board(s, create_board("o2")),
            lambda s: complete_round(s, create_complete_round(2)),
            lambda s: select_player_board(s, create_board("p3")),
        ]

        previous = state.round_history
        for step in steps:
            state = step(state)
            history = state.round_history
            assert len(history) >= len(previous)
            for before, after in zip(previous, history, strict=False):
                assert after.round == before.round
                if is_round_complete(before):
                    assert is_round_complete(after)
            previous = history

        assert [entry.round for entry in state.round_history] == [1, 2, 3]
