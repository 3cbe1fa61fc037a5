"""Tests for the stepped dealer turn."""

import pytest

from core.cards import Card
from core.errors import DeckExhaustedError
from core.game.dealer import DealerAction, DealerTurn, dealer_policy, step_dealer


def cards(*names: str, face_up: bool = True) -> tuple[Card, ...]:
    return tuple(Card.from_string(n, face_up=face_up) for n in names)


class TestDealerPolicy:
    """Tests for the hit/stand decision."""

    @pytest.mark.parametrize(
        "hand,expected",
        [
            (("10S", "6H"), DealerAction.HIT),
            (("10S", "7H"), DealerAction.STAND),
            (("AS", "6H"), DealerAction.STAND),
            (("10S", "6H", "KD"), DealerAction.BUST),
            (("2S", "3H"), DealerAction.HIT),
            (("10S", "QH"), DealerAction.STAND),
        ],
    )
    def test_policy(self, hand, expected):
        assert dealer_policy(cards(*hand)) == expected

    def test_custom_threshold(self):
        assert dealer_policy(cards("10S", "7H"), stands_on=18) == DealerAction.HIT


class TestStepDealer:
    """Tests for step_dealer."""

    def test_reveal_flips_hole_card(self):
        turn = DealerTurn(hand=cards("9S") + cards("7H", face_up=False), deck=cards("2C"))
        turn, next_action = step_dealer(turn)

        assert all(card.face_up for card in turn.hand)
        assert turn.deck == cards("2C")
        assert next_action == DealerAction.HIT
        assert turn.pending == DealerAction.HIT

    def test_hit_draws_top_card(self):
        turn = DealerTurn(hand=cards("9S", "7H"), deck=cards("2C", "KD", face_up=False), pending=DealerAction.HIT)
        turn, next_action = step_dealer(turn)

        assert [c.id for c in turn.hand] == ["spades-9", "hearts-7", "clubs-2"]
        assert turn.hand[-1].face_up
        assert [c.id for c in turn.deck] == ["diamonds-K"]
        assert next_action == DealerAction.STAND

    def test_hit_into_bust(self):
        turn = DealerTurn(hand=cards("10S", "6H"), deck=cards("KD"), pending=DealerAction.HIT)
        _, next_action = step_dealer(turn)
        assert next_action == DealerAction.BUST

    def test_final_action_does_nothing(self):
        for final in (DealerAction.STAND, DealerAction.BUST):
            turn = DealerTurn(hand=cards("10S", "7H"), deck=cards("2C"), pending=final)
            new_turn, next_action = step_dealer(turn)
            assert new_turn == turn
            assert next_action is None

    def test_hit_on_empty_deck_raises(self):
        turn = DealerTurn(hand=cards("10S", "2H"), deck=(), pending=DealerAction.HIT)
        with pytest.raises(DeckExhaustedError):
            step_dealer(turn)

    def test_input_turn_unchanged(self):
        """Test that a step never mutates the turn it was given."""
        turn = DealerTurn(hand=cards("10S", "2H"), deck=cards("3C", "4D"), pending=DealerAction.HIT)
        step_dealer(turn)
        assert turn.hand == cards("10S", "2H")
        assert len(turn.deck) == 2

    def test_run_to_completion(self):
        turn = DealerTurn(hand=cards("2S") + cards("3H", face_up=False), deck=cards("4C", "5D", "6S", "KH"))
        actions = []
        next_action = turn.pending
        while next_action is not None:
            turn, next_action = step_dealer(turn)
            if next_action is not None:
                actions.append(next_action)

        assert actions == [DealerAction.HIT, DealerAction.HIT, DealerAction.HIT, DealerAction.STAND]
        assert len(turn.hand) == 5
        assert turn.pending == DealerAction.STAND
