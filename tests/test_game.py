"""Tests for the single-hand state machine."""
import pytest

from truco.deck import Card
from truco.errors import IllegalMove, InvalidTransition
from truco.game import HandPhase, HandSession, TrickTally
from truco.play import Seat, Winner

P = Seat.PLAYER
O = Seat.OPPONENT


def c(text: str) -> Card:
    return Card.parse(text)


def cards(*texts: str) -> list[Card]:
    return [c(t) for t in texts]


def play_trick(hand: HandSession, player_card: str, opponent_card: str):
    """Play one trick in turn order and resolve it."""
    first = hand.current_turn
    moves = {P: c(player_card), O: c(opponent_card)}
    hand.play_card(first, moves[first])
    hand.play_card(first.other(), moves[first.other()])
    result = hand.resolve_trick()
    if hand.phase is HandPhase.AWAITING_NEXT_TRICK:
        hand.start_next_trick()
    return result


def test_initial_state():
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=O)
    assert hand.phase is HandPhase.AWAITING_FIRST_PLAY
    assert hand.trick_number == 1
    assert hand.current_turn is O
    assert hand.table.is_empty()
    assert hand.tally == TrickTally(0, 0)
    assert not hand.is_trick_in_progress()
    assert hand.playable_cards(P) == []
    assert hand.playable_cards(O) == cards("4s", "As", "Qs")


def test_first_play_passes_turn():
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=P)
    hand.play_card(P, c("3c"))
    assert hand.phase is HandPhase.AWAITING_SECOND_PLAY
    assert hand.current_turn is O
    assert hand.table.player_card == c("3c")
    assert hand.table.opponent_card is None
    assert hand.hand_of(P) == cards("4c", "2c")
    assert hand.is_trick_in_progress()
    assert hand.playable_cards(P) == []


def test_second_play_moves_to_resolving():
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=P)
    hand.play_card(P, c("3c"))
    hand.play_card(O, c("4s"))
    assert hand.phase is HandPhase.RESOLVING_TRICK
    assert hand.table.is_full()
    assert hand.playable_cards(P) == []
    assert hand.playable_cards(O) == []


@pytest.mark.parametrize(
    "who,card,reason",
    [
        (O, "4s", "turn"),
        (P, "Kh", "hand"),
        (P, "4s", "hand"),
    ],
)
def test_illegal_first_play_leaves_state_unchanged(who, card, reason):
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=P)
    before = hand.snapshot()
    with pytest.raises(IllegalMove, match=reason):
        hand.play_card(who, c(card))
    assert hand.snapshot() == before


def test_opponent_out_of_turn_is_rejected():
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=P)
    before = hand.snapshot()
    with pytest.raises(IllegalMove):
        hand.play_card(O, c("As"))
    assert hand.snapshot() == before
    assert hand.hand_of(O) == cards("4s", "As", "Qs")
    assert hand.table.is_empty()
    assert hand.tally == TrickTally(0, 0)


def test_occupied_slot_and_resolving_trick_reject_plays():
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=P)
    hand.play_card(P, c("3c"))
    before = hand.snapshot()
    # player already has a card down (and it is not their turn)
    with pytest.raises(IllegalMove):
        hand.play_card(P, c("4c"))
    assert hand.snapshot() == before

    hand.play_card(O, c("4s"))
    before = hand.snapshot()
    for who, card in ((P, "4c"), (O, "As")):
        with pytest.raises(IllegalMove):
            hand.play_card(who, c(card))
    assert hand.snapshot() == before


def test_resolve_trick_only_when_resolving():
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=P)
    with pytest.raises(InvalidTransition):
        hand.resolve_trick()
    hand.play_card(P, c("3c"))
    with pytest.raises(InvalidTransition):
        hand.resolve_trick()


def test_resolve_trick_clears_table_and_winner_leads():
    hand = HandSession(cards("4c", "5c", "6c"), cards("3s", "4s", "5s"), first_turn=P)
    hand.play_card(P, c("4c"))
    hand.play_card(O, c("3s"))
    result = hand.resolve_trick()
    assert result.winner is Winner.OPPONENT
    assert not result.is_tie
    assert result.tally == TrickTally(0, 1)
    assert hand.table.is_empty()
    assert hand.phase is HandPhase.AWAITING_NEXT_TRICK
    assert hand.trick_number == 2
    assert hand.current_turn is O
    with pytest.raises(IllegalMove):
        hand.play_card(O, c("4s"))
    hand.start_next_trick()
    assert hand.phase is HandPhase.AWAITING_FIRST_PLAY
    assert hand.first_player is O


def test_start_next_trick_only_between_tricks():
    hand = HandSession(cards("4c", "5c", "6c"), cards("3s", "4s", "5s"), first_turn=P)
    with pytest.raises(InvalidTransition):
        hand.start_next_trick()


def test_tie_alternates_from_first_mover():
    hand = HandSession(cards("Kc", "5c", "6c"), cards("Ks", "4s", "5s"), first_turn=O)
    result = play_trick(hand, "Kc", "Ks")
    assert result.is_tie
    assert result.first_player is O
    assert hand.tally == TrickTally(0, 0)
    assert hand.current_turn is P

    hand2 = HandSession(cards("Kc", "5c", "6c"), cards("Ks", "4s", "5s"), first_turn=P)
    play_trick(hand2, "Kc", "Ks")
    assert hand2.current_turn is O


def test_end_to_end_player_wins_two_one():
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=P)

    r1 = play_trick(hand, "3c", "4s")
    assert r1.winner is Winner.PLAYER
    assert hand.tally == TrickTally(1, 0)

    r2 = play_trick(hand, "4c", "As")
    assert r2.winner is Winner.OPPONENT
    assert hand.tally == TrickTally(1, 1)
    assert not hand.is_hand_complete()

    r3 = play_trick(hand, "2c", "Qs")
    assert r3.winner is Winner.PLAYER
    assert r3.hand_complete
    assert hand.tally == TrickTally(2, 1)
    assert hand.is_hand_complete()
    assert hand.hand_winner() is Winner.PLAYER
    assert hand.hand_of(P) == []
    assert hand.hand_of(O) == []


def test_two_nil_ends_after_second_trick():
    hand = HandSession(cards("3c", "2c", "4c"), cards("4s", "5s", "As"), first_turn=O)
    play_trick(hand, "3c", "4s")
    result = play_trick(hand, "2c", "5s")
    assert result.trick_number == 2
    assert result.hand_complete
    assert hand.is_hand_complete()
    assert hand.tally == TrickTally(2, 0)
    assert hand.hand_winner() is Winner.PLAYER
    # third card never played
    assert hand.hand_of(P) == cards("4c")
    with pytest.raises(IllegalMove):
        hand.play_card(hand.current_turn, hand.hand_of(hand.current_turn)[0])


def test_all_ties_hand():
    hand = HandSession(cards("3c", "Kc", "4c"), cards("3s", "Ks", "4s"), first_turn=P)
    for p, o in (("3c", "3s"), ("Kc", "Ks"), ("4c", "4s")):
        play_trick(hand, p, o)
    assert hand.is_hand_complete()
    assert hand.tally == TrickTally(0, 0)
    assert hand.hand_winner() is Winner.TIE
    assert len(hand.tricks) == 3


def test_one_win_each_plus_tie_is_tied_hand():
    hand = HandSession(cards("3c", "4c", "Kc"), cards("4s", "3s", "Ks"), first_turn=P)
    play_trick(hand, "3c", "4s")
    play_trick(hand, "4c", "3s")
    play_trick(hand, "Kc", "Ks")
    assert hand.tally == TrickTally(1, 1)
    assert hand.hand_winner() is Winner.TIE


def test_tie_then_single_win_runs_all_three_tricks():
    hand = HandSession(cards("Kc", "3c", "4c"), cards("Ks", "4s", "5s"), first_turn=P)
    play_trick(hand, "Kc", "Ks")
    result = play_trick(hand, "3c", "4s")
    assert not result.hand_complete
    assert hand.trick_number == 3
    play_trick(hand, "4c", "5s")
    assert hand.tally == TrickTally(1, 1)
    assert hand.hand_winner() is Winner.TIE


def test_hand_winner_before_completion():
    hand = HandSession(cards("3c", "4c", "2c"), cards("4s", "As", "Qs"), first_turn=P)
    with pytest.raises(InvalidTransition):
        hand.hand_winner()
