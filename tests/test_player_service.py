"""Tests for PlayerService."""

from __future__ import annotations

import re
import unittest

from mockfirestore import MockFirestore

from songclash.errors import (
    DuplicateResourceError,
    FailedPreconditionError,
    InternalError,
    NotFoundError,
    ResourceExhaustedError,
    ValidationError,
)
from songclash.player.data import get_all_players
from songclash.player.services import PlayerService, generate_player_id
from tests.conftest import make_ctx, patch_mockfirestore, seed_game, seed_players
from tests.mock_utils import patch_transactions


class JoinGameTestCase(unittest.TestCase):
    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()
        self.runner = patch_transactions(self)
        self.ctx = make_ctx("join_game")

    def _game(self) -> dict:
        return self.db.collection("games").document("GAME01").get().to_dict()

    def test_join_game(self) -> None:
        seed_game(self.db, playerCount=2)
        seed_players(self.db, player_ids=("p1", "p2"))

        result = PlayerService.join_game("GAME01", "  Carol ", self.ctx, db=self.db)

        self.assertEqual(result["gameId"], "GAME01")
        players = get_all_players(self.db, "GAME01", self.ctx)
        self.assertEqual([p["id"] for p in players][-1], result["playerId"])
        joined = players[-1]
        self.assertEqual(joined["name"], "Carol")
        self.assertEqual(joined["joinOrder"], 2)
        self.assertEqual(joined["score"], 0)
        self.assertFalse(joined["isCreator"])
        self.assertTrue(joined["jokerAvailable"])
        self.assertEqual(self._game()["playerCount"], 3)

    def test_invalid_name_opens_no_transaction(self) -> None:
        seed_game(self.db)
        with self.assertRaises(ValidationError):
            PlayerService.join_game("GAME01", "   ", self.ctx, db=self.db)
        self.assertEqual(self.runner.calls, 0)

    def test_missing_game(self) -> None:
        with self.assertRaises(NotFoundError):
            PlayerService.join_game("NOPE00", "Carol", self.ctx, db=self.db)

    def test_game_already_started(self) -> None:
        seed_game(self.db, status="round1_announcing", currentRound=1, playerCount=2)
        seed_players(self.db, player_ids=("p1", "p2"))
        with self.assertRaises(FailedPreconditionError):
            PlayerService.join_game("GAME01", "Carol", self.ctx, db=self.db)
        self.assertEqual(self.runner.last.writes, [])

    def test_game_full(self) -> None:
        seed_game(self.db, playerCount=4)
        seed_players(self.db, player_ids=("p1", "p2", "p3", "p4"))
        with self.assertRaises(ResourceExhaustedError) as cm:
            PlayerService.join_game("GAME01", "Eve", self.ctx, db=self.db)
        self.assertEqual(cm.exception.message, "Game is full (4/4 players).")
        self.assertEqual(cm.exception.status_code, 429)

    def test_duplicate_name_is_case_insensitive(self) -> None:
        seed_game(self.db, playerCount=2)
        seed_players(self.db, player_ids=("p1", "p2"))
        with self.assertRaises(DuplicateResourceError):
            PlayerService.join_game("GAME01", "name P2", self.ctx, db=self.db)

    def test_missing_max_players(self) -> None:
        seed_game(self.db, settings={"rounds": 3})
        with self.assertRaises(InternalError):
            PlayerService.join_game("GAME01", "Carol", self.ctx, db=self.db)

    def test_join_order_never_reused(self) -> None:
        # playerCount is ahead of the stored players, e.g. after a concurrent join
        seed_game(self.db, playerCount=3)
        seed_players(self.db, player_ids=("p1", "p2"))
        result = PlayerService.join_game("GAME01", "Dan", self.ctx, db=self.db)
        players = {p["id"]: p for p in get_all_players(self.db, "GAME01", self.ctx)}
        self.assertEqual(players[result["playerId"]]["joinOrder"], 3)


class PlayerIdTestCase(unittest.TestCase):
    def test_player_id_format(self) -> None:
        self.assertRegex(generate_player_id(), re.compile(r"^player_\d+_[0-9a-z]{5}$"))


if __name__ == "__main__":
    unittest.main()
