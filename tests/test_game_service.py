"""Tests for GameService."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from mockfirestore import MockFirestore

from songclash.errors import (
    DuplicateResourceError,
    FailedPreconditionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from songclash.game.models import is_status_consistent
from songclash.game.services import GameService, choose_first_host
from tests.conftest import (
    make_ctx,
    patch_mockfirestore,
    seed_game,
    seed_players,
)
from tests.mock_utils import patch_transactions

VALID_SETTINGS = {
    "rounds": 5,
    "maxPlayers": 6,
    "allowExplicit": True,
    "selectionTimeLimit": 90,
    "rankingTimeLimit": 60,
}


class GameServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()
        self.runner = patch_transactions(self)
        self.ctx = make_ctx()

    def _game(self, game_id: str = "GAME01") -> dict:
        game = self.db.collection("games").document(game_id).get().to_dict()
        self.assertTrue(is_status_consistent(game), game)
        return game

    def _round(self, number: int, game_id: str = "GAME01"):
        return (
            self.db.collection("games")
            .document(game_id)
            .collection("rounds")
            .document(str(number))
            .get()
        )


class CreateGameTestCase(GameServiceTestCase):
    @patch("songclash.game.services.generate_game_id", return_value="ABC123")
    def test_create_game(self, _mock_id) -> None:
        result = GameService.create_game(
            "p1", self.ctx, settings=VALID_SETTINGS, player_name="Alice", db=self.db
        )

        self.assertEqual(result, {"gameId": "ABC123", "playerId": "p1"})
        game = self._game("ABC123")
        self.assertEqual(game["status"], "waiting")
        self.assertEqual(game["currentRound"], 0)
        self.assertEqual(game["creatorPlayerId"], "p1")
        self.assertEqual(game["totalRounds"], 5)
        self.assertEqual(game["playerCount"], 1)
        self.assertEqual(game["settings"], VALID_SETTINGS)

        player = (
            self.db.collection("games")
            .document("ABC123")
            .collection("players")
            .document("p1")
            .get()
            .to_dict()
        )
        self.assertEqual(player["name"], "Alice")
        self.assertEqual(player["score"], 0)
        self.assertTrue(player["isCreator"])
        self.assertTrue(player["jokerAvailable"])
        self.assertEqual(player["joinOrder"], 0)

    @patch("songclash.game.services.generate_game_id", return_value="DEF456")
    def test_create_game_uses_defaults(self, _mock_id) -> None:
        GameService.create_game("p1", self.ctx, db=self.db)
        game = self._game("DEF456")
        self.assertEqual(game["settings"]["rounds"], 5)
        self.assertEqual(game["settings"]["maxPlayers"], 6)

    def test_invalid_settings_open_no_transaction(self) -> None:
        with self.assertRaises(ValidationError):
            GameService.create_game(
                "p1", self.ctx, settings={**VALID_SETTINGS, "rounds": 4}, db=self.db
            )
        self.assertEqual(self.runner.calls, 0)

    @patch("songclash.game.services.generate_game_id", return_value="GAME01")
    def test_game_id_collision(self, _mock_id) -> None:
        seed_game(self.db)
        with self.assertRaises(DuplicateResourceError):
            GameService.create_game("p9", self.ctx, db=self.db)
        self.assertFalse(self.runner.last.committed)
        self.assertEqual(self._game()["creatorPlayerId"], "p1")

    def test_generated_game_id_shape(self) -> None:
        from songclash.game.services import generate_game_id

        game_id = generate_game_id()
        self.assertEqual(len(game_id), 6)
        self.assertEqual(game_id, game_id.upper())


class UpdateGameSettingsTestCase(GameServiceTestCase):
    def test_creator_updates_settings(self) -> None:
        seed_game(self.db)
        new_settings = {**VALID_SETTINGS, "rounds": 7, "rankingTimeLimit": None}

        GameService.update_game_settings("GAME01", new_settings, "p1", self.ctx, db=self.db)

        game = self._game()
        self.assertEqual(game["settings"], new_settings)
        self.assertEqual(game["totalRounds"], 7)
        self.assertEqual(game["status"], "waiting")

    def test_non_creator_is_denied_without_writes(self) -> None:
        seed_game(self.db)
        with self.assertRaises(PermissionDeniedError) as cm:
            GameService.update_game_settings(
                "GAME01", VALID_SETTINGS, "non-creator", self.ctx, db=self.db
            )
        self.assertEqual(cm.exception.message, "Only the game creator can update settings.")
        self.assertEqual(self.runner.last.writes, [])
        self.assertFalse(self.runner.last.committed)

    def test_invalid_settings_checked_before_permission(self) -> None:
        seed_game(self.db)
        with self.assertRaises(ValidationError):
            GameService.update_game_settings(
                "GAME01", {**VALID_SETTINGS, "maxPlayers": 9}, "non-creator", self.ctx,
                db=self.db,
            )
        self.assertEqual(self.runner.calls, 0)

    def test_only_while_waiting(self) -> None:
        seed_game(self.db, status="round1_selecting", currentRound=1)
        with self.assertRaises(FailedPreconditionError) as cm:
            GameService.update_game_settings("GAME01", VALID_SETTINGS, "p1", self.ctx, db=self.db)
        self.assertEqual(
            cm.exception.message,
            "Game settings can only be changed while the game is in the 'waiting' "
            "state (current: round1_selecting).",
        )
        self.assertEqual(self.runner.committed_writes(), 0)

    def test_missing_game(self) -> None:
        with self.assertRaises(NotFoundError):
            GameService.update_game_settings("NOPE00", VALID_SETTINGS, "p1", self.ctx, db=self.db)


class StartGameTestCase(GameServiceTestCase):
    def test_start_game(self) -> None:
        seed_game(self.db, playerCount=2)
        seed_players(self.db, player_ids=("p1", "p2"))

        GameService.start_game("GAME01", self.ctx, db=self.db)

        game = self._game()
        self.assertEqual(game["status"], "round1_announcing")
        self.assertEqual(game["currentRound"], 1)
        self.assertEqual(game["roundHostPlayerId"], "p1")
        self.assertEqual(game["totalRounds"], 3)
        self.assertIsNone(game["challenge"])

        round_snap = self._round(1)
        self.assertTrue(round_snap.exists)
        round_doc = round_snap.to_dict()
        self.assertEqual(round_doc["status"], "announcing")
        self.assertEqual(round_doc["hostPlayerId"], "p1")
        self.assertEqual(round_doc["roundNumber"], 1)

    def test_needs_two_players(self) -> None:
        seed_game(self.db, playerCount=1)
        seed_players(self.db, player_ids=("p1",))

        with self.assertRaises(FailedPreconditionError) as cm:
            GameService.start_game("GAME01", self.ctx, db=self.db)

        self.assertEqual(
            cm.exception.message,
            "Cannot start game GAME01. Need at least 2 players (currently 1).",
        )
        self.assertEqual(self._game()["status"], "waiting")
        self.assertEqual(self.runner.committed_writes(), 0)

    def test_not_waiting(self) -> None:
        for status, current_round in (
            ("round1_announcing", 1),
            ("round2_ranking", 2),
            ("finished", 3),
        ):
            with self.subTest(status=status):
                seed_game(self.db, status=status, currentRound=current_round)
                seed_players(self.db, player_ids=("p1", "p2"))
                with self.assertRaises(FailedPreconditionError) as cm:
                    GameService.start_game("GAME01", self.ctx, db=self.db)
                self.assertIn("is not in the 'waiting' state", cm.exception.message)
                self.assertEqual(self.runner.last.writes, [])

    def test_requester_must_be_creator(self) -> None:
        seed_game(self.db)
        seed_players(self.db, player_ids=("p1", "p2"))
        with self.assertRaises(PermissionDeniedError):
            GameService.start_game(
                "GAME01", self.ctx, requesting_player_id="p2", db=self.db
            )
        self.assertFalse(self._round(1).exists)

    def test_double_start_fails(self) -> None:
        seed_game(self.db)
        seed_players(self.db, player_ids=("p1", "p2"))
        GameService.start_game("GAME01", self.ctx, db=self.db)
        with self.assertRaises(FailedPreconditionError):
            GameService.start_game("GAME01", self.ctx, db=self.db)

    def test_first_host_falls_back_to_join_order(self) -> None:
        seed_game(self.db, creatorPlayerId="gone")
        seed_players(self.db, player_ids=("p7", "p3"))
        GameService.start_game("GAME01", self.ctx, db=self.db)
        self.assertEqual(self._game()["roundHostPlayerId"], "p7")


class ChooseFirstHostTestCase(unittest.TestCase):
    def test_prefers_creator(self) -> None:
        players = [
            {"id": "a", "name": "A", "score": 0, "joinOrder": 0},
            {"id": "b", "name": "B", "score": 0, "joinOrder": 1},
        ]
        self.assertEqual(choose_first_host({"creatorPlayerId": "b"}, players), "b")

    def test_no_players(self) -> None:
        self.assertIsNone(choose_first_host({"creatorPlayerId": "b"}, []))


if __name__ == "__main__":
    unittest.main()
