"""
Tests for the deletion utilities (previews and cascading deletes).
"""
from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from golf_scorer.models.players import Player
from golf_scorer.models.tournaments import Tournament
from golf_scorer.models.deletion_utils import (
    delete_player_safely,
    delete_tournament_safely,
    get_player_deletion_preview,
    get_tournament_deletion_preview,
)
from golf_scorer.utils.scoring import record_score
from tests.base import BaseTestCase


class TestDeletionSystem(BaseTestCase):

    def setUp(self):
        super().setUp()
        self.tournament = self.create_tournament(is_active=True)
        self.holes = self.add_holes(self.tournament)
        self.alice = self.create_player(name='Alice')
        self.bob = self.create_player(name='Bob')
        for player in (self.alice, self.bob):
            self.enter_player(self.tournament, player)
        self.create_group(self.tournament, [self.alice, self.bob], scorer=self.alice)
        for hole in self.holes[:9]:
            record_score(self.tournament.id, self.alice.id, hole.id, 4)
            record_score(self.tournament.id, self.bob.id, hole.id, 5)

    def test_01_tournament_preview(self):
        """Preview counts every dependent row"""
        preview = get_tournament_deletion_preview(self.tournament.id)
        self.assertEqual(preview['tournament_name'], 'Test Open')
        self.assertTrue(preview['is_active'])
        self.assertEqual(preview['counts'], {
            'Holes': 18,
            'Tournament_Players': 2,
            'Groups': 1,
            'Group_Players': 2,
            'Scores': 18,
        })
        self.assertEqual(preview['total_related'], 41)

    def test_02_player_preview(self):
        preview = get_player_deletion_preview(self.alice.id)
        self.assertEqual(preview['counts'], {
            'Tournament_Players': 1,
            'Group_Players': 1,
            'Scores': 9,
        })
        self.assertIsNone(get_player_deletion_preview('missing'))

    def test_03_delete_tournament_safely(self):
        tournament_id = self.tournament.id
        result = delete_tournament_safely(tournament_id)

        self.assertTrue(result.success)
        self.assertEqual(result.deleted_counts['Tournament'], 1)
        self.assertEqual(result.deleted_counts['Scores'], 18)
        self.assertIsNone(self.db.session.get(Tournament, tournament_id))
        self.assertIsNone(get_tournament_deletion_preview(tournament_id))
        # players themselves survive
        self.assertEqual(Player.query.count(), 2)

    def test_04_delete_player_safely(self):
        result = delete_player_safely(self.alice.id)

        self.assertTrue(result.success)
        self.assertIn('Successfully deleted', result.get_summary())
        preview = get_tournament_deletion_preview(self.tournament.id)
        self.assertEqual(preview['counts']['Scores'], 9)
        self.assertEqual(preview['counts']['Group_Players'], 1)
        self.assertEqual(preview['counts']['Tournament_Players'], 1)

    def test_05_missing_records(self):
        result = delete_tournament_safely('missing')
        self.assertFalse(result.success)
        self.assertEqual(result.get_summary(), 'Deletion failed with 1 errors')

        result = delete_player_safely('missing')
        self.assertFalse(result.success)

    def test_06_failed_commit_reports_nothing_deleted(self):
        """A rolled back deletion keeps the rows and reports no counts"""
        with patch.object(self.db.session, 'commit', side_effect=SQLAlchemyError('disk full')):
            result = delete_tournament_safely(self.tournament.id)

        self.assertFalse(result.success)
        self.assertEqual(result.deleted_counts, {})
        self.assertIn('disk full', result.errors[0])
        self.assertIsNotNone(get_tournament_deletion_preview(self.tournament.id))
