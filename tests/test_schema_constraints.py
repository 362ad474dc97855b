"""
Range, uniqueness and cascade rules of the schema.
"""
import uuid

from sqlalchemy import delete, text
from sqlalchemy.exc import IntegrityError

from golf_scorer.models.players import Player
from golf_scorer.models.tournaments import Tournament, Hole, Tournament_Players
from golf_scorer.models.groups import Group, Group_Players
from golf_scorer.models.scores import Score
from golf_scorer.utils.scoring import duplicate_stroke_indexes
from tests.base import BaseTestCase


class TestHoleConstraints(BaseTestCase):

    def test_01_hole_numbers_in_range(self):
        """Hole numbers 1..18 are accepted"""
        tournament = self.create_tournament()
        holes = self.add_holes(tournament)
        self.assertEqual(len(holes), 18)
        self.assertEqual(Hole.query.filter_by(tournament_id=tournament.id).count(), 18)

    def test_02_hole_number_out_of_range(self):
        """Hole number 19 (or 0) is rejected"""
        tournament = self.create_tournament()
        with self.assertRaises(ValueError):
            Hole(tournament_id=tournament.id, hole_number=19, par=4, stroke_index=1)
        with self.assertRaises(ValueError):
            Hole(tournament_id=tournament.id, hole_number=0, par=4, stroke_index=1)

    def test_03_par_and_stroke_index_ranges(self):
        tournament = self.create_tournament()
        with self.assertRaises(ValueError):
            Hole(tournament_id=tournament.id, hole_number=1, par=6, stroke_index=1)
        with self.assertRaises(ValueError):
            Hole(tournament_id=tournament.id, hole_number=1, par=2, stroke_index=1)
        with self.assertRaises(ValueError):
            Hole(tournament_id=tournament.id, hole_number=1, par=4, stroke_index=19)

    def test_09_fractional_values_rejected(self):
        """Fractional values are refused rather than truncated"""
        tournament = self.create_tournament()
        with self.assertRaises(ValueError):
            Hole(tournament_id=tournament.id, hole_number=1.9, par=4, stroke_index=1)
        with self.assertRaises(ValueError):
            Hole(tournament_id=tournament.id, hole_number=1, par=4.8, stroke_index=1)
        with self.assertRaises(ValueError):
            Hole(tournament_id=tournament.id, hole_number=1, par=4, stroke_index=18.7)
        hole = Hole(tournament_id=tournament.id, hole_number=3.0, par='4', stroke_index=3)
        self.assertEqual((hole.hole_number, hole.par), (3, 4))

    def test_04_database_check_constraint(self):
        """A raw insert bypassing the model is rejected by the database"""
        tournament = self.create_tournament()
        with self.assertRaises(IntegrityError):
            self.db.session.execute(
                text(
                    "INSERT INTO holes (id, tournament_id, hole_number, par, stroke_index, created_at) "
                    "VALUES (:id, :tid, 19, 4, 1, CURRENT_TIMESTAMP)"
                ),
                {'id': str(uuid.uuid4()), 'tid': tournament.id}
            )
        self.db.session.rollback()

    def test_05_duplicate_hole_number(self):
        """A second hole 1 fails; the first one is unaffected"""
        tournament = self.create_tournament()
        first = Hole(tournament_id=tournament.id, hole_number=1, par=4, stroke_index=5)
        self.db.session.add(first)
        self.db.session.commit()
        first_id = first.id

        self.db.session.add(Hole(tournament_id=tournament.id, hole_number=1, par=3, stroke_index=9))
        with self.assertRaises(IntegrityError):
            self.db.session.commit()
        self.db.session.rollback()

        holes = Hole.query.filter_by(tournament_id=tournament.id).all()
        self.assertEqual(len(holes), 1)
        self.assertEqual(holes[0].id, first_id)
        self.assertEqual(holes[0].par, 4)

    def test_06_same_hole_number_in_other_tournament(self):
        a = self.create_tournament(name='A')
        b = self.create_tournament(name='B')
        self.db.session.add(Hole(tournament_id=a.id, hole_number=1, par=4, stroke_index=1))
        self.db.session.add(Hole(tournament_id=b.id, hole_number=1, par=4, stroke_index=1))
        self.db.session.commit()
        self.assertEqual(Hole.query.count(), 2)

    def test_07_stroke_index_may_repeat(self):
        """Stroke indexes are range checked only; clashes are reported"""
        tournament = self.create_tournament()
        self.db.session.add(Hole(tournament_id=tournament.id, hole_number=1, par=4, stroke_index=3))
        self.db.session.add(Hole(tournament_id=tournament.id, hole_number=2, par=4, stroke_index=3))
        self.db.session.commit()

        self.assertEqual(duplicate_stroke_indexes(tournament), {3: [1, 2]})

    def test_08_invalid_status(self):
        tournament = self.create_tournament()
        with self.assertRaises(ValueError):
            tournament.status = 'cancelled'
        tournament.status = 'completed'
        self.db.session.commit()
        self.assertEqual(self.db.session.get(Tournament, tournament.id).status, 'completed')


class TestUniqueness(BaseTestCase):

    def test_01_duplicate_tournament_entry(self):
        tournament = self.create_tournament()
        player = self.create_player()
        self.enter_player(tournament, player)

        self.db.session.add(Tournament_Players(tournament_id=tournament.id, player_id=player.id))
        with self.assertRaises(IntegrityError):
            self.db.session.commit()
        self.db.session.rollback()
        self.assertEqual(Tournament_Players.query.count(), 1)

    def test_02_duplicate_group_member(self):
        tournament = self.create_tournament()
        player = self.create_player()
        group = self.create_group(tournament, [player])

        self.db.session.add(Group_Players(group_id=group.id, player_id=player.id))
        with self.assertRaises(IntegrityError):
            self.db.session.commit()
        self.db.session.rollback()
        self.assertEqual(Group_Players.query.count(), 1)

    def test_03_duplicate_group_number(self):
        tournament = self.create_tournament()
        self.create_group(tournament, [], group_number=1)
        self.db.session.add(Group(tournament_id=tournament.id, group_number=1))
        with self.assertRaises(IntegrityError):
            self.db.session.commit()
        self.db.session.rollback()

    def test_04_duplicate_score_then_update(self):
        """A second score for the same hole fails; updating the first succeeds"""
        tournament = self.create_tournament()
        hole = self.add_holes(tournament)[0]
        player = self.create_player()

        score = Score(tournament_id=tournament.id, player_id=player.id, hole_id=hole.id, gross_score=5)
        self.db.session.add(score)
        self.db.session.commit()
        score_id = score.id

        self.db.session.add(Score(tournament_id=tournament.id, player_id=player.id, hole_id=hole.id, gross_score=4))
        with self.assertRaises(IntegrityError):
            self.db.session.commit()
        self.db.session.rollback()

        score = self.db.session.get(Score, score_id)
        score.gross_score = 4
        self.db.session.commit()

        self.assertEqual(Score.query.count(), 1)
        self.assertEqual(self.db.session.get(Score, score_id).gross_score, 4)

    def test_05_duplicate_pin_in_tournament(self):
        """PINs are unique per tournament; groups without a PIN do not clash"""
        tournament = self.create_tournament()
        self.create_group(tournament, [], group_number=1, pin='1111')

        self.db.session.add(Group(tournament_id=tournament.id, group_number=2, pin='1111'))
        with self.assertRaises(IntegrityError):
            self.db.session.commit()
        self.db.session.rollback()

        self.create_group(tournament, [], group_number=2, pin=None)
        self.create_group(tournament, [], group_number=3, pin=None)
        other = self.create_tournament(name='Other Open')
        self.create_group(other, [], group_number=1, pin='1111')
        self.assertEqual(Group.query.count(), 4)


class TestCascades(BaseTestCase):

    def build_field(self):
        """Two tournaments sharing two players, with holes, groups and scores"""
        alice = self.create_player(name='Alice', handicap=5)
        bob = self.create_player(name='Bob', handicap=20)
        tournaments = []
        for name in ('Spring', 'Autumn'):
            tournament = self.create_tournament(name=name)
            holes = self.add_holes(tournament)
            for player in (alice, bob):
                self.enter_player(tournament, player)
                for hole in holes[:3]:
                    self.db.session.add(Score(
                        tournament_id=tournament.id, player_id=player.id, hole_id=hole.id, gross_score=4
                    ))
            self.db.session.commit()
            self.create_group(tournament, [alice, bob], scorer=alice)
            tournaments.append(tournament)
        return tournaments, alice, bob

    def assert_tournament_gone(self, tournament_id):
        self.assertIsNone(self.db.session.get(Tournament, tournament_id))
        self.assertEqual(Hole.query.filter_by(tournament_id=tournament_id).count(), 0)
        self.assertEqual(Tournament_Players.query.filter_by(tournament_id=tournament_id).count(), 0)
        self.assertEqual(Group.query.filter_by(tournament_id=tournament_id).count(), 0)
        self.assertEqual(Score.query.filter_by(tournament_id=tournament_id).count(), 0)

    def test_01_delete_tournament(self):
        """Deleting a tournament removes its holes, entries, groups and scores"""
        (spring, autumn), alice, bob = self.build_field()
        spring_id = spring.id

        self.db.session.delete(spring)
        self.db.session.commit()

        self.assert_tournament_gone(spring_id)
        self.assertEqual(Group_Players.query.count(), 2)
        self.assertEqual(Hole.query.filter_by(tournament_id=autumn.id).count(), 18)
        self.assertEqual(Score.query.filter_by(tournament_id=autumn.id).count(), 6)

    def test_02_database_level_cascade(self):
        """A bulk delete that bypasses the ORM still cascades in the database"""
        (spring, autumn), alice, bob = self.build_field()
        spring_id = spring.id

        self.db.session.execute(delete(Tournament).where(Tournament.id == spring_id))
        self.db.session.commit()
        self.db.session.expire_all()

        self.assert_tournament_gone(spring_id)
        self.assertEqual(Group_Players.query.count(), 2)

    def test_03_delete_player(self):
        """Deleting a player removes only that player's rows"""
        (spring, autumn), alice, bob = self.build_field()
        alice_id, bob_id = alice.id, bob.id

        self.db.session.delete(alice)
        self.db.session.commit()

        self.assertIsNone(self.db.session.get(Player, alice_id))
        self.assertEqual(Tournament_Players.query.filter_by(player_id=alice_id).count(), 0)
        self.assertEqual(Group_Players.query.filter_by(player_id=alice_id).count(), 0)
        self.assertEqual(Score.query.filter_by(player_id=alice_id).count(), 0)

        self.assertEqual(Tournament_Players.query.filter_by(player_id=bob_id).count(), 2)
        self.assertEqual(Group_Players.query.filter_by(player_id=bob_id).count(), 2)
        self.assertEqual(Score.query.filter_by(player_id=bob_id).count(), 6)

    def test_04_delete_hole(self):
        """Deleting a hole removes the scores on it"""
        (spring, autumn), alice, bob = self.build_field()
        hole = Hole.query.filter_by(tournament_id=spring.id, hole_number=1).first()
        hole_id = hole.id

        self.db.session.delete(hole)
        self.db.session.commit()

        self.assertEqual(Score.query.filter_by(hole_id=hole_id).count(), 0)
        self.assertEqual(Score.query.filter_by(tournament_id=spring.id).count(), 4)
