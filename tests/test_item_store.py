"""
Unit tests for the in-memory item store.
"""

import unittest
from datetime import date

from gtdnota.models import Nota, NotaStatus, local_date_today
from gtdnota.store import CURRENT_FORMAT_VERSION, ItemStore


def make_nota(nota_id, status=NotaStatus.inbox, **kwargs):
    kwargs.setdefault("title", f"Title of {nota_id}")
    kwargs.setdefault("created_at", date(2024, 1, 1))
    kwargs.setdefault("updated_at", date(2024, 1, 1))
    return Nota(id=nota_id, status=status, **kwargs)


class TestItemStore(unittest.TestCase):
    """Test store operations and index consistency."""

    def setUp(self):
        self.store = ItemStore()
        self.store.add(make_nota("proj-1", NotaStatus.project))
        self.store.add(make_nota("Office", NotaStatus.context))
        self.store.add(make_nota("t1", project="proj-1", context="Office"))
        self.store.add(make_nota("t2", NotaStatus.next_action))

    def assertIndexInSync(self):
        self.assertEqual(
            dict(self.store.index),
            {nota.id: nota.status for nota in self.store.notas}
        )

    def test_new_store(self):
        store = ItemStore()
        self.assertEqual(len(store), 0)
        self.assertEqual(store.format_version, CURRENT_FORMAT_VERSION)
        self.assertEqual(store.task_counter, 0)
        self.assertEqual(store.project_counter, 0)

    def test_add_and_find(self):
        self.assertEqual(len(self.store), 4)
        self.assertTrue(self.store.contains_id("t1"))
        self.assertEqual(self.store.status_of("t2"), NotaStatus.next_action)
        self.assertEqual(self.store.find_by_id("t1").project, "proj-1")
        self.assertIsNone(self.store.find_by_id("missing"))
        self.assertIsNone(self.store.status_of("missing"))
        self.assertIndexInSync()

    def test_find_returns_copies(self):
        nota = self.store.find_by_id("t1")
        nota.title = "Changed outside"

        self.assertEqual(self.store.find_by_id("t1").title, "Title of t1")

    def test_exposed_views_are_read_only(self):
        self.assertIsInstance(self.store.notas, tuple)
        with self.assertRaises(TypeError):
            self.store.index["x"] = NotaStatus.inbox

    def test_find_project_and_context_check_kind(self):
        self.assertIsNotNone(self.store.find_project("proj-1"))
        self.assertIsNone(self.store.find_project("Office"))
        self.assertIsNotNone(self.store.find_context("Office"))
        self.assertIsNone(self.store.find_context("t1"))

    def test_remove(self):
        removed = self.store.remove("t2")

        self.assertEqual(removed.id, "t2")
        self.assertFalse(self.store.contains_id("t2"))
        self.assertIsNone(self.store.remove("t2"))
        self.assertIndexInSync()

    def test_update_moves_to_end(self):
        changed = self.store.find_by_id("t1")
        changed.status = NotaStatus.someday

        old = self.store.update("t1", changed)

        self.assertEqual(old.status, NotaStatus.inbox)
        self.assertEqual([n.id for n in self.store.notas], ["proj-1", "Office", "t2", "t1"])
        self.assertEqual(self.store.status_of("t1"), NotaStatus.someday)
        self.assertIndexInSync()

    def test_update_missing_returns_none(self):
        self.assertIsNone(self.store.update("missing", make_nota("missing")))
        self.assertEqual(len(self.store), 4)

    def test_move_status_in_place(self):
        moved = self.store.move_status("t2", NotaStatus.done)

        self.assertEqual(moved.status, NotaStatus.done)
        self.assertEqual(moved.updated_at, local_date_today())
        self.assertEqual([n.id for n in self.store.notas], ["proj-1", "Office", "t1", "t2"])
        self.assertIndexInSync()

    def test_move_status_missing_returns_none(self):
        self.assertIsNone(self.store.move_status("missing", NotaStatus.done))

    def test_referenced_project_cannot_be_trashed(self):
        before = self.store.notas

        self.assertIsNone(self.store.move_status("proj-1", NotaStatus.trash))
        self.assertEqual(self.store.notas, before)
        self.assertEqual(self.store.status_of("proj-1"), NotaStatus.project)

    def test_referenced_context_keeps_its_kind(self):
        self.assertIsNone(self.store.move_status("Office", NotaStatus.done))
        self.assertIsNone(self.store.move_status("Office", NotaStatus.project))
        self.assertEqual(self.store.status_of("Office"), NotaStatus.context)
        self.assertTrue(self.store.validate_references(self.store.find_by_id("t1")))

    def test_is_referenced(self):
        self.assertTrue(self.store.is_referenced("proj-1"))
        self.assertTrue(self.store.is_referenced("Office"))
        self.assertFalse(self.store.is_referenced("t2"))

    def test_reference_validation(self):
        self.assertTrue(self.store.validate_project_ref(None))
        self.assertTrue(self.store.validate_project_ref("proj-1"))
        self.assertFalse(self.store.validate_project_ref("Office"))
        self.assertTrue(self.store.validate_context_ref("Office"))
        self.assertFalse(self.store.validate_context_ref("nowhere"))
        self.assertFalse(self.store.validate_references(make_nota("x", project="nope")))

    def test_listing(self):
        self.assertEqual([n.id for n in self.store.list_all()], ["proj-1", "Office", "t1", "t2"])
        self.assertEqual([n.id for n in self.store.list_all(NotaStatus.inbox)], ["t1"])
        self.assertEqual(list(self.store.projects()), ["proj-1"])
        self.assertEqual(list(self.store.contexts()), ["Office"])
        self.assertEqual(self.store.task_count(), 2)
        self.assertEqual([n.id for n in self.store], ["proj-1", "Office", "t1", "t2"])

    def test_generated_ids(self):
        self.assertEqual(self.store.generate_task_id(), "#1")
        self.assertEqual(self.store.generate_task_id(), "#2")
        self.assertEqual(self.store.generate_project_id(), "project-1")
        self.assertEqual(self.store.task_counter, 2)
        self.assertEqual(self.store.project_counter, 1)


class TestEmptyTrash(unittest.TestCase):
    """Test bulk removal of trashed notas."""

    def test_empty_trash_keeps_index_in_sync(self):
        store = ItemStore([
            make_nota("a", NotaStatus.trash),
            make_nota("b", NotaStatus.inbox),
            make_nota("c", NotaStatus.trash),
            make_nota("d", NotaStatus.done),
            make_nota("e", NotaStatus.trash),
        ])

        removed = store.empty_trash()

        self.assertEqual(removed, 3)
        self.assertEqual(len(store), 2)
        self.assertEqual(len(store.index), 2)
        self.assertEqual(sorted(store.index), ["b", "d"])

    def test_remove_by_status(self):
        store = ItemStore([make_nota("a", NotaStatus.done), make_nota("b", NotaStatus.inbox)])

        self.assertEqual(store.remove_by_status(NotaStatus.done), 1)
        self.assertEqual(store.remove_by_status(NotaStatus.done), 0)
        self.assertEqual([n.id for n in store.notas], ["b"])


if __name__ == "__main__":
    unittest.main()
