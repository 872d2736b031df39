"""Unit tests for settings persistence."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from mdr import settings as settings_module
from mdr.settings import SettingsPersistence, get_persistence


class TestSettingsPersistence(unittest.TestCase):
    """Test settings persistence functionality."""

    def setUp(self):
        self.temp_dir = os.path.realpath(tempfile.mkdtemp())
        self.persistence = SettingsPersistence(config_dir=self.temp_dir)
        self.test_doc_path = os.path.join(self.temp_dir, "test_document.md")

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_save_and_load_settings(self):
        settings = {"top_block": 12, "beeline": False, "plain_mode": True}

        success = self.persistence.save_settings(self.test_doc_path, settings)
        self.assertTrue(success)

        loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, settings)

    def test_settings_survive_a_new_instance(self):
        self.persistence.save_settings(self.test_doc_path, {"top_block": 3})
        fresh = SettingsPersistence(config_dir=self.temp_dir)
        self.assertEqual(fresh.load_settings(self.test_doc_path), {"top_block": 3})

    def test_load_nonexistent_document(self):
        loaded = self.persistence.load_settings("/nonexistent/document.md")
        self.assertEqual(loaded, {})

    def test_none_document_path(self):
        self.assertFalse(self.persistence.save_settings(None, {"top_block": 1}))
        self.assertEqual(self.persistence.load_settings(None), {})

    def test_update_merges_with_stored_settings(self):
        self.persistence.save_settings(self.test_doc_path, {"top_block": 4, "beeline": True})
        self.persistence.save_settings(self.test_doc_path, {"top_block": 9})

        loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {"top_block": 9, "beeline": True})

    def test_multiple_documents(self):
        doc1_path = os.path.join(self.temp_dir, "doc1.md")
        doc2_path = os.path.join(self.temp_dir, "doc2.md")

        self.persistence.save_settings(doc1_path, {"top_block": 1})
        self.persistence.save_settings(doc2_path, {"top_block": 2})

        self.assertEqual(self.persistence.load_settings(doc1_path), {"top_block": 1})
        self.assertEqual(self.persistence.load_settings(doc2_path), {"top_block": 2})

    def test_relative_and_absolute_paths_share_settings(self):
        cwd = os.getcwd()
        os.chdir(self.temp_dir)
        try:
            self.persistence.save_settings("test_document.md", {"top_block": 5})
        finally:
            os.chdir(cwd)
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {"top_block": 5})

    def test_validate_boolean_settings(self):
        self.assertTrue(self.persistence.validate_setting("beeline", True))
        self.assertTrue(self.persistence.validate_setting("plain_mode", False))

        self.assertFalse(self.persistence.validate_setting("beeline", "yes"))
        self.assertFalse(self.persistence.validate_setting("plain_mode", 1))

    def test_validate_top_block(self):
        self.assertTrue(self.persistence.validate_setting("top_block", 0))
        self.assertTrue(self.persistence.validate_setting("top_block", 250))

        self.assertFalse(self.persistence.validate_setting("top_block", -1))
        self.assertFalse(self.persistence.validate_setting("top_block", "3"))
        self.assertFalse(self.persistence.validate_setting("top_block", True))

    def test_validate_none_value(self):
        self.assertTrue(self.persistence.validate_setting("top_block", None))
        self.assertTrue(self.persistence.validate_setting("beeline", None))

    def test_unknown_settings_are_kept(self):
        self.assertTrue(self.persistence.validate_setting("future_option", [1, 2]))

    def test_invalid_entries_are_dropped_on_load(self):
        data = {os.path.abspath(self.test_doc_path): {"top_block": "bad", "beeline": True}}
        self.persistence._settings_file.write_text(json.dumps(data), encoding="utf-8")

        loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {"beeline": True})

    def test_corrupt_file_is_ignored(self):
        self.persistence._settings_file.write_text("{not json", encoding="utf-8")
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {})

    def test_non_dict_file_is_ignored(self):
        self.persistence._settings_file.write_text("[1, 2, 3]", encoding="utf-8")
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {})

    def test_atomic_write(self):
        self.persistence.save_settings(self.test_doc_path, {"top_block": 1})

        # Temp file should not exist after save
        temp_file = self.persistence._settings_file.with_suffix('.tmp')
        self.assertFalse(temp_file.exists())
        self.assertTrue(self.persistence._settings_file.exists())

    def test_config_dir_is_created(self):
        nested = Path(self.temp_dir) / "a" / "b"
        persistence = SettingsPersistence(config_dir=str(nested))
        self.assertTrue(persistence.save_settings(self.test_doc_path, {"top_block": 1}))
        self.assertTrue((nested / "settings.json").exists())


class TestGlobalPersistence(unittest.TestCase):

    def setUp(self):
        self.old_persistence = settings_module._persistence
        settings_module._persistence = None

    def tearDown(self):
        settings_module._persistence = self.old_persistence

    def test_get_persistence_is_a_singleton(self):
        first = get_persistence()
        self.assertIs(first, get_persistence())
        self.assertEqual(first._settings_file.name, "settings.json")
