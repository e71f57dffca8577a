import json
import shutil
import tempfile
import unittest
from pathlib import Path

from dishooom.services import settings_service
from dishooom.services.settings_service import DEFAULT_SETTINGS, SettingsError


class SettingsServiceTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.path = Path(self.tmpdir) / "settings.json"

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_missing_file_returns_defaults(self):
        self.assertEqual(settings_service.get_settings(self.path), DEFAULT_SETTINGS)
        self.assertFalse(self.path.exists())

    def test_defaults_are_not_shared(self):
        settings = settings_service.get_settings(self.path)
        settings["appearance"]["currency"] = "EUR"
        self.assertEqual(DEFAULT_SETTINGS["appearance"]["currency"], "USD")

    def test_update_merges_into_section(self):
        settings_service.update_settings(self.path, "appearance", {"currency": "INR"})
        settings = settings_service.get_settings(self.path)
        self.assertEqual(settings["appearance"]["currency"], "INR")
        self.assertEqual(settings["appearance"]["theme"], "light")
        self.assertEqual(settings_service.currency_code(self.path), "INR")

    def test_update_unknown_section(self):
        with self.assertRaises(SettingsError):
            settings_service.update_settings(self.path, "billing", {"x": 1})

    def test_update_requires_object(self):
        with self.assertRaises(SettingsError):
            settings_service.update_settings(self.path, "profile", ["not", "an", "object"])

    def test_corrupt_file_falls_back_to_defaults(self):
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(settings_service.get_settings(self.path), DEFAULT_SETTINGS)

    def test_non_object_section_on_disk_falls_back(self):
        self.path.write_text(json.dumps({"appearance": "dark", "profile": {"firstName": "Asha"}}), encoding="utf-8")
        with self.assertLogs("dishooom.services.settings_service", level="WARNING"):
            settings = settings_service.get_settings(self.path)
        self.assertEqual(settings["appearance"], DEFAULT_SETTINGS["appearance"])
        self.assertEqual(settings["profile"], {"firstName": "Asha"})
        self.assertEqual(settings_service.currency_code(self.path), "USD")

    def test_update_repairs_non_object_section(self):
        self.path.write_text(json.dumps({"appearance": "dark"}), encoding="utf-8")
        settings = settings_service.update_settings(self.path, "appearance", {"currency": "EUR"})
        self.assertEqual(settings["appearance"]["currency"], "EUR")
        self.assertEqual(settings["appearance"]["theme"], "light")

    def test_non_string_currency_falls_back_to_usd(self):
        settings_service.update_settings(self.path, "appearance", {"currency": 42})
        self.assertEqual(settings_service.currency_code(self.path), "USD")

    def test_reset_one_section(self):
        settings_service.update_settings(self.path, "appearance", {"currency": "INR"})
        settings_service.update_settings(self.path, "profile", {"firstName": "Asha"})
        settings = settings_service.reset_settings(self.path, "appearance")
        self.assertEqual(settings["appearance"], DEFAULT_SETTINGS["appearance"])
        self.assertEqual(settings["profile"]["firstName"], "Asha")

    def test_reset_everything(self):
        settings_service.update_settings(self.path, "profile", {"firstName": "Asha"})
        self.assertEqual(settings_service.reset_settings(self.path), DEFAULT_SETTINGS)

    def test_export_then_import(self):
        settings_service.update_settings(self.path, "security", {"sessionTimeout": 60})
        exported = settings_service.export_settings(self.path)
        settings_service.reset_settings(self.path)

        imported = settings_service.import_settings(self.path, exported)

        self.assertEqual(imported["security"]["sessionTimeout"], 60)
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), imported)

    def test_import_rejects_invalid_document(self):
        with self.assertRaises(SettingsError):
            settings_service.import_settings(self.path, "not json")
        with self.assertRaises(SettingsError):
            settings_service.import_settings(self.path, "[1, 2]")
        with self.assertRaises(SettingsError):
            settings_service.import_settings(self.path, '{"appearance": "dark"}')
        self.assertFalse(self.path.exists())


if __name__ == "__main__":
    unittest.main()
