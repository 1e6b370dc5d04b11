import json
import os
import tempfile
import unittest
from unittest import mock

from pydantic import ValidationError

from mcsearch.config import ServerTarget, Settings, load_settings, save_settings


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "config.json")

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, obj):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(obj, f)

    def test_missing_file_gives_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings(self.path)
        self.assertEqual(settings, Settings())
        self.assertEqual(settings.protocol_version, 765)

    def test_targets_coerced(self):
        self.write({"targets": [{"nickname": "殖民地", "ip": "mc.example.org", "port": "31219", "group": 778674403}]})
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings(self.path)
        self.assertEqual(settings.targets, [
            ServerTarget(nickname="殖民地", ip="mc.example.org", port=31219, group="778674403")])

    def test_default_port(self):
        self.assertEqual(ServerTarget(nickname="a", ip="b", group="c").port, 25565)

    def test_bad_port(self):
        self.write({"targets": [{"nickname": "a", "ip": "b", "port": 70000, "group": "c"}]})
        with self.assertRaises(ValidationError):
            load_settings(self.path)

    def test_env_path_and_token(self):
        self.write({"discord_token": "stored", "interval": 30})
        with mock.patch.dict(os.environ, {"MCSEARCH_CONFIG": self.path, "DISCORD_TOKEN": "env"}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.discord_token, "env")
        self.assertEqual(settings.interval, 30)

    def test_save_and_load(self):
        settings = Settings(discord_token="t", targets=[ServerTarget(nickname="a", ip="b", group="1")])
        save_settings(settings, self.path)
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(load_settings(self.path), settings)


if __name__ == "__main__":
    unittest.main()
