"""
Layering and typing of ConfigService: defaults.ini < environment < user ini.
"""
from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from formsigner.config.config_service import DEFAULT_DENYLIST, ConfigService


class TestConfigService(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.user_ini = Path(self._tmp.name) / "config.ini"
        clean = {k: v for k, v in os.environ.items() if not k.startswith("FORMSIGNER_")}
        self._env = patch.dict(os.environ, clean, clear=True)
        self._env.start()

    def tearDown(self) -> None:
        self._env.stop()
        self._tmp.cleanup()

    def test_defaults(self) -> None:
        svc = ConfigService(user_ini=self.user_ini)
        cfg = svc.snapshot()
        self.assertEqual(cfg.loader.denylist, list(DEFAULT_DENYLIST))
        self.assertEqual(cfg.loader.timeout_sec, 30.0)
        self.assertIs(cfg.sanitizer.first_match_only, True)
        self.assertEqual(
            (cfg.signature.target_width, cfg.signature.target_height, cfg.signature.bottom_offset),
            (200.0, 80.0, 80.0),
        )
        self.assertEqual(cfg.export.file_name, "filled-form.pdf")
        self.assertIsInstance(cfg.export.output_dir, Path)
        self.assertEqual(svc.meta_source("Loader", "denylist")["layer"], "defaults.ini")

    def test_env_overrides_defaults(self) -> None:
        os.environ["FORMSIGNER_SANITIZER__FIRST_MATCH_ONLY"] = "false"
        os.environ["FORMSIGNER_LOADER__TIMEOUT_SEC"] = "2.5"
        svc = ConfigService(user_ini=self.user_ini)
        self.assertIs(svc.sanitizer.first_match_only, False)
        self.assertEqual(svc.loader.timeout_sec, 2.5)
        self.assertEqual(svc.meta_source("Loader", "timeout_sec"), {"layer": "env", "source": "os.environ"})

    def test_user_ini_wins_over_env(self) -> None:
        os.environ["FORMSIGNER_EXPORT__FILE_NAME"] = "from-env.pdf"
        self.user_ini.write_text(
            "[Export]\nfile_name = signed.pdf\n\n[Loader]\ndenylist =\n    Print\n    Submit\n",
            encoding="utf-8",
        )
        svc = ConfigService(user_ini=self.user_ini)
        self.assertEqual(svc.export.file_name, "signed.pdf")
        self.assertEqual(svc.loader.denylist, ["Print", "Submit"])
        self.assertEqual(svc.meta_source("Export", "file_name")["layer"], "user")
        self.assertEqual(svc.export.output_path.name, "signed.pdf")

    def test_reload_picks_up_changes(self) -> None:
        svc = ConfigService(user_ini=self.user_ini)
        self.user_ini.write_text("[Signature]\ncolor = #1F3A93\n", encoding="utf-8")
        svc.reload()
        self.assertEqual(svc.signature.color, "#1F3A93")


if __name__ == "__main__":
    unittest.main()
