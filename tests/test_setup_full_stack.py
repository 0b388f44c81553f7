"""
Unit tests for the LocalStack deploy script's Lambda packaging.
"""
import importlib.util
import os
import sys
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

SCRIPT = Path(__file__).resolve().parent.parent / 'scripts' / 'setup_full_stack.py'
SOURCE_ROOT = Path(__file__).resolve().parent.parent / 'src' / 'kapture'


@pytest.fixture
def setup_script():
    spec = importlib.util.spec_from_file_location('setup_full_stack', SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _fake_pip_install(args, check):
    """Drop a stand-in requests package into the --target directory."""
    target = Path(args[args.index('--target') + 1])
    (target / 'requests').mkdir()
    (target / 'requests' / '__init__.py').write_text('')


class TestPackageLambdaCode:
    """Tests for package_lambda_code."""

    def test_vendors_runtime_requirements(self, setup_script, tmp_path, monkeypatch):
        """Test the zip carries both the kapture package and requests."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(setup_script, 'PACKAGE_ROOT', str(SOURCE_ROOT))

        with patch.object(setup_script.subprocess, 'run', side_effect=_fake_pip_install) as run:
            zip_file = setup_script.package_lambda_code()

        args = run.call_args[0][0]
        assert args[:4] == [sys.executable, '-m', 'pip', 'install']
        assert 'requests' in args

        with zipfile.ZipFile(os.path.join(tmp_path, zip_file)) as archive:
            names = archive.namelist()
        assert 'requests/__init__.py' in names
        assert 'kapture/handlers/router.py' in names
        assert 'kapture/utils/media_client.py' in names
        assert not any('__pycache__' in name for name in names)
