# =============================================================================
# tests/test_manage.py - Management Command Tests
# =============================================================================

import importlib.util
from pathlib import Path

import pytest

from core.services.user_service import UserService

MANAGE_PATH = Path(__file__).resolve().parent.parent / "scripts" / "manage.py"


@pytest.fixture(scope="module")
def manage():
    """Load scripts/manage.py as a module."""
    spec = importlib.util.spec_from_file_location("staffdesk_manage", MANAGE_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestCreateSuperuser:
    def test_creates_staff_account(self, manage, db, capsys):
        code = manage.main([
            "createsuperuser", "--username", "root", "--email", "root@example.com",
            "--password", "ochre-Compass-61",
        ])

        assert code == 0
        assert "Superuser created: root" in capsys.readouterr().out

        created = UserService.get_by_username(db, "root")
        assert created.is_staff and created.is_superuser
        assert UserService.authenticate(db, "root", "ochre-Compass-61") is not None

    def test_weak_password_refused(self, manage, db, capsys):
        code = manage.main(["createsuperuser", "--username", "root", "--password", "123"])

        assert code == 1
        assert "--force" in capsys.readouterr().err
        assert UserService.get_by_username(db, "root") is None

    def test_malformed_email_refused(self, manage, db, capsys):
        code = manage.main([
            "createsuperuser", "--username", "root", "--email", "root at example",
            "--password", "ochre-Compass-61",
        ])

        assert code == 1
        assert "Enter a valid email address." in capsys.readouterr().err
        assert UserService.get_by_username(db, "root") is None

    def test_force_skips_validation(self, manage, db):
        code = manage.main(["createsuperuser", "--username", "root", "--password", "123", "--force"])
        assert code == 0

    def test_duplicate_username(self, manage, db, user, capsys):
        code = manage.main([
            "createsuperuser", "--username", "asmith", "--password", "ochre-Compass-61",
        ])

        assert code == 1
        assert "already exists" in capsys.readouterr().err

    def test_prompts_for_password(self, manage, db, monkeypatch):
        answers = iter(["ochre-Compass-61", "ochre-Compass-61"])
        monkeypatch.setattr(manage.getpass, "getpass", lambda prompt: next(answers))

        assert manage.main(["createsuperuser", "--username", "root"]) == 0

    def test_prompt_mismatch(self, manage, db, monkeypatch, capsys):
        answers = iter(["ochre-Compass-61", "different-Compass-62"])
        monkeypatch.setattr(manage.getpass, "getpass", lambda prompt: next(answers))

        assert manage.main(["createsuperuser", "--username", "root"]) == 1
        assert "didn't match" in capsys.readouterr().err


class TestOtherCommands:
    def test_initdb(self, manage, db, capsys):
        assert manage.main(["initdb"]) == 0
        assert "Database ready" in capsys.readouterr().out

    def test_check(self, manage, db, capsys):
        assert manage.main(["check"]) == 0
        out = capsys.readouterr().out
        assert "Database check: ok" in out
        assert "Installed apps: accounts, admin, api" in out

    def test_no_command_prints_help(self, manage, capsys):
        assert manage.main([]) == 0
        assert "createsuperuser" in capsys.readouterr().out
