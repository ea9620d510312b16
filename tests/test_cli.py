import pytest

from fintrack import cli
from fintrack.users import crud, service


@pytest.fixture
def cli_db(monkeypatch, session_factory):
    monkeypatch.setattr(cli, "SessionLocal", session_factory)
    return session_factory


def answer_prompts(monkeypatch, *answers):
    replies = iter(answers)
    monkeypatch.setattr(cli, "prompt_hidden", lambda prompt_text: next(replies))


def test_create_admin(monkeypatch, cli_db, db, capsys):
    answer_prompts(monkeypatch, "adminpass", "adminpass")

    code = cli.main(["create-admin", "--name", "Root", "--email", "Root@Example.com"])

    assert code == 0
    assert "[OK]" in capsys.readouterr().out
    admin = crud.get_user_by_email(db, "root@example.com")
    assert admin.role == "admin"
    assert service.authenticate_user(db, "root@example.com", "adminpass").id == admin.id


def test_create_admin_password_mismatch(monkeypatch, cli_db, db):
    answer_prompts(monkeypatch, "adminpass", "different")

    assert cli.main(["create-admin", "--name", "Root", "--email", "root@example.com"]) == 1
    assert crud.get_user_by_email(db, "root@example.com", include_inactive=True) is None


def test_create_admin_rejects_taken_email(monkeypatch, cli_db, make_user, capsys):
    make_user(email="root@example.com")
    answer_prompts(monkeypatch, "adminpass", "adminpass")

    assert cli.main(["create-admin", "--name", "Root", "--email", "root@example.com"]) == 1
    assert "Email already in use" in capsys.readouterr().out


def test_deactivate_and_activate(cli_db, db, make_user):
    user = make_user(email="member@example.com")

    assert cli.main(["deactivate", "member@example.com"]) == 0
    db.expire_all()
    assert crud.get_user_by_id(db, user.id) is None

    assert cli.main(["activate", "member@example.com"]) == 0
    db.expire_all()
    assert crud.get_user_by_id(db, user.id) is not None


def test_unknown_email(cli_db, capsys):
    assert cli.main(["deactivate", "ghost@example.com"]) == 2
    assert "No user" in capsys.readouterr().out
