from datetime import datetime, timedelta, timezone

from lostfound.extensions import db
from lostfound.models import Item, User


def test_create_staff(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-staff", "--email", "Pat.Admin@school.org", "--first-name", "Pat"])
    assert result.exit_code == 0, result.output
    assert "Created staff user" in result.output

    user = User.query.filter_by(email="pat.admin@school.org").one()
    assert user.role == "staff"
    assert user.password_hash is None

    again = runner.invoke(args=["create-staff", "--email", "pat.admin@school.org"])
    assert again.exit_code != 0
    assert "Email already in use" in again.output


def test_set_role(app, student):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["set-role", student.email, "staff"])
    assert result.exit_code == 0, result.output
    db.session.expire_all()
    assert student.role == "staff"

    missing = runner.invoke(args=["set-role", "ghost@school.org", "staff"])
    assert missing.exit_code != 0


def test_archive_items(app, make_item):
    make_item(date_found=datetime.now(timezone.utc) - timedelta(days=40))
    make_item(name="Keys")

    runner = app.test_cli_runner()
    result = runner.invoke(args=["archive-items"])
    assert result.exit_code == 0, result.output
    assert "Archived 1 items" in result.output

    result = runner.invoke(args=["archive-items", "--days", "0"])
    assert "Archived 1 items" in result.output
    db.session.expire_all()
    assert Item.query.filter_by(status="archived").count() == 2
