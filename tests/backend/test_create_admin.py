from backend.auth.passwords import verify_password
from backend.create_admin import main, upsert_admin
from backend.models.user import AdminUser


def test_upsert_admin_creates_normalized_account(db) -> None:
    admin = upsert_admin(db, ' Owner@Example.com ', ' Site Owner ', 'first-pass')

    assert admin.email == 'owner@example.com'
    assert admin.name == 'Site Owner'
    assert verify_password('first-pass', admin.hashed_password)


def test_upsert_admin_resets_existing_password(db) -> None:
    created = upsert_admin(db, 'owner@example.com', 'Site Owner', 'first-pass')

    updated = upsert_admin(db, 'OWNER@example.com', 'Owner', 'second-pass')

    assert updated.id == created.id
    assert db.query(AdminUser).count() == 1
    assert verify_password('second-pass', updated.hashed_password)
    assert not verify_password('first-pass', updated.hashed_password)


def test_main_rejects_short_password(capsys) -> None:
    assert main(['owner@example.com', 'Owner', 'abc']) == 1
    assert 'at least 4 characters' in capsys.readouterr().err
