"""Tests for the save/update/delete lifecycle."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from rowmodel import (
    MemoryBackend,
    MissingPrimaryKeyError,
    Model,
    ModelConfigurationError,
    ModelContext,
    NotPersistedError,
    transformer,
)

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
FIXED_STAMP = "2026-01-02T03:04:05+00:00"


class User(Model):
    table_name = "users"
    primary_key = "id"
    protected_fields = frozenset({"password"})

    @transformer("password")
    def hash_password(self, value):
        self.attributes["password"] = f"hashed:{value}"


class Tag(Model):
    """Natural key supplied by the caller."""

    table_name = "tags"
    primary_key = "slug"
    incrementing = False


class Account(Model):
    table_name = "accounts"
    primary_key = "account_id"


class LogLine(Model):
    table_name = "log_lines"
    created_at_field = None
    updated_at_field = ""


@pytest.fixture
def spy():
    """Backend whose calls can be asserted while still storing rows."""
    return MagicMock(wraps=MemoryBackend())


@pytest.fixture
def spy_context(spy, emitter):
    return ModelContext(backend=spy, emitter=emitter, clock=lambda: FIXED_NOW)


# Create


def test_create_sets_generated_key_and_clears_dirty_set(context, backend, events):
    user = User.create({"name": "x"}, context)

    assert user.exists
    assert user.get_attribute("id") == 1
    assert user.get_attribute("created_at") == FIXED_STAMP
    assert user.original == user.attributes
    assert user.get_mutated_attributes() == {}
    assert backend.rows("users") == [{"name": "x", "created_at": FIXED_STAMP, "id": 1}]
    assert events == [("user.created", [user])]


def test_create_does_not_stamp_updated_at(context):
    user = User.create({"name": "x"}, context)

    assert "updated_at" not in user.attributes


def test_non_incrementing_create_uses_plain_insert(spy_context, spy):
    tag = Tag.create({"slug": "python"}, spy_context)

    spy.insert.assert_called_once_with("tags", {"slug": "python", "created_at": FIXED_STAMP})
    spy.insert_and_return_id.assert_not_called()
    assert tag.exists


def test_create_without_primary_key_uses_plain_insert(spy_context, spy):
    LogLine.create({"message": "started"}, spy_context)

    spy.insert.assert_called_once_with("log_lines", {"message": "started"})
    spy.insert_and_return_id.assert_not_called()


def test_insert_payload_includes_protected_fields(spy_context, spy):
    User.create({"name": "x", "password": "secret"}, spy_context)

    payload = spy.insert_and_return_id.call_args.args[1]
    assert payload["password"] == "hashed:secret"


# Update


def test_save_twice_issues_one_backend_call(spy_context, spy, events):
    user = User({"id": 1, "name": "a"}, context=spy_context)
    user.set_attribute("name", "b")

    assert user.save() is True
    assert user.save() is True

    assert spy.update.call_count == 1
    assert [topic for topic, _ in events] == ["user.updated"]


def test_unchanged_existing_model_is_noop(spy_context, spy, events):
    user = User({"id": 1, "name": "a"}, context=spy_context)

    assert user.save() is True

    spy.update.assert_not_called()
    assert events == []


def test_partial_update_payload(spy_context, spy):
    """Only changed columns plus the update stamp are written."""
    user = User({"id": 1, "name": "a", "age": 10}, context=spy_context)

    user.set_attribute("age", 11)
    user.save()

    spy.update.assert_called_once_with("users", "id", 1, {"age": 11, "updated_at": FIXED_STAMP})
    assert user.get_attribute("updated_at") == FIXED_STAMP
    assert user.get_mutated_attributes() == {}


def test_update_without_primary_key_fails_before_backend(spy_context, spy):
    line = LogLine({"id": 1, "message": "a"}, context=spy_context)
    line.set_attribute("message", "b")

    with pytest.raises(MissingPrimaryKeyError):
        line.save()

    spy.update.assert_not_called()
    assert "updated_at" not in line.attributes
    assert line.get_mutated_attributes() == {"message": "b"}


def test_update_merges_and_saves(spy_context, spy):
    user = User({"id": 1, "name": "a", "age": 10}, context=spy_context)

    assert user.update({"age": 12}) is True

    spy.update.assert_called_once_with("users", "id", 1, {"age": 12, "updated_at": FIXED_STAMP})


def test_update_bypasses_transformers(spy_context):
    user = User({"id": 1}, context=spy_context)

    user.update({"password": "plain"})

    assert user.get_attribute("password") == "plain"


def test_update_of_existing_row_in_memory(context, backend):
    user = User.create({"name": "a", "age": 10}, context)

    user.update({"age": 11})

    assert backend.rows("users")[0]["age"] == 11
    assert backend.rows("users")[0]["updated_at"] == FIXED_STAMP


def test_update_of_row_keyed_by_custom_column():
    backend = MemoryBackend(id_columns={"accounts": "account_id"})
    context = ModelContext(backend=backend, clock=lambda: FIXED_NOW)
    account = Account.create({"name": "a"}, context)

    account.set_attribute("name", "b")
    account.save()

    assert account.get_attribute("account_id") == 1
    assert backend.rows("accounts") == [
        {"name": "b", "created_at": FIXED_STAMP, "account_id": 1, "updated_at": FIXED_STAMP}
    ]

    account.delete()

    assert backend.rows("accounts") == []


def test_nested_change_is_written_whole(spy_context, spy):
    user = User({"id": 1, "profile": {"city": "Lagos", "zip": "1"}}, context=spy_context)

    user["profile.city"] = "Abuja"
    user.save()

    payload = spy.update.call_args.args[3]
    assert payload["profile"] == {"city": "Abuja", "zip": "1"}


# Delete


def test_delete_removes_row_and_keeps_attributes(context, backend, events):
    user = User.create({"name": "x"}, context)

    assert user.delete() is True

    assert not user.exists
    assert user.attributes["name"] == "x"
    assert backend.rows("users") == []
    assert [topic for topic, _ in events] == ["user.created", "user.deleted"]


def test_delete_without_primary_key_fails_before_backend(spy_context, spy, events):
    line = LogLine({"message": "a"}, context=spy_context)

    with pytest.raises(MissingPrimaryKeyError):
        line.delete()

    spy.delete.assert_not_called()
    assert line.exists
    assert events == []


def test_delete_requires_persisted_row(spy_context, spy):
    user = User({"name": "x"}, exists=False, context=spy_context)

    with pytest.raises(NotPersistedError):
        user.delete()

    spy.delete.assert_not_called()


def test_deleted_model_is_inserted_again_on_save(context, backend):
    user = User.create({"name": "x"}, context)
    user.delete()

    user.save()

    assert user.exists
    assert len(backend.rows("users")) == 1


# Configuration and failures


def test_save_without_backend_fails():
    user = User({"name": "x"}, exists=False)

    with pytest.raises(ModelConfigurationError):
        user.save()

    assert not user.exists
    assert "created_at" not in user.attributes


def test_unchanged_save_without_backend_succeeds():
    assert User({"id": 1}).save() is True


def test_delete_without_backend_fails():
    with pytest.raises(ModelConfigurationError):
        User({"id": 1}).delete()


def test_update_without_primary_key_is_reported_before_missing_backend():
    line = LogLine({"message": "a"})
    line.set_attribute("message", "b")

    with pytest.raises(MissingPrimaryKeyError):
        line.save()


def test_failed_insert_leaves_model_unpersisted(emitter, events):
    backend = MagicMock()
    backend.insert_and_return_id.side_effect = RuntimeError("disk full")
    user = User({"name": "x"}, exists=False, context=ModelContext(backend=backend, emitter=emitter))

    with pytest.raises(RuntimeError, match="disk full"):
        user.save()

    assert not user.exists
    assert user.original == {"name": "x"}
    assert events == []


def test_failed_update_keeps_dirty_set(emitter, events):
    backend = MagicMock()
    backend.update.side_effect = RuntimeError("locked")
    user = User({"id": 1, "name": "a"}, context=ModelContext(backend=backend, emitter=emitter))
    user.set_attribute("name", "b")

    with pytest.raises(RuntimeError, match="locked"):
        user.save()

    assert user.original == {"id": 1, "name": "a"}
    assert "name" in user.get_mutated_attributes()
    assert events == []


def test_failed_delete_keeps_exists():
    backend = MagicMock()
    backend.delete.side_effect = RuntimeError("gone")
    user = User({"id": 1}, context=ModelContext(backend=backend))

    with pytest.raises(RuntimeError):
        user.delete()

    assert user.exists


# Events


def test_trigger_without_emitter_is_silent(backend):
    user = User.create({"name": "x"}, ModelContext(backend=backend))

    user.trigger("custom")

    assert user.exists


def test_trigger_normalizes_arguments(context, events):
    user = User({"id": 1}, context=context)

    user.trigger("viewed")
    user.trigger("tagged", "python")
    user.trigger("merged", (1, 2))

    assert events == [
        ("user.viewed", [user]),
        ("user.tagged", ["python"]),
        ("user.merged", [1, 2]),
    ]


def test_updated_event_receives_model(context, events):
    user = User.create({"name": "a"}, context)
    user.set_attribute("name", "b")
    user.save()

    topic, payload = events[-1]
    assert topic == "user.updated"
    assert payload == [user]
