from datetime import timedelta

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from order_reminders.db import init_db
from order_reminders.reminders.config import ReconcilerConfig, ReminderSettings


def test_reconciler_config_from_env(monkeypatch):
    monkeypatch.setenv("REMINDER_RESEND_INTERVAL_SECONDS", "600")
    monkeypatch.setenv("REMINDER_DEFAULT_MAX_REMINDERS", "3")
    monkeypatch.setenv("REMINDER_SCHEDULES_COLLECTION", "designer_reminders")

    config = ReconcilerConfig.from_settings(ReminderSettings(_env_file=None))

    assert config.resend_interval == timedelta(minutes=10)
    assert config.default_max_reminders == 3
    assert config.schedules_collection == "designer_reminders"
    assert config.acknowledgments_collection == "order_notifications"


def test_defaults_match_reconciler_defaults():
    assert ReconcilerConfig.from_settings(ReminderSettings(_env_file=None)) == ReconcilerConfig()


def test_create_tables():
    engine = create_engine("sqlite://", poolclass=StaticPool)

    assert init_db.check_connection(engine) is True
    assert set(init_db.missing_tables(engine)) == {
        "reminder_schedule", "order_notifications", "notifications", "notification_queue",
    }

    init_db.create_tables(engine)

    assert init_db.missing_tables(engine) == []


def test_api_keys_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("REMINDER_API_KEYS", "key-one, key-two,")

    assert ReminderSettings(_env_file=None).API_KEYS == ["key-one", "key-two"]


def test_api_keys_from_json_env(monkeypatch):
    monkeypatch.setenv("REMINDER_API_KEYS", '["key-one", "key-two"]')

    assert ReminderSettings(_env_file=None).API_KEYS == ["key-one", "key-two"]


def test_single_api_key_from_env(monkeypatch):
    monkeypatch.setenv("REMINDER_API_KEYS", "12345")

    assert ReminderSettings(_env_file=None).API_KEYS == ["12345"]
