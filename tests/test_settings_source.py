"""Unit tests for results_list.services.settings_source."""

import unittest
from unittest.mock import MagicMock

from results_list.core.config import Settings
from results_list.services.interfaces import CONFIG_GROUP_BY, CONFIG_HIDE_COLUMNS, CONFIG_SORT_BY
from results_list.services.settings_source import InMemorySettingsSource, default_view_settings


class TestInMemorySettingsSource(unittest.TestCase):
    """Values are copied in and out; listeners hear about real changes only."""

    def test_get_returns_copy(self) -> None:
        source = InMemorySettingsSource({CONFIG_HIDE_COLUMNS: ["runId"]})
        hidden = source.get(CONFIG_HIDE_COLUMNS)
        hidden.append("message")
        self.assertEqual(source.get(CONFIG_HIDE_COLUMNS), ["runId"])

    def test_missing_key_is_none(self) -> None:
        self.assertIsNone(InMemorySettingsSource().get(CONFIG_GROUP_BY))

    def test_update_notifies_with_key(self) -> None:
        source = InMemorySettingsSource()
        listener = MagicMock()
        source.on_did_change(listener)
        source.update(CONFIG_GROUP_BY, "ruleId")
        listener.assert_called_once_with(CONFIG_GROUP_BY)
        self.assertEqual(source.get(CONFIG_GROUP_BY), "ruleId")

    def test_equal_value_does_not_notify(self) -> None:
        source = InMemorySettingsSource({CONFIG_SORT_BY: {"column": "message", "ascending": True}})
        listener = MagicMock()
        source.on_did_change(listener)
        source.update(CONFIG_SORT_BY, {"column": "message", "ascending": True})
        listener.assert_not_called()

    def test_unsubscribe(self) -> None:
        source = InMemorySettingsSource()
        listener = MagicMock()
        unsubscribe = source.on_did_change(listener)
        unsubscribe()
        unsubscribe()
        source.update(CONFIG_GROUP_BY, "ruleId")
        listener.assert_not_called()

    def test_from_settings_defaults(self) -> None:
        settings = Settings(_env_file=None)
        source = InMemorySettingsSource.from_settings(settings)
        self.assertEqual(source.get(CONFIG_HIDE_COLUMNS), ["resultId", "ruleName", "runId", "sarifFile"])
        self.assertEqual(source.get(CONFIG_GROUP_BY), "resultFile")
        self.assertEqual(source.get(CONFIG_SORT_BY), {"column": "severityLevel", "ascending": True})
        self.assertEqual(default_view_settings(settings)[CONFIG_GROUP_BY], "resultFile")


if __name__ == "__main__":
    unittest.main()
