from django.test import SimpleTestCase, override_settings

from dam_migrate.config import migrate_setting, retry_policy_from_settings
from dam_migrate.poller import DEFAULT_DELAY, DEFAULT_MAX_ATTEMPTS


class MigrateSettingTests(SimpleTestCase):
    @override_settings(DAM_MIGRATE={"POLL_MAX_ATTEMPTS": 2, "POLL_DELAY": "0.5"})
    def test_settings_override_defaults(self):
        policy = retry_policy_from_settings()
        self.assertEqual(policy.max_attempts, 2)
        self.assertEqual(policy.delay, 0.5)

    @override_settings(DAM_MIGRATE={})
    def test_defaults(self):
        self.assertEqual(migrate_setting("POLL_MAX_ATTEMPTS"), DEFAULT_MAX_ATTEMPTS)
        self.assertEqual(migrate_setting("POLL_DELAY"), DEFAULT_DELAY)

    @override_settings(DAM_MIGRATE={"POLL_MAX_ATTEMPTS": 0})
    def test_invalid_attempts(self):
        with self.assertRaises(ValueError):
            retry_policy_from_settings()

    def test_unknown_key(self):
        with self.assertRaises(KeyError):
            migrate_setting("UNKNOWN")
