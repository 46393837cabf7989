import os

# Default env for app settings in tests.
os.environ.setdefault("GITHUB_WEBHOOK_SECRET", "test-webhook-secret")
os.environ.setdefault("SLACK_WEBHOOK_URL", "https://hooks.slack.com/services/T000/B000/test")
os.environ.setdefault("LOG_LEVEL", "INFO")
