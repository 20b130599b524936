"""Default configuration values and file contents."""

from podcastpro.config.schema import GlobalConfig

DEFAULT_GLOBAL_CONFIG = GlobalConfig()

DEFAULT_CONFIG_CONTENT = """\
# podcastpro configuration
version: "1"
log_level: WARNING  # DEBUG, INFO, WARNING or ERROR; --verbose forces DEBUG

store:
  # data_dir: ~/podcastpro-data
  min_password_length: 4
  seed_demo_data: true

generation:
  model_name: gemini-2.0-flash
  # api_key: AIza...   (or set GOOGLE_API_KEY)
  max_attempts: 2
  temperature: 0.8
"""


def get_default_config_content() -> str:
    """Get the text written to a fresh config.yaml."""
    return DEFAULT_CONFIG_CONTENT
