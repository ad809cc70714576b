from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

LAB_CONFIG_PATH = None
SCHEDULER_ENABLED = False
HEARTBEAT_ENABLED = False

AUTO_INIT_DB = False
AUTO_SEED_DB = False
