"""Root conftest: shared test configuration."""

import os

# Ensure tests never reach a real registry or runtime
os.environ.setdefault("REGISTRY_URL", "http://registry.test")
os.environ.setdefault("RUNTIME_URL", "http://runtime.test")
os.environ.setdefault("LOG_FORMAT", "text")
