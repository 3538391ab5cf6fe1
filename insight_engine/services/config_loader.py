"""
Dashboard Config Loader - Optional overrides stored as JSON in GCS.

The file only overrides; it never supplies defaults. A key absent from the
file (or a file that cannot be read) resolves to None so that
get_config_value() falls through to the environment and then to the
caller's default.
"""
import json
import time
from typing import Any, Optional
from google.cloud import storage


class ConfigLoader:
    """Reads config/dashboard_config.json, keeping the last good copy."""

    def __init__(self, bucket_name: str, config_path: str = "config/dashboard_config.json", cache_ttl: int = 0):
        """
        Args:
            bucket_name: GCS bucket name
            config_path: Path to the override file in the bucket
            cache_ttl: Seconds a loaded file is reused. 0 = reload on every lookup.
        """
        self.bucket_name = bucket_name
        self.config_path = config_path
        self.cache_ttl = cache_ttl
        self._overrides: Optional[dict] = None
        self._loaded_at: Optional[float] = None
        self._client = None

    def _get_storage_client(self):
        if self._client is None:
            self._client = storage.Client()
        return self._client

    def _is_fresh(self) -> bool:
        return (
            self.cache_ttl > 0
            and self._loaded_at is not None
            and (time.time() - self._loaded_at) < self.cache_ttl
        )

    def load_overrides(self, force_refresh: bool = False) -> dict:
        """
        Return the override mapping from GCS.

        A missing file yields {}. A read or decode error yields the last
        good copy, or {} if there never was one.
        """
        if not force_refresh and self._overrides is not None and self._is_fresh():
            return self._overrides

        try:
            blob = self._get_storage_client().bucket(self.bucket_name).blob(self.config_path)
            if not blob.exists():
                print(f"Config overrides {self.config_path} not found in GCS; using env/defaults.")
                self._overrides, self._loaded_at = {}, time.time()
                return self._overrides

            overrides = json.loads(blob.download_as_text())
            if not isinstance(overrides, dict):
                raise ValueError(f"{self.config_path} must hold a JSON object")

        except Exception as e:
            print(f"Error loading config overrides from GCS: {e}. Keeping last good copy.")
            return self._overrides if self._overrides is not None else {}

        self._overrides, self._loaded_at = overrides, time.time()
        return overrides

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Look up a dot-notation key such as 'dashboard.default_thesis'.

        Returns default when the key is not overridden.
        """
        value: Any = self.load_overrides()
        for key in key_path.split('.'):
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return value
