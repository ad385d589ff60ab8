"""Configuration: environment-backed settings and feature flags."""

from conductor.config.features import FeatureFlags, get_feature_flags, reload_feature_flags
from conductor.config.settings import ConductorSettings

__all__ = ['ConductorSettings', 'FeatureFlags', 'get_feature_flags', 'reload_feature_flags']
