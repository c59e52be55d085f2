"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, EngineSettings, ExportSettings, HttpSettings, LoggingSettings, get_settings

__all__ = ["AppSettings", "EngineSettings", "ExportSettings", "HttpSettings", "LoggingSettings", "get_settings"]
