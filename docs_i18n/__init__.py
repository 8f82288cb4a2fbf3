"""Placeholder-based i18n toolchain for the documentation site."""
