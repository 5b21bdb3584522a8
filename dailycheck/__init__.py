"""DailyCheck - trading discipline checklist and compliance history."""

__version__ = "0.1.0"
