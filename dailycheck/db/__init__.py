"""Local persistence for DailyCheck."""
