"""PySide6 scoresheet for the Coinche scorer."""
