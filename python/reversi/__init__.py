"""Reversi rules engine and alpha-beta computer opponent."""
