"""Yerevan apartment price index built from list.am listings."""
