"""Wizard form state: study metadata, object/property selections and run profile."""
