"""Pure assessment formulas. No validation, registry or storage concerns."""
