"""Core checker components: lifecycle, events, results, errors."""
