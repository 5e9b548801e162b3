"""Command-line tools for the wallet analyzer."""
