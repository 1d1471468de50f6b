"""Per-format source adapters: ``table_csv``, ``sampo_csv`` and ``samlink_html``."""
