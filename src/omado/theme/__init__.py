"""
Terminal theme support.

Components:
- theme_models.py: colors, ThemeDocument, resolution results and errors
- theme_parser.py: TOML resolution with imports
- theme_watcher.py: background polling + debounced re-resolution
"""
