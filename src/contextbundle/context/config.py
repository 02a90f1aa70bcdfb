"""
Configuration for context assembly: rendering markers and pruning limits.
"""

# Pruning settings
PRUNE_CONFIG = {
    "min_used_by_deps": 2,  # never prune a group's used_by deps below this count
}

# Rendered bundle markers
RENDER_CONFIG = {
    "file_banner": "// {file_name}:\n\n",
    "snippet_separator": "\n\n",
    "external_header": "//\n// Select documentation from dependency packages:\n//\n\n",
    "import_banner": "// {import_path}:\n\n",
}
