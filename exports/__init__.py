"""
Exports package for BCF report generation.

This package provides the export engine including:
- A closed field vocabulary shared by every output format
- Row flattening of topics, comments and viewpoints into flat rows
- Delimited text and spreadsheet export orchestration
- Streaming support for large inputs

The package is organized into:
- routes/: API endpoint handlers
- services/: Flattening and export orchestration services
"""
