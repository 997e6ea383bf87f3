"""
BCF input package.

Holds the validated object graph handed over by the container parser, the
primary viewpoint resolver and the field/custom-field discovery passes:
- models: pydantic models for ProjectFile, Topic, Comment, Viewpoint
- viewpoints: primary viewpoint selection and coordinate-data checks
- discovery: available fields, custom field registry, summaries
"""
