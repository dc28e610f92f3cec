"""Pure analysis package for vizStudio.

This package contains the dataset, visualization spec and query-result DTOs,
plus their validators. It must not import Django.
"""
