"""Chart configuration state for the chart studio.

Charts are driven by a `VisualizationSpec` (what to query) and a `ChartConfig`
(how to render it). This package contains the config schema and defaults, the
property metadata behind the generic editor, the spec builder, the config
store and the session that ties them to the query engine.
"""
