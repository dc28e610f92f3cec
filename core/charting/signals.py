"""Change notifications for chart editing state.

Senders are the owning objects (builder, store, session); receivers get the
new value as a keyword argument.
"""

from __future__ import annotations

from django.dispatch import Signal

# kwargs: builder (VisualizationSpecBuilder), state (BuilderState)
builder_changed = Signal()

# kwargs: config (ChartConfig), is_dirty (bool)
config_changed = Signal()

# kwargs: spec (VisualizationSpec)
spec_applied = Signal()

# kwargs: chart_key (str), data (ChartData)
chart_data_received = Signal()
